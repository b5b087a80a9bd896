from receiptdesk.b.schemas.revocation import (  # noqa: F401
    REQUEST_STATUSES,
    REQUEST_TYPES,
    LetterGenerateRequest,
    RequestScope,
    RevocationFromReceipt,
    RevocationLetter,
    RevocationRequest,
    RevocationRequestCreate,
    RevocationTimelineEvent,
    RoutingInfo,
    RoutingPreset,
)
from receiptdesk.b.schemas.dashboard import (  # noqa: F401
    DashboardSummary,
    OverloadLevel,
    TimelineBucket,
)
