from receiptdesk.a.schemas.base import (  # noqa: F401
    ActionTemplate,
    Category,
    DocType,
    DocumentListItem,
    IngestRequest,
    NO_EVIDENCE,
    Receipt,
    ReceiptEvidence,
    RiskLevel,
    Transfer,
    TransferType,
)
from receiptdesk.a.schemas.cookies import (  # noqa: F401
    CookieInfo,
    CookieReceipt,
    CookieReceiptCreateRequest,
    CookieStats,
)
