"""
Canonical receipt schemas consumed by the consent UI.

The upstream backend speaks a loose, evolving JSON shape; everything past the
normalization pipeline speaks these Pydantic v2 models instead.
"""
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class DocType(str, Enum):
    CONSENT = "CONSENT"
    PRIVACY_CHANGE = "PRIVACY_CHANGE"
    NOTICE = "NOTICE"


class Category(str, Enum):
    PAYMENT = "PAYMENT"
    CLOUD = "CLOUD"
    HEALTH = "HEALTH"
    EDU = "EDU"
    MARKETING = "MARKETING"
    GENERAL = "GENERAL"


class RiskLevel(str, Enum):
    LOW = "LOW"
    MED = "MED"
    HIGH = "HIGH"


class TransferType(str, Enum):
    THIRD_PARTY = "third_party"
    OUTSOURCING = "outsourcing"
    OVERSEAS = "overseas"
    TRANSFER = "transfer"


# ---------------------------------------------------------------------------
# Primitives
# ---------------------------------------------------------------------------

class ReceiptEvidence(BaseModel):
    """A source quote backing one derived attribute of a receipt."""
    model_config = ConfigDict(frozen=True)

    field: str = Field(..., description="Field name or signal id the quote supports")
    quote: str
    why: str


NO_EVIDENCE = ReceiptEvidence(
    field="summary",
    quote="No evidence extracted",
    why="No evidence found in document",
)


class Transfer(BaseModel):
    """One disclosure channel: third party, outsourcing, overseas or generic."""
    model_config = ConfigDict(frozen=True)

    type: TransferType
    destination: str
    is_overseas: bool = False
    data_items: list[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Receipt
# ---------------------------------------------------------------------------

class Receipt(BaseModel):
    """Normalized consent / policy receipt.

    Instances are never mutated; re-normalizing produces a new one.
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    service_name: str = "Unknown Service"
    entity_name: str = "Unknown Entity"
    doc_type: DocType = DocType.NOTICE
    category: Category = Category.GENERAL
    received_at: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
    source_type: str = "other"
    retention: str = "Not specified"
    retention_days: int = Field(default=0, ge=0, description="0 means unspecified")
    revoke_path: Optional[str] = None
    data_items: list[str] = Field(default_factory=lambda: ["Unclassified"], min_length=1)
    required_items: list[str] = Field(default_factory=list)
    optional_items: list[str] = Field(default_factory=list)
    third_party_services: list[str] = Field(default_factory=list)
    transfers: list[Transfer] = Field(default_factory=list)
    over_collection: bool = False
    over_collection_reasons: list[str] = Field(default_factory=list)
    summary: str = "No summary"
    evidence: list[ReceiptEvidence] = Field(
        default_factory=lambda: [NO_EVIDENCE], min_length=1
    )


# ---------------------------------------------------------------------------
# Inbox list item
# ---------------------------------------------------------------------------

class DocumentListItem(BaseModel):
    id: str
    title: str
    entity_name: str
    doc_type: str = Field(..., description="CONSENT_FORM | POLICY_UPDATE | DATA_REQUEST | HIGH_RISK_REQUEST")
    received_at: str
    risk_level: RiskLevel
    summary_line: str
    verification_code: str = ""
    verification_token: str = ""


# ---------------------------------------------------------------------------
# API request / response envelopes
# ---------------------------------------------------------------------------

class IngestRequest(BaseModel):
    raw_text: str
    source_type: str = "other"


class ActionTemplate(BaseModel):
    receipt_id: str
    template_type: str
    text: str
