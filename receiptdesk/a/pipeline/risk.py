"""
Three-level risk classification for normalized receipts.

Rules are evaluated in strict priority order (HIGH, then MED, then LOW); they
are not additive scores.
"""
from __future__ import annotations

from typing import Optional, Sequence

from receiptdesk.a.schemas import Receipt, RiskLevel

SENSITIVE_ITEM_KEYWORDS: tuple[str, ...] = ("otp", "계좌", "주민", "비밀번호")
SENSITIVE_SUMMARY_KEYWORDS: tuple[str, ...] = ("otp", "계좌")
UNCLEAR_REVOKE_MARKERS: tuple[str, ...] = ("need", "명확화")
LONG_RETENTION_DAYS = 365


def is_revoke_path_unclear(revoke_path: Optional[str]) -> bool:
    """True when there is no usable revocation path."""
    if not revoke_path or not revoke_path.strip():
        return True
    lowered = revoke_path.lower()
    return any(marker in lowered for marker in UNCLEAR_REVOKE_MARKERS)


def has_sensitive_hit(
    receipt: Receipt,
    item_keywords: Sequence[str] = SENSITIVE_ITEM_KEYWORDS,
    summary_keywords: Sequence[str] = SENSITIVE_SUMMARY_KEYWORDS,
) -> bool:
    if receipt.over_collection:
        return True
    item_keywords = [k.lower() for k in item_keywords]
    for item in receipt.data_items:
        lowered = item.lower()
        if any(k in lowered for k in item_keywords):
            return True
    summary = (receipt.summary or "").lower()
    return any(k.lower() in summary for k in summary_keywords)


def has_medium_hit(receipt: Receipt) -> bool:
    return (
        receipt.retention_days >= LONG_RETENTION_DAYS
        or bool(receipt.third_party_services)
        or any(t.is_overseas for t in receipt.transfers)
        or is_revoke_path_unclear(receipt.revoke_path)
    )


def classify_risk(
    receipt: Receipt,
    item_keywords: Sequence[str] = SENSITIVE_ITEM_KEYWORDS,
    summary_keywords: Sequence[str] = SENSITIVE_SUMMARY_KEYWORDS,
) -> RiskLevel:
    """Return ``HIGH``, ``MED`` or ``LOW`` for ``receipt``."""
    if has_sensitive_hit(receipt, item_keywords, summary_keywords):
        return RiskLevel.HIGH
    if has_medium_hit(receipt):
        return RiskLevel.MED
    return RiskLevel.LOW
