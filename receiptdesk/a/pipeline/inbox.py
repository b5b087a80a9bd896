"""
Receipt → inbox list item.
"""
from __future__ import annotations

from typing import Sequence

from receiptdesk.a.pipeline.risk import (
    SENSITIVE_ITEM_KEYWORDS,
    SENSITIVE_SUMMARY_KEYWORDS,
    classify_risk,
)
from receiptdesk.a.schemas import DocType, DocumentListItem, Receipt

LIST_DOC_TYPE_MAP: dict[DocType, str] = {
    DocType.CONSENT: "CONSENT_FORM",
    DocType.PRIVACY_CHANGE: "POLICY_UPDATE",
    DocType.NOTICE: "POLICY_UPDATE",
}


def receipt_to_document_list_item(
    receipt: Receipt,
    item_keywords: Sequence[str] = SENSITIVE_ITEM_KEYWORDS,
    summary_keywords: Sequence[str] = SENSITIVE_SUMMARY_KEYWORDS,
) -> DocumentListItem:
    return DocumentListItem(
        id=receipt.id,
        title=receipt.service_name or "제목 없음",
        entity_name=receipt.entity_name or "알 수 없음",
        doc_type=LIST_DOC_TYPE_MAP.get(receipt.doc_type, "POLICY_UPDATE"),
        received_at=receipt.received_at,
        risk_level=classify_risk(receipt, item_keywords, summary_keywords),
        summary_line=receipt.summary or "요약 정보 없음",
    )
