"""
Receipt normalizer — raw backend receipt JSON → canonical ``Receipt``.

Also hosts the local-mode constructor, which builds a minimal receipt from
pasted text when no backend payload exists.
"""
from __future__ import annotations

import json
import logging
import re
import uuid
from datetime import datetime, timezone
from typing import Any

from receiptdesk.a.pipeline.extractors import (
    UNCLASSIFIED,
    extract_category,
    extract_data_items,
    extract_optional_items,
    extract_required_items,
    extract_retention_days,
    extract_third_party_services,
    extract_transfers,
    transform_evidence,
)
from receiptdesk.a.pipeline.fields import as_mapping, as_sequence
from receiptdesk.a.schemas import DocType, Receipt, ReceiptEvidence

logger = logging.getLogger(__name__)

DOC_TYPE_MAP: dict[str, DocType] = {
    "consent": DocType.CONSENT,
    "marketing": DocType.CONSENT,
    "third_party": DocType.CONSENT,
    "change": DocType.PRIVACY_CHANGE,
    "privacy_change": DocType.PRIVACY_CHANGE,
    "notice": DocType.NOTICE,
    "unknown": DocType.NOTICE,
}


def _text(value: Any) -> str:
    if value is None or isinstance(value, (dict, list)):
        return ""
    return str(value).strip()


def _str_list(value: Any) -> list[str]:
    return [str(v).strip() for v in as_sequence(value) if v is not None and str(v).strip()]


def _stable_id(payload: Any) -> str:
    """Id for a backend receipt that did not send one.

    Same payload, same id, so the receipt can be looked up again later.
    """
    content_hash = _text(payload.get("content_hash"))
    if content_hash:
        return content_hash
    canonical = json.dumps(payload, sort_keys=True, ensure_ascii=False, default=str)
    return str(uuid.uuid5(uuid.NAMESPACE_URL, canonical))


def map_doc_type(document_type: Any) -> DocType:
    return DOC_TYPE_MAP.get(_text(document_type).lower(), DocType.NOTICE)


def normalize_receipt(raw: Any) -> Receipt:
    """Normalize one backend receipt. Never raises for JSON-shaped input."""
    payload = as_mapping(raw)
    seven = as_mapping(payload.get("seven_lines"))
    fields = as_mapping(payload.get("fields"))
    signals = as_sequence(payload.get("signals"))

    document_type = _text(payload.get("document_type"))
    what = _text(seven.get("what"))

    data_items = extract_data_items(fields)
    required_items = extract_required_items(fields) or _str_list(payload.get("required_items"))
    optional_items = extract_optional_items(fields) or _str_list(payload.get("optional_items"))
    if not required_items and not optional_items:
        required_items = list(data_items)

    over_collection = payload.get("over_collection") is True
    reasons = _str_list(payload.get("over_collection_reasons")) if over_collection else []

    return Receipt(
        id=_text(payload.get("receipt_id")) or _text(payload.get("id")) or _stable_id(payload),
        service_name=what or document_type or "Unknown Service",
        entity_name=_text(seven.get("who")) or "Unknown Entity",
        doc_type=map_doc_type(document_type),
        category=extract_category(fields),
        received_at=_text(payload.get("created_at")) or datetime.now(timezone.utc).isoformat(),
        source_type=_text(payload.get("source_type")) or "other",
        retention=_text(seven.get("when")) or "Not specified",
        retention_days=extract_retention_days(fields),
        revoke_path=_text(seven.get("how_to_revoke")) or None,
        data_items=data_items,
        required_items=required_items,
        optional_items=optional_items,
        third_party_services=extract_third_party_services(fields),
        transfers=extract_transfers(fields, data_items),
        over_collection=over_collection,
        over_collection_reasons=reasons,
        summary=_text(seven.get("risk_summary")) or what or "No summary",
        evidence=transform_evidence(fields, signals),
    )


def normalize_ingest_response(body: Any) -> Receipt:
    """Normalize a ``POST /api/ingest`` response ``{receipt, extract_result}``."""
    envelope = as_mapping(body)
    receipt = dict(as_mapping(envelope.get("receipt")))
    extract = as_mapping(envelope.get("extract_result"))
    # Older backends only fill fields/signals on the extract result.
    for key in ("fields", "signals", "document_type"):
        if not receipt.get(key) and extract.get(key):
            receipt[key] = extract[key]
    return normalize_receipt(receipt)


def receipt_from_text(raw_text: str, source_type: str = "other") -> Receipt:
    """Build a minimal receipt straight from pasted text (local mode)."""
    lines = [line.strip() for line in re.split(r"\r?\n", raw_text) if line.strip()]
    first_line = lines[0] if lines else "Untitled Consent"
    summary_line = lines[1] if len(lines) > 1 else "Summary generated from the provided text."
    excerpt = " ".join(lines[:3])
    name = first_line.replace("Service:", "").strip()

    logger.info("Local receipt from text: %d lines", len(lines))
    return Receipt(
        id=str(uuid.uuid4()),
        service_name=name or "Unknown Service",
        entity_name=name or "Unknown Entity",
        doc_type=DocType.NOTICE,
        received_at=datetime.now(timezone.utc).isoformat(),
        source_type=source_type,
        retention="Needs review",
        retention_days=0,
        revoke_path=None,
        data_items=[UNCLASSIFIED],
        summary=summary_line,
        evidence=[
            ReceiptEvidence(
                field="summary",
                quote=excerpt or raw_text[:120],
                why="Excerpted from the top of the input text",
            )
        ],
    )
