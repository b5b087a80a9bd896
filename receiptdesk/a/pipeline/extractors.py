"""
Field extractors — pull one normalized attribute each out of the backend's
``fields`` bag (and ``signals`` list, for evidence).

Every extractor is total: missing or oddly-typed input yields a safe default.
"""
from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from receiptdesk.a.pipeline.fields import (
    DATA_ITEM_KEYS,
    OPTIONAL_ITEM_KEYS,
    OUTSOURCING_KEYS,
    OVERSEAS_KEYS,
    REQUIRED_ITEM_KEYS,
    RETENTION_KEYS,
    THIRD_PARTY_KEYS,
    TRANSFER_KEYS,
    as_mapping,
    as_sequence,
    lookup_field,
    lookup_list,
    to_field_value,
)
from receiptdesk.a.schemas import (
    NO_EVIDENCE,
    Category,
    ReceiptEvidence,
    Transfer,
    TransferType,
)

UNCLASSIFIED = "Unclassified"
OVERSEAS_PREFIX = "(국외) "

# Checked in order; the first hit wins.
CATEGORY_KEYWORDS: list[tuple[Category, tuple[str, ...]]] = [
    (Category.PAYMENT, ("payment", "결제")),
    (Category.CLOUD, ("cloud", "클라우드")),
    (Category.HEALTH, ("health", "건강")),
    (Category.EDU, ("edu", "교육")),
    (Category.MARKETING, ("marketing", "마케팅")),
]

# (pattern, days per unit); only the first matching pattern is applied.
RETENTION_PATTERNS: list[tuple[re.Pattern[str], int]] = [
    (re.compile(r"(\d+)\s*일"), 1),
    (re.compile(r"(\d+)\s*개월"), 30),
    (re.compile(r"(\d+)\s*년"), 365),
]

TRANSFER_SOURCES: list[tuple[tuple[str, ...], TransferType, bool]] = [
    (THIRD_PARTY_KEYS, TransferType.THIRD_PARTY, False),
    (OUTSOURCING_KEYS, TransferType.OUTSOURCING, False),
    (OVERSEAS_KEYS, TransferType.OVERSEAS, True),
    (TRANSFER_KEYS, TransferType.TRANSFER, False),
]


def extract_category(fields: Any) -> Category:
    haystack = " ".join(str(key).lower() for key in as_mapping(fields))
    for category, keywords in CATEGORY_KEYWORDS:
        if any(keyword in haystack for keyword in keywords):
            return category
    return Category.GENERAL


def extract_retention_days(fields: Any) -> int:
    found = lookup_field(fields, RETENTION_KEYS)
    if found is None:
        return 0
    text = found.as_text()
    for pattern, unit_days in RETENTION_PATTERNS:
        m = pattern.search(text)
        if m:
            return int(m.group(1)) * unit_days
    return 0


def extract_data_items(fields: Any) -> list[str]:
    items = lookup_list(fields, DATA_ITEM_KEYS)
    return items or [UNCLASSIFIED]


def extract_required_items(fields: Any) -> list[str]:
    return lookup_list(fields, REQUIRED_ITEM_KEYS)


def extract_optional_items(fields: Any) -> list[str]:
    return lookup_list(fields, OPTIONAL_ITEM_KEYS)


def extract_third_party_services(fields: Any) -> list[str]:
    domestic = lookup_list(fields, THIRD_PARTY_KEYS)
    overseas = [f"{OVERSEAS_PREFIX}{dest}" for dest in lookup_list(fields, OVERSEAS_KEYS)]
    return domestic + overseas


def extract_transfers(fields: Any, data_items: list[str]) -> list[Transfer]:
    transfers: list[Transfer] = []
    for keys, ttype, overseas in TRANSFER_SOURCES:
        for dest in lookup_list(fields, keys):
            transfers.append(
                Transfer(
                    type=ttype,
                    destination=dest,
                    is_overseas=overseas,
                    data_items=list(data_items),
                )
            )
    return transfers


def _quote_of(ev: Mapping[str, Any]) -> str:
    return str(ev.get("quote") or "").strip()


def transform_evidence(fields: Any, signals: Any) -> list[ReceiptEvidence]:
    """Flatten field and signal citations into receipt evidence.

    Every citation object yields one record, even when its quote is blank.
    Never returns an empty list: a single "no evidence" entry stands in.
    """
    evidence: list[ReceiptEvidence] = []

    for name, entry in as_mapping(fields).items():
        for ev in to_field_value(str(name), entry).evidence:
            quote = _quote_of(ev)
            location = str(ev.get("location") or "document")
            evidence.append(
                ReceiptEvidence(field=str(name), quote=quote, why=f"Extracted from {location}")
            )

    for signal in as_sequence(signals):
        sig = as_mapping(signal)
        why = str(sig.get("description") or sig.get("title") or "")
        for ev in as_sequence(sig.get("evidence")):
            if not isinstance(ev, Mapping):
                continue
            quote = _quote_of(ev)
            evidence.append(
                ReceiptEvidence(field=str(sig.get("signal_id") or "signal"), quote=quote, why=why)
            )

    return evidence or [NO_EVIDENCE]
