"""
Typed access to the backend's loose ``fields`` bag.

The backend keys fields in English, but older documents and hand-edited
payloads use Korean names. Every lookup tries its candidate keys in order.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Sequence

# ---------------------------------------------------------------------------
# Candidate keys (English first, then Korean synonyms)
# ---------------------------------------------------------------------------

DATA_ITEM_KEYS: tuple[str, ...] = ("data_collected", "수집항목")
REQUIRED_ITEM_KEYS: tuple[str, ...] = ("required_items", "필수항목")
OPTIONAL_ITEM_KEYS: tuple[str, ...] = ("optional_items", "선택항목")
RETENTION_KEYS: tuple[str, ...] = ("retention", "보유기간")
THIRD_PARTY_KEYS: tuple[str, ...] = ("third_party", "제3자제공")
OUTSOURCING_KEYS: tuple[str, ...] = ("outsourcing", "처리위탁")
OVERSEAS_KEYS: tuple[str, ...] = ("overseas_transfer", "국외이전")
TRANSFER_KEYS: tuple[str, ...] = ("data_transfers", "개인정보이전")


@dataclass(frozen=True)
class FieldValue:
    """One entry of the ``fields`` bag: a raw value plus its citations."""
    name: str
    value: Any
    evidence: list[Mapping[str, Any]] = field(default_factory=list)

    def as_list(self) -> list[str]:
        if isinstance(self.value, (list, tuple)):
            return [str(v).strip() for v in self.value if v is not None and str(v).strip()]
        if isinstance(self.value, str) and self.value.strip():
            return [self.value.strip()]
        if self.value is not None and not isinstance(self.value, (dict, bool)):
            text = str(self.value).strip()
            return [text] if text else []
        return []

    def as_text(self) -> str:
        return " ".join(self.as_list())


def as_mapping(obj: Any) -> Mapping[str, Any]:
    return obj if isinstance(obj, Mapping) else {}


def as_sequence(obj: Any) -> list[Any]:
    return list(obj) if isinstance(obj, (list, tuple)) else []


def to_field_value(name: str, entry: Any) -> FieldValue:
    # Entries are normally {"value": ..., "evidence": [...]}; bare values are tolerated.
    if isinstance(entry, Mapping):
        evidence = [ev for ev in as_sequence(entry.get("evidence")) if isinstance(ev, Mapping)]
        return FieldValue(name=name, value=entry.get("value"), evidence=evidence)
    return FieldValue(name=name, value=entry)


def lookup_field(fields: Any, keys: Sequence[str]) -> Optional[FieldValue]:
    """Return the first present field among ``keys``, or ``None``."""
    bag = as_mapping(fields)
    for key in keys:
        if key in bag and bag[key] is not None:
            return to_field_value(key, bag[key])
    return None


def lookup_list(fields: Any, keys: Sequence[str]) -> list[str]:
    found = lookup_field(fields, keys)
    return found.as_list() if found else []
