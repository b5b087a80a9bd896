"""
Receipt normalization pipeline.

backend payload → field extractors → receipt → risk classifier.
"""
from receiptdesk.a.pipeline.inbox import receipt_to_document_list_item
from receiptdesk.a.pipeline.normalizer import (
    normalize_ingest_response,
    normalize_receipt,
    receipt_from_text,
)
from receiptdesk.a.pipeline.risk import classify_risk

__all__ = [
    "classify_risk",
    "normalize_ingest_response",
    "normalize_receipt",
    "receipt_from_text",
    "receipt_to_document_list_item",
]
