"""
Receipt endpoints for the consent UI.

GET    /api/receipts                        — list receipts (empty on upstream failure)
GET    /api/receipts/{id}                   — get one receipt
POST   /api/ingest                          — create a receipt from raw text
DELETE /api/receipts/{id}                   — delete a receipt
POST   /api/receipts/samples                — load demo samples (demo mode only)
GET    /api/inbox                           — inbox list items with risk level
GET    /api/receipts/{id}/templates/{type}  — action template text
"""
from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from receiptdesk.a.client import ReceiptClient, get_receipt_client
from receiptdesk.a.pipeline import receipt_to_document_list_item
from receiptdesk.a.pipeline.templates import TEMPLATE_TYPES, build_action_template
from receiptdesk.a.schemas import (
    ActionTemplate,
    DocumentListItem,
    IngestRequest,
    Receipt,
)
from receiptdesk.backend import BackendError
from receiptdesk.config import settings

logger = logging.getLogger(__name__)
router = APIRouter()

WRITE_FAILED_DETAIL = "요청을 처리하지 못했습니다. 백엔드 연결을 확인한 뒤 다시 시도해 주세요."


def _get_or_404(client: ReceiptClient, receipt_id: str) -> Receipt:
    receipt = client.get_by_id(receipt_id)
    if receipt is None:
        raise HTTPException(status_code=404, detail="Receipt not found")
    return receipt


# ── GET /api/receipts ────────────────────────────────────────────────────
@router.get("/receipts", response_model=List[Receipt])
def list_receipts(client: ReceiptClient = Depends(get_receipt_client)):
    result = client.list_result()
    if not result.ok:
        logger.info("Serving empty receipt list (%s)", result.error.message)
    return result.value


# ── POST /api/receipts/samples ───────────────────────────────────────────
@router.post("/receipts/samples", response_model=List[Receipt])
def load_samples(client: ReceiptClient = Depends(get_receipt_client)):
    return client.load_samples()


# ── GET /api/receipts/{receipt_id} ───────────────────────────────────────
@router.get("/receipts/{receipt_id}", response_model=Receipt)
def get_receipt(receipt_id: str, client: ReceiptClient = Depends(get_receipt_client)):
    return _get_or_404(client, receipt_id)


# ── POST /api/ingest ─────────────────────────────────────────────────────
@router.post("/ingest", response_model=Receipt)
def ingest(req: IngestRequest, client: ReceiptClient = Depends(get_receipt_client)):
    if not req.raw_text.strip():
        raise HTTPException(status_code=400, detail="raw_text must not be empty")

    logger.info("Ingest: source_type=%s  len=%d", req.source_type, len(req.raw_text))
    try:
        return client.create(req.raw_text, req.source_type)
    except BackendError as e:
        raise HTTPException(status_code=502, detail=WRITE_FAILED_DETAIL) from e


# ── DELETE /api/receipts/{receipt_id} ────────────────────────────────────
@router.delete("/receipts/{receipt_id}")
def delete_receipt(receipt_id: str, client: ReceiptClient = Depends(get_receipt_client)):
    try:
        client.delete(receipt_id)
    except BackendError as e:
        raise HTTPException(status_code=502, detail=WRITE_FAILED_DETAIL) from e
    return {"message": "Receipt deleted successfully", "receipt_id": receipt_id}


# ── GET /api/inbox ───────────────────────────────────────────────────────
@router.get("/inbox", response_model=List[DocumentListItem])
def list_inbox(client: ReceiptClient = Depends(get_receipt_client)):
    return [
        receipt_to_document_list_item(
            r, settings.HIGH_RISK_KEYWORDS, settings.SUMMARY_RISK_KEYWORDS
        )
        for r in client.list()
    ]


# ── GET /api/receipts/{receipt_id}/templates/{template_type} ─────────────
@router.get("/receipts/{receipt_id}/templates/{template_type}", response_model=ActionTemplate)
def get_action_template(
    receipt_id: str,
    template_type: str,
    client: ReceiptClient = Depends(get_receipt_client),
):
    if template_type not in TEMPLATE_TYPES:
        raise HTTPException(status_code=404, detail=f"Unknown template type: {template_type}")
    receipt = _get_or_404(client, receipt_id)
    return ActionTemplate(
        receipt_id=receipt.id,
        template_type=template_type,
        text=build_action_template(receipt, template_type),
    )
