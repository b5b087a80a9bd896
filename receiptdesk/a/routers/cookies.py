"""
Cookie receipt endpoints.

POST   /api/cookies           — create cookie receipt
GET    /api/cookies           — list cookie receipts (empty on upstream failure)
GET    /api/cookies/{id}      — get one cookie receipt
DELETE /api/cookies/{id}      — delete cookie receipt
POST   /api/cookies/samples   — load dummy cookie receipts (demo mode only)
"""
from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from receiptdesk.a.cookie_client import CookieClient, get_cookie_client
from receiptdesk.a.routers.receipts import WRITE_FAILED_DETAIL
from receiptdesk.a.schemas import CookieReceipt, CookieReceiptCreateRequest
from receiptdesk.backend import BackendError

logger = logging.getLogger(__name__)
router = APIRouter()


# ── POST /api/cookies ─────────────────────────────────────────────────────
@router.post("/cookies", response_model=CookieReceipt)
def create_cookie_receipt(
    req: CookieReceiptCreateRequest,
    client: CookieClient = Depends(get_cookie_client),
):
    """쿠키 영수증 생성"""
    try:
        return client.create(req.site_name, req.site_url, req.cookies)
    except BackendError as e:
        raise HTTPException(status_code=502, detail=WRITE_FAILED_DETAIL) from e


# ── GET /api/cookies ──────────────────────────────────────────────────────
@router.get("/cookies", response_model=List[CookieReceipt])
def list_cookie_receipts(client: CookieClient = Depends(get_cookie_client)):
    """쿠키 영수증 목록 조회"""
    return client.list()


# ── POST /api/cookies/samples ─────────────────────────────────────────────
@router.post("/cookies/samples", response_model=List[CookieReceipt])
def load_cookie_samples(client: CookieClient = Depends(get_cookie_client)):
    return client.load_samples()


# ── GET /api/cookies/{receipt_id} ────────────────────────────────────────
@router.get("/cookies/{receipt_id}", response_model=CookieReceipt)
def get_cookie_receipt(receipt_id: str, client: CookieClient = Depends(get_cookie_client)):
    """쿠키 영수증 조회"""
    try:
        receipt = client.get(receipt_id)
    except BackendError as e:
        raise HTTPException(status_code=502, detail=WRITE_FAILED_DETAIL) from e
    if receipt is None:
        raise HTTPException(status_code=404, detail="Cookie receipt not found")
    return receipt


# ── DELETE /api/cookies/{receipt_id} ─────────────────────────────────────
@router.delete("/cookies/{receipt_id}")
def delete_cookie_receipt(receipt_id: str, client: CookieClient = Depends(get_cookie_client)):
    """쿠키 영수증 삭제"""
    try:
        client.delete(receipt_id)
    except BackendError as e:
        raise HTTPException(status_code=502, detail=WRITE_FAILED_DETAIL) from e
    return {"message": "Cookie receipt deleted successfully", "receipt_id": receipt_id}
