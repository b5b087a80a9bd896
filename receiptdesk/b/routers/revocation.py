"""
철회/삭제 요청 API 라우터
"""
from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException

from receiptdesk.a.client import ReceiptClient, get_receipt_client
from receiptdesk.b.client import (
    RevocationClient,
    get_revocation_client,
    request_from_receipt,
)
from receiptdesk.b.schemas import (
    REQUEST_STATUSES,
    REQUEST_TYPES,
    LetterGenerateRequest,
    RevocationFromReceipt,
    RevocationLetter,
    RevocationRequest,
    RevocationTimelineEvent,
    RoutingPreset,
)
from receiptdesk.backend import BackendError

logger = logging.getLogger(__name__)
router = APIRouter()

CREATE_FAILED_DETAIL = "철회 요청을 생성하지 못했습니다. 잠시 후 다시 시도해 주세요."
SEND_FAILED_DETAIL = "철회 요청을 전송하지 못했습니다. 잠시 후 다시 시도해 주세요."
LETTER_FAILED_DETAIL = "철회 요청서를 만들지 못했습니다. 잠시 후 다시 시도해 주세요."


def _upstream_error(e: BackendError, detail: str) -> HTTPException:
    # 업스트림의 404/400 은 그대로, 나머지는 502
    if e.not_found:
        return HTTPException(status_code=404, detail="Request not found")
    if e.status_code == 400:
        return HTTPException(status_code=400, detail="요청서를 먼저 생성한 뒤 전송해 주세요.")
    return HTTPException(status_code=502, detail=detail)


# ── GET /api/revocation/requests ────────────────────────────────────────────
@router.get("/revocation/requests", response_model=List[RevocationRequest])
def list_revocation_requests(
    status: Optional[str] = None,
    revocations: RevocationClient = Depends(get_revocation_client),
):
    """철회 요청 목록"""
    if status and status not in REQUEST_STATUSES:
        raise HTTPException(status_code=400, detail=f"Unknown status: {status}")
    return revocations.list_requests(status)


# ── GET /api/revocation/requests/{request_id} ───────────────────────────────
@router.get("/revocation/requests/{request_id}", response_model=RevocationRequest)
def get_revocation_request(
    request_id: str,
    revocations: RevocationClient = Depends(get_revocation_client),
):
    """철회 요청 조회"""
    request = revocations.get_request(request_id)
    if request is None:
        raise HTTPException(status_code=404, detail="Request not found")
    return request


# ── POST /api/revocation/requests/{request_id}/generate-letter ──────────────
@router.post(
    "/revocation/requests/{request_id}/generate-letter",
    response_model=RevocationLetter,
)
def generate_letter(
    request_id: str,
    req: Optional[LetterGenerateRequest] = None,
    revocations: RevocationClient = Depends(get_revocation_client),
):
    """철회 요청서 생성"""
    template_type = req.template_type if req else "standard"
    try:
        return revocations.generate_letter(request_id, template_type)
    except BackendError as e:
        raise _upstream_error(e, LETTER_FAILED_DETAIL) from e


# ── POST /api/revocation/requests/{request_id}/send ─────────────────────────
@router.post("/revocation/requests/{request_id}/send", response_model=RevocationRequest)
def send_revocation_request(
    request_id: str,
    revocations: RevocationClient = Depends(get_revocation_client),
):
    """철회 요청 전송"""
    try:
        return revocations.send_request(request_id)
    except BackendError as e:
        raise _upstream_error(e, SEND_FAILED_DETAIL) from e


# ── GET /api/revocation/requests/{request_id}/timeline ───────────────────────
@router.get(
    "/revocation/requests/{request_id}/timeline",
    response_model=List[RevocationTimelineEvent],
)
def get_timeline(
    request_id: str,
    revocations: RevocationClient = Depends(get_revocation_client),
):
    """철회 요청 타임라인"""
    return revocations.get_timeline(request_id)


# ── GET /api/revocation/routing/presets ─────────────────────────────────────
@router.get("/revocation/routing/presets", response_model=List[RoutingPreset])
def list_routing_presets(revocations: RevocationClient = Depends(get_revocation_client)):
    """라우팅 프리셋 목록"""
    return revocations.list_routing_presets()


# ── POST /api/revocation/requests ────────────────────────────────────────────
@router.post("/revocation/requests", response_model=RevocationRequest)
def create_revocation_request(
    req: RevocationFromReceipt,
    receipts: ReceiptClient = Depends(get_receipt_client),
    revocations: RevocationClient = Depends(get_revocation_client),
):
    """영수증 기반 철회 요청 생성"""
    if req.request_type not in REQUEST_TYPES:
        raise HTTPException(status_code=400, detail=f"Unknown request type: {req.request_type}")

    receipt = receipts.get_by_id(req.receipt_id)
    if receipt is None:
        raise HTTPException(status_code=404, detail="Receipt not found")

    try:
        return revocations.create_request(
            request_from_receipt(receipt, req.request_type, req.entity_type)
        )
    except BackendError as e:
        raise HTTPException(status_code=502, detail=CREATE_FAILED_DETAIL) from e
