"""
대시보드 API 라우터
"""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from receiptdesk.a.client import ReceiptClient, get_receipt_client
from receiptdesk.b.client import RevocationClient, get_revocation_client
from receiptdesk.b.dashboard import TIMELINE_RANGES, build_dashboard
from receiptdesk.b.schemas import DashboardSummary
from receiptdesk.config import settings

logger = logging.getLogger(__name__)
router = APIRouter()


# ── GET /api/dashboard ───────────────────────────────────────────────────────
@router.get("/dashboard", response_model=DashboardSummary)
def get_dashboard(
    range: str = Query(default="6m", description="3m|6m|all"),
    receipts: ReceiptClient = Depends(get_receipt_client),
    revocations: RevocationClient = Depends(get_revocation_client),
):
    """영수증·철회 요청 집계 (업스트림 실패 시 빈 데이터로 계산)"""
    if range not in TIMELINE_RANGES:
        raise HTTPException(status_code=400, detail=f"Unknown range: {range}")

    receipt_list = receipts.list()
    request_list = revocations.list_requests()
    logger.info(
        "Dashboard: %d receipts, %d revocation requests", len(receipt_list), len(request_list)
    )
    return build_dashboard(
        receipt_list,
        request_list,
        range_key=range,
        item_keywords=settings.HIGH_RISK_KEYWORDS,
        summary_keywords=settings.SUMMARY_RISK_KEYWORDS,
    )
