"""
Cookie receipts: per-category counts and the demo dummy sites.
"""
from __future__ import annotations

import json
import logging
import pathlib
import uuid
from datetime import datetime, timezone
from typing import Iterable

from receiptdesk.a.schemas import CookieInfo, CookieReceipt, CookieStats

logger = logging.getLogger(__name__)

DUMMY_SITES_PATH = pathlib.Path(__file__).resolve().parent.parent / "samples" / "cookie_sites.json"

_PARTY_COUNTERS = {"first_party": "first_party_count", "third_party": "third_party_count"}
_PURPOSE_COUNTERS = {
    "advertising": "advertising_count",
    "analytics": "analytics_count",
    "functional": "functional_count",
}
_DURATION_COUNTERS = {"session": "session_count", "persistent": "persistent_count"}


def calculate_cookie_stats(cookies: Iterable[CookieInfo]) -> CookieStats:
    """쿠키 통계 계산 ("necessary" 쿠키는 목적별 개수에 넣지 않는다)"""
    counts = dict.fromkeys(CookieStats.model_fields, 0)
    for cookie in cookies:
        counts["total_cookies"] += 1
        for table, key in (
            (_PARTY_COUNTERS, cookie.party_type),
            (_PURPOSE_COUNTERS, cookie.purpose),
            (_DURATION_COUNTERS, cookie.duration),
        ):
            if key in table:
                counts[table[key]] += 1
    return CookieStats(**counts)


def build_cookie_receipt(
    site_name: str,
    site_url: str,
    cookies: list[CookieInfo],
    receipt_id: str | None = None,
) -> CookieReceipt:
    stats = calculate_cookie_stats(cookies)
    return CookieReceipt(
        receipt_id=receipt_id or str(uuid.uuid4()),
        created_at=datetime.now(timezone.utc).isoformat(),
        site_name=site_name,
        site_url=site_url,
        cookies=list(cookies),
        **stats.model_dump(),
    )


def generate_dummy_cookie_receipts() -> list[CookieReceipt]:
    sites = json.loads(DUMMY_SITES_PATH.read_text(encoding="utf-8"))
    receipts = [
        build_cookie_receipt(
            site["name"],
            site["url"],
            [CookieInfo.model_validate(c) for c in site["cookies"]],
            receipt_id=f"cookie-{uuid.uuid4().hex[:12]}",
        )
        for site in sites
    ]
    logger.info("Generated %d dummy cookie receipts", len(receipts))
    return receipts
