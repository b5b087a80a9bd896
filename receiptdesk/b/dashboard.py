"""
대시보드 집계 — 영수증과 철회 요청 목록으로 위험 지표를 계산한다.
"""
from __future__ import annotations

import calendar
from collections import Counter
from datetime import datetime, timezone
from typing import Iterable, Optional, Sequence

from receiptdesk.a.pipeline.risk import (
    LONG_RETENTION_DAYS,
    SENSITIVE_ITEM_KEYWORDS,
    SENSITIVE_SUMMARY_KEYWORDS,
    classify_risk,
    is_revoke_path_unclear,
)
from receiptdesk.a.schemas import Receipt, RiskLevel
from receiptdesk.b.schemas import (
    REQUEST_STATUSES,
    DashboardSummary,
    OverloadLevel,
    RevocationRequest,
    TimelineBucket,
)

TIMELINE_RANGES: dict[str, Optional[int]] = {"3m": 3, "6m": 6, "all": None}

BASE_SCORE = 30
MAX_SCORE = 100


def _months_ago(now: datetime, months: int) -> datetime:
    month_index = now.year * 12 + (now.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(now.day, calendar.monthrange(year, month)[1])
    return now.replace(year=year, month=month, day=day)


def _parse_timestamp(value: str) -> Optional[datetime]:
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (ValueError, AttributeError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def build_timeline(
    receipts: Iterable[Receipt], range_key: str, now: datetime
) -> list[TimelineBucket]:
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    months = TIMELINE_RANGES.get(range_key, TIMELINE_RANGES["6m"])
    cutoff = _months_ago(now, months) if months is not None else None

    counts: Counter[str] = Counter()
    for receipt in receipts:
        received = _parse_timestamp(receipt.received_at)
        if received is None:
            continue
        if cutoff is not None and received < cutoff:
            continue
        counts[received.strftime("%Y-%m")] += 1
    return [TimelineBucket(label=label, count=counts[label]) for label in sorted(counts)]


def overload_level(distinct_services: int) -> OverloadLevel:
    if distinct_services >= 10:
        return OverloadLevel(level="high", label="높음")
    if distinct_services >= 6:
        return OverloadLevel(level="medium", label="중간")
    return OverloadLevel(level="low", label="낮음")


def status_counts(requests: Iterable[RevocationRequest]) -> dict[str, int]:
    counts = Counter(req.status for req in requests)
    ordered = {status: counts[status] for status in REQUEST_STATUSES if counts[status]}
    # Statuses the UI does not know yet still count.
    ordered.update({s: c for s, c in counts.items() if s not in ordered})
    return ordered


def _next_actions(
    risk_score: int,
    unclear_revoke: int,
    long_retention: int,
    total_requests: int,
    request_counts: dict[str, int],
) -> list[str]:
    actions: list[str] = []
    if risk_score >= 70:
        actions.append("위험 지수가 높아요. 보관 기간이 긴 서비스부터 철회·삭제 요청을 보내세요.")
    if unclear_revoke > 0:
        actions.append("철회 경로가 불분명한 문서를 정리하고 요청 경로를 기록해 두세요.")
    if long_retention > 0:
        actions.append("보관 기간 1년 이상 서비스의 설정을 다시 확인하세요.")
    if total_requests > 0 and request_counts.get("WAITING", 0) > 0:
        actions.append("대기 중인 요청에 후속 문의 메일을 보내면 처리 속도가 빨라집니다.")
    if not actions:
        actions.append("모든 지표가 안정적입니다. 신규 동의 발생 시 이 화면에서 바로 확인하세요.")
    return actions[:3]


def build_dashboard(
    receipts: Sequence[Receipt],
    requests: Sequence[RevocationRequest],
    range_key: str = "6m",
    now: Optional[datetime] = None,
    item_keywords: Sequence[str] = SENSITIVE_ITEM_KEYWORDS,
    summary_keywords: Sequence[str] = SENSITIVE_SUMMARY_KEYWORDS,
) -> DashboardSummary:
    now = now or datetime.now(timezone.utc)

    distinct_services = len({r.service_name for r in receipts})
    long_retention = sum(1 for r in receipts if r.retention_days >= LONG_RETENTION_DAYS)
    unclear_revoke = sum(1 for r in receipts if is_revoke_path_unclear(r.revoke_path))
    third_parties = len({name for r in receipts for name in r.third_party_services})
    flagged = sum(
        1 for r in receipts
        if r.retention_days >= LONG_RETENTION_DAYS or r.third_party_services
    )

    risk_score = min(
        MAX_SCORE,
        BASE_SCORE
        + flagged * 12
        + unclear_revoke * 8
        + min(30, distinct_services * 2)
        + min(10, third_parties * 2),
    )

    risk_counts = Counter(
        classify_risk(r, item_keywords, summary_keywords).value for r in receipts
    )
    request_counts = status_counts(requests)

    return DashboardSummary(
        risk_score=risk_score,
        distinct_services=distinct_services,
        long_retention_count=long_retention,
        unclear_revoke_count=unclear_revoke,
        third_party_count=third_parties,
        overload=overload_level(distinct_services),
        category_counts=dict(Counter(r.category.value for r in receipts)),
        risk_level_counts={level.value: risk_counts[level.value] for level in RiskLevel},
        request_status_counts=request_counts,
        total_requests=len(requests),
        timeline=build_timeline(receipts, range_key, now),
        next_actions=_next_actions(
            risk_score, unclear_revoke, long_retention, len(requests), request_counts
        ),
    )
