"""
대시보드 집계 스키마
"""
from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel, Field


class TimelineBucket(BaseModel):
    label: str = Field(..., description="YYYY-MM")
    count: int


class OverloadLevel(BaseModel):
    """정보 과부하 지표"""
    level: str = Field(..., description="high|medium|low")
    label: str


class DashboardSummary(BaseModel):
    risk_score: int = Field(..., ge=0, le=100)
    distinct_services: int
    long_retention_count: int
    unclear_revoke_count: int
    third_party_count: int
    overload: OverloadLevel
    category_counts: Dict[str, int] = Field(default_factory=dict)
    risk_level_counts: Dict[str, int] = Field(default_factory=dict)
    request_status_counts: Dict[str, int] = Field(default_factory=dict)
    total_requests: int = 0
    timeline: List[TimelineBucket] = Field(default_factory=list)
    next_actions: List[str] = Field(default_factory=list)
