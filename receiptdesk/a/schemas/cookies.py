"""
쿠키 영수증 스키마
"""
from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

PartyType = Literal["first_party", "third_party"]
CookiePurpose = Literal["advertising", "analytics", "functional", "necessary"]
CookieDuration = Literal["session", "persistent"]


class CookieInfo(BaseModel):
    name: str
    domain: str
    party_type: PartyType
    purpose: CookiePurpose
    duration: CookieDuration
    expires_at: Optional[str] = None


class CookieStats(BaseModel):
    """쿠키 분류별 개수"""
    total_cookies: int = 0
    first_party_count: int = 0
    third_party_count: int = 0
    advertising_count: int = 0
    analytics_count: int = 0
    functional_count: int = 0
    session_count: int = 0
    persistent_count: int = 0


class CookieReceipt(CookieStats):
    receipt_id: str
    created_at: str
    site_name: str
    site_url: str
    cookies: List[CookieInfo] = Field(default_factory=list)


class CookieReceiptCreateRequest(BaseModel):
    site_name: str
    site_url: str
    cookies: List[CookieInfo] = Field(default_factory=list)
