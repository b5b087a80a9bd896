"""
철회/삭제 요청 관련 스키마 (업스트림 백엔드 계약)
"""
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

# 대시보드 표시 순서
REQUEST_STATUSES: tuple[str, ...] = (
    "SENT",
    "WAITING",
    "DONE",
    "NEED_MORE_INFO",
    "REJECTED",
    "DRAFT",
)

REQUEST_TYPES: tuple[str, ...] = (
    "DELETE",
    "WITHDRAW_CONSENT",
    "STOP_THIRD_PARTY",
    "LIMIT_PROCESSING",
)


class RoutingInfo(BaseModel):
    """라우팅 정보"""
    primary_channel: str = Field(..., description="email|webform|civil_petition|call_center")
    destination: str = Field(..., description="이메일 주소 또는 URL")
    instructions: List[str] = Field(default_factory=list)
    confidence: int = Field(default=100, ge=0, le=100)
    source: str = Field(default="preset", description="preset|extracted|manual")


class RequestScope(BaseModel):
    """요청 범위"""
    accounts: Optional[List[str]] = None  # 이메일 주소 등
    data_items: Optional[List[str]] = None  # 삭제할 데이터 항목
    time_range: Optional[str] = None


class RevocationRequestCreate(BaseModel):
    """철회 요청 생성"""
    receipt_id: Optional[str] = None
    service_name: str
    entity_name: str
    entity_type: Optional[str] = None  # platform, private, public
    request_type: str = Field(..., description="DELETE|WITHDRAW_CONSENT|STOP_THIRD_PARTY|LIMIT_PROCESSING")
    scope: Optional[RequestScope] = None


class RevocationRequest(BaseModel):
    """철회 요청 (읽기 전용)"""
    id: str
    receipt_id: Optional[str] = None
    service_name: str
    entity_name: str
    entity_type: Optional[str] = None
    request_type: str
    scope: Optional[RequestScope] = None
    routing: Optional[RoutingInfo] = None
    status: str = Field(..., description="DRAFT|SENT|WAITING|DONE|REJECTED|NEED_MORE_INFO")
    created_at: datetime
    updated_at: datetime


class RevocationLetter(BaseModel):
    """철회 요청서"""
    id: str
    request_id: str
    subject: str
    body_text: str
    rendered_pdf_path: Optional[str] = None
    created_at: datetime


class LetterGenerateRequest(BaseModel):
    """철회 요청서 생성 옵션"""
    template_type: str = Field(default="standard")


class RoutingPreset(BaseModel):
    """라우팅 프리셋"""
    id: str
    service_name: str
    entity_name: str
    entity_type: Optional[str] = None
    primary_channel: str
    destination: str
    instructions: List[str] = Field(default_factory=list)
    confidence: int = Field(default=100, ge=0, le=100)
    source: str = "preset"
    created_at: datetime
    updated_at: datetime


class RevocationTimelineEvent(BaseModel):
    """타임라인 이벤트"""
    id: str
    request_id: str
    event: str
    note: Optional[str] = None
    occurred_at: datetime


class RevocationFromReceipt(BaseModel):
    """영수증 기반 철회 요청 생성"""
    receipt_id: str
    request_type: str = Field(default="WITHDRAW_CONSENT")
    entity_type: Optional[str] = None
