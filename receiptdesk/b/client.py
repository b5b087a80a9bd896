"""
업스트림 철회/삭제 요청 API 클라이언트
"""
from __future__ import annotations

import logging
from typing import Iterator, List, Optional

from pydantic import TypeAdapter, ValidationError

from receiptdesk.a.schemas import Receipt
from receiptdesk.b.schemas import (
    RequestScope,
    RevocationLetter,
    RevocationRequest,
    RevocationRequestCreate,
    RevocationTimelineEvent,
    RoutingPreset,
)
from receiptdesk.backend import BackendClient, BackendError, ReadResult, api_path
from receiptdesk.config import settings

logger = logging.getLogger(__name__)

REQUESTS_PATH = "/api/revocation/requests"
PRESETS_PATH = "/api/revocation/routing/presets"

_REQUEST_LIST = TypeAdapter(List[RevocationRequest])
_TIMELINE = TypeAdapter(List[RevocationTimelineEvent])
_PRESETS = TypeAdapter(List[RoutingPreset])


def request_from_receipt(
    receipt: Receipt,
    request_type: str = "WITHDRAW_CONSENT",
    entity_type: Optional[str] = None,
) -> RevocationRequestCreate:
    """영수증 정보로 철회 요청서 초안을 채운다"""
    data_items = [item for item in receipt.data_items if item != "Unclassified"]
    return RevocationRequestCreate(
        receipt_id=receipt.id,
        service_name=receipt.service_name,
        entity_name=receipt.entity_name,
        entity_type=entity_type,
        request_type=request_type,
        scope=RequestScope(data_items=data_items or None),
    )


class RevocationClient:
    def __init__(self, backend: BackendClient) -> None:
        self._backend = backend

    # ── 조회 (실패 시 빈 값) ──────────────────────────────────────────────
    def list_requests_result(self, status: Optional[str] = None) -> ReadResult[List[RevocationRequest]]:
        """철회 요청 목록 (실패 시 빈 목록)"""
        params = {"status": status} if status else None
        try:
            payload = self._backend.get_json(REQUESTS_PATH, params=params)
            return ReadResult(value=_REQUEST_LIST.validate_python(payload))
        except BackendError as e:
            logger.error("Failed to load revocation requests: %s", e)
            return ReadResult.failed([], "list_requests", e)
        except ValidationError as e:
            logger.error("Unreadable revocation request list: %s", e.errors()[:1])
            return ReadResult.failed(
                [], "list_requests", BackendError("invalid revocation request payload")
            )

    def list_requests(self, status: Optional[str] = None) -> List[RevocationRequest]:
        return self.list_requests_result(status).value

    def get_request(self, request_id: str) -> Optional[RevocationRequest]:
        """철회 요청 단건 (없거나 실패 시 None)"""
        try:
            payload = self._backend.get_json(api_path(REQUESTS_PATH, request_id))
            return RevocationRequest.model_validate(payload)
        except BackendError as e:
            if e.not_found:
                logger.warning("Revocation request not found: %s", request_id)
            else:
                logger.error("Failed to load revocation request %s: %s", request_id, e)
        except ValidationError as e:
            logger.error("Unreadable revocation request %s: %s", request_id, e.errors()[:1])
        return None

    def get_timeline(self, request_id: str) -> List[RevocationTimelineEvent]:
        """철회 요청 타임라인 (실패 시 빈 목록)"""
        try:
            payload = self._backend.get_json(api_path(REQUESTS_PATH, request_id, "timeline"))
            return _TIMELINE.validate_python(payload)
        except BackendError as e:
            logger.error("Failed to load timeline for %s: %s", request_id, e)
        except ValidationError as e:
            logger.error("Unreadable timeline for %s: %s", request_id, e.errors()[:1])
        return []

    def list_routing_presets(self) -> List[RoutingPreset]:
        """라우팅 프리셋 목록 (실패 시 빈 목록)"""
        try:
            return _PRESETS.validate_python(self._backend.get_json(PRESETS_PATH))
        except BackendError as e:
            logger.error("Failed to load routing presets: %s", e)
        except ValidationError as e:
            logger.error("Unreadable routing presets: %s", e.errors()[:1])
        return []

    # ── 변경 (실패는 호출자에게 전달) ─────────────────────────────────────
    def create_request(self, req: RevocationRequestCreate) -> RevocationRequest:
        """철회 요청 생성"""
        created = self._post(
            REQUESTS_PATH, req.model_dump(exclude_none=True), RevocationRequest, "create"
        )
        logger.info("Created revocation request: %s", created.id)
        return created

    def generate_letter(self, request_id: str, template_type: str = "standard") -> RevocationLetter:
        """철회 요청서 생성"""
        letter = self._post(
            api_path(REQUESTS_PATH, request_id, "generate-letter"),
            {"request_id": request_id, "template_type": template_type},
            RevocationLetter,
            "generate_letter",
        )
        logger.info("Generated letter %s for request %s", letter.id, request_id)
        return letter

    def send_request(self, request_id: str) -> RevocationRequest:
        """철회 요청 전송. 업스트림이 상태를 SENT 로 바꾼다"""
        sent = self._post(
            api_path(REQUESTS_PATH, request_id, "send"), None, RevocationRequest, "send"
        )
        logger.info("Sent revocation request %s (status=%s)", sent.id, sent.status)
        return sent

    def _post(self, path: str, payload, model, operation: str):
        try:
            body = self._backend.post_json(path, payload)
        except BackendError as e:
            logger.error("Revocation %s failed: %s", operation, e)
            raise
        try:
            return model.model_validate(body)
        except ValidationError as e:
            raise BackendError(f"invalid {operation} response payload") from e


def get_revocation_client() -> Iterator[RevocationClient]:
    backend = BackendClient(settings.BACKEND_URL)
    try:
        yield RevocationClient(backend)
    finally:
        backend.close()
