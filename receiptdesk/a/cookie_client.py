"""
Cookie receipt client facade.

Same split as the receipt facade: demo mode keeps cookie receipts in the
local store, backend mode goes through ``/api/cookies``.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Iterator, Optional

from pydantic import ValidationError

from receiptdesk.a.database import SessionLocal
from receiptdesk.a.pipeline.cookies import build_cookie_receipt, generate_dummy_cookie_receipts
from receiptdesk.a.schemas import CookieInfo, CookieReceipt
from receiptdesk.a.storage import ReceiptRepository, SqlReceiptRepository
from receiptdesk.backend import BackendClient, BackendError, ReadResult, api_path
from receiptdesk.config import settings

logger = logging.getLogger(__name__)

COOKIES_PATH = "/api/cookies"


def _parse_cookie_receipt(raw: object) -> Optional[CookieReceipt]:
    try:
        return CookieReceipt.model_validate(raw)
    except ValidationError as e:
        logger.warning("Skipping unreadable cookie receipt: %s", e.errors()[:1])
        return None


class CookieClient:
    def __init__(
        self,
        repository: ReceiptRepository[CookieReceipt],
        backend: BackendClient,
        mock_enabled: bool = False,
    ) -> None:
        self._repository = repository
        self._backend = backend
        self.mock_enabled = mock_enabled

    def list_result(self) -> ReadResult[list[CookieReceipt]]:
        if self.mock_enabled:
            return ReadResult(value=self._repository.list())

        try:
            payload = self._backend.get_json(COOKIES_PATH)
        except BackendError as e:
            logger.error("Failed to fetch cookie receipts from backend: %s", e)
            return ReadResult.failed([], "list_cookies", e)

        if not isinstance(payload, list):
            logger.warning("Backend cookie list is not an array (%s)", type(payload).__name__)
            payload = []
        parsed = (_parse_cookie_receipt(raw) for raw in payload if isinstance(raw, Mapping))
        return ReadResult(value=[r for r in parsed if r is not None])

    def list(self) -> list[CookieReceipt]:
        return self.list_result().value

    def get(self, receipt_id: str) -> Optional[CookieReceipt]:
        """``None`` when the receipt does not exist; other backend failures raise."""
        if self.mock_enabled:
            return self._repository.get(receipt_id)

        try:
            payload = self._backend.get_json(api_path(COOKIES_PATH, receipt_id))
        except BackendError as e:
            if e.not_found:
                logger.warning("Cookie receipt not found: %s", receipt_id)
                return None
            logger.error("Failed to fetch cookie receipt %s: %s", receipt_id, e)
            raise
        try:
            return CookieReceipt.model_validate(payload)
        except ValidationError as e:
            raise BackendError(f"invalid cookie receipt payload for {receipt_id}") from e

    def create(self, site_name: str, site_url: str, cookies: list[CookieInfo]) -> CookieReceipt:
        if self.mock_enabled:
            return self._repository.save(build_cookie_receipt(site_name, site_url, cookies))

        try:
            body = self._backend.post_json(
                COOKIES_PATH,
                {
                    "site_name": site_name,
                    "site_url": site_url,
                    "cookies": [c.model_dump(mode="json") for c in cookies],
                },
            )
        except BackendError as e:
            logger.error("Failed to create cookie receipt via backend: %s", e)
            raise
        try:
            receipt = CookieReceipt.model_validate(body)
        except ValidationError as e:
            raise BackendError("invalid cookie receipt payload") from e
        logger.info("Created cookie receipt %s via backend", receipt.receipt_id)
        return receipt

    def delete(self, receipt_id: str) -> None:
        if self.mock_enabled:
            self._repository.delete(receipt_id)
            return

        try:
            self._backend.delete(api_path(COOKIES_PATH, receipt_id))
        except BackendError as e:
            if e.not_found:
                logger.info("Cookie receipt %s already gone on backend", receipt_id)
                return
            logger.error("Failed to delete cookie receipt %s: %s", receipt_id, e)
            raise

    def load_samples(self) -> list[CookieReceipt]:
        """Replace the local store with dummy cookie receipts (demo mode only)."""
        if not self.mock_enabled:
            return []
        samples = generate_dummy_cookie_receipts()
        self._repository.replace(samples)
        return samples


def get_cookie_client() -> Iterator[CookieClient]:
    backend = BackendClient(settings.BACKEND_URL)
    try:
        yield CookieClient(
            repository=SqlReceiptRepository(
                SessionLocal,
                settings.COOKIE_STORAGE_KEY,
                model=CookieReceipt,
                id_field="receipt_id",
            ),
            backend=backend,
            mock_enabled=settings.mock_enabled,
        )
    finally:
        backend.close()
