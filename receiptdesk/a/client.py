"""
Receipt client facade.

Each operation is routed either to the local repository (demo mode) or to the
upstream backend, whose raw receipts go through the normalizer before anyone
else sees them.
"""
from __future__ import annotations

import logging
import pathlib
from collections.abc import Mapping
from typing import Iterator, Optional

from pydantic import TypeAdapter

from receiptdesk.a.database import SessionLocal
from receiptdesk.a.pipeline import (
    normalize_ingest_response,
    normalize_receipt,
    receipt_from_text,
)
from receiptdesk.a.schemas import Receipt
from receiptdesk.a.storage import ReceiptRepository, SqlReceiptRepository
from receiptdesk.backend import BackendClient, BackendError, ReadResult, api_path
from receiptdesk.config import settings

logger = logging.getLogger(__name__)

SAMPLES_PATH = pathlib.Path(__file__).resolve().parent / "samples" / "receipts.json"
_RECEIPT_LIST = TypeAdapter(list[Receipt])


def load_bundled_samples() -> list[Receipt]:
    return _RECEIPT_LIST.validate_json(SAMPLES_PATH.read_bytes())


def _unique_by_id(receipts: list[Receipt]) -> list[Receipt]:
    seen: set[str] = set()
    unique: list[Receipt] = []
    for receipt in receipts:
        if receipt.id in seen:
            logger.warning("Dropping duplicate receipt id in listing: %s", receipt.id)
            continue
        seen.add(receipt.id)
        unique.append(receipt)
    return unique


class ReceiptClient:
    def __init__(
        self,
        repository: ReceiptRepository,
        backend: BackendClient,
        mock_enabled: bool = False,
    ) -> None:
        self._repository = repository
        self._backend = backend
        self.mock_enabled = mock_enabled

    # ── list ─────────────────────────────────────────────────────────────
    def list_result(self) -> ReadResult[list[Receipt]]:
        if self.mock_enabled:
            return ReadResult(value=self._repository.list())

        try:
            payload = self._backend.get_json("/api/receipts")
        except BackendError as e:
            logger.error("Failed to fetch receipts from backend: %s", e)
            return ReadResult.failed([], "list", e)

        if not isinstance(payload, list):
            logger.warning("Backend receipt list is not an array (%s)", type(payload).__name__)
            payload = []
        receipts = [normalize_receipt(raw) for raw in payload if isinstance(raw, Mapping)]
        logger.info("Fetched %d receipts from backend", len(receipts))
        return ReadResult(value=_unique_by_id(receipts))

    def list(self) -> list[Receipt]:
        return self.list_result().value

    # ── get ──────────────────────────────────────────────────────────────
    def get_by_id(self, receipt_id: str) -> Optional[Receipt]:
        if self.mock_enabled:
            receipt = self._repository.get(receipt_id)
            if receipt is not None:
                return receipt
            logger.info("Receipt %s not stored locally, asking backend", receipt_id)
        return self._fetch_remote(receipt_id)

    def _fetch_remote(self, receipt_id: str) -> Optional[Receipt]:
        try:
            payload = self._backend.get_json(api_path("/api/receipts", receipt_id))
        except BackendError as e:
            if e.not_found:
                logger.warning("Receipt not found: %s", receipt_id)
            else:
                logger.error("Failed to fetch receipt %s: %s", receipt_id, e)
            return None
        if not isinstance(payload, Mapping):
            logger.warning("Backend returned a non-object receipt for %s", receipt_id)
            return None
        return normalize_receipt(payload)

    # ── create ───────────────────────────────────────────────────────────
    def create(self, raw_text: str, source_type: str = "other") -> Receipt:
        """Create a receipt from raw document text.

        Raises ``ValueError`` for blank text and ``BackendError`` when the
        backend rejects or cannot be reached.
        """
        if not raw_text.strip():
            raise ValueError("raw_text must not be empty")

        if self.mock_enabled:
            return self._repository.save(receipt_from_text(raw_text, source_type))

        try:
            body = self._backend.post_json(
                "/api/ingest", {"raw_text": raw_text, "source_type": source_type}
            )
        except BackendError as e:
            logger.error("Failed to create receipt via backend: %s", e)
            raise
        receipt = normalize_ingest_response(body)
        logger.info("Created receipt %s via backend", receipt.id)
        return receipt

    # ── delete ───────────────────────────────────────────────────────────
    def delete(self, receipt_id: str) -> None:
        if self.mock_enabled:
            removed = self._repository.delete(receipt_id)
            logger.info("Deleted local receipt %s (found=%s)", receipt_id, removed)
            return

        try:
            self._backend.delete(api_path("/api/receipts", receipt_id))
        except BackendError as e:
            if e.not_found:
                logger.info("Receipt %s already gone on backend", receipt_id)
                return
            logger.error("Failed to delete receipt %s: %s", receipt_id, e)
            raise
        logger.info("Deleted receipt %s on backend", receipt_id)

    # ── samples ──────────────────────────────────────────────────────────
    def load_samples(self) -> list[Receipt]:
        """Replace the local store with the bundled samples (demo mode only)."""
        if not self.mock_enabled:
            return []
        samples = load_bundled_samples()
        self._repository.replace(samples)
        logger.info("Loaded %d sample receipts", len(samples))
        return samples


def get_receipt_client() -> Iterator[ReceiptClient]:
    """FastAPI dependency: one facade (and HTTP connection pool) per request."""
    backend = BackendClient(settings.BACKEND_URL)
    try:
        yield ReceiptClient(
            repository=SqlReceiptRepository(SessionLocal, settings.STORAGE_KEY),
            backend=backend,
            mock_enabled=settings.mock_enabled,
        )
    finally:
        backend.close()
