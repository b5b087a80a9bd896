"""
Local receipt repository.

Each collection lives as one JSON array under a single namespaced key. Each
mutation reads the whole array, changes it, and writes it back; concurrent
writers are not coordinated (last write wins).
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Generic, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError
from sqlalchemy.orm import Session

from receiptdesk.a.models.storage import StorageEntryModel
from receiptdesk.a.schemas import Receipt

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "receiptos.receipts"

M = TypeVar("M", bound=BaseModel)


def _parse_entries(raw: Any, model: Type[M]) -> list[M]:
    if not isinstance(raw, list):
        return []
    entries: list[M] = []
    for entry in raw:
        try:
            entries.append(model.model_validate(entry))
        except ValidationError as e:
            logger.warning("Skipping unreadable stored %s: %s", model.__name__, e.errors()[:1])
    return entries


class ReceiptRepository(ABC, Generic[M]):
    """Persisted receipt collection used in local mode.

    Holds ``Receipt`` by default; cookie receipts reuse it with their own
    model and id attribute.
    """

    def __init__(self, model: Type[M] = Receipt, id_field: str = "id") -> None:
        self._model = model
        self._id_field = id_field

    @abstractmethod
    def _read(self) -> list[M]:
        """Return the full stored collection."""

    @abstractmethod
    def _write(self, items: list[M]) -> None:
        """Overwrite the full stored collection."""

    def _id_of(self, item: M) -> str:
        return getattr(item, self._id_field)

    def list(self) -> list[M]:
        return self._read()

    def get(self, item_id: str) -> Optional[M]:
        return next((r for r in self._read() if self._id_of(r) == item_id), None)

    def save(self, item: M) -> M:
        """Prepend ``item`` (newest first)."""
        self._write([item, *self._read()])
        return item

    def replace(self, items: list[M]) -> None:
        self._write(list(items))

    def delete(self, item_id: str) -> bool:
        items = self._read()
        kept = [r for r in items if self._id_of(r) != item_id]
        self._write(kept)
        return len(kept) != len(items)


class InMemoryReceiptRepository(ReceiptRepository[M]):
    def __init__(
        self,
        items: Optional[list[M]] = None,
        model: Type[M] = Receipt,
        id_field: str = "id",
    ) -> None:
        super().__init__(model, id_field)
        self._items: list[M] = list(items or [])

    def _read(self) -> list[M]:
        return list(self._items)

    def _write(self, items: list[M]) -> None:
        self._items = list(items)


class SqlReceiptRepository(ReceiptRepository[M]):
    """Stores the array in the ``storage_entries`` table."""

    def __init__(
        self,
        session_factory: Callable[[], Session],
        key: str = DEFAULT_STORAGE_KEY,
        model: Type[M] = Receipt,
        id_field: str = "id",
    ) -> None:
        super().__init__(model, id_field)
        self._session_factory = session_factory
        self._key = key

    def _read(self) -> list[M]:
        db = self._session_factory()
        try:
            row = db.get(StorageEntryModel, self._key)
            return _parse_entries(row.value, self._model) if row else []
        finally:
            db.close()

    def _write(self, items: list[M]) -> None:
        value = [item.model_dump(mode="json") for item in items]
        db = self._session_factory()
        try:
            row = db.get(StorageEntryModel, self._key)
            if row is None:
                db.add(StorageEntryModel(key=self._key, value=value))
            else:
                row.value = value
            db.commit()
            logger.info("Stored %d entries under %s", len(items), self._key)
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()
