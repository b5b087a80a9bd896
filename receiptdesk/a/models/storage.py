"""
Key/value storage table — one JSON document per namespaced key.
"""
from datetime import datetime

from sqlalchemy import JSON, Column, DateTime, String

from receiptdesk.a.database import Base


class StorageEntryModel(Base):
    __tablename__ = "storage_entries"

    key = Column(String, primary_key=True)
    value = Column(JSON, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
