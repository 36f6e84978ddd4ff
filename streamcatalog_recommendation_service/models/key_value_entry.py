"""Durable key-value entries backing client-side state such as watch history"""
from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, String, Text

from streamcatalog_recommendation_service.models.base import Base


class KeyValueEntry(Base):
    """One serialized value stored under a logical key.

    The value is opaque text; readers are expected to validate it.
    """

    __tablename__ = "key_value_entries"

    key = Column(String(255), primary_key=True)
    value = Column(Text, nullable=False)

    updated_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    def __repr__(self):
        return f"<KeyValueEntry(key='{self.key}', size={len(self.value or '')})>"
