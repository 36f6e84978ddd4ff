"""Repository for durable key-value entries."""

import logging
from datetime import UTC, datetime

from sqlalchemy.orm import Session

from streamcatalog_recommendation_service.models import KeyValueEntry

logger = logging.getLogger(__name__)


class KeyValueRepository:
    """
    Repository for string values stored under logical keys.
    """

    def __init__(self, db: Session):
        self.db = db

    def get(self, key: str, for_update: bool = False) -> str | None:
        """
        Get the raw value stored under key, or None.

        Args:
            key: Logical key
            for_update: Lock the row until the session commits or rolls back
        """
        query = self.db.query(KeyValueEntry).filter(KeyValueEntry.key == key)
        if for_update:
            query = query.with_for_update()
        entry = query.first()
        return entry.value if entry else None

    def set(self, key: str, value: str) -> KeyValueEntry:
        """
        Store or replace the value under key.

        Args:
            key: Logical key
            value: Serialized value

        Returns:
            KeyValueEntry object
        """
        existing = self.db.query(KeyValueEntry).filter(KeyValueEntry.key == key).first()

        if existing:
            existing.value = value  # type: ignore[assignment]
            existing.updated_at = datetime.now(UTC)  # type: ignore[assignment]
            entry = existing
        else:
            entry = KeyValueEntry(key=key, value=value, updated_at=datetime.now(UTC))
            self.db.add(entry)

        self.db.commit()
        self.db.refresh(entry)

        return entry

    def delete(self, key: str) -> bool:
        """
        Delete the entry under key.

        Returns:
            True if deleted, False if not found
        """
        count = self.db.query(KeyValueEntry).filter(KeyValueEntry.key == key).delete()
        self.db.commit()

        return count > 0
