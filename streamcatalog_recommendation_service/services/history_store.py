"""Watch history store backed by durable key-value storage."""
import json
import logging
import threading
import time
from collections.abc import Callable, Mapping
from typing import List, Optional

from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from streamcatalog_recommendation_service.config import get_history_limit
from streamcatalog_recommendation_service.models.database import SessionLocal
from streamcatalog_recommendation_service.models.watch_event import WatchEvent
from streamcatalog_recommendation_service.repos import KeyValueRepository
from streamcatalog_recommendation_service.utils.text_processor import clamp

logger = logging.getLogger(__name__)

HISTORY_KEY = "watch_history"
MAX_WRITE_ATTEMPTS = 3

# Serializes read-modify-write cycles of every store in this process
_write_lock = threading.Lock()


def _now_millis() -> int:
    return int(time.time() * 1000)


def progress_from_playback(elapsed: float, duration: float) -> float:
    """
    Fraction of runtime watched.

    Args:
        elapsed: Seconds played
        duration: Total runtime in seconds

    Returns:
        elapsed / duration clamped to [0, 1]; 0 when duration is unknown
    """
    try:
        elapsed = float(elapsed)
        duration = float(duration)
    except (TypeError, ValueError):
        return 0.0
    if not duration > 0:
        return 0.0
    return float(clamp(elapsed / duration, 0.0, 1.0))


class WatchHistoryStore:
    """
    Most-recent-first list of watched movies and episodes.

    One entry per (media_id, media_type); recording the same key again
    replaces the entry and moves it to the front. At most ``max_items``
    entries are kept. The whole list lives JSON-serialized under a single
    key, and everything read back is re-validated, so foreign or corrupt
    data never reaches callers.

    None of the public methods raise: invalid input and storage failures
    are logged and otherwise ignored.
    """

    def __init__(
            self,
            session_factory: Optional[Callable] = None,
            max_items: Optional[int] = None,
            storage_key: str = HISTORY_KEY,
            clock: Optional[Callable[[], int]] = None
    ):
        """
        Initialize the history store.

        Args:
            session_factory: Callable returning a SQLAlchemy session (default: SessionLocal)
            max_items: Retention cap (None = from config, default 20)
            storage_key: Logical key the list is stored under
            clock: Callable returning epoch milliseconds
        """
        self.session_factory = session_factory or SessionLocal
        self.max_items = max_items if max_items is not None else get_history_limit()
        self.storage_key = storage_key
        self.clock = clock or _now_millis

    # ===== STORAGE HELPERS =====

    def _load(self, repo: KeyValueRepository, for_update: bool = False) -> List[WatchEvent]:
        raw = repo.get(self.storage_key, for_update=for_update)
        if not raw:
            return []

        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, TypeError):
            logger.warning(f"Discarding unparsable history under '{self.storage_key}'")
            return []

        if not isinstance(data, list):
            logger.warning(f"Discarding history under '{self.storage_key}': expected a list")
            return []

        events: List[WatchEvent] = []
        for item in data:
            try:
                events.append(WatchEvent.model_validate(item))
            except ValidationError as e:
                logger.warning(f"Dropping invalid history record: {e.error_count()} error(s)")

        # Foreign data may be unordered or contain duplicates
        events.sort(key=lambda e: e.timestamp, reverse=True)
        unique: List[WatchEvent] = []
        keys = set()
        for event in events:
            if event.key in keys:
                continue
            keys.add(event.key)
            unique.append(event)

        return unique[:self.max_items]

    def _save(self, repo: KeyValueRepository, events: List[WatchEvent]) -> None:
        payload = json.dumps([event.to_storage() for event in events])
        repo.set(self.storage_key, payload)

    def _update(self, change: Callable):
        """
        Apply a change to the stored history as one read-modify-write cycle.

        The cycle runs under a process-wide lock with the stored row locked
        for update. A concurrent first insert of the key surfaces as an
        IntegrityError; the cycle is then re-run against the committed list.

        Args:
            change: Callable taking the current history and returning
                (new history or None to leave storage untouched, result)

        Returns:
            The result returned by change

        Raises:
            SQLAlchemyError: storage failure (after rollback)
        """
        with _write_lock:
            for attempt in range(1, MAX_WRITE_ATTEMPTS + 1):
                db = self.session_factory()
                try:
                    repo = KeyValueRepository(db)
                    updated, result = change(self._load(repo, for_update=True))
                    if updated is None:
                        db.rollback()
                    else:
                        self._save(repo, updated)
                    return result
                except SQLAlchemyError as e:
                    db.rollback()
                    if not isinstance(e, IntegrityError) or attempt == MAX_WRITE_ATTEMPTS:
                        raise
                    logger.warning(f"Concurrent write to '{self.storage_key}', retrying (attempt {attempt})")
                finally:
                    db.close()

    # ===== PUBLIC API =====

    def list(self) -> List[WatchEvent]:
        """
        Get history, most recent first.

        Returns:
            List of WatchEvent (empty if storage is missing or unreadable)
        """
        db = self.session_factory()
        try:
            return self._load(KeyValueRepository(db))
        except SQLAlchemyError as e:
            logger.error(f"Failed to read watch history: {e}")
            return []
        finally:
            db.close()

    def record(self, event) -> Optional[WatchEvent]:
        """
        Record a watch event.

        Args:
            event: WatchEvent or mapping with event fields (camelCase or snake_case)

        Returns:
            The stored (sanitized) event, or None if it was rejected
        """
        try:
            if isinstance(event, WatchEvent):
                event = event.model_dump()
            if not isinstance(event, Mapping):
                raise TypeError(f"expected a mapping, got {type(event).__name__}")
            validated = WatchEvent.model_validate(dict(event))
        except (ValidationError, TypeError) as e:
            logger.warning(f"Ignoring invalid watch event: {e}")
            return None

        def add(history):
            newest = max((h.timestamp for h in history), default=0)
            validated.timestamp = max(self.clock(), newest + 1)

            remaining = [h for h in history if h.key != validated.key]
            return [validated, *remaining][:self.max_items], len(remaining) + 1

        try:
            count = self._update(add)
        except SQLAlchemyError as e:
            logger.error(f"Failed to save watch history: {e}")
            return None

        logger.info(
            f"Recorded {validated.media_type} {validated.media_id} "
            f"(progress {validated.progress:.2f}, {min(count, self.max_items)} in history)"
        )
        return validated

    def record_playback(self, event, elapsed: float, duration: float) -> Optional[WatchEvent]:
        """
        Record an event whose progress is computed from playback position.

        Args:
            event: Event fields without progress
            elapsed: Seconds played
            duration: Total runtime in seconds

        Returns:
            The stored event, or None if it was rejected
        """
        if isinstance(event, WatchEvent):
            event = event.model_dump()
        if not isinstance(event, Mapping):
            logger.warning(f"Ignoring invalid playback report: {type(event).__name__}")
            return None

        fields = dict(event)
        fields.pop("completed", None)
        fields["progress"] = progress_from_playback(elapsed, duration)
        return self.record(fields)

    def remove(self, media_id: int, media_type: str) -> bool:
        """
        Remove the entry for (media_id, media_type).

        Returns:
            True if an entry was removed
        """
        def drop(history):
            remaining = [h for h in history if h.key != (media_id, media_type)]
            if len(remaining) == len(history):
                return None, False
            return remaining, True

        try:
            removed = self._update(drop)
        except SQLAlchemyError as e:
            logger.error(f"Failed to remove from watch history: {e}")
            return False

        if removed:
            logger.info(f"Removed {media_type} {media_id} from history")
        return removed

    def clear(self) -> None:
        """Remove all history."""
        with _write_lock:
            db = self.session_factory()
            try:
                KeyValueRepository(db).delete(self.storage_key)
                logger.info("Cleared watch history")
            except SQLAlchemyError as e:
                db.rollback()
                logger.error(f"Failed to clear watch history: {e}")
            finally:
                db.close()

    def progress_for(self, media_id: int, media_type: str) -> float:
        """Most recent progress for (media_id, media_type), or 0 if absent."""
        for event in self.list():
            if event.key == (media_id, media_type):
                return event.progress
        return 0.0
