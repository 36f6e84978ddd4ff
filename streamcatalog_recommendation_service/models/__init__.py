"""SQLAlchemy models and record schemas"""

from streamcatalog_recommendation_service.models.base import Base
from streamcatalog_recommendation_service.models.key_value_entry import KeyValueEntry
from streamcatalog_recommendation_service.models.media import (
    HistoryStub,
    MediaSummary,
    Movie,
    TVShow,
    to_media_summary,
)
from streamcatalog_recommendation_service.models.watch_event import MediaType, WatchEvent

__all__ = [
    "Base",
    "KeyValueEntry",
    "HistoryStub",
    "MediaSummary",
    "MediaType",
    "Movie",
    "TVShow",
    "WatchEvent",
    "to_media_summary",
]
