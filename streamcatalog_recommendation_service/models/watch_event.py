"""Watch history event schema"""
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from streamcatalog_recommendation_service.utils.text_processor import (
    clamp,
    sanitize_image_path,
    sanitize_text,
)

# Progress at or beyond this fraction counts as finished
COMPLETION_THRESHOLD = 0.95


class MediaType(str, Enum):
    MOVIE = "movie"
    TV = "tv"


class WatchEvent(BaseModel):
    """One watched movie or episode.

    Validation doubles as sanitization: free text loses tag-like markup,
    image paths that do not look like ``/name.ext`` become None and
    numeric fields are clamped into range instead of rejected. Only
    structurally wrong input (missing id, unknown media type, values of
    the wrong type) fails validation.

    Stored and served with camelCase keys; snake_case is accepted too.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
    )

    media_id: int = Field(gt=0)
    media_type: MediaType
    title: str
    poster_path: str | None = None
    backdrop_path: str | None = None
    timestamp: int = 0
    season_number: int | None = None
    episode_number: int | None = None
    episode_name: str | None = None
    progress: float = 0.0
    completed: bool = False

    @field_validator("title", mode="before")
    @classmethod
    def _sanitize_title(cls, value):
        if not isinstance(value, str):
            raise ValueError("title must be a string")
        return sanitize_text(value)

    @field_validator("episode_name", mode="before")
    @classmethod
    def _sanitize_episode_name(cls, value):
        if value is None:
            return None
        if not isinstance(value, str):
            raise ValueError("episode_name must be a string")
        return sanitize_text(value)

    @field_validator("poster_path", "backdrop_path", mode="before")
    @classmethod
    def _sanitize_path(cls, value):
        return sanitize_image_path(value)

    @field_validator("timestamp")
    @classmethod
    def _non_negative_timestamp(cls, value: int) -> int:
        return max(0, value)

    @field_validator("season_number")
    @classmethod
    def _clamp_season(cls, value):
        return None if value is None else int(clamp(value, 0, 100))

    @field_validator("episode_number")
    @classmethod
    def _clamp_episode(cls, value):
        return None if value is None else int(clamp(value, 1, 1000))

    @field_validator("progress")
    @classmethod
    def _clamp_progress(cls, value: float) -> float:
        return float(clamp(value, 0.0, 1.0))

    @model_validator(mode="after")
    def _derive_completed(self):
        if self.progress >= COMPLETION_THRESHOLD:
            self.completed = True
        return self

    @property
    def key(self) -> tuple[int, str]:
        return self.media_id, self.media_type

    def to_storage(self) -> dict:
        """Serialize for persistence (camelCase keys)."""
        return self.model_dump(mode="json", by_alias=True)
