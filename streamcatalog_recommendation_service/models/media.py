"""Media records returned by the metadata service and shown as cards"""
import logging
from typing import Union

from pydantic import BaseModel, ConfigDict, ValidationError

from streamcatalog_recommendation_service.models.watch_event import MediaType, WatchEvent

logger = logging.getLogger(__name__)


class Movie(BaseModel):
    """A movie as returned by the metadata API. Unknown keys are kept."""

    model_config = ConfigDict(extra="allow")

    id: int
    title: str = ""
    overview: str = ""
    poster_path: str | None = None
    backdrop_path: str | None = None
    release_date: str | None = None
    vote_average: float = 0.0
    vote_count: int = 0
    genre_ids: list[int] = []
    runtime: int | None = None
    belongs_to_collection: dict | None = None


class TVShow(BaseModel):
    """A TV show as returned by the metadata API. Unknown keys are kept."""

    model_config = ConfigDict(extra="allow")

    id: int
    name: str = ""
    overview: str = ""
    poster_path: str | None = None
    backdrop_path: str | None = None
    first_air_date: str | None = None
    vote_average: float = 0.0
    vote_count: int = 0
    genre_ids: list[int] = []
    number_of_seasons: int | None = None


class HistoryStub(BaseModel):
    """A watch history entry rendered as a media card.

    Carries only what history actually knows; no placeholder ratings or dates.
    """

    id: int
    media_type: MediaType
    title: str
    poster_path: str | None = None
    backdrop_path: str | None = None
    season_number: int | None = None
    episode_number: int | None = None
    episode_name: str | None = None
    progress: float = 0.0


MediaSummary = Union[Movie, TVShow, HistoryStub]


def to_media_summary(item) -> MediaSummary:
    """
    Convert an item into a MediaSummary variant.

    Args:
        item: WatchEvent, Movie, TVShow or HistoryStub

    Returns:
        Movie/TVShow/HistoryStub unchanged, or a HistoryStub built from a WatchEvent
    """
    if isinstance(item, (Movie, TVShow, HistoryStub)):
        return item
    if isinstance(item, WatchEvent):
        return HistoryStub(
            id=item.media_id,
            media_type=item.media_type,
            title=item.title,
            poster_path=item.poster_path,
            backdrop_path=item.backdrop_path,
            season_number=item.season_number,
            episode_number=item.episode_number,
            episode_name=item.episode_name,
            progress=item.progress,
        )
    raise TypeError(f"Cannot convert {type(item).__name__} to a media summary")


def parse_movies(results: list | None) -> list[Movie]:
    """
    Parse a metadata API result list into Movie objects.

    Entries that fail validation are skipped with a warning.
    """
    movies: list[Movie] = []
    for raw in results or []:
        try:
            movies.append(Movie.model_validate(raw))
        except ValidationError as e:
            logger.warning(f"Skipping malformed movie record: {e.error_count()} error(s)")
    return movies


def parse_tv_shows(results: list | None) -> list[TVShow]:
    shows: list[TVShow] = []
    for raw in results or []:
        try:
            shows.append(TVShow.model_validate(raw))
        except ValidationError as e:
            logger.warning(f"Skipping malformed TV record: {e.error_count()} error(s)")
    return shows
