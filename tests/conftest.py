"""Shared test fixtures and configuration for pytest."""
import itertools
import json
from pathlib import Path
from typing import Dict, List
from unittest.mock import Mock

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from streamcatalog_recommendation_service.config import RecommendationSettings
from streamcatalog_recommendation_service.models.base import Base
from streamcatalog_recommendation_service.models.media import Movie
from streamcatalog_recommendation_service.models.watch_event import WatchEvent
from streamcatalog_recommendation_service.services.history_store import WatchHistoryStore


# ===== Database Fixtures =====

@pytest.fixture(scope="function")
def test_db_engine():
    """Create an in-memory SQLite database engine shared by all sessions."""
    engine = create_engine(
        "sqlite://",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(scope="function")
def test_session_factory(test_db_engine):
    """Session factory bound to the test database."""
    return sessionmaker(bind=test_db_engine)


@pytest.fixture(scope="function")
def test_db_session(test_session_factory):
    """Create a database session for testing."""
    session = test_session_factory()
    yield session
    session.close()


# ===== History Fixtures =====

@pytest.fixture
def fake_clock():
    """Clock returning 1_700_000_000_000, then +1000 ms per call."""
    counter = itertools.count(1_700_000_000_000, 1000)
    return lambda: next(counter)


@pytest.fixture
def history_store(test_session_factory, fake_clock):
    """WatchHistoryStore backed by the test database."""
    return WatchHistoryStore(
        session_factory=test_session_factory,
        max_items=20,
        clock=fake_clock,
    )


@pytest.fixture
def sample_event_data() -> Dict:
    """A valid watch event as the player reports it."""
    return {
        'mediaId': 603,
        'mediaType': 'movie',
        'title': 'The Matrix',
        'posterPath': '/f89U3ADr1oiB1s9GkdPOEpXUk5H.jpg',
        'backdropPath': '/fNG7i7RqMErkcqhohV2a6cV1Ehy.jpg',
        'progress': 0.5,
    }


@pytest.fixture
def sample_episode_data() -> Dict:
    """A valid TV episode watch event."""
    return {
        'mediaId': 1396,
        'mediaType': 'tv',
        'title': 'Breaking Bad',
        'posterPath': '/ggFHVNu6YYI5L9pCfOacjizRGt.jpg',
        'backdropPath': None,
        'seasonNumber': 1,
        'episodeNumber': 3,
        'episodeName': '...And the Bag\'s in the River',
        'progress': 0.4,
    }


def make_event(media_id: int, progress: float = 0.0, media_type: str = 'movie',
               completed: bool = False, timestamp: int = 0) -> WatchEvent:
    """Build a WatchEvent directly (bypasses the store)."""
    return WatchEvent(
        media_id=media_id,
        media_type=media_type,
        title=f'Title {media_id}',
        progress=progress,
        completed=completed,
        timestamp=timestamp,
    )


@pytest.fixture
def event_factory():
    return make_event


# ===== Metadata Fixtures =====

def make_movie_data(movie_id: int, **overrides) -> Dict:
    data = {
        'id': movie_id,
        'title': f'Movie {movie_id}',
        'overview': f'Overview {movie_id}',
        'poster_path': f'/poster{movie_id}.jpg',
        'backdrop_path': f'/backdrop{movie_id}.jpg',
        'release_date': '2020-01-01',
        'vote_average': 7.0,
        'vote_count': 100,
        'genre_ids': [28],
    }
    data.update(overrides)
    return data


def make_movies(*movie_ids: int) -> List[Movie]:
    return [Movie.model_validate(make_movie_data(movie_id)) for movie_id in movie_ids]


@pytest.fixture
def movie_data_factory():
    return make_movie_data


@pytest.fixture
def movies_factory():
    return make_movies


@pytest.fixture
def sample_trending_response() -> Dict:
    """One page of /trending/movie/week."""
    return {
        'page': 1,
        'results': [make_movie_data(movie_id) for movie_id in (100, 101, 102)],
        'total_pages': 1,
        'total_results': 3,
    }


@pytest.fixture
def default_settings() -> RecommendationSettings:
    return RecommendationSettings()


@pytest.fixture
def mock_tmdb_client():
    """Mock TMDBClient."""
    mock = Mock()
    mock.get_related_movies.return_value = []
    mock.get_trending_movies.return_value = []
    mock.api_key = 'test-key'
    return mock


# ===== Configuration Fixtures =====

@pytest.fixture
def mock_config(monkeypatch):
    """Mock configuration values."""
    monkeypatch.setenv('DATABASE_URL', 'sqlite:///:memory:')
    monkeypatch.setenv('TMDB_API_KEY', 'test-key')
    monkeypatch.setenv('TMDB_BASE_URL', 'http://tmdb.test/3')
    monkeypatch.setenv('TMDB_LANGUAGE', 'en-US')
    monkeypatch.setenv('TMDB_REQUEST_TIMEOUT', '5')


@pytest.fixture
def mock_local_settings(tmp_path, monkeypatch):
    """Mock local.settings.json file."""
    settings = {
        "Values": {
            "DATABASE_URL": "sqlite:///:memory:",
            "TMDB_API_KEY": "from-settings",
        }
    }

    settings_file = tmp_path / "local.settings.json"
    with open(settings_file, 'w') as f:
        json.dump(settings, f)

    yield settings_file


# ===== Azure Functions Fixtures =====

@pytest.fixture
def mock_http_request():
    """Mock Azure Functions HttpRequest."""
    mock_req = Mock()
    mock_req.route_params = {}
    mock_req.params = {}
    mock_req.get_json.return_value = {}
    return mock_req


# ===== Script Fixtures =====

@pytest.fixture
def project_root() -> Path:
    return Path(__file__).resolve().parent.parent
