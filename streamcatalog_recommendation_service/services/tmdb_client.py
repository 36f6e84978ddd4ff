"""Client for the movie metadata API (TMDB v3)"""
from typing import Any, Dict, List, Optional
import logging
import re
import requests

from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from streamcatalog_recommendation_service.config import (
    get_request_retries,
    get_request_timeout,
    get_tmdb_api_key,
    get_tmdb_base_url,
    get_tmdb_language,
)
from streamcatalog_recommendation_service.models.media import (
    Movie,
    TVShow,
    parse_movies,
    parse_tv_shows,
)

logger = logging.getLogger(__name__)

ALLOWED_ENDPOINTS = (
    '/trending/movie/week',
    '/trending/tv/week',
    '/search/movie',
    '/search/tv',
    '/discover/movie',
    '/discover/tv',
)
ALLOWED_ENDPOINT_PATTERN = re.compile(r'^/(movie|tv|collection)/\d+(/[a-z0-9_]+)*$')

# Set by the client only; never taken from caller params
RESERVED_PARAMS = ('api_key', 'language')


class EndpointNotAllowedError(ValueError):
    """Raised when an endpoint is not on the metadata API allow-list."""


def is_endpoint_allowed(endpoint) -> bool:
    """
    Check an endpoint against the allow-list.

    Exact list endpoints plus detail paths under /movie/<id>, /tv/<id>
    and /collection/<id>.
    """
    if not isinstance(endpoint, str):
        return False
    return endpoint in ALLOWED_ENDPOINTS or bool(ALLOWED_ENDPOINT_PATTERN.match(endpoint))


def _is_worth_showing(item) -> bool:
    """Has a poster and is either decently rated or not yet rated."""
    return bool(item.poster_path) and (item.vote_average > 5.0 or item.vote_count == 0)


class TMDBClient:
    """Client for the metadata API endpoints the catalog uses."""

    def __init__(
            self,
            api_key: Optional[str] = None,
            base_url: Optional[str] = None,
            language: Optional[str] = None,
            timeout: Optional[float] = None,
            max_retries: Optional[int] = None,
            backoff_factor: float = 1
    ):
        self.api_key = api_key if api_key is not None else get_tmdb_api_key()
        self.base_url = (base_url or get_tmdb_base_url()).rstrip('/')
        self.language = language if language is not None else get_tmdb_language()
        self.timeout = timeout if timeout is not None else get_request_timeout()
        self.max_retries = max_retries if max_retries is not None else get_request_retries()

        # Configure session with retries
        self.session = requests.Session()
        retry_strategy = Retry(
            total=self.max_retries,
            backoff_factor=backoff_factor,
            status_forcelist=[429, 500, 502, 503, 504]
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        # noinspection HttpUrlsUsage
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)

    def get_raw(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Dict:
        """
        Call an allow-listed endpoint and return the decoded JSON body.

        Args:
            endpoint: API path such as '/trending/movie/week'
            params: Extra query parameters (None values and reserved keys are dropped)

        Raises:
            EndpointNotAllowedError: endpoint is not allow-listed
            requests.RequestException: transport or HTTP failure
        """
        if not is_endpoint_allowed(endpoint):
            logger.error(f"Blocked unauthorized endpoint access: {endpoint}")
            raise EndpointNotAllowedError(f"Endpoint not allowed: {endpoint}")

        query: Dict[str, Any] = {'api_key': self.api_key}
        if self.language:
            query['language'] = self.language
        for key, value in (params or {}).items():
            if key in RESERVED_PARAMS:
                logger.warning(f"Ignoring reserved query parameter: {key}")
                continue
            if value is not None:
                query[key] = value

        url = f"{self.base_url}{endpoint}"
        response = self.session.get(url, params=query, timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    # ===== LIST ENDPOINTS =====

    def get_trending_movies(self, page: int = 1) -> List[Movie]:
        """Fetch one page of this week's trending movies"""
        data = self.get_raw('/trending/movie/week', {'page': page})
        return parse_movies(data.get('results'))

    def get_trending_tv(self, page: int = 1) -> List[TVShow]:
        """Fetch one page of this week's trending TV shows"""
        data = self.get_raw('/trending/tv/week', {'page': page})
        return parse_tv_shows(data.get('results'))

    # ===== MOVIE ENDPOINTS =====

    def get_movie_details(self, movie_id: int) -> Movie:
        """Fetch single movie by ID"""
        return Movie.model_validate(self.get_raw(f'/movie/{movie_id}'))

    def get_collection_parts(self, collection_id: int) -> List[Movie]:
        """Fetch the movies belonging to a collection"""
        data = self.get_raw(f'/collection/{collection_id}')
        return parse_movies(data.get('parts'))

    def get_similar_movies(self, movie_id: int) -> List[Movie]:
        data = self.get_raw(f'/movie/{movie_id}/similar')
        return parse_movies(data.get('results'))

    def get_movie_recommendations(self, movie_id: int) -> List[Movie]:
        data = self.get_raw(f'/movie/{movie_id}/recommendations')
        return parse_movies(data.get('results'))

    # ===== TV ENDPOINTS =====

    def get_similar_tv(self, tv_id: int) -> List[TVShow]:
        data = self.get_raw(f'/tv/{tv_id}/similar')
        return parse_tv_shows(data.get('results'))

    def get_tv_recommendations(self, tv_id: int) -> List[TVShow]:
        data = self.get_raw(f'/tv/{tv_id}/recommendations')
        return parse_tv_shows(data.get('results'))

    # ===== RELATED-ITEM LOOKUPS =====

    def get_related_movies(self, movie_id: int) -> List[Movie]:
        """
        Movies related to a movie, best source first.

        Other parts of the movie's collection when it has one, otherwise
        similar movies; either list is filtered to titles worth showing.
        When nothing survives, or anything along the way fails, the API's
        own recommendations are returned unfiltered.

        Args:
            movie_id: Seed movie ID

        Returns:
            List of Movie in API order
        """
        try:
            results: List[Movie] = []
            movie = self.get_movie_details(movie_id)

            collection = movie.belongs_to_collection
            if collection and collection.get('id'):
                parts = self.get_collection_parts(collection['id'])
                results = [part for part in parts if part.id != movie_id]

            if not results:
                results = self.get_similar_movies(movie_id)

            results = [m for m in results if _is_worth_showing(m)]
            if results:
                return results
        except (requests.RequestException, ValueError) as e:
            logger.warning(f"Related lookup for movie {movie_id} failed, using recommendations: {e}")

        return self.get_movie_recommendations(movie_id)

    def get_related_tv(self, tv_id: int) -> List[TVShow]:
        """Similar shows worth showing, else the API's recommendations."""
        try:
            results = [s for s in self.get_similar_tv(tv_id) if _is_worth_showing(s)]
            if results:
                return results
        except (requests.RequestException, ValueError) as e:
            logger.warning(f"Failed to fetch similar shows for {tv_id}: {e}")

        return self.get_tv_recommendations(tv_id)
