"""Fetches recommendation candidates from the metadata service."""
import logging
from concurrent.futures import ThreadPoolExecutor, wait
from typing import List, Optional

from streamcatalog_recommendation_service.config import RecommendationSettings
from streamcatalog_recommendation_service.models.media import Movie
from streamcatalog_recommendation_service.services.tmdb_client import TMDBClient

logger = logging.getLogger(__name__)


class CandidateFetcher:
    """
    Looks up related movies for seed IDs and the trending fallback pool.
    """

    def __init__(self, client: TMDBClient, settings: Optional[RecommendationSettings] = None):
        self.client = client
        self.settings = settings or RecommendationSettings()

    def _related_for_seed(self, seed_id: int) -> List[Movie]:
        try:
            return self.client.get_related_movies(seed_id)[:self.settings.per_seed_limit]
        except Exception as e:
            logger.warning(f"Related lookup for seed {seed_id} failed: {e}")
            return []

    def fetch_related(self, seed_ids: List[int]) -> List[List[Movie]]:
        """
        Fetch related movies for every seed in parallel.

        A failed lookup, or one still running when fetch_deadline expires,
        yields an empty list for that seed and does not affect the others.

        Args:
            seed_ids: Seed movie IDs

        Returns:
            One list per seed, in seed order, each capped at per_seed_limit
        """
        if not seed_ids:
            return []

        executor = ThreadPoolExecutor(max_workers=len(seed_ids))
        try:
            futures = [executor.submit(self._related_for_seed, seed_id) for seed_id in seed_ids]
            done, _ = wait(futures, timeout=self.settings.fetch_deadline)
        finally:
            # Late lookups finish in the background; their results are discarded
            executor.shutdown(wait=False, cancel_futures=True)

        results: List[List[Movie]] = []
        for seed_id, future in zip(seed_ids, futures):
            if future in done:
                results.append(future.result())
            else:
                logger.warning(
                    f"Related lookup for seed {seed_id} missed the {self.settings.fetch_deadline}s deadline"
                )
                results.append([])

        logger.info(
            f"Fetched {sum(len(r) for r in results)} related candidates for {len(seed_ids)} seeds"
        )
        return results

    def fetch_trending(self, page: int = 1) -> List[Movie]:
        """
        Fetch one page of trending movies.

        Raises:
            requests.RequestException: when the metadata service fails
        """
        return self.client.get_trending_movies(page=page)
