"""Hybrid recommendation service combining watch history and trending titles."""
import logging
from typing import List, Optional

from streamcatalog_recommendation_service.config import (
    RecommendationSettings,
    get_recommendation_settings,
)
from streamcatalog_recommendation_service.models.media import Movie
from streamcatalog_recommendation_service.services.candidate_fetcher import CandidateFetcher
from streamcatalog_recommendation_service.services.history_store import WatchHistoryStore
from streamcatalog_recommendation_service.services.ranker import (
    CandidateSource,
    RecommendationRanker,
)
from streamcatalog_recommendation_service.services.signal_extractor import SignalExtractor
from streamcatalog_recommendation_service.services.tmdb_client import TMDBClient

logger = logging.getLogger(__name__)


class HybridRecommendationService:
    """
    Service for personalized movie recommendations.

    Seeds come from the watch history (recently finished movies); their
    related titles are ranked ahead of trending titles, which only fill
    the list when personalized results are scarce. Never raises: any
    failure degrades to the trending list, or to an empty list when even
    that is unavailable.
    """

    def __init__(
            self,
            history_store: Optional[WatchHistoryStore] = None,
            client: Optional[TMDBClient] = None,
            settings: Optional[RecommendationSettings] = None
    ):
        """
        Initialize the recommendation service.

        Args:
            history_store: Watch history source (default: database-backed store)
            client: Metadata API client (default: configured from environment,
                with the fewer retries of settings.max_retries)
            settings: Ranking constants (default: from config)
        """
        self.settings = settings or get_recommendation_settings()
        self.history_store = history_store or WatchHistoryStore()
        self.client = client or TMDBClient(max_retries=self.settings.max_retries, backoff_factor=0.5)

        self.extractor = SignalExtractor(self.settings)
        self.fetcher = CandidateFetcher(self.client, self.settings)
        self.ranker = RecommendationRanker(self.settings)

        logger.info("Initialized HybridRecommendationService")
        logger.info(
            f"Weights - Content: {self.settings.content_weight}, "
            f"Trending: {self.settings.trending_weight}, Floor: {self.settings.min_results}"
        )

    def get_recommendations(self) -> List[Movie]:
        """
        Get recommendations for the current watch history.

        Returns:
            Ordered list of Movie
        """
        try:
            history = self.history_store.list()
            seen_ids = [event.media_id for event in history]
            seeds = self.extractor.high_interest(history)

            related = self.fetcher.fetch_related([seed.media_id for seed in seeds])
            content_based = [movie for seed_results in related for movie in seed_results]

            candidates_by_source = {CandidateSource.CONTENT_BASED: content_based}
            personalized = self.ranker.collect(content_based, seen_ids)
            if self.ranker.needs_fallback(len(personalized)):
                candidates_by_source[CandidateSource.TRENDING] = self.fetcher.fetch_trending()

            recommendations = self.ranker.rank(candidates_by_source, seen_ids)
            logger.info(
                f"✓ {len(recommendations)} recommendations "
                f"({len(seeds)} seeds, {len(personalized)} personalized)"
            )
            return recommendations

        except Exception as e:
            logger.error(f"Hybrid recommendation pipeline failed: {str(e)}", exc_info=True)
            return self._trending_fallback()

    def _trending_fallback(self) -> List[Movie]:
        try:
            return self.fetcher.fetch_trending()
        except Exception as e:
            logger.error(f"Trending fallback failed: {str(e)}")
            return []
