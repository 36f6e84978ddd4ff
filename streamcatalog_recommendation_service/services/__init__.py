"""Service classes"""

from .candidate_fetcher import CandidateFetcher
from .history_store import WatchHistoryStore, progress_from_playback
from .ranker import CandidateSource, RecommendationCandidate, RecommendationRanker
from .recommendation_service import HybridRecommendationService
from .signal_extractor import SignalExtractor
from .tmdb_client import EndpointNotAllowedError, TMDBClient, is_endpoint_allowed

__all__ = [
    "CandidateFetcher",
    "CandidateSource",
    "EndpointNotAllowedError",
    "HybridRecommendationService",
    "RecommendationCandidate",
    "RecommendationRanker",
    "SignalExtractor",
    "TMDBClient",
    "WatchHistoryStore",
    "is_endpoint_allowed",
    "progress_from_playback",
]
