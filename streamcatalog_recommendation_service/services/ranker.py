"""Ranks recommendation candidates by source priority."""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional, Set

from streamcatalog_recommendation_service.config import RecommendationSettings
from streamcatalog_recommendation_service.models.media import Movie


class CandidateSource(str, Enum):
    CONTENT_BASED = "content-based"
    COLLABORATIVE = "collaborative"
    TRENDING = "trending"


@dataclass
class RecommendationCandidate:
    movie: Movie
    source: CandidateSource
    weight: float


class RecommendationRanker:
    """
    Merges candidate lists into one deduplicated, ordered list.

    Weights are coarse priority tiers per source, not scores: content-based
    candidates come first, trending ones only fill up to ``min_results``.
    """

    def __init__(self, settings: Optional[RecommendationSettings] = None):
        self.settings = settings or RecommendationSettings()

    def _weight_for(self, source: CandidateSource) -> float:
        if source == CandidateSource.TRENDING:
            return self.settings.trending_weight
        return self.settings.content_weight

    @staticmethod
    def _add_unseen(
            candidates: List[RecommendationCandidate],
            movies: Iterable[Movie],
            source: CandidateSource,
            weight: float,
            seen: Set[int]
    ) -> None:
        for movie in movies:
            if movie.id in seen:
                continue
            seen.add(movie.id)
            candidates.append(RecommendationCandidate(movie=movie, source=source, weight=weight))

    def needs_fallback(self, candidate_count: int) -> bool:
        return candidate_count < self.settings.min_results

    def collect(
            self,
            content_based: Iterable[Movie],
            seen_ids: Iterable[int],
            trending: Optional[Iterable[Movie]] = None
    ) -> List[RecommendationCandidate]:
        """
        Build the unsorted candidate list.

        Args:
            content_based: Related movies in fetch order (all seeds flattened)
            seen_ids: IDs already in watch history
            trending: Trending pool, consulted only below the min_results floor

        Returns:
            Candidates in insertion order
        """
        seen = set(seen_ids)
        candidates: List[RecommendationCandidate] = []

        self._add_unseen(
            candidates, content_based, CandidateSource.CONTENT_BASED,
            self._weight_for(CandidateSource.CONTENT_BASED), seen
        )

        if trending is not None and self.needs_fallback(len(candidates)):
            self._add_unseen(
                candidates, trending, CandidateSource.TRENDING,
                self._weight_for(CandidateSource.TRENDING), seen
            )

        return candidates

    def rank(
            self,
            candidates_by_source: Dict[CandidateSource, Iterable[Movie]],
            seen_ids: Iterable[int]
    ) -> List[Movie]:
        """
        Rank candidates.

        Args:
            candidates_by_source: Movies per source, each in fetch order
            seen_ids: IDs to exclude (watch history)

        Returns:
            Movies ordered by weight, ties in insertion order
        """
        candidates = self.collect(
            content_based=candidates_by_source.get(CandidateSource.CONTENT_BASED, []),
            seen_ids=seen_ids,
            trending=candidates_by_source.get(CandidateSource.TRENDING),
        )
        # sorted() is stable, so equal weights keep insertion order
        ordered = sorted(candidates, key=lambda c: c.weight, reverse=True)
        return [c.movie for c in ordered]
