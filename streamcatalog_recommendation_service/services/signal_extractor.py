"""High-interest signal extraction from watch history."""
from typing import List, Optional

from streamcatalog_recommendation_service.config import RecommendationSettings
from streamcatalog_recommendation_service.models.watch_event import MediaType, WatchEvent


class SignalExtractor:
    """
    Picks the history entries treated as strong positive signals.

    A movie counts when it was finished or watched past the interest
    threshold. Only the most recent ``max_seeds`` qualify.
    """

    def __init__(self, settings: Optional[RecommendationSettings] = None):
        self.settings = settings or RecommendationSettings()

    def is_high_interest(self, event: WatchEvent) -> bool:
        return event.media_type == MediaType.MOVIE.value and (
            event.completed or event.progress > self.settings.interest_threshold
        )

    def high_interest(self, history: List[WatchEvent]) -> List[WatchEvent]:
        """
        Args:
            history: Watch history, most recent first

        Returns:
            Up to max_seeds qualifying movie entries, in history order
        """
        return [event for event in history if self.is_high_interest(event)][:self.settings.max_seeds]
