"""Repository classes"""

from streamcatalog_recommendation_service.repos.key_value_repository import KeyValueRepository

__all__ = [
    "KeyValueRepository",
]
