"""Helpers shared by the service and the app shell."""

from .navigation import NavigationEntry, NavigationStack

__all__ = [
    "NavigationEntry",
    "NavigationStack",
]
