"""Sanitization helpers for user-supplied media fields."""
import math
import re

TAG_PATTERN = re.compile(r'<[^>]*>')
IMAGE_PATH_PATTERN = re.compile(r'^/[A-Za-z0-9_.-]+$')

MAX_TEXT_LENGTH = 500


def strip_tags(text: str | None) -> str:
    """
    Remove tag-like ``<...>`` substrings from text.

    Args:
        text: Raw text possibly containing markup (can be None)

    Returns:
        Text without tags
    """
    if text is None:
        return ""

    return TAG_PATTERN.sub('', str(text))


def sanitize_text(text: str | None, max_length: int = MAX_TEXT_LENGTH) -> str:
    """
    Strip tags and truncate free text for storage.

    Args:
        text: Raw text
        max_length: Maximum number of characters kept

    Returns:
        Sanitized text
    """
    return strip_tags(text)[:max_length]


def sanitize_image_path(path) -> str | None:
    """
    Validate an image path such as ``/abc123.jpg``.

    Anything that is not a single rooted segment of safe characters
    (including relative paths, URLs and non-strings) becomes None.
    """
    if not isinstance(path, str):
        return None
    if not IMAGE_PATH_PATTERN.match(path):
        return None
    return path


def clamp(value: float, lower: float, upper: float) -> float:
    """Clamp value into [lower, upper]; NaN maps to lower, infinities to the nearer bound."""
    if isinstance(value, float) and math.isnan(value):
        return lower
    return max(lower, min(upper, value))
