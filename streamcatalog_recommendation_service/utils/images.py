"""Image URL helpers for posters and backdrops."""
from typing import Optional

from streamcatalog_recommendation_service.utils.device import DeviceProfile

IMAGE_BASE_URL = "https://image.tmdb.org/t/p"

POSTER_SIZES = ("w300", "w500", "w780", "original")
BACKDROP_SIZES = ("w780", "w1280", "original")

# Next size down for low-end devices
LITE_SIZES = {
    "original": "w780",
    "w1280": "w780",
    "w780": "w500",
    "w500": "w300",
}


def _build_url(path: Optional[str], size: str, profile: Optional[DeviceProfile]) -> Optional[str]:
    if not path:
        return None
    if profile is not None and profile.is_low_end:
        size = LITE_SIZES.get(size, size)
    return f"{IMAGE_BASE_URL}/{size}{path}"


def get_image_url(path: Optional[str], size: str = "w500", profile: Optional[DeviceProfile] = None) -> Optional[str]:
    """
    Poster URL for an image path.

    Args:
        path: Image path such as '/abc.jpg' (None/empty -> None)
        size: One of POSTER_SIZES
        profile: Device profile; low-end devices get the next smaller size

    Returns:
        Absolute URL or None
    """
    if size not in POSTER_SIZES:
        raise ValueError(f"Unsupported poster size: {size}")
    return _build_url(path, size, profile)


def get_backdrop_url(path: Optional[str], size: str = "original", profile: Optional[DeviceProfile] = None) -> Optional[str]:
    """Backdrop URL for an image path; see get_image_url."""
    if size not in BACKDROP_SIZES:
        raise ValueError(f"Unsupported backdrop size: {size}")
    return _build_url(path, size, profile)
