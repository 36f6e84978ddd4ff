"""Device capability profile of the viewer's device."""
import dataclasses
import logging
from dataclasses import dataclass
from typing import Mapping, Optional

from streamcatalog_recommendation_service.config import get_device_memory_gb, get_lite_mode

logger = logging.getLogger(__name__)

LOW_END_MAX_CPUS = 4
LOW_END_MIN_MEMORY_GB = 4

# Client hint headers sent by the viewer's browser
DEVICE_MEMORY_HEADER = "Device-Memory"
HARDWARE_CONCURRENCY_HEADER = "Sec-CH-Hardware-Concurrency"


@dataclass(frozen=True)
class DeviceProfile:
    """
    What the viewer's device can handle.

    Attributes:
        lite_mode: Manual preference; overrides the hardware hints when set
        cpu_count: Logical CPUs of the viewer's device, if known
        memory_gb: Device memory in GB, if known
    """

    lite_mode: Optional[bool] = None
    cpu_count: Optional[int] = None
    memory_gb: Optional[float] = None

    @property
    def is_low_end(self) -> bool:
        if self.lite_mode is not None:
            return self.lite_mode
        if self.cpu_count and self.cpu_count <= LOW_END_MAX_CPUS:
            return True
        if self.memory_gb and self.memory_gb < LOW_END_MIN_MEMORY_GB:
            return True
        return False


def detect_device_profile() -> DeviceProfile:
    """
    Build the deployment-wide DeviceProfile from config.

    The serving host's hardware says nothing about the viewer's device,
    so only LITE_MODE and DEVICE_MEMORY_GB are consulted.
    """
    return DeviceProfile(
        lite_mode=get_lite_mode(),
        memory_gb=get_device_memory_gb(),
    )


def _parse_hint(value, cast):
    if value is None:
        return None
    try:
        return cast(value)
    except ValueError:
        logger.warning(f"Ignoring invalid client hint value: {value!r}")
        return None


def profile_for_request(headers: Mapping[str, str], base: DeviceProfile) -> DeviceProfile:
    """
    Refine a profile with the client hints of one request.

    Args:
        headers: Request headers
        base: Deployment-wide profile; a configured lite mode always wins

    Returns:
        DeviceProfile for the requesting device
    """
    if base.lite_mode is not None:
        return base

    memory_gb = _parse_hint(headers.get(DEVICE_MEMORY_HEADER), float)
    cpu_count = _parse_hint(headers.get(HARDWARE_CONCURRENCY_HEADER), int)
    if memory_gb is None and cpu_count is None:
        return base

    return dataclasses.replace(
        base,
        memory_gb=memory_gb if memory_gb is not None else base.memory_gb,
        cpu_count=cpu_count if cpu_count is not None else base.cpu_count,
    )
