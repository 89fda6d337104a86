"""Native substrate access for Spotlight metadata queries."""
import sys
from functools import lru_cache

from spotlight.errors import UnsupportedPlatformError
from spotlight.native.types import (
    DISPLAY_NAME_ATTRIBUTE,
    NativeObserver,
    NativeQuery,
    NotificationCenter,
    NotificationKind,
    RunLoop,
    RunLoopStatus,
    Substrate,
)

__all__ = [
    "DISPLAY_NAME_ATTRIBUTE",
    "NativeObserver",
    "NativeQuery",
    "NotificationCenter",
    "NotificationKind",
    "RunLoop",
    "RunLoopStatus",
    "Substrate",
    "get_substrate",
]


@lru_cache(maxsize=1)
def get_substrate() -> Substrate:
    """Return the process-wide Cocoa substrate.

    Returns:
        Substrate backed by NSMetadataQuery.

    Raises:
        UnsupportedPlatformError: If not on macOS or PyObjC is missing.
    """
    if sys.platform != "darwin":
        raise UnsupportedPlatformError(
            f"Spotlight queries require macOS, running on {sys.platform}"
        )
    try:
        from spotlight.native.cocoa import CocoaSubstrate
    except ImportError as e:
        raise UnsupportedPlatformError(
            "pyobjc-framework-Cocoa is required for Spotlight queries"
        ) from e
    return CocoaSubstrate()
