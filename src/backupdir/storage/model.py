"""Storage access model detection."""

from enum import Enum
from typing import TYPE_CHECKING

from backupdir.utils import MULTI_VOLUME_MIN_VERSION, SCOPED_STORAGE_MIN_VERSION

if TYPE_CHECKING:
    from backupdir.platform import StoragePlatform


class StorageModel(Enum):
    """Storage access model active on a platform.

    Models:
        LEGACY: Direct filesystem paths on shared external storage
        SCOPED_HANDLE: Access through a user-granted directory handle
    """

    LEGACY = "legacy"
    SCOPED_HANDLE = "scoped_handle"


def detect_model(platform_version: int) -> StorageModel:
    """Determine the storage model for a platform capability tier.

    Args:
        platform_version: Platform version signal

    Returns:
        StorageModel.LEGACY below the scoped storage tier, else SCOPED_HANDLE

    Examples:
        >>> detect_model(29)
        <StorageModel.LEGACY: 'legacy'>
        >>> detect_model(30)
        <StorageModel.SCOPED_HANDLE: 'scoped_handle'>
    """
    if platform_version < SCOPED_STORAGE_MIN_VERSION:
        return StorageModel.LEGACY
    return StorageModel.SCOPED_HANDLE


def supports_multi_volume(platform_version: int) -> bool:
    """Check if the platform can enumerate more than one external root."""
    return platform_version >= MULTI_VOLUME_MIN_VERSION


class StorageModelDetector:
    """Reports the storage model of a platform.

    All version-threshold checks go through this class so the rest of the
    resolver switches on the returned model instead of on raw versions.
    """

    def __init__(self, platform: "StoragePlatform"):
        self._platform = platform

    def detect_model(self) -> StorageModel:
        return detect_model(self._platform.version)

    def supports_multi_volume(self) -> bool:
        return supports_multi_volume(self._platform.version)
