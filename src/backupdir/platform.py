"""Platform collaborators consumed by the resolver.

The resolver never talks to the operating system's storage APIs directly.
It goes through a StoragePlatform, which reports the capability tier,
enumerates external roots, describes volumes and turns user-granted
directory handles into filesystem paths.
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, List, Optional

from backupdir.errors import HandleUnresolvableError
from backupdir.storage.volumes import StorageRoot
from backupdir.utils import (
    PRIMARY_VOLUME_ID,
    VolumeRecord,
    get_document_id,
    split_document_id,
)

if TYPE_CHECKING:
    from backupdir.config import ResolverConfig

logger = logging.getLogger(__name__)


class StoragePlatform(ABC):
    """Abstract base class for platform storage capabilities.

    Implementations are responsible for:
    1. Reporting the platform capability tier (version)
    2. Providing the default external storage root
    3. Enumerating all external storage roots
    4. Looking up volume descriptions by volume id
    5. Resolving directory handles to filesystem paths

    Examples:
        Minimal in-memory implementation:
        >>> class FixedPlatform(StoragePlatform):
        ...     version = 29
        ...
        ...     def default_external_root(self):
        ...         return StorageRoot(Path('/sdcard'))
        ...
        ...     def list_external_roots(self):
        ...         return [self.default_external_root()]
        ...
        ...     def lookup_volume_description(self, volume_id):
        ...         return None
        ...
        ...     def resolve_handle_to_path(self, handle):
        ...         raise HandleUnresolvableError(handle)
    """

    @property
    @abstractmethod
    def version(self) -> int:
        """Platform capability tier. Monotonic and read-only."""
        pass

    @abstractmethod
    def default_external_root(self) -> Optional[StorageRoot]:
        """Get the single default external storage root.

        Returns:
            StorageRoot, or None if the platform has no external storage
        """
        pass

    @abstractmethod
    def list_external_roots(self) -> List[Optional[StorageRoot]]:
        """Enumerate external storage roots in platform order.

        Entries may be None for volumes that are currently unavailable.
        """
        pass

    @abstractmethod
    def lookup_volume_description(self, volume_id: str) -> Optional[str]:
        """Get the human readable description of a volume, if known."""
        pass

    @abstractmethod
    def resolve_handle_to_path(self, handle: str) -> Path:
        """Resolve a user-granted directory handle to a filesystem path.

        Raises:
            HandleUnresolvableError: If the handle is invalid or revoked
        """
        pass


class LocalPlatform(StoragePlatform):
    """StoragePlatform backed by a local filesystem and a ResolverConfig.

    Volumes are declared in the configuration with their uuid, description
    and mount path. Handles are tree URIs or bare document ids of the form
    '<volume>:<relative path>', where the 'primary' volume is the default
    external storage directory.

    Examples:
        >>> platform = LocalPlatform(ResolverConfig(external_storage_dir='/sdcard'))
        >>> platform.resolve_handle_to_path('primary:Documents')
        PosixPath('/sdcard/Documents')
    """

    def __init__(self, config: "ResolverConfig"):
        self.config = config

    @property
    def version(self) -> int:
        return self.config.platform_version

    def default_external_root(self) -> Optional[StorageRoot]:
        if self.config.external_storage_dir is None:
            return None
        return StorageRoot(
            path=Path(self.config.external_storage_dir),
            description="Internal storage",
        )

    def list_external_roots(self) -> List[Optional[StorageRoot]]:
        # The default root is the primary volume and never removable, so it
        # is left out whatever its path looks like
        roots: List[Optional[StorageRoot]] = []
        for volume in self.config.volumes:
            if not volume.get("removable", True):
                continue
            roots.append(self._volume_root(volume))
        return roots

    def lookup_volume_description(self, volume_id: str) -> Optional[str]:
        volume = self._find_volume(volume_id)
        if volume is None:
            return None
        return volume.get("description")

    def resolve_handle_to_path(self, handle: str) -> Path:
        if not handle:
            raise HandleUnresolvableError("No directory handle provided")

        document_id = get_document_id(handle)
        volume_id, relative = split_document_id(document_id)

        if volume_id == PRIMARY_VOLUME_ID:
            base = self.config.external_storage_dir
        else:
            volume = self._find_volume(volume_id)
            base = volume.get("path") if volume is not None else None

        if base is None:
            logger.warning(f"Unknown volume '{volume_id}' in handle {handle}")
            raise HandleUnresolvableError(
                f"Handle refers to unknown volume '{volume_id}': {handle}"
            )

        relative_path = Path(relative)
        if relative_path.is_absolute() or ".." in relative_path.parts:
            logger.warning(f"Handle {handle} points outside volume '{volume_id}'")
            raise HandleUnresolvableError(
                f"Handle path escapes volume '{volume_id}': {handle}"
            )

        path = Path(base) / relative_path
        if not path.is_dir():
            logger.warning(f"Handle {handle} points to missing directory {path}")
            raise HandleUnresolvableError(
                f"Directory for handle {handle} is not accessible: {path}"
            )
        return path

    def _find_volume(self, volume_id: str) -> Optional[VolumeRecord]:
        for volume in self.config.volumes:
            if volume.get("uuid") == volume_id:
                return volume
        return None

    @staticmethod
    def _volume_root(volume: VolumeRecord) -> Optional[StorageRoot]:
        path = volume.get("path")
        if not path or not Path(path).is_dir():
            # Unmounted volumes are reported as missing entries
            return None
        return StorageRoot(path=Path(path), description=volume.get("description", ""))
