"""Storage root selection across internal and removable volumes."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, List, Optional

from backupdir.errors import StorageUnavailableError
from backupdir.storage.model import supports_multi_volume
from backupdir.utils import is_emulated_path

if TYPE_CHECKING:
    from backupdir.platform import StoragePlatform

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StorageRoot:
    """Identifier for a storage location.

    Either a direct filesystem path or an opaque handle, plus a human
    readable description. A root may become unavailable at any time, so
    callers revalidate it on every use.

    Attributes:
        path: Filesystem path of the root (None for handle-only roots)
        handle: Opaque directory handle the root was obtained from
        description: Human readable label (e.g., 'SD Card')
    """

    path: Optional[Path] = None
    handle: Optional[str] = None
    description: str = ""

    def __post_init__(self):
        """Ensure path is a Path object."""
        if self.path is not None and not isinstance(self.path, Path):
            object.__setattr__(self, "path", Path(self.path).expanduser())


class VolumeSelector:
    """Picks the external storage root backups should live on.

    Removable volumes are only a preference: when none is usable the
    selector falls back to the platform's default external root.

    The default root lookup is memoized for the lifetime of the selector.
    Call invalidate() whenever that root turns out to be unusable so the
    next lookup asks the platform again.

    Examples:
        >>> selector = VolumeSelector(platform)
        >>> selector.select_root(prefer_removable=True)
        StorageRoot(path=PosixPath('/storage/AB12-34CD'), ...)
    """

    def __init__(self, platform: "StoragePlatform", sort_candidates: bool = False):
        """Initialize volume selector.

        Args:
            platform: Platform providing volume enumeration
            sort_candidates: If True, pick the lexically smallest removable
                path instead of the first in enumeration order
        """
        self._platform = platform
        self.sort_candidates = sort_candidates
        self._default_root: Optional[StorageRoot] = None

    def select_root(self, prefer_removable: Optional[bool] = False) -> StorageRoot:
        """Select the storage root for backups.

        Args:
            prefer_removable: Prefer a removable volume if one is available.
                None (unset) behaves like False.

        Returns:
            StorageRoot of a removable volume, or the default external root

        Raises:
            StorageUnavailableError: If the platform has no default root at all
        """
        if prefer_removable and supports_multi_volume(self._platform.version):
            candidate = self._first_removable_root()
            if candidate is not None:
                logger.debug(f"Selected removable storage root {candidate.path}")
                return candidate
            logger.info("No removable storage available, using default root")

        return self.default_root()

    def default_root(self) -> StorageRoot:
        """Get the platform's default external storage root.

        Returns:
            StorageRoot for the default external storage

        Raises:
            StorageUnavailableError: If the platform reports no root
        """
        if self._default_root is None:
            root = self._platform.default_external_root()
            if root is None or root.path is None:
                logger.error("Platform reported no external storage root")
                raise StorageUnavailableError("No external storage root available")
            self._default_root = root
        return self._default_root

    def invalidate(self) -> None:
        """Forget the memoized default root."""
        if self._default_root is not None:
            logger.debug(f"Invalidating cached storage root {self._default_root.path}")
        self._default_root = None

    def removable_candidates(self) -> List[StorageRoot]:
        """List enumerated roots that are not the primary internal alias.

        Returns:
            Candidate roots in enumeration order (or path order if
            sort_candidates is set)
        """
        candidates = [
            root
            for root in self._platform.list_external_roots()
            if root is not None
            and root.path is not None
            and not is_emulated_path(root.path)
        ]
        if self.sort_candidates:
            candidates.sort(key=lambda root: str(root.path))
        return candidates

    def _first_removable_root(self) -> Optional[StorageRoot]:
        candidates = self.removable_candidates()
        return candidates[0] if candidates else None
