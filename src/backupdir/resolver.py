"""Backup directory resolution.

BackupDirectoryResolver ties the storage model detector, the volume
selector and the path normalizer together. Every call recomputes the
target from the current platform state, checks that the storage medium is
writable and creates the directory on demand.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, List, Optional, Union

from backupdir.errors import (
    DirectoryCreationFailedError,
    HandleUnresolvableError,
    StorageError,
    StorageUnavailableError,
)
from backupdir.platform import LocalPlatform, StoragePlatform
from backupdir.storage.backend import StorageBackend
from backupdir.storage.categories import BackupCategory, get_backup_category
from backupdir.storage.model import StorageModel, StorageModelDetector
from backupdir.storage.normalizer import PathNormalizer
from backupdir.storage.volumes import StorageRoot, VolumeSelector
from backupdir.utils import (
    PRODUCTION_PACKAGE_ID,
    get_document_id,
    split_document_id,
)

if TYPE_CHECKING:
    from backupdir.config import ResolverConfig

logger = logging.getLogger(__name__)

__all__ = [
    "BackupDirectoryResolver",
    "ResolvedDirectory",
    "StorageError",
    "StorageUnavailableError",
    "DirectoryCreationFailedError",
    "HandleUnresolvableError",
]


@dataclass(frozen=True)
class ResolvedDirectory:
    """A backup directory that existed and was writable when resolved.

    Never cached or persisted: storage availability can change at any
    time, so resolve again before each use.

    Attributes:
        root: Storage root the directory lives on
        path: Full path of the backup directory
        category: Backup category (None for the legacy application root)
        model: Storage model used for resolution
    """

    root: StorageRoot
    path: Path
    category: Optional[BackupCategory]
    model: StorageModel

    def __fspath__(self) -> str:
        return str(self.path)

    def to_dict(self) -> dict:
        """Plain representation for JSON output."""
        return {
            "path": str(self.path),
            "root": str(self.root.path) if self.root.path is not None else None,
            "handle": self.root.handle,
            "description": self.root.description,
            "category": self.category.directory if self.category else None,
            "model": self.model.value,
        }


class BackupDirectoryResolver:
    """Resolves and creates backup directories.

    Provides the public resolution operations:
    - resolve_full_backup_directory / resolve_plaintext_backup_directory
    - resolve_legacy_backup_directory (fixed default-root scheme)
    - resolve_legacy_backup_root_directory (application root only)

    Examples:
        >>> resolver = BackupDirectoryResolver(platform)
        >>> resolved = resolver.resolve_full_backup_directory('primary:Backups')
        >>> resolved.path
        PosixPath('/storage/emulated/0/FullBackups')
    """

    def __init__(
        self,
        platform: StoragePlatform,
        package_id: Optional[str] = PRODUCTION_PACKAGE_ID,
        storage: Optional[StorageBackend] = None,
        sort_candidates: bool = False,
    ):
        """Initialize resolver.

        Args:
            platform: Platform storage capabilities
            package_id: Build-variant identity used for namespacing
            storage: Filesystem backend (a default one is created if None)
            sort_candidates: Pick removable volumes in path order
        """
        self.platform = platform
        self.package_id = package_id
        self.storage = storage or StorageBackend()
        self.detector = StorageModelDetector(platform)
        self.selector = VolumeSelector(platform, sort_candidates=sort_candidates)
        self.normalizer = PathNormalizer(package_id)

    @classmethod
    def from_config(cls, config: "ResolverConfig") -> "BackupDirectoryResolver":
        """Create a resolver over the local filesystem described by a config.

        Args:
            config: Resolver configuration

        Returns:
            BackupDirectoryResolver using a LocalPlatform
        """
        return cls(
            LocalPlatform(config),
            package_id=config.package_id,
            sort_candidates=config.sort_candidates,
        )

    # =========================================================================
    # Public resolution operations
    # =========================================================================

    def resolve_plaintext_backup_directory(
        self, handle: Optional[str] = None, prefer_removable: Optional[bool] = None
    ) -> ResolvedDirectory:
        """Resolve the directory for plaintext backups.

        Args:
            handle: User-granted directory handle (required for scoped storage)
            prefer_removable: Prefer removable storage (legacy storage only)

        Returns:
            ResolvedDirectory ending in PlaintextBackups[/<suffix>]

        Raises:
            StorageUnavailableError: If no writable root is available
            HandleUnresolvableError: If the handle cannot be resolved
            DirectoryCreationFailedError: If the directory cannot be created
        """
        return self._resolve_category(
            BackupCategory.PLAINTEXT_BACKUP, handle, prefer_removable
        )

    def resolve_full_backup_directory(
        self, handle: Optional[str] = None, prefer_removable: Optional[bool] = None
    ) -> ResolvedDirectory:
        """Resolve the directory for full backups.

        Args:
            handle: User-granted directory handle (required for scoped storage)
            prefer_removable: Prefer removable storage (legacy storage only)

        Returns:
            ResolvedDirectory ending in FullBackups[/<suffix>]

        Raises:
            StorageUnavailableError: If no writable root is available
            HandleUnresolvableError: If the handle cannot be resolved
            DirectoryCreationFailedError: If the directory cannot be created
        """
        return self._resolve_category(
            BackupCategory.FULL_BACKUP, handle, prefer_removable
        )

    def resolve_legacy_backup_directory(self) -> ResolvedDirectory:
        """Resolve the legacy backup directory on the default root.

        Always <default root>/Signal/Backups[/<suffix>], whatever the
        storage model or removability preference.

        Raises:
            StorageUnavailableError: If the default root is missing or read-only
            DirectoryCreationFailedError: If the directory cannot be created
        """
        root = self.selector.default_root()
        self._check_writable(root.path, invalidate=True)

        app_root = self.normalizer.normalize_legacy_root(root.path)
        path = self.normalizer.backup_path(app_root, BackupCategory.LEGACY_BACKUP)
        self._ensure_directory(path)
        return ResolvedDirectory(
            root=root,
            path=path,
            category=BackupCategory.LEGACY_BACKUP,
            model=StorageModel.LEGACY,
        )

    def resolve_legacy_backup_root_directory(
        self, prefer_removable: Optional[bool] = None
    ) -> ResolvedDirectory:
        """Resolve the Signal application root used by flattened legacy layouts.

        No category directory and no namespace segment are appended.

        Args:
            prefer_removable: Prefer removable storage

        Raises:
            StorageUnavailableError: If no writable root is available
            DirectoryCreationFailedError: If the directory cannot be created
        """
        root = self._select_writable_root(prefer_removable)
        path = self.normalizer.normalize_legacy_root(root.path)
        self._ensure_directory(path)
        return ResolvedDirectory(
            root=root, path=path, category=None, model=StorageModel.LEGACY
        )

    def resolve(
        self,
        category: Union[BackupCategory, str],
        handle: Optional[str] = None,
        prefer_removable: Optional[bool] = None,
    ) -> ResolvedDirectory:
        """Resolve the directory for any backup category.

        The legacy category ignores handle and prefer_removable.

        Args:
            category: BackupCategory or tag ('full', 'plaintext', 'legacy')
            handle: User-granted directory handle
            prefer_removable: Prefer removable storage

        Raises:
            KeyError: If a category tag is not recognized
        """
        if isinstance(category, str):
            category = get_backup_category(category)

        if category is BackupCategory.LEGACY_BACKUP:
            return self.resolve_legacy_backup_directory()
        return self._resolve_category(category, handle, prefer_removable)

    # =========================================================================
    # Read-only helpers
    # =========================================================================

    def can_write_to_default_storage(self) -> bool:
        """Check whether the default external storage root is writable.

        Returns:
            False if the root is missing or read-only
        """
        try:
            root = self.selector.default_root()
        except StorageUnavailableError:
            return False

        writable = self.storage.can_write(root.path)
        if not writable:
            self.selector.invalidate()
        return writable

    def legacy_read_candidates(self) -> List[Path]:
        """List existing directories of both legacy layouts on the default root.

        The nested layout (Signal/Backups[/<suffix>]) comes first because it
        is the one written by resolve_legacy_backup_directory(); the
        flattened layout (Signal, or <suffix> directly on the root for
        variant builds) is only ever read. Nothing is created.

        Returns:
            Existing legacy directories, write target first

        Raises:
            StorageUnavailableError: If the platform has no default root
        """
        root = self.selector.default_root()
        app_root = self.normalizer.normalize_legacy_root(root.path)
        layouts = [
            self.normalizer.backup_path(app_root, BackupCategory.LEGACY_BACKUP),
            self.normalizer.flattened_legacy_root(root.path),
        ]
        return [path for path in layouts if self.storage.is_dir(path)]

    # =========================================================================
    # Internals
    # =========================================================================

    def _resolve_category(
        self,
        category: BackupCategory,
        handle: Optional[str],
        prefer_removable: Optional[bool],
    ) -> ResolvedDirectory:
        model = self.detector.detect_model()
        logger.debug(f"Resolving {category.directory} using {model.value} storage")

        if model is StorageModel.LEGACY:
            if handle is not None:
                logger.debug("Ignoring directory handle on legacy storage")
            root = self._select_writable_root(prefer_removable)
            app_root = self.normalizer.normalize_legacy_root(root.path)
        else:
            root = self._handle_root(handle)
            app_root = self.normalizer.normalize_handle_root(root.path)
            self._check_writable(app_root)

        path = self.normalizer.backup_path(app_root, category)
        self._ensure_directory(path)
        return ResolvedDirectory(root=root, path=path, category=category, model=model)

    def _select_writable_root(self, prefer_removable: Optional[bool]) -> StorageRoot:
        root = self.selector.select_root(prefer_removable)
        if self.storage.can_write(root.path):
            return root

        default = self.selector.default_root()
        if root != default:
            # A read-only removable volume is treated like a missing one
            logger.warning(
                f"Removable storage {root.path} is not writable, "
                f"falling back to {default.path}"
            )
            self._check_writable(default.path, invalidate=True)
            return default

        self._check_writable(root.path, invalidate=True)
        return root

    def _handle_root(self, handle: Optional[str]) -> StorageRoot:
        if not handle:
            logger.error("Scoped storage requires a directory handle")
            raise HandleUnresolvableError("No directory handle provided")

        try:
            path = self.platform.resolve_handle_to_path(handle)
        except HandleUnresolvableError:
            logger.error(f"Could not resolve directory handle {handle}")
            raise

        description = self.platform.lookup_volume_description(
            handle_volume_id(handle)
        )
        return StorageRoot(path=path, handle=handle, description=description or "")

    def _check_writable(self, path: Optional[Path], invalidate: bool = False) -> None:
        if path is not None and self.storage.can_write(path):
            return

        if invalidate:
            self.selector.invalidate()
        logger.error(f"Storage at {path} is not writable")
        raise StorageUnavailableError(f"Storage is not writable: {path}")

    def _ensure_directory(self, path: Path) -> None:
        try:
            self.storage.mkdir(path, parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"Unable to create backup directory {path}: {e}")
            raise DirectoryCreationFailedError(
                f"Unable to create backup directory {path}: {e}"
            ) from e


def handle_volume_id(handle: str) -> str:
    """Get the volume tag of a directory handle."""
    return split_document_id(get_document_id(handle))[0]
