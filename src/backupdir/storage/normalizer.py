"""Derivation of canonical, application-namespaced backup paths.

All string surgery on reserved folder names happens here, so the rest of
the resolver only deals with whole paths. Nothing in this module touches
the filesystem.
"""

from pathlib import Path
from typing import Optional, Union

from backupdir.storage.categories import BackupCategory
from backupdir.utils import APP_DIR_NAME, BACKUPS_DIR_NAME, package_suffix


class PathNormalizer:
    """Builds backup paths from storage roots.

    The layout under a storage root is::

        <root>/Signal/<Category>[/<variant suffix>]      (legacy model)
        <handle path>/<Category>[/<variant suffix>]      (scoped model)

    Examples:
        >>> normalizer = PathNormalizer('org.thoughtcrime.securesms.staging')
        >>> app_root = normalizer.normalize_legacy_root('/sdcard')
        >>> normalizer.backup_path(app_root, BackupCategory.FULL_BACKUP)
        PosixPath('/sdcard/Signal/FullBackups/staging')
    """

    def __init__(self, package_id: Optional[str] = None):
        """Initialize path normalizer.

        Args:
            package_id: Build-variant identity used for namespacing
        """
        self.package_id = package_id

    @staticmethod
    def normalize_legacy_root(root: Union[str, Path]) -> Path:
        """Get the application root on a legacy storage root.

        Args:
            root: External storage root

        Returns:
            root/Signal
        """
        return Path(root) / APP_DIR_NAME

    @staticmethod
    def normalize_handle_root(handle_path: Union[str, Path]) -> Path:
        """Get the application root for a user-chosen directory.

        A chosen folder already named 'Backups' stands for the backup
        container itself, so its parent is used to avoid Backups/Backups.

        Args:
            handle_path: Filesystem path backing the directory handle

        Returns:
            Canonical application root

        Examples:
            >>> PathNormalizer.normalize_handle_root('/sdcard/Documents/Backups')
            PosixPath('/sdcard/Documents')
            >>> PathNormalizer.normalize_handle_root('/sdcard/Documents')
            PosixPath('/sdcard/Documents')
        """
        path = Path(handle_path)
        if path.name == BACKUPS_DIR_NAME:
            return path.parent
        return path

    @staticmethod
    def append_category(app_root: Union[str, Path], category: BackupCategory) -> Path:
        """Append the reserved category directory to an application root."""
        return Path(app_root) / category.directory

    def append_namespace(self, path: Union[str, Path]) -> Path:
        """Append the build-variant segment, if the identity has one.

        Args:
            path: Category (or application root) path

        Returns:
            Path with at most one extra segment
        """
        suffix = package_suffix(self.package_id)
        if suffix is None:
            return Path(path)
        return Path(path) / suffix

    def backup_path(self, app_root: Union[str, Path], category: BackupCategory) -> Path:
        """Build the full backup path for a category under an application root.

        Args:
            app_root: Canonical application root
            category: Backup category

        Returns:
            app_root/<Category>[/<suffix>]
        """
        return self.append_namespace(self.append_category(app_root, category))

    def flattened_legacy_root(self, root: Union[str, Path]) -> Path:
        """Get the directory of the flattened legacy layout on a storage root.

        Production builds used root/Signal directly. Variant builds used a
        sibling directory named after their suffix, root/<suffix>, with no
        Signal segment.

        Examples:
            >>> normalizer = PathNormalizer('org.thoughtcrime.securesms.staging')
            >>> normalizer.flattened_legacy_root('/sdcard')
            PosixPath('/sdcard/staging')
        """
        suffix = package_suffix(self.package_id)
        if suffix is None:
            return self.normalize_legacy_root(root)
        return Path(root) / suffix
