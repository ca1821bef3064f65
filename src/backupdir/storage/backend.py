"""Storage backend for directory-level filesystem operations.

This module provides the small set of filesystem checks the resolver needs:
directory checks, writability and idempotent recursive directory creation.
"""

import logging
import os
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)


class StorageBackend:
    """Handles all filesystem access for backup directory resolution.

    Provides a unified interface for:
    - Directory checks (is_dir)
    - Writability checks (can_write)
    - Directory creation (mkdir, idempotent)

    Examples:
        >>> storage = StorageBackend()
        >>> storage.mkdir('/sdcard/Signal/FullBackups')
        >>> storage.can_write('/sdcard')
        True
    """

    def is_dir(self, path: Union[str, Path]) -> bool:
        """Check if a path is an existing directory."""
        return Path(path).is_dir()

    def can_write(self, path: Union[str, Path]) -> bool:
        """Check if a directory exists and the current process may write to it.

        Args:
            path: Directory to check

        Returns:
            True if the directory exists and is writable

        Examples:
            >>> storage = StorageBackend()
            >>> storage.can_write('/proc')
            False
        """
        path = Path(path)
        return path.is_dir() and os.access(path, os.W_OK | os.X_OK)

    def mkdir(
        self, path: Union[str, Path], parents: bool = True, exist_ok: bool = True
    ) -> None:
        """Create a directory.

        Creating a directory that already exists is not an error when
        exist_ok is True, so concurrent callers racing on the same path
        both succeed.

        Args:
            path: Directory path to create
            parents: Create parent directories if needed
            exist_ok: Don't error if directory exists

        Raises:
            OSError: If the directory cannot be created

        Examples:
            >>> storage = StorageBackend()
            >>> storage.mkdir('/sdcard/Signal/Backups')
        """
        logger.debug(f"Creating directory {path}")
        Path(path).mkdir(parents=parents, exist_ok=exist_ok)
