"""Backup category definitions for directory organization.

This module defines the backup categories used to organize backup artifacts
under the application storage root. Each category maps to a reserved
subdirectory name.
"""

from enum import Enum
from typing import Dict

from backupdir.utils import (
    BACKUPS_DIR_NAME,
    FULL_BACKUPS_DIR_NAME,
    PLAINTEXT_BACKUPS_DIR_NAME,
)


class BackupCategory(Enum):
    """Backup categories for organizing stored artifacts.

    Each category represents a purpose-based grouping of backups
    and maps to a reserved subdirectory under the application root.

    Categories:
        FULL_BACKUP: Complete (encrypted) backups
        PLAINTEXT_BACKUP: Plaintext message exports
        LEGACY_BACKUP: Pre-scoped-storage backup directory

    Examples:
        >>> BackupCategory.FULL_BACKUP.directory
        'FullBackups'

        >>> BackupCategory.LEGACY_BACKUP.directory
        'Backups'
    """

    FULL_BACKUP = FULL_BACKUPS_DIR_NAME
    PLAINTEXT_BACKUP = PLAINTEXT_BACKUPS_DIR_NAME
    LEGACY_BACKUP = BACKUPS_DIR_NAME

    @property
    def directory(self) -> str:
        """Get the directory name for this category.

        Returns:
            Directory name as string

        Examples:
            >>> BackupCategory.PLAINTEXT_BACKUP.directory
            'PlaintextBackups'
        """
        return self.value


# Mapping from user-facing tag to backup category
# This is the single source of truth for the tags accepted by the CLI
CATEGORY_TAGS: Dict[str, BackupCategory] = {
    "full": BackupCategory.FULL_BACKUP,
    "plaintext": BackupCategory.PLAINTEXT_BACKUP,
    "legacy": BackupCategory.LEGACY_BACKUP,
}


def get_backup_category(tag: str) -> BackupCategory:
    """Get the backup category for a given tag.

    Args:
        tag: Category tag (e.g., 'full')

    Returns:
        BackupCategory enum value

    Raises:
        KeyError: If tag is not recognized

    Examples:
        >>> get_backup_category('full')
        <BackupCategory.FULL_BACKUP: 'FullBackups'>

        >>> get_backup_category('plaintext')
        <BackupCategory.PLAINTEXT_BACKUP: 'PlaintextBackups'>
    """
    return CATEGORY_TAGS[tag]
