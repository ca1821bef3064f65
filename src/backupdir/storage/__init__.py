"""Storage building blocks for backup directory resolution.

This module provides filesystem access, storage model detection, volume
selection and path normalization, along with the backup category
definitions that name the reserved directories.
"""

from backupdir.storage.backend import StorageBackend
from backupdir.storage.categories import (
    CATEGORY_TAGS,
    BackupCategory,
    get_backup_category,
)
from backupdir.storage.model import StorageModel, StorageModelDetector, detect_model
from backupdir.storage.normalizer import PathNormalizer
from backupdir.storage.volumes import StorageRoot, VolumeSelector

__all__ = [
    "StorageBackend",
    "BackupCategory",
    "CATEGORY_TAGS",
    "get_backup_category",
    "StorageModel",
    "StorageModelDetector",
    "detect_model",
    "PathNormalizer",
    "StorageRoot",
    "VolumeSelector",
]
