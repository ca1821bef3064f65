"""Resolver configuration management."""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from backupdir.utils import (
    PRODUCTION_PACKAGE_ID,
    SCOPED_STORAGE_MIN_VERSION,
    VolumeRecord,
)

DEFAULT_CONFIG_PATH = Path.home() / ".backupdir" / "config.json"
DEFAULT_EXTERNAL_STORAGE_DIR = Path("/storage/emulated/0")


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class ResolverConfig:
    """Configuration for backup directory resolution.

    Holds the persisted inputs the resolver is called with: the platform
    tier, the build-variant identity and the removability preference, plus
    the storage layout used by LocalPlatform.

    Attributes:
        platform_version: Platform capability tier
        package_id: Build-variant package identity
        prefer_removable: Persisted removability preference (None = unset)
        external_storage_dir: Default external storage root
        volumes: Known storage volumes (uuid, description, path, removable)
        sort_candidates: Pick removable volumes in path order instead of
            enumeration order
    """

    platform_version: int = SCOPED_STORAGE_MIN_VERSION
    package_id: str = PRODUCTION_PACKAGE_ID
    prefer_removable: Optional[bool] = None
    external_storage_dir: Optional[Path] = DEFAULT_EXTERNAL_STORAGE_DIR
    volumes: List[VolumeRecord] = field(default_factory=list)
    sort_candidates: bool = False

    def __post_init__(self):
        """Ensure external_storage_dir is a Path object."""
        if self.external_storage_dir is not None and not isinstance(
            self.external_storage_dir, Path
        ):
            self.external_storage_dir = Path(self.external_storage_dir).expanduser()

    @property
    def removability_preference(self) -> bool:
        """Removability preference with the unset state mapped to False."""
        return bool(self.prefer_removable)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "ResolverConfig":
        """Load configuration from file.

        Args:
            config_path: Path to config file. If None, uses default location.

        Returns:
            ResolverConfig instance (defaults if the file does not exist)
        """
        if config_path is None:
            config_path = DEFAULT_CONFIG_PATH
        config_path = Path(config_path)

        if not config_path.exists():
            return cls()

        with open(config_path, "r") as f:
            data = json.load(f)

        if data.get("external_storage_dir") is not None:
            data["external_storage_dir"] = Path(data["external_storage_dir"])

        return cls(**data)

    def save(self, config_path: Optional[Path] = None) -> None:
        """Save configuration to file.

        Args:
            config_path: Path to config file. If None, uses default location.
        """
        if config_path is None:
            config_path = DEFAULT_CONFIG_PATH
        config_path = Path(config_path)

        config_path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            "platform_version": self.platform_version,
            "package_id": self.package_id,
            "prefer_removable": self.prefer_removable,
            "external_storage_dir": (
                str(self.external_storage_dir)
                if self.external_storage_dir is not None
                else None
            ),
            "volumes": [dict(volume) for volume in self.volumes],
            "sort_candidates": self.sort_candidates,
        }

        with open(config_path, "w") as f:
            json.dump(data, f, indent=2)

    @classmethod
    def from_env(cls) -> "ResolverConfig":
        """Create configuration from environment variables.

        Environment variables:
            BACKUPDIR_PLATFORM_VERSION: Platform capability tier
            BACKUPDIR_PACKAGE_ID: Build-variant package identity
            BACKUPDIR_PREFER_REMOVABLE: Prefer removable storage (true/false)
            BACKUPDIR_EXTERNAL_STORAGE: Default external storage root

        Returns:
            ResolverConfig instance
        """
        config = cls()

        if os.getenv("BACKUPDIR_PLATFORM_VERSION"):
            config.platform_version = int(os.getenv("BACKUPDIR_PLATFORM_VERSION"))

        if os.getenv("BACKUPDIR_PACKAGE_ID"):
            config.package_id = os.getenv("BACKUPDIR_PACKAGE_ID")

        if os.getenv("BACKUPDIR_PREFER_REMOVABLE"):
            config.prefer_removable = _parse_bool(
                os.getenv("BACKUPDIR_PREFER_REMOVABLE")
            )

        if os.getenv("BACKUPDIR_EXTERNAL_STORAGE"):
            config.external_storage_dir = Path(
                os.getenv("BACKUPDIR_EXTERNAL_STORAGE")
            ).expanduser()

        return config


# Global resolver configuration instance
_global_config: Optional[ResolverConfig] = None


def get_global_config() -> ResolverConfig:
    """Get global resolver configuration.

    Returns:
        Global ResolverConfig instance
    """
    global _global_config
    if _global_config is None:
        # Try loading from file, then env, then defaults
        try:
            _global_config = ResolverConfig.load()
        except (OSError, ValueError, TypeError):
            _global_config = ResolverConfig.from_env()
    return _global_config


def set_global_config(config: Optional[ResolverConfig]) -> None:
    """Set global resolver configuration.

    Args:
        config: ResolverConfig instance to use globally (None resets it)
    """
    global _global_config
    _global_config = config
