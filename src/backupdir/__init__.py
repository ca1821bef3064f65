"""backupdir: Resolve and create backup directories across storage models."""

__version__ = "0.1.0"

from backupdir.resolver import BackupDirectoryResolver, ResolvedDirectory

__all__ = ["BackupDirectoryResolver", "ResolvedDirectory", "__version__"]
