"""Exceptions raised while resolving backup directories."""


class StorageError(Exception):
    """Base exception for backup storage resolution errors."""

    pass


class StorageUnavailableError(StorageError):
    """Raised when no writable storage root can be obtained."""

    pass


class DirectoryCreationFailedError(StorageError):
    """Raised when the root is writable but the backup path cannot be created."""

    pass


class HandleUnresolvableError(StorageError):
    """Raised when a user-granted directory handle cannot be mapped to a path."""

    pass
