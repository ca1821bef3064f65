"""Utility functions and naming constants for backupdir."""

from pathlib import Path
from typing import Optional, Tuple, Union
from urllib.parse import unquote, urlparse

from typing_extensions import TypedDict

# Directory naming scheme constants
PRODUCTION_PACKAGE_ID = "org.thoughtcrime.securesms"
APP_DIR_NAME = "Signal"
BACKUPS_DIR_NAME = "Backups"
FULL_BACKUPS_DIR_NAME = "FullBackups"
PLAINTEXT_BACKUPS_DIR_NAME = "PlaintextBackups"

# Path fragment marking the primary (internal) storage alias
EMULATED_MARKER = "emulated"

# Platform capability tiers
MULTI_VOLUME_MIN_VERSION = 19
SCOPED_STORAGE_MIN_VERSION = 30

# Volume tag used by document ids on primary storage
PRIMARY_VOLUME_ID = "primary"

# Bidirectional override characters that can spoof displayed file names
LEFT_TO_RIGHT_OVERRIDE = "\u202d"
RIGHT_TO_LEFT_OVERRIDE = "\u202e"
REPLACEMENT_CHARACTER = "\ufffd"


class VolumeRecord(TypedDict, total=False):
    """Configuration entry describing one storage volume."""

    uuid: str  # Stable volume identity, e.g. 'AB12-34CD'
    description: str  # Human readable label, e.g. 'SD Card'
    path: str  # Mount point on the local filesystem
    removable: bool  # True for secondary (ejectable) media


def package_suffix(package_id: Optional[str]) -> Optional[str]:
    """Get the namespacing segment for a build-variant package identity.

    A variant identity extends the production identity with a dotted
    suffix. Everything after that first extra dot is the suffix, kept as a
    single segment even if it contains more dots.

    Args:
        package_id: Build-variant identifier

    Returns:
        Suffix string, or None for the production identity (or unrelated ids)

    Examples:
        >>> package_suffix('org.thoughtcrime.securesms.staging')
        'staging'
        >>> package_suffix('org.thoughtcrime.securesms') is None
        True
        >>> package_suffix('org.thoughtcrime.securesms.beta.debug')
        'beta.debug'
    """
    if not package_id:
        return None

    prefix = PRODUCTION_PACKAGE_ID + "."
    if not package_id.startswith(prefix):
        return None

    suffix = package_id[len(prefix) :]
    return suffix or None


def is_emulated_path(path: Union[str, Path]) -> bool:
    """Check whether a path denotes the primary internal storage alias.

    Args:
        path: Path to check

    Returns:
        True if the path contains the emulated-storage marker

    Examples:
        >>> is_emulated_path('/storage/emulated/0')
        True
        >>> is_emulated_path('/storage/AB12-34CD')
        False
    """
    return EMULATED_MARKER in str(path)


def clean_file_name(file_name: Optional[str]) -> Optional[str]:
    """Neutralize bidirectional override characters in a file name.

    Args:
        file_name: Name to clean (None passes through)

    Returns:
        Name with U+202D and U+202E replaced by U+FFFD

    Examples:
        >>> clean_file_name('backup\\u202egpj.exe')
        'backup\\ufffdgpj.exe'
        >>> clean_file_name(None) is None
        True
    """
    if file_name is None:
        return None

    file_name = file_name.replace(LEFT_TO_RIGHT_OVERRIDE, REPLACEMENT_CHARACTER)
    file_name = file_name.replace(RIGHT_TO_LEFT_OVERRIDE, REPLACEMENT_CHARACTER)
    return file_name


def is_content_uri(handle: str) -> bool:
    """Check if a handle is a content:// URI rather than a bare document id."""
    return handle.startswith("content://")


def get_document_id(handle: str) -> str:
    """Extract the document id from a directory handle.

    Content URIs carry the id percent-encoded in their last path segment.
    Anything else is taken to already be a document id.

    Args:
        handle: Tree/document URI or bare document id

    Returns:
        Decoded document id (empty string if the URI has no path)

    Examples:
        >>> get_document_id(
        ...     'content://com.android.externalstorage.documents/tree/AB12%3ABackups'
        ... )
        'AB12:Backups'
        >>> get_document_id('primary:Documents')
        'primary:Documents'
    """
    if not is_content_uri(handle):
        return handle

    segments = [s for s in urlparse(handle).path.split("/") if s]
    if not segments:
        return ""
    return unquote(segments[-1])


def split_document_id(document_id: str) -> Tuple[str, str]:
    """Split a document id into its volume tag and relative path.

    The volume tag runs up to the first colon; the rest is the path on
    that volume. Ids without a colon are treated as a bare volume.

    Examples:
        >>> split_document_id('primary:Documents/Backups')
        ('primary', 'Documents/Backups')
        >>> split_document_id('AB12-34CD')
        ('AB12-34CD', '')
    """
    volume, _, relative = document_id.partition(":")
    return volume, relative
