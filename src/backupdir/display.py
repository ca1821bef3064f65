"""Human-readable labels for directory handles.

Turns an opaque handle such as 'AB12-34CD:Backups' (or the content URI
carrying it) into a label like 'SD Card Backups' for listing in a UI.
Read-only: nothing here touches the filesystem.
"""

from typing import TYPE_CHECKING, Optional, Tuple

from backupdir.utils import clean_file_name, get_document_id

if TYPE_CHECKING:
    from backupdir.platform import StoragePlatform

# Label layout: volume description, then leaf name
DISPLAY_TEMPLATE = "{description} {name}"


def parse_handle_identifier(handle_identifier: str) -> Tuple[str, str]:
    """Split a handle identifier into its volume tag and leaf name.

    The volume tag is everything before the first colon, the leaf name
    everything after the last colon.

    Args:
        handle_identifier: Document id or content URI

    Returns:
        (volume tag, leaf name)

    Examples:
        >>> parse_handle_identifier('AB12:MyBackup.zip')
        ('AB12', 'MyBackup.zip')
        >>> parse_handle_identifier('primary:Documents/Signal:old')
        ('primary', 'old')
    """
    document_id = get_document_id(handle_identifier)
    volume = document_id.split(":", 1)[0]
    name = document_id.rsplit(":", 1)[-1]
    return volume, name


class DisplayPathFormatter:
    """Formatter for user-facing backup location labels.

    Examples:
        >>> formatter = DisplayPathFormatter(platform)
        >>> formatter.format_display_path('AB12:MyBackup.zip')
        'SD Card MyBackup.zip'
    """

    def __init__(self, platform: "StoragePlatform", template: Optional[str] = None):
        """Initialize DisplayPathFormatter.

        Args:
            platform: Platform used to look up volume descriptions
            template: Label template with {description} and {name} fields
        """
        self._platform = platform
        self.template = template or DISPLAY_TEMPLATE

    def format_display_path(self, handle_identifier: str) -> str:
        """Build the display label for a handle.

        Args:
            handle_identifier: Document id ('<volume>:<leaf>') or content URI

        Returns:
            '<description> <leaf>' if the volume is known, else the leaf alone
        """
        volume, name = parse_handle_identifier(handle_identifier)
        name = clean_file_name(name)
        description = self._platform.lookup_volume_description(volume)

        if description is None:
            return name
        return self.template.format(description=description, name=name)
