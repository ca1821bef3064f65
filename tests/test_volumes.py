"""Tests for VolumeSelector storage root selection."""

from pathlib import Path
from unittest.mock import Mock

import pytest

from backupdir.errors import StorageUnavailableError
from backupdir.storage.volumes import StorageRoot, VolumeSelector

PRIMARY = StorageRoot(Path("/storage/emulated/0"), description="Internal storage")
SD_CARD = StorageRoot(Path("/storage/AB12-34CD"), description="SD Card")
USB_DRIVE = StorageRoot(Path("/storage/0000-1111"), description="USB drive")


def make_platform(roots, version=29, default=PRIMARY):
    """Create a mock platform enumerating the given roots."""
    platform = Mock()
    platform.version = version
    platform.default_external_root.return_value = default
    platform.list_external_roots.return_value = roots
    return platform


class TestStorageRoot:
    """Test StorageRoot value object."""

    def test_string_path_converted(self):
        root = StorageRoot("/sdcard")
        assert root.path == Path("/sdcard")

    def test_immutable(self):
        root = StorageRoot(Path("/sdcard"))
        with pytest.raises(AttributeError):
            root.path = Path("/other")

    def test_equality(self):
        assert StorageRoot("/sdcard", description="x") == StorageRoot(
            Path("/sdcard"), description="x"
        )


class TestSelectRoot:
    """Test root selection and fallback."""

    def test_default_when_not_preferred(self):
        """Test that removable volumes are ignored without preference."""
        platform = make_platform([PRIMARY, SD_CARD])
        selector = VolumeSelector(platform)

        assert selector.select_root(prefer_removable=False) == PRIMARY
        platform.list_external_roots.assert_not_called()

    def test_unset_preference_is_false(self):
        """Test that an unset preference behaves like False."""
        selector = VolumeSelector(make_platform([PRIMARY, SD_CARD]))
        assert selector.select_root(prefer_removable=None) == PRIMARY

    def test_removable_preferred(self):
        """Test that the first non-emulated root is chosen."""
        selector = VolumeSelector(make_platform([PRIMARY, SD_CARD, USB_DRIVE]))
        assert selector.select_root(prefer_removable=True) == SD_CARD

    def test_enumeration_order_kept(self):
        """Test that candidates keep platform order by default."""
        selector = VolumeSelector(make_platform([PRIMARY, SD_CARD, USB_DRIVE]))
        assert selector.removable_candidates() == [SD_CARD, USB_DRIVE]

    def test_sorted_candidates(self):
        """Test deterministic lexical selection when enabled."""
        selector = VolumeSelector(
            make_platform([PRIMARY, SD_CARD, USB_DRIVE]), sort_candidates=True
        )
        assert selector.select_root(prefer_removable=True) == USB_DRIVE

    def test_fallback_when_only_primary(self):
        """Test fallback when filtering leaves no candidates."""
        selector = VolumeSelector(make_platform([PRIMARY]))
        assert selector.select_root(prefer_removable=True) == PRIMARY

    def test_missing_entries_skipped(self):
        """Test that unavailable (None) entries are ignored."""
        selector = VolumeSelector(make_platform([PRIMARY, None, SD_CARD]))
        assert selector.select_root(prefer_removable=True) == SD_CARD

        selector = VolumeSelector(make_platform([None, PRIMARY, None]))
        assert selector.select_root(prefer_removable=True) == PRIMARY

    def test_no_multi_volume_support(self):
        """Test that old platforms never enumerate volumes."""
        platform = make_platform([PRIMARY, SD_CARD], version=18)
        selector = VolumeSelector(platform)

        assert selector.select_root(prefer_removable=True) == PRIMARY
        platform.list_external_roots.assert_not_called()

    def test_no_default_root_raises(self):
        """Test that a platform without any root is a failure."""
        selector = VolumeSelector(make_platform([], default=None))
        with pytest.raises(StorageUnavailableError):
            selector.select_root(prefer_removable=True)

    def test_removable_found_without_default_root(self):
        """Test that a removable root works even if no default exists."""
        selector = VolumeSelector(make_platform([SD_CARD], default=None))
        assert selector.select_root(prefer_removable=True) == SD_CARD


class TestDefaultRootCache:
    """Test the memoized default root lookup."""

    def test_default_root_memoized(self):
        platform = make_platform([PRIMARY])
        selector = VolumeSelector(platform)

        selector.default_root()
        selector.default_root()

        assert platform.default_external_root.call_count == 1

    def test_invalidate_forces_lookup(self):
        """Test that invalidation asks the platform again."""
        platform = make_platform([PRIMARY])
        selector = VolumeSelector(platform)

        selector.default_root()
        selector.invalidate()
        platform.default_external_root.return_value = SD_CARD

        assert selector.default_root() == SD_CARD
        assert platform.default_external_root.call_count == 2

    def test_failed_lookup_not_cached(self):
        """Test that a missing root is looked up again next time."""
        platform = make_platform([], default=None)
        selector = VolumeSelector(platform)

        with pytest.raises(StorageUnavailableError):
            selector.default_root()

        platform.default_external_root.return_value = PRIMARY
        assert selector.default_root() == PRIMARY

    def test_removable_roots_never_cached(self):
        """Test that removable volumes are re-enumerated on every call."""
        platform = make_platform([PRIMARY, SD_CARD])
        selector = VolumeSelector(platform)

        assert selector.select_root(prefer_removable=True) == SD_CARD
        platform.list_external_roots.return_value = [PRIMARY]
        assert selector.select_root(prefer_removable=True) == PRIMARY
