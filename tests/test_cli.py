"""Tests for the backupdir command line interface.

These tests verify:
- Resolution commands create and report directories
- Handle display labels
- Error handling and exit codes
"""

import json

import pytest
from click.testing import CliRunner

from backupdir.cli.main import cli
from backupdir.config import ResolverConfig


@pytest.fixture
def primary(tmp_path):
    path = tmp_path / "storage" / "emulated" / "0"
    path.mkdir(parents=True)
    return path


@pytest.fixture
def sd_card(tmp_path):
    path = tmp_path / "storage" / "AB12-34CD"
    path.mkdir(parents=True)
    return path


@pytest.fixture
def config_file(tmp_path, primary, sd_card):
    """Write a config file describing both storage roots."""
    config_path = tmp_path / "config.json"
    ResolverConfig(
        platform_version=30,
        external_storage_dir=primary,
        volumes=[
            {
                "uuid": "AB12-34CD",
                "description": "SD Card",
                "path": str(sd_card),
                "removable": True,
            }
        ],
    ).save(config_path)
    return config_path


def run(config_file, *args):
    runner = CliRunner()
    return runner.invoke(cli, ["--config", str(config_file), *args])


class TestResolveCommand:
    """Test the resolve command."""

    def test_resolve_full_json(self, config_file, primary):
        (primary / "Documents" / "Backups").mkdir(parents=True)
        result = run(
            config_file,
            "resolve",
            "full",
            "--handle",
            "primary:Documents/Backups",
            "--json",
        )

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["path"] == str(primary / "Documents" / "FullBackups")
        assert data["model"] == "scoped_handle"
        assert (primary / "Documents" / "FullBackups").is_dir()

    def test_resolve_legacy_platform_removable(self, config_file, sd_card):
        result = run(
            config_file,
            "--platform-version",
            "29",
            "resolve",
            "plaintext",
            "--removable",
            "--json",
        )

        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["path"] == str(
            sd_card / "Signal" / "PlaintextBackups"
        )

    def test_resolve_legacy_with_package_id(self, config_file, primary):
        result = run(
            config_file,
            "--package-id",
            "org.thoughtcrime.securesms.staging",
            "resolve",
            "legacy",
        )

        assert result.exit_code == 0, result.output
        assert (primary / "Signal" / "Backups" / "staging").is_dir()

    def test_resolve_legacy_root(self, config_file, primary):
        result = run(config_file, "resolve", "legacy-root", "--json")

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["path"] == str(primary / "Signal")
        assert data["category"] is None

    def test_missing_handle_fails(self, config_file):
        result = run(config_file, "resolve", "full")

        assert result.exit_code == 1
        assert "Directory handle not accessible" in result.output

    def test_unavailable_storage_fails(self, tmp_path):
        config_path = tmp_path / "config.json"
        ResolverConfig(
            platform_version=29, external_storage_dir=tmp_path / "gone"
        ).save(config_path)

        result = run(config_path, "resolve", "full")
        assert result.exit_code == 1
        assert "Storage unavailable" in result.output

    def test_unknown_target(self, config_file):
        result = run(config_file, "resolve", "incremental")
        assert result.exit_code != 0


class TestOtherCommands:
    """Test display, volumes and check commands."""

    def test_display_known_volume(self, config_file):
        result = run(config_file, "display", "AB12-34CD:MyBackup.zip")
        assert result.exit_code == 0
        assert result.output.strip() == "SD Card MyBackup.zip"

    def test_display_unknown_volume(self, config_file):
        result = run(config_file, "display", "FFFF-0000:MyBackup.zip")
        assert result.output.strip() == "MyBackup.zip"

    def test_volumes(self, config_file):
        result = run(config_file, "volumes")
        assert result.exit_code == 0
        assert "Volumes (2)" in result.output

    def test_volumes_without_default_root(self, tmp_path, sd_card):
        """Test that the title counts only the rows actually listed."""
        config_path = tmp_path / "config.json"
        ResolverConfig(
            external_storage_dir=None,
            volumes=[
                {
                    "uuid": "AB12-34CD",
                    "description": "SD Card",
                    "path": str(sd_card),
                    "removable": True,
                }
            ],
        ).save(config_path)

        result = run(config_path, "volumes")
        assert result.exit_code == 0
        assert "Volumes (1)" in result.output
        assert "primary" not in result.output

    def test_check_writable(self, config_file):
        result = run(config_file, "check")
        assert result.exit_code == 0
        assert "Writable" in result.output

    def test_check_not_writable(self, tmp_path):
        config_path = tmp_path / "config.json"
        ResolverConfig(external_storage_dir=tmp_path / "gone").save(config_path)

        result = run(config_path, "check")
        assert result.exit_code == 1

    def test_missing_config_file(self, tmp_path):
        result = run(tmp_path / "missing.json", "check")
        assert result.exit_code != 0
        assert "Config file not found" in result.output
