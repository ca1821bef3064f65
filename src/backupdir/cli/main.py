"""Main CLI entry point for backupdir.

Provides command-line access to backup directory resolution and handle
display labels.
"""

import logging
import os
import sys
from pathlib import Path
from typing import Optional

import click
import orjson
from rich.console import Console
from rich.table import Table

from backupdir.config import ResolverConfig
from backupdir.display import DisplayPathFormatter
from backupdir.errors import (
    DirectoryCreationFailedError,
    HandleUnresolvableError,
    StorageUnavailableError,
)
from backupdir.platform import LocalPlatform
from backupdir.resolver import BackupDirectoryResolver
from backupdir.storage.volumes import StorageRoot
from backupdir.utils import is_emulated_path

# Global console for Rich output
console = Console()

RESOLVE_TARGETS = ["full", "plaintext", "legacy", "legacy-root"]


def load_config(
    config_path: Optional[str] = None,
    platform_version: Optional[int] = None,
    package_id: Optional[str] = None,
) -> ResolverConfig:
    """Load resolver configuration from multiple sources.

    Priority:
    1. Explicit command line overrides
    2. Explicit --config/-c file, or BACKUPDIR_CONFIG environment variable
    3. Environment variables (BACKUPDIR_*)

    Args:
        config_path: Config file path from CLI context
        platform_version: Platform version override
        package_id: Package identity override

    Returns:
        ResolverConfig instance

    Raises:
        click.ClickException: If an explicit config file cannot be found
    """
    config_path = config_path or os.environ.get("BACKUPDIR_CONFIG")
    if config_path:
        path = Path(config_path)
        if not path.exists():
            raise click.ClickException(f"Config file not found: {config_path}")
        config = ResolverConfig.load(path)
    else:
        config = ResolverConfig.from_env()

    if platform_version is not None:
        config.platform_version = platform_version
    if package_id:
        config.package_id = package_id
    return config


@click.group()
@click.option(
    "--config",
    "-c",
    type=click.Path(),
    help=(
        "Path to config file "
        "(default: BACKUPDIR_CONFIG env var or BACKUPDIR_* variables)"
    ),
)
@click.option("--platform-version", type=int, help="Override the platform version tier")
@click.option("--package-id", help="Override the build-variant package identity")
@click.option("--verbose", "-v", is_flag=True, help="Log resolution decisions")
@click.pass_context
def cli(ctx, config, platform_version, package_id, verbose):
    """backupdir CLI - Resolve backup storage locations.

    Use --config/-c to point at a config file, or set BACKUPDIR_CONFIG.
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    ctx.ensure_object(dict)
    ctx.obj["config"] = load_config(config, platform_version, package_id)


@cli.command("resolve")
@click.argument("target", type=click.Choice(RESOLVE_TARGETS))
@click.option("--handle", "-H", help="Directory handle (tree URI or document id)")
@click.option(
    "--removable/--internal",
    default=None,
    help="Prefer removable storage (default: configured preference)",
)
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
@click.pass_context
def resolve(ctx, target, handle, removable, as_json):
    """Resolve (and create) a backup directory.

    Example:
        backupdir resolve full --handle primary:Documents/Backups
        backupdir --platform-version 29 resolve plaintext --removable
    """
    config = ctx.obj["config"]
    resolver = BackupDirectoryResolver.from_config(config)
    prefer_removable = (
        removable if removable is not None else config.removability_preference
    )

    try:
        if target == "full":
            resolved = resolver.resolve_full_backup_directory(handle, prefer_removable)
        elif target == "plaintext":
            resolved = resolver.resolve_plaintext_backup_directory(
                handle, prefer_removable
            )
        elif target == "legacy":
            resolved = resolver.resolve_legacy_backup_directory()
        else:
            resolved = resolver.resolve_legacy_backup_root_directory(prefer_removable)
    except HandleUnresolvableError as e:
        console.print(
            f"[red]✗[/red] Directory handle not accessible: {e}", style="red"
        )
        console.print("  Choose the backup folder again to re-grant access.")
        sys.exit(1)
    except StorageUnavailableError as e:
        console.print(f"[red]✗[/red] Storage unavailable: {e}", style="red")
        sys.exit(1)
    except DirectoryCreationFailedError as e:
        console.print(f"[red]✗[/red] {e}", style="red")
        sys.exit(1)

    if as_json:
        content = orjson.dumps(resolved.to_dict(), option=orjson.OPT_INDENT_2)
        click.echo(content.decode())
        return

    console.print(f"[green]✓[/green] {resolved.path}")
    console.print(f"  Storage model: {resolved.model.value}")
    if resolved.root.description:
        console.print(f"  Volume: {resolved.root.description}")


@cli.command("display")
@click.argument("identifier")
@click.pass_context
def display(ctx, identifier):
    """Show the human-readable label for a directory handle.

    Example:
        backupdir display AB12-34CD:Backups
    """
    formatter = DisplayPathFormatter(LocalPlatform(ctx.obj["config"]))
    click.echo(formatter.format_display_path(identifier))


@cli.command("volumes")
@click.pass_context
def volumes(ctx):
    """List the external storage roots and configured volumes.

    Example:
        backupdir volumes
    """
    config = ctx.obj["config"]
    platform = LocalPlatform(config)

    rows = []
    default_root: Optional[StorageRoot] = platform.default_external_root()
    if default_root is not None:
        rows.append(
            (
                "primary",
                default_root.description,
                str(default_root.path),
                "no",
                "yes" if default_root.path.is_dir() else "no",
            )
        )

    for volume in config.volumes:
        path = volume.get("path", "")
        removable = volume.get("removable", True) and not is_emulated_path(path)
        rows.append(
            (
                volume.get("uuid", ""),
                volume.get("description", ""),
                path,
                "yes" if removable else "no",
                "yes" if path and Path(path).is_dir() else "no",
            )
        )

    table = Table(title=f"Volumes ({len(rows)})")
    table.add_column("Volume", style="cyan", no_wrap=True)
    table.add_column("Description", style="white")
    table.add_column("Path", style="blue")
    table.add_column("Removable", justify="center", style="magenta")
    table.add_column("Mounted", justify="center", style="green")
    for row in rows:
        table.add_row(*row)

    console.print(table)


@cli.command("check")
@click.pass_context
def check(ctx):
    """Check whether the default external storage is writable.

    Exits with status 1 if it is not.
    """
    config = ctx.obj["config"]
    resolver = BackupDirectoryResolver.from_config(config)

    if resolver.can_write_to_default_storage():
        console.print(f"[green]✓[/green] Writable: {config.external_storage_dir}")
        candidates = resolver.legacy_read_candidates()
        for path in candidates:
            console.print(f"  Legacy backups: {path}")
    else:
        console.print(
            f"[red]✗[/red] Not writable: {config.external_storage_dir}", style="red"
        )
        sys.exit(1)


if __name__ == "__main__":
    cli()
