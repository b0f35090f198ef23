"""Command line entry point."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import click
from pydantic import ValidationError

from mavensync import __version__
from mavensync.bootstrap import ServiceContainer
from mavensync.logging_config import configure_logging
from mavensync.modules.uploader.util import StoreInitError
from mavensync.settings import Settings, get_settings

log = logging.getLogger(__name__)


def build_settings(overrides: Dict[str, Any]) -> Settings:
    """Environment/.env values, with explicitly passed options on top."""
    explicit = {key: value for key, value in overrides.items() if value is not None}
    if not explicit:
        return get_settings()
    return Settings(**explicit)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, prog_name="mavensync")
@click.option("-U", "--url", help="Release repository URL [env NEXUS_URL].")
@click.option("-S", "--snapshot-url", help="Snapshot repository URL [env NEXUS_SNAPSHOT_URL].")
@click.option("-u", "--username", help="Repository user [env NEXUS_USERNAME].")
@click.option("-p", "--password", help="Repository password [env NEXUS_PASSWORD].")
@click.option(
    "-d",
    "--dir",
    "root_dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Scan root, the directory holding org/, com/ ... [env NEXUS_DIR].",
)
@click.option("-f", "--force", is_flag=True, help="Upload even when already delivered.")
@click.option(
    "-E",
    "--exclude",
    multiple=True,
    help="Comma separated keywords; matching groupId/artifactId are skipped.",
)
@click.option("--max-size", type=click.IntRange(min=0), help="Skip artifacts whose jar/war exceeds this many MiB.")
@click.option("--db-path", help="Upload state database file [env NEXUS_DB_PATH].")
@click.option("--store", type=click.Choice(["sqlite", "mysql", "memory"]), help="Upload state backend.")
@click.option("--strategy", type=click.Choice(["prefix", "packaging"]), help="How sibling files are discovered.")
@click.option("--workers", type=click.IntRange(min=1), help="Concurrent upload workers.")
@click.option("--log-level", type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False))
def main(
    url: Optional[str],
    snapshot_url: Optional[str],
    username: Optional[str],
    password: Optional[str],
    root_dir: Optional[Path],
    force: bool,
    exclude: Tuple[str, ...],
    max_size: Optional[int],
    db_path: Optional[str],
    store: Optional[str],
    strategy: Optional[str],
    workers: Optional[int],
    log_level: Optional[str],
) -> None:
    """Upload a local Maven repository tree to a remote repository."""
    try:
        settings = build_settings(
            {
                "nexus_url": url,
                "nexus_snapshot_url": snapshot_url,
                "nexus_username": username,
                "nexus_password": password,
                "nexus_dir": str(root_dir) if root_dir is not None else None,
                "nexus_force": True if force else None,
                "nexus_exclude": ",".join(exclude) if exclude else None,
                "nexus_max_size": max_size,
                "nexus_db_path": db_path,
                "store_backend": store,
                "resolve_strategy": strategy,
                "upload_workers": workers,
                "log_level": log_level,
            }
        )
    except ValidationError as exc:
        raise click.UsageError(_describe_validation(exc)) from exc

    configure_logging(settings.log_level)
    root = Path(settings.nexus_dir)
    if not root.is_dir():
        raise click.UsageError(f"scan root is not a directory: {root}")

    try:
        container = ServiceContainer(settings)
    except StoreInitError as exc:
        log.error("Aborting before scan: %s", exc)
        click.echo(f"error: {exc}", err=True)
        sys.exit(1)

    log.info(
        "Syncing %s -> %s (snapshots -> %s) force=%s workers=%d",
        root.resolve(),
        settings.release_base_url,
        settings.snapshot_base_url or settings.release_base_url,
        settings.nexus_force,
        settings.upload_workers,
    )
    try:
        summary = container.pipeline.run()
    finally:
        container.close()
    click.echo(f"done: {summary.describe()}")


def _describe_validation(exc: ValidationError) -> str:
    messages = []
    for error in exc.errors():
        name = ".".join(str(part) for part in error.get("loc", ()))
        if error.get("type") == "missing" and name == "nexus_url":
            messages.append("release repository URL is required (--url or NEXUS_URL)")
        else:
            messages.append(f"{name}: {error.get('msg')}")
    return "; ".join(messages)


if __name__ == "__main__":  # pragma: no cover
    main()
