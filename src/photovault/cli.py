"""Typer-based CLI entry point."""

from __future__ import annotations

import functools
import logging
import shutil
from datetime import datetime
from pathlib import Path
from typing import List, Optional

import typer
from dateutil.parser import isoparse
from rich import print
from rich.console import Console
from rich.table import Table

from photovault.application.dtos import DownloadRequest
from photovault.application.services.download_service import DownloadService
from photovault.config import DATABASE_FILE_NAME, MEMORY_LANE_DEFAULT_YEARS
from photovault.di.bootstrap import build_container
from photovault.domain.models import Principal
from photovault.errors import (
    AccessDeniedError,
    AssetNotFoundError,
    InvalidRequestError,
    PhotoVaultError,
)
from photovault.settings import SettingsManager
from photovault.utils.logging import ensure_console_logger

app = typer.Typer(help="Plan and stream size-bounded downloads from a photo library")
console = Console()

_STATE: dict = {}


def _handle_errors(func):
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (AccessDeniedError, AssetNotFoundError, InvalidRequestError) as exc:
            typer.echo(f"Error: {exc}", err=True)
            raise typer.Exit(1) from exc
        except PhotoVaultError as exc:
            typer.echo(f"Unexpected error: {exc}", err=True)
            raise typer.Exit(1) from exc

    return wrapper


def _service() -> DownloadService:
    settings = SettingsManager(_STATE.get("settings_path"))
    settings.load()
    db_path = _STATE.get("db_path")
    if db_path is None:
        configured = settings.get("database_path")
        db_path = Path(configured) if configured else settings.path.parent / DATABASE_FILE_NAME
    container = build_container(db_path, settings)
    return container.resolve(DownloadService)


def _human_size(size: int) -> str:
    value = float(size)
    for unit in ("B", "KiB", "MiB", "GiB"):
        if value < 1024:
            return f"{value:.1f} {unit}"
        value /= 1024
    return f"{value:.1f} TiB"


@app.callback()
def main(
    db: Optional[Path] = typer.Option(None, "--db", help="Library database file"),
    settings_path: Optional[Path] = typer.Option(None, "--settings", help="settings.json to use"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log progress to stderr"),
) -> None:
    _STATE["db_path"] = db
    _STATE["settings_path"] = settings_path
    if verbose:
        ensure_console_logger(logging.getLogger("photovault"), "photovault-cli", level=logging.DEBUG)


@app.command("download-info")
@_handle_errors
def download_info(
    principal: str = typer.Option(..., "--as", help="Acting user id"),
    asset_ids: Optional[List[str]] = typer.Option(None, "--asset-id", help="Explicit asset id (repeatable)"),
    album_id: Optional[str] = typer.Option(None, "--album"),
    user_id: Optional[str] = typer.Option(None, "--user"),
    archive_size: Optional[int] = typer.Option(None, "--archive-size", help="Target bytes per archive"),
) -> None:
    """Show how a download would be split into archives."""

    info = _service().plan_download(
        Principal(id=principal),
        DownloadRequest(
            asset_ids=asset_ids or None,
            album_id=album_id,
            user_id=user_id,
            archive_size=archive_size,
        ),
    )

    table = Table(title=f"{len(info.archives)} archives, {_human_size(info.total_size)}")
    table.add_column("#", justify="right")
    table.add_column("Assets", justify="right")
    table.add_column("Size", justify="right")
    for index, archive in enumerate(info.archives, start=1):
        table.add_row(str(index), str(len(archive.asset_ids)), _human_size(archive.size))
    console.print(table)


@app.command()
@_handle_errors
def archive(
    asset_ids: List[str] = typer.Argument(..., help="Assets to pack"),
    principal: str = typer.Option(..., "--as", help="Acting user id"),
    out: Path = typer.Option(..., "--out", help="Zip file to write"),
) -> None:
    """Write one archive containing the given assets."""

    result = _service().stream_archive(Principal(id=principal), asset_ids)
    with out.open("wb") as handle:
        for chunk in result.stream:
            handle.write(chunk)
    print(f"[green]Wrote {len(result.entry_names)} entries to {out}")


@app.command()
@_handle_errors
def fetch(
    asset_id: str = typer.Argument(...),
    principal: str = typer.Option(..., "--as", help="Acting user id"),
    out: Path = typer.Option(..., "--out", help="Destination file"),
) -> None:
    """Copy a single original file."""

    result = _service().download_file(Principal(id=principal), asset_id)
    shutil.copyfile(result.path, out)
    print(f"[green]Saved {result.path.name} ({result.content_type}) to {out}")


@app.command()
@_handle_errors
def memories(
    principal: str = typer.Option(..., "--as", help="Acting user id"),
    date: Optional[str] = typer.Option(None, "--date", help="Anchor date (ISO 8601), defaults to now"),
    years: int = typer.Option(MEMORY_LANE_DEFAULT_YEARS, "--years", help="How many years to look back"),
) -> None:
    """List assets taken on this day in previous years."""

    anchor = isoparse(date) if date else datetime.now()
    entries = _service().get_memory_lane(Principal(id=principal), anchor, years)
    if not entries:
        print("[yellow]No memories for this day")
        return
    for entry in entries:
        print(f"[bold]{entry.title}[/bold] {len(entry.assets)} assets")
        for asset in entry.assets:
            print(f"  {asset.original_file_name} ({asset.media_type})")


if __name__ == "__main__":  # pragma: no cover
    app()
