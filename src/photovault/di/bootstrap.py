import logging
from pathlib import Path
from typing import Optional

from .container import Container
from photovault.application.interfaces import IArchiveWriter
from photovault.application.services.download_service import DownloadService
from photovault.config import DEFAULT_ARCHIVE_SIZE, MEMORY_LANE_MAX_WORKERS
from photovault.domain.repositories import IAccessGate, IAlbumRepository, IAssetRepository
from photovault.events import DownloadAuditLog, EventBus
from photovault.infrastructure.db.pool import ConnectionPool
from photovault.infrastructure.repositories.sqlite_access_gate import SQLiteAccessGate
from photovault.infrastructure.repositories.sqlite_album_repository import SQLiteAlbumRepository
from photovault.infrastructure.repositories.sqlite_asset_repository import SQLiteAssetRepository
from photovault.infrastructure.services.zip_writer import ZipStreamWriter
from photovault.settings import SettingsManager


def bootstrap(container: Container, db_path: Path, settings: Optional[SettingsManager] = None) -> None:
    """Register all application services in the DI container."""
    archive_size = DEFAULT_ARCHIVE_SIZE
    max_workers = MEMORY_LANE_MAX_WORKERS
    if settings is not None:
        archive_size = settings.get("download.archive_size", archive_size)
        max_workers = settings.get("memory_lane.max_workers", max_workers)

    container.register_singleton(EventBus, EventBus)
    container.register_factory(
        DownloadAuditLog,
        lambda: DownloadAuditLog(container.resolve(EventBus), logging.getLogger("photovault.audit")),
        singleton=True,
    )
    container.register_singleton(ConnectionPool, ConnectionPool, db_path=db_path)
    container.register_factory(
        IAssetRepository,
        lambda: SQLiteAssetRepository(container.resolve(ConnectionPool)),
        singleton=True,
    )
    container.register_factory(
        IAlbumRepository,
        lambda: SQLiteAlbumRepository(container.resolve(ConnectionPool)),
        singleton=True,
    )
    container.register_factory(
        IAccessGate,
        lambda: SQLiteAccessGate(container.resolve(ConnectionPool)),
        singleton=True,
    )
    # A fresh writer per archive
    container.register_transient(IArchiveWriter, ZipStreamWriter)

    def _download_service() -> DownloadService:
        # Album tables must exist before the access gate queries them
        container.resolve(IAlbumRepository)
        container.resolve(DownloadAuditLog)
        return DownloadService(
            asset_repo=container.resolve(IAssetRepository),
            access=container.resolve(IAccessGate),
            writer_factory=lambda: container.resolve(IArchiveWriter),
            event_bus=container.resolve(EventBus),
            default_archive_size=archive_size,
            memory_lane_workers=max_workers,
        )

    container.register_factory(DownloadService, _download_service, singleton=True)


def build_container(db_path: Path, settings: Optional[SettingsManager] = None) -> Container:
    container = Container()
    bootstrap(container, db_path, settings)
    return container
