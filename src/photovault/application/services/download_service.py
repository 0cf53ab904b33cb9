import logging
import mimetypes
from datetime import date, datetime
from typing import Callable, List, Optional, Union

from photovault.application.dtos import (
    ArchiveStream,
    DownloadInfo,
    DownloadRequest,
    FileStream,
    MemoryLaneEntry,
)
from photovault.application.interfaces import IArchiveWriter
from photovault.application.services.archive_planner import ArchivePlanner
from photovault.application.services.archive_streamer import ArchiveStreamer
from photovault.application.services.memory_lane import MemoryLaneAggregator
from photovault.application.services.paged_source import open_download_source
from photovault.config import (
    DEFAULT_ARCHIVE_SIZE,
    DEFAULT_CONTENT_TYPE,
    DOWNLOAD_PAGE_SIZE,
    MEMORY_LANE_MAX_WORKERS,
)
from photovault.domain.models import Permission, Principal
from photovault.domain.repositories import IAccessGate, IAssetRepository
from photovault.errors import AssetNotFoundError, InvalidRequestError
from photovault.events import ArchiveStreamedEvent, DownloadPlannedEvent, EventBus


class DownloadService:
    """
    Application Service Facade for downloads and memory lane.
    Every operation checks the access gate before touching asset data.
    """
    def __init__(
        self,
        asset_repo: IAssetRepository,
        access: IAccessGate,
        writer_factory: Callable[[], IArchiveWriter],
        event_bus: Optional[EventBus] = None,
        default_archive_size: int = DEFAULT_ARCHIVE_SIZE,
        page_size: int = DOWNLOAD_PAGE_SIZE,
        memory_lane_workers: int = MEMORY_LANE_MAX_WORKERS,
    ):
        self._repo = asset_repo
        self._access = access
        self._streamer = ArchiveStreamer(writer_factory)
        self._memory_lane = MemoryLaneAggregator(asset_repo, max_workers=memory_lane_workers)
        self._events = event_bus
        self._default_archive_size = default_archive_size
        self._page_size = page_size
        self._logger = logging.getLogger(__name__)

    def plan_download(self, principal: Principal, request: DownloadRequest) -> DownloadInfo:
        target_size = self._default_archive_size
        if request.archive_size is not None:
            target_size = request.archive_size
        source = open_download_source(
            self._access, self._repo, principal, request, page_size=self._page_size
        )
        self._logger.info("Planning download of %s for %s", source.description, principal.id)

        info = ArchivePlanner(self._repo, target_size=target_size).plan(source)

        if self._events:
            self._events.publish(DownloadPlannedEvent(
                principal_id=principal.id,
                archive_count=len(info.archives),
                total_size=info.total_size,
            ))
        return info

    def stream_archive(self, principal: Principal, asset_ids: List[str]) -> ArchiveStream:
        if not asset_ids:
            raise InvalidRequestError("asset_ids must not be empty")
        self._access.require_permission(principal, Permission.ASSET_DOWNLOAD, asset_ids)

        assets = self._repo.get_by_ids(list(asset_ids))
        found = {asset.id for asset in assets}
        missing = [asset_id for asset_id in asset_ids if asset_id not in found]
        if missing:
            raise AssetNotFoundError(f"Assets not found: {', '.join(missing)}")

        archive = self._streamer.stream(assets)

        if self._events:
            self._events.publish(ArchiveStreamedEvent(
                principal_id=principal.id,
                entry_count=len(archive.entry_names),
            ))
        return archive

    def download_file(self, principal: Principal, asset_id: str) -> FileStream:
        self._access.require_permission(principal, Permission.ASSET_DOWNLOAD, asset_id)

        assets = self._repo.get_by_ids([asset_id])
        if not assets:
            raise AssetNotFoundError(f"Asset not found: {asset_id}")
        asset = assets[0]

        content_type, _ = mimetypes.guess_type(asset.original_path.name)
        return FileStream(
            path=asset.original_path,
            content_type=content_type or DEFAULT_CONTENT_TYPE,
            size=asset.size_bytes,
        )

    def get_memory_lane(
        self,
        principal: Principal,
        timestamp: Union[datetime, date],
        years: int,
    ) -> List[MemoryLaneEntry]:
        return self._memory_lane.collect(principal.id, timestamp, years)
