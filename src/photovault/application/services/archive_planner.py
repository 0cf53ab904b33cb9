"""Pack streamed asset pages into size-bounded archive plans."""

from __future__ import annotations

import logging
from typing import AbstractSet, Dict, Iterable, List, Set

from photovault.application.dtos import ArchivePlan, DownloadInfo
from photovault.config import DEFAULT_ARCHIVE_SIZE
from photovault.domain.models import Asset
from photovault.domain.repositories import IAssetRepository

LOGGER = logging.getLogger(__name__)


class ArchivePlanner:
    """Group assets into archives that are sealed once past ``target_size``.

    A still photo and its live-photo motion clip are packed as one unit so
    they always end up in the same archive.  Clips missing from a page are
    fetched with a single lookup per page before packing.  Each asset is
    planned once per download, even when a store also returns a clip that
    was already packed beside its still.
    """

    def __init__(self, asset_repo: IAssetRepository, target_size: int = DEFAULT_ARCHIVE_SIZE) -> None:
        self._repo = asset_repo
        self._target_size = target_size

    @property
    def target_size(self) -> int:
        return self._target_size

    def plan(self, pages: Iterable[List[Asset]]) -> DownloadInfo:
        archives: List[ArchivePlan] = []
        archive = ArchivePlan()
        packed: Set[str] = set()

        for page in pages:
            for unit in self.group_live_photos(page, skip=packed):
                fresh = [asset for asset in unit if asset.id not in packed]
                if not fresh:
                    continue
                for asset in fresh:
                    archive.add(asset)
                    packed.add(asset.id)
                if self._is_full(archive):
                    archives.append(archive.seal())
                    archive = ArchivePlan()

            # Flush at every page boundary
            if not archive.is_empty:
                archives.append(archive.seal())
                archive = ArchivePlan()

        LOGGER.info(
            "Planned %d archives (%d bytes, target %d)",
            len(archives),
            sum(a.size for a in archives),
            self._target_size,
        )
        return DownloadInfo(archives=archives)

    def group_live_photos(
        self, page: List[Asset], skip: AbstractSet[str] = frozenset()
    ) -> List[List[Asset]]:
        """Split *page* into packing units, each still followed by its motion clip.

        Clips whose ids are in *skip* were planned earlier and are neither
        fetched nor attached again.
        """

        by_id: Dict[str, Asset] = {asset.id: asset for asset in page}
        wanted: List[str] = []
        for asset in page:
            motion_id = asset.live_photo_video_id
            if (
                motion_id
                and motion_id != asset.id
                and motion_id not in skip
                and motion_id not in wanted
            ):
                wanted.append(motion_id)

        missing = [motion_id for motion_id in wanted if motion_id not in by_id]
        if missing:
            fetched = {asset.id: asset for asset in self._repo.get_by_ids(missing)}
            for motion_id in missing:
                if motion_id in fetched:
                    by_id[motion_id] = fetched[motion_id]
                else:
                    LOGGER.warning("Live photo motion asset %s not found; skipping", motion_id)

        # Clips present in the page move next to the still that references them
        attached: Set[str] = {motion_id for motion_id in wanted if motion_id in by_id}
        placed: Set[str] = set()
        units: List[List[Asset]] = []

        def _unit(head: Asset) -> List[Asset]:
            unit = [head]
            placed.add(head.id)
            motion_id = head.live_photo_video_id
            while motion_id in attached and motion_id not in placed:
                motion = by_id[motion_id]
                unit.append(motion)
                placed.add(motion_id)
                motion_id = motion.live_photo_video_id
            return unit

        for asset in page:
            if asset.id not in placed and asset.id not in attached:
                units.append(_unit(asset))
        # Anything still unplaced belongs to a reference cycle
        for asset in page:
            if asset.id not in placed:
                units.append(_unit(asset))
        return units

    def _is_full(self, archive: ArchivePlan) -> bool:
        # A non-positive target seals after every unit
        return self._target_size <= 0 or archive.size > self._target_size
