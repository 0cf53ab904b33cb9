"""Concurrent "N years ago today" lookups merged in year order."""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from datetime import date, datetime
from typing import Dict, List, Optional, Union

from dateutil.relativedelta import relativedelta

from photovault.application.dtos import AssetDTO, MemoryLaneEntry
from photovault.config import MEMORY_LANE_MAX_WORKERS
from photovault.domain.repositories import IAssetRepository
from photovault.errors import InvalidRequestError

LOGGER = logging.getLogger(__name__)


class MemoryLaneAggregator:
    """Fan out one date lookup per year and assemble them in ascending order."""

    def __init__(self, asset_repo: IAssetRepository, max_workers: int = MEMORY_LANE_MAX_WORKERS) -> None:
        self._repo = asset_repo
        self._max_workers = max(1, max_workers)

    def collect(self, user_id: str, anchor: Union[datetime, date], years: int) -> List[MemoryLaneEntry]:
        if years < 1:
            raise InvalidRequestError(f"years must be at least 1, got {years}")
        if years >= anchor.year:
            raise InvalidRequestError(
                f"years must be below {anchor.year} to stay after year 1, got {years}"
            )

        results: List[Optional[MemoryLaneEntry]] = [None] * years
        executor = ThreadPoolExecutor(max_workers=min(self._max_workers, years))
        try:
            # Every lookup is submitted before any result is read
            futures: Dict[Future, int] = {
                executor.submit(self._lookup, user_id, anchor, years_ago): years_ago - 1
                for years_ago in range(1, years + 1)
            }
            for future in as_completed(futures):
                # The first failure aborts the aggregate; no partial lane
                results[futures[future]] = future.result()
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        entries = [entry for entry in results if entry is not None and entry.assets]
        LOGGER.info(
            "Memory lane for %s: %d of %d years have assets", user_id, len(entries), years
        )
        return entries

    def _lookup(self, user_id: str, anchor: Union[datetime, date], years_ago: int) -> MemoryLaneEntry:
        target = anchor - relativedelta(years=years_ago)
        day = target.date() if isinstance(target, datetime) else target
        assets = self._repo.get_by_date(user_id, day)
        return MemoryLaneEntry(
            title=MemoryLaneEntry.title_for(years_ago),
            assets=[AssetDTO.from_asset(asset) for asset in assets],
        )
