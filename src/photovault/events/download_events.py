import logging
from dataclasses import dataclass
from typing import List

from .bus import Event, EventBus, Subscription


@dataclass(kw_only=True)
class DownloadPlannedEvent(Event):
    principal_id: str
    archive_count: int
    total_size: int


@dataclass(kw_only=True)
class ArchiveStreamedEvent(Event):
    principal_id: str
    entry_count: int


class DownloadAuditLog:
    """Write one INFO line per planned download and per streamed archive."""

    def __init__(self, bus: EventBus, logger: logging.Logger):
        self._logger = logger
        self._subscriptions: List[Subscription] = [
            bus.subscribe(DownloadPlannedEvent, self._on_planned),
            bus.subscribe(ArchiveStreamedEvent, self._on_streamed),
        ]
        self._bus = bus

    def close(self) -> None:
        for sub in self._subscriptions:
            self._bus.unsubscribe(sub)
        self._subscriptions = []

    def _on_planned(self, event: DownloadPlannedEvent) -> None:
        self._logger.info(
            "[AUDIT] %s planned %d archives (%d bytes)",
            event.principal_id, event.archive_count, event.total_size,
        )

    def _on_streamed(self, event: ArchiveStreamedEvent) -> None:
        self._logger.info(
            "[AUDIT] %s streamed an archive of %d entries", event.principal_id, event.entry_count
        )
