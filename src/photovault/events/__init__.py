from .bus import Event, EventBus, Subscription
from .download_events import ArchiveStreamedEvent, DownloadAuditLog, DownloadPlannedEvent

__all__ = [
    "ArchiveStreamedEvent",
    "DownloadAuditLog",
    "DownloadPlannedEvent",
    "Event",
    "EventBus",
    "Subscription",
]
