"""In-process publish/subscribe for download notifications."""

import logging
import threading
import uuid
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, List, Optional, Type


@dataclass(kw_only=True)
class Event:
    """Base event class."""
    timestamp: datetime = field(default_factory=datetime.now)
    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))


@dataclass
class Subscription:
    """Handle returned by subscribe(); pass it to unsubscribe()."""
    event_type: Type[Event]
    handler: Callable[[Event], None]
    id: str = field(default_factory=lambda: str(uuid.uuid4()))


class EventBus:
    """Deliver events synchronously, in subscription order, on the publisher's thread.

    A failing handler is logged and does not stop delivery to the others or
    reach the publisher: a finished download must not fail because a
    listener did.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self._logger = logger or logging.getLogger(__name__)
        self._handlers: Dict[Type[Event], List[Subscription]] = defaultdict(list)
        self._lock = threading.Lock()

    def subscribe(self, event_type: Type[Event], handler: Callable[[Event], None]) -> Subscription:
        sub = Subscription(event_type=event_type, handler=handler)
        with self._lock:
            self._handlers[event_type].append(sub)
        return sub

    def unsubscribe(self, subscription: Subscription) -> None:
        with self._lock:
            subs = self._handlers.get(subscription.event_type, [])
            if subscription in subs:
                subs.remove(subscription)

    def publish(self, event: Event) -> int:
        """Deliver *event* and return how many handlers completed without error."""
        with self._lock:
            subs = list(self._handlers.get(type(event), ()))

        delivered = 0
        for sub in subs:
            try:
                sub.handler(event)
            except Exception:
                self._logger.exception("Handler failed for %s", type(event).__name__)
            else:
                delivered += 1
        return delivered
