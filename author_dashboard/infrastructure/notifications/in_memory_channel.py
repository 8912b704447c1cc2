from __future__ import annotations

import logging
from threading import Lock

from author_dashboard.application.ports.change_notification_port import (
    ChangeEvent,
    ChangeHandler,
    ChangeNotificationPort,
    Unsubscribe,
)


logger = logging.getLogger(__name__)


class InMemoryChangeChannel(ChangeNotificationPort):
    def __init__(self):
        self._handlers: list[ChangeHandler] = []
        self._lock = Lock()

    def subscribe(self, handler: ChangeHandler) -> Unsubscribe:
        with self._lock:
            self._handlers.append(handler)

        def _unsubscribe() -> None:
            with self._lock:
                if handler in self._handlers:
                    self._handlers.remove(handler)

        return _unsubscribe

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._handlers)

    def publish(self, event: ChangeEvent) -> None:
        with self._lock:
            handlers = list(self._handlers)
        for handler in handlers:
            try:
                handler(event)
            except Exception as exc:  # noqa: BLE001
                logger.warning(
                    "change_channel: handler failed topic=%s user=%s detail=%s",
                    event.topic,
                    event.user_id,
                    exc,
                )
