from __future__ import annotations

import logging
from datetime import datetime
from threading import Event, Thread
from typing import Callable

from author_dashboard.application.ports.change_notification_port import ChangeEvent
from author_dashboard.infrastructure.notifications.in_memory_channel import InMemoryChangeChannel


logger = logging.getLogger(__name__)

SubscriptionChangesReader = Callable[[datetime | None], list[tuple[str, datetime]]]
ConfigVersionReader = Callable[[], int]


class PollingChangeChannel(InMemoryChangeChannel):
    """Turns store watermarks into change events.

    Subscription rows are watched through their ``updated_at`` high
    watermark, plan configuration through its version counter. The first
    poll only records the watermarks.
    """

    def __init__(
        self,
        *,
        read_subscription_changes: SubscriptionChangesReader,
        read_config_version: ConfigVersionReader,
        interval_seconds: float = 5.0,
    ):
        super().__init__()
        self._read_subscription_changes = read_subscription_changes
        self._read_config_version = read_config_version
        self._interval_seconds = interval_seconds
        self._subscription_watermark: datetime | None = None
        self._config_version: int | None = None
        self._primed = False
        self._stop = Event()
        self._thread: Thread | None = None

    def poll_once(self) -> list[ChangeEvent]:
        events: list[ChangeEvent] = []
        changes = self._read_subscription_changes(self._subscription_watermark)
        version = self._read_config_version()

        if self._primed:
            events.extend(ChangeEvent(topic="user_subscriptions", user_id=user_id) for user_id, _ in changes)
            if version != self._config_version:
                events.append(ChangeEvent(topic="plan_config"))

        for _, updated_at in changes:
            if self._subscription_watermark is None or updated_at > self._subscription_watermark:
                self._subscription_watermark = updated_at
        self._config_version = version
        self._primed = True

        for event in events:
            self.publish(event)
        return events

    def start(self) -> None:
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop.clear()
        self._thread = Thread(target=self._run, name="change-poller", daemon=True)
        self._thread.start()
        logger.info("polling_channel: started interval=%ss", self._interval_seconds)

    def stop(self) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=self._interval_seconds)
            self._thread = None
        logger.info("polling_channel: stopped")

    def _run(self) -> None:
        while not self._stop.is_set():
            try:
                self.poll_once()
            except Exception as exc:  # noqa: BLE001
                logger.warning("polling_channel: poll failed detail=%s", exc)
            self._stop.wait(self._interval_seconds)
