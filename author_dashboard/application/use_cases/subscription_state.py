from __future__ import annotations

import logging
from datetime import datetime
from threading import Lock
from typing import Callable

from author_dashboard.application.ports.change_notification_port import (
    ChangeEvent,
    ChangeNotificationPort,
    Unsubscribe,
)
from author_dashboard.application.ports.subscription_port import SubscriptionPort
from author_dashboard.domain.entities.subscription import Subscription, no_plan_subscription
from author_dashboard.domain.services import subscription_status
from author_dashboard.shared.clock import utcnow


logger = logging.getLogger(__name__)

SubscriptionCallback = Callable[[Subscription], None]


class SubscriptionStateProvider:
    """Owns the subscription snapshot of one user.

    The snapshot is only replaced by ``refresh``. A failed refresh keeps the
    last known good value so features do not flicker to locked.
    """

    def __init__(
        self,
        *,
        subscription_port: SubscriptionPort,
        user_id: str,
        default_plan_id: str = "free",
        clock: Callable[[], datetime] = utcnow,
    ):
        self._subscription_port = subscription_port
        self._user_id = user_id
        self._default_plan_id = default_plan_id
        self._clock = clock
        self._current = no_plan_subscription(user_id=user_id, default_plan_id=default_plan_id)
        self._callbacks: list[SubscriptionCallback] = []
        self._unsubscribe: Unsubscribe | None = None
        self._lock = Lock()

    @property
    def user_id(self) -> str:
        return self._user_id

    @property
    def default_plan_id(self) -> str:
        return self._default_plan_id

    def current(self) -> Subscription:
        with self._lock:
            return self._current

    def refresh(self) -> Subscription:
        try:
            loaded = self._subscription_port.get_current_subscription(user_id=self._user_id)
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "subscription_state: refresh failed, keeping last known user=%s detail=%s",
                self._user_id,
                exc,
            )
            return self.current()

        if loaded is None:
            loaded = no_plan_subscription(user_id=self._user_id, default_plan_id=self._default_plan_id)

        with self._lock:
            changed = loaded != self._current
            self._current = loaded
            callbacks = list(self._callbacks)

        if changed:
            logger.info(
                "subscription_state: changed user=%s plan=%s status=%s",
                self._user_id,
                loaded.plan_id,
                loaded.status,
            )
            for callback in callbacks:
                callback(loaded)
        return loaded

    def on_change(self, callback: SubscriptionCallback) -> Unsubscribe:
        with self._lock:
            self._callbacks.append(callback)

        def _remove() -> None:
            with self._lock:
                if callback in self._callbacks:
                    self._callbacks.remove(callback)

        return _remove

    def attach(self, channel: ChangeNotificationPort) -> None:
        self.detach()
        self._unsubscribe = channel.subscribe(self._handle_event)

    def detach(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _handle_event(self, event: ChangeEvent) -> None:
        if event.topic != "user_subscriptions":
            return
        if event.user_id is not None and event.user_id != self._user_id:
            return
        self.refresh()

    def effective_plan_id(self, subscription: Subscription | None = None) -> str:
        return subscription_status.effective_plan_id(
            subscription if subscription is not None else self.current(),
            default_plan_id=self._default_plan_id,
            now=self._clock(),
        )

    def is_pro(self) -> bool:
        return subscription_status.is_pro(
            self.current(),
            free_plan_id=self._default_plan_id,
            now=self._clock(),
        )

    def is_free(self) -> bool:
        return not self.is_pro()

    def is_on_trial(self) -> bool:
        return subscription_status.is_trial_running(self.current(), now=self._clock())

    def trial_days_left(self) -> int:
        return subscription_status.trial_days_left(self.current(), now=self._clock())
