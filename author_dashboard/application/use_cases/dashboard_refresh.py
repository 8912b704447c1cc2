from __future__ import annotations

import logging
from threading import Condition, Lock, Timer
from typing import Callable

from author_dashboard.application.ports.change_notification_port import (
    ChangeEvent,
    ChangeNotificationPort,
    Unsubscribe,
)
from author_dashboard.application.use_cases.aggregate_dashboard import AggregateDashboardUseCase
from author_dashboard.application.use_cases.resolve_entitlements import EntitlementResolver
from author_dashboard.application.use_cases.subscription_state import SubscriptionStateProvider
from author_dashboard.domain.entities.dashboard import DashboardSnapshot
from author_dashboard.domain.exceptions import DomainError


logger = logging.getLogger(__name__)

SnapshotListener = Callable[[DashboardSnapshot], None]
ErrorListener = Callable[[DomainError], None]
TimerFactory = Callable[[float, Callable[[], None]], Timer]


class DashboardRefreshCoordinator:
    """Triggers aggregation passes for one dashboard consumer.

    Passes never overlap. A trigger arriving while a pass is running
    schedules exactly one trailing pass. Every trigger bumps the pass id and
    a finished pass is applied only if its id is still the latest one
    requested, so superseded results are dropped. After ``close`` nothing is
    applied.
    """

    def __init__(
        self,
        *,
        aggregate_use_case: AggregateDashboardUseCase,
        subscription_state: SubscriptionStateProvider,
        entitlement_resolver: EntitlementResolver,
        on_snapshot: SnapshotListener | None = None,
        on_error: ErrorListener | None = None,
        debounce_seconds: float = 0.0,
        timer_factory: TimerFactory = Timer,
    ):
        self._aggregate_use_case = aggregate_use_case
        self._subscription_state = subscription_state
        self._entitlement_resolver = entitlement_resolver
        self._on_snapshot = on_snapshot
        self._on_error = on_error
        self._debounce_seconds = debounce_seconds
        self._timer_factory = timer_factory

        self._lock = Lock()
        self._settled = Condition(self._lock)
        self._settled_through = 0
        self._latest_requested = 0
        self._running = False
        self._rerun = False
        self._closed = False
        self._timer: Timer | None = None
        self._subscriptions: list[Unsubscribe] = []

        self.latest: DashboardSnapshot | None = None
        self.latest_error: DomainError | None = None

    @property
    def latest_requested(self) -> int:
        with self._lock:
            return self._latest_requested

    @property
    def closed(self) -> bool:
        with self._lock:
            return self._closed

    def attach(self, plan_channel: ChangeNotificationPort | None = None) -> None:
        """Subscribe to subscription and plan configuration changes."""
        self._subscriptions.append(self._subscription_state.on_change(lambda _sub: self.notify_change()))
        if plan_channel is not None:
            self._subscriptions.append(plan_channel.subscribe(self._handle_plan_event))

    def start(self, plan_channel: ChangeNotificationPort | None = None) -> DashboardSnapshot | None:
        self.attach(plan_channel)
        self.request_refresh()
        return self.latest

    def notify_change(self) -> None:
        if self._debounce_seconds <= 0:
            self.request_refresh()
            return
        with self._lock:
            if self._closed:
                return
            if self._timer is not None:
                self._timer.cancel()
            timer = self._timer_factory(self._debounce_seconds, self._fire_debounced)
            timer.daemon = True
            self._timer = timer
        timer.start()

    def request_refresh(self) -> int:
        with self._lock:
            if self._closed:
                return self._latest_requested
            self._latest_requested += 1
            pass_id = self._latest_requested
            if self._running:
                self._rerun = True
                logger.info("dashboard_refresh: pass in flight, trailing rerun scheduled pass=%s", pass_id)
                return pass_id
            self._running = True

        while True:
            try:
                self._run_pass(pass_id)
            except Exception:
                with self._lock:
                    self._running = False
                    self._rerun = False
                    self._settled_through = max(self._settled_through, pass_id)
                    self._settled.notify_all()
                raise
            with self._lock:
                self._settled_through = max(self._settled_through, pass_id)
                self._settled.notify_all()
                if self._rerun and not self._closed:
                    self._rerun = False
                    pass_id = self._latest_requested
                    continue
                self._rerun = False
                self._running = False
                return pass_id

    def close(self) -> None:
        with self._lock:
            self._closed = True
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            subscriptions, self._subscriptions = self._subscriptions, []
            self._settled.notify_all()
        for unsubscribe in subscriptions:
            unsubscribe()
        logger.info("dashboard_refresh: closed")

    def _fire_debounced(self) -> None:
        with self._lock:
            self._timer = None
        self.request_refresh()

    def _handle_plan_event(self, event: ChangeEvent) -> None:
        if event.topic != "plan_config":
            return
        self._entitlement_resolver.invalidate()
        self.notify_change()

    def _run_pass(self, pass_id: int) -> None:
        try:
            snapshot = self._aggregate_use_case.execute(pass_id=pass_id)
        except DomainError as exc:
            logger.warning("dashboard_refresh: pass failed pass=%s detail=%s", pass_id, exc)
            if self._is_current(pass_id):
                self.latest_error = exc
                if self._on_error is not None:
                    self._on_error(exc)
            return

        if not self._is_current(pass_id):
            logger.info(
                "dashboard_refresh: discarding superseded result pass=%s latest=%s",
                pass_id,
                self.latest_requested,
            )
            return
        self.latest = snapshot
        self.latest_error = None
        if self._on_snapshot is not None:
            self._on_snapshot(snapshot)

    def _is_current(self, pass_id: int) -> bool:
        with self._lock:
            return not self._closed and pass_id == self._latest_requested

    def wait_until_settled(self, pass_id: int, timeout: float | None = None) -> bool:
        """Block until ``pass_id`` (or a later pass) finished; False on timeout."""
        with self._settled:
            return self._settled.wait_for(
                lambda: self._closed or self._settled_through >= pass_id,
                timeout=timeout,
            )

    def refresh_and_wait(self, timeout: float | None = None) -> DashboardSnapshot | None:
        pass_id = self.request_refresh()
        self.wait_until_settled(pass_id, timeout=timeout)
        return self.latest
