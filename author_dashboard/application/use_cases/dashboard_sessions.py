from __future__ import annotations

import logging
from dataclasses import dataclass
from threading import Lock
from time import monotonic
from typing import Callable

from author_dashboard.application.use_cases.dashboard_refresh import DashboardRefreshCoordinator
from author_dashboard.application.use_cases.subscription_state import SubscriptionStateProvider
from author_dashboard.domain.entities.user import User


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DashboardSession:
    user_id: str
    subscription_state: SubscriptionStateProvider
    coordinator: DashboardRefreshCoordinator

    def close(self) -> None:
        self.coordinator.close()
        self.subscription_state.detach()


SessionFactory = Callable[[User], DashboardSession]


class DashboardSessionRegistry:
    """One live dashboard session per user, created on first use.

    Sessions not touched for ``idle_seconds`` are closed on the next lookup,
    which also drops their change-channel subscriptions.
    """

    def __init__(
        self,
        *,
        session_factory: SessionFactory,
        idle_seconds: float = 900.0,
        clock: Callable[[], float] = monotonic,
    ):
        self._session_factory = session_factory
        self._idle_seconds = idle_seconds
        self._clock = clock
        self._sessions: dict[str, DashboardSession] = {}
        self._last_access: dict[str, float] = {}
        self._lock = Lock()

    def get_or_create(self, user: User) -> DashboardSession:
        now = self._clock()
        with self._lock:
            evicted = self._pop_idle(now=now, keep=user.id)
            session = self._sessions.get(user.id)
            created = session is None
            if created:
                session = self._session_factory(user)
                self._sessions[user.id] = session
            self._last_access[user.id] = now
        self._close_evicted(evicted)
        if created:
            logger.info("dashboard_sessions: opened user=%s", user.id)
        return session

    def evict_idle(self) -> int:
        with self._lock:
            evicted = self._pop_idle(now=self._clock())
        self._close_evicted(evicted)
        return len(evicted)

    def _pop_idle(self, *, now: float, keep: str | None = None) -> list[tuple[str, DashboardSession]]:
        expired = [
            user_id
            for user_id, last in self._last_access.items()
            if user_id != keep and now - last >= self._idle_seconds
        ]
        evicted = []
        for user_id in expired:
            self._last_access.pop(user_id, None)
            session = self._sessions.pop(user_id, None)
            if session is not None:
                evicted.append((user_id, session))
        return evicted

    @staticmethod
    def _close_evicted(evicted: list[tuple[str, DashboardSession]]) -> None:
        for user_id, session in evicted:
            session.close()
            logger.info("dashboard_sessions: evicted idle user=%s", user_id)

    def close(self, user_id: str) -> None:
        with self._lock:
            session = self._sessions.pop(user_id, None)
            self._last_access.pop(user_id, None)
        if session is not None:
            session.close()
            logger.info("dashboard_sessions: closed user=%s", user_id)

    def close_all(self) -> None:
        with self._lock:
            sessions, self._sessions = list(self._sessions.values()), {}
            self._last_access.clear()
        for session in sessions:
            session.close()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
