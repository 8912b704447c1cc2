from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Protocol

from author_dashboard.domain.entities.dashboard import DomainFetchResult, failed_result
from author_dashboard.domain.exceptions import DomainFetchFailedError
from author_dashboard.shared.clock import utcnow


logger = logging.getLogger(__name__)


class DomainFetcher(Protocol):
    domain_id: str
    # None marks the mandatory domain, fetched regardless of entitlement.
    feature_code: str | None

    @property
    def mandatory(self) -> bool:
        ...

    def fetch(self, user_id: str) -> DomainFetchResult:
        ...


class BaseDomainFetcher:
    """Catches every failure of ``_load`` and turns it into a zero contribution."""

    domain_id: str = ""
    feature_code: str | None = None
    recent_limit: int = 2

    def __init__(self, *, clock: Callable[[], datetime] = utcnow):
        self._clock = clock

    @property
    def mandatory(self) -> bool:
        return self.feature_code is None

    def fetch(self, user_id: str) -> DomainFetchResult:
        try:
            return self._load(user_id=user_id, now=self._clock())
        except Exception as exc:  # noqa: BLE001
            failure = DomainFetchFailedError(self.domain_id, str(exc) or type(exc).__name__)
            logger.warning(
                "domain_fetcher: fetch failed domain=%s user=%s detail=%s",
                self.domain_id,
                user_id,
                failure.reason,
            )
            return failed_result(failure)

    def _load(self, *, user_id: str, now: datetime) -> DomainFetchResult:
        raise NotImplementedError
