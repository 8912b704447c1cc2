from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FetchTimeoutError
from time import monotonic, perf_counter
from typing import Sequence

from author_dashboard.application.fetchers.base import DomainFetcher
from author_dashboard.application.ports.identity_port import IdentityPort
from author_dashboard.application.use_cases.resolve_entitlements import EntitlementResolver
from author_dashboard.application.use_cases.subscription_state import SubscriptionStateProvider
from author_dashboard.domain.entities.dashboard import (
    FEED_SIZE,
    DashboardSnapshot,
    DashboardStats,
    DomainFetchResult,
    DomainStat,
    failed_result,
)
from author_dashboard.domain.exceptions import (
    AggregationTimeoutError,
    DomainFetchFailedError,
    IdentityUnavailableError,
    MandatoryDomainFetchFailedError,
)
from author_dashboard.domain.services.activity_feed import merge_activity
from author_dashboard.domain.services.entitlements import enabled_feature_codes


logger = logging.getLogger(__name__)


class AggregateDashboardUseCase:
    """Runs one aggregation pass: entitlement, fan-out, fan-in, merge."""

    def __init__(
        self,
        *,
        identity_port: IdentityPort,
        subscription_state: SubscriptionStateProvider,
        entitlement_resolver: EntitlementResolver,
        fetchers: Sequence[DomainFetcher],
        fetch_timeout_seconds: float = 5.0,
        feed_size: int = FEED_SIZE,
    ):
        if not any(fetcher.mandatory for fetcher in fetchers):
            raise ValueError("At least one mandatory fetcher is required.")
        self._identity_port = identity_port
        self._subscription_state = subscription_state
        self._entitlement_resolver = entitlement_resolver
        self._fetchers = tuple(fetchers)
        self._fetch_timeout_seconds = fetch_timeout_seconds
        self._feed_size = min(feed_size, FEED_SIZE)

    def execute(self, *, pass_id: int = 0) -> DashboardSnapshot:
        started = perf_counter()
        user_id = self._current_user_id()

        # One plan snapshot for the whole pass.
        subscription = self._subscription_state.current()
        plan_id = self._subscription_state.effective_plan_id(subscription)
        grants = tuple(self._entitlement_resolver.resolve(plan_id))
        enabled = enabled_feature_codes(grants)

        selected = [
            fetcher
            for fetcher in self._fetchers
            if fetcher.mandatory or fetcher.feature_code in enabled
        ]
        logger.info(
            "aggregate_dashboard: start pass=%s user=%s plan=%s domains=%s",
            pass_id,
            user_id,
            plan_id,
            ",".join(fetcher.domain_id for fetcher in selected),
        )

        results = self._fan_out(selected, user_id=user_id)

        by_domain: dict[str, DomainStat] = {}
        failures: list[DomainFetchFailedError] = []
        items = []
        for fetcher, result in zip(selected, results):
            if result.failure is not None:
                if fetcher.mandatory:
                    raise MandatoryDomainFetchFailedError(
                        result.failure.domain_id, result.failure.reason
                    ) from result.failure
                failures.append(result.failure)
                continue
            by_domain[result.domain_id] = result.stat
            by_domain.update(result.sub_stats)
            failures.extend(result.sub_failures)
            items.extend(result.recent_items)

        snapshot = DashboardSnapshot(
            pass_id=pass_id,
            user_id=user_id,
            plan_id=plan_id,
            grants=grants,
            stats=DashboardStats(by_domain=by_domain),
            feed=merge_activity(items, size=self._feed_size),
            failures=tuple(failures),
        )
        logger.info(
            "aggregate_dashboard: done pass=%s user=%s feed=%s failures=%s elapsed_ms=%.1f",
            pass_id,
            user_id,
            len(snapshot.feed),
            ",".join(failure.domain_id for failure in snapshot.failures) or "-",
            (perf_counter() - started) * 1000,
        )
        return snapshot

    def _current_user_id(self) -> str:
        try:
            user = self._identity_port.get_current_user()
        except Exception as exc:  # noqa: BLE001
            raise IdentityUnavailableError("Identity source failed.") from exc
        if user is None:
            raise IdentityUnavailableError("No authenticated user.")
        return user.id

    def _fan_out(self, fetchers: Sequence[DomainFetcher], *, user_id: str) -> list[DomainFetchResult]:
        executor = ThreadPoolExecutor(
            # One worker per domain; every deadline starts at submission.
            max_workers=len(fetchers),
            thread_name_prefix="dashboard-fetch",
        )
        try:
            started = monotonic()
            futures = [(fetcher, executor.submit(fetcher.fetch, user_id)) for fetcher in fetchers]
            return [
                self._join(fetcher, future, deadline=started + self._fetch_timeout_seconds)
                for fetcher, future in futures
            ]
        finally:
            # Hung fetches are abandoned, not awaited.
            executor.shutdown(wait=False, cancel_futures=True)

    def _join(self, fetcher: DomainFetcher, future, *, deadline: float) -> DomainFetchResult:
        try:
            return future.result(timeout=max(0.0, deadline - monotonic()))
        except FetchTimeoutError:
            future.cancel()
            failure = AggregationTimeoutError(
                fetcher.domain_id,
                f"timed out after {self._fetch_timeout_seconds}s",
            )
        except Exception as exc:  # noqa: BLE001
            failure = DomainFetchFailedError(fetcher.domain_id, str(exc) or type(exc).__name__)
        logger.warning(
            "aggregate_dashboard: domain degraded domain=%s detail=%s",
            failure.domain_id,
            failure.reason,
        )
        return failed_result(failure)
