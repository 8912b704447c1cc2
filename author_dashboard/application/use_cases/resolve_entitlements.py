from __future__ import annotations

import logging
from threading import Lock

from author_dashboard.application.ports.plan_config_port import PlanConfigPort
from author_dashboard.domain.entities.feature import FeatureGrant
from author_dashboard.domain.exceptions import UnknownPlanError
from author_dashboard.domain.services.entitlements import normalize_grants


logger = logging.getLogger(__name__)


class EntitlementResolver:
    """Maps a plan id to its ordered feature grants.

    The configuration version is read on every call; a cached grant list is
    served only while plan id and version both match. ``invalidate`` drops
    the cache regardless of version.
    """

    def __init__(self, *, plan_config_port: PlanConfigPort):
        self._plan_config_port = plan_config_port
        self._cache: dict[str, tuple[int, tuple[FeatureGrant, ...]]] = {}
        self._lock = Lock()

    def resolve(self, plan_id: str) -> list[FeatureGrant]:
        try:
            version = self._plan_config_port.get_config_version()
        except Exception as exc:  # noqa: BLE001
            return list(self._fallback(plan_id=plan_id, exc=exc))

        with self._lock:
            cached = self._cache.get(plan_id)
        if cached is not None and cached[0] == version:
            return list(cached[1])

        try:
            grants = self._load(plan_id=plan_id)
        except Exception as exc:  # noqa: BLE001
            return list(self._fallback(plan_id=plan_id, exc=exc))

        with self._lock:
            self._cache[plan_id] = (version, grants)
        logger.info(
            "entitlement_resolver: resolved plan=%s version=%s grants=%s",
            plan_id,
            version,
            len(grants),
        )
        return list(grants)

    def invalidate(self) -> None:
        with self._lock:
            self._cache.clear()
        logger.info("entitlement_resolver: cache invalidated")

    def _load(self, *, plan_id: str) -> tuple[FeatureGrant, ...]:
        plan = self._plan_config_port.get_plan(plan_id=plan_id)
        if plan is None or not plan.is_active:
            logger.warning(
                "entitlement_resolver: %s",
                UnknownPlanError(f"Plan '{plan_id}' not found in configuration."),
            )
            return ()
        return normalize_grants(self._plan_config_port.list_plan_feature_grants(plan_id=plan.id))

    def _fallback(self, *, plan_id: str, exc: Exception) -> tuple[FeatureGrant, ...]:
        with self._lock:
            cached = self._cache.get(plan_id)
        logger.warning(
            "entitlement_resolver: config store unavailable plan=%s cached=%s detail=%s",
            plan_id,
            cached is not None,
            exc,
        )
        return cached[1] if cached is not None else ()
