from __future__ import annotations

import logging
from typing import Iterable

from author_dashboard.domain.entities.feature import UNLIMITED, FeatureGrant, Limit


logger = logging.getLogger(__name__)


def normalize_grants(grants: Iterable[FeatureGrant]) -> tuple[FeatureGrant, ...]:
    """Keep the first grant of each feature code, preserving configuration order."""
    seen: set[str] = set()
    normalized: list[FeatureGrant] = []
    for grant in grants:
        if grant.feature_code in seen:
            logger.warning("entitlements: duplicate grant ignored feature=%s", grant.feature_code)
            continue
        seen.add(grant.feature_code)
        normalized.append(grant)
    return tuple(normalized)


def enabled_feature_codes(grants: Iterable[FeatureGrant]) -> frozenset[str]:
    return frozenset(grant.feature_code for grant in grants if grant.is_enabled)


def has_feature(grants: Iterable[FeatureGrant], feature_code: str) -> bool:
    return feature_code in enabled_feature_codes(grants)


def get_limit(grants: Iterable[FeatureGrant], resource_id: str) -> Limit:
    for grant in grants:
        if grant.feature_code != resource_id:
            continue
        if not grant.is_enabled:
            return 0
        if grant.limit is None:
            return UNLIMITED
        return grant.limit
    return 0


def is_limit_reached(limit: Limit, count: int) -> bool:
    if limit is UNLIMITED:
        return False
    return count >= limit


def limits_by_feature(grants: Iterable[FeatureGrant]) -> dict[str, Limit]:
    return {
        grant.feature_code: get_limit((grant,), grant.feature_code)
        for grant in grants
        if grant.limit is not None
    }
