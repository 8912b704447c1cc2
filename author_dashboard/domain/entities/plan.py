from __future__ import annotations

from dataclasses import dataclass

from author_dashboard.domain.entities.feature import FeatureGrant


@dataclass(frozen=True)
class Plan:
    id: str
    name: str
    is_active: bool
    sort_order: int


@dataclass(frozen=True)
class PlanSnapshot:
    plan: Plan
    config_version: int
    grants: tuple[FeatureGrant, ...]
