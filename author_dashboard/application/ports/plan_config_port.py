from __future__ import annotations

from typing import Protocol

from author_dashboard.domain.entities.feature import FeatureGrant
from author_dashboard.domain.entities.plan import Plan


class PlanConfigPort(Protocol):
    def get_config_version(self) -> int:
        ...

    def get_plan(self, *, plan_id: str) -> Plan | None:
        ...

    def list_plan_feature_grants(self, *, plan_id: str) -> list[FeatureGrant]:
        ...
