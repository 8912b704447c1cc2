from __future__ import annotations

from sqlalchemy import text

from author_dashboard.application.ports.plan_config_port import PlanConfigPort
from author_dashboard.domain.entities.feature import FeatureGrant
from author_dashboard.domain.entities.plan import Plan
from author_dashboard.infrastructure.db.mappers.accounts_mapper import (
    map_row_to_feature_grant,
    map_row_to_plan,
)


class SqlPlanConfigRepository(PlanConfigPort):
    def __init__(self, engine):
        self._engine = engine

    def get_config_version(self) -> int:
        sql = """
            SELECT version
            FROM public.plan_config_versions
            WHERE id = 1
        """
        with self._engine.connect() as conn:
            value = conn.execute(text(sql)).scalar()
        return int(value) if value is not None else 0

    def get_plan(self, *, plan_id: str) -> Plan | None:
        sql = """
            SELECT id, name, is_active, sort_order
            FROM public.plans
            WHERE id = :plan_id
            LIMIT 1
        """
        with self._engine.connect() as conn:
            row = conn.execute(text(sql), {"plan_id": plan_id}).mappings().first()
        if row is None:
            return None
        return map_row_to_plan(row)

    def list_plan_feature_grants(self, *, plan_id: str) -> list[FeatureGrant]:
        sql = """
            SELECT pf.feature_code, pf.is_enabled, pf.limit_value
            FROM public.plan_features pf
            JOIN public.features f
              ON f.code = pf.feature_code
            WHERE pf.plan_id = :plan_id
            ORDER BY f.sort_order ASC, pf.feature_code ASC
        """
        with self._engine.connect() as conn:
            rows = conn.execute(text(sql), {"plan_id": plan_id}).mappings().all()
        return [map_row_to_feature_grant(row) for row in rows]
