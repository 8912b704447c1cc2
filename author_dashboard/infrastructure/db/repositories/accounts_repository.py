from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from author_dashboard.application.ports.subscription_port import SubscriptionPort
from author_dashboard.application.ports.user_port import UserPort
from author_dashboard.domain.entities.subscription import Subscription
from author_dashboard.domain.entities.user import User
from author_dashboard.domain.exceptions import SubscriptionUnavailableError
from author_dashboard.infrastructure.db.mappers.accounts_mapper import (
    map_row_to_subscription,
    map_row_to_user,
)


logger = logging.getLogger(__name__)


class SqlAccountsRepository(UserPort, SubscriptionPort):
    def __init__(self, engine):
        self._engine = engine

    def get_user_by_id(self, *, user_id: str) -> User | None:
        sql = """
            SELECT id, name, email, is_active, created_at
            FROM public.users
            WHERE id = :user_id
            LIMIT 1
        """
        with self._engine.connect() as conn:
            row = conn.execute(text(sql), {"user_id": user_id}).mappings().first()
        if row is None:
            return None
        return map_row_to_user(row)

    def get_current_subscription(self, *, user_id: str) -> Subscription | None:
        sql = """
            SELECT id, user_id, plan_id, status, trial_ends_at, current_period_end
            FROM public.user_subscriptions
            WHERE user_id = :user_id
              AND status IN ('active', 'trialing')
            ORDER BY COALESCE(current_period_end, created_at) DESC, created_at DESC
            LIMIT 1
        """
        try:
            with self._engine.connect() as conn:
                row = conn.execute(text(sql), {"user_id": user_id}).mappings().first()
        except SQLAlchemyError as exc:
            logger.warning("accounts_repo: subscription read failed user=%s detail=%s", user_id, exc)
            raise SubscriptionUnavailableError("Subscription store unavailable.") from exc
        if row is None:
            return None
        return map_row_to_subscription(row)

    def list_subscription_changes(self, *, since: datetime | None) -> list[tuple[str, datetime]]:
        sql = """
            SELECT user_id, max(updated_at) AS updated_at
            FROM public.user_subscriptions
            WHERE (CAST(:since AS timestamptz) IS NULL OR updated_at > :since)
            GROUP BY user_id
            ORDER BY max(updated_at) ASC
        """
        with self._engine.connect() as conn:
            rows = conn.execute(text(sql), {"since": since}).mappings().all()
        return [(str(row["user_id"]), row["updated_at"]) for row in rows]
