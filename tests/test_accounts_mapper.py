from __future__ import annotations

from datetime import datetime, timezone
import unittest

from author_dashboard.domain.entities.feature import UNLIMITED
from author_dashboard.infrastructure.db.mappers.accounts_mapper import (
    map_row_to_feature_grant,
    map_row_to_plan,
    map_row_to_subscription,
    map_row_to_user,
)


class AccountsMapperTests(unittest.TestCase):
    def test_legacy_minus_one_limit_maps_to_unlimited(self):
        grant = map_row_to_feature_grant({"feature_code": "max_books", "is_enabled": True, "limit_value": -1})

        self.assertIs(grant.limit, UNLIMITED)

    def test_numeric_and_missing_limits(self):
        limited = map_row_to_feature_grant({"feature_code": "max_books", "is_enabled": True, "limit_value": 1})
        boolean = map_row_to_feature_grant({"feature_code": "blog", "is_enabled": 0})

        self.assertEqual(limited.limit, 1)
        self.assertIsNone(boolean.limit)
        self.assertFalse(boolean.is_enabled)

    def test_unknown_subscription_status_does_not_grant_access(self):
        row = {
            "id": 10,
            "user_id": 7,
            "plan_id": "pro",
            "status": "PAST_DUE",
            "trial_ends_at": None,
            "current_period_end": None,
        }

        subscription = map_row_to_subscription(row)

        self.assertEqual(subscription.status, "expired")
        self.assertEqual(subscription.id, "10")
        self.assertEqual(subscription.user_id, "7")

    def test_known_subscription_status_is_normalized(self):
        row = {"id": "s", "user_id": "u", "plan_id": "pro", "status": " Trialing "}

        self.assertEqual(map_row_to_subscription(row).status, "trialing")

    def test_map_row_to_plan_and_user(self):
        plan = map_row_to_plan({"id": "pro", "name": "Pro", "is_active": True, "sort_order": "10"})
        user = map_row_to_user(
            {
                "id": 7,
                "name": "Alice",
                "email": "alice@example.com",
                "is_active": 1,
                "created_at": datetime(2026, 1, 1, tzinfo=timezone.utc),
            }
        )

        self.assertEqual(plan.sort_order, 10)
        self.assertEqual(user.id, "7")
        self.assertTrue(user.is_active)


if __name__ == "__main__":
    unittest.main()
