from __future__ import annotations

from sqlalchemy import text

from author_dashboard.infrastructure.db.engine import Base
from author_dashboard.infrastructure.db.models import accounts, content  # noqa: F401


DEFAULT_PLANS = (
    {"id": "free", "name": "Free", "sort_order": 0},
    {"id": "pro", "name": "Pro", "sort_order": 10},
)

DEFAULT_FEATURES = (
    {"code": "max_books", "name": "Books", "sort_order": 0},
    {"code": "max_publications", "name": "Publications", "sort_order": 1},
    {"code": "blog", "name": "Blog", "sort_order": 10},
    {"code": "events", "name": "Events", "sort_order": 11},
    {"code": "awards", "name": "Awards", "sort_order": 12},
    {"code": "faq", "name": "FAQ", "sort_order": 13},
    {"code": "newsletter", "name": "Newsletter", "sort_order": 14},
    {"code": "contact_forms", "name": "Contact Forms", "sort_order": 15},
    {"code": "advanced_analytics", "name": "Advanced Analytics", "sort_order": 20},
    {"code": "custom_domain", "name": "Custom Domain", "sort_order": 21},
    {"code": "premium_themes", "name": "Premium Themes", "sort_order": 22},
    {"code": "media_kit", "name": "Media Kit", "sort_order": 23},
)

# (plan, feature, is_enabled, limit_value); -1 is unlimited.
DEFAULT_GRANTS = (
    ("free", "max_books", True, 3),
    ("free", "max_publications", True, 1),
    ("free", "blog", False, None),
    ("free", "events", False, None),
    ("free", "awards", False, None),
    ("free", "faq", False, None),
    ("free", "newsletter", False, None),
    ("free", "contact_forms", False, None),
    ("free", "advanced_analytics", False, None),
    ("free", "custom_domain", False, None),
    ("free", "premium_themes", False, None),
    ("free", "media_kit", False, None),
    ("pro", "max_books", True, -1),
    ("pro", "max_publications", True, -1),
    ("pro", "blog", True, None),
    ("pro", "events", True, None),
    ("pro", "awards", True, None),
    ("pro", "faq", True, None),
    ("pro", "newsletter", True, None),
    ("pro", "contact_forms", True, None),
    ("pro", "advanced_analytics", True, None),
    ("pro", "custom_domain", True, None),
    ("pro", "premium_themes", True, None),
    ("pro", "media_kit", True, None),
)


def ensure_schema(engine) -> None:
    Base.metadata.create_all(engine)


def seed_plan_defaults(engine) -> None:
    with engine.begin() as conn:
        for plan in DEFAULT_PLANS:
            conn.execute(
                text(
                    """
                    INSERT INTO public.plans (id, name, is_active, sort_order)
                    VALUES (:id, :name, true, :sort_order)
                    ON CONFLICT (id) DO UPDATE
                    SET name = EXCLUDED.name,
                        sort_order = EXCLUDED.sort_order
                    """
                ),
                plan,
            )
        for feature in DEFAULT_FEATURES:
            conn.execute(
                text(
                    """
                    INSERT INTO public.features (code, name, sort_order)
                    VALUES (:code, :name, :sort_order)
                    ON CONFLICT (code) DO UPDATE
                    SET name = EXCLUDED.name,
                        sort_order = EXCLUDED.sort_order
                    """
                ),
                feature,
            )
        for plan_id, feature_code, is_enabled, limit_value in DEFAULT_GRANTS:
            conn.execute(
                text(
                    """
                    INSERT INTO public.plan_features (plan_id, feature_code, is_enabled, limit_value)
                    VALUES (:plan_id, :feature_code, :is_enabled, :limit_value)
                    ON CONFLICT (plan_id, feature_code) DO UPDATE
                    SET is_enabled = EXCLUDED.is_enabled,
                        limit_value = EXCLUDED.limit_value
                    """
                ),
                {
                    "plan_id": plan_id,
                    "feature_code": feature_code,
                    "is_enabled": is_enabled,
                    "limit_value": limit_value,
                },
            )
        conn.execute(
            text(
                """
                INSERT INTO public.plan_config_versions (id, version, updated_at)
                VALUES (1, 1, now())
                ON CONFLICT (id) DO UPDATE
                SET version = public.plan_config_versions.version + 1,
                    updated_at = now()
                """
            )
        )
