from __future__ import annotations

import pytest

from author_dashboard.domain.entities.feature import UNLIMITED, FeatureGrant
from author_dashboard.domain.services.entitlements import (
    enabled_feature_codes,
    get_limit,
    has_feature,
    is_limit_reached,
    limits_by_feature,
    normalize_grants,
)


GRANTS = [
    FeatureGrant(feature_code="max_books", is_enabled=True, limit=UNLIMITED),
    FeatureGrant(feature_code="max_publications", is_enabled=True, limit=2),
    FeatureGrant(feature_code="blog", is_enabled=True),
    FeatureGrant(feature_code="events", is_enabled=False),
    FeatureGrant(feature_code="helpdesk", is_enabled=False, limit=10),
]


@pytest.mark.parametrize("count", [0, 1, 3, 10**9])
def test_unlimited_is_never_reached(count):
    limit = get_limit(GRANTS, "max_books")

    assert limit is UNLIMITED
    assert is_limit_reached(limit, count) is False


def test_unlimited_does_not_compare_like_a_number():
    with pytest.raises(TypeError):
        _ = UNLIMITED < 3


def test_numeric_limit_is_reached_at_the_limit():
    limit = get_limit(GRANTS, "max_publications")

    assert limit == 2
    assert is_limit_reached(limit, 1) is False
    assert is_limit_reached(limit, 2) is True
    assert is_limit_reached(limit, 3) is True


def test_disabled_or_missing_grant_limits_to_zero():
    assert get_limit(GRANTS, "helpdesk") == 0
    assert get_limit(GRANTS, "unknown_resource") == 0
    assert is_limit_reached(get_limit(GRANTS, "unknown_resource"), 0) is True


def test_enabled_grant_without_limit_is_unlimited():
    assert get_limit(GRANTS, "blog") is UNLIMITED


def test_enabled_feature_codes_and_has_feature():
    assert enabled_feature_codes(GRANTS) == {"max_books", "max_publications", "blog"}
    assert has_feature(GRANTS, "blog") is True
    assert has_feature(GRANTS, "events") is False


def test_limits_by_feature_only_lists_limited_grants():
    assert limits_by_feature(GRANTS) == {
        "max_books": UNLIMITED,
        "max_publications": 2,
        "helpdesk": 0,
    }


def test_normalize_grants_keeps_first_grant_per_feature():
    grants = normalize_grants(
        [
            FeatureGrant(feature_code="blog", is_enabled=True),
            FeatureGrant(feature_code="faq", is_enabled=False),
            FeatureGrant(feature_code="blog", is_enabled=False),
        ]
    )

    assert [grant.feature_code for grant in grants] == ["blog", "faq"]
    assert grants[0].is_enabled is True
