from __future__ import annotations

from typing import Iterable, Mapping

from author_dashboard.api.schemas.dashboard import (
    ActivityItemResponse,
    DashboardResponse,
    DashboardStatsResponse,
    DomainFailureResponse,
    DomainStatResponse,
    FeatureGrantResponse,
    LimitValue,
)
from author_dashboard.api.schemas.me import EntitlementsResponse
from author_dashboard.application.dto.entitlements import UserEntitlementsOutput
from author_dashboard.domain.entities.dashboard import DashboardSnapshot
from author_dashboard.domain.entities.feature import UNLIMITED, FeatureGrant, Limit
from author_dashboard.domain.exceptions import AggregationTimeoutError
from author_dashboard.domain.services.entitlements import limits_by_feature


def limit_value(limit: Limit) -> LimitValue:
    return "unlimited" if limit is UNLIMITED else limit


def present_grants(grants: Iterable[FeatureGrant]) -> list[FeatureGrantResponse]:
    return [
        FeatureGrantResponse(
            feature_code=grant.feature_code,
            enabled=grant.is_enabled,
            limit=limit_value(grant.limit) if grant.limit is not None else None,
        )
        for grant in grants
    ]


def present_limits(limits: Mapping[str, Limit]) -> dict[str, LimitValue]:
    return {code: limit_value(limit) for code, limit in limits.items()}


def present_dashboard(snapshot: DashboardSnapshot) -> DashboardResponse:
    stats = snapshot.stats
    return DashboardResponse(
        pass_id=snapshot.pass_id,
        plan_id=snapshot.plan_id,
        stats=DashboardStatsResponse(
            total_books=stats.total_books,
            published_books=stats.published_books,
            total_views=stats.total_views,
            this_month_views=stats.this_month_views,
            blog_posts=stats.blog_posts,
            published_blog_posts=stats.published_blog_posts,
            events=stats.events,
            upcoming_events=stats.upcoming_events,
            awards=stats.awards,
            faqs=stats.faqs,
            published_faqs=stats.published_faqs,
            newsletter_subscribers=stats.newsletter_subscribers,
            contact_submissions=stats.contact_submissions,
            this_month_contacts=stats.this_month_contacts,
            by_domain={
                domain_id: DomainStatResponse(
                    total_count=stat.total_count,
                    secondary_count=stat.secondary_count,
                )
                for domain_id, stat in stats.by_domain.items()
            },
        ),
        feed=[
            ActivityItemResponse(
                domain_id=item.domain_id,
                title=item.title,
                timestamp=item.timestamp,
                status=item.status,
                target_ref=item.target_ref,
            )
            for item in snapshot.feed
        ],
        grants=present_grants(snapshot.grants),
        limits=present_limits(limits_by_feature(snapshot.grants)),
        failures=[
            DomainFailureResponse(
                domain_id=failure.domain_id,
                kind="timeout" if isinstance(failure, AggregationTimeoutError) else "error",
                reason=failure.reason,
            )
            for failure in snapshot.failures
        ],
    )


def present_entitlements(output: UserEntitlementsOutput) -> EntitlementsResponse:
    return EntitlementsResponse(
        plan_id=output.plan_id,
        subscription_status=output.subscription_status,
        is_pro=output.is_pro,
        is_free=output.is_free,
        is_on_trial=output.is_on_trial,
        trial_days_left=output.trial_days_left,
        grants=present_grants(output.grants),
        features=output.boolean_features,
        limits=present_limits(output.limits),
    )
