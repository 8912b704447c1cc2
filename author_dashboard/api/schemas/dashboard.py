from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


LimitValue = int | Literal["unlimited"]


class FeatureGrantResponse(BaseModel):
    feature_code: str
    enabled: bool
    limit: LimitValue | None = Field(None, description="Limite numerico, 'unlimited' ou nulo.")


class DomainStatResponse(BaseModel):
    total_count: int
    secondary_count: int


class DashboardStatsResponse(BaseModel):
    total_books: int
    published_books: int
    total_views: int
    this_month_views: int
    blog_posts: int
    published_blog_posts: int
    events: int
    upcoming_events: int
    awards: int
    faqs: int
    published_faqs: int
    newsletter_subscribers: int
    contact_submissions: int
    this_month_contacts: int
    by_domain: dict[str, DomainStatResponse]


class ActivityItemResponse(BaseModel):
    domain_id: str
    title: str
    timestamp: datetime
    status: str | None
    target_ref: str


class DomainFailureResponse(BaseModel):
    domain_id: str
    kind: str
    reason: str


class DashboardResponse(BaseModel):
    pass_id: int
    plan_id: str
    stats: DashboardStatsResponse
    feed: list[ActivityItemResponse]
    grants: list[FeatureGrantResponse]
    limits: dict[str, LimitValue]
    failures: list[DomainFailureResponse]


class ViewsAnalyticsResponse(BaseModel):
    total_views: int
    this_month_views: int
    published_books: int
