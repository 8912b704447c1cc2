from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Mapping

from author_dashboard.domain.entities.feature import FeatureGrant
from author_dashboard.domain.exceptions import DomainFetchFailedError


BOOKS = "books"
VIEWS = "views"
BLOG = "blog"
EVENTS = "events"
AWARDS = "awards"
FAQ = "faq"
NEWSLETTER = "newsletter"
CONTACT_FORMS = "contact_forms"

# Declaration order; also the tie-break order of the feed.
DOMAIN_ORDER: tuple[str, ...] = (
    BOOKS,
    BLOG,
    EVENTS,
    AWARDS,
    FAQ,
    NEWSLETTER,
    CONTACT_FORMS,
)
STAT_KEYS: tuple[str, ...] = (BOOKS, VIEWS) + DOMAIN_ORDER[1:]

FEED_SIZE = 5


@dataclass(frozen=True)
class DomainStat:
    total_count: int = 0
    secondary_count: int = 0


ZERO_STAT = DomainStat()


@dataclass(frozen=True)
class ActivityItem:
    domain_id: str
    title: str
    timestamp: datetime
    target_ref: str
    status: str | None = None


@dataclass(frozen=True)
class DomainFetchResult:
    domain_id: str
    stat: DomainStat
    recent_items: tuple[ActivityItem, ...] = ()
    failure: DomainFetchFailedError | None = None
    sub_stats: Mapping[str, DomainStat] = field(default_factory=dict)
    sub_failures: tuple[DomainFetchFailedError, ...] = ()

    @property
    def failed(self) -> bool:
        return self.failure is not None


def failed_result(failure: DomainFetchFailedError) -> DomainFetchResult:
    return DomainFetchResult(domain_id=failure.domain_id, stat=ZERO_STAT, failure=failure)


@dataclass(frozen=True)
class DashboardStats:
    by_domain: Mapping[str, DomainStat]

    def __post_init__(self):
        filled = {key: self.by_domain.get(key, ZERO_STAT) for key in STAT_KEYS}
        object.__setattr__(self, "by_domain", MappingProxyType(filled))

    def __getitem__(self, domain_id: str) -> DomainStat:
        return self.by_domain.get(domain_id, ZERO_STAT)

    @property
    def total_books(self) -> int:
        return self[BOOKS].total_count

    @property
    def published_books(self) -> int:
        return self[BOOKS].secondary_count

    @property
    def total_views(self) -> int:
        return self[VIEWS].total_count

    @property
    def this_month_views(self) -> int:
        return self[VIEWS].secondary_count

    @property
    def blog_posts(self) -> int:
        return self[BLOG].total_count

    @property
    def published_blog_posts(self) -> int:
        return self[BLOG].secondary_count

    @property
    def events(self) -> int:
        return self[EVENTS].total_count

    @property
    def upcoming_events(self) -> int:
        return self[EVENTS].secondary_count

    @property
    def awards(self) -> int:
        return self[AWARDS].total_count

    @property
    def faqs(self) -> int:
        return self[FAQ].total_count

    @property
    def published_faqs(self) -> int:
        return self[FAQ].secondary_count

    @property
    def newsletter_subscribers(self) -> int:
        return self[NEWSLETTER].total_count

    @property
    def contact_submissions(self) -> int:
        return self[CONTACT_FORMS].total_count

    @property
    def this_month_contacts(self) -> int:
        return self[CONTACT_FORMS].secondary_count


@dataclass(frozen=True)
class DashboardSnapshot:
    pass_id: int
    user_id: str
    plan_id: str
    grants: tuple[FeatureGrant, ...]
    stats: DashboardStats
    feed: tuple[ActivityItem, ...]
    failures: tuple[DomainFetchFailedError, ...] = ()
