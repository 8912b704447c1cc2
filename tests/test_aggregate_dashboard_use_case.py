from __future__ import annotations

from datetime import datetime, timedelta, timezone
from threading import Event

import pytest

from author_dashboard.application.fetchers.awards import AwardsFetcher
from author_dashboard.application.fetchers.blog import BlogFetcher
from author_dashboard.application.fetchers.books import BooksFetcher
from author_dashboard.application.fetchers.contact import ContactFetcher
from author_dashboard.application.fetchers.events import EventsFetcher
from author_dashboard.application.fetchers.faq import FaqFetcher
from author_dashboard.application.fetchers.newsletter import NewsletterFetcher
from author_dashboard.application.use_cases.aggregate_dashboard import AggregateDashboardUseCase
from author_dashboard.application.use_cases.resolve_entitlements import EntitlementResolver
from author_dashboard.application.use_cases.subscription_state import SubscriptionStateProvider
from author_dashboard.domain.entities.content import (
    AwardRecord,
    BlogPostRecord,
    BookRecord,
    ContactSubmissionRecord,
    EventRecord,
    FaqRecord,
    NewsletterSubscriberRecord,
)
from author_dashboard.domain.entities.dashboard import DOMAIN_ORDER, FEED_SIZE
from author_dashboard.domain.entities.feature import FeatureGrant
from author_dashboard.domain.entities.plan import Plan
from author_dashboard.domain.entities.subscription import Subscription
from author_dashboard.domain.entities.user import User
from author_dashboard.domain.exceptions import (
    AggregationTimeoutError,
    IdentityUnavailableError,
    MandatoryDomainFetchFailedError,
)


NOW = datetime(2026, 5, 20, 12, 0, tzinfo=timezone.utc)
USER = User(id="user-1", name="Alice", email="alice@example.com", is_active=True, created_at=NOW)
OPTIONAL_DOMAINS = DOMAIN_ORDER[1:]


def _ago(days: int, hours: int = 0) -> datetime:
    return NOW - timedelta(days=days, hours=hours)


class FakeIdentity:
    def __init__(self, user: User | None = USER, error: Exception | None = None):
        self.user = user
        self.error = error

    def get_current_user(self) -> User | None:
        if self.error is not None:
            raise self.error
        return self.user


class FakePlanConfigPort:
    def __init__(self, grants_by_plan: dict[str, list[FeatureGrant]]):
        self.grants_by_plan = grants_by_plan
        self.plan_lookups: list[str] = []

    def get_config_version(self) -> int:
        return 1

    def get_plan(self, *, plan_id: str) -> Plan | None:
        self.plan_lookups.append(plan_id)
        if plan_id not in self.grants_by_plan:
            return None
        return Plan(id=plan_id, name=plan_id.title(), is_active=True, sort_order=0)

    def list_plan_feature_grants(self, *, plan_id: str) -> list[FeatureGrant]:
        return list(self.grants_by_plan[plan_id])


class FakeSubscriptionPort:
    def __init__(self, plan_id: str, *, status: str = "active", trial_ends_at: datetime | None = None):
        self.plan_id = plan_id
        self.status = status
        self.trial_ends_at = trial_ends_at

    def get_current_subscription(self, *, user_id: str) -> Subscription | None:
        return Subscription(
            id="sub-1",
            user_id=user_id,
            plan_id=self.plan_id,
            status=self.status,
            trial_ends_at=self.trial_ends_at,
            current_period_end=NOW + timedelta(days=30),
        )


class FakeContentPort:
    """Serves every content domain from in-memory lists."""

    def __init__(self, *, items_per_domain: int = 0, fail=(), block=()):
        n = items_per_domain
        self.books = [
            BookRecord(
                id=f"book-{i}",
                slug=f"book-{i}",
                title=f"Book {i}",
                status="published" if i % 2 == 0 else "draft",
                created_at=_ago(i, 1),
            )
            for i in range(n)
        ]
        self.posts = [
            BlogPostRecord(id=f"post-{i}", title=f"Post {i}", status="published", created_at=_ago(i, 2))
            for i in range(n)
        ]
        self.events = [
            EventRecord(
                id=f"event-{i}",
                title=f"Event {i}",
                status="scheduled",
                event_date=NOW + timedelta(days=i + 1),
                created_at=_ago(i, 3),
            )
            for i in range(n)
        ]
        self.awards = [AwardRecord(id=f"award-{i}", title=f"Award {i}", created_at=_ago(i, 4)) for i in range(n)]
        self.faqs = [
            FaqRecord(id=f"faq-{i}", question=f"Question {i}?", is_published=True, created_at=_ago(i, 5))
            for i in range(n)
        ]
        self.subscribers = [
            NewsletterSubscriberRecord(id=f"sub-{i}", status="active", created_at=_ago(i)) for i in range(n)
        ]
        self.contacts = [
            ContactSubmissionRecord(id=f"msg-{i}", name=f"Reader {i}", status="new", created_at=_ago(i, 6))
            for i in range(n)
        ]
        self.fail = set(fail)
        self.block = set(block)
        self.release = Event()
        self.calls: list[str] = []

    def _enter(self, domain_id: str) -> None:
        self.calls.append(domain_id)
        if domain_id in self.block:
            self.release.wait(timeout=10)
        if domain_id in self.fail:
            raise RuntimeError(f"{domain_id} store down")

    def list_books(self, *, user_id: str):
        self._enter("books")
        return list(self.books)

    def list_page_views(self, *, user_id: str, book_slugs):
        self._enter("views")
        return []

    def list_blog_posts(self, *, user_id: str):
        self._enter("blog")
        return list(self.posts)

    def list_events(self, *, user_id: str):
        self._enter("events")
        return list(self.events)

    def list_awards(self, *, user_id: str):
        self._enter("awards")
        return list(self.awards)

    def list_faqs(self, *, user_id: str):
        self._enter("faq")
        return list(self.faqs)

    def list_newsletter_subscribers(self, *, user_id: str):
        self._enter("newsletter")
        return list(self.subscribers)

    def list_contact_submissions(self, *, user_id: str):
        self._enter("contact_forms")
        return list(self.contacts)


def _grants(*enabled: str, disabled=()) -> list[FeatureGrant]:
    return [FeatureGrant(feature_code=code, is_enabled=True) for code in enabled] + [
        FeatureGrant(feature_code=code, is_enabled=False) for code in disabled
    ]


def _make_use_case(
    content: FakeContentPort,
    *,
    grants: list[FeatureGrant],
    plan_id: str = "pro",
    configured: bool = True,
    identity: FakeIdentity | None = None,
    fetch_timeout_seconds: float = 2.0,
    subscription_port: FakeSubscriptionPort | None = None,
    feed_size: int = FEED_SIZE,
    free_grants: list[FeatureGrant] | None = None,
) -> tuple[AggregateDashboardUseCase, FakePlanConfigPort]:
    grants_by_plan = {plan_id: grants} if configured else {}
    if free_grants is not None:
        grants_by_plan["free"] = free_grants
    plan_config = FakePlanConfigPort(grants_by_plan)
    subscription_state = SubscriptionStateProvider(
        subscription_port=subscription_port or FakeSubscriptionPort(plan_id),
        user_id=USER.id,
        clock=lambda: NOW,
    )
    subscription_state.refresh()

    def clock() -> datetime:
        return NOW

    fetchers = [
        BooksFetcher(books_port=content, clock=clock),
        BlogFetcher(blog_port=content, clock=clock),
        EventsFetcher(events_port=content, clock=clock),
        AwardsFetcher(awards_port=content, clock=clock),
        FaqFetcher(faq_port=content, clock=clock),
        NewsletterFetcher(newsletter_port=content, clock=clock),
        ContactFetcher(contact_port=content, clock=clock),
    ]
    use_case = AggregateDashboardUseCase(
        identity_port=identity or FakeIdentity(),
        subscription_state=subscription_state,
        entitlement_resolver=EntitlementResolver(plan_config_port=plan_config),
        fetchers=fetchers,
        fetch_timeout_seconds=fetch_timeout_seconds,
        feed_size=feed_size,
    )
    return use_case, plan_config


def test_books_with_blog_enabled_and_events_disabled():
    content = FakeContentPort()
    content.books = [
        BookRecord(id="b1", slug="b1", title="First", status="published", created_at=_ago(1)),
        BookRecord(id="b2", slug="b2", title="Second", status="published", created_at=_ago(3)),
        BookRecord(id="b3", slug="b3", title="Third", status="draft", created_at=_ago(5)),
    ]
    content.posts = [
        BlogPostRecord(id="p1", title="Hello", status="published", created_at=_ago(2)),
        BlogPostRecord(id="p2", title="Notes", status="draft", created_at=_ago(4)),
    ]
    content.events = [
        EventRecord(id="e1", title="Launch", status=None, event_date=NOW, created_at=_ago(0, 1)),
    ]
    use_case, _ = _make_use_case(content, grants=_grants("blog", disabled=("events",)))

    snapshot = use_case.execute(pass_id=1)

    assert snapshot.stats.total_books == 3
    assert snapshot.stats.published_books == 2
    assert snapshot.stats.blog_posts == 2
    assert snapshot.stats.events == 0
    assert "events" not in content.calls
    assert [item.title for item in snapshot.feed] == ["First", "Hello", "Second", "Notes", "Third"]
    assert snapshot.failures == ()
    assert snapshot.pass_id == 1
    assert snapshot.plan_id == "pro"


def test_hung_domain_times_out_without_blocking_the_rest():
    content = FakeContentPort(items_per_domain=2, block=("contact_forms",))
    use_case, _ = _make_use_case(
        content,
        grants=_grants("contact_forms", "blog"),
        fetch_timeout_seconds=0.2,
    )

    try:
        snapshot = use_case.execute()
    finally:
        content.release.set()

    assert snapshot.stats.contact_submissions == 0
    assert snapshot.stats.total_books == 2
    assert snapshot.stats.blog_posts == 2
    assert {item.domain_id for item in snapshot.feed} == {"books", "blog"}
    assert [failure.domain_id for failure in snapshot.failures] == ["contact_forms"]
    assert isinstance(snapshot.failures[0], AggregationTimeoutError)


def test_unknown_plan_only_shows_mandatory_domain():
    content = FakeContentPort(items_per_domain=2)
    use_case, _ = _make_use_case(content, grants=[], plan_id="ghost", configured=False)

    snapshot = use_case.execute()

    assert snapshot.grants == ()
    assert snapshot.stats.total_books == 2
    assert set(content.calls) == {"books", "views"}
    assert {item.domain_id for item in snapshot.feed} == {"books"}
    assert all(snapshot.stats[domain_id].total_count == 0 for domain_id in OPTIONAL_DOMAINS)


@pytest.mark.parametrize("disabled_domain", OPTIONAL_DOMAINS)
def test_disabled_domain_contributes_nothing(disabled_domain):
    content = FakeContentPort(items_per_domain=3)
    enabled = [domain_id for domain_id in OPTIONAL_DOMAINS if domain_id != disabled_domain]
    use_case, _ = _make_use_case(content, grants=_grants(*enabled, disabled=(disabled_domain,)))

    snapshot = use_case.execute()

    assert disabled_domain not in content.calls
    assert snapshot.stats[disabled_domain].total_count == 0
    assert snapshot.stats[disabled_domain].secondary_count == 0
    assert all(item.domain_id != disabled_domain for item in snapshot.feed)


def test_feed_is_bounded_with_every_domain_enabled():
    content = FakeContentPort(items_per_domain=10)
    use_case, _ = _make_use_case(content, grants=_grants(*OPTIONAL_DOMAINS))

    snapshot = use_case.execute()

    assert len(snapshot.feed) == FEED_SIZE
    timestamps = [item.timestamp for item in snapshot.feed]
    assert timestamps == sorted(timestamps, reverse=True)


def test_same_inputs_give_same_snapshot():
    content = FakeContentPort(items_per_domain=4)
    use_case, _ = _make_use_case(content, grants=_grants(*OPTIONAL_DOMAINS))

    first = use_case.execute(pass_id=1)
    second = use_case.execute(pass_id=1)

    assert first.feed == second.feed
    assert first.stats == second.stats


def test_failed_domain_does_not_change_other_domains():
    healthy_content = FakeContentPort(items_per_domain=2)
    healthy, _ = _make_use_case(healthy_content, grants=_grants("blog", "events", "awards"))
    broken_content = FakeContentPort(items_per_domain=2, fail=("blog",))
    broken, _ = _make_use_case(broken_content, grants=_grants("blog", "events", "awards"))

    baseline = healthy.execute()
    degraded = broken.execute()

    assert degraded.stats.blog_posts == 0
    assert [failure.domain_id for failure in degraded.failures] == ["blog"]
    for domain_id in ("books", "views", "events", "awards"):
        assert degraded.stats[domain_id] == baseline.stats[domain_id]
    baseline_others = [item for item in baseline.feed if item.domain_id != "blog"]
    degraded_others = [item for item in degraded.feed if item.domain_id != "blog"]
    assert degraded_others[: len(baseline_others)] == baseline_others


def test_views_failure_is_reported_without_failing_books():
    content = FakeContentPort(items_per_domain=2, fail=("views",))
    use_case, _ = _make_use_case(content, grants=[])

    snapshot = use_case.execute()

    assert snapshot.stats.total_books == 2
    assert snapshot.stats.total_views == 0
    assert [failure.domain_id for failure in snapshot.failures] == ["views"]


def test_mandatory_domain_failure_aborts_the_pass():
    content = FakeContentPort(items_per_domain=2, fail=("books",))
    use_case, _ = _make_use_case(content, grants=_grants("blog"))

    with pytest.raises(MandatoryDomainFetchFailedError) as exc_info:
        use_case.execute()

    assert exc_info.value.domain_id == "books"


@pytest.mark.parametrize(
    "identity",
    [FakeIdentity(user=None), FakeIdentity(error=ConnectionError("auth down"))],
)
def test_missing_identity_fails_before_any_fetch(identity):
    content = FakeContentPort(items_per_domain=2)
    use_case, plan_config = _make_use_case(content, grants=_grants("blog"), identity=identity)

    with pytest.raises(IdentityUnavailableError):
        use_case.execute()

    assert content.calls == []
    assert plan_config.plan_lookups == []


def test_plan_is_read_once_per_pass():
    content = FakeContentPort(items_per_domain=1)
    use_case, plan_config = _make_use_case(content, grants=_grants(*OPTIONAL_DOMAINS))

    use_case.execute()

    assert plan_config.plan_lookups == ["pro"]


def test_use_case_requires_a_mandatory_fetcher():
    content = FakeContentPort()
    with pytest.raises(ValueError):
        AggregateDashboardUseCase(
            identity_port=FakeIdentity(),
            subscription_state=SubscriptionStateProvider(
                subscription_port=FakeSubscriptionPort("pro"),
                user_id=USER.id,
            ),
            entitlement_resolver=EntitlementResolver(plan_config_port=FakePlanConfigPort({})),
            fetchers=[BlogFetcher(blog_port=content)],
        )


@pytest.mark.parametrize(
    "subscription_port",
    [
        FakeSubscriptionPort("pro", status="canceled"),
        FakeSubscriptionPort("pro", status="expired"),
        FakeSubscriptionPort("pro", status="trialing", trial_ends_at=NOW - timedelta(hours=1)),
    ],
)
def test_lapsed_subscription_gets_default_plan_domains(subscription_port):
    content = FakeContentPort(items_per_domain=2)
    use_case, plan_config = _make_use_case(
        content,
        grants=_grants(*OPTIONAL_DOMAINS),
        subscription_port=subscription_port,
        free_grants=_grants(disabled=OPTIONAL_DOMAINS),
    )

    snapshot = use_case.execute()

    assert snapshot.plan_id == "free"
    assert set(content.calls) == {"books", "views"}
    assert snapshot.stats.blog_posts == 0
    assert {item.domain_id for item in snapshot.feed} == {"books"}
    assert plan_config.plan_lookups == ["free"]


def test_running_trial_gets_paid_plan_domains():
    content = FakeContentPort(items_per_domain=2)
    use_case, _ = _make_use_case(
        content,
        grants=_grants("blog"),
        subscription_port=FakeSubscriptionPort("pro", status="trialing", trial_ends_at=NOW + timedelta(days=3)),
        free_grants=[],
    )

    snapshot = use_case.execute()

    assert snapshot.plan_id == "pro"
    assert "blog" in content.calls


def test_feed_size_above_default_is_clamped():
    content = FakeContentPort(items_per_domain=10)
    use_case, _ = _make_use_case(content, grants=_grants(*OPTIONAL_DOMAINS), feed_size=8)

    snapshot = use_case.execute()

    assert len(snapshot.feed) == FEED_SIZE


def test_hung_domains_do_not_starve_the_rest():
    hung = ("blog", "events", "awards", "faq", "newsletter")
    content = FakeContentPort(items_per_domain=2, block=hung)
    use_case, _ = _make_use_case(
        content,
        grants=_grants(*OPTIONAL_DOMAINS),
        fetch_timeout_seconds=0.3,
    )

    try:
        snapshot = use_case.execute()
    finally:
        content.release.set()

    assert snapshot.stats.contact_submissions == 2
    assert [failure.domain_id for failure in snapshot.failures] == list(hung)
    assert all(isinstance(failure, AggregationTimeoutError) for failure in snapshot.failures)
