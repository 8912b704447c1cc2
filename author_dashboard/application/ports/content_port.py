from __future__ import annotations

from typing import Protocol, Sequence

from author_dashboard.domain.entities.content import (
    AwardRecord,
    BlogPostRecord,
    BookRecord,
    ContactSubmissionRecord,
    EventRecord,
    FaqRecord,
    NewsletterSubscriberRecord,
    PageViewRecord,
)


class BooksContentPort(Protocol):
    def list_books(self, *, user_id: str) -> list[BookRecord]:
        ...

    def list_page_views(self, *, user_id: str, book_slugs: Sequence[str]) -> list[PageViewRecord]:
        """Profile views of the user plus views of the given book pages."""
        ...


class BlogContentPort(Protocol):
    def list_blog_posts(self, *, user_id: str) -> list[BlogPostRecord]:
        ...


class EventsContentPort(Protocol):
    def list_events(self, *, user_id: str) -> list[EventRecord]:
        ...


class AwardsContentPort(Protocol):
    def list_awards(self, *, user_id: str) -> list[AwardRecord]:
        ...


class FaqContentPort(Protocol):
    def list_faqs(self, *, user_id: str) -> list[FaqRecord]:
        ...


class NewsletterContentPort(Protocol):
    def list_newsletter_subscribers(self, *, user_id: str) -> list[NewsletterSubscriberRecord]:
        ...


class ContactContentPort(Protocol):
    def list_contact_submissions(self, *, user_id: str) -> list[ContactSubmissionRecord]:
        ...
