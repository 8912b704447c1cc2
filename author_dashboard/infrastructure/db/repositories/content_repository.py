from __future__ import annotations

from typing import Sequence

from sqlalchemy import bindparam, text

from author_dashboard.application.ports.content_port import (
    AwardsContentPort,
    BlogContentPort,
    BooksContentPort,
    ContactContentPort,
    EventsContentPort,
    FaqContentPort,
    NewsletterContentPort,
)
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
from author_dashboard.infrastructure.db.mappers.content_mapper import (
    map_row_to_award,
    map_row_to_blog_post,
    map_row_to_book,
    map_row_to_contact_submission,
    map_row_to_event,
    map_row_to_faq,
    map_row_to_newsletter_subscriber,
    map_row_to_page_view,
)


PROFILE_VIEWS_SQL = """
    SELECT page_type, page_id, created_at
    FROM public.page_analytics
    WHERE page_type = 'profile'
      AND page_id = :user_id
"""

PROFILE_AND_BOOK_VIEWS_SQL = """
    SELECT page_type, page_id, created_at
    FROM public.page_analytics
    WHERE (page_type = 'profile' AND page_id = :user_id)
       OR (page_type = 'book' AND page_id IN :book_slugs)
"""


class SqlContentRepository(
    BooksContentPort,
    BlogContentPort,
    EventsContentPort,
    AwardsContentPort,
    FaqContentPort,
    NewsletterContentPort,
    ContactContentPort,
):
    """Read-only access to the author's content tables."""

    def __init__(self, engine):
        self._engine = engine

    def _fetch_all(self, statement, params: dict):
        with self._engine.connect() as conn:
            return conn.execute(statement, params).mappings().all()

    def list_books(self, *, user_id: str) -> list[BookRecord]:
        sql = """
            SELECT id, slug, title, status, created_at
            FROM public.books
            WHERE user_id = :user_id
            ORDER BY created_at DESC
        """
        rows = self._fetch_all(text(sql), {"user_id": user_id})
        return [map_row_to_book(row) for row in rows]

    def list_page_views(self, *, user_id: str, book_slugs: Sequence[str]) -> list[PageViewRecord]:
        # An empty IN () is invalid SQL; without books only profile views count.
        if not book_slugs:
            rows = self._fetch_all(text(PROFILE_VIEWS_SQL), {"user_id": user_id})
        else:
            statement = text(PROFILE_AND_BOOK_VIEWS_SQL).bindparams(
                bindparam("book_slugs", expanding=True)
            )
            rows = self._fetch_all(statement, {"user_id": user_id, "book_slugs": list(book_slugs)})
        return [map_row_to_page_view(row) for row in rows]

    def list_blog_posts(self, *, user_id: str) -> list[BlogPostRecord]:
        sql = """
            SELECT id, title, status, created_at
            FROM public.blog_posts
            WHERE user_id = :user_id
            ORDER BY created_at DESC
        """
        rows = self._fetch_all(text(sql), {"user_id": user_id})
        return [map_row_to_blog_post(row) for row in rows]

    def list_events(self, *, user_id: str) -> list[EventRecord]:
        sql = """
            SELECT id, title, status, event_date, created_at
            FROM public.events
            WHERE user_id = :user_id
            ORDER BY event_date DESC
        """
        rows = self._fetch_all(text(sql), {"user_id": user_id})
        return [map_row_to_event(row) for row in rows]

    def list_awards(self, *, user_id: str) -> list[AwardRecord]:
        sql = """
            SELECT id, title, created_at
            FROM public.awards
            WHERE user_id = :user_id
            ORDER BY created_at DESC
        """
        rows = self._fetch_all(text(sql), {"user_id": user_id})
        return [map_row_to_award(row) for row in rows]

    def list_faqs(self, *, user_id: str) -> list[FaqRecord]:
        sql = """
            SELECT id, question, is_published, created_at
            FROM public.faqs
            WHERE user_id = :user_id
            ORDER BY created_at DESC
        """
        rows = self._fetch_all(text(sql), {"user_id": user_id})
        return [map_row_to_faq(row) for row in rows]

    def list_newsletter_subscribers(self, *, user_id: str) -> list[NewsletterSubscriberRecord]:
        sql = """
            SELECT id, status, created_at
            FROM public.newsletter_subscribers
            WHERE user_id = :user_id
        """
        rows = self._fetch_all(text(sql), {"user_id": user_id})
        return [map_row_to_newsletter_subscriber(row) for row in rows]

    def list_contact_submissions(self, *, user_id: str) -> list[ContactSubmissionRecord]:
        sql = """
            SELECT id, name, status, created_at
            FROM public.contact_submissions
            WHERE contacted_user_id = :user_id
            ORDER BY created_at DESC
        """
        rows = self._fetch_all(text(sql), {"user_id": user_id})
        return [map_row_to_contact_submission(row) for row in rows]
