from __future__ import annotations

from typing import Any, Mapping

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


def _as_str(value: Any) -> str:
    return str(value)


def map_row_to_book(row: Mapping[str, Any]) -> BookRecord:
    return BookRecord(
        id=_as_str(row["id"]),
        slug=row.get("slug") or "",
        title=row["title"],
        status=row["status"],
        created_at=row["created_at"],
    )


def map_row_to_page_view(row: Mapping[str, Any]) -> PageViewRecord:
    return PageViewRecord(
        page_type=row["page_type"],
        page_id=_as_str(row["page_id"]),
        created_at=row["created_at"],
    )


def map_row_to_blog_post(row: Mapping[str, Any]) -> BlogPostRecord:
    return BlogPostRecord(
        id=_as_str(row["id"]),
        title=row["title"],
        status=row["status"],
        created_at=row["created_at"],
    )


def map_row_to_event(row: Mapping[str, Any]) -> EventRecord:
    return EventRecord(
        id=_as_str(row["id"]),
        title=row["title"],
        status=row.get("status"),
        event_date=row["event_date"],
        created_at=row["created_at"],
    )


def map_row_to_award(row: Mapping[str, Any]) -> AwardRecord:
    return AwardRecord(
        id=_as_str(row["id"]),
        title=row["title"],
        created_at=row["created_at"],
    )


def map_row_to_faq(row: Mapping[str, Any]) -> FaqRecord:
    return FaqRecord(
        id=_as_str(row["id"]),
        question=row["question"],
        is_published=bool(row["is_published"]),
        created_at=row["created_at"],
    )


def map_row_to_newsletter_subscriber(row: Mapping[str, Any]) -> NewsletterSubscriberRecord:
    return NewsletterSubscriberRecord(
        id=_as_str(row["id"]),
        status=row["status"],
        created_at=row["created_at"],
    )


def map_row_to_contact_submission(row: Mapping[str, Any]) -> ContactSubmissionRecord:
    return ContactSubmissionRecord(
        id=_as_str(row["id"]),
        name=row["name"],
        status=row.get("status"),
        created_at=row["created_at"],
    )
