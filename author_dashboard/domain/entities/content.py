from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class BookRecord:
    id: str
    slug: str
    title: str
    status: str
    created_at: datetime


@dataclass(frozen=True)
class PageViewRecord:
    page_type: str
    page_id: str
    created_at: datetime


@dataclass(frozen=True)
class BlogPostRecord:
    id: str
    title: str
    status: str
    created_at: datetime


@dataclass(frozen=True)
class EventRecord:
    id: str
    title: str
    status: str | None
    event_date: datetime
    created_at: datetime


@dataclass(frozen=True)
class AwardRecord:
    id: str
    title: str
    created_at: datetime


@dataclass(frozen=True)
class FaqRecord:
    id: str
    question: str
    is_published: bool
    created_at: datetime


@dataclass(frozen=True)
class NewsletterSubscriberRecord:
    id: str
    status: str
    created_at: datetime


@dataclass(frozen=True)
class ContactSubmissionRecord:
    id: str
    name: str
    status: str | None
    created_at: datetime
