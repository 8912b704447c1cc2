from __future__ import annotations

import logging
from datetime import datetime

from author_dashboard.application.fetchers.base import BaseDomainFetcher
from author_dashboard.application.ports.content_port import BooksContentPort
from author_dashboard.domain.entities.dashboard import (
    BOOKS,
    VIEWS,
    ActivityItem,
    DomainFetchResult,
    DomainStat,
    ZERO_STAT,
)
from author_dashboard.domain.exceptions import DomainFetchFailedError
from author_dashboard.shared.clock import month_start


logger = logging.getLogger(__name__)


class BooksFetcher(BaseDomainFetcher):
    domain_id = BOOKS
    feature_code = None
    recent_limit = 3

    def __init__(self, *, books_port: BooksContentPort, **kwargs):
        super().__init__(**kwargs)
        self._books_port = books_port

    def _load(self, *, user_id: str, now: datetime) -> DomainFetchResult:
        books = self._books_port.list_books(user_id=user_id)
        stat = DomainStat(
            total_count=len(books),
            secondary_count=sum(1 for book in books if book.status == "published"),
        )
        items = tuple(
            ActivityItem(
                domain_id=BOOKS,
                title=book.title,
                timestamp=book.created_at,
                status=book.status,
                target_ref=f"/books/{book.id}",
            )
            for book in books[: self.recent_limit]
        )

        views_stat = ZERO_STAT
        sub_failures: tuple[DomainFetchFailedError, ...] = ()
        slugs = tuple(book.slug for book in books if book.slug)
        try:
            views = self._books_port.list_page_views(user_id=user_id, book_slugs=slugs)
        except Exception as exc:  # noqa: BLE001
            failure = DomainFetchFailedError(VIEWS, str(exc) or type(exc).__name__)
            logger.warning(
                "books_fetcher: views sub-fetch failed user=%s slugs=%s detail=%s",
                user_id,
                len(slugs),
                failure.reason,
            )
            sub_failures = (failure,)
        else:
            since = month_start(now)
            views_stat = DomainStat(
                total_count=len(views),
                secondary_count=sum(1 for view in views if view.created_at >= since),
            )

        return DomainFetchResult(
            domain_id=BOOKS,
            stat=stat,
            recent_items=items,
            sub_stats={VIEWS: views_stat},
            sub_failures=sub_failures,
        )
