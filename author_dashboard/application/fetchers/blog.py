from __future__ import annotations

from datetime import datetime

from author_dashboard.application.fetchers.base import BaseDomainFetcher
from author_dashboard.application.ports.content_port import BlogContentPort
from author_dashboard.domain.entities.dashboard import BLOG, ActivityItem, DomainFetchResult, DomainStat


class BlogFetcher(BaseDomainFetcher):
    domain_id = BLOG
    feature_code = BLOG

    def __init__(self, *, blog_port: BlogContentPort, **kwargs):
        super().__init__(**kwargs)
        self._blog_port = blog_port

    def _load(self, *, user_id: str, now: datetime) -> DomainFetchResult:
        posts = self._blog_port.list_blog_posts(user_id=user_id)
        return DomainFetchResult(
            domain_id=BLOG,
            stat=DomainStat(
                total_count=len(posts),
                secondary_count=sum(1 for post in posts if post.status == "published"),
            ),
            recent_items=tuple(
                ActivityItem(
                    domain_id=BLOG,
                    title=post.title,
                    timestamp=post.created_at,
                    status=post.status,
                    target_ref="/user-blog-management",
                )
                for post in posts[: self.recent_limit]
            ),
        )
