from __future__ import annotations

from typing import Protocol

from author_dashboard.domain.entities.user import User


class IdentityPort(Protocol):
    def get_current_user(self) -> User | None:
        ...
