from __future__ import annotations

import logging

from author_dashboard.application.ports.identity_port import IdentityPort
from author_dashboard.application.ports.token_port import TokenPort
from author_dashboard.application.ports.user_port import UserPort
from author_dashboard.domain.entities.user import User


logger = logging.getLogger(__name__)


class BearerTokenIdentity(IdentityPort):
    """Identity of the caller holding ``authorization``; None when it cannot be established."""

    def __init__(self, *, authorization: str | None, token_port: TokenPort, user_port: UserPort):
        self._authorization = authorization or ""
        self._token_port = token_port
        self._user_port = user_port

    def get_current_user(self) -> User | None:
        if not self._authorization.startswith("Bearer "):
            return None
        token = self._authorization.replace("Bearer ", "", 1).strip()
        if not token:
            return None
        try:
            payload = self._token_port.decode_access_token(token=token)
        except ValueError as exc:
            logger.info("bearer_identity: rejected token detail=%s", exc)
            return None
        user = self._user_port.get_user_by_id(user_id=payload.user_id)
        if user is None or not user.is_active:
            return None
        return user


class FixedIdentity(IdentityPort):
    def __init__(self, user: User | None):
        self._user = user

    def get_current_user(self) -> User | None:
        return self._user
