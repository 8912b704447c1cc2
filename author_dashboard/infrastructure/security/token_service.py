from __future__ import annotations

import jwt

from author_dashboard.application.dto.auth import AccessTokenPayload
from author_dashboard.application.ports.token_port import TokenPort


class JwtTokenService(TokenPort):
    def __init__(self, *, jwt_secret: str):
        self._jwt_secret = jwt_secret

    def decode_access_token(self, *, token: str) -> AccessTokenPayload:
        try:
            payload = jwt.decode(token, self._jwt_secret, algorithms=["HS256"])
        except jwt.PyJWTError as exc:
            raise ValueError("Invalid access token.") from exc

        if payload.get("type") != "access":
            raise ValueError("Invalid token type.")

        user_id = payload.get("sub")
        if not user_id or not isinstance(user_id, str):
            raise ValueError("Invalid token subject.")

        return AccessTokenPayload(user_id=user_id)
