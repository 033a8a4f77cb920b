from __future__ import annotations

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from ..core.constants import DEFAULT_TOKEN_MAX_AGE_SECONDS, TOKEN_SALT
from ..core.exceptions import AuthenticationError


class TokenService:
    """Issues and verifies signed, time-limited bearer tokens carrying a user id."""

    def __init__(self, secret_key: str, *, max_age_seconds: int = DEFAULT_TOKEN_MAX_AGE_SECONDS):
        self._serializer = URLSafeTimedSerializer(secret_key, salt=TOKEN_SALT)
        self._max_age = int(max_age_seconds)

    def issue(self, user_id: int) -> str:
        return self._serializer.dumps({"uid": int(user_id)})

    def verify(self, token: str) -> int:
        if not token:
            raise AuthenticationError("No token provided")
        try:
            payload = self._serializer.loads(token, max_age=self._max_age)
        except SignatureExpired:
            raise AuthenticationError("Token expired")
        except BadSignature:
            raise AuthenticationError("Invalid token")

        try:
            return int(payload["uid"])
        except (KeyError, TypeError, ValueError):
            raise AuthenticationError("Invalid token")
