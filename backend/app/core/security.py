from itsdangerous import BadSignature, URLSafeTimedSerializer

from app.core.config import get_settings

settings = get_settings()

SESSION_MAX_AGE_SECONDS = 60 * 60 * 24 * 30
OAUTH_STATE_MAX_AGE_SECONDS = 60 * 10


class SessionSigner:
    """Signs the id of a server-side session row into the cookie value."""

    def __init__(self) -> None:
        self._serializer = URLSafeTimedSerializer(secret_key=settings.session_secret, salt="session")

    def sign(self, session_id: str) -> str:
        return self._serializer.dumps({"sid": session_id})

    def unsign(self, token: str, max_age_seconds: int = SESSION_MAX_AGE_SECONDS) -> str | None:
        try:
            payload = self._serializer.loads(token, max_age=max_age_seconds)
        except BadSignature:
            return None
        return payload.get("sid")


class OAuthStateSigner:
    def __init__(self) -> None:
        self._serializer = URLSafeTimedSerializer(secret_key=settings.session_secret, salt="oauth-state")

    def sign(self, next_path: str = "/") -> str:
        return self._serializer.dumps({"next": next_path})

    def verify(self, state: str, max_age_seconds: int = OAUTH_STATE_MAX_AGE_SECONDS) -> str | None:
        try:
            payload = self._serializer.loads(state, max_age=max_age_seconds)
        except BadSignature:
            return None
        return payload.get("next", "/")
