from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

from app.core.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()


class OAuthError(Exception):
    pass


@dataclass(frozen=True)
class GoogleProfile:
    email: str
    name: str | None = None
    picture: str | None = None


def authorization_url(state: str) -> str:
    params = {
        "client_id": settings.google_client_id,
        "redirect_uri": settings.google_redirect_uri,
        "response_type": "code",
        "scope": "openid email profile",
        "state": state,
        "prompt": "select_account",
    }
    return str(httpx.URL(settings.google_auth_url, params=params))


def exchange_code(code: str, client: httpx.Client | None = None) -> GoogleProfile:
    """Trade an authorization code for the signed-in user's Google profile."""
    owns_client = client is None
    client = client or httpx.Client(timeout=15.0)
    try:
        token_response = client.post(
            settings.google_token_url,
            data={
                "code": code,
                "client_id": settings.google_client_id,
                "client_secret": settings.google_client_secret,
                "redirect_uri": settings.google_redirect_uri,
                "grant_type": "authorization_code",
            },
        )
        token_response.raise_for_status()
        access_token = token_response.json().get("access_token")
        if not access_token:
            raise OAuthError("Token response did not include an access token")

        userinfo_response = client.get(
            settings.google_userinfo_url,
            headers={"Authorization": f"Bearer {access_token}"},
        )
        userinfo_response.raise_for_status()
        payload = userinfo_response.json()
    except httpx.HTTPError as exc:
        logger.warning("Google OAuth exchange failed: %s", exc)
        raise OAuthError("Google sign-in failed") from exc
    finally:
        if owns_client:
            client.close()

    email = payload.get("email")
    if not email or payload.get("email_verified") is False:
        raise OAuthError("Google account has no verified email")
    return GoogleProfile(email=email, name=payload.get("name"), picture=payload.get("picture"))
