from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from app.core.auth import SESSION_COOKIE, create_session, get_current_user, get_or_create_user, revoke_session
from app.core.config import get_settings
from app.core.security import SESSION_MAX_AGE_SECONDS, OAuthStateSigner
from app.db.session import get_db
from app.schemas.auth import AuthStartResponse, MeResponse
from app.services import google_oauth

router = APIRouter(prefix="")
settings = get_settings()
state_signer = OAuthStateSigner()


def _set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=SESSION_COOKIE,
        value=token,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
        max_age=SESSION_MAX_AGE_SECONDS,
    )


def _safe_next(next_path: str | None) -> str:
    if not next_path or not next_path.startswith("/") or next_path.startswith("//"):
        return "/"
    return next_path


@router.get("/auth/google/start", response_model=AuthStartResponse)
def google_start(next_path: str = Query(default="/", alias="next")) -> AuthStartResponse:
    if not settings.google_client_id:
        return AuthStartResponse(url=f"{settings.api_prefix}/auth/google/callback?email=demo@example.com")
    return AuthStartResponse(url=google_oauth.authorization_url(state_signer.sign(_safe_next(next_path))))


@router.get("/auth/google/callback")
def google_callback(
    response: Response,
    code: str | None = None,
    state: str | None = None,
    email: str | None = None,
    db: Session = Depends(get_db),
):
    if not settings.google_client_id:
        if not settings.dev_auth_enabled:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Google sign-in is not configured")
        user = get_or_create_user(db, email or "demo@example.com")
        _set_session_cookie(response, create_session(db, user.id))
        return {"ok": True}

    next_path = state_signer.verify(state) if state else None
    if not code or next_path is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid OAuth state")
    try:
        profile = google_oauth.exchange_code(code)
    except google_oauth.OAuthError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    user = get_or_create_user(db, profile.email, name=profile.name, image=profile.picture)
    redirect = RedirectResponse(url=f"{settings.frontend_origin.rstrip('/')}{_safe_next(next_path)}")
    _set_session_cookie(redirect, create_session(db, user.id))
    return redirect


@router.post("/auth/logout")
def logout(request: Request, response: Response, db: Session = Depends(get_db)) -> dict:
    revoke_session(db, request.cookies.get(SESSION_COOKIE))
    response.delete_cookie(SESSION_COOKIE)
    return {"ok": True}


@router.get("/me", response_model=MeResponse)
def me(user=Depends(get_current_user)) -> MeResponse:
    return MeResponse(id=user.id, email=user.email, name=user.name, image=user.image, isAdmin=user.is_admin)
