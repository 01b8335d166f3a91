import logging
from datetime import UTC, datetime, timedelta

from fastapi import Depends, Header, HTTPException, Request, status
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.security import SESSION_MAX_AGE_SECONDS, SessionSigner
from app.db.session import get_db
from app.models import Session as UserSession
from app.models import User
from app.services.prompt_service import as_aware_utc

logger = logging.getLogger(__name__)

SESSION_COOKIE = "session_token"


class CurrentUser:
    def __init__(self, user: User) -> None:
        self.id = user.id
        self.email = user.email
        self.name = user.name
        self.image = user.image
        self.is_admin = user.is_admin


session_signer = SessionSigner()
settings = get_settings()


def get_or_create_user(db: Session, email: str, name: str | None = None, image: str | None = None) -> User:
    """Find a user by email, creating one on first sign-in."""
    user = db.query(User).filter(User.email == email).first()
    if user:
        changed = False
        if name and not user.name:
            user.name = name
            changed = True
        if image and user.image != image:
            user.image = image
            changed = True
        if changed:
            db.commit()
        return user

    user = User(email=email, name=name or email.split("@")[0], image=image)
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Provisioned user %s", user.id)
    return user


def create_session(db: Session, user_id: str) -> str:
    row = UserSession(
        user_id=user_id,
        expires_at=datetime.now(UTC) + timedelta(seconds=SESSION_MAX_AGE_SECONDS),
    )
    db.add(row)
    db.commit()
    return session_signer.sign(row.id)


def revoke_session(db: Session, token: str | None) -> None:
    session_id = session_signer.unsign(token) if token else None
    if not session_id:
        return
    db.query(UserSession).filter(UserSession.id == session_id).delete()
    db.commit()


def _user_from_cookie(db: Session, token: str) -> User | None:
    session_id = session_signer.unsign(token)
    if not session_id:
        return None
    row = db.query(UserSession).filter(UserSession.id == session_id).first()
    if not row or as_aware_utc(row.expires_at) <= datetime.now(UTC):
        return None
    return db.query(User).filter(User.id == row.user_id, User.is_active.is_(True)).first()


def _resolve_user(request: Request, db: Session, dev_email: str | None) -> User | None:
    token = request.cookies.get(SESSION_COOKIE)
    if token:
        user = _user_from_cookie(db, token)
        if user:
            return user

    if dev_email and settings.dev_auth_enabled:
        return get_or_create_user(db, dev_email)

    return None


def get_current_user(
    request: Request,
    db: Session = Depends(get_db),
    x_dev_user_email: str | None = Header(default=None),
) -> CurrentUser:
    user = _resolve_user(request, db, x_dev_user_email)
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return CurrentUser(user)


def get_optional_user(
    request: Request,
    db: Session = Depends(get_db),
    x_dev_user_email: str | None = Header(default=None),
) -> CurrentUser | None:
    user = _resolve_user(request, db, x_dev_user_email)
    return CurrentUser(user) if user else None


def require_admin(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if not user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return user
