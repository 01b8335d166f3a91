import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.auth import require_admin
from app.db.session import get_db
from app.models import User
from app.schemas.users import AdminUserResponse, UpdateUserRoleRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="")


@router.get("/users", response_model=list[AdminUserResponse])
def list_users(
    admin=Depends(require_admin),
    db: Session = Depends(get_db),
) -> list[AdminUserResponse]:
    users = db.query(User).order_by(User.created_at.desc()).all()
    return [AdminUserResponse.model_validate(u) for u in users]


@router.patch("/users", response_model=AdminUserResponse)
def update_user_role(
    payload: UpdateUserRoleRequest,
    admin=Depends(require_admin),
    db: Session = Depends(get_db),
) -> AdminUserResponse:
    if payload.user_id == admin.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="Cannot modify your own admin status"
        )

    target = db.query(User).filter(User.id == payload.user_id).first()
    if not target:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    target.is_admin = payload.is_admin
    db.commit()
    db.refresh(target)
    logger.info("Admin %s set is_admin=%s for user %s", admin.id, target.is_admin, target.id)
    return AdminUserResponse.model_validate(target)
