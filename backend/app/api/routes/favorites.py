from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session, joinedload

from app.core.auth import get_current_user
from app.db.session import get_db
from app.models import Favorite, Submission
from app.schemas.submissions import FavoriteToggleRequest, FavoriteToggleResponse, GallerySubmissionResponse
from app.services.submission_service import favorite_counts, toggle_favorite

router = APIRouter(prefix="/favorites")


@router.post("", response_model=FavoriteToggleResponse)
def toggle(
    payload: FavoriteToggleRequest,
    user=Depends(get_current_user),
    db: Session = Depends(get_db),
) -> FavoriteToggleResponse:
    return FavoriteToggleResponse(favorited=toggle_favorite(db, user.id, payload.submission_id))


@router.get("", response_model=list[GallerySubmissionResponse])
def list_favorites(
    user=Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[GallerySubmissionResponse]:
    rows = (
        db.query(Submission)
        .join(Favorite, Favorite.submission_id == Submission.id)
        .options(joinedload(Submission.user))
        .filter(Favorite.user_id == user.id)
        .order_by(Favorite.created_at.desc())
        .all()
    )
    counts = favorite_counts(db, [row.id for row in rows])
    items = []
    for row in rows:
        item = GallerySubmissionResponse.model_validate(row)
        item.favorite_count = counts.get(row.id, 0)
        items.append(item)
    return items
