from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.auth import get_current_user, get_optional_user
from app.db.session import get_db
from app.schemas.profile import (
    ProfileResponse,
    ProfileUpdateRequest,
    ProfileUser,
    PublicProfileResponse,
)
from app.schemas.submissions import HistoryPage, HistoryPrompt, SubmissionResponse
from app.services.profile_service import (
    HISTORY_PAGE_SIZE,
    count_submissions,
    get_user_or_404,
    submission_history,
    update_profile,
)

router = APIRouter(prefix="")


@router.get("/profile", response_model=ProfileResponse)
def get_profile(
    user=Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ProfileResponse:
    row = get_user_or_404(db, user.id)
    return ProfileResponse(user=ProfileUser.model_validate(row))


@router.put("/profile", response_model=ProfileResponse)
def put_profile(
    payload: ProfileUpdateRequest,
    user=Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ProfileResponse:
    row = get_user_or_404(db, user.id)
    row = update_profile(db, row, payload.model_dump())
    return ProfileResponse(user=ProfileUser.model_validate(row))


@router.get("/users/{user_id}/profile", response_model=PublicProfileResponse)
def public_profile(
    user_id: str,
    viewer=Depends(get_optional_user),
    db: Session = Depends(get_db),
) -> PublicProfileResponse:
    row = get_user_or_404(db, user_id)
    return PublicProfileResponse(
        id=row.id,
        name=row.name,
        image=row.image,
        bio=row.bio,
        instagram=row.instagram,
        twitter=row.twitter,
        linkedin=row.linkedin,
        website=row.website,
        submissionCount=count_submissions(db, row.id),
        isOwnProfile=viewer is not None and viewer.id == row.id,
    )


@router.get("/users/{user_id}/history", response_model=HistoryPage)
def history(
    user_id: str,
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=HISTORY_PAGE_SIZE, ge=1, le=50),
    db: Session = Depends(get_db),
) -> HistoryPage:
    get_user_or_404(db, user_id)
    items, has_more = submission_history(db, user_id, offset=offset, limit=limit)
    return HistoryPage(
        items=[
            HistoryPrompt(
                id=prompt.id,
                word1=prompt.word1,
                word2=prompt.word2,
                word3=prompt.word3,
                weekStart=prompt.week_start,
                weekEnd=prompt.week_end,
                submissions=[SubmissionResponse.model_validate(s) for s in submissions],
            )
            for prompt, submissions in items
        ],
        hasMore=has_more,
    )
