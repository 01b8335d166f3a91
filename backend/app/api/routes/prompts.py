from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session, joinedload

from app.db.session import get_db
from app.models import Submission
from app.schemas.prompts import CurrentPromptResponse, PromptResponse
from app.schemas.submissions import GallerySubmissionResponse
from app.services.prompt_service import get_current_prompt, get_prompt_or_404, prompt_status
from app.services.submission_service import favorite_counts

router = APIRouter(prefix="/prompts")


def to_prompt_response(prompt) -> PromptResponse:
    return PromptResponse(
        id=prompt.id,
        word1=prompt.word1,
        word2=prompt.word2,
        word3=prompt.word3,
        weekStart=prompt.week_start,
        weekEnd=prompt.week_end,
        status=prompt_status(prompt),
    )


@router.get("/current", response_model=CurrentPromptResponse)
def current_prompt(db: Session = Depends(get_db)) -> CurrentPromptResponse:
    prompt = get_current_prompt(db)
    return CurrentPromptResponse(prompt=to_prompt_response(prompt) if prompt else None)


@router.get("/{prompt_id}", response_model=PromptResponse)
def get_prompt(prompt_id: str, db: Session = Depends(get_db)) -> PromptResponse:
    return to_prompt_response(get_prompt_or_404(db, prompt_id))


@router.get("/{prompt_id}/submissions", response_model=list[GallerySubmissionResponse])
def prompt_gallery(
    prompt_id: str,
    limit: int = Query(default=6, ge=1, le=100),
    db: Session = Depends(get_db),
) -> list[GallerySubmissionResponse]:
    get_prompt_or_404(db, prompt_id)
    rows = (
        db.query(Submission)
        .options(joinedload(Submission.user))
        .filter(Submission.prompt_id == prompt_id)
        .order_by(Submission.created_at.desc())
        .limit(limit)
        .all()
    )
    counts = favorite_counts(db, [row.id for row in rows])
    items = []
    for row in rows:
        item = GallerySubmissionResponse.model_validate(row)
        item.favorite_count = counts.get(row.id, 0)
        items.append(item)
    return items
