from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.auth import get_current_user
from app.db.session import get_db
from app.schemas.submissions import (
    ClearSubmissionsResponse,
    SubmissionDetailEnvelope,
    SubmissionDetailResponse,
    SubmissionResponse,
    SubmissionSaveRequest,
)
from app.services.storage_service import StorageClient, get_storage_client
from app.services.submission_service import (
    clear_submissions,
    delete_submission,
    favorite_counts,
    get_submission_or_404,
    save_submission,
)

router = APIRouter(prefix="/submissions")


@router.post("", response_model=SubmissionResponse)
def save(
    payload: SubmissionSaveRequest,
    user=Depends(get_current_user),
    db: Session = Depends(get_db),
) -> SubmissionResponse:
    submission = save_submission(
        db,
        user_id=user.id,
        prompt_id=payload.prompt_id,
        word_index=payload.word_index,
        title=payload.title,
        text=payload.text,
        image_url=payload.image_url,
    )
    return SubmissionResponse.model_validate(submission)


@router.delete("", response_model=ClearSubmissionsResponse)
def clear_all(
    prompt_id: str = Query(alias="promptId"),
    user=Depends(get_current_user),
    db: Session = Depends(get_db),
    storage: StorageClient = Depends(get_storage_client),
) -> ClearSubmissionsResponse:
    deleted = clear_submissions(db, storage, user.id, prompt_id)
    return ClearSubmissionsResponse(ok=True, deleted=deleted)


@router.get("/{submission_id}", response_model=SubmissionDetailEnvelope)
def get_submission(
    submission_id: str,
    db: Session = Depends(get_db),
) -> SubmissionDetailEnvelope:
    row = get_submission_or_404(db, submission_id)
    detail = SubmissionDetailResponse.model_validate(row)
    detail.favorite_count = favorite_counts(db, [row.id]).get(row.id, 0)
    return SubmissionDetailEnvelope(submission=detail)


@router.delete("/{submission_id}")
def delete(
    submission_id: str,
    user=Depends(get_current_user),
    db: Session = Depends(get_db),
    storage: StorageClient = Depends(get_storage_client),
) -> dict:
    delete_submission(db, storage, user.id, submission_id)
    return {"ok": True}
