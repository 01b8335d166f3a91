from datetime import UTC, datetime

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.routes.prompts import to_prompt_response
from app.core.auth import require_admin
from app.db.session import get_db
from app.models import Prompt
from app.schemas.prompts import AdminPromptResponse, PromptResponse, PromptWriteRequest
from app.services.prompt_service import (
    create_prompt,
    delete_prompt,
    get_prompt_or_404,
    prompt_status,
    select_prompt_window,
    submission_counts,
    update_prompt,
)
from app.services.storage_service import StorageClient, delete_image_quietly, get_storage_client

router = APIRouter(prefix="/admin/prompts")


def _with_counts(db: Session, prompts: list[Prompt]) -> list[AdminPromptResponse]:
    counts = submission_counts(db, [p.id for p in prompts])
    now = datetime.now(UTC)
    return [
        AdminPromptResponse(
            id=p.id,
            word1=p.word1,
            word2=p.word2,
            word3=p.word3,
            weekStart=p.week_start,
            weekEnd=p.week_end,
            status=prompt_status(p, now),
            submissionCount=counts.get(p.id, 0),
        )
        for p in prompts
    ]


@router.get("", response_model=list[AdminPromptResponse])
def list_prompts(
    admin=Depends(require_admin),
    db: Session = Depends(get_db),
) -> list[AdminPromptResponse]:
    prompts = db.query(Prompt).order_by(Prompt.week_start.desc()).all()
    return _with_counts(db, prompts)


@router.get("/window", response_model=list[AdminPromptResponse])
def prompt_window(
    admin=Depends(require_admin),
    db: Session = Depends(get_db),
) -> list[AdminPromptResponse]:
    prompts = select_prompt_window(db.query(Prompt).all(), now=datetime.now(UTC))
    return _with_counts(db, prompts)


@router.post("", response_model=PromptResponse)
def create(
    payload: PromptWriteRequest,
    admin=Depends(require_admin),
    db: Session = Depends(get_db),
) -> PromptResponse:
    prompt = create_prompt(db, payload.words, payload.week_start, payload.week_end)
    return to_prompt_response(prompt)


@router.put("/{prompt_id}", response_model=PromptResponse)
def update(
    prompt_id: str,
    payload: PromptWriteRequest,
    admin=Depends(require_admin),
    db: Session = Depends(get_db),
) -> PromptResponse:
    prompt = get_prompt_or_404(db, prompt_id)
    prompt = update_prompt(db, prompt, payload.words, payload.week_start, payload.week_end)
    return to_prompt_response(prompt)


@router.delete("/{prompt_id}")
def delete(
    prompt_id: str,
    admin=Depends(require_admin),
    db: Session = Depends(get_db),
    storage: StorageClient = Depends(get_storage_client),
) -> dict:
    prompt = get_prompt_or_404(db, prompt_id)
    for image_url in delete_prompt(db, prompt):
        delete_image_quietly(storage, image_url)
    return {"ok": True}
