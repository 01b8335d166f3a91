from __future__ import annotations

import logging

from fastapi import HTTPException, status
from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from app.core.content_rules import has_text
from app.models import Favorite, PromptStatus, Submission
from app.services.prompt_service import get_prompt_or_404, prompt_status
from app.services.storage_service import StorageClient, delete_image_quietly, key_from_public_url

logger = logging.getLogger(__name__)

WORD_INDEXES = (1, 2, 3)


def _clean_optional(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def save_submission(
    db: Session,
    user_id: str,
    prompt_id: str,
    word_index: int,
    title: str | None,
    text: str | None,
    image_url: str | None,
) -> Submission:
    if word_index not in WORD_INDEXES:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="wordIndex must be 1, 2 or 3")

    image_url = _clean_optional(image_url)
    if not image_url and not has_text(text):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="An image or text is required"
        )
    if image_url:
        key = key_from_public_url(image_url)
        if key is None or not key.startswith(f"{user_id}/"):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid image URL")

    prompt = get_prompt_or_404(db, prompt_id)
    if prompt_status(prompt) != PromptStatus.CURRENT:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Prompt is not open for submissions"
        )

    submission = (
        db.query(Submission)
        .filter(
            Submission.user_id == user_id,
            Submission.prompt_id == prompt_id,
            Submission.word_index == word_index,
        )
        .first()
    )
    if submission is None:
        submission = Submission(user_id=user_id, prompt_id=prompt_id, word_index=word_index)
        db.add(submission)

    submission.title = _clean_optional(title)
    submission.text = text if has_text(text) else None
    submission.image_url = image_url
    db.commit()
    db.refresh(submission)
    return submission


def get_submission_or_404(db: Session, submission_id: str) -> Submission:
    submission = (
        db.query(Submission)
        .options(joinedload(Submission.user), joinedload(Submission.prompt))
        .filter(Submission.id == submission_id)
        .first()
    )
    if not submission:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Submission not found")
    return submission


def favorite_counts(db: Session, submission_ids: list[str]) -> dict[str, int]:
    if not submission_ids:
        return {}
    rows = (
        db.query(Favorite.submission_id, func.count(Favorite.id))
        .filter(Favorite.submission_id.in_(submission_ids))
        .group_by(Favorite.submission_id)
        .all()
    )
    return {submission_id: count for submission_id, count in rows}


def delete_submission(db: Session, storage: StorageClient, user_id: str, submission_id: str) -> None:
    submission = (
        db.query(Submission)
        .filter(Submission.id == submission_id, Submission.user_id == user_id)
        .first()
    )
    if not submission:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Submission not found")

    image_url = submission.image_url
    db.delete(submission)
    db.commit()
    delete_image_quietly(storage, image_url)


def clear_submissions(db: Session, storage: StorageClient, user_id: str, prompt_id: str) -> int:
    """Remove all of a user's submissions to one prompt, then their images."""
    submissions = (
        db.query(Submission)
        .filter(Submission.user_id == user_id, Submission.prompt_id == prompt_id)
        .all()
    )
    image_urls = [s.image_url for s in submissions if s.image_url]
    for submission in submissions:
        db.delete(submission)
    db.commit()

    for image_url in image_urls:
        delete_image_quietly(storage, image_url)
    logger.info("Cleared %d submissions for user %s on prompt %s", len(submissions), user_id, prompt_id)
    return len(submissions)


def toggle_favorite(db: Session, user_id: str, submission_id: str) -> bool:
    exists = db.query(Submission.id).filter(Submission.id == submission_id).first()
    if not exists:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Submission not found")

    favorite = (
        db.query(Favorite)
        .filter(Favorite.user_id == user_id, Favorite.submission_id == submission_id)
        .first()
    )
    if favorite:
        db.delete(favorite)
        db.commit()
        return False

    db.add(Favorite(user_id=user_id, submission_id=submission_id))
    db.commit()
    return True
