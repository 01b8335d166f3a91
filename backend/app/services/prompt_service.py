from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from datetime import UTC, datetime
from typing import TypeVar

from fastapi import HTTPException, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models import Prompt, PromptStatus, Submission

logger = logging.getLogger(__name__)

WINDOW_SIZE = 5

P = TypeVar("P", bound=Prompt)


def as_aware_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def prompt_status(prompt: Prompt, now: datetime | None = None) -> PromptStatus:
    now = as_aware_utc(now or datetime.now(UTC))
    if as_aware_utc(prompt.week_end) < now:
        return PromptStatus.PAST
    if as_aware_utc(prompt.week_start) > now:
        return PromptStatus.FUTURE
    return PromptStatus.CURRENT


def select_prompt_window(prompts: Iterable[P], now: datetime, size: int = WINDOW_SIZE) -> list[P]:
    """Pick the prompts shown in the admin sidebar.

    Prompts are ordered by week start; the ones whose week already ended are
    "past", everything else (including the running week) is "future". The
    last ``size`` past prompts come first, followed by the first ``size``
    future ones.
    """
    now = as_aware_utc(now)
    ordered = sorted(prompts, key=lambda p: as_aware_utc(p.week_start))

    past: list[P] = []
    future: list[P] = []
    for prompt in ordered:
        if as_aware_utc(prompt.week_end) < now:
            past.append(prompt)
        else:
            future.append(prompt)

    recent_past = past[-size:] if size else []
    return recent_past + future[:size]


def get_prompt_or_404(db: Session, prompt_id: str) -> Prompt:
    prompt = db.query(Prompt).filter(Prompt.id == prompt_id).first()
    if not prompt:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Prompt not found")
    return prompt


def get_current_prompt(db: Session, now: datetime | None = None) -> Prompt | None:
    now = as_aware_utc(now or datetime.now(UTC))
    candidates = (
        db.query(Prompt)
        .order_by(Prompt.week_start.asc())
        .all()
    )
    for prompt in candidates:
        if prompt_status(prompt, now) == PromptStatus.CURRENT:
            return prompt
    return None


def submission_counts(db: Session, prompt_ids: Sequence[str]) -> dict[str, int]:
    if not prompt_ids:
        return {}
    rows = (
        db.query(Submission.prompt_id, func.count(Submission.id))
        .filter(Submission.prompt_id.in_(prompt_ids))
        .group_by(Submission.prompt_id)
        .all()
    )
    return {prompt_id: count for prompt_id, count in rows}


def _clean_words(words: Sequence[str]) -> list[str]:
    cleaned = [word.strip() for word in words]
    if len(cleaned) != 3 or any(not word for word in cleaned):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="All three words are required")
    return cleaned


def _validate_window(
    db: Session,
    week_start: datetime,
    week_end: datetime,
    exclude_id: str | None = None,
) -> tuple[datetime, datetime]:
    week_start = as_aware_utc(week_start)
    week_end = as_aware_utc(week_end)
    if week_end <= week_start:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Week end must be after week start"
        )

    for other in db.query(Prompt).all():
        if other.id == exclude_id:
            continue
        if as_aware_utc(other.week_start) < week_end and week_start < as_aware_utc(other.week_end):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Prompt window overlaps an existing prompt",
            )
    return week_start, week_end


def _require_not_past(prompt: Prompt) -> None:
    if prompt_status(prompt) == PromptStatus.PAST:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Past prompts cannot be modified"
        )


def create_prompt(db: Session, words: Sequence[str], week_start: datetime, week_end: datetime) -> Prompt:
    word1, word2, word3 = _clean_words(words)
    week_start, week_end = _validate_window(db, week_start, week_end)

    prompt = Prompt(word1=word1, word2=word2, word3=word3, week_start=week_start, week_end=week_end)
    db.add(prompt)
    db.commit()
    db.refresh(prompt)
    logger.info("Created prompt %s (%s)", prompt.id, ", ".join(prompt.words))
    return prompt


def update_prompt(
    db: Session,
    prompt: Prompt,
    words: Sequence[str],
    week_start: datetime,
    week_end: datetime,
) -> Prompt:
    _require_not_past(prompt)
    word1, word2, word3 = _clean_words(words)
    week_start, week_end = _validate_window(db, week_start, week_end, exclude_id=prompt.id)

    prompt.word1, prompt.word2, prompt.word3 = word1, word2, word3
    prompt.week_start = week_start
    prompt.week_end = week_end
    db.commit()
    db.refresh(prompt)
    logger.info("Updated prompt %s", prompt.id)
    return prompt


def delete_prompt(db: Session, prompt: Prompt) -> list[str]:
    """Delete a current or future prompt and return the image URLs it referenced."""
    _require_not_past(prompt)
    prompt_id = prompt.id
    image_urls = [s.image_url for s in prompt.submissions if s.image_url]
    db.delete(prompt)
    db.commit()
    logger.info("Deleted prompt %s", prompt_id)
    return image_urls
