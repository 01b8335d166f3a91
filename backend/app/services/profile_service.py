from __future__ import annotations

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.models import Prompt, Submission, User

HISTORY_PAGE_SIZE = 10

PROFILE_FIELDS = ("bio", "instagram", "twitter", "linkedin", "website")


def get_user_or_404(db: Session, user_id: str) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


def update_profile(db: Session, user: User, fields: dict[str, str | None]) -> User:
    for name in PROFILE_FIELDS:
        value = fields.get(name)
        if isinstance(value, str):
            value = value.strip() or None
        setattr(user, name, value)
    db.commit()
    db.refresh(user)
    return user


def count_submissions(db: Session, user_id: str) -> int:
    return db.query(Submission).filter(Submission.user_id == user_id).count()


def submission_history(
    db: Session,
    user_id: str,
    offset: int = 0,
    limit: int = HISTORY_PAGE_SIZE,
) -> tuple[list[tuple[Prompt, list[Submission]]], bool]:
    """Prompts a user answered, newest week first, each with only their submissions.

    One extra prompt is fetched to tell whether another page exists.
    """
    prompts = (
        db.query(Prompt)
        .filter(Prompt.submissions.any(Submission.user_id == user_id))
        .order_by(Prompt.week_start.desc())
        .offset(offset)
        .limit(limit + 1)
        .all()
    )
    has_more = len(prompts) > limit
    prompts = prompts[:limit]

    by_prompt: dict[str, list[Submission]] = {prompt.id: [] for prompt in prompts}
    if by_prompt:
        rows = (
            db.query(Submission)
            .filter(Submission.user_id == user_id, Submission.prompt_id.in_(list(by_prompt)))
            .order_by(Submission.word_index.asc())
            .all()
        )
        for row in rows:
            by_prompt[row.prompt_id].append(row)

    return [(prompt, by_prompt[prompt.id]) for prompt in prompts], has_more
