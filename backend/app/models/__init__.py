from app.models.base import Base, UUIDTimestampMixin
from app.models.entities import Favorite, Prompt, Session, Submission, User
from app.models.enums import PromptStatus

__all__ = [
    "Base",
    "Favorite",
    "Prompt",
    "PromptStatus",
    "Session",
    "Submission",
    "User",
    "UUIDTimestampMixin",
]
