from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.prompts import PromptSummary


class SubmissionOwner(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str | None = None
    image: str | None = None
    bio: str | None = None
    instagram: str | None = None
    twitter: str | None = None
    linkedin: str | None = None
    website: str | None = None


class SubmissionSaveRequest(BaseModel):
    prompt_id: str = Field(alias="promptId")
    word_index: int = Field(alias="wordIndex")
    title: str | None = None
    text: str | None = None
    image_url: str | None = Field(default=None, alias="imageUrl")

    model_config = ConfigDict(populate_by_name=True)


class SubmissionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str
    user_id: str = Field(alias="userId")
    prompt_id: str = Field(alias="promptId")
    word_index: int = Field(alias="wordIndex")
    title: str | None = None
    text: str | None = None
    image_url: str | None = Field(default=None, alias="imageUrl")
    created_at: datetime = Field(alias="createdAt")


class GallerySubmissionResponse(SubmissionResponse):
    user: SubmissionOwner
    favorite_count: int = Field(default=0, alias="favoriteCount")


class SubmissionDetailResponse(GallerySubmissionResponse):
    prompt: PromptSummary


class SubmissionDetailEnvelope(BaseModel):
    submission: SubmissionDetailResponse


class ClearSubmissionsResponse(BaseModel):
    ok: bool
    deleted: int


class FavoriteToggleRequest(BaseModel):
    submission_id: str = Field(alias="submissionId")

    model_config = ConfigDict(populate_by_name=True)


class FavoriteToggleResponse(BaseModel):
    favorited: bool


class HistoryPrompt(PromptSummary):
    submissions: list[SubmissionResponse]


class HistoryPage(BaseModel):
    items: list[HistoryPrompt]
    has_more: bool = Field(alias="hasMore")

    model_config = ConfigDict(populate_by_name=True)
