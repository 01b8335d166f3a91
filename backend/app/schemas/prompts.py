from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.models.enums import PromptStatus


class PromptSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str
    word1: str
    word2: str
    word3: str
    week_start: datetime = Field(alias="weekStart")
    week_end: datetime = Field(alias="weekEnd")


class PromptResponse(PromptSummary):
    status: PromptStatus


class AdminPromptResponse(PromptResponse):
    submission_count: int = Field(alias="submissionCount")


class CurrentPromptResponse(BaseModel):
    prompt: PromptResponse | None


class PromptWriteRequest(BaseModel):
    word1: str
    word2: str
    word3: str
    week_start: datetime = Field(alias="weekStart")
    week_end: datetime = Field(alias="weekEnd")

    model_config = ConfigDict(populate_by_name=True)

    @property
    def words(self) -> list[str]:
        return [self.word1, self.word2, self.word3]
