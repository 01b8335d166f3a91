from pydantic import BaseModel, ConfigDict, Field


class AuthStartResponse(BaseModel):
    url: str


class MeResponse(BaseModel):
    id: str
    email: str
    name: str | None = None
    image: str | None = None
    is_admin: bool = Field(alias="isAdmin")

    model_config = ConfigDict(populate_by_name=True)
