from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class AdminUserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str
    email: str | None = None
    name: str | None = None
    image: str | None = None
    is_admin: bool = Field(alias="isAdmin")
    created_at: datetime = Field(alias="createdAt")


class UpdateUserRoleRequest(BaseModel):
    user_id: str = Field(alias="userId")
    is_admin: bool = Field(alias="isAdmin")

    model_config = ConfigDict(populate_by_name=True)
