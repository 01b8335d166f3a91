from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class PresignRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # Raw JSON values; type checks happen in check_upload so every bad body gets the same message.
    file_type: Any = Field(default=None, alias="fileType")
    file_size: Any = Field(default=None, alias="fileSize")


class PresignResponse(BaseModel):
    presigned_url: str = Field(alias="presignedUrl")
    public_url: str = Field(alias="publicUrl")
    expires_in: int = Field(alias="expiresIn")

    model_config = ConfigDict(populate_by_name=True)


class DeleteUploadRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    image_url: str | None = Field(default=None, alias="imageUrl")


class DeleteUploadResponse(BaseModel):
    success: bool
