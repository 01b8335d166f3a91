from pydantic import BaseModel, ConfigDict, Field


class ProfileFields(BaseModel):
    bio: str | None = None
    instagram: str | None = None
    twitter: str | None = None
    linkedin: str | None = None
    website: str | None = None


class ProfileUser(ProfileFields):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str | None = None


class ProfileResponse(BaseModel):
    user: ProfileUser | None


class ProfileUpdateRequest(ProfileFields):
    pass


class PublicProfileResponse(BaseModel):
    id: str
    name: str | None = None
    image: str | None = None
    bio: str | None = None
    instagram: str | None = None
    twitter: str | None = None
    linkedin: str | None = None
    website: str | None = None
    submission_count: int = Field(alias="submissionCount")
    is_own_profile: bool = Field(alias="isOwnProfile")

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)
