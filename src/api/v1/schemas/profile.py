"""Pydantic schemas for Profile API."""

from datetime import date, datetime
from typing import Self
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class ProfileUpsert(BaseModel):
    """Schema for creating or replacing the caller's profile.

    ``skills`` accepts a list or a comma-separated string. Social links are
    sent as top-level fields.
    """

    model_config = ConfigDict(extra="ignore")

    status: str = Field(..., min_length=1, max_length=100)
    skills: list[str] | str
    company: str | None = Field(None, max_length=255)
    location: str | None = Field(None, max_length=255)
    bio: str | None = None
    github_username: str | None = Field(None, max_length=100)
    website: str | None = Field(None, max_length=500)
    youtube: str | None = Field(None, max_length=500)
    twitter: str | None = Field(None, max_length=500)
    facebook: str | None = Field(None, max_length=500)
    linkedin: str | None = Field(None, max_length=500)
    instagram: str | None = Field(None, max_length=500)

    @field_validator("skills")
    @classmethod
    def validate_skills(cls, v: list[str] | str) -> list[str] | str:
        if not v or (isinstance(v, str) and not v.strip()):
            raise ValueError("Skills is required")
        return v


class _DatedEntry(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_date: date = Field(..., alias="from")
    to_date: date | None = Field(None, alias="to")
    current: bool = False
    description: str | None = None

    @model_validator(mode="after")
    def validate_range(self) -> Self:
        if self.to_date is not None and not self.from_date < self.to_date:
            raise ValueError("'from' date must precede 'to' date")
        return self


class ExperienceCreate(_DatedEntry):
    """Schema for adding a work-experience entry."""

    title: str = Field(..., min_length=1, max_length=255)
    company: str = Field(..., min_length=1, max_length=255)
    location: str | None = Field(None, max_length=255)


class EducationCreate(_DatedEntry):
    """Schema for adding an education entry."""

    school: str = Field(..., min_length=1, max_length=255)
    degree: str = Field(..., min_length=1, max_length=255)
    field_of_study: str = Field(..., min_length=1, max_length=255)


class SocialLinksResponse(BaseModel):
    """Normalized social links."""

    model_config = ConfigDict(from_attributes=True)

    youtube: str = ""
    twitter: str = ""
    facebook: str = ""
    linkedin: str = ""
    instagram: str = ""


class ExperienceResponse(BaseModel):
    """Schema for an experience entry."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    company: str
    location: str | None = None
    from_date: date
    to_date: date | None = None
    current: bool
    description: str | None = None


class EducationResponse(BaseModel):
    """Schema for an education entry."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    school: str
    degree: str
    field_of_study: str
    from_date: date
    to_date: date | None = None
    current: bool
    description: str | None = None


class ProfileResponse(BaseModel):
    """Schema for Profile response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    owner_id: UUID
    owner_name: str | None = None
    owner_avatar: str | None = None
    status: str
    company: str | None = None
    location: str | None = None
    bio: str | None = None
    github_username: str | None = None
    website: str
    skills: list[str]
    social: SocialLinksResponse
    experience: list[ExperienceResponse]
    education: list[EducationResponse]
    created_at: datetime
    updated_at: datetime


class ProfileDetailResponse(BaseModel):
    """Schema for single Profile."""

    data: ProfileResponse


class ProfileListResponse(BaseModel):
    """Schema for list of Profiles."""

    data: list[ProfileResponse]
