"""User settings Pydantic schemas for API request/response models."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class UserSettingsUpdate(BaseModel):
    """Schema for updating the caller's settings.

    All fields are optional for partial updates.
    """

    model_config = ConfigDict(from_attributes=True)

    company_name: str | None = Field(default=None, min_length=1, max_length=255, description="Company name")
    timezone: str | None = Field(default=None, min_length=1, max_length=64, description="IANA timezone name")


class UserSettingsResponse(BaseModel):
    """Schema for settings API responses."""

    model_config = ConfigDict(from_attributes=True)

    user_id: UUID | None = Field(default=None, description="Owning auth user ID")
    company_name: str | None = Field(default=None, description="Company name")
    timezone: str | None = Field(default=None, description="IANA timezone name")
