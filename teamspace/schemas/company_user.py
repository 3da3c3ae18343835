"""Company user Pydantic schemas for API request/response models."""

from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

from teamspace.models.company_user import MemberRole, MemberStatus


class CompanyUserCreate(BaseModel):
    """Schema for inviting a user to the caller's company.

    Blank email or name is not rejected here; the invitation workflow
    reports it as invalid input.
    """

    model_config = ConfigDict(from_attributes=True)

    email: str = Field(..., max_length=255, description="Email address to invite")
    full_name: str = Field(..., max_length=255, description="Invitee's full name")
    role: Literal["admin", "user"] = Field(default="user", description="Role granted on acceptance")
    can_view_all_tasks: bool = Field(default=True, description="Whether the user may see all company tasks")

    @model_validator(mode="after")
    def admins_view_all_tasks(self) -> "CompanyUserCreate":
        """Admins always see every task."""
        if self.role == MemberRole.ADMIN.value:
            self.can_view_all_tasks = True
        return self


class CompanyUserResponse(BaseModel):
    """Schema for company user API responses."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID | None = Field(default=None, description="Membership record ID")
    user_id: UUID | None = Field(default=None, description="Auth user ID, unset until the invite is accepted")
    email: str = Field(description="Member email")
    full_name: str | None = Field(default=None, description="Member full name")
    company_name: str | None = Field(default=None, description="Company the membership belongs to")
    role: MemberRole = Field(description="Member's role in the company")
    can_view_all_tasks: bool = Field(default=False, description="Whether the member may see all company tasks")
    status: MemberStatus | None = Field(default=None, description="Membership status")
    invited_by: UUID | None = Field(default=None, description="Auth user ID of the inviter")


class CompanyUserRoleUpdate(BaseModel):
    """Schema for changing a member's role or task visibility."""

    model_config = ConfigDict(from_attributes=True)

    role: Literal["admin", "user"] | None = Field(default=None, description="New role")
    can_view_all_tasks: bool | None = Field(default=None, description="New task visibility flag")
