"""Company user model type definitions for database operations."""

from enum import Enum
from typing import TypedDict
from uuid import UUID


class MemberRole(str, Enum):
    """Role values stored on company_users rows."""

    OWNER = "owner"
    ADMIN = "admin"
    USER = "user"


class MemberStatus(str, Enum):
    """Membership status values.

    Rows are created as pending by an invitation; activation happens
    outside this service when the invitee accepts.
    """

    PENDING = "pending"
    ACTIVE = "active"


# Roles allowed to invite new users
INVITER_ROLES = frozenset({MemberRole.ADMIN.value, MemberRole.OWNER.value})


class CompanyUser(TypedDict):
    """Company user table row representation.

    One row per (email, company_name) pair, enforced by a unique
    constraint in the database.
    """

    id: UUID
    user_id: UUID | None
    email: str
    full_name: str
    company_name: str
    role: str
    can_view_all_tasks: bool
    status: str
    invited_by: UUID | None

