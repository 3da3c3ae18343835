"""Database model type definitions."""

from teamspace.models.category import Category
from teamspace.models.company_user import CompanyUser, MemberRole, MemberStatus
from teamspace.models.user_settings import UserSettings

__all__ = [
    "Category",
    "CompanyUser",
    "MemberRole",
    "MemberStatus",
    "UserSettings",
]
