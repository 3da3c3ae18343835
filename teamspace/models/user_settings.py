"""User settings model type definitions for database operations."""

from typing import TypedDict
from uuid import UUID


class UserSettings(TypedDict):
    """User settings table row representation.

    Exactly one row per auth user, keyed by user_id.
    """

    user_id: UUID
    company_name: str | None
    timezone: str | None

