"""Category model type definitions for database operations."""

from typing import TypedDict
from uuid import UUID


class Category(TypedDict):
    """Category table row representation."""

    id: UUID
    name: str
    color: str

