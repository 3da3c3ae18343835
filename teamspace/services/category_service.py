"""Category business logic service."""

import logging
from uuid import UUID

from teamspace.models.category import Category
from teamspace.schemas.auth import UserContext
from teamspace.schemas.category import CategoryUpdate
from teamspace.services.company_user_service import CompanyUserService

logger = logging.getLogger(__name__)

# Colors offered by the category picker, in display order
PRESET_COLORS: tuple[str, ...] = (
    # Bright
    "#2563eb",  # blue
    "#16a34a",  # green
    "#dc2626",  # red
    "#9333ea",  # purple
    "#ea580c",  # orange
    "#0d9488",  # teal
    "#4f46e5",  # indigo
    "#be185d",  # pink
    "#f59e0b",  # amber
    "#10b981",  # emerald
    "#6366f1",  # violet
    "#ec4899",  # pink
    # Calm
    "#38bdf8",  # sky blue
    "#34d399",  # emerald green
    "#a78bfa",  # soft purple
    "#fbbf24",  # warm yellow
    "#fb923c",  # soft orange
    "#22d3ee",  # cyan
    "#818cf8",  # soft indigo
    "#f472b6",  # soft pink
)


class CategoryService:
    """Service for editing and deleting task categories.

    Only active company members may write, and the writes run under the
    caller's token. Store errors are logged and re-raised unchanged.
    """

    def __init__(self) -> None:
        """Initialize category service."""
        self.members = CompanyUserService()

    async def update_category(
        self,
        caller: UserContext | None,
        category_id: UUID,
        data: CategoryUpdate,
    ) -> Category | None:
        """Rename or recolor a category.

        Args:
            caller: The authenticated user.
            category_id: The category's UUID.
            data: New name and color.

        Returns:
            Category | None: The updated category, or None if no row matched
            or row level security hid it from the caller.
        """
        client = self.members.member_client(caller)

        try:
            response = (
                client.table("categories")
                .update({"name": data.name, "color": data.color})
                .eq("id", str(category_id))
                .execute()
            )
        except Exception:
            logger.exception("Failed to update category", extra={"category_id": str(category_id)})
            raise

        return response.data[0] if response.data else None

    async def delete_category(self, caller: UserContext | None, category_id: UUID) -> None:
        """Delete a category.

        Args:
            caller: The authenticated user.
            category_id: The category's UUID.
        """
        client = self.members.member_client(caller)

        try:
            client.table("categories").delete().eq("id", str(category_id)).execute()
        except Exception:
            logger.exception("Failed to delete category", extra={"category_id": str(category_id)})
            raise
