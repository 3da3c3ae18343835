"""Category API routes."""

from uuid import UUID

from fastapi import APIRouter, HTTPException, status

from teamspace.api.deps import CurrentUser
from teamspace.schemas.category import CategoryResponse, CategoryUpdate, PaletteResponse
from teamspace.schemas.common import ErrorResponse
from teamspace.services.category_service import PRESET_COLORS, CategoryService

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get(
    "/colors",
    response_model=PaletteResponse,
    summary="List category colors",
    description="Returns the preset palette offered when editing a category.",
)
async def list_category_colors(user: CurrentUser) -> PaletteResponse:
    """Return the preset category colors."""
    return PaletteResponse(colors=list(PRESET_COLORS))


@router.put(
    "/{category_id}",
    response_model=CategoryResponse,
    responses={
        403: {"model": ErrorResponse, "description": "Caller is not an active company member"},
        404: {"model": ErrorResponse, "description": "Category not found or not visible to the caller"},
    },
    summary="Update a category",
    description="Renames and/or recolors a category.",
)
async def update_category(
    category_id: UUID,
    data: CategoryUpdate,
    user: CurrentUser,
) -> CategoryResponse:
    """Update a category's name and color.

    Args:
        category_id: The category's UUID.
        data: New name and color.
        user: The authenticated user context.

    Returns:
        CategoryResponse: The updated category.

    Raises:
        HTTPException: 404 if the category does not exist.
    """
    service = CategoryService()
    category = await service.update_category(user, category_id, data)

    if not category:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Category not found",
        )

    return CategoryResponse(**category)


@router.delete(
    "/{category_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={403: {"model": ErrorResponse, "description": "Caller is not an active company member"}},
    summary="Delete a category",
    description="Permanently deletes a category.",
)
async def delete_category(
    category_id: UUID,
    user: CurrentUser,
) -> None:
    """Delete a category.

    Args:
        category_id: The category's UUID.
        user: The authenticated user context.
    """
    service = CategoryService()
    await service.delete_category(user, category_id)
