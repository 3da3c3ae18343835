"""User settings API routes."""

from fastapi import APIRouter

from teamspace.api.deps import CurrentUser
from teamspace.schemas.settings import UserSettingsResponse, UserSettingsUpdate
from teamspace.services.settings_service import SettingsService

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get(
    "/me",
    response_model=UserSettingsResponse,
    summary="Get current user's settings",
    description="Returns the caller's settings, creating defaults on first access. Never fails on store errors.",
)
async def get_my_settings(user: CurrentUser) -> UserSettingsResponse:
    """Get the authenticated user's settings.

    Args:
        user: The authenticated user context.

    Returns:
        UserSettingsResponse: Stored or default settings.
    """
    service = SettingsService()
    settings = await service.get_user_settings(user)
    return UserSettingsResponse(**settings)


@router.put(
    "/me",
    response_model=UserSettingsResponse,
    summary="Update current user's settings",
    description="Updates the caller's company name and/or timezone, creating the settings row if needed.",
)
async def update_my_settings(
    data: UserSettingsUpdate,
    user: CurrentUser,
) -> UserSettingsResponse:
    """Update the authenticated user's settings.

    Args:
        data: Fields to update.
        user: The authenticated user context.

    Returns:
        UserSettingsResponse: The settings after the update.
    """
    service = SettingsService()
    settings = await service.update_user_settings(user, data)
    return UserSettingsResponse(**settings)
