"""User settings business logic service."""

import logging
from typing import Any

from postgrest.exceptions import APIError as PostgrestAPIError
from tzlocal import get_localzone_name

from teamspace.api.middleware.error_handler import AuthenticationError
from teamspace.core.config import get_settings
from teamspace.core.supabase import NO_ROWS_CODE, get_supabase_client
from teamspace.models.user_settings import UserSettings
from teamspace.schemas.auth import UserContext
from teamspace.schemas.settings import UserSettingsUpdate

logger = logging.getLogger(__name__)


def detect_local_timezone() -> str:
    """IANA name of the server's local timezone, falling back to UTC.

    Resolves TZ values such as ":/etc/localtime" and the system zone link
    to a name like "Europe/Berlin", never a path or an abbreviation.
    """
    try:
        name = get_localzone_name()
    except (LookupError, ValueError, OSError) as e:
        logger.warning("Could not determine local timezone, using UTC: %s", e)
        return "UTC"
    return name or "UTC"


class SettingsService:
    """Service for reading and writing per-user settings."""

    def __init__(self) -> None:
        """Initialize settings service with Supabase client."""
        self.client = get_supabase_client()

    def default_settings(self, user: UserContext) -> UserSettings:
        """Build settings for a user who has none stored yet.

        Profile metadata wins, then configured defaults, then the server's
        local timezone.

        Args:
            user: The caller.

        Returns:
            UserSettings: Unpersisted default settings.
        """
        settings = get_settings()
        metadata = user.user_metadata or {}
        return UserSettings(
            user_id=user.user_id,
            company_name=metadata.get("company_name") or settings.default_company_name,
            timezone=metadata.get("timezone") or settings.default_timezone or detect_local_timezone(),
        )

    async def get_user_settings(self, user: UserContext | None) -> UserSettings:
        """Get the caller's settings, creating defaults on first access.

        Reads never fail the caller: any store error is logged and the
        synthesized defaults are returned without being persisted.

        Args:
            user: The caller.

        Returns:
            UserSettings: Stored settings, freshly created defaults, or fallback defaults.

        Raises:
            AuthenticationError: If there is no caller.
        """
        if user is None:
            raise AuthenticationError("No authenticated user")

        defaults = self.default_settings(user)

        try:
            existing = self._fetch(user)
            if existing:
                return existing

            row = {**defaults, "user_id": str(user.user_id)}
            response = (
                self.client.table("user_settings")
                .upsert(row, on_conflict="user_id")
                .execute()
            )
            if response.data:
                logger.info("Created default settings", extra={"user_id": str(user.user_id)})
                return response.data[0]
            return defaults

        except Exception as e:
            logger.error(
                "Failed to load user settings, using defaults: %s",
                e,
                extra={"user_id": str(user.user_id)},
            )
            return defaults

    def _fetch(self, user: UserContext) -> dict[str, Any] | None:
        """Read the settings row, treating "no rows" as absent."""
        try:
            response = (
                self.client.table("user_settings")
                .select("*")
                .eq("user_id", str(user.user_id))
                .single()
                .execute()
            )
        except PostgrestAPIError as e:
            if e.code == NO_ROWS_CODE:
                return None
            raise

        return response.data if response and response.data else None

    async def update_user_settings(
        self,
        user: UserContext | None,
        data: UserSettingsUpdate,
    ) -> UserSettings:
        """Update the caller's settings, inserting the row if missing.

        Not atomic: two concurrent first writes can race, in which case the
        store's duplicate-key error propagates unchanged.

        Args:
            user: The caller.
            data: Fields to change.

        Returns:
            UserSettings: The stored settings after the write.

        Raises:
            AuthenticationError: If there is no caller.
        """
        if user is None:
            raise AuthenticationError("No authenticated user")

        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        if not changes:
            return await self.get_user_settings(user)

        existing = (
            self.client.table("user_settings")
            .select("user_id")
            .eq("user_id", str(user.user_id))
            .execute()
        )

        if existing.data:
            response = (
                self.client.table("user_settings")
                .update(changes)
                .eq("user_id", str(user.user_id))
                .execute()
            )
        else:
            response = (
                self.client.table("user_settings")
                .insert({"user_id": str(user.user_id), **changes})
                .execute()
            )

        if response.data:
            return response.data[0]

        # Write returned no representation; report the stored row with the changes applied
        current = self._fetch(user) or self.default_settings(user)
        return {**current, **changes}
