"""Company user business logic service.

Covers the company directory, inviting users into a company and changing
an existing member's role. A company is identified by the name stored in
the caller's user_settings row.
"""

import logging
from typing import Any
from uuid import UUID

from postgrest.exceptions import APIError as PostgrestAPIError
from supabase import Client

from teamspace.api.middleware.error_handler import (
    AuthenticationError,
    AuthorizationError,
    InvitationError,
    InvitationErrorKind,
    NotFoundError,
)
from teamspace.core.supabase import (
    NO_ROWS_CODE,
    UNIQUE_VIOLATION_CODE,
    create_user_client,
    get_supabase_client,
)
from teamspace.models.company_user import INVITER_ROLES, CompanyUser, MemberStatus
from teamspace.schemas.auth import UserContext
from teamspace.schemas.company_user import CompanyUserCreate, CompanyUserRoleUpdate

logger = logging.getLogger(__name__)

DIRECTORY_COLUMNS = "id, user_id, email, full_name, company_name, role, can_view_all_tasks, status"


class CompanyUserService:
    """Service for managing the users of a company."""

    def __init__(self) -> None:
        """Initialize company user service with Supabase client."""
        self.client = get_supabase_client()

    def get_company_name(self, user_id: UUID) -> str | None:
        """Look up the company a user has configured in their settings.

        Args:
            user_id: The auth user ID.

        Returns:
            str | None: The company name, or None if no settings row or a blank name.

        Raises:
            PostgrestAPIError: For any store failure other than "no rows".
        """
        try:
            response = (
                self.client.table("user_settings")
                .select("company_name")
                .eq("user_id", str(user_id))
                .single()
                .execute()
            )
        except PostgrestAPIError as e:
            if e.code == NO_ROWS_CODE:
                return None
            raise

        data = response.data if response else None
        company_name = (data or {}).get("company_name")
        return company_name.strip() if company_name and company_name.strip() else None

    def get_membership(self, user_id: UUID, company_name: str) -> dict[str, Any] | None:
        """Get a user's membership row in a company.

        Args:
            user_id: The auth user ID.
            company_name: The company name.

        Returns:
            dict | None: Role, company and status of the membership, or None.
        """
        response = (
            self.client.table("company_users")
            .select("role, company_name, status")
            .eq("user_id", str(user_id))
            .eq("company_name", company_name)
            .maybe_single()
            .execute()
        )

        return response.data if response and response.data else None

    def find_by_email(self, email: str, company_name: str) -> dict[str, Any] | None:
        """Find a membership or pending invitation for an email in a company."""
        response = (
            self.client.table("company_users")
            .select("id, email, status, company_name")
            .eq("email", email)
            .eq("company_name", company_name)
            .maybe_single()
            .execute()
        )

        return response.data if response and response.data else None

    def inviter_rejection_reason(self, membership: dict[str, Any] | None) -> str | None:
        """Explain why a membership may not invite users, or None if it may."""
        if not membership:
            return "no_membership"
        if membership.get("status") != MemberStatus.ACTIVE.value:
            return "inactive"
        if membership.get("role") not in INVITER_ROLES:
            return "not_admin"
        return None

    def require_active_member(self, caller: UserContext | None) -> str:
        """Check that the caller actively belongs to the company in their settings.

        Args:
            caller: The authenticated user.

        Returns:
            str: The caller's company name.

        Raises:
            AuthenticationError: If there is no caller.
            AuthorizationError: If the caller has no company or no active membership in it.
        """
        if caller is None:
            raise AuthenticationError("Not authenticated")

        company_name = self.get_company_name(caller.user_id)
        membership = self.get_membership(caller.user_id, company_name) if company_name else None
        if not membership or membership.get("status") != MemberStatus.ACTIVE.value:
            logger.warning(
                "Rejected write by caller without an active membership",
                extra={"caller_id": str(caller.user_id), "company_name": company_name},
            )
            raise AuthorizationError("Only active company members can make this change")

        return company_name

    def member_client(self, caller: UserContext | None) -> Client:
        """Supabase client for a write made on behalf of an active member.

        The membership check runs on the service client; the returned
        client carries the caller's token so row level security still
        decides which rows the write reaches.

        Raises:
            AuthenticationError: If there is no caller or no token to act with.
            AuthorizationError: If the caller is not an active member.
        """
        self.require_active_member(caller)
        if not caller.access_token:
            raise AuthenticationError("Missing access token")
        return create_user_client(caller.access_token)

    async def get_company_users(self, caller: UserContext | None) -> list[CompanyUser]:
        """List every user of the caller's company.

        Args:
            caller: The authenticated user.

        Returns:
            list[CompanyUser]: Members and pending invitations of the company.

        Raises:
            AuthenticationError: If there is no caller.
            NotFoundError: If the caller has not configured a company.
        """
        if caller is None:
            raise AuthenticationError("Not authenticated")

        company_name = self.get_company_name(caller.user_id)
        if not company_name:
            raise NotFoundError("Company not found")

        response = (
            self.client.table("company_users")
            .select(DIRECTORY_COLUMNS)
            .eq("company_name", company_name)
            .execute()
        )

        return response.data or []

    async def add_company_user(
        self,
        caller: UserContext | None,
        candidate: CompanyUserCreate,
    ) -> CompanyUser:
        """Invite a user into the caller's company.

        Creates a pending membership after verifying that the caller is an
        active admin or owner and that the email is not already a member or
        invitee. The pre-insert duplicate check only produces a friendlier
        error; the store's unique constraint on (email, company_name) is the
        real guard, and its violation is reported as a pending invitation.

        Args:
            caller: The authenticated user sending the invitation.
            candidate: Email, name, role and task visibility of the invitee.

        Returns:
            CompanyUser: The inserted pending membership row.

        Raises:
            InvitationError: For every failure; nothing is written in that case.
        """
        if caller is None:
            logger.warning("Invitation rejected: not authenticated")
            raise InvitationError(InvitationErrorKind.UNAUTHENTICATED)

        context = {
            "caller_id": str(caller.user_id),
            "email": candidate.email.strip().lower(),
        }

        try:
            return self._invite(caller, candidate, context)
        except InvitationError:
            raise
        except PostgrestAPIError as e:
            logger.error(
                "Failed to add company user: %s",
                e.message,
                extra={**context, "db_code": e.code, "db_details": e.details, "db_hint": e.hint},
            )
            raise InvitationError(InvitationErrorKind.UNEXPECTED_FAILURE) from e
        except Exception as e:
            logger.exception("Failed to add company user: %s", e, extra=context)
            raise InvitationError(InvitationErrorKind.UNEXPECTED_FAILURE) from e

    def _invite(
        self,
        caller: UserContext,
        candidate: CompanyUserCreate,
        context: dict[str, Any],
    ) -> CompanyUser:
        email = candidate.email.strip().lower()
        full_name = candidate.full_name.strip()

        if not email or not full_name:
            logger.warning("Invitation rejected: email and full name are required", extra=context)
            raise InvitationError(InvitationErrorKind.INVALID_INPUT)

        company_name = self.get_company_name(caller.user_id)
        if not company_name:
            logger.warning("Invitation rejected: caller has no company configured", extra=context)
            raise InvitationError(InvitationErrorKind.COMPANY_NOT_CONFIGURED)
        context["company_name"] = company_name

        membership = self.get_membership(caller.user_id, company_name)
        reason = self.inviter_rejection_reason(membership)
        if reason:
            logger.warning(
                "Invitation rejected: caller may not invite users (%s)",
                reason,
                extra={
                    **context,
                    "reason": reason,
                    "caller_role": (membership or {}).get("role"),
                    "caller_status": (membership or {}).get("status"),
                },
            )
            raise InvitationError(InvitationErrorKind.NOT_AUTHORIZED)

        existing = self.find_by_email(email, company_name)
        if existing:
            if existing.get("status") == MemberStatus.ACTIVE.value:
                logger.warning("Invitation rejected: user is already a member", extra=context)
                raise InvitationError(InvitationErrorKind.ALREADY_MEMBER)
            logger.warning(
                "Invitation rejected: invitation already pending",
                extra={**context, "existing_status": existing.get("status")},
            )
            raise InvitationError(InvitationErrorKind.INVITATION_PENDING)

        row = {
            "email": email,
            "full_name": full_name,
            "company_name": company_name,
            "role": candidate.role,
            "can_view_all_tasks": candidate.can_view_all_tasks,
            "status": MemberStatus.PENDING.value,
            "invited_by": str(caller.user_id),
        }

        try:
            response = self.client.table("company_users").insert(row).execute()
        except PostgrestAPIError as e:
            if e.code != UNIQUE_VIOLATION_CODE:
                raise
            # Lost a race with a concurrent invitation for the same email
            logger.warning(
                "Invitation rejected: unique constraint hit on insert",
                extra={**context, "db_details": e.details},
            )
            raise InvitationError(InvitationErrorKind.INVITATION_PENDING) from e

        logger.info(
            "Invited user %s to %s as %s",
            email,
            company_name,
            candidate.role,
            extra={**context, "role": candidate.role},
        )

        return response.data[0] if response.data else row

    async def update_user_role(
        self,
        caller: UserContext | None,
        user_id: UUID,
        updates: CompanyUserRoleUpdate,
    ) -> None:
        """Change a member's role or task visibility within the caller's company.

        Args:
            caller: The authenticated user making the change.
            user_id: Auth user ID of the member to change.
            updates: Fields to change; unset fields are left alone.

        Raises:
            AuthenticationError: If there is no caller.
            NotFoundError: If the caller has not configured a company.
            AuthorizationError: If the caller is not an active admin or owner.
        """
        if caller is None:
            raise AuthenticationError("Not authenticated")

        changes = updates.model_dump(exclude_unset=True, exclude_none=True)
        if not changes:
            return

        company_name = self.get_company_name(caller.user_id)
        if not company_name:
            raise NotFoundError("Company not found")

        if self.inviter_rejection_reason(self.get_membership(caller.user_id, company_name)):
            raise AuthorizationError("Only active admins can change user roles")

        self.client.table("company_users").update(changes).eq(
            "user_id", str(user_id)
        ).eq("company_name", company_name).execute()
