"""Company user API routes."""

from uuid import UUID

from fastapi import APIRouter, status

from teamspace.api.deps import CurrentUser
from teamspace.schemas.common import ErrorResponse
from teamspace.schemas.company_user import (
    CompanyUserCreate,
    CompanyUserResponse,
    CompanyUserRoleUpdate,
)
from teamspace.services.company_user_service import CompanyUserService

router = APIRouter(prefix="/company-users", tags=["company-users"])


@router.get(
    "",
    response_model=list[CompanyUserResponse],
    summary="List company users",
    description="Returns all members and pending invitations of the caller's company.",
)
async def list_company_users(user: CurrentUser) -> list[CompanyUserResponse]:
    """List the users of the caller's company.

    Args:
        user: The authenticated user context.

    Returns:
        list[CompanyUserResponse]: Members of the company.
    """
    service = CompanyUserService()
    rows = await service.get_company_users(user)
    return [CompanyUserResponse(**row) for row in rows]


@router.post(
    "",
    response_model=CompanyUserResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        403: {"model": ErrorResponse, "description": "Caller is not an active admin or owner"},
        409: {"model": ErrorResponse, "description": "Already a member, invitation pending, or no company configured"},
        422: {"model": ErrorResponse, "description": "Email or full name missing"},
    },
    summary="Add a company user",
    description="Invites a user into the caller's company as a pending member. Only active admins and owners may invite.",
)
async def add_company_user(
    data: CompanyUserCreate,
    user: CurrentUser,
) -> CompanyUserResponse:
    """Invite a user into the caller's company.

    Failures come back as an ErrorResponse whose `error` field is one of
    the invitation error kinds.

    Args:
        data: The invitee's details.
        user: The authenticated user context.

    Returns:
        CompanyUserResponse: The pending membership.
    """
    service = CompanyUserService()
    row = await service.add_company_user(user, data)
    return CompanyUserResponse(**row)


@router.patch(
    "/{member_user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Update a company user's role",
    description="Changes role and/or task visibility of a member. Only active admins and owners may do this.",
)
async def update_company_user_role(
    member_user_id: UUID,
    data: CompanyUserRoleUpdate,
    user: CurrentUser,
) -> None:
    """Update a member's role or task visibility.

    Args:
        member_user_id: Auth user ID of the member.
        data: Fields to change.
        user: The authenticated user context.
    """
    service = CompanyUserService()
    await service.update_user_role(user, member_user_id, data)
