"""Global error handling middleware for consistent error responses."""

import logging
import traceback
from enum import Enum
from typing import Any, Callable

from fastapi import HTTPException, Request, Response, status
from fastapi.responses import JSONResponse
from postgrest.exceptions import APIError as PostgrestAPIError

from teamspace.schemas.common import ErrorResponse

logger = logging.getLogger(__name__)


class APIError(Exception):
    """Base exception for API errors.

    Use this class to raise application-specific errors that should
    be returned to the client with a specific status code and message.
    """

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        error_type: str = "api_error",
        details: list[dict[str, Any]] | None = None,
    ) -> None:
        """Initialize API error.

        Args:
            message: Human-readable error message.
            status_code: HTTP status code to return.
            error_type: Error category/type for client handling.
            details: Optional additional error details.
        """
        self.message = message
        self.status_code = status_code
        self.error_type = error_type
        self.details = details
        super().__init__(message)


class NotFoundError(APIError):
    """Resource not found error."""

    def __init__(self, message: str = "Resource not found", details: list[dict[str, Any]] | None = None) -> None:
        super().__init__(
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            error_type="not_found",
            details=details,
        )


class AuthenticationError(APIError):
    """Authentication failure error."""

    def __init__(self, message: str = "Authentication required", details: list[dict[str, Any]] | None = None) -> None:
        super().__init__(
            message=message,
            status_code=status.HTTP_401_UNAUTHORIZED,
            error_type="authentication_error",
            details=details,
        )


class AuthorizationError(APIError):
    """Authorization failure error."""

    def __init__(self, message: str = "Access denied", details: list[dict[str, Any]] | None = None) -> None:
        super().__init__(
            message=message,
            status_code=status.HTTP_403_FORBIDDEN,
            error_type="authorization_error",
            details=details,
        )


class InvitationErrorKind(str, Enum):
    """Every way adding a user to a company can fail."""

    UNAUTHENTICATED = "unauthenticated"
    INVALID_INPUT = "invalid_input"
    COMPANY_NOT_CONFIGURED = "company_not_configured"
    NOT_AUTHORIZED = "not_authorized"
    ALREADY_MEMBER = "already_member"
    INVITATION_PENDING = "invitation_pending"
    UNEXPECTED_FAILURE = "unexpected_failure"


_INVITATION_STATUS_CODES: dict[InvitationErrorKind, int] = {
    InvitationErrorKind.UNAUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
    InvitationErrorKind.INVALID_INPUT: status.HTTP_422_UNPROCESSABLE_ENTITY,
    InvitationErrorKind.COMPANY_NOT_CONFIGURED: status.HTTP_409_CONFLICT,
    InvitationErrorKind.NOT_AUTHORIZED: status.HTTP_403_FORBIDDEN,
    InvitationErrorKind.ALREADY_MEMBER: status.HTTP_409_CONFLICT,
    InvitationErrorKind.INVITATION_PENDING: status.HTTP_409_CONFLICT,
    InvitationErrorKind.UNEXPECTED_FAILURE: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

# Copy shown to the person filling in the add-user form
INVITATION_ERROR_MESSAGES: dict[InvitationErrorKind, str] = {
    InvitationErrorKind.UNAUTHENTICATED: "Please sign in to invite users",
    InvitationErrorKind.INVALID_INPUT: "Please fill in all required fields",
    InvitationErrorKind.COMPANY_NOT_CONFIGURED: "Company name not found - please set up your company first",
    InvitationErrorKind.NOT_AUTHORIZED: "Only active admins can invite new users",
    InvitationErrorKind.ALREADY_MEMBER: "This user is already part of your company",
    InvitationErrorKind.INVITATION_PENDING: "This user already has a pending invitation",
    InvitationErrorKind.UNEXPECTED_FAILURE: "Failed to add user. Please try again.",
}


class InvitationError(APIError):
    """Failure of the add-company-user workflow.

    The message is fixed per kind and never contains storage error text;
    the underlying cause is logged where the error is raised.
    """

    def __init__(self, kind: InvitationErrorKind) -> None:
        self.kind = kind
        super().__init__(
            message=INVITATION_ERROR_MESSAGES[kind],
            status_code=_INVITATION_STATUS_CODES[kind],
            error_type=kind.value,
        )


def create_error_response(
    error_type: str,
    message: str,
    status_code: int,
    details: list[dict[str, Any]] | None = None,
    request_id: str | None = None,
) -> JSONResponse:
    """Create a standardized JSON error response.

    Args:
        error_type: Error category for client handling.
        message: Human-readable error description.
        status_code: HTTP status code.
        details: Optional error details.
        request_id: Optional request ID for tracing.

    Returns:
        JSONResponse: Formatted error response.
    """
    error_response = ErrorResponse.from_exception(
        error_type=error_type,
        message=message,
        details=details,
        request_id=request_id,
    )
    return JSONResponse(
        status_code=status_code,
        content=error_response.model_dump(mode="json", exclude_none=True),
    )


async def error_handler_middleware(request: Request, call_next: Callable[[Request], Any]) -> Response:
    """Middleware to catch and format all exceptions.

    Ensures consistent error response format across the application.
    Logs full detail for debugging while returning safe messages to clients.

    Args:
        request: The incoming request.
        call_next: Next middleware or route handler.

    Returns:
        Response: Either the successful response or formatted error response.
    """
    request_id = request.headers.get("X-Request-ID")

    try:
        response = await call_next(request)
        return response

    except APIError as e:
        logger.warning(
            "API error: %s - %s",
            e.error_type,
            e.message,
            extra={"request_id": request_id, "status_code": e.status_code},
        )
        return create_error_response(
            error_type=e.error_type,
            message=e.message,
            status_code=e.status_code,
            details=e.details,
            request_id=request_id,
        )

    except HTTPException as e:
        logger.warning(
            "HTTP exception: %s - %s",
            e.status_code,
            e.detail,
            extra={"request_id": request_id},
        )
        return create_error_response(
            error_type="http_error",
            message=str(e.detail),
            status_code=e.status_code,
            request_id=request_id,
        )

    except PostgrestAPIError as e:
        # Store errors carry code/details/hint worth keeping in the logs,
        # but none of it goes back to the client
        logger.error(
            "Database error on %s %s: %s",
            request.method,
            request.url.path,
            e.message,
            extra={
                "request_id": request_id,
                "db_code": e.code,
                "db_details": e.details,
                "db_hint": e.hint,
            },
        )
        return create_error_response(
            error_type="internal_error",
            message="An unexpected error occurred",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            request_id=request_id,
        )

    except Exception as e:
        logger.error(
            "Unhandled exception: %s\n%s",
            str(e),
            traceback.format_exc(),
            extra={"request_id": request_id},
        )
        return create_error_response(
            error_type="internal_error",
            message="An unexpected error occurred",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            request_id=request_id,
        )
