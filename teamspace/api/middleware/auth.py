"""Supabase access token verification."""

import json
from enum import Enum
from functools import lru_cache
from typing import Any

import jwt
from jwt import PyJWK

from teamspace.core.config import get_settings
from teamspace.schemas.auth import TokenPayload

SUPABASE_AUDIENCE = "authenticated"
SUPABASE_ALGORITHMS = ["ES256"]
REQUIRED_CLAIMS = ["exp", "iat", "sub"]


class AuthErrorCode(str, Enum):
    """Reasons a token can be rejected."""

    TOKEN_EXPIRED = "TOKEN_EXPIRED"
    INVALID_TOKEN = "INVALID_TOKEN"
    INVALID_SIGNATURE = "INVALID_SIGNATURE"


class AuthError(Exception):
    """Raised when a bearer token cannot be trusted."""

    def __init__(self, message: str, code: AuthErrorCode) -> None:
        self.message = message
        self.code = code
        super().__init__(message)


# Checked in order; subclasses before their bases
_JWT_ERRORS: list[tuple[type[Exception], AuthErrorCode, str]] = [
    (jwt.ExpiredSignatureError, AuthErrorCode.TOKEN_EXPIRED, "Token has expired"),
    (jwt.InvalidSignatureError, AuthErrorCode.INVALID_SIGNATURE, "Invalid token signature"),
    (jwt.InvalidAudienceError, AuthErrorCode.INVALID_TOKEN, "Token is not for this audience"),
    (jwt.MissingRequiredClaimError, AuthErrorCode.INVALID_TOKEN, "Token missing required claim"),
    (jwt.DecodeError, AuthErrorCode.INVALID_TOKEN, "Invalid token format"),
]


@lru_cache
def get_signing_key() -> Any:
    """Public key parsed from the SUPABASE_SIGNING_KEY_JWK setting.

    Raises:
        AuthError: If the setting is empty or not a JWK.
    """
    jwk_json = get_settings().supabase_signing_key_jwk
    if not jwk_json:
        raise AuthError("Signing key not configured", AuthErrorCode.INVALID_TOKEN)

    try:
        return PyJWK.from_dict(json.loads(jwk_json)).key
    except (json.JSONDecodeError, jwt.PyJWKError) as e:
        raise AuthError(f"Invalid signing key JWK: {e}", AuthErrorCode.INVALID_TOKEN) from e


def _to_auth_error(error: Exception) -> AuthError:
    for error_type, code, message in _JWT_ERRORS:
        if isinstance(error, error_type):
            return AuthError(f"{message}: {error}" if code == AuthErrorCode.INVALID_TOKEN else message, code)
    return AuthError(f"Token validation failed: {error}", AuthErrorCode.INVALID_TOKEN)


def decode_jwt(token: str) -> TokenPayload:
    """Verify a Supabase access token and return its claims.

    Checks the ES256 signature, expiry and the `authenticated` audience.
    The user_metadata claim is kept so settings defaults can be read from
    the caller's profile.

    Args:
        token: The raw bearer token.

    Returns:
        TokenPayload: The verified claims.

    Raises:
        AuthError: If the token is expired, forged, malformed or for another audience.
    """
    public_key = get_signing_key()

    try:
        claims: dict[str, Any] = jwt.decode(
            token,
            public_key,
            algorithms=SUPABASE_ALGORITHMS,
            audience=SUPABASE_AUDIENCE,
            options={"require": REQUIRED_CLAIMS},
        )
        return TokenPayload(
            sub=claims["sub"],
            email=claims.get("email"),
            role=claims.get("role"),
            exp=claims["exp"],
            iat=claims["iat"],
            aud=claims.get("aud"),
            iss=claims.get("iss"),
            user_metadata=claims.get("user_metadata") or {},
        )
    except Exception as e:
        raise _to_auth_error(e) from e
