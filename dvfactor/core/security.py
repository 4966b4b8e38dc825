"""Bearer token validation for tokens issued by the identity provider."""
from __future__ import annotations

from dataclasses import dataclass, replace
from functools import lru_cache

import jwt
from fastapi import Depends, HTTPException, Request, status
from jwt import ExpiredSignatureError, InvalidTokenError
from sqlalchemy.orm import Session

from dvfactor.core.config import AuthSettings, get_settings
from dvfactor.repositories import ProfileRepository
from dvfactor.web.dependencies import get_db_session


class AuthenticationError(Exception):
    """Raised when token validation fails."""


@dataclass(frozen=True, slots=True)
class AuthenticatedUser:
    """Representation of the authenticated principal."""

    user_id: str
    role: str
    email: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == get_settings().auth.admin_role


class SecurityProvider:
    """Verify access tokens and turn their claims into an ``AuthenticatedUser``."""

    DEFAULT_ADMIN_ID = "00000000-0000-0000-0000-000000000000"

    def __init__(self, settings: AuthSettings) -> None:
        self._settings = settings

    @property
    def is_enabled(self) -> bool:
        return self._settings.enabled

    def default_admin_user(self) -> AuthenticatedUser:
        return AuthenticatedUser(user_id=self.DEFAULT_ADMIN_ID, role=self._settings.admin_role)

    def decode_token(self, token: str) -> AuthenticatedUser:
        """Decode a JWT and return the corresponding ``AuthenticatedUser``."""

        try:
            payload = jwt.decode(
                token,
                self._settings.secret_key,
                algorithms=[self._settings.algorithm],
                options={"verify_aud": False},
            )
        except ExpiredSignatureError as exc:
            raise AuthenticationError("Token expired") from exc
        except InvalidTokenError as exc:
            raise AuthenticationError("Invalid token") from exc

        subject = payload.get("sub")
        if not isinstance(subject, str) or not subject:
            raise AuthenticationError("Token payload missing subject claim")

        role = payload.get("role")
        if not isinstance(role, str) or not role:
            role = "authenticated"
        # Admin profiles carry the flag in app metadata rather than the role claim.
        app_metadata = payload.get("app_metadata")
        if isinstance(app_metadata, dict) and app_metadata.get("is_admin") is True:
            role = self._settings.admin_role

        email = payload.get("email")
        return AuthenticatedUser(
            user_id=subject,
            role=role,
            email=email if isinstance(email, str) else None,
        )


@lru_cache(maxsize=1)
def get_security_provider() -> SecurityProvider:
    """Return a cached security provider instance."""

    return SecurityProvider(get_settings().auth)


def _bearer_token(request: Request) -> str | None:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token:
        return None
    return token.strip()


def get_authenticated_user(request: Request) -> AuthenticatedUser:
    """Resolve the principal of the current request from its bearer token."""

    security = get_security_provider()
    if not security.is_enabled:
        return security.default_admin_user()

    token = _bearer_token(request)
    if token is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Login required")
    try:
        return security.decode_token(token)
    except AuthenticationError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(exc),
        ) from exc


def require_admin_user(
    user: AuthenticatedUser = Depends(get_authenticated_user),
    session: Session = Depends(get_db_session),
) -> AuthenticatedUser:
    """Ensure the current user has administrative privileges.

    The stored profile flag decides; the token claim only counts for users
    without a profile yet.
    """

    profile = ProfileRepository(session).get(user.user_id)
    if profile is not None:
        if profile.is_admin:
            return replace(user, role=get_settings().auth.admin_role)
        is_admin = False
    else:
        is_admin = user.is_admin
    if not is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Administrator access required",
        )
    return user


__all__ = [
    "AuthenticatedUser",
    "AuthenticationError",
    "SecurityProvider",
    "get_security_provider",
    "get_authenticated_user",
    "require_admin_user",
]
