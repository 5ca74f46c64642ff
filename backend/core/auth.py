"""
JWT authentication for the payroll API.

Tokens are issued by the identity service and carry the acting user, the
tenant the user is operating in and the user's permission strings. The
resolved ``CurrentUser`` is handed to route handlers, which pass the
tenant and actor explicitly into every service call.
"""

import secrets
import logging
from datetime import datetime, timedelta
from typing import Optional, List

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from pydantic import BaseModel

from .config import settings
from .exceptions import AuthenticationError, PermissionError
from .permissions import Permission, has_permission

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


class TokenData(BaseModel):
    """Token payload data."""

    user_id: int
    tenant_id: int
    permissions: List[str] = []
    token_id: Optional[str] = None


class CurrentUser(BaseModel):
    """Authenticated caller, resolved from the bearer token."""

    id: int
    tenant_id: int
    permissions: List[str] = []

    def can(self, permission) -> bool:
        return has_permission(self.permissions, permission)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a signed access token.

    ``data`` must contain ``sub`` (user id) and ``tenant_id``; it may
    contain ``permissions``.
    """
    to_encode = data.copy()
    now = datetime.utcnow()
    expire = now + (
        expires_delta or timedelta(minutes=settings.jwt_access_token_expire_minutes)
    )
    to_encode["sub"] = str(to_encode["sub"])
    to_encode.update(
        {
            "exp": expire,
            "iat": int(now.timestamp()),
            "type": "access",
            "jti": secrets.token_urlsafe(16),
            "iss": settings.jwt_issuer,
            "aud": settings.jwt_audience,
        }
    )
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def verify_token(token: str) -> Optional[TokenData]:
    """
    Verify and decode an access token.

    Returns:
        TokenData if valid, None otherwise
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            issuer=settings.jwt_issuer,
        )
    except JWTError as e:
        logger.warning(f"Rejected access token: {e}")
        return None

    if payload.get("type") != "access":
        logger.warning("Rejected token with type %r", payload.get("type"))
        return None

    try:
        return TokenData(
            user_id=int(payload["sub"]),
            tenant_id=int(payload["tenant_id"]),
            permissions=list(payload.get("permissions") or []),
            token_id=payload.get("jti"),
        )
    except (KeyError, TypeError, ValueError) as e:
        logger.warning(f"Access token missing required claims: {e}")
        return None


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> CurrentUser:
    """Resolve the current authenticated user from the bearer token."""
    if credentials is None:
        raise AuthenticationError("Not authenticated")

    token_data = verify_token(credentials.credentials)
    if token_data is None:
        raise AuthenticationError()

    return CurrentUser(
        id=token_data.user_id,
        tenant_id=token_data.tenant_id,
        permissions=token_data.permissions,
    )


def require_permission(permission: Permission):
    """Build a dependency that requires ``permission`` and returns the user."""

    async def dependency(
        current_user: CurrentUser = Depends(get_current_user),
    ) -> CurrentUser:
        if not current_user.can(permission):
            logger.warning(
                "User %s denied %s in tenant %s",
                current_user.id,
                permission.value,
                current_user.tenant_id,
            )
            raise PermissionError(
                detail=f"Missing required permission: {permission.value}"
            )
        return current_user

    return dependency
