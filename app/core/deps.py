"""
FastAPI dependencies for authentication and authorization.

The session token is read from the Authorization header (Bearer) when
present, otherwise from the session cookie.
"""

import logging
from typing import Optional

from fastapi import Depends, Query, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db
from app.core.exceptions import AuthError
from app.core.permissions import ensure_role
from app.core.security import decode_token
from app.crud import user as user_crud
from app.models.user import User, UserRole

logger = logging.getLogger(__name__)

# Bearer header is optional; the cookie is the primary carrier
bearer_scheme = HTTPBearer(auto_error=False)


def _extract_token(request: Request, credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[str]:
    if credentials and credentials.scheme.lower() == "bearer" and credentials.credentials:
        return credentials.credentials
    token = request.cookies.get(settings.COOKIE_NAME)
    if token and token != "none":
        return token
    return None


def resolve_user(db: Session, token: Optional[str]) -> User:
    """
    Turn a session token into an active User.

    Raises:
        AuthError: If the token is missing, invalid or expired, or the user
            no longer exists or is deactivated
    """
    if not token:
        raise AuthError("Not authorized to access this route")

    try:
        payload = decode_token(token)
        user_id = int(payload.get("sub"))
    except (JWTError, TypeError, ValueError):
        raise AuthError("Not authorized to access this route")

    user = user_crud.get_by_id(db, user_id)
    if user is None:
        raise AuthError("User not found")

    if not user.is_active:
        raise AuthError("User account is deactivated")

    return user


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db)
) -> User:
    """
    Resolve the acting user for protected routes.

    Raises:
        AuthError 401: If no valid session is present
    """
    return resolve_user(db, _extract_token(request, credentials))


async def get_optional_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db)
) -> Optional[User]:
    """
    Resolve the acting user if a valid session is present, otherwise None.

    Used by public routes whose behaviour depends on who is asking.
    """
    token = _extract_token(request, credentials)
    if not token:
        return None
    try:
        return resolve_user(db, token)
    except AuthError:
        return None


def require_roles(*roles: UserRole):
    """
    Build a dependency that admits only users with one of the given roles.

    Usage:
        @router.post("/jobs")
        def create_job(user: User = Depends(require_roles(UserRole.EMPLOYER, UserRole.ADMIN))):
            ...

    Raises:
        AuthError 401: No valid session
        ForbiddenError 403: Role not allowed
    """
    async def dependency(user: User = Depends(get_current_user)) -> User:
        ensure_role(user, *roles)
        return user

    return dependency


get_admin_user = require_roles(UserRole.ADMIN)
get_employer_user = require_roles(UserRole.EMPLOYER, UserRole.ADMIN)
get_jobseeker_user = require_roles(UserRole.JOBSEEKER)


class PageParams:
    """page/limit query parameters shared by every list endpoint."""

    def __init__(
        self,
        page: int = Query(1, ge=1),
        limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE)
    ):
        self.page = page
        self.limit = limit
