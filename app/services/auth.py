"""
Registration and login.

Both operations return the user together with a freshly signed session
token; setting the cookie is left to the HTTP layer.
"""

import logging
from datetime import datetime, timezone
from typing import Optional, Tuple

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import AuthError, ConflictError, ServerError
from app.core.security import create_access_token, get_password_hash, verify_password
from app.crud import user as user_crud
from app.models.user import User, UserRole

logger = logging.getLogger(__name__)


def issue_token(user: User) -> str:
    return create_access_token(data={"sub": str(user.id), "role": user.role.value})


def register(
    db: Session,
    name: str,
    email: str,
    password: str,
    role: Optional[UserRole] = None
) -> Tuple[User, str]:
    """
    Create an account and sign a session token for it.

    Raises:
        ConflictError: If the email is already registered
    """
    email = email.strip().lower()
    if user_crud.get_by_email(db, email):
        logger.warning(f"Registration refused, email already registered: {email}")
        raise ConflictError("User already exists with this email")

    try:
        user = user_crud.create(
            db,
            name=name,
            email=email,
            hashed_password=get_password_hash(password),
            role=role or UserRole.JOBSEEKER,
        )
        db.commit()
        db.refresh(user)
    except IntegrityError:
        # Lost a race against a concurrent registration with the same email
        db.rollback()
        raise ConflictError("User already exists with this email")
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error registering {email}: {e}")
        raise ServerError("Server error during registration")

    logger.info(f"New user registered: {user.email} (role: {user.role.value})")
    return user, issue_token(user)


def login(db: Session, email: str, password: str) -> Tuple[User, str]:
    """
    Authenticate by email and password and refresh last_login_at.

    Raises:
        AuthError: Unknown email, wrong password, or deactivated account
    """
    user = user_crud.get_by_email(db, email)
    if not user or not verify_password(password, user.hashed_password):
        logger.warning(f"Failed login attempt for {email}")
        raise AuthError("Invalid credentials")

    if not user.is_active:
        logger.warning(f"Login refused for deactivated account {email}")
        raise AuthError("User account is deactivated")

    try:
        user.last_login_at = datetime.now(timezone.utc)
        db.commit()
        db.refresh(user)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error recording login for {email}: {e}")
        raise ServerError("Server error during login")

    logger.info(f"User logged in: {user.email}")
    return user, issue_token(user)
