"""
Authentication endpoints.

- POST /register: Create an account and start a session
- POST /login: Authenticate and start a session
- GET /me: Current user
- GET /logout: Clear the session cookie

The session token is returned in the body and set as an http-only cookie.
"""

import logging
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import get_current_user
from app.core.security import clear_session_cookie, set_session_cookie
from app.models.user import User
from app.schemas.common import MessageResponse
from app.schemas.user import AuthResponse, UserEnvelope, UserLoginRequest, UserRegisterRequest
from app.services import auth as auth_service

router = APIRouter(prefix="/auth", tags=["Authentication"])
logger = logging.getLogger(__name__)


@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=AuthResponse)
def register(
    request: UserRegisterRequest,
    response: Response,
    db: Session = Depends(get_db)
):
    """
    Register a new job seeker or employer account.

    Admin accounts cannot be self-registered; use create_admin.py.
    """
    user, token = auth_service.register(
        db,
        name=request.name,
        email=request.email,
        password=request.password,
        role=request.role,
    )
    set_session_cookie(response, token)
    return {"message": "User registered successfully", "token": token, "user": user}


@router.post("/login", response_model=AuthResponse)
def login(
    request: UserLoginRequest,
    response: Response,
    db: Session = Depends(get_db)
):
    user, token = auth_service.login(db, email=request.email, password=request.password)
    set_session_cookie(response, token)
    return {"token": token, "user": user}


@router.get("/me", response_model=UserEnvelope)
def get_me(current_user: User = Depends(get_current_user)):
    return {"user": current_user}


@router.get("/logout", response_model=MessageResponse)
def logout(response: Response):
    """
    End the session on this client.

    Tokens are stateless, so this only overwrites the cookie.
    """
    clear_session_cookie(response)
    return {"message": "User logged out successfully"}
