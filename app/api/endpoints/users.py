"""
Endpoints for the signed-in user's own profile, uploads and saved jobs.
"""

import logging
from typing import Any, Dict, Optional
from fastapi import APIRouter, Body, Depends, File, Response, UploadFile
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import get_current_user
from app.core.security import clear_session_cookie
from app.models.user import User
from app.schemas.common import MessageResponse
from app.schemas.job import FavoriteListResponse
from app.schemas.user import UploadResponse, UserEnvelope
from app.services import users as user_service

router = APIRouter(prefix="/users", tags=["Users"])
logger = logging.getLogger(__name__)


@router.get("/profile", response_model=UserEnvelope)
def get_profile(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return {"user": user_service.get_profile(db, current_user)}


@router.put("/profile", response_model=UserEnvelope)
def update_profile(
    patch: Dict[str, Any] = Body(...),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Update profile fields.

    Accepts nested objects ({"profile": {"bio": ...}}) or dotted keys
    ({"profile.bio": ...}). Email, role and password are not editable here.
    """
    user = user_service.update_profile(db, current_user, patch)
    return {"message": "Profile updated successfully", "user": user}


@router.post("/upload-resume", response_model=UploadResponse)
def upload_resume(
    resume: Optional[UploadFile] = File(None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    path = user_service.upload_resume(db, current_user, resume)
    return {"message": "Resume uploaded successfully", "path": path, "user": current_user}


@router.post("/upload-profile-picture", response_model=UploadResponse)
def upload_profile_picture(
    profile_picture: Optional[UploadFile] = File(None, alias="profilePicture"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    path = user_service.upload_profile_picture(db, current_user, profile_picture)
    return {"message": "Profile picture uploaded successfully", "path": path, "user": current_user}


@router.post("/upload-company-logo", response_model=UploadResponse)
def upload_company_logo(
    company_logo: Optional[UploadFile] = File(None, alias="companyLogo"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    path = user_service.upload_company_logo(db, current_user, company_logo)
    return {"message": "Company logo uploaded successfully", "path": path, "user": current_user}


@router.get("/favorites", response_model=FavoriteListResponse)
def list_favorites(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return {"favorites": user_service.list_favorites(db, current_user)}


@router.post("/favorites/{job_id}", response_model=MessageResponse)
def add_favorite(
    job_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    user_service.add_favorite(db, job_id, current_user)
    return {"message": "Job added to favorites"}


@router.delete("/favorites/{job_id}", response_model=MessageResponse)
def remove_favorite(
    job_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    user_service.remove_favorite(db, job_id, current_user)
    return {"message": "Job removed from favorites"}


@router.delete("/account", response_model=MessageResponse)
def delete_account(
    response: Response,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Delete the current account. Posted jobs and submitted applications are kept."""
    user_service.delete_account(db, current_user)
    clear_session_cookie(response)
    return {"message": "Account deleted successfully"}
