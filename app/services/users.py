"""
Profile, upload and favorites operations for the acting user.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import UploadFile
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import ConflictError, NotFoundError, ServerError, ValidationError
from app.core.permissions import ensure_not_last_admin
from app.core.storage import COMPANY_LOGO, PROFILE_PICTURE, RESUME, UploadKind, storage, store_upload
from app.crud import job as job_crud
from app.models.job import Job
from app.models.user import User

logger = logging.getLogger(__name__)

# Patchable profile fields: request key -> User column
PROFILE_FIELDS = {
    "name": "name",
    "phone": "phone",
    "profile.bio": "bio",
    "profile.skills": "skills",
    "profile.experience": "experience",
    "profile.education": "education",
    "profile.location": "location",
    "profile.website": "website",
    "profile.linkedin": "linkedin",
    "profile.github": "github",
    "company.name": "company_name",
    "company.description": "company_description",
    "company.website": "company_website",
    "company.location": "company_location",
    "company.industry": "company_industry",
    "company.size": "company_size",
}

# Column that holds the stored path for each upload kind
UPLOAD_COLUMNS = {
    RESUME: "resume_path",
    PROFILE_PICTURE: "profile_picture",
    COMPANY_LOGO: "company_logo",
}


def _flatten(patch: Dict[str, Any], prefix: str = "") -> Dict[str, Any]:
    """
    Flatten nested objects into dotted keys.

    {"profile": {"bio": "x"}} and {"profile.bio": "x"} both become
    {"profile.bio": "x"}.
    """
    flat = {}
    for key, value in patch.items():
        dotted = f"{prefix}{key}"
        if isinstance(value, dict) and dotted in ("profile", "company"):
            flat.update(_flatten(value, prefix=f"{dotted}."))
        else:
            flat[dotted] = value
    return flat


def _validate_profile_changes(changes: Dict[str, Any]) -> None:
    errors = []

    if "name" in changes:
        name = changes["name"]
        if not isinstance(name, str) or not 1 <= len(name.strip()) <= 50:
            errors.append({"field": "name", "message": "Name must be between 1 and 50 characters"})
        else:
            changes["name"] = name.strip()

    if "skills" in changes:
        skills = changes["skills"]
        if not isinstance(skills, list) or not all(isinstance(skill, str) for skill in skills):
            errors.append({"field": "profile.skills", "message": "Skills must be a list of strings"})

    for column, value in changes.items():
        if column not in ("name", "skills") and value is not None and not isinstance(value, str):
            errors.append({"field": column, "message": "Must be a string"})

    if errors:
        raise ValidationError("Validation failed", errors=errors)


def get_profile(db: Session, acting_user: User) -> User:
    return acting_user


def update_profile(db: Session, acting_user: User, patch: Dict[str, Any]) -> User:
    """
    Update the acting user's profile from an allow-listed patch.

    Keys may be dotted ("profile.bio") or nested objects; anything outside
    PROFILE_FIELDS is ignored, so email, role and password cannot be set here.

    Raises:
        ValidationError: Malformed values for allowed fields
    """
    changes = {
        PROFILE_FIELDS[key]: value
        for key, value in _flatten(patch or {}).items()
        if key in PROFILE_FIELDS
    }
    _validate_profile_changes(changes)

    for column, value in changes.items():
        setattr(acting_user, column, value)

    try:
        db.commit()
        db.refresh(acting_user)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error updating profile of user {acting_user.id}: {e}")
        raise ServerError("Server error while updating profile")

    logger.info(f"Profile of user {acting_user.id} updated: {sorted(changes)}")
    return acting_user


def _upload(db: Session, acting_user: User, upload: Optional[UploadFile], kind: UploadKind) -> str:
    if upload is None or not upload.filename:
        raise ValidationError("Please upload a file", errors=[
            {"field": kind.field, "message": "File is required"}
        ])

    path = store_upload(upload, kind)
    setattr(acting_user, UPLOAD_COLUMNS[kind], path)

    try:
        db.commit()
        db.refresh(acting_user)
    except SQLAlchemyError as e:
        db.rollback()
        storage.delete_file(path)
        logger.error(f"Error saving {kind.field} for user {acting_user.id}: {e}")
        raise ServerError("Server error while uploading file")

    logger.info(f"User {acting_user.id} uploaded {kind.field}: {path}")
    return path


def upload_resume(db: Session, acting_user: User, upload: UploadFile) -> str:
    return _upload(db, acting_user, upload, RESUME)


def upload_profile_picture(db: Session, acting_user: User, upload: UploadFile) -> str:
    return _upload(db, acting_user, upload, PROFILE_PICTURE)


def upload_company_logo(db: Session, acting_user: User, upload: UploadFile) -> str:
    return _upload(db, acting_user, upload, COMPANY_LOGO)


def list_favorites(db: Session, acting_user: User) -> List[Job]:
    return list(acting_user.favorites)


def add_favorite(db: Session, job_id: int, acting_user: User) -> User:
    """
    Raises:
        NotFoundError: Job does not exist
        ConflictError: Job already saved
    """
    job = job_crud.get_by_id(db, job_id)
    if not job:
        raise NotFoundError("Job not found")

    if job in acting_user.favorites:
        raise ConflictError("Job is already in favorites")

    try:
        acting_user.favorites.append(job)
        db.commit()
        db.refresh(acting_user)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error adding job {job_id} to favorites of user {acting_user.id}: {e}")
        raise ServerError("Server error while adding favorite")

    return acting_user


def remove_favorite(db: Session, job_id: int, acting_user: User) -> User:
    """Removing a job that is not saved is a no-op."""
    job = next((favorite for favorite in acting_user.favorites if favorite.id == job_id), None)
    if job is None:
        return acting_user

    try:
        acting_user.favorites.remove(job)
        db.commit()
        db.refresh(acting_user)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error removing job {job_id} from favorites of user {acting_user.id}: {e}")
        raise ServerError("Server error while removing favorite")

    return acting_user


def delete_account(db: Session, acting_user: User) -> None:
    """
    Delete the acting user's account.

    Jobs and applications are kept; their references to the user are
    nulled by the foreign keys. Admins delete with cascade instead.

    Raises:
        ConflictError: The acting user is the last active admin
    """
    user_id = acting_user.id
    ensure_not_last_admin(db, acting_user, "Cannot delete the last admin user")

    try:
        db.delete(acting_user)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error deleting account {user_id}: {e}")
        raise ServerError("Server error while deleting account")

    logger.info(f"User {user_id} deleted their account")
