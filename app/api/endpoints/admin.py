"""
Admin API endpoints.

Every route requires an active admin session. The last active admin can
never be demoted, deactivated or deleted.
"""

import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import PageParams, get_admin_user
from app.models.application import ApplicationStatus
from app.models.job import JobStatus
from app.models.user import User, UserRole
from app.schemas.admin import AdminStatsResponse
from app.schemas.application import ApplicationListResponse
from app.schemas.common import MessageResponse, page_meta
from app.schemas.job import JobListResponse
from app.schemas.user import RoleUpdateRequest, UserDetailResponse, UserEnvelope, UserListResponse
from app.services import admin as admin_service

router = APIRouter(prefix="/admin", tags=["Admin"])
logger = logging.getLogger(__name__)


@router.get("/users", response_model=UserListResponse)
def list_users(
    role: Optional[UserRole] = None,
    is_active: Optional[bool] = Query(None, alias="isActive"),
    search: Optional[str] = None,
    pagination: PageParams = Depends(),
    admin_user: User = Depends(get_admin_user),
    db: Session = Depends(get_db)
):
    """List users newest first; search matches name or email."""
    users, total = admin_service.list_users(
        db, pagination.page, pagination.limit, role=role, is_active=is_active, search=search
    )
    return {"users": users, **page_meta(len(users), total, pagination.page, pagination.limit)}


@router.get("/users/{user_id}", response_model=UserDetailResponse)
def get_user(
    user_id: int,
    admin_user: User = Depends(get_admin_user),
    db: Session = Depends(get_db)
):
    user, stats = admin_service.get_user_by_id(db, user_id)
    return {"user": user, "stats": stats}


@router.put("/users/{user_id}/role", response_model=UserEnvelope)
def update_user_role(
    user_id: int,
    request: RoleUpdateRequest,
    admin_user: User = Depends(get_admin_user),
    db: Session = Depends(get_db)
):
    user = admin_service.update_user_role(db, user_id, request.role, admin_user)
    return {"message": "User role updated successfully", "user": user}


@router.put("/users/{user_id}/deactivate", response_model=MessageResponse)
def deactivate_user(
    user_id: int,
    admin_user: User = Depends(get_admin_user),
    db: Session = Depends(get_db)
):
    admin_service.deactivate_user(db, user_id, admin_user)
    return {"message": "User deactivated successfully"}


@router.put("/users/{user_id}/activate", response_model=MessageResponse)
def activate_user(
    user_id: int,
    admin_user: User = Depends(get_admin_user),
    db: Session = Depends(get_db)
):
    admin_service.activate_user(db, user_id, admin_user)
    return {"message": "User activated successfully"}


@router.delete("/users/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: int,
    admin_user: User = Depends(get_admin_user),
    db: Session = Depends(get_db)
):
    """
    Delete a user and all associated data.

    This is a CASCADE delete: the user's applications, the user's jobs and
    every application to those jobs are removed.
    """
    admin_service.delete_user(db, user_id, admin_user)
    return {"message": "User and related data deleted successfully"}


@router.get("/jobs", response_model=JobListResponse)
def list_all_jobs(
    job_status: Optional[JobStatus] = Query(None, alias="status"),
    search: Optional[str] = None,
    pagination: PageParams = Depends(),
    admin_user: User = Depends(get_admin_user),
    db: Session = Depends(get_db)
):
    """All jobs regardless of owner or status."""
    jobs, total = admin_service.list_all_jobs(
        db, pagination.page, pagination.limit, status=job_status, search=search
    )
    return {"jobs": jobs, **page_meta(len(jobs), total, pagination.page, pagination.limit)}


@router.get("/applications", response_model=ApplicationListResponse)
def list_all_applications(
    application_status: Optional[ApplicationStatus] = Query(None, alias="status"),
    pagination: PageParams = Depends(),
    admin_user: User = Depends(get_admin_user),
    db: Session = Depends(get_db)
):
    applications, total = admin_service.list_all_applications(
        db, pagination.page, pagination.limit, status=application_status
    )
    return {"applications": applications, **page_meta(len(applications), total, pagination.page, pagination.limit)}


@router.get("/stats", response_model=AdminStatsResponse)
def get_stats(
    admin_user: User = Depends(get_admin_user),
    db: Session = Depends(get_db)
):
    return {"stats": admin_service.stats(db)}
