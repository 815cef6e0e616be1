"""
Authorization policy.

Every ownership/role decision made by the services goes through these
predicates, so a rule lives in exactly one place. The ensure_* helpers raise
ForbiddenError, except ensure_not_last_admin which raises ConflictError;
the plain predicates return bools.
"""

import logging

from sqlalchemy.orm import Session

from app.core.exceptions import ConflictError, ForbiddenError
from app.crud import user as user_crud
from app.models.application import Application
from app.models.job import Job
from app.models.user import User, UserRole

logger = logging.getLogger(__name__)


def is_admin(user: User) -> bool:
    return user.role == UserRole.ADMIN


def has_role(user: User, *roles: UserRole) -> bool:
    return user.role in roles


def owns_job(user: User, job: Job) -> bool:
    return job.posted_by_id is not None and job.posted_by_id == user.id


def can_manage_job(user: User, job: Job) -> bool:
    """Owner or admin may edit, delete and review applications of a job."""
    return owns_job(user, job) or is_admin(user)


def is_applicant(user: User, application: Application) -> bool:
    return application.applicant_id is not None and application.applicant_id == user.id


def can_view_application(user: User, application: Application) -> bool:
    return is_applicant(user, application) or can_manage_job(user, application.job)


def ensure_role(user: User, *roles: UserRole) -> None:
    if not has_role(user, *roles):
        role = user.role.value if user.role else "unknown"
        raise ForbiddenError(f"Role {role} is not authorized to access this route")


def ensure_can_manage_job(user: User, job: Job, action: str = "modify") -> None:
    if not can_manage_job(user, job):
        raise ForbiddenError(f"You are not authorized to {action} this job")


def ensure_can_manage_application(user: User, application: Application, action: str = "update") -> None:
    if not can_manage_job(user, application.job):
        raise ForbiddenError(f"Not authorized to {action} this application")


def ensure_is_applicant(user: User, application: Application, action: str = "withdraw") -> None:
    if not is_applicant(user, application):
        raise ForbiddenError(f"Not authorized to {action} this application")


def ensure_can_view_application(user: User, application: Application) -> None:
    if not can_view_application(user, application):
        raise ForbiddenError("Not authorized to view this application")


def ensure_not_last_admin(db: Session, user: User, message: str) -> None:
    """
    Refuse a change that would remove the last active admin.

    Only an active admin target can reduce the count, so other targets pass
    without taking the lock. The admin rows stay locked until the caller
    commits.
    """
    if not is_admin(user) or not user.is_active:
        return

    remaining = [admin_id for admin_id in user_crud.active_admin_ids(db, lock=True) if admin_id != user.id]
    if not remaining:
        db.rollback()
        logger.warning(f"Refused change to last active admin {user.id}: {message}")
        raise ConflictError(message)
