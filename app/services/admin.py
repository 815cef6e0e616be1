"""
Administration: user management, cross-owner listings and platform statistics.

Role changes, deactivation and deletion never leave the platform without an
active admin. The check counts active admins with their rows locked, inside
the same transaction as the change it guards.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import extract, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError, ServerError
from app.core.permissions import ensure_not_last_admin
from app.crud import application as application_crud
from app.crud import job as job_crud
from app.crud import user as user_crud
from app.models.application import Application, ApplicationStatus
from app.models.job import Job, JobStatus
from app.models.user import User, UserRole

logger = logging.getLogger(__name__)

RECENT_ACTIVITY_DAYS = 30
MONTHLY_TREND_DAYS = 6 * 30


def _get_user(db: Session, user_id: int) -> User:
    user = user_crud.get_by_id(db, user_id)
    if not user:
        raise NotFoundError("User not found")
    return user


def _commit(db: Session, action: str) -> None:
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error during {action}: {e}")
        raise ServerError("Server error")


def list_users(
    db: Session,
    page: int,
    limit: int,
    role: Optional[UserRole] = None,
    is_active: Optional[bool] = None,
    search: Optional[str] = None
) -> Tuple[List[User], int]:
    return user_crud.get_multi(db, page, limit, role=role, is_active=is_active, search=search)


def get_user_by_id(db: Session, user_id: int) -> Tuple[User, Dict[str, int]]:
    """
    Fetch a user with activity counters.

    Employers get jobs_posted and applications_received, job seekers get
    applications_submitted; the rest stay 0.

    Raises:
        NotFoundError: User does not exist
    """
    user = _get_user(db, user_id)

    stats = {
        "jobs_posted": 0,
        "applications_submitted": 0,
        "applications_received": 0,
    }

    if user.role == UserRole.EMPLOYER:
        job_ids = job_crud.ids_by_owner(db, user.id)
        stats["jobs_posted"] = len(job_ids)
        stats["applications_received"] = application_crud.count(db, job_ids=job_ids)

    if user.role == UserRole.JOBSEEKER:
        stats["applications_submitted"] = application_crud.count(db, applicant_id=user.id)

    return user, stats


def update_user_role(db: Session, user_id: int, role: UserRole, acting_user: User) -> User:
    """
    Raises:
        NotFoundError: User does not exist
        ConflictError: Demoting the last active admin
    """
    user = _get_user(db, user_id)

    if role != UserRole.ADMIN:
        ensure_not_last_admin(db, user, "Cannot change role of the last admin user")

    previous = user.role
    user.role = role
    _commit(db, f"role update of user {user_id}")
    db.refresh(user)

    logger.info(f"Admin {acting_user.id} changed role of user {user_id}: {previous.value} -> {role.value}")
    return user


def deactivate_user(db: Session, user_id: int, acting_user: User) -> User:
    """
    Raises:
        NotFoundError: User does not exist
        ConflictError: Deactivating the last active admin
    """
    user = _get_user(db, user_id)
    ensure_not_last_admin(db, user, "Cannot deactivate the last admin user")

    user.is_active = False
    _commit(db, f"deactivation of user {user_id}")
    db.refresh(user)

    logger.info(f"Admin {acting_user.id} deactivated user {user_id}")
    return user


def activate_user(db: Session, user_id: int, acting_user: User) -> User:
    user = _get_user(db, user_id)

    user.is_active = True
    _commit(db, f"activation of user {user_id}")
    db.refresh(user)

    logger.info(f"Admin {acting_user.id} activated user {user_id}")
    return user


def delete_user(db: Session, user_id: int, acting_user: User) -> None:
    """
    Delete a user together with everything they own.

    Removes the user's applications (decrementing the counters of the jobs
    they applied to), the user's jobs with all applications to them, and
    finally the user, in one transaction.

    Raises:
        NotFoundError: User does not exist
        ConflictError: Deleting the last active admin
    """
    user = _get_user(db, user_id)
    ensure_not_last_admin(db, user, "Cannot delete the last admin user")

    try:
        own_jobs = db.query(Job).filter(Job.posted_by_id == user.id).all()
        own_job_ids = {job.id for job in own_jobs}

        for job_id, total in application_crud.count_by_job_for_applicant(db, user.id).items():
            if job_id not in own_job_ids:
                job_crud.adjust_applications_count(db, job_id, -total)

        for job in own_jobs:
            db.delete(job)
        db.flush()

        removed_applications = application_crud.delete_by_applicant(db, user.id)
        db.delete(user)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error deleting user {user_id}: {e}")
        raise ServerError("Server error")

    logger.info(
        f"Admin {acting_user.id} deleted user {user_id} with {len(own_job_ids)} jobs "
        f"and {removed_applications} applications"
    )


def list_all_jobs(
    db: Session,
    page: int,
    limit: int,
    status: Optional[JobStatus] = None,
    search: Optional[str] = None
) -> Tuple[List[Job], int]:
    return job_crud.get_all(db, page, limit, status=status, search=search)


def list_all_applications(
    db: Session,
    page: int,
    limit: int,
    status: Optional[ApplicationStatus] = None
) -> Tuple[List[Application], int]:
    return application_crud.get_multi(db, page, limit, status=status)


def _monthly_registrations(db: Session, since: datetime) -> List[Dict[str, int]]:
    year = extract("year", User.created_at).label("year")
    month = extract("month", User.created_at).label("month")
    rows = db.query(year, month, func.count(User.id)).filter(
        User.created_at >= since
    ).group_by(year, month).order_by(year, month).all()
    return [{"year": int(y), "month": int(m), "count": total} for y, m, total in rows]


def stats(db: Session) -> Dict[str, Any]:
    """Dashboard numbers for the admin panel."""
    now = datetime.now(timezone.utc)
    recent_since = now - timedelta(days=RECENT_ACTIVITY_DAYS)

    overview = {
        "total_users": user_crud.count(db),
        "total_jobseekers": user_crud.count(db, role=UserRole.JOBSEEKER),
        "total_employers": user_crud.count(db, role=UserRole.EMPLOYER),
        "total_jobs": job_crud.count(db),
        "active_jobs": job_crud.count(db, status=JobStatus.ACTIVE),
        "total_applications": application_crud.count(db),
    }

    recent_activity = {
        "recent_users": user_crud.count(db, since=recent_since),
        "recent_jobs": job_crud.count(db, since=recent_since),
        "recent_applications": application_crud.count(db, since=recent_since),
    }

    return {
        "overview": overview,
        "recent_activity": recent_activity,
        "application_status_stats": [
            {"status": status.value, "count": total}
            for status, total in application_crud.count_by_status(db)
        ],
        "job_category_stats": [
            {"category": category.value, "count": total}
            for category, total in job_crud.count_by(db, Job.category, active_only=False)
        ],
        "monthly_user_stats": _monthly_registrations(db, now - timedelta(days=MONTHLY_TREND_DAYS)),
    }
