"""
Job catalog operations: listing, search, statistics and owner-scoped CRUD.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError, ServerError, ValidationError
from app.core.permissions import ensure_can_manage_job, owns_job
from app.crud import application as application_crud
from app.crud import job as job_crud
from app.crud.job import JobFilters
from app.models.job import Job
from app.models.user import User
from app.schemas.job import JobCreateRequest, JobUpdateRequest

logger = logging.getLogger(__name__)

TOP_GROUPS = 10


def parse_sort(sort_by: Optional[str]) -> Optional[Tuple[str, bool]]:
    """
    Parse "field:asc|desc" into (field, descending).

    Raises:
        ValidationError: Unknown field or direction
    """
    if not sort_by:
        return None

    field, _, order = sort_by.partition(":")
    order = (order or "asc").lower()
    if field not in job_crud.SORTABLE_FIELDS:
        allowed = ", ".join(job_crud.SORTABLE_FIELDS)
        raise ValidationError(f"Invalid sort field '{field}'. Allowed: {allowed}")
    if order not in ("asc", "desc"):
        raise ValidationError("Sort order must be 'asc' or 'desc'")
    return field, order == "desc"


def _column_values(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Flatten the nested salary object onto the salary_* columns."""
    values = dict(payload)
    salary = values.pop("salary", None)
    if salary is not None:
        values["salary_min"] = salary["min"]
        values["salary_max"] = salary["max"]
        values["salary_currency"] = salary.get("currency") or "USD"
    return values


def list_jobs(
    db: Session,
    filters: JobFilters,
    page: int,
    limit: int,
    sort_by: Optional[str] = None
) -> Tuple[List[Job], int]:
    """Active jobs only, newest first unless sort_by says otherwise."""
    return job_crud.get_active(db, filters, page, limit, sort=parse_sort(sort_by))


def get_job(db: Session, job_id: int, viewer: Optional[User] = None) -> Job:
    """
    Fetch a job and count the view unless the viewer posted it.

    Raises:
        NotFoundError: If the job does not exist
    """
    job = job_crud.get_by_id(db, job_id)
    if not job:
        raise NotFoundError("Job not found")

    if viewer is None or not owns_job(viewer, job):
        try:
            job_crud.increment_views(db, job.id)
            db.commit()
            db.refresh(job)
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to record view for job {job_id}: {e}")
            raise ServerError("Server error while fetching job details")

    return job


def create_job(db: Session, payload: JobCreateRequest, acting_user: User) -> Job:
    """
    Create a posting owned by the acting user.

    The acting user's stored company name is used when present; otherwise
    the payload must name the company.

    Raises:
        ValidationError: No company name available
    """
    values = _column_values(payload.model_dump())

    if acting_user.company_name:
        values["company"] = acting_user.company_name
    elif not (values.get("company") or "").strip():
        raise ValidationError("Company name is required", errors=[
            {"field": "company", "message": "Company name is required"}
        ])

    try:
        job = job_crud.create(db, values, posted_by_id=acting_user.id)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error creating job: {e}")
        raise ServerError("Server error while creating job")

    logger.info(f"Created job {job.id}: {job.title} (posted by user {acting_user.id})")
    return job


def update_job(db: Session, job_id: int, payload: JobUpdateRequest, acting_user: User) -> Job:
    """
    Apply a partial update to a job.

    Raises:
        NotFoundError: Job does not exist
        ForbiddenError: Acting user is neither the owner nor an admin
    """
    job = job_crud.get_by_id(db, job_id)
    if not job:
        raise NotFoundError("Job not found")

    ensure_can_manage_job(acting_user, job, "update")

    # Explicit nulls leave a field unchanged
    changes = {
        field: value
        for field, value in _column_values(payload.model_dump(exclude_unset=True)).items()
        if value is not None
    }

    salary_min = changes.get("salary_min", job.salary_min)
    salary_max = changes.get("salary_max", job.salary_max)
    if salary_max < salary_min:
        raise ValidationError("Maximum salary cannot be lower than minimum salary")

    for field, value in changes.items():
        setattr(job, field, value)

    try:
        db.commit()
        db.refresh(job)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error updating job {job_id}: {e}")
        raise ServerError("Server error while updating job")

    logger.info(f"Job {job_id} updated by user {acting_user.id}: {sorted(changes)}")
    return job


def delete_job(db: Session, job_id: int, acting_user: User) -> None:
    """
    Delete a job together with its applications and favorite links.

    Raises:
        NotFoundError: Job does not exist
        ForbiddenError: Acting user is neither the owner nor an admin
    """
    job = job_crud.get_by_id(db, job_id)
    if not job:
        raise NotFoundError("Job not found")

    ensure_can_manage_job(acting_user, job, "delete")

    application_count = application_crud.count(db, job_ids=[job.id])

    try:
        db.delete(job)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error deleting job {job_id}: {e}")
        raise ServerError("Server error while deleting job")

    logger.info(f"Job {job_id} and {application_count} applications deleted by user {acting_user.id}")


def search_jobs(
    db: Session,
    query: Optional[str],
    page: int,
    limit: int,
    location: Optional[str] = None
) -> Tuple[List[Job], int]:
    """
    Rank active jobs by relevance to the query terms.

    Raises:
        ValidationError: Empty query
    """
    terms = (query or "").split()
    if not terms:
        raise ValidationError("Search query is required")
    return job_crud.search(db, terms, page, limit, location=location)


def my_jobs(db: Session, acting_user: User, page: int, limit: int) -> Tuple[List[Job], int]:
    return job_crud.get_by_owner(db, acting_user.id, page, limit)


def job_stats(db: Session) -> Dict[str, Any]:
    """Totals over active jobs plus top categories and locations."""
    categories = job_crud.count_by(db, Job.category, limit=TOP_GROUPS)
    locations = job_crud.count_by(db, Job.location, limit=TOP_GROUPS)

    return {
        "stats": job_crud.active_totals(db),
        "category_stats": [
            {"category": category.value, "count": total} for category, total in categories
        ],
        "location_stats": [
            {"location": location, "count": total} for location, total in locations
        ],
    }
