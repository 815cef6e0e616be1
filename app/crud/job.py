"""
CRUD operations for Job model.

Implements the Repository pattern to encapsulate all database operations
for jobs, providing a clean interface for the service layer.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple
from sqlalchemy import String, case, cast, func, or_, update
from sqlalchemy.orm import Session
from app.crud.base import paginate
from app.models.job import Job, JobStatus, JobType, JobCategory, ExperienceLevel


# sortBy field names accepted by the public listing
SORTABLE_FIELDS = {
    "createdAt": Job.created_at,
    "title": Job.title,
    "views": Job.views,
    "applicationsCount": Job.applications_count,
    "applicationDeadline": Job.application_deadline,
    "salary.min": Job.salary_min,
    "salary.max": Job.salary_max,
}


@dataclass
class JobFilters:
    """Optional filters for the public job listing."""
    location: Optional[str] = None
    job_type: Optional[JobType] = None
    category: Optional[JobCategory] = None
    experience_level: Optional[ExperienceLevel] = None
    min_salary: Optional[float] = None
    max_salary: Optional[float] = None
    is_remote: Optional[bool] = None


def create(db: Session, values: Dict[str, Any], posted_by_id: int) -> Job:
    """
    Create a new job in the database.

    Args:
        db: Database session
        values: Column values (salary already flattened)
        posted_by_id: Owner of the posting

    Returns:
        Created Job instance with id
    """
    db_job = Job(posted_by_id=posted_by_id, **values)

    db.add(db_job)
    db.commit()
    db.refresh(db_job)

    return db_job


def get_by_id(db: Session, job_id: int) -> Optional[Job]:
    """
    Retrieve a job by its ID.

    Returns:
        Job instance if found, None otherwise
    """
    return db.query(Job).filter(Job.id == job_id).first()


def get_active(
    db: Session,
    filters: JobFilters,
    page: int,
    limit: int,
    sort: Optional[Tuple[str, bool]] = None
) -> Tuple[List[Job], int]:
    """
    Retrieve active jobs matching the filters, paginated.

    Args:
        filters: Optional listing filters
        sort: (field name from SORTABLE_FIELDS, descending) or None for newest first

    Returns:
        Tuple of (jobs on the page, total matching jobs)
    """
    query = db.query(Job).filter(Job.status == JobStatus.ACTIVE)

    if filters.location:
        query = query.filter(Job.location.icontains(filters.location, autoescape=True))
    if filters.job_type:
        query = query.filter(Job.job_type == filters.job_type)
    if filters.category:
        query = query.filter(Job.category == filters.category)
    if filters.experience_level:
        query = query.filter(Job.experience_level == filters.experience_level)
    if filters.min_salary is not None:
        query = query.filter(Job.salary_min >= filters.min_salary)
    if filters.max_salary is not None:
        query = query.filter(Job.salary_max <= filters.max_salary)
    if filters.is_remote:
        query = query.filter(Job.is_remote.is_(True))

    if sort:
        field, descending = sort
        column = SORTABLE_FIELDS[field]
        query = query.order_by(column.desc() if descending else column.asc(), Job.id.desc())
    else:
        query = query.order_by(Job.created_at.desc(), Job.id.desc())

    return paginate(query, page, limit)


def relevance_expression(terms: List[str]):
    """
    Weighted term-match score.

    Each term scores 3 for a title hit, 2 for company, skills or tags, and 1
    for description or requirements. Jobs scoring 0 do not match.
    """
    score = None
    weighted_columns = [
        (Job.title, 3),
        (Job.company, 2),
        (cast(Job.skills, String), 2),
        (cast(Job.tags, String), 2),
        (Job.description, 1),
        (Job.requirements, 1),
    ]
    for term in terms:
        for column, weight in weighted_columns:
            hit = case((column.icontains(term, autoescape=True), weight), else_=0)
            score = hit if score is None else score + hit
    return score


def search(
    db: Session,
    terms: List[str],
    page: int,
    limit: int,
    location: Optional[str] = None
) -> Tuple[List[Job], int]:
    """
    Full-text style search over active jobs, most relevant first.
    """
    score = relevance_expression(terms)
    query = db.query(Job).filter(Job.status == JobStatus.ACTIVE, score > 0)

    if location:
        query = query.filter(Job.location.icontains(location, autoescape=True))

    query = query.order_by(score.desc(), Job.created_at.desc(), Job.id.desc())
    return paginate(query, page, limit)


def get_by_owner(db: Session, owner_id: int, page: int, limit: int) -> Tuple[List[Job], int]:
    query = db.query(Job).filter(Job.posted_by_id == owner_id).order_by(Job.created_at.desc(), Job.id.desc())
    return paginate(query, page, limit)


def get_all(
    db: Session,
    page: int,
    limit: int,
    status: Optional[JobStatus] = None,
    search: Optional[str] = None
) -> Tuple[List[Job], int]:
    """
    Admin listing across all owners and statuses.
    """
    query = db.query(Job)

    if status:
        query = query.filter(Job.status == status)
    if search:
        query = query.filter(or_(
            Job.title.icontains(search, autoescape=True),
            Job.company.icontains(search, autoescape=True),
        ))

    return paginate(query.order_by(Job.created_at.desc(), Job.id.desc()), page, limit)


def ids_by_owner(db: Session, owner_id: int) -> List[int]:
    return [row.id for row in db.query(Job.id).filter(Job.posted_by_id == owner_id).all()]


def increment_views(db: Session, job_id: int) -> None:
    """Atomic views += 1."""
    db.execute(
        update(Job).where(Job.id == job_id).values(views=Job.views + 1)
    )


def adjust_applications_count(db: Session, job_id: int, delta: int) -> None:
    """
    Shift applications_count by delta in SQL, never going below zero.

    Does not commit; runs inside the caller's transaction.
    """
    new_value = Job.applications_count + delta
    db.execute(
        update(Job)
        .where(Job.id == job_id)
        .values(applications_count=case((new_value < 0, 0), else_=new_value))
        .execution_options(synchronize_session="fetch")
    )


def count(db: Session, status: Optional[JobStatus] = None, since: Optional[datetime] = None) -> int:
    query = db.query(Job)
    if status:
        query = query.filter(Job.status == status)
    if since:
        query = query.filter(Job.created_at >= since)
    return query.count()


def active_totals(db: Session) -> Dict[str, Any]:
    """
    Count, average salary bounds and total views over active jobs.
    """
    row = db.query(
        func.count(Job.id),
        func.avg(Job.salary_min),
        func.avg(Job.salary_max),
        func.sum(Job.views),
    ).filter(Job.status == JobStatus.ACTIVE).one()

    total_jobs, avg_min, avg_max, total_views = row
    return {
        "total_jobs": total_jobs or 0,
        "avg_salary_min": float(avg_min or 0),
        "avg_salary_max": float(avg_max or 0),
        "total_views": int(total_views or 0),
    }


def count_by(db: Session, column, active_only: bool = True, limit: Optional[int] = None) -> List[Tuple[Any, int]]:
    """
    Group jobs by a column, largest groups first.

    Returns:
        List of (group value, job count)
    """
    job_count = func.count(Job.id).label("count")
    query = db.query(column, job_count)
    if active_only:
        query = query.filter(Job.status == JobStatus.ACTIVE)
    query = query.group_by(column).order_by(job_count.desc(), column.asc())
    if limit:
        query = query.limit(limit)
    return [(value, total) for value, total in query.all()]
