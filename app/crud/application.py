"""
CRUD operations for the Application model.
"""

from datetime import datetime
from typing import Dict, List, Optional, Tuple
from sqlalchemy import func
from sqlalchemy.orm import Session
from app.crud.base import paginate
from app.models.application import Application, ApplicationStatus


def get_by_id(db: Session, application_id: int) -> Optional[Application]:
    return db.query(Application).filter(Application.id == application_id).first()


def get_for_job_and_applicant(db: Session, job_id: int, applicant_id: int) -> Optional[Application]:
    return db.query(Application).filter(
        Application.job_id == job_id,
        Application.applicant_id == applicant_id
    ).first()


def get_multi(
    db: Session,
    page: int,
    limit: int,
    job_id: Optional[int] = None,
    applicant_id: Optional[int] = None,
    status: Optional[ApplicationStatus] = None
) -> Tuple[List[Application], int]:
    """
    List applications, most recently applied first.

    Args:
        job_id: Restrict to one job
        applicant_id: Restrict to one applicant
        status: Restrict to one pipeline status
    """
    query = db.query(Application)

    if job_id is not None:
        query = query.filter(Application.job_id == job_id)
    if applicant_id is not None:
        query = query.filter(Application.applicant_id == applicant_id)
    if status:
        query = query.filter(Application.status == status)

    query = query.order_by(Application.applied_at.desc(), Application.id.desc())
    return paginate(query, page, limit)


def count(
    db: Session,
    applicant_id: Optional[int] = None,
    job_ids: Optional[List[int]] = None,
    since: Optional[datetime] = None
) -> int:
    query = db.query(Application)
    if applicant_id is not None:
        query = query.filter(Application.applicant_id == applicant_id)
    if job_ids is not None:
        if not job_ids:
            return 0
        query = query.filter(Application.job_id.in_(job_ids))
    if since:
        query = query.filter(Application.applied_at >= since)
    return query.count()


def count_by_job_for_applicant(db: Session, applicant_id: int) -> Dict[int, int]:
    """Number of applications per job submitted by one applicant."""
    rows = db.query(Application.job_id, func.count(Application.id)).filter(
        Application.applicant_id == applicant_id
    ).group_by(Application.job_id).all()
    return {job_id: total for job_id, total in rows}


def count_by_status(db: Session) -> List[Tuple[ApplicationStatus, int]]:
    rows = db.query(Application.status, func.count(Application.id)).group_by(Application.status).all()
    return [(status, total) for status, total in rows]


def delete_by_applicant(db: Session, applicant_id: int) -> int:
    """Bulk-delete an applicant's applications. Does not commit."""
    return db.query(Application).filter(
        Application.applicant_id == applicant_id
    ).delete(synchronize_session=False)
