"""
Application workflow.

Applying and withdrawing keep Job.applications_count in step with the
application rows: the insert/delete and the SQL-side counter update are
committed together.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from fastapi import UploadFile
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import (
    ConflictError,
    InvalidStateError,
    NotFoundError,
    ServerError,
    ValidationError,
)
from app.core.permissions import (
    ensure_can_manage_application,
    ensure_can_manage_job,
    ensure_can_view_application,
    ensure_is_applicant,
    owns_job,
)
from app.core.storage import RESUME, storage, store_upload
from app.crud import application as application_crud
from app.crud import job as job_crud
from app.models.application import Application, ApplicationStatus
from app.models.job import Job, JobStatus
from app.models.user import User
from app.schemas.application import ApplicationStatusUpdate, InterviewScheduleRequest

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored in UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _get_application(db: Session, application_id: int) -> Application:
    application = application_crud.get_by_id(db, application_id)
    if not application:
        raise NotFoundError("Application not found")
    return application


def _ensure_accepting_applications(job: Job) -> None:
    if job.status != JobStatus.ACTIVE:
        raise InvalidStateError("Job is not currently active")
    if datetime.now(timezone.utc) > _as_utc(job.application_deadline):
        raise InvalidStateError("Application deadline has passed")


def apply(
    db: Session,
    job_id: int,
    applicant: User,
    cover_letter: Optional[str] = None,
    resume: Optional[UploadFile] = None
) -> Application:
    """
    Submit an application for a job.

    The uploaded resume is stored only once every check has passed, and is
    removed again if the insert fails. Without an upload the applicant's
    profile resume is used.

    Raises:
        NotFoundError: Job does not exist
        InvalidStateError: Job is not active or its deadline has passed
        ConflictError: Already applied, or applying to one's own posting
        ValidationError: No resume available
    """
    job = job_crud.get_by_id(db, job_id)
    if not job:
        raise NotFoundError("Job not found")

    _ensure_accepting_applications(job)

    if application_crud.get_for_job_and_applicant(db, job_id, applicant.id):
        raise ConflictError("You have already applied for this job")

    if owns_job(applicant, job):
        raise ConflictError("You cannot apply for your own job")

    has_upload = resume is not None and bool(resume.filename)
    if not has_upload and not applicant.resume_path:
        raise ValidationError("Resume is required to apply for a job", errors=[
            {"field": "resume", "message": "Upload a resume or add one to your profile"}
        ])

    resume_path = store_upload(resume, RESUME) if has_upload else applicant.resume_path

    application = Application(
        job_id=job.id,
        applicant_id=applicant.id,
        cover_letter=cover_letter,
        resume_path=resume_path,
        status=ApplicationStatus.PENDING,
    )

    try:
        db.add(application)
        db.flush()
        job_crud.adjust_applications_count(db, job.id, +1)
        db.commit()
        db.refresh(application)
    except SQLAlchemyError as e:
        db.rollback()
        if has_upload:
            storage.delete_file(resume_path)
        if isinstance(e, IntegrityError):
            raise ConflictError("You have already applied for this job")
        logger.error(f"Failed to create application for job {job_id}: {e}")
        raise ServerError("Server error while applying for job")

    logger.info(f"User {applicant.id} applied for job {job_id} (application {application.id})")
    return application


def my_applications(
    db: Session,
    acting_user: User,
    page: int,
    limit: int,
    status: Optional[ApplicationStatus] = None
) -> Tuple[List[Application], int]:
    return application_crud.get_multi(db, page, limit, applicant_id=acting_user.id, status=status)


def job_applications(
    db: Session,
    job_id: int,
    acting_user: User,
    page: int,
    limit: int,
    status: Optional[ApplicationStatus] = None
) -> Tuple[List[Application], int]:
    """
    Applications received by a job, for its owner or an admin.

    Raises:
        NotFoundError: Job does not exist
        ForbiddenError: Acting user may not review this job
    """
    job = job_crud.get_by_id(db, job_id)
    if not job:
        raise NotFoundError("Job not found")

    ensure_can_manage_job(acting_user, job, "review applications for")

    return application_crud.get_multi(db, page, limit, job_id=job_id, status=status)


def update_status(
    db: Session,
    application_id: int,
    acting_user: User,
    update: ApplicationStatusUpdate
) -> Application:
    """
    Move an application to a new status and record who reviewed it.

    Re-submitting the current status only updates notes and rating.

    Raises:
        NotFoundError: Application does not exist
        ForbiddenError: Acting user neither owns the job nor is an admin
        InvalidStateError: Application already hired or rejected
    """
    application = _get_application(db, application_id)
    ensure_can_manage_application(acting_user, application)

    current = application.status
    if current.is_terminal and update.status != current:
        raise InvalidStateError(f"Application is already {current.value} and cannot be changed")

    application.status = update.status
    application.reviewed_at = datetime.now(timezone.utc)
    application.reviewed_by_id = acting_user.id
    if update.notes is not None:
        application.notes = update.notes
    if update.rating is not None:
        application.rating = update.rating

    try:
        db.commit()
        db.refresh(application)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to update application {application_id}: {e}")
        raise ServerError("Server error while updating application")

    logger.info(
        f"Application {application_id} moved {current.value} -> {update.status.value} by user {acting_user.id}"
    )
    return application


def schedule_interview(
    db: Session,
    application_id: int,
    acting_user: User,
    request: InterviewScheduleRequest
) -> Application:
    """
    Attach interview details to an application.

    Raises:
        NotFoundError: Application does not exist
        ForbiddenError: Acting user neither owns the job nor is an admin
        InvalidStateError: Application already hired or rejected
    """
    application = _get_application(db, application_id)
    ensure_can_manage_application(acting_user, application, "schedule an interview for")

    if application.status.is_terminal:
        raise InvalidStateError(f"Cannot schedule an interview for a {application.status.value} application")

    application.interview_scheduled = True
    application.interview_date = request.date
    application.interview_time = request.time
    application.interview_location = request.location
    application.interview_type = request.type
    application.interview_notes = request.notes

    try:
        db.commit()
        db.refresh(application)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to schedule interview for application {application_id}: {e}")
        raise ServerError("Server error while scheduling interview")

    logger.info(f"Interview scheduled for application {application_id} by user {acting_user.id}")
    return application


def withdraw(db: Session, application_id: int, acting_user: User) -> None:
    """
    Withdraw (delete) an application and decrement the job's counter.

    Raises:
        NotFoundError: Application does not exist
        ForbiddenError: Acting user is not the applicant
        InvalidStateError: Application already hired or rejected
    """
    application = _get_application(db, application_id)
    ensure_is_applicant(acting_user, application)

    if application.status.is_terminal:
        raise InvalidStateError("Cannot withdraw application with current status")

    job_id = application.job_id
    try:
        db.delete(application)
        db.flush()
        job_crud.adjust_applications_count(db, job_id, -1)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to withdraw application {application_id}: {e}")
        raise ServerError("Server error while withdrawing application")

    logger.info(f"Application {application_id} withdrawn by user {acting_user.id}")


def get_application(db: Session, application_id: int, acting_user: User) -> Application:
    """
    Raises:
        NotFoundError: Application does not exist
        ForbiddenError: Acting user is not the applicant, the job owner or an admin
    """
    application = _get_application(db, application_id)
    ensure_can_view_application(acting_user, application)
    return application
