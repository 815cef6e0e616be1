"""
Application workflow endpoints.

Job seekers apply, list and withdraw their own applications; the job owner
(or an admin) reviews them, moves them through the pipeline and schedules
interviews.
"""

import logging
from typing import Optional
from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import PageParams, get_current_user, get_employer_user, get_jobseeker_user
from app.models.application import ApplicationStatus
from app.models.user import User
from app.schemas.application import (
    ApplicationEnvelope,
    ApplicationListResponse,
    ApplicationStatusUpdate,
    InterviewScheduleRequest,
)
from app.schemas.common import MessageResponse, page_meta
from app.services import applications as application_service

router = APIRouter(prefix="/applications", tags=["Applications"])
logger = logging.getLogger(__name__)


@router.post("/{job_id}/apply", status_code=status.HTTP_201_CREATED, response_model=ApplicationEnvelope)
def apply_for_job(
    job_id: int,
    cover_letter: Optional[str] = Form(None, alias="coverLetter", max_length=1000),
    resume: Optional[UploadFile] = File(None),
    current_user: User = Depends(get_jobseeker_user),
    db: Session = Depends(get_db)
):
    """
    Apply for a job (multipart form).

    Fields:
    - coverLetter: optional, up to 1000 characters
    - resume: PDF/DOC/DOCX; falls back to the resume stored on the profile
    """
    application = application_service.apply(
        db,
        job_id,
        current_user,
        cover_letter=cover_letter,
        resume=resume,
    )
    return {"message": "Application submitted successfully", "application": application}


@router.get("/my-applications", response_model=ApplicationListResponse)
def my_applications(
    application_status: Optional[ApplicationStatus] = Query(None, alias="status"),
    pagination: PageParams = Depends(),
    current_user: User = Depends(get_jobseeker_user),
    db: Session = Depends(get_db)
):
    applications, total = application_service.my_applications(
        db, current_user, pagination.page, pagination.limit, status=application_status
    )
    return {"applications": applications, **page_meta(len(applications), total, pagination.page, pagination.limit)}


@router.delete("/{application_id}/withdraw", response_model=MessageResponse)
def withdraw_application(
    application_id: int,
    current_user: User = Depends(get_jobseeker_user),
    db: Session = Depends(get_db)
):
    application_service.withdraw(db, application_id, current_user)
    return {"message": "Application withdrawn successfully"}


@router.get("/job/{job_id}", response_model=ApplicationListResponse)
def job_applications(
    job_id: int,
    application_status: Optional[ApplicationStatus] = Query(None, alias="status"),
    pagination: PageParams = Depends(),
    current_user: User = Depends(get_employer_user),
    db: Session = Depends(get_db)
):
    """Applications received by one job, for its owner or an admin."""
    applications, total = application_service.job_applications(
        db, job_id, current_user, pagination.page, pagination.limit, status=application_status
    )
    return {"applications": applications, **page_meta(len(applications), total, pagination.page, pagination.limit)}


@router.put("/{application_id}/status", response_model=ApplicationEnvelope)
def update_application_status(
    application_id: int,
    request: ApplicationStatusUpdate,
    current_user: User = Depends(get_employer_user),
    db: Session = Depends(get_db)
):
    application = application_service.update_status(db, application_id, current_user, request)
    return {"message": "Application status updated successfully", "application": application}


@router.put("/{application_id}/interview", response_model=ApplicationEnvelope)
def schedule_interview(
    application_id: int,
    request: InterviewScheduleRequest,
    current_user: User = Depends(get_employer_user),
    db: Session = Depends(get_db)
):
    application = application_service.schedule_interview(db, application_id, current_user, request)
    return {"message": "Interview scheduled successfully", "application": application}


@router.get("/{application_id}", response_model=ApplicationEnvelope)
def get_application(
    application_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Visible to the applicant, the job owner and admins."""
    return {"application": application_service.get_application(db, application_id, current_user)}
