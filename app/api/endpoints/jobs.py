import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import PageParams, get_employer_user, get_optional_user
from app.crud.job import JobFilters
from app.models.job import ExperienceLevel, JobCategory, JobType
from app.models.user import User
from app.schemas.common import MessageResponse, page_meta
from app.schemas.job import (
    JobCreateRequest,
    JobEnvelope,
    JobListResponse,
    JobStatsResponse,
    JobUpdateRequest,
)
from app.services import jobs as job_service

router = APIRouter(prefix="/jobs", tags=["Jobs"])
logger = logging.getLogger(__name__)


@router.get("", response_model=JobListResponse)
def list_jobs(
    pagination: PageParams = Depends(),
    location: Optional[str] = None,
    job_type: Optional[JobType] = Query(None, alias="jobType"),
    category: Optional[JobCategory] = None,
    experience_level: Optional[ExperienceLevel] = Query(None, alias="experienceLevel"),
    min_salary: Optional[float] = Query(None, alias="minSalary", ge=0),
    max_salary: Optional[float] = Query(None, alias="maxSalary", ge=0),
    is_remote: Optional[bool] = Query(None, alias="isRemote"),
    sort_by: Optional[str] = Query(None, alias="sortBy", description="field:asc|desc"),
    db: Session = Depends(get_db)
):
    """
    List active jobs.

    Closed and draft postings are never returned here.
    """
    filters = JobFilters(
        location=location,
        job_type=job_type,
        category=category,
        experience_level=experience_level,
        min_salary=min_salary,
        max_salary=max_salary,
        is_remote=is_remote,
    )
    jobs, total = job_service.list_jobs(db, filters, pagination.page, pagination.limit, sort_by=sort_by)
    return {"jobs": jobs, **page_meta(len(jobs), total, pagination.page, pagination.limit)}


@router.get("/search", response_model=JobListResponse)
def search_jobs(
    q: Optional[str] = None,
    location: Optional[str] = None,
    pagination: PageParams = Depends(),
    db: Session = Depends(get_db)
):
    """Relevance-ranked search over active jobs."""
    jobs, total = job_service.search_jobs(db, q, pagination.page, pagination.limit, location=location)
    return {"jobs": jobs, **page_meta(len(jobs), total, pagination.page, pagination.limit)}


@router.get("/stats", response_model=JobStatsResponse)
def job_stats(db: Session = Depends(get_db)):
    return job_service.job_stats(db)


@router.get("/employer/my-jobs", response_model=JobListResponse)
def my_jobs(
    pagination: PageParams = Depends(),
    current_user: User = Depends(get_employer_user),
    db: Session = Depends(get_db)
):
    """Jobs posted by the current user, any status."""
    jobs, total = job_service.my_jobs(db, current_user, pagination.page, pagination.limit)
    return {"jobs": jobs, **page_meta(len(jobs), total, pagination.page, pagination.limit)}


@router.get("/{job_id}", response_model=JobEnvelope)
def get_job(
    job_id: int,
    viewer: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db)
):
    """
    Retrieve a job by ID.

    Each call counts as a view unless the signed-in viewer posted the job.
    """
    return {"job": job_service.get_job(db, job_id, viewer=viewer)}


@router.post("", status_code=status.HTTP_201_CREATED, response_model=JobEnvelope)
def create_job(
    request: JobCreateRequest,
    current_user: User = Depends(get_employer_user),
    db: Session = Depends(get_db)
):
    job = job_service.create_job(db, request, current_user)
    return {"message": "Job created successfully", "job": job}


@router.put("/{job_id}", response_model=JobEnvelope)
def update_job(
    job_id: int,
    request: JobUpdateRequest,
    current_user: User = Depends(get_employer_user),
    db: Session = Depends(get_db)
):
    job = job_service.update_job(db, job_id, request, current_user)
    return {"message": "Job updated successfully", "job": job}


@router.delete("/{job_id}", response_model=MessageResponse)
def delete_job(
    job_id: int,
    current_user: User = Depends(get_employer_user),
    db: Session = Depends(get_db)
):
    """Delete a job with its applications and favorite links."""
    job_service.delete_job(db, job_id, current_user)
    return {"message": "Job deleted successfully"}
