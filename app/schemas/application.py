"""
Pydantic schemas for job applications.
"""

from pydantic import Field
from typing import List, Optional
from datetime import datetime

from app.models.application import ApplicationStatus, InterviewType
from app.models.job import JobStatus
from app.schemas.common import CamelModel, MessageResponse, PaginatedResponse
from app.schemas.user import UserSummary


class ApplicationStatusUpdate(CamelModel):
    """Request schema for moving an application through the pipeline."""
    status: ApplicationStatus
    notes: Optional[str] = Field(None, max_length=500)
    rating: Optional[int] = Field(None, ge=1, le=5)


class InterviewScheduleRequest(CamelModel):
    date: datetime
    time: Optional[str] = None
    location: Optional[str] = None
    type: Optional[InterviewType] = None
    notes: Optional[str] = None


class JobSummary(CamelModel):
    id: int
    title: str
    company: str
    location: str
    status: JobStatus
    application_deadline: Optional[datetime] = None
    posted_by_id: Optional[int] = None


class InterviewSchema(CamelModel):
    scheduled: bool = False
    date: Optional[datetime] = None
    time: Optional[str] = None
    location: Optional[str] = None
    type: Optional[InterviewType] = None
    notes: Optional[str] = None


class ApplicationResponse(CamelModel):
    id: int
    job_id: int
    job: Optional[JobSummary] = None
    applicant_id: Optional[int] = None
    applicant: Optional[UserSummary] = None
    cover_letter: Optional[str] = None
    resume_path: str
    status: ApplicationStatus
    applied_at: datetime
    reviewed_at: Optional[datetime] = None
    reviewed_by: Optional[UserSummary] = None
    notes: Optional[str] = None
    rating: Optional[int] = None
    interview: InterviewSchema
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ApplicationEnvelope(MessageResponse):
    application: ApplicationResponse


class ApplicationListResponse(PaginatedResponse):
    applications: List[ApplicationResponse]
