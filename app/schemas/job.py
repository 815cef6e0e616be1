from pydantic import Field, field_validator, model_validator
from typing import List, Optional
from datetime import datetime, timezone

from app.models.job import JobStatus, JobType, JobCategory, ExperienceLevel
from app.schemas.common import CamelModel, MessageResponse, PaginatedResponse
from app.schemas.user import UserSummary


def _to_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Store deadlines in UTC; naive input is taken as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class SalarySchema(CamelModel):
    """Salary range of a posting"""
    min: float = Field(..., ge=0)
    max: float = Field(..., ge=0)
    currency: str = Field("USD", min_length=3, max_length=3)

    @model_validator(mode="after")
    def check_range(self):
        if self.max < self.min:
            raise ValueError("Maximum salary cannot be lower than minimum salary")
        return self


class JobCreateRequest(CamelModel):
    """Schema for creating a new job"""
    title: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=2000)
    requirements: str = Field(..., min_length=1)
    company: Optional[str] = None
    location: str = Field(..., min_length=1)
    job_type: JobType
    category: JobCategory
    experience_level: ExperienceLevel
    salary: SalarySchema
    skills: List[str] = []
    benefits: List[str] = []
    tags: List[str] = []
    application_deadline: datetime
    is_remote: bool = False
    status: JobStatus = JobStatus.ACTIVE

    @field_validator("application_deadline")
    @classmethod
    def deadline_utc(cls, v: datetime) -> datetime:
        return _to_utc(v)


class JobUpdateRequest(CamelModel):
    """Partial update; omitted fields are left unchanged"""
    title: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, min_length=1, max_length=2000)
    requirements: Optional[str] = Field(None, min_length=1)
    company: Optional[str] = Field(None, min_length=1)
    location: Optional[str] = Field(None, min_length=1)
    job_type: Optional[JobType] = None
    category: Optional[JobCategory] = None
    experience_level: Optional[ExperienceLevel] = None
    salary: Optional[SalarySchema] = None
    skills: Optional[List[str]] = None
    benefits: Optional[List[str]] = None
    tags: Optional[List[str]] = None
    application_deadline: Optional[datetime] = None
    is_remote: Optional[bool] = None
    status: Optional[JobStatus] = None

    @field_validator("application_deadline")
    @classmethod
    def deadline_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return _to_utc(v)


class JobResponse(CamelModel):
    """Schema for job response"""
    id: int
    title: str
    description: str
    requirements: str
    company: str
    location: str
    job_type: JobType
    category: JobCategory
    experience_level: ExperienceLevel
    salary: SalarySchema
    skills: List[str] = []
    benefits: List[str] = []
    tags: List[str] = []
    application_deadline: datetime
    is_remote: bool
    status: JobStatus
    applications_count: int
    views: int
    posted_by_id: Optional[int] = None
    posted_by: Optional[UserSummary] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class JobEnvelope(MessageResponse):
    job: JobResponse


class JobListResponse(PaginatedResponse):
    jobs: List[JobResponse]


class JobTotals(CamelModel):
    total_jobs: int = 0
    avg_salary_min: float = 0
    avg_salary_max: float = 0
    total_views: int = 0


class CategoryCount(CamelModel):
    category: str
    count: int


class LocationCount(CamelModel):
    location: str
    count: int


class JobStatsResponse(MessageResponse):
    stats: JobTotals
    category_stats: List[CategoryCount]
    location_stats: List[LocationCount]


class FavoriteListResponse(MessageResponse):
    favorites: List[JobResponse]
