import enum
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, Enum, Float, JSON, ForeignKey, func
from sqlalchemy.orm import relationship
from app.core.database import Base
from app.models.user import user_favorites


class JobStatus(str, enum.Enum):
    """
    Posting visibility.

    - ACTIVE: listed publicly and open for applications
    - CLOSED: no longer accepting applications
    - DRAFT: not yet published
    """
    ACTIVE = "active"
    CLOSED = "closed"
    DRAFT = "draft"


class JobType(str, enum.Enum):
    FULL_TIME = "full-time"
    PART_TIME = "part-time"
    CONTRACT = "contract"
    INTERNSHIP = "internship"
    REMOTE = "remote"


class JobCategory(str, enum.Enum):
    TECHNOLOGY = "Technology"
    FINANCE = "Finance"
    HEALTHCARE = "Healthcare"
    EDUCATION = "Education"
    MARKETING = "Marketing"
    SALES = "Sales"
    HUMAN_RESOURCES = "Human Resources"
    OPERATIONS = "Operations"
    CUSTOMER_SERVICE = "Customer Service"
    LEGAL = "Legal"
    OTHER = "Other"


class ExperienceLevel(str, enum.Enum):
    ENTRY = "entry-level"
    MID = "mid-level"
    SENIOR = "senior-level"
    EXECUTIVE = "executive"


class Job(Base):
    """
    A job posting owned by one employer (or admin).

    applications_count is denormalized and maintained by the application
    service in the same transaction as the application insert/delete.
    """
    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(100), nullable=False, index=True)
    description = Column(Text, nullable=False)
    requirements = Column(Text, nullable=False)
    company = Column(String, nullable=False, index=True)
    location = Column(String, nullable=False, index=True)

    job_type = Column(Enum(JobType), nullable=False, index=True)
    category = Column(Enum(JobCategory), nullable=False, index=True)
    experience_level = Column(Enum(ExperienceLevel), nullable=False, index=True)

    salary_min = Column(Float, nullable=False)
    salary_max = Column(Float, nullable=False)
    salary_currency = Column(String(3), nullable=False, default="USD")

    skills = Column(JSON, nullable=False, default=list)
    benefits = Column(JSON, nullable=False, default=list)
    tags = Column(JSON, nullable=False, default=list)

    application_deadline = Column(DateTime(timezone=True), nullable=False)
    is_remote = Column(Boolean, default=False, nullable=False)

    # Nulled (not cascaded) when the owner deletes their own account
    posted_by_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    status = Column(Enum(JobStatus), default=JobStatus.ACTIVE, nullable=False, index=True)
    applications_count = Column(Integer, default=0, nullable=False)
    views = Column(Integer, default=0, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    posted_by = relationship("User", foreign_keys=[posted_by_id])
    applications = relationship("Application", back_populates="job", cascade="all, delete-orphan")
    favorited_by = relationship("User", secondary=user_favorites, back_populates="favorites")

    @property
    def salary(self) -> dict:
        return {"min": self.salary_min, "max": self.salary_max, "currency": self.salary_currency}

    def __repr__(self):
        return f"<Job(id={self.id}, title='{self.title}', status={self.status.value if self.status else None})>"
