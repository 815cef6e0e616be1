"""
Application database model.

Links one applicant (User) to one Job and tracks the hiring pipeline:

    pending -> reviewed -> shortlisted -> interviewed -> hired | rejected

hired and rejected are terminal.
"""

import enum
from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, Enum, ForeignKey, UniqueConstraint, func
from sqlalchemy.orm import relationship
from app.core.database import Base


class ApplicationStatus(str, enum.Enum):
    PENDING = "pending"
    REVIEWED = "reviewed"
    SHORTLISTED = "shortlisted"
    INTERVIEWED = "interviewed"
    HIRED = "hired"
    REJECTED = "rejected"

    @property
    def is_terminal(self) -> bool:
        return self in (ApplicationStatus.HIRED, ApplicationStatus.REJECTED)


class InterviewType(str, enum.Enum):
    IN_PERSON = "in-person"
    PHONE = "phone"
    VIDEO = "video"


def _utcnow():
    return datetime.now(timezone.utc)


class Application(Base):
    """A job seeker's application to a job posting."""
    __tablename__ = "applications"
    __table_args__ = (
        UniqueConstraint("job_id", "applicant_id", name="uq_application_job_applicant"),
    )

    id = Column(Integer, primary_key=True, index=True)
    job_id = Column(Integer, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    applicant_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    cover_letter = Column(String(1000), nullable=True)
    resume_path = Column(String, nullable=False)

    status = Column(
        Enum(ApplicationStatus),
        default=ApplicationStatus.PENDING,
        nullable=False,
        index=True
    )
    applied_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False, index=True)

    # Review metadata
    reviewed_at = Column(DateTime(timezone=True), nullable=True)
    reviewed_by_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    notes = Column(String(500), nullable=True)
    rating = Column(Integer, nullable=True)

    # Interview
    interview_scheduled = Column(Boolean, default=False, nullable=False)
    interview_date = Column(DateTime(timezone=True), nullable=True)
    interview_time = Column(String, nullable=True)
    interview_location = Column(String, nullable=True)
    interview_type = Column(Enum(InterviewType), nullable=True)
    interview_notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    job = relationship("Job", back_populates="applications")
    applicant = relationship("User", foreign_keys=[applicant_id])
    reviewed_by = relationship("User", foreign_keys=[reviewed_by_id])

    @property
    def interview(self) -> dict:
        return {
            "scheduled": self.interview_scheduled,
            "date": self.interview_date,
            "time": self.interview_time,
            "location": self.interview_location,
            "type": self.interview_type,
            "notes": self.interview_notes,
        }

    def __repr__(self):
        return f"<Application(id={self.id}, job_id={self.job_id}, applicant_id={self.applicant_id}, status={self.status.value if self.status else None})>"
