"""
Database models package.
"""

from app.models.user import User, UserRole, user_favorites
from app.models.job import Job, JobStatus, JobType, JobCategory, ExperienceLevel
from app.models.application import Application, ApplicationStatus, InterviewType

__all__ = [
    "User", "UserRole", "user_favorites",
    "Job", "JobStatus", "JobType", "JobCategory", "ExperienceLevel",
    "Application", "ApplicationStatus", "InterviewType",
]
