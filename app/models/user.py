"""
User model for authentication, profiles and role-based access.

A User is either a job seeker, an employer, or an admin. Profile and company
details are stored as flat columns and exposed as nested dicts through the
`profile` and `company` properties.
"""

import enum
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, Enum, JSON, ForeignKey, Table, func
from sqlalchemy.orm import relationship
from app.core.database import Base


class UserRole(str, enum.Enum):
    JOBSEEKER = "jobseeker"
    EMPLOYER = "employer"
    ADMIN = "admin"


# Saved jobs; rows go away with either side
user_favorites = Table(
    "user_favorites",
    Base.metadata,
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("job_id", Integer, ForeignKey("jobs.id", ondelete="CASCADE"), primary_key=True),
    Column("created_at", DateTime(timezone=True), server_default=func.now()),
)


class User(Base):
    """
    User account.

    Passwords are only ever stored hashed, and the hash is never part of any
    response schema.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), nullable=False)

    # Authentication credentials (email is stored lowercased)
    email = Column(String, unique=True, nullable=False, index=True)
    hashed_password = Column(String, nullable=False)

    role = Column(Enum(UserRole), default=UserRole.JOBSEEKER, nullable=False, index=True)
    phone = Column(String, nullable=True)

    # Profile
    bio = Column(Text, nullable=True)
    skills = Column(JSON, nullable=False, default=list)
    experience = Column(Text, nullable=True)
    education = Column(Text, nullable=True)
    resume_path = Column(String, nullable=True)
    profile_picture = Column(String, nullable=True)
    location = Column(String, nullable=True)
    website = Column(String, nullable=True)
    linkedin = Column(String, nullable=True)
    github = Column(String, nullable=True)

    # Company (employers)
    company_name = Column(String, nullable=True)
    company_description = Column(Text, nullable=True)
    company_website = Column(String, nullable=True)
    company_location = Column(String, nullable=True)
    company_logo = Column(String, nullable=True)
    company_industry = Column(String, nullable=True)
    company_size = Column(String, nullable=True)

    # Account status
    is_active = Column(Boolean, default=True, nullable=False)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    last_login_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    favorites = relationship("Job", secondary=user_favorites, back_populates="favorited_by", order_by="Job.id")

    @property
    def profile(self) -> dict:
        return {
            "bio": self.bio,
            "skills": self.skills or [],
            "experience": self.experience,
            "education": self.education,
            "resume": self.resume_path,
            "profile_picture": self.profile_picture,
            "location": self.location,
            "website": self.website,
            "linkedin": self.linkedin,
            "github": self.github,
        }

    @property
    def company(self) -> dict:
        return {
            "name": self.company_name,
            "description": self.company_description,
            "website": self.company_website,
            "location": self.company_location,
            "logo": self.company_logo,
            "industry": self.company_industry,
            "size": self.company_size,
        }

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role={self.role.value if self.role else None})>"
