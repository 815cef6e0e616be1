"""
Pydantic schemas for authentication, profiles and user administration.
"""

from pydantic import EmailStr, Field, field_validator
from typing import List, Optional
from datetime import datetime

from app.models.user import UserRole
from app.schemas.common import CamelModel, MessageResponse, PaginatedResponse


class UserRegisterRequest(CamelModel):
    """Request schema for user registration."""
    name: str = Field(..., min_length=1, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=6, description="Password must be at least 6 characters")
    role: Optional[UserRole] = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name is required")
        return v

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()

    @field_validator("role")
    @classmethod
    def validate_role(cls, v: Optional[UserRole]) -> Optional[UserRole]:
        """Admin accounts cannot be self-registered."""
        if v == UserRole.ADMIN:
            raise ValueError("Invalid role")
        return v


class UserLoginRequest(CamelModel):
    """Request schema for user login."""
    email: EmailStr
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class ProfileSchema(CamelModel):
    bio: Optional[str] = None
    skills: List[str] = []
    experience: Optional[str] = None
    education: Optional[str] = None
    resume: Optional[str] = None
    profile_picture: Optional[str] = None
    location: Optional[str] = None
    website: Optional[str] = None
    linkedin: Optional[str] = None
    github: Optional[str] = None


class CompanySchema(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    website: Optional[str] = None
    location: Optional[str] = None
    logo: Optional[str] = None
    industry: Optional[str] = None
    size: Optional[str] = None


class UserSummary(CamelModel):
    """Minimal user reference embedded in jobs and applications."""
    id: int
    name: str
    email: Optional[str] = None
    company_name: Optional[str] = None
    company_logo: Optional[str] = None


class UserResponse(CamelModel):
    """User profile response (no sensitive data)."""
    id: int
    name: str
    email: str
    role: UserRole
    phone: Optional[str] = None
    profile: ProfileSchema
    company: CompanySchema
    favorites: List[int] = []
    is_active: bool
    last_login_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("favorites", mode="before")
    @classmethod
    def favorite_ids(cls, v):
        return [getattr(job, "id", job) for job in (v or [])]


class AuthResponse(MessageResponse):
    """Session token plus the authenticated user."""
    token: str
    user: UserResponse


class UserEnvelope(MessageResponse):
    user: UserResponse


class UploadResponse(MessageResponse):
    path: str
    user: UserResponse


class UserListResponse(PaginatedResponse):
    users: List[UserResponse]


class UserActivityStats(CamelModel):
    jobs_posted: int = 0
    applications_submitted: int = 0
    applications_received: int = 0


class UserDetailResponse(MessageResponse):
    user: UserResponse
    stats: UserActivityStats


class RoleUpdateRequest(CamelModel):
    role: UserRole
