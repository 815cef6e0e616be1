"""
Response schemas for the admin dashboard.
"""

from typing import List

from app.schemas.common import CamelModel, MessageResponse
from app.schemas.job import CategoryCount


class StatsOverview(CamelModel):
    total_users: int
    total_jobseekers: int
    total_employers: int
    total_jobs: int
    active_jobs: int
    total_applications: int


class RecentActivity(CamelModel):
    recent_users: int
    recent_jobs: int
    recent_applications: int


class StatusCount(CamelModel):
    status: str
    count: int


class MonthlyCount(CamelModel):
    year: int
    month: int
    count: int


class AdminStats(CamelModel):
    overview: StatsOverview
    recent_activity: RecentActivity
    application_status_stats: List[StatusCount]
    job_category_stats: List[CategoryCount]
    monthly_user_stats: List[MonthlyCount]


class AdminStatsResponse(MessageResponse):
    stats: AdminStats
