"""create_job_board_schema

Creates the users, jobs, applications and user_favorites tables.

Foreign keys:
1. jobs.posted_by_id and applications.applicant_id are SET NULL, so a user
   deleting their own account leaves their jobs and applications behind
2. applications.job_id and both user_favorites keys are CASCADE

Revision ID: 3f9a1c2b7d10
Revises:
Create Date: 2026-10-18 09:12:44.318201

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f9a1c2b7d10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# SQLAlchemy persists Python enums by member name
user_role = sa.Enum('JOBSEEKER', 'EMPLOYER', 'ADMIN', name='userrole')
job_type = sa.Enum('FULL_TIME', 'PART_TIME', 'CONTRACT', 'INTERNSHIP', 'REMOTE', name='jobtype')
job_category = sa.Enum(
    'TECHNOLOGY', 'FINANCE', 'HEALTHCARE', 'EDUCATION', 'MARKETING', 'SALES',
    'HUMAN_RESOURCES', 'OPERATIONS', 'CUSTOMER_SERVICE', 'LEGAL', 'OTHER',
    name='jobcategory'
)
experience_level = sa.Enum('ENTRY', 'MID', 'SENIOR', 'EXECUTIVE', name='experiencelevel')
job_status = sa.Enum('ACTIVE', 'CLOSED', 'DRAFT', name='jobstatus')
application_status = sa.Enum(
    'PENDING', 'REVIEWED', 'SHORTLISTED', 'INTERVIEWED', 'HIRED', 'REJECTED',
    name='applicationstatus'
)
interview_type = sa.Enum('IN_PERSON', 'PHONE', 'VIDEO', name='interviewtype')


def upgrade() -> None:
    """Create the job board schema."""

    # 1. Users
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False),
        sa.Column('name', sa.String(length=50), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('hashed_password', sa.String(), nullable=False),
        sa.Column('role', user_role, nullable=False),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('skills', sa.JSON(), nullable=False),
        sa.Column('experience', sa.Text(), nullable=True),
        sa.Column('education', sa.Text(), nullable=True),
        sa.Column('resume_path', sa.String(), nullable=True),
        sa.Column('profile_picture', sa.String(), nullable=True),
        sa.Column('location', sa.String(), nullable=True),
        sa.Column('website', sa.String(), nullable=True),
        sa.Column('linkedin', sa.String(), nullable=True),
        sa.Column('github', sa.String(), nullable=True),
        sa.Column('company_name', sa.String(), nullable=True),
        sa.Column('company_description', sa.Text(), nullable=True),
        sa.Column('company_website', sa.String(), nullable=True),
        sa.Column('company_location', sa.String(), nullable=True),
        sa.Column('company_logo', sa.String(), nullable=True),
        sa.Column('company_industry', sa.String(), nullable=True),
        sa.Column('company_size', sa.String(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True)),
        sa.Column('last_login_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_role', 'users', ['role'])
    op.create_index('ix_users_created_at', 'users', ['created_at'])

    # 2. Jobs
    op.create_table(
        'jobs',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False),
        sa.Column('title', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('requirements', sa.Text(), nullable=False),
        sa.Column('company', sa.String(), nullable=False),
        sa.Column('location', sa.String(), nullable=False),
        sa.Column('job_type', job_type, nullable=False),
        sa.Column('category', job_category, nullable=False),
        sa.Column('experience_level', experience_level, nullable=False),
        sa.Column('salary_min', sa.Float(), nullable=False),
        sa.Column('salary_max', sa.Float(), nullable=False),
        sa.Column('salary_currency', sa.String(length=3), nullable=False, server_default='USD'),
        sa.Column('skills', sa.JSON(), nullable=False),
        sa.Column('benefits', sa.JSON(), nullable=False),
        sa.Column('tags', sa.JSON(), nullable=False),
        sa.Column('application_deadline', sa.DateTime(timezone=True), nullable=False),
        sa.Column('is_remote', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('posted_by_id', sa.Integer(), nullable=True),
        sa.Column('status', job_status, nullable=False),
        sa.Column('applications_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('views', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True)),
        sa.ForeignKeyConstraint(['posted_by_id'], ['users.id'], ondelete='SET NULL'),
    )
    for column in ('id', 'title', 'company', 'location', 'job_type', 'category',
                   'experience_level', 'posted_by_id', 'status', 'created_at'):
        op.create_index(f'ix_jobs_{column}', 'jobs', [column])

    # 3. Applications
    op.create_table(
        'applications',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False),
        sa.Column('job_id', sa.Integer(), nullable=False),
        sa.Column('applicant_id', sa.Integer(), nullable=True),
        sa.Column('cover_letter', sa.String(length=1000), nullable=True),
        sa.Column('resume_path', sa.String(), nullable=False),
        sa.Column('status', application_status, nullable=False),
        sa.Column('applied_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('reviewed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('reviewed_by_id', sa.Integer(), nullable=True),
        sa.Column('notes', sa.String(length=500), nullable=True),
        sa.Column('rating', sa.Integer(), nullable=True),
        sa.Column('interview_scheduled', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('interview_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('interview_time', sa.String(), nullable=True),
        sa.Column('interview_location', sa.String(), nullable=True),
        sa.Column('interview_type', interview_type, nullable=True),
        sa.Column('interview_notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True)),
        sa.ForeignKeyConstraint(['job_id'], ['jobs.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['applicant_id'], ['users.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['reviewed_by_id'], ['users.id'], ondelete='SET NULL'),
        sa.UniqueConstraint('job_id', 'applicant_id', name='uq_application_job_applicant'),
    )
    for column in ('id', 'job_id', 'applicant_id', 'status', 'applied_at'):
        op.create_index(f'ix_applications_{column}', 'applications', [column])

    # 4. Saved jobs
    op.create_table(
        'user_favorites',
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('job_id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['job_id'], ['jobs.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('user_id', 'job_id'),
    )


def downgrade() -> None:
    """Drop the job board schema."""
    op.drop_table('user_favorites')
    op.drop_table('applications')
    op.drop_table('jobs')
    op.drop_table('users')

    bind = op.get_bind()
    for enum_type in (interview_type, application_status, job_status, experience_level,
                      job_category, job_type, user_role):
        enum_type.drop(bind, checkfirst=True)
