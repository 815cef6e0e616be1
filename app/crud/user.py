"""
CRUD operations for the User model.
"""

from datetime import datetime
from typing import List, Optional, Tuple
from sqlalchemy import or_
from sqlalchemy.orm import Session
from app.crud.base import paginate
from app.models.user import User, UserRole


def get_by_id(db: Session, user_id: int) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def get_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email.strip().lower()).first()


def create(
    db: Session,
    name: str,
    email: str,
    hashed_password: str,
    role: UserRole = UserRole.JOBSEEKER
) -> User:
    """
    Add a new user to the session and flush it so it gets an id.

    The caller owns the transaction and commits.
    """
    user = User(
        name=name,
        email=email.strip().lower(),
        hashed_password=hashed_password,
        role=role,
        is_active=True,
    )
    db.add(user)
    db.flush()
    return user


def get_multi(
    db: Session,
    page: int,
    limit: int,
    role: Optional[UserRole] = None,
    is_active: Optional[bool] = None,
    search: Optional[str] = None
) -> Tuple[List[User], int]:
    """
    List users newest first with optional role, activation and name/email filters.
    """
    query = db.query(User)

    if role:
        query = query.filter(User.role == role)
    if is_active is not None:
        query = query.filter(User.is_active == is_active)
    if search:
        query = query.filter(or_(
            User.name.icontains(search, autoescape=True),
            User.email.icontains(search, autoescape=True),
        ))

    return paginate(query.order_by(User.created_at.desc(), User.id.desc()), page, limit)


def active_admin_ids(db: Session, lock: bool = False) -> List[int]:
    """
    Ids of all active admins.

    With lock=True the rows are selected FOR UPDATE (ignored by SQLite), so a
    concurrent last-admin check in another transaction waits for this one.
    """
    query = db.query(User.id).filter(User.role == UserRole.ADMIN, User.is_active.is_(True))
    if lock:
        query = query.with_for_update()
    return [row.id for row in query.all()]


def count(db: Session, role: Optional[UserRole] = None, since: Optional[datetime] = None) -> int:
    query = db.query(User)
    if role:
        query = query.filter(User.role == role)
    if since:
        query = query.filter(User.created_at >= since)
    return query.count()
