"""
CRUD operations (Create, Read, Update, Delete) for database models.

This layer provides a clean separation between the services and database
operations, following the Repository pattern.
"""

from app.crud import application, job, user

__all__ = ["application", "job", "user"]
