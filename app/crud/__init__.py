"""
CRUD operations (Create, Read, Update, Delete) over the record store.

This layer provides a clean separation between services/API routes and the
store, following the Repository pattern.
"""

from app.crud import application, history, job, message, user

__all__ = ["application", "history", "job", "message", "user"]
