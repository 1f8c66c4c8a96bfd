"""
Database models module.

This module imports all database models to ensure they are registered with SQLAlchemy's Base.metadata
before table creation.
"""
from prepcoach.db.models.user import User
from prepcoach.db.models.interview import Interview, InterviewStatus
from prepcoach.db.models.question import Question

__all__ = [
    "User",
    "Interview",
    "InterviewStatus",
    "Question",
]
