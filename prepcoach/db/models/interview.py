"""
Interview model - one practice session tied to a title, a target position and a fixed question set.
"""
import enum

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from prepcoach.db.base import Base


class InterviewStatus(str, enum.Enum):
    """Interview lifecycle. COMPLETED is terminal."""
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class Interview(Base):
    """
    Interview session owned by a single user.

    `score` (0-100) is set if and only if status is "completed".
    """
    __tablename__ = "interviews"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    title = Column(String, nullable=False)
    position = Column(String, nullable=False)
    cv_text = Column(Text, nullable=True)

    status = Column(String, nullable=False, default=InterviewStatus.PENDING.value)  # pending / in_progress / completed
    score = Column(Integer, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    questions = relationship(
        "Question",
        back_populates="interview",
        cascade="all, delete-orphan",
        order_by="Question.order_num",
    )

    __table_args__ = (
        Index("idx_interview_user_created", "user_id", "created_at"),
    )

    @property
    def is_completed(self) -> bool:
        return self.status == InterviewStatus.COMPLETED.value

    def __repr__(self):
        return f"<Interview(id={self.id}, title='{self.title}', status='{self.status}')>"
