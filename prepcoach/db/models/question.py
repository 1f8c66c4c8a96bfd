"""
Question model - one prompt within an interview with at most one recorded answer.
"""
from sqlalchemy import Column, Integer, Text, DateTime, ForeignKey, JSON, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from prepcoach.db.base import Base


class Question(Base):
    """
    Interview question.

    answer_text, score and feedback are written together by the state machine,
    so they are either all NULL or all set.
    """
    __tablename__ = "questions"

    id = Column(Integer, primary_key=True, index=True)
    interview_id = Column(Integer, ForeignKey("interviews.id", ondelete="CASCADE"), nullable=False, index=True)

    question_text = Column(Text, nullable=False)
    order_num = Column(Integer, nullable=False)  # 1-based, display order

    # Evaluation (set once answered)
    answer_text = Column(Text, nullable=True)
    score = Column(Integer, nullable=True)  # 0-10
    feedback = Column(Text, nullable=True)
    strengths = Column(JSON, nullable=True)
    improvements = Column(JSON, nullable=True)
    answered_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    interview = relationship("Interview", back_populates="questions")

    __table_args__ = (
        UniqueConstraint("interview_id", "order_num", name="uq_question_interview_order"),
    )

    @property
    def is_answered(self) -> bool:
        return self.answer_text is not None and self.score is not None

    def __repr__(self):
        return f"<Question(id={self.id}, interview_id={self.interview_id}, order_num={self.order_num})>"
