from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, String, Text, UniqueConstraint

from okr.core.database import Base


class Evaluation(Base):
    __tablename__ = "evaluations"
    __table_args__ = (
        UniqueConstraint(
            "evaluator_id", "evaluator_type", "target_type", "target_id", name="uq_evaluation_evaluator_target"
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    evaluator_id = Column(Integer, nullable=False, index=True)
    evaluator_name = Column(String(255), nullable=True)
    evaluator_type = Column(String(32), nullable=False)  # DIRECTOR | HR | BUSINESS_BLOCK
    target_type = Column(String(32), nullable=False)  # DEPARTMENT | DIVISION
    target_id = Column(Integer, nullable=False, index=True)
    star_rating = Column(Integer, nullable=True)  # Director / Business Block, 1-5
    letter_rating = Column(String(1), nullable=True)  # HR, A-D
    comment = Column(Text, nullable=True)
    status = Column(String(16), default="DRAFT", nullable=False)  # DRAFT | SUBMITTED | APPROVED
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
    submitted_at = Column(DateTime, nullable=True)
