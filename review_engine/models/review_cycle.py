from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func
from review_engine.database import Base
from review_engine.domain.review_cycle import CycleStatus
from review_engine.models.mixins import SoftDeleteColumns


class ReviewCycle(SoftDeleteColumns, Base):
    __tablename__ = "review_cycles"

    id = Column(String(36), primary_key=True, index=True)
    name = Column(String, nullable=False)
    year = Column(Integer, nullable=False)
    status = Column(String, nullable=False, default=CycleStatus.DRAFT.value)

    self_review_deadline = Column(DateTime(timezone=True), nullable=False)
    peer_feedback_deadline = Column(DateTime(timezone=True), nullable=False)
    manager_evaluation_deadline = Column(DateTime(timezone=True), nullable=False)
    calibration_deadline = Column(DateTime(timezone=True), nullable=False)
    feedback_delivery_deadline = Column(DateTime(timezone=True), nullable=False)

    start_date = Column(DateTime(timezone=True), nullable=False)
    end_date = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
