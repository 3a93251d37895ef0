from sqlalchemy import Column, String, Text, DateTime, ForeignKey
from sqlalchemy.sql import func
from review_engine.database import Base
from review_engine.domain.review_status import ReviewStatus
from review_engine.models.mixins import PillarScoreColumns, SoftDeleteColumns, unique_while_live


class SelfReview(PillarScoreColumns, SoftDeleteColumns, Base):
    __tablename__ = "self_reviews"

    id = Column(String(36), primary_key=True, index=True)
    cycle_id = Column(String(36), ForeignKey("review_cycles.id"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    narrative = Column(Text, nullable=False, default="")
    status = Column(String, nullable=False, default=ReviewStatus.DRAFT.value)
    submitted_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    __table_args__ = (
        unique_while_live("uq_self_review_cycle_user", "cycle_id", "user_id"),
    )
