from sqlalchemy import Column, String, Text, DateTime, ForeignKey
from review_engine.database import Base
from review_engine.domain.score_adjustment_request import AdjustmentRequestStatus
from review_engine.models.mixins import PillarScoreColumns, SoftDeleteColumns


class ScoreAdjustmentRequest(PillarScoreColumns, SoftDeleteColumns, Base):
    """Post-lock score change requests; the pillar columns hold the proposed scores."""
    __tablename__ = "score_adjustment_requests"

    id = Column(String(36), primary_key=True, index=True)
    cycle_id = Column(String(36), ForeignKey("review_cycles.id"), nullable=False, index=True)
    employee_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    requester_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    reason = Column(Text, nullable=False)
    status = Column(String, nullable=False, default=AdjustmentRequestStatus.PENDING.value, index=True)
    requested_at = Column(DateTime(timezone=True), nullable=False)

    reviewer_id = Column(String(36), nullable=True)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)
    review_notes = Column(Text, nullable=True)
