from sqlalchemy import Column, Boolean, Float, String, Text, DateTime, ForeignKey
from review_engine.database import Base
from review_engine.models.mixins import PillarScoreColumns, SoftDeleteColumns, unique_while_live


class FinalScore(PillarScoreColumns, SoftDeleteColumns, Base):
    __tablename__ = "final_scores"

    id = Column(String(36), primary_key=True, index=True)
    cycle_id = Column(String(36), ForeignKey("review_cycles.id"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)

    weighted_score = Column(Float, nullable=False)
    percentage_score = Column(Float, nullable=False)
    bonus_tier = Column(String, nullable=False)  # derived, stored for reporting queries
    final_level = Column(String, nullable=False)
    calculated_at = Column(DateTime(timezone=True), nullable=False)

    locked = Column(Boolean, nullable=False, default=False)
    locked_at = Column(DateTime(timezone=True), nullable=True)

    feedback_delivered_at = Column(DateTime(timezone=True), nullable=True)
    delivered_by = Column(String(36), nullable=True)
    feedback_notes = Column(Text, nullable=True)

    __table_args__ = (
        unique_while_live("uq_final_score_cycle_user", "cycle_id", "user_id"),
    )
