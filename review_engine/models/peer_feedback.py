from sqlalchemy import Column, String, Text, DateTime, ForeignKey
from review_engine.database import Base
from review_engine.models.mixins import PillarScoreColumns, SoftDeleteColumns, unique_while_live


class PeerFeedback(PillarScoreColumns, SoftDeleteColumns, Base):
    __tablename__ = "peer_feedback"

    id = Column(String(36), primary_key=True, index=True)
    cycle_id = Column(String(36), ForeignKey("review_cycles.id"), nullable=False, index=True)
    reviewee_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    reviewer_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    strengths = Column(Text, nullable=True)
    growth_areas = Column(Text, nullable=True)
    general_comments = Column(Text, nullable=True)
    submitted_at = Column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        unique_while_live("uq_peer_feedback_triple", "cycle_id", "reviewer_id", "reviewee_id"),
    )
