from sqlalchemy import Column, String, Text, DateTime, ForeignKey, JSON
from review_engine.database import Base
from review_engine.domain.calibration_session import SessionStatus
from review_engine.models.mixins import SoftDeleteColumns


class CalibrationSession(SoftDeleteColumns, Base):
    __tablename__ = "calibration_sessions"

    id = Column(String(36), primary_key=True, index=True)
    cycle_id = Column(String(36), ForeignKey("review_cycles.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    facilitator_id = Column(String(36), nullable=False)
    participant_ids = Column(JSON, nullable=False, default=list)
    scheduled_at = Column(DateTime(timezone=True), nullable=False)
    status = Column(String, nullable=False, default=SessionStatus.SCHEDULED.value)
    department = Column(String, nullable=True)
    notes = Column(Text, nullable=False, default="")
    completed_at = Column(DateTime(timezone=True), nullable=True)
