from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from review_engine.database import Base
from review_engine.domain.review_status import ReviewStatus
from review_engine.models.mixins import PillarScoreColumns, SoftDeleteColumns, unique_while_live


class ManagerEvaluation(PillarScoreColumns, SoftDeleteColumns, Base):
    __tablename__ = "manager_evaluations"

    id = Column(String(36), primary_key=True, index=True)
    cycle_id = Column(String(36), ForeignKey("review_cycles.id"), nullable=False, index=True)
    employee_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    manager_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)

    performance_narrative = Column(Text, nullable=False, default="")
    strengths = Column(Text, nullable=False, default="")
    growth_areas = Column(Text, nullable=False, default="")
    development_plan = Column(Text, nullable=False, default="")

    employee_level = Column(String, nullable=True)
    proposed_level = Column(String, nullable=True)

    status = Column(String, nullable=False, default=ReviewStatus.DRAFT.value)
    submitted_at = Column(DateTime(timezone=True), nullable=True)
    calibrated_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    adjustments = relationship(
        "CalibrationAdjustment",
        back_populates="evaluation",
        order_by="CalibrationAdjustment.sequence",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        unique_while_live("uq_manager_evaluation_cycle_employee", "cycle_id", "employee_id"),
    )


class CalibrationAdjustment(Base):
    """Append-only audit trail of calibration changes to an evaluation."""
    __tablename__ = "calibration_adjustments"

    id = Column(String(36), primary_key=True, index=True)
    evaluation_id = Column(String(36), ForeignKey("manager_evaluations.id"), nullable=False, index=True)
    sequence = Column(Integer, nullable=False)

    old_project_impact = Column(Integer, nullable=False)
    old_direction = Column(Integer, nullable=False)
    old_engineering_excellence = Column(Integer, nullable=False)
    old_operational_ownership = Column(Integer, nullable=False)
    old_people_impact = Column(Integer, nullable=False)

    new_project_impact = Column(Integer, nullable=False)
    new_direction = Column(Integer, nullable=False)
    new_engineering_excellence = Column(Integer, nullable=False)
    new_operational_ownership = Column(Integer, nullable=False)
    new_people_impact = Column(Integer, nullable=False)

    justification = Column(Text, nullable=False)
    applied_at = Column(DateTime(timezone=True), nullable=False)

    evaluation = relationship("ManagerEvaluation", back_populates="adjustments")
