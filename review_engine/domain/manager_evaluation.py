import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, Optional, Tuple

from review_engine.core.exceptions import AlreadySubmittedError, InvalidStateError
from review_engine.domain.levels import EngineerLevel
from review_engine.domain.narrative import Narrative
from review_engine.domain.pillars import PillarScores
from review_engine.domain.review_status import ReviewStatus


@dataclass(frozen=True)
class CalibrationAdjustment:
    """One entry of a manager evaluation's calibration audit trail."""
    id: str
    old_scores: PillarScores
    new_scores: PillarScores
    justification: str
    applied_at: datetime


class ManagerEvaluation:
    """
    A manager's evaluation of one direct report for one cycle.

    Status is a tag rather than a type: every setter checks it and refuses
    to run once the evaluation is submitted. After submission the only
    permitted change is a calibration adjustment, which is recorded in an
    append-only audit trail.
    """

    def __init__(
        self,
        id: str,
        cycle_id: str,
        employee_id: str,
        manager_id: str,
        scores: PillarScores,
        performance_narrative: str = "",
        strengths: str = "",
        growth_areas: str = "",
        development_plan: str = "",
        employee_level: Optional[EngineerLevel] = None,
        proposed_level: Optional[EngineerLevel] = None,
        status: ReviewStatus = ReviewStatus.DRAFT,
        submitted_at: Optional[datetime] = None,
        calibrated_at: Optional[datetime] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
        adjustments: Iterable[CalibrationAdjustment] = (),
    ):
        now = datetime.now(timezone.utc)
        self.id = id
        self.cycle_id = cycle_id
        self.employee_id = employee_id
        self.manager_id = manager_id
        self._scores = scores
        self._performance_narrative = performance_narrative
        self._strengths = strengths
        self._growth_areas = growth_areas
        self._development_plan = development_plan
        self.employee_level = employee_level
        self._proposed_level = proposed_level
        self._status = status
        self._submitted_at = submitted_at
        self._calibrated_at = calibrated_at
        self.created_at = created_at or now
        self.updated_at = updated_at or now
        self._adjustments: Tuple[CalibrationAdjustment, ...] = tuple(adjustments)

    @classmethod
    def create(
        cls,
        cycle_id: str,
        employee_id: str,
        manager_id: str,
        scores: Optional[PillarScores] = None,
        employee_level: Optional[EngineerLevel] = None,
        proposed_level: Optional[EngineerLevel] = None,
        performance_narrative: str = "",
        strengths: str = "",
        growth_areas: str = "",
        development_plan: str = "",
        id: Optional[str] = None,
    ) -> "ManagerEvaluation":
        return cls(
            id=id or str(uuid.uuid4()),
            cycle_id=cycle_id,
            employee_id=employee_id,
            manager_id=manager_id,
            scores=scores or PillarScores.zeros(),
            performance_narrative=Narrative(performance_narrative).text,
            strengths=Narrative(strengths).text,
            growth_areas=Narrative(growth_areas).text,
            development_plan=Narrative(development_plan).text,
            employee_level=employee_level,
            proposed_level=proposed_level,
        )

    # --- Draft-only setters ---

    def _ensure_draft(self, what: str) -> None:
        if self.is_submitted:
            raise AlreadySubmittedError(f"Cannot update {what} after submission")

    def _touch(self) -> None:
        self.updated_at = datetime.now(timezone.utc)

    def update_scores(self, scores: PillarScores) -> None:
        self._ensure_draft("scores")
        self._scores = scores
        self._touch()

    def update_performance_narrative(self, narrative: Narrative) -> None:
        self._ensure_draft("performance narrative")
        self._performance_narrative = narrative.text
        self._touch()

    def update_strengths(self, strengths: Narrative) -> None:
        self._ensure_draft("strengths")
        self._strengths = strengths.text
        self._touch()

    def update_growth_areas(self, growth_areas: Narrative) -> None:
        self._ensure_draft("growth areas")
        self._growth_areas = growth_areas.text
        self._touch()

    def update_development_plan(self, plan: Narrative) -> None:
        self._ensure_draft("development plan")
        self._development_plan = plan.text
        self._touch()

    def update_proposed_level(self, level: Optional[EngineerLevel]) -> None:
        self._ensure_draft("proposed level")
        self._proposed_level = level
        self._touch()

    # --- Transitions ---

    def submit(self) -> None:
        if self.is_submitted:
            raise AlreadySubmittedError("Manager evaluation has already been submitted")
        self._status = ReviewStatus.SUBMITTED
        self._submitted_at = datetime.now(timezone.utc)
        self._touch()

    def apply_calibration_adjustment(self, new_scores: PillarScores, justification: str) -> CalibrationAdjustment:
        if not self.is_submitted:
            raise InvalidStateError("Cannot apply calibration to an evaluation that has not been submitted")

        applied_at = datetime.now(timezone.utc)
        adjustment = CalibrationAdjustment(
            id=str(uuid.uuid4()),
            old_scores=self._scores,
            new_scores=new_scores,
            justification=justification.strip(),
            applied_at=applied_at,
        )
        self._adjustments = self._adjustments + (adjustment,)
        self._scores = new_scores
        self._status = ReviewStatus.CALIBRATED
        self._calibrated_at = applied_at
        self.updated_at = applied_at
        return adjustment

    # --- Read access ---

    @property
    def scores(self) -> PillarScores:
        return self._scores

    @property
    def performance_narrative(self) -> str:
        return self._performance_narrative

    @property
    def strengths(self) -> str:
        return self._strengths

    @property
    def growth_areas(self) -> str:
        return self._growth_areas

    @property
    def development_plan(self) -> str:
        return self._development_plan

    @property
    def proposed_level(self) -> Optional[EngineerLevel]:
        return self._proposed_level

    @property
    def final_level(self) -> EngineerLevel:
        """Level the final score is computed at: proposed, else current, else MID."""
        return EngineerLevel.resolve(self._proposed_level or self.employee_level)

    @property
    def status(self) -> ReviewStatus:
        return self._status

    @property
    def submitted_at(self) -> Optional[datetime]:
        return self._submitted_at

    @property
    def calibrated_at(self) -> Optional[datetime]:
        return self._calibrated_at

    @property
    def adjustments(self) -> Tuple[CalibrationAdjustment, ...]:
        return self._adjustments

    @property
    def is_submitted(self) -> bool:
        return self._status.is_submitted

    @property
    def is_calibrated(self) -> bool:
        return self._status == ReviewStatus.CALIBRATED

    def __repr__(self):
        return f"<ManagerEvaluation {self.id} employee={self.employee_id} ({self._status.value})>"
