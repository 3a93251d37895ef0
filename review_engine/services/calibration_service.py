from datetime import datetime
from typing import Any, Dict, Iterable, Mapping, Optional, Union

from review_engine.core.config import settings
from review_engine.core.exceptions import FinalScoreLockedError, NotFoundError, ValidationError
from review_engine.core.logging import operation_context
from review_engine.domain.calibration_session import CalibrationSession
from review_engine.domain.levels import EngineerLevel
from review_engine.domain.pillars import PillarScores
from review_engine.domain.weighted_score import BonusTier
from review_engine.schemas.calibration import (
    CalibrationAdjustmentResult,
    CalibrationDashboard,
    DashboardEntry,
)
from review_engine.services.base import BaseService
from review_engine.services.final_score_service import calculate_final_score
from review_engine.services.score_calculation import calculate_weighted_score


class CalibrationService(BaseService):
    """
    Calibration committee workflows: sessions, score adjustments and the
    tier overview used during the meeting.
    """

    def _get_session(self, session_id: str) -> CalibrationSession:
        session = self.repos.calibration_sessions.find_by_id(session_id)
        if not session:
            raise NotFoundError(f"Calibration session {session_id} not found", error_code="SESSION_NOT_FOUND")
        return session

    def apply_calibration_adjustment(
        self,
        session_id: str,
        evaluation_id: str,
        adjusted_scores: Union[PillarScores, Mapping[str, Any]],
        justification: str,
    ) -> CalibrationAdjustmentResult:
        """
        Revise a submitted evaluation's scores during calibration.

        Everything that can be rejected is checked before the evaluation is
        touched. The evaluation, its audit entry and any existing Final
        Score are then written in one unit of work, so they never diverge.
        """
        with operation_context():
            evaluation = self.repos.manager_evaluations.find_by_id(evaluation_id)
            if not evaluation:
                raise NotFoundError(f"Manager evaluation {evaluation_id} not found", error_code="EVALUATION_NOT_FOUND")

            self._get_session(session_id)

            reason = (justification or "").strip()
            min_length = settings.calibration_min_justification_length
            if len(reason) < min_length:
                self.log_warning(f"Calibration of evaluation {evaluation_id} rejected: justification too short")
                raise ValidationError(
                    f"Justification must be at least {min_length} characters",
                    error_code="JUSTIFICATION_TOO_SHORT",
                    details={"min_length": min_length, "length": len(reason)},
                )
            new_scores = PillarScores.from_mapping(adjusted_scores)

            existing_score = self.repos.final_scores.find_by_user_and_cycle(evaluation.employee_id, evaluation.cycle_id)
            if existing_score and existing_score.is_locked:
                self.log_warning(f"Calibration of evaluation {evaluation_id} rejected: final score is locked")
                raise FinalScoreLockedError("Cannot calibrate an evaluation whose final score is locked")

            # Departed employees keep their evaluation; they weigh as MID.
            employee = self.repos.users.find_by_id(evaluation.employee_id)
            level = employee.effective_level if employee else EngineerLevel.resolve(None)

            original_scores = evaluation.scores
            old_weighted = calculate_weighted_score(original_scores, level)

            try:
                adjustment = evaluation.apply_calibration_adjustment(new_scores, reason)
                self.repos.manager_evaluations.save(evaluation)

                new_weighted = calculate_weighted_score(new_scores, level)

                final_score_updated = False
                if existing_score:
                    self.repos.final_scores.save(calculate_final_score(evaluation, existing_score))
                    final_score_updated = True

                self.commit()
            except Exception:
                self.rollback()
                raise

            self.log_info(
                f"Calibrated evaluation {evaluation_id} in session {session_id}: "
                f"{old_weighted.value} ({old_weighted.bonus_tier.value}) -> "
                f"{new_weighted.value} ({new_weighted.bonus_tier.value})"
            )
            return CalibrationAdjustmentResult(
                adjustment_id=adjustment.id,
                evaluation_id=evaluation.id,
                original_scores=original_scores,
                adjusted_scores=new_scores,
                old_weighted_score=old_weighted.value,
                new_weighted_score=new_weighted.value,
                old_bonus_tier=old_weighted.bonus_tier,
                new_bonus_tier=new_weighted.bonus_tier,
                justification=adjustment.justification,
                adjusted_at=adjustment.applied_at,
                final_score_updated=final_score_updated,
            )

    # --- Sessions ---

    def create_session(
        self,
        cycle_id: str,
        name: str,
        facilitator_id: str,
        participant_ids: Iterable[str],
        scheduled_at: datetime,
        department: Optional[str] = None,
    ) -> CalibrationSession:
        self.require_cycle(cycle_id)
        session = CalibrationSession.create(
            cycle_id=cycle_id,
            name=name,
            facilitator_id=facilitator_id,
            scheduled_at=scheduled_at,
            participant_ids=participant_ids,
            department=department,
        )
        try:
            self.repos.calibration_sessions.save(session)
            self.commit()
        except Exception:
            self.rollback()
            raise
        self.log_info(f"Scheduled calibration session {session.id} for cycle {cycle_id}")
        return session

    def record_note(self, session_id: str, notes: str) -> CalibrationSession:
        session = self._get_session(session_id)
        session.record_note(notes)
        try:
            self.repos.calibration_sessions.save(session)
            self.commit()
        except Exception:
            self.rollback()
            raise
        return session

    def complete_session(self, session_id: str) -> CalibrationSession:
        session = self._get_session(session_id)
        session.complete()
        try:
            self.repos.calibration_sessions.save(session)
            self.commit()
        except Exception:
            self.rollback()
            raise
        self.log_info(f"Calibration session {session_id} completed")
        return session

    # --- Dashboard ---

    def get_dashboard(self, cycle_id: str, department: Optional[str] = None) -> CalibrationDashboard:
        """
        Weighted score and tier of every evaluation in the cycle, with
        counts per tier and per department.
        """
        self.require_cycle(cycle_id)

        entries = []
        tier_counts: Dict[BonusTier, int] = {tier: 0 for tier in BonusTier}
        department_counts: Dict[str, Dict[BonusTier, int]] = {}

        for evaluation in self.repos.manager_evaluations.find_by_cycle(cycle_id):
            employee = self.repos.users.find_by_id(evaluation.employee_id)
            employee_department = employee.department if employee else None
            if department and employee_department != department:
                continue

            level = employee.effective_level if employee else EngineerLevel.resolve(None)
            weighted = calculate_weighted_score(evaluation.scores, level)
            tier = weighted.bonus_tier

            tier_counts[tier] += 1
            bucket = department_counts.setdefault(
                employee_department or "Unassigned", {t: 0 for t in BonusTier}
            )
            bucket[tier] += 1

            entries.append(DashboardEntry(
                evaluation_id=evaluation.id,
                employee_id=evaluation.employee_id,
                employee_name=employee.name if employee else "",
                department=employee_department,
                level=level,
                status=evaluation.status,
                scores=evaluation.scores,
                weighted_score=weighted.value,
                bonus_tier=tier,
            ))

        return CalibrationDashboard(
            cycle_id=cycle_id,
            department=department,
            total_evaluations=len(entries),
            tier_counts=tier_counts,
            department_counts=department_counts,
            entries=entries,
        )
