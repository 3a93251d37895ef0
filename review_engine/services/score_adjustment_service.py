from typing import Any, List, Mapping, Optional, Union

from review_engine.core.exceptions import AccessDeniedError, InvalidStateError, NotFoundError
from review_engine.domain.final_score import FinalScore
from review_engine.domain.pillars import PillarScores
from review_engine.domain.score_adjustment_request import ScoreAdjustmentRequest
from review_engine.schemas.final_score import AdjustmentPreview
from review_engine.services.base import BaseService
from review_engine.services.score_calculation import calculate_weighted_score


class ScoreAdjustmentService(BaseService):
    """
    Tickets for changing an outcome after the cycle's Final Scores were
    locked. A manager raises one for a direct report and a reviewer
    approves or rejects it once.

    Reviewing a ticket records the decision only. Locked scores and the
    evaluation behind them are never touched here.
    """

    def _get(self, request_id: str) -> ScoreAdjustmentRequest:
        request = self.repos.score_adjustment_requests.find_by_id(request_id)
        if not request:
            raise NotFoundError(f"Score adjustment request {request_id} not found", error_code="REQUEST_NOT_FOUND")
        return request

    def _final_score(self, employee_id: str, cycle_id: str) -> FinalScore:
        final_score = self.repos.final_scores.find_by_user_and_cycle(employee_id, cycle_id)
        if not final_score:
            raise NotFoundError(
                f"Final score not found for user {employee_id} in cycle {cycle_id}",
                error_code="FINAL_SCORE_NOT_FOUND",
            )
        return final_score

    def request_adjustment(
        self,
        cycle_id: str,
        employee_id: str,
        requester_id: str,
        proposed_scores: Union[PillarScores, Mapping[str, Any]],
        reason: str,
    ) -> ScoreAdjustmentRequest:
        self.require_cycle(cycle_id)

        final_score = self._final_score(employee_id, cycle_id)
        if not final_score.is_locked:
            raise InvalidStateError("Cannot request score adjustment until final scores are locked")

        employee = self.repos.users.find_by_id(employee_id)
        if not employee:
            raise NotFoundError(f"Employee {employee_id} not found", error_code="EMPLOYEE_NOT_FOUND")
        if employee.manager_id != requester_id:
            self.log_warning(f"Adjustment request by {requester_id} for {employee_id} rejected: not their manager")
            raise AccessDeniedError("You can only request adjustments for your direct reports")

        request = ScoreAdjustmentRequest.create(
            cycle_id=cycle_id,
            employee_id=employee_id,
            requester_id=requester_id,
            reason=reason,
            proposed_scores=PillarScores.from_mapping(proposed_scores),
        )
        try:
            self.repos.score_adjustment_requests.save(request)
            self.commit()
        except Exception:
            self.rollback()
            raise
        self.log_info(f"Score adjustment {request.id} requested for user {employee_id} in cycle {cycle_id}")
        return request

    def preview(self, request_id: str) -> AdjustmentPreview:
        """Weighted score and tier of the locked outcome against the proposal, at the locked level."""
        request = self._get(request_id)
        final_score = self._final_score(request.employee_id, request.cycle_id)
        proposed = calculate_weighted_score(request.proposed_scores, final_score.final_level)
        return AdjustmentPreview(
            request_id=request.id,
            employee_id=request.employee_id,
            current_scores=final_score.pillar_scores,
            proposed_scores=request.proposed_scores,
            current_weighted_score=final_score.weighted_score.value,
            proposed_weighted_score=proposed.value,
            current_bonus_tier=final_score.bonus_tier,
            proposed_bonus_tier=proposed.bonus_tier,
        )

    def review_adjustment(
        self, request_id: str, reviewer_id: str, approved: bool, notes: Optional[str] = None
    ) -> ScoreAdjustmentRequest:
        """Approve or reject a pending request. Rejections need notes."""
        request = self._get(request_id)
        if approved:
            request.approve(reviewer_id, notes)
        else:
            request.reject(reviewer_id, notes)

        try:
            self.repos.score_adjustment_requests.save(request)
            self.commit()
        except Exception:
            self.rollback()
            raise
        self.log_info(f"Score adjustment {request_id} {request.status.value.lower()} by {reviewer_id}")
        return request

    def get_pending(self) -> List[ScoreAdjustmentRequest]:
        return self.repos.score_adjustment_requests.find_pending()

    def get_requests_for_employee(self, cycle_id: str, employee_id: str) -> List[ScoreAdjustmentRequest]:
        self.require_cycle(cycle_id)
        return self.repos.score_adjustment_requests.find_by_employee_and_cycle(employee_id, cycle_id)
