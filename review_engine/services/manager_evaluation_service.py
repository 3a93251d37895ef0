from typing import Any, Mapping, Optional, Union

from review_engine.core.exceptions import DeadlinePassedError, NotFoundError
from review_engine.domain.levels import EngineerLevel
from review_engine.domain.manager_evaluation import ManagerEvaluation
from review_engine.domain.narrative import Narrative
from review_engine.domain.pillars import PillarScores
from review_engine.domain.review_cycle import CyclePhase
from review_engine.services.base import BaseService


class ManagerEvaluationService(BaseService):
    """
    Manager evaluation authoring and submission.

    Authorization (is this manager allowed to evaluate this employee) is
    the caller's job; the service only enforces lifecycle rules.
    """

    def _get(self, evaluation_id: str) -> ManagerEvaluation:
        evaluation = self.repos.manager_evaluations.find_by_id(evaluation_id)
        if not evaluation:
            raise NotFoundError(f"Manager evaluation {evaluation_id} not found", error_code="EVALUATION_NOT_FOUND")
        return evaluation

    def get_or_create(self, cycle_id: str, employee_id: str, manager_id: str) -> ManagerEvaluation:
        self.require_cycle(cycle_id)
        existing = self.repos.manager_evaluations.find_by_employee_and_cycle(employee_id, cycle_id)
        if existing:
            return existing

        employee = self.repos.users.find_by_id(employee_id)
        if not employee:
            raise NotFoundError(f"Employee {employee_id} not found", error_code="EMPLOYEE_NOT_FOUND")

        evaluation = ManagerEvaluation.create(
            cycle_id=cycle_id,
            employee_id=employee_id,
            manager_id=manager_id,
            employee_level=employee.effective_level,
        )
        try:
            self.repos.manager_evaluations.save(evaluation)
            self.commit()
        except Exception:
            self.rollback()
            raise
        self.log_info(
            f"Created draft evaluation {evaluation.id} for employee {employee_id} "
            f"at level {evaluation.employee_level}"
        )
        return evaluation

    def update(
        self,
        evaluation_id: str,
        scores: Optional[Union[PillarScores, Mapping[str, Any]]] = None,
        performance_narrative: Optional[str] = None,
        strengths: Optional[str] = None,
        growth_areas: Optional[str] = None,
        development_plan: Optional[str] = None,
        proposed_level: Optional[Union[EngineerLevel, str]] = None,
    ) -> ManagerEvaluation:
        # Validate every field before the evaluation is touched.
        new_scores = PillarScores.from_mapping(scores) if scores is not None else None
        narratives = {
            name: Narrative(text)
            for name, text in (
                ("performance_narrative", performance_narrative),
                ("strengths", strengths),
                ("growth_areas", growth_areas),
                ("development_plan", development_plan),
            )
            if text is not None
        }
        new_level = EngineerLevel.from_string(proposed_level) if proposed_level is not None else None

        evaluation = self._get(evaluation_id)
        try:
            if new_scores is not None:
                evaluation.update_scores(new_scores)
            for name, narrative in narratives.items():
                getattr(evaluation, f"update_{name}")(narrative)
            if new_level is not None:
                evaluation.update_proposed_level(new_level)
            self.repos.manager_evaluations.save(evaluation)
            self.commit()
        except Exception:
            self.rollback()
            raise
        return evaluation

    def submit(self, evaluation_id: str) -> ManagerEvaluation:
        evaluation = self._get(evaluation_id)
        cycle = self.require_cycle(evaluation.cycle_id)

        if cycle.has_deadline_passed(CyclePhase.MANAGER_EVALUATION):
            self.log_warning(f"Submission of evaluation {evaluation_id} rejected: deadline passed")
            raise DeadlinePassedError(CyclePhase.MANAGER_EVALUATION.value)

        evaluation.submit()
        try:
            self.repos.manager_evaluations.save(evaluation)
            self.commit()
        except Exception:
            self.rollback()
            raise
        self.log_info(f"Manager evaluation {evaluation_id} submitted by {evaluation.manager_id}")
        return evaluation
