from datetime import datetime, timezone
from typing import List, Optional

from review_engine.core.exceptions import FinalScoreLockedError, NotFoundError
from review_engine.domain.final_score import FinalScore
from review_engine.domain.manager_evaluation import ManagerEvaluation
from review_engine.schemas.final_score import LockScoresResult
from review_engine.services.base import BaseService
from review_engine.services.score_calculation import calculate_weighted_score


def calculate_final_score(evaluation: ManagerEvaluation, existing: Optional[FinalScore] = None) -> FinalScore:
    """
    Derive the Final Score for an evaluation.

    The level is the evaluation's proposed level, else the level captured
    when the evaluation was created, else MID. When ``existing`` is given
    its id and delivery fields carry over, so saving the result replaces
    the stored record.
    """
    if existing is not None and existing.is_locked:
        raise FinalScoreLockedError(
            f"Final score for user {existing.user_id} in cycle {existing.cycle_id} is locked"
        )

    level = evaluation.final_level
    weighted = calculate_weighted_score(evaluation.scores, level)
    if existing is None:
        return FinalScore.create(
            cycle_id=evaluation.cycle_id,
            user_id=evaluation.employee_id,
            pillar_scores=evaluation.scores,
            weighted_score=weighted,
            final_level=level,
        )
    return FinalScore(
        id=existing.id,
        cycle_id=evaluation.cycle_id,
        user_id=evaluation.employee_id,
        pillar_scores=evaluation.scores,
        weighted_score=weighted,
        final_level=level,
        feedback_delivered_at=existing.feedback_delivered_at,
        delivered_by=existing.delivered_by,
        feedback_notes=existing.feedback_notes,
    )


class FinalScoreService(BaseService):
    """
    Computes, recomputes and locks Final Scores.
    """

    def _recalculate(self, evaluation: ManagerEvaluation) -> FinalScore:
        existing = self.repos.final_scores.find_by_user_and_cycle(evaluation.employee_id, evaluation.cycle_id)
        score = calculate_final_score(evaluation, existing)
        return self.repos.final_scores.save(score)

    def recalculate_for_evaluation(self, evaluation: ManagerEvaluation) -> FinalScore:
        try:
            score = self._recalculate(evaluation)
            self.commit()
        except Exception:
            self.rollback()
            raise
        self.log_info(
            f"Final score for user {score.user_id} in cycle {score.cycle_id}: "
            f"{score.weighted_score.value} ({score.bonus_tier.value})"
        )
        return score

    def calculate_final_scores_for_cycle(self, cycle_id: str) -> List[FinalScore]:
        """
        Recompute one Final Score per manager evaluation of the cycle.

        Runs sequentially and all-or-nothing: the first failure rolls the
        batch back and propagates. Reruns overwrite earlier results.
        """
        self.require_cycle(cycle_id)
        evaluations = self.repos.manager_evaluations.find_by_cycle(cycle_id)
        self.log_info(f"Calculating final scores for cycle {cycle_id} ({len(evaluations)} evaluations)")

        scores: List[FinalScore] = []
        try:
            for evaluation in evaluations:
                scores.append(self._recalculate(evaluation))
            self.commit()
        except Exception as e:
            self.rollback()
            self.log_error(f"Final score batch for cycle {cycle_id} halted after {len(scores)} scores: {e}")
            raise

        self.log_info(f"Calculated {len(scores)} final scores for cycle {cycle_id}")
        return scores

    def lock_scores(self, cycle_id: str) -> LockScoresResult:
        """Lock every unlocked Final Score of the cycle with one shared timestamp."""
        self.require_cycle(cycle_id)
        locked_at = datetime.now(timezone.utc)
        locked_count = 0
        try:
            for score in self.repos.final_scores.find_by_cycle(cycle_id):
                if score.lock(locked_at):
                    self.repos.final_scores.save(score)
                    locked_count += 1
            self.commit()
        except Exception:
            self.rollback()
            raise

        self.log_info(f"Locked {locked_count} final scores for cycle {cycle_id}")
        return LockScoresResult(cycle_id=cycle_id, locked_count=locked_count, locked_at=locked_at)

    def get_final_score(self, cycle_id: str, user_id: str) -> FinalScore:
        score = self.repos.final_scores.find_by_user_and_cycle(user_id, cycle_id)
        if not score:
            raise NotFoundError(
                f"Final score not found for user {user_id} in cycle {cycle_id}",
                error_code="FINAL_SCORE_NOT_FOUND",
            )
        return score

    def mark_feedback_delivered(
        self, cycle_id: str, user_id: str, delivered_by: str, notes: Optional[str] = None
    ) -> FinalScore:
        """Record that the outcome was discussed with the employee. Allowed after lock."""
        score = self.get_final_score(cycle_id, user_id)
        score.mark_feedback_delivered(delivered_by, notes)
        try:
            self.repos.final_scores.save(score)
            self.commit()
        except Exception:
            self.rollback()
            raise
        self.log_info(f"Feedback delivered to user {user_id} for cycle {cycle_id} by {delivered_by}")
        return score
