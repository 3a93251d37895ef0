import uuid
from datetime import datetime, timezone
from typing import Optional

from review_engine.core.exceptions import FinalScoreLockedError
from review_engine.domain.levels import EngineerLevel
from review_engine.domain.pillars import PillarScores
from review_engine.domain.weighted_score import BonusTier, WeightedScore


class FinalScore:
    """
    The outcome of a cycle for one employee.

    Once locked, scores and level are frozen; only the feedback-delivery
    fields may still change.
    """

    def __init__(
        self,
        id: str,
        cycle_id: str,
        user_id: str,
        pillar_scores: PillarScores,
        weighted_score: WeightedScore,
        final_level: EngineerLevel,
        calculated_at: Optional[datetime] = None,
        locked: bool = False,
        locked_at: Optional[datetime] = None,
        feedback_delivered_at: Optional[datetime] = None,
        delivered_by: Optional[str] = None,
        feedback_notes: Optional[str] = None,
    ):
        self.id = id
        self.cycle_id = cycle_id
        self.user_id = user_id
        self._pillar_scores = pillar_scores
        self._weighted_score = weighted_score
        self._final_level = final_level
        self._calculated_at = calculated_at or datetime.now(timezone.utc)
        self._locked = locked
        self._locked_at = locked_at
        self.feedback_delivered_at = feedback_delivered_at
        self.delivered_by = delivered_by
        self.feedback_notes = feedback_notes

    @classmethod
    def create(
        cls,
        cycle_id: str,
        user_id: str,
        pillar_scores: PillarScores,
        weighted_score: WeightedScore,
        final_level: EngineerLevel,
        id: Optional[str] = None,
    ) -> "FinalScore":
        return cls(
            id=id or str(uuid.uuid4()),
            cycle_id=cycle_id,
            user_id=user_id,
            pillar_scores=pillar_scores,
            weighted_score=weighted_score,
            final_level=final_level,
        )

    def update_scores(self, pillar_scores: PillarScores, weighted_score: WeightedScore, final_level: EngineerLevel) -> None:
        if self._locked:
            raise FinalScoreLockedError("Cannot update scores when final score is locked")
        self._pillar_scores = pillar_scores
        self._weighted_score = weighted_score
        self._final_level = final_level
        self._calculated_at = datetime.now(timezone.utc)

    def lock(self, locked_at: Optional[datetime] = None) -> bool:
        """Lock the score. Returns False when it was already locked."""
        if self._locked:
            return False
        self._locked = True
        self._locked_at = locked_at or datetime.now(timezone.utc)
        return True

    def mark_feedback_delivered(self, delivered_by: str, feedback_notes: Optional[str] = None) -> None:
        self.feedback_delivered_at = datetime.now(timezone.utc)
        self.delivered_by = delivered_by
        if feedback_notes:
            self.feedback_notes = feedback_notes.strip()

    @property
    def pillar_scores(self) -> PillarScores:
        return self._pillar_scores

    @property
    def weighted_score(self) -> WeightedScore:
        return self._weighted_score

    @property
    def percentage(self) -> float:
        return self._weighted_score.percentage

    @property
    def bonus_tier(self) -> BonusTier:
        return self._weighted_score.bonus_tier

    @property
    def final_level(self) -> EngineerLevel:
        return self._final_level

    @property
    def calculated_at(self) -> datetime:
        return self._calculated_at

    @property
    def is_locked(self) -> bool:
        return self._locked

    @property
    def locked_at(self) -> Optional[datetime]:
        return self._locked_at

    @property
    def feedback_delivered(self) -> bool:
        return self.feedback_delivered_at is not None

    def __repr__(self):
        return f"<FinalScore {self.id} user={self.user_id} {self._weighted_score.value} ({self.bonus_tier.value})>"
