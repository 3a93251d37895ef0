import uuid
from datetime import datetime, timezone
from typing import Optional

from review_engine.core.exceptions import AlreadySubmittedError
from review_engine.domain.narrative import Narrative
from review_engine.domain.pillars import PillarScores
from review_engine.domain.review_status import ReviewStatus


class SelfReview:
    """
    An employee's own assessment for one review cycle.

    Scores and narrative are editable while the review is a DRAFT;
    submission is one-way.
    """

    def __init__(
        self,
        id: str,
        cycle_id: str,
        user_id: str,
        scores: PillarScores,
        narrative: Narrative,
        status: ReviewStatus = ReviewStatus.DRAFT,
        submitted_at: Optional[datetime] = None,
    ):
        self.id = id
        self.cycle_id = cycle_id
        self.user_id = user_id
        self._scores = scores
        self._narrative = narrative
        self._status = status
        self._submitted_at = submitted_at

    @classmethod
    def create(
        cls,
        cycle_id: str,
        user_id: str,
        scores: Optional[PillarScores] = None,
        narrative: Optional[Narrative] = None,
        id: Optional[str] = None,
    ) -> "SelfReview":
        return cls(
            id=id or str(uuid.uuid4()),
            cycle_id=cycle_id,
            user_id=user_id,
            scores=scores or PillarScores.zeros(),
            narrative=narrative or Narrative.empty(),
        )

    def update_scores(self, scores: PillarScores) -> None:
        if self.is_submitted:
            raise AlreadySubmittedError("Cannot update scores after submission")
        self._scores = scores

    def update_narrative(self, narrative: Narrative) -> None:
        if self.is_submitted:
            raise AlreadySubmittedError("Cannot update narrative after submission")
        self._narrative = narrative

    def submit(self) -> None:
        if self.is_submitted:
            raise AlreadySubmittedError("Self-review has already been submitted")
        self._status = ReviewStatus.SUBMITTED
        self._submitted_at = datetime.now(timezone.utc)

    @property
    def scores(self) -> PillarScores:
        return self._scores

    @property
    def narrative(self) -> Narrative:
        return self._narrative

    @property
    def status(self) -> ReviewStatus:
        return self._status

    @property
    def submitted_at(self) -> Optional[datetime]:
        return self._submitted_at

    @property
    def is_submitted(self) -> bool:
        return self._status.is_submitted

    def __repr__(self):
        return f"<SelfReview {self.id} user={self.user_id} ({self._status.value})>"
