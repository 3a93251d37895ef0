import uuid
from datetime import datetime, timezone
from typing import Optional

from review_engine.domain.pillars import PillarScores


class PeerFeedback:
    """
    Feedback one colleague gives another. Submit-only: there is no draft
    state, the submission time is stamped at creation.

    The reviewer id is kept for deduplication but must never reach the
    reviewee; see PeerFeedbackService.get_aggregated_feedback.
    """

    def __init__(
        self,
        id: str,
        cycle_id: str,
        reviewee_id: str,
        reviewer_id: str,
        scores: PillarScores,
        submitted_at: datetime,
        strengths: Optional[str] = None,
        growth_areas: Optional[str] = None,
        general_comments: Optional[str] = None,
    ):
        self.id = id
        self.cycle_id = cycle_id
        self.reviewee_id = reviewee_id
        self.reviewer_id = reviewer_id
        self.scores = scores
        self.submitted_at = submitted_at
        self.strengths = strengths
        self.growth_areas = growth_areas
        self.general_comments = general_comments

    @classmethod
    def create(
        cls,
        cycle_id: str,
        reviewee_id: str,
        reviewer_id: str,
        scores: PillarScores,
        strengths: Optional[str] = None,
        growth_areas: Optional[str] = None,
        general_comments: Optional[str] = None,
        id: Optional[str] = None,
    ) -> "PeerFeedback":
        return cls(
            id=id or str(uuid.uuid4()),
            cycle_id=cycle_id,
            reviewee_id=reviewee_id,
            reviewer_id=reviewer_id,
            scores=scores,
            submitted_at=datetime.now(timezone.utc),
            strengths=_clean(strengths),
            growth_areas=_clean(growth_areas),
            general_comments=_clean(general_comments),
        )

    @property
    def is_anonymized(self) -> bool:
        return True

    def __repr__(self):
        return f"<PeerFeedback {self.id} reviewee={self.reviewee_id}>"


def _clean(text: Optional[str]) -> Optional[str]:
    if text is None:
        return None
    text = text.strip()
    return text or None
