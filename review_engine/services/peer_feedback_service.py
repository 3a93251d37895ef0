import math
from typing import Any, List, Mapping, Optional, Union

from review_engine.core.exceptions import (
    DeadlinePassedError,
    DuplicateFeedbackError,
    NoPeerFeedbackError,
    ValidationError,
)
from review_engine.domain.peer_feedback import PeerFeedback
from review_engine.domain.pillars import Pillar, PillarScores
from review_engine.domain.review_cycle import CyclePhase
from review_engine.schemas.peer_feedback import AggregatedPeerFeedback
from review_engine.services.base import BaseService


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def average_scores(feedback: List[PeerFeedback]) -> PillarScores:
    """Per-pillar mean over all feedback, rounded half up to a whole score."""
    count = len(feedback)
    return PillarScores(**{
        pillar.value: _round_half_up(sum(item.scores.score_for(pillar) for item in feedback) / count)
        for pillar in Pillar
    })


class PeerFeedbackService(BaseService):
    """
    Peer feedback submission and the anonymized view given to the reviewee.
    """

    def submit(
        self,
        cycle_id: str,
        reviewer_id: str,
        reviewee_id: str,
        scores: Union[PillarScores, Mapping[str, Any]],
        strengths: Optional[str] = None,
        growth_areas: Optional[str] = None,
        general_comments: Optional[str] = None,
    ) -> PeerFeedback:
        cycle = self.require_cycle(cycle_id)

        if cycle.has_deadline_passed(CyclePhase.PEER_FEEDBACK):
            self.log_warning(f"Peer feedback from {reviewer_id} rejected: deadline passed")
            raise DeadlinePassedError(CyclePhase.PEER_FEEDBACK.value)

        if reviewer_id == reviewee_id:
            raise ValidationError("Cannot give peer feedback to yourself", error_code="SELF_FEEDBACK")

        if self.repos.peer_feedback.find_by_triple(cycle_id, reviewer_id, reviewee_id):
            raise DuplicateFeedbackError()

        feedback = PeerFeedback.create(
            cycle_id=cycle_id,
            reviewee_id=reviewee_id,
            reviewer_id=reviewer_id,
            scores=PillarScores.from_mapping(scores),
            strengths=strengths,
            growth_areas=growth_areas,
            general_comments=general_comments,
        )
        try:
            self.repos.peer_feedback.save(feedback)
            self.commit()
        except Exception:
            self.rollback()
            raise
        self.log_info(f"Peer feedback {feedback.id} submitted for user {reviewee_id} in cycle {cycle_id}")
        return feedback

    def get_aggregated_feedback(self, cycle_id: str, reviewee_id: str) -> AggregatedPeerFeedback:
        feedback = self.repos.peer_feedback.find_by_reviewee_and_cycle(reviewee_id, cycle_id)
        if not feedback:
            raise NoPeerFeedbackError(f"No peer feedback for user {reviewee_id} in cycle {cycle_id}")

        return AggregatedPeerFeedback(
            cycle_id=cycle_id,
            reviewee_id=reviewee_id,
            feedback_count=len(feedback),
            average_scores=average_scores(feedback),
            strengths=[f.strengths for f in feedback if f.strengths],
            growth_areas=[f.growth_areas for f in feedback if f.growth_areas],
            general_comments=[f.general_comments for f in feedback if f.general_comments],
        )
