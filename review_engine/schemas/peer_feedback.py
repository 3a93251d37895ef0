from typing import List

from pydantic import BaseModel, ConfigDict

from review_engine.domain.pillars import PillarScores


class AggregatedPeerFeedback(BaseModel):
    """
    What a reviewee sees of their peer feedback: averaged scores and the
    collected comments. Reviewer ids are never included.
    """
    model_config = ConfigDict(frozen=True)

    cycle_id: str
    reviewee_id: str
    feedback_count: int
    average_scores: PillarScores
    strengths: List[str] = []
    growth_areas: List[str] = []
    general_comments: List[str] = []
