from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from review_engine.domain.pillars import PillarScores
from review_engine.domain.weighted_score import BonusTier


class LockScoresResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    cycle_id: str
    locked_count: int
    locked_at: Optional[datetime] = None


class AdjustmentPreview(BaseModel):
    """The locked outcome next to what an adjustment request proposes."""
    model_config = ConfigDict(frozen=True)

    request_id: str
    employee_id: str
    current_scores: PillarScores
    proposed_scores: PillarScores
    current_weighted_score: float
    proposed_weighted_score: float
    current_bonus_tier: BonusTier
    proposed_bonus_tier: BonusTier

    @property
    def changes_tier(self) -> bool:
        return self.current_bonus_tier != self.proposed_bonus_tier
