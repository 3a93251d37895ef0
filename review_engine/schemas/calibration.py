from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict

from review_engine.domain.levels import EngineerLevel
from review_engine.domain.pillars import PillarScores
from review_engine.domain.review_status import ReviewStatus
from review_engine.domain.weighted_score import BonusTier


class CalibrationAdjustmentResult(BaseModel):
    """Outcome of one calibration adjustment, before and after."""
    model_config = ConfigDict(frozen=True)

    adjustment_id: str
    evaluation_id: str
    original_scores: PillarScores
    adjusted_scores: PillarScores
    old_weighted_score: float
    new_weighted_score: float
    old_bonus_tier: BonusTier
    new_bonus_tier: BonusTier
    justification: str
    adjusted_at: datetime
    final_score_updated: bool = False


class DashboardEntry(BaseModel):
    evaluation_id: str
    employee_id: str
    employee_name: str = ""
    department: Optional[str] = None
    level: EngineerLevel
    status: ReviewStatus
    scores: PillarScores
    weighted_score: float
    bonus_tier: BonusTier


class CalibrationDashboard(BaseModel):
    cycle_id: str
    department: Optional[str] = None
    total_evaluations: int = 0
    tier_counts: Dict[BonusTier, int] = {}
    department_counts: Dict[str, Dict[BonusTier, int]] = {}
    entries: List[DashboardEntry] = []
