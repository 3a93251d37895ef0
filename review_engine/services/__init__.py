from .base import BaseService
from .calibration_service import CalibrationService
from .final_score_service import FinalScoreService, calculate_final_score
from .manager_evaluation_service import ManagerEvaluationService
from .peer_feedback_service import PeerFeedbackService
from .peer_nomination_service import PeerNominationService
from .review_cycle_service import ReviewCycleService
from .score_adjustment_service import ScoreAdjustmentService
from .score_calculation import (
    WEIGHTS_BY_LEVEL,
    calculate_weighted_score,
    get_all_weights,
    validate_weight_tables,
)
from .self_review_service import SelfReviewService

__all__ = [
    "BaseService",
    "CalibrationService",
    "FinalScoreService",
    "calculate_final_score",
    "ManagerEvaluationService",
    "PeerFeedbackService",
    "PeerNominationService",
    "ReviewCycleService",
    "ScoreAdjustmentService",
    "WEIGHTS_BY_LEVEL",
    "calculate_weighted_score",
    "get_all_weights",
    "validate_weight_tables",
    "SelfReviewService",
]
