# Domain package: value objects and entities of the review lifecycle.
# Nothing in here imports SQLAlchemy; storage lives in review_engine.models / repositories.
from .pillars import Pillar, PillarScores
from .levels import EngineerLevel, DEFAULT_LEVEL
from .weighted_score import BonusTier, WeightedScore
from .narrative import Narrative
from .review_status import ReviewStatus
from .self_review import SelfReview
from .peer_feedback import PeerFeedback
from .manager_evaluation import CalibrationAdjustment, ManagerEvaluation
from .final_score import FinalScore
from .review_cycle import CycleDeadlines, CyclePhase, CycleStatus, ReviewCycle
from .calibration_session import CalibrationSession, SessionStatus
from .employee import Employee
from .peer_nomination import MAX_NOMINEES, MIN_NOMINEES, NominationStatus, PeerNomination
from .score_adjustment_request import AdjustmentRequestStatus, ScoreAdjustmentRequest

__all__ = [
    "Pillar",
    "PillarScores",
    "EngineerLevel",
    "DEFAULT_LEVEL",
    "BonusTier",
    "WeightedScore",
    "Narrative",
    "ReviewStatus",
    "SelfReview",
    "PeerFeedback",
    "CalibrationAdjustment",
    "ManagerEvaluation",
    "FinalScore",
    "CycleDeadlines",
    "CyclePhase",
    "CycleStatus",
    "ReviewCycle",
    "CalibrationSession",
    "SessionStatus",
    "Employee",
    "MAX_NOMINEES",
    "MIN_NOMINEES",
    "NominationStatus",
    "PeerNomination",
    "AdjustmentRequestStatus",
    "ScoreAdjustmentRequest",
]
