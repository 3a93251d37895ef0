# Models package
# Importing modules here ensures they are registered with SQLAlchemy Base
from . import (
    user, review_cycle, self_review, peer_feedback, peer_nomination,
    manager_evaluation, final_score, calibration_session, score_adjustment_request
)

# Explicit class exports for cleaner imports
from .user import User
from .review_cycle import ReviewCycle
from .self_review import SelfReview
from .peer_feedback import PeerFeedback
from .peer_nomination import PeerNomination
from .manager_evaluation import ManagerEvaluation, CalibrationAdjustment
from .final_score import FinalScore
from .calibration_session import CalibrationSession
from .score_adjustment_request import ScoreAdjustmentRequest

__all__ = [
    "User",
    "ReviewCycle",
    "SelfReview",
    "PeerFeedback",
    "PeerNomination",
    "ManagerEvaluation",
    "CalibrationAdjustment",
    "FinalScore",
    "CalibrationSession",
    "ScoreAdjustmentRequest",
]
