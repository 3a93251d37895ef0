from .base import (
    CalibrationSessionRepository,
    FinalScoreRepository,
    ManagerEvaluationRepository,
    PeerFeedbackRepository,
    PeerNominationRepository,
    Repositories,
    ReviewCycleRepository,
    ScoreAdjustmentRequestRepository,
    SelfReviewRepository,
    UserRepository,
)
from .sql import SqlRepositories

__all__ = [
    "CalibrationSessionRepository",
    "FinalScoreRepository",
    "ManagerEvaluationRepository",
    "PeerFeedbackRepository",
    "PeerNominationRepository",
    "Repositories",
    "ReviewCycleRepository",
    "ScoreAdjustmentRequestRepository",
    "SelfReviewRepository",
    "UserRepository",
    "SqlRepositories",
]
