from .calibration import CalibrationAdjustmentResult, CalibrationDashboard, DashboardEntry
from .final_score import AdjustmentPreview, LockScoresResult
from .peer_feedback import AggregatedPeerFeedback
from .peer_nomination import FeedbackRequestList, FeedbackRequestView, NominationList, NominationView

__all__ = [
    "CalibrationAdjustmentResult",
    "CalibrationDashboard",
    "DashboardEntry",
    "AdjustmentPreview",
    "LockScoresResult",
    "AggregatedPeerFeedback",
    "FeedbackRequestList",
    "FeedbackRequestView",
    "NominationList",
    "NominationView",
]
