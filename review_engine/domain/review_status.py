import enum


class ReviewStatus(str, enum.Enum):
    """
    Lifecycle tag shared by self-reviews and manager evaluations.

    DRAFT -> SUBMITTED -> CALIBRATED. CALIBRATED counts as submitted for
    every mutation guard.
    """
    DRAFT = "DRAFT"
    SUBMITTED = "SUBMITTED"
    CALIBRATED = "CALIBRATED"

    @property
    def is_submitted(self) -> bool:
        return self in (ReviewStatus.SUBMITTED, ReviewStatus.CALIBRATED)
