import enum
import uuid
from datetime import datetime, timezone
from typing import Optional

from review_engine.core.exceptions import InvalidStateError, ValidationError
from review_engine.domain.pillars import PillarScores


class AdjustmentRequestStatus(str, enum.Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class ScoreAdjustmentRequest:
    """
    A manager's request to change an employee's scores after the cycle's
    Final Scores were locked. Reviewed exactly once: approved or rejected.
    The decision is recorded here; the locked Final Score itself stays
    as it is.
    """

    def __init__(
        self,
        id: str,
        cycle_id: str,
        employee_id: str,
        requester_id: str,
        reason: str,
        proposed_scores: PillarScores,
        requested_at: datetime,
        status: AdjustmentRequestStatus = AdjustmentRequestStatus.PENDING,
        reviewer_id: Optional[str] = None,
        reviewed_at: Optional[datetime] = None,
        review_notes: Optional[str] = None,
    ):
        self.id = id
        self.cycle_id = cycle_id
        self.employee_id = employee_id
        self.requester_id = requester_id
        self.reason = reason
        self.proposed_scores = proposed_scores
        self.requested_at = requested_at
        self._status = status
        self._reviewer_id = reviewer_id
        self._reviewed_at = reviewed_at
        self._review_notes = review_notes

    @classmethod
    def create(
        cls,
        cycle_id: str,
        employee_id: str,
        requester_id: str,
        reason: str,
        proposed_scores: PillarScores,
        id: Optional[str] = None,
    ) -> "ScoreAdjustmentRequest":
        reason = (reason or "").strip()
        if not reason:
            raise ValidationError("A reason is required for a score adjustment", error_code="REASON_REQUIRED")
        return cls(
            id=id or str(uuid.uuid4()),
            cycle_id=cycle_id,
            employee_id=employee_id,
            requester_id=requester_id,
            reason=reason,
            proposed_scores=proposed_scores,
            requested_at=datetime.now(timezone.utc),
        )

    def approve(self, reviewer_id: str, notes: Optional[str] = None) -> None:
        self._review(AdjustmentRequestStatus.APPROVED, reviewer_id, notes)

    def reject(self, reviewer_id: str, notes: Optional[str]) -> None:
        if not (notes or "").strip():
            raise ValidationError(
                "A rejection reason is required when rejecting a request",
                error_code="REJECTION_REASON_REQUIRED",
            )
        self._review(AdjustmentRequestStatus.REJECTED, reviewer_id, notes)

    def _review(self, status: AdjustmentRequestStatus, reviewer_id: str, notes: Optional[str]) -> None:
        if not self.is_pending:
            raise InvalidStateError("Score adjustment request has already been reviewed")
        self._status = status
        self._reviewer_id = reviewer_id
        self._reviewed_at = datetime.now(timezone.utc)
        self._review_notes = (notes or "").strip() or None

    @property
    def status(self) -> AdjustmentRequestStatus:
        return self._status

    @property
    def is_pending(self) -> bool:
        return self._status == AdjustmentRequestStatus.PENDING

    @property
    def reviewer_id(self) -> Optional[str]:
        return self._reviewer_id

    @property
    def reviewed_at(self) -> Optional[datetime]:
        return self._reviewed_at

    @property
    def review_notes(self) -> Optional[str]:
        return self._review_notes

    def __repr__(self):
        return f"<ScoreAdjustmentRequest {self.id} employee={self.employee_id} ({self._status.value})>"
