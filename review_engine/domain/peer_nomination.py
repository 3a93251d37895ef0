import enum
import uuid
from datetime import datetime, timezone
from typing import Optional

from review_engine.core.exceptions import InvalidStateError, ValidationError

MIN_NOMINEES = 3
MAX_NOMINEES = 5


class NominationStatus(str, enum.Enum):
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    DECLINED = "DECLINED"


class PeerNomination:
    """
    A request from an employee (the nominator) asking a colleague (the
    nominee) to give them peer feedback in a cycle.
    """

    def __init__(
        self,
        id: str,
        cycle_id: str,
        nominator_id: str,
        nominee_id: str,
        nominated_at: datetime,
        status: NominationStatus = NominationStatus.PENDING,
        decline_reason: Optional[str] = None,
        responded_at: Optional[datetime] = None,
    ):
        self.id = id
        self.cycle_id = cycle_id
        self.nominator_id = nominator_id
        self.nominee_id = nominee_id
        self.nominated_at = nominated_at
        self.status = status
        self.decline_reason = decline_reason
        self.responded_at = responded_at

    @classmethod
    def create(cls, cycle_id: str, nominator_id: str, nominee_id: str, id: Optional[str] = None) -> "PeerNomination":
        if nominator_id == nominee_id:
            raise ValidationError("Cannot nominate yourself for peer feedback", error_code="SELF_NOMINATION")
        return cls(
            id=id or str(uuid.uuid4()),
            cycle_id=cycle_id,
            nominator_id=nominator_id,
            nominee_id=nominee_id,
            nominated_at=datetime.now(timezone.utc),
        )

    def accept(self) -> None:
        self._ensure_pending()
        self.status = NominationStatus.ACCEPTED
        self.responded_at = datetime.now(timezone.utc)

    def decline(self, reason: str) -> None:
        self._ensure_pending()
        reason = (reason or "").strip()
        if not reason:
            raise ValidationError("A reason is required to decline a nomination", error_code="DECLINE_REASON_REQUIRED")
        self.status = NominationStatus.DECLINED
        self.decline_reason = reason
        self.responded_at = datetime.now(timezone.utc)

    def _ensure_pending(self) -> None:
        if self.status != NominationStatus.PENDING:
            raise InvalidStateError(f"Nomination has already been {self.status.value.lower()}")

    @property
    def is_pending(self) -> bool:
        return self.status == NominationStatus.PENDING

    def __repr__(self):
        return f"<PeerNomination {self.nominator_id} -> {self.nominee_id} ({self.status.value})>"
