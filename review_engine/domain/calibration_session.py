import enum
import uuid
from datetime import datetime, timezone
from typing import Iterable, Optional, Tuple

from review_engine.core.exceptions import InvalidStateError


class SessionStatus(str, enum.Enum):
    SCHEDULED = "SCHEDULED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


class CalibrationSession:
    """A committee meeting in which evaluations of one cycle are calibrated."""

    def __init__(
        self,
        id: str,
        cycle_id: str,
        name: str,
        facilitator_id: str,
        scheduled_at: datetime,
        participant_ids: Iterable[str] = (),
        status: SessionStatus = SessionStatus.SCHEDULED,
        department: Optional[str] = None,
        notes: str = "",
        completed_at: Optional[datetime] = None,
    ):
        self.id = id
        self.cycle_id = cycle_id
        self.name = name
        self.facilitator_id = facilitator_id
        self.scheduled_at = scheduled_at
        self.participant_ids: Tuple[str, ...] = tuple(participant_ids)
        self.status = status
        self.department = department
        self.notes = notes
        self.completed_at = completed_at

    @classmethod
    def create(cls, cycle_id: str, name: str, facilitator_id: str, scheduled_at: datetime,
               participant_ids: Iterable[str] = (), department: Optional[str] = None,
               id: Optional[str] = None) -> "CalibrationSession":
        return cls(
            id=id or str(uuid.uuid4()),
            cycle_id=cycle_id,
            name=name.strip(),
            facilitator_id=facilitator_id,
            scheduled_at=scheduled_at,
            participant_ids=dict.fromkeys(participant_ids),
            department=department,
        )

    def record_note(self, notes: str) -> None:
        if self.is_completed:
            raise InvalidStateError("Cannot record notes on a completed calibration session")
        self.notes = notes.strip()
        if self.status == SessionStatus.SCHEDULED:
            self.status = SessionStatus.IN_PROGRESS

    def complete(self) -> None:
        if self.is_completed:
            raise InvalidStateError("Calibration session is already completed")
        self.status = SessionStatus.COMPLETED
        self.completed_at = datetime.now(timezone.utc)

    @property
    def is_completed(self) -> bool:
        return self.status == SessionStatus.COMPLETED

    def __repr__(self):
        return f"<CalibrationSession {self.name} ({self.status.value})>"
