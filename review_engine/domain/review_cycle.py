import enum
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from review_engine.core.exceptions import InvalidDeadlinesError, InvalidStateError


class CycleStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    ACTIVE = "ACTIVE"
    CALIBRATION = "CALIBRATION"
    COMPLETED = "COMPLETED"


class CyclePhase(str, enum.Enum):
    SELF_REVIEW = "self_review"
    PEER_FEEDBACK = "peer_feedback"
    MANAGER_EVALUATION = "manager_evaluation"
    CALIBRATION = "calibration"
    FEEDBACK_DELIVERY = "feedback_delivery"


def _as_utc(value: datetime) -> datetime:
    # Naive datetimes (e.g. read back from SQLite) are treated as UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


@dataclass(frozen=True)
class CycleDeadlines:
    """Phase deadlines; each must be strictly later than the one before."""
    self_review: datetime
    peer_feedback: datetime
    manager_evaluation: datetime
    calibration: datetime
    feedback_delivery: datetime

    def __post_init__(self):
        ordered = [(phase, self.deadline_for(phase)) for phase in CyclePhase]
        for (prev_phase, prev), (phase, current) in zip(ordered, ordered[1:]):
            if _as_utc(current) <= _as_utc(prev):
                raise InvalidDeadlinesError(
                    f"{phase.value} deadline must be after {prev_phase.value} deadline"
                )

    def deadline_for(self, phase: CyclePhase) -> datetime:
        return getattr(self, CyclePhase(phase).value)

    def has_passed(self, phase: CyclePhase, now: Optional[datetime] = None) -> bool:
        now = now or datetime.now(timezone.utc)
        return _as_utc(now) > _as_utc(self.deadline_for(phase))


class ReviewCycle:
    """
    A review period. DRAFT -> ACTIVE -> CALIBRATION -> COMPLETED.
    """

    def __init__(
        self,
        id: str,
        name: str,
        year: int,
        deadlines: CycleDeadlines,
        status: CycleStatus = CycleStatus.DRAFT,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ):
        self.id = id
        self.name = name
        self.year = year
        self.deadlines = deadlines
        self._status = status
        self.start_date = start_date or datetime.now(timezone.utc)
        self.end_date = end_date

    @classmethod
    def create(cls, name: str, year: int, deadlines: CycleDeadlines,
               start_date: Optional[datetime] = None, id: Optional[str] = None) -> "ReviewCycle":
        return cls(
            id=id or str(uuid.uuid4()),
            name=name,
            year=year,
            deadlines=deadlines,
            start_date=start_date,
        )

    def _transition(self, expected: CycleStatus, target: CycleStatus) -> None:
        if self._status != expected:
            raise InvalidStateError(
                f"Cannot move cycle to {target.value} from {self._status.value}; must be {expected.value}"
            )
        self._status = target

    def start(self) -> None:
        self._transition(CycleStatus.DRAFT, CycleStatus.ACTIVE)

    def enter_calibration(self) -> None:
        self._transition(CycleStatus.ACTIVE, CycleStatus.CALIBRATION)

    def complete(self) -> None:
        self._transition(CycleStatus.CALIBRATION, CycleStatus.COMPLETED)
        self.end_date = datetime.now(timezone.utc)

    def has_deadline_passed(self, phase: CyclePhase, now: Optional[datetime] = None) -> bool:
        return self.deadlines.has_passed(phase, now)

    @property
    def status(self) -> CycleStatus:
        return self._status

    @property
    def is_active(self) -> bool:
        return self._status == CycleStatus.ACTIVE

    @property
    def is_completed(self) -> bool:
        return self._status == CycleStatus.COMPLETED

    def __repr__(self):
        return f"<ReviewCycle {self.name} ({self._status.value})>"
