from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict

from review_engine.domain.peer_nomination import NominationStatus


class NominationView(BaseModel):
    """A nomination as the nominator sees it."""
    model_config = ConfigDict(frozen=True)

    nomination_id: str
    nominee_id: str
    nominee_name: str
    status: NominationStatus
    nominated_at: datetime


class FeedbackRequestView(BaseModel):
    """A nomination as the nominee sees it: someone asking them for feedback."""
    model_config = ConfigDict(frozen=True)

    nomination_id: str
    nominator_id: str
    nominator_name: str
    status: NominationStatus
    nominated_at: datetime
    feedback_submitted: bool


class NominationList(BaseModel):
    model_config = ConfigDict(frozen=True)

    cycle_id: str
    nominations: List[NominationView] = []

    @property
    def total(self) -> int:
        return len(self.nominations)


class FeedbackRequestList(BaseModel):
    model_config = ConfigDict(frozen=True)

    cycle_id: str
    requests: List[FeedbackRequestView] = []

    @property
    def total(self) -> int:
        return len(self.requests)

    @property
    def outstanding(self) -> List[FeedbackRequestView]:
        return [r for r in self.requests if not r.feedback_submitted]
