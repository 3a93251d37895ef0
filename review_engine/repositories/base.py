"""
Repository contracts consumed by the review services.

Each repository offers find-by-id, the composite finders its workflows
need, ``save`` (create-or-replace by id) and ``delete`` (logical). The
services depend only on these interfaces; storage is pluggable.
"""
from abc import ABC, abstractmethod
from typing import List, Optional

from review_engine.domain.calibration_session import CalibrationSession
from review_engine.domain.employee import Employee
from review_engine.domain.final_score import FinalScore
from review_engine.domain.manager_evaluation import ManagerEvaluation
from review_engine.domain.peer_feedback import PeerFeedback
from review_engine.domain.peer_nomination import PeerNomination
from review_engine.domain.review_cycle import ReviewCycle
from review_engine.domain.score_adjustment_request import ScoreAdjustmentRequest
from review_engine.domain.self_review import SelfReview


class ReviewCycleRepository(ABC):
    @abstractmethod
    def find_by_id(self, cycle_id: str) -> Optional[ReviewCycle]: ...

    @abstractmethod
    def save(self, cycle: ReviewCycle) -> ReviewCycle: ...

    @abstractmethod
    def delete(self, cycle_id: str) -> None: ...


class SelfReviewRepository(ABC):
    @abstractmethod
    def find_by_id(self, review_id: str) -> Optional[SelfReview]: ...

    @abstractmethod
    def find_by_user_and_cycle(self, user_id: str, cycle_id: str) -> Optional[SelfReview]: ...

    @abstractmethod
    def save(self, review: SelfReview) -> SelfReview: ...

    @abstractmethod
    def delete(self, review_id: str) -> None: ...


class PeerFeedbackRepository(ABC):
    @abstractmethod
    def find_by_id(self, feedback_id: str) -> Optional[PeerFeedback]: ...

    @abstractmethod
    def find_by_reviewee_and_cycle(self, reviewee_id: str, cycle_id: str) -> List[PeerFeedback]: ...

    @abstractmethod
    def find_by_reviewer_and_cycle(self, reviewer_id: str, cycle_id: str) -> List[PeerFeedback]: ...

    @abstractmethod
    def find_by_triple(self, cycle_id: str, reviewer_id: str, reviewee_id: str) -> Optional[PeerFeedback]: ...

    @abstractmethod
    def save(self, feedback: PeerFeedback) -> PeerFeedback: ...

    @abstractmethod
    def delete(self, feedback_id: str) -> None: ...


class ManagerEvaluationRepository(ABC):
    @abstractmethod
    def find_by_id(self, evaluation_id: str) -> Optional[ManagerEvaluation]: ...

    @abstractmethod
    def find_by_employee_and_cycle(self, employee_id: str, cycle_id: str) -> Optional[ManagerEvaluation]: ...

    @abstractmethod
    def find_by_cycle(self, cycle_id: str) -> List[ManagerEvaluation]: ...

    @abstractmethod
    def save(self, evaluation: ManagerEvaluation) -> ManagerEvaluation: ...

    @abstractmethod
    def delete(self, evaluation_id: str) -> None: ...


class FinalScoreRepository(ABC):
    @abstractmethod
    def find_by_id(self, score_id: str) -> Optional[FinalScore]: ...

    @abstractmethod
    def find_by_user_and_cycle(self, user_id: str, cycle_id: str) -> Optional[FinalScore]: ...

    @abstractmethod
    def find_by_cycle(self, cycle_id: str) -> List[FinalScore]: ...

    @abstractmethod
    def save(self, score: FinalScore) -> FinalScore: ...

    @abstractmethod
    def delete(self, score_id: str) -> None: ...


class CalibrationSessionRepository(ABC):
    @abstractmethod
    def find_by_id(self, session_id: str) -> Optional[CalibrationSession]: ...

    @abstractmethod
    def find_by_cycle(self, cycle_id: str) -> List[CalibrationSession]: ...

    @abstractmethod
    def save(self, session: CalibrationSession) -> CalibrationSession: ...

    @abstractmethod
    def delete(self, session_id: str) -> None: ...


class PeerNominationRepository(ABC):
    @abstractmethod
    def find_by_id(self, nomination_id: str) -> Optional[PeerNomination]: ...

    @abstractmethod
    def find_by_nominator_and_cycle(self, nominator_id: str, cycle_id: str) -> List[PeerNomination]: ...

    @abstractmethod
    def find_by_nominee_and_cycle(self, nominee_id: str, cycle_id: str) -> List[PeerNomination]: ...

    @abstractmethod
    def save(self, nomination: PeerNomination) -> PeerNomination: ...

    @abstractmethod
    def delete(self, nomination_id: str) -> None: ...


class ScoreAdjustmentRequestRepository(ABC):
    @abstractmethod
    def find_by_id(self, request_id: str) -> Optional[ScoreAdjustmentRequest]: ...

    @abstractmethod
    def find_pending(self) -> List[ScoreAdjustmentRequest]: ...

    @abstractmethod
    def find_by_employee_and_cycle(self, employee_id: str, cycle_id: str) -> List[ScoreAdjustmentRequest]: ...

    @abstractmethod
    def save(self, request: ScoreAdjustmentRequest) -> ScoreAdjustmentRequest: ...

    @abstractmethod
    def delete(self, request_id: str) -> None: ...


class UserRepository(ABC):
    @abstractmethod
    def find_by_id(self, user_id: str) -> Optional[Employee]: ...

    @abstractmethod
    def save(self, employee: Employee) -> Employee: ...

    @abstractmethod
    def delete(self, user_id: str) -> None: ...


class Repositories(ABC):
    """
    The set of repositories one unit of work runs against.

    Services call ``commit`` once a workflow has fully succeeded and
    ``rollback`` when any step fails.
    """
    review_cycles: ReviewCycleRepository
    self_reviews: SelfReviewRepository
    peer_feedback: PeerFeedbackRepository
    peer_nominations: PeerNominationRepository
    manager_evaluations: ManagerEvaluationRepository
    final_scores: FinalScoreRepository
    calibration_sessions: CalibrationSessionRepository
    score_adjustment_requests: ScoreAdjustmentRequestRepository
    users: UserRepository

    @abstractmethod
    def commit(self) -> None: ...

    @abstractmethod
    def rollback(self) -> None: ...
