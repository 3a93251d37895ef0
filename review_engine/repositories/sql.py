"""
SQLAlchemy implementations of the repository contracts.

All repositories of one ``SqlRepositories`` share a single ``Session``, so
one ``commit()`` (or ``rollback()``) covers every write of a workflow.
Deletion is logical: rows get ``deleted_at`` stamped and disappear from
every finder.
"""
import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional

from sqlalchemy.orm import Session

from review_engine import models
from review_engine.domain.calibration_session import CalibrationSession
from review_engine.domain.employee import Employee
from review_engine.domain.final_score import FinalScore
from review_engine.domain.manager_evaluation import ManagerEvaluation
from review_engine.domain.peer_feedback import PeerFeedback
from review_engine.domain.peer_nomination import PeerNomination
from review_engine.domain.review_cycle import ReviewCycle
from review_engine.domain.score_adjustment_request import AdjustmentRequestStatus, ScoreAdjustmentRequest
from review_engine.domain.self_review import SelfReview
from review_engine.repositories import mappers
from review_engine.repositories.base import (
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

logger = logging.getLogger(__name__)


class _SqlRepository:
    """Shared plumbing: live-row queries, upsert by id and soft delete."""
    model = None
    to_entity: Callable = None
    apply_entity: Callable = None

    def __init__(self, db: Session):
        self.db = db

    def _query(self):
        return self.db.query(self.model).filter(self.model.deleted_at.is_(None))

    def _one(self, *criteria):
        row = self._query().filter(*criteria).first()
        return type(self).to_entity(row) if row else None

    def _many(self, *criteria, order_by=None) -> list:
        query = self._query().filter(*criteria)
        if order_by is not None:
            query = query.order_by(order_by)
        return [type(self).to_entity(row) for row in query.all()]

    def find_by_id(self, entity_id: str):
        return self._one(self.model.id == entity_id)

    def save(self, entity):
        row = self.db.get(self.model, entity.id)
        if row is None:
            row = self.model()
            self.db.add(row)
        type(self).apply_entity(row, entity)
        self.db.flush()
        return entity

    def delete(self, entity_id: str) -> None:
        row = self.db.get(self.model, entity_id)
        if row is None or row.deleted_at is not None:
            return
        row.deleted_at = datetime.now(timezone.utc)
        self.db.flush()
        logger.info(f"Soft-deleted {self.model.__tablename__} row {entity_id}")


class SqlReviewCycleRepository(_SqlRepository, ReviewCycleRepository):
    model = models.ReviewCycle
    to_entity = staticmethod(mappers.to_review_cycle)
    apply_entity = staticmethod(mappers.apply_review_cycle)

    def find_by_id(self, cycle_id: str) -> Optional[ReviewCycle]:
        return super().find_by_id(cycle_id)

    def save(self, cycle: ReviewCycle) -> ReviewCycle:
        return super().save(cycle)

    def delete(self, cycle_id: str) -> None:
        super().delete(cycle_id)


class SqlSelfReviewRepository(_SqlRepository, SelfReviewRepository):
    model = models.SelfReview
    to_entity = staticmethod(mappers.to_self_review)
    apply_entity = staticmethod(mappers.apply_self_review)

    def find_by_id(self, review_id: str) -> Optional[SelfReview]:
        return super().find_by_id(review_id)

    def find_by_user_and_cycle(self, user_id: str, cycle_id: str) -> Optional[SelfReview]:
        return self._one(
            models.SelfReview.user_id == user_id,
            models.SelfReview.cycle_id == cycle_id,
        )

    def save(self, review: SelfReview) -> SelfReview:
        return super().save(review)

    def delete(self, review_id: str) -> None:
        super().delete(review_id)


class SqlPeerFeedbackRepository(_SqlRepository, PeerFeedbackRepository):
    model = models.PeerFeedback
    to_entity = staticmethod(mappers.to_peer_feedback)
    apply_entity = staticmethod(mappers.apply_peer_feedback)

    def find_by_id(self, feedback_id: str) -> Optional[PeerFeedback]:
        return super().find_by_id(feedback_id)

    def find_by_reviewee_and_cycle(self, reviewee_id: str, cycle_id: str) -> List[PeerFeedback]:
        return self._many(
            models.PeerFeedback.reviewee_id == reviewee_id,
            models.PeerFeedback.cycle_id == cycle_id,
            order_by=models.PeerFeedback.submitted_at,
        )

    def find_by_reviewer_and_cycle(self, reviewer_id: str, cycle_id: str) -> List[PeerFeedback]:
        return self._many(
            models.PeerFeedback.reviewer_id == reviewer_id,
            models.PeerFeedback.cycle_id == cycle_id,
            order_by=models.PeerFeedback.submitted_at,
        )

    def find_by_triple(self, cycle_id: str, reviewer_id: str, reviewee_id: str) -> Optional[PeerFeedback]:
        return self._one(
            models.PeerFeedback.cycle_id == cycle_id,
            models.PeerFeedback.reviewer_id == reviewer_id,
            models.PeerFeedback.reviewee_id == reviewee_id,
        )

    def save(self, feedback: PeerFeedback) -> PeerFeedback:
        return super().save(feedback)

    def delete(self, feedback_id: str) -> None:
        super().delete(feedback_id)


class SqlManagerEvaluationRepository(_SqlRepository, ManagerEvaluationRepository):
    model = models.ManagerEvaluation
    to_entity = staticmethod(mappers.to_manager_evaluation)
    apply_entity = staticmethod(mappers.apply_manager_evaluation)

    def find_by_id(self, evaluation_id: str) -> Optional[ManagerEvaluation]:
        return super().find_by_id(evaluation_id)

    def find_by_employee_and_cycle(self, employee_id: str, cycle_id: str) -> Optional[ManagerEvaluation]:
        return self._one(
            models.ManagerEvaluation.employee_id == employee_id,
            models.ManagerEvaluation.cycle_id == cycle_id,
        )

    def find_by_cycle(self, cycle_id: str) -> List[ManagerEvaluation]:
        return self._many(
            models.ManagerEvaluation.cycle_id == cycle_id,
            order_by=models.ManagerEvaluation.created_at,
        )

    def save(self, evaluation: ManagerEvaluation) -> ManagerEvaluation:
        return super().save(evaluation)

    def delete(self, evaluation_id: str) -> None:
        super().delete(evaluation_id)


class SqlFinalScoreRepository(_SqlRepository, FinalScoreRepository):
    model = models.FinalScore
    to_entity = staticmethod(mappers.to_final_score)
    apply_entity = staticmethod(mappers.apply_final_score)

    def find_by_id(self, score_id: str) -> Optional[FinalScore]:
        return super().find_by_id(score_id)

    def find_by_user_and_cycle(self, user_id: str, cycle_id: str) -> Optional[FinalScore]:
        return self._one(
            models.FinalScore.user_id == user_id,
            models.FinalScore.cycle_id == cycle_id,
        )

    def find_by_cycle(self, cycle_id: str) -> List[FinalScore]:
        return self._many(
            models.FinalScore.cycle_id == cycle_id,
            order_by=models.FinalScore.user_id,
        )

    def save(self, score: FinalScore) -> FinalScore:
        return super().save(score)

    def delete(self, score_id: str) -> None:
        super().delete(score_id)


class SqlCalibrationSessionRepository(_SqlRepository, CalibrationSessionRepository):
    model = models.CalibrationSession
    to_entity = staticmethod(mappers.to_calibration_session)
    apply_entity = staticmethod(mappers.apply_calibration_session)

    def find_by_id(self, session_id: str) -> Optional[CalibrationSession]:
        return super().find_by_id(session_id)

    def find_by_cycle(self, cycle_id: str) -> List[CalibrationSession]:
        return self._many(
            models.CalibrationSession.cycle_id == cycle_id,
            order_by=models.CalibrationSession.scheduled_at,
        )

    def save(self, session: CalibrationSession) -> CalibrationSession:
        return super().save(session)

    def delete(self, session_id: str) -> None:
        super().delete(session_id)


class SqlPeerNominationRepository(_SqlRepository, PeerNominationRepository):
    model = models.PeerNomination
    to_entity = staticmethod(mappers.to_peer_nomination)
    apply_entity = staticmethod(mappers.apply_peer_nomination)

    def find_by_id(self, nomination_id: str) -> Optional[PeerNomination]:
        return super().find_by_id(nomination_id)

    def find_by_nominator_and_cycle(self, nominator_id: str, cycle_id: str) -> List[PeerNomination]:
        return self._many(
            models.PeerNomination.nominator_id == nominator_id,
            models.PeerNomination.cycle_id == cycle_id,
            order_by=models.PeerNomination.nominated_at,
        )

    def find_by_nominee_and_cycle(self, nominee_id: str, cycle_id: str) -> List[PeerNomination]:
        return self._many(
            models.PeerNomination.nominee_id == nominee_id,
            models.PeerNomination.cycle_id == cycle_id,
            order_by=models.PeerNomination.nominated_at,
        )

    def save(self, nomination: PeerNomination) -> PeerNomination:
        return super().save(nomination)

    def delete(self, nomination_id: str) -> None:
        super().delete(nomination_id)


class SqlScoreAdjustmentRequestRepository(_SqlRepository, ScoreAdjustmentRequestRepository):
    model = models.ScoreAdjustmentRequest
    to_entity = staticmethod(mappers.to_score_adjustment_request)
    apply_entity = staticmethod(mappers.apply_score_adjustment_request)

    def find_by_id(self, request_id: str) -> Optional[ScoreAdjustmentRequest]:
        return super().find_by_id(request_id)

    def find_pending(self) -> List[ScoreAdjustmentRequest]:
        return self._many(
            models.ScoreAdjustmentRequest.status == AdjustmentRequestStatus.PENDING.value,
            order_by=models.ScoreAdjustmentRequest.requested_at,
        )

    def find_by_employee_and_cycle(self, employee_id: str, cycle_id: str) -> List[ScoreAdjustmentRequest]:
        return self._many(
            models.ScoreAdjustmentRequest.employee_id == employee_id,
            models.ScoreAdjustmentRequest.cycle_id == cycle_id,
            order_by=models.ScoreAdjustmentRequest.requested_at,
        )

    def save(self, request: ScoreAdjustmentRequest) -> ScoreAdjustmentRequest:
        return super().save(request)

    def delete(self, request_id: str) -> None:
        super().delete(request_id)


class SqlUserRepository(_SqlRepository, UserRepository):
    model = models.User
    to_entity = staticmethod(mappers.to_employee)
    apply_entity = staticmethod(mappers.apply_employee)

    def find_by_id(self, user_id: str) -> Optional[Employee]:
        return super().find_by_id(user_id)

    def save(self, employee: Employee) -> Employee:
        return super().save(employee)

    def delete(self, user_id: str) -> None:
        super().delete(user_id)


class SqlRepositories(Repositories):
    """Unit of work over one SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db
        self.review_cycles = SqlReviewCycleRepository(db)
        self.self_reviews = SqlSelfReviewRepository(db)
        self.peer_feedback = SqlPeerFeedbackRepository(db)
        self.peer_nominations = SqlPeerNominationRepository(db)
        self.manager_evaluations = SqlManagerEvaluationRepository(db)
        self.final_scores = SqlFinalScoreRepository(db)
        self.calibration_sessions = SqlCalibrationSessionRepository(db)
        self.score_adjustment_requests = SqlScoreAdjustmentRequestRepository(db)
        self.users = SqlUserRepository(db)

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()
