"""
Translation between SQLAlchemy rows and domain entities.

``to_*`` builds a domain object from a row; ``apply_*`` copies a domain
object onto a (new or existing) row.
"""
from typing import Optional

from review_engine import models
from review_engine.domain.calibration_session import CalibrationSession, SessionStatus
from review_engine.domain.employee import Employee
from review_engine.domain.final_score import FinalScore
from review_engine.domain.levels import EngineerLevel
from review_engine.domain.manager_evaluation import CalibrationAdjustment, ManagerEvaluation
from review_engine.domain.narrative import Narrative
from review_engine.domain.peer_feedback import PeerFeedback
from review_engine.domain.peer_nomination import NominationStatus, PeerNomination
from review_engine.domain.pillars import Pillar, PillarScores
from review_engine.domain.review_cycle import CycleDeadlines, CycleStatus, ReviewCycle
from review_engine.domain.review_status import ReviewStatus
from review_engine.domain.score_adjustment_request import AdjustmentRequestStatus, ScoreAdjustmentRequest
from review_engine.domain.self_review import SelfReview
from review_engine.domain.weighted_score import WeightedScore


# --- shared helpers ---

def read_scores(row, prefix: str = "") -> PillarScores:
    # Stored values are re-validated on the way in, never trusted.
    return PillarScores(**{p.value: getattr(row, f"{prefix}{p.value}") for p in Pillar})


def write_scores(row, scores: PillarScores, prefix: str = "") -> None:
    for pillar, value in scores.to_dict().items():
        setattr(row, f"{prefix}{pillar}", value)


def _level(value: Optional[str]) -> Optional[EngineerLevel]:
    return EngineerLevel.from_string(value) if value else None


def _level_value(level: Optional[EngineerLevel]) -> Optional[str]:
    return level.value if level else None


# --- users ---

def to_employee(row: models.User) -> Employee:
    return Employee(
        id=row.id,
        name=row.name or "",
        level=_level(row.level),
        department=row.department,
        manager_id=row.manager_id,
    )


def apply_employee(row: models.User, employee: Employee) -> models.User:
    row.id = employee.id
    row.name = employee.name
    row.level = _level_value(employee.level)
    row.department = employee.department
    row.manager_id = employee.manager_id
    return row


# --- review cycles ---

def to_review_cycle(row: models.ReviewCycle) -> ReviewCycle:
    deadlines = CycleDeadlines(
        self_review=row.self_review_deadline,
        peer_feedback=row.peer_feedback_deadline,
        manager_evaluation=row.manager_evaluation_deadline,
        calibration=row.calibration_deadline,
        feedback_delivery=row.feedback_delivery_deadline,
    )
    return ReviewCycle(
        id=row.id,
        name=row.name,
        year=row.year,
        deadlines=deadlines,
        status=CycleStatus(row.status),
        start_date=row.start_date,
        end_date=row.end_date,
    )


def apply_review_cycle(row: models.ReviewCycle, cycle: ReviewCycle) -> models.ReviewCycle:
    row.id = cycle.id
    row.name = cycle.name
    row.year = cycle.year
    row.status = cycle.status.value
    row.self_review_deadline = cycle.deadlines.self_review
    row.peer_feedback_deadline = cycle.deadlines.peer_feedback
    row.manager_evaluation_deadline = cycle.deadlines.manager_evaluation
    row.calibration_deadline = cycle.deadlines.calibration
    row.feedback_delivery_deadline = cycle.deadlines.feedback_delivery
    row.start_date = cycle.start_date
    row.end_date = cycle.end_date
    return row


# --- self reviews ---

def to_self_review(row: models.SelfReview) -> SelfReview:
    return SelfReview(
        id=row.id,
        cycle_id=row.cycle_id,
        user_id=row.user_id,
        scores=read_scores(row),
        narrative=Narrative(row.narrative),
        status=ReviewStatus(row.status),
        submitted_at=row.submitted_at,
    )


def apply_self_review(row: models.SelfReview, review: SelfReview) -> models.SelfReview:
    row.id = review.id
    row.cycle_id = review.cycle_id
    row.user_id = review.user_id
    write_scores(row, review.scores)
    row.narrative = review.narrative.text
    row.status = review.status.value
    row.submitted_at = review.submitted_at
    return row


# --- peer feedback ---

def to_peer_feedback(row: models.PeerFeedback) -> PeerFeedback:
    return PeerFeedback(
        id=row.id,
        cycle_id=row.cycle_id,
        reviewee_id=row.reviewee_id,
        reviewer_id=row.reviewer_id,
        scores=read_scores(row),
        submitted_at=row.submitted_at,
        strengths=row.strengths,
        growth_areas=row.growth_areas,
        general_comments=row.general_comments,
    )


def apply_peer_feedback(row: models.PeerFeedback, feedback: PeerFeedback) -> models.PeerFeedback:
    row.id = feedback.id
    row.cycle_id = feedback.cycle_id
    row.reviewee_id = feedback.reviewee_id
    row.reviewer_id = feedback.reviewer_id
    write_scores(row, feedback.scores)
    row.strengths = feedback.strengths
    row.growth_areas = feedback.growth_areas
    row.general_comments = feedback.general_comments
    row.submitted_at = feedback.submitted_at
    return row


# --- manager evaluations ---

def to_calibration_adjustment(row: models.CalibrationAdjustment) -> CalibrationAdjustment:
    return CalibrationAdjustment(
        id=row.id,
        old_scores=read_scores(row, prefix="old_"),
        new_scores=read_scores(row, prefix="new_"),
        justification=row.justification,
        applied_at=row.applied_at,
    )


def to_manager_evaluation(row: models.ManagerEvaluation) -> ManagerEvaluation:
    return ManagerEvaluation(
        id=row.id,
        cycle_id=row.cycle_id,
        employee_id=row.employee_id,
        manager_id=row.manager_id,
        scores=read_scores(row),
        performance_narrative=row.performance_narrative or "",
        strengths=row.strengths or "",
        growth_areas=row.growth_areas or "",
        development_plan=row.development_plan or "",
        employee_level=_level(row.employee_level),
        proposed_level=_level(row.proposed_level),
        status=ReviewStatus(row.status),
        submitted_at=row.submitted_at,
        calibrated_at=row.calibrated_at,
        created_at=row.created_at,
        updated_at=row.updated_at,
        adjustments=[to_calibration_adjustment(a) for a in row.adjustments],
    )


def apply_manager_evaluation(row: models.ManagerEvaluation, evaluation: ManagerEvaluation) -> models.ManagerEvaluation:
    row.id = evaluation.id
    row.cycle_id = evaluation.cycle_id
    row.employee_id = evaluation.employee_id
    row.manager_id = evaluation.manager_id
    write_scores(row, evaluation.scores)
    row.performance_narrative = evaluation.performance_narrative
    row.strengths = evaluation.strengths
    row.growth_areas = evaluation.growth_areas
    row.development_plan = evaluation.development_plan
    row.employee_level = _level_value(evaluation.employee_level)
    row.proposed_level = _level_value(evaluation.proposed_level)
    row.status = evaluation.status.value
    row.submitted_at = evaluation.submitted_at
    row.calibrated_at = evaluation.calibrated_at
    row.created_at = evaluation.created_at
    row.updated_at = evaluation.updated_at

    # Audit trail is append-only: only entries not yet stored are added.
    stored = {a.id for a in row.adjustments}
    for sequence, adjustment in enumerate(evaluation.adjustments, start=1):
        if adjustment.id in stored:
            continue
        audit_row = models.CalibrationAdjustment(
            id=adjustment.id,
            sequence=sequence,
            justification=adjustment.justification,
            applied_at=adjustment.applied_at,
        )
        write_scores(audit_row, adjustment.old_scores, prefix="old_")
        write_scores(audit_row, adjustment.new_scores, prefix="new_")
        row.adjustments.append(audit_row)
    return row


# --- final scores ---

def to_final_score(row: models.FinalScore) -> FinalScore:
    return FinalScore(
        id=row.id,
        cycle_id=row.cycle_id,
        user_id=row.user_id,
        pillar_scores=read_scores(row),
        weighted_score=WeightedScore(row.weighted_score),
        final_level=EngineerLevel.from_string(row.final_level),
        calculated_at=row.calculated_at,
        locked=bool(row.locked),
        locked_at=row.locked_at,
        feedback_delivered_at=row.feedback_delivered_at,
        delivered_by=row.delivered_by,
        feedback_notes=row.feedback_notes,
    )


def apply_final_score(row: models.FinalScore, score: FinalScore) -> models.FinalScore:
    row.id = score.id
    row.cycle_id = score.cycle_id
    row.user_id = score.user_id
    write_scores(row, score.pillar_scores)
    row.weighted_score = score.weighted_score.value
    row.percentage_score = score.percentage
    row.bonus_tier = score.bonus_tier.value
    row.final_level = score.final_level.value
    row.calculated_at = score.calculated_at
    row.locked = score.is_locked
    row.locked_at = score.locked_at
    row.feedback_delivered_at = score.feedback_delivered_at
    row.delivered_by = score.delivered_by
    row.feedback_notes = score.feedback_notes
    return row


# --- calibration sessions ---

def to_calibration_session(row: models.CalibrationSession) -> CalibrationSession:
    return CalibrationSession(
        id=row.id,
        cycle_id=row.cycle_id,
        name=row.name,
        facilitator_id=row.facilitator_id,
        scheduled_at=row.scheduled_at,
        participant_ids=row.participant_ids or [],
        status=SessionStatus(row.status),
        department=row.department,
        notes=row.notes or "",
        completed_at=row.completed_at,
    )


def apply_calibration_session(row: models.CalibrationSession, session: CalibrationSession) -> models.CalibrationSession:
    row.id = session.id
    row.cycle_id = session.cycle_id
    row.name = session.name
    row.facilitator_id = session.facilitator_id
    row.participant_ids = list(session.participant_ids)
    row.scheduled_at = session.scheduled_at
    row.status = session.status.value
    row.department = session.department
    row.notes = session.notes
    row.completed_at = session.completed_at
    return row


# --- peer nominations ---

def to_peer_nomination(row: models.PeerNomination) -> PeerNomination:
    return PeerNomination(
        id=row.id,
        cycle_id=row.cycle_id,
        nominator_id=row.nominator_id,
        nominee_id=row.nominee_id,
        nominated_at=row.nominated_at,
        status=NominationStatus(row.status),
        decline_reason=row.decline_reason,
        responded_at=row.responded_at,
    )


def apply_peer_nomination(row: models.PeerNomination, nomination: PeerNomination) -> models.PeerNomination:
    row.id = nomination.id
    row.cycle_id = nomination.cycle_id
    row.nominator_id = nomination.nominator_id
    row.nominee_id = nomination.nominee_id
    row.status = nomination.status.value
    row.decline_reason = nomination.decline_reason
    row.nominated_at = nomination.nominated_at
    row.responded_at = nomination.responded_at
    return row


# --- score adjustment requests ---

def to_score_adjustment_request(row: models.ScoreAdjustmentRequest) -> ScoreAdjustmentRequest:
    return ScoreAdjustmentRequest(
        id=row.id,
        cycle_id=row.cycle_id,
        employee_id=row.employee_id,
        requester_id=row.requester_id,
        reason=row.reason,
        proposed_scores=read_scores(row),
        requested_at=row.requested_at,
        status=AdjustmentRequestStatus(row.status),
        reviewer_id=row.reviewer_id,
        reviewed_at=row.reviewed_at,
        review_notes=row.review_notes,
    )


def apply_score_adjustment_request(
    row: models.ScoreAdjustmentRequest, request: ScoreAdjustmentRequest
) -> models.ScoreAdjustmentRequest:
    row.id = request.id
    row.cycle_id = request.cycle_id
    row.employee_id = request.employee_id
    row.requester_id = request.requester_id
    row.reason = request.reason
    write_scores(row, request.proposed_scores)
    row.status = request.status.value
    row.requested_at = request.requested_at
    row.reviewer_id = request.reviewer_id
    row.reviewed_at = request.reviewed_at
    row.review_notes = request.review_notes
    return row
