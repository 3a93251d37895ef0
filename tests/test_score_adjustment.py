import pytest

from review_engine.core.exceptions import (
    AccessDeniedError,
    InvalidPillarScoreError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from review_engine.domain import AdjustmentRequestStatus, BonusTier, ReviewStatus, ScoreAdjustmentRequest
from review_engine.services import FinalScoreService, ManagerEvaluationService, ScoreAdjustmentService

from conftest import scores

REASON = "Migration impact was missed in calibration"


def _final_score(repos, cycle, employee, manager, pillar_scores, lock=True):
    evaluations = ManagerEvaluationService(repos)
    evaluation = evaluations.get_or_create(cycle.id, employee.id, manager.id)
    evaluations.update(evaluation.id, scores=pillar_scores)
    evaluations.submit(evaluation.id)

    final_scores = FinalScoreService(repos)
    final_scores.calculate_final_scores_for_cycle(cycle.id)
    if lock:
        final_scores.lock_scores(cycle.id)
    return evaluation


def test_request_entity_is_reviewed_once():
    request = ScoreAdjustmentRequest.create("c-1", "e-1", "m-1", f"  {REASON} ", scores(4, 4, 4, 4, 4))
    assert request.reason == REASON
    assert request.is_pending

    with pytest.raises(ValidationError):
        request.reject("hr-1", "  ")
    assert request.is_pending

    request.approve("hr-1")
    assert request.status is AdjustmentRequestStatus.APPROVED
    assert request.reviewer_id == "hr-1"
    assert request.review_notes is None
    with pytest.raises(InvalidStateError):
        request.reject("hr-1", "Second thoughts")

    with pytest.raises(ValidationError):
        ScoreAdjustmentRequest.create("c-1", "e-1", "m-1", "   ", scores(4, 4, 4, 4, 4))


def test_request_adjustment(repos, cycle, employee, manager):
    """Test a manager can ask to change a direct report's locked score."""
    _final_score(repos, cycle, employee, manager, scores(3, 2, 3, 2, 2))
    service = ScoreAdjustmentService(repos)

    request = service.request_adjustment(
        cycle.id, employee.id, manager.id,
        {"projectImpact": 4, "direction": 3, "engineeringExcellence": 4,
         "operationalOwnership": 3, "peopleImpact": 3},
        REASON,
    )

    stored = repos.score_adjustment_requests.find_by_id(request.id)
    assert stored.status is AdjustmentRequestStatus.PENDING
    assert stored.proposed_scores == scores(4, 3, 4, 3, 3)
    assert stored.requester_id == manager.id
    assert [r.id for r in service.get_pending()] == [request.id]
    assert [r.id for r in service.get_requests_for_employee(cycle.id, employee.id)] == [request.id]


def test_request_requires_locked_final_score(repos, cycle, employee, manager):
    service = ScoreAdjustmentService(repos)
    with pytest.raises(NotFoundError):
        service.request_adjustment(cycle.id, employee.id, manager.id, scores(4, 4, 4, 4, 4), REASON)

    _final_score(repos, cycle, employee, manager, scores(3, 3, 3, 3, 3), lock=False)
    with pytest.raises(InvalidStateError):
        service.request_adjustment(cycle.id, employee.id, manager.id, scores(4, 4, 4, 4, 4), REASON)
    assert service.get_pending() == []


def test_request_checks(repos, cycle, employee, colleague, manager):
    """Test only the direct manager may ask, with a reason and valid scores."""
    _final_score(repos, cycle, employee, manager, scores(3, 3, 3, 3, 3))
    service = ScoreAdjustmentService(repos)

    with pytest.raises(AccessDeniedError):
        service.request_adjustment(cycle.id, employee.id, colleague.id, scores(4, 4, 4, 4, 4), REASON)
    with pytest.raises(ValidationError):
        service.request_adjustment(cycle.id, employee.id, manager.id, scores(4, 4, 4, 4, 4), "  ")
    with pytest.raises(InvalidPillarScoreError):
        service.request_adjustment(
            cycle.id, employee.id, manager.id,
            {"project_impact": 7, "direction": 3, "engineering_excellence": 3,
             "operational_ownership": 3, "people_impact": 3},
            REASON,
        )
    with pytest.raises(NotFoundError):
        service.request_adjustment("missing", employee.id, manager.id, scores(4, 4, 4, 4, 4), REASON)
    assert service.get_pending() == []


def test_preview_compares_locked_and_proposed(repos, cycle, employee, manager):
    _final_score(repos, cycle, employee, manager, scores(3, 2, 3, 2, 2))
    service = ScoreAdjustmentService(repos)
    request = service.request_adjustment(cycle.id, employee.id, manager.id, scores(4, 3, 4, 3, 3), REASON)

    preview = service.preview(request.id)
    assert preview.current_weighted_score == pytest.approx(2.5)
    assert preview.current_bonus_tier is BonusTier.BELOW
    assert preview.proposed_weighted_score == pytest.approx(3.5)
    assert preview.proposed_bonus_tier is BonusTier.EXCEEDS
    assert preview.changes_tier


def test_approval_records_the_decision(repos, cycle, employee, manager):
    """Test approving stamps reviewer and notes while the locked score stays frozen."""
    evaluation = _final_score(repos, cycle, employee, manager, scores(3, 2, 3, 2, 2))
    service = ScoreAdjustmentService(repos)
    request = service.request_adjustment(cycle.id, employee.id, manager.id, scores(4, 3, 4, 3, 3), REASON)

    reviewed = service.review_adjustment(request.id, "hr-1", approved=True, notes="  Agreed with the panel ")
    assert reviewed.status is AdjustmentRequestStatus.APPROVED
    assert reviewed.review_notes == "Agreed with the panel"

    stored = repos.score_adjustment_requests.find_by_id(request.id)
    assert stored.status is AdjustmentRequestStatus.APPROVED
    assert stored.reviewer_id == "hr-1"
    assert stored.reviewed_at is not None
    assert service.get_pending() == []

    final = FinalScoreService(repos).get_final_score(cycle.id, employee.id)
    assert final.is_locked
    assert final.weighted_score.value == pytest.approx(2.5)
    assert repos.manager_evaluations.find_by_id(evaluation.id).status is ReviewStatus.SUBMITTED

    with pytest.raises(InvalidStateError):
        service.review_adjustment(request.id, "hr-1", approved=False, notes="Too late")


def test_rejection_leaves_scores_alone(repos, cycle, employee, manager):
    evaluation = _final_score(repos, cycle, employee, manager, scores(3, 2, 3, 2, 2))
    service = ScoreAdjustmentService(repos)
    request = service.request_adjustment(cycle.id, employee.id, manager.id, scores(4, 3, 4, 3, 3), REASON)

    with pytest.raises(ValidationError):
        service.review_adjustment(request.id, "hr-1", approved=False)
    assert repos.score_adjustment_requests.find_by_id(request.id).is_pending

    service.review_adjustment(request.id, "hr-1", approved=False, notes="Evidence predates the cycle")

    stored = repos.score_adjustment_requests.find_by_id(request.id)
    assert stored.status is AdjustmentRequestStatus.REJECTED
    assert stored.review_notes == "Evidence predates the cycle"
    assert FinalScoreService(repos).get_final_score(cycle.id, employee.id).weighted_score.value == pytest.approx(2.5)
    assert repos.manager_evaluations.find_by_id(evaluation.id).status is ReviewStatus.SUBMITTED


def test_review_unknown_request(repos):
    with pytest.raises(NotFoundError):
        ScoreAdjustmentService(repos).review_adjustment("missing", "hr-1", approved=True)
