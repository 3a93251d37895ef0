import pytest

from review_engine.core.exceptions import (
    AlreadySubmittedError,
    DeadlinePassedError,
    InvalidLevelError,
    InvalidStateError,
    NarrativeTooLongError,
    NotFoundError,
)
from review_engine.domain import Employee, EngineerLevel, ManagerEvaluation, Narrative, ReviewStatus
from review_engine.services import ManagerEvaluationService

from conftest import scores


def test_entity_setters_are_draft_only():
    """Test every setter refuses to run after submission."""
    evaluation = ManagerEvaluation.create(cycle_id="c-1", employee_id="e-1", manager_id="m-1")
    evaluation.update_scores(scores(3, 3, 3, 3, 3))
    evaluation.update_strengths(Narrative("Calm under pressure"))
    evaluation.submit()

    for call in (
        lambda: evaluation.update_scores(scores(4, 4, 4, 4, 4)),
        lambda: evaluation.update_performance_narrative(Narrative("Changed")),
        lambda: evaluation.update_strengths(Narrative("Changed")),
        lambda: evaluation.update_growth_areas(Narrative("Changed")),
        lambda: evaluation.update_development_plan(Narrative("Changed")),
        lambda: evaluation.update_proposed_level(EngineerLevel.LEAD),
        evaluation.submit,
    ):
        with pytest.raises(AlreadySubmittedError):
            call()
    assert evaluation.scores == scores(3, 3, 3, 3, 3)
    assert evaluation.strengths == "Calm under pressure"


def test_calibration_requires_submission():
    evaluation = ManagerEvaluation.create(cycle_id="c-1", employee_id="e-1", manager_id="m-1")
    with pytest.raises(InvalidStateError):
        evaluation.apply_calibration_adjustment(scores(4, 4, 4, 4, 4), "Committee consensus on impact")
    assert evaluation.adjustments == ()
    assert evaluation.status is ReviewStatus.DRAFT


def test_calibration_appends_to_audit_trail():
    """Test each adjustment is recorded with the scores it replaced."""
    evaluation = ManagerEvaluation.create(
        cycle_id="c-1", employee_id="e-1", manager_id="m-1", scores=scores(2, 2, 2, 2, 2)
    )
    evaluation.submit()

    first = evaluation.apply_calibration_adjustment(scores(3, 3, 3, 3, 3), "  Underrated migration work  ")
    second = evaluation.apply_calibration_adjustment(scores(3, 3, 4, 3, 3), "Excellence evidence from RFCs")

    assert evaluation.status is ReviewStatus.CALIBRATED
    assert evaluation.is_submitted
    assert evaluation.calibrated_at == second.applied_at
    assert evaluation.adjustments == (first, second)
    assert first.old_scores == scores(2, 2, 2, 2, 2)
    assert first.justification == "Underrated migration work"
    assert second.old_scores == scores(3, 3, 3, 3, 3)
    assert evaluation.scores == scores(3, 3, 4, 3, 3)


def test_final_level_fallbacks():
    evaluation = ManagerEvaluation.create(cycle_id="c-1", employee_id="e-1", manager_id="m-1")
    assert evaluation.final_level is EngineerLevel.MID

    evaluation = ManagerEvaluation.create(
        cycle_id="c-1", employee_id="e-1", manager_id="m-1", employee_level=EngineerLevel.JUNIOR
    )
    assert evaluation.final_level is EngineerLevel.JUNIOR
    evaluation.update_proposed_level(EngineerLevel.SENIOR)
    assert evaluation.final_level is EngineerLevel.SENIOR


def test_get_or_create_captures_employee_level(repos, cycle, employee, manager):
    """Test a new evaluation records the employee's current level."""
    service = ManagerEvaluationService(repos)
    evaluation = service.get_or_create(cycle.id, employee.id, manager.id)
    again = service.get_or_create(cycle.id, employee.id, manager.id)

    assert evaluation.id == again.id
    assert again.employee_level is EngineerLevel.MID
    assert again.status is ReviewStatus.DRAFT


def test_get_or_create_defaults_level_to_mid(repos, cycle, manager):
    repos.users.save(Employee(id="emp-9", name="No Level Yet"))
    repos.commit()

    evaluation = ManagerEvaluationService(repos).get_or_create(cycle.id, "emp-9", manager.id)
    assert evaluation.employee_level is EngineerLevel.MID


def test_get_or_create_unknown_employee(repos, cycle, manager):
    with pytest.raises(NotFoundError):
        ManagerEvaluationService(repos).get_or_create(cycle.id, "ghost", manager.id)


def test_update_and_submit(repos, cycle, employee, manager):
    """Test updates persist and submission freezes the evaluation."""
    service = ManagerEvaluationService(repos)
    evaluation = service.get_or_create(cycle.id, employee.id, manager.id)

    service.update(
        evaluation.id,
        scores={"projectImpact": 3, "direction": 2, "engineeringExcellence": 3,
                "operationalOwnership": 2, "peopleImpact": 2},
        performance_narrative="Solid year with strong delivery.",
        development_plan="Lead a cross-team project.",
        proposed_level=" senior ",
    )
    service.submit(evaluation.id)

    stored = repos.manager_evaluations.find_by_id(evaluation.id)
    assert stored.status is ReviewStatus.SUBMITTED
    assert stored.scores == scores(3, 2, 3, 2, 2)
    assert stored.performance_narrative == "Solid year with strong delivery."
    assert stored.proposed_level is EngineerLevel.SENIOR
    assert stored.final_level is EngineerLevel.SENIOR

    with pytest.raises(AlreadySubmittedError):
        service.update(evaluation.id, strengths="Too late")


def test_update_rejects_unknown_level(repos, cycle, employee, manager):
    service = ManagerEvaluationService(repos)
    evaluation = service.get_or_create(cycle.id, employee.id, manager.id)
    with pytest.raises(InvalidLevelError):
        service.update(evaluation.id, proposed_level="PRINCIPAL")


def test_submit_after_deadline(repos, expired_cycle, employee, manager):
    service = ManagerEvaluationService(repos)
    evaluation = service.get_or_create(expired_cycle.id, employee.id, manager.id)

    with pytest.raises(DeadlinePassedError):
        service.submit(evaluation.id)
    assert repos.manager_evaluations.find_by_id(evaluation.id).status is ReviewStatus.DRAFT


def test_submit_unknown_evaluation(repos, cycle):
    with pytest.raises(NotFoundError):
        ManagerEvaluationService(repos).submit("missing")


def test_update_validates_every_field_first(repos, cycle, employee, manager):
    """Test a too-long narrative rejects the whole update, scores included."""
    service = ManagerEvaluationService(repos)
    evaluation = service.get_or_create(cycle.id, employee.id, manager.id)
    service.update(evaluation.id, scores=scores(2, 2, 2, 2, 2))

    with pytest.raises(NarrativeTooLongError):
        service.update(evaluation.id, scores=scores(4, 4, 4, 4, 4), development_plan="word " * 1001)
    # Field validation happens before the evaluation is loaded.
    with pytest.raises(NarrativeTooLongError):
        service.update("missing", strengths="word " * 1001)

    stored = repos.manager_evaluations.find_by_id(evaluation.id)
    assert stored.scores == scores(2, 2, 2, 2, 2)
    assert stored.development_plan == ""
