from datetime import datetime, timedelta, timezone

import pytest

from review_engine.core.exceptions import InvalidDeadlinesError, InvalidStateError, NotFoundError
from review_engine.domain import CycleDeadlines, CyclePhase, CycleStatus, ReviewCycle
from review_engine.services import ReviewCycleService

from conftest import make_deadlines


def test_deadlines_must_strictly_increase():
    """Test each phase deadline comes after the previous one."""
    now = datetime.now(timezone.utc)
    with pytest.raises(InvalidDeadlinesError):
        CycleDeadlines(
            self_review=now,
            peer_feedback=now,
            manager_evaluation=now + timedelta(days=2),
            calibration=now + timedelta(days=3),
            feedback_delivery=now + timedelta(days=4),
        )
    with pytest.raises(InvalidDeadlinesError):
        CycleDeadlines(
            self_review=now,
            peer_feedback=now + timedelta(days=1),
            manager_evaluation=now + timedelta(days=2),
            calibration=now + timedelta(days=5),
            feedback_delivery=now + timedelta(days=4),
        )


def test_deadline_has_passed():
    start = datetime(2026, 1, 1, tzinfo=timezone.utc)
    cycle = ReviewCycle.create(name="H1", year=2026, deadlines=make_deadlines(start, offset_days=10))

    just_before = start + timedelta(days=10)
    assert not cycle.has_deadline_passed(CyclePhase.SELF_REVIEW, now=just_before)
    assert cycle.has_deadline_passed(CyclePhase.SELF_REVIEW, now=just_before + timedelta(seconds=1))
    assert not cycle.has_deadline_passed(CyclePhase.PEER_FEEDBACK, now=just_before + timedelta(days=1))


def test_cycle_transitions():
    """Test the cycle only moves forward one phase at a time."""
    cycle = ReviewCycle.create(name="H1", year=2026, deadlines=make_deadlines())
    assert cycle.status is CycleStatus.DRAFT

    with pytest.raises(InvalidStateError):
        cycle.enter_calibration()
    with pytest.raises(InvalidStateError):
        cycle.complete()

    cycle.start()
    assert cycle.is_active
    with pytest.raises(InvalidStateError):
        cycle.start()

    cycle.enter_calibration()
    cycle.complete()
    assert cycle.is_completed
    assert cycle.end_date is not None


def test_cycle_service_round_trip(repos):
    service = ReviewCycleService(repos)
    cycle = service.create_cycle("  2026 Mid-Year  ", 2026, make_deadlines())
    assert cycle.name == "2026 Mid-Year"

    service.start_cycle(cycle.id)
    service.enter_calibration(cycle.id)
    service.complete_cycle(cycle.id)

    stored = repos.review_cycles.find_by_id(cycle.id)
    assert stored.status is CycleStatus.COMPLETED
    assert stored.end_date is not None
    assert stored.deadlines.deadline_for(CyclePhase.CALIBRATION) is not None


def test_cycle_service_unknown_cycle(repos):
    with pytest.raises(NotFoundError):
        ReviewCycleService(repos).start_cycle("missing")
