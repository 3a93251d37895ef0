import pytest
from sqlalchemy.exc import IntegrityError

from review_engine import models
from review_engine.domain import EngineerLevel, PeerFeedback, SelfReview
from review_engine.repositories import Repositories, SqlRepositories
from review_engine.services import PeerFeedbackService, SelfReviewService

from conftest import scores


def test_sql_repositories_fulfil_the_contract(db_session):
    repos = SqlRepositories(db_session)
    assert isinstance(repos, Repositories)


def test_save_is_an_upsert(repos, cycle, employee):
    """Test saving the same entity twice updates one row."""
    review = SelfReview.create(cycle_id=cycle.id, user_id=employee.id)
    repos.self_reviews.save(review)
    review.update_scores(scores(1, 2, 3, 4, 0))
    repos.self_reviews.save(review)
    repos.commit()

    assert repos.db.query(models.SelfReview).count() == 1
    assert repos.self_reviews.find_by_id(review.id).scores == scores(1, 2, 3, 4, 0)


def test_delete_is_logical(repos, cycle, employee, colleague):
    """Test deleted rows stay in the table but vanish from finders."""
    feedback = PeerFeedback.create(cycle.id, employee.id, colleague.id, scores(3, 3, 3, 3, 3))
    repos.peer_feedback.save(feedback)
    repos.commit()

    repos.peer_feedback.delete(feedback.id)
    repos.commit()

    assert repos.peer_feedback.find_by_id(feedback.id) is None
    assert repos.peer_feedback.find_by_reviewee_and_cycle(employee.id, cycle.id) == []
    row = repos.db.get(models.PeerFeedback, feedback.id)
    assert row is not None
    assert row.deleted_at is not None

    # Deleting again is a no-op.
    repos.peer_feedback.delete(feedback.id)
    repos.peer_feedback.delete("missing")


def test_unique_self_review_per_cycle_and_user(repos, cycle, employee):
    repos.self_reviews.save(SelfReview.create(cycle_id=cycle.id, user_id=employee.id))
    with pytest.raises(IntegrityError):
        repos.self_reviews.save(SelfReview.create(cycle_id=cycle.id, user_id=employee.id))
    repos.rollback()


def test_user_levels_round_trip(repos, employee):
    found = repos.users.find_by_id(employee.id)
    assert found == employee
    assert found.effective_level is EngineerLevel.MID
    assert repos.users.find_by_id("nobody") is None


def test_rollback_discards_pending_writes(repos, cycle, employee):
    repos.self_reviews.save(SelfReview.create(cycle_id=cycle.id, user_id=employee.id))
    repos.rollback()
    assert repos.self_reviews.find_by_user_and_cycle(employee.id, cycle.id) is None


def test_deleted_self_review_frees_its_slot(repos, cycle, employee):
    """Test a new draft can be created once the previous one is deleted."""
    service = SelfReviewService(repos)
    first = service.get_or_create(cycle.id, employee.id)
    repos.self_reviews.delete(first.id)
    repos.commit()

    second = service.get_or_create(cycle.id, employee.id)
    assert second.id != first.id
    assert repos.self_reviews.find_by_user_and_cycle(employee.id, cycle.id).id == second.id
    assert repos.db.query(models.SelfReview).count() == 2


def test_deleted_peer_feedback_can_be_resubmitted(repos, cycle, employee, colleague):
    service = PeerFeedbackService(repos)
    first = service.submit(cycle.id, colleague.id, employee.id, scores(2, 2, 2, 2, 2))
    repos.peer_feedback.delete(first.id)
    repos.commit()

    second = service.submit(cycle.id, colleague.id, employee.id, scores(4, 4, 4, 4, 4))
    stored = repos.peer_feedback.find_by_triple(cycle.id, colleague.id, employee.id)
    assert stored.id == second.id
    assert stored.scores == scores(4, 4, 4, 4, 4)
