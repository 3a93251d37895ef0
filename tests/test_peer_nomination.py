import pytest

from review_engine.core.exceptions import (
    AccessDeniedError,
    DuplicateNominationError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from review_engine.domain import Employee, EngineerLevel, NominationStatus, PeerNomination
from review_engine.services import PeerFeedbackService, PeerNominationService

from conftest import scores


@pytest.fixture
def peers(repos, manager):
    people = [
        Employee(id=f"peer-{i}", name=f"Peer {i}", level=EngineerLevel.MID, department="Platform", manager_id=manager.id)
        for i in range(3, 8)
    ]
    for person in people:
        repos.users.save(person)
    repos.commit()
    return people


def test_nomination_entity():
    """Test a nomination starts pending and is answered once."""
    with pytest.raises(ValidationError):
        PeerNomination.create("c-1", "u-1", "u-1")

    nomination = PeerNomination.create("c-1", "u-1", "u-2")
    assert nomination.is_pending
    with pytest.raises(ValidationError):
        nomination.decline("   ")
    nomination.decline("  On leave for most of the cycle ")
    assert nomination.status is NominationStatus.DECLINED
    assert nomination.decline_reason == "On leave for most of the cycle"
    assert nomination.responded_at is not None
    with pytest.raises(InvalidStateError):
        nomination.accept()


def test_nominate_peers(repos, cycle, employee, colleague, peers):
    service = PeerNominationService(repos)
    nominee_ids = [colleague.id, peers[0].id, peers[1].id]

    created = service.nominate_peers(cycle.id, employee.id, nominee_ids)
    assert [n.nominee_id for n in created] == nominee_ids
    assert all(n.status is NominationStatus.PENDING for n in created)

    mine = service.get_my_nominations(cycle.id, employee.id)
    assert mine.total == 3
    assert {v.nominee_id: v.nominee_name for v in mine.nominations} == {
        colleague.id: "Linus Peer", peers[0].id: "Peer 3", peers[1].id: "Peer 4",
    }


def test_five_nominees_is_the_maximum(repos, cycle, employee, colleague, peers):
    service = PeerNominationService(repos)
    five = [colleague.id] + [p.id for p in peers[:4]]
    assert len(service.nominate_peers(cycle.id, employee.id, five)) == 5


@pytest.mark.parametrize("count", [0, 2, 6])
def test_nominee_count_out_of_range(repos, cycle, employee, colleague, peers, count):
    """Test fewer than three or more than five nominees writes nothing."""
    candidates = [colleague.id] + [p.id for p in peers]
    with pytest.raises(ValidationError) as exc_info:
        PeerNominationService(repos).nominate_peers(cycle.id, employee.id, candidates[:count])
    assert exc_info.value.error_code == "NOMINEE_COUNT"
    assert repos.peer_nominations.find_by_nominator_and_cycle(employee.id, cycle.id) == []


@pytest.mark.parametrize("error_code, nominees", [
    ("SELF_NOMINATION", ["emp-1", "peer-3", "peer-4"]),
    ("MANAGER_NOMINATION", ["mgr-1", "peer-3", "peer-4"]),
    ("DUPLICATE_NOMINEE", ["peer-3", "peer-3", "peer-4"]),
])
def test_invalid_nominees(repos, cycle, employee, peers, error_code, nominees):
    with pytest.raises(ValidationError) as exc_info:
        PeerNominationService(repos).nominate_peers(cycle.id, employee.id, nominees)
    assert exc_info.value.error_code == error_code
    assert repos.peer_nominations.find_by_nominator_and_cycle(employee.id, cycle.id) == []


def test_unknown_people_and_cycle(repos, cycle, employee, peers):
    service = PeerNominationService(repos)
    with pytest.raises(NotFoundError):
        service.nominate_peers(cycle.id, employee.id, ["peer-3", "peer-4", "ghost"])
    with pytest.raises(NotFoundError):
        service.nominate_peers(cycle.id, "ghost", ["peer-3", "peer-4", "peer-5"])
    with pytest.raises(NotFoundError):
        service.nominate_peers("missing", employee.id, ["peer-3", "peer-4", "peer-5"])
    with pytest.raises(NotFoundError):
        service.get_my_nominations("missing", employee.id)


def test_renominating_a_peer_is_rejected(repos, cycle, employee, peers):
    """Test a second batch naming an earlier nominee is refused as a whole."""
    service = PeerNominationService(repos)
    service.nominate_peers(cycle.id, employee.id, ["peer-3", "peer-4", "peer-5"])

    with pytest.raises(DuplicateNominationError):
        service.nominate_peers(cycle.id, employee.id, ["peer-6", "peer-7", "peer-3"])
    assert service.get_my_nominations(cycle.id, employee.id).total == 3


def test_feedback_requests_track_submissions(repos, cycle, employee, colleague, peers):
    """Test the nominee sees who asked them and whether they already answered."""
    nominations = PeerNominationService(repos)
    nominations.nominate_peers(cycle.id, employee.id, [colleague.id, "peer-3", "peer-4"])
    nominations.nominate_peers(cycle.id, "peer-5", [colleague.id, "peer-3", "peer-4"])

    requests = nominations.get_feedback_requests(cycle.id, colleague.id)
    assert requests.total == 2
    assert len(requests.outstanding) == 2

    PeerFeedbackService(repos).submit(cycle.id, colleague.id, employee.id, scores(3, 3, 3, 3, 3))

    requests = nominations.get_feedback_requests(cycle.id, colleague.id)
    submitted = {r.nominator_id: r.feedback_submitted for r in requests.requests}
    assert submitted == {employee.id: True, "peer-5": False}
    assert [r.nominator_name for r in requests.outstanding] == ["Peer 5"]


def test_respond_to_nomination(repos, cycle, employee, colleague, peers):
    service = PeerNominationService(repos)
    first, second, _ = service.nominate_peers(cycle.id, employee.id, [colleague.id, "peer-3", "peer-4"])

    with pytest.raises(AccessDeniedError):
        service.respond(first.id, "peer-3", accept=True)
    with pytest.raises(NotFoundError):
        service.respond("missing", colleague.id, accept=True)

    service.respond(first.id, colleague.id, accept=True)
    service.respond(second.id, "peer-3", accept=False, reason="Have not worked together")

    assert repos.peer_nominations.find_by_id(first.id).status is NominationStatus.ACCEPTED
    declined = repos.peer_nominations.find_by_id(second.id)
    assert declined.status is NominationStatus.DECLINED
    assert declined.decline_reason == "Have not worked together"

    with pytest.raises(InvalidStateError):
        service.respond(first.id, colleague.id, accept=False, reason="Changed my mind")
