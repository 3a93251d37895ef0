from typing import Iterable, List, Optional

from review_engine.core.exceptions import (
    AccessDeniedError,
    DuplicateNominationError,
    NotFoundError,
    ValidationError,
)
from review_engine.domain.employee import Employee
from review_engine.domain.peer_nomination import MAX_NOMINEES, MIN_NOMINEES, PeerNomination
from review_engine.schemas.peer_nomination import (
    FeedbackRequestList,
    FeedbackRequestView,
    NominationList,
    NominationView,
)
from review_engine.services.base import BaseService


class PeerNominationService(BaseService):
    """
    Employees nominate the colleagues they want peer feedback from; the
    nominees see those nominations as feedback requests.
    """

    def _require_employee(self, user_id: str, role: str) -> Employee:
        person = self.repos.users.find_by_id(user_id)
        if not person:
            raise NotFoundError(f"{role} {user_id} not found", error_code="EMPLOYEE_NOT_FOUND")
        return person

    def _name_of(self, user_id: str) -> str:
        person = self.repos.users.find_by_id(user_id)
        return person.name if person and person.name else "Unknown"

    def nominate_peers(self, cycle_id: str, nominator_id: str, nominee_ids: Iterable[str]) -> List[PeerNomination]:
        """
        Nominate between three and five peers in one go.

        Every nominee is checked before anything is written: no self or
        manager nominations, no repeats within the request or against
        earlier nominations in the cycle.
        """
        self.require_cycle(cycle_id)
        nominee_ids = list(nominee_ids)

        if not MIN_NOMINEES <= len(nominee_ids) <= MAX_NOMINEES:
            raise ValidationError(
                f"Must nominate between {MIN_NOMINEES} and {MAX_NOMINEES} peers",
                error_code="NOMINEE_COUNT",
                details={"count": len(nominee_ids), "min": MIN_NOMINEES, "max": MAX_NOMINEES},
            )
        if len(set(nominee_ids)) != len(nominee_ids):
            raise ValidationError("The same peer was nominated more than once", error_code="DUPLICATE_NOMINEE")

        nominator = self._require_employee(nominator_id, "Nominator")
        already_nominated = {
            n.nominee_id for n in self.repos.peer_nominations.find_by_nominator_and_cycle(nominator_id, cycle_id)
        }

        nominations = []
        for nominee_id in nominee_ids:
            if nominee_id == nominator_id:
                raise ValidationError("Cannot nominate yourself for peer feedback", error_code="SELF_NOMINATION")
            self._require_employee(nominee_id, "Nominee")
            if nominator.manager_id and nominee_id == nominator.manager_id:
                raise ValidationError("Cannot nominate your manager for peer feedback", error_code="MANAGER_NOMINATION")
            if nominee_id in already_nominated:
                raise DuplicateNominationError(f"Already nominated peer {nominee_id} in this cycle")
            nominations.append(PeerNomination.create(cycle_id, nominator_id, nominee_id))

        try:
            for nomination in nominations:
                self.repos.peer_nominations.save(nomination)
            self.commit()
        except Exception:
            self.rollback()
            raise
        self.log_info(f"User {nominator_id} nominated {len(nominations)} peers in cycle {cycle_id}")
        return nominations

    def get_my_nominations(self, cycle_id: str, nominator_id: str) -> NominationList:
        self.require_cycle(cycle_id)
        nominations = self.repos.peer_nominations.find_by_nominator_and_cycle(nominator_id, cycle_id)
        return NominationList(
            cycle_id=cycle_id,
            nominations=[
                NominationView(
                    nomination_id=n.id,
                    nominee_id=n.nominee_id,
                    nominee_name=self._name_of(n.nominee_id),
                    status=n.status,
                    nominated_at=n.nominated_at,
                )
                for n in nominations
            ],
        )

    def get_feedback_requests(self, cycle_id: str, reviewer_id: str) -> FeedbackRequestList:
        """Nominations naming ``reviewer_id``, flagged once feedback has been given."""
        self.require_cycle(cycle_id)
        nominations = self.repos.peer_nominations.find_by_nominee_and_cycle(reviewer_id, cycle_id)
        given_to = {f.reviewee_id for f in self.repos.peer_feedback.find_by_reviewer_and_cycle(reviewer_id, cycle_id)}
        return FeedbackRequestList(
            cycle_id=cycle_id,
            requests=[
                FeedbackRequestView(
                    nomination_id=n.id,
                    nominator_id=n.nominator_id,
                    nominator_name=self._name_of(n.nominator_id),
                    status=n.status,
                    nominated_at=n.nominated_at,
                    feedback_submitted=n.nominator_id in given_to,
                )
                for n in nominations
            ],
        )

    def respond(
        self, nomination_id: str, nominee_id: str, accept: bool, reason: Optional[str] = None
    ) -> PeerNomination:
        nomination = self.repos.peer_nominations.find_by_id(nomination_id)
        if not nomination:
            raise NotFoundError(f"Peer nomination {nomination_id} not found", error_code="NOMINATION_NOT_FOUND")
        if nomination.nominee_id != nominee_id:
            raise AccessDeniedError("Only the nominee can respond to a nomination")

        if accept:
            nomination.accept()
        else:
            nomination.decline(reason)
        try:
            self.repos.peer_nominations.save(nomination)
            self.commit()
        except Exception:
            self.rollback()
            raise
        self.log_info(f"Nomination {nomination_id} {nomination.status.value.lower()} by {nominee_id}")
        return nomination
