from typing import Any, Mapping, Optional, Union

from review_engine.core.exceptions import DeadlinePassedError, NotFoundError, ValidationError
from review_engine.domain.narrative import Narrative
from review_engine.domain.pillars import PillarScores
from review_engine.domain.review_cycle import CyclePhase
from review_engine.domain.self_review import SelfReview
from review_engine.services.base import BaseService


class SelfReviewService(BaseService):
    """
    Self-review workflow: lazily created draft, edits, one-way submission.
    """

    def _get_or_create(self, cycle_id: str, user_id: str) -> SelfReview:
        review = self.repos.self_reviews.find_by_user_and_cycle(user_id, cycle_id)
        if review:
            return review
        review = SelfReview.create(cycle_id=cycle_id, user_id=user_id)
        self.repos.self_reviews.save(review)
        self.log_info(f"Created draft self-review {review.id} for user {user_id} in cycle {cycle_id}")
        return review

    def get_or_create(self, cycle_id: str, user_id: str) -> SelfReview:
        self.require_cycle(cycle_id)
        try:
            review = self._get_or_create(cycle_id, user_id)
            self.commit()
        except Exception:
            self.rollback()
            raise
        return review

    def update(
        self,
        cycle_id: str,
        user_id: str,
        scores: Optional[Union[PillarScores, Mapping[str, Any]]] = None,
        narrative: Optional[str] = None,
    ) -> SelfReview:
        self.require_cycle(cycle_id)
        # Validate input before loading anything.
        new_scores = PillarScores.from_mapping(scores) if scores is not None else None
        new_narrative = Narrative(narrative) if narrative is not None else None

        try:
            review = self._get_or_create(cycle_id, user_id)
            if new_scores is not None:
                review.update_scores(new_scores)
            if new_narrative is not None:
                review.update_narrative(new_narrative)
            self.repos.self_reviews.save(review)
            self.commit()
        except Exception:
            self.rollback()
            raise
        return review

    def submit(self, cycle_id: str, user_id: str) -> SelfReview:
        cycle = self.require_cycle(cycle_id)
        review = self.repos.self_reviews.find_by_user_and_cycle(user_id, cycle_id)
        if not review:
            raise NotFoundError(
                f"Self-review not found for user {user_id} in cycle {cycle_id}",
                error_code="SELF_REVIEW_NOT_FOUND",
            )

        if cycle.has_deadline_passed(CyclePhase.SELF_REVIEW):
            self.log_warning(f"Self-review submission by user {user_id} rejected: deadline passed")
            raise DeadlinePassedError(CyclePhase.SELF_REVIEW.value)

        if review.narrative.is_blank:
            raise ValidationError("Narrative is required before submitting", error_code="NARRATIVE_REQUIRED")

        review.submit()
        try:
            self.repos.self_reviews.save(review)
            self.commit()
        except Exception:
            self.rollback()
            raise
        self.log_info(f"Self-review {review.id} submitted by user {user_id}")
        return review
