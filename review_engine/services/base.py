import logging
from typing import Optional

from review_engine.core.exceptions import NotFoundError
from review_engine.domain.review_cycle import ReviewCycle
from review_engine.repositories.base import Repositories


class BaseService:
    """
    Common plumbing for the review workflows: one unit of work per service
    instance, a per-class logger and the commit-or-rollback step every
    workflow ends with.
    """

    def __init__(self, repos: Repositories):
        self.repos = repos
        self._logger = logging.getLogger(type(self).__module__)

    def log_info(self, message: str) -> None:
        self._logger.info(message)

    def log_warning(self, message: str) -> None:
        self._logger.warning(message)

    def log_error(self, message: str, exc_info: bool = False) -> None:
        self._logger.error(message, exc_info=exc_info)

    def commit(self) -> None:
        try:
            self.repos.commit()
        except Exception:
            self.repos.rollback()
            raise

    def rollback(self) -> None:
        self.repos.rollback()

    def require_cycle(self, cycle_id: str) -> ReviewCycle:
        cycle: Optional[ReviewCycle] = self.repos.review_cycles.find_by_id(cycle_id)
        if not cycle:
            raise NotFoundError(f"Review cycle {cycle_id} not found", error_code="CYCLE_NOT_FOUND")
        return cycle
