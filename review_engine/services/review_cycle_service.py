from datetime import datetime
from typing import Optional

from review_engine.domain.review_cycle import CycleDeadlines, ReviewCycle
from review_engine.services.base import BaseService


class ReviewCycleService(BaseService):
    """Creates review cycles and moves them through their phases."""

    def create_cycle(
        self,
        name: str,
        year: int,
        deadlines: CycleDeadlines,
        start_date: Optional[datetime] = None,
    ) -> ReviewCycle:
        cycle = ReviewCycle.create(name=name.strip(), year=year, deadlines=deadlines, start_date=start_date)
        return self._save(cycle, f"Created review cycle {cycle.id} ({cycle.name})")

    def start_cycle(self, cycle_id: str) -> ReviewCycle:
        cycle = self.require_cycle(cycle_id)
        cycle.start()
        return self._save(cycle, f"Review cycle {cycle_id} is now active")

    def enter_calibration(self, cycle_id: str) -> ReviewCycle:
        cycle = self.require_cycle(cycle_id)
        cycle.enter_calibration()
        return self._save(cycle, f"Review cycle {cycle_id} entered calibration")

    def complete_cycle(self, cycle_id: str) -> ReviewCycle:
        cycle = self.require_cycle(cycle_id)
        cycle.complete()
        return self._save(cycle, f"Review cycle {cycle_id} completed")

    def _save(self, cycle: ReviewCycle, message: str) -> ReviewCycle:
        try:
            self.repos.review_cycles.save(cycle)
            self.commit()
        except Exception:
            self.rollback()
            raise
        self.log_info(message)
        return cycle
