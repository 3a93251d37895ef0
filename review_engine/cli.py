"""
Batch jobs for the end of a review cycle.

    python -m review_engine.cli calculate <cycle_id>
    python -m review_engine.cli lock <cycle_id>
"""
import argparse
import logging
import sys
from typing import List, Optional

from review_engine.core.config import settings
from review_engine.core.exceptions import AppException
from review_engine.core.logging import operation_context, setup_logging
from review_engine.database import SessionLocal, init_db, session_scope
from review_engine.repositories.sql import SqlRepositories
from review_engine.services.final_score_service import FinalScoreService

logger = logging.getLogger(__name__)


def _calculate(service: FinalScoreService, cycle_id: str) -> None:
    scores = service.calculate_final_scores_for_cycle(cycle_id)
    for score in scores:
        print(f"{score.user_id}\t{score.weighted_score.value:.2f}\t{score.bonus_tier.value}")
    print(f"Calculated {len(scores)} final scores for cycle {cycle_id}")


def _lock(service: FinalScoreService, cycle_id: str) -> None:
    result = service.lock_scores(cycle_id)
    print(f"Locked {result.locked_count} final scores for cycle {cycle_id}")


COMMANDS = {
    "calculate": _calculate,
    "lock": _lock,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="review_engine", description="Review cycle batch jobs")
    subparsers = parser.add_subparsers(dest="command", required=True)

    calculate = subparsers.add_parser("calculate", help="Recalculate final scores for a cycle")
    calculate.add_argument("cycle_id", help="Review cycle id")

    lock = subparsers.add_parser("lock", help="Lock all final scores of a cycle")
    lock.add_argument("cycle_id", help="Review cycle id")
    return parser


def main(argv: Optional[List[str]] = None, session_factory=SessionLocal) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(settings.log_level)
    init_db(bind=session_factory.kw.get("bind"))

    with operation_context() as op_id, session_scope(session_factory) as db:
        logger.info(f"Running {args.command} for cycle {args.cycle_id} (operation {op_id})")
        try:
            COMMANDS[args.command](FinalScoreService(SqlRepositories(db)), args.cycle_id)
        except AppException as e:
            logger.error(f"{args.command} failed: {e.error_code}: {e.message}")
            print(f"Error: {e.message}", file=sys.stderr)
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
