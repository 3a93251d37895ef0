"""
Level-weighted score calculation.

Each engineer level weighs the five pillars differently: junior engineers
are judged more on craft and collaboration, seniors and managers more on
impact and direction. A weighted score is the sum of score x weight over
the pillars, so it stays in [0, 4].
"""
import copy
import logging
import math
from typing import Dict, Mapping

from review_engine.core.exceptions import ConfigurationError
from review_engine.domain.levels import EngineerLevel
from review_engine.domain.pillars import Pillar, PillarScores
from review_engine.domain.weighted_score import WeightedScore

logger = logging.getLogger(__name__)

WEIGHT_SUM_TOLERANCE = 1e-9

WEIGHTS_BY_LEVEL: Dict[EngineerLevel, Dict[Pillar, float]] = {
    EngineerLevel.JUNIOR: {
        Pillar.PROJECT_IMPACT: 0.20,
        Pillar.DIRECTION: 0.10,
        Pillar.ENGINEERING_EXCELLENCE: 0.25,
        Pillar.OPERATIONAL_OWNERSHIP: 0.20,
        Pillar.PEOPLE_IMPACT: 0.25,
    },
    EngineerLevel.MID: {
        Pillar.PROJECT_IMPACT: 0.25,
        Pillar.DIRECTION: 0.15,
        Pillar.ENGINEERING_EXCELLENCE: 0.25,
        Pillar.OPERATIONAL_OWNERSHIP: 0.20,
        Pillar.PEOPLE_IMPACT: 0.15,
    },
    EngineerLevel.SENIOR: {
        Pillar.PROJECT_IMPACT: 0.30,
        Pillar.DIRECTION: 0.20,
        Pillar.ENGINEERING_EXCELLENCE: 0.20,
        Pillar.OPERATIONAL_OWNERSHIP: 0.15,
        Pillar.PEOPLE_IMPACT: 0.15,
    },
    EngineerLevel.LEAD: {
        Pillar.PROJECT_IMPACT: 0.30,
        Pillar.DIRECTION: 0.25,
        Pillar.ENGINEERING_EXCELLENCE: 0.20,
        Pillar.OPERATIONAL_OWNERSHIP: 0.15,
        Pillar.PEOPLE_IMPACT: 0.10,
    },
    EngineerLevel.MANAGER: {
        Pillar.PROJECT_IMPACT: 0.35,
        Pillar.DIRECTION: 0.25,
        Pillar.ENGINEERING_EXCELLENCE: 0.15,
        Pillar.OPERATIONAL_OWNERSHIP: 0.10,
        Pillar.PEOPLE_IMPACT: 0.15,
    },
}


def _weights_for(level: EngineerLevel, table: Mapping[EngineerLevel, Mapping[Pillar, float]]) -> Mapping[Pillar, float]:
    weights = table.get(level)
    if weights is None:
        # A level without weights is a broken deployment, not bad input.
        logger.critical(f"No weight table configured for level {level}")
        raise ConfigurationError(f"No weight table configured for level {level}")
    return weights


def calculate_weighted_score(
    scores: PillarScores,
    level: EngineerLevel,
    table: Mapping[EngineerLevel, Mapping[Pillar, float]] = WEIGHTS_BY_LEVEL,
) -> WeightedScore:
    """
    Weighted sum of the pillar scores for the given level.
    """
    weights = _weights_for(level, table)
    total = sum(scores.score_for(pillar) * weights[pillar] for pillar in Pillar)
    return WeightedScore(total)


def get_all_weights() -> Dict[EngineerLevel, Dict[Pillar, float]]:
    """Copy of the weight table; callers may not mutate the live one."""
    return copy.deepcopy(WEIGHTS_BY_LEVEL)


def validate_weight_tables(
    table: Mapping[EngineerLevel, Mapping[Pillar, float]] = WEIGHTS_BY_LEVEL,
) -> None:
    """
    Every level must have a row, every row must weigh all five pillars, and
    the weights of a row must add up to 1.0.
    """
    for level in EngineerLevel:
        weights = _weights_for(level, table)
        missing = [pillar.value for pillar in Pillar if pillar not in weights]
        if missing:
            raise ConfigurationError(f"Weight table for {level} is missing pillars: {', '.join(missing)}")
        total = sum(weights[pillar] for pillar in Pillar)
        if not math.isclose(total, 1.0, abs_tol=WEIGHT_SUM_TOLERANCE):
            raise ConfigurationError(f"Weights for {level} sum to {total}, expected 1.0")


validate_weight_tables()
