import enum
import math

from pydantic import BaseModel, ConfigDict

from review_engine.core.exceptions import InvalidWeightedScoreError

MAX_WEIGHTED_SCORE = 4.0

# Percentage of MAX_WEIGHTED_SCORE; lower bounds are inclusive.
EXCEEDS_THRESHOLD = 85.0
MEETS_THRESHOLD = 75.0


class BonusTier(str, enum.Enum):
    EXCEEDS = "EXCEEDS"
    MEETS = "MEETS"
    BELOW = "BELOW"

    @classmethod
    def from_percentage(cls, percentage: float) -> "BonusTier":
        if percentage >= EXCEEDS_THRESHOLD:
            return cls.EXCEEDS
        if percentage >= MEETS_THRESHOLD:
            return cls.MEETS
        return cls.BELOW


class WeightedScore(BaseModel):
    """Level-weighted score in [0, 4]; percentage and tier are derived."""
    model_config = ConfigDict(frozen=True)

    value: float

    def __init__(self, value: float):
        if value is None or not isinstance(value, (int, float)) or math.isnan(value):
            raise InvalidWeightedScoreError(f"Weighted score must be a valid number, got {value!r}")
        value = round(float(value), 4)
        if value < 0 or value > MAX_WEIGHTED_SCORE:
            raise InvalidWeightedScoreError(f"Weighted score must be between 0 and 4, got {value}")
        super().__init__(value=value)

    @property
    def percentage(self) -> float:
        return round(self.value / MAX_WEIGHTED_SCORE * 100, 4)

    @property
    def bonus_tier(self) -> BonusTier:
        return BonusTier.from_percentage(self.percentage)
