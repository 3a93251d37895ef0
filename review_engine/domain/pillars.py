"""
Pillar scores: the five fixed competency ratings every review carries.
"""
import enum
from typing import Any, Dict, Mapping, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from review_engine.core.exceptions import InvalidPillarScoreError

MIN_PILLAR_SCORE = 0
MAX_PILLAR_SCORE = 4


class Pillar(str, enum.Enum):
    PROJECT_IMPACT = "project_impact"
    DIRECTION = "direction"
    ENGINEERING_EXCELLENCE = "engineering_excellence"
    OPERATIONAL_OWNERSHIP = "operational_ownership"
    PEOPLE_IMPACT = "people_impact"


class PillarScores(BaseModel):
    """
    Immutable set of the five pillar ratings, each an integer in [0, 4].

    Accepts snake_case or camelCase keys. Every construction path validates
    the bounds and raises InvalidPillarScoreError on bad input.
    """
    model_config = ConfigDict(
        frozen=True,
        strict=True,
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    project_impact: int = Field(ge=MIN_PILLAR_SCORE, le=MAX_PILLAR_SCORE)
    direction: int = Field(ge=MIN_PILLAR_SCORE, le=MAX_PILLAR_SCORE)
    engineering_excellence: int = Field(ge=MIN_PILLAR_SCORE, le=MAX_PILLAR_SCORE)
    operational_ownership: int = Field(ge=MIN_PILLAR_SCORE, le=MAX_PILLAR_SCORE)
    people_impact: int = Field(ge=MIN_PILLAR_SCORE, le=MAX_PILLAR_SCORE)

    def __init__(self, **data: Any):
        try:
            super().__init__(**data)
        except PydanticValidationError as exc:
            problems = [
                {"field": str(err["loc"][-1]) if err["loc"] else "unknown", "msg": err["msg"]}
                for err in exc.errors()
            ]
            raise InvalidPillarScoreError(
                f"Pillar scores must be integers between {MIN_PILLAR_SCORE} and {MAX_PILLAR_SCORE}",
                details={"errors": problems},
            ) from exc

    @classmethod
    def from_mapping(cls, scores: Mapping[str, Any]) -> "PillarScores":
        if isinstance(scores, PillarScores):
            return scores
        if not isinstance(scores, Mapping):
            raise InvalidPillarScoreError(f"Expected a mapping of pillar scores, got {type(scores).__name__}")
        return cls(**dict(scores))

    @classmethod
    def zeros(cls) -> "PillarScores":
        return cls(**{pillar.value: 0 for pillar in Pillar})

    def score_for(self, pillar: Pillar) -> int:
        return getattr(self, pillar.value)

    def values(self) -> Tuple[int, ...]:
        return tuple(self.score_for(pillar) for pillar in Pillar)

    def to_dict(self) -> Dict[str, int]:
        return {pillar.value: self.score_for(pillar) for pillar in Pillar}
