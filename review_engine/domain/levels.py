import enum
from typing import Optional

from review_engine.core.exceptions import InvalidLevelError


class EngineerLevel(str, enum.Enum):
    """
    Engineer levels, ordered from most junior to most senior.
    The level selects the weight table used for the weighted score.
    """
    JUNIOR = "JUNIOR"
    MID = "MID"
    SENIOR = "SENIOR"
    LEAD = "LEAD"
    MANAGER = "MANAGER"

    @classmethod
    def from_string(cls, level: Optional[str]) -> "EngineerLevel":
        if isinstance(level, EngineerLevel):
            return level
        if not isinstance(level, str) or not level.strip():
            raise InvalidLevelError("Invalid engineer level: level cannot be empty")

        token = level.strip().upper()
        try:
            return cls(token)
        except ValueError:
            valid = ", ".join(member.value for member in cls)
            raise InvalidLevelError(f"Invalid engineer level: {level!r}. Valid levels: {valid}") from None

    @classmethod
    def resolve(cls, level: Optional["EngineerLevel"]) -> "EngineerLevel":
        """Fallback used everywhere a level is unknown."""
        return level or DEFAULT_LEVEL

    def __str__(self) -> str:
        return self.value


DEFAULT_LEVEL = EngineerLevel.MID
