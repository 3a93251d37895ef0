from dataclasses import dataclass
from typing import Optional

from review_engine.domain.levels import EngineerLevel


@dataclass(frozen=True)
class Employee:
    """What the engine needs to know about a person under review."""
    id: str
    name: str = ""
    level: Optional[EngineerLevel] = None
    department: Optional[str] = None
    manager_id: Optional[str] = None

    @property
    def effective_level(self) -> EngineerLevel:
        return EngineerLevel.resolve(self.level)
