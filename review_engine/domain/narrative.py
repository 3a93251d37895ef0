from typing import Optional

from pydantic import BaseModel, ConfigDict

from review_engine.core.exceptions import NarrativeTooLongError

MAX_NARRATIVE_WORDS = 1000


class Narrative(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str = ""

    def __init__(self, text: Optional[str] = ""):
        text = (text or "").strip()
        word_count = len(text.split())
        if word_count > MAX_NARRATIVE_WORDS:
            raise NarrativeTooLongError(word_count, MAX_NARRATIVE_WORDS)
        super().__init__(text=text)

    @classmethod
    def empty(cls) -> "Narrative":
        return cls("")

    @property
    def word_count(self) -> int:
        return len(self.text.split())

    @property
    def is_blank(self) -> bool:
        return not self.text

    def __str__(self) -> str:
        return self.text
