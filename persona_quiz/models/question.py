"""Question data model and the Likert answer scale."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

LIKERT_LABELS: dict[int, str] = {
    1: "Strongly Disagree",
    2: "Disagree",
    3: "Neutral",
    4: "Agree",
    5: "Strongly Agree",
}

MIN_ANSWER = 1
MAX_ANSWER = 5


@dataclass(frozen=True)
class Question:
    """A single assessment statement."""
    id: int
    text: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "text": self.text}


def answer_label(value: int) -> str:
    """Map a 1-5 answer to its Likert label."""
    try:
        return LIKERT_LABELS[value]
    except KeyError:
        raise ValueError(f"Answer must be between {MIN_ANSWER} and {MAX_ANSWER}, got {value!r}") from None
