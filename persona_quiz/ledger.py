"""Answer ledger helpers.

A ledger is a plain ``dict[int, int]`` mapping question id to a 1-5 answer.
Every helper here is pure: ledgers passed in are never mutated.
"""

from __future__ import annotations

from typing import Mapping, Optional, Sequence

from persona_quiz.models import Question
from persona_quiz.models.question import MAX_ANSWER, MIN_ANSWER


class InvalidAnswerError(ValueError):
    """Raised when an answer does not fit the active question set."""
    pass


def record(
    ledger: Mapping[int, int],
    questions: Sequence[Question],
    question_id: int,
    value: int,
) -> dict[int, int]:
    """Return a new ledger with ``question_id`` set to ``value``.

    Re-recording the same value leaves the ledger equal; a different value
    overwrites only that entry.

    Raises:
        InvalidAnswerError: If the id is not in ``questions`` or the value is
            outside the Likert scale.
    """
    if isinstance(value, bool) or not isinstance(value, int) or not MIN_ANSWER <= value <= MAX_ANSWER:
        raise InvalidAnswerError(f"Answer must be an integer between {MIN_ANSWER} and {MAX_ANSWER}, got {value!r}")
    if isinstance(question_id, bool) or question_id not in {q.id for q in questions}:
        raise InvalidAnswerError(f"Unknown question id {question_id!r}")
    updated = dict(ledger)
    updated[question_id] = value
    return updated


def is_ready(questions: Sequence[Question], ledger: Mapping[int, int]) -> bool:
    """True when the ledger answers exactly the question set, no more, no fewer."""
    if not questions:
        return False
    return set(ledger) == {q.id for q in questions}


def first_unanswered(questions: Sequence[Question], ledger: Mapping[int, int]) -> Optional[int]:
    """Index of the first question without an answer, or None when all are answered."""
    for index, question in enumerate(questions):
        if question.id not in ledger:
            return index
    return None


def progress(questions: Sequence[Question], ledger: Mapping[int, int]) -> float:
    """Share of answered questions as a percentage."""
    if not questions:
        return 0.0
    ids = {q.id for q in questions}
    answered = sum(1 for qid in ledger if qid in ids)
    return answered * 100.0 / len(questions)
