"""Quiz session state machine.

The whole session is one immutable ``SessionState`` value. Every user intent
and every assessment-service arrival is a pure function taking the current
state and returning the next one, so the machine can be driven and tested
without any rendering layer.

Phases::

    form -> retrieving_questions -> answering -> analyzing -> results
              |                                    |
              +------------- failure --------------+--> form

Events that do not apply to the current phase return the state unchanged.
Arrival events carry the generation they were issued under and are discarded
when the session has since been reset or switched mode.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Optional, Sequence, Union

from persona_quiz import ledger
from persona_quiz.models import CompatibilityResult, PersonalityResult, Profile, Question

logger = logging.getLogger(__name__)

QUESTIONS_FAILED_NOTICE = "Failed to generate questions. Please try again."
ANALYSIS_FAILED_NOTICE = "Analysis failed."
COMPATIBILITY_FAILED_NOTICE = "Compatibility Analysis failed."


class Phase(str, Enum):
    """Where the session currently is."""
    FORM = "form"
    RETRIEVING_QUESTIONS = "retrieving_questions"
    ANSWERING = "answering"
    ANALYZING = "analyzing"
    RESULTS = "results"


class Mode(str, Enum):
    """Individual report or two-person comparison."""
    INDIVIDUAL = "individual"
    COMPARISON = "comparison"


class Participant(str, Enum):
    """Which profile / ledger an action targets."""
    A = "a"
    B = "b"


@dataclass(frozen=True)
class SessionState:
    """Complete state of one quiz session."""
    mode: Mode = Mode.INDIVIDUAL
    phase: Phase = Phase.FORM
    generation: int = 0
    profile_a: Profile = field(default_factory=Profile)
    profile_b: Profile = field(default_factory=Profile)
    questions: tuple[Question, ...] = ()
    answers_a: dict[int, int] = field(default_factory=dict)
    answers_b: dict[int, int] = field(default_factory=dict)
    active: Participant = Participant.A
    current_index: int = 0
    individual_result: Optional[PersonalityResult] = None
    compatibility_result: Optional[CompatibilityResult] = None
    notice: Optional[str] = None

    @property
    def active_answers(self) -> dict[int, int]:
        return self.answers_a if self.active is Participant.A else self.answers_b

    @property
    def active_profile(self) -> Profile:
        return self.profile_a if self.active is Participant.A else self.profile_b

    @property
    def current_question(self) -> Optional[Question]:
        if self.phase is not Phase.ANSWERING or not self.questions:
            return None
        return self.questions[self.current_index]

    def to_dict(self) -> dict[str, Any]:
        """Render the state for the presentation layer."""
        question = self.current_question
        return {
            "mode": self.mode.value,
            "phase": self.phase.value,
            "generation": self.generation,
            "profiles": {
                Participant.A.value: self.profile_a.to_dict(),
                Participant.B.value: self.profile_b.to_dict(),
            },
            "can_submit": can_submit(self),
            "active_participant": self.active.value,
            "active_name": self.active_profile.name,
            "questions": [q.to_dict() for q in self.questions],
            "current_index": self.current_index,
            "current_question": question.to_dict() if question else None,
            "current_answer": self.active_answers.get(question.id) if question else None,
            "answers": {str(qid): value for qid, value in self.active_answers.items()},
            "progress": ledger.progress(self.questions, self.active_answers),
            "ready": ledger.is_ready(self.questions, self.active_answers),
            "individual_result": self.individual_result.to_dict() if self.individual_result else None,
            "compatibility_result": (
                self.compatibility_result.to_dict() if self.compatibility_result else None
            ),
            "notice": self.notice,
        }


AnalysisResult = Union[PersonalityResult, CompatibilityResult]


def new_session(mode: Mode = Mode.INDIVIDUAL, *, generation: int = 0) -> SessionState:
    """Fresh session in the form phase."""
    return SessionState(mode=Mode(mode), generation=generation)


def _inert(state: SessionState, event: str) -> SessionState:
    logger.debug("Ignoring %s in phase %s", event, state.phase.value)
    return state


def _fail(state: SessionState, notice: str) -> SessionState:
    # Profiles survive so the form can be resubmitted; everything else goes.
    return SessionState(
        mode=state.mode,
        generation=state.generation,
        profile_a=state.profile_a,
        profile_b=state.profile_b,
        notice=notice,
    )


def _is_stale(state: SessionState, generation: int, event: str) -> bool:
    if generation != state.generation:
        logger.info(
            "Discarding stale %s for generation %d (current %d)",
            event,
            generation,
            state.generation,
        )
        return True
    return False


def select_mode(state: SessionState, mode: Mode) -> SessionState:
    """Switch tabs: full reset, then apply the new mode."""
    return new_session(Mode(mode), generation=state.generation + 1)


def reset(state: SessionState) -> SessionState:
    """Clear every entity and return to the default mode."""
    return new_session(generation=state.generation + 1)


def edit_profile(state: SessionState, participant: Participant, field_name: str, value: str) -> SessionState:
    """Change one profile field while the form is shown.

    Raises:
        ValueError: If ``field_name`` is not a profile field.
    """
    if state.phase is not Phase.FORM:
        return _inert(state, "edit_profile")
    participant = Participant(participant)
    if participant is Participant.B and state.mode is not Mode.COMPARISON:
        return _inert(state, "edit_profile for participant b")
    if participant is Participant.A:
        return replace(state, profile_a=state.profile_a.with_field(field_name, value), notice=None)
    return replace(state, profile_b=state.profile_b.with_field(field_name, value), notice=None)


def can_submit(state: SessionState) -> bool:
    """Submission is enabled iff every required profile is complete."""
    if state.phase is not Phase.FORM:
        return False
    if not state.profile_a.is_complete:
        return False
    if state.mode is Mode.COMPARISON and not state.profile_b.is_complete:
        return False
    return True


def submit(state: SessionState) -> SessionState:
    """Move from the form to question retrieval."""
    if not can_submit(state):
        return _inert(state, "submit")
    return replace(
        state,
        phase=Phase.RETRIEVING_QUESTIONS,
        questions=(),
        answers_a={},
        answers_b={},
        active=Participant.A,
        current_index=0,
        individual_result=None,
        compatibility_result=None,
        notice=None,
    )


def questions_received(state: SessionState, generation: int, questions: Sequence[Question]) -> SessionState:
    """Apply a successful question retrieval."""
    if _is_stale(state, generation, "question set"):
        return state
    if state.phase is not Phase.RETRIEVING_QUESTIONS:
        return _inert(state, "questions_received")
    if not questions:
        logger.warning("Assessment service returned an empty question set")
        return _fail(state, QUESTIONS_FAILED_NOTICE)
    return replace(
        state,
        phase=Phase.ANSWERING,
        questions=tuple(questions),
        active=Participant.A,
        current_index=0,
    )


def questions_failed(state: SessionState, generation: int, notice: str = QUESTIONS_FAILED_NOTICE) -> SessionState:
    """Apply a failed question retrieval."""
    if _is_stale(state, generation, "question failure"):
        return state
    if state.phase is not Phase.RETRIEVING_QUESTIONS:
        return _inert(state, "questions_failed")
    return _fail(state, notice)


def record_answer(state: SessionState, question_id: int, value: int) -> SessionState:
    """Record an answer for the active participant.

    The view does not move; call ``advance`` for that.

    Raises:
        InvalidAnswerError: If the question id or value is not valid.
    """
    if state.phase is not Phase.ANSWERING:
        return _inert(state, "record_answer")
    updated = ledger.record(state.active_answers, state.questions, question_id, value)
    if state.active is Participant.A:
        return replace(state, answers_a=updated)
    return replace(state, answers_b=updated)


def advance(state: SessionState) -> SessionState:
    """Move the view on once the current question has an answer."""
    question = state.current_question
    if question is None or question.id not in state.active_answers:
        return _inert(state, "advance")
    if state.current_index + 1 >= len(state.questions):
        return state
    return replace(state, current_index=state.current_index + 1)


def go_back(state: SessionState) -> SessionState:
    """Step back one question; answers are kept."""
    if state.phase is not Phase.ANSWERING or state.current_index == 0:
        return _inert(state, "go_back")
    return replace(state, current_index=state.current_index - 1)


def complete_questionnaire(state: SessionState) -> SessionState:
    """Proceed once the active participant has answered every question.

    In comparison mode the first completion hands the same question set to
    participant B; the second one starts the analysis.
    """
    if state.phase is not Phase.ANSWERING:
        return _inert(state, "complete_questionnaire")
    if not ledger.is_ready(state.questions, state.active_answers):
        return _inert(state, "complete_questionnaire with open questions")
    if state.mode is Mode.COMPARISON and state.active is Participant.A:
        start = ledger.first_unanswered(state.questions, state.answers_b)
        return replace(state, active=Participant.B, current_index=start or 0)
    return replace(state, phase=Phase.ANALYZING)


def analysis_received(state: SessionState, generation: int, result: AnalysisResult) -> SessionState:
    """Apply a successful analysis, which must match the session mode."""
    if _is_stale(state, generation, "analysis result"):
        return state
    if state.phase is not Phase.ANALYZING:
        return _inert(state, "analysis_received")
    if state.mode is Mode.INDIVIDUAL and isinstance(result, PersonalityResult):
        return replace(state, phase=Phase.RESULTS, individual_result=result)
    if state.mode is Mode.COMPARISON and isinstance(result, CompatibilityResult):
        return replace(state, phase=Phase.RESULTS, compatibility_result=result)
    logger.warning("Analysis result %s does not match %s mode", type(result).__name__, state.mode.value)
    return _fail(state, failure_notice(state))


def analysis_failed(state: SessionState, generation: int, notice: Optional[str] = None) -> SessionState:
    """Apply a failed analysis."""
    if _is_stale(state, generation, "analysis failure"):
        return state
    if state.phase is not Phase.ANALYZING:
        return _inert(state, "analysis_failed")
    return _fail(state, notice or failure_notice(state))


def failure_notice(state: SessionState) -> str:
    """User-facing notice for a failure in the current phase."""
    if state.phase is Phase.RETRIEVING_QUESTIONS:
        return QUESTIONS_FAILED_NOTICE
    if state.mode is Mode.COMPARISON:
        return COMPATIBILITY_FAILED_NOTICE
    return ANALYSIS_FAILED_NOTICE
