"""Quiz controller - runs session transitions and the assessment calls.

Presentation layers (the Flask app and the CLI) talk only to this class.
Each method applies one pure transition from ``persona_quiz.session`` through
the session store. When a transition enters a loading phase, the matching
assessment call is made without holding the store lock, and its outcome is
applied as an arrival event tagged with the generation the call was issued
under, so a reset during the call makes the late answer a no-op.
"""

from __future__ import annotations

import logging
from functools import partial

from persona_quiz import session
from persona_quiz.services.assessment_service import AssessmentService, AssessmentServiceError
from persona_quiz.services.session_store import SessionStore
from persona_quiz.session import Mode, Participant, Phase, SessionState

logger = logging.getLogger(__name__)


class QuizController:
    """Drives quiz sessions for any front end."""

    def __init__(self, assessment: AssessmentService | None = None, store: SessionStore | None = None):
        self.assessment = assessment or AssessmentService()
        self.store = store or SessionStore()

    def state(self, session_id: str) -> SessionState:
        return self.store.get(session_id)

    def select_mode(self, session_id: str, mode: Mode) -> SessionState:
        _, after = self.store.update(session_id, partial(session.select_mode, mode=Mode(mode)))
        return after

    def edit_profile(self, session_id: str, participant: Participant, field_name: str, value: str) -> SessionState:
        _, after = self.store.update(
            session_id,
            lambda s: session.edit_profile(s, Participant(participant), field_name, value),
        )
        return after

    def submit(self, session_id: str) -> SessionState:
        """Submit the profile form and fetch the question set."""
        before, after = self.store.update(session_id, session.submit)
        if before.phase is Phase.FORM and after.phase is Phase.RETRIEVING_QUESTIONS:
            return self._fetch_questions(session_id, after)
        return after

    def answer(self, session_id: str, question_id: int, value: int) -> SessionState:
        _, after = self.store.update(session_id, lambda s: session.record_answer(s, question_id, value))
        return after

    def advance(self, session_id: str) -> SessionState:
        _, after = self.store.update(session_id, session.advance)
        return after

    def back(self, session_id: str) -> SessionState:
        _, after = self.store.update(session_id, session.go_back)
        return after

    def complete(self, session_id: str) -> SessionState:
        """Finish the active participant's questionnaire."""
        before, after = self.store.update(session_id, session.complete_questionnaire)
        if before.phase is Phase.ANSWERING and after.phase is Phase.ANALYZING:
            return self._analyze(session_id, after)
        return after

    def reset(self, session_id: str) -> SessionState:
        _, after = self.store.update(session_id, session.reset)
        return after

    def _fetch_questions(self, session_id: str, state: SessionState) -> SessionState:
        generation = state.generation
        try:
            questions = self.assessment.generate_questions(state.profile_a)
        except AssessmentServiceError as e:
            logger.warning("Question retrieval failed for session %s: %s", session_id, e)
            _, after = self.store.update(session_id, lambda s: session.questions_failed(s, generation))
            return after
        _, after = self.store.update(session_id, lambda s: session.questions_received(s, generation, questions))
        return after

    def _analyze(self, session_id: str, state: SessionState) -> SessionState:
        generation = state.generation
        try:
            if state.mode is Mode.INDIVIDUAL:
                result = self.assessment.analyze_individual(state.profile_a, state.questions, state.answers_a)
            else:
                result = self.assessment.analyze_compatibility(
                    state.profile_a,
                    state.answers_a,
                    state.profile_b,
                    state.answers_b,
                    questions=state.questions,
                )
        except AssessmentServiceError as e:
            logger.warning("Analysis failed for session %s: %s", session_id, e)
            _, after = self.store.update(session_id, lambda s: session.analysis_failed(s, generation))
            return after
        _, after = self.store.update(session_id, lambda s: session.analysis_received(s, generation, result))
        return after
