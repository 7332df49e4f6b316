"""Assessment Service - Question generation and personality analysis.

This module handles:
- Generating a tailored Likert questionnaire for one participant
- Analyzing one participant's answers into a personality report
- Comparing two participants' answers into a compatibility report

Interface Contract:
- generate_questions(profile) -> list[Question]
- analyze_individual(profile, questions, answers) -> PersonalityResult
- analyze_compatibility(profile_a, answers_a, profile_b, answers_b, questions=...) -> CompatibilityResult
- Every call is one request with no retry
- All methods raise AssessmentServiceError on failure, including responses
  that do not match the declared schema
"""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping, Sequence

from config import ANALYSIS_MODEL, QUESTION_COUNT, QUESTION_MODEL
from persona_quiz.models import (
    CompatibilityResult,
    PersonalityResult,
    Profile,
    Question,
    answer_label,
)

logger = logging.getLogger(__name__)


class AssessmentServiceError(Exception):
    """Raised when the assessment provider fails or answers out of shape."""
    pass


QUESTIONS_SCHEMA: dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "questions": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "id": {"type": "INTEGER"},
                    "text": {"type": "STRING"},
                },
                "required": ["id", "text"],
            },
        },
    },
    "required": ["questions"],
}

PERSONALITY_SCHEMA: dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "archetype": {"type": "STRING", "description": "A creative name for their personality type"},
        "summary": {"type": "STRING", "description": "A 2-3 sentence summary"},
        "traits": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "label": {"type": "STRING", "description": "e.g., Openness, Emotional Stability"},
                    "score": {"type": "INTEGER", "description": "0 to 100"},
                    "description": {"type": "STRING", "description": "Short description of this score"},
                },
                "required": ["label", "score", "description"],
            },
        },
        "detailedAnalysis": {
            "type": "STRING",
            "description": "A few paragraphs describing the personality in depth.",
        },
    },
    "required": ["archetype", "summary", "traits", "detailedAnalysis"],
}

COMPATIBILITY_SCHEMA: dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "compatibilityScore": {"type": "INTEGER", "description": "0-100 overall match"},
        "relationshipArchetype": {"type": "STRING", "description": "A creative name for this pairing"},
        "synergyAnalysis": {"type": "STRING", "description": "Detailed analysis of why they work well together"},
        "challenges": {"type": "STRING", "description": "Potential friction points"},
        "dimensions": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "label": {"type": "STRING", "description": "Trait being compared"},
                    "scoreUser1": {"type": "INTEGER"},
                    "scoreUser2": {"type": "INTEGER"},
                    "insight": {"type": "STRING", "description": "Insight on this specific difference/similarity"},
                },
                "required": ["label", "scoreUser1", "scoreUser2", "insight"],
            },
        },
    },
    "required": ["compatibilityScore", "relationshipArchetype", "synergyAnalysis", "challenges", "dimensions"],
}


class AssessmentService:
    """Service wrapping the three calls to the generative provider."""

    def __init__(self, llm_service=None, *, question_count: int = QUESTION_COUNT):
        """Initialize with optional LLM service dependency.

        Args:
            llm_service: LLM service for generation. If None, uses default.
            question_count: Default number of statements per questionnaire.
        """
        self._llm = llm_service
        self.question_count = question_count

    @property
    def llm(self):
        """Lazy load LLM service."""
        if self._llm is None:
            from persona_quiz.services.llm_service import LLMService
            self._llm = LLMService.get_instance()
        return self._llm

    def generate_questions(self, profile: Profile, *, count: int | None = None) -> list[Question]:
        """Generate a questionnaire tailored to one participant.

        Args:
            profile: The participant the statements are written for
            count: Number of statements to request (defaults to question_count)

        Returns:
            list[Question]: Non-empty, ordered, with unique ids

        Raises:
            AssessmentServiceError: If generation fails or the set is unusable
        """
        count = count or self.question_count
        prompt = self.build_questions_prompt(profile, count)
        logger.info("Requesting %d questions for %s", count, profile.name)
        try:
            response = self.llm.call(prompt, json_mode=True, schema=QUESTIONS_SCHEMA, model=QUESTION_MODEL)
            return self._parse_questions(response)
        except Exception as e:
            raise AssessmentServiceError(f"Question generation failed: {e}") from e

    def analyze_individual(
        self,
        profile: Profile,
        questions: Sequence[Question],
        answers: Mapping[int, int],
    ) -> PersonalityResult:
        """Analyze one participant's answers.

        Raises:
            AssessmentServiceError: If analysis fails or the report is malformed
        """
        try:
            prompt = self.build_individual_prompt(profile, questions, answers)
            logger.info("Requesting personality analysis for %s", profile.name)
            response = self.llm.call(prompt, json_mode=True, schema=PERSONALITY_SCHEMA, model=ANALYSIS_MODEL)
            return PersonalityResult.from_dict(_load_json(response))
        except Exception as e:
            raise AssessmentServiceError(f"Personality analysis failed: {e}") from e

    def analyze_compatibility(
        self,
        profile_a: Profile,
        answers_a: Mapping[int, int],
        profile_b: Profile,
        answers_b: Mapping[int, int],
        *,
        questions: Sequence[Question],
    ) -> CompatibilityResult:
        """Compare two participants who answered the same questions.

        Raises:
            AssessmentServiceError: If analysis fails or the report is malformed
        """
        try:
            prompt = self.build_compatibility_prompt(profile_a, answers_a, profile_b, answers_b, questions)
            logger.info("Requesting compatibility analysis for %s and %s", profile_a.name, profile_b.name)
            response = self.llm.call(prompt, json_mode=True, schema=COMPATIBILITY_SCHEMA, model=ANALYSIS_MODEL)
            return CompatibilityResult.from_dict(_load_json(response))
        except Exception as e:
            raise AssessmentServiceError(f"Compatibility analysis failed: {e}") from e

    def build_questions_prompt(self, profile: Profile, count: int) -> str:
        """Build prompt for question generation."""
        return f'''Generate {count} psychological personality assessment questions tailored for a {profile.age} year old {profile.category} named {profile.name}.
The questions should be suitable for determining "Big 5" personality traits (Openness, Conscientiousness, Extraversion, Agreeableness, Neuroticism) and general outlook.
Phrase them as statements that the user can agree or disagree with.

Return a JSON object with:
- questions: array of objects, each with
  - id: integer, unique, starting at 1
  - text: string (the statement)

Return ONLY the JSON object, no additional text.'''

    def build_individual_prompt(
        self,
        profile: Profile,
        questions: Sequence[Question],
        answers: Mapping[int, int],
    ) -> str:
        """Build prompt for individual analysis."""
        answer_text = "\n".join(
            f"Q: {q.text} | A: {answer_label(answers[q.id])}" for q in questions
        )
        return f'''Analyze the personality of {profile.name} ({profile.age}, {profile.category}) based on these self-assessment responses:

{answer_text}

Provide a psychological profile including an Archetype name, a summary, 5-6 key personality traits scored 0-100, and a detailed analysis.

Return a JSON object with:
- archetype: string (a creative name for their personality type)
- summary: string (2-3 sentences)
- traits: array of objects with label (string), score (integer 0-100), description (string)
- detailedAnalysis: string (a few paragraphs)

Return ONLY the JSON object, no additional text.'''

    def build_compatibility_prompt(
        self,
        profile_a: Profile,
        answers_a: Mapping[int, int],
        profile_b: Profile,
        answers_b: Mapping[int, int],
        questions: Sequence[Question],
    ) -> str:
        """Build prompt for compatibility analysis."""
        return f'''Perform a compatibility analysis between two people based on their personality assessment.

Person 1: {profile_a.name} ({profile_a.age}, {profile_a.category})
Responses:
{_format_answers(questions, answers_a)}

Person 2: {profile_b.name} ({profile_b.age}, {profile_b.category})
Responses:
{_format_answers(questions, answers_b)}

Determine their compatibility score (0-100), give them a Relationship Archetype name, explain the synergy, potential challenges, and compare them across 5 key dimensions.

Return a JSON object with:
- compatibilityScore: integer 0-100
- relationshipArchetype: string
- synergyAnalysis: string
- challenges: string
- dimensions: array of objects with label (string), scoreUser1 (integer 0-100), scoreUser2 (integer 0-100), insight (string)

Return ONLY the JSON object, no additional text.'''

    def _parse_questions(self, response: str) -> list[Question]:
        """Parse LLM response into an ordered question list."""
        data = _load_json(response)
        items = data.get("questions") if isinstance(data, dict) else None
        if not isinstance(items, list) or not items:
            raise AssessmentServiceError("Response contained no questions")

        questions: list[Question] = []
        seen: set[int] = set()
        for item in items:
            if not isinstance(item, dict):
                raise AssessmentServiceError("Every question must be an object")
            qid = item.get("id")
            text = item.get("text")
            if isinstance(qid, bool) or not isinstance(qid, int):
                raise AssessmentServiceError(f"Question id must be an integer, got {qid!r}")
            if qid in seen:
                raise AssessmentServiceError(f"Duplicate question id {qid}")
            if not isinstance(text, str) or not text.strip():
                raise AssessmentServiceError(f"Question {qid} has no text")
            seen.add(qid)
            questions.append(Question(id=qid, text=text.strip()))
        return questions


def _format_answers(questions: Sequence[Question], answers: Mapping[int, int]) -> str:
    return "\n".join(f'"{q.text}": {answer_label(answers[q.id])}' for q in questions)


def _load_json(response: str) -> Any:
    try:
        return json.loads(response)
    except (TypeError, json.JSONDecodeError) as e:
        raise AssessmentServiceError(f"Invalid JSON response: {e}") from e
