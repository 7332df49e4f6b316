"""Data models - Pure data structures with no business logic."""

from .profile import CATEGORY_OPTIONS, PROFILE_FIELDS, Profile
from .question import LIKERT_LABELS, Question, answer_label
from .result import CompatibilityResult, Dimension, PersonalityResult, Trait

__all__ = [
    "CATEGORY_OPTIONS",
    "PROFILE_FIELDS",
    "Profile",
    "LIKERT_LABELS",
    "Question",
    "answer_label",
    "Trait",
    "PersonalityResult",
    "Dimension",
    "CompatibilityResult",
]
