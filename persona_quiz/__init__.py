"""Persona Quiz - AI personality and compatibility quiz."""

from .models import CompatibilityResult, PersonalityResult, Profile, Question
from .session import Mode, Participant, Phase, SessionState

__all__ = [
    "Profile",
    "Question",
    "PersonalityResult",
    "CompatibilityResult",
    "Mode",
    "Participant",
    "Phase",
    "SessionState",
]
