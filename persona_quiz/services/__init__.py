"""Service layer - Business logic modules.

Each service module has a clear interface and can be developed/tested independently.
"""

from .llm_service import LLMService, LLMServiceError
from .assessment_service import AssessmentService, AssessmentServiceError
from .session_store import SessionStore

__all__ = [
    "LLMService",
    "LLMServiceError",
    "AssessmentService",
    "AssessmentServiceError",
    "SessionStore",
]
