"""Global configuration values."""

import os

# Fast Gemini model used for question generation (can be overridden via env)
QUESTION_MODEL = os.environ.get("GEMINI_QUESTION_MODEL", "gemini-2.5-flash")

# Reasoning Gemini model used for personality and compatibility analysis
ANALYSIS_MODEL = os.environ.get("GEMINI_ANALYSIS_MODEL", "gemini-3-pro-preview")

# OpenAI model used when LLM_PROVIDER=openai
OPENAI_MODEL = os.environ.get("OPENAI_MODEL", "gpt-4o")

# Which provider backs the assessment service: "gemini" or "openai"
LLM_PROVIDER = os.environ.get("LLM_PROVIDER", "gemini").lower()

# Number of statements requested per questionnaire
QUESTION_COUNT = int(os.environ.get("QUIZ_QUESTION_COUNT", "15"))

# Pause before the page moves on to the next question after an answer
ADVANCE_DELAY_MS = int(os.environ.get("QUIZ_ADVANCE_DELAY_MS", "250"))

SECRET_KEY = os.environ.get("SECRET_KEY", "persona-quiz-dev-key")

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

# Idle quiz sessions are dropped from memory after this many seconds
SESSION_TTL_SECONDS = int(os.environ.get("QUIZ_SESSION_TTL_SECONDS", "3600"))
