"""LLM Service - Abstraction layer for AI model calls.

This module provides a unified interface for calling different LLM providers
(Gemini, OpenAI) with consistent error handling and response formatting.

Interface Contract:
- call() returns the raw response text
- All methods raise LLMServiceError on failure
- Callers should not depend on specific LLM provider details
"""

from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod
from typing import Any

import google.generativeai as genai
from openai import OpenAI

from config import ANALYSIS_MODEL, LLM_PROVIDER, OPENAI_MODEL

logger = logging.getLogger(__name__)


class LLMServiceError(Exception):
    """Raised when LLM call fails."""
    pass


class BaseLLMService(ABC):
    """Abstract base class for LLM services."""

    @abstractmethod
    def call(
        self,
        prompt: str,
        *,
        json_mode: bool = False,
        schema: dict[str, Any] | None = None,
        model: str | None = None,
    ) -> str:
        """Call the LLM with a prompt.

        Args:
            prompt: The prompt to send to the LLM
            json_mode: If True, expect JSON response
            schema: Declared response shape (Gemini schema dialect). Providers
                without structured output rely on the prompt instead.
            model: Model override for this call

        Returns:
            str: The LLM response text

        Raises:
            LLMServiceError: If the call fails
        """
        pass


class GeminiService(BaseLLMService):
    """Google Gemini LLM service implementation."""

    def __init__(self, model: str = ANALYSIS_MODEL):
        self.model = model
        self._configured = False

    def _configure(self) -> None:
        """Configure Gemini API (lazy initialization)."""
        if self._configured:
            return
        api_key = os.environ.get("GEMINI_API_KEY") or os.environ.get("GOOGLE_API_KEY")
        if not api_key:
            raise LLMServiceError("GEMINI_API_KEY or GOOGLE_API_KEY environment variable not set")
        genai.configure(api_key=api_key)
        self._configured = True

    def call(
        self,
        prompt: str,
        *,
        json_mode: bool = False,
        schema: dict[str, Any] | None = None,
        model: str | None = None,
    ) -> str:
        """Call Gemini model."""
        self._configure()
        model_name = model or self.model
        try:
            gen_config = None
            if json_mode or schema is not None:
                gen_config = genai.GenerationConfig(
                    response_mime_type="application/json",
                    response_schema=schema,
                )
            gemini_model = genai.GenerativeModel(model_name)
            response = gemini_model.generate_content(prompt, generation_config=gen_config)
            text = response.text
        except Exception as e:
            raise LLMServiceError(f"Gemini call failed: {e}") from e
        if not text:
            raise LLMServiceError(f"Gemini model {model_name} returned no content")
        return text


class OpenAIService(BaseLLMService):
    """OpenAI LLM service implementation."""

    def __init__(self, model: str = OPENAI_MODEL):
        self.model = model
        self._client: OpenAI | None = None

    def _get_client(self) -> OpenAI:
        """Get or create OpenAI client (lazy initialization)."""
        if self._client is None:
            api_key = os.environ.get("OPENAI_API_KEY")
            if not api_key:
                raise LLMServiceError("OPENAI_API_KEY environment variable not set")
            self._client = OpenAI(api_key=api_key)
        return self._client

    def call(
        self,
        prompt: str,
        *,
        json_mode: bool = False,
        schema: dict[str, Any] | None = None,
        model: str | None = None,
    ) -> str:
        """Call OpenAI model.

        Gemini model names are meaningless here, so ``model`` is ignored and
        the configured OpenAI model is always used.
        """
        client = self._get_client()
        try:
            response_format = {"type": "json_object"} if json_mode or schema is not None else None
            response = client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": "You are a concise assistant that returns strict JSON only."},
                    {"role": "user", "content": prompt},
                ],
                response_format=response_format,
            )
            text = response.choices[0].message.content or ""
        except Exception as e:
            raise LLMServiceError(f"OpenAI call failed: {e}") from e
        if not text:
            raise LLMServiceError(f"OpenAI model {self.model} returned no content")
        return text


def create_service(provider: str = LLM_PROVIDER) -> BaseLLMService:
    """Build the service for a provider name."""
    if provider == "gemini":
        return GeminiService()
    if provider == "openai":
        return OpenAIService()
    raise LLMServiceError(f"Unknown LLM provider '{provider}'")


# Default service instance (can be swapped for testing)
class LLMService:
    """Facade for LLM services with provider switching."""

    _instance: BaseLLMService | None = None

    @classmethod
    def get_instance(cls) -> BaseLLMService:
        """Get the configured LLM service instance."""
        if cls._instance is None:
            cls._instance = create_service()
            logger.info("Using %s", type(cls._instance).__name__)
        return cls._instance

    @classmethod
    def set_instance(cls, service: BaseLLMService) -> None:
        """Set a custom LLM service (useful for testing)."""
        cls._instance = service

    @classmethod
    def reset(cls) -> None:
        """Reset to default service."""
        cls._instance = None
