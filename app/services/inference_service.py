"""Inference API client backed by Google Gemini."""

import logging
from abc import ABC, abstractmethod

import google.generativeai as genai
from google.generativeai.types import HarmBlockThreshold, HarmCategory

from app.core.config import Settings
from app.exceptions.ai import (
    AIConfigurationError,
    AIServiceError,
    AIServiceUnavailableError,
    map_ai_error,
)


logger = logging.getLogger(__name__)


class InferenceClient(ABC):
    """One request/response call to a large-language-model completion service."""

    @abstractmethod
    async def complete(self, system_instruction: str, user_text: str) -> str:
        """Return the completion for a single user turn.

        An empty string means the service answered without usable text.
        No conversation history is sent; every call is stateless.
        """


class GeminiInferenceClient(InferenceClient):
    """Gemini implementation of :class:`InferenceClient`.

    The SDK is configured lazily on the first call so a missing API key
    surfaces as a failed exchange rather than a failed startup.
    """

    def __init__(self, config: Settings):
        """Initialize the client from application settings.

        Args:
            config: Settings carrying the Gemini key, model and sampling options.
        """
        self.config = config
        self._configured = False

    def _ensure_configured(self):
        """Configure the Gemini SDK with the API key."""
        if self._configured:
            return
        if not self.config.gemini_api_key:
            raise AIConfigurationError("Gemini API key not configured")

        try:
            genai.configure(api_key=self.config.gemini_api_key)
        except Exception as e:
            logger.error(f"Failed to initialize Gemini client: {str(e)}")
            raise AIConfigurationError(f"Failed to initialize AI service: {str(e)}") from e

        self._configured = True
        logger.info(f"✅ Gemini client initialized with model: {self.config.gemini_model}")

    def _build_model(self, system_instruction: str):
        """Create a model bound to the system instruction and generation limits."""
        return genai.GenerativeModel(
            model_name=self.config.gemini_model,
            system_instruction=system_instruction,
            safety_settings={
                HarmCategory.HARM_CATEGORY_HARASSMENT: HarmBlockThreshold.BLOCK_NONE,
                HarmCategory.HARM_CATEGORY_HATE_SPEECH: HarmBlockThreshold.BLOCK_NONE,
                HarmCategory.HARM_CATEGORY_SEXUALLY_EXPLICIT: HarmBlockThreshold.BLOCK_NONE,
                HarmCategory.HARM_CATEGORY_DANGEROUS_CONTENT: HarmBlockThreshold.BLOCK_NONE,
            },
            generation_config=genai.types.GenerationConfig(
                candidate_count=1,
                max_output_tokens=self.config.gemini_max_tokens,
                temperature=self.config.gemini_temperature,
            ),
        )

    async def complete(self, system_instruction: str, user_text: str) -> str:
        self._ensure_configured()
        model = self._build_model(system_instruction)

        try:
            response = await model.generate_content_async(user_text)
        except Exception as e:
            raise self._classify_error(e) from e

        return self._extract_text(response)

    def _extract_text(self, response) -> str:
        """Return the response text, or an empty string if nothing usable came back."""
        if not response or not getattr(response, "candidates", None):
            logger.warning("Gemini returned no candidates")
            return ""

        try:
            text = response.text
        except ValueError as e:
            # Raised by the SDK when the candidate has no text parts (e.g. blocked).
            logger.warning(f"Gemini response has no text: {str(e)}")
            return ""

        return text or ""

    @staticmethod
    def _classify_error(error: Exception) -> AIServiceError:
        """Map an SDK failure onto the AI exception hierarchy."""
        full_error_msg = str(error)
        error_msg = full_error_msg.lower()

        if "quota" in error_msg or "429" in full_error_msg:
            logger.error(f"Gemini quota exceeded: {full_error_msg}")
            return map_ai_error("quota_exceeded", "AI service quota exceeded")
        if "503" in full_error_msg or "unavailable" in error_msg:
            logger.error(f"Gemini unavailable: {full_error_msg}")
            return AIServiceUnavailableError()
        if "api key" in error_msg or "permission" in error_msg:
            logger.error(f"Gemini rejected credentials: {full_error_msg}")
            return map_ai_error("configuration_error", "AI service rejected the configured credentials")
        if "400" in full_error_msg or "invalid" in error_msg:
            logger.error(f"Gemini rejected the request: {full_error_msg}")
            return map_ai_error("invalid_request", "AI service rejected the request")

        logger.error(f"Gemini API call failed: {full_error_msg}")
        return AIServiceError(f"AI generation failed: {full_error_msg}")
