# src/app/services/ai_modification_service.py
"""
AI recipe modification.
Rewrites recipe text for a user's dietary preferences through an external
text-generation capability, classifying and logging its failures.
"""
from __future__ import annotations

import logging

import httpx

from src.app.domain.content import validate_text_for_ai
from src.app.domain.errors import (
    ExternalErrorKind,
    ExternalServiceError,
    PreferencesRequiredError,
    RecipeDomainError,
    ValidationError,
)
from src.app.domain.models import ModificationErrorLog
from src.app.infra.db.base import PreferenceProvider, RecipeStore
from src.app.services.prompt_builder import build_modification_prompt
from src.services.errors import AuthenticationFailedError, NetworkTimeoutError, RateLimitedError
from src.services.types import GenerationParams, TextGenerator

logger = logging.getLogger(__name__)

MAX_LOGGED_TEXT_CHARS = 1000

_NETWORK_ERRORS = (NetworkTimeoutError, httpx.TransportError, ConnectionError, TimeoutError)


def classify_external_error(error: Exception) -> ExternalErrorKind:
    """Map a generation failure to an error kind from its type, status code or message."""
    if isinstance(error, RateLimitedError):
        return ExternalErrorKind.RATE_LIMIT
    if isinstance(error, AuthenticationFailedError):
        return ExternalErrorKind.AUTHENTICATION
    if isinstance(error, _NETWORK_ERRORS):
        return ExternalErrorKind.NETWORK

    status_code = getattr(error, "status_code", None) or getattr(error, "code", None)
    if status_code == 429:
        return ExternalErrorKind.RATE_LIMIT
    if status_code in (401, 403):
        return ExternalErrorKind.AUTHENTICATION

    message = str(error).lower()
    if "rate limit" in message or "resource_exhausted" in message:
        return ExternalErrorKind.RATE_LIMIT
    if "authentication" in message or "api key" in message:
        return ExternalErrorKind.AUTHENTICATION
    if "network" in message or "timeout" in message or "connection" in message:
        return ExternalErrorKind.NETWORK
    return ExternalErrorKind.GENERIC


def _log_code(error: RecipeDomainError) -> int:
    if isinstance(error, ExternalServiceError):
        return error.log_code
    return error.status_code


class AiModificationOrchestrator:
    """
    Orchestrates one AI modification request:
    1. Validates the recipe text length.
    2. Loads the user's preference profile.
    3. Builds the prompt and calls the text generator.
    4. Logs failures to the modification error log (best effort).
    """

    def __init__(
        self,
        preferences: PreferenceProvider,
        generator: TextGenerator,
        error_log: RecipeStore,
        params: GenerationParams | None = None,
    ):
        self._preferences = preferences
        self._generator = generator
        self._error_log = error_log
        self.params = params or GenerationParams()

    @property
    def model_name(self) -> str:
        return self._generator.model_name

    def modify(self, recipe_text: str, user_id: str) -> str:
        """
        Rewrite a recipe according to the user's preferences.

        Args:
            recipe_text: Recipe text, 100 to 10000 characters once trimmed
            user_id: The user whose preferences apply

        Returns:
            The modified recipe text

        Raises:
            ValidationError: If the text length is out of bounds
            PreferencesRequiredError: If the user has no preference profile
            ExternalServiceError: If generation fails or returns nothing
        """
        validation_error = validate_text_for_ai(recipe_text)
        if validation_error:
            raise ValidationError(validation_error)

        try:
            profile = self._preferences.get(user_id)
            if profile is None:
                raise PreferencesRequiredError()

            prompt = build_modification_prompt(recipe_text, profile)
            modified = self._generate(prompt)

            if not modified.strip():
                raise ExternalServiceError(ExternalErrorKind.EMPTY_RESPONSE, "AI service returned empty response")
        except RecipeDomainError as error:
            self._log_failure(recipe_text, _log_code(error), str(error))
            raise

        logger.info("Recipe modified: user=%s, model=%s, chars=%d", user_id, self.model_name, len(modified))
        return modified

    def _generate(self, prompt: str) -> str:
        try:
            return self._generator.generate(prompt, self.params)
        except Exception as error:
            kind = classify_external_error(error)
            logger.warning("Generation failed: model=%s, kind=%s, error=%s", self.model_name, kind.value, error)
            raise ExternalServiceError(kind, str(error) or kind.value) from error

    def _log_failure(self, recipe_text: str, error_code: int, description: str) -> None:
        entry = ModificationErrorLog(
            recipe_text=recipe_text[:MAX_LOGGED_TEXT_CHARS],
            error_code=error_code,
            error_description=description,
            ai_model=self.model_name,
        )
        try:
            self._error_log.insert_modification_error(entry)
        except Exception:
            logger.exception("Failed to log modification error")
