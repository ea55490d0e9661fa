from __future__ import annotations

import logging

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from src.services.errors import (
    AuthenticationFailedError,
    GenerationConfigurationError,
    GenerationFailedError,
    NetworkTimeoutError,
    RateLimitedError,
)
from src.services.types import GenerationParams, TextGenerator

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash"

_AUTH_MARKERS = ("API_KEY_INVALID", "API key not valid", "PERMISSION_DENIED", "UNAUTHENTICATED")


def _is_rate_limited_error(exc: Exception) -> bool:
    status_code = getattr(exc, "code", None) or getattr(exc, "status_code", None)
    if status_code == 429:
        return True
    return "RESOURCE_EXHAUSTED" in str(exc)


def _is_authentication_error(exc: Exception) -> bool:
    status_code = getattr(exc, "code", None) or getattr(exc, "status_code", None)
    if status_code in (401, 403):
        return True
    message = str(exc)
    return any(marker in message for marker in _AUTH_MARKERS)


class GeminiClient(TextGenerator):
    def __init__(
        self,
        api_key: str,
        model_name: str = DEFAULT_MODEL,
        system_instruction: str | None = None,
    ) -> None:
        if not api_key:
            raise GenerationConfigurationError("Missing Google API key.")
        self.model_name = model_name
        self.system_instruction = system_instruction
        self._client = genai.Client(api_key=api_key)

    def _build_config(self, params: GenerationParams) -> types.GenerateContentConfig:
        return types.GenerateContentConfig(
            system_instruction=self.system_instruction,
            temperature=params.temperature,
            max_output_tokens=params.max_output_tokens,
            top_p=params.top_p,
        )

    def generate(self, prompt: str, params: GenerationParams) -> str:
        try:
            response = self._client.models.generate_content(
                model=self.model_name,
                contents=prompt,
                config=self._build_config(params),
            )
        except genai_errors.APIError as err:
            if _is_rate_limited_error(err):
                raise RateLimitedError("Gemini API rate limit reached. Try again in a moment.") from err
            if _is_authentication_error(err):
                raise AuthenticationFailedError("Gemini API authentication failed.") from err
            logger.error("Gemini API error: model=%s, code=%s", self.model_name, getattr(err, "code", None))
            raise GenerationFailedError(str(err), status_code=getattr(err, "code", None)) from err
        except httpx.TransportError as err:
            raise NetworkTimeoutError(self.model_name, str(err)) from err

        return response.text or ""
