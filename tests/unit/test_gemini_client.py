from __future__ import annotations

from collections.abc import Iterator
from unittest.mock import MagicMock, patch

import httpx
import pytest
from google.genai import errors as genai_errors

from src.services.errors import (
    AuthenticationFailedError,
    GenerationConfigurationError,
    GenerationFailedError,
    NetworkTimeoutError,
    RateLimitedError,
)
from src.services.gemini_client import GeminiClient
from src.services.types import GenerationParams


def _api_error(code: int, status: str, message: str) -> genai_errors.APIError:
    return genai_errors.ClientError(code, {"error": {"code": code, "status": status, "message": message}})


@pytest.fixture
def sdk_client() -> Iterator[MagicMock]:
    with patch("src.services.gemini_client.genai.Client") as client_cls:
        yield client_cls.return_value


@pytest.fixture
def client(sdk_client: MagicMock) -> GeminiClient:
    return GeminiClient(api_key="key", model_name="gemini-test", system_instruction="Be a chef.")


class TestConstruction:
    def test_missing_key(self) -> None:
        with pytest.raises(GenerationConfigurationError):
            GeminiClient(api_key="")


class TestGenerate:
    def test_returns_text_and_passes_params(self, client: GeminiClient, sdk_client: MagicMock) -> None:
        sdk_client.models.generate_content.return_value = MagicMock(text="Vegan soup.")
        params = GenerationParams(temperature=0.3, max_output_tokens=100, top_p=0.8)

        assert client.generate("prompt", params) == "Vegan soup."

        kwargs = sdk_client.models.generate_content.call_args.kwargs
        assert kwargs["model"] == "gemini-test"
        assert kwargs["contents"] == "prompt"
        config = kwargs["config"]
        assert config.system_instruction == "Be a chef."
        assert config.temperature == 0.3
        assert config.max_output_tokens == 100
        assert config.top_p == 0.8

    def test_none_text_is_empty(self, client: GeminiClient, sdk_client: MagicMock) -> None:
        sdk_client.models.generate_content.return_value = MagicMock(text=None)

        assert client.generate("prompt", GenerationParams()) == ""

    def test_rate_limit(self, client: GeminiClient, sdk_client: MagicMock) -> None:
        sdk_client.models.generate_content.side_effect = _api_error(429, "RESOURCE_EXHAUSTED", "Quota exceeded")

        with pytest.raises(RateLimitedError):
            client.generate("prompt", GenerationParams())

    def test_authentication(self, client: GeminiClient, sdk_client: MagicMock) -> None:
        sdk_client.models.generate_content.side_effect = _api_error(400, "INVALID_ARGUMENT", "API key not valid")

        with pytest.raises(AuthenticationFailedError):
            client.generate("prompt", GenerationParams())

    def test_other_api_error(self, client: GeminiClient, sdk_client: MagicMock) -> None:
        sdk_client.models.generate_content.side_effect = _api_error(400, "INVALID_ARGUMENT", "Bad request")

        with pytest.raises(GenerationFailedError) as exc_info:
            client.generate("prompt", GenerationParams())

        assert exc_info.value.status_code == 400

    def test_transport_error(self, client: GeminiClient, sdk_client: MagicMock) -> None:
        sdk_client.models.generate_content.side_effect = httpx.ReadTimeout("timed out")

        with pytest.raises(NetworkTimeoutError) as exc_info:
            client.generate("prompt", GenerationParams())

        assert exc_info.value.endpoint == "gemini-test"
