from __future__ import annotations

import httpx
import pytest

from src.app.domain.errors import (
    ExternalErrorKind,
    ExternalServiceError,
    PreferencesRequiredError,
    ValidationError,
)
from src.app.services.ai_modification_service import (
    MAX_LOGGED_TEXT_CHARS,
    AiModificationOrchestrator,
    classify_external_error,
)
from src.services.errors import (
    AuthenticationFailedError,
    GenerationFailedError,
    NetworkTimeoutError,
    RateLimitedError,
)
from src.services.types import GenerationParams
from tests.stubs import (
    VALID_RECIPE_TEXT,
    InMemoryRecipeStore,
    PreferenceRepositoryStub,
    TextGeneratorStub,
    vegan_profile,
)


@pytest.fixture
def preferences() -> PreferenceRepositoryStub:
    return PreferenceRepositoryStub({"user-a": vegan_profile()})


@pytest.fixture
def generator() -> TextGeneratorStub:
    return TextGeneratorStub()


@pytest.fixture
def store() -> InMemoryRecipeStore:
    return InMemoryRecipeStore()


@pytest.fixture
def orchestrator(
    preferences: PreferenceRepositoryStub,
    generator: TextGeneratorStub,
    store: InMemoryRecipeStore,
) -> AiModificationOrchestrator:
    return AiModificationOrchestrator(preferences, generator, store)


class TestClassifyExternalError:
    @pytest.mark.parametrize(
        ("error", "kind"),
        [
            (RateLimitedError("slow down"), ExternalErrorKind.RATE_LIMIT),
            (AuthenticationFailedError("bad key"), ExternalErrorKind.AUTHENTICATION),
            (NetworkTimeoutError("gemini", "reset"), ExternalErrorKind.NETWORK),
            (httpx.ConnectError("refused"), ExternalErrorKind.NETWORK),
            (TimeoutError(), ExternalErrorKind.NETWORK),
            (GenerationFailedError("quota", status_code=429), ExternalErrorKind.RATE_LIMIT),
            (GenerationFailedError("denied", status_code=403), ExternalErrorKind.AUTHENTICATION),
            (RuntimeError("Rate limit exceeded"), ExternalErrorKind.RATE_LIMIT),
            (RuntimeError("Invalid API key"), ExternalErrorKind.AUTHENTICATION),
            (RuntimeError("connection dropped"), ExternalErrorKind.NETWORK),
            (RuntimeError("model overloaded"), ExternalErrorKind.GENERIC),
        ],
    )
    def test_kinds(self, error: Exception, kind: ExternalErrorKind) -> None:
        assert classify_external_error(error) is kind


class TestModify:
    def test_returns_generated_text(
        self, orchestrator: AiModificationOrchestrator, generator: TextGeneratorStub
    ) -> None:
        result = orchestrator.modify(VALID_RECIPE_TEXT, "user-a")

        assert result == "Modified vegan tomato soup."
        assert len(generator.prompts) == 1
        assert "Diet type: vegan" in generator.prompts[0]
        assert VALID_RECIPE_TEXT in generator.prompts[0]
        assert generator.params == [GenerationParams()]

    def test_passes_custom_params(
        self, preferences: PreferenceRepositoryStub, generator: TextGeneratorStub, store: InMemoryRecipeStore
    ) -> None:
        params = GenerationParams(temperature=0.2, max_output_tokens=500, top_p=0.5)
        orchestrator = AiModificationOrchestrator(preferences, generator, store, params=params)

        orchestrator.modify(VALID_RECIPE_TEXT, "user-a")

        assert generator.params == [params]

    def test_model_name(self, orchestrator: AiModificationOrchestrator) -> None:
        assert orchestrator.model_name == "gemini-test"

    @pytest.mark.parametrize("text", ["too short", "x" * 10001, " " * 200])
    def test_length_gate_skips_everything(
        self,
        orchestrator: AiModificationOrchestrator,
        preferences: PreferenceRepositoryStub,
        generator: TextGeneratorStub,
        store: InMemoryRecipeStore,
        text: str,
    ) -> None:
        with pytest.raises(ValidationError):
            orchestrator.modify(text, "user-a")

        assert preferences.get_calls == []
        assert generator.prompts == []
        assert store.error_logs == []

    def test_missing_preferences(
        self,
        orchestrator: AiModificationOrchestrator,
        generator: TextGeneratorStub,
        store: InMemoryRecipeStore,
    ) -> None:
        with pytest.raises(PreferencesRequiredError):
            orchestrator.modify(VALID_RECIPE_TEXT, "user-b")

        assert generator.prompts == []
        assert len(store.error_logs) == 1
        assert store.error_logs[0].error_code == 422

    @pytest.mark.parametrize(
        ("error", "kind", "log_code"),
        [
            (RateLimitedError("slow down"), ExternalErrorKind.RATE_LIMIT, 429),
            (AuthenticationFailedError("bad key"), ExternalErrorKind.AUTHENTICATION, 401),
            (NetworkTimeoutError("gemini", "reset"), ExternalErrorKind.NETWORK, 500),
            (RuntimeError("boom"), ExternalErrorKind.GENERIC, 500),
        ],
    )
    def test_generation_failures_are_classified_and_logged(
        self,
        orchestrator: AiModificationOrchestrator,
        generator: TextGeneratorStub,
        store: InMemoryRecipeStore,
        error: Exception,
        kind: ExternalErrorKind,
        log_code: int,
    ) -> None:
        generator.error = error

        with pytest.raises(ExternalServiceError) as exc_info:
            orchestrator.modify(VALID_RECIPE_TEXT, "user-a")

        assert exc_info.value.kind is kind
        assert exc_info.value.__cause__ is error
        assert len(store.error_logs) == 1
        entry = store.error_logs[0]
        assert entry.error_code == log_code
        assert entry.ai_model == "gemini-test"
        assert entry.recipe_text == VALID_RECIPE_TEXT

    @pytest.mark.parametrize("reply", ["", "   \n"])
    def test_empty_response(
        self,
        orchestrator: AiModificationOrchestrator,
        generator: TextGeneratorStub,
        store: InMemoryRecipeStore,
        reply: str,
    ) -> None:
        generator.reply = reply

        with pytest.raises(ExternalServiceError) as exc_info:
            orchestrator.modify(VALID_RECIPE_TEXT, "user-a")

        assert exc_info.value.kind is ExternalErrorKind.EMPTY_RESPONSE
        assert str(exc_info.value) == "AI service returned empty response"
        assert store.error_logs[0].error_code == 500

    def test_logged_text_is_truncated(
        self,
        orchestrator: AiModificationOrchestrator,
        generator: TextGeneratorStub,
        store: InMemoryRecipeStore,
    ) -> None:
        generator.error = RuntimeError("boom")
        text = "a" * 5000

        with pytest.raises(ExternalServiceError):
            orchestrator.modify(text, "user-a")

        assert store.error_logs[0].recipe_text == "a" * MAX_LOGGED_TEXT_CHARS

    def test_error_log_failure_does_not_mask_original(
        self,
        orchestrator: AiModificationOrchestrator,
        generator: TextGeneratorStub,
        store: InMemoryRecipeStore,
    ) -> None:
        generator.error = RateLimitedError("slow down")
        store.fail_on.add("insert_modification_error")

        with pytest.raises(ExternalServiceError) as exc_info:
            orchestrator.modify(VALID_RECIPE_TEXT, "user-a")

        assert exc_info.value.kind is ExternalErrorKind.RATE_LIMIT
        assert store.error_logs == []
