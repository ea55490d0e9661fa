from __future__ import annotations

from src.services.errors import (
    AuthenticationFailedError,
    GenerationConfigurationError,
    GenerationFailedError,
    NetworkTimeoutError,
    RateLimitedError,
    ServiceError,
)


class TestServiceErrors:
    def test_hierarchy(self) -> None:
        for error_cls in (GenerationConfigurationError, AuthenticationFailedError, RateLimitedError):
            assert issubclass(error_cls, ServiceError)

    def test_generation_failed_keeps_status(self) -> None:
        error = GenerationFailedError("bad request", status_code=400)
        assert str(error) == "bad request"
        assert error.status_code == 400

    def test_generation_failed_default_status(self) -> None:
        assert GenerationFailedError("oops").status_code is None


class TestNetworkTimeoutError:
    def test_message(self) -> None:
        error = NetworkTimeoutError("gemini-2.5-flash", "read timeout")
        assert str(error) == "Network error calling gemini-2.5-flash: read timeout"
        assert error.endpoint == "gemini-2.5-flash"
        assert error.reason == "read timeout"
