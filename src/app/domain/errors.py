from __future__ import annotations

from enum import Enum


class RecipeDomainError(Exception):
    status_code: int = 500


class RecipeNotFoundError(RecipeDomainError):
    status_code = 404

    def __init__(self, recipe_id: int):
        super().__init__(f"Recipe with ID {recipe_id} not found")
        self.recipe_id = recipe_id


class UnauthorizedError(RecipeDomainError):
    status_code = 403

    def __init__(self, message: str = "User is not authorized to perform this action"):
        super().__init__(message)


class ConflictError(RecipeDomainError):
    status_code = 409

    def __init__(self, name: str, message: str = "You already have a recipe with this name"):
        super().__init__(message)
        self.name = name


class ValidationError(RecipeDomainError):
    status_code = 400


class PreferencesRequiredError(RecipeDomainError):
    status_code = 422

    def __init__(
        self,
        message: str = "User preferences not found. Please set your dietary preferences first.",
    ):
        super().__init__(message)


class ExternalErrorKind(str, Enum):
    NETWORK = "network"
    AUTHENTICATION = "authentication"
    RATE_LIMIT = "rate_limit"
    GENERIC = "generic"
    EMPTY_RESPONSE = "empty_response"


_KIND_STATUS_CODES = {
    ExternalErrorKind.AUTHENTICATION: 503,
    ExternalErrorKind.RATE_LIMIT: 429,
}

# Codes stored in recipe_modification_errors.error_code
_KIND_LOG_CODES = {
    ExternalErrorKind.AUTHENTICATION: 401,
    ExternalErrorKind.RATE_LIMIT: 429,
}


class ExternalServiceError(RecipeDomainError):
    def __init__(self, kind: ExternalErrorKind, message: str):
        super().__init__(message)
        self.kind = kind

    @property
    def status_code(self) -> int:  # type: ignore[override]
        return _KIND_STATUS_CODES.get(self.kind, 500)

    @property
    def log_code(self) -> int:
        return _KIND_LOG_CODES.get(self.kind, 500)


class PersistenceError(RecipeDomainError):
    def __init__(self, operation: str, reason: str):
        super().__init__(f"Persistence error during {operation}: {reason}")
        self.operation = operation
        self.reason = reason
