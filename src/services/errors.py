class ServiceError(Exception):
    pass


class GenerationConfigurationError(ServiceError):
    pass


class AuthenticationFailedError(ServiceError):
    pass


class RateLimitedError(ServiceError):
    pass


class GenerationFailedError(ServiceError):
    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class NetworkTimeoutError(ServiceError):
    def __init__(self, endpoint: str, reason: str):
        super().__init__(f"Network error calling {endpoint}: {reason}")
        self.endpoint = endpoint
        self.reason = reason
