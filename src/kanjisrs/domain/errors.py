"""Errors raised by external SRS provider adapters."""


class ProviderError(Exception):
    """Base class for failures talking to an external SRS provider."""


class MissingApiKeyError(ProviderError):
    def __init__(self) -> None:
        super().__init__("No provider API key configured")


class UnauthorizedError(ProviderError):
    def __init__(self) -> None:
        super().__init__("Invalid API key")


class RateLimitedError(ProviderError):
    def __init__(self) -> None:
        super().__init__("Rate limited - please try again later")


class ProviderHTTPError(ProviderError):
    def __init__(self, status_code: int, detail: str | None = None):
        self.status_code = status_code
        message = f"HTTP error: {status_code}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class AlreadyReviewedError(ProviderHTTPError):
    """The provider already holds a review for this assignment (HTTP 422)."""

    def __init__(self, detail: str | None = None):
        super().__init__(422, detail)
