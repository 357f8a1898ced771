"""Folio exception hierarchy.

Service code raises these; ``app.main`` renders them as JSON responses
with the status code carried on the exception.
"""

from enum import StrEnum


class FolioError(Exception):
    """Base exception for all Folio service errors."""

    status_code: int = 500

    def __init__(self, message: str = "", code: str = "FOLIO_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)

    def to_dict(self) -> dict:
        return {"detail": self.message, "code": self.code}


class ValidationError(FolioError):
    """Malformed or out-of-range caller input."""

    status_code = 422

    def __init__(self, message: str = "Invalid request", details: list[dict] | None = None):
        super().__init__(message, code="VALIDATION_ERROR")
        self.details = details or []

    def to_dict(self) -> dict:
        return {**super().to_dict(), "errors": self.details}


class UnauthorizedError(FolioError):
    """No or invalid caller identity."""

    status_code = 401

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, code="UNAUTHORIZED")


class RateLimitError(FolioError):
    """Per-user AI request quota exhausted."""

    status_code = 429

    def __init__(self, message: str = "AI request limit reached", retry_after: int = 3600):
        super().__init__(message, code="RATE_LIMITED")
        self.retry_after = retry_after

    def to_dict(self) -> dict:
        return {**super().to_dict(), "retry_after": self.retry_after}


class GenerationFailure(StrEnum):
    UPSTREAM_RATE_LIMITED = "upstream_rate_limited"
    UPSTREAM_BAD_REQUEST = "upstream_bad_request"
    UPSTREAM_UNAVAILABLE = "upstream_unavailable"
    EMPTY_OUTPUT = "empty_output"
    UNKNOWN = "unknown"


# Upstream failures worth retrying after a pause.
RETRYABLE_FAILURES = frozenset({
    GenerationFailure.UPSTREAM_RATE_LIMITED,
    GenerationFailure.UPSTREAM_UNAVAILABLE,
})

# Seconds suggested to the client before retrying a retryable failure.
UPSTREAM_RETRY_AFTER = 60


class GenerationError(FolioError):
    """The language model call failed or returned unusable output."""

    def __init__(
        self,
        message: str = "Failed to produce usable content",
        reason: GenerationFailure = GenerationFailure.UNKNOWN,
    ):
        super().__init__(message, code="GENERATION_FAILED")
        self.reason = reason

    @property
    def retryable(self) -> bool:
        return self.reason in RETRYABLE_FAILURES

    @property
    def status_code(self) -> int:  # type: ignore[override]
        return 503 if self.retryable else 502

    def to_dict(self) -> dict:
        return {**super().to_dict(), "reason": self.reason, "retryable": self.retryable}


class PersistenceError(FolioError):
    """A storage operation could not be completed."""

    def __init__(self, message: str = "Storage operation failed", code: str = "PERSISTENCE_ERROR"):
        super().__init__(message, code=code)


class SlugExhaustedError(PersistenceError):
    """No free slug suffix was found within the attempt budget."""

    status_code = 409

    def __init__(self, message: str = "Could not find a free slug"):
        super().__init__(message, code="SLUG_EXHAUSTED")


class SlugConflictError(PersistenceError):
    """An explicitly requested slug is already used by the owner."""

    status_code = 409

    def __init__(self, slug: str):
        super().__init__(f"Slug '{slug}' is already in use", code="SLUG_CONFLICT")
        self.slug = slug
