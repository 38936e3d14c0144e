"""
Failure classification and service results.

Services validate locally and return a ServiceResult instead of raising, so
the HTTP boundary only has to copy status and body into a response.
Exceptions are reserved for failures outside the caller's control
(catalog outages, empty set catalogs) and derive from KnownError, which the
app turns into an error body with the right status.

Error bodies are always {"error": "<short reason>"}.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class FailureKind(str, Enum):
    """Classification of failure types."""

    # Input validation failures
    INVALID_INPUT = "invalid_input"
    MISSING_REQUIRED = "missing_required"
    DATE_NOT_TODAY = "date_not_today"
    DECK_SIZE_VIOLATION = "deck_size_violation"

    # Not a hard failure: the caller already submitted today
    DUPLICATE_SUBMISSION = "duplicate_submission"

    # Gating and auth
    LOCKED = "locked"
    UNAUTHORIZED = "unauthorized"

    # Resource failures
    NOT_FOUND = "not_found"
    EMPTY_RESULT = "empty_result"

    # Service failures
    SERVICE_UNAVAILABLE = "service_unavailable"
    EXTERNAL_API_ERROR = "external_api_error"
    STORAGE_CONFLICT = "storage_conflict"


@dataclass(slots=True)
class ServiceResult:
    """Status code and JSON body produced by a service operation."""

    status: int = 200
    body: dict[str, Any] = field(default_factory=dict)
    kind: FailureKind | None = None

    @classmethod
    def ok(cls, body: dict[str, Any]) -> "ServiceResult":
        return cls(status=200, body=body)

    @classmethod
    def failure(cls, kind: FailureKind, message: str, status: int = 400) -> "ServiceResult":
        return cls(status=status, body={"error": message}, kind=kind)

    @property
    def is_success(self) -> bool:
        return self.kind is None


class KnownError(Exception):
    """
    Base class for exceptions that represent known, explainable failures.

    Subclass this for errors where the system knows exactly what went wrong.
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        status_code: int = 400,
    ):
        self.kind = kind
        self.message = message
        self.detail = detail
        self.status_code = status_code
        super().__init__(message)

    def to_body(self) -> dict[str, str]:
        """Error body for the HTTP boundary. Detail stays in the logs."""
        return {"error": self.message}


class NoEligibleSetsError(KnownError):
    """Raised when the set catalog holds no set eligible for the daily challenge."""

    def __init__(self, cutoff: str):
        super().__init__(
            kind=FailureKind.EMPTY_RESULT,
            message="no sets available for the daily challenge",
            detail=f"No set released on or after {cutoff}",
            status_code=503,
        )
