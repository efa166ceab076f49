"""Vendor Vetting exceptions.

Every failure the workflow can report to a caller is a ``VettingError``
subclass. ``kind`` names the failure for API consumers and ``status_code``
is the HTTP status the web layer answers with.
"""

from __future__ import annotations

from typing import Any


class VettingError(Exception):
    """Base exception for workflow failures."""

    kind = "VettingError"
    status_code = 400

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Serialisable body for API responses."""
        return {"error": self.kind, "detail": self.message, **self.details}


class NotFoundError(VettingError):
    """Raised when an assessment, vendor, product or token does not resolve."""

    kind = "NotFound"
    status_code = 404


class InvalidStateError(VettingError):
    """Raised when the assessment status forbids the requested operation."""

    kind = "InvalidState"
    status_code = 409

    def __init__(self, message: str, status: str | None = None, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, details)
        self.status = status
        if status is not None:
            self.details.setdefault("status", status)


class IncompleteAnswersError(VettingError):
    """Raised when a submission is attempted before every question is answered."""

    kind = "IncompleteAnswers"
    status_code = 422


class MissingEvidenceError(IncompleteAnswersError):
    """Raised when "yes" answers carry neither evidence nor notes."""

    kind = "MissingEvidence"

    def __init__(self, message: str, missing_evidence: list[str], details: dict[str, Any] | None = None) -> None:
        super().__init__(message, details)
        self.missing_evidence = list(missing_evidence)
        self.details["missing_evidence"] = self.missing_evidence


class JustificationTooShortError(VettingError):
    """Raised when an override or rejection note is under the minimum length."""

    kind = "JustificationTooShort"
    status_code = 422

    def __init__(self, message: str, min_length: int, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, details)
        self.min_length = min_length
        self.details["min_length"] = min_length


class MissingConditionsError(VettingError):
    """Raised when a conditional verdict is finalised without conditions."""

    kind = "MissingConditions"
    status_code = 422


class TokenExpiredError(VettingError):
    """Raised when a vendor self-service link is past its expiry."""

    kind = "TokenExpired"
    status_code = 410


class AlreadySubmittedError(VettingError):
    """Raised when a vendor self-service link has already been used to submit."""

    kind = "AlreadySubmitted"
    status_code = 409


class InvalidInputError(VettingError):
    """Raised when required creation or approval fields are missing or malformed."""

    kind = "ValidationError"
    status_code = 400

    def __init__(self, message: str, field: str | None = None, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, details)
        self.field = field
        if field is not None:
            self.details.setdefault("field", field)


class ConcurrentModificationError(VettingError):
    """Raised when an assessment changed between load and save."""

    kind = "ConcurrentModification"
    status_code = 409

    def __init__(self, message: str, expected_version: int, actual_version: int | None) -> None:
        super().__init__(message, {"expected_version": expected_version, "actual_version": actual_version})
        self.expected_version = expected_version
        self.actual_version = actual_version
