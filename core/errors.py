# core/errors.py

from typing import Dict, Optional


class FieldDataError(Exception):
    """Base class for every error raised by the field data core."""


class ValidationError(FieldDataError):
    """A required entry-form field was left empty."""

    def __init__(self, errors: Dict[str, str]):
        self.errors = errors
        super().__init__("; ".join(errors.values()))


class AuthError(FieldDataError):
    """Sign-in or sign-up failed, or the authentication service is unreachable."""


class StoreError(FieldDataError):
    """A record fetch, insert or delete against the record store failed."""

    def __init__(self, message: str, cause: Optional[Exception] = None):
        self.cause = cause
        super().__init__(message)


class AssistantRequestError(FieldDataError):
    """A chat submission is malformed (missing message or user)."""


InvalidRequestError = AssistantRequestError


class InvalidFilterError(FieldDataError):
    """A date filter could not be parsed."""


class RecordOrderError(FieldDataError, ValueError):
    """Records handed to the dashboard aggregator are not newest-first."""
