"""
Exception hierarchy for feedtrans.

Operator-correctable conditions (bad input, bad configuration, nothing to
translate) are told apart from provider failures and internal errors, so the
pipeline can pick the message its error event carries.
"""

from __future__ import annotations
from typing import Optional, Dict, Any, List


def _valid_values_hint(name: Optional[str], valid_values: Optional[List[Any]]) -> Optional[str]:
    if name and valid_values:
        return f"Valid values for {name}: {', '.join(map(str, valid_values))}"
    return None


class FeedTransError(Exception):
    """
    Base exception for all feedtrans errors.

    Attributes:
        message: Text shown to the operator (also str(error))
        details: Machine-readable context for logs and API responses
        recoverable: True when the operator can fix the cause and retry
        suggestion: Optional hint on how to fix it
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        recoverable: bool = False,
        suggestion: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.recoverable = recoverable
        self.suggestion = suggestion

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready representation."""
        payload = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "recoverable": self.recoverable,
        }
        if self.details:
            payload["details"] = self.details
        if self.suggestion:
            payload["suggestion"] = self.suggestion
        return payload

    def __str__(self) -> str:
        return self.message


class InputValidationError(FeedTransError):
    """Raised when a translation job is missing parameters or names unknown values."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        invalid_value: Optional[Any] = None,
        valid_values: Optional[List[Any]] = None
    ):
        super().__init__(
            message,
            {"field": field, "invalid_value": invalid_value, "valid_values": valid_values},
            recoverable=True,
            suggestion=_valid_values_hint(field, valid_values)
        )
        self.field = field
        self.invalid_value = invalid_value
        self.valid_values = valid_values


class ConfigurationError(FeedTransError):
    """Raised for invalid settings: config files, environment overrides, pipeline tunables."""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        invalid_value: Optional[Any] = None,
        valid_values: Optional[List[Any]] = None
    ):
        suggestion = _valid_values_hint(config_key, valid_values)
        if suggestion is None and config_key:
            suggestion = f"Check the '{config_key}' setting"

        super().__init__(
            message,
            {"config_key": config_key, "invalid_value": invalid_value},
            recoverable=True,
            suggestion=suggestion
        )
        self.config_key = config_key
        self.invalid_value = invalid_value
        self.valid_values = valid_values


class ExtractionEmptyError(FeedTransError):
    """Raised when a feed yields no translatable fragments."""

    DEFAULT_MESSAGE = (
        "No translatable content found. The feed may already be translated "
        "or the source language is incorrect."
    )

    def __init__(self, source_lang: Optional[str] = None, fields: Optional[List[str]] = None):
        details = {
            "source_lang": source_lang,
            "fields": fields
        }
        suggestion = "Check the source language and the selected field types"
        super().__init__(self.DEFAULT_MESSAGE, details, recoverable=True, suggestion=suggestion)
        self.source_lang = source_lang
        self.fields = fields


class BackendError(FeedTransError):
    """Raised when the translation provider fails (network, auth, rate limit)."""

    def __init__(
        self,
        backend: str,
        message: str,
        original_error: Optional[Exception] = None
    ):
        full_message = f"Backend '{backend}' failed: {message}"
        details = {
            "backend": backend,
            "original_error": str(original_error) if original_error else None
        }
        suggestion = f"Check the API key and network access for {backend}."

        super().__init__(full_message, details, recoverable=True, suggestion=suggestion)
        self.backend = backend
        self.original_error = original_error


class ResponseParseError(FeedTransError):
    """Raised when a provider response does not honour the JSON array contract."""

    def __init__(
        self,
        message: str,
        expected: Optional[int] = None,
        received: Optional[int] = None,
        raw_response: Optional[str] = None
    ):
        details = {
            "expected": expected,
            "received": received,
            # First 200 characters only
            "raw_response": raw_response[:200] if raw_response else None
        }
        super().__init__(message, details, recoverable=True)
        self.expected = expected
        self.received = received
        self.raw_response = raw_response


class BatchTranslationError(FeedTransError):
    """Raised when a batch keeps failing after every retry attempt."""

    def __init__(
        self,
        batch_index: int,
        attempts: int,
        last_error: Exception,
        partial_translations: Optional[Dict[str, str]] = None
    ):
        """
        Initialize batch error.

        Args:
            batch_index: Zero-based index of the failed batch
            attempts: Number of attempts made
            last_error: Last observed error
            partial_translations: Table of batches merged before the failure
        """
        message = str(last_error) or last_error.__class__.__name__
        details = {
            "batch_index": batch_index,
            "attempts": attempts,
            "last_error": str(last_error),
            "partial_count": len(partial_translations or {})
        }
        suggestion = (
            "Try:\n"
            "1. Reduce the batch size: --batch-size 20\n"
            "2. Check the provider status and your rate limits"
        )
        super().__init__(message, details, recoverable=True, suggestion=suggestion)
        self.batch_index = batch_index
        self.attempts = attempts
        self.last_error = last_error
        self.partial_translations = dict(partial_translations or {})


class TranslationCancelledError(FeedTransError):
    """Raised when the consumer abandons a request between batches."""

    def __init__(self, completed: int = 0, total: int = 0):
        message = f"Translation cancelled after {completed}/{total} texts"
        super().__init__(message, {"completed": completed, "total": total}, recoverable=False)
        self.completed = completed
        self.total = total
