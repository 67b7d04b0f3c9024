"""Custom exception classes for the address resolver.

This module provides domain-specific exception classes that carry
structured error information a host form can render or log.
"""

from __future__ import annotations

from typing import Any
from typing import Optional


class AppError(Exception):
    """Base exception for resolver errors.

    All package-specific exceptions should inherit from this class.

    Attributes:
        message: Human-readable error message.
        detail: Optional additional context.
    """

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a serializable error body."""
        result: dict[str, Any] = {"error": self.message}
        if self.detail:
            result["detail"] = self.detail
        return result


class ValidationError(AppError):
    """Raised when caller input is invalid.

    Use for unknown level tags, nodes selected at the wrong level,
    or a child node whose parent does not match the current selection.
    """

    def __init__(self, message: str, field: Optional[str] = None):
        detail = f"Field: {field}" if field else None
        super().__init__(message, detail=detail)
        self.field = field


class NotFoundError(AppError):
    """Raised when a requested location is not found."""

    def __init__(self, resource: str, identifier: str):
        super().__init__(f"{resource} not found: {identifier}")
        self.resource = resource
        self.identifier = identifier


class ConfigurationError(AppError):
    """Raised when a setting is present but malformed."""

    def __init__(self, config_name: str, detail: Optional[str] = None):
        super().__init__(
            f"Invalid configuration: {config_name}",
            detail=detail,
        )
        self.config_name = config_name


class ReferenceDataError(AppError):
    """Raised when the bundled reference datasets cannot be loaded.

    This is a packaging problem rather than a runtime condition to recover
    from, so callers usually let it propagate at startup.
    """
