"""
Domain exceptions for Flowboard.

The graph pipeline itself never raises for malformed step data; these
exceptions belong to the boundaries around it (configuration, payload
parsing at the API/CLI edge, lookups against the ERP backend).
"""

from typing import Self


class FlowboardError(Exception):
    """Base exception for all Flowboard-specific errors."""

    def with_context(self, detail: str) -> Self:
        """Add context information to the exception.

        Args:
            detail: Additional details about the error

        Returns:
            Self with updated message
        """
        self.args = (detail,)
        return self


class ConfigError(FlowboardError):
    """Raised when settings describe an unusable layout or client."""

    pass


class ValidationError(FlowboardError):
    """Raised when a step payload cannot be read in the requested mode."""

    def __init__(self, message: str, errors: list[dict] | None = None):
        super().__init__(message)
        self.errors = errors or []


class EntityNotFoundError(FlowboardError):
    """Raised when a requested workflow or task set does not exist."""

    pass
