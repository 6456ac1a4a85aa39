"""Typed exception hierarchy shared by every connector.

Adapters catch vendor SDK errors at their boundary and re-raise one of these
types with ``raise ... from exc`` so callers only depend on this module:

    1. Construction validates required settings -> ConfigurationError
    2. Caller input that cannot be encoded       -> ValidationError
    3. Local files or templates that are missing -> NotFoundError
    4. Vendor API / transport failures           -> ProviderError
    5. Engine or transaction failures            -> DatabaseError
"""

from __future__ import annotations


class ServiceError(Exception):
    """Base exception for all connector errors."""


class ValidationError(ServiceError):
    """Raised when input validation fails."""

    def __init__(self, message: str, field: str | None = None):
        self.message = message
        self.field = field
        super().__init__(self.message)


class NotFoundError(ServiceError):
    """Raised when a requested resource cannot be located."""

    def __init__(self, message: str, resource: str | None = None):
        self.message = message
        self.resource = resource
        super().__init__(self.message)


class ProviderError(ServiceError):
    """Raised when an external provider (S3, SQS, Slack, ...) fails."""

    def __init__(self, message: str, provider: str | None = None, original_error: Exception | None = None):
        self.message = message
        self.provider = provider
        self.original_error = original_error
        super().__init__(self.message)


class ConfigurationError(ServiceError):
    """Raised when configuration is invalid or missing."""

    def __init__(self, message: str, key: str | None = None):
        self.message = message
        self.key = key
        super().__init__(self.message)


class DatabaseError(ServiceError):
    """Raised when database operations fail."""

    def __init__(self, message: str, operation: str | None = None):
        self.message = message
        self.operation = operation
        super().__init__(self.message)


__all__ = [
    "ServiceError",
    "ValidationError",
    "NotFoundError",
    "ProviderError",
    "ConfigurationError",
    "DatabaseError",
]
