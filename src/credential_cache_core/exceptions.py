"""Standardized exceptions for the credential cache.

This module provides consistent exception types for the core engine, the
source registry and the bundled credential sources.
"""


class CredentialCacheError(Exception):
    """Base exception for all credential cache errors."""

    def __init__(self, message: str, error_code: str | None = None) -> None:
        """Initialize the error with a message and optional error code.

        Args:
            message: Human-readable error message.
            error_code: Optional error code for programmatic handling.
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code


class ConfigurationError(CredentialCacheError):
    """Raised when there are configuration-related errors."""

    def __init__(self, message: str, component: str | None = None) -> None:
        """Initialize configuration error.

        Args:
            message: Error message describing the configuration issue.
            component: Optional component name where the error occurred.
        """
        super().__init__(message, "CONFIG_ERROR")
        self.component = component


class InvalidModeError(ConfigurationError):
    """Raised when an access mode string cannot be parsed."""

    def __init__(self, value: str) -> None:
        super().__init__(f"Unknown access mode: {value}", "mode")
        self.value = value


class UnknownSourceTypeError(ConfigurationError):
    """Raised when an unknown credential source type is specified."""

    def __init__(self, source_type: str) -> None:
        """Initialize the unknown source type error.

        Args:
            source_type: The unknown source type that was specified.
        """
        super().__init__(f"Unknown source type: {source_type}", "registry")
        self.source_type = source_type


class DuplicateSourceError(ConfigurationError):
    """Raised when two sources with the same name are registered."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Source already registered: {name}", "registry")
        self.name = name


class CredentialSourceError(CredentialCacheError):
    """Raised by a credential source when it cannot materialize credentials."""

    def __init__(self, message: str, source_name: str | None = None) -> None:
        """Initialize credential source error.

        Args:
            message: Error message describing the failure.
            source_name: Optional name of the source that failed.
        """
        super().__init__(message, "SOURCE_ERROR")
        self.source_name = source_name


class MissingCredentialError(CredentialSourceError):
    """Raised when a committed source turns out to hold no usable credentials."""


class InvalidCredentialShapeError(CredentialCacheError):
    """Raised when a source materializes a value of an unsupported shape."""

    def __init__(self, value: object) -> None:
        super().__init__(
            f"Unsupported credential value: {type(value).__name__}", "SHAPE_ERROR"
        )
        self.value_type = type(value)
