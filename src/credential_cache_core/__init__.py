"""Credential resolution and caching core."""

from .cache import CredentialCache, cache_key
from .credentials import (
    LegacyRefreshable,
    MaterializedCredentials,
    RawCredentials,
    ResolvableProvider,
    SourceCredentials,
    normalize_credentials,
)
from .exceptions import (
    ConfigurationError,
    CredentialCacheError,
    CredentialSourceError,
    DuplicateSourceError,
    InvalidCredentialShapeError,
    InvalidModeError,
    MissingCredentialError,
    UnknownSourceTypeError,
)
from .modes import Mode
from .registry import SourceRegistry
from .resolver import ResolutionEngine
from .sources import CredentialSource

__all__ = [
    "ConfigurationError",
    "CredentialCache",
    "CredentialCacheError",
    "CredentialSource",
    "CredentialSourceError",
    "DuplicateSourceError",
    "InvalidCredentialShapeError",
    "InvalidModeError",
    "LegacyRefreshable",
    "MaterializedCredentials",
    "MissingCredentialError",
    "Mode",
    "RawCredentials",
    "ResolutionEngine",
    "ResolvableProvider",
    "SourceCredentials",
    "SourceRegistry",
    "UnknownSourceTypeError",
    "cache_key",
    "normalize_credentials",
]
