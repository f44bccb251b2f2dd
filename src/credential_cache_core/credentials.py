"""Credential value shapes and their normalization.

Credential sources hand back one of three shapes:

- ``RawCredentials``: a ready-to-use access key triple.
- ``ResolvableProvider``: something that must be resolved into credentials
  first (for example a boto3 session bound to a profile).
- ``LegacyRefreshable``: a credentials container that has to be forced to
  refresh before its values can be read.

``normalize_credentials`` turns any of these into ``RawCredentials``.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import TypeAlias

from .exceptions import InvalidCredentialShapeError


@dataclass(frozen=True)
class RawCredentials:
    """Access key, secret and optional session token for an account."""

    access_key_id: str
    secret_access_key: str = field(repr=False)
    session_token: str | None = field(default=None, repr=False)
    expiration: datetime | None = None


class LegacyRefreshable(ABC):
    """Credentials container that must be refreshed before use."""

    @abstractmethod
    async def force_refresh(self) -> RawCredentials:
        """Refresh the container and return the current credentials."""


class ResolvableProvider(ABC):
    """Provider that yields credentials once resolved."""

    @abstractmethod
    async def resolve(self) -> "RawCredentials | LegacyRefreshable":
        """Resolve the provider into credentials."""


MaterializedCredentials: TypeAlias = (
    RawCredentials | ResolvableProvider | LegacyRefreshable
)


@dataclass(frozen=True)
class SourceCredentials:
    """Normalized credentials tagged with the name of the source that produced them."""

    credentials: RawCredentials
    source_name: str


async def normalize_credentials(value: MaterializedCredentials) -> RawCredentials:
    """Normalize a materialized value into ``RawCredentials``.

    A ``ResolvableProvider`` is resolved first. If the resolved value (or the
    value itself) is a ``LegacyRefreshable`` it is refreshed exactly once.

    Raises:
        InvalidCredentialShapeError: If the value is none of the known shapes.
    """
    if isinstance(value, ResolvableProvider):
        value = await value.resolve()
    if isinstance(value, LegacyRefreshable):
        value = await value.force_refresh()
    if not isinstance(value, RawCredentials):
        raise InvalidCredentialShapeError(value)
    return value
