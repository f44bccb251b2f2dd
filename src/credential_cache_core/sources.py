"""Credential source interface.

This module defines the CredentialSource protocol that every pluggable
source of account credentials must implement.
"""

from typing import Protocol

from .credentials import MaterializedCredentials
from .modes import Mode


class CredentialSource(Protocol):
    """Interface for credential sources."""

    @property
    def name(self) -> str:
        """Name identifying the source in logs and results."""
        ...

    async def is_available(self) -> bool:
        """Check whether the source can be used in the current environment."""
        ...

    async def can_provide(self, account_id: str) -> bool:
        """Check whether the source holds credentials for the given account.

        Args:
            account_id: The cloud account identifier.
        """
        ...

    async def materialize(
        self, account_id: str, mode: Mode
    ) -> MaterializedCredentials:
        """Obtain credentials for the account in the given mode.

        Args:
            account_id: The cloud account identifier.
            mode: Whether read or write access is requested.

        Returns:
            Raw credentials, or a value that normalizes into them.
        """
        ...
