"""Environment variable credential source.

This module provides the EnvironmentCredentialSource class for reading account
credentials from environment variables, useful for development and CI.
"""

import os

from credential_cache_core.credentials import RawCredentials
from credential_cache_core.exceptions import MissingCredentialError
from credential_cache_core.modes import Mode

DEFAULT_PREFIX = "CREDENTIAL_CACHE_"


class EnvironmentCredentialSource:
    """Credential source that reads access keys from environment variables.

    Variable names follow ``{prefix}{ACCOUNT}_{MODE}_{KEY}`` where KEY is one
    of ``ACCESS_KEY_ID``, ``SECRET_ACCESS_KEY`` or ``SESSION_TOKEN``. When the
    mode-specific variable is missing the mode-less
    ``{prefix}{ACCOUNT}_{KEY}`` is used instead.
    """

    def __init__(self, prefix: str = DEFAULT_PREFIX, name: str = "environment") -> None:
        """Initialize the environment credential source.

        Args:
            prefix: Prefix added to every environment variable name.
            name: Source name reported in results and logs.
        """
        self.prefix = prefix
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    def _variable_names(
        self, account_id: str, key: str, mode: Mode | None = None
    ) -> list[str]:
        account = account_id.upper().replace("-", "_")
        names = []
        if mode is not None:
            names.append(f"{self.prefix}{account}_{mode.value.upper()}_{key}")
        names.append(f"{self.prefix}{account}_{key}")
        return names

    def _lookup(
        self, account_id: str, key: str, mode: Mode | None = None
    ) -> str | None:
        for var_name in self._variable_names(account_id, key, mode):
            value = os.getenv(var_name)
            if value:
                return value
        return None

    async def is_available(self) -> bool:
        return True

    async def can_provide(self, account_id: str) -> bool:
        """Check that a key id and secret are set for every mode of the account."""
        return all(
            self._lookup(account_id, key, mode) is not None
            for mode in Mode
            for key in ("ACCESS_KEY_ID", "SECRET_ACCESS_KEY")
        )

    async def materialize(self, account_id: str, mode: Mode) -> RawCredentials:
        """Read the credentials for the account and mode from the environment.

        Raises:
            MissingCredentialError: When the access key id or secret is not set.
        """
        access_key_id = self._lookup(account_id, "ACCESS_KEY_ID", mode)
        secret_access_key = self._lookup(account_id, "SECRET_ACCESS_KEY", mode)
        if access_key_id is None or secret_access_key is None:
            missing = "ACCESS_KEY_ID" if access_key_id is None else "SECRET_ACCESS_KEY"
            expected = " or ".join(self._variable_names(account_id, missing, mode))
            raise MissingCredentialError(
                f"Environment variable not set: {expected}", self.name
            )

        return RawCredentials(
            access_key_id=access_key_id,
            secret_access_key=secret_access_key,
            session_token=self._lookup(account_id, "SESSION_TOKEN", mode),
        )
