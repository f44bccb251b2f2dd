#!/usr/bin/env python3
"""Credential cache usage example.

This example registers a custom credential source next to the bundled
environment source and shows that repeated lookups are served from the cache.
"""

import asyncio
import os

from credential_cache_core import (
    CredentialCache,
    Mode,
    RawCredentials,
    ResolutionEngine,
    ResolvableProvider,
    SourceRegistry,
)
from credential_cache_sources import EnvironmentCredentialSource


class StaticProvider(ResolvableProvider):
    """Provider that resolves to fixed credentials."""

    def __init__(self, account_id: str, mode: Mode) -> None:
        self.account_id = account_id
        self.mode = mode

    async def resolve(self) -> RawCredentials:
        return RawCredentials(
            access_key_id=f"AKIA{self.account_id[-4:]}{self.mode.value[0].upper()}",
            secret_access_key="example-secret",
        )


class StaticSource:
    """Credential source that serves a fixed set of accounts."""

    name = "static"

    def __init__(self, accounts: set[str]) -> None:
        self.accounts = accounts

    async def is_available(self) -> bool:
        return True

    async def can_provide(self, account_id: str) -> bool:
        return account_id in self.accounts

    async def materialize(self, account_id: str, mode: Mode) -> StaticProvider:
        return StaticProvider(account_id, mode)


async def credential_cache_example() -> None:
    """Resolve credentials for two accounts from two sources."""
    os.environ["EXAMPLE_111122223333_ACCESS_KEY_ID"] = "AKIAENVIRONMENT"
    os.environ["EXAMPLE_111122223333_SECRET_ACCESS_KEY"] = "environment-secret"

    registry = SourceRegistry(
        [
            EnvironmentCredentialSource(prefix="EXAMPLE_"),
            StaticSource({"444455556666"}),
        ]
    )
    cache = CredentialCache(ResolutionEngine(registry))
    print(f"Sources: {cache.available_source_names}")

    for account_id in ["111122223333", "444455556666", "777788889999"]:
        for mode in Mode:
            result = await cache.fetch_credentials_for(account_id, mode)
            if result is None:
                print(f"{account_id} ({mode}): no credentials")
            else:
                print(
                    f"{account_id} ({mode}): {result.credentials.access_key_id} "
                    f"from {result.source_name}"
                )

    # Served from the cache without consulting any source
    await cache.fetch_credentials_for("444455556666", Mode.WRITING)


if __name__ == "__main__":
    asyncio.run(credential_cache_example())
