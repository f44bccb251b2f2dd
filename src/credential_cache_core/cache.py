"""Per-session memoization of credential resolution.

This module provides the CredentialCache class, which remembers the outcome
of resolving each (account, mode) pair for the lifetime of the instance so
that repeated lookups do not hit credential sources again. Negative outcomes
(no source could provide) are remembered too. Failed resolutions are not.
"""

import asyncio

import structlog

from .credentials import SourceCredentials
from .modes import Mode
from .resolver import ResolutionEngine

logger = structlog.get_logger(__name__)


def cache_key(account_id: str, mode: Mode) -> str:
    """Build the memo key for an account and access mode."""
    return f"{account_id}-{mode.value}"


class CredentialCache:
    """Memoizing front for a ResolutionEngine.

    Concurrent callers asking for the same key share a single in-flight
    resolution. Entries are never invalidated once written.
    """

    def __init__(self, engine: ResolutionEngine) -> None:
        """Initialize the cache.

        Args:
            engine: Engine used to resolve keys that are not cached yet.
        """
        self.engine = engine
        self._entries: dict[str, SourceCredentials | None] = {}
        self._in_flight: dict[str, asyncio.Task[SourceCredentials | None]] = {}

    async def fetch_credentials_for(
        self, account_id: str, mode: Mode
    ) -> SourceCredentials | None:
        """Get credentials for an account, resolving them on first use.

        Args:
            account_id: The cloud account identifier.
            mode: Requested access mode.

        Returns:
            The cached or freshly resolved credentials, or None when no source
            can provide for the account.
        """
        key = cache_key(account_id, mode)
        if key in self._entries:
            return self._entries[key]

        task = self._in_flight.get(key)
        if task is None:
            logger.debug("CREDENTIAL_CACHE_MISS", key=key)
            task = asyncio.ensure_future(self.engine.resolve(account_id, mode))
            self._in_flight[key] = task
            task.add_done_callback(lambda done: self._store(key, done))
        else:
            logger.debug("CREDENTIAL_RESOLUTION_JOINED", key=key)

        return await asyncio.shield(task)

    def _store(self, key: str, task: "asyncio.Task[SourceCredentials | None]") -> None:
        self._in_flight.pop(key, None)
        if task.cancelled() or task.exception() is not None:
            return
        self._entries.setdefault(key, task.result())

    def is_cached(self, account_id: str, mode: Mode) -> bool:
        """Check whether an outcome is already stored for the account and mode."""
        return cache_key(account_id, mode) in self._entries

    @property
    def available_source_names(self) -> list[str]:
        """Names of all registered sources, read straight from the registry."""
        return self.engine.registry.names
