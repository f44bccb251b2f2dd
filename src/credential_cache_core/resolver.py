"""Credential resolution across an ordered list of sources.

Sources are tried strictly in registry order. Availability and capability
checks are advisory: an exception from either is logged and the source is
skipped. Once a source passes both checks it is committed to, and any
exception from materializing or normalizing its credentials propagates to
the caller unchanged. No further sources are tried in that case.
"""

import structlog

from .credentials import SourceCredentials, normalize_credentials
from .modes import Mode
from .registry import SourceRegistry
from .sources import CredentialSource

logger = structlog.get_logger(__name__)


class ResolutionEngine:
    """Resolves account credentials from the first usable source."""

    def __init__(self, registry: SourceRegistry) -> None:
        """Initialize the engine.

        Args:
            registry: Ordered registry of sources to consult.
        """
        self.registry = registry

    async def resolve(self, account_id: str, mode: Mode) -> SourceCredentials | None:
        """Resolve credentials for an account.

        Args:
            account_id: The cloud account identifier.
            mode: Requested access mode.

        Returns:
            Credentials tagged with the winning source name, or None when no
            source is both available and able to provide for the account.
        """
        for source in self.registry.sources:
            if not await self._is_available(source):
                logger.debug("CREDENTIAL_SOURCE_NOT_AVAILABLE", source=source.name)
                continue

            if not await self._can_provide(source, account_id):
                logger.debug(
                    "CREDENTIAL_SOURCE_CANNOT_PROVIDE",
                    source=source.name,
                    account_id=account_id,
                )
                continue

            logger.debug(
                "CREDENTIAL_SOURCE_SELECTED",
                source=source.name,
                account_id=account_id,
                mode=mode.value,
            )
            materialized = await source.materialize(account_id, mode)
            credentials = await normalize_credentials(materialized)
            return SourceCredentials(credentials=credentials, source_name=source.name)

        logger.debug(
            "NO_CREDENTIAL_SOURCE_FOUND", account_id=account_id, mode=mode.value
        )
        return None

    async def _is_available(self, source: CredentialSource) -> bool:
        try:
            return await source.is_available()
        except Exception as e:  # noqa: BLE001
            logger.warning(
                "CREDENTIAL_SOURCE_CHECK_FAILED",
                source=source.name,
                check="is_available",
                error=str(e),
            )
            return False

    async def _can_provide(self, source: CredentialSource, account_id: str) -> bool:
        try:
            return await source.can_provide(account_id)
        except Exception as e:  # noqa: BLE001
            logger.warning(
                "CREDENTIAL_SOURCE_CHECK_FAILED",
                source=source.name,
                check="can_provide",
                error=str(e),
            )
            return False
