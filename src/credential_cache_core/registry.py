"""Ordered registry of credential sources.

The registry is constructed explicitly and handed to the resolution engine.
Registration order is the order in which sources are tried.
"""

from collections.abc import Iterable, Iterator

import structlog

from .exceptions import DuplicateSourceError
from .sources import CredentialSource

logger = structlog.get_logger(__name__)


class SourceRegistry:
    """Ordered collection of credential sources."""

    def __init__(self, sources: Iterable[CredentialSource] | None = None) -> None:
        self._sources: list[CredentialSource] = []
        for source in sources or ():
            self.register(source)

    def register(self, source: CredentialSource) -> None:
        """Append a source to the end of the trial order."""
        if any(existing.name == source.name for existing in self._sources):
            raise DuplicateSourceError(source.name)
        self._sources.append(source)
        logger.debug("CREDENTIAL_SOURCE_REGISTERED", source=source.name)

    @property
    def sources(self) -> tuple[CredentialSource, ...]:
        """Snapshot of the registered sources in trial order."""
        return tuple(self._sources)

    @property
    def names(self) -> list[str]:
        """Names of the registered sources in trial order."""
        return [source.name for source in self._sources]

    def get(self, name: str) -> CredentialSource:
        """Get a registered source by name."""
        for source in self._sources:
            if source.name == name:
                return source
        raise KeyError(f"Unknown source: {name}")  # noqa: TRY003

    def __iter__(self) -> Iterator[CredentialSource]:
        return iter(self.sources)

    def __len__(self) -> int:
        return len(self._sources)
