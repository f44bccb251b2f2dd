"""PyTest configuration and shared test fixtures.

This module provides PyTest configuration, shared fixtures, and test
utilities that are used across multiple test files.
"""

import os
from collections.abc import Generator
from typing import Any

import boto3
import pytest
import structlog
from testcontainers.core.container import (  # type: ignore[import-untyped]
    DockerContainer,
)
from testcontainers.core.waiting_utils import (  # type: ignore[import-untyped]
    wait_for_logs,
)

from credential_cache_core import MaterializedCredentials, Mode, RawCredentials


class FakeSource:
    """Scriptable credential source that records every call made to it."""

    def __init__(
        self,
        name: str,
        *,
        available: bool | Exception = True,
        can_provide: bool | Exception = True,
        result: MaterializedCredentials | Exception | None = None,
    ) -> None:
        self._name = name
        self.available = available
        self.capable = can_provide
        self.result = result or RawCredentials(
            access_key_id=f"AKIA-{name}", secret_access_key=f"secret-{name}"
        )
        self.calls: list[tuple[Any, ...]] = []

    @property
    def name(self) -> str:
        return self._name

    async def is_available(self) -> bool:
        self.calls.append(("is_available",))
        if isinstance(self.available, Exception):
            raise self.available
        return self.available

    async def can_provide(self, account_id: str) -> bool:
        self.calls.append(("can_provide", account_id))
        if isinstance(self.capable, Exception):
            raise self.capable
        return self.capable

    async def materialize(self, account_id: str, mode: Mode) -> MaterializedCredentials:
        self.calls.append(("materialize", account_id, mode))
        if isinstance(self.result, Exception):
            raise self.result
        return self.result

    def called(self, operation: str) -> bool:
        return any(call[0] == operation for call in self.calls)


@pytest.fixture(autouse=True)
def reset_structlog() -> Generator[None, None, None]:
    """Restore structlog defaults after tests that configure logging."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def clean_environ() -> Generator[None, None, None]:
    """Run a test with credential cache variables removed from the environment."""
    saved = {k: v for k, v in os.environ.items() if k.startswith("CREDENTIAL_CACHE_")}
    for key in saved:
        del os.environ[key]
    yield
    for key in [k for k in os.environ if k.startswith("CREDENTIAL_CACHE_")]:
        del os.environ[key]
    os.environ.update(saved)


@pytest.fixture(scope="class")
def localstack_container() -> Generator[DockerContainer, None, None]:
    """Start localstack container for Secrets Manager testing."""
    if not os.path.exists("/var/run/docker.sock"):
        pytest.skip("Docker not available")

    container = DockerContainer("localstack/localstack:3.0")
    container.with_env("SERVICES", "secretsmanager")
    container.with_env("DEFAULT_REGION", "us-east-1")
    container.with_env("AWS_ACCESS_KEY_ID", "test")
    container.with_env("AWS_SECRET_ACCESS_KEY", "test")
    container.with_exposed_ports(4566)
    container.start()
    try:
        wait_for_logs(container, "Ready.")
        yield container
    finally:
        container.stop()


@pytest.fixture
def localstack_endpoint(localstack_container: DockerContainer) -> str:
    """Endpoint URL of the running localstack container."""
    host = localstack_container.get_container_host_ip()
    port = localstack_container.get_exposed_port(4566)
    return f"http://{host}:{port}"


@pytest.fixture
def secrets_client(localstack_endpoint: str) -> Any:
    """Secrets Manager client pointed at localstack."""
    return boto3.client(
        "secretsmanager",
        endpoint_url=localstack_endpoint,
        aws_access_key_id="test",
        aws_secret_access_key="test",
        region_name="us-east-1",
    )


@pytest.fixture
def make_source() -> type[FakeSource]:
    """Factory for scriptable credential sources."""
    return FakeSource
