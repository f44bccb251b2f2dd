"""AWS Secrets Manager credential source.

This module provides the SecretsManagerCredentialSource class for retrieving
account access keys stored as JSON secrets in AWS Secrets Manager.
"""

import json
import os
from typing import Any

import boto3
import structlog
from botocore.exceptions import BotoCoreError, ClientError

from credential_cache_core.credentials import LegacyRefreshable, RawCredentials
from credential_cache_core.exceptions import (
    CredentialSourceError,
    MissingCredentialError,
)
from credential_cache_core.modes import Mode

logger = structlog.get_logger(__name__)

DEFAULT_SECRET_TEMPLATE = "{account_id}-{mode}-credentials"


def _create_session() -> boto3.session.Session:
    """Create a boto3 session, respecting AWS profile overrides."""
    profile_name = os.getenv(
        "CREDENTIAL_CACHE_SECRETS_AWS_PROFILE", os.getenv("AWS_PROFILE")
    )
    if profile_name:
        return boto3.session.Session(profile_name=profile_name)
    return boto3.session.Session()


class SecretCredentials(LegacyRefreshable):
    """Credentials container that re-reads its secret on every refresh."""

    def __init__(self, client: Any, secret_name: str, source_name: str) -> None:
        self.client = client
        self.secret_name = secret_name
        self.source_name = source_name
        self.current: RawCredentials | None = None

    async def force_refresh(self) -> RawCredentials:
        """Fetch and parse the secret.

        Raises:
            MissingCredentialError: When the secret or one of its keys is missing.
            CredentialSourceError: For access or parsing failures.
        """
        try:
            response = self.client.get_secret_value(SecretId=self.secret_name)
            secret_data = json.loads(response["SecretString"])
        except ClientError as e:
            error_code = e.response["Error"]["Code"]
            if error_code == "ResourceNotFoundException":
                raise MissingCredentialError(
                    f"Secret '{self.secret_name}' not found", self.source_name
                ) from e
            if error_code == "AccessDeniedException":
                raise CredentialSourceError(
                    f"Access denied to secret '{self.secret_name}'", self.source_name
                ) from e
            raise CredentialSourceError(
                f"AWS Secrets Manager error: {e}", self.source_name
            ) from e
        except json.JSONDecodeError as e:
            raise CredentialSourceError(
                f"Secret '{self.secret_name}' not valid JSON", self.source_name
            ) from e

        for key in ("access_key_id", "secret_access_key"):
            if not isinstance(secret_data.get(key), str):
                raise MissingCredentialError(
                    f"Key '{key}' not found in secret '{self.secret_name}'",
                    self.source_name,
                )

        self.current = RawCredentials(
            access_key_id=secret_data["access_key_id"],
            secret_access_key=secret_data["secret_access_key"],
            session_token=secret_data.get("session_token"),
        )
        return self.current


class SecretsManagerCredentialSource:
    """Credential source that reads access keys from AWS Secrets Manager.

    The secret name is built from ``secret_template`` with ``account_id`` and
    ``mode`` substituted. The secret must be JSON with ``access_key_id``,
    ``secret_access_key`` and optionally ``session_token``.
    """

    def __init__(
        self,
        region: str | None = None,
        endpoint_url: str | None = None,
        secret_template: str = DEFAULT_SECRET_TEMPLATE,
        name: str = "aws-secrets",
    ) -> None:
        """Initialize the Secrets Manager credential source.

        Args:
            region: AWS region to use. Defaults to AWS_REGION env var or eu-west-2.
            endpoint_url: Optional custom endpoint URL for testing or local development.
            secret_template: Format string for secret names.
            name: Source name reported in results and logs.
        """
        if region is None:
            region = os.getenv("AWS_REGION", "eu-west-2")
        self.region = region
        self.endpoint_url = endpoint_url
        self.secret_template = secret_template
        self._name = name
        self._client: Any = None

    @property
    def name(self) -> str:
        return self._name

    def _get_client(self) -> Any:
        if self._client is None:
            client_kwargs: dict[str, Any] = {
                "service_name": "secretsmanager",
                "region_name": self.region,
            }
            if self.endpoint_url:
                client_kwargs["endpoint_url"] = self.endpoint_url
            self._client = _create_session().client(**client_kwargs)
        return self._client

    def secret_name(self, account_id: str, mode: Mode) -> str:
        """Build the secret name for an account and mode."""
        return self.secret_template.format(account_id=account_id, mode=mode.value)

    async def is_available(self) -> bool:
        """Check that the ambient AWS configuration yields any credentials."""
        return _create_session().get_credentials() is not None

    async def can_provide(self, account_id: str) -> bool:
        """Check that a secret exists for the account in every mode."""
        client = self._get_client()
        for mode in Mode:
            secret_name = self.secret_name(account_id, mode)
            try:
                client.describe_secret(SecretId=secret_name)
            except ClientError as e:
                if e.response["Error"]["Code"] == "ResourceNotFoundException":
                    return False
                raise
        return True

    async def materialize(self, account_id: str, mode: Mode) -> SecretCredentials:
        try:
            client = self._get_client()
        except BotoCoreError as e:
            raise CredentialSourceError(
                f"Cannot create Secrets Manager client: {e}", self.name
            ) from e
        secret_name = self.secret_name(account_id, mode)
        logger.debug("AWS_SECRET_SELECTED", account_id=account_id, secret=secret_name)
        return SecretCredentials(client, secret_name, source_name=self.name)
