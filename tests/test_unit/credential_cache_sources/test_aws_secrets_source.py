"""Tests for the AWS Secrets Manager credential source."""

import os
from typing import Any
from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError

from credential_cache_core import (
    CredentialSourceError,
    MissingCredentialError,
    Mode,
    RawCredentials,
)
from credential_cache_sources import SecretCredentials, SecretsManagerCredentialSource


def client_error(code: str, operation: str = "GetSecretValue") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


class TestSecretsManagerCredentialSource:
    """Test secret naming, checks and client construction."""

    @pytest.fixture
    def client(self) -> MagicMock:
        return MagicMock()

    @pytest.fixture
    def source(self, client: MagicMock) -> SecretsManagerCredentialSource:
        source = SecretsManagerCredentialSource(region="eu-west-1")
        source._client = client
        return source

    def test_secret_name_template(self) -> None:
        source = SecretsManagerCredentialSource(
            region="eu-west-1", secret_template="creds/{account_id}/{mode}"
        )
        assert source.secret_name("111122223333", Mode.WRITING) == "creds/111122223333/writing"

    def test_region_defaults_to_environment(self) -> None:
        with patch.dict(os.environ, {"AWS_REGION": "us-east-2"}, clear=True):
            assert SecretsManagerCredentialSource().region == "us-east-2"
        with patch.dict(os.environ, {}, clear=True):
            assert SecretsManagerCredentialSource().region == "eu-west-2"

    @patch("boto3.session.Session")
    @pytest.mark.asyncio
    async def test_available_with_ambient_credentials(self, sess_mock: MagicMock) -> None:
        source = SecretsManagerCredentialSource(region="eu-west-1")

        sess_mock.return_value.get_credentials.return_value = MagicMock()
        assert await source.is_available() is True

        sess_mock.return_value.get_credentials.return_value = None
        assert await source.is_available() is False

    @pytest.mark.asyncio
    async def test_can_provide_checks_each_mode(
        self, source: SecretsManagerCredentialSource, client: MagicMock
    ) -> None:
        client.describe_secret.side_effect = [
            {"Name": "111122223333-reading-credentials"},
            {"Name": "111122223333-writing-credentials"},
        ]

        assert await source.can_provide("111122223333") is True
        secret_ids = [call.kwargs["SecretId"] for call in client.describe_secret.call_args_list]
        assert secret_ids == [
            "111122223333-reading-credentials",
            "111122223333-writing-credentials",
        ]

    @pytest.mark.asyncio
    async def test_cannot_provide_with_single_mode_secret(
        self, source: SecretsManagerCredentialSource, client: MagicMock
    ) -> None:
        client.describe_secret.side_effect = [
            client_error("ResourceNotFoundException", "DescribeSecret"),
            {"Name": "111122223333-writing-credentials"},
        ]

        assert await source.can_provide("111122223333") is False
        assert client.describe_secret.call_count == 1

    @pytest.mark.asyncio
    async def test_cannot_provide_without_secrets(
        self, source: SecretsManagerCredentialSource, client: MagicMock
    ) -> None:
        client.describe_secret.side_effect = client_error(
            "ResourceNotFoundException", "DescribeSecret"
        )
        assert await source.can_provide("111122223333") is False

    @pytest.mark.asyncio
    async def test_can_provide_raises_other_errors(
        self, source: SecretsManagerCredentialSource, client: MagicMock
    ) -> None:
        client.describe_secret.side_effect = client_error(
            "AccessDeniedException", "DescribeSecret"
        )
        with pytest.raises(ClientError):
            await source.can_provide("111122223333")

    @pytest.mark.asyncio
    async def test_materialize_returns_refreshable(
        self, source: SecretsManagerCredentialSource, client: MagicMock
    ) -> None:
        container = await source.materialize("111122223333", Mode.READING)

        assert isinstance(container, SecretCredentials)
        assert container.secret_name == "111122223333-reading-credentials"
        assert container.current is None
        client.get_secret_value.assert_not_called()

    @patch("boto3.session.Session")
    def test_client_uses_endpoint_and_profile(self, sess_mock: MagicMock) -> None:
        with patch.dict(
            os.environ, {"CREDENTIAL_CACHE_SECRETS_AWS_PROFILE": "secrets-prof"}, clear=True
        ):
            source = SecretsManagerCredentialSource(
                region="us-east-1", endpoint_url="http://localhost:4566"
            )
            source._get_client()
            source._get_client()

        assert sess_mock.call_args.kwargs.get("profile_name") == "secrets-prof"
        sess_mock.return_value.client.assert_called_once_with(
            service_name="secretsmanager",
            region_name="us-east-1",
            endpoint_url="http://localhost:4566",
        )


class TestSecretCredentials:
    """Test refreshing credentials from a secret."""

    def make(self, client: Any) -> SecretCredentials:
        return SecretCredentials(client, "111122223333-reading-credentials", "aws-secrets")

    @pytest.mark.asyncio
    async def test_force_refresh_parses_secret(self) -> None:
        client = MagicMock()
        client.get_secret_value.return_value = {
            "SecretString": '{"access_key_id": "AKIA", "secret_access_key": "s", '
            '"session_token": "t"}'
        }
        container = self.make(client)

        credentials = await container.force_refresh()

        assert credentials == RawCredentials(
            access_key_id="AKIA", secret_access_key="s", session_token="t"
        )
        assert container.current is credentials
        client.get_secret_value.assert_called_once_with(
            SecretId="111122223333-reading-credentials"
        )

    @pytest.mark.asyncio
    async def test_missing_secret(self) -> None:
        client = MagicMock()
        client.get_secret_value.side_effect = client_error("ResourceNotFoundException")

        with pytest.raises(MissingCredentialError, match="not found") as exc_info:
            await self.make(client).force_refresh()
        assert isinstance(exc_info.value.__cause__, ClientError)

    @pytest.mark.asyncio
    async def test_access_denied(self) -> None:
        client = MagicMock()
        client.get_secret_value.side_effect = client_error("AccessDeniedException")

        with pytest.raises(CredentialSourceError, match="Access denied"):
            await self.make(client).force_refresh()

    @pytest.mark.asyncio
    async def test_invalid_json(self) -> None:
        client = MagicMock()
        client.get_secret_value.return_value = {"SecretString": "not json"}

        with pytest.raises(CredentialSourceError, match="not valid JSON"):
            await self.make(client).force_refresh()

    @pytest.mark.asyncio
    async def test_missing_key(self) -> None:
        client = MagicMock()
        client.get_secret_value.return_value = {"SecretString": '{"access_key_id": "AKIA"}'}

        with pytest.raises(MissingCredentialError, match="secret_access_key"):
            await self.make(client).force_refresh()
