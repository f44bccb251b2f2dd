"""Credential source registry factory functions.

This module builds a SourceRegistry from a list of source type names and
their settings, falling back to environment variables for anything not given.
"""

import os
from collections.abc import Mapping, Sequence

from credential_cache_core.exceptions import ConfigurationError, UnknownSourceTypeError
from credential_cache_core.modes import Mode
from credential_cache_core.registry import SourceRegistry
from credential_cache_core.sources import CredentialSource

from .aws_profile import AwsProfileCredentialSource
from .aws_secrets import DEFAULT_SECRET_TEMPLATE, SecretsManagerCredentialSource
from .environment import DEFAULT_PREFIX, EnvironmentCredentialSource

SOURCE_TYPES = ("environment", "aws-profile", "aws-secrets")


def _get_aws_region() -> str:
    """Get AWS region with proper precedence: CREDENTIAL_CACHE_AWS_REGION > AWS_REGION > default."""
    return (
        os.getenv("CREDENTIAL_CACHE_AWS_REGION")
        or os.getenv("AWS_REGION")
        or "eu-west-2"
    )


def parse_source_types(value: str) -> list[str]:
    """Split a comma separated list of source types."""
    return [item.strip().lower() for item in value.split(",") if item.strip()]


def parse_profile_mapping(value: str) -> dict[str, str]:
    """Parse ``account=profile`` pairs, optionally keyed ``account:mode=profile``.

    Raises:
        ConfigurationError: When an entry is malformed or names an unknown mode.
    """
    profiles: dict[str, str] = {}
    for entry in value.split(","):
        entry = entry.strip()
        if not entry:
            continue
        key, sep, profile = entry.partition("=")
        if not sep or not key.strip() or not profile.strip():
            raise ConfigurationError(f"Bad profile mapping: {entry}", "aws-profile")
        account_id, _, mode = key.strip().partition(":")
        if mode:
            key = f"{account_id}:{Mode.parse(mode).value}"
        profiles[key.strip()] = profile.strip()
    return profiles


def create_credential_source(
    source_type: str,
    env_prefix: str | None = None,
    aws_region: str | None = None,
    aws_endpoint_url: str | None = None,
    aws_profiles: Mapping[str, str] | None = None,
    secret_template: str | None = None,
) -> CredentialSource:
    """Create a single credential source instance.

    Raises:
        UnknownSourceTypeError: If the source type is not supported.
    """
    source_type = source_type.lower()
    if source_type in ("environment", "env"):
        if env_prefix is None:
            env_prefix = os.getenv("CREDENTIAL_CACHE_ENV_PREFIX", DEFAULT_PREFIX)
        return EnvironmentCredentialSource(prefix=env_prefix)
    if source_type == "aws-profile":
        if aws_profiles is None:
            aws_profiles = parse_profile_mapping(
                os.getenv("CREDENTIAL_CACHE_AWS_PROFILES", "")
            )
        return AwsProfileCredentialSource(profiles=aws_profiles)
    if source_type == "aws-secrets":
        if aws_region is None:
            aws_region = _get_aws_region()
        if aws_endpoint_url is None:
            aws_endpoint_url = os.getenv("CREDENTIAL_CACHE_AWS_ENDPOINT_URL")
        return SecretsManagerCredentialSource(
            region=aws_region,
            endpoint_url=aws_endpoint_url,
            secret_template=secret_template or DEFAULT_SECRET_TEMPLATE,
        )
    raise UnknownSourceTypeError(source_type)


def create_source_registry(
    source_types: Sequence[str] | None = None,
    env_prefix: str | None = None,
    aws_region: str | None = None,
    aws_endpoint_url: str | None = None,
    aws_profiles: Mapping[str, str] | None = None,
    secret_template: str | None = None,
) -> SourceRegistry:
    """Create a registry holding the requested sources in the given order.

    Args:
        source_types: Source type names in trial order. If None, uses the
            CREDENTIAL_CACHE_SOURCES env var or ``"environment"``.
        env_prefix: Variable prefix for the environment source.
        aws_region: AWS region for the Secrets Manager source.
        aws_endpoint_url: AWS endpoint URL for LocalStack testing.
        aws_profiles: Account to profile mapping for the profile source.
        secret_template: Secret name template for the Secrets Manager source.

    Returns:
        Registry with one source per requested type.
    """
    if source_types is None:
        source_types = parse_source_types(
            os.getenv("CREDENTIAL_CACHE_SOURCES", "environment")
        )

    registry = SourceRegistry()
    for source_type in source_types:
        registry.register(
            create_credential_source(
                source_type,
                env_prefix=env_prefix,
                aws_region=aws_region,
                aws_endpoint_url=aws_endpoint_url,
                aws_profiles=aws_profiles,
                secret_template=secret_template,
            )
        )
    return registry
