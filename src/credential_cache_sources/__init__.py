"""Bundled credential sources."""

from .aws_profile import AwsProfileCredentialSource, ProfileSessionProvider
from .aws_secrets import SecretCredentials, SecretsManagerCredentialSource
from .environment import EnvironmentCredentialSource
from .factory import (
    create_credential_source,
    create_source_registry,
    parse_profile_mapping,
    parse_source_types,
)

__all__ = [
    "AwsProfileCredentialSource",
    "EnvironmentCredentialSource",
    "ProfileSessionProvider",
    "SecretCredentials",
    "SecretsManagerCredentialSource",
    "create_credential_source",
    "create_source_registry",
    "parse_profile_mapping",
    "parse_source_types",
]
