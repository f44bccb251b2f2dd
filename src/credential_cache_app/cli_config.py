"""CLI configuration using environ-config.

This module defines the configuration class for command-line arguments.
Every setting can come from a ``CREDENTIAL_CACHE_*`` environment variable
and be overridden by the matching ``--flag`` on the command line.
"""

import os
from collections.abc import Mapping

import environ

from credential_cache_core.exceptions import ConfigurationError

ENV_PREFIX = "CREDENTIAL_CACHE"


@environ.config(prefix=ENV_PREFIX)
class AppConfig:
    """Configuration for the fetch and list commands."""

    account_id: str | None = environ.var(
        default=None, help="Account to fetch credentials for"
    )
    mode: str = environ.var(default="reading", help="Access mode (reading or writing)")
    sources: str = environ.var(
        default="environment",
        help="Comma separated credential sources in trial order "
        "(environment, aws-profile, aws-secrets)",
    )

    # Source configuration
    env_prefix: str | None = environ.var(
        default=None, help="Variable prefix for the environment source"
    )
    aws_region: str | None = environ.var(
        default=None, help="AWS region for the Secrets Manager source"
    )
    aws_endpoint_url: str | None = environ.var(
        default=None, help="AWS endpoint URL (e.g., LocalStack)"
    )
    aws_profiles: str = environ.var(
        default="", help="Comma separated account=profile or account:mode=profile"
    )
    secret_template: str | None = environ.var(
        default=None, help="Secret name template for the Secrets Manager source"
    )

    log_level: str = environ.var(default="INFO", help="Log level")
    dev_mode: bool = environ.bool_var(default=False, help="Enable development mode")


def args_to_environ(
    args: list[str], prefix: str = ENV_PREFIX
) -> dict[str, str]:
    """Turn ``--some-flag value`` pairs into ``PREFIX_SOME_FLAG`` variables.

    A flag followed by another flag, or by nothing, is set to ``"true"``.

    Raises:
        ConfigurationError: When a bare positional value is found.
    """
    overrides: dict[str, str] = {}
    index = 0
    while index < len(args):
        arg = args[index]
        if not arg.startswith("--"):
            raise ConfigurationError(f"Unexpected argument: {arg}", "cli")
        name = f"{prefix}_{arg[2:].replace('-', '_').upper()}"
        if index + 1 < len(args) and not args[index + 1].startswith("--"):
            overrides[name] = args[index + 1]
            index += 2
        else:
            overrides[name] = "true"
            index += 1
    return overrides


def create_app_config(
    args: list[str] | None = None, environ_vars: Mapping[str, str] | None = None
) -> AppConfig:
    """Create an AppConfig from command line arguments and environment variables.

    Args:
        args: Command line flags. Flags take precedence over the environment.
        environ_vars: Environment to read. If None, uses os.environ.

    Returns:
        AppConfig instance populated from args and environment variables.
    """
    merged = dict(os.environ if environ_vars is None else environ_vars)
    merged.update(args_to_environ(args or []))
    return environ.to_config(AppConfig, environ=merged)
