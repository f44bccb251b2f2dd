"""Command-line interface and main entry point.

This module provides the CLI for resolving account credentials through the
configured credential sources and for listing those sources.
"""
# ruff: noqa: T201

import asyncio
import sys

import structlog

from credential_cache_app.cli_config import AppConfig, create_app_config
from credential_cache_core.cache import CredentialCache
from credential_cache_core.credentials import SourceCredentials
from credential_cache_core.logging import configure_logging
from credential_cache_core.modes import Mode
from credential_cache_core.registry import SourceRegistry
from credential_cache_core.resolver import ResolutionEngine
from credential_cache_sources.factory import (
    create_source_registry,
    parse_profile_mapping,
    parse_source_types,
)

VERSION = "0.1.0"

# Get logger for this module
logger = structlog.get_logger(__name__)


def build_registry(config: AppConfig) -> SourceRegistry:
    """Build the source registry described by the configuration."""
    return create_source_registry(
        source_types=parse_source_types(config.sources),
        env_prefix=config.env_prefix,
        aws_region=config.aws_region,
        aws_endpoint_url=config.aws_endpoint_url,
        aws_profiles=parse_profile_mapping(config.aws_profiles),
        secret_template=config.secret_template,
    )


def build_cache(config: AppConfig) -> CredentialCache:
    """Build a fresh credential cache for one CLI invocation."""
    return CredentialCache(ResolutionEngine(build_registry(config)))


def mask(value: str, visible: int = 4) -> str:
    """Mask all but the last few characters of a value."""
    if len(value) <= visible:
        return "*" * len(value)
    return "*" * (len(value) - visible) + value[-visible:]


def format_credentials(account_id: str, mode: Mode, result: SourceCredentials) -> str:
    credentials = result.credentials
    lines = [
        f"Account:        {account_id}",
        f"Mode:           {mode.value}",
        f"Source:         {result.source_name}",
        f"Access key id:  {credentials.access_key_id}",
        f"Secret key:     {mask(credentials.secret_access_key)}",
        f"Session token:  {'yes' if credentials.session_token else 'no'}",
    ]
    if credentials.expiration is not None:
        lines.append(f"Expires:        {credentials.expiration.isoformat()}")
    return "\n".join(lines)


async def fetch_async(config: AppConfig) -> SourceCredentials | None:
    """Resolve credentials for the configured account and mode."""
    assert config.account_id is not None  # noqa: S101
    mode = Mode.parse(config.mode)
    cache = build_cache(config)

    with structlog.contextvars.bound_contextvars(
        account_id=config.account_id, mode=mode.value
    ):
        logger.info("CREDENTIAL_SOURCES_CONFIGURED", sources=cache.available_source_names)
        result = await cache.fetch_credentials_for(config.account_id, mode)
        if result is None:
            logger.info("NO_CREDENTIALS_FOUND")
        else:
            logger.info("CREDENTIALS_RESOLVED", source=result.source_name)
        return result


def fetch_command(args: list[str] | None = None) -> None:
    """Resolve and print credentials for an account.

    Args:
        args: Command line arguments; the first one is the account id.
    """
    try:
        if not args:
            print("Error: account_id is required")
            sys.exit(1)

        account_id, remaining_args = args[0], args[1:]
        config = create_app_config([*remaining_args, "--account-id", account_id])
        configure_logging(log_level=config.log_level, dev_mode=config.dev_mode)

        result = asyncio.run(fetch_async(config))
        if result is None:
            print(f"No credential source can provide credentials for {account_id}")
            sys.exit(1)
        print(format_credentials(account_id, Mode.parse(config.mode), result))

    except Exception as e:
        print(f"Error: {e!s}")
        logger.exception("FETCH_COMMAND_ERROR", error=str(e))
        sys.exit(1)


def list_command(args: list[str] | None = None) -> None:
    """List the configured credential sources in trial order.

    Args:
        args: Command line arguments.
    """
    try:
        config = create_app_config(args)
        configure_logging(log_level=config.log_level, dev_mode=config.dev_mode)

        names = build_cache(config).available_source_names
        if not names:
            print("No credential sources are configured.")
            return

        print("Configured credential sources:")
        for name in names:
            print(f"  {name}")
        print(f"Total: {len(names)} source(s)")

    except Exception as e:
        print(f"Error: {e!s}")
        logger.exception("LIST_COMMAND_ERROR", error=str(e))
        sys.exit(1)


def show_help() -> None:
    """Show help information for the CLI."""
    help_text = """
Credential Cache

Usage:
    credential-cache <command> [options]

Commands:
    fetch <account_id>  Resolve credentials for an account
    list                List the configured credential sources
    --help, -h          Show this help message
    --version, -v       Show version information

Options:
    --mode <mode>                 Access mode (reading, writing)
    --sources <list>              Sources in trial order (environment, aws-profile, aws-secrets)
    --env-prefix <prefix>         Variable prefix for the environment source
    --aws-profiles <mapping>      account=profile or account:mode=profile pairs
    --aws-region <region>         AWS region for the Secrets Manager source
    --aws-endpoint-url <url>      AWS endpoint URL (e.g., LocalStack)
    --secret-template <template>  Secret name template
    --log-level <level>           Log level (DEBUG, INFO, WARNING, ERROR)
    --dev-mode                    Enable development mode

Examples:
    credential-cache fetch 123456789012
    credential-cache fetch 123456789012 --mode writing --sources aws-profile,environment
    credential-cache list --sources environment,aws-secrets
"""
    print(help_text)


def main() -> None:
    """Main entry point for the CLI."""
    min_args = 2
    if len(sys.argv) < min_args:
        show_help()
        sys.exit(1)

    command = sys.argv[1]
    args = sys.argv[2:]

    if command == "fetch":
        fetch_command(args)
    elif command == "list":
        list_command(args)
    elif command in ["--help", "-h", "help"]:
        show_help()
        sys.exit(0)
    elif command in ["--version", "-v", "version"]:
        print(f"credential-cache, version {VERSION}")
        sys.exit(0)
    else:
        show_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
