"""AWS shared-config profile credential source.

This module provides the AwsProfileCredentialSource class, which maps account
ids to named profiles from the AWS shared config and credentials files.
"""

from collections.abc import Mapping

import boto3
import structlog

from credential_cache_core.credentials import RawCredentials, ResolvableProvider
from credential_cache_core.exceptions import MissingCredentialError
from credential_cache_core.modes import Mode

logger = structlog.get_logger(__name__)


class ProfileSessionProvider(ResolvableProvider):
    """Resolves credentials from a boto3 session bound to a named profile."""

    def __init__(self, profile_name: str, source_name: str = "aws-profile") -> None:
        self.profile_name = profile_name
        self.source_name = source_name

    async def resolve(self) -> RawCredentials:
        session = boto3.session.Session(profile_name=self.profile_name)
        credentials = session.get_credentials()
        if credentials is None:
            raise MissingCredentialError(
                f"Profile '{self.profile_name}' has no credentials", self.source_name
            )
        frozen = credentials.get_frozen_credentials()
        return RawCredentials(
            access_key_id=frozen.access_key,
            secret_access_key=frozen.secret_key,
            session_token=frozen.token,
        )


class AwsProfileCredentialSource:
    """Credential source backed by AWS named profiles.

    Profiles are looked up by ``"{account_id}:{mode}"`` first and then by the
    bare account id, so a separate write profile can be configured per account.
    """

    def __init__(
        self, profiles: Mapping[str, str], name: str = "aws-profile"
    ) -> None:
        """Initialize the profile credential source.

        Args:
            profiles: Mapping of ``account`` or ``account:mode`` to profile name.
            name: Source name reported in results and logs.
        """
        self.profiles = dict(profiles)
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    def profile_for(self, account_id: str, mode: Mode | None = None) -> str | None:
        """Get the profile configured for an account and optional mode."""
        if mode is not None:
            profile = self.profiles.get(f"{account_id}:{mode.value}")
            if profile is not None:
                return profile
        return self.profiles.get(account_id)

    def _known_profiles(self) -> list[str]:
        return boto3.session.Session().available_profiles

    async def is_available(self) -> bool:
        return bool(self.profiles) and bool(self._known_profiles())

    async def can_provide(self, account_id: str) -> bool:
        known = set(self._known_profiles())
        candidates = [self.profile_for(account_id, mode) for mode in Mode]
        return all(profile in known for profile in candidates)

    async def materialize(self, account_id: str, mode: Mode) -> ProfileSessionProvider:
        profile = self.profile_for(account_id, mode)
        if profile is None:
            raise MissingCredentialError(
                f"No profile configured for account {account_id} ({mode.value})",
                self.name,
            )
        logger.debug(
            "AWS_PROFILE_SELECTED",
            account_id=account_id,
            mode=mode.value,
            profile=profile,
        )
        return ProfileSessionProvider(profile, source_name=self.name)
