"""Settings loaded once from the process environment."""

import os
from collections.abc import Mapping
from dataclasses import dataclass

from auto_subscribe.subscription.errors import ConfigError
from auto_subscribe.subscription.types import DestinationMode
from auto_subscribe.utils.arn import is_lambda_function_arn, parse_arn

DEFAULT_FILTER_NAME = "ship-logs"
DEFAULT_FILTER_PATTERN = ""


def _optional(environ: Mapping[str, str], name: str, strip: bool = True) -> str | None:
    """Read an optional variable, treating an empty or whitespace-only value as unset."""
    value = environ.get(name, "")
    if not value.strip():
        return None
    return value.strip() if strip else value


@dataclass(frozen=True)
class Settings:
    """Immutable configuration for the subscription engine."""

    destination_arn: str
    filter_name: str = DEFAULT_FILTER_NAME
    filter_pattern: str = DEFAULT_FILTER_PATTERN
    include_prefix: str | None = None
    exclude_prefix: str | None = None
    role_arn: str | None = None

    def __post_init__(self) -> None:
        if not self.destination_arn:
            raise ConfigError("DESTINATION_ARN is required")
        if parse_arn(self.destination_arn) is None:
            raise ConfigError(f"DESTINATION_ARN is not a valid ARN: {self.destination_arn}")
        if self.destination_mode is DestinationMode.ROLE_ASSUMED and not self.role_arn:
            raise ConfigError(
                f"ROLE_ARN is required when the destination is not a Lambda function "
                f"({self.destination_arn})"
            )

    @property
    def destination_mode(self) -> DestinationMode:
        if is_lambda_function_arn(self.destination_arn):
            return DestinationMode.DIRECT_INVOKE
        return DestinationMode.ROLE_ASSUMED

    @property
    def delivery_role_arn(self) -> str | None:
        """The role to pass with PutSubscriptionFilter, None for Lambda destinations."""
        if self.destination_mode is DestinationMode.DIRECT_INVOKE:
            return None
        return self.role_arn

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """
        Build settings from environment variables.

        Args:
            environ: Mapping to read from. Defaults to os.environ.

        Raises:
            ConfigError: DESTINATION_ARN is missing or invalid, or ROLE_ARN is
                missing for a Kinesis/Firehose destination.
        """
        if environ is None:
            environ = os.environ

        return cls(
            destination_arn=environ.get("DESTINATION_ARN", "").strip(),
            filter_name=_optional(environ, "FILTER_NAME") or DEFAULT_FILTER_NAME,
            # The pattern is used verbatim; only an unset value falls back to match-all
            filter_pattern=environ.get("FILTER_PATTERN", DEFAULT_FILTER_PATTERN),
            # Prefixes are matched verbatim, including surrounding spaces
            include_prefix=_optional(environ, "PREFIX", strip=False),
            exclude_prefix=_optional(environ, "EXCLUDE_PREFIX", strip=False),
            role_arn=_optional(environ, "ROLE_ARN"),
        )
