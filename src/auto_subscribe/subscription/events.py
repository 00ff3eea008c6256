"""Handling of "log group created" notifications."""

from typing import Any

from auto_subscribe.subscription.config import Settings
from auto_subscribe.subscription.errors import MalformedEventError
from auto_subscribe.subscription.name_filter import rejection_reason
from auto_subscribe.subscription.subscriber import Subscriber
from auto_subscribe.subscription.types import SubscribeResult
from auto_subscribe.utils.console import info, log_json


def extract_log_group_name(event: Any) -> str:
    """
    Get the created log group's name from a CloudTrail CreateLogGroup event.

    The name lives at detail.requestParameters.logGroupName, e.g.
    /aws/lambda/logging-demo-dev-api.

    Raises:
        MalformedEventError: The field is missing or is not a non-empty string.
    """
    try:
        name = event["detail"]["requestParameters"]["logGroupName"]
    except (KeyError, TypeError) as e:
        raise MalformedEventError(
            f"event has no detail.requestParameters.logGroupName: {e!r}"
        ) from e

    if not isinstance(name, str) or not name:
        raise MalformedEventError(f"logGroupName must be a non-empty string, got {name!r}")
    return name


class EventHandler:
    """Subscribes a newly created log group unless the name filter rejects it."""

    def __init__(self, settings: Settings, subscriber: Subscriber):
        self.settings = settings
        self.subscriber = subscriber

    def on_log_group_created(self, event: Any) -> SubscribeResult | None:
        """
        Handle one notification.

        Returns None when the log group is filtered out. Subscription failures
        propagate so the invoking platform's retry policy applies.
        """
        log_json(event)

        log_group_name = extract_log_group_name(event)
        info(f"log group: {log_group_name}")

        reason = rejection_reason(
            log_group_name, self.settings.include_prefix, self.settings.exclude_prefix
        )
        if reason:
            info(f"ignored the log group [{log_group_name}] because {reason}")
            return None

        return self.subscriber.ensure_subscribed(log_group_name)
