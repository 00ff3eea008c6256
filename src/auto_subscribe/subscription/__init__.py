"""
CloudWatch Logs subscription engine.

Keeps every log group subscribed to a single destination: a Lambda function,
a Kinesis stream, or a Firehose delivery stream.
"""

from .config import Settings
from .errors import ConfigError, LogsApiError, MalformedEventError, PermissionMissingError
from .events import EventHandler, extract_log_group_name
from .logs_api import LogsApi
from .name_filter import should_process
from .reconciler import Reconciler
from .subscriber import Subscriber
from .types import (
    Action,
    DestinationMode,
    LogGroup,
    PlannedAction,
    ReconcileReport,
    SubscribeResult,
    SubscriptionFilter,
)

# Re-export types
__all__ = [
    "Action",
    "ConfigError",
    "DestinationMode",
    "EventHandler",
    "LogGroup",
    "LogsApi",
    "LogsApiError",
    "MalformedEventError",
    "PermissionMissingError",
    "PlannedAction",
    "ReconcileReport",
    "Reconciler",
    "Settings",
    "SubscribeResult",
    "Subscriber",
    "SubscriptionFilter",
    "build_engine",
    "extract_log_group_name",
    "should_process",
]


def build_engine(settings: Settings, api: LogsApi) -> tuple[Reconciler, EventHandler]:
    """Wire the Subscriber, Reconciler and EventHandler around one Logs API."""
    subscriber = Subscriber(settings, api)
    return Reconciler(settings, api, subscriber), EventHandler(settings, subscriber)
