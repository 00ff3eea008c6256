"""
Lambda entry points.

existing_log_groups: one-shot reconciliation of every log group.
new_log_groups: triggered by an EventBridge rule on CloudTrail CreateLogGroup events.

Settings and AWS clients are built on first use and reused by warm
invocations. A configuration error fails the invocation before any API call.
"""

from functools import lru_cache
from typing import Any

from auto_subscribe.subscription import (
    EventHandler,
    LogsApi,
    Reconciler,
    Settings,
    build_engine,
)
from auto_subscribe.utils.console import log_json, success


@lru_cache(maxsize=1)
def _engine() -> tuple[Reconciler, EventHandler]:
    settings = Settings.from_env()
    return build_engine(settings, LogsApi.from_session())


def existing_log_groups(event: Any = None, context: Any = None) -> dict[str, Any]:
    """Subscribe every existing log group that is missing or drifted from the destination."""
    reconciler, _ = _engine()
    report = reconciler.reconcile_all()

    # Failed groups are already logged one line each by the reconciler
    summary = report.summary()
    log_json(summary)
    return summary


def new_log_groups(event: Any, context: Any = None) -> dict[str, Any]:
    """Subscribe a newly created log group. Unresolved failures are raised."""
    _, event_handler = _engine()
    result = event_handler.on_log_group_created(event)

    if result is None:
        return {"status": "ignored"}

    if result.permission_granted:
        success(f"granted invoke permission while subscribing [{result.log_group_name}]")
    return {"status": result.action.value, "logGroupName": result.log_group_name}
