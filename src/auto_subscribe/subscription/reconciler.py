"""Reconciliation of every existing log group with the configured destination."""

from collections.abc import Iterable, Iterator
from dataclasses import replace

from auto_subscribe.subscription.config import Settings
from auto_subscribe.subscription.errors import LogsApiError
from auto_subscribe.subscription.logs_api import LogsApi
from auto_subscribe.subscription.name_filter import should_process
from auto_subscribe.subscription.subscriber import Subscriber
from auto_subscribe.subscription.types import (
    Action,
    LogGroup,
    PlannedAction,
    ReconcileReport,
    SubscribeResult,
)
from auto_subscribe.utils.console import error, info


class Reconciler:
    """
    Walks all log groups page by page and subscribes the ones that need it.

    A log group needs a subscription when it has no subscription filter, or
    when its first filter points at a destination other than the configured
    one. Failures are recorded per log group and never stop the pass; only a
    failure to fetch a page of log groups propagates.
    """

    def __init__(self, settings: Settings, api: LogsApi, subscriber: Subscriber):
        self.settings = settings
        self.api = api
        self.subscriber = subscriber

    def reconcile_all(self) -> ReconcileReport:
        """Run one reconciliation pass, deciding and applying group by group."""
        report = ReconcileReport()

        for page in self._pages():
            report.pages += 1
            for log_group in page:
                if not self._matches(log_group):
                    report.skipped += 1
                    continue
                report.results.append(self.reconcile_log_group(log_group.name))

        return report

    def reconcile_log_group(self, log_group_name: str) -> SubscribeResult:
        """Bring one log group in line with the configured destination."""
        return self._apply(self.decide(log_group_name))

    def decide(self, log_group_name: str) -> PlannedAction:
        """Read a log group's current subscription and decide what to do with it."""
        try:
            filters = self.api.describe_subscription_filters(log_group_name)
        except LogsApiError as e:
            return PlannedAction(log_group_name=log_group_name, action=Action.FAILED, error=str(e))

        if not filters:
            return PlannedAction(log_group_name=log_group_name, action=Action.SUBSCRIBED)

        # Only the first filter is considered
        current = filters[0].destination_arn
        if current != self.settings.destination_arn:
            return PlannedAction(
                log_group_name=log_group_name,
                action=Action.UPDATED,
                current_destination=current,
            )

        return PlannedAction(
            log_group_name=log_group_name,
            action=Action.UNCHANGED,
            current_destination=current,
        )

    def plan(self) -> Iterator[PlannedAction]:
        """Yield the decision for every matching log group without changing anything."""
        for page in self._pages():
            for log_group in page:
                if self._matches(log_group):
                    yield self.decide(log_group.name)

    def apply(self, planned: Iterable[PlannedAction]) -> ReconcileReport:
        """Execute previously planned decisions."""
        report = ReconcileReport()
        for action in planned:
            report.results.append(self._apply(action))
        return report

    def _pages(self) -> Iterator[list[LogGroup]]:
        next_token: str | None = None
        while True:
            log_groups, next_token = self.api.list_log_groups(next_token)
            yield log_groups
            if not next_token:
                break

    def _matches(self, log_group: LogGroup) -> bool:
        return should_process(
            log_group.name, self.settings.include_prefix, self.settings.exclude_prefix
        )

    def _apply(self, planned: PlannedAction) -> SubscribeResult:
        name = planned.log_group_name

        if planned.action is Action.FAILED:
            error(f"[{name}] could not read subscription filters: {planned.error}")
            return SubscribeResult(log_group_name=name, action=Action.FAILED, error=planned.error)

        if planned.action is Action.UNCHANGED:
            return SubscribeResult(
                log_group_name=name,
                action=Action.UNCHANGED,
                previous_destination=planned.current_destination,
            )

        if planned.action is Action.SUBSCRIBED:
            info(f"[{name}] doesn't have a filter yet")
        else:
            info(
                f"[{name}] has an old destination ARN [{planned.current_destination}], updating..."
            )

        try:
            result = self.subscriber.ensure_subscribed(name)
        except LogsApiError as e:
            error(f"[{name}] failed to subscribe: {e}")
            return SubscribeResult(
                log_group_name=name,
                action=Action.FAILED,
                previous_destination=planned.current_destination,
                error=str(e),
            )

        return replace(
            result,
            action=planned.action,
            previous_destination=planned.current_destination,
        )
