"""Shared types for log group subscription."""

from dataclasses import dataclass, field
from enum import Enum


class DestinationMode(str, Enum):
    """How CloudWatch Logs delivers to the destination."""

    DIRECT_INVOKE = "direct-invoke"  # Lambda function, needs an invoke permission
    ROLE_ASSUMED = "role-assumed"  # Kinesis/Firehose, needs a delivery role


class Action(str, Enum):
    """What processing a log group did (or would do, when planning)."""

    SUBSCRIBED = "subscribed"  # no filter existed
    UPDATED = "updated"  # filter pointed at another destination
    UNCHANGED = "unchanged"
    FAILED = "failed"


@dataclass
class SubscriptionFilter:
    """A subscription filter as returned by DescribeSubscriptionFilters."""

    log_group_name: str
    filter_name: str
    filter_pattern: str
    destination_arn: str
    role_arn: str | None = None


@dataclass
class LogGroup:
    """A log group as returned by DescribeLogGroups."""

    name: str
    arn: str | None = None


@dataclass
class PlannedAction:
    """The dry-run decision for one log group."""

    log_group_name: str
    action: Action  # FAILED when the current filters could not be read
    current_destination: str | None = None
    error: str | None = None

    @property
    def needs_subscribe(self) -> bool:
        return self.action in (Action.SUBSCRIBED, Action.UPDATED)


@dataclass
class SubscribeResult:
    """Outcome of processing one log group."""

    log_group_name: str
    action: Action
    previous_destination: str | None = None
    permission_granted: bool = False
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.action is not Action.FAILED


@dataclass
class ReconcileReport:
    """Batch report of a reconciliation pass."""

    results: list[SubscribeResult] = field(default_factory=list)
    pages: int = 0
    skipped: int = 0  # rejected by the name filter

    def count(self, action: Action) -> int:
        return sum(1 for r in self.results if r.action is action)

    @property
    def failures(self) -> list[SubscribeResult]:
        return [r for r in self.results if not r.ok]

    def summary(self) -> dict[str, int]:
        """Counts per action, suitable for a JSON log line or a Lambda response."""
        return {
            "pages": self.pages,
            "skipped": self.skipped,
            "subscribed": self.count(Action.SUBSCRIBED),
            "updated": self.count(Action.UPDATED),
            "unchanged": self.count(Action.UNCHANGED),
            "failed": self.count(Action.FAILED),
        }
