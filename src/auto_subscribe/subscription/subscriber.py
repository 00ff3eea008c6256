"""Subscribing a single log group to the configured destination."""

import uuid
from collections.abc import Callable

from auto_subscribe.subscription.config import Settings
from auto_subscribe.subscription.errors import PermissionMissingError
from auto_subscribe.subscription.logs_api import LogsApi
from auto_subscribe.subscription.types import Action, DestinationMode, SubscribeResult
from auto_subscribe.utils.arn import log_group_arn_pattern, parse_arn
from auto_subscribe.utils.console import info, log_json, success, warning


def generate_statement_id() -> str:
    """Generate a unique statement id for a Lambda resource policy."""
    return f"invoke-{uuid.uuid4().hex[:8]}"


class Subscriber:
    """
    Puts the configured subscription filter on log groups.

    When the destination is a Lambda function that CloudWatch Logs may not
    invoke yet, the Subscriber grants lambda:InvokeFunction to the logs
    service and retries the put exactly once. Every other failure propagates.
    """

    def __init__(
        self,
        settings: Settings,
        api: LogsApi,
        statement_id_factory: Callable[[], str] = generate_statement_id,
    ):
        self.settings = settings
        self.api = api
        self._statement_id_factory = statement_id_factory

    def ensure_subscribed(self, log_group_name: str) -> SubscribeResult:
        """
        Subscribe a log group, overwriting any filter with the same name.

        Raises:
            LogsApiError: The put failed for a reason other than a missing
                invoke permission, or failed again after the permission grant.
        """
        try:
            self._put_subscription_filter(log_group_name)
        except PermissionMissingError as e:
            if self.settings.destination_mode is not DestinationMode.DIRECT_INVOKE:
                raise
            warning(f"[{log_group_name}] {e}")
            self._grant_invoke_permission()

            self._put_subscription_filter(log_group_name)
            return SubscribeResult(
                log_group_name=log_group_name,
                action=Action.SUBSCRIBED,
                permission_granted=True,
            )

        return SubscribeResult(log_group_name=log_group_name, action=Action.SUBSCRIBED)

    def _put_subscription_filter(self, log_group_name: str) -> None:
        settings = self.settings
        request = {
            "log_group_name": log_group_name,
            "filter_name": settings.filter_name,
            "filter_pattern": settings.filter_pattern,
            "destination_arn": settings.destination_arn,
            "role_arn": settings.delivery_role_arn,
        }
        log_json(request)

        self.api.put_subscription_filter(**request)
        success(f"subscribed [{log_group_name}] to [{settings.destination_arn}]")

    def _grant_invoke_permission(self) -> None:
        function_arn = self.settings.destination_arn
        destination = parse_arn(function_arn)
        source_arn = log_group_arn_pattern(destination) if destination else None

        info(f"adding lambda:InvokeFunction permission to CloudWatch Logs for [{function_arn}]")
        self.api.add_invoke_permission(
            function_arn=function_arn,
            statement_id=self._statement_id_factory(),
            source_arn=source_arn,
        )
