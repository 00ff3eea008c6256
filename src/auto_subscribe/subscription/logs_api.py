"""CloudWatch Logs and Lambda API access for the subscription engine."""

from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from auto_subscribe.subscription.errors import LogsApiError, PermissionMissingError
from auto_subscribe.subscription.types import LogGroup, SubscriptionFilter

LOGS_PRINCIPAL = "logs.amazonaws.com"


def is_permission_missing(err: ClientError) -> bool:
    """
    Check whether a PutSubscriptionFilter failure means CloudWatch Logs may not invoke a Lambda.

    The service reports this as an InvalidParameterException whose message
    tells the caller to give CloudWatch Logs permission to execute the
    function. The message is matched on keywords, not exact wording.
    """
    details = err.response.get("Error", {})
    if details.get("Code") != "InvalidParameterException":
        return False

    message = details.get("Message", "").lower()
    return "lambda" in message and "permission" in message


class LogsApi:
    """Thin wrapper over the boto3 logs and lambda clients with typed errors."""

    def __init__(self, logs_client: Any, lambda_client: Any):
        self._logs = logs_client
        self._lambda = lambda_client

    @classmethod
    def from_session(cls, session: boto3.Session | None = None, region: str | None = None):
        """Create the clients from a boto3 Session (a new default session if none is given)."""
        if session is None:
            session = boto3.Session()
        return cls(
            logs_client=session.client("logs", region_name=region),
            lambda_client=session.client("lambda", region_name=region),
        )

    def list_log_groups(self, next_token: str | None = None) -> tuple[list[LogGroup], str | None]:
        """
        Fetch one page of log groups.

        Returns the page's log groups and the token for the next page, which is
        None on the last page.
        """
        try:
            if next_token:
                response = self._logs.describe_log_groups(nextToken=next_token)
            else:
                response = self._logs.describe_log_groups()
        except ClientError as e:
            raise LogsApiError.from_client_error(e) from e
        except BotoCoreError as e:
            raise LogsApiError.from_transport_error(e, "DescribeLogGroups") from e

        log_groups = [
            LogGroup(name=lg["logGroupName"], arn=lg.get("arn"))
            for lg in response.get("logGroups", [])
        ]
        return log_groups, response.get("nextToken") or None

    def describe_subscription_filters(self, log_group_name: str) -> list[SubscriptionFilter]:
        """List the subscription filters of a log group, in the order the service returns them."""
        try:
            response = self._logs.describe_subscription_filters(logGroupName=log_group_name)
        except ClientError as e:
            raise LogsApiError.from_client_error(e) from e
        except BotoCoreError as e:
            raise LogsApiError.from_transport_error(e, "DescribeSubscriptionFilters") from e

        return [
            SubscriptionFilter(
                log_group_name=f.get("logGroupName", log_group_name),
                filter_name=f.get("filterName", ""),
                filter_pattern=f.get("filterPattern", ""),
                destination_arn=f.get("destinationArn", ""),
                role_arn=f.get("roleArn"),
            )
            for f in response.get("subscriptionFilters", [])
        ]

    def put_subscription_filter(
        self,
        log_group_name: str,
        filter_name: str,
        filter_pattern: str,
        destination_arn: str,
        role_arn: str | None = None,
    ) -> None:
        """
        Create or replace a subscription filter.

        Raises:
            PermissionMissingError: The destination is a Lambda function that
                CloudWatch Logs is not allowed to invoke.
            LogsApiError: Any other API failure.
        """
        request: dict[str, str] = {
            "logGroupName": log_group_name,
            "filterName": filter_name,
            "filterPattern": filter_pattern,
            "destinationArn": destination_arn,
        }
        # Kinesis/Firehose destinations are written through a delivery role
        if role_arn:
            request["roleArn"] = role_arn

        try:
            self._logs.put_subscription_filter(**request)
        except ClientError as e:
            if is_permission_missing(e):
                raise PermissionMissingError.from_client_error(e) from e
            raise LogsApiError.from_client_error(e) from e
        except BotoCoreError as e:
            raise LogsApiError.from_transport_error(e, "PutSubscriptionFilter") from e

    def add_invoke_permission(
        self,
        function_arn: str,
        statement_id: str,
        source_arn: str | None = None,
    ) -> None:
        """Allow CloudWatch Logs to invoke a Lambda function."""
        request: dict[str, str] = {
            "Action": "lambda:InvokeFunction",
            "FunctionName": function_arn,
            "Principal": LOGS_PRINCIPAL,
            "StatementId": statement_id,
        }
        if source_arn:
            request["SourceArn"] = source_arn

        try:
            self._lambda.add_permission(**request)
        except ClientError as e:
            raise LogsApiError.from_client_error(e) from e
        except BotoCoreError as e:
            raise LogsApiError.from_transport_error(e, "AddPermission") from e
