"""Pytest configuration and fixtures."""

from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from auto_subscribe.subscription.config import Settings

LAMBDA_ARN = "arn:aws:lambda:us-east-1:123456789012:function:ship-logs-to-elk"
KINESIS_ARN = "arn:aws:kinesis:us-east-1:123456789012:stream/log-stream"
ROLE_ARN = "arn:aws:iam::123456789012:role/cloudwatch-logs-to-kinesis"

PERMISSION_MESSAGE = (
    "Could not execute the lambda function. Make sure you have given CloudWatch Logs "
    "permission to execute your function."
)


def client_error(code: str, message: str, operation: str = "PutSubscriptionFilter") -> ClientError:
    """Build a botocore ClientError the way the service returns it."""
    return ClientError({"Error": {"Code": code, "Message": message}}, operation)


@pytest.fixture
def lambda_settings() -> Settings:
    """Settings for a Lambda (direct-invoke) destination."""
    return Settings(destination_arn=LAMBDA_ARN)


@pytest.fixture
def kinesis_settings() -> Settings:
    """Settings for a Kinesis (role-assumed) destination."""
    return Settings(destination_arn=KINESIS_ARN, role_arn=ROLE_ARN)


@pytest.fixture
def mock_logs_client() -> MagicMock:
    """Create a mock CloudWatch Logs client."""
    return MagicMock()


@pytest.fixture
def mock_lambda_client() -> MagicMock:
    """Create a mock Lambda client."""
    return MagicMock()


@pytest.fixture
def mock_api() -> MagicMock:
    """Create a mock LogsApi with no log groups and no subscription filters."""
    api = MagicMock()
    api.list_log_groups.return_value = ([], None)
    api.describe_subscription_filters.return_value = []
    return api
