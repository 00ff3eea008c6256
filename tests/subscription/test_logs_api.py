"""Tests for auto_subscribe.subscription.logs_api."""

from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import EndpointConnectionError, ReadTimeoutError
from conftest import LAMBDA_ARN, PERMISSION_MESSAGE, ROLE_ARN, client_error
from inline_snapshot import snapshot

from auto_subscribe.subscription.errors import LogsApiError, PermissionMissingError
from auto_subscribe.subscription.logs_api import LogsApi, is_permission_missing
from auto_subscribe.subscription.types import LogGroup, SubscriptionFilter

# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def api(mock_logs_client: MagicMock, mock_lambda_client: MagicMock) -> LogsApi:
    """Create a LogsApi over mock clients."""
    return LogsApi(mock_logs_client, mock_lambda_client)


# =============================================================================
# Tests for is_permission_missing
# =============================================================================


class TestIsPermissionMissing:
    """Tests for is_permission_missing function."""

    def test_service_message(self):
        """Test the message CloudWatch Logs returns for a missing invoke permission."""
        assert is_permission_missing(client_error("InvalidParameterException", PERMISSION_MESSAGE))

    def test_reworded_message(self):
        """Test that the match does not depend on exact wording."""
        err = client_error(
            "InvalidParameterException",
            "CloudWatch Logs lacks permission to invoke the Lambda function.",
        )

        assert is_permission_missing(err)

    @pytest.mark.parametrize(
        ("code", "message"),
        [
            ("AccessDeniedException", PERMISSION_MESSAGE),
            ("InvalidParameterException", "Filter pattern is invalid."),
            ("LimitExceededException", "Resource limit exceeded."),
            ("ResourceNotFoundException", "The specified log group does not exist."),
        ],
    )
    def test_other_errors(self, code: str, message: str):
        """Test that other errors are not classified as a missing permission."""
        assert not is_permission_missing(client_error(code, message))


# =============================================================================
# Tests for LogsApi
# =============================================================================


class TestListLogGroups:
    """Tests for LogsApi.list_log_groups."""

    def test_first_page_without_token(self, api: LogsApi, mock_logs_client: MagicMock):
        """Test that the first page is requested without a token."""
        mock_logs_client.describe_log_groups.return_value = {
            "logGroups": [
                {"logGroupName": "/aws/lambda/a", "arn": "arn:aws:logs:us-east-1:1:log-group:a:*"},
                {"logGroupName": "/aws/lambda/b"},
            ],
            "nextToken": "page-2",
        }

        log_groups, next_token = api.list_log_groups()

        mock_logs_client.describe_log_groups.assert_called_once_with()
        assert log_groups == snapshot(
            [
                LogGroup(name="/aws/lambda/a", arn="arn:aws:logs:us-east-1:1:log-group:a:*"),
                LogGroup(name="/aws/lambda/b", arn=None),
            ]
        )
        assert next_token == "page-2"

    def test_passes_token(self, api: LogsApi, mock_logs_client: MagicMock):
        """Test that the continuation token is forwarded."""
        mock_logs_client.describe_log_groups.return_value = {"logGroups": []}

        log_groups, next_token = api.list_log_groups("page-2")

        mock_logs_client.describe_log_groups.assert_called_once_with(nextToken="page-2")
        assert log_groups == []
        assert next_token is None

    def test_empty_token_is_last_page(self, api: LogsApi, mock_logs_client: MagicMock):
        """Test that an empty token is treated as the last page."""
        mock_logs_client.describe_log_groups.return_value = {"logGroups": [], "nextToken": ""}

        _, next_token = api.list_log_groups()

        assert next_token is None

    def test_client_error_is_wrapped(self, api: LogsApi, mock_logs_client: MagicMock):
        """Test that ClientError becomes LogsApiError."""
        mock_logs_client.describe_log_groups.side_effect = client_error(
            "ThrottlingException", "Rate exceeded", "DescribeLogGroups"
        )

        with pytest.raises(LogsApiError) as exc_info:
            api.list_log_groups()

        assert exc_info.value.code == "ThrottlingException"
        assert str(exc_info.value) == snapshot(
            "DescribeLogGroups failed (ThrottlingException): Rate exceeded"
        )

    def test_transport_error_is_wrapped(self, api: LogsApi, mock_logs_client: MagicMock):
        """Test that a connection failure becomes LogsApiError."""
        original = EndpointConnectionError(endpoint_url="https://logs.us-east-1.amazonaws.com")
        mock_logs_client.describe_log_groups.side_effect = original

        with pytest.raises(LogsApiError) as exc_info:
            api.list_log_groups()

        assert exc_info.value.operation == "DescribeLogGroups"
        assert exc_info.value.__cause__ is original


class TestDescribeSubscriptionFilters:
    """Tests for LogsApi.describe_subscription_filters."""

    def test_returns_filters_in_order(self, api: LogsApi, mock_logs_client: MagicMock):
        """Test that filters are converted and keep the service order."""
        mock_logs_client.describe_subscription_filters.return_value = {
            "subscriptionFilters": [
                {
                    "filterName": "ship-logs",
                    "logGroupName": "/aws/lambda/a",
                    "filterPattern": "",
                    "destinationArn": LAMBDA_ARN,
                },
                {
                    "filterName": "other",
                    "logGroupName": "/aws/lambda/a",
                    "filterPattern": "ERROR",
                    "destinationArn": "arn:aws:kinesis:us-east-1:1:stream/s",
                    "roleArn": ROLE_ARN,
                },
            ]
        }

        filters = api.describe_subscription_filters("/aws/lambda/a")

        mock_logs_client.describe_subscription_filters.assert_called_once_with(
            logGroupName="/aws/lambda/a"
        )
        assert [f.filter_name for f in filters] == ["ship-logs", "other"]
        assert filters[1] == SubscriptionFilter(
            log_group_name="/aws/lambda/a",
            filter_name="other",
            filter_pattern="ERROR",
            destination_arn="arn:aws:kinesis:us-east-1:1:stream/s",
            role_arn=ROLE_ARN,
        )

    def test_no_filters(self, api: LogsApi, mock_logs_client: MagicMock):
        """Test a log group without filters."""
        mock_logs_client.describe_subscription_filters.return_value = {"subscriptionFilters": []}

        assert api.describe_subscription_filters("/aws/lambda/a") == []

    def test_client_error_is_wrapped(self, api: LogsApi, mock_logs_client: MagicMock):
        """Test that ClientError becomes LogsApiError."""
        mock_logs_client.describe_subscription_filters.side_effect = client_error(
            "ResourceNotFoundException", "gone", "DescribeSubscriptionFilters"
        )

        with pytest.raises(LogsApiError):
            api.describe_subscription_filters("/aws/lambda/a")

    def test_read_timeout_is_wrapped(self, api: LogsApi, mock_logs_client: MagicMock):
        """Test that a read timeout becomes LogsApiError with a transport code."""
        mock_logs_client.describe_subscription_filters.side_effect = ReadTimeoutError(
            endpoint_url="https://logs.us-east-1.amazonaws.com"
        )

        with pytest.raises(LogsApiError) as exc_info:
            api.describe_subscription_filters("/aws/lambda/a")

        assert str(exc_info.value) == snapshot(
            'DescribeSubscriptionFilters failed (TransportError): Read timeout on endpoint URL: "https://logs.us-east-1.amazonaws.com"'  # noqa: E501
        )


class TestPutSubscriptionFilter:
    """Tests for LogsApi.put_subscription_filter."""

    def test_without_role(self, api: LogsApi, mock_logs_client: MagicMock):
        """Test that roleArn is left out when no role is given."""
        api.put_subscription_filter("/aws/lambda/a", "ship-logs", "", LAMBDA_ARN)

        mock_logs_client.put_subscription_filter.assert_called_once_with(
            logGroupName="/aws/lambda/a",
            filterName="ship-logs",
            filterPattern="",
            destinationArn=LAMBDA_ARN,
        )

    def test_with_role(self, api: LogsApi, mock_logs_client: MagicMock):
        """Test that roleArn is sent when a role is given."""
        api.put_subscription_filter(
            "/aws/lambda/a", "ship-logs", "", "arn:aws:kinesis:us-east-1:1:stream/s", ROLE_ARN
        )

        _, kwargs = mock_logs_client.put_subscription_filter.call_args
        assert kwargs["roleArn"] == ROLE_ARN

    def test_permission_missing_is_typed(self, api: LogsApi, mock_logs_client: MagicMock):
        """Test that the missing-permission failure raises PermissionMissingError."""
        original = client_error("InvalidParameterException", PERMISSION_MESSAGE)
        mock_logs_client.put_subscription_filter.side_effect = original

        with pytest.raises(PermissionMissingError) as exc_info:
            api.put_subscription_filter("/aws/lambda/a", "ship-logs", "", LAMBDA_ARN)

        assert exc_info.value.__cause__ is original

    def test_other_error_is_generic(self, api: LogsApi, mock_logs_client: MagicMock):
        """Test that other failures raise LogsApiError but not PermissionMissingError."""
        mock_logs_client.put_subscription_filter.side_effect = client_error(
            "LimitExceededException", "Resource limit exceeded."
        )

        with pytest.raises(LogsApiError) as exc_info:
            api.put_subscription_filter("/aws/lambda/a", "ship-logs", "", LAMBDA_ARN)

        assert not isinstance(exc_info.value, PermissionMissingError)
        assert exc_info.value.operation == "PutSubscriptionFilter"

    def test_transport_error_is_generic(self, api: LogsApi, mock_logs_client: MagicMock):
        """Test that a connection failure raises LogsApiError with a transport code."""
        mock_logs_client.put_subscription_filter.side_effect = EndpointConnectionError(
            endpoint_url="https://logs.us-east-1.amazonaws.com"
        )

        with pytest.raises(LogsApiError) as exc_info:
            api.put_subscription_filter("/aws/lambda/a", "ship-logs", "", LAMBDA_ARN)

        assert not isinstance(exc_info.value, PermissionMissingError)
        assert (exc_info.value.operation, exc_info.value.code) == (
            "PutSubscriptionFilter",
            "TransportError",
        )


class TestAddInvokePermission:
    """Tests for LogsApi.add_invoke_permission."""

    def test_grants_to_logs_principal(self, api: LogsApi, mock_lambda_client: MagicMock):
        """Test the AddPermission request."""
        api.add_invoke_permission(
            LAMBDA_ARN,
            "invoke-1a2b3c4d",
            source_arn="arn:aws:logs:us-east-1:123456789012:log-group:*",
        )

        mock_lambda_client.add_permission.assert_called_once_with(
            Action="lambda:InvokeFunction",
            FunctionName=LAMBDA_ARN,
            Principal="logs.amazonaws.com",
            StatementId="invoke-1a2b3c4d",
            SourceArn="arn:aws:logs:us-east-1:123456789012:log-group:*",
        )

    def test_without_source_arn(self, api: LogsApi, mock_lambda_client: MagicMock):
        """Test that SourceArn is left out when not given."""
        api.add_invoke_permission(LAMBDA_ARN, "invoke-1a2b3c4d")

        _, kwargs = mock_lambda_client.add_permission.call_args
        assert "SourceArn" not in kwargs

    def test_client_error_is_wrapped(self, api: LogsApi, mock_lambda_client: MagicMock):
        """Test that ClientError becomes LogsApiError."""
        mock_lambda_client.add_permission.side_effect = client_error(
            "ResourceConflictException", "statement exists", "AddPermission"
        )

        with pytest.raises(LogsApiError):
            api.add_invoke_permission(LAMBDA_ARN, "invoke-1a2b3c4d")

    def test_transport_error_is_wrapped(self, api: LogsApi, mock_lambda_client: MagicMock):
        """Test that a connection failure becomes LogsApiError."""
        mock_lambda_client.add_permission.side_effect = EndpointConnectionError(
            endpoint_url="https://lambda.us-east-1.amazonaws.com"
        )

        with pytest.raises(LogsApiError) as exc_info:
            api.add_invoke_permission(LAMBDA_ARN, "invoke-1a2b3c4d")

        assert exc_info.value.operation == "AddPermission"


class TestFromSession:
    """Tests for LogsApi.from_session."""

    def test_uses_given_session(self):
        """Test that clients are created from the given session and region."""
        session = MagicMock()

        LogsApi.from_session(session, "eu-west-1")

        session.client.assert_any_call("logs", region_name="eu-west-1")
        session.client.assert_any_call("lambda", region_name="eu-west-1")

    def test_creates_session_if_none_provided(self):
        """Test that a default session is created when none is given."""
        with patch("auto_subscribe.subscription.logs_api.boto3.Session") as mock_session_class:
            LogsApi.from_session()

            mock_session_class.assert_called_once_with()
