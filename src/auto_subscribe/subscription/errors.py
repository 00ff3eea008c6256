"""Error types raised by the subscription engine."""

from botocore.exceptions import BotoCoreError, ClientError


class ConfigError(ValueError):
    """Settings could not be built from the environment."""


class MalformedEventError(ValueError):
    """A "log group created" notification is missing the log group name."""


class LogsApiError(Exception):
    """A CloudWatch Logs or Lambda API call failed."""

    def __init__(self, operation: str, code: str, message: str):
        super().__init__(f"{operation} failed ({code}): {message}")
        self.operation = operation
        self.code = code
        self.message = message

    @classmethod
    def from_client_error(cls, err: ClientError) -> "LogsApiError":
        """Wrap a botocore ClientError, keeping its operation, code and message."""
        details = err.response.get("Error", {})
        return cls(
            operation=err.operation_name,
            code=details.get("Code", "Unknown"),
            message=details.get("Message", str(err)),
        )

    @classmethod
    def from_transport_error(cls, err: BotoCoreError, operation: str) -> "LogsApiError":
        """Wrap a botocore failure that happened before the service could answer."""
        return cls(operation=operation, code="TransportError", message=str(err))


class PermissionMissingError(LogsApiError):
    """CloudWatch Logs is not allowed to invoke the destination Lambda function."""
