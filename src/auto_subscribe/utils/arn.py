"""ARN parsing utilities."""

from dataclasses import dataclass

# Services whose ARNs CloudWatch Logs accepts as a subscription destination
DESTINATION_SERVICES = ("lambda", "kinesis", "firehose", "logs")


@dataclass(frozen=True)
class Arn:
    """The colon-separated parts of an AWS ARN."""

    partition: str
    service: str
    region: str
    account_id: str
    resource: str


def parse_arn(value: str) -> Arn | None:
    """
    Split an ARN into its parts.

    Returns None when the value does not look like an ARN
    (arn:<partition>:<service>:<region>:<account>:<resource>).
    """
    parts = value.split(":", 5)
    if len(parts) != 6 or parts[0] != "arn":
        return None

    _, partition, service, region, account_id, resource = parts
    if not partition or not service or not resource:
        return None

    return Arn(
        partition=partition,
        service=service,
        region=region,
        account_id=account_id,
        resource=resource,
    )


def is_lambda_function_arn(value: str) -> bool:
    """Check whether an ARN names a Lambda function (arn:...:lambda:...:function:name)."""
    arn = parse_arn(value)
    if arn is None:
        return False
    return arn.service == "lambda" and arn.resource.startswith("function:")


def validate_destination_arn(value: str | None) -> bool:
    """
    Validate a subscription destination ARN.

    Requirements:
    - Must parse as an ARN
    - Service must be one CloudWatch Logs can deliver to
    """
    if not value:
        return False

    arn = parse_arn(value.strip())
    if arn is None:
        return False

    return arn.service in DESTINATION_SERVICES


def validate_role_arn(value: str | None) -> bool:
    """Validate an IAM role ARN (arn:...:iam::<account>:role/<name>)."""
    if not value:
        return False

    arn = parse_arn(value.strip())
    if arn is None:
        return False

    return arn.service == "iam" and arn.resource.startswith("role/")


def log_group_arn_pattern(destination: Arn) -> str | None:
    """
    Build the ARN pattern matching every log group in the destination's account and region.

    Returns None when the destination ARN does not carry both a region and an account.
    """
    if not destination.region or not destination.account_id:
        return None
    return (
        f"arn:{destination.partition}:logs:{destination.region}:"
        f"{destination.account_id}:log-group:*"
    )
