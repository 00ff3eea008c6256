"""AWS region utilities."""

import boto3
from botocore.exceptions import ClientError

from auto_subscribe.utils.console import warning


def get_default_region() -> str:
    """Get the default AWS region from boto3 session or environment."""
    session = boto3.Session()
    return session.region_name or "us-east-1"


def get_logs_regions(default_region: str, session: boto3.Session | None = None) -> list[str]:
    """
    Get the regions where CloudWatch Logs is enabled for the account.

    Regions come from the EC2 opt-in status, limited to those botocore knows
    a CloudWatch Logs endpoint for. The default region is listed first, the
    rest alphabetically.
    """
    if session is None:
        session = boto3.Session()

    try:
        ec2 = session.client("ec2", region_name=default_region)
        response = ec2.describe_regions(
            Filters=[{"Name": "opt-in-status", "Values": ["opt-in-not-required", "opted-in"]}]
        )
        enabled = {r["RegionName"] for r in response.get("Regions", [])}
    except ClientError as e:
        warning(f"Could not list regions: {e}")
        return [default_region]

    logs_regions = set(session.get_available_regions("logs"))
    regions = sorted(enabled & logs_regions if logs_regions else enabled)

    if default_region in regions:
        regions.remove(default_region)
    regions.insert(0, default_region)

    return regions
