#!/usr/bin/env python3
"""
CloudWatch Logs Auto-Subscribe - operator tool

This interactive tool runs the same reconciliation as the existing_log_groups
Lambda from a workstation: it scans the log groups of a region, previews which
ones would be subscribed or updated, and applies the changes after
confirmation.

Usage:
    uv run auto-subscribe

Reads PREFIX, EXCLUDE_PREFIX, DESTINATION_ARN, FILTER_NAME, FILTER_PATTERN and
ROLE_ARN from the environment and prompts for the destination and role when
they are missing. Designed to run in AWS CloudShell with pre-configured
credentials.
"""

import os
import sys
from collections.abc import Callable, Mapping

import boto3
import questionary
from botocore.exceptions import ClientError, NoCredentialsError
from questionary import Choice
from rich import box
from rich.markup import escape
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from .subscription import (
    Action,
    ConfigError,
    LogsApi,
    LogsApiError,
    PlannedAction,
    ReconcileReport,
    Settings,
    build_engine,
)
from .utils.arn import is_lambda_function_arn, validate_destination_arn, validate_role_arn
from .utils.console import bold, cancel, console, dim, error, success, warning
from .utils.regions import get_default_region, get_logs_regions

# Prompt callback: (message, validate) -> answer, or None when cancelled
Ask = Callable[[str, Callable[[str], bool | str]], str | None]


def _ask_text(message: str, validate: Callable[[str], bool | str]) -> str | None:
    return questionary.text(message, validate=validate).ask()


def collect_settings(environ: Mapping[str, str], ask: Ask = _ask_text) -> Settings | None:
    """
    Build Settings from the environment, prompting for what is missing.

    Prompts for DESTINATION_ARN when it is unset or invalid, and for ROLE_ARN
    when the destination is not a Lambda function and no role is configured.
    Returns None if a prompt is cancelled.
    """
    values = dict(environ)

    if not validate_destination_arn(values.get("DESTINATION_ARN")):
        destination = ask(
            "Destination ARN (Lambda function, Kinesis stream or Firehose):",
            lambda x: validate_destination_arn(x) or "Enter a valid destination ARN",
        )
        if not destination:
            return None
        values["DESTINATION_ARN"] = destination.strip()

    if not is_lambda_function_arn(values["DESTINATION_ARN"]) and not values.get("ROLE_ARN"):
        role = ask(
            "Delivery role ARN (CloudWatch Logs assumes it to write to the stream):",
            lambda x: validate_role_arn(x) or "Enter a valid IAM role ARN",
        )
        if not role:
            return None
        values["ROLE_ARN"] = role.strip()

    return Settings.from_env(values)


def display_settings(settings: Settings, region: str) -> None:
    """Show the effective configuration in a panel."""
    lines = [
        f"Region:         {region}",
        f"Destination:    {settings.destination_arn} ({settings.destination_mode.value})",
        f"Filter name:    {settings.filter_name}",
        f"Filter pattern: {settings.filter_pattern or '(match all)'}",
        f"Prefix:         {settings.include_prefix or '(any)'}",
        f"Exclude prefix: {settings.exclude_prefix or '(none)'}",
    ]
    if settings.delivery_role_arn:
        lines.append(f"Role:           {settings.delivery_role_arn}")

    console.print(Panel(escape("\n".join(lines)), title="Configuration", border_style="cyan"))


def _status_label(planned: PlannedAction) -> str:
    if planned.action is Action.SUBSCRIBED:
        return "[yellow]Not subscribed[/yellow]"
    if planned.action is Action.UPDATED:
        return "[yellow]Stale destination[/yellow]"
    if planned.action is Action.FAILED:
        return "[red]Unreadable[/red]"
    return "[green]Subscribed[/green]"


def build_plan_table(planned: list[PlannedAction]) -> Table:
    """Build a table of log groups and their subscription status."""
    pending = sum(1 for p in planned if p.needs_subscribe)

    title = f"Found {len(planned)} Log Group(s)"
    if pending > 0:
        title += f" ({pending} to subscribe)"

    table = Table(title=title, box=box.ROUNDED, show_lines=False)
    table.add_column("Log Group", style="cyan")
    table.add_column("Current Destination", style="magenta", max_width=60, overflow="ellipsis")
    table.add_column("Status", no_wrap=True)

    for p in planned:
        current = p.current_destination or p.error or "-"
        table.add_row(escape(p.log_group_name), escape(current), _status_label(p))

    return table


def summarize_report(report: ReconcileReport) -> Panel:
    """Build the closing summary panel for an applied plan."""
    subscribed = report.count(Action.SUBSCRIBED)
    updated = report.count(Action.UPDATED)
    failed = report.failures
    granted = sum(1 for r in report.results if r.permission_granted)

    body = f"Subscribed {subscribed} new and updated {updated} stale log group(s)."
    if granted:
        body += f"\nGranted CloudWatch Logs invoke permission {granted} time(s)."

    if not failed:
        return Panel(body, title="Reconciliation Complete", border_style="green")

    body += f"\n\n{len(failed)} log group(s) failed:\n"
    body += "\n".join(escape(f"  - {r.log_group_name}: {r.error}") for r in failed)
    return Panel(body, title="Reconciliation Partially Complete", border_style="yellow")


def _select_region() -> str | None:
    default_region = get_default_region()

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        progress.add_task("Fetching enabled regions...", total=None)
        regions = get_logs_regions(default_region)

    region_choices: list[Choice] = []
    for r in regions:
        if r == default_region:
            region_choices.append(Choice(title=f"{r} (current)", value=r))
        else:
            region_choices.append(Choice(title=r, value=r))

    return questionary.select("Select AWS region to reconcile:", choices=region_choices).ask()


def main() -> None:
    """Main entry point for the auto-subscribe tool."""
    console.print(
        Panel.fit(
            "[bold blue]CloudWatch Logs Auto-Subscribe[/bold blue]\n"
            "[dim]Log Group Subscription Reconciler[/dim]",
            border_style="blue",
        )
    )
    console.print()

    # Check AWS credentials
    try:
        sts = boto3.client("sts")
        identity = sts.get_caller_identity()
        success(f"AWS Account: {identity['Account']}")
        success(f"Caller ARN: {identity['Arn']}")
    except NoCredentialsError:
        error(
            "Error: No AWS credentials found.\n"
            "Please configure AWS credentials or run this tool in AWS CloudShell."
        )
        sys.exit(1)
    except ClientError as e:
        error(f"Error verifying AWS credentials: {e}")
        sys.exit(1)

    console.print()

    region = _select_region()
    if not region:
        cancel("Operation cancelled.")
        sys.exit(0)

    try:
        settings = collect_settings(os.environ)
    except ConfigError as e:
        error(f"Invalid configuration: {e}")
        sys.exit(1)

    if settings is None:
        cancel("Operation cancelled.")
        sys.exit(0)

    console.print()
    display_settings(settings, region)
    console.print()

    session = boto3.Session(region_name=region)
    reconciler, _ = build_engine(settings, LogsApi.from_session(session, region))

    # Dry run: read every matching log group's current subscription
    bold(f"Scanning log groups in {region}...")
    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        ) as progress:
            task = progress.add_task("Reading subscription filters...", total=None)
            planned: list[PlannedAction] = []
            for p in reconciler.plan():
                planned.append(p)
                progress.update(
                    task, description=f"Reading subscription filters ({len(planned)})..."
                )
    except LogsApiError as e:
        error(f"Could not list log groups: {e}")
        sys.exit(1)

    console.print()

    if not planned:
        console.print(
            Panel(
                "No log groups match the configured prefixes in this region.",
                title="No Log Groups Found",
                border_style="yellow",
            )
        )
        sys.exit(0)

    console.print(build_plan_table(planned))
    console.print()

    unreadable = [p for p in planned if p.action is Action.FAILED]
    if unreadable:
        warning(f"Could not read subscription filters of {len(unreadable)} log group(s).")

    pending = [p for p in planned if p.needs_subscribe]
    if not pending:
        success("All matching log groups are already subscribed. Nothing to do.")
        sys.exit(0)

    dim(
        f"{sum(1 for p in pending if p.action is Action.SUBSCRIBED)} log group(s) will be "
        f"subscribed and {sum(1 for p in pending if p.action is Action.UPDATED)} updated "
        f"to [{settings.destination_arn}]."
    )

    execute = questionary.confirm(
        f"Subscribe {len(pending)} log group(s)?",
        default=False,
    ).ask()

    if not execute:
        console.print()
        warning("Reconciliation cancelled. No subscription filters were changed.")
        sys.exit(0)

    console.print()

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        progress.add_task("Subscribing log groups...", total=None)
        report = reconciler.apply(pending)

    console.print()
    console.print(summarize_report(report))

    if report.failures:
        sys.exit(1)


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        cancel("\nOperation cancelled by user.")
        sys.exit(130)
    except Exception as e:
        error(f"\nUnexpected error: {e}")
        sys.exit(1)
