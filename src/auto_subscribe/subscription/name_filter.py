"""Log group name filtering by include/exclude prefix."""


def rejection_reason(
    name: str, include_prefix: str | None, exclude_prefix: str | None
) -> str | None:
    """
    Explain why a log group name is filtered out, or return None if it is accepted.

    An unset (None) or empty prefix places no constraint. The exclude prefix
    is checked first.
    """
    if exclude_prefix and name.startswith(exclude_prefix):
        return f"it matches the exclude prefix [{exclude_prefix}]"
    if include_prefix and not name.startswith(include_prefix):
        return f"it doesn't match the prefix [{include_prefix}]"
    return None


def should_process(name: str, include_prefix: str | None, exclude_prefix: str | None) -> bool:
    """Decide whether a log group should be subscribed."""
    return rejection_reason(name, include_prefix, exclude_prefix) is None
