"""
Query-string construction for registry endpoints.
"""

from datetime import timedelta

from .base import MAX_QUERY_INDEX, QueryOptions


def format_value(value: object) -> str:
    """Serialize a parameter value the way the agent expects it."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def format_wait(wait: timedelta) -> str:
    """Render a wait duration as whole seconds, e.g. ``30s``."""
    seconds = int(wait.total_seconds())
    if seconds < 0:
        raise ValueError(f"wait must not be negative, got {wait}")
    return f"{seconds}s"


def effective_wait(wait: timedelta | None) -> timedelta | None:
    """
    The wait the agent will actually apply, in whole seconds.

    The agent reads ``wait=0s`` as "use the default", so a zero wait becomes
    None (sent without ``wait``) and a positive wait under one second is
    rounded up to one second.
    """
    if wait is None:
        return None
    if wait < timedelta(0):
        raise ValueError(f"wait must not be negative, got {wait}")
    seconds = int(wait.total_seconds())
    if seconds == 0 and wait > timedelta(0):
        seconds = 1
    return timedelta(seconds=seconds) if seconds else None


def build_params(
    options: QueryOptions | None = None, default_dc: str | None = None
) -> dict[str, str]:
    """
    Convert filter options into query parameters.

    Args:
        options: Endpoint filter options, or None for no filters
        default_dc: Client-wide datacenter, used when options.dc is unset

    Returns:
        Ordered mapping holding only the fields that are set
    """
    values = options.model_dump(by_alias=True, exclude_none=True) if options else {}

    params: dict[str, str] = {}
    dc = values.pop("dc", None)
    if dc is None:
        dc = default_dc
    if dc is not None:
        params["dc"] = dc

    for name, value in values.items():
        params[name] = format_value(value)
    return params


def blocking_params(
    params: dict[str, str], index: int, wait: timedelta | None = None
) -> dict[str, str]:
    """Return a copy of params with the blocking ``index`` and ``wait`` attached."""
    if isinstance(index, bool) or not isinstance(index, int):
        raise TypeError(f"index must be an int, got {type(index).__name__}")
    if not 0 <= index <= MAX_QUERY_INDEX:
        raise ValueError(f"index {index} is outside the unsigned 64-bit range")

    merged = dict(params)
    merged["index"] = str(index)
    wait = effective_wait(wait)
    if wait is not None:
        merged["wait"] = format_wait(wait)
    return merged
