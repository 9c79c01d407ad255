"""Ordering and row helpers for presenting a snapshot."""

from collections.abc import Sequence
from datetime import UTC, datetime
from typing import Any

from ..core.types import SortDirection, SortKey, SortSpec, Token

DEFAULT_SORT = SortSpec()

_MONETARY_KEYS = {
    SortKey.LAUNCH_FDV,
    SortKey.CURRENT_FDV,
    SortKey.LAUNCH_LIQUIDITY,
    SortKey.CURRENT_LIQUIDITY,
}


def _sort_value(token: Token, key: SortKey) -> Any:
    value = getattr(token, key.value)
    if key in _MONETARY_KEYS:
        # Missing values order below every number
        return (value is not None, value if value is not None else 0.0)
    if key == SortKey.PAIR_NAME:
        return value.casefold()
    return value


def sorted_rows(
    snapshot: Sequence[Token], sort_spec: SortSpec = DEFAULT_SORT
) -> list[Token]:
    """Return the snapshot ordered by sort_spec.

    The sort is stable in both directions, so tokens with equal values keep
    their snapshot order.
    """
    return sorted(
        snapshot,
        key=lambda t: _sort_value(t, sort_spec.key),
        reverse=sort_spec.direction == SortDirection.DESC,
    )


def format_usd(value: float | None) -> str:
    """Format a USD amount compactly, e.g. 1_234_567 -> "$1.2m"."""
    if value is None:
        return "-"
    sign = "-" if value < 0 else ""
    amount = abs(value)
    for threshold, suffix in ((1e12, "t"), (1e9, "b"), (1e6, "m"), (1e3, "k")):
        if amount >= threshold:
            return f"{sign}${amount / threshold:,.1f}{suffix}"
    return f"{sign}${amount:,.1f}"


_UNITS = (
    ("year", 365 * 24 * 3600),
    ("month", 30 * 24 * 3600),
    ("day", 24 * 3600),
    ("hour", 3600),
    ("minute", 60),
    ("second", 1),
)


def relative_time(moment: datetime, now: datetime | None = None) -> str:
    """Describe moment relative to now, e.g. "5 minutes ago"."""
    now = now or datetime.now(UTC)
    delta = (now - moment).total_seconds()
    seconds = abs(delta)

    for unit, size in _UNITS:
        if seconds >= size or unit == "second":
            count = round(seconds / size)
            break

    label = f"{count} {unit}{'' if count == 1 else 's'}"
    return f"{label} ago" if delta >= 0 else f"in {label}"


def describe_row(token: Token, now: datetime | None = None) -> dict[str, Any]:
    """Flatten a token into display-ready values."""
    return {
        "id": token.id,
        "name": token.pair_name,
        "launched": relative_time(token.created_at, now),
        "updated": relative_time(token.updated_at, now),
        "launch_fdv": format_usd(token.launch_fdv),
        "current_fdv": format_usd(token.current_fdv),
        "fdv_improved": token.fdv_improved,
        "launch_liquidity": format_usd(token.launch_liquidity),
        "current_liquidity": format_usd(token.current_liquidity),
        "liquidity_improved": token.liquidity_improved,
    }
