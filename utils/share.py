"""Share-link helpers for comparisons.

A comparison is identified in URLs by ``"<budget_id>:<unit_id>"`` with each
part percent-encoded, so ids containing ``:`` or ``/`` survive the round trip.
"""

from typing import Optional
from urllib.parse import quote, unquote

SEPARATOR = ":"


def encode_comparison(budget_id: str, unit_id: str) -> str:
    """Build the shareable comparison id for a budget item and unit.

    Examples:
        encode_comparison("defense", "f35") -> "defense:f35"
        encode_comparison("a:b", "c") -> "a%3Ab:c"
    """
    return f"{quote(budget_id, safe='')}{SEPARATOR}{quote(unit_id, safe='')}"


def parse_comparison_id(value: Optional[str]) -> Optional[tuple[str, str]]:
    """Split a comparison id into ``(budget_id, unit_id)``.

    Returns None when the value has no separator or either part is empty.
    """
    if not value:
        return None
    budget_part, sep, unit_part = value.partition(SEPARATOR)
    if not sep or not budget_part or not unit_part:
        return None
    budget_id = unquote(budget_part)
    unit_id = unquote(unit_part)
    if not budget_id or not unit_id:
        return None
    return budget_id, unit_id


def comparison_url(comparison_id: str, base_url: str) -> str:
    """Absolute URL of the comparison page for *comparison_id*."""
    return f"{base_url.rstrip('/')}/compare/{quote(comparison_id, safe=':%')}"


def budget_url(path: str, base_url: str) -> str:
    """Absolute URL for a budget drill-down *path* such as ``"defense/navy"``."""
    segments = [quote(seg, safe="") for seg in path.strip("/").split("/") if seg]
    return f"{base_url.rstrip('/')}/budget/{'/'.join(segments)}".rstrip("/")
