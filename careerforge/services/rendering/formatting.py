"""Date and text helpers shared by every export format."""
from datetime import date, datetime
from typing import Iterable, Optional, Union

DateLike = Union[date, datetime, None]

PRESENT_LABEL = "Present"
FIELD_SEPARATOR = " | "
ITEM_SEPARATOR = " • "
BULLET = "•"

MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def format_month_year(value: DateLike) -> str:
    """Return an en-US short month-year label such as ``"Jan 2022"``."""
    if value is None:
        return ""
    return f"{MONTH_ABBREVIATIONS[value.month - 1]} {value.year}"


def format_date_range(start: DateLike, end: DateLike, current: bool = False) -> str:
    """Format a start/end pair the way every resume section shows dates.

    ``current`` wins over any stored end date. An empty string means there is
    nothing to show; callers must not add separators around it.
    """
    start_label = format_month_year(start)
    end_label = PRESENT_LABEL if current else format_month_year(end)

    if start_label and end_label:
        return f"{start_label} - {end_label}"
    if start_label:
        return start_label
    return ""


def join_present(parts: Iterable[Optional[str]], separator: str = FIELD_SEPARATOR) -> str:
    """Join the non-empty parts; absent values never leave a dangling separator."""
    return separator.join(p for p in parts if p)


def labelled(label: str, value: Optional[str]) -> Optional[str]:
    return f"{label}: {value}" if value else None


def bullet(text: str) -> str:
    return f"{BULLET} {text}"


def rated_item(name: str, rating) -> str:
    # enums render by value ("Expert"), plain strings as-is
    return f"{name} ({getattr(rating, 'value', rating)})"
