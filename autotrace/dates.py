"""Timestamp parsing and formatting shared by the loader, CLI and web app."""

from datetime import date, datetime, timezone
from typing import Optional, Union

from dateutil import parser as date_parser


def parse_timestamp(value: Union[str, date, datetime]) -> datetime:
    """
    Parse an ISO-8601 date or timestamp into an aware UTC datetime.

    Plain dates become midnight UTC; naive timestamps are taken as UTC.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    else:
        parsed = date_parser.isoparse(str(value).strip())
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    """Format as ISO-8601 UTC with millisecond precision, e.g. 2025-01-15T00:00:00.000Z."""
    if value is None:
        return None
    utc = parse_timestamp(value)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def format_day(value: Optional[datetime]) -> str:
    """Date part only (YYYY-MM-DD) for tables and certificates."""
    if value is None:
        return "-"
    return parse_timestamp(value).date().isoformat()


def utc_now() -> datetime:
    """Current wall-clock time in UTC."""
    return datetime.now(timezone.utc)
