"""
Age evaluation for swept resources.
"""

from datetime import datetime, timezone
from typing import Any

from dateutil import parser as date_parser

from .errors import TimestampParseError
from .models import ResourceRecord

SECONDS_IN_DAY = 3600 * 24


def effective_timestamp(record: ResourceRecord) -> Any:
    """
    Pick the timestamp a record's age is measured from.

    Some clouds never return created_at, so updated_at is used instead.

    Raises:
        TimestampParseError: If neither field is set
    """
    value = record.created_at or record.updated_at
    if not value:
        raise TimestampParseError(f"{record.rs_id} has neither created_at nor updated_at")
    return value


def parse_timestamp(value: Any) -> datetime:
    """
    Parse a timestamp into an aware UTC datetime.

    Accepts datetime objects, ISO-8601 strings and the management API's
    "2012/03/14 21:49:10 +0000" format. Naive values are taken as UTC.
    """
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = date_parser.parse(str(value))
        except (ValueError, OverflowError) as e:
            raise TimestampParseError(f"Unparseable timestamp {value!r}: {e}")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def age_seconds(record: ResourceRecord, now: datetime) -> int:
    """Whole seconds elapsed between the record's creation and `now`."""
    created = parse_timestamp(effective_timestamp(record))
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return int((now - created).total_seconds())


def days_to_seconds(days: int) -> int:
    return days * SECONDS_IN_DAY
