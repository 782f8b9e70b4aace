# Copyright (c) 2025-2026 OptimNow. All Rights Reserved.
# Licensed under the Apache License, Version 2.0.
# See LICENSE file in the project root for full license information.

"""Calendar age and fixed-offset date formatting."""

from datetime import datetime, timedelta, timezone

from dateutil.relativedelta import relativedelta

from ..models.enums import AgeUnit

TABLE_DATE_FORMAT = "%Y/%m/%d"
DIGEST_DATE_FORMAT = "%Y-%m-%d"
EXPORT_TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"


def whole_units_between(start: datetime, end: datetime, unit: AgeUnit) -> int:
    """
    Count the whole calendar units elapsed from start to end.

    Years use the calendar difference (2021-03-01 -> 2023-02-28 is 1 year);
    days count whole 24-hour periods. Negative spans count as 0.
    """
    if end <= start:
        return 0
    if unit == AgeUnit.YEARS:
        return relativedelta(end, start).years
    return (end - start).days


def fixed_offset(minutes: int) -> timezone:
    return timezone(timedelta(minutes=minutes))


def format_date(value: datetime | None, pattern: str, offset_minutes: int) -> str:
    """Render a timestamp in a fixed UTC offset. None renders empty."""
    if value is None:
        return ""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(fixed_offset(offset_minutes)).strftime(pattern)


def export_timestamp(now: datetime | None = None) -> str:
    now = now or datetime.now(timezone.utc)
    return now.strftime(EXPORT_TIMESTAMP_FORMAT)
