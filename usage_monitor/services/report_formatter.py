# Copyright (c) 2025-2026 OptimNow. All Rights Reserved.
# Licensed under the Apache License, Version 2.0.
# See LICENSE file in the project root for full license information.

"""Rendering of inventories as delimited tables and violation buckets as digests.

Both renderings are pure: they read records and layouts and return lines.
Column order, headers and digest fields are fixed per family by a
ReportLayout. Dates are rendered in one fixed UTC offset.
"""

import csv
import io
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable

from ..models.resource import ResourceRecord
from ..models.violations import ViolationBucket
from ..utils.time_utils import DIGEST_DATE_FORMAT, TABLE_DATE_FORMAT, format_date

RATE_DECIMALS = 5
MONTHLY_DECIMALS = 2


@dataclass(frozen=True)
class Column:
    """One table column or digest field.

    ``value`` returns the raw value; rendering is done by the formatter.
    ``decimals`` fixes the number of decimals of numeric values.
    """

    header: str
    value: Callable[[ResourceRecord], Any]
    decimals: int | None = None


@dataclass(frozen=True)
class ReportLayout:
    """Table columns, digest template and export naming of one family."""

    family: str
    title: str
    columns: tuple[Column, ...]
    digest_key: Callable[[ResourceRecord], str]
    digest_fields: tuple[Column, ...] = field(default_factory=tuple)
    export_prefix: str = ""

    @property
    def headers(self) -> list[str]:
        return [column.header for column in self.columns]


class ReportFormatter:
    """
    Renders records and violation buckets.

    Args:
        utc_offset_minutes: Fixed offset used for every rendered date
    """

    def __init__(self, utc_offset_minutes: int = 540):
        self.utc_offset_minutes = utc_offset_minutes

    def to_table(self, records: list[ResourceRecord], layout: ReportLayout) -> list[str]:
        """
        Render records as CSV lines.

        Returns:
            Header line followed by one line per record, in record order
        """
        lines = [self._csv_line(layout.headers)]
        for record in records:
            lines.append(self._csv_line([
                self.render(column.value(record), TABLE_DATE_FORMAT, column.decimals)
                for column in layout.columns
            ]))
        return lines

    def to_digest(self, bucket: ViolationBucket, layout: ReportLayout) -> list[str]:
        """
        Render a violation bucket as alert lines.

        Returns:
            The rule title followed by one line per violating record
        """
        lines = [bucket.rule.title]
        for record in bucket.records:
            fields = ", ".join(
                f"{column.header}: "
                f"{self.render(column.value(record), DIGEST_DATE_FORMAT, column.decimals)}"
                for column in layout.digest_fields
            )
            line = f"`{layout.digest_key(record)}`"
            if fields:
                line += f" ({fields})"
            lines.append(line)
        return lines

    def render(self, value: Any, date_format: str, decimals: int | None = None) -> str:
        """Render one cell value."""
        if value is None:
            return ""
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, datetime):
            return format_date(value, date_format, self.utc_offset_minutes)
        if isinstance(value, (list, tuple)):
            return ",".join(self.render(item, date_format, decimals) for item in value)
        if isinstance(value, (int, float)):
            if decimals is not None:
                return f"{value:.{decimals}f}"
            if isinstance(value, float) and value.is_integer():
                return str(int(value))
        return str(value)

    @staticmethod
    def _csv_line(cells: list[str]) -> str:
        buffer = io.StringIO()
        csv.writer(buffer, lineterminator="").writerow(cells)
        return buffer.getvalue()
