# Copyright (c) 2025-2026 OptimNow. All Rights Reserved.
# Licensed under the Apache License, Version 2.0.
# See LICENSE file in the project root for full license information.

"""Cross-region inventory data models.

This module contains the per-region enumeration result, the merged
inventory of one fan-out, and the per-family report echoed back to the
caller of a monitor run.
"""

import logging
from datetime import datetime, timezone

from pydantic import BaseModel, Field

from .resource import ResourceRecord

logger = logging.getLogger(__name__)


class RegionalInventory(BaseModel):
    """Records enumerated in a single region.

    A failed region carries no records and an error message. Zero records
    with ``success=True`` is a normal, empty region.
    """

    region: str = Field(..., description="AWS region code")
    success: bool = Field(..., description="Whether the enumeration completed")
    records: list[ResourceRecord] = Field(
        default_factory=list, description="Records in probe emission order"
    )
    error_message: str | None = Field(default=None, description="Error if the region failed")
    duration_ms: int = Field(default=0, ge=0, description="Enumeration time in milliseconds")


class InventoryResult(BaseModel):
    """Merged inventory from one fan-out across regions."""

    regional_results: list[RegionalInventory] = Field(default_factory=list)
    collected_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the fan-out completed",
    )

    @property
    def successful_regions(self) -> list[str]:
        return [r.region for r in self.regional_results if r.success]

    @property
    def failed_regions(self) -> list[str]:
        return [r.region for r in self.regional_results if not r.success]

    @property
    def records(self) -> list[ResourceRecord]:
        """Flattened records, region by region, first occurrence of each key kept."""
        merged: list[ResourceRecord] = []
        seen: set[tuple[str, str, str]] = set()
        for result in self.regional_results:
            for record in result.records:
                if record.record_key in seen:
                    logger.debug(f"Dropping duplicate record {record.record_key}")
                    continue
                seen.add(record.record_key)
                merged.append(record)
        return merged


class RepairOutcome(BaseModel):
    """Result of a lifecycle repair attempt on one bucket."""

    bucket: str = Field(..., description="Bucket name")
    changed: bool = Field(False, description="Whether a rule was added")
    error_message: str | None = Field(None, description="Error if the repair failed")


class FamilyReport(BaseModel):
    """Outcome of one monitor family run, returned to the orchestrator."""

    family: str = Field(..., description="Monitor family name")
    regions: list[RegionalInventory] = Field(default_factory=list)
    total_records: int = Field(0, ge=0)
    failed_regions: list[str] = Field(default_factory=list)
    violation_counts: dict[str, int] = Field(
        default_factory=dict, description="Number of violations per rule id"
    )
    export_key: str | None = Field(None, description="Object key of the durable export")
    alerts_posted: int = Field(0, ge=0, description="Number of alert posts sent")
    repairs: list[RepairOutcome] = Field(default_factory=list)
