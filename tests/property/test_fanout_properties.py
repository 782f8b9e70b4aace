# Copyright (c) 2025-2026 OptimNow. All Rights Reserved.
# Licensed under the Apache License, Version 2.0.
# See LICENSE file in the project root for full license information.

"""
Property-based tests for the region fan-out.

Property 5: Partial Failure Isolation
*For any* split of the requested regions into failing and succeeding ones,
the merged inventory SHALL hold exactly the records of the succeeding
regions, in region order, and SHALL list every failing region as failed.

Property 6: Region Deduplication
*For any* list of regions with repeats, each distinct region SHALL be
enumerated exactly once.
"""

import asyncio
from datetime import datetime, timezone

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from usage_monitor.clients.aws_client import ErrorKind, ProbeError
from usage_monitor.clients.regional_client_factory import RegionalClientFactory
from usage_monitor.models.enums import ResourceCategory
from usage_monitor.models.resource import ResourceRecord
from usage_monitor.probes.base import ResourceProbe
from usage_monitor.services.region_fanout import RegionFanout, unique_regions

SAMPLE_REGION_NAMES = [
    "us-east-1", "us-east-2", "us-west-1", "us-west-2",
    "eu-west-1", "eu-west-2", "eu-central-1", "ap-south-1",
    "ap-northeast-1", "ap-southeast-2", "sa-east-1", "ca-central-1",
]


class ScriptedProbe(ResourceProbe):
    family = "scripted"

    def __init__(self, failing: set[str], per_region: int):
        super().__init__(RegionalClientFactory())
        self.failing = failing
        self.per_region = per_region
        self.calls: list[str] = []

    def sections(self):
        return []

    async def enumerate(self, region):
        self.calls.append(region)
        if region in self.failing:
            raise ProbeError(f"denied in {region}", ErrorKind.ACCESS_DENIED)
        return [
            ResourceRecord(
                category=ResourceCategory.VOLUME,
                identifier=f"vol-{region}-{i}",
                region=region,
                created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
            )
            for i in range(self.per_region)
        ]


@pytest.mark.slow
@settings(max_examples=50, deadline=None)
@given(
    regions=st.lists(st.sampled_from(SAMPLE_REGION_NAMES), min_size=1, max_size=12),
    failing=st.sets(st.sampled_from(SAMPLE_REGION_NAMES)),
    per_region=st.integers(min_value=0, max_value=3),
)
def test_failures_are_isolated_per_region(regions, failing, per_region):
    probe = ScriptedProbe(failing, per_region)

    result = asyncio.run(RegionFanout(max_concurrent_regions=4).collect(regions, probe))

    distinct = unique_regions(regions)
    succeeding = [r for r in distinct if r not in failing]
    assert [r.region for r in result.records] == [
        region for region in succeeding for _ in range(per_region)
    ]
    assert result.failed_regions == [r for r in distinct if r in failing]
    assert sorted(probe.calls) == sorted(distinct)


@settings(max_examples=50)
@given(regions=st.lists(st.sampled_from(SAMPLE_REGION_NAMES), max_size=20))
def test_unique_regions_keeps_first_occurrence(regions):
    result = unique_regions(regions)

    assert len(result) == len(set(regions))
    assert result == sorted(set(regions), key=regions.index)
