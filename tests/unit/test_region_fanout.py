# Copyright (c) 2025-2026 OptimNow. All Rights Reserved.
# Licensed under the Apache License, Version 2.0.
# See LICENSE file in the project root for full license information.

"""Unit tests for RegionFanout.

Tests the cross-region orchestration including:
- Region deduplication and ordering
- Partial failures and per-region timeouts
- Global probes enumerated once
- Bounded concurrency
"""

import asyncio

import pytest

from usage_monitor.clients.aws_client import ErrorKind, ProbeError
from usage_monitor.probes.base import ResourceProbe
from usage_monitor.services.region_fanout import RegionFanout, unique_regions


class StubProbe(ResourceProbe):
    """Probe returning canned records per region, or raising."""

    family = "stub"

    def __init__(self, client_factory, per_region, delays=None):
        super().__init__(client_factory)
        self.per_region = per_region
        self.delays = delays or {}
        self.calls: list[str] = []
        self.active = 0
        self.max_active = 0

    def sections(self):
        return []

    async def enumerate(self, region):
        self.calls.append(region)
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            await asyncio.sleep(self.delays.get(region, 0))
            outcome = self.per_region.get(region, [])
            if isinstance(outcome, BaseException):
                raise outcome
            return outcome
        finally:
            self.active -= 1


class GlobalStubProbe(StubProbe):
    family = "global-stub"
    is_global = True


class TestUniqueRegions:
    def test_drops_duplicates_and_blanks_keeping_order(self):
        assert unique_regions(["eu-west-1", " us-east-1", "", "eu-west-1"]) == [
            "eu-west-1",
            "us-east-1",
        ]


class TestRegionFanout:
    @pytest.mark.asyncio
    async def test_records_merged_in_region_order(self, client_factory, make_record):
        a = make_record("vol-a", region="us-east-1")
        b = make_record("vol-b", region="eu-west-1")
        c = make_record("vol-c", region="eu-west-1")
        probe = StubProbe(
            client_factory,
            {"us-east-1": [a], "eu-west-1": [b, c]},
            delays={"us-east-1": 0.02},
        )

        records = await RegionFanout().run(["us-east-1", "eu-west-1"], probe)

        assert [r.identifier for r in records] == ["vol-a", "vol-b", "vol-c"]

    @pytest.mark.asyncio
    async def test_repeated_region_enumerated_once(self, client_factory, make_record):
        probe = StubProbe(client_factory, {"us-east-1": [make_record("vol-a")]})

        records = await RegionFanout().run(["us-east-1", "us-east-1"], probe)

        assert probe.calls == ["us-east-1"]
        assert len(records) == 1

    @pytest.mark.asyncio
    async def test_failed_region_contributes_nothing(self, client_factory, make_record):
        probe = StubProbe(
            client_factory,
            {
                "us-east-1": [make_record("vol-a")],
                "eu-west-1": ProbeError("denied", ErrorKind.ACCESS_DENIED),
                "ap-northeast-1": RuntimeError("boom"),
            },
        )

        result = await RegionFanout().collect(
            ["us-east-1", "eu-west-1", "ap-northeast-1"], probe
        )

        assert [r.identifier for r in result.records] == ["vol-a"]
        assert result.successful_regions == ["us-east-1"]
        assert result.failed_regions == ["eu-west-1", "ap-northeast-1"]
        failed = result.regional_results[2]
        assert failed.success is False
        assert failed.error_message == "boom"
        assert failed.records == []

    @pytest.mark.asyncio
    async def test_slow_region_times_out(self, client_factory, make_record):
        probe = StubProbe(
            client_factory,
            {"us-east-1": [make_record("vol-a")], "sa-east-1": [make_record("vol-b")]},
            delays={"sa-east-1": 1.0},
        )

        result = await RegionFanout(region_timeout_seconds=0.05).collect(
            ["us-east-1", "sa-east-1"], probe
        )

        assert [r.identifier for r in result.records] == ["vol-a"]
        assert result.failed_regions == ["sa-east-1"]
        assert "Timed out" in result.regional_results[1].error_message

    @pytest.mark.asyncio
    async def test_global_probe_runs_once_through_global_region(self, client_factory, make_record):
        probe = GlobalStubProbe(
            client_factory, {"us-east-1": [make_record("logs", region="eu-west-1")]}
        )

        result = await RegionFanout(global_region="us-east-1").collect(
            ["eu-west-1", "ap-south-1", "us-west-2"], probe
        )

        assert probe.calls == ["us-east-1"]
        assert [r.region for r in result.records] == ["eu-west-1"]

    @pytest.mark.asyncio
    async def test_global_probe_uses_its_own_timeout(self, client_factory, make_record):
        probe = GlobalStubProbe(
            client_factory,
            {"us-east-1": [make_record("logs")]},
            delays={"us-east-1": 0.1},
        )
        fanout = RegionFanout(region_timeout_seconds=0.01, global_timeout_seconds=5.0)

        result = await fanout.collect(["us-east-1"], probe)

        assert [r.identifier for r in result.records] == ["logs"]

    @pytest.mark.asyncio
    async def test_global_probe_times_out(self, client_factory, make_record):
        probe = GlobalStubProbe(
            client_factory, {"us-east-1": [make_record("logs")]}, delays={"us-east-1": 1.0}
        )
        fanout = RegionFanout(region_timeout_seconds=5.0, global_timeout_seconds=0.05)

        result = await fanout.collect(["us-east-1"], probe)

        assert result.records == []
        assert result.regional_results[0].error_message == "Timed out after 0.05s"

    @pytest.mark.asyncio
    async def test_concurrency_is_bounded(self, client_factory):
        regions = [f"region-{i}" for i in range(6)]
        probe = StubProbe(client_factory, {}, delays={r: 0.01 for r in regions})

        result = await RegionFanout(max_concurrent_regions=2).collect(regions, probe)

        assert probe.max_active <= 2
        assert result.successful_regions == regions

    @pytest.mark.asyncio
    async def test_duplicate_records_kept_once(self, client_factory, make_record):
        record = make_record("vol-a", region="us-east-1")
        probe = StubProbe(client_factory, {"us-east-1": [record, record]})

        records = await RegionFanout().run(["us-east-1"], probe)

        assert len(records) == 1

    @pytest.mark.asyncio
    async def test_no_regions_gives_empty_inventory(self, client_factory):
        probe = StubProbe(client_factory, {})

        result = await RegionFanout().collect([], probe)

        assert result.records == []
        assert result.regional_results == []
