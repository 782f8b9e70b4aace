# Copyright (c) 2025-2026 OptimNow. All Rights Reserved.
# Licensed under the Apache License, Version 2.0.
# See LICENSE file in the project root for full license information.

"""Region fan-out for orchestrating parallel resource enumeration.

This module provides the RegionFanout class that invokes one probe in every
requested region concurrently, isolates per-region failures and merges the
records into one inventory. A region that raises or times out contributes
zero records; the run always completes with the regions that succeeded.
"""

import asyncio
import logging
import time

from ..models.inventory import InventoryResult, RegionalInventory
from ..models.resource import ResourceRecord
from ..probes.base import ResourceProbe

logger = logging.getLogger(__name__)

DEFAULT_REGION_TIMEOUT_SECONDS = 60.0
DEFAULT_MAX_CONCURRENT_REGIONS = 16
DEFAULT_GLOBAL_TIMEOUT_SECONDS = 300.0


def unique_regions(regions: list[str]) -> list[str]:
    """Drop blank and repeated regions, keeping first-occurrence order."""
    seen: set[str] = set()
    result = []
    for region in regions:
        region = region.strip()
        if region and region not in seen:
            seen.add(region)
            result.append(region)
    return result


class RegionFanout:
    """
    Runs a probe across regions with bounded concurrency.

    Args:
        global_region: Region through which global probes are enumerated
        region_timeout_seconds: Time allowed to one region's enumeration
        global_timeout_seconds: Time allowed to the single pass of a global probe
        max_concurrent_regions: Maximum regions enumerated at once
    """

    def __init__(
        self,
        global_region: str = "us-east-1",
        region_timeout_seconds: float = DEFAULT_REGION_TIMEOUT_SECONDS,
        max_concurrent_regions: int = DEFAULT_MAX_CONCURRENT_REGIONS,
        global_timeout_seconds: float = DEFAULT_GLOBAL_TIMEOUT_SECONDS,
    ):
        self.global_region = global_region
        self.region_timeout_seconds = region_timeout_seconds
        self.global_timeout_seconds = global_timeout_seconds
        self.max_concurrent_regions = max_concurrent_regions

    async def run(self, regions: list[str], probe: ResourceProbe) -> list[ResourceRecord]:
        """
        Enumerate a probe in every region and return the merged records.

        Args:
            regions: Region codes; duplicates are collapsed
            probe: Family probe to invoke

        Returns:
            Records of the successful regions, region order then emission order
        """
        result = await self.collect(regions, probe)
        return result.records

    async def collect(self, regions: list[str], probe: ResourceProbe) -> InventoryResult:
        """
        Enumerate a probe in every region, keeping the per-region breakdown.

        Global probes are invoked once through ``global_region`` whatever
        regions are requested, under ``global_timeout_seconds``.

        Returns:
            InventoryResult with one RegionalInventory per distinct region
        """
        regions = [self.global_region] if probe.is_global else unique_regions(regions)
        logger.info(
            f"Enumerating {probe.family} in {len(regions)} regions "
            f"(max_concurrent={self.max_concurrent_regions})"
        )

        semaphore = asyncio.Semaphore(self.max_concurrent_regions)

        async def enumerate_with_semaphore(region: str) -> RegionalInventory:
            async with semaphore:
                return await self._enumerate_region(region, probe)

        results = await asyncio.gather(
            *(enumerate_with_semaphore(region) for region in regions),
            return_exceptions=True,
        )

        regional_results: list[RegionalInventory] = []
        for region, result in zip(regions, results):
            if isinstance(result, BaseException):
                logger.error(f"Region {region} enumeration failed with exception: {result}")
                regional_results.append(
                    RegionalInventory(region=region, success=False, error_message=str(result))
                )
            else:
                regional_results.append(result)

        inventory = InventoryResult(regional_results=regional_results)
        logger.info(
            f"{probe.family}: {len(inventory.records)} records, "
            f"successful_regions={len(inventory.successful_regions)}, "
            f"failed_regions={len(inventory.failed_regions)}"
        )
        return inventory

    async def _enumerate_region(self, region: str, probe: ResourceProbe) -> RegionalInventory:
        timeout = self.global_timeout_seconds if probe.is_global else self.region_timeout_seconds
        start_time = time.time()
        try:
            records = await asyncio.wait_for(probe.enumerate(region), timeout=timeout)
        except asyncio.TimeoutError:
            logger.warning(
                f"Region {region} {probe.family} enumeration timed out "
                f"after {timeout}s"
            )
            return RegionalInventory(
                region=region,
                success=False,
                error_message=f"Timed out after {timeout}s",
                duration_ms=int((time.time() - start_time) * 1000),
            )
        except Exception as e:
            logger.error(f"Region {region} {probe.family} enumeration failed: {e}")
            return RegionalInventory(
                region=region,
                success=False,
                error_message=str(e),
                duration_ms=int((time.time() - start_time) * 1000),
            )

        return RegionalInventory(
            region=region,
            success=True,
            records=records,
            duration_ms=int((time.time() - start_time) * 1000),
        )
