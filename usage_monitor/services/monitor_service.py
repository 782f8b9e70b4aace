# Copyright (c) 2025-2026 OptimNow. All Rights Reserved.
# Licensed under the Apache License, Version 2.0.
# See LICENSE file in the project root for full license information.

"""Monitor service orchestrating one family run.

A run collects the family's inventory across regions, evaluates its rules,
renders the table and digests, and hands them to the report sink. The
lifecycle repair, when requested, runs only after enumeration completed.
"""

import logging
from datetime import datetime, timezone
from typing import Callable

from ..clients.regional_client_factory import RegionalClientFactory
from ..clients.slack_client import SlackClient
from ..config import Settings
from ..models.event import MonitorEvent
from ..models.inventory import FamilyReport
from ..utils.time_utils import export_timestamp
from .families import FAMILIES, MonitorFamily, get_family
from .lifecycle_repair import LifecycleRepairer
from .policy_evaluator import PolicyEvaluator
from .region_fanout import RegionFanout
from .report_formatter import ReportFormatter
from .report_sink import ReportSink

logger = logging.getLogger(__name__)


class MonitorService:
    """
    Runs monitor families for one invocation.

    Args:
        settings: Settings read at the start of the invocation
        client_factory: Regional client factory; built from settings when omitted
        account_id: Account owning the inventory, when known
        slack_client: Alert channel client; built from settings when omitted
        clock: Returns the current time; defaults to UTC now
    """

    def __init__(
        self,
        settings: Settings,
        client_factory: RegionalClientFactory | None = None,
        account_id: str | None = None,
        slack_client: SlackClient | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self.settings = settings
        self.client_factory = client_factory or RegionalClientFactory(
            default_region=settings.aws_region,
            read_timeout=settings.api_read_timeout_seconds,
        )
        self.account_id = account_id
        self.clock = clock or (lambda: datetime.now(timezone.utc))

        if slack_client is None and settings.slack_webhook_url:
            slack_client = SlackClient(
                settings.slack_webhook_url, timeout_seconds=settings.slack_timeout_seconds
            )

        self.fanout = RegionFanout(
            global_region=self.client_factory.default_region,
            region_timeout_seconds=settings.region_timeout_seconds,
            max_concurrent_regions=settings.max_concurrent_regions,
            global_timeout_seconds=settings.global_probe_timeout_seconds,
        )
        self.evaluator = PolicyEvaluator(clock=self.clock)
        self.formatter = ReportFormatter(utc_offset_minutes=settings.report_utc_offset_minutes)
        self.sink = ReportSink(
            aws_client=self.client_factory.get_client(),
            bucket=settings.s3_bucket,
            slack_client=slack_client,
        )
        self.repairer = LifecycleRepairer(
            self.client_factory, abort_days=settings.mpu_abort_days
        )

    def resolve_regions(self, event: MonitorEvent) -> list[str]:
        return event.regions or self.settings.default_region_list

    async def run(self, family_name: str, event: MonitorEvent) -> FamilyReport:
        """
        Run one family.

        Args:
            family_name: Registered family name
            event: Invocation options

        Returns:
            FamilyReport with per-region results, violation counts,
            export key and repair outcomes

        Raises:
            KeyError: If the family is not registered
            ExportError: If the table export fails
            AlertPostError: If an alert post fails
        """
        family = get_family(family_name)
        probe = family.probe_class(
            self.client_factory,
            billing_tag_key=self.settings.billing_tag_key,
            name_tag_key=self.settings.name_tag_key,
            account_id=self.account_id,
            clock=self.clock,
        )

        inventory = await self.fanout.collect(self.resolve_regions(event), probe)
        records = inventory.records

        buckets = self.evaluator.evaluate(records, family.rules(self.settings))

        table = self.formatter.to_table(records, family.layout)
        logger.info("\n".join(table))

        export_key = None
        if event.write_to_s3:
            export_key = await self.sink.export(
                family.layout, table, export_timestamp(self.clock())
            )

        alerts_posted = 0
        for bucket in buckets.values():
            if not len(bucket):
                continue
            digest = self.formatter.to_digest(bucket, family.layout)
            logger.info("\n".join(digest))
            if event.post_to_slack and await self.sink.post(digest):
                alerts_posted += 1

        repairs = []
        if event.put_mpu_rules and family.supports_lifecycle_repair:
            repairs = await self.repairer.repair_all(
                [(record.identifier, record.region) for record in records]
            )

        return FamilyReport(
            family=family.name,
            regions=inventory.regional_results,
            total_records=len(records),
            failed_regions=inventory.failed_regions,
            violation_counts={rule_id: len(bucket) for rule_id, bucket in buckets.items()},
            export_key=export_key,
            alerts_posted=alerts_posted,
            repairs=repairs,
        )

    async def run_all(self, event: MonitorEvent) -> list[FamilyReport]:
        """Run the families named by the event (all registered ones by default), in order."""
        names = event.families or list(FAMILIES)
        families: list[MonitorFamily] = [get_family(name) for name in names]
        reports = []
        for family in families:
            reports.append(await self.run(family.name, event))
        return reports
