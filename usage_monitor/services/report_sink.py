# Copyright (c) 2025-2026 OptimNow. All Rights Reserved.
# Licensed under the Apache License, Version 2.0.
# See LICENSE file in the project root for full license information.

"""Durable export of inventory tables and delivery of alert digests."""

import logging

from ..clients.aws_client import AWSClient, ProbeError
from ..clients.slack_client import SlackClient, SlackPostError
from .report_formatter import ReportLayout

logger = logging.getLogger(__name__)


class ExportError(Exception):
    """Raised when the inventory table cannot be written to the bucket."""

    pass


class AlertPostError(Exception):
    """Raised when an alert digest cannot be posted."""

    pass


def export_key(layout: ReportLayout, timestamp: str) -> str:
    """Object key ``<prefix>/<title>_<timestamp>.csv`` of one export."""
    name = f"{layout.title}_{timestamp}.csv"
    prefix = layout.export_prefix.strip("/")
    return f"{prefix}/{name}" if prefix else name


class ReportSink:
    """
    Writes tables to S3 and posts digests to Slack.

    Either destination may be unconfigured; the matching operation then
    logs a warning and does nothing.

    Args:
        aws_client: Client used for the export put
        bucket: Export bucket, or None when exports are not configured
        slack_client: Alert channel client, or None when alerts are not configured
    """

    def __init__(
        self,
        aws_client: AWSClient,
        bucket: str | None = None,
        slack_client: SlackClient | None = None,
    ):
        self.aws_client = aws_client
        self.bucket = bucket
        self.slack_client = slack_client

    async def export(self, layout: ReportLayout, lines: list[str], timestamp: str) -> str | None:
        """
        Write a rendered table as one CSV object.

        Args:
            layout: Layout of the family, giving the export title and prefix
            lines: Rendered table lines
            timestamp: Export timestamp (YYYYMMDDHHmmss)

        Returns:
            Object key written, or None when no bucket is configured

        Raises:
            ExportError: If the put fails
        """
        if not self.bucket:
            logger.warning(f"No export bucket configured; skipping {layout.family} export")
            return None

        key = export_key(layout, timestamp)
        try:
            await self.aws_client.call(
                "s3",
                "put_object",
                Bucket=self.bucket,
                Key=key,
                Body="\n".join(lines).encode("utf-8"),
                ContentType="text/csv",
            )
        except ProbeError as e:
            raise ExportError(f"Failed to export s3://{self.bucket}/{key}: {e}") from e

        logger.info(f"Exported {len(lines) - 1} rows to s3://{self.bucket}/{key}")
        return key

    async def post(self, lines: list[str]) -> bool:
        """
        Post a digest as one message.

        Returns:
            True when posted, False when no alert channel is configured

        Raises:
            AlertPostError: If the post fails or is rejected
        """
        if self.slack_client is None:
            logger.warning("No Slack webhook configured; skipping alert post")
            return False

        try:
            await self.slack_client.post_text_async("\n".join(lines))
        except SlackPostError as e:
            raise AlertPostError(str(e)) from e
        return True
