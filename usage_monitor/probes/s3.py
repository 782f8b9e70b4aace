# Copyright (c) 2025-2026 OptimNow. All Rights Reserved.
# Licensed under the Apache License, Version 2.0.
# See LICENSE file in the project root for full license information.

"""S3 probe: buckets with their region, versioning, lifecycle rules and stored size.

Bucket listing is global, so this probe is enumerated once through the
default region. Each record carries the bucket's own region, and the size
metric is read from CloudWatch in that region.
"""

import asyncio
import logging
from datetime import timedelta

from ..clients.aws_client import AWSClient, ErrorKind, ProbeError
from ..models.enums import ResourceCategory
from ..models.resource import ResourceRecord
from .base import ResourceProbe, Section

logger = logging.getLogger(__name__)

# get_bucket_location reports us-east-1 as no constraint and eu-west-1 as "EU"
LEGACY_LOCATIONS = {None: "us-east-1", "": "us-east-1", "EU": "eu-west-1"}

SIZE_METRIC_PERIOD_SECONDS = 86400
# Daily storage metrics lag by up to two days
SIZE_METRIC_LOOKBACK_DAYS = 3


def lifecycle_action_summary(rule: dict) -> str:
    """Join the expiration, transition and multipart-abort actions a rule carries."""
    return "|".join(
        key
        for key in rule
        if key.endswith(("Expiration", "Transitions")) or key == "AbortIncompleteMultipartUpload"
    )


class BucketProbe(ResourceProbe):
    family = "s3"
    is_global = True

    def sections(self) -> list[tuple[str, Section]]:
        return [("buckets", self._buckets)]

    async def _buckets(self, client: AWSClient) -> list[ResourceRecord]:
        buckets = await client.paginate(
            "s3", "list_buckets", "Buckets", request_token="ContinuationToken"
        )
        return list(await asyncio.gather(*(self._bucket(client, b) for b in buckets)))

    async def _bucket(self, client: AWSClient, bucket: dict) -> ResourceRecord:
        name = bucket["Name"]
        region = await self.lookup(
            f"location of bucket {name}", self._location(client, name), client.region
        )
        billing, versioning, lifecycle_actions = await asyncio.gather(
            self.tag_resolver(client, "s3").resolve_billing(name),
            self.lookup(f"versioning of bucket {name}", self._versioning(client, name), False),
            self.lookup(f"lifecycle of bucket {name}", self._lifecycle_actions(client, name), []),
        )
        size = await self.lookup(
            f"size of bucket {name}",
            self._size_bytes(self.client_factory.get_client(region), name),
            None,
        )
        return ResourceRecord(
            category=ResourceCategory.BUCKET,
            identifier=name,
            region=region,
            created_at=bucket["CreationDate"],
            name=name,
            billing_tag=billing,
            size_or_capacity=size,
            details={"versioning": versioning, "lifecycle_rules": lifecycle_actions},
        )

    async def _location(self, client: AWSClient, name: str) -> str:
        response = await client.call("s3", "get_bucket_location", Bucket=name)
        constraint = response.get("LocationConstraint")
        return LEGACY_LOCATIONS.get(constraint, constraint)

    async def _versioning(self, client: AWSClient, name: str) -> bool:
        response = await client.call("s3", "get_bucket_versioning", Bucket=name)
        return response.get("Status") == "Enabled"

    async def _lifecycle_actions(self, client: AWSClient, name: str) -> list[str]:
        try:
            response = await client.call(
                "s3", "get_bucket_lifecycle_configuration", Bucket=name
            )
        except ProbeError as e:
            if e.kind == ErrorKind.NOT_FOUND:
                return []
            raise
        return [
            lifecycle_action_summary(rule)
            for rule in response.get("Rules", [])
            if rule.get("Status") == "Enabled"
        ]

    async def _size_bytes(self, client: AWSClient, name: str) -> float | None:
        end = self.clock()
        response = await client.call(
            "cloudwatch",
            "get_metric_statistics",
            Namespace="AWS/S3",
            MetricName="BucketSizeBytes",
            Dimensions=[
                {"Name": "BucketName", "Value": name},
                {"Name": "StorageType", "Value": "StandardStorage"},
            ],
            StartTime=end - timedelta(days=SIZE_METRIC_LOOKBACK_DAYS),
            EndTime=end,
            Period=SIZE_METRIC_PERIOD_SECONDS,
            Statistics=["Average"],
        )
        datapoints = sorted(response.get("Datapoints", []), key=lambda d: d["Timestamp"])
        if not datapoints:
            logger.debug(f"No size datapoint for bucket {name}")
            return None
        return datapoints[-1]["Average"]
