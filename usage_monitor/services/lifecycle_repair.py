# Copyright (c) 2025-2026 OptimNow. All Rights Reserved.
# Licensed under the Apache License, Version 2.0.
# See LICENSE file in the project root for full license information.

"""Lifecycle repair adding an abort rule for incomplete multipart uploads.

This is the only collaborator that writes to the monitored account. It runs
after enumeration has completed, one bucket at a time.
"""

import logging

from ..clients.aws_client import AWSClient, ErrorKind, ProbeError
from ..clients.regional_client_factory import RegionalClientFactory
from ..models.inventory import RepairOutcome

logger = logging.getLogger(__name__)

ABORT_MPU_RULE_ID = "abort-incomplete-multipart-upload"
DEFAULT_ABORT_DAYS = 7


def has_abort_rule(rules: list[dict]) -> bool:
    """Whether an enabled rule already aborts incomplete multipart uploads."""
    return any(
        rule.get("Status") == "Enabled" and "AbortIncompleteMultipartUpload" in rule
        for rule in rules
    )


def abort_rule(days: int = DEFAULT_ABORT_DAYS, rule_id: str = ABORT_MPU_RULE_ID) -> dict:
    return {
        "ID": rule_id,
        "Status": "Enabled",
        "Filter": {"Prefix": ""},
        "AbortIncompleteMultipartUpload": {"DaysAfterInitiation": days},
    }


def free_rule_id(rules: list[dict], base: str = ABORT_MPU_RULE_ID) -> str:
    """First of ``base``, ``base-2``, ``base-3``... not used by an existing rule."""
    taken = {rule.get("ID") for rule in rules}
    rule_id, suffix = base, 2
    while rule_id in taken:
        rule_id = f"{base}-{suffix}"
        suffix += 1
    return rule_id


class LifecycleRepairer:
    """
    Ensures buckets abort incomplete multipart uploads.

    Args:
        client_factory: Factory returning the client of each bucket's region
        abort_days: DaysAfterInitiation of the added rule
    """

    def __init__(self, client_factory: RegionalClientFactory, abort_days: int = DEFAULT_ABORT_DAYS):
        self.client_factory = client_factory
        self.abort_days = abort_days

    async def ensure_abort_incomplete_mpu(
        self, bucket: str, region: str | None = None
    ) -> RepairOutcome:
        """
        Add the abort rule to a bucket unless an enabled one exists.

        Existing rules and the transition size default are written back
        unchanged alongside the new rule.
        Failures are logged and returned in the outcome.

        Args:
            bucket: Bucket name
            region: Bucket region; None uses the default region
        """
        client = self.client_factory.get_client(region)
        try:
            configuration = await self._current_configuration(client, bucket)
            rules = list(configuration.get("Rules", []))
            if has_abort_rule(rules):
                logger.debug(f"Bucket {bucket} already aborts incomplete multipart uploads")
                return RepairOutcome(bucket=bucket, changed=False)

            rule_id = free_rule_id(rules)
            request = {
                "Bucket": bucket,
                "LifecycleConfiguration": {
                    "Rules": rules + [abort_rule(self.abort_days, rule_id)]
                },
            }
            if "TransitionDefaultMinimumObjectSize" in configuration:
                request["TransitionDefaultMinimumObjectSize"] = configuration[
                    "TransitionDefaultMinimumObjectSize"
                ]
            await client.call("s3", "put_bucket_lifecycle_configuration", **request)
        except ProbeError as e:
            logger.error(f"Lifecycle repair failed for bucket {bucket}: {e}")
            return RepairOutcome(bucket=bucket, changed=False, error_message=str(e))

        logger.info(f"Added {rule_id} rule to bucket {bucket}")
        return RepairOutcome(bucket=bucket, changed=True)

    async def repair_all(self, buckets: list[tuple[str, str | None]]) -> list[RepairOutcome]:
        """Repair (bucket, region) pairs one after another, in the given order."""
        outcomes = []
        for bucket, region in buckets:
            outcomes.append(await self.ensure_abort_incomplete_mpu(bucket, region))
        return outcomes

    @staticmethod
    async def _current_configuration(client: AWSClient, bucket: str) -> dict:
        try:
            response = await client.call("s3", "get_bucket_lifecycle_configuration", Bucket=bucket)
        except ProbeError as e:
            if e.kind == ErrorKind.NOT_FOUND:
                return {}
            raise
        return response
