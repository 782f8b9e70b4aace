# Copyright (c) 2025-2026 OptimNow. All Rights Reserved.
# Licensed under the Apache License, Version 2.0.
# See LICENSE file in the project root for full license information.

"""RDS probe: available database instances."""

import asyncio

from ..clients.aws_client import AWSClient
from ..models.enums import ResourceCategory
from ..models.resource import ResourceRecord
from .base import ResourceProbe, Section


class DatabaseProbe(ResourceProbe):
    """RDS database instances; tags are looked up per instance ARN."""

    family = "rds"

    def sections(self) -> list[tuple[str, Section]]:
        return [("db instances", self._db_instances)]

    async def _db_instances(self, client: AWSClient) -> list[ResourceRecord]:
        instances = await client.paginate(
            "rds", "describe_db_instances", "DBInstances", request_token="Marker"
        )
        instances = [i for i in instances if i.get("DBInstanceStatus") == "available"]

        resolver = self.tag_resolver(client, "rds")
        billing_tags = await asyncio.gather(
            *(resolver.resolve_billing(i["DBInstanceArn"]) for i in instances)
        )

        return [
            ResourceRecord(
                category=ResourceCategory.DATABASE,
                identifier=instance["DBInstanceIdentifier"],
                region=client.region,
                created_at=instance["InstanceCreateTime"],
                name=instance["DBInstanceIdentifier"],
                billing_tag=billing,
                size_or_capacity=instance.get("AllocatedStorage"),
                type_label=instance.get("DBInstanceClass"),
                details={"engine": instance.get("Engine")},
            )
            for instance, billing in zip(instances, billing_tags)
        ]
