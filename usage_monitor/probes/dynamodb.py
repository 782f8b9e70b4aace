# Copyright (c) 2025-2026 OptimNow. All Rights Reserved.
# Licensed under the Apache License, Version 2.0.
# See LICENSE file in the project root for full license information.

"""DynamoDB probe: tables with their provisioned capacity."""

import asyncio
import logging

from ..clients.aws_client import AWSClient, ProbeError
from ..models.enums import ResourceCategory
from ..models.resource import ResourceRecord
from .base import ResourceProbe, Section

logger = logging.getLogger(__name__)


class TableProbe(ResourceProbe):
    """
    DynamoDB tables.

    Table names are listed first, then each table is described on its own.
    A table whose describe call fails is skipped; the others are kept.
    """

    family = "dynamodb"

    def sections(self) -> list[tuple[str, Section]]:
        return [("tables", self._tables)]

    async def _tables(self, client: AWSClient) -> list[ResourceRecord]:
        names = await client.paginate(
            "dynamodb",
            "list_tables",
            "TableNames",
            request_token="ExclusiveStartTableName",
            response_token="LastEvaluatedTableName",
        )
        records = await asyncio.gather(*(self._describe(client, name) for name in names))
        return [record for record in records if record is not None]

    async def _describe(self, client: AWSClient, table_name: str) -> ResourceRecord | None:
        try:
            response = await client.call("dynamodb", "describe_table", TableName=table_name)
        except ProbeError as e:
            logger.warning(f"Skipping table {table_name} in {client.region}: {e}")
            return None

        table = response["Table"]
        if table.get("TableStatus") == "DELETING":
            return None

        billing = await self.tag_resolver(client, "dynamodb").resolve_billing(table["TableArn"])
        throughput = table.get("ProvisionedThroughput", {})
        return ResourceRecord(
            category=ResourceCategory.TABLE,
            identifier=table["TableName"],
            region=client.region,
            created_at=table["CreationDateTime"],
            name=table["TableName"],
            billing_tag=billing,
            size_or_capacity=table.get("TableSizeBytes"),
            details={
                "rcu": throughput.get("ReadCapacityUnits", 0),
                "wcu": throughput.get("WriteCapacityUnits", 0),
            },
        )
