# Copyright (c) 2025-2026 OptimNow. All Rights Reserved.
# Licensed under the Apache License, Version 2.0.
# See LICENSE file in the project root for full license information.

"""ECS probe: running tasks of every cluster."""

import asyncio

from ..clients.aws_client import AWSClient
from ..models.enums import ResourceCategory
from ..models.resource import ResourceRecord
from ..utils.pricing import fargate_hourly_rate
from ..utils.resource_utils import arn_resource_name
from .base import ResourceProbe, Section

# describe_tasks accepts at most 100 task ARNs per call
DESCRIBE_TASKS_BATCH = 100


def _as_float(value: str | None) -> float | None:
    try:
        return float(value) if value is not None else None
    except ValueError:
        return None


class TaskProbe(ResourceProbe):
    """
    Running ECS tasks.

    Clusters are listed, then the running tasks of each cluster are listed
    and described in batches. A cluster whose listing fails is skipped.
    Fargate tasks are priced from their vCPU and memory reservation.
    """

    family = "ecs"

    def sections(self) -> list[tuple[str, Section]]:
        return [("tasks", self._tasks)]

    async def _tasks(self, client: AWSClient) -> list[ResourceRecord]:
        cluster_arns = await client.paginate(
            "ecs", "list_clusters", "clusterArns", request_token="nextToken"
        )
        per_cluster = await asyncio.gather(*(
            self.lookup(
                f"tasks of cluster {arn}", self._cluster_tasks(client, arn), []
            )
            for arn in cluster_arns
        ))
        return [record for records in per_cluster for record in records]

    async def _cluster_tasks(self, client: AWSClient, cluster_arn: str) -> list[ResourceRecord]:
        task_arns = await client.paginate(
            "ecs",
            "list_tasks",
            "taskArns",
            request_token="nextToken",
            cluster=cluster_arn,
            desiredStatus="RUNNING",
        )
        tasks = []
        for start in range(0, len(task_arns), DESCRIBE_TASKS_BATCH):
            response = await client.call(
                "ecs",
                "describe_tasks",
                cluster=cluster_arn,
                tasks=task_arns[start:start + DESCRIBE_TASKS_BATCH],
            )
            tasks.extend(response.get("tasks", []))

        resolver = self.tag_resolver(client, "ecs")
        billing_tags = await asyncio.gather(
            *(resolver.resolve_billing(task["taskArn"]) for task in tasks)
        )

        cluster_name = arn_resource_name(cluster_arn)
        records = []
        for task, billing in zip(tasks, billing_tags):
            launch_type = task.get("launchType")
            cpu = _as_float(task.get("cpu"))
            memory = _as_float(task.get("memory"))
            rate = None
            if launch_type == "FARGATE" and cpu is not None and memory is not None:
                rate = fargate_hourly_rate(cpu, memory)
            records.append(ResourceRecord(
                category=ResourceCategory.TASK,
                identifier=task["taskArn"],
                region=client.region,
                created_at=task.get("startedAt") or task["createdAt"],
                # task definition "family:revision"
                name=arn_resource_name(task.get("taskDefinitionArn", "")) or None,
                billing_tag=billing,
                type_label=launch_type,
                cost_rate_per_hour=rate,
                related_identifiers=[cluster_arn],
                related_names=[cluster_name],
                details={"cluster": cluster_name, "cpu": cpu, "memory": memory},
            ))
        return records
