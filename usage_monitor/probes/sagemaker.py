# Copyright (c) 2025-2026 OptimNow. All Rights Reserved.
# Licensed under the Apache License, Version 2.0.
# See LICENSE file in the project root for full license information.

"""SageMaker probe: in-service notebooks, in-progress training jobs, in-service endpoints."""

import asyncio

from ..clients.aws_client import AWSClient
from ..models.enums import ResourceCategory
from ..models.resource import ResourceRecord
from .base import ResourceProbe, Section


class MachineLearningProbe(ResourceProbe):
    family = "sagemaker"

    def sections(self) -> list[tuple[str, Section]]:
        return [
            ("notebook instances", self._notebooks),
            ("training jobs", self._training_jobs),
            ("endpoints", self._endpoints),
        ]

    async def _records(
        self,
        client: AWSClient,
        category: ResourceCategory,
        items: list[dict],
        arn_key: str,
        name_key: str,
        type_key: str | None = None,
    ) -> list[ResourceRecord]:
        resolver = self.tag_resolver(client, "sagemaker")
        billing_tags = await asyncio.gather(
            *(resolver.resolve_billing(item[arn_key]) for item in items)
        )
        return [
            ResourceRecord(
                category=category,
                identifier=item[name_key],
                region=client.region,
                created_at=item["CreationTime"],
                name=item[name_key],
                billing_tag=billing,
                type_label=item.get(type_key) if type_key else None,
                details={"arn": item[arn_key]},
            )
            for item, billing in zip(items, billing_tags)
        ]

    async def _notebooks(self, client: AWSClient) -> list[ResourceRecord]:
        notebooks = await client.paginate(
            "sagemaker", "list_notebook_instances", "NotebookInstances", StatusEquals="InService"
        )
        return await self._records(
            client, ResourceCategory.NOTEBOOK, notebooks,
            "NotebookInstanceArn", "NotebookInstanceName", "InstanceType",
        )

    async def _training_jobs(self, client: AWSClient) -> list[ResourceRecord]:
        jobs = await client.paginate(
            "sagemaker", "list_training_jobs", "TrainingJobSummaries", StatusEquals="InProgress"
        )
        return await self._records(
            client, ResourceCategory.TRAINING, jobs, "TrainingJobArn", "TrainingJobName"
        )

    async def _endpoints(self, client: AWSClient) -> list[ResourceRecord]:
        endpoints = await client.paginate(
            "sagemaker", "list_endpoints", "Endpoints", StatusEquals="InService"
        )
        return await self._records(
            client, ResourceCategory.ENDPOINT, endpoints, "EndpointArn", "EndpointName"
        )
