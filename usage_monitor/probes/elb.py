# Copyright (c) 2025-2026 OptimNow. All Rights Reserved.
# Licensed under the Apache License, Version 2.0.
# See LICENSE file in the project root for full license information.

"""Load balancer probe: classic load balancers and active v2 (application/network/gateway) ones."""

import asyncio

from ..clients.aws_client import AWSClient
from ..models.enums import ResourceCategory
from ..models.resource import ResourceRecord
from .base import ResourceProbe, Section

# elbv2 describe_tags accepts at most 20 ARNs; pages are kept at that size
ELBV2_PAGE_SIZE = 20


class LoadBalancerProbe(ResourceProbe):
    family = "elb"

    def sections(self) -> list[tuple[str, Section]]:
        return [("classic load balancers", self._classic), ("v2 load balancers", self._v2)]

    async def _classic(self, client: AWSClient) -> list[ResourceRecord]:
        balancers = await client.paginate(
            "elb",
            "describe_load_balancers",
            "LoadBalancerDescriptions",
            request_token="Marker",
            response_token="NextMarker",
        )
        resolver = self.tag_resolver(client, "elb")
        billing_tags = await asyncio.gather(
            *(resolver.resolve_billing(lb["LoadBalancerName"]) for lb in balancers)
        )
        return [
            ResourceRecord(
                category=ResourceCategory.LOAD_BALANCER,
                identifier=lb["LoadBalancerName"],
                region=client.region,
                created_at=lb["CreatedTime"],
                name=lb["LoadBalancerName"],
                billing_tag=billing,
                type_label="classic",
                details={"dns_name": lb.get("DNSName")},
            )
            for lb, billing in zip(balancers, billing_tags)
        ]

    async def _v2(self, client: AWSClient) -> list[ResourceRecord]:
        balancers = await client.paginate(
            "elbv2",
            "describe_load_balancers",
            "LoadBalancers",
            request_token="Marker",
            response_token="NextMarker",
            PageSize=ELBV2_PAGE_SIZE,
        )
        balancers = [lb for lb in balancers if lb.get("State", {}).get("Code") == "active"]
        resolver = self.tag_resolver(client, "elbv2")
        billing_tags = await asyncio.gather(
            *(resolver.resolve_billing(lb["LoadBalancerArn"]) for lb in balancers)
        )
        return [
            ResourceRecord(
                category=ResourceCategory.LOAD_BALANCER,
                identifier=lb["LoadBalancerArn"],
                region=client.region,
                created_at=lb["CreatedTime"],
                name=lb["LoadBalancerName"],
                billing_tag=billing,
                type_label=lb.get("Type"),
                details={"dns_name": lb.get("DNSName")},
            )
            for lb, billing in zip(balancers, billing_tags)
        ]
