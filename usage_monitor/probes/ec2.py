# Copyright (c) 2025-2026 OptimNow. All Rights Reserved.
# Licensed under the Apache License, Version 2.0.
# See LICENSE file in the project root for full license information.

"""EC2 probes: running instances and Elastic IP addresses."""

from ..clients.aws_client import AWSClient
from ..models.enums import ResourceCategory
from ..models.resource import ResourceRecord
from ..utils.pricing import ec2_hourly_rate
from .base import ResourceProbe, Section

RUNNING_FILTER = [{"Name": "instance-state-name", "Values": ["running"]}]


class InstanceProbe(ResourceProbe):
    """Running EC2 instances, priced from the static on-demand table."""

    family = "ec2"

    def sections(self) -> list[tuple[str, Section]]:
        return [("instances", self._instances)]

    async def _instances(self, client: AWSClient) -> list[ResourceRecord]:
        reservations = await client.paginate(
            "ec2", "describe_instances", "Reservations", Filters=RUNNING_FILTER
        )
        records = []
        for reservation in reservations:
            for instance in reservation.get("Instances", []):
                tags, billing = self.inline_tags(instance.get("Tags"))
                instance_type = instance.get("InstanceType")
                records.append(ResourceRecord(
                    category=ResourceCategory.INSTANCE,
                    identifier=instance["InstanceId"],
                    region=client.region,
                    created_at=instance["LaunchTime"],
                    name=tags.get(self.name_tag_key),
                    billing_tag=billing,
                    type_label=instance_type,
                    cost_rate_per_hour=ec2_hourly_rate(instance_type),
                ))
        return records


class AddressProbe(ResourceProbe):
    """Elastic IP addresses and the instances they are associated with.

    Addresses carry no creation time; the observation time is used.
    """

    family = "eip"

    def sections(self) -> list[tuple[str, Section]]:
        return [("addresses", self._addresses)]

    async def _addresses(self, client: AWSClient) -> list[ResourceRecord]:
        response = await client.call("ec2", "describe_addresses")
        observed_at = self.clock()
        records = []
        for address in response.get("Addresses", []):
            tags, billing = self.inline_tags(address.get("Tags"))
            instance_id = address.get("InstanceId")
            records.append(ResourceRecord(
                category=ResourceCategory.ADDRESS,
                identifier=address.get("PublicIp") or address["AllocationId"],
                region=client.region,
                created_at=observed_at,
                name=tags.get(self.name_tag_key),
                billing_tag=billing,
                related_identifiers=[instance_id] if instance_id else [],
                details={"allocation_id": address.get("AllocationId")},
            ))
        return records
