# Copyright (c) 2025-2026 OptimNow. All Rights Reserved.
# Licensed under the Apache License, Version 2.0.
# See LICENSE file in the project root for full license information.

"""EBS probe: volumes with their attached instances, snapshots with the images using them."""

import asyncio

from ..clients.aws_client import AWSClient, extract_tags
from ..models.enums import ResourceCategory
from ..models.resource import ResourceRecord
from .base import ResourceProbe, Section

GONE_VOLUME_STATES = frozenset(["deleting", "deleted"])


class BlockStorageProbe(ResourceProbe):
    """
    EBS volumes and account-owned snapshots.

    Volumes are joined to the names of the instances they are attached to;
    snapshots are joined to the machine images built on them. A failed join
    leaves the names empty without dropping the record.
    """

    family = "ebs"

    def sections(self) -> list[tuple[str, Section]]:
        return [("volumes", self._volumes), ("snapshots", self._snapshots)]

    async def _volumes(self, client: AWSClient) -> list[ResourceRecord]:
        volumes = await client.paginate("ec2", "describe_volumes", "Volumes")
        volumes = [v for v in volumes if v.get("State") not in GONE_VOLUME_STATES]

        attached_ids = sorted({
            attachment["InstanceId"]
            for volume in volumes
            for attachment in volume.get("Attachments", [])
            if attachment.get("InstanceId")
        })
        instance_names = await self.lookup(
            f"instances attached to volumes in {client.region}",
            self._instance_names(client, attached_ids),
            {},
        )

        records = []
        for volume in volumes:
            tags, billing = self.inline_tags(volume.get("Tags"))
            instance_ids = [
                a["InstanceId"] for a in volume.get("Attachments", []) if a.get("InstanceId")
            ]
            records.append(ResourceRecord(
                category=ResourceCategory.VOLUME,
                identifier=volume["VolumeId"],
                region=client.region,
                created_at=volume["CreateTime"],
                name=tags.get(self.name_tag_key),
                billing_tag=billing,
                size_or_capacity=volume.get("Size"),
                type_label=volume.get("VolumeType"),
                related_identifiers=instance_ids,
                related_names=[instance_names.get(i, "") for i in instance_ids],
            ))
        return records

    async def _instance_names(self, client: AWSClient, instance_ids: list[str]) -> dict[str, str]:
        if not instance_ids:
            return {}
        reservations = await client.paginate(
            "ec2", "describe_instances", "Reservations", InstanceIds=instance_ids
        )
        names = {}
        for reservation in reservations:
            for instance in reservation.get("Instances", []):
                tags = extract_tags(instance.get("Tags"))
                names[instance["InstanceId"]] = tags.get(self.name_tag_key, "")
        return names

    async def _snapshots(self, client: AWSClient) -> list[ResourceRecord]:
        owner = self.account_id or "self"
        snapshots = await client.paginate(
            "ec2", "describe_snapshots", "Snapshots", OwnerIds=[owner]
        )
        images = await asyncio.gather(*(
            self.lookup(
                f"images of snapshot {s['SnapshotId']}",
                self._images_using(client, s["SnapshotId"]),
                [],
            )
            for s in snapshots
        ))

        records = []
        for snapshot, snapshot_images in zip(snapshots, images):
            tags, billing = self.inline_tags(snapshot.get("Tags"))
            records.append(ResourceRecord(
                category=ResourceCategory.SNAPSHOT,
                identifier=snapshot["SnapshotId"],
                region=client.region,
                created_at=snapshot["StartTime"],
                name=tags.get(self.name_tag_key),
                billing_tag=billing,
                size_or_capacity=snapshot.get("VolumeSize"),
                related_identifiers=[image["ImageId"] for image in snapshot_images],
                related_names=[image.get("Name", "") for image in snapshot_images],
                details={"volume_id": snapshot.get("VolumeId")},
            ))
        return records

    async def _images_using(self, client: AWSClient, snapshot_id: str) -> list[dict]:
        response = await client.call(
            "ec2",
            "describe_images",
            Filters=[{"Name": "block-device-mapping.snapshot-id", "Values": [snapshot_id]}],
        )
        return response.get("Images", [])
