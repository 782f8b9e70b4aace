# Copyright (c) 2025-2026 OptimNow. All Rights Reserved.
# Licensed under the Apache License, Version 2.0.
# See LICENSE file in the project root for full license information.

"""EFS probe: available file systems and their storage-class sizes."""

from ..clients.aws_client import AWSClient
from ..models.enums import ResourceCategory
from ..models.resource import ResourceRecord
from .base import ResourceProbe, Section


class FileSystemProbe(ResourceProbe):
    family = "efs"

    def sections(self) -> list[tuple[str, Section]]:
        return [("file systems", self._file_systems)]

    async def _file_systems(self, client: AWSClient) -> list[ResourceRecord]:
        file_systems = await client.paginate(
            "efs",
            "describe_file_systems",
            "FileSystems",
            request_token="Marker",
            response_token="NextMarker",
        )
        records = []
        for fs in file_systems:
            if fs.get("LifeCycleState") != "available":
                continue
            tags, billing = self.inline_tags(fs.get("Tags"))
            size = fs.get("SizeInBytes", {})
            records.append(ResourceRecord(
                category=ResourceCategory.FILE_SYSTEM,
                identifier=fs["FileSystemId"],
                region=client.region,
                created_at=fs["CreationTime"],
                name=fs.get("Name") or tags.get(self.name_tag_key),
                billing_tag=billing,
                size_or_capacity=size.get("Value"),
                details={
                    "size_standard": size.get("ValueInStandard", 0),
                    "size_ia": size.get("ValueInIA", 0),
                },
            ))
        return records
