# Copyright (c) 2025-2026 OptimNow. All Rights Reserved.
# Licensed under the Apache License, Version 2.0.
# See LICENSE file in the project root for full license information.

"""Base class for per-family resource probes.

A probe enumerates one resource family in one region and returns records
already normalized into ResourceRecord. Families made of several
sub-categories (volumes and snapshots, classic and v2 load balancers,
notebooks, training jobs and endpoints) declare one section per
sub-category. Sections run concurrently and fail independently: a provider
error in one section is logged and that section contributes no records.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Awaitable, Callable, ClassVar, TypeVar

from ..clients.aws_client import AWSClient, ProbeError, extract_tags
from ..clients.regional_client_factory import RegionalClientFactory
from ..clients.tag_resolver import TagResolver, billing_tag_from_tags
from ..models.resource import BillingTag, ResourceRecord

logger = logging.getLogger(__name__)

T = TypeVar("T")

Section = Callable[[AWSClient], Awaitable[list[ResourceRecord]]]


class ResourceProbe(ABC):
    """
    Enumerates one resource family in a region.

    Subclasses set ``family`` and implement ``sections``. Global families
    (``is_global = True``) are enumerated once through the default region
    and report each record's own region.
    """

    family: ClassVar[str] = ""
    is_global: ClassVar[bool] = False

    def __init__(
        self,
        client_factory: RegionalClientFactory,
        billing_tag_key: str = "Billing",
        name_tag_key: str = "Name",
        account_id: str | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        """
        Args:
            client_factory: Factory returning the regional AWS clients
            billing_tag_key: Tag key carrying the cost allocation
            name_tag_key: Tag key carrying the resource name
            account_id: Account owning the inventory (used by owner filters)
            clock: Returns the current time; defaults to UTC now
        """
        self.client_factory = client_factory
        self.billing_tag_key = billing_tag_key
        self.name_tag_key = name_tag_key
        self.account_id = account_id
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    @abstractmethod
    def sections(self) -> list[tuple[str, Section]]:
        """Named sub-enumerations, in report order."""

    async def enumerate(self, region: str) -> list[ResourceRecord]:
        """
        Enumerate the family's live resources in a region.

        Args:
            region: AWS region code

        Returns:
            Records of every section, concatenated in section order
        """
        client = self.client_factory.get_client(region)
        sections = self.sections()
        results = await asyncio.gather(
            *(self._guarded_section(client, label, section) for label, section in sections)
        )
        records = [record for section_records in results for record in section_records]
        logger.info(f"{self.family} in {region}: {len(records)} records")
        return records

    async def _guarded_section(
        self, client: AWSClient, label: str, section: Section
    ) -> list[ResourceRecord]:
        try:
            return await section(client)
        except ProbeError as e:
            logger.warning(
                f"{self.family}: {label} enumeration failed in {client.region} "
                f"({e.kind.value}): {e}"
            )
            return []

    async def lookup(self, description: str, awaitable: Awaitable[T], default: T) -> T:
        """Await a secondary lookup, returning ``default`` when it fails."""
        try:
            return await awaitable
        except ProbeError as e:
            logger.warning(f"{self.family}: lookup of {description} failed: {e}")
            return default

    def tag_resolver(self, client: AWSClient, service: str) -> TagResolver:
        return TagResolver(client, service, billing_tag_key=self.billing_tag_key)

    def inline_tags(self, raw_tags: list[dict[str, str]] | None) -> tuple[dict[str, str], BillingTag]:
        """Tag mapping and billing state from a tag list returned by a describe call."""
        tags = extract_tags(raw_tags)
        return tags, billing_tag_from_tags(tags, self.billing_tag_key)
