# Copyright (c) 2025-2026 OptimNow. All Rights Reserved.
# Licensed under the Apache License, Version 2.0.
# See LICENSE file in the project root for full license information.

"""Factory for creating and caching regional AWS clients."""

import logging
from typing import Any, Callable

from .aws_client import AWSClient

logger = logging.getLogger(__name__)


class RegionalClientFactory:
    """
    Factory for creating and caching regional AWS clients.

    Reuses clients within one invocation to avoid repeated initialization
    and applies the same timeouts to every region.
    """

    def __init__(
        self,
        default_region: str = "us-east-1",
        read_timeout: int = 30,
        client_builder: Callable[..., Any] | None = None,
    ):
        """
        Initialize with default region and client settings.

        Args:
            default_region: Region used for global endpoints (e.g. S3 listing)
            read_timeout: Read timeout applied to every client, in seconds
            client_builder: Optional boto3.client replacement, passed to AWSClient
        """
        self._default_region = default_region
        self._read_timeout = read_timeout
        self._client_builder = client_builder
        self._clients: dict[str, AWSClient] = {}

        logger.debug(
            f"RegionalClientFactory initialized with default_region={default_region}"
        )

    @property
    def default_region(self) -> str:
        """Get the default region."""
        return self._default_region

    @property
    def cached_regions(self) -> list[str]:
        """Get list of regions with cached clients."""
        return list(self._clients.keys())

    def get_client(self, region: str | None = None) -> AWSClient:
        """
        Get or create an AWS client for the specified region.

        Calling this method multiple times with the same region returns the
        same AWSClient instance.

        Args:
            region: AWS region code. None selects the default region.

        Returns:
            AWSClient configured for the region
        """
        region = region or self._default_region
        if region in self._clients:
            return self._clients[region]

        logger.info(f"Creating new AWS client for region {region}")
        client = AWSClient(
            region=region,
            read_timeout=self._read_timeout,
            client_builder=self._client_builder,
        )
        self._clients[region] = client
        return client

    def clear_clients(self) -> None:
        """Clear all cached clients."""
        client_count = len(self._clients)
        self._clients.clear()
        logger.info(f"Cleared {client_count} cached regional clients")
