# Copyright (c) 2025-2026 OptimNow. All Rights Reserved.
# Licensed under the Apache License, Version 2.0.
# See LICENSE file in the project root for full license information.

"""Slack incoming-webhook client used for alert digests."""

import asyncio
import logging

import requests

logger = logging.getLogger(__name__)


class SlackPostError(Exception):
    """Raised when a webhook post fails or is rejected."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class SlackClient:
    """Posts plain-text messages to one incoming webhook."""

    def __init__(self, webhook_url: str, timeout_seconds: float = 10.0, session=None):
        self.webhook_url = webhook_url
        self.timeout_seconds = timeout_seconds
        self._session = session or requests.Session()

    def post_text(self, text: str) -> None:
        """
        Post a message.

        Raises:
            SlackPostError: On transport errors or a non-2xx response
        """
        try:
            response = self._session.post(
                self.webhook_url,
                json={"text": text},
                headers={"Content-type": "application/json"},
                timeout=self.timeout_seconds,
            )
        except requests.RequestException as e:
            raise SlackPostError(f"Slack webhook request failed: {e}") from e

        if not 200 <= response.status_code < 300:
            raise SlackPostError(
                f"Slack webhook rejected the post: {response.status_code} {response.text[:200]}",
                status_code=response.status_code,
            )
        logger.debug(f"Posted {len(text)} characters to Slack")

    async def post_text_async(self, text: str) -> None:
        """Run post_text in the default executor."""
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self.post_text, text)
