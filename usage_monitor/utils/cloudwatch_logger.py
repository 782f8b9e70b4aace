"""CloudWatch logging configuration and utilities."""

import logging
import sys
from typing import Any, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_LOG_STREAM = "application"


class CloudWatchHandler(logging.Handler):
    """Logging handler that sends records to one CloudWatch Logs stream."""

    def __init__(
        self,
        log_group: str,
        log_stream: str,
        region: str = "us-east-1",
        client: Any = None,
    ):
        """
        Initialize CloudWatch logging handler.

        Args:
            log_group: CloudWatch log group name
            log_stream: CloudWatch log stream name
            region: AWS region for CloudWatch
            client: Optional boto3 logs client
        """
        super().__init__()
        self.log_group = log_group
        self.log_stream = log_stream
        self.region = region
        self.client = client or boto3.client("logs", region_name=region)
        self._ensure_log_group_and_stream()

    def _ensure_log_group_and_stream(self) -> None:
        """Create log group and stream if they don't exist."""
        for create, params in (
            (self.client.create_log_group, {"logGroupName": self.log_group}),
            (
                self.client.create_log_stream,
                {"logGroupName": self.log_group, "logStreamName": self.log_stream},
            ),
        ):
            try:
                create(**params)
            except ClientError as e:
                if e.response["Error"]["Code"] != "ResourceAlreadyExistsException":
                    raise

    def emit(self, record: logging.LogRecord) -> None:
        """
        Emit a log record to CloudWatch.

        Args:
            record: The log record to emit
        """
        try:
            self.client.put_log_events(
                logGroupName=self.log_group,
                logStreamName=self.log_stream,
                logEvents=[
                    {
                        "message": self.format(record),
                        "timestamp": int(record.created * 1000),
                    }
                ],
            )
        except (ClientError, BotoCoreError):
            # Logging handlers never raise
            self.handleError(record)


def configure_cloudwatch_logging(
    log_group: str,
    log_stream: Optional[str] = None,
    region: str = "us-east-1",
    enable: bool = True,
    client: Any = None,
) -> Optional[CloudWatchHandler]:
    """
    Configure CloudWatch logging for the application.

    Adds a CloudWatch handler to the root logger if enabled. Setup failures
    are reported on stderr and leave console logging in place.

    Args:
        log_group: CloudWatch log group name
        log_stream: CloudWatch log stream name (default: application)
        region: AWS region for CloudWatch
        enable: Whether to enable CloudWatch logging
        client: Optional boto3 logs client

    Returns:
        The installed handler, or None when disabled or setup failed
    """
    if not enable:
        return None

    log_stream = log_stream or DEFAULT_LOG_STREAM
    try:
        handler = CloudWatchHandler(
            log_group=log_group,
            log_stream=log_stream,
            region=region,
            client=client,
        )
    except (ClientError, BotoCoreError) as e:
        print(f"Failed to configure CloudWatch logging: {e}", file=sys.stderr)
        return None

    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logging.getLogger().addHandler(handler)

    logger = logging.getLogger(__name__)
    logger.info(f"CloudWatch logging configured: group={log_group}, stream={log_stream}")
    return handler
