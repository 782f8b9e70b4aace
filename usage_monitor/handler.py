# Copyright (c) 2025-2026 OptimNow. All Rights Reserved.
# Licensed under the Apache License, Version 2.0.
# See LICENSE file in the project root for full license information.

"""Scheduled-invocation entry point.

``handler(event, context)`` is the function a scheduler (e.g. an AWS Lambda
schedule) invokes. It reads settings, runs the requested families and
returns their reports as a JSON body.
"""

import asyncio
import json
import logging
import sys
from typing import Any

from .config import Settings, get_settings
from .models.event import MonitorEvent
from .models.inventory import FamilyReport
from .services.monitor_service import MonitorService
from .utils.cloudwatch_logger import LOG_FORMAT, CloudWatchHandler, configure_cloudwatch_logging
from .utils.resource_utils import extract_account_from_arn

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    """
    Configure logging for the application.

    Console logging goes to stdout; a CloudWatch handler is added once when
    enabled in settings.

    Args:
        settings: Application settings
    """
    numeric_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=numeric_level,
        format=LOG_FORMAT,
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
    )
    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    # SDK loggers stay at INFO or above
    logging.getLogger("botocore").setLevel(max(numeric_level, logging.INFO))
    logging.getLogger("urllib3").setLevel(max(numeric_level, logging.INFO))

    if settings.cloudwatch_enabled and not any(
        isinstance(h, CloudWatchHandler) for h in root_logger.handlers
    ):
        configure_cloudwatch_logging(
            log_group=settings.cloudwatch_log_group,
            log_stream=settings.cloudwatch_log_stream,
            region=settings.aws_region,
        )


async def run_monitor(
    event: MonitorEvent, settings: Settings, account_id: str | None = None
) -> list[FamilyReport]:
    service = MonitorService(settings, account_id=account_id)
    return await service.run_all(event)


def build_response(reports: list[FamilyReport]) -> dict[str, Any]:
    body = {"families": [report.model_dump(mode="json") for report in reports]}
    return {"statusCode": 200, "body": json.dumps(body)}


def handler(event: dict[str, Any] | None, context: Any = None) -> dict[str, Any]:
    """
    Run the monitor for one scheduled invocation.

    Args:
        event: Invocation input (regions, families, writeToS3, postToSlack, putMpuRules)
        context: Invocation context; its function ARN names the account

    Returns:
        ``{"statusCode": 200, "body": <json>}`` with one report per family

    Raises:
        ExportError: If an inventory table cannot be exported
        AlertPostError: If an alert digest cannot be posted
    """
    settings = get_settings()
    configure_logging(settings)

    monitor_event = MonitorEvent.model_validate(event or {})
    account_id = extract_account_from_arn(getattr(context, "invoked_function_arn", None))
    logger.info(
        f"Monitor invocation: families={monitor_event.families or 'all'}, "
        f"regions={monitor_event.regions or 'default'}, account={account_id or 'self'}"
    )

    reports = asyncio.run(run_monitor(monitor_event, settings, account_id))
    return build_response(reports)
