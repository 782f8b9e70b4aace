"""Utility modules for the usage monitor."""

from .cloudwatch_logger import CloudWatchHandler, configure_cloudwatch_logging
from .resource_utils import arn_resource_name, extract_account_from_arn

__all__ = [
    "CloudWatchHandler",
    "configure_cloudwatch_logging",
    "arn_resource_name",
    "extract_account_from_arn",
]
