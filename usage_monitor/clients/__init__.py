"""AWS and alert channel clients."""

from .aws_client import AWSClient, ErrorKind, ProbeError, extract_tags
from .regional_client_factory import RegionalClientFactory
from .slack_client import SlackClient, SlackPostError
from .tag_resolver import TagAccessDenied, TagResolutionError, TagResolver, billing_tag_from_tags

__all__ = [
    "AWSClient",
    "ErrorKind",
    "ProbeError",
    "extract_tags",
    "RegionalClientFactory",
    "SlackClient",
    "SlackPostError",
    "TagAccessDenied",
    "TagResolutionError",
    "TagResolver",
    "billing_tag_from_tags",
]
