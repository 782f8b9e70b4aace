"""Regional AWS client wrapper with a single error contract."""

import asyncio
import logging
from enum import Enum
from typing import Any, Callable

import boto3
from botocore.config import Config
from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    ConnectTimeoutError,
    EndpointConnectionError,
    ReadTimeoutError,
)

logger = logging.getLogger(__name__)

ACCESS_DENIED_CODES = frozenset([
    "AccessDenied",
    "AccessDeniedException",
    "UnauthorizedOperation",
    "AuthorizationError",
    "UnrecognizedClientException",
])

THROTTLING_CODES = frozenset([
    "Throttling",
    "ThrottlingException",
    "RequestLimitExceeded",
    "TooManyRequestsException",
    "SlowDown",
])

NOT_FOUND_SUFFIXES = ("NotFound", "NotFoundException", "NotFoundFault")


class ErrorKind(str, Enum):
    """Classification of a failed AWS call."""

    ACCESS_DENIED = "access_denied"
    NOT_FOUND = "not_found"
    THROTTLED = "throttled"
    TIMEOUT = "timeout"
    PROVIDER_ERROR = "provider_error"


class ProbeError(Exception):
    """Raised when an AWS API call fails, whatever the underlying cause."""

    def __init__(self, message: str, kind: ErrorKind, code: str = ""):
        super().__init__(message)
        self.kind = kind
        self.code = code


def classify_client_error(error: ClientError) -> tuple[ErrorKind, str]:
    """
    Map a botocore ClientError to an ErrorKind.

    Args:
        error: The ClientError raised by boto3

    Returns:
        Tuple of (ErrorKind, AWS error code)
    """
    code = error.response.get("Error", {}).get("Code", "")
    if code in ACCESS_DENIED_CODES:
        return ErrorKind.ACCESS_DENIED, code
    if code in THROTTLING_CODES:
        return ErrorKind.THROTTLED, code
    if code.startswith("NoSuch") or code.endswith(NOT_FOUND_SUFFIXES):
        return ErrorKind.NOT_FOUND, code
    return ErrorKind.PROVIDER_ERROR, code


class AWSClient:
    """
    Wrapper around boto3 clients for one region.

    Boto3 clients are created lazily per service and reused. Every call runs
    in the default thread pool so region and sub-resource branches can be
    awaited concurrently. Uses the ambient credential chain; no credentials
    are handled here.
    """

    def __init__(
        self,
        region: str = "us-east-1",
        read_timeout: int = 30,
        connect_timeout: int = 10,
        client_builder: Callable[..., Any] | None = None,
    ):
        """
        Initialize the regional client.

        Args:
            region: AWS region to use for regional services
            read_timeout: Read timeout for every API call, in seconds
            connect_timeout: Connect timeout for every API call, in seconds
            client_builder: Factory with the boto3.client signature (tests)
        """
        self.region = region
        self._config = Config(
            region_name=region,
            read_timeout=read_timeout,
            connect_timeout=connect_timeout,
        )
        self._client_builder = client_builder or boto3.client
        self._clients: dict[str, Any] = {}

    def client(self, service_name: str) -> Any:
        """Get or create the boto3 client for a service in this region."""
        if service_name not in self._clients:
            self._clients[service_name] = self._client_builder(
                service_name, config=self._config
            )
        return self._clients[service_name]

    async def call(self, service_name: str, operation: str, **kwargs) -> dict[str, Any]:
        """
        Call an AWS API operation.

        Args:
            service_name: boto3 service name (e.g. "ec2")
            operation: Client method name (e.g. "describe_volumes")
            **kwargs: Request parameters

        Returns:
            Response dictionary

        Raises:
            ProbeError: For any failure, classified by ErrorKind
        """
        loop = asyncio.get_running_loop()
        try:
            method = getattr(self.client(service_name), operation)
            return await loop.run_in_executor(None, lambda: method(**kwargs))
        except ClientError as e:
            kind, code = classify_client_error(e)
            raise ProbeError(
                f"{service_name}.{operation} failed in {self.region}: {code} - {e}",
                kind=kind,
                code=code,
            ) from e
        except (ConnectTimeoutError, ReadTimeoutError) as e:
            raise ProbeError(
                f"{service_name}.{operation} timed out in {self.region}: {e}",
                kind=ErrorKind.TIMEOUT,
            ) from e
        except (EndpointConnectionError, BotoCoreError) as e:
            raise ProbeError(
                f"{service_name}.{operation} failed in {self.region}: {e}",
                kind=ErrorKind.PROVIDER_ERROR,
            ) from e

    async def paginate(
        self,
        service_name: str,
        operation: str,
        result_key: str,
        request_token: str = "NextToken",
        response_token: str | None = None,
        **kwargs,
    ) -> list[Any]:
        """
        Call a list operation until no continuation cursor is returned.

        Args:
            service_name: boto3 service name
            operation: Client method name
            result_key: Response key holding the items of one page
            request_token: Request parameter carrying the cursor
            response_token: Response key carrying the next cursor
                            (defaults to request_token)
            **kwargs: Request parameters sent with every page

        Returns:
            Items of all pages, in page order

        Raises:
            ProbeError: If any page fails
        """
        response_token = response_token or request_token
        items: list[Any] = []
        token = None
        pages = 0
        while True:
            params = dict(kwargs)
            if token:
                params[request_token] = token
            response = await self.call(service_name, operation, **params)
            items.extend(response.get(result_key, []))
            pages += 1
            token = response.get(response_token)
            if not token:
                break
        logger.debug(
            f"{service_name}.{operation} in {self.region}: {len(items)} items over {pages} pages"
        )
        return items


def extract_tags(tag_list: list[dict[str, str]] | None) -> dict[str, str]:
    """
    Convert AWS tag list format to dictionary.

    Args:
        tag_list: List of tags in AWS format [{"Key": "...", "Value": "..."}]
                 or ECS format [{"key": "...", "value": "..."}]

    Returns:
        Dictionary of tag key-value pairs
    """
    if not tag_list:
        return {}

    result = {}
    for tag in tag_list:
        # Handle both uppercase (EC2, RDS, S3) and lowercase (ECS) keys
        key = tag.get("Key") or tag.get("key", "")
        value = tag.get("Value")
        if value is None:
            value = tag.get("value", "")
        if key:
            result[key] = value

    return result
