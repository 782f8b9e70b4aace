# Copyright (c) 2025-2026 OptimNow. All Rights Reserved.
# Licensed under the Apache License, Version 2.0.
# See LICENSE file in the project root for full license information.

"""Per-resource tag lookup with a three-valued billing tag result.

Tags are looked up one resource at a time. A missing tag set is an empty
mapping. An access-denied lookup is kept apart from other failures: the
monitor simply could not observe the tag, so the billing tag becomes
"unresolvable" and tag-presence rules exempt it. Any other failure is
read as "absent" and surfaces as a violation.
"""

import logging
from dataclasses import dataclass, field

from ..models.resource import BillingTag
from .aws_client import AWSClient, ErrorKind, ProbeError, extract_tags

logger = logging.getLogger(__name__)


class TagAccessDenied(Exception):
    """Raised when the tag lookup of a resource is forbidden."""

    pass


class TagResolutionError(Exception):
    """Raised when a tag lookup fails for any reason other than access denied."""

    pass


@dataclass(frozen=True)
class TagApi:
    """Shape of a service's per-resource tag lookup."""

    service: str
    operation: str
    param: str
    result_key: str
    # Parameter takes a one-element list; response holds TagDescriptions
    as_list: bool = False
    paginated: bool = False
    not_found_codes: frozenset[str] = field(default_factory=frozenset)


TAG_APIS: dict[str, TagApi] = {
    "rds": TagApi("rds", "list_tags_for_resource", "ResourceName", "TagList"),
    "dynamodb": TagApi(
        "dynamodb", "list_tags_of_resource", "ResourceArn", "Tags", paginated=True
    ),
    "ecs": TagApi("ecs", "list_tags_for_resource", "resourceArn", "tags"),
    "sagemaker": TagApi("sagemaker", "list_tags", "ResourceArn", "Tags", paginated=True),
    "s3": TagApi(
        "s3", "get_bucket_tagging", "Bucket", "TagSet",
        not_found_codes=frozenset(["NoSuchTagSet"]),
    ),
    "elb": TagApi("elb", "describe_tags", "LoadBalancerNames", "TagDescriptions", as_list=True),
    "elbv2": TagApi("elbv2", "describe_tags", "ResourceArns", "TagDescriptions", as_list=True),
}


def billing_tag_from_tags(tags: dict[str, str], billing_tag_key: str = "Billing") -> BillingTag:
    """Build the billing tag state from an already observed tag mapping."""
    if billing_tag_key in tags:
        return BillingTag.present(tags[billing_tag_key] or "")
    return BillingTag.absent()


class TagResolver:
    """
    Resolves the tags of single resources through one service's tag API.

    Args:
        client: Regional AWS client
        api: TagApi or the name of a registered service in TAG_APIS
        billing_tag_key: Tag key carrying the cost allocation
    """

    def __init__(self, client: AWSClient, api: TagApi | str, billing_tag_key: str = "Billing"):
        self.client = client
        self.api = TAG_APIS[api] if isinstance(api, str) else api
        self.billing_tag_key = billing_tag_key

    async def resolve(self, resource_arn_or_id: str) -> dict[str, str]:
        """
        Look up the tags of one resource.

        Returns:
            Tag mapping; empty when the resource has no tag set

        Raises:
            TagAccessDenied: If the lookup is forbidden
            TagResolutionError: For any other failure
        """
        api = self.api
        value = [resource_arn_or_id] if api.as_list else resource_arn_or_id
        try:
            if api.paginated:
                tag_list = await self.client.paginate(
                    api.service, api.operation, api.result_key, **{api.param: value}
                )
            else:
                response = await self.client.call(api.service, api.operation, **{api.param: value})
                tag_list = response.get(api.result_key, [])
        except ProbeError as e:
            if e.code in api.not_found_codes:
                return {}
            if e.kind == ErrorKind.ACCESS_DENIED:
                raise TagAccessDenied(str(e)) from e
            raise TagResolutionError(str(e)) from e

        if api.as_list:
            tag_list = tag_list[0].get("Tags", []) if tag_list else []
        return extract_tags(tag_list)

    async def resolve_billing(self, resource_arn_or_id: str) -> BillingTag:
        """Resolve the billing tag state of one resource."""
        try:
            tags = await self.resolve(resource_arn_or_id)
        except TagAccessDenied:
            logger.info(f"Tag lookup denied for {resource_arn_or_id}; billing tag unresolvable")
            return BillingTag.unresolvable()
        except TagResolutionError as e:
            logger.warning(f"Tag lookup failed for {resource_arn_or_id}, treating as absent: {e}")
            return BillingTag.absent()
        return billing_tag_from_tags(tags, self.billing_tag_key)
