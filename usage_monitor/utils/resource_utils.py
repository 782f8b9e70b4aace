# Copyright (c) 2025-2026 OptimNow. All Rights Reserved.
# Licensed under the Apache License, Version 2.0.
# See LICENSE file in the project root for full license information.

"""ARN helpers shared by probes and the invocation entry point."""


def extract_account_from_arn(arn: str | None) -> str | None:
    """
    Extract AWS account ID from an ARN.

    ARN format: arn:aws:service:region:account-id:resource

    Args:
        arn: AWS ARN string

    Returns:
        Account ID or None if not found
    """
    if not arn:
        return None

    parts = arn.split(":")
    if len(parts) >= 5:
        return parts[4] or None

    return None


def arn_resource_name(arn: str) -> str:
    """Last path segment of an ARN (e.g. the cluster name of an ECS cluster ARN)."""
    return arn.rsplit("/", 1)[-1]
