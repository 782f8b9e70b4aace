# Copyright (c) 2025-2026 OptimNow. All Rights Reserved.
# Licensed under the Apache License, Version 2.0.
# See LICENSE file in the project root for full license information.

"""Invocation event model."""

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class MonitorEvent(BaseModel):
    """Input of one monitor invocation.

    Accepts the camelCase keys used by scheduled events (``writeToS3``,
    ``postToSlack``, ``putMpuRules``) as well as snake_case.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    regions: list[str] | None = Field(
        None, description="Explicit regions overriding the configured defaults"
    )
    families: list[str] | None = Field(
        None, description="Monitor families to run. None runs every family."
    )
    write_to_s3: bool = Field(
        False,
        validation_alias=AliasChoices("writeToS3", "write_to_s3"),
        description="Write the inventory table to the export bucket",
    )
    post_to_slack: bool = Field(
        False,
        validation_alias=AliasChoices("postToSlack", "post_to_slack"),
        description="Post alert digests to the alert webhook",
    )
    put_mpu_rules: bool = Field(
        False,
        validation_alias=AliasChoices("putMpuRules", "put_mpu_rules"),
        description="Add missing abort-incomplete-multipart-upload lifecycle rules",
    )

    @field_validator("regions", "families")
    @classmethod
    def drop_blank_entries(cls, v: list[str] | None) -> list[str] | None:
        if v is None:
            return None
        cleaned = [item.strip() for item in v if item and item.strip()]
        return cleaned or None
