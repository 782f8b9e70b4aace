"""Configuration management for the usage monitor.

This module handles loading and validating configuration from environment
variables with sensible defaults. Settings are read once at the start of
each invocation.
"""

from typing import Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_REGIONS = ",".join([
    "us-east-2",
    "us-east-1",
    "us-west-1",
    "us-west-2",
    "ap-south-1",
    "ap-northeast-2",
    "ap-southeast-1",
    "ap-southeast-2",
    "ap-northeast-1",
    "ca-central-1",
    "eu-central-1",
    "eu-west-1",
    "eu-west-2",
    "eu-west-3",
    "eu-north-1",
    "sa-east-1",
])


def split_csv(value: str | None) -> list[str]:
    """Split a comma-separated setting, dropping blanks and surrounding spaces."""
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have sensible defaults for local development.
    In production, these should be set via environment variables
    or a .env file.
    """

    # Logging Configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)",
        validation_alias="LOG_LEVEL"
    )

    # AWS Configuration
    aws_region: str = Field(
        default="us-east-1",
        description="Region used for global endpoints (S3 listing, exports)",
        validation_alias=AliasChoices("AWS_REGION", "AWS_DEFAULT_REGION")
    )
    default_regions: str = Field(
        default=DEFAULT_REGIONS,
        description="Comma-separated regions scanned when the event names none",
        validation_alias="DEFAULT_REGIONS"
    )
    region_timeout_seconds: float = Field(
        default=60.0,
        gt=0,
        description="Timeout for enumerating a single region",
        validation_alias="REGION_TIMEOUT_SECONDS"
    )
    global_probe_timeout_seconds: float = Field(
        default=300.0,
        gt=0,
        description="Timeout for the single pass of a global probe (S3 buckets)",
        validation_alias="GLOBAL_PROBE_TIMEOUT_SECONDS"
    )
    max_concurrent_regions: int = Field(
        default=16,
        ge=1,
        description="Maximum regions enumerated in parallel",
        validation_alias="MAX_CONCURRENT_REGIONS"
    )
    api_read_timeout_seconds: int = Field(
        default=30,
        ge=1,
        description="Read timeout applied to every AWS API call",
        validation_alias="API_READ_TIMEOUT_SECONDS"
    )

    # Export and Alert Configuration
    s3_bucket: Optional[str] = Field(
        default=None,
        description="Bucket receiving the inventory tables",
        validation_alias=AliasChoices("S3_BUCKET", "EXPORT_BUCKET")
    )
    slack_webhook_url: Optional[str] = Field(
        default=None,
        description="Incoming webhook URL for alert digests",
        validation_alias="SLACK_WEBHOOK_URL"
    )
    slack_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Timeout for one alert post",
        validation_alias="SLACK_TIMEOUT_SECONDS"
    )

    # Report Configuration
    report_utc_offset_minutes: int = Field(
        default=540,
        ge=-720,
        le=840,
        description="Fixed UTC offset used to render report dates",
        validation_alias="REPORT_UTC_OFFSET_MINUTES"
    )
    billing_tag_key: str = Field(
        default="Billing",
        description="Tag key carrying the cost allocation",
        validation_alias="BILLING_TAG_KEY"
    )
    name_tag_key: str = Field(
        default="Name",
        description="Tag key carrying the resource name",
        validation_alias="NAME_TAG_KEY"
    )

    # Policy Configuration
    aged_whitelist: str = Field(
        default="",
        description="Comma-separated names exempt from the volume/snapshot age rules",
        validation_alias="AGED_WHITELIST"
    )
    long_running_whitelist: str = Field(
        default="",
        description="Comma-separated names exempt from the long-running instance rule",
        validation_alias="LONG_RUNNING_WHITELIST"
    )
    aged_volume_years: int = Field(
        default=2, ge=0, validation_alias="AGED_VOLUME_YEARS"
    )
    aged_snapshot_years: int = Field(
        default=3, ge=0, validation_alias="AGED_SNAPSHOT_YEARS"
    )
    long_running_min_days: int = Field(
        default=1,
        ge=0,
        description="Minimum whole days before an instance counts as long-running",
        validation_alias="LONG_RUNNING_MIN_DAYS"
    )
    long_running_min_hourly_rate: float = Field(
        default=0.1,
        ge=0.0,
        description="Instances cheaper than this hourly rate are never flagged",
        validation_alias="LONG_RUNNING_MIN_HOURLY_RATE"
    )
    mpu_abort_days: int = Field(
        default=7,
        ge=1,
        description="DaysAfterInitiation of the added multipart-upload abort rule",
        validation_alias="MPU_ABORT_DAYS"
    )

    # CloudWatch Configuration
    cloudwatch_enabled: bool = Field(
        default=False,
        description="Enable CloudWatch logging",
        validation_alias="CLOUDWATCH_ENABLED"
    )
    cloudwatch_log_group: str = Field(
        default="/finops/usage-monitor",
        description="CloudWatch log group name",
        validation_alias="CLOUDWATCH_LOG_GROUP"
    )
    cloudwatch_log_stream: Optional[str] = Field(
        default=None,
        description="CloudWatch log stream name (defaults to 'application')",
        validation_alias="CLOUDWATCH_LOG_STREAM"
    )

    model_config = SettingsConfigDict(
        env_prefix="",  # No prefix for environment variables
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
    )

    @field_validator("default_regions")
    @classmethod
    def validate_default_regions(cls, v: str) -> str:
        if not split_csv(v):
            raise ValueError("DEFAULT_REGIONS must name at least one region")
        return v

    @property
    def default_region_list(self) -> list[str]:
        return split_csv(self.default_regions)

    @property
    def aged_whitelist_names(self) -> frozenset[str]:
        return frozenset(split_csv(self.aged_whitelist))

    @property
    def long_running_whitelist_names(self) -> frozenset[str]:
        return frozenset(split_csv(self.long_running_whitelist))


def get_settings() -> Settings:
    """
    Get application settings.

    Loads settings from environment variables and .env file. Each call
    builds a fresh instance so every invocation sees the current
    environment.

    Returns:
        Settings instance with all configuration values
    """
    return Settings()
