"""Pytest configuration and shared fixtures."""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from usage_monitor.clients.regional_client_factory import RegionalClientFactory
from usage_monitor.config import Settings
from usage_monitor.models.enums import ResourceCategory
from usage_monitor.models.resource import BillingTag, ResourceRecord

FIXED_NOW = datetime(2025, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


def client_error(code: str, operation: str = "Operation", message: str = "error") -> ClientError:
    """Build a botocore ClientError with the given error code."""
    return ClientError({"Error": {"Code": code, "Message": message}}, operation)


class FakeBoto:
    """
    Stand-in for boto3.client handing out one MagicMock per (region, service).

    Passed as ``client_builder`` so AWSClient runs its real call and
    pagination logic against mocked SDK methods. Every SDK method a test
    reaches must be configured on the mock.
    """

    def __init__(self):
        self.clients: dict[tuple[str, str], MagicMock] = {}

    def __call__(self, service_name, config=None, **kwargs):
        region = config.region_name if config is not None else "us-east-1"
        return self.client(service_name, region)

    def client(self, service_name: str, region: str = "us-east-1") -> MagicMock:
        key = (region, service_name)
        if key not in self.clients:
            self.clients[key] = MagicMock(name=f"{service_name}@{region}")
        return self.clients[key]


@pytest.fixture
def make_client_error():
    return client_error


@pytest.fixture
def fixed_now():
    return FIXED_NOW


@pytest.fixture
def clock():
    return lambda: FIXED_NOW


@pytest.fixture
def fake_boto():
    return FakeBoto()


@pytest.fixture
def client_factory(fake_boto):
    return RegionalClientFactory(default_region="us-east-1", client_builder=fake_boto)


# =============================================================================
# Environment and Configuration Fixtures
# =============================================================================

@pytest.fixture
def aws_credentials(monkeypatch):
    """Fake credentials so moto never reaches a real account."""
    test_vars = {
        "AWS_ACCESS_KEY_ID": "testing",
        "AWS_SECRET_ACCESS_KEY": "testing",
        "AWS_SECURITY_TOKEN": "testing",
        "AWS_SESSION_TOKEN": "testing",
        "AWS_DEFAULT_REGION": "us-east-1",
    }
    for key, value in test_vars.items():
        monkeypatch.setenv(key, value)
    return test_vars


@pytest.fixture
def test_settings():
    """Settings with explicit values, independent of the environment."""
    return Settings(
        _env_file=None,
        LOG_LEVEL="DEBUG",
        AWS_REGION="us-east-1",
        DEFAULT_REGIONS="us-east-1,eu-west-1",
        S3_BUCKET="usage-reports",
        SLACK_WEBHOOK_URL="https://hooks.slack.test/services/T000/B000/XXX",
        AGED_WHITELIST="shared-datasets",
        LONG_RUNNING_WHITELIST="build-runner",
    )


# =============================================================================
# Test Data Fixtures
# =============================================================================

@pytest.fixture
def make_record():
    """Factory building ResourceRecord instances with sensible defaults."""

    def _make(
        identifier: str = "vol-1",
        category: ResourceCategory = ResourceCategory.VOLUME,
        region: str = "us-east-1",
        created_at: datetime = datetime(2024, 1, 1, tzinfo=timezone.utc),
        billing_tag: BillingTag | None = None,
        **kwargs,
    ) -> ResourceRecord:
        return ResourceRecord(
            category=category,
            identifier=identifier,
            region=region,
            created_at=created_at,
            billing_tag=billing_tag or BillingTag.present("team-a"),
            **kwargs,
        )

    return _make


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow running"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
    config.addinivalue_line(
        "markers", "property: marks tests as property-based tests"
    )


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "property" in str(item.fspath):
            item.add_marker(pytest.mark.property)
