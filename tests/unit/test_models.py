"""Tests for the data models."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from usage_monitor.models import (
    AgeThreshold,
    BillingTag,
    InventoryResult,
    MonitorEvent,
    RegionalInventory,
    ResourceCategory,
    ResourceRecord,
    TagState,
)
from usage_monitor.models.enums import AgeUnit


class TestBillingTag:
    def test_states(self):
        assert BillingTag.present("a").is_present
        assert BillingTag.unresolvable().is_unresolvable
        assert BillingTag.absent().state == TagState.ABSENT

    def test_display(self):
        assert BillingTag.present("team-a").display() == "team-a"
        assert BillingTag.absent().display() == ""
        assert BillingTag.unresolvable().display() == ""

    def test_present_needs_value(self):
        with pytest.raises(ValidationError):
            BillingTag(state=TagState.PRESENT)

    def test_absent_cannot_carry_value(self):
        with pytest.raises(ValidationError):
            BillingTag(state=TagState.ABSENT, value="x")


class TestResourceRecord:
    def test_naive_created_at_is_utc(self, make_record):
        record = make_record(created_at=datetime(2024, 1, 1, 9, 0))
        assert record.created_at.tzinfo == timezone.utc

    def test_cost_per_month(self, make_record):
        assert make_record(cost_rate_per_hour=0.5).cost_per_month == 360.0
        assert make_record().cost_per_month is None

    def test_display_name_falls_back_to_identifier(self, make_record):
        assert make_record("vol-1").display_name == "vol-1"
        assert make_record("vol-1", name="data").display_name == "data"

    def test_record_key(self, make_record):
        assert make_record("vol-1", region="eu-west-1").record_key == (
            "volume", "eu-west-1", "vol-1"
        )

    def test_negative_rate_rejected(self, make_record):
        with pytest.raises(ValidationError):
            make_record(cost_rate_per_hour=-1.0)

    def test_default_billing_tag_is_absent(self):
        record = ResourceRecord(
            category=ResourceCategory.BUCKET,
            identifier="logs",
            region="us-east-1",
            created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        )
        assert record.billing_tag.state == TagState.ABSENT


class TestAgeThreshold:
    def test_describe(self):
        assert AgeThreshold(amount=2, unit=AgeUnit.YEARS).describe() == "2 years"
        assert AgeThreshold(amount=1, unit=AgeUnit.DAYS).describe() == "1 day"


class TestInventoryResult:
    def test_regions_and_first_occurrence_wins(self, make_record):
        first = make_record("vol-1", name="first")
        again = make_record("vol-1", name="again")
        other_region = make_record("vol-1", region="eu-west-1")
        result = InventoryResult(
            regional_results=[
                RegionalInventory(region="us-east-1", success=True, records=[first, again]),
                RegionalInventory(region="eu-west-1", success=True, records=[other_region]),
                RegionalInventory(region="sa-east-1", success=False, error_message="denied"),
            ]
        )

        assert [r.name for r in result.records] == ["first", None]
        assert result.successful_regions == ["us-east-1", "eu-west-1"]
        assert result.failed_regions == ["sa-east-1"]


class TestMonitorEvent:
    def test_camel_case_keys(self):
        event = MonitorEvent.model_validate(
            {"writeToS3": True, "postToSlack": True, "putMpuRules": True}
        )
        assert (event.write_to_s3, event.post_to_slack, event.put_mpu_rules) == (True, True, True)

    def test_snake_case_keys(self):
        assert MonitorEvent.model_validate({"write_to_s3": True}).write_to_s3 is True

    def test_defaults(self):
        event = MonitorEvent.model_validate({})
        assert event.regions is None
        assert event.families is None
        assert not (event.write_to_s3 or event.post_to_slack or event.put_mpu_rules)

    def test_blank_entries_dropped(self):
        event = MonitorEvent.model_validate({"regions": [" us-east-1 ", ""], "families": [""]})
        assert event.regions == ["us-east-1"]
        assert event.families is None

    def test_unknown_keys_ignored(self):
        assert MonitorEvent.model_validate({"source": "aws.events"}).regions is None
