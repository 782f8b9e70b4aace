"""Tests for shared ARN utilities."""

import pytest

from usage_monitor.utils.resource_utils import arn_resource_name, extract_account_from_arn


class TestExtractAccountFromArn:
    """Test the extract_account_from_arn utility function."""

    def test_lambda_function_arn(self):
        arn = "arn:aws:lambda:us-east-1:123456789012:function:usage-monitor"
        assert extract_account_from_arn(arn) == "123456789012"

    def test_arn_without_account(self):
        # S3 bucket ARNs carry no account
        assert extract_account_from_arn("arn:aws:s3:::my-bucket") is None

    @pytest.mark.parametrize("arn", [None, "", "not-an-arn", "arn:aws:s3"])
    def test_invalid_input(self, arn):
        assert extract_account_from_arn(arn) is None


class TestArnResourceName:
    def test_cluster_name(self):
        assert arn_resource_name("arn:aws:ecs:us-east-1:123:cluster/apps") == "apps"

    def test_task_definition_keeps_revision(self):
        arn = "arn:aws:ecs:us-east-1:123:task-definition/web:3"
        assert arn_resource_name(arn) == "web:3"

    def test_no_path(self):
        assert arn_resource_name("standalone") == "standalone"
