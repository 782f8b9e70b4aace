"""Unit tests for CloudWatch logging integration."""

import logging
from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError

from usage_monitor.utils.cloudwatch_logger import (
    CloudWatchHandler,
    configure_cloudwatch_logging,
)


def _already_exists() -> ClientError:
    return ClientError(
        {"Error": {"Code": "ResourceAlreadyExistsException", "Message": "exists"}},
        "CreateLogGroup",
    )


@pytest.fixture
def root_handlers():
    """Restore the root logger handlers after the test."""
    root = logging.getLogger()
    saved = list(root.handlers)
    yield root
    root.handlers = saved


class TestCloudWatchHandler:
    """Tests for CloudWatchHandler class."""

    @patch("usage_monitor.utils.cloudwatch_logger.boto3.client")
    def test_handler_initialization(self, mock_boto_client):
        mock_boto_client.return_value = MagicMock()

        handler = CloudWatchHandler(
            log_group="/test/group",
            log_stream="test-stream",
            region="eu-west-1",
        )

        assert handler.log_group == "/test/group"
        assert handler.log_stream == "test-stream"
        mock_boto_client.assert_called_once_with("logs", region_name="eu-west-1")

    def test_handler_creates_log_group_and_stream(self):
        client = MagicMock()

        CloudWatchHandler(log_group="/test/group", log_stream="test-stream", client=client)

        client.create_log_group.assert_called_once_with(logGroupName="/test/group")
        client.create_log_stream.assert_called_once_with(
            logGroupName="/test/group",
            logStreamName="test-stream",
        )

    def test_handler_accepts_existing_group_and_stream(self):
        client = MagicMock()
        client.create_log_group.side_effect = _already_exists()
        client.create_log_stream.side_effect = _already_exists()

        handler = CloudWatchHandler(log_group="/test/group", log_stream="s", client=client)

        assert handler.client is client

    def test_handler_raises_on_other_setup_errors(self):
        client = MagicMock()
        client.create_log_group.side_effect = ClientError(
            {"Error": {"Code": "AccessDeniedException", "Message": "no"}}, "CreateLogGroup"
        )

        with pytest.raises(ClientError):
            CloudWatchHandler(log_group="/test/group", log_stream="s", client=client)

    def test_emit_puts_formatted_event(self):
        client = MagicMock()
        handler = CloudWatchHandler(log_group="/g", log_stream="s", client=client)
        handler.setFormatter(logging.Formatter("%(levelname)s %(message)s"))
        record = logging.LogRecord("test", logging.INFO, __file__, 1, "hello", None, None)

        handler.emit(record)

        kwargs = client.put_log_events.call_args.kwargs
        assert kwargs["logGroupName"] == "/g"
        assert kwargs["logEvents"][0]["message"] == "INFO hello"
        assert kwargs["logEvents"][0]["timestamp"] == int(record.created * 1000)

    def test_emit_failure_does_not_raise(self):
        client = MagicMock()
        client.put_log_events.side_effect = _already_exists()
        handler = CloudWatchHandler(log_group="/g", log_stream="s", client=client)
        record = logging.LogRecord("test", logging.INFO, __file__, 1, "hello", None, None)

        with patch.object(handler, "handleError") as handle_error:
            handler.emit(record)

        handle_error.assert_called_once_with(record)


class TestConfigureCloudWatchLogging:
    """Tests for configure_cloudwatch_logging."""

    def test_disabled_returns_none(self, root_handlers):
        before = list(root_handlers.handlers)

        assert configure_cloudwatch_logging("/g", enable=False) is None
        assert root_handlers.handlers == before

    def test_enabled_adds_handler_with_default_stream(self, root_handlers):
        client = MagicMock()

        handler = configure_cloudwatch_logging("/finops/usage-monitor", client=client)

        assert handler in root_handlers.handlers
        assert handler.log_stream == "application"

    def test_setup_failure_returns_none(self, root_handlers, capsys):
        client = MagicMock()
        client.create_log_group.side_effect = ClientError(
            {"Error": {"Code": "AccessDeniedException", "Message": "no"}}, "CreateLogGroup"
        )

        assert configure_cloudwatch_logging("/g", client=client) is None
        assert "Failed to configure CloudWatch logging" in capsys.readouterr().err
