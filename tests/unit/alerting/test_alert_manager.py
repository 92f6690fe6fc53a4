"""
Tests for Alert Manager

Tests non-fatal alert routing, delivery and rate limiting.
"""

import logging
from datetime import datetime
from unittest.mock import MagicMock, patch

import pytest

from src.alerting.alert_manager import (
    Alert,
    AlertChannel,
    AlertManager,
    AlertSeverity,
    send_alert,
)


@pytest.fixture
def mock_requests():
    """Mock requests for Slack webhook testing."""
    with patch("src.alerting.alert_manager.requests") as mock_req:
        mock_response = MagicMock()
        mock_response.status_code = 200
        mock_req.post.return_value = mock_response
        yield mock_req


@pytest.fixture
def manager(test_config):
    """AlertManager with dev config and log-only routing."""
    return AlertManager(test_config)


@pytest.fixture
def slack_config(test_config):
    """Dev config with a Slack webhook configured."""
    test_config.slack_webhook_url = "https://hooks.slack.com/test"
    return test_config


# ---------------------------------------------------------------------------
# Alert dataclass
# ---------------------------------------------------------------------------


def test_alert_initialization():
    """Test Alert dataclass initialization."""
    alert = Alert(
        title="Invalid timestamp format",
        message="Could not parse 'bad'",
        severity=AlertSeverity.WARNING,
        dataset="timestamps",
    )

    assert alert.title == "Invalid timestamp format"
    assert alert.message == "Could not parse 'bad'"
    assert alert.severity == AlertSeverity.WARNING
    assert alert.dataset == "timestamps"
    assert isinstance(alert.timestamp, datetime)
    assert alert.timestamp.tzinfo is not None


def test_alert_optional_fields():
    """Test Alert optional fields default to empty values."""
    alert = Alert(title="Test", message="Msg", severity=AlertSeverity.INFO)

    assert alert.dataset is None
    assert alert.metadata == {}


def test_alert_key():
    """Test the deduplication key combines severity, title and dataset."""
    alert = Alert(title="T", message="M", severity=AlertSeverity.WARNING, dataset="traffic_grid")
    assert alert.key == "warning:T:traffic_grid"


def test_alert_to_dict():
    """Test Alert to_dict conversion."""
    alert = Alert(
        title="Test",
        message="Message",
        severity=AlertSeverity.INFO,
        dataset="traffic_grid",
        metadata={"rows": 3},
    )

    alert_dict = alert.to_dict()

    assert alert_dict["title"] == "Test"
    assert alert_dict["severity"] == "info"
    assert alert_dict["dataset"] == "traffic_grid"
    assert alert_dict["metadata"] == {"rows": 3}
    assert "timestamp" in alert_dict


def test_alert_severity_values():
    """Test AlertSeverity enum values."""
    assert AlertSeverity.INFO == "info"
    assert AlertSeverity.WARNING == "warning"
    assert AlertSeverity.CRITICAL == "critical"


def test_alert_channel_values():
    """Test AlertChannel enum values."""
    assert AlertChannel.LOG == "log"
    assert AlertChannel.SLACK == "slack"
    assert {channel.value for channel in AlertChannel} == {"log", "slack"}


# ---------------------------------------------------------------------------
# AlertManager initialisation
# ---------------------------------------------------------------------------


def test_alert_manager_initialization(test_config):
    """Test AlertManager initialization."""
    manager = AlertManager(test_config)

    assert manager.config is test_config
    assert manager.max_alerts_per_hour == test_config.alerting.rate_limit.max_alerts_per_hour
    assert manager.cooldown_minutes == test_config.alerting.rate_limit.cooldown_minutes


def test_alert_manager_default_config():
    """Test AlertManager uses default config when none provided."""
    manager = AlertManager()
    assert manager.config is not None


# ---------------------------------------------------------------------------
# Sending alerts
# ---------------------------------------------------------------------------


def test_send_alert_to_log(manager, caplog):
    """Test sending alert to log channel."""
    with caplog.at_level(logging.INFO, logger="src.alerting.alert_manager"):
        success = manager.send_alert(
            title="Test Alert",
            message="Test message",
            severity="info",
            channels=["log"],
        )

    assert success
    assert "ALERT: Test Alert - Test message" in caplog.text


def test_send_alert_with_metadata(manager):
    """Test sending alert with additional metadata."""
    success = manager.send_alert(
        title="Meta Alert",
        message="Alert with meta",
        severity="warning",
        dataset="traffic_grid",
        metadata={"rows": 1000},
        channels=["log"],
    )

    assert success


def test_send_alert_to_slack(slack_config, mock_requests):
    """Test sending alert to Slack."""
    manager = AlertManager(slack_config)

    success = manager.send_alert(
        title="Test Alert",
        message="Test message",
        severity="warning",
        dataset="timestamps",
        channels=["slack"],
    )

    assert success
    mock_requests.post.assert_called_once()
    payload = mock_requests.post.call_args.kwargs["json"]
    attachment = payload["attachments"][0]
    assert attachment["title"] == "Test Alert"
    assert attachment["footer"] == "Jaipur Traffic Grid"
    assert {"title": "Dataset", "value": "timestamps", "short": True} in attachment["fields"]


def test_send_alert_slack_error_is_reported(slack_config, mock_requests):
    """Test a failing webhook returns False instead of raising."""
    mock_requests.post.return_value.status_code = 500
    manager = AlertManager(slack_config)

    success = manager.send_alert(
        title="Broken Webhook",
        message="Test message",
        severity="critical",
        channels=["log", "slack"],
    )

    assert success is False


def test_send_alert_slack_no_webhook(manager, mock_requests, monkeypatch):
    """Test Slack send skips gracefully when no webhook URL."""
    monkeypatch.delenv("SLACK_WEBHOOK_URL", raising=False)
    manager.config.slack_webhook_url = None

    success = manager.send_alert(
        title="Slack No Webhook",
        message="No URL configured",
        severity="warning",
        channels=["slack"],
    )

    assert success
    mock_requests.post.assert_not_called()


def test_send_alert_all_severities(manager):
    """Test alert sending for all severity levels."""
    for sev in ("info", "warning", "critical"):
        success = manager.send_alert(
            title=f"{sev} Alert",
            message="Test",
            severity=sev,
            channels=["log"],
        )
        assert success, f"Failed for severity: {sev}"


def test_send_alert_invalid_severity(manager):
    """Test an unknown severity is rejected."""
    with pytest.raises(ValueError):
        manager.send_alert(title="Bad", message="Msg", severity="urgent")


# ---------------------------------------------------------------------------
# Channel routing
# ---------------------------------------------------------------------------


def test_send_alert_default_routing(manager):
    """Test dev routing sends everything to the log only."""
    assert manager._get_channels_for_severity(AlertSeverity.INFO) == ["log"]
    assert manager._get_channels_for_severity(AlertSeverity.WARNING) == ["log"]
    assert manager._get_channels_for_severity(AlertSeverity.CRITICAL) == ["log"]


def test_base_routing_includes_slack():
    """Test built-in routing escalates warnings to Slack."""
    from src.shared.config import AlertRoutingConfig

    routing = AlertRoutingConfig()
    assert routing.info == ["log"]
    assert "slack" in routing.warning
    assert "slack" in routing.critical


def test_send_to_log_all_severities(manager):
    """Test log channel handles all severity levels."""
    for sev in [AlertSeverity.INFO, AlertSeverity.WARNING, AlertSeverity.CRITICAL]:
        alert = Alert(title="Test", message="Msg", severity=sev)
        manager._send_to_log(alert)  # Should not raise


# ---------------------------------------------------------------------------
# Rate limiting
# ---------------------------------------------------------------------------


def test_rate_limiting(test_config):
    """Test alert rate limiting."""
    test_config.alerting.rate_limit.cooldown_minutes = 0
    test_config.alerting.rate_limit.max_alerts_per_hour = 2
    manager = AlertManager(test_config)

    results = [
        manager.send_alert(
            title="Same Alert",
            message="Same message",
            severity="info",
            dataset="test",
            channels=["log"],
        )
        for _ in range(3)
    ]

    assert results == [True, True, False]


def test_should_send_alert_first_time(manager):
    """Test _should_send_alert returns True for a new alert."""
    alert = Alert(title="New", message="First time", severity=AlertSeverity.INFO)
    assert manager._should_send_alert(alert) is True


def test_should_send_alert_after_record(test_config):
    """Test _should_send_alert respects cooldown after recording."""
    test_config.alerting.rate_limit.cooldown_minutes = 60
    manager = AlertManager(test_config)

    alert = Alert(
        title="Cooldown Test",
        message="Msg",
        severity=AlertSeverity.WARNING,
        dataset="x",
    )
    manager._record_alert(alert)

    assert manager._should_send_alert(alert) is False


def test_cooldown_is_per_key(test_config):
    """Test a different dataset is not suppressed by another's cooldown."""
    test_config.alerting.rate_limit.cooldown_minutes = 60
    manager = AlertManager(test_config)

    manager._record_alert(Alert(title="T", message="M", severity=AlertSeverity.INFO, dataset="a"))

    other = Alert(title="T", message="M", severity=AlertSeverity.INFO, dataset="b")
    assert manager._should_send_alert(other) is True


# ---------------------------------------------------------------------------
# Alert history
# ---------------------------------------------------------------------------


def test_alert_history_tracking(manager):
    """Test that alert history is tracked."""
    alert = Alert(
        title="Test",
        message="Message",
        severity=AlertSeverity.INFO,
        dataset="test",
    )

    manager._record_alert(alert)

    assert alert.key in manager._alert_history


def test_alert_history_count_increments(manager):
    """Test alert history count increments on repeated recording."""
    alert = Alert(title="Repeat", message="Msg", severity=AlertSeverity.INFO, dataset="d")
    manager._record_alert(alert)
    manager._record_alert(alert)

    assert manager._alert_history[alert.key].count_in_window == 2


# ---------------------------------------------------------------------------
# Timestamp fallback summary
# ---------------------------------------------------------------------------


def test_send_timestamp_fallback_alert(manager, caplog):
    """Test the summary alert for readings stamped with the current time."""
    with caplog.at_level(logging.WARNING, logger="src.alerting.alert_manager"):
        success = manager.send_timestamp_fallback_alert(
            dataset="traffic_grid",
            fallback_count=2,
            total_count=10,
            samples=["'bad'", "'2024-13-45'"],
        )

    assert success
    assert "Timestamp fallbacks: traffic_grid" in caplog.text
    assert "2 of 10 readings" in caplog.text


def test_send_timestamp_fallback_alert_truncates_samples(manager, mocker):
    """Test only the first five samples are listed in the message."""
    send = mocker.spy(manager, "send_alert")
    samples = [f"'bad-{i}'" for i in range(8)]

    manager.send_timestamp_fallback_alert(
        dataset="traffic_grid",
        fallback_count=8,
        total_count=8,
        samples=samples,
        severity="critical",
    )

    kwargs = send.call_args.kwargs
    assert kwargs["severity"] == "critical"
    assert "'bad-4'" in kwargs["message"]
    assert "'bad-5'" not in kwargs["message"]
    assert "... and 3 more" in kwargs["message"]
    assert kwargs["metadata"]["samples"] == samples


# ---------------------------------------------------------------------------
# Convenience function
# ---------------------------------------------------------------------------


def test_convenience_send_alert_function(test_config):
    """Test convenience send_alert function."""
    success = send_alert(
        title="Test",
        message="Message",
        severity="info",
        config=test_config,
        metadata={"source": "test"},
        channels=["log"],
    )
    assert success


def test_convenience_send_alert_default_config():
    """Test convenience send_alert uses default config when none passed."""
    success = send_alert(
        title="Default config test",
        message="No config passed",
        severity="info",
    )
    assert success
