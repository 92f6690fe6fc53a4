"""
Jaipur Traffic Grid - Alert Manager

Non-fatal diagnostics for the dashboard core, with severity-based routing:
- Log records for every alert
- Slack webhooks for team notifications
- Rate limiting so a burst of malformed readings does not flood channels
- Alert history tracking

Nothing sent through this module is ever allowed to interrupt the caller:
delivery failures are logged and reported through the return value.

Usage:
    alert_manager = AlertManager(config)

    alert_manager.send_alert(
        title="Invalid timestamp format",
        message="Could not parse '2025-13-45 99:00'",
        severity="warning",
        dataset="timestamps",
        metadata={"raw": "2025-13-45 99:00"},
    )
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from enum import StrEnum
from typing import Any, Literal

import requests

from src.shared.config import Settings, get_config

logger = logging.getLogger(__name__)


class AlertSeverity(StrEnum):
    """Alert severity levels."""

    INFO = "info"
    WARNING = "warning"
    CRITICAL = "critical"


class AlertChannel(StrEnum):
    """Alert delivery channels."""

    LOG = "log"
    SLACK = "slack"


@dataclass
class Alert:
    """Alert message."""

    title: str
    message: str
    severity: AlertSeverity
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    dataset: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def key(self) -> str:
        """Deduplication key."""
        return f"{self.severity}:{self.title}:{self.dataset}"

    def to_dict(self) -> dict[str, Any]:
        """Convert alert to dictionary."""
        return {
            "title": self.title,
            "message": self.message,
            "severity": self.severity.value,
            "timestamp": self.timestamp.isoformat(),
            "dataset": self.dataset,
            "metadata": self.metadata,
        }


@dataclass
class AlertHistory:
    """Track alert history for rate limiting."""

    alert_key: str
    last_sent: datetime
    count_in_window: int = 1


class AlertManager:
    """
    Centralized alert management with severity-based routing.

    Routes alerts to channels based on severity (see `alerting.routing`):
    - INFO: Log only
    - WARNING: Log + Slack
    - CRITICAL: Log + Slack
    """

    def __init__(self, config: Settings | None = None):
        """
        Initialize alert manager.

        Args:
            config: Configuration object (uses default if not provided)
        """
        self.config = config or get_config()

        # Alert history for rate limiting
        self._alert_history: dict[str, AlertHistory] = {}

        self.max_alerts_per_hour = self.config.alerting.rate_limit.max_alerts_per_hour
        self.cooldown_minutes = self.config.alerting.rate_limit.cooldown_minutes

    def send_alert(
        self,
        title: str,
        message: str,
        severity: Literal["info", "warning", "critical"] = "info",
        dataset: str | None = None,
        metadata: dict[str, Any] | None = None,
        channels: list[str] | None = None,
    ) -> bool:
        """
        Send an alert through configured channels.

        Args:
            title: Alert title
            message: Alert message
            severity: Severity level (info, warning, critical)
            dataset: Associated dataset or data stream
            metadata: Additional metadata
            channels: Override default channel routing

        Returns:
            True if alert was sent, False if rate limited or a channel failed
        """
        alert = Alert(
            title=title,
            message=message,
            severity=AlertSeverity(severity),
            dataset=dataset,
            metadata=metadata or {},
        )

        if not self._should_send_alert(alert):
            logger.debug(
                f"Alert rate limited: {title}",
                extra={"title": title, "severity": severity},
            )
            return False

        if channels is None:
            channels = self._get_channels_for_severity(alert.severity)

        success = True
        for channel in channels:
            try:
                self._send_to_channel(alert, AlertChannel(channel))
            except Exception as e:
                logger.error(
                    f"Failed to send alert to {channel}: {e}",
                    extra={"channel": channel, "alert": alert.title},
                    exc_info=True,
                )
                success = False

        self._record_alert(alert)

        return success

    def send_timestamp_fallback_alert(
        self,
        dataset: str,
        fallback_count: int,
        total_count: int,
        samples: list[str],
        severity: Literal["warning", "critical"] = "warning",
    ) -> bool:
        """
        Summarize readings whose timestamps were replaced by the current time.

        Args:
            dataset: Dataset name
            fallback_count: Number of unparseable timestamps
            total_count: Number of readings processed
            samples: Raw values that failed to parse
            severity: Alert severity

        Returns:
            True if sent successfully
        """
        title = f"Timestamp fallbacks: {dataset}"
        message = (
            f"{fallback_count} of {total_count} readings in {dataset} had unparseable "
            "timestamps and were stamped with the current time:\n"
            + "\n".join(f"  - {sample}" for sample in samples[:5])
        )

        if len(samples) > 5:
            message += f"\n  ... and {len(samples) - 5} more"

        return self.send_alert(
            title=title,
            message=message,
            severity=severity,
            dataset=dataset,
            metadata={
                "fallback_count": fallback_count,
                "total_count": total_count,
                "samples": samples,
            },
        )

    # =========================================================================
    # Private Methods
    # =========================================================================

    def _should_send_alert(self, alert: Alert) -> bool:
        """Check if alert should be sent based on rate limiting."""
        now = datetime.now(UTC)

        if alert.key in self._alert_history:
            history = self._alert_history[alert.key]

            # Check cooldown period
            if now - history.last_sent < timedelta(minutes=self.cooldown_minutes):
                return False

            # Check rate limit (alerts per hour)
            window_start = now - timedelta(hours=1)
            if (
                history.last_sent > window_start
                and history.count_in_window >= self.max_alerts_per_hour
            ):
                return False

        return True

    def _record_alert(self, alert: Alert) -> None:
        """Record alert in history for rate limiting."""
        now = datetime.now(UTC)

        if alert.key in self._alert_history:
            history = self._alert_history[alert.key]

            # Reset count if outside window
            window_start = now - timedelta(hours=1)
            if history.last_sent < window_start:
                history.count_in_window = 1
            else:
                history.count_in_window += 1

            history.last_sent = now
        else:
            self._alert_history[alert.key] = AlertHistory(
                alert_key=alert.key,
                last_sent=now,
                count_in_window=1,
            )

    def _get_channels_for_severity(self, severity: AlertSeverity) -> list[str]:
        """Get default channels for a severity level."""
        routing = self.config.alerting.routing

        if severity == AlertSeverity.CRITICAL:
            return routing.critical
        elif severity == AlertSeverity.WARNING:
            return routing.warning
        else:
            return routing.info

    def _send_to_channel(self, alert: Alert, channel: AlertChannel) -> None:
        """Send alert to a specific channel."""
        if channel == AlertChannel.LOG:
            self._send_to_log(alert)
        elif channel == AlertChannel.SLACK:
            self._send_to_slack(alert)

    def _send_to_log(self, alert: Alert) -> None:
        """Send alert to logs."""
        log_level = {
            AlertSeverity.INFO: logging.INFO,
            AlertSeverity.WARNING: logging.WARNING,
            AlertSeverity.CRITICAL: logging.CRITICAL,
        }[alert.severity]

        logger.log(
            log_level,
            f"ALERT: {alert.title} - {alert.message}",
            extra={
                "alert_severity": alert.severity.value,
                "dataset": alert.dataset,
                "metadata": alert.metadata,
            },
        )

    def _send_to_slack(self, alert: Alert) -> None:
        """Send alert to Slack via webhook."""
        webhook_url = self.config.slack_webhook_url or os.getenv("SLACK_WEBHOOK_URL")

        if not webhook_url:
            logger.warning("Slack webhook URL not configured, skipping Slack alert")
            return

        color = {
            AlertSeverity.INFO: "#36a64f",  # Green
            AlertSeverity.WARNING: "#ff9900",  # Orange
            AlertSeverity.CRITICAL: "#ff0000",  # Red
        }[alert.severity]

        payload = {
            "attachments": [
                {
                    "color": color,
                    "title": alert.title,
                    "text": alert.message,
                    "fields": [
                        {"title": "Severity", "value": alert.severity.value.upper(), "short": True},
                        {
                            "title": "Timestamp",
                            "value": alert.timestamp.strftime("%Y-%m-%d %H:%M:%S UTC"),
                            "short": True,
                        },
                    ],
                    "footer": "Jaipur Traffic Grid",
                    "ts": int(alert.timestamp.timestamp()),
                }
            ]
        }

        if alert.dataset:
            payload["attachments"][0]["fields"].append(
                {"title": "Dataset", "value": alert.dataset, "short": True}
            )

        response = requests.post(
            webhook_url,
            json=payload,
            headers={"Content-Type": "application/json"},
            timeout=10,
        )

        if response.status_code != 200:
            raise Exception(f"Slack API error: {response.status_code} - {response.text}")

        logger.info(f"Sent alert to Slack: {alert.title}")


# =============================================================================
# Convenience Functions
# =============================================================================


def send_alert(
    title: str,
    message: str,
    severity: Literal["info", "warning", "critical"] = "info",
    dataset: str | None = None,
    config: Settings | None = None,
    **kwargs: Any,
) -> bool:
    """
    Convenience function to send an alert.

    Args:
        title: Alert title
        message: Alert message
        severity: Severity level
        dataset: Associated dataset
        config: Configuration object
        kwargs: Forwarded to AlertManager.send_alert (metadata, channels)

    Returns:
        True if sent successfully
    """
    manager = AlertManager(config)
    return manager.send_alert(title, message, severity, dataset, **kwargs)
