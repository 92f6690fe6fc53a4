"""
Jaipur Traffic Grid - Alerting System

Non-fatal diagnostics for the dashboard core:
- Severity-based routing (log, Slack)
- Rate limiting and deduplication

Components:
    - AlertManager: Main alert orchestration
"""

from src.alerting.alert_manager import (
    Alert,
    AlertChannel,
    AlertManager,
    AlertSeverity,
    send_alert,
)

__version__ = "0.1.0"

__all__ = [
    "AlertManager",
    "Alert",
    "AlertSeverity",
    "AlertChannel",
    "send_alert",
]
