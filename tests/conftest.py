"""
Jaipur Traffic Grid - Pytest Configuration and Fixtures

Shared fixtures for all tests:
- Configuration fixtures
- Fixed clocks
- Mock fixtures for external services
"""

import os
from collections.abc import Generator
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import pytest

# Set test environment
os.environ["TG_ENVIRONMENT"] = "dev"

# =============================================================================
# Path Fixtures
# =============================================================================


@pytest.fixture
def project_root() -> Path:
    """Get the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def configs_dir(project_root: Path) -> Path:
    """Get the configs directory."""
    return project_root / "configs"


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture
def test_config() -> Any:
    """Get a private copy of the dev configuration, safe to mutate."""
    from src.shared.config import get_config, reload_config

    # Ensure fresh config for tests
    reload_config("dev")
    return get_config("dev").model_copy(deep=True)


@pytest.fixture
def linear_grid_config() -> Any:
    """A small grid with equal degree steps: 4 columns x 2 rows over 2 x 1 degrees."""
    from src.shared.config import BoundaryConfig, CornerConfig, DimensionsConfig, GridConfig

    return GridConfig(
        boundary=BoundaryConfig(
            north_west=CornerConfig(lat=1.0, lng=0.0),
            south_east=CornerConfig(lat=0.0, lng=2.0),
        ),
        dimensions=DimensionsConfig(columns=4, rows=2),
        extent=None,
    )


@pytest.fixture
def fixed_now() -> datetime:
    """Reference instant used as "now" in time-dependent tests."""
    return datetime(2026, 1, 2, 12, 0, 0, tzinfo=UTC)


@pytest.fixture
def fixed_clock(fixed_now: datetime) -> Any:
    """Clock returning `fixed_now`."""
    return lambda: fixed_now


@pytest.fixture
def sample_readings() -> list[dict[str, Any]]:
    """Raw grid readings in the shape served by the traffic worker API."""
    return [
        {"x": 7, "y": 10, "yellow": 5, "red": 12, "dark_red": 3, "ts": "2026-01-02T16:50:00.000Z"},
        {"x": 0, "y": 0, "yellow": 8, "red": 15, "dark_red": 0, "ts": "2026-01-02 15:30:00"},
        {"x": 14, "y": 20, "yellow": 20, "red": 8, "dark_red": 2, "ts": "2026-01-02T09:15:00"},
    ]


# =============================================================================
# Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_alert_manager(mocker: Any) -> Any:
    """AlertManager stand-in recording calls."""
    from src.alerting.alert_manager import AlertManager

    manager = mocker.MagicMock(spec=AlertManager)
    manager.send_alert.return_value = True
    manager.send_timestamp_fallback_alert.return_value = True
    return manager


# =============================================================================
# Cleanup Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def cleanup_env() -> Generator[None, None, None]:
    """Clean up environment variables after each test."""
    original_env = os.environ.copy()
    yield
    # Restore original environment
    os.environ.clear()
    os.environ.update(original_env)
