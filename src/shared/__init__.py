from src.shared.config import Settings, get_config, reload_config
from src.shared.log_config import configure_logging

__all__ = [
    "get_config",
    "reload_config",
    "Settings",
    "configure_logging",
]
