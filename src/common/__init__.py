# Common utilities and shared modules
"""
Shared components used by the forecast engine:
- Project configuration (pydantic settings, YAML overrides, .env)
- Logging configuration
"""

from .config import settings, Settings, PROJECT_ROOT, get_data_gov_api_key
from .logging import setup_logging

__all__ = [
    "settings",
    "Settings",
    "PROJECT_ROOT",
    "get_data_gov_api_key",
    "setup_logging",
]
