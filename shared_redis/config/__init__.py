"""
Configuration management.
"""

from shared_redis.config.logging import configure_logging, get_logger, setup_logging
from shared_redis.config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings", "setup_logging", "configure_logging", "get_logger"]
