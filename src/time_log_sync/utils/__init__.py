"""Utility modules for time log synchronizer."""

from time_log_sync.utils.logging import get_logger, setup_logging
from time_log_sync.utils.storage import StorageManager

__all__ = ["get_logger", "setup_logging", "StorageManager"]
