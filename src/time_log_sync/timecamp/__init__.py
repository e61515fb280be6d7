"""TimeCamp API integration."""

from time_log_sync.timecamp.client import TimeCampClient
from time_log_sync.timecamp.models import TimeCampEntry, TimeCampTask, TimeCampUser

__all__ = [
    "TimeCampClient",
    "TimeCampEntry",
    "TimeCampTask",
    "TimeCampUser",
]
