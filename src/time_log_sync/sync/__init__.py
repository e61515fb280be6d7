"""Reconciliation of the local time log with TimeCamp."""

from time_log_sync.sync.cache import ReferenceData, ReferenceDataCache
from time_log_sync.sync.engine import SyncEngine, SyncPlan
from time_log_sync.sync.forest import TaskForest
from time_log_sync.sync.join import full_outer_join
from time_log_sync.sync.resolver import ServiceMapping, TaskResolver

__all__ = [
    "ReferenceData",
    "ReferenceDataCache",
    "ServiceMapping",
    "SyncEngine",
    "SyncPlan",
    "TaskForest",
    "TaskResolver",
    "full_outer_join",
]
