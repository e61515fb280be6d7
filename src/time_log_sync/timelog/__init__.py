"""Local time log reading."""

from time_log_sync.timelog.csv_log import CsvTimeLog
from time_log_sync.timelog.models import TimeLogEntry

__all__ = ["CsvTimeLog", "TimeLogEntry"]
