"""CSV backed local time log."""

import csv
import logging
from datetime import date, datetime, time
from pathlib import Path

from pydantic import ValidationError

from time_log_sync.errors import TimeLogError
from time_log_sync.timelog.models import TimeLogEntry

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("Date", "Start", "End", "Service", "Description")
TIME_FORMATS = ("%H:%M", "%H:%M:%S")


class CsvTimeLog:
    """Reads time log entries from a CSV file.

    The file needs a header row with Date, Start, End, Service and
    Description columns. An optional Client column lets one log hold work
    for several clients; rows with an empty Client always belong to the log.
    """

    def __init__(self, path: Path, client: str | None = None) -> None:
        """Initialize the time log.

        Args:
            path: Path of the CSV file.
            client: Only keep rows whose Client column is empty or equal to this.
        """
        self.path = path
        self.client = client

    def get_entries(self, from_date: date, to_date: date) -> list[TimeLogEntry]:
        """Read entries dated within a range.

        Args:
            from_date: First day of the range (inclusive).
            to_date: Last day of the range (inclusive).

        Returns:
            Entries in file order.

        Raises:
            TimeLogError: If the file is missing or malformed.
        """
        try:
            with open(self.path, newline="", encoding="utf-8-sig") as f:
                reader = csv.DictReader(f)
                self._check_header(reader.fieldnames)
                entries = []
                for row in reader:
                    entry = self._parse_row(row, reader.line_num)
                    if entry is not None and from_date <= entry.date <= to_date:
                        entries.append(entry)
        except OSError as e:
            raise TimeLogError(f"Cannot read time log {self.path}: {e}") from e

        logger.info(f"Read {len(entries)} entries from {self.path}")
        return entries

    def _check_header(self, fieldnames: list[str] | None) -> None:
        missing = [c for c in REQUIRED_COLUMNS if not fieldnames or c not in fieldnames]
        if missing:
            raise TimeLogError(
                f"Unexpected header row in {self.path}. "
                f"Expected: {', '.join(REQUIRED_COLUMNS)}"
            )

    def _parse_row(self, row: dict[str, str | None], line_num: int) -> TimeLogEntry | None:
        client = (row.get("Client") or "").strip()
        if self.client and client and client != self.client:
            return None

        try:
            return TimeLogEntry(
                date=date.fromisoformat((row["Date"] or "").strip()),
                start=_parse_time(row["Start"]),
                end=_parse_time(row["End"]),
                service=(row["Service"] or "").strip(),
                description=row["Description"] or "",
            )
        except (ValueError, ValidationError) as e:
            raise TimeLogError(f"{self.path}, line {line_num}: {e}") from e


def _parse_time(value: str | None) -> time:
    """Parse a time of day such as 9:00, 09:00 or 09:00:30."""
    text = (value or "").strip()
    for fmt in TIME_FORMATS:
        try:
            return datetime.strptime(text, fmt).time()
        except ValueError:
            continue
    raise ValueError(f"Invalid time '{text}'. Expected format HH:mm")
