"""Sync engine that makes TimeCamp match the local time log."""

import logging
from collections.abc import Callable, Hashable, Iterable
from dataclasses import dataclass, field
from datetime import date

from time_log_sync.errors import DateRangeError
from time_log_sync.sync.cache import ReferenceDataCache
from time_log_sync.sync.join import full_outer_join
from time_log_sync.sync.resolver import ServiceMapping, TaskResolver
from time_log_sync.timecamp import TimeCampClient, TimeCampEntry
from time_log_sync.timelog import TimeLogEntry

logger = logging.getLogger(__name__)


@dataclass
class SyncPlan:
    """Remote changes decided by a sync run."""

    additions: list[TimeCampEntry] = field(default_factory=list)
    removals: list[TimeCampEntry] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.additions and not self.removals

    def __str__(self) -> str:
        return f"Add: {len(self.additions)}, Remove: {len(self.removals)}"


class SyncEngine:
    """Main synchronization engine."""

    def __init__(
        self,
        client: TimeCampClient,
        mapping: ServiceMapping | None = None,
        cache: ReferenceDataCache | None = None,
        key: Callable[[TimeCampEntry], Hashable] = TimeCampEntry.content_key,
    ) -> None:
        """Initialize sync engine.

        Args:
            client: TimeCamp API client.
            mapping: Service label rename table.
            cache: Reference data cache. A new one is created for the client
                when not given.
            key: Decides which remote and local entries are the same entry.
        """
        self.client = client
        self.cache = cache if cache is not None else ReferenceDataCache(client)
        self.resolver = TaskResolver(self.cache, mapping)
        self.key = key

    async def sync_entries(
        self,
        from_date: date,
        to_date: date,
        entries: Iterable[TimeLogEntry],
        dry_run: bool = False,
    ) -> SyncPlan:
        """Make TimeCamp hold exactly the given entries within a date range.

        Additions are all attempted before any removal is sent. If an
        addition fails no removal is sent.

        Args:
            from_date: First day of the range (inclusive).
            to_date: Last day of the range (inclusive).
            entries: Local entries, all dated within the range.
            dry_run: If True, only compute the plan.

        Returns:
            The additions and removals that were (or would be) sent.

        Raises:
            DateRangeError: If the range is inverted or an entry lies outside it.
            TaskResolutionError: If a service label cannot be resolved.
            EntryBatchError: If any addition or removal failed.
        """
        entries = list(entries)
        self._check_range(from_date, to_date, entries)

        logger.info(f"Syncing {len(entries)} entries from {from_date} to {to_date}")

        original = await self.client.get_entries(from_date, to_date)
        logger.info(f"Found {len(original)} TimeCamp entries")

        current = [await self.to_remote(entry) for entry in entries]

        plan = SyncPlan()
        for remote, local in full_outer_join(original, current, self.key):
            if remote is None and local is None:
                raise RuntimeError("Unexpected pairing of missing original and current entry")
            if remote is None:
                plan.additions.append(local)
            elif local is None:
                plan.removals.append(remote)

        for entry in plan.additions:
            logger.debug(f"Add: {entry.date} {entry.start}-{entry.end} {entry.name}")
        for entry in plan.removals:
            logger.debug(f"Remove: {entry.id} {entry.date} {entry.start}-{entry.end} {entry.name}")

        if dry_run:
            logger.info(f"[DRY RUN] {plan}")
            return plan

        await self.client.add_entries(plan.additions)
        await self.client.remove_entries(plan.removals)

        logger.info(f"Sync complete: {plan}")
        return plan

    async def fetch_entries(self, from_date: date, to_date: date) -> list[TimeLogEntry]:
        """Get TimeCamp entries within a date range as time log entries.

        Raises:
            TaskResolutionError: If an entry refers to an unknown task.
        """
        remote = await self.client.get_entries(from_date, to_date)
        return [await self.to_local(entry) for entry in remote]

    async def to_remote(self, entry: TimeLogEntry) -> TimeCampEntry:
        """Build the TimeCamp entry for a time log entry, without an id."""
        user = await self.cache.get_current_user()
        return TimeCampEntry(
            user_id=user.user_id,
            date=entry.date,
            start=entry.start,
            end=entry.end,
            task_id=await self.resolver.resolve_task_id(entry.service),
            name=entry.service,
            description=entry.description,
        )

    async def to_local(self, entry: TimeCampEntry) -> TimeLogEntry:
        """Build the time log entry for a TimeCamp entry."""
        return TimeLogEntry(
            date=entry.date,
            start=entry.start,
            end=entry.end,
            service=await self.resolver.resolve_service_name(entry),
            description=entry.description,
        )

    @staticmethod
    def _check_range(from_date: date, to_date: date, entries: list[TimeLogEntry]) -> None:
        if from_date > to_date:
            raise DateRangeError(f"Start date {from_date} is after end date {to_date}")

        outside = [e for e in entries if not from_date <= e.date <= to_date]
        if outside:
            raise DateRangeError(
                f"{len(outside)} time entries are outside of {from_date} - {to_date}, "
                f"first on {outside[0].date}"
            )
