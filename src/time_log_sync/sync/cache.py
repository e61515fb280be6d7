"""One-time cache of TimeCamp reference data."""

import asyncio
import logging
from dataclasses import dataclass

from time_log_sync.sync.forest import TaskForest
from time_log_sync.timecamp import TimeCampClient, TimeCampUser

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReferenceData:
    """Snapshot of the current user and the task hierarchy."""

    user: TimeCampUser
    tasks: TaskForest


class ReferenceDataCache:
    """Loads the current user and task forest once per instance.

    Concurrent first callers share a single load. When that load fails,
    every caller waiting on it receives the error and the next call starts
    over.
    """

    def __init__(self, client: TimeCampClient) -> None:
        self.client = client
        self._data: ReferenceData | None = None
        self._loading: asyncio.Future[ReferenceData] | None = None
        self._lock = asyncio.Lock()

    @property
    def is_initialized(self) -> bool:
        return self._data is not None

    async def ensure_initialized(self) -> ReferenceData:
        """Load reference data unless already loaded.

        Returns:
            The cached snapshot.

        Raises:
            httpx.HTTPError: If fetching the user or the tasks failed.
        """
        if self._data is not None:
            return self._data

        async with self._lock:
            if self._data is not None:
                return self._data
            if self._loading is None:
                self._loading = asyncio.ensure_future(self._load())
                self._loading.add_done_callback(_consume_exception)
            loading = self._loading

        # Shielded so a cancelled caller does not cancel the shared load
        return await asyncio.shield(loading)

    async def _load(self) -> ReferenceData:
        logger.debug("Loading TimeCamp user and tasks")
        try:
            user, tasks = await asyncio.gather(
                self.client.get_current_user(),
                self.client.get_tasks(),
            )
        except BaseException:
            self._loading = None
            raise
        logger.info(f"Loaded {len(tasks)} TimeCamp tasks for user {user.user_id}")
        self._data = ReferenceData(user=user, tasks=TaskForest(tasks))
        self._loading = None
        return self._data

    async def get_current_user(self) -> TimeCampUser:
        """Get the authenticated user, loading reference data if needed."""
        return (await self.ensure_initialized()).user

    async def get_tasks(self) -> TaskForest:
        """Get the task forest, loading reference data if needed."""
        return (await self.ensure_initialized()).tasks


def _consume_exception(fut: asyncio.Future[ReferenceData]) -> None:
    # Marks the error as retrieved when every waiter was cancelled
    if not fut.cancelled():
        fut.exception()
