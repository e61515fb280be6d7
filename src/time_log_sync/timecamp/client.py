"""TimeCamp API client."""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable
from datetime import date
from typing import Any

import httpx

from time_log_sync.errors import EntryBatchError
from time_log_sync.timecamp.models import TimeCampEntry, TimeCampTask, TimeCampUser

logger = logging.getLogger(__name__)


class TimeCampClient:
    """Async client for the TimeCamp third party API."""

    BASE_URL = "https://app.timecamp.com/third_party/api/"

    def __init__(
        self,
        token: str,
        base_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize TimeCamp client.

        Args:
            token: TimeCamp API token.
            base_url: API base URL. Defaults to the public TimeCamp API.
            transport: Optional httpx transport, used by tests.
        """
        if not token:
            raise ValueError("TimeCamp API token not provided")

        self.client = httpx.AsyncClient(
            base_url=base_url or self.BASE_URL,
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/json",
            },
            timeout=30.0,
            transport=transport,
        )

    async def get_entries(self, from_date: date, to_date: date) -> list[TimeCampEntry]:
        """Get time entries within a date range.

        Args:
            from_date: First day of the range (inclusive).
            to_date: Last day of the range (inclusive).

        Returns:
            List of time entries.

        Raises:
            httpx.HTTPError: If API request fails.
        """
        response = await self.client.get(
            "entries",
            params={"from": from_date.isoformat(), "to": to_date.isoformat()},
        )
        response.raise_for_status()
        return [TimeCampEntry(**item) for item in response.json()]

    async def add_entry(self, entry: TimeCampEntry) -> None:
        """Create a time entry.

        Raises:
            httpx.HTTPError: If API request fails.
        """
        response = await self.client.post("entries", json=entry.to_api_dict())
        response.raise_for_status()

    async def remove_entry(self, entry: TimeCampEntry) -> None:
        """Delete a time entry.

        The entry travels in the request body, which is how TimeCamp
        identifies what to delete.

        Raises:
            httpx.HTTPError: If API request fails.
        """
        response = await self.client.request("DELETE", "entries", json=entry.to_api_dict())
        response.raise_for_status()

    async def add_entries(self, entries: Iterable[TimeCampEntry]) -> None:
        """Create time entries concurrently.

        Raises:
            EntryBatchError: If any entry failed, after all were attempted.
        """
        await self._run_batch("add", self.add_entry, entries)

    async def remove_entries(self, entries: Iterable[TimeCampEntry]) -> None:
        """Delete time entries concurrently.

        Raises:
            EntryBatchError: If any entry failed, after all were attempted.
        """
        await self._run_batch("remove", self.remove_entry, entries)

    async def _run_batch(
        self,
        action: str,
        call: Callable[[TimeCampEntry], Awaitable[None]],
        entries: Iterable[TimeCampEntry],
    ) -> None:
        entries = list(entries)
        results = await asyncio.gather(*(call(e) for e in entries), return_exceptions=True)

        failures: list[tuple[TimeCampEntry, BaseException]] = []
        for entry, result in zip(entries, results):
            if isinstance(result, BaseException):
                logger.error(f"Failed to {action} entry {entry.date} {entry.start}-{entry.end}: {result}")
                failures.append((entry, result))

        if failures:
            raise EntryBatchError(action, failures)

    async def get_current_user(self) -> TimeCampUser:
        """Get current authenticated user.

        Raises:
            httpx.HTTPError: If API request fails.
        """
        response = await self.client.get("me")
        response.raise_for_status()
        return TimeCampUser(**response.json())

    async def get_tasks(self) -> list[TimeCampTask]:
        """List every task visible to the user.

        TimeCamp returns tasks keyed by id; only the values are kept.

        Raises:
            httpx.HTTPError: If API request fails.
        """
        response = await self.client.get("tasks")
        response.raise_for_status()
        data = response.json()

        # An account without tasks answers with [] instead of {}
        if not data:
            return []
        return [TimeCampTask(**item) for item in data.values()]

    async def aclose(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()

    async def __aenter__(self) -> "TimeCampClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Async context manager exit."""
        await self.aclose()
