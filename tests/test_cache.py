"""Tests for the reference data cache."""

import asyncio
from unittest.mock import AsyncMock

import httpx
import pytest

from time_log_sync.sync import ReferenceDataCache, TaskForest
from time_log_sync.timecamp import TimeCampTask, TimeCampUser


class TestReferenceDataCache:
    """Test ReferenceDataCache functionality."""

    @pytest.mark.asyncio
    async def test_loads_user_and_tasks(self, cache: ReferenceDataCache) -> None:
        """Test that the first call loads both user and tasks."""
        assert cache.is_initialized is False

        data = await cache.ensure_initialized()

        assert cache.is_initialized is True
        assert data.user.user_id == "42"
        assert isinstance(data.tasks, TaskForest)
        assert len(data.tasks) == 7

    @pytest.mark.asyncio
    async def test_loads_only_once(self, cache: ReferenceDataCache, mock_client: AsyncMock) -> None:
        """Test that later calls reuse the cached snapshot."""
        first = await cache.ensure_initialized()
        await cache.get_current_user()
        await cache.get_tasks()
        second = await cache.ensure_initialized()

        assert first is second
        mock_client.get_current_user.assert_awaited_once()
        mock_client.get_tasks.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_concurrent_first_calls_share_load(
        self,
        cache: ReferenceDataCache,
        mock_client: AsyncMock,
        sample_tasks: list[TimeCampTask],
    ) -> None:
        """Test that concurrent callers wait for a single load."""

        async def slow_tasks() -> list[TimeCampTask]:
            await asyncio.sleep(0.01)
            return sample_tasks

        mock_client.get_tasks.side_effect = slow_tasks

        results = await asyncio.gather(*(cache.ensure_initialized() for _ in range(5)))

        assert all(r is results[0] for r in results)
        assert mock_client.get_current_user.await_count == 1
        assert mock_client.get_tasks.await_count == 1

    @pytest.mark.asyncio
    async def test_fetches_run_concurrently(self, cache: ReferenceDataCache, mock_client: AsyncMock) -> None:
        """Test that the user and task fetches are in flight together."""
        user_started = asyncio.Event()
        tasks_started = asyncio.Event()

        async def tasks() -> list[TimeCampTask]:
            tasks_started.set()
            await asyncio.wait_for(user_started.wait(), timeout=1)
            return []

        async def user() -> TimeCampUser:
            user_started.set()
            await asyncio.wait_for(tasks_started.wait(), timeout=1)
            return TimeCampUser(user_id="42")

        mock_client.get_tasks.side_effect = tasks
        mock_client.get_current_user.side_effect = user

        data = await cache.ensure_initialized()

        assert data.user.user_id == "42"
        assert len(data.tasks) == 0

    @pytest.mark.asyncio
    async def test_failure_propagates_to_all_waiters(
        self,
        cache: ReferenceDataCache,
        mock_client: AsyncMock,
    ) -> None:
        """Test that every waiter of a failed load gets the error."""

        async def failing_tasks() -> list[TimeCampTask]:
            await asyncio.sleep(0.01)
            raise httpx.ConnectError("connection refused")

        mock_client.get_tasks.side_effect = failing_tasks

        results = await asyncio.gather(
            *(cache.ensure_initialized() for _ in range(3)),
            return_exceptions=True,
        )

        assert all(isinstance(r, httpx.ConnectError) for r in results)
        assert mock_client.get_tasks.await_count == 1
        assert cache.is_initialized is False

    @pytest.mark.asyncio
    async def test_retries_after_failure(
        self,
        cache: ReferenceDataCache,
        mock_client: AsyncMock,
        sample_tasks: list[TimeCampTask],
    ) -> None:
        """Test that a failed load is not cached."""
        mock_client.get_tasks.side_effect = [httpx.ConnectError("connection refused"), sample_tasks]

        with pytest.raises(httpx.ConnectError):
            await cache.ensure_initialized()

        data = await cache.ensure_initialized()

        assert len(data.tasks) == 7
        assert mock_client.get_tasks.await_count == 2
        assert mock_client.get_current_user.await_count == 2

    @pytest.mark.asyncio
    async def test_retries_after_failure_with_cancelled_waiter(
        self,
        cache: ReferenceDataCache,
        mock_client: AsyncMock,
        sample_tasks: list[TimeCampTask],
    ) -> None:
        """Test that a load failing after its only waiter was cancelled is not reused."""
        started = asyncio.Event()
        gate = asyncio.Event()
        calls = 0

        async def tasks() -> list[TimeCampTask]:
            nonlocal calls
            calls += 1
            if calls == 1:
                started.set()
                await gate.wait()
                raise httpx.ConnectError("connection refused")
            return sample_tasks

        mock_client.get_tasks.side_effect = tasks

        waiter = asyncio.create_task(cache.ensure_initialized())
        await asyncio.wait_for(started.wait(), timeout=1)
        waiter.cancel()
        with pytest.raises(asyncio.CancelledError):
            await waiter

        gate.set()
        await asyncio.sleep(0.01)

        data = await cache.ensure_initialized()

        assert len(data.tasks) == 7
        assert mock_client.get_tasks.await_count == 2
