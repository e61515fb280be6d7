"""Translation between time log service labels and TimeCamp tasks."""

import logging
from collections.abc import Iterable

from time_log_sync.errors import ConfigError
from time_log_sync.sync.cache import ReferenceDataCache
from time_log_sync.timecamp.models import TimeCampEntry

logger = logging.getLogger(__name__)


class ServiceMapping:
    """Bidirectional rename table between service labels and task paths.

    Labels and paths without an entry map to themselves.
    """

    def __init__(self, pairs: Iterable[tuple[str, str]] = ()) -> None:
        """Initialize the mapping.

        Args:
            pairs: (service label, task path) pairs.

        Raises:
            ConfigError: If a service label or a task path appears twice.
        """
        self._to_task: dict[str, str] = {}
        self._to_service: dict[str, str] = {}
        for service, task_path in pairs:
            if service in self._to_task:
                raise ConfigError(f"Service '{service}' is mapped more than once")
            if task_path in self._to_service:
                raise ConfigError(f"Task '{task_path}' is mapped more than once")
            self._to_task[service] = task_path
            self._to_service[task_path] = service

    def __len__(self) -> int:
        return len(self._to_task)

    def to_task_path(self, service: str) -> str:
        return self._to_task.get(service, service)

    def to_service(self, task_path: str) -> str:
        return self._to_service.get(task_path, task_path)


class TaskResolver:
    """Resolves service labels to task ids and task ids back to labels."""

    def __init__(self, cache: ReferenceDataCache, mapping: ServiceMapping | None = None) -> None:
        """Initialize the resolver.

        Args:
            cache: Source of the task forest.
            mapping: Service label rename table.
        """
        self.cache = cache
        self.mapping = mapping if mapping is not None else ServiceMapping()

    async def resolve_task_id(self, service: str) -> int:
        """Get the id of the task a service label refers to.

        Args:
            service: Service label from the time log.

        Returns:
            TimeCamp task id.

        Raises:
            TaskResolutionError: If a path segment matches no task or several.
        """
        path = self.mapping.to_task_path(service)
        tasks = await self.cache.get_tasks()
        task = tasks.find_path(path)
        logger.debug(f"Resolved service '{service}' via '{path}' to task {task.task_id}")
        return task.task_id

    async def resolve_service_name(self, entry: TimeCampEntry) -> str:
        """Get the service label for the task of a TimeCamp entry.

        Args:
            entry: TimeCamp time entry.

        Returns:
            Service label.

        Raises:
            TaskResolutionError: If the task or one of its ancestors is unknown.
        """
        tasks = await self.cache.get_tasks()
        return self.mapping.to_service(tasks.path_of(entry.task_id))
