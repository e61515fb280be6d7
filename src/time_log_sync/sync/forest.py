"""Indexed view of the TimeCamp task hierarchy."""

from collections.abc import Iterable

from time_log_sync.errors import TaskResolutionError
from time_log_sync.timecamp.models import TimeCampTask

PATH_SEPARATOR = " - "


class TaskForest:
    """Read-only index of tasks by id and by (name, parent id)."""

    def __init__(self, tasks: Iterable[TimeCampTask]) -> None:
        self._by_id: dict[int, TimeCampTask] = {}
        self._by_name: dict[tuple[str, int], list[TimeCampTask]] = {}
        for task in tasks:
            self._by_id[task.task_id] = task
            self._by_name.setdefault((task.name, task.parent_id), []).append(task)

    def __len__(self) -> int:
        return len(self._by_id)

    def get(self, task_id: int) -> TimeCampTask:
        """Get a task by id.

        Raises:
            TaskResolutionError: If no task has that id.
        """
        try:
            return self._by_id[task_id]
        except KeyError:
            raise TaskResolutionError(f"Task {task_id} not found in TimeCamp") from None

    def find_child(self, name: str, parent_id: int) -> TimeCampTask:
        """Get the single task with a name directly under a parent.

        Args:
            name: Task name.
            parent_id: Parent task id, 0 for root tasks.

        Raises:
            TaskResolutionError: If no task or more than one task matches.
        """
        matches = self._by_name.get((name, parent_id), [])
        if not matches:
            raise TaskResolutionError(f"No task named '{name}' under parent {parent_id}")
        if len(matches) > 1:
            ids = ", ".join(str(t.task_id) for t in matches)
            raise TaskResolutionError(
                f"Ambiguous task name '{name}' under parent {parent_id} (tasks {ids})"
            )
        return matches[0]

    def find_path(self, path: str) -> TimeCampTask:
        """Get the task at a "Root - Child - Leaf" path.

        Raises:
            TaskResolutionError: If any segment is missing or ambiguous.
        """
        if not path:
            raise TaskResolutionError("Empty task path")

        parent_id = 0
        for name in path.split(PATH_SEPARATOR):
            task = self.find_child(name, parent_id)
            parent_id = task.task_id
        return task

    def path_of(self, task_id: int) -> str:
        """Get the "Root - Child - Leaf" path of a task.

        Raises:
            TaskResolutionError: If the task or one of its ancestors is
                missing, or the parent links form a cycle.
        """
        names: list[str] = []
        seen: set[int] = set()
        while task_id != 0:
            if task_id in seen:
                raise TaskResolutionError(f"Task {task_id} is its own ancestor")
            seen.add(task_id)
            task = self.get(task_id)
            names.insert(0, task.name)
            task_id = task.parent_id
        return PATH_SEPARATOR.join(names)
