"""Recursive expansion of task hierarchies."""

from uuid import UUID

import structlog

from core.config import settings
from core.exceptions import CycleDetectedError, TaskTreeTooDeepError
from domain.entities.task import Task
from domain.repositories.task_repository import ITaskRepository


class TaskTreeAssembler:
    """Materializes the full descendant tree of tasks.

    Storage only knows ``parent_task_id``; this walks it top-down, issuing one
    ``get_children`` query per node, and fills ``Task.subtasks`` at every
    level. Each node id may be seen once per expansion and nesting may not
    exceed ``max_depth``, so corrupt data fails fast instead of recursing
    forever.
    """

    def __init__(
        self,
        max_depth: int = settings.task_tree_max_depth,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        self._max_depth = max_depth
        self._log = logger or structlog.get_logger(__name__)

    async def expand(self, tasks: ITaskRepository, task: Task) -> Task:
        """Populate ``task.subtasks`` with its complete descendant forest."""
        await self._expand(tasks, task, depth=0, visited=set())
        return task

    async def expand_forest(self, tasks: ITaskRepository, roots: list[Task]) -> list[Task]:
        """Expand each root independently, preserving order."""
        for root in roots:
            await self.expand(tasks, root)
        return roots

    async def _expand(
        self,
        tasks: ITaskRepository,
        task: Task,
        depth: int,
        visited: set[UUID],
    ) -> None:
        if task.id in visited:
            self._log.error("task_cycle_detected", task_id=str(task.id))
            raise CycleDetectedError(str(task.id))
        if depth > self._max_depth:
            self._log.error(
                "task_tree_too_deep", task_id=str(task.id), max_depth=self._max_depth
            )
            raise TaskTreeTooDeepError(str(task.id), self._max_depth)

        visited.add(task.id)

        children = await tasks.get_children(task.id)
        for child in children:
            await self._expand(tasks, child, depth + 1, visited)
        task.subtasks = children

