"""Task repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.task import Task, TaskStatus


class ITaskRepository(Protocol):
    """Repository interface for Task entities."""

    async def get(self, id: UUID) -> Task | None:
        """Get a task by ID."""
        ...

    async def get_roots(self) -> list[Task]:
        """Get every task without a parent, across all owners."""
        ...

    async def get_by_owner(
        self, user_id: UUID, status: TaskStatus | None = None
    ) -> list[Task]:
        """Get all tasks owned by a user (flat), optionally by status."""
        ...

    async def get_children(self, parent_id: UUID) -> list[Task]:
        """Get all direct children of a task."""
        ...

    async def get_children_batch(self, parent_ids: list[UUID]) -> dict[UUID, list[Task]]:
        """Get direct children for several tasks in a single query.

        Returns a mapping of parent_id -> children; parents without children
        are absent from the mapping.
        """
        ...

    async def create(self, task: Task) -> Task:
        """Create a new task.

        Raises:
            ValidationError: If the title is empty.
            TaskNotFoundError: If ``parent_task_id`` does not exist.
        """
        ...

    async def update(self, task: Task) -> Task:
        """Persist title, description and status of an existing task."""
        ...

    async def set_status(self, id: UUID, status: TaskStatus) -> Task:
        """Set the status of a task unconditionally."""
        ...

    async def delete(self, id: UUID) -> None:
        """Delete a task and all of its descendants."""
        ...
