"""Task service layer with business logic."""

from collections.abc import Callable
from uuid import UUID

import structlog

from core.exceptions import TaskNotFoundError, UserNotFoundError
from domain.entities.task import Task, TaskStatus
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.task_tree import TaskTreeAssembler


class TaskService:
    """Service layer for Task business logic.

    Tasks owned by another user are reported as not found rather than
    forbidden, so task ids of other users are not disclosed.
    """

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        tree_assembler: TaskTreeAssembler | None = None,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._log = logger or structlog.get_logger(__name__)
        self._tree = tree_assembler or TaskTreeAssembler(logger=self._log)

    async def create_task(
        self,
        owner_id: UUID,
        title: str,
        description: str | None = None,
        parent_task_id: UUID | None = None,
    ) -> Task:
        """Create a new pending task, optionally as a subtask of ``parent_task_id``."""
        async with self._uow_factory() as uow:
            owner = await uow.users.get(owner_id)
            if not owner:
                raise UserNotFoundError(str(owner_id))

            if parent_task_id:
                parent = await uow.tasks.get(parent_task_id)
                if not parent or parent.user_id != owner_id:
                    raise TaskNotFoundError(str(parent_task_id))

            task = Task(
                user_id=owner_id,
                parent_task_id=parent_task_id,
                title=title,
                description=description,
            )

            created = await uow.tasks.create(task)
            await uow.commit()

        self._log.info(
            "task_created",
            task_id=str(created.id),
            user_id=str(owner_id),
            parent_task_id=str(parent_task_id) if parent_task_id else None,
        )
        return created

    async def list_for_owner(
        self, owner_id: UUID, status: TaskStatus | None = None
    ) -> list[Task]:
        """Get every task of a user, flat, each with one level of subtasks.

        Subtasks are listed both on their own and under their parent; their
        own ``subtasks`` are left empty.
        """
        async with self._uow_factory() as uow:
            tasks = await uow.tasks.get_by_owner(owner_id, status)
            children = await uow.tasks.get_children_batch([t.id for t in tasks])

        for task in tasks:
            task.subtasks = children.get(task.id, [])
        return tasks

    async def filter_by_status(self, owner_id: UUID, status: TaskStatus) -> list[Task]:
        """Get a user's tasks with the given status, one level of subtasks each."""
        return await self.list_for_owner(owner_id, status)

    async def list_all_trees(self) -> list[Task]:
        """Get every root task, across all owners, fully expanded."""
        async with self._uow_factory() as uow:
            roots = await uow.tasks.get_roots()
            return await self._tree.expand_forest(uow.tasks, roots)

    async def get_task_tree(self, task_id: UUID, owner_id: UUID) -> Task:
        """Get one task with its complete subtree."""
        async with self._uow_factory() as uow:
            task = await self._get_owned(uow, task_id, owner_id)
            return await self._tree.expand(uow.tasks, task)

    async def update_task(
        self,
        task_id: UUID,
        owner_id: UUID,
        title: str | None = None,
        description: str | None = None,
        status: TaskStatus | None = None,
    ) -> Task:
        """Partially update a task; empty values leave fields unchanged."""
        async with self._uow_factory() as uow:
            task = await self._get_owned(uow, task_id, owner_id)
            task.apply_patch(title=title, description=description, status=status)

            updated = await uow.tasks.update(task)
            await uow.commit()

        self._log.info("task_updated", task_id=str(task_id))
        return updated

    async def mark_completed(self, task_id: UUID, owner_id: UUID) -> Task:
        """Set status to completed, whatever it was before."""
        return await self._set_status(task_id, owner_id, TaskStatus.COMPLETED)

    async def mark_pending(self, task_id: UUID, owner_id: UUID) -> Task:
        """Set status to pending, whatever it was before."""
        return await self._set_status(task_id, owner_id, TaskStatus.PENDING)

    async def delete_task(self, task_id: UUID, owner_id: UUID) -> None:
        """Delete a task and all its descendants (cascade)."""
        async with self._uow_factory() as uow:
            await self._get_owned(uow, task_id, owner_id)
            await uow.tasks.delete(task_id)
            await uow.commit()

        self._log.info("task_deleted", task_id=str(task_id))

    async def _set_status(self, task_id: UUID, owner_id: UUID, status: TaskStatus) -> Task:
        async with self._uow_factory() as uow:
            await self._get_owned(uow, task_id, owner_id)
            updated = await uow.tasks.set_status(task_id, status)
            await uow.commit()

        self._log.info("task_status_changed", task_id=str(task_id), status=status.value)
        return updated

    async def _get_owned(self, uow: IUnitOfWork, task_id: UUID, owner_id: UUID) -> Task:
        """Load a task, raising not-found if it is missing or owned by someone else."""
        task = await uow.tasks.get(task_id)
        if not task or task.user_id != owner_id:
            raise TaskNotFoundError(str(task_id))
        return task
