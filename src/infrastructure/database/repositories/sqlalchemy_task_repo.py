"""SQLAlchemy implementation of Task repository."""

from collections import defaultdict
from datetime import datetime
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import TaskNotFoundError, ValidationError
from domain.entities.task import Task, TaskStatus
from infrastructure.database.models import TaskModel


class SQLAlchemyTaskRepository:
    """SQLAlchemy implementation of ITaskRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> Task | None:
        """Get a task by ID."""
        model = await self._get_model(id)
        return self._to_entity(model) if model else None

    async def get_roots(self) -> list[Task]:
        """Get every root-level task (no parent), in insertion order."""
        stmt = (
            select(TaskModel)
            .where(TaskModel.parent_task_id.is_(None))
            .order_by(TaskModel.created_at)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def get_by_owner(
        self, user_id: UUID, status: TaskStatus | None = None
    ) -> list[Task]:
        """Get all tasks for a user (flat list), optionally filtered by status."""
        stmt = select(TaskModel).where(TaskModel.user_id == user_id)
        if status is not None:
            stmt = stmt.where(TaskModel.status == status)
        stmt = stmt.order_by(TaskModel.created_at)
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def get_children(self, parent_id: UUID) -> list[Task]:
        """Get all direct children of a task."""
        stmt = (
            select(TaskModel)
            .where(TaskModel.parent_task_id == parent_id)
            .order_by(TaskModel.created_at)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def get_children_batch(self, parent_ids: list[UUID]) -> dict[UUID, list[Task]]:
        """Get direct children for multiple tasks in a single query."""
        if not parent_ids:
            return {}

        stmt = (
            select(TaskModel)
            .where(TaskModel.parent_task_id.in_(parent_ids))
            .order_by(TaskModel.created_at)
        )
        result = await self._session.execute(stmt)

        children: dict[UUID, list[Task]] = defaultdict(list)
        for model in result.scalars():
            children[model.parent_task_id].append(self._to_entity(model))  # type: ignore[index]
        return dict(children)

    async def create(self, task: Task) -> Task:
        """Create a new task."""
        if not task.title or not task.title.strip():
            raise ValidationError("Title is required", field="title")

        if task.parent_task_id is not None:
            parent = await self._get_model(task.parent_task_id)
            if not parent:
                raise TaskNotFoundError(str(task.parent_task_id))

        model = self._to_model(task)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def update(self, task: Task) -> Task:
        """Update an existing task."""
        model = await self._get_model(task.id)
        if not model:
            raise TaskNotFoundError(str(task.id))

        # Owner and parent are fixed at creation
        model.title = task.title
        model.description = task.description
        model.status = task.status
        model.updated_at = task.updated_at

        await self._session.flush()
        return self._to_entity(model)

    async def set_status(self, id: UUID, status: TaskStatus) -> Task:
        """Set a task's status unconditionally."""
        model = await self._get_model(id)
        if not model:
            raise TaskNotFoundError(str(id))

        model.status = status
        model.updated_at = datetime.utcnow()

        await self._session.flush()
        return self._to_entity(model)

    async def delete(self, id: UUID) -> None:
        """Delete a task and all its descendants (cascade)."""
        model = await self._get_model(id)
        if not model:
            raise TaskNotFoundError(str(id))

        await self._session.delete(model)
        await self._session.flush()

    async def _get_model(self, id: UUID) -> TaskModel | None:
        stmt = select(TaskModel).where(TaskModel.id == id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    def _to_entity(self, model: TaskModel) -> Task:
        """Convert ORM model to domain entity."""
        return Task(
            id=model.id,
            user_id=model.user_id,
            parent_task_id=model.parent_task_id,
            title=model.title,
            description=model.description,
            status=TaskStatus(model.status),
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: Task) -> TaskModel:
        """Convert domain entity to ORM model."""
        return TaskModel(
            id=entity.id,
            user_id=entity.user_id,
            parent_task_id=entity.parent_task_id,
            title=entity.title,
            description=entity.description,
            status=entity.status,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )
