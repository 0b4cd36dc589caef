"""Integration tests for the SQLAlchemy task repository."""

from collections.abc import Callable
from uuid import UUID, uuid4

import pytest
from sqlalchemy.exc import IntegrityError

from core.exceptions import PersistenceError, TaskNotFoundError, ValidationError
from domain.entities.task import Task, TaskStatus
from domain.entities.user import User
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork

UowFactory = Callable[[], SQLAlchemyUnitOfWork]


async def _create_user(uow_factory: UowFactory, email: str) -> User:
    async with uow_factory() as uow:
        user = await uow.users.create(User(name=email, email=email, password_hash="x"))
        await uow.commit()
    return user


async def _create_task(
    uow_factory: UowFactory,
    owner: User,
    title: str,
    parent: Task | None = None,
    status: TaskStatus = TaskStatus.PENDING,
) -> Task:
    async with uow_factory() as uow:
        task = await uow.tasks.create(
            Task(
                user_id=owner.id,
                title=title,
                parent_task_id=parent.id if parent else None,
                status=status,
            )
        )
        await uow.commit()
    return task


async def _get(uow_factory: UowFactory, task_id: UUID) -> Task | None:
    async with uow_factory() as uow:
        return await uow.tasks.get(task_id)


@pytest.fixture
async def owner(uow_factory: UowFactory) -> User:
    return await _create_user(uow_factory, "owner@example.com")


class TestCreate:
    @pytest.mark.asyncio
    async def test_persists_task(self, uow_factory: UowFactory, owner: User) -> None:
        created = await _create_task(uow_factory, owner, "Write docs")

        stored = await _get(uow_factory, created.id)
        assert stored is not None
        assert stored.title == "Write docs"
        assert stored.status == TaskStatus.PENDING
        assert stored.user_id == owner.id
        assert stored.parent_task_id is None

    @pytest.mark.asyncio
    async def test_blank_title_is_rejected(self, uow_factory: UowFactory, owner: User) -> None:
        with pytest.raises(ValidationError):
            await _create_task(uow_factory, owner, "   ")

    @pytest.mark.asyncio
    async def test_missing_parent_is_rejected(
        self, uow_factory: UowFactory, owner: User
    ) -> None:
        ghost = Task(user_id=owner.id, title="Never saved")

        with pytest.raises(TaskNotFoundError):
            await _create_task(uow_factory, owner, "Orphan", parent=ghost)

        async with uow_factory() as uow:
            assert await uow.tasks.get_by_owner(owner.id) == []


class TestQueries:
    @pytest.mark.asyncio
    async def test_get_unknown_returns_none(self, uow_factory: UowFactory) -> None:
        assert await _get(uow_factory, uuid4()) is None

    @pytest.mark.asyncio
    async def test_get_roots_skips_subtasks(
        self, uow_factory: UowFactory, owner: User
    ) -> None:
        other = await _create_user(uow_factory, "other@example.com")
        root = await _create_task(uow_factory, owner, "Root")
        await _create_task(uow_factory, owner, "Child", parent=root)
        other_root = await _create_task(uow_factory, other, "Other root")

        async with uow_factory() as uow:
            roots = await uow.tasks.get_roots()

        assert {t.id for t in roots} == {root.id, other_root.id}

    @pytest.mark.asyncio
    async def test_get_by_owner_is_flat_and_scoped(
        self, uow_factory: UowFactory, owner: User
    ) -> None:
        other = await _create_user(uow_factory, "other@example.com")
        root = await _create_task(uow_factory, owner, "Root")
        child = await _create_task(uow_factory, owner, "Child", parent=root)
        await _create_task(uow_factory, other, "Not mine")

        async with uow_factory() as uow:
            tasks = await uow.tasks.get_by_owner(owner.id)

        assert {t.id for t in tasks} == {root.id, child.id}
        assert all(t.subtasks == [] for t in tasks)

    @pytest.mark.asyncio
    async def test_get_by_owner_filters_status(
        self, uow_factory: UowFactory, owner: User
    ) -> None:
        done = await _create_task(uow_factory, owner, "Done", status=TaskStatus.COMPLETED)
        await _create_task(uow_factory, owner, "Open")

        async with uow_factory() as uow:
            tasks = await uow.tasks.get_by_owner(owner.id, TaskStatus.COMPLETED)

        assert [t.id for t in tasks] == [done.id]

    @pytest.mark.asyncio
    async def test_get_children_batch_groups_by_parent(
        self, uow_factory: UowFactory, owner: User
    ) -> None:
        a = await _create_task(uow_factory, owner, "A")
        b = await _create_task(uow_factory, owner, "B")
        leaf = await _create_task(uow_factory, owner, "Leaf")
        a1 = await _create_task(uow_factory, owner, "A1", parent=a)
        a2 = await _create_task(uow_factory, owner, "A2", parent=a)
        b1 = await _create_task(uow_factory, owner, "B1", parent=b)

        async with uow_factory() as uow:
            children = await uow.tasks.get_children_batch([a.id, b.id, leaf.id])

        assert {t.id for t in children[a.id]} == {a1.id, a2.id}
        assert [t.id for t in children[b.id]] == [b1.id]
        assert leaf.id not in children

    @pytest.mark.asyncio
    async def test_get_children_batch_empty(self, uow_factory: UowFactory) -> None:
        async with uow_factory() as uow:
            assert await uow.tasks.get_children_batch([]) == {}


class TestMutations:
    @pytest.mark.asyncio
    async def test_set_status(self, uow_factory: UowFactory, owner: User) -> None:
        task = await _create_task(uow_factory, owner, "Task")

        async with uow_factory() as uow:
            updated = await uow.tasks.set_status(task.id, TaskStatus.COMPLETED)
            await uow.commit()

        assert updated.status == TaskStatus.COMPLETED
        assert updated.title == "Task"
        stored = await _get(uow_factory, task.id)
        assert stored is not None
        assert stored.status == TaskStatus.COMPLETED

    @pytest.mark.asyncio
    async def test_set_status_unknown_raises(self, uow_factory: UowFactory) -> None:
        with pytest.raises(TaskNotFoundError):
            async with uow_factory() as uow:
                await uow.tasks.set_status(uuid4(), TaskStatus.COMPLETED)

    @pytest.mark.asyncio
    async def test_update_unknown_raises(self, uow_factory: UowFactory, owner: User) -> None:
        with pytest.raises(TaskNotFoundError):
            async with uow_factory() as uow:
                await uow.tasks.update(Task(user_id=owner.id, title="Never saved"))

    @pytest.mark.asyncio
    async def test_update_keeps_owner_and_parent(
        self, uow_factory: UowFactory, owner: User
    ) -> None:
        root = await _create_task(uow_factory, owner, "Root")
        child = await _create_task(uow_factory, owner, "Child", parent=root)
        child.title = "Renamed"
        child.parent_task_id = None

        async with uow_factory() as uow:
            await uow.tasks.update(child)
            await uow.commit()

        stored = await _get(uow_factory, child.id)
        assert stored is not None
        assert stored.title == "Renamed"
        assert stored.parent_task_id == root.id

    @pytest.mark.asyncio
    async def test_delete_cascades_to_all_descendants(
        self, uow_factory: UowFactory, owner: User
    ) -> None:
        root = await _create_task(uow_factory, owner, "Root")
        child = await _create_task(uow_factory, owner, "Child", parent=root)
        grandchild = await _create_task(uow_factory, owner, "Grandchild", parent=child)
        sibling = await _create_task(uow_factory, owner, "Sibling")

        async with uow_factory() as uow:
            await uow.tasks.delete(root.id)
            await uow.commit()

        for task_id in (root.id, child.id, grandchild.id):
            assert await _get(uow_factory, task_id) is None
        assert await _get(uow_factory, sibling.id) is not None

    @pytest.mark.asyncio
    async def test_delete_subtask_keeps_parent(
        self, uow_factory: UowFactory, owner: User
    ) -> None:
        root = await _create_task(uow_factory, owner, "Root")
        child = await _create_task(uow_factory, owner, "Child", parent=root)

        async with uow_factory() as uow:
            await uow.tasks.delete(child.id)
            await uow.commit()
            remaining = await uow.tasks.get_children(root.id)

        assert remaining == []
        assert await _get(uow_factory, root.id) is not None

    @pytest.mark.asyncio
    async def test_delete_unknown_raises(self, uow_factory: UowFactory) -> None:
        with pytest.raises(TaskNotFoundError):
            async with uow_factory() as uow:
                await uow.tasks.delete(uuid4())


class TestPersistenceErrors:
    @pytest.mark.asyncio
    async def test_constraint_violation_becomes_persistence_error(
        self, uow_factory: UowFactory
    ) -> None:
        """An unknown owner trips the foreign key; the transaction is rolled back."""
        task = Task(user_id=uuid4(), title="No owner")

        with pytest.raises(PersistenceError) as exc_info:
            async with uow_factory() as uow:
                await uow.tasks.create(task)
                await uow.commit()

        assert isinstance(exc_info.value.__cause__, IntegrityError)
        assert exc_info.value.status_code == 500
        assert await _get(uow_factory, task.id) is None
        async with uow_factory() as uow:
            assert await uow.tasks.get_roots() == []
