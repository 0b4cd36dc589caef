"""Task domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from uuid import UUID, uuid4


class TaskStatus(StrEnum):
    """Lifecycle states a task can be in."""

    PENDING = "pending"
    COMPLETED = "completed"


@dataclass
class Task:
    """Domain entity for a Task.

    ``subtasks`` is never persisted. Repositories return it empty; the task
    service and tree assembler populate it from ``parent_task_id`` lookups.
    """

    user_id: UUID
    title: str
    id: UUID = field(default_factory=uuid4)
    parent_task_id: UUID | None = None
    description: str | None = None
    status: TaskStatus = TaskStatus.PENDING
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)
    subtasks: list["Task"] = field(default_factory=list)

    def apply_patch(
        self,
        title: str | None = None,
        description: str | None = None,
        status: TaskStatus | None = None,
    ) -> None:
        """Merge a partial update.

        A field is overwritten only when it is supplied and non-empty, so an
        empty string leaves the stored value untouched instead of clearing it.
        """
        if title:
            self.title = title
        if description:
            self.description = description
        if status:
            self.status = status
        self.updated_at = datetime.utcnow()

    def __post_init__(self) -> None:
        """Ensure updated_at is always at least as recent as created_at."""
        if self.updated_at < self.created_at:
            self.updated_at = self.created_at
