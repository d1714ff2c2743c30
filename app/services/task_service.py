"""Task assignment and comment threads."""

from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError
from app.database.models import Task, TaskComment
from app.repositories.task_repository import TaskCommentRepository, TaskRepository
from app.schemas.enums import TaskStatus
from app.schemas.task import TaskCommentCreate, TaskCreate, TaskUpdate
from app.utils.logging import get_logger

LOGGER = get_logger(__name__)


class TaskService:
    def __init__(self, db_session: AsyncSession):
        self.repository = TaskRepository(db_session)
        self.comments = TaskCommentRepository(db_session)

    async def list_tasks(self, user_id: Optional[UUID] = None, status: Optional[str] = None) -> List[Task]:
        return await self.repository.list_tasks(user_id=user_id, status=status)

    async def get_task(self, task_id: UUID) -> Task:
        task = await self.repository.get_with_comments(task_id)
        if not task:
            raise NotFoundError(f"Task {task_id} not found")
        return task

    async def create_task(self, data: TaskCreate, creator_id: Optional[UUID] = None) -> Task:
        task = await self.repository.create(
            title=data.title,
            description=data.description,
            task_type=data.task_type,
            assigned_to=data.assigned_to,
            assigned_by=data.assigned_by or creator_id,
            due_date=data.due_date,
            priority=data.priority.value,
            status=TaskStatus.PENDING.value,
        )
        LOGGER.info(f"Created task {task.id}", extra={"assigned_to": str(data.assigned_to)})
        return task

    async def update_task(self, task_id: UUID, data: TaskUpdate) -> Task:
        """Apply a partial update.

        Completing a task without an explicit completion date stamps it now.
        """
        changes = data.model_dump(exclude_unset=True)
        for key in ("status", "priority"):
            if changes.get(key) is not None:
                changes[key] = changes[key].value if hasattr(changes[key], "value") else changes[key]

        if changes.get("status") == TaskStatus.COMPLETED.value and not changes.get("completed_date"):
            changes["completed_date"] = datetime.now(timezone.utc)

        task = await self.repository.update(task_id, **changes)
        if not task:
            raise NotFoundError(f"Task {task_id} not found")
        return task

    async def delete_task(self, task_id: UUID) -> None:
        if not await self.repository.delete(task_id):
            raise NotFoundError(f"Task {task_id} not found")

    async def add_comment(self, task_id: UUID, data: TaskCommentCreate, author_id: Optional[UUID] = None) -> TaskComment:
        if not await self.repository.get_by_id(task_id):
            raise NotFoundError(f"Task {task_id} not found")
        return await self.comments.create(
            task_id=task_id,
            user_id=data.user_id or author_id,
            comment=data.comment,
        )
