from typing import Optional, List
from uuid import UUID

from sqlalchemy import select, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.database.models import Task, TaskComment
from app.repositories.base_repository import BaseRepository


class TaskRepository(BaseRepository[Task]):
    """Repository for tasks and their comment threads."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, Task)

    async def list_tasks(
        self, user_id: Optional[UUID] = None, status: Optional[str] = None
    ) -> List[Task]:
        """List tasks, newest first.

        Args:
            user_id: Only tasks assigned to or by this user
            status: Only tasks in this status

        Returns:
            Matching tasks
        """
        stmt = select(Task).order_by(Task.created_at.desc())
        if user_id is not None:
            stmt = stmt.where(or_(Task.assigned_to == user_id, Task.assigned_by == user_id))
        if status:
            stmt = stmt.where(Task.status == status)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_with_comments(self, task_id: UUID) -> Optional[Task]:
        stmt = select(Task).where(Task.id == task_id).options(selectinload(Task.comments))
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()


class TaskCommentRepository(BaseRepository[TaskComment]):
    def __init__(self, session: AsyncSession):
        super().__init__(session, TaskComment)
