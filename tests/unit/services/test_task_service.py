from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from app.core.exceptions import NotFoundError
from app.schemas.enums import TaskStatus
from app.schemas.task import TaskCommentCreate, TaskCreate, TaskUpdate
from app.services.task_service import TaskService


@pytest.fixture
def service():
    service = TaskService(AsyncMock())
    service.repository = AsyncMock()
    service.comments = AsyncMock()
    return service


@pytest.mark.asyncio
async def test_create_task_defaults(service):
    creator_id = uuid4()

    await service.create_task(TaskCreate(title="  Review COA  "), creator_id=creator_id)

    kwargs = service.repository.create.call_args.kwargs
    assert kwargs["title"] == "Review COA"
    assert kwargs["assigned_by"] == creator_id
    assert kwargs["status"] == "pending"
    assert kwargs["priority"] == "medium"


def test_blank_title_rejected():
    with pytest.raises(ValueError):
        TaskCreate(title="   ")


@pytest.mark.asyncio
async def test_completing_task_stamps_completion_date(service):
    task_id = uuid4()

    await service.update_task(task_id, TaskUpdate(status=TaskStatus.COMPLETED))

    args, kwargs = service.repository.update.call_args
    assert args == (task_id,)
    assert kwargs["status"] == "completed"
    assert kwargs["completed_date"] is not None


@pytest.mark.asyncio
async def test_update_missing_task(service):
    service.repository.update.return_value = None

    with pytest.raises(NotFoundError):
        await service.update_task(uuid4(), TaskUpdate(description="x"))


@pytest.mark.asyncio
async def test_delete_missing_task(service):
    service.repository.delete.return_value = False

    with pytest.raises(NotFoundError):
        await service.delete_task(uuid4())


@pytest.mark.asyncio
async def test_comment_on_missing_task(service):
    service.repository.get_by_id.return_value = None

    with pytest.raises(NotFoundError):
        await service.add_comment(uuid4(), TaskCommentCreate(comment="Done"), author_id=uuid4())
    service.comments.create.assert_not_called()
