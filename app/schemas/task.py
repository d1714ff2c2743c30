from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.schemas.enums import TaskPriority, TaskStatus


class TaskCreate(BaseModel):
    title: str
    description: Optional[str] = None
    task_type: Optional[str] = None
    assigned_to: Optional[UUID] = None
    assigned_by: Optional[UUID] = None
    due_date: Optional[datetime] = None
    priority: TaskPriority = TaskPriority.MEDIUM

    @field_validator("title")
    @classmethod
    def strip_title(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("title must not be blank")
        return value


class TaskUpdate(BaseModel):
    status: Optional[TaskStatus] = None
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    priority: Optional[TaskPriority] = None
    completed_date: Optional[datetime] = None


class TaskCommentCreate(BaseModel):
    comment: str = Field(..., min_length=1)
    user_id: Optional[UUID] = None


class TaskCommentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    task_id: UUID
    user_id: Optional[UUID] = None
    comment: str
    created_at: Optional[datetime] = None


class TaskResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    description: Optional[str] = None
    task_type: Optional[str] = None
    assigned_to: Optional[UUID] = None
    assigned_by: Optional[UUID] = None
    status: str
    priority: str
    due_date: Optional[datetime] = None
    completed_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class TaskDetailResponse(TaskResponse):
    comments: List[TaskCommentResponse] = Field(default_factory=list)
