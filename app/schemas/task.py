# app/schemas/task.py
from pydantic import BaseModel, Field, field_validator
from datetime import date, datetime
from typing import Optional, List

from app.models.project import ProjectStatus
from app.models.task import TaskStatus, TaskPriority
from app.utils.dates import to_date
from .user import UserBasic


class TaskCreate(BaseModel):
    title: str = Field(min_length=1)
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: Optional[date] = None
    project_id: int
    assignee_id: Optional[int] = None

    model_config = {
        "extra": "forbid"
    }

    @field_validator('due_date', mode='before')
    @classmethod
    def parse_due_date(cls, v):
        return to_date(v)


class TaskUpdate(BaseModel):
    """Partial update; project and creator cannot be changed"""
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    due_date: Optional[date] = None
    assignee_id: Optional[int] = None

    model_config = {
        "extra": "forbid"
    }

    @field_validator('due_date', mode='before')
    @classmethod
    def parse_due_date(cls, v):
        return to_date(v)


class ProjectBasic(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    status: ProjectStatus

    model_config = {
        "from_attributes": True
    }


class CommentOut(BaseModel):
    id: int
    content: str
    task_id: int
    user_id: int
    created_at: datetime
    updated_at: datetime
    user: UserBasic

    model_config = {
        "from_attributes": True
    }


class TaskOut(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    status: TaskStatus
    priority: TaskPriority
    due_date: Optional[date] = None
    project_id: int
    creator_id: int
    assignee_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime
    creator: UserBasic
    assignee: Optional[UserBasic] = None
    project: ProjectBasic
    comments: List[CommentOut] = []

    model_config = {
        "from_attributes": True
    }


class TaskPage(BaseModel):
    items: List[TaskOut]
    total: int
    has_more: bool
    page: int
    total_pages: int
