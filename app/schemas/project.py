from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import date, datetime

from app.models.project import ProjectStatus
from app.models.task import TaskStatus, TaskPriority
from .task import CommentOut
from .user import UserBasic


class ProjectCreate(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    status: ProjectStatus = ProjectStatus.ACTIVE

    model_config = {
        "extra": "forbid"
    }


class ProjectUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    status: Optional[ProjectStatus] = None

    model_config = {
        "extra": "forbid"
    }


class ProjectTaskOut(BaseModel):
    id: int
    title: str
    status: TaskStatus
    priority: TaskPriority
    due_date: Optional[date] = None
    creator_id: int
    assignee_id: Optional[int] = None
    updated_at: datetime
    creator: UserBasic
    assignee: Optional[UserBasic] = None
    comments: List[CommentOut] = []

    model_config = {
        "from_attributes": True
    }


class ProjectOut(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    status: ProjectStatus
    created_at: datetime
    updated_at: datetime
    members: List[UserBasic]
    tasks: List[ProjectTaskOut] = []

    model_config = {
        "from_attributes": True
    }


class ProjectPage(BaseModel):
    items: List[ProjectOut]
    total: int
    has_more: bool
    page: int
    total_pages: int
