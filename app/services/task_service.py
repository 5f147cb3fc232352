# app/services/task_service.py
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session, joinedload, selectinload

from app.models import Comment, Project, Task, TaskPriority, TaskStatus, User
from app.schemas.task import TaskCreate, TaskUpdate
from app.utils.dates import to_date
from app.utils.errors import NotFoundError, ValidationFailedError
from app.utils.permissions import (
    Principal,
    ProjectAction,
    ProjectSnapshot,
    TaskAction,
    TaskSnapshot,
    authorize_assignment,
    authorize_project,
    authorize_task,
    authorize_task_listing,
    enforce,
)
from app.utils.query_scope import PageParams, newest_first, paginate, scoped_tasks

logger = logging.getLogger(__name__)

# Task read model: people involved, owning project and the comment thread with authors
TASK_LOAD = (
    joinedload(Task.creator),
    joinedload(Task.assignee),
    joinedload(Task.project),
    selectinload(Task.comments).joinedload(Comment.user),
)

# Fields an explicit null may not clear
REQUIRED_FIELDS = ("title", "status", "priority")


class TaskService:
    """Task CRUD, assignment and per-user listings, authorized against the owning project"""

    def __init__(self, db: Session):
        self.db = db

    def _project_snapshot(self, project_id: int) -> Optional[ProjectSnapshot]:
        project = (
            self.db.query(Project)
            .options(selectinload(Project.members))
            .filter(Project.id == project_id)
            .first()
        )
        return ProjectSnapshot.from_model(project) if project else None

    def _load_task(self, task_id: int) -> Optional[Task]:
        return self.db.query(Task).options(*TASK_LOAD).filter(Task.id == task_id).first()

    def _lock_task(self, task_id: int) -> Task:
        task = self.db.query(Task).filter(Task.id == task_id).with_for_update().first()
        if not task:
            raise NotFoundError("Task not found")
        return task

    def _reload(self, task_id: int) -> Task:
        self.db.expire_all()
        return self._load_task(task_id)

    def _check_assignee(self, project: ProjectSnapshot, assignee_id: Optional[int]) -> None:
        if assignee_id is None:
            return
        if not self.db.query(User.id).filter(User.id == assignee_id).first():
            raise NotFoundError("Assignee not found")
        enforce(authorize_assignment(project, assignee_id))

    @staticmethod
    def _normalize_due_date(value):
        try:
            return to_date(value)
        except ValueError as e:
            raise ValidationFailedError(str(e))

    def create_task(self, principal: Principal, data: TaskCreate) -> Task:
        project = self._project_snapshot(data.project_id)
        if project is None:
            raise NotFoundError("Project not found")
        enforce(authorize_task(principal, TaskAction.CREATE, project))
        self._check_assignee(project, data.assignee_id)

        task = Task(
            title=data.title,
            description=data.description,
            status=data.status,
            priority=data.priority,
            due_date=self._normalize_due_date(data.due_date),
            project_id=data.project_id,
            creator_id=principal.id,
            assignee_id=data.assignee_id,
        )
        self.db.add(task)
        self.db.commit()
        logger.info(f"Task {task.id} created in project {data.project_id} by user {principal.id}")
        return self._reload(task.id)

    def get_task(self, principal: Principal, task_id: int) -> Task:
        task = self._load_task(task_id)
        if not task:
            raise NotFoundError("Task not found")

        project = self._project_snapshot(task.project_id)
        enforce(authorize_task(principal, TaskAction.READ, project, TaskSnapshot.from_model(task)))
        return task

    def list_tasks(
        self,
        principal: Principal,
        page: int = 1,
        limit: int = 10,
        status: Optional[TaskStatus] = None,
        priority: Optional[TaskPriority] = None,
        creator_id: Optional[int] = None,
        assignee_id: Optional[int] = None,
        project_id: Optional[int] = None,
    ) -> Dict[str, Any]:
        params = PageParams(page=page, limit=limit)
        query = scoped_tasks(
            self.db,
            principal,
            status=status,
            priority=priority,
            creator_id=creator_id,
            assignee_id=assignee_id,
            project_id=project_id,
        )
        return paginate(query, params, order_by=newest_first(Task), options=TASK_LOAD)

    def update_task(self, principal: Principal, task_id: int, data: TaskUpdate) -> Task:
        task = self._lock_task(task_id)
        project = self._project_snapshot(task.project_id)
        enforce(authorize_task(principal, TaskAction.UPDATE, project, TaskSnapshot.from_model(task)))

        update_data = data.model_dump(exclude_unset=True)
        if "assignee_id" in update_data:
            self._check_assignee(project, update_data["assignee_id"])
        if "due_date" in update_data:
            update_data["due_date"] = self._normalize_due_date(update_data["due_date"])

        for field, value in update_data.items():
            if value is None and field in REQUIRED_FIELDS:
                continue
            setattr(task, field, value)
        task.updated_at = datetime.utcnow()

        self.db.commit()
        logger.info(f"Task {task_id} updated by user {principal.id}: {sorted(update_data)}")
        return self._reload(task_id)

    def delete_task(self, principal: Principal, task_id: int) -> None:
        task = self._lock_task(task_id)
        project = self._project_snapshot(task.project_id)
        enforce(authorize_task(principal, TaskAction.DELETE, project, TaskSnapshot.from_model(task)))

        self.db.delete(task)
        self.db.commit()
        logger.info(f"Task {task_id} deleted by user {principal.id}")

    def _list_where(self, *criteria) -> List[Task]:
        return (
            self.db.query(Task)
            .options(*TASK_LOAD)
            .filter(*criteria)
            .order_by(*newest_first(Task))
            .all()
        )

    def list_by_project(self, principal: Principal, project_id: int) -> List[Task]:
        project = self._project_snapshot(project_id)
        if project is None:
            raise NotFoundError("Project not found")
        enforce(authorize_project(principal, ProjectAction.READ, project))
        return self._list_where(Task.project_id == project_id)

    def list_by_assignee(self, principal: Principal, user_id: int) -> List[Task]:
        enforce(authorize_task_listing(principal, user_id, relation="assigned"))
        return self._list_where(Task.assignee_id == user_id)

    def list_by_creator(self, principal: Principal, user_id: int) -> List[Task]:
        enforce(authorize_task_listing(principal, user_id, relation="created"))
        return self._list_where(Task.creator_id == user_id)
