# app/services/project_service.py
import logging
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session, joinedload, selectinload

from app.models import Comment, Project, ProjectStatus, Task, User
from app.schemas.project import ProjectCreate, ProjectUpdate
from app.utils.errors import ConflictError, NotFoundError
from app.utils.permissions import (
    Principal,
    ProjectAction,
    ProjectSnapshot,
    authorize_project,
    enforce,
)
from app.utils.query_scope import PageParams, newest_first, paginate, scoped_projects

logger = logging.getLogger(__name__)

# Everything a project response needs: members for policy decisions, tasks with
# their people and comment threads for the read model
PROJECT_LOAD = (
    selectinload(Project.members),
    selectinload(Project.tasks).options(
        joinedload(Task.creator),
        joinedload(Task.assignee),
        selectinload(Task.comments).joinedload(Comment.user),
    ),
)


class ProjectService:
    """Project CRUD and membership changes, authorized per call"""

    def __init__(self, db: Session):
        self.db = db

    def _load_project(self, project_id: int) -> Optional[Project]:
        return (
            self.db.query(Project)
            .options(*PROJECT_LOAD)
            .filter(Project.id == project_id)
            .first()
        )

    def _lock_project(self, project_id: int) -> Project:
        """Fetch the project row FOR UPDATE so the decision and the write see the same state"""
        project = (
            self.db.query(Project)
            .filter(Project.id == project_id)
            .with_for_update()
            .first()
        )
        if not project:
            raise NotFoundError("Project not found")
        return project

    def _reload(self, project_id: int) -> Project:
        self.db.expire_all()
        return self._load_project(project_id)

    def create_project(self, principal: Principal, data: ProjectCreate) -> Project:
        enforce(authorize_project(principal, ProjectAction.CREATE))

        creator = self.db.query(User).filter(User.id == principal.id).first()
        if not creator:
            raise NotFoundError("User not found")

        project = Project(
            name=data.name,
            description=data.description,
            status=data.status or ProjectStatus.ACTIVE,
        )
        # The creator is always the first member
        project.members.append(creator)

        self.db.add(project)
        self.db.commit()
        logger.info(f"Project {project.id} created by user {principal.id}")
        return self._reload(project.id)

    def get_project(self, principal: Principal, project_id: int) -> Project:
        project = self._load_project(project_id)
        if not project:
            raise NotFoundError("Project not found")

        enforce(authorize_project(principal, ProjectAction.READ, ProjectSnapshot.from_model(project)))
        return project

    def list_projects(
        self,
        principal: Principal,
        page: int = 1,
        limit: int = 10,
        status: Optional[ProjectStatus] = None,
    ) -> Dict[str, Any]:
        params = PageParams(page=page, limit=limit)
        query = scoped_projects(self.db, principal, status=status)
        return paginate(query, params, order_by=newest_first(Project), options=PROJECT_LOAD)

    def update_project(self, principal: Principal, project_id: int, data: ProjectUpdate) -> Project:
        project = self._lock_project(project_id)
        enforce(authorize_project(principal, ProjectAction.UPDATE, ProjectSnapshot.from_model(project)))

        update_data = data.model_dump(exclude_unset=True)
        for field, value in update_data.items():
            # name and status are required columns; an explicit null leaves them untouched
            if value is None and field in ("name", "status"):
                continue
            setattr(project, field, value)
        project.updated_at = datetime.utcnow()

        self.db.commit()
        logger.info(f"Project {project_id} updated by user {principal.id}: {sorted(update_data)}")
        return self._reload(project_id)

    def delete_project(self, principal: Principal, project_id: int) -> None:
        enforce(authorize_project(principal, ProjectAction.DELETE))

        project = self._lock_project(project_id)
        task_count = self.db.query(Task).filter(Task.project_id == project_id).count()
        self.db.delete(project)
        self.db.commit()
        logger.info(f"Project {project_id} deleted by user {principal.id} ({task_count} tasks removed)")

    def add_member(self, principal: Principal, project_id: int, user_id: int) -> Project:
        project = self._lock_project(project_id)
        snapshot = ProjectSnapshot.from_model(project)
        enforce(authorize_project(principal, ProjectAction.ADD_MEMBER, snapshot))

        user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            raise NotFoundError("User not found")
        if snapshot.has_member(user_id):
            raise ConflictError("User is already a member of this project")

        project.members.append(user)
        project.updated_at = datetime.utcnow()
        self.db.commit()
        logger.info(f"User {user_id} added to project {project_id} by user {principal.id}")
        return self._reload(project_id)

    def remove_member(self, principal: Principal, project_id: int, user_id: int) -> Project:
        project = self._lock_project(project_id)
        snapshot = ProjectSnapshot.from_model(project)
        decision = authorize_project(principal, ProjectAction.REMOVE_MEMBER, snapshot, target_user_id=user_id)
        if not decision:
            logger.warning(
                f"Member removal denied on project {project_id} for user {principal.id}: {decision.reason.value}"
            )
        enforce(decision)

        if not snapshot.has_member(user_id):
            raise ConflictError("User is not a member of this project")

        project.members = [member for member in project.members if member.id != user_id]
        project.updated_at = datetime.utcnow()
        self.db.commit()
        logger.info(f"User {user_id} removed from project {project_id} by user {principal.id}")
        return self._reload(project_id)
