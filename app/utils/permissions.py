# app/utils/permissions.py
"""Authorization policy for projects and tasks.

Every rule deciding whether a principal may act on a project or a task lives
here, as pure functions over small immutable snapshots. Nothing in this module
touches the database or FastAPI, so each rule can be exercised directly:

    decision = authorize_project(principal, ProjectAction.READ, snapshot)
    if not decision:
        ...

Rules, in evaluation order:

Projects
    CREATE          any authenticated principal
    DELETE          ADMIN only
    READ / UPDATE   ADMIN or member
    ADD_MEMBER      ADMIN or member
    REMOVE_MEMBER   ADMIN or member, the removal must leave at least one
                    member, and non-admins may only remove themselves

Tasks (the parent project must be resolved first)
    CREATE / READ   ADMIN or member of the project
    UPDATE          project access, then creator, assignee or ADMIN
    DELETE          project access, then creator or ADMIN

Task lists by assignee/creator: the principal's own list, or ADMIN.
Assignment: an assignee must be a member of the task's project.
"""
from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Optional

from app.models.user import UserRole
from app.utils.errors import ConflictError, ForbiddenError, NotFoundError


@dataclass(frozen=True)
class Principal:
    """The authenticated actor performing an operation"""
    id: int
    email: str
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @classmethod
    def from_user(cls, user) -> "Principal":
        return cls(id=user.id, email=user.email, role=UserRole(user.role))


@dataclass(frozen=True)
class ProjectSnapshot:
    id: int
    member_ids: FrozenSet[int]

    def has_member(self, user_id: Optional[int]) -> bool:
        return user_id is not None and user_id in self.member_ids

    @classmethod
    def from_model(cls, project) -> "ProjectSnapshot":
        return cls(id=project.id, member_ids=frozenset(member.id for member in project.members))


@dataclass(frozen=True)
class TaskSnapshot:
    id: int
    project_id: int
    creator_id: int
    assignee_id: Optional[int] = None

    @classmethod
    def from_model(cls, task) -> "TaskSnapshot":
        return cls(
            id=task.id,
            project_id=task.project_id,
            creator_id=task.creator_id,
            assignee_id=task.assignee_id,
        )


class ProjectAction(str, Enum):
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"
    ADD_MEMBER = "add_member"
    REMOVE_MEMBER = "remove_member"


class TaskAction(str, Enum):
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"


class DenyReason(str, Enum):
    NOT_A_MEMBER = "not a member"
    ADMIN_ONLY = "admin only"
    LAST_MEMBER = "last member"
    CANNOT_REMOVE_OTHERS = "not permitted to remove others"
    PROJECT_NOT_FOUND = "project not found"
    NO_PROJECT_ACCESS = "no project access"
    NO_TASK_PERMISSION = "no task permission"
    NOT_OWN_TASK_LIST = "not own task list"
    ASSIGNEE_NOT_MEMBER = "assignee not a member"


DEFAULT_MESSAGES = {
    DenyReason.NOT_A_MEMBER: "You do not have access to this project",
    DenyReason.ADMIN_ONLY: "Only administrators can delete projects",
    DenyReason.LAST_MEMBER: "Cannot remove the last member from the project",
    DenyReason.CANNOT_REMOVE_OTHERS: "You do not have permission to remove other members",
    DenyReason.PROJECT_NOT_FOUND: "Project not found",
    DenyReason.NO_PROJECT_ACCESS: "You do not have access to this task",
    DenyReason.NO_TASK_PERMISSION: "You do not have permission to update this task",
    DenyReason.NOT_OWN_TASK_LIST: "You can only view your own tasks",
    DenyReason.ASSIGNEE_NOT_MEMBER: "Assignee must be a member of this project",
}


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: Optional[DenyReason] = None
    message: Optional[str] = None

    def __bool__(self) -> bool:
        return self.allowed


ALLOW = Decision(allowed=True)


def deny(reason: DenyReason, message: Optional[str] = None) -> Decision:
    return Decision(allowed=False, reason=reason, message=message or DEFAULT_MESSAGES[reason])


def _has_project_access(principal: Principal, project: ProjectSnapshot) -> bool:
    return principal.is_admin or project.has_member(principal.id)


def authorize_project(
    principal: Principal,
    action: ProjectAction,
    project: Optional[ProjectSnapshot] = None,
    target_user_id: Optional[int] = None,
) -> Decision:
    """Decide a project action. ``target_user_id`` is required for REMOVE_MEMBER."""
    if action == ProjectAction.CREATE:
        return ALLOW

    if action == ProjectAction.DELETE:
        return ALLOW if principal.is_admin else deny(DenyReason.ADMIN_ONLY)

    if project is None:
        return deny(DenyReason.PROJECT_NOT_FOUND)

    if not _has_project_access(principal, project):
        return deny(DenyReason.NOT_A_MEMBER)

    if action in (ProjectAction.READ, ProjectAction.UPDATE, ProjectAction.ADD_MEMBER):
        return ALLOW

    if action == ProjectAction.REMOVE_MEMBER:
        if target_user_id is None:
            raise ValueError("REMOVE_MEMBER requires target_user_id")
        remaining = project.member_ids - {target_user_id}
        if not remaining:
            return deny(DenyReason.LAST_MEMBER)
        if not principal.is_admin and target_user_id != principal.id:
            return deny(DenyReason.CANNOT_REMOVE_OTHERS)
        return ALLOW

    raise ValueError(f"Unknown project action: {action}")


def authorize_task(
    principal: Principal,
    action: TaskAction,
    project: Optional[ProjectSnapshot],
    task: Optional[TaskSnapshot] = None,
) -> Decision:
    """Decide a task action against the task's (or target) project.

    UPDATE and DELETE need the task snapshot; project access and task
    permission are checked separately and fail with different reasons.
    """
    if project is None:
        return deny(DenyReason.PROJECT_NOT_FOUND)

    if task is not None and task.project_id != project.id:
        raise ValueError("Task snapshot does not belong to the given project")

    if not _has_project_access(principal, project):
        if action == TaskAction.CREATE:
            return deny(DenyReason.NO_PROJECT_ACCESS, "You do not have access to this project")
        return deny(DenyReason.NO_PROJECT_ACCESS)

    if action in (TaskAction.CREATE, TaskAction.READ):
        return ALLOW

    if task is None:
        raise ValueError(f"{action.value} requires a task snapshot")

    if action == TaskAction.UPDATE:
        if principal.is_admin or principal.id in (task.creator_id, task.assignee_id):
            return ALLOW
        return deny(DenyReason.NO_TASK_PERMISSION)

    if action == TaskAction.DELETE:
        if principal.is_admin or principal.id == task.creator_id:
            return ALLOW
        return deny(DenyReason.NO_TASK_PERMISSION, "Only task creator or admin can delete tasks")

    raise ValueError(f"Unknown task action: {action}")


def authorize_task_listing(principal: Principal, target_user_id: int, relation: str = "assigned") -> Decision:
    """Viewing the tasks assigned to / created by ``target_user_id``"""
    if principal.is_admin or principal.id == target_user_id:
        return ALLOW
    return deny(DenyReason.NOT_OWN_TASK_LIST, f"You can only view your own {relation} tasks")


def authorize_assignment(project: ProjectSnapshot, assignee_id: Optional[int]) -> Decision:
    """An assignee, when set, must belong to the task's project"""
    if assignee_id is None or project.has_member(assignee_id):
        return ALLOW
    return deny(DenyReason.ASSIGNEE_NOT_MEMBER)


def enforce(decision: Decision) -> None:
    """Raise the error kind matching a denied decision; no-op when allowed"""
    if decision.allowed:
        return
    if decision.reason == DenyReason.PROJECT_NOT_FOUND:
        raise NotFoundError(decision.message, reason=decision.reason.value)
    if decision.reason == DenyReason.LAST_MEMBER:
        raise ConflictError(decision.message, reason=decision.reason.value)
    raise ForbiddenError(decision.message, reason=decision.reason.value if decision.reason else None)
