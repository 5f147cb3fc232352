# app/utils/query_scope.py
"""Visibility-scoped, filtered and paginated queries for list endpoints.

The visibility predicates mirror the read rules in ``app.utils.permissions``:
a list only ever contains rows the principal could also read one by one.
"""
import math
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence

from sqlalchemy import or_, true
from sqlalchemy.orm import Query, Session

from app.models import Project, ProjectStatus, Task, TaskPriority, TaskStatus, User
from app.utils.errors import ValidationFailedError
from app.utils.permissions import Principal

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10


@dataclass(frozen=True)
class PageParams:
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    def __post_init__(self):
        if self.page < 1:
            raise ValidationFailedError("page must be greater than or equal to 1")
        if self.limit < 1:
            raise ValidationFailedError("limit must be greater than or equal to 1")

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


def project_visibility(principal: Principal):
    """Admins see every project, everyone else only projects they belong to"""
    if principal.is_admin:
        return true()
    return Project.members.any(User.id == principal.id)


def task_visibility(principal: Principal):
    """Admins see every task, everyone else tasks they created or are assigned to"""
    if principal.is_admin:
        return true()
    return or_(Task.assignee_id == principal.id, Task.creator_id == principal.id)


def scoped_projects(db: Session, principal: Principal, status: Optional[ProjectStatus] = None) -> Query:
    query = db.query(Project).filter(project_visibility(principal))
    if status is not None:
        query = query.filter(Project.status == status)
    return query


def scoped_tasks(
    db: Session,
    principal: Principal,
    status: Optional[TaskStatus] = None,
    priority: Optional[TaskPriority] = None,
    creator_id: Optional[int] = None,
    assignee_id: Optional[int] = None,
    project_id: Optional[int] = None,
) -> Query:
    query = db.query(Task).filter(task_visibility(principal))
    if status is not None:
        query = query.filter(Task.status == status)
    if priority is not None:
        query = query.filter(Task.priority == priority)
    if creator_id is not None:
        query = query.filter(Task.creator_id == creator_id)
    if assignee_id is not None:
        query = query.filter(Task.assignee_id == assignee_id)
    if project_id is not None:
        query = query.filter(Task.project_id == project_id)
    return query


def newest_first(model) -> tuple:
    """Most recently updated first; id breaks ties so the order is stable"""
    return (model.updated_at.desc(), model.id.desc())


def paginate(
    query: Query,
    params: PageParams,
    order_by: Sequence[Any],
    options: Sequence[Any] = (),
) -> Dict[str, Any]:
    """Run the count and the page fetch for the same predicate.

    Both statements run in the session's current transaction. Eager-load
    options are applied to the page fetch only so the count stays a plain
    COUNT over the filtered rows.
    """
    total = query.order_by(None).count()
    items = (
        query.options(*options)
        .order_by(*order_by)
        .offset(params.skip)
        .limit(params.limit)
        .all()
    )

    # A concurrent insert between the two statements must not yield a page
    # that reports fewer rows than it returns.
    if items and total < params.skip + len(items):
        total = params.skip + len(items)

    return {
        "items": items,
        "total": total,
        "has_more": params.skip + params.limit < total,
        "page": params.page,
        "total_pages": math.ceil(total / params.limit),
    }
