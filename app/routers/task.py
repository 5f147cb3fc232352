# app/routers/task.py
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional

from app.database import get_db
from app.models.task import TaskStatus, TaskPriority
from app.schemas.task import TaskCreate, TaskUpdate, TaskOut, TaskPage
from app.services.task_service import TaskService
from app.utils.auth import get_current_principal
from app.utils.permissions import Principal

router = APIRouter(prefix="/tasks")


@router.post("/", response_model=TaskOut, status_code=status.HTTP_201_CREATED)
def create_task(
    task: TaskCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal)
):
    """Create a task in a project the current user belongs to"""
    return TaskService(db).create_task(principal, task)


@router.get("/", response_model=TaskPage)
def get_tasks(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1),
    status: Optional[TaskStatus] = None,
    priority: Optional[TaskPriority] = None,
    creator_id: Optional[int] = None,
    assignee_id: Optional[int] = None,
    project_id: Optional[int] = None,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal)
):
    """Get tasks with role-based visibility

    - ADMIN: all tasks
    - everyone else: tasks they created or are assigned to
    """
    return TaskService(db).list_tasks(
        principal,
        page=page,
        limit=limit,
        status=status,
        priority=priority,
        creator_id=creator_id,
        assignee_id=assignee_id,
        project_id=project_id,
    )


@router.get("/project/{project_id}", response_model=List[TaskOut])
def get_tasks_by_project(
    project_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal)
):
    return TaskService(db).list_by_project(principal, project_id)


@router.get("/assignee/{user_id}", response_model=List[TaskOut])
def get_tasks_by_assignee(
    user_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal)
):
    """Users can only view their own assigned tasks unless they're an admin"""
    return TaskService(db).list_by_assignee(principal, user_id)


@router.get("/creator/{user_id}", response_model=List[TaskOut])
def get_tasks_by_creator(
    user_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal)
):
    """Users can only view their own created tasks unless they're an admin"""
    return TaskService(db).list_by_creator(principal, user_id)


@router.get("/{task_id}", response_model=TaskOut)
def get_task(
    task_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal)
):
    return TaskService(db).get_task(principal, task_id)


@router.patch("/{task_id}", response_model=TaskOut)
def update_task(
    task_id: int,
    task_update: TaskUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal)
):
    """Update a task - creator, assignee or admin, and only within an accessible project"""
    return TaskService(db).update_task(principal, task_id, task_update)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(
    task_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal)
):
    """Delete a task - Only task creator or admin"""
    TaskService(db).delete_task(principal, task_id)
    return None
