# app/routers/project.py
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional

from app.database import get_db
from app.models.project import ProjectStatus
from app.schemas.project import ProjectCreate, ProjectUpdate, ProjectOut, ProjectPage
from app.services.project_service import ProjectService
from app.utils.auth import get_current_principal
from app.utils.permissions import Principal

router = APIRouter()


@router.post("/", response_model=ProjectOut, status_code=status.HTTP_201_CREATED)
def create_project(
    project_data: ProjectCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal)
):
    """Create a new project; the creator becomes its first member"""
    return ProjectService(db).create_project(principal, project_data)


@router.get("/", response_model=ProjectPage)
def get_projects(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1),
    status: Optional[ProjectStatus] = None,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal)
):
    """Projects the current user can see - admins see all projects"""
    return ProjectService(db).list_projects(principal, page=page, limit=limit, status=status)


@router.get("/{project_id}", response_model=ProjectOut)
def get_project(
    project_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal)
):
    """Get a specific project - members and admins only"""
    return ProjectService(db).get_project(principal, project_id)


@router.patch("/{project_id}", response_model=ProjectOut)
def update_project(
    project_id: int,
    project_update: ProjectUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal)
):
    """Update name, description or status - members and admins only"""
    return ProjectService(db).update_project(principal, project_id, project_update)


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_project(
    project_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal)
):
    """Delete a project and its tasks - Only admins can delete projects"""
    ProjectService(db).delete_project(principal, project_id)
    return None


@router.post("/{project_id}/members/{user_id}", response_model=ProjectOut)
def add_project_member(
    project_id: int,
    user_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal)
):
    """Add a user to a project"""
    return ProjectService(db).add_member(principal, project_id, user_id)


@router.delete("/{project_id}/members/{user_id}", response_model=ProjectOut)
def remove_project_member(
    project_id: int,
    user_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal)
):
    """Remove a user from a project - admins may remove anyone, members only themselves"""
    return ProjectService(db).remove_member(principal, project_id, user_id)
