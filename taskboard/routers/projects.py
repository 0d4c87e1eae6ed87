from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..core.auth import CurrentUser, get_current_user
from ..core.database import get_db
from ..schemas.project import ProjectCreate, ProjectResponse, ProjectUpdate
from ..services import projects

router = APIRouter()


@router.get("", response_model=List[ProjectResponse])
def list_projects(
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Projects visible to the caller"""
    return projects.list_projects(db, current_user)


@router.post("", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
def create_project(
    project_data: ProjectCreate,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Create a project and add the listed logins as members (admin only)"""
    return projects.create_project(
        db,
        current_user,
        name=project_data.name,
        description=project_data.description,
        users=project_data.users,
    )


@router.get("/{project_id}", response_model=ProjectResponse)
def get_project(
    project_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return projects.get_project(db, current_user, project_id)


@router.put("/{project_id}", response_model=ProjectResponse)
def update_project(
    project_id: int,
    project_update: ProjectUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Update a project; a users list replaces the membership (admin only)"""
    return projects.update_project(
        db, current_user, project_id, project_update.model_dump(exclude_unset=True)
    )


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_project(
    project_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Delete a project and all of its tasks (admin only)"""
    projects.delete_project(db, current_user, project_id)
