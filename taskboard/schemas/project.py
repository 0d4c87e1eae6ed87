"""
Pydantic schemas for projects.
"""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from .user import UserOut


class ProjectCreate(BaseModel):
    """Schema for creating a project"""
    name: Optional[str] = Field(None, description="Project name")
    description: Optional[str] = Field(None, description="Project description")
    users: Optional[List[str]] = Field(None, description="Logins of the project members")


class ProjectUpdate(BaseModel):
    """Schema for updating a project; omitted fields are left untouched"""
    name: Optional[str] = Field(None, description="Project name")
    description: Optional[str] = Field(None, description="Project description")
    users: Optional[List[str]] = Field(None, description="Full replacement list of member logins")


class ProjectResponse(BaseModel):
    """Schema for project response"""
    id: int = Field(..., description="Project ID")
    name: str = Field(..., description="Project name")
    description: str = Field("", description="Project description")
    users: List[UserOut] = Field(default_factory=list, description="Project members")
    created_at: datetime = Field(..., description="Project creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Project update timestamp")

    model_config = ConfigDict(from_attributes=True)
