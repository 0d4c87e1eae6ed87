"""
Pydantic schemas for tasks.
"""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from .user import UserOut


class AttachmentIn(BaseModel):
    """Attachment as sent by clients; checked by the task validators"""
    file_name: Optional[str] = Field(None, description="Original file name")
    file_data: Optional[str] = Field(None, description="Base64 payload")
    mime_type: Optional[str] = Field(None, description="MIME type")
    file_size: Optional[int] = Field(None, description="Decoded size in bytes")


class AttachmentOut(BaseModel):
    file_name: str
    file_data: str
    mime_type: str
    file_size: int

    model_config = ConfigDict(from_attributes=True)


class TaskCreate(BaseModel):
    """Schema for creating a task"""
    title: Optional[str] = Field(None, description="Task title")
    description: Optional[str] = Field(None, description="Task description")
    user: Optional[str] = Field(None, description="Login of the task owner")
    status: Optional[str] = Field(None, description="todo, in_progress or done")
    project_id: Optional[int] = Field(None, description="Parent project ID")
    attachments: Optional[List[AttachmentIn]] = Field(None, description="Task attachments")


class TaskUpdate(BaseModel):
    """Schema for updating a task; only the fields that are sent are changed"""
    title: Optional[str] = Field(None, description="Task title")
    description: Optional[str] = Field(None, description="Task description")
    user: Optional[str] = Field(None, description="Login of the new owner")
    status: Optional[str] = Field(None, description="Task status")
    project_id: Optional[int] = Field(None, description="New parent project ID")
    attachments: Optional[List[AttachmentIn]] = Field(None, description="Replacement attachment list")


class TaskResponse(BaseModel):
    """Schema for task response"""
    id: int = Field(..., description="Task ID")
    title: str = Field(..., description="Task title")
    description: str = Field("", description="Task description")
    status: str = Field(..., description="Task status")
    user: UserOut = Field(..., description="Task owner")
    project_id: int = Field(..., description="Parent project ID")
    attachments: List[AttachmentOut] = Field(default_factory=list, description="Task attachments")
    created_at: datetime = Field(..., description="Task creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Task update timestamp")

    model_config = ConfigDict(from_attributes=True)
