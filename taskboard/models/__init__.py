"""Database models for Taskboard."""
from .user import User, UserRole
from .project import Project, project_members
from .task import Task, TaskAttachment, TaskStatus

__all__ = [
    "User",
    "UserRole",
    "Project",
    "project_members",
    "Task",
    "TaskAttachment",
    "TaskStatus",
]
