import enum
from sqlalchemy import Column, Integer, String, Enum, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from ..core.database import Base
from .project import project_members


class UserRole(str, enum.Enum):
    admin = "admin"
    user = "user"


class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    login = Column(String(64), unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    role = Column(Enum(UserRole), default=UserRole.user, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Views over project_members and tasks.user_id
    projects = relationship("Project", secondary=project_members, back_populates="users")
    tasks = relationship("Task", back_populates="user")

    @property
    def project_ids(self):
        return sorted(project.id for project in self.projects)

    @property
    def task_ids(self):
        return sorted(task.id for task in self.tasks)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.admin

    def __repr__(self):
        return f"<User(id={self.id}, login='{self.login}', role='{self.role.value if self.role else None}')>"
