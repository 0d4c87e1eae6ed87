from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from ..models.user import UserRole


class UserCreate(BaseModel):
    login: Optional[str] = Field(None, description="Unique login")
    password: Optional[str] = Field(None, description="Plaintext password, hashed before storage")
    role: Optional[str] = Field(None, description="admin or user, defaults to user")


class LoginRequest(BaseModel):
    login: Optional[str] = None
    password: Optional[str] = None


class RefreshRequest(BaseModel):
    refresh_token: Optional[str] = None


class UserOut(BaseModel):
    id: int
    login: str
    role: UserRole

    model_config = ConfigDict(from_attributes=True)


class UserDetail(UserOut):
    project_ids: List[int] = Field(default_factory=list, description="Projects the user belongs to")
    task_ids: List[int] = Field(default_factory=list, description="Tasks assigned to the user")


class Token(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    user: UserOut


class AccessToken(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserOut
