from typing import Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..core.auth import CurrentUser, get_current_user, get_optional_user
from ..core.database import get_db
from ..schemas.user import AccessToken, LoginRequest, RefreshRequest, Token, UserCreate, UserDetail, UserOut
from ..services import accounts

router = APIRouter()


@router.post("/register", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def register(
    user_in: UserCreate,
    current_user: Optional[CurrentUser] = Depends(get_optional_user),
    db: Session = Depends(get_db)
):
    """Register a new account; admin accounts require an admin token"""
    return accounts.register(db, user_in.login, user_in.password, user_in.role, caller=current_user)


@router.post("/login", response_model=Token)
def login(credentials: LoginRequest, db: Session = Depends(get_db)):
    """Exchange login and password for an access/refresh token pair"""
    return accounts.login(db, credentials.login, credentials.password)


@router.post("/refresh", response_model=AccessToken)
def refresh(body: RefreshRequest, db: Session = Depends(get_db)):
    """Exchange a refresh token for a new access token"""
    return accounts.refresh(db, body.refresh_token)


@router.get("/me", response_model=UserDetail)
def me(
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Current user with the projects and tasks they are linked to"""
    return accounts.get_me(db, current_user)
