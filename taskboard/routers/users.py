from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..core.auth import CurrentUser, get_current_user
from ..core.database import get_db
from ..schemas.user import UserOut
from ..services import accounts

router = APIRouter()


@router.get("", response_model=List[UserOut])
def list_users(
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return accounts.list_users(db, current_user)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Delete a user who no longer owns any task (admin only)"""
    accounts.delete_user(db, current_user, user_id)
