from typing import Any

from fastapi import APIRouter

from app.api.deps import CurrentUser
from app.schemas import UserPublic

router = APIRouter()


@router.get("/me", response_model=UserPublic)
def read_user_me(current_user: CurrentUser) -> Any:
    """Return the caller's user record, creating it on first sight."""
    return UserPublic.model_validate(current_user)
