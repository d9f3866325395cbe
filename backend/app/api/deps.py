from collections.abc import Generator
from typing import Annotated

from fastapi import Depends, Header, HTTPException
from pydantic import EmailStr
from sqlmodel import Session

from app import crud
from app.agent.dispatch import PackGenerationDispatcher, get_dispatcher
from app.core.config import settings
from app.core.db import engine
from app.models import User


def get_db() -> Generator[Session, None, None]:
    with Session(engine) as session:
        yield session


SessionDep = Annotated[Session, Depends(get_db)]


def get_current_user(
    session: SessionDep,
    x_user_id: Annotated[str | None, Header(max_length=255)] = None,
    x_user_email: Annotated[EmailStr | None, Header()] = None,
) -> User:
    """
    Resolve the caller's identity. The identity provider (or a trusted proxy in front of
    this service) supplies X-User-Id; without it the configured demo identity is used.
    """
    user_id = (x_user_id or "").strip() or settings.DEMO_USER_ID
    if not user_id:
        raise HTTPException(status_code=401, detail="Missing user identity")

    user = crud.get_user(session=session, user_id=user_id)
    if user is None or (x_user_email and user.email != x_user_email):
        if x_user_email:
            email_owner = crud.get_user_by_email(session=session, email=x_user_email)
            if email_owner is not None and email_owner.id != user_id:
                raise HTTPException(status_code=409, detail="Email is already registered to another user")
        user = crud.upsert_user(session=session, user_id=user_id, email=x_user_email)
    return user


CurrentUser = Annotated[User, Depends(get_current_user)]
DispatcherDep = Annotated[PackGenerationDispatcher, Depends(get_dispatcher)]
