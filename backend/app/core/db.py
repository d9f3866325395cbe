import logging

from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from app import crud
from app.core.config import settings

logger = logging.getLogger(__name__)


def _engine_kwargs(url: str) -> dict:
    if not url.startswith("sqlite"):
        return {"pool_pre_ping": True}
    kwargs: dict = {"connect_args": {"check_same_thread": False}}
    # In-memory SQLite must share one connection across threads.
    if url in ("sqlite://", "sqlite:///:memory:"):
        kwargs["poolclass"] = StaticPool
    return kwargs


engine = create_engine(
    settings.SQLALCHEMY_DATABASE_URI,
    **_engine_kwargs(settings.SQLALCHEMY_DATABASE_URI),
)


def init_db(session: Session) -> None:
    # Tables should be managed with migrations in production deployments;
    # create_all keeps local and test databases usable out of the box.
    from app import models  # noqa: F401

    SQLModel.metadata.create_all(session.get_bind())

    if settings.DEMO_USER_ID:
        user = crud.get_user(session=session, user_id=settings.DEMO_USER_ID)
        if not user:
            crud.upsert_user(
                session=session,
                user_id=settings.DEMO_USER_ID,
                email=settings.DEMO_USER_EMAIL,
            )
            logger.info("Created demo user %s", settings.DEMO_USER_ID)
