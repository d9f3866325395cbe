import os
from collections.abc import Generator

# Must be set before app.core.config is imported anywhere.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["DEMO_USER_ID"] = "demo-user"
os.environ["PACK_EVENTS_POLL_SECONDS"] = "0.01"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from app import crud
from app.agent.dispatch import PackGenerationDispatcher, get_dispatcher
from app.core.db import engine
from app.main import app
from app.models import CharacterPack
from app.schemas import CharacterPackCreate, PackSettings


@pytest.fixture
def session() -> Generator[Session, None, None]:
    """Isolated in-memory database for gateway and orchestrator tests."""
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(test_engine)
    with Session(test_engine) as db_session:
        yield db_session
    SQLModel.metadata.drop_all(test_engine)


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """API client over the application engine, reset for every test."""
    SQLModel.metadata.drop_all(engine)
    dispatcher = PackGenerationDispatcher()
    app.dependency_overrides[get_dispatcher] = lambda: dispatcher
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def pack_factory(session: Session):
    def _make_pack(
        *,
        characters: list[str],
        owner_id: str = "demo-user",
        **settings_overrides,
    ) -> CharacterPack:
        crud.upsert_user(session=session, user_id=owner_id)
        return crud.create_character_pack(
            session=session,
            pack_in=CharacterPackCreate(
                name="Test",
                characters=characters,
                settings=PackSettings(**settings_overrides),
            ),
            owner_id=owner_id,
        )

    return _make_pack
