import uuid
from datetime import datetime
from typing import Any

from sqlmodel import Session, col, func, select

from app.models import (
    PACK_STATUS_TRANSITIONS,
    CharacterPack,
    GeneratedImage,
    GeneratedImageCreate,
    User,
    get_datetime_utc,
)
from app.schemas import CharacterPackCreate


class InvalidPackStatusTransition(ValueError):
    """Raised when a pack status write would move the lifecycle backwards."""


def get_user(*, session: Session, user_id: str) -> User | None:
    return session.get(User, user_id)


def get_user_by_email(*, session: Session, email: str) -> User | None:
    statement = select(User).where(User.email == email)
    return session.exec(statement).first()


def upsert_user(*, session: Session, user_id: str, **profile: Any) -> User:
    profile_data = {key: value for key, value in profile.items() if value is not None}
    db_user = session.get(User, user_id)
    if db_user is None:
        db_user = User(id=user_id, **profile_data)
    else:
        db_user.sqlmodel_update(profile_data, update={"updated_at": get_datetime_utc()})
    session.add(db_user)
    session.commit()
    session.refresh(db_user)
    return db_user


def create_character_pack(
    *, session: Session, pack_in: CharacterPackCreate, owner_id: str
) -> CharacterPack:
    db_pack = CharacterPack(
        name=pack_in.name,
        characters=list(pack_in.characters),
        settings=pack_in.settings.model_dump(),
        owner_id=owner_id,
        status="pending",
    )
    session.add(db_pack)
    session.commit()
    session.refresh(db_pack)
    return db_pack


def get_character_pack(*, session: Session, pack_id: uuid.UUID) -> CharacterPack | None:
    return session.get(CharacterPack, pack_id)


def get_character_packs_by_owner(*, session: Session, owner_id: str) -> list[CharacterPack]:
    statement = (
        select(CharacterPack)
        .where(CharacterPack.owner_id == owner_id)
        .order_by(col(CharacterPack.created_at).desc())
    )
    return list(session.exec(statement).all())


def update_character_pack_status(
    *,
    session: Session,
    pack_id: uuid.UUID,
    status: str,
    completed_at: datetime | None = None,
) -> CharacterPack | None:
    db_pack = session.get(CharacterPack, pack_id)
    if db_pack is None:
        return None
    if status not in PACK_STATUS_TRANSITIONS.get(db_pack.status, ()):
        raise InvalidPackStatusTransition(
            f"Pack {pack_id} cannot move from {db_pack.status} to {status}"
        )
    db_pack.status = status
    # completed_at is only ever stamped on entry to "completed".
    if status == "completed":
        db_pack.completed_at = completed_at or get_datetime_utc()
    session.add(db_pack)
    session.commit()
    session.refresh(db_pack)
    return db_pack


def create_generated_image(*, session: Session, image_in: GeneratedImageCreate) -> GeneratedImage:
    db_image = GeneratedImage.model_validate(image_in)
    session.add(db_image)
    session.commit()
    session.refresh(db_image)
    return db_image


def get_generated_images_by_pack(*, session: Session, pack_id: uuid.UUID) -> list[GeneratedImage]:
    statement = (
        select(GeneratedImage)
        .where(GeneratedImage.pack_id == pack_id)
        .order_by(col(GeneratedImage.created_at), col(GeneratedImage.variation))
    )
    return list(session.exec(statement).all())


def count_generated_images_by_pack(*, session: Session, pack_id: uuid.UUID) -> int:
    statement = select(func.count()).select_from(GeneratedImage).where(GeneratedImage.pack_id == pack_id)
    return session.exec(statement).one()
