import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, DateTime
from sqlmodel import Field, SQLModel


def get_datetime_utc() -> datetime:
    return datetime.now(timezone.utc)


# Allowed lifecycle moves; terminal states have no successors.
PACK_STATUS_TRANSITIONS: dict[str, tuple[str, ...]] = {
    "pending": ("generating",),
    "generating": ("completed", "failed"),
    "completed": (),
    "failed": (),
}


# Database model, database table inferred from class name
class User(SQLModel, table=True):
    id: str = Field(primary_key=True, max_length=255)
    email: str | None = Field(default=None, unique=True, index=True, max_length=255)
    first_name: str | None = Field(default=None, max_length=255)
    last_name: str | None = Field(default=None, max_length=255)
    profile_image_url: str | None = Field(default=None, max_length=2048)
    created_at: datetime | None = Field(
        default_factory=get_datetime_utc,
        sa_type=DateTime(timezone=True),  # type: ignore
    )
    updated_at: datetime | None = Field(
        default_factory=get_datetime_utc,
        sa_type=DateTime(timezone=True),  # type: ignore
    )


# Pipeline Models

class CharacterPackBase(SQLModel):
    name: str = Field(min_length=1, max_length=255)
    characters: list[str] = Field(default_factory=list, sa_type=JSON)
    settings: dict = Field(default_factory=dict, sa_type=JSON)  # PackSettings dumped to dict


class CharacterPack(CharacterPackBase, table=True):
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    owner_id: str = Field(foreign_key="user.id", nullable=False, index=True)
    status: str = Field(default="pending", max_length=20)  # pending, generating, completed, failed
    created_at: datetime | None = Field(
        default_factory=get_datetime_utc,
        sa_type=DateTime(timezone=True),  # type: ignore
    )
    completed_at: datetime | None = Field(
        default=None,
        sa_type=DateTime(timezone=True),  # type: ignore
    )


class GeneratedImageBase(SQLModel):
    character_id: str = Field(max_length=100)
    image_url: str
    variation: int = Field(ge=1)
    prompt: str
    enhanced_prompt: str | None = None
    title: str | None = Field(default=None, max_length=60)
    description: str | None = None
    tags: list[str] | None = Field(default=None, sa_type=JSON)


class GeneratedImageCreate(GeneratedImageBase):
    pack_id: uuid.UUID | None = None


class GeneratedImage(GeneratedImageBase, table=True):
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    # Images outlive their pack; no cascading delete.
    pack_id: uuid.UUID | None = Field(
        default=None,
        foreign_key="characterpack.id",
        nullable=True,
        index=True,
        ondelete="SET NULL",
    )
    created_at: datetime | None = Field(
        default_factory=get_datetime_utc,
        sa_type=DateTime(timezone=True),  # type: ignore
    )
