import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

PackStatus = Literal["pending", "generating", "completed", "failed"]
ArtStyle = Literal["anime", "realistic", "chibi", "cyberpunk"]
Pose = Literal["standing", "action", "sitting", "portrait"]
Background = Literal["transparent", "city", "nature", "abstract"]


class CamelModel(BaseModel):
    """API payload base: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class PackSettings(CamelModel):
    style: ArtStyle = "anime"
    pose: Pose = "standing"
    background: Background = "transparent"
    images_per_character: int = Field(default=4, ge=1, le=6)
    # Collected from the client but never forwarded to the image provider.
    quality: int = Field(default=20, ge=10, le=50)


class CharacterPackCreate(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    characters: list[str] = Field(min_length=1)
    settings: PackSettings = Field(default_factory=PackSettings)


class CharacterPackPublic(CamelModel):
    id: uuid.UUID
    owner_id: str
    name: str
    characters: list[str]
    settings: PackSettings
    status: PackStatus
    created_at: datetime | None = None
    completed_at: datetime | None = None


class GeneratedImagePublic(CamelModel):
    id: uuid.UUID
    pack_id: uuid.UUID | None = None
    character_id: str
    image_url: str
    variation: int
    prompt: str
    enhanced_prompt: str | None = None
    title: str | None = None
    description: str | None = None
    tags: list[str] | None = None
    created_at: datetime | None = None


class CharacterPackWithImages(CharacterPackPublic):
    images: list[GeneratedImagePublic]


class PackProgress(CamelModel):
    status: PackStatus
    image_count: int


class EnhancePromptRequest(CamelModel):
    prompt: str = Field(min_length=1)
    characters: list[str] = Field(default_factory=list)
    style: str = "anime"


class EnhancePromptResponse(CamelModel):
    enhanced_prompt: str


class UserPublic(CamelModel):
    id: str
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    profile_image_url: str | None = None
    created_at: datetime | None = None


class CharacterPublic(CamelModel):
    id: str
    name: str
    category: Literal["anime", "games", "movies"]
    description: str
    image_url: str
    base_prompt: str
