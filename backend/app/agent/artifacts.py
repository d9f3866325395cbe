from pydantic import BaseModel, Field

METADATA_TITLE_MAX_CHARS = 60


class ImageMetadata(BaseModel):
    """Artifact produced by the Metadata Agent for one generated image."""
    title: str = Field(max_length=METADATA_TITLE_MAX_CHARS, description="Short descriptive title of the image")
    description: str = Field(description="Artistic description of the image")
    tags: list[str] = Field(default_factory=list, description="Ordered list of search tags")


class CharacterBatch(BaseModel):
    """Result of generating one character's images within a pack."""
    character_id: str
    requested: int
    persisted: int = 0
