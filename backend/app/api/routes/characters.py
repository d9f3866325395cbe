from typing import Any

from fastapi import APIRouter, HTTPException

from app.catalog import CHARACTERS, CharacterCategory, get_character, get_characters_by_category
from app.schemas import CharacterPublic

router = APIRouter()


@router.get("", response_model=list[CharacterPublic])
def read_characters(category: CharacterCategory | None = None) -> Any:
    characters = get_characters_by_category(category) if category else list(CHARACTERS)
    return [CharacterPublic.model_validate(character) for character in characters]


@router.get("/{character_id}", response_model=CharacterPublic)
def read_character(character_id: str) -> Any:
    character = get_character(character_id)
    if not character:
        raise HTTPException(status_code=404, detail="Character not found")
    return CharacterPublic.model_validate(character)
