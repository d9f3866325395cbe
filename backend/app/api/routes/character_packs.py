import asyncio
import json
import logging
import uuid
from typing import Any

from fastapi import APIRouter, BackgroundTasks, HTTPException
from sqlmodel import Session
from sse_starlette.sse import EventSourceResponse

from app import crud
from app.api.deps import CurrentUser, DispatcherDep, SessionDep
from app.core.config import settings
from app.core.db import engine
from app.models import CharacterPack, User
from app.schemas import (
    CharacterPackCreate,
    CharacterPackPublic,
    CharacterPackWithImages,
    GeneratedImagePublic,
    PackProgress,
)

router = APIRouter()
logger = logging.getLogger(__name__)

TERMINAL_STATUSES = ("completed", "failed")


def _get_owned_pack(session: Session, pack_id: uuid.UUID, current_user: User) -> CharacterPack:
    pack = crud.get_character_pack(session=session, pack_id=pack_id)
    if not pack:
        raise HTTPException(status_code=404, detail="Character pack not found")
    if pack.owner_id != current_user.id:
        raise HTTPException(status_code=403, detail="Not enough permissions")
    return pack


@router.get("", response_model=list[CharacterPackPublic])
def read_character_packs(session: SessionDep, current_user: CurrentUser) -> Any:
    packs = crud.get_character_packs_by_owner(session=session, owner_id=current_user.id)
    return [CharacterPackPublic.model_validate(pack) for pack in packs]


@router.get("/{id}", response_model=CharacterPackWithImages)
def read_character_pack(id: uuid.UUID, session: SessionDep, current_user: CurrentUser) -> Any:
    pack = _get_owned_pack(session, id, current_user)
    images = crud.get_generated_images_by_pack(session=session, pack_id=pack.id)
    character_order = {character_id: index for index, character_id in enumerate(pack.characters)}
    images.sort(key=lambda image: (character_order.get(image.character_id, len(character_order)), image.variation))
    return CharacterPackWithImages(
        **CharacterPackPublic.model_validate(pack).model_dump(),
        images=[GeneratedImagePublic.model_validate(image) for image in images],
    )


@router.post("", response_model=CharacterPackPublic)
def create_character_pack(
    *,
    session: SessionDep,
    current_user: CurrentUser,
    dispatcher: DispatcherDep,
    background_tasks: BackgroundTasks,
    pack_in: CharacterPackCreate,
) -> Any:
    """
    Create a pack in "pending" and schedule its generation.
    The response is sent before generation starts; poll the pack to follow progress.
    """
    pack = crud.create_character_pack(session=session, pack_in=pack_in, owner_id=current_user.id)
    dispatcher.submit(background_tasks, pack=pack, owner_id=current_user.id)
    return CharacterPackPublic.model_validate(pack)


async def _pack_progress_events(pack_id: uuid.UUID):
    last_progress: PackProgress | None = None
    while True:
        with Session(engine) as session:
            pack = crud.get_character_pack(session=session, pack_id=pack_id)
            if pack is None:
                yield json.dumps({"status": "error", "message": "Character pack not found"})
                return
            progress = PackProgress(
                status=pack.status,
                image_count=crud.count_generated_images_by_pack(session=session, pack_id=pack_id),
            )
        if progress != last_progress:
            yield progress.model_dump_json(by_alias=True)
            last_progress = progress
        if progress.status in TERMINAL_STATUSES:
            return
        await asyncio.sleep(settings.PACK_EVENTS_POLL_SECONDS)


@router.get("/{id}/events")
def stream_character_pack_progress(id: uuid.UUID, session: SessionDep, current_user: CurrentUser):
    """Stream status and image-count changes via SSE until the pack reaches a terminal state."""
    _get_owned_pack(session, id, current_user)
    return EventSourceResponse(_pack_progress_events(id))
