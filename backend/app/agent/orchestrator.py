import logging
import uuid
from collections.abc import Mapping, Sequence
from typing import Any

from sqlmodel import Session

from app.agent.artifacts import CharacterBatch
from app.agent.image_client import DEFAULT_IMAGE_SIZE, ImageGenerationClient
from app.agent.metadata_agent import MetadataAgent
from app.agent.prompt_enhancer import PromptEnhancer
from app.catalog import base_prompt_for
from app.crud import create_generated_image, update_character_pack_status
from app.models import GeneratedImageCreate, get_datetime_utc
from app.schemas import PackSettings

logger = logging.getLogger(__name__)

# Fixed provider parameters. The pack's `quality` setting does not reach the
# provider; generation always runs at this step count.
GENERATION_STEPS = 30
GUIDANCE_SCALE = 7.5
SCHEDULER = "DPM++ 2M"


def _rollback_session_safely(session: Session) -> None:
    try:
        session.rollback()
    except Exception as exc:
        logger.warning("Session rollback failed: %s", exc)


def _update_pack_status_safely(session: Session, pack_id: uuid.UUID, status: str) -> None:
    try:
        update_character_pack_status(session=session, pack_id=pack_id, status=status)
    except Exception as exc:
        logger.warning("Failed to update character pack %s to %s: %s", pack_id, status, exc)


def _coerce_settings(pack_settings: PackSettings | Mapping[str, Any] | None) -> PackSettings:
    if isinstance(pack_settings, PackSettings):
        return pack_settings
    # Unset (None) values fall back to the defaults.
    cleaned = {key: value for key, value in (pack_settings or {}).items() if value is not None}
    return PackSettings.model_validate(cleaned)


async def _generate_character(
    session: Session,
    *,
    pack_id: uuid.UUID,
    character_id: str,
    pack_settings: PackSettings,
    enhancer: PromptEnhancer,
    image_client: ImageGenerationClient,
    metadata_agent: MetadataAgent,
) -> CharacterBatch:
    base_prompt = base_prompt_for(character_id)
    enhanced_prompt = await enhancer.enhance(base_prompt, [character_id], pack_settings.style)

    logger.info(
        "Generating %s image(s) for %s in pack %s",
        pack_settings.images_per_character,
        character_id,
        pack_id,
    )
    image_urls = await image_client.generate(
        enhanced_prompt,
        pack_settings.images_per_character,
        DEFAULT_IMAGE_SIZE,
        steps=GENERATION_STEPS,
        cfg_scale=GUIDANCE_SCALE,
        scheduler=SCHEDULER,
    )
    batch = CharacterBatch(character_id=character_id, requested=pack_settings.images_per_character)
    if not image_urls:
        logger.warning("Image provider returned no URLs for %s in pack %s", character_id, pack_id)

    # Variations follow provider order: 1..len(image_urls), no gaps.
    for variation, image_url in enumerate(image_urls, start=1):
        metadata = await metadata_agent.synthesize(
            character_id,
            enhanced_prompt,
            variation,
            pack_settings.style,
        )
        create_generated_image(
            session=session,
            image_in=GeneratedImageCreate(
                pack_id=pack_id,
                character_id=character_id,
                image_url=image_url,
                variation=variation,
                prompt=base_prompt,
                enhanced_prompt=enhanced_prompt,
                title=metadata.title,
                description=metadata.description,
                tags=metadata.tags,
            ),
        )
        batch.persisted += 1
    return batch


async def generate_character_pack(
    session: Session,
    pack_id: uuid.UUID,
    character_ids: Sequence[str],
    pack_settings: PackSettings | Mapping[str, Any] | None,
    *,
    owner_id: str | None = None,
) -> None:
    """
    Run the generation pipeline for one pack: enhance each character's prompt, generate
    its images, synthesize metadata per image and persist the rows, character by character.

    The pack moves pending -> generating -> completed, or to failed on the first error
    that has no fallback (image generation, persistence). Rows written before a failure
    are kept. Nothing is raised to the caller.
    """
    logger.info(
        "Starting generation for pack %s (owner=%s) with characters: %s",
        pack_id,
        owner_id,
        list(character_ids),
    )
    try:
        started = update_character_pack_status(session=session, pack_id=pack_id, status="generating")
    except Exception:
        # The pack is not ours to touch (already running or finished) or the DB is down.
        logger.exception("Could not start generation for pack %s", pack_id)
        _rollback_session_safely(session)
        return
    if started is None:
        logger.error("Character pack %s does not exist; nothing to generate", pack_id)
        return

    try:
        resolved_settings = _coerce_settings(pack_settings)
        enhancer = PromptEnhancer()
        image_client = ImageGenerationClient()
        metadata_agent = MetadataAgent()

        for character_id in character_ids:
            batch = await _generate_character(
                session,
                pack_id=pack_id,
                character_id=character_id,
                pack_settings=resolved_settings,
                enhancer=enhancer,
                image_client=image_client,
                metadata_agent=metadata_agent,
            )
            logger.info(
                "Persisted %s of %s image(s) for %s in pack %s",
                batch.persisted,
                batch.requested,
                batch.character_id,
                pack_id,
            )

        update_character_pack_status(
            session=session,
            pack_id=pack_id,
            status="completed",
            completed_at=get_datetime_utc(),
        )
        logger.info("Character pack %s completed", pack_id)
    except Exception:
        logger.exception("Generation failed for pack %s (owner=%s)", pack_id, owner_id)
        _rollback_session_safely(session)
        _update_pack_status_safely(session=session, pack_id=pack_id, status="failed")
