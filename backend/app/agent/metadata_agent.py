import logging

from app.agent.artifacts import ImageMetadata
from app.agent.base import BaseAgent
from app.agent.metadata_parsing import MetadataContext, fallback_metadata, parse_image_metadata
from app.agent.prompts.metadata import METADATA_PROMPT_TEMPLATE
from app.core.config import settings

logger = logging.getLogger(__name__)


class MetadataAgent(BaseAgent[ImageMetadata]):
    """
    Agent responsible for producing a title/description/tags triple for a generated image.
    Always returns a well-formed ImageMetadata, whatever the provider does.
    """

    def __init__(self):
        super().__init__(model_name=settings.MODEL_METADATA)

    async def synthesize(self, character_id: str, prompt: str, variation: int, style: str) -> ImageMetadata:
        user_prompt = METADATA_PROMPT_TEMPLATE.format(
            character_id=character_id,
            prompt=prompt,
            style=style,
            variation=variation,
        ).strip()
        try:
            raw_text = await self.llm.generate_text(user_prompt, temperature=0.4)
            return parse_image_metadata(
                raw_text,
                character_id=character_id,
                style=style,
                variation=variation,
            )
        except Exception as exc:
            logger.warning(
                "Metadata generation failed for %s variation %s; using fallback: %s",
                character_id,
                variation,
                exc,
            )
            return fallback_metadata(
                MetadataContext(character_id=character_id, style=style, variation=variation)
            )

    async def run(self, character_id: str, prompt: str, variation: int, style: str) -> ImageMetadata:
        return await self.synthesize(character_id, prompt, variation, style)
