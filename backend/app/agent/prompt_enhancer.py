import logging
from collections.abc import Sequence

from app.agent.base import BaseAgent
from app.agent.prompts.enhancement import ENHANCEMENT_PROMPT_TEMPLATE
from app.core.config import settings

logger = logging.getLogger(__name__)


class PromptEnhancer(BaseAgent[str]):
    """
    Agent that rewrites a base character prompt into a richer image-generation prompt.
    Enhancement is best-effort: any provider failure yields the base prompt unchanged.
    """

    def __init__(self):
        super().__init__(model_name=settings.MODEL_ENHANCER)

    @staticmethod
    def build_prompt(base_prompt: str, character_ids: Sequence[str], style: str) -> str:
        return ENHANCEMENT_PROMPT_TEMPLATE.format(
            base_prompt=base_prompt,
            characters=", ".join(character_ids),
            style=style,
        ).strip()

    async def enhance(self, base_prompt: str, character_ids: Sequence[str], style: str) -> str:
        try:
            enhanced = await self.llm.generate_text(self.build_prompt(base_prompt, character_ids, style))
        except Exception as exc:
            logger.warning("Prompt enhancement failed; using base prompt: %s", exc)
            return base_prompt
        return enhanced or base_prompt

    async def run(self, base_prompt: str, character_ids: Sequence[str], style: str) -> str:
        return await self.enhance(base_prompt, character_ids, style)
