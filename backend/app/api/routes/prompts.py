import logging

from fastapi import APIRouter, HTTPException

from app.agent.prompt_enhancer import PromptEnhancer
from app.schemas import EnhancePromptRequest, EnhancePromptResponse

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/enhance-prompt", response_model=EnhancePromptResponse)
async def enhance_prompt(payload: EnhancePromptRequest) -> EnhancePromptResponse:
    """
    Rewrite a user prompt into a richer image-generation prompt.
    Provider outages return the original prompt, not an error.
    """
    try:
        enhanced = await PromptEnhancer().enhance(payload.prompt, payload.characters, payload.style)
    except Exception as exc:
        logger.error("Error enhancing prompt: %s", exc)
        raise HTTPException(status_code=500, detail="Failed to enhance prompt") from exc
    return EnhancePromptResponse(enhanced_prompt=enhanced)
