from unittest.mock import AsyncMock, patch

import pytest

from app.agent.prompt_enhancer import PromptEnhancer


@pytest.mark.asyncio
async def test_enhance_returns_provider_text():
    with patch("app.agent.prompt_enhancer.PromptEnhancer.llm") as llm:
        llm.generate_text = AsyncMock(return_value="A detailed anime portrait of Mario mid-jump.")

        enhancer = PromptEnhancer()
        result = await enhancer.enhance("red cap with M logo", ["mario"], "anime")

    assert result == "A detailed anime portrait of Mario mid-jump."
    sent_prompt = llm.generate_text.call_args.args[0]
    assert "Base prompt: red cap with M logo" in sent_prompt
    assert "Characters: mario" in sent_prompt
    assert "high-quality anime image generation" in sent_prompt


@pytest.mark.asyncio
async def test_enhance_returns_base_prompt_when_provider_raises():
    with patch("app.agent.prompt_enhancer.PromptEnhancer.llm") as llm:
        llm.generate_text = AsyncMock(side_effect=RuntimeError("provider outage"))

        result = await PromptEnhancer().enhance("green tunic, pointed ears", ["link"], "chibi")

    assert result == "green tunic, pointed ears"


@pytest.mark.asyncio
async def test_enhance_returns_base_prompt_when_client_cannot_be_built():
    with patch("app.agent.llm_client.AsyncOpenAI", side_effect=Exception("api key missing")):
        result = await PromptEnhancer().enhance("sonic character", ["sonic"], "anime")

    assert result == "sonic character"


def test_build_prompt_lists_every_character():
    prompt = PromptEnhancer.build_prompt("heroes", ["batman", "wonderwoman"], "realistic")

    assert "Characters: batman, wonderwoman" in prompt
    assert "Style: realistic" in prompt
    assert "under 200 words" in prompt
