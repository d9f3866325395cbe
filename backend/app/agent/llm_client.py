import logging

from openai import AsyncOpenAI

from app.core.config import settings

logger = logging.getLogger(__name__)


class LLMClient:
    """Provider-agnostic text generation client using the OpenAI API spec."""

    def __init__(
        self,
        model_name: str | None = None,
        base_url: str | None = None,
        api_key: str | None = None,
    ):
        self.model_name = model_name or settings.MODEL_DEFAULT

        # Use LLM_API_KEY or fallback to GEMINI_API_KEY if they only provided the original one
        resolved_api_key = api_key or settings.LLM_API_KEY or settings.GEMINI_API_KEY
        resolved_base_url = base_url or settings.LLM_BASE_URL

        self.client = AsyncOpenAI(
            base_url=resolved_base_url,
            api_key=resolved_api_key,
        )

    def _chat_completion_kwargs(self, *, temperature: float | None) -> dict:
        """Build provider/model-compatible kwargs for chat completions."""
        model_name = (self.model_name or "").lower()
        # GPT-5 family rejects non-default temperature values in some OpenAI endpoints.
        if model_name.startswith("gpt-5"):
            return {}
        if temperature is None:
            return {}
        return {"temperature": temperature}

    async def generate_text(
        self,
        user_prompt: str,
        *,
        system_prompt: str | None = None,
        temperature: float | None = 0.7,
    ) -> str:
        """
        Generate plain text content for a single prompt.
        Returns the stripped response text exactly as the model produced it; callers
        decide how to clean or parse it.
        """
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": user_prompt})

        logger.info("Issuing text request to model %s...", self.model_name)
        response = await self.client.chat.completions.create(
            model=self.model_name,
            messages=messages,
            **self._chat_completion_kwargs(temperature=temperature),
        )

        if getattr(response, "choices", None) is None:
            logger.error("Received invalid response structure from %s: %s", self.model_name, response)
            raise ValueError(f"Provider {self.model_name} returned an invalid response.")
        if len(response.choices) == 0:
            logger.error("Received 0 choices from %s: %s", self.model_name, response)
            raise ValueError(f"Provider {self.model_name} returned no output.")

        text_response = (response.choices[0].message.content or "").strip()
        if not text_response:
            raise ValueError("Model returned empty content")
        logger.info("Successfully received text response from %s.", self.model_name)
        return text_response
