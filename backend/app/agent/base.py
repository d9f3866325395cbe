from abc import ABC, abstractmethod
from functools import cached_property
from typing import Generic, TypeVar

from pydantic import BaseModel

from app.agent.llm_client import LLMClient
from app.core.config import settings

OutType = TypeVar("OutType", bound=BaseModel | str)


class BaseAgent(ABC, Generic[OutType]):
    """Abstract base class for the text-generation agents used by the pack pipeline."""

    def __init__(self, model_name: str | None = None):
        self.model_name = model_name or settings.MODEL_DEFAULT

    @cached_property
    def llm(self) -> LLMClient:
        # Built on first use so a missing API key surfaces inside the agent's
        # own error handling rather than at construction time.
        return LLMClient(model_name=self.model_name)

    @abstractmethod
    async def run(self, *args, **kwargs) -> OutType:
        """Run the agent and return its artifact. Implementations never raise."""
        pass
