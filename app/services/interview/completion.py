"""Text completion clients used for response augmentation."""
import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from openai import AsyncOpenAI

from app.core.config import Settings

logger = logging.getLogger(__name__)


class CompletionError(Exception):
    """Raised when a completion comes back unusable."""


class TextCompletionClient(ABC):
    """Abstract base class for chat-style text completion."""

    @abstractmethod
    async def complete(self, messages: List[Dict[str, str]], timeout: float) -> str:
        """Return the completion text for the messages, within timeout seconds."""
        pass


class OpenAICompletionClient(TextCompletionClient):
    """Completion client backed by the OpenAI chat completions API."""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        base_url: Optional[str] = None,
        max_tokens: int = 150,
        temperature: float = 0.7,
    ):
        self.client = AsyncOpenAI(api_key=api_key, base_url=base_url, max_retries=0)
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature

    async def complete(self, messages: List[Dict[str, str]], timeout: float) -> str:
        response = await asyncio.wait_for(
            self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                timeout=timeout,
            ),
            timeout=timeout,
        )

        if not response.choices:
            raise CompletionError("Completion returned no choices")
        content = response.choices[0].message.content
        if not content or not content.strip():
            raise CompletionError("Completion returned empty content")
        return content.strip()


def build_completion_client(settings: Settings) -> Optional[TextCompletionClient]:
    """Create the completion client, or None when no API key is configured."""
    if not settings.openai_api_key:
        logger.info("[COMPLETION] No OpenAI API key configured, augmentation unavailable")
        return None

    return OpenAICompletionClient(
        api_key=settings.openai_api_key,
        model=settings.openai_model,
        base_url=settings.openai_base_url,
        max_tokens=settings.llm_max_tokens,
        temperature=settings.llm_temperature,
    )
