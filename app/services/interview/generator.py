"""Response generation for each interview turn."""
import asyncio
import logging
from typing import Optional

from pydantic import BaseModel

from app.services.call_session.models import CallSession
from app.services.interview.completion import TextCompletionClient
from app.services.interview.prompt import build_messages
from app.services.interview.stages import StageTable

logger = logging.getLogger(__name__)


class GeneratedResponse(BaseModel):
    """Text to speak next and whether it is the canned fallback."""

    text: str
    used_fallback: bool


class ResponseGenerator:
    """Produces the agent's next prompt.

    The canned prompt for the session's current stage is always available as
    the fallback. When augmentation is enabled and the caller said something
    substantial, the language model is asked to rephrase it around what the
    caller said. Any problem with that request degrades to the canned prompt.
    """

    def __init__(
        self,
        stage_table: StageTable,
        completion_client: Optional[TextCompletionClient] = None,
        use_ai: bool = False,
        timeout_seconds: float = 8.0,
        min_utterance_length: int = 5,
    ):
        self.stage_table = stage_table
        self.completion_client = completion_client
        self.use_ai = use_ai
        self.timeout_seconds = timeout_seconds
        self.min_utterance_length = min_utterance_length

    @property
    def augmentation_enabled(self) -> bool:
        return self.use_ai and self.completion_client is not None

    async def generate(self, session: CallSession, speech_result: str) -> GeneratedResponse:
        """
        Generate the next prompt for a session.

        Args:
            session: Call session; its history should already hold the caller's turn
            speech_result: What the caller just said (may be empty)

        Returns:
            GeneratedResponse with the text and whether the fallback was used
        """
        canned_prompt = self.stage_table.prompt_for(session.stage)
        fallback = GeneratedResponse(text=canned_prompt, used_fallback=True)

        if not self.augmentation_enabled:
            return fallback

        speech_result = speech_result or ""
        if len(speech_result.strip()) <= self.min_utterance_length:
            logger.debug(
                f"[GENERATOR] Utterance too short for augmentation - CallSid: {session.call_sid}"
            )
            return fallback

        messages = build_messages(session.history, speech_result, canned_prompt)
        try:
            text = await asyncio.wait_for(
                self.completion_client.complete(messages, timeout=self.timeout_seconds),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.warning(
                f"[GENERATOR] Completion timed out after {self.timeout_seconds}s, "
                f"using canned prompt - CallSid: {session.call_sid}"
            )
            return fallback
        except Exception as e:
            logger.warning(
                f"[GENERATOR] Completion failed, using canned prompt - CallSid: {session.call_sid}, "
                f"Error: {type(e).__name__}: {str(e)}"
            )
            return fallback

        if not isinstance(text, str) or not text.strip():
            logger.warning(
                f"[GENERATOR] Completion was empty, using canned prompt - CallSid: {session.call_sid}"
            )
            return fallback

        logger.info(
            f"[GENERATOR] Augmented response generated (length: {len(text)}) - "
            f"CallSid: {session.call_sid}, Stage: {session.stage}"
        )
        return GeneratedResponse(text=text.strip(), used_fallback=False)
