"""Call session manager: the per-call interview state machine."""
import logging
from typing import Awaitable, Callable, List, Optional

from app.services.call_session.store import SessionStore
from app.services.interview.actions import (
    NO_INPUT_TARGET,
    DialogAction,
    GatherSpeech,
    Pause,
    Redirect,
    Speak,
)
from app.services.interview.constants import (
    APOLOGY_MESSAGE,
    CLOSING_PAUSE_MS,
    FAREWELL_MESSAGES,
    FRAGMENT_PAUSE_MS,
    NO_INPUT_MESSAGE,
    REPEAT_PROMPT,
    SPEAK_NOW_PROMPT,
    STABILIZING_PAUSE_MS,
    START_SPEAKING_PROMPT,
    WELCOME_MESSAGES,
    WELCOME_PAUSE_MS,
)
from app.services.interview.generator import ResponseGenerator
from app.services.interview.stage_transitions import StageTransitionHandler
from app.services.interview.stages import FIRST_STAGE, StageTable
from app.services.interview.state import Turn, TurnRole
from app.services.speech.chunker import DEFAULT_MAX_LENGTH, chunk

logger = logging.getLogger(__name__)

CompletionHook = Callable[[str, List[Turn]], Awaitable[None]]


class CallSessionManager:
    """Manages call sessions and drives the interview flow.

    Every entry point returns a list of dialog actions and never raises for
    caller input: empty speech, a corrupted stage or a failed augmentation
    all still produce a usable response.
    """

    def __init__(
        self,
        store: SessionStore,
        stage_table: StageTable,
        generator: ResponseGenerator,
        transitions: Optional[StageTransitionHandler] = None,
        max_chunk_length: int = DEFAULT_MAX_LENGTH,
        gather_timeout_ms: int = 10000,
        on_complete: Optional[CompletionHook] = None,
        evict_on_completion: bool = False,
    ):
        self.store = store
        self.stage_table = stage_table
        self.generator = generator
        self.transitions = transitions or StageTransitionHandler(stage_table)
        self.max_chunk_length = max_chunk_length
        self.gather_timeout_ms = gather_timeout_ms
        self.on_complete = on_complete
        self.evict_on_completion = evict_on_completion

    async def start_call(self, call_sid: str) -> List[DialogAction]:
        """
        Welcome a caller and ask for their first answer.

        Creates the session on first contact. A session that already exists
        is reused as is.
        """
        async with self.store.exclusive(call_sid) as session:
            await self.store.touch(call_sid)
            if not session.history:
                for message in WELCOME_MESSAGES:
                    session.add_turn(TurnRole.AGENT, message)
            logger.info(f"[SESSION MANAGER] Call started - CallSid: {call_sid}, Stage: {session.stage}")

        actions: List[DialogAction] = [Pause(duration_ms=WELCOME_PAUSE_MS)]
        for message in WELCOME_MESSAGES:
            actions.append(Speak(text=message))
            actions.append(Pause(duration_ms=STABILIZING_PAUSE_MS))
        actions.append(
            GatherSpeech(prompt_text=START_SPEAKING_PROMPT, timeout_ms=self.gather_timeout_ms)
        )
        actions.append(Redirect(target=NO_INPUT_TARGET))
        return actions

    async def advance(self, call_sid: str, speech_result: Optional[str] = None) -> List[DialogAction]:
        """
        Process one caller answer and move the interview forward.

        Args:
            call_sid: Twilio call SID
            speech_result: Recognized speech; None or empty when the caller was silent

        Returns:
            Dialog actions for the telephony adapter to render
        """
        speech_result = speech_result or ""
        completed_now = False

        async with self.store.exclusive(call_sid) as session:
            await self.store.touch(call_sid)

            if not self.stage_table.is_known(session.stage):
                logger.warning(
                    f"[SESSION MANAGER] Session has unknown stage '{session.stage}', "
                    f"resetting to {FIRST_STAGE.value} - CallSid: {call_sid}"
                )
                session.stage = FIRST_STAGE
            was_terminal = self.stage_table.is_terminal(session.stage)

            session.add_turn(TurnRole.CALLER, speech_result)

            if self.transitions.should_advance(speech_result):
                response = await self.generator.generate(session, speech_result)
                response_text = response.text
                session.add_turn(TurnRole.AGENT, response_text)
                session.stage = self.transitions.next_stage(session.stage)
                logger.info(
                    f"[SESSION MANAGER] Turn processed - CallSid: {call_sid}, "
                    f"Stage: {session.stage}, Fallback: {response.used_fallback}"
                )
            else:
                response_text = REPEAT_PROMPT
                session.add_turn(TurnRole.AGENT, response_text)
                logger.info(
                    f"[SESSION MANAGER] No speech, repeating stage {session.stage} - CallSid: {call_sid}"
                )

            is_terminal = self.stage_table.is_terminal(session.stage)

            actions: List[DialogAction] = [Pause(duration_ms=STABILIZING_PAUSE_MS)]
            actions.extend(self._speak(chunk(response_text, self.max_chunk_length)))

            if not is_terminal:
                actions.append(Pause(duration_ms=CLOSING_PAUSE_MS))
                actions.append(
                    GatherSpeech(prompt_text=SPEAK_NOW_PROMPT, timeout_ms=self.gather_timeout_ms)
                )
                actions.append(Redirect(target=NO_INPUT_TARGET))
            else:
                actions.append(Pause(duration_ms=CLOSING_PAUSE_MS))
                actions.extend(self._speak(FAREWELL_MESSAGES))
                if not was_terminal:
                    completed_now = True
                    await self._notify_complete(call_sid, list(session.history))

        if completed_now and self.evict_on_completion:
            await self.store.delete(call_sid)

        return actions

    def no_input_actions(self) -> List[DialogAction]:
        """Actions for a caller who never answered the gather."""
        return [Speak(text=NO_INPUT_MESSAGE)]

    def error_actions(self) -> List[DialogAction]:
        """Generic apology used when the call flow itself fails."""
        return [Speak(text=APOLOGY_MESSAGE)]

    def _speak(self, fragments: List[str]) -> List[DialogAction]:
        """Speak each non-blank fragment, with a short pause between fragments."""
        actions: List[DialogAction] = []
        for fragment in fragments:
            fragment = fragment.strip()
            if not fragment:
                continue
            if actions:
                actions.append(Pause(duration_ms=FRAGMENT_PAUSE_MS))
            actions.append(Speak(text=fragment))
        return actions

    async def _notify_complete(self, call_sid: str, history: List[Turn]) -> None:
        if self.on_complete is None:
            return
        try:
            await self.on_complete(call_sid, history)
            logger.info(
                f"[SESSION MANAGER] Interview completed, transcript handed off - "
                f"CallSid: {call_sid}, Turns: {len(history)}"
            )
        except Exception as e:
            logger.error(
                f"[SESSION MANAGER] Failed to record completed call - CallSid: {call_sid}, "
                f"Error: {type(e).__name__}: {str(e)}",
                exc_info=True,
            )
