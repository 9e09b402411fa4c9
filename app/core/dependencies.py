"""FastAPI dependencies and service wiring."""
from typing import Optional

from fastapi import Request

from app.core.config import Settings, settings
from app.services.call_session.manager import CallSessionManager, CompletionHook
from app.services.call_session.store import SessionStore
from app.services.interview.completion import TextCompletionClient, build_completion_client
from app.services.interview.generator import ResponseGenerator
from app.services.interview.stage_transitions import StageTransitionHandler
from app.services.interview.stages import StageTable
from app.services.speech.twiml import TwiMLRenderer


def build_session_manager(
    config: Settings,
    store: SessionStore,
    completion_client: Optional[TextCompletionClient] = None,
    on_complete: Optional[CompletionHook] = None,
) -> CallSessionManager:
    """Wire the interview engine from settings."""
    stage_table = StageTable(prompt_overrides=config.stage_prompts)
    if completion_client is None and config.use_ai:
        completion_client = build_completion_client(config)

    generator = ResponseGenerator(
        stage_table,
        completion_client=completion_client,
        use_ai=config.use_ai,
        timeout_seconds=config.llm_timeout_seconds,
        min_utterance_length=config.min_utterance_length,
    )
    return CallSessionManager(
        store=store,
        stage_table=stage_table,
        generator=generator,
        transitions=StageTransitionHandler(stage_table, repeat_on_silence=config.repeat_on_silence),
        max_chunk_length=config.max_chunk_length,
        gather_timeout_ms=config.gather_timeout_seconds * 1000,
        on_complete=on_complete,
        evict_on_completion=config.evict_on_completion,
    )


def get_session_manager(request: Request) -> CallSessionManager:
    """Get the process-wide call session manager."""
    return request.app.state.session_manager


def get_twiml_renderer() -> TwiMLRenderer:
    """Get TwiML renderer instance."""
    return TwiMLRenderer(voice=settings.tts_voice, language=settings.tts_language)
