"""Twilio voice webhook endpoints."""
import logging
from typing import Optional
from fastapi import APIRouter, Request, Form, Depends
from fastapi.responses import Response

from app.core.config import settings
from app.core.dependencies import get_session_manager, get_twiml_renderer
from app.services.call_session.manager import CallSessionManager
from app.services.speech.twiml import INCOMING_PATH, TwiMLRenderer

router = APIRouter()
logger = logging.getLogger(__name__)


def get_base_url(request: Request) -> str:
    """
    Get the base URL for constructing absolute URLs.

    Uses BASE_URL environment variable if set (e.g., behind a proxy),
    otherwise constructs from request.
    """
    if settings.base_url:
        return settings.base_url.rstrip('/')

    return str(request.base_url).rstrip('/')


def twiml_response(twiml: str) -> Response:
    return Response(content=twiml, media_type="application/xml")


def error_response(
    request: Request, session_manager: CallSessionManager, renderer: TwiMLRenderer
) -> Response:
    """Apology TwiML so the caller never hears silence."""
    return twiml_response(
        renderer.render(session_manager.error_actions(), get_base_url(request))
    )


@router.post("/voice")
async def handle_entry(
    request: Request,
    renderer: TwiMLRenderer = Depends(get_twiml_renderer),
):
    """Entry point configured on the phone number; forwards to the welcome flow."""
    logger.info(
        f"[ENTRY] Call entry webhook - Client: {request.client.host if request.client else 'unknown'}"
    )
    return twiml_response(renderer.redirect_to(f"{get_base_url(request)}{INCOMING_PATH}"))


@router.post("/voice/incoming")
async def handle_incoming_call(
    request: Request,
    CallSid: str = Form(...),
    session_manager: CallSessionManager = Depends(get_session_manager),
    renderer: TwiMLRenderer = Depends(get_twiml_renderer),
):
    """
    Handle incoming call from Twilio.

    Welcomes the caller and gathers their first answer.
    """
    logger.info(
        f"[INCOMING CALL] Received incoming call webhook - CallSid: {CallSid}, "
        f"Client: {request.client.host if request.client else 'unknown'}"
    )

    try:
        actions = await session_manager.start_call(CallSid)
        twiml = renderer.render(actions, get_base_url(request))
        logger.info(
            f"[INCOMING CALL] Successfully processed incoming call - CallSid: {CallSid}, "
            f"TwiML length: {len(twiml)} bytes"
        )
        return twiml_response(twiml)

    except Exception as e:
        logger.error(
            f"[INCOMING CALL] Error processing incoming call - CallSid: {CallSid}, "
            f"Error: {type(e).__name__}: {str(e)}",
            exc_info=True
        )
        return error_response(request, session_manager, renderer)


@router.post("/voice/gather")
async def handle_gather(
    request: Request,
    CallSid: str = Form(...),
    SpeechResult: Optional[str] = Form(None),
    session_manager: CallSessionManager = Depends(get_session_manager),
    renderer: TwiMLRenderer = Depends(get_twiml_renderer),
):
    """
    Handle gathered speech from Twilio.

    This endpoint is called after Twilio collects the caller's answer.
    """
    logger.info(
        f"[GATHER] Received speech input - CallSid: {CallSid}, "
        f"SpeechResult length: {len(SpeechResult) if SpeechResult else 0}"
    )

    if SpeechResult:
        logger.debug(
            f"[GATHER] Speech text: '{SpeechResult[:200]}{'...' if len(SpeechResult) > 200 else ''}' - CallSid: {CallSid}"
        )
    else:
        logger.warning(f"[GATHER] No speech result provided (empty or None) - CallSid: {CallSid}")

    try:
        actions = await session_manager.advance(CallSid, SpeechResult)
        twiml = renderer.render(actions, get_base_url(request))
        logger.info(
            f"[GATHER] Successfully processed speech input - CallSid: {CallSid}, "
            f"TwiML length: {len(twiml)} bytes"
        )
        return twiml_response(twiml)

    except Exception as e:
        logger.error(
            f"[GATHER] Error processing speech input - CallSid: {CallSid}, "
            f"SpeechResult: '{SpeechResult[:100] if SpeechResult else 'None'}', "
            f"Error: {type(e).__name__}: {str(e)}",
            exc_info=True
        )
        return error_response(request, session_manager, renderer)


@router.post("/voice/no-input")
async def handle_no_input(
    request: Request,
    session_manager: CallSessionManager = Depends(get_session_manager),
    renderer: TwiMLRenderer = Depends(get_twiml_renderer),
):
    """Handle a gather that timed out without any speech."""
    logger.info("[NO INPUT] Gather timed out without speech")
    return twiml_response(
        renderer.render(session_manager.no_input_actions(), get_base_url(request))
    )
