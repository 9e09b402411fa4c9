"""Render dialog actions as Twilio TwiML."""
from typing import List

from app.services.interview.actions import (
    NO_INPUT_TARGET,
    DialogAction,
    GatherSpeech,
    Pause,
    Redirect,
    Speak,
)

GATHER_PATH = "/webhooks/voice/gather"
NO_INPUT_PATH = "/webhooks/voice/no-input"
INCOMING_PATH = "/webhooks/voice/incoming"


def escape_xml(text: str) -> str:
    """Escape XML special characters."""
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&apos;")
    )


def format_seconds(duration_ms: int) -> str:
    """Format milliseconds as a TwiML seconds value, e.g. 500 -> '0.5'."""
    return f"{duration_ms / 1000:g}"


class TwiMLRenderer:
    """Turns the engine's dialog actions into a TwiML document."""

    def __init__(self, voice: str = "Polly.Aditi", language: str = "hi-IN"):
        self.voice = voice
        self.language = language

    def render(self, actions: List[DialogAction], base_url: str = "") -> str:
        """
        Render actions as TwiML.

        Args:
            actions: Dialog actions in the order they should play
            base_url: Absolute base URL for callback targets (may be empty)

        Returns:
            TwiML XML string
        """
        base_url = base_url.rstrip("/")
        lines = [self._render_action(action, base_url) for action in actions]
        body = "\n".join(f"    {line}" for line in lines)
        if body:
            body += "\n"
        return f"""<?xml version="1.0" encoding="UTF-8"?>
<Response>
{body}</Response>"""

    def redirect_to(self, url: str) -> str:
        """TwiML that only redirects the call."""
        return f"""<?xml version="1.0" encoding="UTF-8"?>
<Response>
    <Redirect method="POST">{escape_xml(url)}</Redirect>
</Response>"""

    def _say(self, text: str) -> str:
        return (
            f'<Say voice="{escape_xml(self.voice)}" language="{escape_xml(self.language)}">'
            f"{escape_xml(text)}</Say>"
        )

    def _render_action(self, action: DialogAction, base_url: str) -> str:
        if isinstance(action, Speak):
            return self._say(action.text)
        if isinstance(action, Pause):
            return f'<Pause length="{format_seconds(action.duration_ms)}"/>'
        if isinstance(action, GatherSpeech):
            action_url = escape_xml(f"{base_url}{GATHER_PATH}")
            timeout = max(1, round(action.timeout_ms / 1000))
            return (
                f'<Gather input="speech" action="{action_url}" method="POST" '
                f'language="{escape_xml(self.language)}" speechTimeout="auto" timeout="{timeout}">'
                f"{self._say(action.prompt_text)}</Gather>"
            )
        if isinstance(action, Redirect):
            target = NO_INPUT_PATH if action.target == NO_INPUT_TARGET else action.target
            return f'<Redirect method="POST">{escape_xml(f"{base_url}{target}")}</Redirect>'
        raise ValueError(f"Unsupported dialog action: {action!r}")
