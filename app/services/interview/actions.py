"""Dialog actions emitted by the conversation engine.

The engine only describes what the call should do next. Rendering these
actions into the telephony wire format is left to an adapter (see
``app.services.speech.twiml``).
"""
from typing import Annotated, List, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

NO_INPUT_TARGET = "no-input"


class Speak(BaseModel):
    """Synthesize text to the caller."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["speak"] = "speak"
    text: str


class Pause(BaseModel):
    """Stay silent for a while."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["pause"] = "pause"
    duration_ms: int


class GatherSpeech(BaseModel):
    """Prompt the caller and collect their next answer."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["gather"] = "gather"
    prompt_text: str
    timeout_ms: int


class Redirect(BaseModel):
    """Hand the call to another handler."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["redirect"] = "redirect"
    target: str


DialogAction = Annotated[
    Union[Speak, Pause, GatherSpeech, Redirect], Field(discriminator="kind")
]


def spoken_text(actions: List[DialogAction]) -> List[str]:
    """Get the text of every Speak action, in order."""
    return [action.text for action in actions if isinstance(action, Speak)]
