"""Conversation turns."""
from enum import Enum
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict


class TurnRole(str, Enum):
    """Who spoke a turn."""

    CALLER = "caller"
    AGENT = "agent"

    def __str__(self) -> str:
        return self.value


class Turn(BaseModel):
    """One utterance in the conversation."""

    model_config = ConfigDict(frozen=True)

    role: TurnRole
    text: str = ""  # Empty for a caller turn with no speech

    def to_chat_message(self) -> Dict[str, str]:
        """Convert to an OpenAI-style chat message."""
        role = "user" if self.role == TurnRole.CALLER else "assistant"
        return {"role": role, "content": self.text}


def transcript_payload(history: List[Turn]) -> List[Dict[str, Any]]:
    """Serialize a history for storage."""
    return [turn.model_dump(mode="json") for turn in history]
