"""Call session models."""
from typing import List, Optional, Union

from app.services.interview.stages import FIRST_STAGE, InterviewStage
from app.services.interview.state import Turn, TurnRole


class CallSession:
    """Live state of one in-progress call."""

    def __init__(
        self,
        call_sid: str,
        last_activity: float,
        stage: Union[InterviewStage, str] = FIRST_STAGE,
        history: Optional[List[Turn]] = None,
    ):
        self.call_sid = call_sid
        self.stage = stage
        self.history: List[Turn] = history if history is not None else []
        self.last_activity = last_activity  # Monotonic seconds, eviction only

    def add_turn(self, role: TurnRole, text: str) -> Turn:
        """Append a turn to the history."""
        turn = Turn(role=role, text=text or "")
        self.history.append(turn)
        return turn

    def touch(self, now: float) -> None:
        self.last_activity = now

    def __repr__(self) -> str:
        return (
            f"CallSession(call_sid={self.call_sid!r}, stage={str(self.stage)!r}, "
            f"turns={len(self.history)})"
        )
