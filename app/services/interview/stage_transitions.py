"""Stage transition logic for the interview flow."""
import logging
from typing import Optional

from app.services.interview.stages import InterviewStage, StageTable

logger = logging.getLogger(__name__)


class StageTransitionHandler:
    """Decides whether a caller turn moves the interview forward.

    By default every turn advances exactly one stage, silence included: an
    empty answer counts as a zero-length answer. With ``repeat_on_silence``
    an empty answer keeps the call on the same stage so the question can be
    asked again.
    """

    def __init__(self, stage_table: StageTable, repeat_on_silence: bool = False):
        self.stage_table = stage_table
        self.repeat_on_silence = repeat_on_silence

    def should_advance(self, speech_result: Optional[str]) -> bool:
        if not self.repeat_on_silence:
            return True
        return bool(speech_result and speech_result.strip())

    def next_stage(self, stage: InterviewStage) -> InterviewStage:
        old_stage = self.stage_table.resolve(stage)
        new_stage = self.stage_table.next_stage(old_stage).key
        if old_stage != new_stage:
            logger.info(f"[STAGE TRANSITION] Stage changed: {old_stage.value} -> {new_stage.value}")
        return new_stage
