"""Interview stages and the stage table."""
import logging
from enum import Enum
from typing import Dict, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)


class InterviewStage(str, Enum):
    """Topics of the interview, in the order they are covered."""

    INTRO = "intro"  # Village, district and the problem itself
    PROBLEM = "problem"  # How long it has gone on, what was tried
    IMPACT = "impact"  # Who is affected
    SOLUTION = "solution"  # What the caller thinks would fix it
    CONTACT = "contact"  # Name and number for follow-up
    CLOSING = "closing"  # Anything else to add
    END = "end"  # Interview finished

    def __str__(self) -> str:
        """Return the string value of the stage."""
        return self.value


FIRST_STAGE = InterviewStage.INTRO

# Prompt spoken when the call leaves each stage: it acknowledges the answer
# and asks the question for the next topic.
DEFAULT_STAGE_PROMPTS: Dict[InterviewStage, str] = {
    InterviewStage.INTRO: (
        "धन्यवाद। अब मुझे बताएं, यह समस्या कब से चल रही है? "
        "क्या आपने या आपके समुदाय ने इसे हल करने का कोई प्रयास किया है?"
    ),
    InterviewStage.PROBLEM: (
        "समझ गया। यह समस्या आपके गांव के कितने लोगों को प्रभावित कर रही है? "
        "क्या इसका कोई विशेष प्रभाव बच्चों, महिलाओं या बुजुर्गों पर पड़ा है?"
    ),
    InterviewStage.IMPACT: (
        "आपके अनुसार, इस समस्या का समाधान क्या होना चाहिए? "
        "क्या आपके पास कोई सुझाव है?"
    ),
    InterviewStage.SOLUTION: (
        "धन्यवाद। क्या आप अपना नाम और एक संपर्क नंबर बता सकते हैं "
        "ताकि हमारे पत्रकार आपसे अधिक जानकारी के लिए संपर्क कर सकें?"
    ),
    InterviewStage.CONTACT: (
        "बहुत बढ़िया। क्या कोई अन्य जानकारी है जो आप इस मुद्दे के बारे में हमें बताना चाहते हैं?"
    ),
    InterviewStage.CLOSING: (
        "धन्यवाद। आपकी जानकारी हमारे पत्रकारों तक पहुंच जाएगी "
        "और अगर आवश्यक हुआ तो हम आपसे संपर्क करेंगे।"
    ),
}
DEFAULT_STAGE_PROMPTS[InterviewStage.END] = DEFAULT_STAGE_PROMPTS[InterviewStage.CLOSING]

STAGE_ORDER = [
    InterviewStage.INTRO,
    InterviewStage.PROBLEM,
    InterviewStage.IMPACT,
    InterviewStage.SOLUTION,
    InterviewStage.CONTACT,
    InterviewStage.CLOSING,
    InterviewStage.END,
]


class StageDefinition(BaseModel):
    """One topic of the interview."""

    model_config = ConfigDict(frozen=True)

    key: InterviewStage
    prompt: str
    successor: Optional[InterviewStage] = None  # None for the terminal stage


class StageTable:
    """Read-only lookup of stage definitions.

    Unknown stage keys resolve to the first stage so a corrupted session
    can carry on instead of dropping the call.
    """

    def __init__(self, prompt_overrides: Optional[Mapping[str, str]] = None):
        prompts = dict(DEFAULT_STAGE_PROMPTS)
        for key, prompt in (prompt_overrides or {}).items():
            if not self.is_known(key):
                logger.warning(f"[STAGE TABLE] Ignoring prompt override for unknown stage '{key}'")
                continue
            prompts[InterviewStage(key)] = prompt

        self._definitions: Dict[InterviewStage, StageDefinition] = {}
        for index, stage in enumerate(STAGE_ORDER):
            successor = STAGE_ORDER[index + 1] if index + 1 < len(STAGE_ORDER) else None
            self._definitions[stage] = StageDefinition(
                key=stage, prompt=prompts[stage], successor=successor
            )

    @staticmethod
    def resolve(stage: Union[InterviewStage, str, None]) -> InterviewStage:
        """Map a raw stage key to a known stage, defaulting to the first one."""
        try:
            return InterviewStage(stage)
        except ValueError:
            logger.warning(
                f"[STAGE TABLE] Unknown stage '{stage}', falling back to {FIRST_STAGE.value}"
            )
            return FIRST_STAGE

    @staticmethod
    def is_known(stage: Union[InterviewStage, str, None]) -> bool:
        try:
            InterviewStage(stage)
        except ValueError:
            return False
        return True

    def definition(self, stage: Union[InterviewStage, str]) -> StageDefinition:
        return self._definitions[self.resolve(stage)]

    def next_stage(self, stage: Union[InterviewStage, str]) -> StageDefinition:
        """Get the definition of the stage that follows. The terminal stage maps to itself."""
        current = self.definition(stage)
        if current.successor is None:
            return current
        return self._definitions[current.successor]

    def prompt_for(self, stage: Union[InterviewStage, str]) -> str:
        return self.definition(stage).prompt

    def is_terminal(self, stage: Union[InterviewStage, str]) -> bool:
        return self.definition(stage).successor is None
