"""Prompt templates for response augmentation."""
from typing import Dict, List

from app.services.interview.state import Turn

SYSTEM_PROMPT = (
    "You are a compassionate journalist interviewing people from rural India about their problems. "
    "Respond in simple Hindi written in Hindi script. "
    "Be conversational but professional. Use empathetic language. "
    "Keep responses under 3-4 sentences. Based on their response, acknowledge what they said, "
    "and then guide them to the next topic with a question."
)


def get_user_prompt(speech_result: str, next_topic_prompt: str) -> str:
    """Final instruction: react to what the caller said, then move to the next topic."""
    return (
        f'The person said: "{speech_result}". Now you need to respond empathetically '
        f"and then guide them to the next topic: {next_topic_prompt}"
    )


def build_messages(
    history: List[Turn], speech_result: str, next_topic_prompt: str
) -> List[Dict[str, str]]:
    """Build the chat messages for one augmentation request."""
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        *(turn.to_chat_message() for turn in history),
        {"role": "user", "content": get_user_prompt(speech_result, next_topic_prompt)},
    ]
