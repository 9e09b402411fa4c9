"""Split generated text into fragments that synthesize cleanly."""
import re
from typing import List

DEFAULT_MAX_LENGTH = 80

# Connective phrases that make a natural pause point in spoken Hindi
CONNECTIVE_PHRASES = [" के बाद ", " और ", " तथा ", " पर "]

# Sentence and clause marks, including the Devanagari full stop (danda)
PUNCTUATION_MARKS = ",.।?!;-"

_BOUNDARY_PATTERN = re.compile(
    "("
    + "|".join(re.escape(phrase) for phrase in CONNECTIVE_PHRASES)
    + "|["
    + re.escape(PUNCTUATION_MARKS)
    + "])"
)


def tokenize(text: str) -> List[str]:
    """
    Split text on boundary marks, keeping each mark at the end of the token before it.

    Joining the tokens gives back the original text.
    """
    parts = _BOUNDARY_PATTERN.split(text)
    tokens = []
    # re.split with a capture group alternates text, mark, text, mark, ..., text
    for i in range(0, len(parts), 2):
        token = parts[i]
        if i + 1 < len(parts):
            token += parts[i + 1]
        if token:
            tokens.append(token)
    return tokens


def chunk(text: str, max_length: int = DEFAULT_MAX_LENGTH) -> List[str]:
    """
    Break text into fragments no longer than max_length.

    Fragments end on punctuation or connective boundaries. A single token
    longer than max_length is never split and comes back as its own fragment.

    Args:
        text: Text to break up
        max_length: Nominal maximum fragment length in characters

    Returns:
        Fragments in order; their concatenation equals text
    """
    if len(text) <= max_length:
        return [text]

    chunks: List[str] = []
    current = ""
    for token in tokenize(text):
        if current and len(current) + len(token) > max_length:
            chunks.append(current)
            current = token
        else:
            current += token

    if current:
        chunks.append(current)

    return chunks
