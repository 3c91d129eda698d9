"""Deterministic text to fixed-length feature vector.

This is a cheap character hash, not linguistic feature extraction. Vectors
produced at different times are compared against each other, so the
truncation and modulo rules below must stay exactly as they are.
"""

import re
from typing import List

VECTOR_DIM = 100
MAX_TOKENS = 20
MAX_CHARS_PER_TOKEN = 5

# Leading/trailing whitespace yields empty tokens that still occupy a slot
_WHITESPACE = re.compile(r"\s+")


def vectorize(text: str) -> List[float]:
    """Convert text into a 100-dimensional feature vector.

    Each of the first 20 whitespace tokens contributes its first 5
    characters; a character's code point (mod 1000, scaled to [0, 1)) is
    written to slot ``(token_index * 5 + char_index) % 100``.

    Args:
        text: Any text (Bengali, English or mixed)

    Returns:
        List of 100 floats. All zeros for empty input.
    """
    vector = [0.0] * VECTOR_DIM
    if not text:
        return vector

    tokens = _WHITESPACE.split(text.lower())
    for i, token in enumerate(tokens[:MAX_TOKENS]):
        for j, char in enumerate(token[:MAX_CHARS_PER_TOKEN]):
            index = (i * MAX_CHARS_PER_TOKEN + j) % VECTOR_DIM
            vector[index] = (ord(char) % 1000) / 1000

    return vector
