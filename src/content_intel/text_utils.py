"""Extractive summarization, excerpts and reading time for Bengali/English text."""

import math
import re
from dataclasses import dataclass
from typing import List

# Sentence ends at the Bengali dari (।) or . ! ? when whitespace follows
SENTENCE_BOUNDARY = re.compile(r"(?<=[।.!?])\s+")
WHITESPACE = re.compile(r"\s+")

DEFAULT_SUMMARY_LENGTH = 300
DEFAULT_EXCERPT_LENGTH = 160
DEFAULT_WORDS_PER_MINUTE = 200

# economy, politics, cricket, government, Bangladesh, decision, important,
# development, successful, special, highest, allegation, main, world,
# country, people, minister, parliament, law
SIGNIFICANT_WORDS = (
    "অর্থনীতি",
    "রাজনীতি",
    "ক্রিকেট",
    "সরকার",
    "বাংলাদেশ",
    "সিদ্ধান্ত",
    "গুরুত্বপূর্ণ",
    "উন্নয়ন",
    "সফল",
    "বিশেষ",
    "সর্বাধিক",
    "অভিযোগ",
    "মূল",
    "বিশ্ব",
    "দেশ",
    "জনগণ",
    "মন্ত্রী",
    "সংসদ",
    "আইন",
)


@dataclass
class SentenceScore:
    """A sentence with its importance score and position in the source text."""

    sentence: str
    score: int
    original_index: int


def split_sentences(text: str) -> List[str]:
    """Split text at sentence-final punctuation followed by whitespace."""
    return SENTENCE_BOUNDARY.split(text)


def count_words(text: str) -> int:
    """Whitespace word count; punctuation is not stripped and "" counts as one."""
    return len(WHITESPACE.split(text))


def score_sentence(sentence: str, index: int, total: int) -> int:
    """Importance score for one sentence.

    Position: +3 first, +2 second, +2 last. Length: +1 for 6-24 words.
    Keywords: +1 per significance keyword contained in the sentence.
    """
    score = 0

    if index == 0:
        score += 3
    if index == 1:
        score += 2
    if index == total - 1:
        score += 2

    word_count = count_words(sentence)
    if 5 < word_count < 25:
        score += 1

    for word in SIGNIFICANT_WORDS:
        if word in sentence:
            score += 1

    return score


def summarize_text(text: str, max_length: int = DEFAULT_SUMMARY_LENGTH) -> str:
    """Create an extractive summary by selecting key sentences.

    Sentences are scored by position, length and keyword presence; the top
    ``max(3, ceil(n / 5))`` are put back in reading order and appended while
    they fit in ``max_length``. The first sentence that would overflow ends
    the summary. Identical input always yields identical output.

    Args:
        text: The full text to summarize
        max_length: Maximum summary length in characters

    Returns:
        The summary, or ``text`` itself when it is already short enough or
        has three sentences or fewer
    """
    if not text or len(text) <= max_length:
        return text

    sentences = split_sentences(text)
    if len(sentences) <= 3:
        return text

    scored = [
        SentenceScore(
            sentence=sentence,
            score=score_sentence(sentence, index, len(sentences)),
            original_index=index,
        )
        for index, sentence in enumerate(sentences)
    ]

    scored.sort(key=lambda s: (-s.score, s.original_index))

    selection_size = max(3, math.ceil(len(sentences) / 5))
    selected = sorted(scored[:selection_size], key=lambda s: s.original_index)

    parts: List[str] = []
    current_length = 0
    for item in selected:
        if current_length + len(item.sentence) > max_length:
            break
        parts.append(item.sentence)
        # Counts the separating space
        current_length += len(item.sentence) + 1

    return " ".join(parts).strip()


def calculate_reading_time(
    text: str, words_per_minute: int = DEFAULT_WORDS_PER_MINUTE
) -> int:
    """Estimated reading time in whole minutes, rounded up."""
    if words_per_minute <= 0:
        raise ValueError(f"words_per_minute must be positive, got {words_per_minute}")
    return math.ceil(count_words(text) / words_per_minute)


def generate_excerpt(text: str, max_length: int = DEFAULT_EXCERPT_LENGTH) -> str:
    """Leading whole sentences of the text that fit in ``max_length``.

    When not even the first sentence fits, the text is cut at
    ``max_length - 3`` characters and "..." appended.
    """
    if not text or len(text) <= max_length:
        return text

    excerpt = ""
    for sentence in split_sentences(text):
        if len(excerpt) + len(sentence) > max_length:
            break
        excerpt += sentence + " "

    excerpt = excerpt.strip()

    if not excerpt:
        excerpt = text

    if len(excerpt) > max_length:
        excerpt = excerpt[: max_length - 3] + "..."

    return excerpt
