"""Keyword heuristics used when no remote classifier answers.

These are presence checks over fixed Bengali keyword lists. They make no
claim to linguistic correctness: the sentiment confidence in particular is a
constant, not a calibrated probability.
"""

import re
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, List

from .text_utils import count_words

# Fixed confidence reported by the presence classifier, whatever matched
FALLBACK_CONFIDENCE = 0.75

# good, excellent, superb, beautiful, praiseworthy
POSITIVE_WORDS = ("ভালো", "চমৎকার", "দুর্দান্ত", "সুন্দর", "প্রশংসনীয়")
# bad, terrible, sad, annoying, condemnable
NEGATIVE_WORDS = ("খারাপ", "ভয়ানক", "দুঃখজনক", "বিরক্তিকর", "নিন্দনীয়")

GENERIC_TAG = "সাধারণ"
MAX_TAGS = 5
MAX_TOPICS = 3

TAG_KEYWORDS: Dict[str, tuple] = {
    # politics
    "রাজনীতি": ("নির্বাচন", "সরকার", "দল", "নেতা", "মন্ত্রী", "প্রধানমন্ত্রী"),
    # sports
    "খেলাধুলা": ("ক্রিকেট", "ফুটবল", "খেলা", "ম্যাচ", "টুর্নামেন্ট"),
    # economy
    "অর্থনীতি": ("টাকা", "ব্যাংক", "ব্যবসা", "বাজার", "দাম", "বিনিয়োগ"),
    # technology
    "প্রযুক্তি": ("মোবাইল", "ইন্টারনেট", "কম্পিউটার", "অ্যাপ", "সফটওয়্যার"),
    # education
    "শিক্ষা": ("স্কুল", "কলেজ", "বিশ্ববিদ্যালয়", "পরীক্ষা", "ছাত্র"),
    # health
    "স্বাস্থ্য": ("হাসপাতাল", "ডাক্তার", "চিকিৎসা", "রোগ", "ওষুধ"),
}

TOPIC_KEYWORDS: Dict[str, tuple] = {
    "স্থানীয় সংবাদ": ("ঢাকা", "চট্টগ্রাম", "সিলেট", "খুলনা", "বরিশাল"),
    "আন্তর্জাতিক": ("আমেরিকা", "চীন", "ভারত", "পাকিস্তান", "বিশ্ব"),
    "সামাজিক": ("সমাজ", "পরিবার", "বিবাহ", "শিশু", "নারী"),
    "পরিবেশ": ("পরিবেশ", "বন", "নদী", "দূষণ", "জলবায়ু"),
    "সংস্কৃতি": ("সংস্কৃতি", "শিল্প", "সাহিত্য", "সিনেমা", "গান"),
}


class SentimentLabel(str, Enum):
    """Sentiment labels shared by remote and local classifiers."""

    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


class Complexity(str, Enum):
    """Reading complexity, rendered in Bengali for display."""

    EASY = "সহজ"
    MEDIUM = "মাধ্যম"
    HARD = "কঠিন"


# Display metadata handed to the presentation layer with each label
_SENTIMENT_DISPLAY = {
    SentimentLabel.POSITIVE: {"display_label": "ইতিবাচক", "emoji": "😊", "tone": "green"},
    SentimentLabel.NEGATIVE: {"display_label": "নেতিবাচক", "emoji": "😞", "tone": "red"},
    SentimentLabel.NEUTRAL: {"display_label": "নিরপেক্ষ", "emoji": "😐", "tone": "gray"},
}


@dataclass
class SentimentResult:
    """Sentiment label, confidence in [0, 1] and display metadata."""

    label: SentimentLabel
    confidence: float
    display_label: str
    emoji: str
    tone: str
    source: str = "local"

    @property
    def confidence_percent(self) -> int:
        return round(self.confidence * 100)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["label"] = self.label.value
        data["confidence_percent"] = self.confidence_percent
        return data


def make_sentiment(
    label: SentimentLabel, confidence: float, source: str = "local"
) -> SentimentResult:
    """Attach display metadata to a label/confidence pair."""
    display = _SENTIMENT_DISPLAY[label]
    return SentimentResult(
        label=label,
        confidence=confidence,
        display_label=display["display_label"],
        emoji=display["emoji"],
        tone=display["tone"],
        source=source,
    )


def fallback_sentiment(text: str) -> SentimentResult:
    """Presence-based sentiment: which keyword lists appear at all.

    Positive keywords only -> positive, negative only -> negative, both or
    neither -> neutral. Match counts are ignored and confidence is always
    FALLBACK_CONFIDENCE.
    """
    has_positive = any(word in text for word in POSITIVE_WORDS)
    has_negative = any(word in text for word in NEGATIVE_WORDS)

    if has_positive and not has_negative:
        label = SentimentLabel.POSITIVE
    elif has_negative and not has_positive:
        label = SentimentLabel.NEGATIVE
    else:
        label = SentimentLabel.NEUTRAL

    return make_sentiment(label, FALLBACK_CONFIDENCE)


def fallback_tags(content: str, title: str = "") -> List[str]:
    """Category tags whose keywords appear in title or content.

    Returns:
        Up to 5 tags in fixed category order, or the generic tag when no
        category matches
    """
    combined = f"{title} {content}".lower()
    tags = [
        tag
        for tag, keywords in TAG_KEYWORDS.items()
        if any(keyword in combined for keyword in keywords)
    ]
    return tags[:MAX_TAGS] if tags else [GENERIC_TAG]


def extract_topics(content: str, title: str = "") -> List[str]:
    """Up to three broad topics whose keywords appear in title or content."""
    combined = f"{title} {content}".lower()
    topics = [
        topic
        for topic, keywords in TOPIC_KEYWORDS.items()
        if any(keyword in combined for keyword in keywords)
    ]
    return topics[:MAX_TOPICS]


def analyze_complexity(content: str) -> Complexity:
    """Classify reading complexity from word count and words per sentence.

    Sentences are counted as ।-separated pieces, so text without a dari is a
    single sentence.
    """
    word_count = count_words(content)
    sentence_count = len(content.split("।"))
    avg_words_per_sentence = word_count / sentence_count

    if word_count < 300 and avg_words_per_sentence < 15:
        return Complexity.EASY
    if word_count < 800 and avg_words_per_sentence < 25:
        return Complexity.MEDIUM
    return Complexity.HARD


def normalize_label(raw: str) -> SentimentLabel:
    """Map free-form classifier labels (e.g. 'POSITIVE', '5 stars') onto our labels."""
    value = raw.strip().lower()
    if value.startswith("pos") or re.match(r"^[45]\s*star", value):
        return SentimentLabel.POSITIVE
    if value.startswith("neg") or re.match(r"^[12]\s*star", value):
        return SentimentLabel.NEGATIVE
    return SentimentLabel.NEUTRAL
