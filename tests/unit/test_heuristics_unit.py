"""Unit tests for the local keyword heuristics."""

from content_intel.heuristics import (
    FALLBACK_CONFIDENCE,
    GENERIC_TAG,
    Complexity,
    SentimentLabel,
    analyze_complexity,
    extract_topics,
    fallback_sentiment,
    fallback_tags,
    make_sentiment,
    normalize_label,
)


class TestFallbackSentiment:
    """Presence-based sentiment classifier."""

    def test_positive_only(self) -> None:
        """Test positive keywords alone give a positive label."""
        result = fallback_sentiment("খেলাটি সত্যিই ভালো ছিল")

        assert result.label == SentimentLabel.POSITIVE
        assert result.confidence == FALLBACK_CONFIDENCE
        assert result.display_label == "ইতিবাচক"

    def test_negative_only(self) -> None:
        """Test negative keywords alone give a negative label."""
        result = fallback_sentiment("আজকের আবহাওয়া খুব খারাপ")

        assert result.label == SentimentLabel.NEGATIVE
        assert result.tone == "red"

    def test_both_lists_is_neutral(self) -> None:
        """Test text with both kinds of keywords is neutral, not a vote."""
        result = fallback_sentiment("ভালো চমৎকার দুর্দান্ত কিন্তু খারাপ")

        assert result.label == SentimentLabel.NEUTRAL

    def test_no_keywords_is_neutral(self) -> None:
        """Test text with no keywords is neutral at the same confidence."""
        result = fallback_sentiment("আজ বৃহস্পতিবার")

        assert result.label == SentimentLabel.NEUTRAL
        assert result.confidence == FALLBACK_CONFIDENCE

    def test_to_dict(self) -> None:
        """Test the serialized form carries plain label values and a percentage."""
        data = make_sentiment(SentimentLabel.POSITIVE, 0.75).to_dict()

        assert data["label"] == "positive"
        assert data["confidence"] == 0.75
        assert data["confidence_percent"] == 75
        assert data["source"] == "local"
        assert data["emoji"] == "😊"


class TestFallbackTags:
    """Category tags from keyword presence."""

    def test_single_category(self) -> None:
        """Test a sports article is tagged as sports."""
        assert fallback_tags("ফুটবল ম্যাচ আজ বিকেলে") == ["খেলাধুলা"]

    def test_declaration_order(self) -> None:
        """Test multiple matches come back in fixed category order."""
        tags = fallback_tags("বাংলাদেশ ক্রিকেট দল জিতেছে")

        assert tags == ["রাজনীতি", "খেলাধুলা"]

    def test_title_is_considered(self) -> None:
        """Test keywords in the title count as well as the body."""
        assert fallback_tags("", title="হাসপাতাল") == ["স্বাস্থ্য"]

    def test_generic_when_nothing_matches(self) -> None:
        """Test the generic tag is returned when no category matches."""
        assert fallback_tags("আজকের আবহাওয়া") == [GENERIC_TAG]


def test_topics_capped_at_three() -> None:
    """Test only the first three matching topics are returned."""
    topics = extract_topics("ঢাকা, চীন, নদী দূষণ ও গান")

    assert topics == ["স্থানীয় সংবাদ", "আন্তর্জাতিক", "পরিবেশ"]


def test_topics_empty_when_nothing_matches() -> None:
    """Test no topic is invented for unrelated text."""
    assert extract_topics("আজ বৃহস্পতিবার") == []


class TestComplexity:
    """Reading complexity from word and sentence counts."""

    def test_easy(self) -> None:
        """Test short text with short sentences is easy."""
        assert analyze_complexity("ছোট লেখা।") == Complexity.EASY

    def test_medium(self) -> None:
        """Test 400 words in 20-word sentences is medium."""
        sentence = " ".join(["শব্দ"] * 20)
        content = "। ".join([sentence] * 20) + "।"

        assert analyze_complexity(content) == Complexity.MEDIUM

    def test_hard_by_length(self) -> None:
        """Test a very long text is hard."""
        assert analyze_complexity(" ".join(["শব্দ"] * 900)) == Complexity.HARD

    def test_hard_by_sentence_length(self) -> None:
        """Test a short text with no sentence breaks is hard when sentences are long."""
        assert analyze_complexity(" ".join(["শব্দ"] * 30)) == Complexity.HARD


def test_normalize_label() -> None:
    """Test common classifier label spellings map onto the three labels."""
    assert normalize_label("POSITIVE") == SentimentLabel.POSITIVE
    assert normalize_label(" positive ") == SentimentLabel.POSITIVE
    assert normalize_label("5 stars") == SentimentLabel.POSITIVE
    assert normalize_label("4 star") == SentimentLabel.POSITIVE
    assert normalize_label("NEG") == SentimentLabel.NEGATIVE
    assert normalize_label("1 star") == SentimentLabel.NEGATIVE
    assert normalize_label("3 stars") == SentimentLabel.NEUTRAL
    assert normalize_label("LABEL_0") == SentimentLabel.NEUTRAL
