"""Unit tests for the extractive summarizer, excerpts and reading time."""

import pytest

from content_intel.text_utils import (
    SentenceScore,
    calculate_reading_time,
    count_words,
    generate_excerpt,
    score_sentence,
    split_sentences,
    summarize_text,
)

FIVE_SENTENCES = "বাক্য এক। বাক্য দুই। বাক্য তিন। বাক্য চার। বাক্য পাঁচ।"

TEN_SENTENCES = " ".join(
    [
        "বাক্য এক।",
        "বাক্য দুই।",
        "বাক্য তিন।",
        "বাক্য চার।",
        "বাক্য পাঁচ।",
        "সরকার সংসদ আইন পাস।",
        "বাক্য সাত।",
        "বাক্য আট।",
        "বাক্য নয়।",
        "বাক্য দশ।",
    ]
)


def test_split_on_bengali_and_latin_boundaries() -> None:
    """Test sentences split after । . ! ? when whitespace follows."""
    text = "প্রথম। Second one. Third! Fourth? শেষ"

    assert split_sentences(text) == ["প্রথম।", "Second one.", "Third!", "Fourth?", "শেষ"]


def test_no_split_without_following_whitespace() -> None:
    """Test punctuation inside a token (e.g. 3.5) is not a boundary."""
    assert split_sentences("মূল্য 3.5 শতাংশ বেড়েছে।") == ["মূল্য 3.5 শতাংশ বেড়েছে।"]


def test_short_text_returned_unchanged() -> None:
    """Test text within max_length is returned as-is."""
    text = "ছোট লেখা। আরও একটি বাক্য।"

    assert summarize_text(text, 300) is text
    assert summarize_text("", 10) == ""


def test_three_sentences_returned_unchanged() -> None:
    """Test text with three sentences or fewer is not summarized even when long."""
    text = "প্রথম বাক্যটি বেশ লম্বা। দ্বিতীয় বাক্যটিও লম্বা। তৃতীয় বাক্য।"

    assert summarize_text(text, 10) == text


def test_scenario_five_short_sentences() -> None:
    """Test a 20-char bound yields whole leading sentences starting with the first."""
    summary = summarize_text(FIVE_SENTENCES, 20)

    assert summary == "বাক্য এক। বাক্য দুই।"
    assert len(summary) <= 20
    assert summary.startswith("বাক্য এক।")


def test_keyword_sentence_selected_in_reading_order() -> None:
    """Test keyword-heavy sentences outrank plain ones and order is restored."""
    summary = summarize_text(TEN_SENTENCES, 60)

    assert summary == "বাক্য এক। বাক্য দুই। সরকার সংসদ আইন পাস।"


def test_stops_at_first_overflowing_sentence() -> None:
    """Test the first sentence that does not fit ends the summary."""
    # Selected: first (9 chars), second (10), keyword sentence (19)
    summary = summarize_text(TEN_SENTENCES, 25)

    assert summary == "বাক্য এক। বাক্য দুই।"


def test_summary_never_exceeds_bound() -> None:
    """Test the summary respects max_length for many sentence counts and bounds."""
    sentences = [f"এটি {i} নম্বর বাক্য যেখানে দেশ ও সরকার নিয়ে কথা আছে।" for i in range(40)]
    text = " ".join(sentences)

    for max_length in [30, 60, 100, 200, 500]:
        assert len(summarize_text(text, max_length)) <= max_length


def test_summary_is_deterministic() -> None:
    """Test identical input always produces identical output."""
    assert summarize_text(TEN_SENTENCES, 60) == summarize_text(TEN_SENTENCES, 60)


def test_score_sentence_position_and_length() -> None:
    """Test position bonuses and the 6-24 word length bonus."""
    six_words = "এক দুই তিন চার পাঁচ ছয়"

    assert score_sentence("শুরু", 0, 10) == 3
    assert score_sentence("পরের", 1, 10) == 2
    assert score_sentence("শেষ", 9, 10) == 2
    assert score_sentence(six_words, 4, 10) == 1
    assert score_sentence("এক দুই তিন চার পাঁচ", 4, 10) == 0


def test_score_sentence_counts_each_keyword_once() -> None:
    """Test repeated keywords count once each, distinct keywords add up."""
    assert score_sentence("সরকার সরকার", 4, 10) == 1
    assert score_sentence("সরকার ও সংসদ", 4, 10) == 2


def test_sentence_score_record() -> None:
    """Test SentenceScore keeps sentence, score and original index."""
    record = SentenceScore(sentence="বাক্য।", score=3, original_index=0)

    assert (record.sentence, record.score, record.original_index) == ("বাক্য।", 3, 0)


def test_reading_time_rounds_up() -> None:
    """Test 200 words at 200 wpm is 1 minute and 201 words is 2."""
    assert calculate_reading_time(" ".join(["word"] * 200), 200) == 1
    assert calculate_reading_time(" ".join(["word"] * 201), 200) == 2


def test_reading_time_counts_punctuation_as_words() -> None:
    """Test word count is a plain whitespace split."""
    assert count_words("এক , দুই ।") == 4
    assert calculate_reading_time("", 200) == 1


def test_reading_time_rejects_nonpositive_speed() -> None:
    """Test zero words-per-minute is an error, not a division by zero."""
    with pytest.raises(ValueError):
        calculate_reading_time("text", 0)


def test_excerpt_short_text_unchanged() -> None:
    """Test text within max_length is returned as-is."""
    assert generate_excerpt("Short text.", 160) == "Short text."


def test_excerpt_takes_whole_sentences() -> None:
    """Test sentences are appended while they fit."""
    text = "First sentence here. Second one follows. Third is last."

    assert generate_excerpt(text, 40) == "First sentence here. Second one follows."


def test_excerpt_truncates_when_first_sentence_too_long() -> None:
    """Test an oversized first sentence is cut and given an ellipsis."""
    excerpt = generate_excerpt("A" * 200, 160)

    assert excerpt == "A" * 157 + "..."
    assert len(excerpt) == 160
