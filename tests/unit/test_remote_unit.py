"""Unit tests for the LiteLLM-backed remote classifier."""

import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import pytest

from content_intel.errors import RemoteServiceError
from content_intel.heuristics import SentimentLabel
from content_intel.remote import RemoteClassifier


def make_response(payload) -> SimpleNamespace:
    """Build an object shaped like a LiteLLM completion response."""
    content = payload if isinstance(payload, str) else json.dumps(payload)
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content))],
        usage=SimpleNamespace(prompt_tokens=10, completion_tokens=5, total_tokens=15),
    )


@pytest.fixture
def classifier() -> RemoteClassifier:
    return RemoteClassifier({"provider": "openai", "model": "gpt-4o-mini", "api_key": "sk-test"})


def test_requires_model() -> None:
    """Test construction fails without a model name."""
    with pytest.raises(ValueError, match="Model must be specified"):
        RemoteClassifier({"provider": "openai"})


def test_ollama_requires_api_base() -> None:
    """Test Ollama needs an explicit api_base."""
    with pytest.raises(ValueError, match="api_base"):
        RemoteClassifier({"provider": "ollama", "model": "ollama/llama3"})


@pytest.mark.asyncio
async def test_summarize_truncates_to_max_length(classifier: RemoteClassifier) -> None:
    """Test the model's summary is trimmed to max_length."""
    mock = AsyncMock(return_value=make_response({"summary": "  " + "ক" * 50 + "  "}))

    with patch("content_intel.remote.litellm.acompletion", mock), patch(
        "content_intel.remote.completion_cost", return_value=0.0001
    ):
        summary = await classifier.summarize("দীর্ঘ লেখা", max_length=20)

    assert summary == "ক" * 20
    kwargs = mock.call_args.kwargs
    assert kwargs["model"] == "gpt-4o-mini"
    assert kwargs["api_key"] == "sk-test"
    assert kwargs["response_format"] == {"type": "json_object"}


@pytest.mark.asyncio
async def test_sentiment_normalizes_and_clamps(classifier: RemoteClassifier) -> None:
    """Test free-form labels are normalized and confidence is clamped to [0, 1]."""
    mock = AsyncMock(return_value=make_response({"label": "POSITIVE", "confidence": 1.7}))

    with patch("content_intel.remote.litellm.acompletion", mock), patch(
        "content_intel.remote.completion_cost", return_value=0.0
    ):
        result = await classifier.sentiment("চমৎকার খবর")

    assert result.label == SentimentLabel.POSITIVE
    assert result.confidence == 1.0
    assert result.source == "remote"


@pytest.mark.asyncio
async def test_tags_capped_and_cleaned(classifier: RemoteClassifier) -> None:
    """Test blank tags are dropped and at most five are kept."""
    tags = ["রাজনীতি", " ", "খেলাধুলা", "অর্থনীতি", "শিক্ষা", "স্বাস্থ্য", "প্রযুক্তি"]
    mock = AsyncMock(return_value=make_response({"tags": tags}))

    with patch("content_intel.remote.litellm.acompletion", mock), patch(
        "content_intel.remote.completion_cost", return_value=0.0
    ):
        result = await classifier.tags("লেখা", title="শিরোনাম")

    assert result == ["রাজনীতি", "খেলাধুলা", "অর্থনীতি", "শিক্ষা", "স্বাস্থ্য"]


@pytest.mark.asyncio
async def test_transport_error_raises_remote_error(classifier: RemoteClassifier) -> None:
    """Test provider exceptions surface as RemoteServiceError."""
    mock = AsyncMock(side_effect=Exception("Connection refused"))

    with patch("content_intel.remote.litellm.acompletion", mock):
        with pytest.raises(RemoteServiceError) as exc_info:
            await classifier.summarize("লেখা")

    assert exc_info.value.action == "summarize"
    assert "Connection refused" in str(exc_info.value)


@pytest.mark.asyncio
async def test_invalid_json_raises_remote_error(classifier: RemoteClassifier) -> None:
    """Test a non-JSON answer is a failure, not a crash."""
    mock = AsyncMock(return_value=make_response("not json at all"))

    with patch("content_intel.remote.litellm.acompletion", mock), patch(
        "content_intel.remote.completion_cost", return_value=0.0
    ):
        with pytest.raises(RemoteServiceError, match="invalid JSON"):
            await classifier.sentiment("লেখা")


@pytest.mark.asyncio
async def test_missing_fields_raise_remote_error(classifier: RemoteClassifier) -> None:
    """Test answers missing the expected keys are failures."""
    mock = AsyncMock(return_value=make_response({"unexpected": True}))

    with patch("content_intel.remote.litellm.acompletion", mock), patch(
        "content_intel.remote.completion_cost", return_value=0.0
    ):
        with pytest.raises(RemoteServiceError):
            await classifier.summarize("লেখা")
        with pytest.raises(RemoteServiceError):
            await classifier.sentiment("লেখা")
        with pytest.raises(RemoteServiceError):
            await classifier.tags("লেখা")


@pytest.mark.asyncio
async def test_cost_failure_does_not_fail_call(classifier: RemoteClassifier) -> None:
    """Test an unknown model price is logged as zero cost."""
    mock = AsyncMock(return_value=make_response({"summary": "সারাংশ"}))

    with patch("content_intel.remote.litellm.acompletion", mock), patch(
        "content_intel.remote.completion_cost", side_effect=Exception("unknown model")
    ):
        assert await classifier.summarize("লেখা") == "সারাংশ"


@pytest.mark.asyncio
async def test_health_check(classifier: RemoteClassifier) -> None:
    """Test the health probe reports reachable and unreachable providers."""
    with patch(
        "content_intel.remote.litellm.ahealth_check", AsyncMock(return_value={})
    ):
        assert await classifier.probe() is True

    with patch(
        "content_intel.remote.litellm.ahealth_check",
        AsyncMock(return_value={"error": "invalid api key"}),
    ):
        assert await classifier.probe() is False

    with patch(
        "content_intel.remote.litellm.ahealth_check",
        AsyncMock(side_effect=Exception("boom")),
    ):
        assert await classifier.probe() is False
