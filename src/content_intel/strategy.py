"""Remote-or-local classifier selection."""

import logging
from typing import List, Optional, Protocol

from .circuit_breaker import CircuitBreaker
from .heuristics import SentimentResult, fallback_sentiment, fallback_tags
from .text_utils import DEFAULT_SUMMARY_LENGTH, summarize_text

logger = logging.getLogger(__name__)


class Classifier(Protocol):
    """What both the remote and the local variant provide."""

    name: str

    async def summarize(self, text: str, max_length: int = DEFAULT_SUMMARY_LENGTH) -> str:
        ...

    async def sentiment(self, text: str) -> SentimentResult:
        ...

    async def tags(self, content: str, title: str = "") -> List[str]:
        ...


class LocalHeuristic:
    """In-process extractive summarizer and keyword classifiers. Never fails."""

    name = "local"

    async def summarize(self, text: str, max_length: int = DEFAULT_SUMMARY_LENGTH) -> str:
        return summarize_text(text, max_length)

    async def sentiment(self, text: str) -> SentimentResult:
        return fallback_sentiment(text)

    async def tags(self, content: str, title: str = "") -> List[str]:
        return fallback_tags(content, title)


def select_strategy(
    remote: Optional[Classifier],
    breaker: CircuitBreaker,
    local: Classifier,
) -> Classifier:
    """Capability probe: the remote variant if configured and its circuit is closed.

    Args:
        remote: Remote classifier, or None when no LLM is configured
        breaker: Circuit breaker tracking remote failures
        local: Local heuristic variant

    Returns:
        The classifier to use for the next call
    """
    if remote is None:
        return local
    if not breaker.check_can_proceed():
        logger.debug("Remote classifier circuit open, using local heuristics")
        return local
    return remote
