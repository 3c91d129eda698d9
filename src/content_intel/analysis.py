"""Article analysis: summary, sentiment, tags, reading time, complexity and topics."""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Generic, List, NamedTuple, Optional, TypeVar

from .circuit_breaker import CircuitBreaker
from .errors import RemoteServiceError
from .heuristics import (
    Complexity,
    SentimentResult,
    analyze_complexity,
    extract_topics,
)
from .strategy import Classifier, LocalHeuristic, select_strategy
from .text_utils import (
    DEFAULT_SUMMARY_LENGTH,
    DEFAULT_WORDS_PER_MINUTE,
    calculate_reading_time,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class StrategyResult(NamedTuple, Generic[T]):
    """A value and the classifier variant ('remote' or 'local') that produced it."""

    value: T
    source: str


@dataclass
class ArticleAnalysis:
    """Everything the presentation layer shows alongside an article."""

    summary: str
    sentiment: SentimentResult
    tags: List[str]
    reading_time: int
    complexity: Complexity
    topics: List[str]
    sources: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "summary": self.summary,
            "sentiment": self.sentiment.to_dict(),
            "tags": self.tags,
            "reading_time": self.reading_time,
            "complexity": self.complexity.value,
            "topics": self.topics,
            "sources": self.sources,
        }


class ContentIntelligence:
    """Runs classifier tasks on the remote service when possible, locally otherwise.

    Each call picks a variant with select_strategy(). If the remote variant
    fails or exceeds ``remote_timeout`` seconds, the failure is recorded on
    the circuit breaker and the local heuristic answers that call instead.
    """

    def __init__(
        self,
        remote: Optional[Classifier] = None,
        breaker: Optional[CircuitBreaker] = None,
        local: Optional[Classifier] = None,
        remote_timeout: float = 30.0,
        summary_max_length: int = DEFAULT_SUMMARY_LENGTH,
        words_per_minute: int = DEFAULT_WORDS_PER_MINUTE,
    ):
        self.remote = remote
        self.breaker = breaker or CircuitBreaker()
        self.local = local or LocalHeuristic()
        self.remote_timeout = remote_timeout
        self.summary_max_length = summary_max_length
        self.words_per_minute = words_per_minute

    def current_strategy(self) -> Classifier:
        return select_strategy(self.remote, self.breaker, self.local)

    async def _run(
        self, action: str, call: Callable[[Classifier], Awaitable[T]]
    ) -> StrategyResult[T]:
        strategy = self.current_strategy()
        if strategy is self.local:
            return StrategyResult(await call(self.local), self.local.name)

        try:
            value = await asyncio.wait_for(call(strategy), timeout=self.remote_timeout)
        except asyncio.TimeoutError:
            error = RemoteServiceError(action, f"timed out after {self.remote_timeout}s")
            self.breaker.record_failure(error)
            logger.warning(f"{error}; using local heuristic")
            return StrategyResult(await call(self.local), self.local.name)
        except RemoteServiceError as e:
            self.breaker.record_failure(e)
            logger.warning(f"{e}; using local heuristic")
            return StrategyResult(await call(self.local), self.local.name)

        self.breaker.record_success()
        return StrategyResult(value, strategy.name)

    async def summarize(
        self, text: str, max_length: Optional[int] = None
    ) -> StrategyResult[str]:
        """Summary of at most max_length characters (default: summary_max_length)."""
        limit = max_length if max_length is not None else self.summary_max_length
        return await self._run("summarize", lambda c: c.summarize(text, limit))

    async def sentiment(self, text: str) -> StrategyResult[SentimentResult]:
        return await self._run("sentiment", lambda c: c.sentiment(text))

    async def tags(self, content: str, title: str = "") -> StrategyResult[List[str]]:
        return await self._run("tags", lambda c: c.tags(content, title))

    async def analyze_article(self, content: str, title: str = "") -> ArticleAnalysis:
        """Full analysis of one article.

        Args:
            content: Article body
            title: Article headline, used for tags and topics

        Returns:
            ArticleAnalysis; ``sources`` records which variant answered
            summary, sentiment and tags
        """
        summary = await self.summarize(content)
        sentiment = await self.sentiment(content)
        tags = await self.tags(content, title)

        analysis = ArticleAnalysis(
            summary=summary.value,
            sentiment=sentiment.value,
            tags=tags.value,
            reading_time=calculate_reading_time(content, self.words_per_minute),
            complexity=analyze_complexity(content),
            topics=extract_topics(content, title),
            sources={
                "summary": summary.source,
                "sentiment": sentiment.source,
                "tags": tags.source,
            },
        )
        logger.info(
            f"Analyzed article '{title[:50]}': {analysis.complexity.value}, "
            f"{analysis.reading_time} min, sentiment={analysis.sentiment.label.value}"
        )
        return analysis
