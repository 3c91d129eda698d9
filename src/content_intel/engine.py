"""Wiring: one engine per process, built from Config and handed to consumers."""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .analysis import ContentIntelligence
from .circuit_breaker import CircuitBreaker
from .config import Config
from .embeddings import EmbeddingService
from .observability import get_logger as get_event_log
from .query_cache import QueryCache
from .remote import RemoteClassifier
from .search import SearchEnhancer

logger = logging.getLogger(__name__)


@dataclass
class Engine:
    """The embedding service plus everything that shares it."""

    config: Config
    embeddings: EmbeddingService
    search: SearchEnhancer
    intelligence: ContentIntelligence

    async def start(self) -> None:
        """Initialize the embedding model. Never raises on backend failure."""
        removed = get_event_log().cleanup_old_files()
        if removed:
            logger.info(f"Removed {removed} expired event log files")
        await self.embeddings.initialize()
        logger.info(
            f"Engine started: embeddings={self.embeddings.mode}, "
            f"remote={'on' if self.intelligence.remote else 'off'}"
        )

    async def close(self) -> None:
        self.search.cache.clear()
        await self.embeddings.dispose()

    def status(self) -> Dict[str, Any]:
        return {
            "embedding_mode": self.embeddings.mode,
            "embedding_dimension": self.embeddings.dimension,
            "embedding_error": self.embeddings.init_error,
            "query_cache_size": len(self.search.cache),
            "query_cache_capacity": self.search.cache.capacity,
            "strategy": self.intelligence.current_strategy().name,
            "circuit_breaker": self.intelligence.breaker.get_status(),
        }


def build_engine(
    config: Config,
    embeddings: Optional[EmbeddingService] = None,
    remote: Optional[RemoteClassifier] = None,
) -> Engine:
    """Construct an engine; nothing is initialized until start().

    Args:
        config: Loaded configuration
        embeddings: Pre-built embedding service (tests inject one)
        remote: Pre-built remote classifier; built from [llm] when omitted
    """
    embeddings = embeddings or EmbeddingService(seed=config.seed)

    if remote is None and config.remote_enabled:
        remote = RemoteClassifier(config.llm_config())

    search = SearchEnhancer(
        embeddings,
        cache=QueryCache(capacity=config.query_cache_size),
        similar_queries_limit=config.similar_queries_limit,
    )
    intelligence = ContentIntelligence(
        remote=remote,
        breaker=CircuitBreaker(),
        remote_timeout=config.llm_timeout,
        summary_max_length=config.summary_max_length,
        words_per_minute=config.words_per_minute,
    )
    return Engine(
        config=config,
        embeddings=embeddings,
        search=search,
        intelligence=intelligence,
    )
