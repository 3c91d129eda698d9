"""Search result reranking and similar-query suggestions."""

import logging
import time
from typing import Any, List, Mapping, Optional, Sequence

from .embeddings import EmbeddingService
from .observability import log as obs_log
from .query_cache import QueryCache
from .similarity import cosine_similarity, top_k_similar

logger = logging.getLogger(__name__)

CONTENT_PREVIEW_CHARS = 200
DEFAULT_SIMILAR_LIMIT = 5


def build_article_text(article: Mapping[str, Any]) -> str:
    """Representative text for an article: title, excerpt and content preview."""
    title = article.get("title") or ""
    excerpt = article.get("excerpt") or ""
    content = article.get("content") or ""
    return f"{title} {excerpt} {content[:CONTENT_PREVIEW_CHARS]}"


class SearchEnhancer:
    """Reranks candidate articles against a query using local embeddings."""

    def __init__(
        self,
        embedder: EmbeddingService,
        cache: Optional[QueryCache] = None,
        similar_queries_limit: int = DEFAULT_SIMILAR_LIMIT,
    ):
        """Initialize the enhancer.

        Args:
            embedder: Shared embedding service (one per process)
            cache: Query cache; a new 100-entry cache when omitted
            similar_queries_limit: Default limit for get_similar_queries()
        """
        self.embedder = embedder
        self.cache = cache if cache is not None else QueryCache()
        self.similar_queries_limit = similar_queries_limit

    async def enhance_search_results(
        self, query: str, articles: Sequence[Mapping[str, Any]]
    ) -> List[Any]:
        """Score articles by similarity to the query and sort best first.

        Each returned article is a copy of the input mapping with
        ``ai_relevance_score`` and ``search_enhanced`` added. If anything goes
        wrong the original list is returned untouched, so search results are
        never lost because scoring failed.

        Args:
            query: Raw search query
            articles: Candidate articles with title/excerpt/content fields

        Returns:
            Annotated articles sorted by ai_relevance_score descending, or the
            original list on failure
        """
        start_time = time.time()

        try:
            await self.embedder.initialize()
            query_embedding = self.embedder.embed(query)

            enhanced = []
            for article in articles:
                article_embedding = self.embedder.embed(build_article_text(article))
                score = cosine_similarity(query_embedding, article_embedding)
                enhanced.append(
                    {**article, "ai_relevance_score": score, "search_enhanced": True}
                )

            # Stable: equal scores keep the order the caller supplied
            enhanced.sort(key=lambda item: item["ai_relevance_score"], reverse=True)

        except Exception as e:
            logger.error(
                f"Error enhancing search results, returning original order: {e}",
                exc_info=True,
            )
            obs_log(
                "search.enhance",
                status="error",
                candidates=len(articles) if hasattr(articles, "__len__") else None,
                error=str(e),
                duration_ms=int((time.time() - start_time) * 1000),
            )
            return articles

        duration_ms = int((time.time() - start_time) * 1000)
        logger.debug(
            f"Enhanced {len(enhanced)} results with AI relevance scores ({duration_ms}ms)"
        )
        obs_log(
            "search.enhance",
            status="success",
            candidates=len(enhanced),
            mode=self.embedder.mode,
            duration_ms=duration_ms,
        )
        return enhanced

    async def cache_search_query(self, query: str) -> None:
        """Remember a query for later similar-query suggestions.

        Failures are logged and swallowed; caching is best effort.
        """
        try:
            embedding = await self.embedder.get_text_embedding(query)
            self.cache.put(query, embedding)
        except Exception as e:
            logger.error(f"Error caching search query: {e}")
            return

        obs_log("search.cache", cache_size=len(self.cache), mode=self.embedder.mode)

    def get_similar_queries(self, query: str, limit: Optional[int] = None) -> List[str]:
        """Cached queries most similar to ``query``, excluding itself.

        The query is embedded through the same service path as the cached
        entries so both sides of each comparison have the same width.

        Args:
            query: Query to find neighbours for
            limit: Maximum results (defaults to similar_queries_limit)

        Returns:
            Up to ``limit`` cached query strings, most similar first
        """
        if len(self.cache) == 0:
            return []

        if limit is None:
            limit = self.similar_queries_limit

        try:
            query_embedding = self.embedder.embed(query)
            similar = top_k_similar(
                query_embedding, self.cache.items(), limit, exclude=query
            )
        except Exception as e:
            logger.error(f"Error finding similar queries: {e}")
            return []

        return [cached_query for cached_query, _ in similar]
