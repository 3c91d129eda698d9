"""Optional remote classifier/summarizer backed by an LLM through LiteLLM."""

import json
import logging
import time
from typing import Any, Dict, List, Optional

import litellm
from litellm import completion_cost

from .errors import RemoteServiceError
from .heuristics import MAX_TAGS, SentimentResult, make_sentiment, normalize_label
from .observability import log as obs_log

logger = logging.getLogger(__name__)

MAX_INPUT_CHARS = 3000
# Sentiment models upstream were fed at most this much text
MAX_SENTIMENT_CHARS = 512


class RemoteClassifier:
    """Summaries, sentiment and tags from a remote LLM.

    Every failure (transport, provider, malformed JSON, missing fields) is
    raised as RemoteServiceError so the caller can substitute the local
    heuristic for that one call.
    """

    name = "remote"

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """Initialize the classifier with LLM configuration.

        Args:
            config: Configuration dict with:
                - model: LLM model name (e.g., gpt-4o-mini, ollama/llama3)
                - provider: Provider name (openai, ollama, anthropic, groq)
                - api_key: API key for the provider
                - api_base: Optional API base URL (required for Ollama)
        """
        self.config = config or {}
        if not self.config or "model" not in self.config:
            raise ValueError("Model must be specified in config")
        self.model = self.config["model"]

        self.api_key = self.config.get("api_key")
        self.api_base = self.config.get("api_base")

        provider = self.config.get("provider", "openai").lower()
        if provider == "ollama" and not self.api_base:
            raise ValueError(
                "Ollama provider requires 'api_base' in config (e.g., 'http://localhost:11434')"
            )
        self.provider = provider

        litellm.drop_params = True  # Drop unsupported params instead of erroring
        self.temperature = 0.2

        logger.info(
            f"RemoteClassifier initialized with {provider} provider, model: {self.model}"
        )

    def _credentials(self) -> Dict[str, Any]:
        params: Dict[str, Any] = {}
        if self.api_key:
            params["api_key"] = self.api_key
        if self.api_base:
            params["api_base"] = self.api_base
        return params

    async def _complete_json(
        self, action: str, system_prompt: str, prompt: str
    ) -> Dict[str, Any]:
        """Run one JSON-mode completion and return the parsed object."""
        kwargs = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": prompt},
            ],
            "temperature": self.temperature,
            "response_format": {"type": "json_object"},
            **self._credentials(),
        }

        start_time = time.time()
        try:
            response = await litellm.acompletion(**kwargs)
            response_text = response.choices[0].message.content
        except Exception as e:
            obs_log(
                "remote.call",
                action=action,
                model=self.model,
                status="error",
                error=str(e),
                duration_ms=int((time.time() - start_time) * 1000),
            )
            raise RemoteServiceError(action, str(e)) from e

        duration_ms = int((time.time() - start_time) * 1000)
        usage = getattr(response, "usage", None)
        tokens = {
            "prompt": usage.prompt_tokens if usage else 0,
            "completion": usage.completion_tokens if usage else 0,
            "total": usage.total_tokens if usage else 0,
        }
        try:
            cost_usd = completion_cost(response)
        except Exception:
            cost_usd = 0.0

        obs_log(
            "remote.call",
            action=action,
            model=self.model,
            tokens=tokens,
            cost_usd=cost_usd,
            duration_ms=duration_ms,
            status="success",
        )

        try:
            result = json.loads(response_text)
        except (TypeError, json.JSONDecodeError) as e:
            raise RemoteServiceError(action, f"invalid JSON response: {e}") from e

        if not isinstance(result, dict):
            raise RemoteServiceError(action, "response is not a JSON object")

        logger.debug(f"Remote {action} response: {str(result)[:200]}")
        return result

    async def summarize(self, text: str, max_length: int = 300) -> str:
        """Bengali summary of at most max_length characters."""
        prompt = f"""Summarize the following news article in its own language.
The summary MUST be at most {max_length} characters.

Return JSON: {{"summary": "..."}}

ARTICLE:
{text[:MAX_INPUT_CHARS]}"""

        result = await self._complete_json(
            "summarize",
            "You are a news editor writing short, factual summaries. Respond with JSON only.",
            prompt,
        )
        summary = result.get("summary")
        if not isinstance(summary, str) or not summary.strip():
            raise RemoteServiceError("summarize", "missing 'summary' in response")
        return summary.strip()[:max_length]

    async def sentiment(self, text: str) -> SentimentResult:
        """Sentiment label with the model's own confidence."""
        prompt = f"""Classify the overall sentiment of this text.

Return JSON: {{"label": "positive" | "negative" | "neutral", "confidence": 0.0 to 1.0}}

TEXT:
{text[:MAX_SENTIMENT_CHARS]}"""

        result = await self._complete_json(
            "sentiment",
            "You are a sentiment classifier for Bengali and English text. Respond with JSON only.",
            prompt,
        )
        if "label" not in result:
            raise RemoteServiceError("sentiment", "missing 'label' in response")

        try:
            confidence = float(result.get("confidence", 0.5))
        except (TypeError, ValueError) as e:
            raise RemoteServiceError("sentiment", f"invalid confidence: {e}") from e
        confidence = max(0.0, min(1.0, confidence))

        return make_sentiment(
            normalize_label(str(result["label"])), confidence, source=self.name
        )

    async def tags(self, content: str, title: str = "") -> List[str]:
        """Up to five short Bengali category tags."""
        prompt = f"""Suggest up to {MAX_TAGS} short Bengali category tags for this news article
(e.g. রাজনীতি, খেলাধুলা, অর্থনীতি, প্রযুক্তি, শিক্ষা, স্বাস্থ্য).

Return JSON: {{"tags": ["...", "..."]}}

TITLE: {title}

ARTICLE:
{content[:MAX_INPUT_CHARS]}"""

        result = await self._complete_json(
            "tags",
            "You are a news desk tagging assistant. Respond with JSON only.",
            prompt,
        )
        tags = result.get("tags")
        if not isinstance(tags, list):
            raise RemoteServiceError("tags", "missing 'tags' list in response")

        cleaned = [str(tag).strip() for tag in tags if str(tag).strip()]
        if not cleaned:
            raise RemoteServiceError("tags", "empty tag list in response")
        return cleaned[:MAX_TAGS]

    async def probe(self) -> bool:
        """Check that the configured provider answers at all."""
        params = {"model": self.model, **self._credentials()}
        try:
            result = await litellm.ahealth_check(params)
        except Exception as e:
            logger.warning(f"Remote classifier health check failed: {e}")
            return False

        if isinstance(result, dict) and result.get("error"):
            logger.warning(f"Remote classifier unhealthy: {result['error']}")
            return False
        return True
