"""Configuration loading from TOML."""

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from .embeddings import DEFAULT_SEED
from .query_cache import DEFAULT_CAPACITY
from .search import DEFAULT_SIMILAR_LIMIT
from .text_utils import (
    DEFAULT_EXCERPT_LENGTH,
    DEFAULT_SUMMARY_LENGTH,
    DEFAULT_WORDS_PER_MINUTE,
)


def config_dir() -> Path:
    """$XDG_CONFIG_HOME/content-intel (or ~/.config/content-intel)."""
    xdg_config_home = os.environ.get("XDG_CONFIG_HOME", str(Path.home() / ".config"))
    return Path(xdg_config_home) / "content-intel"


def expand_env_var(value: Any) -> Any:
    """Resolve ``env:NAME`` values from the environment.

    Unset variables resolve to an empty string so an unconfigured key reads
    as "not configured" rather than as the literal placeholder.
    """
    if isinstance(value, str) and value.startswith("env:"):
        return os.environ.get(value[4:], "")
    return value


@dataclass
class Config:
    """Configuration dataclass with validation.

    Every section is optional; missing values take the engine defaults. The
    [llm] section enables the remote classifier, without it everything runs
    on the local heuristics.
    """

    # Engine
    seed: int = DEFAULT_SEED
    query_cache_size: int = DEFAULT_CAPACITY

    # Search
    similar_queries_limit: int = DEFAULT_SIMILAR_LIMIT

    # Text utilities
    summary_max_length: int = DEFAULT_SUMMARY_LENGTH
    excerpt_max_length: int = DEFAULT_EXCERPT_LENGTH
    words_per_minute: int = DEFAULT_WORDS_PER_MINUTE

    # Remote classifier (optional)
    llm_provider: Optional[str] = None
    llm_model: Optional[str] = None
    llm_api_key: Optional[str] = None
    llm_api_base: Optional[str] = None
    llm_timeout: float = 30.0

    # API
    api_key: Optional[str] = None
    api_host: str = "127.0.0.1"
    api_port: int = 8990

    @property
    def remote_enabled(self) -> bool:
        return bool(self.llm_model)

    def llm_config(self) -> Optional[Dict[str, Any]]:
        """Config dict for RemoteClassifier, or None when no LLM is configured."""
        if not self.remote_enabled:
            return None
        llm_config: Dict[str, Any] = {
            "provider": self.llm_provider or "openai",
            "model": self.llm_model,
        }
        if self.llm_api_key:
            llm_config["api_key"] = self.llm_api_key
        if self.llm_api_base:
            llm_config["api_base"] = self.llm_api_base
        return llm_config

    def validate(self) -> None:
        """Validate configuration values.

        Raises:
            ValueError: If any configuration values are invalid.
        """
        if not 1 <= self.query_cache_size <= 10000:
            raise ValueError(
                f"query_cache_size must be between 1 and 10000, got {self.query_cache_size}"
            )

        if self.similar_queries_limit < 1:
            raise ValueError(
                f"similar_queries_limit must be at least 1, got {self.similar_queries_limit}"
            )

        for field_name, value in [
            ("summary_max_length", self.summary_max_length),
            ("excerpt_max_length", self.excerpt_max_length),
        ]:
            # Excerpts append "..." so anything shorter cannot hold text
            if value < 4:
                raise ValueError(f"{field_name} must be at least 4, got {value}")

        if self.words_per_minute < 1:
            raise ValueError(
                f"words_per_minute must be at least 1, got {self.words_per_minute}"
            )

        if self.llm_timeout <= 0:
            raise ValueError(f"llm timeout must be positive, got {self.llm_timeout}")

        if (
            self.remote_enabled
            and (self.llm_provider or "").lower() == "ollama"
            and not self.llm_api_base
        ):
            raise ValueError(
                "Ollama provider requires 'api_base' in [llm] (e.g., 'http://localhost:11434')"
            )

        if not 1 <= self.api_port <= 65535:
            raise ValueError(f"api port must be between 1 and 65535, got {self.api_port}")

    @classmethod
    def from_file(cls, config_path: Optional[Path] = None) -> "Config":
        """Load configuration from TOML file.

        Args:
            config_path: Optional path to config file.
                        Defaults to $XDG_CONFIG_HOME/content-intel/config.toml

        Returns:
            Validated Config instance.

        Raises:
            FileNotFoundError: If the config file does not exist
            ValueError: If the file cannot be parsed or holds invalid values
        """
        if config_path is None:
            config_path = config_dir() / "config.toml"

        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Run 'content-intel init-config' to create a default configuration."
            )

        try:
            with open(config_path, "rb") as f:
                config_dict = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise ValueError(f"Failed to parse config file {config_path}: {e}") from e

        return cls.from_dict(config_dict)

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "Config":
        """Build and validate a Config from parsed TOML sections."""
        engine = config_dict.get("engine", {})
        search = config_dict.get("search", {})
        text = config_dict.get("text", {})
        llm = config_dict.get("llm", {})
        api = config_dict.get("api", {})

        defaults = cls()
        try:
            config = cls(
                seed=int(engine.get("seed", defaults.seed)),
                query_cache_size=int(
                    engine.get("query_cache_size", defaults.query_cache_size)
                ),
                similar_queries_limit=int(
                    search.get("similar_queries_limit", defaults.similar_queries_limit)
                ),
                summary_max_length=int(
                    text.get("summary_max_length", defaults.summary_max_length)
                ),
                excerpt_max_length=int(
                    text.get("excerpt_max_length", defaults.excerpt_max_length)
                ),
                words_per_minute=int(
                    text.get("words_per_minute", defaults.words_per_minute)
                ),
                llm_provider=llm.get("provider"),
                llm_model=expand_env_var(llm.get("model")) or None,
                llm_api_key=expand_env_var(llm.get("api_key")) or None,
                llm_api_base=llm.get("api_base"),
                llm_timeout=float(llm.get("timeout", defaults.llm_timeout)),
                api_key=expand_env_var(api.get("key")) or None,
                api_host=api.get("host", defaults.api_host),
                api_port=int(api.get("port", defaults.api_port)),
            )
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid config value: {e}") from e

        config.validate()
        return config
