"""Default configuration file for the content intelligence engine."""

import secrets
from pathlib import Path

from .config import config_dir


DEFAULT_CONFIG_TOML = """# Content Intelligence Configuration

[engine]
seed = 42  # weight seed for the local embedding network
query_cache_size = 100  # recent queries kept for "similar searches" (FIFO)

[search]
similar_queries_limit = 5  # suggestions returned per lookup

[text]
summary_max_length = 300  # characters
excerpt_max_length = 160  # characters
words_per_minute = 200  # reading speed for reading-time estimates

# Optional remote classifier. Without this section summaries, sentiment
# and tags come from the local heuristics.
# [llm]
# provider = "openai"
# model = "gpt-4o-mini"
# api_key = "env:OPENAI_API_KEY"
# timeout = 30  # seconds before falling back to local heuristics

# Ollama (local models):
# provider = "ollama"
# model = "ollama/llama3"
# api_base = "http://localhost:11434"  # REQUIRED for Ollama

[api]
key = "{api_key}"  # API key for REST endpoints (auto-generated)
host = "127.0.0.1"  # 127.0.0.1=localhost only, 0.0.0.0=all interfaces
port = 8990
"""


def ensure_config(directory: Path | None = None) -> Path:
    """Create the default config.toml if it does not exist yet.

    Args:
        directory: Target directory, defaults to $XDG_CONFIG_HOME/content-intel

    Returns:
        Path to config.toml
    """
    directory = directory or config_dir()
    directory.mkdir(parents=True, exist_ok=True)

    config_file = directory / "config.toml"
    if not config_file.exists():
        api_key = f"content-intel-{secrets.token_hex(8)}"
        config_file.write_text(DEFAULT_CONFIG_TOML.format(api_key=api_key))

    return config_file
