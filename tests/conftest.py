"""Shared test fixtures for all tests."""

from pathlib import Path

import pytest

from content_intel import observability
from content_intel.config import Config
from content_intel.embeddings import EmbeddingService
from content_intel.errors import EmbeddingInitError

TEST_API_KEY = "content-intel-test-key"


def failing_model_factory(seed: int):
    """Model factory standing in for a missing embedding backend."""
    raise EmbeddingInitError("embedding backend unavailable")


@pytest.fixture(autouse=True)
def isolated_dirs(tmp_path: Path, monkeypatch) -> Path:
    """Point XDG config/data dirs at a temp dir so tests never touch $HOME."""
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    observability.reset_logger()
    yield tmp_path
    observability.reset_logger()


@pytest.fixture
def embedding_service() -> EmbeddingService:
    """Uninitialized service with the real model."""
    return EmbeddingService(seed=7)


@pytest.fixture
def degraded_service() -> EmbeddingService:
    """Uninitialized service whose model build always fails."""
    return EmbeddingService(model_factory=failing_model_factory)


@pytest.fixture
def test_config() -> Config:
    """Local-only config with a known API key."""
    return Config(api_key=TEST_API_KEY)
