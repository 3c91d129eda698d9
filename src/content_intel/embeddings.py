"""Embedding generation for search reranking.

The model is a fixed, untrained feed-forward network. It acts as a seeded
random nonlinear projection of the vectorizer output, not as a learned
semantic embedding.
"""

import asyncio
import logging
import time
from typing import Callable, List, Optional

import torch
from torch import nn

from .errors import ContentIntelError, EmbeddingInitError
from .observability import log as obs_log
from .vectorizer import VECTOR_DIM, vectorize

logger = logging.getLogger(__name__)

EMBEDDING_DIM = 16
DEFAULT_SEED = 42


def build_embedding_model(seed: int = DEFAULT_SEED) -> nn.Module:
    """Build the 100 -> 64 -> 32 -> 16 projection network.

    Args:
        seed: Seed for weight initialization. Same seed, same embeddings.

    Returns:
        Model in eval mode (dropout disabled) with frozen parameters

    Raises:
        EmbeddingInitError: If the network cannot be built or produces the
            wrong output width
    """
    try:
        # Seed locally so callers' global RNG state is left untouched
        with torch.random.fork_rng(devices=[]):
            torch.manual_seed(seed)
            model = nn.Sequential(
                nn.Linear(VECTOR_DIM, 64),
                nn.ReLU(),
                nn.Dropout(p=0.2),
                nn.Linear(64, 32),
                nn.ReLU(),
                nn.Linear(32, EMBEDDING_DIM),
                nn.Tanh(),
            )
        model.eval()
        for param in model.parameters():
            param.requires_grad_(False)

        with torch.no_grad():
            probe = model(torch.zeros(1, VECTOR_DIM))
    except Exception as e:
        raise EmbeddingInitError(f"Failed to build embedding model: {e}") from e

    if tuple(probe.shape) != (1, EMBEDDING_DIM):
        raise EmbeddingInitError(
            f"Embedding model produced shape {tuple(probe.shape)}, "
            f"expected (1, {EMBEDDING_DIM})"
        )
    return model


class EmbeddingService:
    """Owns the embedding model for the lifetime of the hosting process.

    Lifecycle is init / use / dispose. ``initialize()`` may be awaited by any
    number of concurrent callers; they all share one in-flight build. If the
    build fails the service stays in fallback mode for good and ``embed()``
    returns the raw 100-dimensional text vector instead of the 16-dimensional
    model output.
    """

    def __init__(
        self,
        seed: int = DEFAULT_SEED,
        model_factory: Callable[[int], nn.Module] = build_embedding_model,
    ):
        """Create an uninitialized service.

        Args:
            seed: Seed passed to the model factory
            model_factory: Builds the model; swapped out in tests
        """
        self.seed = seed
        self._model_factory = model_factory
        self._model: Optional[nn.Module] = None
        self._init_task: Optional[asyncio.Task] = None
        self._disposed = False
        self.degraded = False
        self.init_error: Optional[str] = None

    @property
    def initialized(self) -> bool:
        """True once initialization has finished, successfully or not."""
        return self._model is not None or self.degraded

    @property
    def mode(self) -> str:
        """One of 'model', 'fallback' or 'uninitialized'."""
        if self._model is not None:
            return "model"
        if self.degraded:
            return "fallback"
        return "uninitialized"

    @property
    def dimension(self) -> int:
        """Width of the embeddings ``embed()`` currently returns."""
        return EMBEDDING_DIM if self._model is not None else VECTOR_DIM

    async def initialize(self) -> None:
        """Build the model once; concurrent callers await the same build."""
        if self._disposed:
            raise ContentIntelError("EmbeddingService has been disposed")
        if self.initialized:
            return

        if self._init_task is None:
            self._init_task = asyncio.ensure_future(self._initialize())

        # Shield so a cancelled waiter does not cancel the shared build
        await asyncio.shield(self._init_task)

    async def _initialize(self) -> None:
        start_time = time.time()
        logger.info("Initializing embedding model...")

        try:
            # CPU-bound construction runs off the event loop
            model = await asyncio.to_thread(self._model_factory, self.seed)
        except Exception as e:
            duration_ms = int((time.time() - start_time) * 1000)
            self.degraded = True
            self.init_error = str(e)
            logger.error(
                f"Embedding model unavailable, falling back to raw text vectors: {e}",
                exc_info=True,
            )
            obs_log(
                "embedding.init",
                status="error",
                mode="fallback",
                error=str(e),
                duration_ms=duration_ms,
            )
            return

        self._model = model
        duration_ms = int((time.time() - start_time) * 1000)
        logger.info(f"Embedding model ready ({EMBEDDING_DIM} dimensions)")
        obs_log(
            "embedding.init",
            status="success",
            mode="model",
            dimension=EMBEDDING_DIM,
            duration_ms=duration_ms,
        )

    def embed(self, text: str) -> List[float]:
        """Embed text with whatever the service currently has.

        Synchronous: never yields to the event loop. Before initialization
        completes, and in fallback mode, this is the raw text vector.

        Args:
            text: Text to embed

        Returns:
            List of floats (16 from the model, 100 from the fallback path)
        """
        if self._disposed:
            raise ContentIntelError("EmbeddingService has been disposed")

        vector = vectorize(text)
        if self._model is None:
            return vector

        try:
            with torch.no_grad():
                output = self._model(torch.tensor([vector], dtype=torch.float32))
            return output[0].tolist()
        except Exception as e:
            logger.error(f"Error generating embedding, using raw vector: {e}")
            return vector

    async def get_text_embedding(self, text: str) -> List[float]:
        """Initialize on first use, then embed."""
        await self.initialize()
        return self.embed(text)

    async def dispose(self) -> None:
        """Release the model. The service cannot be used afterwards."""
        if self._init_task is not None and not self._init_task.done():
            self._init_task.cancel()
            try:
                await self._init_task
            except asyncio.CancelledError:
                pass
        self._init_task = None
        self._model = None
        self._disposed = True
        logger.debug("EmbeddingService disposed")
