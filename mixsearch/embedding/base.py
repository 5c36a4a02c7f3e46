"""
Abstract base class for embedding providers.

All providers must implement this interface to be swappable.

LazyEmbeddingProvider adds the model lifecycle shared by local models:

    UNINITIALIZED --first embed()--> LOADING --ok--> READY
          ^                             |
          +----------- failure ---------+

Concurrent first callers await the same in-flight load instead of loading
the model once per caller.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, List, Optional, Sequence

import numpy as np

from ..exceptions import ProviderError

logger = logging.getLogger(__name__)


def cosine_similarity(a: Optional[Sequence[float]], b: Optional[Sequence[float]]) -> float:
    """
    Cosine similarity of two vectors.

    Returns 0.0 for missing vectors, mismatched dimensions or zero vectors.
    """
    if a is None or b is None:
        return 0.0
    vec_a = np.asarray(a, dtype=np.float32)
    vec_b = np.asarray(b, dtype=np.float32)
    if vec_a.shape != vec_b.shape or vec_a.size == 0:
        return 0.0
    norm = float(np.linalg.norm(vec_a) * np.linalg.norm(vec_b))
    if norm == 0.0:
        return 0.0
    return float(np.dot(vec_a, vec_b) / norm)


class ModelState(Enum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"


class EmbeddingProvider(ABC):
    """
    Abstract base class for dense embedding providers.
    """

    @abstractmethod
    async def embed(self, text: str) -> Optional[List[float]]:
        """
        Embed a text.

        Args:
            text: Input text

        Returns:
            Embedding vector, or None for empty text

        Raises:
            ProviderError: model could not be loaded or called
        """
        pass

    def cosine(self, a: Optional[Sequence[float]], b: Optional[Sequence[float]]) -> float:
        """Cosine similarity (0.0 for missing or incompatible vectors)"""
        return cosine_similarity(a, b)

    def is_ready(self) -> bool:
        """True once the model can serve embed() without loading"""
        return True

    def get_model_info(self) -> dict:
        """
        Get information about the embedding model.

        Returns:
            Dict with keys: name, type, provider, loaded
        """
        return {"name": type(self).__name__, "type": "custom", "provider": "custom", "loaded": True}

    def close(self):
        """Optional cleanup (free model memory, close API clients, etc.)"""
        pass


class LazyEmbeddingProvider(EmbeddingProvider):
    """Embedding provider whose model is loaded once, on first use"""

    def __init__(self):
        self.state = ModelState.UNINITIALIZED
        self.model: Any = None
        self._load_future: Optional[asyncio.Future] = None

    @abstractmethod
    def _load_model(self) -> Any:
        """Blocking model load (runs in a worker thread)"""
        pass

    async def _ensure_loaded(self) -> Any:
        if self.state is ModelState.READY:
            return self.model

        if self._load_future is None:
            self.state = ModelState.LOADING
            self._load_future = asyncio.ensure_future(self._load())

        # shield: a cancelled caller must not cancel the shared load
        return await asyncio.shield(self._load_future)

    async def _load(self) -> Any:
        try:
            model = await asyncio.to_thread(self._load_model)
        except Exception as e:
            logger.error(f"Failed to load embedding model: {e}")
            self.state = ModelState.UNINITIALIZED
            self._load_future = None
            raise ProviderError(f"Failed to load embedding model: {e}") from e

        self.model = model
        self.state = ModelState.READY
        return model

    async def warmup(self):
        """Load the model ahead of the first query"""
        await self._ensure_loaded()

    def is_ready(self) -> bool:
        return self.state is ModelState.READY

    def close(self):
        """Free model memory."""
        if self.model is not None:
            del self.model
        self.model = None
        self.state = ModelState.UNINITIALIZED
        self._load_future = None
