"""
Local embedding provider using sentence-transformers.

Supports any HuggingFace sentence embedding model.
Model loads once (on first use) and stays in memory for fast inference.
"""

import asyncio
import logging
from typing import Any, List, Optional

from ..exceptions import ProviderError
from .base import LazyEmbeddingProvider

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "intfloat/multilingual-e5-small"


class SentenceTransformerEmbeddingProvider(LazyEmbeddingProvider):
    """
    Local sentence-transformers embedding provider.

    Vectors are L2-normalized, so cosine similarity equals the dot product.
    """

    def __init__(self, model_name: str = DEFAULT_MODEL, max_chars: int = 2000):
        """
        Initialize provider (model is not loaded yet).

        Args:
            model_name: HuggingFace model identifier
                - 'intfloat/multilingual-e5-small' (384-dim, Chinese + English)
                - 'sentence-transformers/all-MiniLM-L6-v2' (384-dim, English only, smaller)
            max_chars: Input is truncated to this many characters before encoding
        """
        super().__init__()
        self.model_name = model_name
        self.max_chars = max_chars
        logger.info(f"SentenceTransformerEmbeddingProvider initialized (model will load on first use): {model_name}")

    def _load_model(self) -> Any:
        logger.info(f"Loading embedding model: {self.model_name} (first run downloads it)")
        # Lazy import to avoid loading torch when embeddings are disabled
        from sentence_transformers import SentenceTransformer
        model = SentenceTransformer(self.model_name)
        logger.info(f"Model loaded successfully: {self.model_name}")
        return model

    async def embed(self, text: str) -> Optional[List[float]]:
        if not text or not isinstance(text, str) or not text.strip():
            return None

        model = await self._ensure_loaded()
        try:
            vector = await asyncio.to_thread(
                model.encode,
                text[:self.max_chars],
                normalize_embeddings=True,
                show_progress_bar=False,
            )
        except Exception as e:
            raise ProviderError(f"Embedding failed ({self.model_name}): {e}") from e

        return [float(x) for x in vector]

    def get_model_info(self) -> dict:
        """Get model metadata."""
        return {
            "name": self.model_name,
            "type": "local_sentence_transformer",
            "provider": "sentence-transformers",
            "loaded": self.is_ready(),
        }
