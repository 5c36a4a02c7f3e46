"""
Factory to create embedding provider instances based on configuration.
"""

from typing import Optional
import os
import logging

from .base import EmbeddingProvider
from .local import DEFAULT_MODEL, SentenceTransformerEmbeddingProvider

logger = logging.getLogger(__name__)


class EmbeddingFactory:
    """Factory to create embedding provider instances based on configuration."""

    _instance: Optional[EmbeddingProvider] = None  # Singleton cache

    @classmethod
    def create(
        cls,
        force_reload: bool = False,
        enabled: Optional[bool] = None,
        model: Optional[str] = None,
    ) -> Optional[EmbeddingProvider]:
        """
        Create embedding provider based on environment configuration.

        Config (env vars):
            EMBEDDING_ENABLED: "true" to enable semantic scoring (default: false)
            EMBEDDING_TYPE: "local" (default: local)
            EMBEDDING_MODEL: Model identifier (default: intfloat/multilingual-e5-small)

        Args:
            force_reload: If True, recreate instance even if cached
            enabled: Overrides EMBEDDING_ENABLED
            model: Overrides EMBEDDING_MODEL

        Returns:
            Provider instance, or None if disabled
        """
        if enabled is False:
            return None

        if cls._instance is not None and not force_reload:
            return cls._instance

        if force_reload:
            cls.cleanup()

        if enabled is None:
            enabled_value = os.getenv("EMBEDDING_ENABLED", "false")
            enabled = enabled_value.lower() == "true"
            logger.info(f"Embedding config check: EMBEDDING_ENABLED={enabled_value} (enabled={enabled})")

        if not enabled:
            return None

        provider_type = os.getenv("EMBEDDING_TYPE", "local").lower()
        model = model or os.getenv("EMBEDDING_MODEL") or DEFAULT_MODEL

        if provider_type == "local":
            logger.info(f"Creating local embedding provider: {model}")
            cls._instance = SentenceTransformerEmbeddingProvider(model_name=model)
        else:
            raise ValueError(
                f"Unknown embedding type: {provider_type}. "
                f"Valid options: local"
            )

        return cls._instance

    @classmethod
    def cleanup(cls):
        """Cleanup cached provider instance."""
        if cls._instance is not None:
            logger.info("Cleaning up embedding provider instance")
            cls._instance.close()
            cls._instance = None
