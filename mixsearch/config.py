"""
Environment configuration.

Variables are read from the process environment after loading .env.local
(local dev, highest priority) or .env (production) with python-dotenv.

    BM25_K1                 BM25 term frequency saturation (1.2)
    BM25_B                  BM25 length normalization (0.75)
    SEARCH_ALPHA            lexical weight in the hybrid blend (0.5)
    SEARCH_USE_EMBEDDING    blend semantic scores when available (true)
    EMBEDDING_ENABLED       load the embedding model at all (false)
    EMBEDDING_MODEL         sentence-transformers model id
    INDEX_BUILD_WORKERS     tokenization thread pool size (4)
    INDEX_TITLE_WEIGHT      title copies prepended to content (0)
    GCS_BUCKET              bucket holding the index generations
    GCS_INDEX_PREFIX        blob prefix inside the bucket ("index")
    DATABASE_URL            PostgreSQL connection string for documents
    DOCUMENTS_TABLE         documents table name ("documents")
    LOG_LEVEL               console log level (INFO)
"""

import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


def load_env(base_dir: Optional[Path] = None) -> Optional[Path]:
    """
    Load .env.local (preferred) or .env from base_dir (default: cwd).

    Returns:
        Path of the loaded file, or None when neither exists
    """
    base_dir = Path(base_dir) if base_dir is not None else Path.cwd()
    env_local = base_dir / ".env.local"
    env_file = base_dir / ".env"

    if env_local.exists():
        logger.info(f"Loading environment from: {env_local}")
        load_dotenv(env_local, override=True)
        return env_local
    if env_file.exists():
        logger.info(f"Loading environment from: {env_file}")
        load_dotenv(env_file, override=True)
        return env_file

    logger.warning("No .env.local or .env file found - using system environment variables only")
    return None


class Settings(BaseSettings):
    """
    Typed settings read from environment variables (case-insensitive).

    Empty variables count as unset. Call load_env() first so .env.local /
    .env values are in the environment.

    Raises:
        pydantic.ValidationError: a value is out of range or unparsable
    """

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_ignore_empty=True,
        validate_default=True,
        extra="ignore",
    )

    bm25_k1: float = Field(default=1.2, gt=0, description="BM25 term frequency saturation")
    bm25_b: float = Field(default=0.75, ge=0, le=1, description="BM25 length normalization")
    search_alpha: float = Field(default=0.5, ge=0, le=1, description="Lexical weight in the hybrid blend")
    search_use_embedding: bool = Field(default=True, description="Blend semantic scores when available")
    embedding_enabled: bool = Field(default=False, description="Load the embedding model at all")
    embedding_model: str = Field(default="intfloat/multilingual-e5-small")
    index_build_workers: int = Field(default=4, ge=1, description="Tokenization thread pool size")
    index_title_weight: int = Field(default=0, ge=0, description="Title copies prepended to content")
    gcs_bucket: str = Field(default="mixsearch-index")
    gcs_index_prefix: str = Field(default="index")
    database_url: Optional[str] = Field(default=None, description="PostgreSQL connection string for documents")
    documents_table: str = Field(default="documents")
    log_level: str = Field(default="INFO", description="Console log level")

    @property
    def console_log_level(self) -> int:
        return getattr(logging, self.log_level.upper(), logging.INFO)
