"""
Cloud Storage implementation of IndexPersistence

Each rebuild writes a new generation; a small pointer blob names the
committed one. Readers resolve the pointer, so swapping generations is a
single blob write and the previous index stays queryable until then.

Structure in GCS:
gs://bucket/{prefix}/
├── CURRENT                         # {"generation": "<id>"}
└── generations/
    └── {generation}/
        ├── inverted_index.json     # {"term": [{"doc_id", "tf", "positions"}, ...]}
        ├── doc_stats.json          # {"total_docs", "avg_doc_length", "docs": {...}}
        └── embeddings.json         # {"doc_id": [float, ...]}

Generation ids start with a UTC timestamp, so they sort by creation time.
A commit removes every generation older than the one it publishes,
including ones left behind by crashed builds in other processes.
"""

import asyncio
import json
import logging
import os
import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from google.cloud import storage

from ..exceptions import PersistenceError
from ..index.types import DocumentStatistics, InvertedIndex
from .base import IndexGeneration, IndexPersistence

logger = logging.getLogger(__name__)

# Connection pool size for GCS operations (controls concurrent operations only)
GCS_CONNECTION_POOL_SIZE = int(os.getenv("GCS_CONNECTION_POOL_SIZE", "10"))

INDEX_BLOB = "inverted_index.json"
STATS_BLOB = "doc_stats.json"
EMBEDDINGS_BLOB = "embeddings.json"


class GcsIndexPersistence(IndexPersistence):
    """Cloud Storage handler for index generations"""

    def __init__(
        self,
        bucket_name: str = "mixsearch-index",
        prefix: str = "index",
        client: Optional[storage.Client] = None,
    ):
        """
        Initialize GCS client

        Args:
            bucket_name: GCS bucket name
            prefix: Folder inside the bucket holding CURRENT and generations/
            client: Preconfigured client (default: storage.Client() from ADC)
        """
        self.client = client or storage.Client()
        self.bucket = self.client.bucket(bucket_name)
        self.bucket_name = bucket_name
        self.prefix = prefix.strip("/")
        self._staged_generation: Optional[str] = None
        self._loaded: Optional[Tuple[str, IndexGeneration]] = None

    @property
    def pointer_path(self) -> str:
        return f"{self.prefix}/CURRENT"

    @property
    def generations_path(self) -> str:
        return f"{self.prefix}/generations/"

    def generation_path(self, generation: str, name: str = "") -> str:
        return f"{self.generations_path}{generation}/{name}"

    def _new_generation(self) -> str:
        timestamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%f")
        return f"{timestamp}-{uuid.uuid4().hex[:8]}"

    async def clear(self):
        """Drop any uncommitted generation and start a new one"""
        previous = self._staged_generation
        self._staged_generation = self._new_generation()
        if previous:
            await self._delete_generations([previous])
        logger.info(f"Staging index generation {self._staged_generation} in gs://{self.bucket_name}/{self.prefix}")

    def _require_stage(self) -> str:
        if self._staged_generation is None:
            self._staged_generation = self._new_generation()
        return self._staged_generation

    async def save_index(self, index: InvertedIndex):
        await self._upload_json(self.generation_path(self._require_stage(), INDEX_BLOB), index.to_dict())

    async def save_stats(self, stats: DocumentStatistics):
        await self._upload_json(self.generation_path(self._require_stage(), STATS_BLOB), stats.to_dict())

    async def save_embeddings(self, embeddings: Dict[str, List[float]]):
        await self._upload_json(self.generation_path(self._require_stage(), EMBEDDINGS_BLOB), embeddings)

    async def commit(self):
        """Point CURRENT at the staged generation, then remove older generations"""
        generation = self._require_stage()

        await self._upload_json(self.pointer_path, {"generation": generation})
        self._staged_generation = None
        self._loaded = None
        logger.info(f"Committed index generation {generation}")

        # Newer generations may belong to a build still running elsewhere
        stale = [g for g in await self._list_generations() if g < generation]
        if stale:
            await self._delete_generations(stale)

    async def get_generation(self) -> IndexGeneration:
        """
        Load (and cache) the generation CURRENT points to.

        The pointer is resolved once per call, so index, statistics and
        embeddings always come from the same commit. If a commit removes
        the generation while it is being downloaded, the new pointer is
        followed once.
        """
        generation = await self._read_pointer()
        for attempt in range(2):
            if generation is None:
                return IndexGeneration(InvertedIndex(), DocumentStatistics(), {})

            if self._loaded is not None and self._loaded[0] == generation:
                return self._loaded[1]

            try:
                loaded = await self._load_generation(generation)
            except PersistenceError:
                current = await self._read_pointer()
                if attempt == 0 and current != generation:
                    logger.info(f"Generation {generation} replaced while loading, switching to {current}")
                    generation = current
                    continue
                raise

            self._loaded = (generation, loaded)
            logger.debug(f"Loaded index generation {generation}: {len(loaded.index)} terms")
            return loaded

        raise PersistenceError(f"Index generation changed repeatedly while loading from gs://{self.bucket_name}/{self.prefix}")

    async def _read_pointer(self) -> Optional[str]:
        data = await self._download_json(self.pointer_path)
        if not data:
            return None
        try:
            return str(data["generation"])
        except (KeyError, TypeError) as e:
            raise PersistenceError(f"Invalid pointer at gs://{self.bucket_name}/{self.pointer_path}: {data!r}") from e

    async def _load_generation(self, generation: str) -> IndexGeneration:
        index_data, stats_data, embeddings = await asyncio.gather(
            self._download_json(self.generation_path(generation, INDEX_BLOB)),
            self._download_json(self.generation_path(generation, STATS_BLOB)),
            self._download_json(self.generation_path(generation, EMBEDDINGS_BLOB)),
        )
        if index_data is None or stats_data is None:
            raise PersistenceError(f"Committed generation {generation} is incomplete")

        try:
            return IndexGeneration(
                InvertedIndex.from_dict(index_data),
                DocumentStatistics.from_dict(stats_data),
                {str(doc_id): [float(x) for x in vector] for doc_id, vector in (embeddings or {}).items()},
            )
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise PersistenceError(f"Malformed index generation {generation}: {e}") from e

    async def _upload_json(self, path: str, data):
        """Helper: upload one JSON blob"""
        blob = self.bucket.blob(path)
        payload = json.dumps(data, ensure_ascii=False).encode("utf-8")
        try:
            await asyncio.to_thread(
                blob.upload_from_string,
                payload,
                content_type="application/json",
            )
        except Exception as e:
            raise PersistenceError(f"Failed to upload gs://{self.bucket_name}/{path}: {e}") from e

    async def _download_json(self, path: str):
        """Helper: download one JSON blob (None if it does not exist)"""
        blob = self.bucket.blob(path)
        try:
            exists = await asyncio.to_thread(blob.exists)
            if not exists:
                return None
            content = await asyncio.to_thread(blob.download_as_bytes)
            return json.loads(content)
        except json.JSONDecodeError as e:
            raise PersistenceError(f"Corrupted JSON at gs://{self.bucket_name}/{path}: {e}") from e
        except Exception as e:
            raise PersistenceError(f"Failed to fetch gs://{self.bucket_name}/{path}: {e}") from e

    async def _list_blobs(self, prefix: str) -> list:
        """List blobs under a prefix ([] when listing fails, cleanup is best effort)"""
        try:
            return await asyncio.to_thread(lambda: list(self.bucket.list_blobs(prefix=prefix)))
        except Exception as e:
            logger.warning(f"Failed to list gs://{self.bucket_name}/{prefix}: {e}")
            return []

    async def _list_generations(self) -> List[str]:
        root = self.generations_path
        generations = set()
        for blob in await self._list_blobs(root):
            name = blob.name[len(root):]
            if "/" in name:
                generations.add(name.split("/", 1)[0])
        return sorted(generations)

    async def _delete_generations(self, generations: List[str]):
        """Delete all blobs of the given generations (failures are logged, not raised)"""
        blobs = []
        for generation in generations:
            blobs.extend(await self._list_blobs(self.generation_path(generation)))
        if not blobs:
            return

        results = []
        for i in range(0, len(blobs), GCS_CONNECTION_POOL_SIZE):
            batch = blobs[i:i + GCS_CONNECTION_POOL_SIZE]
            batch_results = await asyncio.gather(*[
                asyncio.to_thread(blob.delete) for blob in batch
            ], return_exceptions=True)
            results.extend(batch_results)

        errors = [r for r in results if isinstance(r, Exception)]
        if errors:
            logger.warning(f"{len(errors)} blobs failed to delete for generations {', '.join(generations)}")
        else:
            logger.debug(f"Deleted generations {', '.join(generations)} ({len(blobs)} blobs)")
