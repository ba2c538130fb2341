# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-11-16
# Updated: 2026-02-18
# Description: ChromaMemberVectorStore
# -----------------------------------------------------------------------------
import re
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Set, Tuple

import chromadb
from chromadb import ClientAPI
from chromadb.api.models.Collection import Collection

from config.Config import Config
from utility.errors import PersistError
from utility.logging_utils import get_class_logger
import settings


def collection_name_for(prefix: str, space: str) -> str:
    """Chroma names: 3-63 chars of [a-zA-Z0-9._-], alphanumeric at both ends."""
    name = re.sub(r"[^a-zA-Z0-9._-]+", "-", f"{prefix}-{space}")[:63]
    return name.strip("-._") or "members"


@dataclass
class ChromaMemberVectorStore:
    cfg: Optional[Config] = None
    client: Optional[ClientAPI] = None
    collection_prefix: str = settings.VECTOR_COLLECTION_PREFIX
    logger: Any = None
    _collections: Dict[str, Collection] = field(default_factory=dict, init=False, repr=False)
    _dimensions: Dict[str, int] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self) -> None:
        self.logger = self.logger or get_class_logger(self.__class__)
        self._lock = threading.Lock()

        if self.client is None:
            if self.cfg is None:
                raise ValueError("ChromaMemberVectorStore needs either cfg or client")
            self.client = self._build_client(self.cfg)

    def _build_client(self, cfg: Config) -> ClientAPI:
        if cfg.chroma_cloud_configured:
            self.logger.info(
                "Initialising Chroma Cloud client "
                f"(tenant={cfg.chroma_tenant}, database={cfg.chroma_database})"
            )
            return chromadb.CloudClient(
                tenant=cfg.chroma_tenant,
                database=cfg.chroma_database,
                api_key=cfg.chroma_api_key,
            )
        if cfg.chroma_path:
            self.logger.info("Initialising local persistent Chroma client (path=%s)", cfg.chroma_path)
            return chromadb.PersistentClient(path=cfg.chroma_path)
        raise ValueError("Chroma is not configured (set CHROMA_PATH or CHROMA_API_KEY/TENANT/DATABASE)")

    @classmethod
    def from_config(cls, cfg: Config) -> Optional["ChromaMemberVectorStore"]:
        """None when no vector store is configured (keyword search only)."""
        if not cfg.vector_store_configured:
            return None
        return cls(cfg=cfg)

    def _collection(self, space: str) -> Collection:
        with self._lock:
            collection = self._collections.get(space)
            if collection is None:
                name = collection_name_for(self.collection_prefix, space)
                # Vectors are always supplied by the caller; no server-side embedding function
                collection = self.client.get_or_create_collection(
                    name=name,
                    metadata={"hnsw:space": "cosine", "embedding_space": space},
                    embedding_function=None,
                )
                self._collections[space] = collection
                self.logger.info("Chroma collection ready: '%s' (space=%s)", name, space)
            return collection

    def test_connection(self) -> bool:
        """
        Simple health check: can we talk to Chroma?
        """
        try:
            self.client.heartbeat()
            return True
        except Exception as e:
            self.logger.error("Chroma connection failed: %s", e)
            return False

    def _known_dimension(self, space: str, collection: Collection) -> Optional[int]:
        dim = self._dimensions.get(space)
        if dim is not None:
            return dim
        if collection.count() == 0:
            return None
        res = collection.get(limit=1, include=["embeddings"])
        embeddings = res.get("embeddings")
        if embeddings is None or len(embeddings) == 0:
            return None
        dim = len(embeddings[0])
        self._dimensions[space] = dim
        return dim

    def upsert(self, space: str, member_id: str, vector: Sequence[float]) -> None:
        vec = vector.tolist() if hasattr(vector, "tolist") else list(vector)
        if not vec:
            raise PersistError(f"Refusing to store an empty vector for member '{member_id}'")

        try:
            collection = self._collection(space)
            expected = self._known_dimension(space, collection)
            if expected is not None and expected != len(vec):
                raise PersistError(
                    f"Vector dimension {len(vec)} does not match space '{space}' dimension {expected}"
                )

            collection.upsert(
                ids=[member_id],
                embeddings=[vec],
                metadatas=[{"member_id": member_id, "embedding_space": space}],
            )
        except PersistError:
            raise
        except Exception as e:
            self.logger.error("Failed to upsert vector for member '%s': %s", member_id, e)
            raise PersistError(f"Vector upsert failed for member '{member_id}': {e}") from e

        self._dimensions.setdefault(space, len(vec))
        self.logger.debug("Upserted vector for member '%s' (space=%s, dim=%d)", member_id, space, len(vec))

    def query(self, space: str, vector: Sequence[float], k: int) -> List[Tuple[str, float]]:
        vec = vector.tolist() if hasattr(vector, "tolist") else list(vector)
        self.logger.info("Querying space '%s' (k=%d)", space, k)

        try:
            collection = self._collection(space)
            available = collection.count()
            if available == 0 or k <= 0:
                return []

            res = collection.query(
                query_embeddings=[vec],
                n_results=min(k, available),
                include=["distances"],
            )
        except Exception as e:
            self.logger.error("Error during vector query: %s", e, exc_info=True)
            raise PersistError(f"Vector query failed: {e}") from e

        ids = (res.get("ids") or [[]])[0]
        dists = (res.get("distances") or [[]])[0]
        return [(str(i), float(d)) for i, d in zip(ids, dists)]

    def count(self, space: str) -> int:
        try:
            return int(self._collection(space).count())
        except Exception as e:
            raise PersistError(f"Vector count failed for space '{space}': {e}") from e

    def indexed_ids(self, space: str, member_ids: Sequence[str]) -> Set[str]:
        ids = list(dict.fromkeys(member_ids))
        if not ids:
            return set()
        try:
            res = self._collection(space).get(ids=ids, include=[])
        except Exception as e:
            raise PersistError(f"Vector lookup failed for space '{space}': {e}") from e
        return set(res.get("ids", []) or [])

    def delete(self, member_id: str) -> int:
        """
        Delete the member's vector from every collection owned by this store.
        """
        deleted = 0
        try:
            names = [getattr(c, "name", c) for c in self.client.list_collections()]
        except Exception as e:
            raise PersistError(f"Failed to list Chroma collections: {e}") from e

        for name in names:
            if not str(name).startswith(f"{self.collection_prefix}-"):
                continue
            try:
                collection = self.client.get_collection(name=name, embedding_function=None)
                found = collection.get(ids=[member_id], include=[]).get("ids", []) or []
                if found:
                    collection.delete(ids=[member_id])
                    deleted += len(found)
            except Exception as e:
                self.logger.error("Failed to delete member '%s' from '%s': %s", member_id, name, e)
                raise PersistError(f"Vector delete failed for member '{member_id}': {e}") from e

        self.logger.info("Deleted %d vectors for member '%s'", deleted, member_id)
        return deleted
