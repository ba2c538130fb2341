# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-21
# Updated: 2026-02-20
# Description: MemberIndexService.py
# -----------------------------------------------------------------------------
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Set

from providers.GenerativeBackend import GenerativeBackend
from providers.ProviderRegistry import ProviderRegistry
from records.MemberRepository import MemberRepository
from records.MemberText import build_member_text
from services.IndustryInferrer import IndustryInferrer
from utility.errors import DirectoryError, PersistError, ProviderUnavailable, RecordNotFound
from utility.logging_utils import get_class_logger
from vectorstore.MemberVectorStore import MemberVectorStore
import settings

VECTOR_STORE_MISSING_MESSAGE = "Vector store not configured. Please set CHROMA_PATH or CHROMA_API_KEY."


@dataclass
class IndexOutcome:
    member_id: str
    embedding_space: str
    dimension: int
    industry_inferred: Optional[str] = None


@dataclass
class IndexBatchResult:
    total: int = 0
    indexed: int = 0
    failed: int = 0
    failed_ids: List[str] = field(default_factory=list)


class MemberIndexService:
    """
    Owns the member indexing pipeline:
      - load member (+ tags) from the relational store
      - infer a missing industry from the company name (best-effort)
      - build the canonical member text
      - embed with the primary backend
      - upsert the vector into the backend's embedding space
    """

    def __init__(
        self,
        *,
        repository: MemberRepository,
        vector_store: Optional[MemberVectorStore],
        providers: ProviderRegistry,
        inferrer: Optional[IndustryInferrer] = None,
        batch_size: int = settings.INDEX_BATCH_SIZE,
        batch_pause_seconds: float = settings.INDEX_BATCH_PAUSE_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
        logger: logging.Logger | None = None,
    ) -> None:
        self.repository = repository
        self.vector_store = vector_store
        self.providers = providers
        self.inferrer = inferrer or IndustryInferrer(providers=providers)
        self.batch_size = max(1, batch_size)
        self.batch_pause_seconds = batch_pause_seconds
        self.sleep = sleep
        self.logger = logger or get_class_logger(self.__class__)

    def _require_backend(self) -> GenerativeBackend:
        if self.vector_store is None:
            raise ProviderUnavailable(VECTOR_STORE_MISSING_MESSAGE)
        return self.providers.primary()

    def index_record(self, member_id: str) -> IndexOutcome:
        """
        Bring one member's vector (and, if missing, industry) up to date.

        Raises ProviderUnavailable, RecordNotFound, ProviderError or PersistError.
        Safe to re-run: the vector is overwritten.
        """
        backend = self._require_backend()
        return self._index_one(member_id, backend)

    def _index_one(self, member_id: str, backend: GenerativeBackend) -> IndexOutcome:
        member = self.repository.get(member_id)
        if member is None:
            raise RecordNotFound(member_id)

        inferred: Optional[str] = None
        if not member.industry and member.company:
            inferred = self.inferrer.infer(member.company)
            if inferred:
                try:
                    self.repository.set_industry(member_id, inferred)
                    member.industry = inferred
                    self.logger.info("Inferred industry %r for member %s", inferred, member_id)
                except DirectoryError as e:
                    # Non-fatal: continue with embedding
                    self.logger.warning("Could not persist inferred industry for member %s: %s", member_id, e)
                    inferred = None

        text = build_member_text(member)
        vector = backend.embed(text)
        space = backend.embedding_space
        self.vector_store.upsert(space, member_id, vector)

        self.logger.info(
            "Indexed member %s (%s) space=%s dim=%d",
            member_id,
            member.full_name,
            space,
            len(vector),
        )
        return IndexOutcome(
            member_id=member_id,
            embedding_space=space,
            dimension=len(vector),
            industry_inferred=inferred,
        )

    def index_records(self, member_ids: Iterable[str]) -> IndexBatchResult:
        """
        Index members sequentially, isolating failures per member and pausing
        after every batch_size members to stay under backend rate limits.
        """
        ids = list(member_ids)
        backend = self._require_backend()
        result = IndexBatchResult(total=len(ids))

        for i, member_id in enumerate(ids):
            try:
                self._index_one(member_id, backend)
                result.indexed += 1
            except Exception as e:
                result.failed += 1
                result.failed_ids.append(member_id)
                self.logger.error("Failed to index member '%s': %s", member_id, e, exc_info=True)

            done = i + 1
            if done % self.batch_size == 0 and done < len(ids):
                self.sleep(self.batch_pause_seconds)

        self.logger.info(
            "Member indexing complete: %d/%d indexed, %d failed",
            result.indexed,
            result.total,
            result.failed,
        )
        return result

    def reindex_all(self) -> IndexBatchResult:
        """Recompute every vector, e.g. after the primary backend changed."""
        return self.index_records(self.repository.all_ids())

    def is_indexed(self, member_ids: Iterable[str]) -> Set[str]:
        """Ids that already have a vector in the primary backend's embedding space."""
        ids = list(member_ids)
        if not ids or self.vector_store is None:
            return set()
        try:
            space = self.providers.primary().embedding_space
            return self.vector_store.indexed_ids(space, ids)
        except (ProviderUnavailable, PersistError) as e:
            self.logger.warning("Failed to check indexed member ids: %s", e)
            return set()

    def status(self) -> Dict[str, Any]:
        total = self.repository.count()
        space: Optional[str] = None
        indexed = 0
        if self.vector_store is not None:
            try:
                space = self.providers.primary().embedding_space
                indexed = self.vector_store.count(space)
            except (ProviderUnavailable, PersistError) as e:
                self.logger.warning("Index status incomplete: %s", e)
        return {
            "total_members": total,
            "indexed_members": indexed,
            "embedding_space": space,
            "vector_store_configured": self.vector_store is not None,
            "providers": self.providers.configured_names(),
        }
