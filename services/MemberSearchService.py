# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-20
# Updated: 2026-02-22
# Description: MemberSearchService
# -----------------------------------------------------------------------------
import logging
import re
from typing import List, Optional

from providers.ProviderRegistry import ProviderRegistry
from records.Member import SearchResult
from records.MemberRepository import KEYWORD_FIELDS, MemberRepository
from utility.errors import RetrievalDegraded
from utility.logging_utils import get_class_logger
from vectorstore.MemberVectorStore import MemberVectorStore
import settings

_EDGE_PUNCT = re.compile(r"^[^\w]+|[^\w]+$", re.UNICODE)


def keyword_tokens(query: str, min_chars: int = settings.KEYWORD_MIN_TOKEN_CHARS) -> List[str]:
    """Lowercased whitespace tokens, edge punctuation stripped, longer than min_chars."""
    tokens: List[str] = []
    for raw in (query or "").lower().split():
        tok = _EDGE_PUNCT.sub("", raw)
        if len(tok) > min_chars and tok not in tokens:
            tokens.append(tok)
    return tokens


class MemberSearchService:
    """
    Hybrid retrieval over the member directory.

    Semantic search when the primary backend's embedding space has vectors,
    keyword search otherwise (or when the semantic path fails or finds
    nothing), and "most recently updated" when even that is not possible.
    search() never raises.
    """

    def __init__(
        self,
        *,
        repository: MemberRepository,
        vector_store: Optional[MemberVectorStore],
        providers: ProviderRegistry,
        logger: logging.Logger | None = None,
    ) -> None:
        self.repository = repository
        self.vector_store = vector_store
        self.providers = providers
        self.logger = logger or get_class_logger(self.__class__)

    @staticmethod
    def clamp_limit(limit: Optional[int]) -> int:
        """Default when unset or not a number; 0 for non-positive; capped at SEARCH_MAX_LIMIT."""
        if limit is None:
            return settings.SEARCH_DEFAULT_LIMIT
        try:
            limit = int(limit)
        except (TypeError, ValueError):
            return settings.SEARCH_DEFAULT_LIMIT
        return max(0, min(limit, settings.SEARCH_MAX_LIMIT))

    def search(self, query: str, limit: Optional[int] = None) -> List[SearchResult]:
        k = self.clamp_limit(limit)
        q = (query or "").strip()

        if k == 0:
            return []

        self.logger.info("search: query='%s' limit=%d (start)", q[:120], k)

        try:
            results = self._semantic_search(q, k)
            if results:
                self.logger.info("search: semantic hits=%d", len(results))
                return results
        except RetrievalDegraded as e:
            self.logger.warning("Semantic search failed, falling back to keyword search: %s", e)

        results = self._keyword_search(q, k)
        self.logger.info("search: %s hits=%d", results[0].strategy if results else "keyword", len(results))
        return results

    def _semantic_search(self, query: str, k: int) -> List[SearchResult]:
        """Empty list when the semantic path does not apply; RetrievalDegraded when it fails."""
        if self.vector_store is None or not query:
            return []

        try:
            backends = self.providers.available()
            if not backends:
                return []
            backend = backends[0]

            space = backend.embedding_space
            if self.vector_store.count(space) == 0:
                self.logger.debug("search: no vectors in space '%s'", space)
                return []

            vector = backend.embed(query)
            hits = self.vector_store.query(space, vector, k)
            if not hits:
                return []

            members = {m.id: m for m in self.repository.get_many([member_id for member_id, _ in hits])}
        except Exception as e:
            raise RetrievalDegraded(str(e)) from e

        results: List[SearchResult] = []
        for member_id, distance in hits:
            member = members.get(member_id)
            if member is None:
                # vector outlived its member row
                continue
            results.append(SearchResult(member=member, score=1.0 - distance, strategy="semantic"))
        return results[:k]

    def _keyword_search(self, query: str, k: int) -> List[SearchResult]:
        tokens = keyword_tokens(query)
        if not tokens:
            return self._recent(k)

        try:
            members = self.repository.keyword_search(tokens, KEYWORD_FIELDS, limit=k)
        except Exception as e:
            self.logger.error("Keyword search error, returning recent members: %s", e)
            return self._recent(k)

        return [SearchResult(member=m, score=None, strategy="keyword") for m in members[:k]]

    def _recent(self, k: int) -> List[SearchResult]:
        try:
            members = self.repository.recent(limit=k)
        except Exception as e:
            self.logger.error("Recent members query failed: %s", e)
            return []
        return [SearchResult(member=m, score=None, strategy="recent") for m in members[:k]]
