# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-11-12
# Updated: 2026-02-27
# Description: conftest.py
# -----------------------------------------------------------------------------

import hashlib
import sys
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Sequence, Set, Tuple

import numpy as np
import pytest

# add project root to sys.path
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from config.Config import Config  # noqa: E402
from providers.GenerativeBackend import ChatTurn, normalize_vector  # noqa: E402
from providers.ProviderRegistry import ProviderRegistry  # noqa: E402
from records.SqlMemberRepository import SqlMemberRepository  # noqa: E402
from utility.errors import PersistError  # noqa: E402


class FakeBackend:
    """
    Deterministic stand-in for a generative backend.

    embed() seeds a generator from the text hash, so identical text always
    gives the identical vector. stream_chat() replays scripted deltas and can
    fail during setup or after a given number of deltas.
    """

    def __init__(
        self,
        name: str = "fake",
        *,
        deltas: Optional[Sequence[str]] = None,
        dim: int = 8,
        setup_error: Optional[Exception] = None,
        mid_stream_error: Optional[Exception] = None,
        fail_after: int = 1,
        embed_error: Optional[Exception] = None,
    ) -> None:
        self.name = name
        self.deltas = list(deltas if deltas is not None else ["Hello", " there"])
        self.dim = dim
        self.setup_error = setup_error
        self.mid_stream_error = mid_stream_error
        self.fail_after = fail_after
        self.embed_error = embed_error

        self.embed_calls: List[str] = []
        self.chat_calls: List[Tuple[str, List[ChatTurn], str]] = []
        self.pulled = 0
        self.closed = 0

    @property
    def embedding_space(self) -> str:
        return f"{self.name}-embed-{self.dim}"

    def embed(self, text: str) -> List[float]:
        self.embed_calls.append(text)
        if self.embed_error is not None:
            raise self.embed_error
        seed = int(hashlib.sha256(text.encode("utf-8")).hexdigest()[:8], 16)
        rng = np.random.default_rng(seed)
        return normalize_vector(rng.standard_normal(self.dim))

    def stream_chat(self, system_prompt: str, history: Sequence[ChatTurn], user_message: str) -> Iterator[str]:
        self.chat_calls.append((system_prompt, list(history), user_message))
        if self.setup_error is not None:
            raise self.setup_error
        return self._deltas()

    def _deltas(self) -> Iterator[str]:
        try:
            for i, text in enumerate(self.deltas):
                if self.mid_stream_error is not None and i == self.fail_after:
                    raise self.mid_stream_error
                self.pulled += 1
                yield text
        finally:
            self.closed += 1


class InMemoryVectorStore:
    """MemberVectorStore over plain dicts; cosine distance via numpy."""

    def __init__(self) -> None:
        self.spaces: Dict[str, Dict[str, List[float]]] = {}
        self.fail_queries = False
        self.healthy = True

    def test_connection(self) -> bool:
        return self.healthy

    def upsert(self, space: str, member_id: str, vector: Sequence[float]) -> None:
        vectors = self.spaces.setdefault(space, {})
        if vectors:
            dim = len(next(iter(vectors.values())))
            if dim != len(vector):
                raise PersistError(f"dimension {len(vector)} != {dim}")
        vectors[member_id] = list(vector)

    def query(self, space: str, vector: Sequence[float], k: int) -> List[Tuple[str, float]]:
        if self.fail_queries:
            raise PersistError("vector store unreachable")
        q = np.asarray(vector, dtype=np.float32)
        scored = []
        for member_id, stored in self.spaces.get(space, {}).items():
            v = np.asarray(stored, dtype=np.float32)
            cos = float(np.dot(q, v) / (np.linalg.norm(q) * np.linalg.norm(v)))
            scored.append((member_id, 1.0 - cos))
        scored.sort(key=lambda item: item[1])
        return scored[:k]

    def count(self, space: str) -> int:
        return len(self.spaces.get(space, {}))

    def indexed_ids(self, space: str, member_ids: Sequence[str]) -> Set[str]:
        present = self.spaces.get(space, {})
        return {i for i in member_ids if i in present}

    def delete(self, member_id: str) -> int:
        deleted = 0
        for vectors in self.spaces.values():
            if vectors.pop(member_id, None) is not None:
                deleted += 1
        return deleted


def make_registry(gemini: Optional[FakeBackend] = None, openai: Optional[FakeBackend] = None) -> ProviderRegistry:
    """Real ProviderRegistry whose config marks exactly the given backends as configured."""
    cfg = Config(
        gemini_api_key="test-gemini-key" if gemini is not None else "",
        openai_api_key="test-openai-key" if openai is not None else "",
    )
    factories = {}
    if gemini is not None:
        factories["gemini"] = lambda _cfg: gemini
    if openai is not None:
        factories["openai"] = lambda _cfg: openai
    return ProviderRegistry(config_loader=lambda: cfg, factories=factories)


@pytest.fixture
def repository() -> SqlMemberRepository:
    return SqlMemberRepository.from_url("sqlite://")


@pytest.fixture
def vector_store() -> InMemoryVectorStore:
    return InMemoryVectorStore()


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend("gemini")


@pytest.fixture
def providers(backend: FakeBackend) -> ProviderRegistry:
    return make_registry(gemini=backend)


@pytest.fixture
def seeded(repository: SqlMemberRepository) -> Dict[str, str]:
    """A handful of members; returns first_name -> id."""
    rows = [
        {"first_name": "Alice", "last_name": "Nguyen", "industry": "Finance", "company": "Harbor Capital",
         "job_title": "Analyst", "city": "Boston", "state": "MA", "graduation_year": 2015,
         "email": "alice@example.com", "tags": ["mentor"]},
        {"first_name": "Ben", "last_name": "Okafor", "industry": "Technology", "company": "Nimbus Labs",
         "job_title": "Engineer", "city": "Austin", "state": "TX", "graduation_year": 2018},
        {"first_name": "Carla", "last_name": "Diaz", "industry": "Healthcare", "company": "Mercy General",
         "job_title": "Nurse Manager", "city": "Denver", "state": "CO", "graduation_year": 2010,
         "status": "ALUMNI"},
    ]
    return {row["first_name"]: repository.create(row).id for row in rows}
