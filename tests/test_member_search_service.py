# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-22
# Description: test_member_search_service.py
# -----------------------------------------------------------------------------
import pytest

from conftest import FakeBackend, make_registry
from records.MemberText import build_member_text
from services.MemberIndexService import MemberIndexService
from services.MemberSearchService import MemberSearchService, keyword_tokens
from utility.errors import PersistError, ProviderError
import settings


def _search_service(repository, vector_store=None, providers=None) -> MemberSearchService:
    return MemberSearchService(
        repository=repository,
        vector_store=vector_store,
        providers=providers or make_registry(),
    )


def test_keyword_tokens_drop_short_and_punctuation():
    assert keyword_tokens("Who works in Finance?") == ["who", "works", "finance"]
    assert keyword_tokens("  a an it  ") == []
    assert keyword_tokens("(Boston), boston") == ["boston"]


def test_clamp_limit():
    assert MemberSearchService.clamp_limit(None) == settings.SEARCH_DEFAULT_LIMIT
    assert MemberSearchService.clamp_limit(0) == 0
    assert MemberSearchService.clamp_limit(-4) == 0
    assert MemberSearchService.clamp_limit("many") == settings.SEARCH_DEFAULT_LIMIT
    assert MemberSearchService.clamp_limit(1000) == settings.SEARCH_MAX_LIMIT
    assert MemberSearchService.clamp_limit(3) == 3


def test_zero_limit_returns_nothing(repository, seeded, vector_store, providers):
    svc = _search_service(repository, vector_store, providers)

    assert svc.search("finance austin boston", limit=0) == []
    assert svc.search("", limit=-1) == []


def test_finance_query_uses_keyword_fallback_without_embeddings(repository, seeded, vector_store, providers):
    svc = _search_service(repository, vector_store, providers)

    results = svc.search("who works in finance")

    ids = [r.member.id for r in results]
    assert seeded["Alice"] in ids
    assert all(r.strategy == "keyword" for r in results)
    assert all(r.score is None for r in results)


def test_search_without_any_backend_or_store_never_raises(repository, seeded):
    svc = _search_service(repository)

    results = svc.search("Austin")

    assert [r.member.first_name for r in results] == ["Ben"]


def test_no_usable_tokens_returns_recent(repository, seeded):
    repository.update(seeded["Carla"], {"bio": "Back from sabbatical"})
    svc = _search_service(repository)

    results = svc.search("hi")

    assert len(results) == 3
    assert results[0].member.id == seeded["Carla"]
    assert all(r.strategy == "recent" for r in results)


def test_results_never_exceed_limit(repository):
    for i in range(20):
        repository.create({"first_name": f"Member{i}", "last_name": "Finance", "industry": "Finance"})
    svc = _search_service(repository)

    assert len(svc.search("finance")) == settings.SEARCH_DEFAULT_LIMIT
    assert len(svc.search("finance", limit=4)) == 4
    assert len(svc.search("finance", limit=500)) == settings.SEARCH_MAX_LIMIT


def test_semantic_path_ranks_exact_text_first(repository, seeded, vector_store, providers, backend):
    MemberIndexService(
        repository=repository,
        vector_store=vector_store,
        providers=providers,
        sleep=lambda s: None,
    ).index_records(seeded.values())
    svc = _search_service(repository, vector_store, providers)

    ben = repository.get(seeded["Ben"])
    results = svc.search(build_member_text(ben), limit=2)

    assert len(results) == 2
    assert results[0].member.id == seeded["Ben"]
    assert results[0].strategy == "semantic"
    assert results[0].score == pytest.approx(1.0, abs=1e-5)


def test_semantic_failure_degrades_to_keyword(repository, seeded, vector_store, providers, backend):
    vector_store.upsert(backend.embedding_space, seeded["Alice"], backend.embed("anything"))
    vector_store.fail_queries = True
    svc = _search_service(repository, vector_store, providers)

    results = svc.search("finance")

    assert [r.member.id for r in results] == [seeded["Alice"]]
    assert results[0].strategy == "keyword"


def test_embed_error_degrades_to_keyword(repository, seeded, vector_store):
    broken = FakeBackend("gemini", embed_error=ProviderError("quota exceeded", provider="gemini", kind="rate_limit"))
    vector_store.upsert(broken.embedding_space, seeded["Ben"], [1.0] * broken.dim)
    svc = _search_service(repository, vector_store, make_registry(gemini=broken))

    results = svc.search("Nimbus")

    assert [r.member.first_name for r in results] == ["Ben"]


def test_vectors_from_other_backend_are_not_queried(repository, seeded, vector_store):
    gemini = FakeBackend("gemini", dim=8)
    openai = FakeBackend("openai", dim=12)
    vector_store.upsert(openai.embedding_space, seeded["Alice"], openai.embed("x"))

    # gemini is primary and its space is empty: keyword path, no embed call
    svc = _search_service(repository, vector_store, make_registry(gemini=gemini, openai=openai))
    results = svc.search("finance")

    assert results[0].strategy == "keyword"
    assert gemini.embed_calls == []


def test_keyword_error_degrades_to_recent(repository, seeded, monkeypatch):
    def boom(*args, **kwargs):
        raise PersistError("db down")

    monkeypatch.setattr(repository, "keyword_search", boom)
    svc = _search_service(repository)

    results = svc.search("finance")

    assert len(results) == 3
    assert all(r.strategy == "recent" for r in results)


def test_everything_failing_returns_empty_list(repository, monkeypatch):
    def boom(*args, **kwargs):
        raise PersistError("db down")

    monkeypatch.setattr(repository, "keyword_search", boom)
    monkeypatch.setattr(repository, "recent", boom)

    assert _search_service(repository).search("finance") == []


def test_deleted_member_vector_is_skipped(repository, seeded, vector_store, providers, backend):
    alice = repository.get(seeded["Alice"])
    vector_store.upsert(backend.embedding_space, alice.id, backend.embed(build_member_text(alice)))
    vector_store.upsert(backend.embedding_space, "ghost", backend.embed("ghost"))
    svc = _search_service(repository, vector_store, providers)

    results = svc.search(build_member_text(alice))

    assert [r.member.id for r in results] == [alice.id]
