# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-21
# Description: test_member_index_service.py
# -----------------------------------------------------------------------------
import pytest

from conftest import FakeBackend, make_registry
from records.MemberText import build_member_text
from services.IndustryInferrer import IndustryInferrer, clean_industry_label
from services.MemberIndexService import MemberIndexService
from utility.errors import ProviderError, ProviderUnavailable, RecordNotFound


class RecordingSleep:
    def __init__(self):
        self.calls = []

    def __call__(self, seconds):
        self.calls.append(seconds)


def _index_service(repository, vector_store, providers, **kwargs) -> MemberIndexService:
    kwargs.setdefault("sleep", RecordingSleep())
    return MemberIndexService(
        repository=repository,
        vector_store=vector_store,
        providers=providers,
        **kwargs,
    )


def test_alex_rivera_gets_short_industry_and_vector(repository, vector_store):
    backend = FakeBackend("gemini", deltas=["Robotics"], dim=16)
    member = repository.create({"first_name": "Alex", "last_name": "Rivera", "company": "Acme Robotics"})
    svc = _index_service(repository, vector_store, make_registry(gemini=backend))

    outcome = svc.index_record(member.id)

    stored = repository.get(member.id)
    assert stored.industry == "Robotics"
    assert "\n" not in stored.industry
    assert outcome.industry_inferred == "Robotics"
    assert outcome.dimension == 16
    assert len(vector_store.spaces[backend.embedding_space][member.id]) == 16
    # inferred label is part of the embedded text
    assert "Industry: Robotics" in backend.embed_calls[-1]


def test_rejected_inference_leaves_industry_null(repository, vector_store):
    backend = FakeBackend("gemini", deltas=["Robotics is\nprobably the answer"])
    member = repository.create({"first_name": "Alex", "last_name": "Rivera", "company": "Acme Robotics"})
    svc = _index_service(repository, vector_store, make_registry(gemini=backend))

    outcome = svc.index_record(member.id)

    assert repository.get(member.id).industry is None
    assert outcome.industry_inferred is None
    assert member.id in vector_store.spaces[backend.embedding_space]


def test_inference_failure_does_not_abort_indexing(repository, vector_store):
    backend = FakeBackend("gemini", setup_error=ProviderError("boom", provider="gemini"))
    member = repository.create({"first_name": "Alex", "last_name": "Rivera", "company": "Acme Robotics"})
    svc = _index_service(repository, vector_store, make_registry(gemini=backend))

    svc.index_record(member.id)

    assert svc.is_indexed([member.id]) == {member.id}


def test_existing_industry_skips_inference(repository, vector_store, seeded):
    backend = FakeBackend("gemini")
    svc = _index_service(repository, vector_store, make_registry(gemini=backend))

    svc.index_record(seeded["Alice"])

    assert backend.chat_calls == []


def test_reindex_is_idempotent(repository, vector_store, seeded):
    backend = FakeBackend("gemini")
    svc = _index_service(repository, vector_store, make_registry(gemini=backend))

    svc.index_record(seeded["Ben"])
    first = list(vector_store.spaces[backend.embedding_space][seeded["Ben"]])
    svc.index_record(seeded["Ben"])
    second = vector_store.spaces[backend.embedding_space][seeded["Ben"]]

    assert first == second
    assert vector_store.count(backend.embedding_space) == 1
    assert backend.embed_calls[0] == build_member_text(repository.get(seeded["Ben"]))


def test_unknown_member_raises_record_not_found(repository, vector_store, providers):
    svc = _index_service(repository, vector_store, providers)
    with pytest.raises(RecordNotFound):
        svc.index_record("does-not-exist")


def test_no_backend_fails_fast(repository, vector_store, seeded):
    svc = _index_service(repository, vector_store, make_registry())

    with pytest.raises(ProviderUnavailable):
        svc.index_record(seeded["Alice"])
    with pytest.raises(ProviderUnavailable):
        svc.index_records(seeded.values())


def test_no_vector_store_fails_fast(repository, seeded, providers):
    svc = _index_service(repository, None, providers)

    with pytest.raises(ProviderUnavailable):
        svc.index_record(seeded["Alice"])
    assert svc.is_indexed([seeded["Alice"]]) == set()


def test_batch_isolates_failures(repository, vector_store, seeded, providers):
    svc = _index_service(repository, vector_store, providers)
    ids = [seeded["Alice"], "missing-1", seeded["Ben"], "missing-2", seeded["Carla"]]

    result = svc.index_records(ids)

    assert result.total == 5
    assert result.indexed == 3
    assert result.failed == 2
    assert result.failed_ids == ["missing-1", "missing-2"]
    assert svc.is_indexed(ids) == set(seeded.values())


def test_batch_pauses_after_every_batch_but_not_after_last(repository, vector_store, providers):
    ids = [repository.create({"first_name": f"M{i}", "last_name": "Test"}).id for i in range(12)]
    sleep = RecordingSleep()
    svc = _index_service(repository, vector_store, providers, batch_size=5, batch_pause_seconds=0.25, sleep=sleep)

    svc.index_records(ids)
    assert sleep.calls == [0.25, 0.25]

    sleep.calls.clear()
    svc.index_records(ids[:10])
    assert sleep.calls == [0.25]


def test_reindex_all_after_backend_change_fills_new_space(repository, vector_store, seeded):
    gemini = FakeBackend("gemini", dim=8)
    openai = FakeBackend("openai", dim=12)
    _index_service(repository, vector_store, make_registry(openai=openai)).reindex_all()

    svc = _index_service(repository, vector_store, make_registry(gemini=gemini, openai=openai))
    assert svc.is_indexed(seeded.values()) == set()

    result = svc.reindex_all()

    assert result.indexed == 3
    assert vector_store.count(gemini.embedding_space) == 3
    assert vector_store.count(openai.embedding_space) == 3


def test_status_reports_totals(repository, vector_store, seeded, providers, backend):
    svc = _index_service(repository, vector_store, providers)
    svc.index_record(seeded["Alice"])

    status = svc.status()

    assert status["total_members"] == 3
    assert status["indexed_members"] == 1
    assert status["embedding_space"] == backend.embedding_space
    assert status["providers"] == ["gemini"]


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("Finance", "Finance"),
        ('"Real Estate".', "Real Estate"),
        ("  other ", "Other"),
        ("", None),
        ("Tech\nMedia", None),
        ("x" * 60, None),
        (None, None),
    ],
)
def test_clean_industry_label(raw, expected):
    assert clean_industry_label(raw) == expected


def test_inferrer_without_company_makes_no_call(providers, backend):
    assert IndustryInferrer(providers=providers).infer("  ") is None
    assert backend.chat_calls == []
