# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-17
# Description: test_provider_registry.py
# -----------------------------------------------------------------------------
import pytest

from config.Config import Config
from conftest import FakeBackend
from providers.GenerativeBackend import GenerativeBackend, embedding_space_for, normalize_vector
from providers.ProviderRegistry import ProviderRegistry
from utility.errors import ProviderUnavailable


class MutableConfig:
    def __init__(self, **kwargs):
        self.cfg = Config(**kwargs)

    def __call__(self):
        return self.cfg


class CountingFactory:
    def __init__(self, name):
        self.name = name
        self.built = []

    def __call__(self, cfg):
        backend = FakeBackend(self.name)
        self.built.append(backend)
        return backend


def _registry(loader):
    gemini, openai = CountingFactory("gemini"), CountingFactory("openai")
    registry = ProviderRegistry(config_loader=loader, factories={"gemini": gemini, "openai": openai})
    return registry, gemini, openai


def test_gemini_takes_precedence_when_both_configured():
    registry, _, _ = _registry(MutableConfig(gemini_api_key="g", openai_api_key="o"))

    assert [b.name for b in registry.available()] == ["gemini", "openai"]
    assert registry.primary().name == "gemini"


def test_single_backend_is_primary():
    registry, _, _ = _registry(MutableConfig(openai_api_key="o"))

    assert registry.configured_names() == ["openai"]
    assert registry.primary().name == "openai"


def test_nothing_configured_raises_provider_unavailable():
    registry, _, _ = _registry(MutableConfig())

    assert registry.available() == []
    assert registry.is_configured() is False
    with pytest.raises(ProviderUnavailable):
        registry.primary()


def test_clients_are_reused_until_credentials_rotate():
    loader = MutableConfig(gemini_api_key="key-1")
    registry, gemini, _ = _registry(loader)

    first = registry.primary()
    assert registry.primary() is first
    assert len(gemini.built) == 1

    loader.cfg = Config(gemini_api_key="key-2")
    rotated = registry.primary()

    assert rotated is not first
    assert len(gemini.built) == 2


def test_removed_credentials_take_effect_on_next_call():
    loader = MutableConfig(gemini_api_key="g", openai_api_key="o")
    registry, _, _ = _registry(loader)
    assert registry.primary().name == "gemini"

    loader.cfg = Config(openai_api_key="o")

    assert registry.primary().name == "openai"


def test_factory_error_skips_backend():
    def broken(cfg):
        raise ValueError("sdk not importable")

    registry = ProviderRegistry(
        config_loader=MutableConfig(gemini_api_key="g", openai_api_key="o"),
        factories={"gemini": broken, "openai": CountingFactory("openai")},
    )

    assert [b.name for b in registry.available()] == ["openai"]


def test_config_keeps_defaults_for_unset_env(monkeypatch):
    for env_name in Config.ENV_VARS.values():
        monkeypatch.delenv(env_name, raising=False)
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")

    cfg = Config.from_env()

    assert cfg.configured_providers() == ["openai"]
    assert cfg.openai_embed_model == "text-embedding-3-small"
    assert cfg.vector_store_configured is False
    assert "sk-test" not in str(cfg.summary())


def test_fake_backend_satisfies_protocol():
    assert isinstance(FakeBackend("x"), GenerativeBackend)


def test_embedding_space_and_normalisation():
    assert embedding_space_for("openai", "text-embedding-3-small") == "openai-text-embedding-3-small"
    assert embedding_space_for("gemini", "models/text-embedding-004") == "gemini-models-text-embedding-004"

    vec = normalize_vector([3.0, 4.0])
    assert vec == pytest.approx([0.6, 0.8])
    with pytest.raises(ValueError):
        normalize_vector([])
