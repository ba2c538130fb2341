# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-17
# Description: ProviderRegistry
# -----------------------------------------------------------------------------
import hashlib
import threading
from typing import Callable, Dict, List, Mapping, Optional, Tuple

from config.Config import Config
from providers.GeminiBackend import GeminiBackend
from providers.GenerativeBackend import GenerativeBackend
from providers.OpenAIBackend import OpenAIBackend
from utility.errors import ProviderUnavailable
from utility.logging_utils import get_class_logger

BackendFactory = Callable[[Config], GenerativeBackend]

DEFAULT_FACTORIES: Dict[str, BackendFactory] = {
    "gemini": lambda cfg: GeminiBackend(cfg=cfg),
    "openai": lambda cfg: OpenAIBackend(cfg=cfg),
}

NOT_CONFIGURED_MESSAGE = "No AI provider configured. Please set GEMINI_API_KEY or OPENAI_API_KEY."


def _fingerprint(cfg: Config, name: str) -> str:
    """Identity of the settings a backend client was built from (never logged raw)."""
    if name == "gemini":
        raw = f"{cfg.gemini_api_key}|{cfg.gemini_chat_model}|{cfg.gemini_embed_model}"
    else:
        raw = f"{cfg.openai_api_key}|{cfg.openai_base_url}|{cfg.openai_chat_model}|{cfg.openai_embed_model}"
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()


class ProviderRegistry:
    """
    Provider capability descriptor.

    Configuration is re-read on every call, so removing or rotating a key
    takes effect on the next request. Backend clients are built once per
    distinct credential set and reused for the life of the process.
    """

    def __init__(
        self,
        *,
        config_loader: Callable[[], Config] = Config.from_env,
        factories: Optional[Mapping[str, BackendFactory]] = None,
        logger=None,
    ) -> None:
        self.config_loader = config_loader
        self.factories = dict(factories or DEFAULT_FACTORIES)
        self.logger = logger or get_class_logger(self.__class__)
        self._clients: Dict[str, Tuple[str, GenerativeBackend]] = {}
        self._lock = threading.Lock()

    def configured_names(self) -> List[str]:
        cfg = self.config_loader()
        return [n for n in cfg.configured_providers() if n in self.factories]

    def available(self) -> List[GenerativeBackend]:
        """Usable backends, primary first."""
        cfg = self.config_loader()
        backends: List[GenerativeBackend] = []
        for name in cfg.configured_providers():
            if name not in self.factories:
                continue
            backend = self._client_for(cfg, name)
            if backend is not None:
                backends.append(backend)
        return backends

    def primary(self) -> GenerativeBackend:
        backends = self.available()
        if not backends:
            raise ProviderUnavailable(NOT_CONFIGURED_MESSAGE)
        return backends[0]

    def is_configured(self) -> bool:
        return bool(self.configured_names())

    def _client_for(self, cfg: Config, name: str) -> Optional[GenerativeBackend]:
        fp = _fingerprint(cfg, name)
        with self._lock:
            cached = self._clients.get(name)
            if cached is not None and cached[0] == fp:
                return cached[1]

            try:
                backend = self.factories[name](cfg)
            except Exception as e:
                self.logger.error("Failed to construct backend '%s': %s", name, e)
                return None

            if cached is not None:
                self.logger.info("Credentials for backend '%s' changed; client rebuilt", name)
            self._clients[name] = (fp, backend)
            return backend
