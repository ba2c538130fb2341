# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-11-22
# Updated: 2026-02-16
# Description: OpenAIBackend
# -----------------------------------------------------------------------------
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Sequence

import openai
from openai import OpenAI

from config.Config import Config
from providers.GenerativeBackend import ChatTurn, embedding_space_for, normalize_vector
from utility.errors import ProviderError
from utility.logging_utils import get_class_logger
import settings

Message = Dict[str, str]  # {"role": "system"|"user"|"assistant", "content": "..."}


def _kind_for(exc: Exception) -> str:
    if isinstance(exc, openai.RateLimitError):
        return "rate_limit"
    if isinstance(exc, (openai.AuthenticationError, openai.PermissionDeniedError)):
        return "auth"
    return "other"


@dataclass
class OpenAIBackend:
    """
        OpenAI chat + embeddings backend.

        Expected Config fields:
          cfg.openai_api_key: str
          cfg.openai_base_url: str (optional)
          cfg.openai_chat_model: str  (e.g. "gpt-4o-mini")
          cfg.openai_embed_model: str (e.g. "text-embedding-3-small")
    """

    cfg: Config
    client: Any = None
    logger: Any = None

    name = "openai"

    def __post_init__(self) -> None:
        self.logger = self.logger or get_class_logger(self.__class__)

        if not self.cfg.openai_api_key:
            raise ValueError("Config is missing openai_api_key for OpenAI mode")

        self.chat_model = self.cfg.openai_chat_model
        self.embed_model = self.cfg.openai_embed_model

        if self.client is None:
            self.client = OpenAI(
                api_key=self.cfg.openai_api_key,
                base_url=self.cfg.openai_base_url or None,
            )

        self.logger.info(
            "OpenAIBackend initialised (chat_model=%s, embed_model=%s)",
            self.chat_model,
            self.embed_model,
        )

    @property
    def embedding_space(self) -> str:
        return embedding_space_for(self.name, self.embed_model)

    def embed(self, text: str) -> List[float]:
        if not text or not text.strip():
            raise ValueError("text must be non-empty.")

        try:
            resp = self.client.embeddings.create(model=self.embed_model, input=text)
        except openai.OpenAIError as e:
            self.logger.warning("OpenAI embedding failed: %s", e)
            raise ProviderError(f"OpenAI embedding failed: {e}", provider=self.name, kind=_kind_for(e)) from e

        return normalize_vector(resp.data[0].embedding)

    @staticmethod
    def build_messages(system_prompt: str, history: Sequence[ChatTurn], user_message: str) -> List[Message]:
        messages: List[Message] = [{"role": "system", "content": system_prompt}]
        for turn in history:
            if turn.role in ("user", "assistant"):
                messages.append({"role": turn.role, "content": turn.content})
        messages.append({"role": "user", "content": user_message})
        return messages

    # Streaming chat call
    def stream_chat(
            self,
            system_prompt: str,
            history: Sequence[ChatTurn],
            user_message: str,
    ) -> Iterator[str]:
        params: Dict[str, Any] = {
            "model": self.chat_model,
            "messages": self.build_messages(system_prompt, history, user_message),
            "temperature": settings.CHAT_TEMPERATURE,
            "max_tokens": settings.CHAT_MAX_TOKENS,
            "stream": True,
        }

        self.logger.debug(
            "Chat stream request: model=%s messages=%d",
            self.chat_model,
            len(params["messages"]),
        )

        try:
            stream = self.client.chat.completions.create(**params)
        except openai.OpenAIError as e:
            raise ProviderError(f"OpenAI chat failed: {e}", provider=self.name, kind=_kind_for(e)) from e

        try:
            for event in stream:
                if not event.choices:
                    continue
                delta = event.choices[0].delta
                if delta and getattr(delta, "content", None):
                    yield delta.content
        except openai.OpenAIError as e:
            raise ProviderError(f"OpenAI stream failed: {e}", provider=self.name, kind=_kind_for(e)) from e
        finally:
            # releases the HTTP connection when the consumer stops early
            close = getattr(stream, "close", None)
            if callable(close):
                close()
