# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-16
# Description: GeminiBackend
# -----------------------------------------------------------------------------
from dataclasses import dataclass
from typing import Any, Iterator, List, Sequence

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from config.Config import Config
from providers.GenerativeBackend import ChatTurn, embedding_space_for, normalize_vector
from utility.errors import ProviderError
from utility.logging_utils import get_class_logger
import settings


def _kind_for(exc: Exception) -> str:
    code = getattr(exc, "code", None)
    if code == 429:
        return "rate_limit"
    if code in (401, 403):
        return "auth"
    text = str(exc).lower()
    if "api key" in text or "api_key" in text:
        return "auth"
    if "quota" in text or "resource_exhausted" in text:
        return "rate_limit"
    return "other"


@dataclass
class GeminiBackend:
    """
        Google Gemini chat + embeddings backend (google-genai SDK).

        Expected Config fields:
          cfg.gemini_api_key: str
          cfg.gemini_chat_model: str  (e.g. "gemini-2.0-flash")
          cfg.gemini_embed_model: str (e.g. "text-embedding-004")
    """

    cfg: Config
    client: Any = None
    logger: Any = None

    name = "gemini"

    def __post_init__(self) -> None:
        self.logger = self.logger or get_class_logger(self.__class__)

        if not self.cfg.gemini_api_key:
            raise ValueError("Config is missing gemini_api_key for Gemini mode")

        self.chat_model = self.cfg.gemini_chat_model
        self.embed_model = self.cfg.gemini_embed_model

        if self.client is None:
            self.client = genai.Client(api_key=self.cfg.gemini_api_key)

        self.logger.info(
            "GeminiBackend initialised (chat_model=%s, embed_model=%s)",
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
            resp = self.client.models.embed_content(model=self.embed_model, contents=text)
        except genai_errors.APIError as e:
            self.logger.warning("Gemini embedding failed: %s", e)
            raise ProviderError(f"Gemini embedding failed: {e}", provider=self.name, kind=_kind_for(e)) from e
        except httpx.HTTPError as e:
            self.logger.warning("Gemini embedding transport error: %s", e)
            raise ProviderError(f"Gemini embedding failed: {e}", provider=self.name, kind="other") from e

        if not resp.embeddings:
            raise ProviderError("Gemini returned no embedding", provider=self.name)
        return normalize_vector(resp.embeddings[0].values)

    @staticmethod
    def build_contents(history: Sequence[ChatTurn], user_message: str) -> List[types.Content]:
        # Gemini calls the assistant role "model"
        contents: List[types.Content] = []
        for turn in history:
            if turn.role not in ("user", "assistant"):
                continue
            role = "user" if turn.role == "user" else "model"
            contents.append(types.Content(role=role, parts=[types.Part(text=turn.content)]))
        contents.append(types.Content(role="user", parts=[types.Part(text=user_message)]))
        return contents

    def stream_chat(
            self,
            system_prompt: str,
            history: Sequence[ChatTurn],
            user_message: str,
    ) -> Iterator[str]:
        config = types.GenerateContentConfig(
            system_instruction=system_prompt,
            temperature=settings.CHAT_TEMPERATURE,
            max_output_tokens=settings.CHAT_MAX_TOKENS,
        )
        contents = self.build_contents(history, user_message)

        self.logger.debug("Chat stream request: model=%s contents=%d", self.chat_model, len(contents))

        stream = None
        try:
            stream = self.client.models.generate_content_stream(
                model=self.chat_model,
                contents=contents,
                config=config,
            )
            for chunk in stream:
                text = chunk.text
                if text:
                    yield text
        except genai_errors.APIError as e:
            raise ProviderError(f"Gemini chat failed: {e}", provider=self.name, kind=_kind_for(e)) from e
        except httpx.HTTPError as e:
            raise ProviderError(f"Gemini chat failed: {e}", provider=self.name, kind="other") from e
        finally:
            close = getattr(stream, "close", None)
            if callable(close):
                close()
