# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-25
# Description: DirectoryClient.py
# -----------------------------------------------------------------------------
from __future__ import annotations

import os
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence

import requests

from utility.logging_utils import get_class_logger
from utility.sse import SSEDecoder

API_BASE_URL = os.getenv("MDIR_API_BASE_URL", "http://127.0.0.1:8000").rstrip("/")
TIMEOUT_SECONDS = int(os.getenv("MDIR_CLIENT_TIMEOUT_SECONDS", "60"))


class DirectoryClientError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def _error_detail(r: requests.Response) -> str:
    try:
        body = r.json()
    except ValueError:
        return r.text
    if isinstance(body, dict):
        return str(body.get("error") or body.get("detail") or body)
    return str(body)


class DirectoryClient:
    """
    Thin consumer of the Member Directory API.

    stream_chat() reads the text/event-stream response incrementally and
    yields each delta as it arrives; an event split across network reads is
    reassembled by SSEDecoder.
    """

    def __init__(
        self,
        base_url: str = API_BASE_URL,
        *,
        session: Optional[requests.Session] = None,
        timeout: float = TIMEOUT_SECONDS,
        logger=None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout
        self.logger = logger or get_class_logger(self.__class__)

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def _post(self, path: str, payload: Dict[str, Any], **kwargs: Any) -> requests.Response:
        try:
            r = self.session.post(self._url(path), json=payload, timeout=self.timeout, **kwargs)
        except requests.exceptions.RequestException as e:
            raise DirectoryClientError(f"API request failed: {e}") from e
        if not r.ok:
            detail = _error_detail(r)
            r.close()
            raise DirectoryClientError(f"HTTP {r.status_code}: {detail}", status_code=r.status_code)
        return r

    def search(self, query: str, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        payload: Dict[str, Any] = {"query": query}
        if limit is not None:
            payload["limit"] = int(limit)
        return self._post("/search", payload).json().get("results", [])

    def stream_chat(
        self,
        message: str,
        history: Optional[Sequence[Mapping[str, str]]] = None,
    ) -> Iterator[str]:
        payload = {
            "message": message,
            "history": [{"role": h["role"], "content": h["content"]} for h in (history or [])],
        }
        r = self._post("/chat", payload, stream=True)
        # event-stream bodies are UTF-8
        r.encoding = "utf-8"
        decoder = SSEDecoder()
        try:
            for chunk in r.iter_content(chunk_size=None, decode_unicode=True):
                if not chunk:
                    continue
                for event in decoder.feed(chunk):
                    if event.is_done:
                        return
                    yield event.text
        except requests.exceptions.RequestException as e:
            raise DirectoryClientError(f"Chat stream interrupted: {e}") from e
        finally:
            r.close()

        # server closed without a done event
        self.logger.warning("Chat stream ended without done event (pending=%d chars)", len(decoder.pending))

    def chat(self, message: str, history: Optional[Sequence[Mapping[str, str]]] = None) -> str:
        return "".join(self.stream_chat(message, history))
