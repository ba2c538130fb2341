# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-14
# Description: errors.py
# -----------------------------------------------------------------------------
from __future__ import annotations

from typing import Optional

BUSY_MESSAGE = "The AI service is temporarily at capacity. Please try again in a moment."
MISCONFIGURED_MESSAGE = "The AI service is not properly configured. Please contact an administrator."
GENERIC_MESSAGE = "Sorry, I encountered an error. Please try again."

USER_MESSAGES = {
    "busy": BUSY_MESSAGE,
    "misconfigured": MISCONFIGURED_MESSAGE,
    "generic": GENERIC_MESSAGE,
}


class DirectoryError(Exception):
    """Base class for member directory errors."""


class ValidationError(DirectoryError):
    """Bad caller input (4xx)."""


class RecordNotFound(ValidationError):
    def __init__(self, record_id: str) -> None:
        super().__init__(f"Member '{record_id}' not found")
        self.record_id = record_id


class ProviderUnavailable(DirectoryError):
    """No usable generative backend (or vector store) is configured."""


class ProviderError(DirectoryError):
    """
    A configured backend failed at call time.

    kind is one of "rate_limit", "auth" or "other" so callers can pick a
    user-facing message without knowing the backend's SDK.
    """

    def __init__(self, message: str, *, provider: str, kind: str = "other") -> None:
        super().__init__(message)
        self.provider = provider
        self.kind = kind


class RetrievalDegraded(DirectoryError):
    """Semantic retrieval failed; keyword fallback is used instead. Never surfaced."""


class PersistError(DirectoryError):
    """A store read/write failed."""


def _status_code(exc: BaseException) -> Optional[int]:
    for attr in ("status_code", "code"):
        code = getattr(exc, attr, None)
        if isinstance(code, int):
            return code
    response = getattr(exc, "response", None)
    code = getattr(response, "status_code", None)
    return code if isinstance(code, int) else None


def classify_error(exc: BaseException) -> str:
    """
    Map any failure to "busy", "misconfigured" or "generic".
    """
    if isinstance(exc, ProviderUnavailable):
        return "misconfigured"

    if isinstance(exc, ProviderError):
        if exc.kind == "rate_limit":
            return "busy"
        if exc.kind == "auth":
            return "misconfigured"

    # Walk the cause chain: backends wrap SDK errors with `raise ... from e`
    current: Optional[BaseException] = exc
    while current is not None:
        code = _status_code(current)
        if code == 429:
            return "busy"
        if code in (401, 403):
            return "misconfigured"
        current = current.__cause__

    text = str(exc).lower()
    if "quota" in text or "rate limit" in text or "429" in text:
        return "busy"
    if "api key" in text or "auth" in text or "permission" in text:
        return "misconfigured"
    return "generic"


def user_message_for(exc: BaseException) -> str:
    return USER_MESSAGES[classify_error(exc)]
