# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-01-09
# Updated: 2026-03-02
# Description: settings.py
# -----------------------------------------------------------------------------
import os
from typing import Callable, TypeVar

T = TypeVar("T")

_TRUE = ("1", "true", "t", "yes", "y", "on")
_FALSE = ("0", "false", "f", "no", "n", "off")


def _env(name: str, default: str = "") -> str:
    """Env var with surrounding whitespace removed; unset or blank -> default."""
    return (os.getenv(name) or "").strip() or default


def _env_typed(name: str, default: T, parse: Callable[[str], T], kind: str) -> T:
    raw = _env(name)
    if not raw:
        return default
    try:
        return parse(raw)
    except ValueError as e:
        raise RuntimeError(f"Env var {name} must be {kind}, got {raw!r}") from e


def _env_int(name: str, default: int) -> int:
    return _env_typed(name, default, int, "an int")


def _env_float(name: str, default: float) -> float:
    return _env_typed(name, default, float, "a float")


def _parse_bool(raw: str) -> bool:
    value = raw.lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(raw)


def _env_bool(name: str, default: bool) -> bool:
    return _env_typed(name, default, _parse_bool, "a boolean")


# -----------------------------------------------------------------------------
# Retrieval
# -----------------------------------------------------------------------------
SEARCH_DEFAULT_LIMIT = _env_int("MDIR_SEARCH_DEFAULT_LIMIT", 10)
SEARCH_MAX_LIMIT = _env_int("MDIR_SEARCH_MAX_LIMIT", 15)

# Keyword fallback ignores tokens of this length or shorter ("in", "of", ...)
KEYWORD_MIN_TOKEN_CHARS = _env_int("MDIR_KEYWORD_MIN_TOKEN_CHARS", 2)


# -----------------------------------------------------------------------------
# Chat
# -----------------------------------------------------------------------------
CHAT_HISTORY_WINDOW = _env_int("MDIR_CHAT_HISTORY_WINDOW", 20)
CHAT_TEMPERATURE = _env_float("MDIR_CHAT_TEMPERATURE", 0.7)
CHAT_MAX_TOKENS = _env_int("MDIR_CHAT_MAX_TOKENS", 1024)
DIRECTORY_NAME = _env("MDIR_DIRECTORY_NAME", "the member directory")


# -----------------------------------------------------------------------------
# Indexing
# -----------------------------------------------------------------------------
INDEX_BATCH_SIZE = _env_int("MDIR_INDEX_BATCH_SIZE", 5)
INDEX_BATCH_PAUSE_SECONDS = _env_float("MDIR_INDEX_BATCH_PAUSE_SECONDS", 0.5)
INDEX_QUEUE_SIZE = _env_int("MDIR_INDEX_QUEUE_SIZE", 256)
INDEX_ON_WRITE = _env_bool("MDIR_INDEX_ON_WRITE", True)
INDUSTRY_LABEL_MAX_CHARS = _env_int("MDIR_INDUSTRY_LABEL_MAX_CHARS", 50)


# -----------------------------------------------------------------------------
# Vector storage (Chroma collection prefix, one collection per embedding space)
# -----------------------------------------------------------------------------
VECTOR_COLLECTION_PREFIX = _env("MDIR_VECTOR_COLLECTION_PREFIX", "members")


# -----------------------------------------------------------------------------
# Sanity checks (tunable)
# -----------------------------------------------------------------------------
if SEARCH_DEFAULT_LIMIT < 1 or SEARCH_MAX_LIMIT < SEARCH_DEFAULT_LIMIT:
    raise RuntimeError(
        f"Search limits invalid: default={SEARCH_DEFAULT_LIMIT} max={SEARCH_MAX_LIMIT}"
    )

if INDEX_BATCH_SIZE < 1:
    raise RuntimeError("INDEX_BATCH_SIZE must be >= 1")

if not VECTOR_COLLECTION_PREFIX:
    raise RuntimeError("VECTOR_COLLECTION_PREFIX resolved to empty value")
