# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-16
# Description: GenerativeBackend
# -----------------------------------------------------------------------------
import re
from dataclasses import dataclass
from typing import Iterator, List, Protocol, Sequence, runtime_checkable

import numpy as np


@dataclass(frozen=True)
class ChatTurn:
    """One prior message of a conversation; role is "user" or "assistant"."""
    role: str
    content: str


@runtime_checkable
class GenerativeBackend(Protocol):
    """
    Capability interface implemented once per backend.

    embedding_space identifies the vector space produced by embed(); vectors
    from two different spaces are never compared.
    """

    name: str

    @property
    def embedding_space(self) -> str:
        ...

    def embed(self, text: str) -> List[float]:
        ...

    def stream_chat(
            self,
            system_prompt: str,
            history: Sequence[ChatTurn],
            user_message: str,
    ) -> Iterator[str]:
        ...


def embedding_space_for(provider: str, model: str) -> str:
    return re.sub(r"[^a-zA-Z0-9._-]+", "-", f"{provider}-{model}").strip("-._").lower()


def normalize_vector(values: Sequence[float]) -> List[float]:
    """L2-normalise (cosine-friendly) and return a plain float list."""
    arr = np.asarray(values, dtype=np.float32)
    if arr.ndim != 1 or arr.size == 0:
        raise ValueError(f"Expected a non-empty 1-D embedding, got shape {arr.shape}")
    norm = float(np.linalg.norm(arr))
    if norm > 0:
        arr = arr / norm
    return arr.astype(np.float32).tolist()
