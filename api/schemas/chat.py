# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-28
# Updated: 2026-02-27
# Description: api/schemas/chat.py
# -----------------------------------------------------------------------------
from __future__ import annotations

from typing import List, Optional
from pydantic import BaseModel, Field


class ChatMessage(BaseModel):
    role: str
    content: str = ""


class ChatRequest(BaseModel):
    # blank/whitespace is rejected by the service with a 400, not by pydantic
    message: Optional[str] = None

    # Prior turns, oldest first; only the most recent window is forwarded
    history: List[ChatMessage] = Field(default_factory=list)


class ChatErrorResponse(BaseModel):
    error: str
