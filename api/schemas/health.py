# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-07
# Updated: 2026-02-27
# Description: health.py
# -----------------------------------------------------------------------------
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

class HealthResponse(BaseModel):
    status: str
    message: str

class CheckSummary(BaseModel):
    """Counts over DeepHealthResponse.results."""
    total: int
    passed: int
    failed: int

class DeepHealthResponse(BaseModel):
    # "ok" | "degraded" | "error"
    status: str
    results: Dict[str, bool]
    summary: CheckSummary
    # configured backends, precedence order
    providers: List[str] = Field(default_factory=list)
    primary_provider: Optional[str] = None
    # "semantic" when a backend and the vector store are both usable, else "keyword"
    search_mode: str = "keyword"
