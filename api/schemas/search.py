# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-20
# Updated: 2026-02-27
# Description: search.py
# -----------------------------------------------------------------------------
from typing import List, Optional

from pydantic import BaseModel

from api.schemas.members import MemberOut

class SearchRequest(BaseModel):
    query: str = ""
    # clamped by the service, not rejected
    limit: Optional[int] = None

class SearchHit(BaseModel):
    member: MemberOut
    score: Optional[float] = None
    strategy: str

class SearchResponse(BaseModel):
    query: str
    limit: int
    results: List[SearchHit]
