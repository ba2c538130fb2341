# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-27
# Description: api/schemas/index.py
# -----------------------------------------------------------------------------
from typing import List, Optional

from pydantic import BaseModel, Field


class IndexRecordResponse(BaseModel):
    member_id: str
    embedding_space: str
    dimension: int
    industry_inferred: Optional[str] = None


class IndexBatchRequest(BaseModel):
    # omitted -> every member
    ids: Optional[List[str]] = None


class IndexBatchResponse(BaseModel):
    total: int
    indexed: int
    failed: int
    failed_ids: List[str] = Field(default_factory=list)


class IndexCheckRequest(BaseModel):
    ids: List[str] = Field(default_factory=list)


class IndexCheckResponse(BaseModel):
    indexed_ids: List[str]
    missing_ids: List[str]


class IndexStatusResponse(BaseModel):
    total_members: int
    indexed_members: int
    embedding_space: Optional[str] = None
    vector_store_configured: bool
    providers: List[str]
    queue_pending: int = 0
    worker_running: bool = False
