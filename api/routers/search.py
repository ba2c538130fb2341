# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-20
# Updated: 2026-02-27
# Description: search router
# -----------------------------------------------------------------------------
import logging

from fastapi import APIRouter, Depends

from api.dependencies import get_search_service
from api.schemas.members import MemberOut
from api.schemas.search import SearchHit, SearchRequest, SearchResponse
from services.MemberSearchService import MemberSearchService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/search", tags=["search"])


@router.post("", response_model=SearchResponse)
def post_search(
    req: SearchRequest,
    svc: MemberSearchService = Depends(get_search_service),
) -> SearchResponse:
    query_text = (req.query or "").strip()
    limit = svc.clamp_limit(req.limit)

    # search() degrades to keyword / recent instead of raising
    results = svc.search(query_text, limit)

    hits = [
        SearchHit(
            member=MemberOut.from_member(r.member),
            score=r.score,
            strategy=r.strategy,
        )
        for r in results
    ]

    return SearchResponse(
        query=query_text,
        limit=limit,
        results=hits,
    )
