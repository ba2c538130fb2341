# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-21
# Description: index router (admin)
# -----------------------------------------------------------------------------
import logging

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import get_index_service, get_indexing_worker
from api.schemas.index import (
    IndexBatchRequest,
    IndexBatchResponse,
    IndexCheckRequest,
    IndexCheckResponse,
    IndexRecordResponse,
    IndexStatusResponse,
)
from services.IndexingWorker import IndexingWorker
from services.MemberIndexService import MemberIndexService
from utility.errors import DirectoryError, ProviderUnavailable, RecordNotFound, ValidationError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/index", tags=["index"])


def _http_error(e: DirectoryError) -> HTTPException:
    if isinstance(e, RecordNotFound):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, ValidationError):
        return HTTPException(status_code=400, detail=str(e))
    if isinstance(e, ProviderUnavailable):
        return HTTPException(status_code=503, detail=str(e))
    return HTTPException(status_code=502, detail=str(e))


@router.post("/records/{member_id}", response_model=IndexRecordResponse)
def index_record(
    member_id: str,
    svc: MemberIndexService = Depends(get_index_service),
) -> IndexRecordResponse:
    logger.info("POST /index/records/%s", member_id)
    try:
        outcome = svc.index_record(member_id)
    except DirectoryError as e:
        logger.error("Indexing member %s failed: %s", member_id, e)
        raise _http_error(e)

    return IndexRecordResponse(
        member_id=outcome.member_id,
        embedding_space=outcome.embedding_space,
        dimension=outcome.dimension,
        industry_inferred=outcome.industry_inferred,
    )


@router.post("", response_model=IndexBatchResponse)
def index_batch(
    req: IndexBatchRequest,
    svc: MemberIndexService = Depends(get_index_service),
) -> IndexBatchResponse:
    try:
        if req.ids is None:
            logger.info("POST /index (all members)")
            result = svc.reindex_all()
        else:
            logger.info("POST /index ids=%d", len(req.ids))
            result = svc.index_records(req.ids)
    except DirectoryError as e:
        logger.error("Batch indexing failed: %s", e)
        raise _http_error(e)

    return IndexBatchResponse(
        total=result.total,
        indexed=result.indexed,
        failed=result.failed,
        failed_ids=result.failed_ids,
    )


@router.post("/check", response_model=IndexCheckResponse)
def index_check(
    req: IndexCheckRequest,
    svc: MemberIndexService = Depends(get_index_service),
) -> IndexCheckResponse:
    indexed = svc.is_indexed(req.ids)
    return IndexCheckResponse(
        indexed_ids=[i for i in req.ids if i in indexed],
        missing_ids=[i for i in req.ids if i not in indexed],
    )


@router.get("/status", response_model=IndexStatusResponse)
def index_status(
    svc: MemberIndexService = Depends(get_index_service),
    worker: IndexingWorker = Depends(get_indexing_worker),
) -> IndexStatusResponse:
    try:
        status = svc.status()
    except DirectoryError as e:
        raise _http_error(e)

    return IndexStatusResponse(
        **status,
        queue_pending=worker.pending(),
        worker_running=worker.running,
    )
