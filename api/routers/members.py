# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-22
# Description: members router
# -----------------------------------------------------------------------------
import logging

from fastapi import APIRouter, Depends, HTTPException

from api.AppContainer import AppContainer
from api.dependencies import get_container
from api.schemas.members import (
    MemberCreate,
    MemberDeleteResponse,
    MemberOut,
    MemberUpdate,
    MemberWriteResponse,
)
from utility.errors import PersistError, RecordNotFound, ValidationError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/members", tags=["members"])


def _queue_indexing(container: AppContainer, member_id: str) -> bool:
    if not container.index_on_write:
        return False
    return container.indexing_worker.submit(member_id)


@router.post("", response_model=MemberWriteResponse, status_code=201)
def create_member(
    req: MemberCreate,
    container: AppContainer = Depends(get_container),
) -> MemberWriteResponse:
    try:
        member = container.repository.create(req.model_dump())
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except PersistError as e:
        logger.error("Create member failed: %s", e)
        raise HTTPException(status_code=502, detail=str(e))

    # indexing happens off the request path
    queued = _queue_indexing(container, member.id)
    return MemberWriteResponse(member=MemberOut.from_member(member), indexing_queued=queued)


@router.get("/{member_id}", response_model=MemberOut)
def get_member(
    member_id: str,
    container: AppContainer = Depends(get_container),
) -> MemberOut:
    try:
        member = container.repository.get(member_id)
    except PersistError as e:
        raise HTTPException(status_code=502, detail=str(e))
    if member is None:
        raise HTTPException(status_code=404, detail=f"Member '{member_id}' not found")
    return MemberOut.from_member(member)


@router.patch("/{member_id}", response_model=MemberWriteResponse)
def update_member(
    member_id: str,
    req: MemberUpdate,
    container: AppContainer = Depends(get_container),
) -> MemberWriteResponse:
    data = req.model_dump(exclude_unset=True)
    try:
        member = container.repository.update(member_id, data)
    except RecordNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except PersistError as e:
        logger.error("Update member %s failed: %s", member_id, e)
        raise HTTPException(status_code=502, detail=str(e))

    queued = _queue_indexing(container, member.id)
    return MemberWriteResponse(member=MemberOut.from_member(member), indexing_queued=queued)


@router.delete("/{member_id}", response_model=MemberDeleteResponse)
def delete_member(
    member_id: str,
    container: AppContainer = Depends(get_container),
) -> MemberDeleteResponse:
    try:
        deleted = container.repository.delete(member_id)
    except PersistError as e:
        logger.error("Delete member %s failed: %s", member_id, e)
        raise HTTPException(status_code=502, detail=str(e))
    if not deleted:
        raise HTTPException(status_code=404, detail=f"Member '{member_id}' not found")

    vectors_deleted = 0
    if container.vector_store is not None:
        try:
            vectors_deleted = container.vector_store.delete(member_id)
        except PersistError as e:
            # search skips vectors whose member row is gone
            logger.warning("Vector delete for member %s failed: %s", member_id, e)

    return MemberDeleteResponse(id=member_id, deleted=True, vectors_deleted=vectors_deleted)
