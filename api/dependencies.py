# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-07
# Updated: 2026-02-26
# Description: dependencies.py
# -----------------------------------------------------------------------------
from fastapi import Request

from api.AppContainer import AppContainer
from records.MemberRepository import MemberRepository
from services.DirectoryHealthService import DirectoryHealthService
from services.IndexingWorker import IndexingWorker
from services.MemberChatService import MemberChatService
from services.MemberIndexService import MemberIndexService
from services.MemberSearchService import MemberSearchService


def get_container(request: Request) -> AppContainer:
    # built once in the app lifespan
    return request.app.state.container


def get_health_service(request: Request) -> DirectoryHealthService:
    return get_container(request).health_service


def get_search_service(request: Request) -> MemberSearchService:
    return get_container(request).search_service


def get_chat_service(request: Request) -> MemberChatService:
    return get_container(request).chat_service


def get_index_service(request: Request) -> MemberIndexService:
    return get_container(request).index_service


def get_indexing_worker(request: Request) -> IndexingWorker:
    return get_container(request).indexing_worker


def get_repository(request: Request) -> MemberRepository:
    return get_container(request).repository
