# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-20
# Updated: 2026-02-26
# Description: AppContainer.py
# -----------------------------------------------------------------------------
from dataclasses import dataclass
from typing import Optional

from config.Config import Config
from providers.ProviderRegistry import ProviderRegistry
from records.MemberRepository import MemberRepository
from records.SqlMemberRepository import SqlMemberRepository
from services.DirectoryHealthService import DirectoryHealthService
from services.IndexingWorker import IndexingWorker
from services.IndustryInferrer import IndustryInferrer
from services.MemberChatService import MemberChatService
from services.MemberIndexService import MemberIndexService
from services.MemberSearchService import MemberSearchService
from utility.logging_utils import get_logger
from vectorstore.ChromaMemberVectorStore import ChromaMemberVectorStore
from vectorstore.MemberVectorStore import MemberVectorStore
import settings

logger = get_logger("api.AppContainer")


@dataclass
class AppContainer:
    """
    Owns heavy object instantiation and application wiring.

    Built once per process (in the FastAPI lifespan) and reused for the
    life of the process; routers reach it through api.dependencies.
    """

    repository: MemberRepository
    vector_store: Optional[MemberVectorStore]
    providers: ProviderRegistry
    # create/update queue the member for background indexing
    index_on_write: bool = settings.INDEX_ON_WRITE

    def __post_init__(self) -> None:
        # Indexing pipeline
        self.inferrer = IndustryInferrer(providers=self.providers)
        self.index_service = MemberIndexService(
            repository=self.repository,
            vector_store=self.vector_store,
            providers=self.providers,
            inferrer=self.inferrer,
        )
        self.indexing_worker = IndexingWorker(index_service=self.index_service)

        # Retrieval + chat
        self.search_service = MemberSearchService(
            repository=self.repository,
            vector_store=self.vector_store,
            providers=self.providers,
        )
        self.chat_service = MemberChatService(
            search_service=self.search_service,
            repository=self.repository,
            providers=self.providers,
        )

        self.health_service = DirectoryHealthService(
            repository=self.repository,
            vector_store=self.vector_store,
            providers=self.providers,
        )

    @classmethod
    def from_env(cls) -> "AppContainer":
        cfg = Config.from_env()
        logger.info("Building AppContainer: %s", cfg.summary())
        return cls(
            repository=SqlMemberRepository.from_url(cfg.database_url),
            vector_store=ChromaMemberVectorStore.from_config(cfg),
            providers=ProviderRegistry(),
        )

    def start(self) -> None:
        self.indexing_worker.start()

    def shutdown(self) -> None:
        self.indexing_worker.stop()
