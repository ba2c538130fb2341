# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-20
# Updated: 2026-02-26
# Description: DirectoryHealthService.py
# -----------------------------------------------------------------------------
from dataclasses import dataclass
from typing import Dict, Optional

from api.schemas.health import DeepHealthResponse, CheckSummary
from providers.ProviderRegistry import ProviderRegistry
from records.MemberRepository import MemberRepository
from vectorstore.MemberVectorStore import MemberVectorStore


@dataclass
class DirectoryHealthService:
    """
    Runs cheap connectivity/configuration checks on the directory's
    infrastructure. Returns DeepHealthResponse for API layer
    """

    repository: MemberRepository
    vector_store: Optional[MemberVectorStore]
    providers: ProviderRegistry

    def run_checks(self) -> Dict[str, bool]:
        configured = set(self.providers.configured_names())
        return {
            "database": self.repository.test_connection(),
            "vector_store": self.vector_store is not None and self.vector_store.test_connection(),
            "gemini_configured": "gemini" in configured,
            "openai_configured": "openai" in configured,
        }

    def deep_health(self) -> DeepHealthResponse:

        results = self.run_checks()

        # a single configured backend is enough to serve chat
        required = {
            "database": results["database"],
            "provider": results["gemini_configured"] or results["openai_configured"],
        }

        total = len(results)
        passed = sum(1 for ok in results.values() if ok)
        failed = total - passed

        if not all(required.values()):
            overall_status = "error"
        elif failed:
            overall_status = "degraded"
        else:
            overall_status = "ok"

        summary = CheckSummary(
            total=total,
            passed=passed,
            failed=failed,
        )

        providers = self.providers.configured_names()
        primary = providers[0] if providers else None

        return DeepHealthResponse(
            status=overall_status,
            results=results,
            summary=summary,
            providers=providers,
            primary_provider=primary,
            search_mode="semantic" if primary and results["vector_store"] else "keyword",
        )
