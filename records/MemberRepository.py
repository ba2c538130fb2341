# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-15
# Description: MemberRepository
# -----------------------------------------------------------------------------

from typing import Any, Dict, List, Optional, Protocol, Sequence, runtime_checkable

from records.Member import Member

# Fields matched by the keyword fallback (OR across fields and tokens)
KEYWORD_FIELDS = (
    "first_name",
    "last_name",
    "city",
    "state",
    "industry",
    "company",
    "job_title",
    "major",
)


@runtime_checkable
class MemberRepository(Protocol):
    def test_connection(self) -> bool:
        ...

    def get(self, member_id: str) -> Optional[Member]:
        ...

    def get_many(self, member_ids: Sequence[str]) -> List[Member]:
        ...

    def set_industry(self, member_id: str, industry: str) -> None:
        ...

    def count(self) -> int:
        ...

    def all_ids(self) -> List[str]:
        ...

    def keyword_search(
            self,
            tokens: Sequence[str],
            fields: Sequence[str] = KEYWORD_FIELDS,
            limit: int = 15,
    ) -> List[Member]:
        ...

    def recent(self, limit: int = 15) -> List[Member]:
        ...

    def create(self, data: Dict[str, Any]) -> Member:
        ...

    def update(self, member_id: str, data: Dict[str, Any]) -> Member:
        ...

    def delete(self, member_id: str) -> bool:
        ...
