# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-11-15
# Updated: 2026-02-18
# Description: MemberVectorStore
# -----------------------------------------------------------------------------

from typing import List, Protocol, Sequence, Set, Tuple, runtime_checkable


@runtime_checkable
class MemberVectorStore(Protocol):
    """
    One optional vector per member, partitioned by embedding space so that
    vectors from different backends are never queried together.
    """

    def test_connection(self) -> bool:
        ...

    def upsert(self, space: str, member_id: str, vector: Sequence[float]) -> None:
        ...

    def query(self, space: str, vector: Sequence[float], k: int) -> List[Tuple[str, float]]:
        """Nearest members as (member_id, cosine distance), closest first."""
        ...

    def count(self, space: str) -> int:
        ...

    def indexed_ids(self, space: str, member_ids: Sequence[str]) -> Set[str]:
        ...

    def delete(self, member_id: str) -> int:
        """Remove the member's vector from every known space. Returns vectors removed."""
        ...
