# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-15
# Description: MemberText.py
# -----------------------------------------------------------------------------
from typing import List, Optional, Sequence

from records.Member import Member, SearchResult

NO_MATCHES_TEXT = "No matching members found."


def _present(parts: Sequence[Optional[str]]) -> List[str]:
    return [p for p in parts if p]


def build_member_text(member: Member) -> str:
    """
    Canonical embedding text for a member.
    Field order and the ". " delimiter must not change without a full reindex.
    """
    parts = _present([
        member.full_name,
        f"Class of {member.graduation_year}" if member.graduation_year else None,
        f"Major: {member.major}" if member.major else None,
        f"Industry: {member.industry}" if member.industry else None,
        f"Company: {member.company}" if member.company else None,
        f"Role: {member.job_title}" if member.job_title else None,
        f"Location: {member.location}" if member.location else None,
        f"Bio: {member.bio}" if member.bio else None,
        f"Tags: {', '.join(member.tags)}" if member.tags else None,
    ])
    return ". ".join(parts)


def format_member_line(index: int, member: Member) -> str:
    parts = _present([
        f"{index}. {member.full_name}",
        f"Status: {member.status.value}" if member.status else None,
        f"Class of {member.graduation_year}" if member.graduation_year else None,
        f"Major: {member.major}" if member.major else None,
        f"Company: {member.company}" if member.company else None,
        f"Title: {member.job_title}" if member.job_title else None,
        f"Industry: {member.industry}" if member.industry else None,
        f"Location: {member.location}" if member.location else None,
        f"Email: {member.email}" if member.email else None,
        f"Phone: {member.phone}" if member.phone else None,
        f"Bio: {member.bio}" if member.bio else None,
        f"Tags: {', '.join(member.tags)}" if member.tags else None,
    ])
    # one line per record, whatever whitespace the free-text fields carry
    return " ".join(" | ".join(parts).split())


def format_member_context(results: Sequence[SearchResult]) -> str:
    """
    Turn search results into the numbered, pipe-delimited grounding block.
    """
    if not results:
        return NO_MATCHES_TEXT
    return "\n".join(
        format_member_line(i, r.member) for i, r in enumerate(results, start=1)
    )
