# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-14
# Description: Member
# -----------------------------------------------------------------------------
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional


class MemberStatus(str, Enum):
    ACTIVE = "ACTIVE"
    ALUMNI = "ALUMNI"
    INACTIVE = "INACTIVE"


@dataclass
class Member:
    """
    One directory entry (a person) as read from the relational store,
    tags resolved to their names.
    """

    # Core identifiers
    id: str
    first_name: str
    last_name: str

    # Contact
    email: Optional[str] = None
    phone: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None

    # Directory attributes
    graduation_year: Optional[int] = None
    major: Optional[str] = None
    status: MemberStatus = MemberStatus.ACTIVE
    company: Optional[str] = None
    job_title: Optional[str] = None
    industry: Optional[str] = None
    bio: Optional[str] = None
    tags: List[str] = field(default_factory=list)

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def location(self) -> Optional[str]:
        parts = [p for p in (self.city, self.state) if p]
        return ", ".join(parts) if parts else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "email": self.email,
            "phone": self.phone,
            "city": self.city,
            "state": self.state,
            "graduation_year": self.graduation_year,
            "major": self.major,
            "status": self.status.value,
            "company": self.company,
            "job_title": self.job_title,
            "industry": self.industry,
            "bio": self.bio,
            "tags": list(self.tags),
        }


@dataclass
class SearchResult:
    """Transient ranked view of a member. score is only set on the semantic path."""
    member: Member
    score: Optional[float] = None
    strategy: str = "keyword"  # "semantic" | "keyword" | "recent"
