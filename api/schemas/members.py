# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-27
# Description: api/schemas/members.py
# -----------------------------------------------------------------------------
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from records.Member import Member, MemberStatus


class MemberOut(BaseModel):
    id: str
    first_name: str
    last_name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    graduation_year: Optional[int] = None
    major: Optional[str] = None
    status: MemberStatus = MemberStatus.ACTIVE
    company: Optional[str] = None
    job_title: Optional[str] = None
    industry: Optional[str] = None
    bio: Optional[str] = None
    tags: List[str] = Field(default_factory=list)

    @classmethod
    def from_member(cls, member: Member) -> "MemberOut":
        return cls(**member.to_dict())


class MemberCreate(BaseModel):
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    email: Optional[str] = None
    phone: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    graduation_year: Optional[int] = Field(None, ge=1900, le=2100)
    major: Optional[str] = None
    status: MemberStatus = MemberStatus.ACTIVE
    company: Optional[str] = None
    job_title: Optional[str] = None
    industry: Optional[str] = None
    bio: Optional[str] = None
    tags: List[str] = Field(default_factory=list)


class MemberUpdate(BaseModel):
    # only fields present in the request body are written
    first_name: Optional[str] = Field(None, min_length=1)
    last_name: Optional[str] = Field(None, min_length=1)
    email: Optional[str] = None
    phone: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    graduation_year: Optional[int] = Field(None, ge=1900, le=2100)
    major: Optional[str] = None
    status: Optional[MemberStatus] = None
    company: Optional[str] = None
    job_title: Optional[str] = None
    industry: Optional[str] = None
    bio: Optional[str] = None
    tags: Optional[List[str]] = None


class MemberWriteResponse(BaseModel):
    member: MemberOut
    indexing_queued: bool


class MemberDeleteResponse(BaseModel):
    id: str
    deleted: bool
    vectors_deleted: int = 0
