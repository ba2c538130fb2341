# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-15
# Description: SqlMemberRepository
# -----------------------------------------------------------------------------
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence

from sqlalchemy import (
    Column,
    DateTime,
    Enum as SAEnum,
    ForeignKey,
    Integer,
    String,
    Table,
    Text,
    create_engine,
    func,
    or_,
    select,
    text,
)
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, relationship, selectinload, sessionmaker
from sqlalchemy.pool import StaticPool

from records.Member import Member, MemberStatus
from records.MemberRepository import KEYWORD_FIELDS
from utility.errors import PersistError, RecordNotFound, ValidationError
from utility.logging_utils import get_class_logger

Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


member_tags = Table(
    "member_tags",
    Base.metadata,
    Column("member_id", String, ForeignKey("members.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", Integer, ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
)


class TagRow(Base):
    __tablename__ = "tags"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, unique=True, nullable=False)


class MemberRow(Base):
    __tablename__ = "members"

    id = Column(String, primary_key=True, default=lambda: uuid.uuid4().hex)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    email = Column(String)
    phone = Column(String)
    city = Column(String, index=True)
    state = Column(String, index=True)
    graduation_year = Column(Integer)
    major = Column(String)
    status = Column(SAEnum(MemberStatus, name="member_status"), nullable=False, default=MemberStatus.ACTIVE)
    company = Column(String)
    job_title = Column(String)
    industry = Column(String, index=True)
    bio = Column(Text)
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, index=True)

    tags = relationship(TagRow, secondary=member_tags, lazy="selectin")


# Columns a caller may write through create/update
WRITABLE_FIELDS = (
    "first_name",
    "last_name",
    "email",
    "phone",
    "city",
    "state",
    "graduation_year",
    "major",
    "status",
    "company",
    "job_title",
    "industry",
    "bio",
)


def _to_member(row: MemberRow) -> Member:
    return Member(
        id=row.id,
        first_name=row.first_name,
        last_name=row.last_name,
        email=row.email,
        phone=row.phone,
        city=row.city,
        state=row.state,
        graduation_year=row.graduation_year,
        major=row.major,
        status=row.status or MemberStatus.ACTIVE,
        company=row.company,
        job_title=row.job_title,
        industry=row.industry,
        bio=row.bio,
        tags=sorted(t.name for t in row.tags),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _escape_like(token: str) -> str:
    return token.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class SqlMemberRepository:
    """
    Relational member store (SQLAlchemy).

    Any SQLAlchemy failure is raised as PersistError so callers only deal
    with the directory error taxonomy.
    """

    def __init__(self, engine: Engine, *, create_schema: bool = True, logger=None) -> None:
        self.engine = engine
        self.logger = logger or get_class_logger(self.__class__)
        self._session_factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)

        if create_schema:
            Base.metadata.create_all(engine)

        self.logger.info("SqlMemberRepository ready (dialect=%s)", engine.dialect.name)

    @classmethod
    def from_url(cls, database_url: str, **kwargs: Any) -> "SqlMemberRepository":
        if database_url.startswith("sqlite"):
            engine_kwargs: Dict[str, Any] = {"connect_args": {"check_same_thread": False}}
            if database_url in ("sqlite://", "sqlite:///:memory:"):
                engine_kwargs["poolclass"] = StaticPool
            else:
                path = database_url.split(":///", 1)[-1]
                if path:
                    Path(path).parent.mkdir(parents=True, exist_ok=True)
        else:
            engine_kwargs = {"pool_pre_ping": True, "pool_recycle": 3600}
        return cls(create_engine(database_url, **engine_kwargs), **kwargs)

    def _session(self) -> Session:
        return self._session_factory()

    def test_connection(self) -> bool:
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            self.logger.error("Database connection failed: %s", e)
            return False

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def get(self, member_id: str) -> Optional[Member]:
        try:
            with self._session() as session:
                row = session.get(MemberRow, member_id)
                return _to_member(row) if row is not None else None
        except SQLAlchemyError as e:
            raise PersistError(f"Failed to load member '{member_id}': {e}") from e

    def get_many(self, member_ids: Sequence[str]) -> List[Member]:
        """Load members by id, preserving the order of member_ids and skipping unknown ids."""
        ids = list(dict.fromkeys(member_ids))
        if not ids:
            return []
        try:
            with self._session() as session:
                rows = session.scalars(
                    select(MemberRow).options(selectinload(MemberRow.tags)).where(MemberRow.id.in_(ids))
                ).all()
                by_id = {row.id: _to_member(row) for row in rows}
        except SQLAlchemyError as e:
            raise PersistError(f"Failed to load {len(ids)} members: {e}") from e
        return [by_id[i] for i in ids if i in by_id]

    def count(self) -> int:
        try:
            with self._session() as session:
                return int(session.scalar(select(func.count()).select_from(MemberRow)) or 0)
        except SQLAlchemyError as e:
            raise PersistError(f"Failed to count members: {e}") from e

    def all_ids(self) -> List[str]:
        try:
            with self._session() as session:
                return list(session.scalars(select(MemberRow.id).order_by(MemberRow.created_at)).all())
        except SQLAlchemyError as e:
            raise PersistError(f"Failed to list member ids: {e}") from e

    def keyword_search(
            self,
            tokens: Sequence[str],
            fields: Sequence[str] = KEYWORD_FIELDS,
            limit: int = 15,
    ) -> List[Member]:
        conditions = [
            getattr(MemberRow, f).ilike(f"%{_escape_like(tok)}%", escape="\\")
            for tok in tokens
            for f in fields
        ]
        if not conditions:
            return []

        stmt = select(MemberRow).options(selectinload(MemberRow.tags)).where(or_(*conditions)).limit(limit)
        try:
            with self._session() as session:
                return [_to_member(row) for row in session.scalars(stmt).all()]
        except SQLAlchemyError as e:
            raise PersistError(f"Keyword search failed: {e}") from e

    def recent(self, limit: int = 15) -> List[Member]:
        stmt = (
            select(MemberRow)
            .options(selectinload(MemberRow.tags))
            .order_by(MemberRow.updated_at.desc())
            .limit(limit)
        )
        try:
            with self._session() as session:
                return [_to_member(row) for row in session.scalars(stmt).all()]
        except SQLAlchemyError as e:
            raise PersistError(f"Recent members query failed: {e}") from e

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------
    def set_industry(self, member_id: str, industry: str) -> None:
        try:
            with self._session() as session, session.begin():
                row = session.get(MemberRow, member_id)
                if row is None:
                    raise RecordNotFound(member_id)
                row.industry = industry
        except SQLAlchemyError as e:
            raise PersistError(f"Failed to set industry for member '{member_id}': {e}") from e

    def create(self, data: Dict[str, Any]) -> Member:
        if not (data.get("first_name") or "").strip() or not (data.get("last_name") or "").strip():
            raise ValidationError("first_name and last_name are required")

        try:
            with self._session() as session, session.begin():
                row = MemberRow(**self._column_values(data))
                if data.get("id"):
                    row.id = str(data["id"])
                row.tags = self._resolve_tags(session, data.get("tags") or [])
                session.add(row)
                session.flush()
                member = _to_member(row)
        except SQLAlchemyError as e:
            raise PersistError(f"Failed to create member: {e}") from e

        self.logger.info("Created member %s (%s)", member.id, member.full_name)
        return member

    def update(self, member_id: str, data: Dict[str, Any]) -> Member:
        try:
            with self._session() as session, session.begin():
                row = session.get(MemberRow, member_id)
                if row is None:
                    raise RecordNotFound(member_id)
                for key, value in self._column_values(data).items():
                    setattr(row, key, value)
                if "tags" in data and data["tags"] is not None:
                    row.tags = self._resolve_tags(session, data["tags"])
                # onupdate only fires for column changes; tag-only edits still bump the timestamp
                row.updated_at = _utcnow()
                session.flush()
                member = _to_member(row)
        except SQLAlchemyError as e:
            raise PersistError(f"Failed to update member '{member_id}': {e}") from e

        self.logger.info("Updated member %s", member_id)
        return member

    def delete(self, member_id: str) -> bool:
        try:
            with self._session() as session, session.begin():
                row = session.get(MemberRow, member_id)
                if row is None:
                    return False
                session.delete(row)
        except SQLAlchemyError as e:
            raise PersistError(f"Failed to delete member '{member_id}': {e}") from e

        self.logger.info("Deleted member %s", member_id)
        return True

    @staticmethod
    def _column_values(data: Dict[str, Any]) -> Dict[str, Any]:
        values = {k: data[k] for k in WRITABLE_FIELDS if k in data}
        if "status" in values and values["status"] is not None and not isinstance(values["status"], MemberStatus):
            try:
                values["status"] = MemberStatus(str(values["status"]).upper())
            except ValueError as e:
                raise ValidationError(f"Invalid status {values['status']!r}") from e
        return values

    @staticmethod
    def _resolve_tags(session: Session, names: Iterable[str]) -> List[TagRow]:
        wanted = list(dict.fromkeys(n.strip() for n in names if n and n.strip()))
        if not wanted:
            return []
        existing = {t.name: t for t in session.scalars(select(TagRow).where(TagRow.name.in_(wanted))).all()}
        tags: List[TagRow] = []
        for name in wanted:
            tag = existing.get(name)
            if tag is None:
                tag = TagRow(name=name)
                session.add(tag)
            tags.append(tag)
        return tags
