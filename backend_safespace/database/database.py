"""
Scan record store: append-only scan history per user.

All access goes through the ScanStore facade over an abstract backend. The
shipped backend is SQLAlchemy, so the same code runs on PostgreSQL
(DATABASE_URL) and on a local SQLite file (DB_PATH, the default).
Connectivity failures surface as StoreUnavailable; the store never fabricates
results when the database is down.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Iterator

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Index,
    Integer,
    String,
    Text,
    case,
    create_engine,
    func,
)
from sqlalchemy.exc import DisconnectionError, InterfaceError, OperationalError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from backend_safespace.analytics.models import SCAN_KINDS, ScanInput, Verdict
from backend_safespace.core.exceptions import InvalidInput, StoreUnavailable
from backend_safespace.database.models import ScanRecord, ScanStats
from backend_safespace.safespace_logging import get_logger

logger = get_logger(__name__)

Base = declarative_base()

# Errors meaning "database not reachable" rather than "bad statement"
UNAVAILABLE_ERRORS = (OperationalError, InterfaceError, DisconnectionError)

DEFAULT_PAGE_SIZE = 10


# -----------------------------------------------------------------------------
# SQLAlchemy model
# -----------------------------------------------------------------------------


class ScanRecordRow(Base):
    """
    One row per evaluation (URL or message). Never updated after insert.
    verdict_json holds the full wire-format verdict; is_safe and risk_score are
    copied out for aggregate queries.
    """

    __tablename__ = "scan_records"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(64), nullable=False)
    kind = Column(String(16), nullable=False)
    input_text = Column(Text, nullable=False)
    is_safe = Column(Boolean, nullable=False)
    risk_score = Column(Integer, nullable=False)
    verdict_json = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        Index("ix_scan_records_user_kind_created", "user_id", "kind", "created_at"),
        Index("ix_scan_records_user_created", "user_id", "created_at"),
    )

    def to_record(self) -> ScanRecord:
        created_at = self.created_at
        # SQLite hands back naive datetimes; values are always written in UTC
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)
        return ScanRecord(
            id=self.id,
            user_id=self.user_id,
            input=ScanInput(kind=self.kind, text=self.input_text),
            verdict=Verdict.from_dict(json.loads(self.verdict_json)),
            created_at=created_at,
        )


# -----------------------------------------------------------------------------
# Abstract backend
# -----------------------------------------------------------------------------


class ScanStoreBackend(ABC):
    """Abstract interface for scan persistence."""

    @abstractmethod
    def ensure_schema(self) -> None:
        """Create tables and indexes if they do not exist."""
        ...

    @abstractmethod
    def insert_scan(
        self,
        user_id: str,
        scan_input: ScanInput,
        verdict: Verdict,
        created_at: datetime,
    ) -> ScanRecord:
        """Append one scan record. Returns it with its assigned id."""
        ...

    @abstractmethod
    def list_scans(
        self,
        user_id: str,
        *,
        kind: str | None,
        offset: int,
        limit: int,
    ) -> tuple[list[ScanRecord], int]:
        """Return (records newest first, total count for user/kind)."""
        ...

    @abstractmethod
    def get_scan(self, user_id: str, record_id: int, *, kind: str | None) -> ScanRecord | None:
        """Return the record if it exists and belongs to user_id, else None."""
        ...

    @abstractmethod
    def scan_stats(self, user_id: str) -> ScanStats:
        """Return aggregate counts over all of the user's scans."""
        ...


# -----------------------------------------------------------------------------
# SQLAlchemy backend
# -----------------------------------------------------------------------------


class SQLAlchemyBackend(ScanStoreBackend):
    """SQLAlchemy implementation; pooled engine, one session per operation."""

    def __init__(self, url: str, *, echo: bool = False) -> None:
        self._url = url
        connect_args: dict[str, Any] = {}
        if url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        self._engine = create_engine(url, connect_args=connect_args, pool_pre_ping=True, echo=echo)
        self._session_factory = sessionmaker(autocommit=False, autoflush=False, bind=self._engine)
        self._schema_ready = False

    @property
    def safe_url(self) -> str:
        """URL without credentials or query, for logs."""
        return self._url.split("?")[0].split("@")[-1].split("//")[-1]

    def _rollback(self, session: Session) -> None:
        """Roll back; a connection that died mid-transaction is only logged here."""
        try:
            session.rollback()
        except UNAVAILABLE_ERRORS as e:
            logger.warning("scan_store_rollback_failed", db=self.safe_url, error=str(e))

    @contextmanager
    def _session_scope(self) -> Iterator[Session]:
        """Single session; commits on success, rolls back on error, maps connectivity errors."""
        if not self._schema_ready:
            # Schema creation failed earlier (database was down); retry before use
            self.ensure_schema()
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except UNAVAILABLE_ERRORS as e:
            self._rollback(session)
            logger.error("scan_store_unavailable", db=self.safe_url, error=str(e))
            raise StoreUnavailable() from e
        except Exception:
            self._rollback(session)
            raise
        finally:
            session.close()

    def ensure_schema(self) -> None:
        try:
            Base.metadata.create_all(bind=self._engine)
        except UNAVAILABLE_ERRORS as e:
            logger.error("scan_store_schema_failed", db=self.safe_url, error=str(e))
            raise StoreUnavailable() from e
        self._schema_ready = True
        logger.info("scan_store_schema_ready", db=self.safe_url)

    def insert_scan(
        self,
        user_id: str,
        scan_input: ScanInput,
        verdict: Verdict,
        created_at: datetime,
    ) -> ScanRecord:
        with self._session_scope() as session:
            row = ScanRecordRow(
                user_id=user_id,
                kind=scan_input.kind,
                input_text=scan_input.text,
                is_safe=verdict.is_safe,
                risk_score=verdict.risk_score,
                verdict_json=json.dumps(verdict.to_dict()),
                created_at=created_at,
            )
            session.add(row)
            session.flush()
            return ScanRecord(
                id=row.id,
                user_id=user_id,
                input=scan_input,
                verdict=verdict,
                created_at=created_at,
            )

    def list_scans(
        self,
        user_id: str,
        *,
        kind: str | None,
        offset: int,
        limit: int,
    ) -> tuple[list[ScanRecord], int]:
        with self._session_scope() as session:
            q = session.query(ScanRecordRow).filter(ScanRecordRow.user_id == user_id)
            if kind is not None:
                q = q.filter(ScanRecordRow.kind == kind)
            total = q.count()
            rows = (
                q.order_by(ScanRecordRow.created_at.desc(), ScanRecordRow.id.desc())
                .offset(offset)
                .limit(limit)
                .all()
            )
            return [r.to_record() for r in rows], total

    def get_scan(self, user_id: str, record_id: int, *, kind: str | None) -> ScanRecord | None:
        with self._session_scope() as session:
            q = session.query(ScanRecordRow).filter(
                ScanRecordRow.id == record_id,
                ScanRecordRow.user_id == user_id,
            )
            if kind is not None:
                q = q.filter(ScanRecordRow.kind == kind)
            row = q.first()
            return row.to_record() if row else None

    def scan_stats(self, user_id: str) -> ScanStats:
        with self._session_scope() as session:
            total, safe, url_count, avg_score = (
                session.query(
                    func.count(ScanRecordRow.id),
                    func.sum(case((ScanRecordRow.is_safe.is_(True), 1), else_=0)),
                    func.sum(case((ScanRecordRow.kind == "url", 1), else_=0)),
                    func.avg(ScanRecordRow.risk_score),
                )
                .filter(ScanRecordRow.user_id == user_id)
                .one()
            )
        total = int(total or 0)
        safe = int(safe or 0)
        url_count = int(url_count or 0)
        return ScanStats(
            total_scans=total,
            url_scans=url_count,
            message_scans=total - url_count,
            safe_scans=safe,
            unsafe_scans=total - safe,
            avg_risk_score=round(float(avg_score), 2) if avg_score is not None else 0.0,
        )

    def dispose(self) -> None:
        self._engine.dispose()


# -----------------------------------------------------------------------------
# Store facade: single entrypoint; backend is swappable.
# -----------------------------------------------------------------------------


def _check_kind(kind: str | None) -> None:
    if kind is not None and kind not in SCAN_KINDS:
        raise InvalidInput(f"Unknown scan kind: {kind}")


class ScanStore:
    """
    Scan Record Store: record(), list_by_user(), get_for_user(), stats_for_user().

    Records are append-only. Ordering is created_at descending with ties
    broken by store sequence (newest insert first).
    """

    def __init__(self, backend: ScanStoreBackend) -> None:
        self._backend = backend

    @property
    def backend(self) -> ScanStoreBackend:
        return self._backend

    def ensure_schema(self) -> None:
        """Create tables and indexes if they do not exist."""
        self._backend.ensure_schema()

    def record(
        self,
        user_id: str,
        scan_input: ScanInput,
        verdict: Verdict,
        created_at: datetime | None = None,
    ) -> ScanRecord:
        """Append a scan record. created_at defaults to now (UTC)."""
        _check_kind(scan_input.kind)
        if created_at is None:
            created_at = datetime.now(timezone.utc)
        elif created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)
        else:
            created_at = created_at.astimezone(timezone.utc)
        rec = self._backend.insert_scan(user_id, scan_input, verdict, created_at)
        logger.debug("scan_recorded", user_id=user_id, kind=scan_input.kind, id=rec.id)
        return rec

    def list_by_user(
        self,
        user_id: str,
        *,
        kind: str | None = None,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> tuple[list[ScanRecord], int]:
        """
        Return one page of the user's records (newest first) and the user's total.
        page is 1-based; kind narrows to "url" or "message" (None = both).
        """
        _check_kind(kind)
        if page < 1:
            raise InvalidInput("page must be >= 1")
        if page_size < 1:
            raise InvalidInput("page_size must be >= 1")
        return self._backend.list_scans(
            user_id, kind=kind, offset=(page - 1) * page_size, limit=page_size
        )

    def get_for_user(self, user_id: str, record_id: int, *, kind: str | None = None) -> ScanRecord | None:
        _check_kind(kind)
        return self._backend.get_scan(user_id, record_id, kind=kind)

    def stats_for_user(self, user_id: str) -> ScanStats:
        return self._backend.scan_stats(user_id)


_STORES: dict[str, ScanStore] = {}


def get_scan_store(url: str | None = None) -> ScanStore:
    """
    Return the ScanStore for url (cached per URL; engines are pooled).

    url: SQLAlchemy URL. Default: config (DATABASE_URL, else sqlite:///DB_PATH).
    Schema creation is attempted once per store; an unreachable database is
    logged and left to surface as StoreUnavailable on first use.
    """
    if url is None:
        from backend_safespace.config.env import get_database_url

        url = get_database_url()
    store = _STORES.get(url)
    if store is None:
        store = ScanStore(SQLAlchemyBackend(url))
        try:
            store.ensure_schema()
        except StoreUnavailable:
            logger.warning("scan_store_schema_deferred", db=url.split("?")[0].split("@")[-1])
        _STORES[url] = store
    return store


def reset_store_cache_for_test() -> None:
    """Dispose and forget cached stores. For tests only."""
    for store in _STORES.values():
        backend = store.backend
        if isinstance(backend, SQLAlchemyBackend):
            backend.dispose()
    _STORES.clear()
