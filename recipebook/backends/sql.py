"""
SQL-backed record store for self-hosted deployments.

Enabled by setting DATABASE_URL. Every record is kept as a JSON payload in a
single `records` table keyed by (kind, id), so the store accepts the same
camelCase dicts as the hosted backend without a per-collection schema.

Filtering and ordering happen in Python after loading one collection, which
is fine for the fixed page sizes the feed uses.

When DATABASE_URL points at SQLite (e.g. "sqlite:///recipes.db") no database
server is needed; tests use an in-memory SQLite URL.
"""

import json
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import Index, String, Text, create_engine, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, sessionmaker
from sqlalchemy.pool import StaticPool

from recipebook.models import EntityKind

from .base import RecipeStoreClient, StoreError, query_records

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


class RecordRow(Base):
    """One stored record of any kind."""
    __tablename__ = "records"

    kind: Mapped[str] = mapped_column(String(32), primary_key=True)
    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    created_at: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    payload: Mapped[str] = mapped_column(Text, nullable=False)  # JSON string

    __table_args__ = (
        Index("idx_records_kind_created", "kind", "created_at"),
    )


def _kind_value(kind: EntityKind) -> str:
    try:
        return EntityKind(kind).value
    except ValueError as e:
        raise StoreError(f"Unknown collection: {kind}") from e


class SqlRecipeStore(RecipeStoreClient):
    """RecipeStoreClient over any SQLAlchemy-supported database."""

    def __init__(self, database_url: str) -> None:
        if not database_url:
            raise RuntimeError("DATABASE_URL is not set")

        engine_kwargs: Dict[str, Any] = {"pool_pre_ping": True, "echo": False}
        if database_url.startswith("sqlite") and ":memory:" in database_url:
            # Share the single in-memory database across sessions
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            engine_kwargs["poolclass"] = StaticPool

        try:
            self.engine = create_engine(database_url, **engine_kwargs)
            self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
            Base.metadata.create_all(bind=self.engine)
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to initialize database: {e}") from e
        logger.info("SQL record store initialized")

    def _session(self) -> Session:
        return self.SessionLocal()

    def list(
        self,
        kind: EntityKind,
        where: Optional[Dict[str, Any]] = None,
        order_by: Optional[Dict[str, str]] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        kind_value = _kind_value(kind)
        db = self._session()
        try:
            rows = db.scalars(select(RecordRow).where(RecordRow.kind == kind_value)).all()
            records = [json.loads(row.payload) for row in rows]
        except SQLAlchemyError as e:
            raise StoreError(f"Error listing {kind_value}: {e}") from e
        finally:
            db.close()
        return query_records(records, where, order_by, limit)

    def create(self, kind: EntityKind, record: Dict[str, Any]) -> Dict[str, Any]:
        kind_value = _kind_value(kind)
        record_id = record.get("id")
        if not record_id:
            raise StoreError("Records must carry an id")

        db = self._session()
        try:
            if db.get(RecordRow, (kind_value, record_id)) is not None:
                raise StoreError(f"Duplicate id in {kind_value}: {record_id}")
            db.add(RecordRow(
                kind=kind_value,
                id=record_id,
                created_at=record.get("createdAt"),
                payload=json.dumps(record),
            ))
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Error creating {kind_value} record: {e}")
            raise StoreError(f"Error creating {kind_value} record: {e}") from e
        finally:
            db.close()
        return dict(record)

    def update(self, kind: EntityKind, record_id: str, partial: Dict[str, Any]) -> Dict[str, Any]:
        kind_value = _kind_value(kind)
        db = self._session()
        try:
            row = db.get(RecordRow, (kind_value, record_id))
            if row is None:
                raise StoreError(f"No {kind_value} record with id {record_id}")
            merged = {**json.loads(row.payload), **partial}
            row.payload = json.dumps(merged)
            row.created_at = merged.get("createdAt")
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Error updating {kind_value} record: {e}")
            raise StoreError(f"Error updating {kind_value} record: {e}") from e
        finally:
            db.close()
        return merged

