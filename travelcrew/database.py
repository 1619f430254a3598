"""
Travel Crew Backend — Document Store Client
=============================================

What:  Async SQLAlchemy engine wrapper exposing collection-style operations
       (create / find / find_by_id / find_by_id_and_update /
       find_by_id_and_delete) for the resource models.
How:   One DocumentStore is built from Settings at startup and disposed at
       shutdown. Every operation runs in its own session and transaction;
       the session factory uses expire_on_commit=False so returned objects
       stay readable after the session closes.
Who:   Used by ResourceService; the health route calls ping().

Error handling:
    Every SQLAlchemyError is logged with the collection and identifier and
    re-raised as DatabaseError (generic client message). Nothing is retried.
"""

import logging
import uuid
from typing import Any, Dict, List, Optional, Type, TypeVar

from sqlalchemy import select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from travelcrew.exceptions import DatabaseError

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Registers every model with a single metadata object, which Alembic and
    DocumentStore.create_all() read.
    """
    pass


ModelT = TypeVar("ModelT", bound=Base)


class DocumentStore:
    """
    Persistence client for the resource collections.

    Lifecycle:
        store = DocumentStore(url, pool_size=..., ...)   # startup
        await store.create_all()                          # optional
        ...                                               # requests
        await store.dispose()                             # shutdown

    Connection pooling options are only passed for server databases;
    SQLite (used by the test-suite) manages its own pool.
    """

    def __init__(
        self,
        database_url: str,
        pool_size: int = 10,
        max_overflow: int = 10,
        pool_pre_ping: bool = True,
        echo: bool = False,
    ):
        engine_options: Dict[str, Any] = {"echo": echo}
        if not database_url.startswith("sqlite"):
            engine_options.update(
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_pre_ping=pool_pre_ping,
                pool_recycle=3600,
            )
        self.engine: AsyncEngine = create_async_engine(database_url, **engine_options)
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings) -> "DocumentStore":
        """Build a store from application Settings."""
        return cls(
            settings.database_url,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            echo=settings.log_level == "DEBUG",
        )

    # ── Lifecycle ─────────────────────────────────────────────────────────

    async def create_all(self) -> None:
        """Create any missing tables for registered models."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def ping(self) -> bool:
        """Lightweight connectivity check (SELECT 1)."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning("Document store ping failed: %s", str(e))
            return False

    async def dispose(self) -> None:
        """Close all pooled connections."""
        await self.engine.dispose()

    # ── Collection operations ─────────────────────────────────────────────

    async def create(self, model: Type[ModelT], values: Dict[str, Any]) -> ModelT:
        """Insert a new document and return it with id and timestamps populated."""
        try:
            async with self._session_factory() as session:
                document = model(**values)
                session.add(document)
                await session.commit()
                return document
        except SQLAlchemyError as e:
            raise self._wrap(e, "create", model)

    async def find(self, model: Type[ModelT], newest_first: bool = False) -> List[ModelT]:
        """
        Return every document of a collection.

        newest_first=False leaves ordering to the database (unspecified);
        newest_first=True orders by created_at descending.
        """
        query = select(model)
        if newest_first:
            query = query.order_by(model.created_at.desc())
        try:
            async with self._session_factory() as session:
                result = await session.execute(query)
                return list(result.scalars().all())
        except SQLAlchemyError as e:
            raise self._wrap(e, "find", model)

    async def find_by_id(self, model: Type[ModelT], document_id: uuid.UUID) -> Optional[ModelT]:
        """Return the document with the given id, or None."""
        try:
            async with self._session_factory() as session:
                return await session.get(model, document_id)
        except SQLAlchemyError as e:
            raise self._wrap(e, "find_by_id", model, document_id)

    async def find_by_id_and_update(
        self,
        model: Type[ModelT],
        document_id: uuid.UUID,
        values: Dict[str, Any],
    ) -> Optional[ModelT]:
        """
        Apply `values` to the document and return the updated version.

        Returns None if the document no longer exists. Attributes not named
        in `values` are left untouched; updated_at is refreshed by the
        column's onupdate hook.
        """
        try:
            async with self._session_factory() as session:
                document = await session.get(model, document_id)
                if document is None:
                    return None
                for attr, value in values.items():
                    setattr(document, attr, value)
                await session.commit()
                return document
        except SQLAlchemyError as e:
            raise self._wrap(e, "find_by_id_and_update", model, document_id)

    async def find_by_id_and_delete(
        self,
        model: Type[ModelT],
        document_id: uuid.UUID,
    ) -> Optional[ModelT]:
        """Remove the document and return what was deleted, or None."""
        try:
            async with self._session_factory() as session:
                document = await session.get(model, document_id)
                if document is None:
                    return None
                await session.delete(document)
                await session.commit()
                return document
        except SQLAlchemyError as e:
            raise self._wrap(e, "find_by_id_and_delete", model, document_id)

    @staticmethod
    def _wrap(
        error: SQLAlchemyError,
        operation: str,
        model: type,
        document_id: Optional[uuid.UUID] = None,
    ) -> DatabaseError:
        context = {
            "operation": operation,
            "collection": model.__tablename__,
            "error_type": type(error).__name__,
        }
        if document_id is not None:
            context["document_id"] = str(document_id)
        logger.error(
            "Document store %s on %s failed: %s",
            operation,
            model.__tablename__,
            str(error),
        )
        return DatabaseError(context=context)
