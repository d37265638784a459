"""
PharmacyStore: the data-store handle passed to every query function.

Wraps a SQLAlchemy session factory and the change feed bound to it.
Constructed once at startup (or per test) and injected; nothing in the
services layer reaches for a module-level session.
"""
import logging
from contextlib import contextmanager
from typing import Any, Generator, Iterable, Optional

from sqlalchemy import func
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from pharmadash.core.exceptions import StoreQueryError
from pharmadash.db.changes import ChangeFeed, Subscription
from pharmadash.db.session import create_db_engine, make_session_factory

logger = logging.getLogger(__name__)


class PharmacyStore:
    def __init__(self, session_factory: sessionmaker, feed: Optional[ChangeFeed] = None):
        self.session_factory = session_factory
        self.feed = feed or ChangeFeed()
        self.feed.bind(session_factory)

    @classmethod
    def from_url(cls, database_url: str) -> "PharmacyStore":
        return cls(make_session_factory(create_db_engine(database_url)))

    @property
    def engine(self) -> Engine:
        return self.session_factory.kw["bind"]

    @contextmanager
    def session(self, relation: str = "store") -> Generator[Session, None, None]:
        """
        Session scoped to one read (or one write).

        SQLAlchemy errors are re-raised as StoreQueryError tagged with the
        relation being queried.
        """
        db = self.session_factory()
        try:
            yield db
        except SQLAlchemyError as e:
            db.rollback()
            raise StoreQueryError(relation, e) from e
        finally:
            db.close()

    def count(self, model) -> int:
        """Row count without materializing rows."""
        relation = model.__tablename__
        with self.session(relation) as db:
            return db.query(func.count()).select_from(model).scalar()

    def subscribe(self, relation: str, row_ids: Optional[Iterable[Any]] = None) -> Subscription:
        """Listen for committed changes to one relation, optionally limited to some row ids."""
        return self.feed.subscribe(relation, row_ids)

    def dispose(self) -> None:
        self.engine.dispose()
        logger.debug("Store connections released")
