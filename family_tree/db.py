"""Database access for the family tree service.

One ``Database`` is built by ``create_app`` and handed to the routes through
``get_database``. When no URL is configured, or the engine cannot be built,
the object still exists but every session request raises
``DependencyUnavailable``.
"""
import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from .exceptions import DependencyUnavailable
from .tables import metadata

log = logging.getLogger(__name__)


class Database:
    """Optional handle to the relational store shared by all requests."""

    def __init__(self, url: Optional[str], echo: bool = False):
        self.url = url
        self.engine: Optional[Engine] = None
        self.SessionLocal: Optional[sessionmaker] = None

        if not url:
            log.warning("DATABASE_URL is not set, database functionality will be unavailable")
            return

        if 'sqlite' in url:
            args = {"check_same_thread": False}
        else:
            args = {}
        try:
            self.engine = create_engine(url, echo=echo, connect_args=args)
        except (SQLAlchemyError, ImportError) as ex:
            # Never log the URL, it carries credentials
            log.error("Failed to initialize database connection: %s", type(ex).__name__)
            return

        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        log.info("Database connection initialized")

    def is_configured(self) -> bool:
        """True if a URL was supplied and an engine was built from it."""
        return bool(self.url) and self.engine is not None

    def create_tables(self) -> None:
        """Create any missing tables."""
        if not self.is_configured():
            raise DependencyUnavailable("Database is not configured")
        metadata.create_all(bind=self.engine)

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Session that commits pending changes on exit and rolls back on error."""
        if not self.is_configured():
            raise DependencyUnavailable("Database is not configured")
        db = self.SessionLocal()
        try:
            yield db
            if db.new or db.dirty or db.deleted:
                db.commit()
        except SQLAlchemyError:
            log.warning('Commit failed, rolling back', exc_info=True)
            db.rollback()
            raise
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def ping(self) -> None:
        """Run a trivial query, raising ``DependencyUnavailable`` on failure."""
        try:
            with self.session() as db:
                db.execute(text("SELECT 1"))
        except SQLAlchemyError as ex:
            raise DependencyUnavailable(f"Database query failed: {type(ex).__name__}") from ex

    def dispose(self) -> None:
        if self.engine is not None:
            self.engine.dispose()


def get_database(request: Request) -> Database:
    """Dependency for fastapi routes"""
    return request.app.extra['database']
