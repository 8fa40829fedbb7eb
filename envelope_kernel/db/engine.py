"""
Module: envelope_kernel.db.engine
Responsibility: Process-wide SQLAlchemy engine and session factory for the
    SQL-backed budget sources and the CLI.
Architecture position: Kernel > DB.  May import from db/base.py.  MUST NOT
    import from selectors/, domain/, or outer layers (create_tables and
    drop_tables import models so Base.metadata knows every table).

Invariants enforced:
    - One engine per process; init_engine_from_url() replaces the previous
      one and disposes its pool.
    - Sessions never expire attributes on commit, so snapshots built from a
      closed session stay readable.
    - SQLite disables the same-thread check (the overview reads on worker
      threads); in-memory SQLite shares one connection via StaticPool.

Failure modes:
    - RuntimeError from every accessor before init_engine_from_url().
"""

import atexit
from contextlib import contextmanager
from typing import Any, Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import URL, Engine, make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool

from envelope_kernel.logging_config import get_logger

logger = get_logger("db.engine")

_engine: Engine | None = None
_session_factory: sessionmaker[Session] | None = None

_NOT_INITIALIZED = "Engine not initialized. Call init_engine_from_url() first."


def _engine_options(url: URL, pool_size: int, pool_recycle: int) -> dict[str, Any]:
    if url.get_backend_name() == "sqlite":
        options: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
        if url.database in (None, "", ":memory:"):
            options["poolclass"] = StaticPool
        return options
    return {
        "poolclass": QueuePool,
        "pool_size": pool_size,
        "max_overflow": max(1, pool_size // 2),
        "pool_pre_ping": True,
        "pool_recycle": pool_recycle,
        # Reads only; each of the concurrent reads sees its own committed view
        "isolation_level": "READ COMMITTED",
    }


def init_engine_from_url(
    database_url: str,
    echo: bool = False,
    pool_size: int = 8,
    pool_recycle: int = 1800,
) -> Engine:
    """
    Create the process-wide engine for ``database_url``.

    Args:
        database_url: PostgreSQL or SQLite SQLAlchemy URL.
        echo: Log every SQL statement.
        pool_size: Pooled connections (PostgreSQL); at least the number of
            concurrent overview reads.
        pool_recycle: Seconds after which a pooled connection is replaced.

    Returns:
        The new Engine.
    """
    global _engine, _session_factory

    url = make_url(database_url)
    if _engine is not None:
        _engine.dispose()

    _engine = create_engine(url, echo=echo, **_engine_options(url, pool_size, pool_recycle))
    _session_factory = sessionmaker(bind=_engine, expire_on_commit=False)

    logger.info("engine_initialized", extra={
        "dialect": url.get_backend_name(),
        "database": url.database,
        "echo": echo,
    })
    return _engine


def get_engine() -> Engine:
    if _engine is None:
        raise RuntimeError(_NOT_INITIALIZED)
    return _engine


def get_session_factory() -> sessionmaker[Session]:
    """Factory handed to ``sql_sources``; every read opens its own session."""
    if _session_factory is None:
        raise RuntimeError(_NOT_INITIALIZED)
    return _session_factory


def get_session() -> Session:
    return get_session_factory()()


@contextmanager
def session_scope() -> Generator[Session, None, None]:
    """
    Session committed on normal exit and rolled back on error.

    Used for seeding and maintenance; the overview itself only reads.
    """
    with get_session() as session:
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            logger.warning("session_rolled_back", exc_info=True)
            raise


def create_tables() -> None:
    """Create the accounts, budgets, allocations and transactions tables."""
    from envelope_kernel.db.base import Base
    import envelope_kernel.models  # noqa: F401

    Base.metadata.create_all(get_engine())
    logger.info("tables_created", extra={"tables": sorted(Base.metadata.tables)})


def drop_tables() -> None:
    """Drop every table. Tests and local tooling only."""
    from envelope_kernel.db.base import Base
    import envelope_kernel.models  # noqa: F401

    Base.metadata.drop_all(get_engine())


def reset_engine() -> None:
    """Dispose the engine and forget the session factory."""
    global _engine, _session_factory

    if _engine is not None:
        _engine.dispose()
    _engine = None
    _session_factory = None


atexit.register(reset_engine)
