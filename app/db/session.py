"""
Database session management
"""
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from app.core.config import settings
from app.db.base import Base

_connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
    echo=False,
    connect_args=_connect_args,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def create_tables() -> None:
    """Create all tables directly; SQLite only, other backends go through Alembic"""
    import app.models  # noqa: F401  (registers every model on Base.metadata)

    Base.metadata.create_all(bind=engine)


@contextmanager
def transaction(db: Session) -> Iterator[Session]:
    """
    Run a block as one unit of work

    Everything added or flushed inside the block (business rows and their
    event log rows) is committed together; any exception rolls it all back.
    While the block is open, event log writes only flush.
    """
    db.info["in_transaction_scope"] = True
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.info.pop("in_transaction_scope", None)
