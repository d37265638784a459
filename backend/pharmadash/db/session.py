"""Engine and session factory construction. SQLite compatible with connection pooling."""
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool


def create_db_engine(database_url: str) -> Engine:
    if database_url.startswith("sqlite"):
        # SQLite: NullPool so each worker thread gets its own connection
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=NullPool,
        )
    # PostgreSQL/MySQL: QueuePool with sensible defaults
    return create_engine(
        database_url,
        pool_size=10,  # one per concurrent dashboard query
        max_overflow=10,
        pool_timeout=30,
        pool_recycle=3600,
        pool_pre_ping=True,
    )


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)
