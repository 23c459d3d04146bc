# Obrador - Database Setup
# SQLAlchemy engine, session factory, and FastAPI dependencies

from typing import Generator
from contextlib import contextmanager

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from obrador.config import get_settings
from obrador.models.base import Base


settings = get_settings()


def _engine_options(url: str) -> dict:
    """Pool options for the configured backend."""
    parsed = make_url(url)
    if parsed.get_backend_name() == "sqlite":
        options = {"connect_args": {"check_same_thread": False}}
        # In-memory databases live as long as their one connection
        if parsed.database in (None, "", ":memory:"):
            options["poolclass"] = StaticPool
        return options
    
    return {
        "pool_size": settings.db_pool_size,
        "max_overflow": settings.db_max_overflow,
        "pool_timeout": settings.db_pool_timeout,
        "pool_recycle": settings.db_pool_recycle,
        "pool_pre_ping": True,  # Verify connections before using
    }


engine = create_engine(
    settings.database_url,
    echo=settings.debug,  # Log SQL in debug mode
    **_engine_options(settings.database_url),
)


# Session factory
SessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,  # Prevent lazy-load issues after commit
)


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency that provides a database session.
    
    Usage in route handlers:
    
        @router.get("/timesheets")
        def list_timesheets(db: Session = Depends(get_db)):
            ...
    
    The session is automatically closed after the request completes,
    even if an exception occurs.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def get_db_context() -> Generator[Session, None, None]:
    """
    Context manager for database sessions outside of FastAPI requests.
    
    Usage in scripts and CLI commands:
    
        with get_db_context() as db:
            users = db.query(User).all()
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    """
    Create all tables defined in the models.
    
    WARNING: This is for development/testing only.
    In production, use Alembic migrations.
    """
    import obrador.models  # noqa: F401  (registers every table)
    Base.metadata.create_all(bind=engine)


def drop_db() -> None:
    """
    Drop all tables.
    
    WARNING: Destroys all data. Only for development/testing.
    """
    import obrador.models  # noqa: F401
    Base.metadata.drop_all(bind=engine)


def check_connection() -> bool:
    """
    Test the database connection.
    
    Returns True if connection succeeds, raises exception otherwise.
    Useful for health checks and startup verification.
    """
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
    return True


def _set_sql_server_options(dbapi_connection, connection_record):
    """Set connection-level options for SQL Server."""
    cursor = dbapi_connection.cursor()
    
    # Timesheet dates travel as YYYY-MM-DD strings
    cursor.execute("SET DATEFORMAT ymd")
    
    cursor.close()


if engine.dialect.name == "mssql":
    event.listen(engine, "connect", _set_sql_server_options)
