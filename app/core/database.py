from psycopg2.errors import ForeignKeyViolation, UniqueViolation
from sqlalchemy import create_engine, event
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
import uuid
from .config import settings


def _engine_options(database_url: str) -> dict:
    if database_url.startswith("sqlite"):
        options = {"connect_args": {"check_same_thread": False}}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            # Keep a single in-memory database shared by every session
            options["poolclass"] = StaticPool
        return options
    return {"pool_pre_ping": True, "pool_recycle": 300}


def enable_sqlite_foreign_keys(target_engine):
    """SQLite ignores ON DELETE CASCADE unless foreign keys are switched on per connection."""
    if target_engine.dialect.name != "sqlite":
        return

    @event.listens_for(target_engine, "connect")
    def _set_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


# Create database engine
engine = create_engine(
    settings.database_url,
    echo=settings.debug,
    **_engine_options(settings.database_url)
)
enable_sqlite_foreign_keys(engine)

# Create SessionLocal class
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Create Base class for models
Base = declarative_base()

# Dependency to get database session
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def generate_uuid():
    return uuid.uuid4()


PAYROLL_PERIOD_CONSTRAINT = "uq_payroll_employee_period"


def integrity_violation(exc: IntegrityError) -> str:
    """Classify an integrity error as "payroll_period", "unique", "foreign_key" or "other".

    PostgreSQL reports typed psycopg2 errors; SQLite only a message.
    """
    message = str(exc.orig)
    if PAYROLL_PERIOD_CONSTRAINT in message or "payrolls.employee_id, payrolls.month" in message:
        return "payroll_period"
    if isinstance(exc.orig, UniqueViolation) or "UNIQUE constraint failed" in message:
        return "unique"
    if isinstance(exc.orig, ForeignKeyViolation) or "FOREIGN KEY constraint failed" in message:
        return "foreign_key"
    return "other"
