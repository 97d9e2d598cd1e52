from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, declarative_base
from hr_approvals.core.config import settings


def create_db_engine(url: str, **kwargs) -> Engine:
    """
    Engine for PostgreSQL (production) or SQLite (local development/testing).

    Both backends take a row write lock on the conditional UPDATEs the
    approval workflow relies on; SQLite locks the whole file, so writers
    wait up to `db_busy_timeout` seconds instead of failing immediately.
    """
    if url.startswith("postgresql"):
        return create_engine(url, pool_pre_ping=True, pool_size=settings.db_pool_size, **kwargs)
    connect_args = kwargs.pop("connect_args", {})
    connect_args.setdefault("check_same_thread", False)
    connect_args.setdefault("timeout", settings.db_busy_timeout)
    return create_engine(url, connect_args=connect_args, **kwargs)


engine = create_db_engine(settings.database_url)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

def get_db():
    """
    Session Provider: one session per request.
    Commits and rollbacks happen in the service layer, never here.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def init_db(bind: Engine = None):
    """
    Registers the approval workflow tables and creates any that are missing.
    Called from the application lifespan; tests pass their own engine.
    """
    # Model modules must be imported before create_all sees their tables
    from hr_approvals.models import (  # noqa: F401
        employee, leave_request, leave_balance, timesheet,
        audit_entry, notification
    )
    Base.metadata.create_all(bind=bind or engine)
