"""Database session management"""
import os
from typing import Generator
from pathlib import Path
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from dotenv import load_dotenv

# Load environment variables for LOCAL development only
# In Lambda, env vars are set via CloudFormation - don't override them with .env files
# AWS_LAMBDA_FUNCTION_NAME is set by Lambda runtime
_is_lambda = os.getenv("AWS_LAMBDA_FUNCTION_NAME") is not None

if not _is_lambda:
    # Local development: load .env.local (takes precedence over .env)
    _backend_dir = Path(__file__).parent.parent
    env_local = _backend_dir / '.env.local'
    env_file = _backend_dir / '.env'

    if env_local.exists():
        load_dotenv(env_local)
    elif env_file.exists():
        load_dotenv(env_file)

# Get database URL from environment
DATABASE_URL = os.getenv("DATABASE_URL")
if not DATABASE_URL:
    raise ValueError("DATABASE_URL not found in environment variables")


def make_engine(url: str, **kwargs) -> Engine:
    """
    Create an engine for the given URL.

    PostgreSQL is the production target. SQLite (local runs, tests) needs
    foreign keys switched on per connection so ON DELETE CASCADE applies.
    """
    if url.startswith("sqlite"):
        engine = create_engine(url, **kwargs)

        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return engine

    return create_engine(
        url,
        pool_pre_ping=True,  # Verify connections before using
        pool_recycle=3600,   # Recycle connections after 1 hour
        **kwargs,
    )


# Create engine
engine = make_engine(DATABASE_URL)

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """
    Dependency function to get database session.

    Usage in FastAPI:
        from fastapi import Depends
        from db.session import get_db

        @router.get("/companies")
        def list_companies(db: Session = Depends(get_db)):
            ...
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
