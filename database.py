from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool
from typing import Optional
import os
import logging

logger = logging.getLogger(__name__)

Base = declarative_base()

def normalize_database_url(database_url: Optional[str]) -> Optional[str]:
    """Fix up database URLs handed out by hosting providers"""
    if not database_url:
        return None

    # Hosted Postgres often uses postgres:// but SQLAlchemy needs postgresql://
    if database_url.startswith("postgres://"):
        database_url = database_url.replace("postgres://", "postgresql://", 1)
        logger.info("Converted postgres:// to postgresql://")

    return database_url

def create_db_engine(database_url: str) -> Engine:
    """Create an engine tuned for the backing database"""
    database_url = normalize_database_url(database_url)

    if database_url.startswith("sqlite"):
        # One shared connection so an in-memory database survives across threads
        engine = create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            echo=False,
        )
        logger.info("SQLite engine created")
        return engine

    ssl_mode = os.getenv("DATABASE_SSL_MODE", "prefer")
    connect_args = {}
    if "postgresql" in database_url.lower():
        connect_args = {
            "connect_timeout": 10,
            "options": "-c statement_timeout=30000",
        }
        if ssl_mode == "require":
            connect_args["sslmode"] = "require"

    engine = create_engine(
        database_url,
        pool_pre_ping=True,
        pool_recycle=300,
        pool_size=5,
        max_overflow=10,
        poolclass=QueuePool,
        connect_args=connect_args,
        echo=False,
    )
    logger.info("Database engine created successfully")
    return engine

def create_session_factory(engine: Engine) -> sessionmaker:
    # Records are handed back to services after commit, keep them loaded
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)

def verify_db_connection(engine: Optional[Engine]) -> bool:
    """Verify database connection is working"""
    if engine is None:
        return False
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"Database connection failed: {e}")
        return False
