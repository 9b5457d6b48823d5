"""
Single place to:
- Create a SQLAlchemy Engine from config.DATABASE_URL
- Create a Session factory (SessionLocal) for per-request DB sessions
- Provide get_db() dependency for FastAPI routes

Only the scoreboard lives in the database; live rounds stay in memory.
"""

from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from . import config

# 1) SQLite needs this so FastAPI's worker threads can share the connection.
connect_args = {"check_same_thread": False} if config.DATABASE_URL.startswith("sqlite") else {}

# 2) Create the SQLAlchemy Engine.
#    pool_pre_ping=True = auto-detect dead connections (helps with long-lived processes).
#    echo=False = set True to print SQL during local debugging.
engine = create_engine(
    config.DATABASE_URL,
    pool_pre_ping=True,
    echo=False,
    future=True,
    connect_args=connect_args,
)

# 3) Session factory.
#    Each request gets its own session from this factory.
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)

# 4) Base class for ORM models.
class Base(DeclarativeBase):
    pass

# 5) FastAPI dependency that yields a DB session for the duration of a request.
#    - Opens a session
#    - Yields it to the route code
#    - Ensures it gets closed even if exceptions happen
def get_db() -> Generator:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
