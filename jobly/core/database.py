"""
Database engine, session factory and the parameterized statement runner.

The entity managers in ``jobly.crud`` talk to the store through a single
operation, :func:`execute`, which takes SQL written with 1-based positional
placeholders (``$1``, ``$2``, ...) and an ordered list of bind values.
"""

import re
from typing import Any, Dict, List, Sequence

from sqlalchemy import create_engine, text
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from jobly.core.config import settings

_engine_kwargs = {"pool_pre_ping": True}
if not settings.DATABASE_URL.startswith("sqlite"):
    _engine_kwargs.update(pool_size=10, max_overflow=20)

# Create SQLAlchemy engine
engine = create_engine(settings.DATABASE_URL, **_engine_kwargs)

# Create SessionLocal class
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Create Base class for models
Base = declarative_base()

_PLACEHOLDER = re.compile(r"\$(\d+)")


def get_db():
    """
    Dependency function to get database session.
    Used in FastAPI endpoints with Depends(get_db)
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """
    Create any missing tables.

    Models are imported here so they are registered on ``Base.metadata``
    before ``create_all`` runs.
    """
    from jobly.models import company, job  # noqa: F401
    Base.metadata.create_all(bind=engine)


def execute(db: Session, sql: str, values: Sequence[Any] = ()) -> List[Dict[str, Any]]:
    """
    Run a parameterized statement and return its rows.

    Args:
        db: Database session
        sql: Statement using ``$1``-style positional placeholders
        values: Bind values; ``values[0]`` binds ``$1`` and so on

    Returns:
        List of rows, each a dict keyed by column name (empty for
        statements that return nothing)
    """
    params = {f"p{idx}": value for idx, value in enumerate(values, start=1)}
    statement = text(_PLACEHOLDER.sub(lambda m: f":p{m.group(1)}", sql))

    result = db.execute(statement, params)
    if not result.returns_rows:
        return []
    return [dict(row) for row in result.mappings().all()]
