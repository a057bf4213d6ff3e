# persistence/engine.py
from typing import Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from core.config import get_db_config


_engine: Optional[Engine] = None

SCHEMA = [
    """
    CREATE TABLE IF NOT EXISTS runs (
        run_id VARCHAR(32) PRIMARY KEY,
        source_name VARCHAR(255),
        weights_spec TEXT NOT NULL,
        impacts_spec TEXT NOT NULL,
        criteria TEXT NOT NULL,
        executed_by VARCHAR(255),
        executed_at TIMESTAMP NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS run_results (
        run_id VARCHAR(32) NOT NULL REFERENCES runs (run_id) ON DELETE CASCADE,
        rank INTEGER NOT NULL,
        alternative VARCHAR(255) NOT NULL,
        score DOUBLE PRECISION NOT NULL,
        fields_json TEXT NOT NULL,
        PRIMARY KEY (run_id, rank)
    )
    """,
]


def get_engine() -> Engine:
    global _engine
    if _engine is not None:
        return _engine

    cfg = get_db_config()
    engine = create_engine(cfg.database_url, pool_pre_ping=True, future=True)
    try:
        init_schema(engine)
    except SQLAlchemyError:
        engine.dispose()
        raise
    _engine = engine
    return _engine


def init_schema(engine: Engine) -> None:
    with engine.begin() as conn:
        for ddl in SCHEMA:
            conn.execute(text(ddl))


def ping_db() -> bool:
    try:
        eng = get_engine()
        with eng.begin() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError:
        return False
