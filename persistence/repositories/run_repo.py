import uuid
from contextlib import nullcontext
from datetime import datetime, timezone
from typing import Optional, Dict, Any, List, Sequence
from sqlalchemy import text
from sqlalchemy.engine import Connection, Engine


class RunRepo:
    def __init__(self, engine: Engine):
        self.engine = engine

    def create_run(
        self,
        source_name: str,
        weights_spec: str,
        impacts_spec: str,
        criteria: Sequence[str],
        executed_by: str = "",
        conn: Optional[Connection] = None,
    ) -> str:
        run_id = uuid.uuid4().hex
        sql = """
        INSERT INTO runs (run_id, source_name, weights_spec, impacts_spec, criteria, executed_by, executed_at)
        VALUES (:run_id, :source_name, :weights_spec, :impacts_spec, :criteria, :executed_by, :executed_at)
        """
        with nullcontext(conn) if conn is not None else self.engine.begin() as c:
            c.execute(
                text(sql),
                {
                    "run_id": run_id,
                    "source_name": source_name,
                    "weights_spec": weights_spec,
                    "impacts_spec": impacts_spec,
                    "criteria": ",".join(criteria),
                    "executed_by": executed_by,
                    "executed_at": datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S.%f"),
                },
            )
        return run_id

    def list_runs(self, limit: int = 50) -> List[Dict[str, Any]]:
        sql = """
        SELECT run_id, source_name, weights_spec, impacts_spec, criteria, executed_at, executed_by
        FROM runs
        ORDER BY executed_at DESC
        LIMIT :limit
        """
        with self.engine.begin() as conn:
            rows = conn.execute(text(sql), {"limit": limit}).mappings().all()
        return [dict(r) for r in rows]

    def get_run(self, run_id: str) -> Optional[Dict[str, Any]]:
        sql = """
        SELECT run_id, source_name, weights_spec, impacts_spec, criteria, executed_at, executed_by
        FROM runs
        WHERE run_id = :run_id
        """
        with self.engine.begin() as conn:
            row = conn.execute(text(sql), {"run_id": run_id}).mappings().first()
        return dict(row) if row else None
