import json
from contextlib import nullcontext
from typing import Any, Dict, List, Optional, Sequence
from sqlalchemy import text
from sqlalchemy.engine import Connection, Engine

from core.topsis import ScoredRow


class ResultRepo:
    def __init__(self, engine: Engine):
        self.engine = engine

    def replace_results(self, run_id: str, rows: Sequence[ScoredRow], conn: Optional[Connection] = None) -> None:
        del_sql = "DELETE FROM run_results WHERE run_id = :run_id"
        ins_sql = """
        INSERT INTO run_results (run_id, rank, alternative, score, fields_json)
        VALUES (:run_id, :rank, :alternative, :score, :fields_json)
        """
        payloads: List[dict] = []
        for r in rows:
            label = next(iter(r.fields.values()), "")
            payloads.append({
                "run_id": run_id,
                "rank": int(r.rank),
                "alternative": str(label),
                "score": float(r.score),
                "fields_json": json.dumps(dict(r.fields), default=str),
            })

        with nullcontext(conn) if conn is not None else self.engine.begin() as c:
            c.execute(text(del_sql), {"run_id": run_id})
            if payloads:
                c.execute(text(ins_sql), payloads)

    def get_results(self, run_id: str) -> List[Dict[str, Any]]:
        sql = """
        SELECT rank, score, fields_json
        FROM run_results
        WHERE run_id = :run_id
        ORDER BY rank ASC
        """
        with self.engine.begin() as conn:
            rows = conn.execute(text(sql), {"run_id": run_id}).mappings().all()

        out: List[Dict[str, Any]] = []
        for r in rows:
            record = json.loads(r["fields_json"])
            record["score"] = float(r["score"])
            record["rank"] = int(r["rank"])
            out.append(record)
        return out

    def get_scores_with_names(self, run_id: str) -> List[dict]:
        sql = """
        SELECT alternative AS alternative_name, score, rank
        FROM run_results
        WHERE run_id = :run_id
        ORDER BY rank ASC
        """
        with self.engine.begin() as conn:
            rows = conn.execute(text(sql), {"run_id": run_id}).mappings().all()
        return [dict(r) for r in rows]
