import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence

import pandas as pd
from sqlalchemy.engine import Engine

from core.errors import TopsisError
from core.inputs import Spec, split_spec
from core.topsis import Evaluation, evaluate_detailed
from persistence.repositories.result_repo import ResultRepo
from persistence.repositories.run_repo import RunRepo

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EvaluationOutcome:
    evaluation: Evaluation
    run_id: Optional[str] = None

    @property
    def records(self) -> List[Dict[str, Any]]:
        return self.evaluation.records()


def _spec_text(spec: Spec) -> str:
    return ",".join(split_spec(spec))


class EvaluationService:
    """Runs TOPSIS over a table and, when given an engine, records the run."""

    def __init__(self, engine: Optional[Engine] = None):
        self.engine = engine
        self.run_repo = RunRepo(engine) if engine is not None else None
        self.result_repo = ResultRepo(engine) if engine is not None else None

    def evaluate(
        self,
        table: Sequence[Mapping[str, Any]],
        weights_spec: Spec,
        impacts_spec: Spec,
        source_name: str = "",
    ) -> Evaluation:
        try:
            evaluation = evaluate_detailed(table, weights_spec, impacts_spec)
        except TopsisError as e:
            logger.warning("Rejected input from %s: %s", source_name or "<table>", e)
            raise

        logger.info(
            "Ranked %d alternative(s) over %d criteria from %s",
            len(evaluation.rows), len(evaluation.criteria), source_name or "<table>",
        )
        return evaluation

    def save(
        self,
        evaluation: Evaluation,
        weights_spec: Spec,
        impacts_spec: Spec,
        source_name: str = "",
        executed_by: str = "",
    ) -> Optional[str]:
        """Store the run and its ranked rows in one transaction; None without an engine."""
        if self.engine is None:
            return None

        with self.engine.begin() as conn:
            run_id = self.run_repo.create_run(
                source_name=source_name,
                weights_spec=_spec_text(weights_spec),
                impacts_spec=_spec_text(impacts_spec),
                criteria=evaluation.criteria,
                executed_by=executed_by,
                conn=conn,
            )
            self.result_repo.replace_results(run_id, evaluation.rows, conn=conn)

        logger.info("Saved run %s", run_id)
        return run_id

    def run(
        self,
        table: Sequence[Mapping[str, Any]],
        weights_spec: Spec,
        impacts_spec: Spec,
        source_name: str = "",
        executed_by: str = "",
    ) -> EvaluationOutcome:
        evaluation = self.evaluate(table, weights_spec, impacts_spec, source_name=source_name)
        run_id = self.save(evaluation, weights_spec, impacts_spec, source_name=source_name, executed_by=executed_by)
        return EvaluationOutcome(evaluation=evaluation, run_id=run_id)


def artifact_frames(evaluation: Evaluation) -> Dict[str, pd.DataFrame]:
    """Tabulate the intermediate TOPSIS steps, indexed by alternative label in input order."""
    a = evaluation.artifacts
    labels = evaluation.labels

    normalized = pd.DataFrame(a.normalized_matrix, index=labels, columns=evaluation.criteria)
    weighted = pd.DataFrame(a.weighted_matrix, index=labels, columns=evaluation.criteria)
    ideals = pd.DataFrame({
        "criterion": evaluation.criteria,
        "weight": evaluation.weights,
        "impact": evaluation.directions,
        "pos_ideal": a.pis,
        "neg_ideal": a.nis,
    })
    distances = pd.DataFrame({
        "alternative": labels,
        "s_pos": a.s_pos,
        "s_neg": a.s_neg,
        "c_star": a.c_star,
    }).sort_values("c_star", ascending=False, kind="stable")

    return {
        "normalized": normalized,
        "weighted": weighted,
        "ideals": ideals,
        "distances": distances,
    }
