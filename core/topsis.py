from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Sequence

import numpy as np

from core.errors import CriteriaMismatchError
from core.inputs import (
    BENEFIT,
    COST,
    Spec,
    build_matrix,
    criterion_columns,
    parse_impacts,
    parse_weights,
    split_spec,
)

SCORE_DECIMALS = 4


@dataclass(frozen=True)
class TopsisArtifacts:
    normalized_matrix: np.ndarray  # r_ij
    weighted_matrix: np.ndarray    # v_ij
    pis: np.ndarray                # A*
    nis: np.ndarray                # A-
    s_pos: np.ndarray              # S*
    s_neg: np.ndarray              # S-
    c_star: np.ndarray             # C*


@dataclass(frozen=True)
class ScoredRow:
    fields: Mapping[str, Any]      # read-only view of a copy of the input row
    score: float
    rank: int

    def to_dict(self) -> Dict[str, Any]:
        out = dict(self.fields)
        out["score"] = self.score
        out["rank"] = self.rank
        return out


@dataclass(frozen=True)
class Evaluation:
    identifier: str
    labels: List[str]              # input order, aligned with the artifacts
    criteria: List[str]
    weights: np.ndarray
    directions: List[str]
    artifacts: TopsisArtifacts
    rows: List[ScoredRow] = field(default_factory=list)

    def records(self) -> List[Dict[str, Any]]:
        return [r.to_dict() for r in self.rows]


def compute_topsis(
    matrix: np.ndarray,
    weights: np.ndarray,
    directions: List[str],
) -> TopsisArtifacts:
    """
    matrix: shape (m, n)
    weights: shape (n,), used as given (scaling all weights leaves ranks unchanged)
    directions: list of 'benefit' or 'cost', length n
    """
    if matrix.ndim != 2:
        raise ValueError("matrix must be 2D")
    m, n = matrix.shape
    if weights.shape != (n,):
        raise ValueError("weights must have shape (n,)")
    if len(directions) != n:
        raise ValueError("directions length must match number of criteria")

    denom = np.sqrt((matrix ** 2).sum(axis=0))
    denom = np.where(denom == 0, 1.0, denom)
    r = matrix / denom

    v = r * weights

    pis = np.zeros(n, dtype=float)
    nis = np.zeros(n, dtype=float)
    for j, d in enumerate(directions):
        col = v[:, j]
        if d == BENEFIT:
            pis[j] = np.max(col)
            nis[j] = np.min(col)
        elif d == COST:
            pis[j] = np.min(col)
            nis[j] = np.max(col)
        else:
            raise ValueError("direction must be 'benefit' or 'cost'")

    s_pos = np.sqrt(((v - pis) ** 2).sum(axis=1))
    s_neg = np.sqrt(((v - nis) ** 2).sum(axis=1))

    # a row sitting on both ideals scores 0
    total = s_pos + s_neg
    c_star = np.divide(s_neg, total, out=np.zeros(m, dtype=float), where=total != 0)

    return TopsisArtifacts(
        normalized_matrix=r,
        weighted_matrix=v,
        pis=pis,
        nis=nis,
        s_pos=s_pos,
        s_neg=s_neg,
        c_star=c_star,
    )


def rank_order(scores: np.ndarray) -> np.ndarray:
    """Row indices best-first; equal scores keep their input order."""
    return np.argsort(-scores, kind="stable")


def evaluate_detailed(table: Sequence[Mapping[str, Any]], weights_spec: Spec, impacts_spec: Spec) -> Evaluation:
    criteria = criterion_columns(table)
    weight_tokens = split_spec(weights_spec)
    impact_tokens = split_spec(impacts_spec)

    if len(weight_tokens) != len(criteria) or len(impact_tokens) != len(criteria):
        raise CriteriaMismatchError(len(criteria), len(weight_tokens), len(impact_tokens))

    weights = parse_weights(weight_tokens)
    matrix = build_matrix(table, criteria)
    directions = parse_impacts(impact_tokens)

    artifacts = compute_topsis(matrix, weights, directions)

    rows: List[ScoredRow] = []
    for rank, i in enumerate(rank_order(artifacts.c_star), start=1):
        rows.append(ScoredRow(
            fields=MappingProxyType(dict(table[i])),
            score=round(float(artifacts.c_star[i]), SCORE_DECIMALS),
            rank=rank,
        ))

    identifier = next(iter(table[0].keys()))

    return Evaluation(
        identifier=identifier,
        labels=[str(row.get(identifier, "")) for row in table],
        criteria=criteria,
        weights=weights,
        directions=directions,
        artifacts=artifacts,
        rows=rows,
    )


def evaluate(table: Sequence[Mapping[str, Any]], weights_spec: Spec, impacts_spec: Spec) -> List[ScoredRow]:
    """Rank the alternatives of ``table`` with TOPSIS.

    The first column of each row is the alternative label; every other column is a
    criterion. ``weights_spec`` and ``impacts_spec`` are comma-delimited strings
    ("1,1,2" and "+,-,+") or already split sequences, one entry per criterion.

    Returns the scored rows ordered by rank. Raises a ``TopsisError`` subclass when the
    input is rejected; nothing is computed in that case.
    """
    return evaluate_detailed(table, weights_spec, impacts_spec).rows
