import math
from decimal import Decimal
from numbers import Real
from typing import Any, List, Mapping, Sequence, Union

import numpy as np

from core.errors import (
    EmptyInputError,
    InvalidImpactError,
    InvalidWeightError,
    NonNumericValueError,
)

BENEFIT = "benefit"
COST = "cost"

IMPACT_TOKENS = {"+": BENEFIT, "-": COST}

Spec = Union[str, Sequence[Any]]


def split_spec(spec: Spec) -> List[str]:
    """Split a comma-delimited spec ("1, 2, 3") into stripped tokens."""
    if isinstance(spec, str):
        return [tok.strip() for tok in spec.split(",")]
    return [str(tok).strip() for tok in spec]


def criterion_columns(table: Sequence[Mapping[str, Any]]) -> List[str]:
    if not table:
        raise EmptyInputError()
    headers = list(table[0].keys())
    criteria = headers[1:]
    if not criteria:
        raise EmptyInputError("The table needs an identifier column and at least one criterion column.")
    return criteria


def parse_weights(spec: Spec) -> np.ndarray:
    weights: List[float] = []
    for pos, tok in enumerate(split_spec(spec), start=1):
        try:
            w = float(tok)
        except ValueError:
            raise InvalidWeightError(tok, pos) from None
        if not math.isfinite(w) or w < 0:
            raise InvalidWeightError(tok, pos)
        weights.append(w)
    return np.array(weights, dtype=float)


def parse_impacts(tokens: Sequence[str]) -> List[str]:
    directions = []
    for pos, tok in enumerate(tokens, start=1):
        if tok not in IMPACT_TOKENS:
            raise InvalidImpactError(tok, pos)
        directions.append(IMPACT_TOKENS[tok])
    return directions


def to_number(value: Any) -> float:
    # bool is a Real subclass; a True/False cell is not a score
    if isinstance(value, bool):
        raise ValueError("boolean cell")
    if isinstance(value, str):
        value = value.strip()
        if not value:
            raise ValueError("blank cell")
        # float() would read "2_50" as 250
        if "_" in value:
            raise ValueError("digit separators are not numbers")
        num = float(value)
    elif isinstance(value, (Real, Decimal)):
        num = float(value)
    else:
        raise ValueError(f"unsupported cell type {type(value).__name__}")
    if not math.isfinite(num):
        raise ValueError("non-finite cell")
    return num


def build_matrix(table: Sequence[Mapping[str, Any]], criteria: Sequence[str]) -> np.ndarray:
    m, n = len(table), len(criteria)
    X = np.zeros((m, n), dtype=float)
    for i, row in enumerate(table):
        for j, key in enumerate(criteria):
            value = row.get(key)
            try:
                X[i, j] = to_number(value)
            except (TypeError, ValueError):
                raise NonNumericValueError(key, row=i + 1, value=value) from None
    return X
