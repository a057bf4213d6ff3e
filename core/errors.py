from typing import Any, Optional


class TopsisError(ValueError):
    """Base class for input errors raised while evaluating a table."""


class EmptyInputError(TopsisError):
    def __init__(self, message: str = "The uploaded file is empty."):
        super().__init__(message)


class CriteriaMismatchError(TopsisError):
    def __init__(self, expected: int, weights: int, impacts: int):
        self.expected = expected
        self.weights = weights
        self.impacts = impacts
        super().__init__(
            f"Criteria mismatch: Found {expected} columns but received "
            f"{weights} weights and {impacts} impacts."
        )


class NonNumericValueError(TopsisError):
    def __init__(self, column: str, row: Optional[int] = None, value: Any = None):
        self.column = column
        self.row = row
        self.value = value
        msg = f"Non-numeric value detected in column: {column}"
        if row is not None:
            msg += f" (row {row}: {value!r})"
        super().__init__(msg)


class InvalidImpactError(TopsisError):
    def __init__(self, token: str, position: int):
        self.token = token
        self.position = position
        super().__init__(
            f"Invalid impact {token!r} at position {position}: impacts must be '+' or '-'."
        )


class InvalidWeightError(TopsisError):
    def __init__(self, token: str, position: int):
        self.token = token
        self.position = position
        super().__init__(
            f"Invalid weight {token!r} at position {position}: weights must be non-negative numbers."
        )
