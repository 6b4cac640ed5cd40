"""
Persistence failures raised by ClaimStore.

Callers catch PersistenceError to handle any storage failure, or one of the
two subclasses to tell a failed write from a failed read. The underlying
exception is chained and also kept on `.cause`.
"""

from typing import Optional


class PersistenceError(Exception):
    """Base class: the store could not complete an operation."""

    operation = "access"

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class CalculationSaveError(PersistenceError):
    """A calculation could not be persisted. Nothing was written."""

    operation = "save"


class CalculationReadError(PersistenceError):
    """Recent calculations could not be read."""

    operation = "read"
