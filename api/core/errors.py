"""
Database failures, kept separate from other runtime errors.
"""

from __future__ import annotations


class DatabaseError(RuntimeError):
    pass


class QueryError(DatabaseError):
    """
    The database rejected or failed a statement.
    """


class DatabaseConnectionError(DatabaseError):
    """
    The pool could not hand out a connection (exhausted or unreachable).
    """


class InputValidationError(ValueError):
    """
    Request input failed validation after parsing (e.g. an empty PATCH body).

    `errors` uses the same record shape as the 400 response body.
    """

    def __init__(self, errors: list[dict[str, str]]) -> None:
        super().__init__("; ".join(e.get("message", "") for e in errors))
        self.errors = errors
