"""
User-facing errors.

The CLI prints a SqlTplUserError as a one-line message and exits with
status 2. Anything else is a bug in sqltpl and keeps its traceback.
"""

from __future__ import annotations


class SqlTplUserError(Exception):
    """
    Problem the user can fix: template syntax, sqltpl.yaml, command input.
    """
    pass


class InputError(SqlTplUserError):
    """Template or doc-comment input that cannot be read."""
    pass


__all__ = ["SqlTplUserError", "InputError"]
