from __future__ import annotations

from importlib import metadata

DIST_NAME = "sqltpl"


def tool_version() -> str:
    """
    Version of the installed sqltpl distribution.

    A source checkout that was never installed reports "0.0.0+local".
    Imports nothing from the package itself.
    """
    try:
        return metadata.version(DIST_NAME)
    except metadata.PackageNotFoundError:
        return "0.0.0+local"


__all__ = ["DIST_NAME", "tool_version"]
