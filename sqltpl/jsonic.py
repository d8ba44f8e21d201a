from __future__ import annotations

import enum
import json
from pathlib import PurePath
from typing import Any, Optional


def _default(obj: Any) -> Any:
    if isinstance(obj, enum.Enum):
        return obj.value
    if isinstance(obj, PurePath):
        return obj.as_posix()
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def dumps(obj: Any, *, indent: Optional[int] = None) -> str:
    """
    JSON text of a CLI answer.

    Non-ASCII stays readable; enums and paths are written as plain values.
    No trailing newline.
    """
    return json.dumps(obj, ensure_ascii=False, indent=indent, default=_default)


__all__ = ["dumps"]
