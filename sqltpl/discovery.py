"""
Discovery of template files under a project root.

Include and exclude patterns use gitignore syntax (pathspec 'gitwildmatch').
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List, Optional

import pathspec

from .config import CompilerConfig

logger = logging.getLogger(__name__)

# Never descended into
_ALWAYS_SKIPPED = {".git", ".hg", ".svn", "__pycache__"}


def _spec(patterns) -> Optional[pathspec.PathSpec]:
    return pathspec.PathSpec.from_lines("gitwildmatch", patterns) if patterns else None


def find_templates(root: Path, cfg: Optional[CompilerConfig] = None) -> List[str]:
    """
    Template files under root, as sorted POSIX paths relative to root.
    """
    cfg = cfg or CompilerConfig()
    include = _spec(cfg.include)
    exclude = _spec(cfg.exclude)
    if include is None:
        return []

    root = root.resolve()
    found: List[str] = []
    for dirpath, dirnames, filenames in os.walk(root):
        rel_dir = Path(dirpath).relative_to(root).as_posix()
        rel_dir = "" if rel_dir == "." else rel_dir + "/"

        kept = []
        for d in dirnames:
            if d in _ALWAYS_SKIPPED:
                continue
            if exclude is not None and exclude.match_file(rel_dir + d + "/"):
                logger.debug("skip directory %s%s", rel_dir, d)
                continue
            kept.append(d)
        dirnames[:] = kept

        for name in filenames:
            rel = rel_dir + name
            if not include.match_file(rel):
                continue
            if exclude is not None and exclude.match_file(rel):
                continue
            found.append(rel)

    found.sort()
    return found


__all__ = ["find_templates"]
