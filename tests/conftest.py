import logging
import textwrap
from pathlib import Path

import pytest

from tests.helpers import write


@pytest.fixture
def tmpproj(tmp_path: Path):
    """Project with sqltpl.yaml and a few templates, one of them broken."""
    root = tmp_path
    write(
        root / "sqltpl.yaml",
        textwrap.dedent("""
        backend: go
        loop_multiplier: 2
        exclude: ["vendor/"]
        """).strip() + "\n",
    )
    write(root / "queries" / "by_id.sqlt", "SELECT * FROM @@table WHERE id=@id\n")
    write(
        root / "queries" / "filter.sqlt",
        "SELECT * FROM @@table\n{{where}}\n{{for _, u := range users}}name=@u.Name OR {{end}}\n{{end}}\n",
    )
    write(root / "broken.sqlt", "SELECT 1\n{{if x}}\n{{else}}\n{{else}}\n{{end}}\n")
    write(root / "vendor" / "skip.sqlt", "{{end}}")
    write(root / "notes.txt", "not a template")
    return root


@pytest.fixture(autouse=True)
def _reset_sqltpl_logger():
    yield
    log = logging.getLogger("sqltpl")
    for h in list(log.handlers):
        log.removeHandler(h)
    log.setLevel(logging.NOTSET)
