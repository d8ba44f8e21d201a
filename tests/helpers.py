import os
import subprocess
import sys
from pathlib import Path
from types import SimpleNamespace

from sqltpl import python_source, runtime

REPO_ROOT = Path(__file__).resolve().parents[1]


def write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def lines(code: str) -> list[str]:
    """Non-empty, stripped lines of generated code."""
    return [line.strip() for line in code.splitlines() if line.strip()]


def item(**kwargs) -> SimpleNamespace:
    return SimpleNamespace(**kwargs)


def run_cli(root: Path, *args: str, stdin: str | None = None) -> subprocess.CompletedProcess:
    env = os.environ.copy()
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(REPO_ROOT), env.get("PYTHONPATH")]))
    return subprocess.run(
        [sys.executable, "-m", "sqltpl", *args],
        cwd=root, env=env, input=stdin, capture_output=True, text=True, encoding="utf-8"
    )


def build_function(text: str, args, name: str = "query", *, config=None):
    """Loads the python back end output of a template as a callable returning (sql, params)."""
    source = python_source(text, args, name, config=config, with_import=False)
    namespace = {
        "CURRENT_TABLE": runtime.CURRENT_TABLE,
        "Expr": runtime.Expr,
        "splice": runtime.splice,
    }
    exec(compile(source, f"<sqltpl:{name}>", "exec"), namespace)
    return namespace[name]
