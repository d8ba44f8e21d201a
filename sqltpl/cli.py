from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from .compiler import compile_template, python_source
from .config import load_config
from .discovery import find_templates
from .doc import extract_sql, method_body
from .emit.backends import list_backends
from .emit.ir import dump
from .errors import InputError, SqlTplUserError
from .jsonic import dumps as jdumps
from .template.errors import TemplateSyntaxError
from .version import tool_version

_LOG = logging.getLogger("sqltpl.cli")


def _setup_logging(verbose: bool) -> None:
    log = logging.getLogger("sqltpl")
    level = logging.DEBUG if verbose or os.environ.get("SQLTPL_DEBUG") else logging.INFO
    log.setLevel(level)
    if not log.handlers:
        h = logging.StreamHandler()
        h.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
        log.addHandler(h)


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="sqltpl",
        description="SQL doc-comment template compiler",
        add_help=True,
    )
    p.add_argument("-v", "--version", action="version", version=f"%(prog)s {tool_version()}")
    p.add_argument("--verbose", action="store_true", help="debug logging to stderr")
    sub = p.add_subparsers(dest="cmd", required=True)

    sp_compile = sub.add_parser("compile", help="generated code for one template")
    sp_compile.add_argument("source", help="template file, or - for stdin")
    sp_compile.add_argument("--backend", choices=list_backends(), help="overrides config backend")
    sp_compile.add_argument(
        "--function",
        metavar="NAME",
        help="python backend only: wrap the body into a function with this name",
    )
    sp_compile.add_argument(
        "--args",
        default="",
        help="comma-separated argument names for --function (for example: user,id)",
    )

    sp_ir = sub.add_parser("ir", help="instruction list of one template (JSON)")
    sp_ir.add_argument("source", help="template file, or - for stdin")
    sp_ir.add_argument("--pretty", action="store_true", help="indented JSON")

    sp_check = sub.add_parser("check", help="compile every template of a project (JSON report)")
    sp_check.add_argument("root", nargs="?", default=".", help="project root (default: current directory)")
    sp_check.add_argument("--pretty", action="store_true", help="indented JSON")

    sp_method = sub.add_parser("method", help="Go method body from a doc comment")
    sp_method.add_argument("source", help="file with the doc comment text, or - for stdin")
    sp_method.add_argument("--name", required=True, help="method name")
    sp_method.add_argument("--interface", default="", help="interface name for error messages")
    sp_method.add_argument("--results", type=int, default=1, choices=[1, 2], help="number of method results")
    sp_method.add_argument("--result-type", default="T", help="Go type of the first result")

    return p


def _read_source(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    path = Path(source)
    if not path.is_file():
        raise InputError(f"Template file not found: {path}")
    return path.read_text(encoding="utf-8")


def _parse_args_list(args: str) -> List[str]:
    names = [a.strip() for a in args.split(",") if a.strip()]
    for name in names:
        if not name.isidentifier():
            raise InputError(f"Invalid argument name '{name}'")
    return names


def _run_check(root: Path) -> Dict[str, Any]:
    cfg = load_config(root)
    templates: List[Dict[str, Any]] = []
    errors: List[Dict[str, Any]] = []
    for rel in find_templates(root, cfg):
        text = (root / rel).read_text(encoding="utf-8")
        try:
            compiled = compile_template(text, config=cfg)
        except TemplateSyntaxError as e:
            _LOG.debug("%s: %s", rel, e)
            errors.append({"path": rel, "line": e.line, "message": e.message})
            continue
        templates.append({"path": rel, "params": len(compiled.binds), "capacity": compiled.capacity})
    return {"templates": templates, "errors": errors}


def _json(obj: Any, pretty: bool) -> str:
    return jdumps(obj, indent=2 if pretty else None) + "\n"


def main(argv: Optional[list[str]] = None) -> int:
    ns = _build_parser().parse_args(argv)
    _setup_logging(ns.verbose)

    try:
        if ns.cmd == "compile":
            cfg = load_config(Path.cwd())
            text = _read_source(ns.source)
            if ns.function:
                if (ns.backend or "python") != "python":
                    raise InputError("--function is only supported by the python backend")
                code = python_source(text, _parse_args_list(ns.args), ns.function, config=cfg)
            else:
                code = compile_template(text, ns.backend, config=cfg).code
            sys.stdout.write(code)
            return 0

        if ns.cmd == "ir":
            cfg = load_config(Path.cwd())
            compiled = compile_template(_read_source(ns.source), config=cfg)
            sys.stdout.write(_json(dump(list(compiled.program)), ns.pretty))
            return 0

        if ns.cmd == "check":
            report = _run_check(Path(ns.root))
            sys.stdout.write(_json(report, ns.pretty))
            return 2 if report["errors"] else 0

        if ns.cmd == "method":
            cfg = load_config(Path.cwd())
            sql = extract_sql(_read_source(ns.source), ns.name)
            if sql.empty:
                raise InputError(f"No SQL found in doc comment of {ns.name}")
            body = method_body(
                sql, ns.name, ns.interface,
                results=ns.results, result_type=ns.result_type, config=cfg,
            )
            sys.stdout.write(body + "\n")
            return 0

    except SqlTplUserError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2
    except ValueError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2

    return 2


if __name__ == "__main__":
    raise SystemExit(main())
