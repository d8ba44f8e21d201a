"""
Doc-comment helpers for generated Go query methods.

`extract_sql` pulls the SQL template out of a method doc comment and
`method_body` turns it into the body of the generated method.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .compiler import compile_template
from .config import CompilerConfig
from .errors import SqlTplUserError
from .template.errors import TemplateSyntaxError


@dataclass(frozen=True)
class ExtractedSQL:
    """
    SQL found in a doc comment. At most one field is non-empty:

    raw     full statement, executed as is
    where   argument of where("...") for a chainable method
    select  argument of select("...") for a chainable method
    """
    raw: str = ""
    where: str = ""
    select: str = ""

    @property
    def empty(self) -> bool:
        return not (self.raw or self.where or self.select)


@dataclass
class MethodTemplateError(SqlTplUserError):
    """Template of a query method failed to compile."""
    interface: str
    method: str
    error: TemplateSyntaxError

    def __str__(self) -> str:
        iface = f"{self.interface}." if self.interface else ""
        return (
            f"failed to parse SQL template for {iface}{self.method} "
            f"at line {self.error.line}: {self.error.message}"
        )


def _call_argument(sql: str, name: str) -> Optional[str]:
    prefix = f"{name}("
    if sql.startswith(prefix) and sql.endswith(")"):
        return sql[len(prefix):-1].strip('"').strip()
    return None


def extract_sql(comment: str, method_name: str) -> ExtractedSQL:
    """
    Extracts the SQL template from a method doc comment.

    A comment of two paragraphs keeps the first one when the second mentions
    the method name (a description after the SQL), otherwise the second one
    (a description before the SQL). A leading method name is dropped.
    """
    comment = comment.strip()

    index = comment.find("\n\n")
    if index != -1:
        if method_name in comment[index + 2:]:
            comment = comment[:index]
        else:
            comment = comment[index + 2:]

    sql = comment[len(method_name):] if comment.startswith(method_name) else comment
    sql = sql.strip()

    where = _call_argument(sql, "where")
    if where is not None:
        return ExtractedSQL(where=where)
    select = _call_argument(sql, "select")
    if select is not None:
        return ExtractedSQL(select=select)
    return ExtractedSQL(raw=sql)


def method_body(
    sql: ExtractedSQL,
    method: str,
    interface: str = "",
    *,
    results: int = 1,
    result_type: str = "T",
    config: Optional[CompilerConfig] = None,
) -> str:
    """
    Go body of a generated query method.

    Raw SQL with a single (error) result executes the statement; with two
    results it scans into `result_type`. where()/select() methods extend the
    chain and return it.

    Raises:
        MethodTemplateError: The template does not compile
    """
    cfg = config or CompilerConfig()
    sb, params = cfg.buffer, cfg.params

    def _snippet(text: str) -> str:
        try:
            return compile_template(text, "go", config=cfg).code
        except TemplateSyntaxError as e:
            raise MethodTemplateError(interface=interface, method=method, error=e) from e

    if sql.raw:
        snippet = _snippet(sql.raw)
        if results == 1:
            return f"{snippet}\nreturn e.Exec(ctx, {sb}.String(), {params}...)"
        return (
            f"{snippet}\n"
            f"var result {result_type}\n"
            f"err := e.Raw({sb}.String(), {params}...).Scan(ctx, &result)\n"
            f"return result, err"
        )
    if sql.select:
        return f"{_snippet(sql.select)}\ne.Select({sb}.String(), {params}...)\n\nreturn e"
    if sql.where:
        return (
            f"{_snippet(sql.where)}\n"
            f"e.Where(clause.Expr{{SQL: {sb}.String(), Vars: {params}}})\n\n"
            f"return e"
        )
    return ""


__all__ = ["ExtractedSQL", "MethodTemplateError", "extract_sql", "method_body"]
