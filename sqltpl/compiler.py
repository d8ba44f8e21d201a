"""
Compiler façade: template text -> generated procedure.

Pipeline: TemplateLexer -> TemplateParser -> Emitter -> back end.
Each call owns all of its state, so templates can be compiled concurrently.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from .config import CompilerConfig
from .emit.backends import create_backend
from .emit.backends.python import render_function
from .emit.emitter import Emitter
from .emit.ir import DeclareBuffers, Instruction
from .template.lexer import TemplateLexer
from .template.nodes import TemplateAST, collect_binds
from .template.parser import TemplateParser
from .template.placeholders import Bind

_LOG = logging.getLogger("sqltpl.compiler")


@dataclass(frozen=True)
class CompiledTemplate:
    """Result of one successful compilation."""
    source: str
    ast: TemplateAST
    program: Tuple[Instruction, ...]
    code: str
    backend: str

    @property
    def binds(self) -> Tuple[Bind, ...]:
        """Bind expressions in source order."""
        return collect_binds(self.ast)

    @property
    def capacity(self) -> int:
        first = self.program[0]
        assert isinstance(first, DeclareBuffers)
        return first.capacity


def compile_template(
    text: str,
    backend: Optional[str] = None,
    *,
    config: Optional[CompilerConfig] = None,
) -> CompiledTemplate:
    """
    Compiles one SQL template.

    Args:
        text: Template source (doc-comment body)
        backend: Back end name; defaults to config.backend
        config: Compiler settings; defaults to CompilerConfig()

    Returns:
        CompiledTemplate with the generated code

    Raises:
        TemplateSyntaxError: Template is malformed; nothing is generated
    """
    cfg = config or CompilerConfig()
    backend_name = backend or cfg.backend

    tokens = TemplateLexer(text).tokenize()
    ast = TemplateParser(tokens).parse()
    program = Emitter(cfg.loop_multiplier).emit(ast)
    code = create_backend(backend_name, buffer=cfg.buffer, params=cfg.params).render(program)

    _LOG.debug(
        "compiled template: %d tokens, %d root nodes, %d instructions, backend %s",
        len(tokens), len(ast), len(program), backend_name,
    )
    return CompiledTemplate(
        source=text,
        ast=ast,
        program=tuple(program),
        code=code,
        backend=backend_name,
    )


def python_source(
    text: str,
    args: Sequence[str],
    name: str = "query",
    *,
    config: Optional[CompilerConfig] = None,
    with_import: bool = True,
) -> str:
    """Source of a Python function `name(*args) -> (sql, params)` for the template."""
    cfg = config or CompilerConfig()
    compiled = compile_template(text, "python", config=cfg)
    return render_function(
        name, args, compiled.code,
        buffer=cfg.buffer, params=cfg.params, with_import=with_import,
    )


__all__ = ["CompiledTemplate", "compile_template", "python_source"]
