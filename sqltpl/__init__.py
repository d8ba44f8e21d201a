"""
sqltpl: compiler for SQL templates embedded in query method doc comments.
"""

from .compiler import CompiledTemplate, compile_template, python_source
from .errors import SqlTplUserError
from .template.errors import TemplateSyntaxError

__all__ = [
    "CompiledTemplate",
    "compile_template",
    "python_source",
    "SqlTplUserError",
    "TemplateSyntaxError",
]
