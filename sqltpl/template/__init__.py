"""
SQL template language: scanner, placeholder extraction and block parser.
"""

from .errors import TemplateSyntaxError
from .lexer import TemplateLexer, tokenize_template
from .nodes import TemplateAST, collect_binds
from .parser import TemplateParser, parse_template
from .placeholders import Bind, BindKind, extract_placeholders

__all__ = [
    "TemplateSyntaxError",
    "TemplateLexer",
    "tokenize_template",
    "TemplateAST",
    "collect_binds",
    "TemplateParser",
    "parse_template",
    "Bind",
    "BindKind",
    "extract_placeholders",
]
