"""Tests for the template scanner."""

import pytest

from sqltpl.template.errors import UnterminatedDirectiveError
from sqltpl.template.lexer import TemplateLexer, tokenize_template
from sqltpl.template.tokens import Token


def text(value: str, line: int = 1) -> Token:
    return Token(False, value, line)


def directive(value: str, line: int = 1) -> Token:
    return Token(True, value, line)


class TestTemplateLexer:

    def test_plain_text(self):
        tokens = tokenize_template("SELECT * FROM @@table WHERE id=@id")

        assert tokens == [text("SELECT * FROM @@table WHERE id=@id")]

    def test_directives_split_literal_text(self):
        tokens = tokenize_template("{{if x > 0}} a=@x {{else}} b=@y {{end}}")

        assert tokens == [
            text(""),
            directive("if x > 0"),
            text(" a=@x "),
            directive("else"),
            text(" b=@y "),
            directive("end"),
            text(""),
        ]

    def test_directive_whitespace_is_trimmed(self):
        tokens = tokenize_template("{{   where  }}")

        assert tokens[1] == directive("where")

    def test_line_breaks_and_indentation(self):
        """Line breaks stay with the literal, continuation indentation goes"""
        tokens = tokenize_template("SELECT *\n  {{where}}\n    id=@id\n{{end}}")

        assert tokens == [
            text("SELECT *\n", 1),
            text("", 2),
            directive("where", 2),
            text("\n", 2),
            text("id=@id\n", 3),
            text("", 4),
            directive("end", 4),
            text("", 4),
        ]

    def test_first_line_keeps_leading_whitespace(self):
        tokens = tokenize_template("  a\n  b")

        assert tokens == [text("  a\n", 1), text("b", 2)]

    def test_crlf_is_normalized(self):
        tokens = tokenize_template("a\r\nb")

        assert tokens == [text("a\n", 1), text("b", 2)]

    def test_several_directives_on_one_line(self):
        tokens = TemplateLexer("x{{if a}}y{{end}}z").tokenize()

        assert [t.text for t in tokens] == ["x", "if a", "y", "end", "z"]
        assert [t.is_directive for t in tokens] == [False, True, False, True, False]

    def test_single_braces_are_text(self):
        tokens = tokenize_template("SELECT '{' || name || '}'")

        assert tokens == [text("SELECT '{' || name || '}'")]

    def test_unterminated_directive(self):
        with pytest.raises(UnterminatedDirectiveError) as exc:
            tokenize_template("SELECT 1\nWHERE {{if x > 0")

        assert exc.value.line == 2
        assert str(exc.value) == "line 2: missing }}"

    def test_closing_braces_must_be_on_same_line(self):
        """Directives never span lines"""
        with pytest.raises(UnterminatedDirectiveError) as exc:
            tokenize_template("{{if x\n}}")

        assert exc.value.line == 1

    def test_empty_template(self):
        assert tokenize_template("") == [text("")]

    def test_token_repr(self):
        assert repr(directive("end", 3)) == "Token(DIRECTIVE, 'end', line 3)"
