import pickle

import pytest

from sqltpl.runtime import CURRENT_TABLE, Expr, splice, trim_set, trim_where


@pytest.mark.parametrize("body, expected", [
    ("a=1 AND", "a=1"),
    ("AND a=1", "a=1"),
    ("  or a=1 OR b=2 or  ", "a=1 OR b=2"),
    ("a=1 AND AND", "a=1 AND"),
    ("OR", ""),
    ("and", ""),
    ("", ""),
    ("ORDER BY x", "ORDER BY x"),
    ("a=1 ANDROID", "a=1 ANDROID"),
    ("brand=1", "brand=1"),
    ("(a=1) OR\n", "(a=1)"),
])
def test_trim_where(body, expected):
    assert trim_where(body) == expected


@pytest.mark.parametrize("body, expected", [
    ("a=1,", "a=1"),
    (", a=1", "a=1"),
    ("a=1, b=2 ,  ", "a=1, b=2"),
    ("a=1,,", "a=1,"),
    (",", ""),
])
def test_trim_set(body, expected):
    assert trim_set(body) == expected


class TestSplice:

    def setup_method(self):
        self.sb = ["SELECT 1"]
        self.params = [1]

    def test_appends_prefixed_body(self):
        written = splice("where", [" a=? ", "AND b=? AND "], [2, 3], self.sb, self.params)

        assert written is True
        assert "".join(self.sb) == "SELECT 1 WHERE a=? AND b=?"
        assert self.params == [1, 2, 3]

    def test_empty_body_writes_nothing(self):
        written = splice("where", ["  ", " OR "], [], self.sb, self.params)

        assert written is False
        assert self.sb == ["SELECT 1"]
        assert self.params == [1]

    def test_no_separator_on_empty_target(self):
        sb, params = [], []

        splice("set", ["a=?,"], ["x"], sb, params)

        assert "".join(sb) == "SET a=?"
        assert params == ["x"]

    @pytest.mark.parametrize("target", [["SELECT 1\n"], ["SELECT 1 "], ["SELECT 1\n", "", ""]])
    def test_no_separator_after_whitespace(self, target):
        splice("where", ["a=?"], [2], target, self.params)

        assert "".join(target) in ("SELECT 1\nWHERE a=?", "SELECT 1 WHERE a=?")
        assert "  " not in "".join(target)

    def test_separator_looks_past_empty_chunks(self):
        self.sb.append("")

        splice("where", ["a=?"], [2], self.sb, self.params)

        assert "".join(self.sb) == "SELECT 1 WHERE a=?"

    def test_unknown_keyword(self):
        with pytest.raises(AssertionError):
            splice("group", ["x"], [], self.sb, self.params)


def test_current_table_is_a_singleton():
    assert type(CURRENT_TABLE)() is CURRENT_TABLE
    assert pickle.loads(pickle.dumps(CURRENT_TABLE)) is CURRENT_TABLE
    assert repr(CURRENT_TABLE) == "CURRENT_TABLE"


def test_expr_compares_by_value():
    assert Expr("name") == Expr("name")
    assert Expr("name") != "name"
