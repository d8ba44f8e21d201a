import io
import json
import logging

import pytest

from sqltpl.cli import main
from tests.helpers import lines, run_cli, write


@pytest.fixture
def in_project(tmpproj, monkeypatch):
    monkeypatch.chdir(tmpproj)
    return tmpproj


def test_compile_go(in_project, capsys):
    rc = main(["compile", "queries/by_id.sqlt"])

    out = capsys.readouterr().out
    assert rc == 0
    assert lines(out) == [
        "var sb strings.Builder",
        "params := make([]any, 0, 2)",
        'sb.WriteString("SELECT * FROM ? WHERE id=?\\n")',
        "params = append(params, clause.Table{Name: clause.CurrentTable}, id)",
    ]


def test_compile_stdin_python(in_project, capsys, monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO("SELECT @a"))

    rc = main(["compile", "-", "--backend", "python"])

    assert rc == 0
    assert "params.append(a)" in capsys.readouterr().out


def test_compile_function(in_project, capsys):
    rc = main(["compile", "queries/by_id.sqlt", "--function", "by_id", "--args", "id"])

    out = capsys.readouterr().out
    assert rc == 0
    assert "def by_id(id):" in out
    namespace = {}
    exec(compile(out, "<cli>", "exec"), namespace)
    sql, params = namespace["by_id"](5)
    assert sql == "SELECT * FROM ? WHERE id=?\n"
    assert params[1:] == [5]


@pytest.mark.parametrize("argv, message", [
    (["compile", "missing.sqlt"], "Template file not found"),
    (["compile", "queries/by_id.sqlt", "--function", "f", "--backend", "go"], "only supported by the python backend"),
    (["compile", "queries/by_id.sqlt", "--function", "f", "--args", "a,b c"], "Invalid argument name 'b c'"),
    (["compile", "broken.sqlt"], "line 4: multiple else in same if block"),
])
def test_compile_errors(in_project, capsys, argv, message):
    rc = main(argv)

    assert rc == 2
    assert message in capsys.readouterr().err


def test_ir(in_project, capsys):
    rc = main(["ir", "queries/by_id.sqlt"])

    data = json.loads(capsys.readouterr().out)
    assert rc == 0
    assert [d["op"] for d in data] == ["declare", "literal", "params"]
    assert data[0]["capacity"] == 2


def test_check_reports_errors(in_project, capsys):
    rc = main(["check", "--pretty"])

    report = json.loads(capsys.readouterr().out)
    assert rc == 2
    assert report == {
        "templates": [
            {"path": "queries/by_id.sqlt", "params": 2, "capacity": 2},
            {"path": "queries/filter.sqlt", "params": 2, "capacity": 3},
        ],
        "errors": [
            {"path": "broken.sqlt", "line": 4, "message": "multiple else in same if block"},
        ],
    }


def test_check_clean_project(tmp_path, capsys):
    write(tmp_path / "a.sqlt", "SELECT 1")

    rc = main(["check", str(tmp_path)])

    assert rc == 0
    assert json.loads(capsys.readouterr().out)["errors"] == []


def test_check_invalid_config(tmp_path, capsys):
    write(tmp_path / "sqltpl.yaml", "backend: cobol\n")

    rc = main(["check", str(tmp_path)])

    assert rc == 2
    assert "backend: expected one of" in capsys.readouterr().err


class TestMethodCommand:

    def setup_method(self):
        self.comment = "FilterByNameAndAge filters by both\n\nwhere(\"name=@name AND age=@age\")\n"

    def test_where_method(self, in_project, capsys):
        write(in_project / "doc.txt", self.comment)

        rc = main(["method", "doc.txt", "--name", "FilterByNameAndAge"])

        out = capsys.readouterr().out
        assert rc == 0
        assert "e.Where(clause.Expr{SQL: sb.String(), Vars: params})" in out
        assert out.endswith("return e\n")

    def test_scan_method(self, in_project, capsys, monkeypatch):
        monkeypatch.setattr("sys.stdin", io.StringIO("SELECT * FROM @@table"))

        rc = main(["method", "-", "--name", "All", "--results", "2", "--result-type", "[]T"])

        assert rc == 0
        assert "var result []T" in capsys.readouterr().out

    def test_no_sql(self, in_project, capsys):
        write(in_project / "doc.txt", "\n")

        rc = main(["method", "doc.txt", "--name", "Nothing"])

        assert rc == 2
        assert "No SQL found in doc comment of Nothing" in capsys.readouterr().err

    def test_broken_template(self, in_project, capsys):
        write(in_project / "doc.txt", "{{end}}")

        rc = main(["method", "doc.txt", "--name", "Broken", "--interface", "Query"])

        assert rc == 2
        assert "failed to parse SQL template for Query.Broken at line 1: unmatched end" in capsys.readouterr().err


def test_verbose_sets_debug_level(in_project, capsys):
    main(["--verbose", "compile", "queries/by_id.sqlt"])

    assert logging.getLogger("sqltpl").level == logging.DEBUG


def test_subprocess_check(tmpproj):
    proc = run_cli(tmpproj, "check")

    assert proc.returncode == 2
    report = json.loads(proc.stdout)
    assert [t["path"] for t in report["templates"]] == ["queries/by_id.sqlt", "queries/filter.sqlt"]


def test_subprocess_version(tmpproj):
    proc = run_cli(tmpproj, "--version")

    assert proc.returncode == 0
    assert proc.stdout.startswith("sqltpl ")
