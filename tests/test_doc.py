import pytest

from sqltpl.doc import ExtractedSQL, MethodTemplateError, extract_sql, method_body
from sqltpl.template.errors import DuplicateElseError


class TestExtractSQL:

    def test_description_before_sql(self):
        comment = "GetByID query data by id and return it as struct\n\nSELECT * FROM @@table WHERE id=@id\n"

        assert extract_sql(comment, "GetByID") == ExtractedSQL(raw="SELECT * FROM @@table WHERE id=@id")

    def test_description_after_sql(self):
        comment = "SELECT * FROM users\n\nQueryAll returns every user"

        assert extract_sql(comment, "QueryAll").raw == "SELECT * FROM users"

    def test_leading_method_name_is_dropped(self):
        assert extract_sql("Count SELECT count(*) FROM t", "Count").raw == "SELECT count(*) FROM t"

    def test_where_call(self):
        sql = extract_sql('where("name=@name AND age=@age")', "FilterByNameAndAge")

        assert sql == ExtractedSQL(where="name=@name AND age=@age")

    def test_select_call(self):
        assert extract_sql('select("id, name")', "Columns") == ExtractedSQL(select="id, name")

    def test_multiline_template_is_kept(self):
        comment = "SELECT * FROM users\n  {{if a}}\n    WHERE a=@a\n  {{end}}\n"

        assert extract_sql(comment, "Q").raw == "SELECT * FROM users\n  {{if a}}\n    WHERE a=@a\n  {{end}}"

    def test_empty(self):
        assert extract_sql("   \n", "Q").empty
        assert not ExtractedSQL(where="x").empty


class TestMethodBody:

    def test_exec(self):
        body = method_body(ExtractedSQL(raw="DELETE FROM @@table WHERE id=@id"), "DeleteByID")

        assert body.splitlines()[-1] == "return e.Exec(ctx, sb.String(), params...)"
        assert 'sb.WriteString("DELETE FROM ? WHERE id=?")' in body

    def test_raw_scan(self):
        body = method_body(ExtractedSQL(raw="SELECT * FROM @@table"), "All", results=2, result_type="[]T")

        assert body.splitlines()[-3:] == [
            "var result []T",
            "err := e.Raw(sb.String(), params...).Scan(ctx, &result)",
            "return result, err",
        ]

    def test_where(self):
        body = method_body(ExtractedSQL(where="name=@name AND age=@age"), "FilterByNameAndAge")

        assert "params := make([]any, 0, 2)" in body
        assert body.endswith("e.Where(clause.Expr{SQL: sb.String(), Vars: params})\n\nreturn e")

    def test_select(self):
        body = method_body(ExtractedSQL(select="id, name"), "Columns")

        assert body.endswith("e.Select(sb.String(), params...)\n\nreturn e")

    def test_empty_sql(self):
        assert method_body(ExtractedSQL(), "Nothing") == ""

    def test_template_error_names_the_method(self):
        sql = ExtractedSQL(raw="SELECT 1\n{{if a}}\n{{else}}\n{{else}}\n{{end}}")

        with pytest.raises(MethodTemplateError) as exc:
            method_body(sql, "Broken", "Query")

        assert isinstance(exc.value.error, DuplicateElseError)
        assert str(exc.value) == (
            "failed to parse SQL template for Query.Broken at line 4: multiple else in same if block"
        )
