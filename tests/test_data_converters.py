"""Tests for JSON, CSV and config-file conversions."""

import json

from convert_everything.converters import data


class TestJson:
    def test_prettify_and_minify(self):
        assert data.json_prettify('{"a":[1,2]}') == '{\n  "a": [\n    1,\n    2\n  ]\n}'
        assert data.json_minify('{ "a" : [1, 2] }') == '{"a":[1,2]}'

    def test_invalid(self):
        assert data.json_prettify("{nope") == "(invalid JSON)"

    def test_oversized_integer(self):
        huge = "[" + "9" * 5000 + "]"
        assert data.json_prettify(huge) == "(number too large)"
        assert data.json_minify(huge) == "(number too large)"
        assert data.json_validate(huge) == "(number too large)"

    def test_escape_roundtrip(self):
        escaped = data.json_escape('say "hi"\n')
        assert escaped == '"say \\"hi\\"\\n"'
        assert data.json_unescape(escaped) == 'say "hi"\n'

    def test_validate(self):
        report = data.json_validate('{"a": 1, "b": 2}')
        assert report.startswith("Valid JSON")
        assert "Type: object" in report
        assert "Content: 2 keys" in report

    def test_validate_reports_position(self):
        report = data.json_validate('{\n  "a": }')
        assert report.startswith("Invalid JSON")
        assert "line 2" in report

    def test_sort_keys_recursive(self):
        assert json.loads(data.json_sort_keys('{"b": {"y": 1, "x": 2}, "a": 0}')) == {"a": 0, "b": {"x": 2, "y": 1}}
        assert data.json_sort_keys('{"b": 1, "a": 2}') == '{\n  "a": 2,\n  "b": 1\n}'

    def test_flatten_and_unflatten(self):
        nested = {"user": {"name": "Alice"}, "tags": ["js", "react"]}
        flat = json.loads(data.json_flatten(json.dumps(nested)))
        assert flat == {"user.name": "Alice", "tags[0]": "js", "tags[1]": "react"}
        assert json.loads(data.json_unflatten(json.dumps(flat))) == nested

    def test_merge(self):
        merged = data.json_merge('{"a": 1, "b": {"x": 10}}\n---\n{"b": {"y": 20}, "c": 3}')
        assert json.loads(merged) == {"a": 1, "b": {"x": 10, "y": 20}, "c": 3}

    def test_merge_requires_separator(self):
        assert data.json_merge('{"a": 1}').startswith("(separate the two JSON objects")

    def test_pick(self):
        picked = data.json_pick('name,age\n[{"name":"Alice","age":30,"email":"a@b.com"}]')
        assert json.loads(picked) == [{"name": "Alice", "age": 30}]

    def test_group_by(self):
        grouped = data.json_group_by('dept\n[{"n":1,"dept":"Eng"},{"n":2,"dept":"HR"},{"n":3}]')
        assert json.loads(grouped) == {
            "Eng": [{"n": 1, "dept": "Eng"}],
            "HR": [{"n": 2, "dept": "HR"}],
            "(missing)": [{"n": 3}],
        }


class TestTabular:
    def test_csv_to_json(self):
        result = json.loads(data.csv_to_json('name,age\nAlice,30\n"Smith, Bob",25'))
        assert result == [{"name": "Alice", "age": "30"}, {"name": "Smith, Bob", "age": "25"}]

    def test_csv_needs_data_row(self):
        assert data.csv_to_json("name,age") == "(need at least a header row and one data row)"

    def test_json_to_csv_quotes_and_union_headers(self):
        result = data.json_to_csv('[{"a": "x,y", "b": true}, {"c": null}]')
        assert result == 'a,b,c\n"x,y",true,\n,,'

    def test_json_to_csv_rejects_non_objects(self):
        assert data.json_to_csv("[1, 2]") == "(expected array of objects)"
        assert data.json_to_csv("[]") == "(expected a non-empty JSON array)"

    def test_tsv(self):
        assert json.loads(data.tsv_to_json("a\tb\n1\t2")) == [{"a": "1", "b": "2"}]
        assert data.json_to_tsv('[{"a": 1, "b": 2}]') == "a\tb\n1\t2"

    def test_tsv_csv_toggle(self):
        assert data.tsv_csv_toggle("a\tb\n1\t2") == "a,b\n1,2"
        assert data.tsv_csv_toggle("a,b\n1,2") == "a\tb\n1\t2"

    def test_markdown_table_roundtrip(self):
        table = data.json_to_markdown_table('[{"a": 1, "b": "x"}]')
        assert table == "| a | b |\n| --- | --- |\n| 1 | x |"
        assert json.loads(data.markdown_table_to_json(table)) == [{"a": "1", "b": "x"}]

    def test_ndjson(self):
        assert json.loads(data.ndjson_to_json('{"a":1}\n\n{"a":2}')) == [{"a": 1}, {"a": 2}]
        assert data.ndjson_to_json('{"a":1}\n{oops').startswith("(error on line 2:")
        assert data.json_to_ndjson('[{"a": 1}, 2]') == '{"a":1}\n2'

    def test_jsonl_toggle(self):
        assert data.jsonl_toggle("[1, 2]") == "1\n2"
        assert json.loads(data.jsonl_toggle("1\n2")) == [1, 2]

    def test_csv_stats(self):
        report = data.csv_stats("name,score\nA,1\nB,3")
        assert "name: (non-numeric)" in report
        assert "── score (2 values) ──" in report
        assert "  Mean:   2" in report

    def test_csv_transpose(self):
        assert data.csv_transpose("a,b\n1,2") == "a,1\nb,2"

    def test_csv_sort(self):
        assert data.csv_sort("2\nname,age\nA,30\nB,25") == "name,age\nB,25\nA,30"
        assert data.csv_sort("2 desc\nname,age\nA,30\nB,25") == "name,age\nA,30\nB,25"

    def test_csv_sort_requires_column(self):
        assert data.csv_sort("name,age\nA,30").startswith("(first line: column number")


class TestConfigFormats:
    def test_env(self):
        env = '# comment\nexport A=1\nB="two words"\nignored'
        assert json.loads(data.env_to_json(env)) == {"A": "1", "B": "two words"}

    def test_ini_types_and_sections(self):
        ini = "name = app\n[database]\nhost = localhost\nport = 5432\ndebug = true\nratio = .5"
        assert json.loads(data.ini_to_json(ini)) == {
            "name": "app",
            "database": {"host": "localhost", "port": 5432, "debug": True, "ratio": 0.5},
        }

    def test_json_to_ini(self):
        assert data.json_to_ini('{"name": "app", "db": {"port": 5432}}') == "name = app\n\n[db]\nport = 5432"

    def test_properties(self):
        text = "app.name=My App\n! note\ndb.host : localhost"
        assert json.loads(data.properties_to_json(text)) == {"app.name": "My App", "db.host": "localhost"}
        assert data.json_to_properties('{"a": 1, "b": false}') == "a=1\nb=false"


def test_build_units_are_data_category(build_units):
    units = build_units(data)
    assert "csv-to-json" in units
    assert all(unit.category == "data" for unit in units.values())


class TestExport:
    def test_json_to_sql(self):
        result = data.json_to_sql('users\n[{"id":1,"name":"O\'Brien","admin":true},{"id":2,"email":null}]')
        assert result.split("\n") == [
            "INSERT INTO `users` (`id`, `name`, `admin`, `email`) VALUES",
            "  (1, 'O''Brien', 1, NULL),",
            "  (2, NULL, NULL, NULL);",
            "",
            "-- 2 rows, 4 columns",
            "-- Columns: id, name, admin, email",
        ]

    def test_json_to_sql_default_table(self):
        assert data.json_to_sql('{"a": "x"}').startswith("INSERT INTO `table_name` (`a`) VALUES\n  ('x');")

    def test_json_to_sql_errors(self):
        assert data.json_to_sql("users") == "(enter table name on first line, then JSON array)"
        assert data.json_to_sql("users\n[1, 2]") == "(JSON must be an array of objects)"
        assert data.json_to_sql("users\n[nope").startswith("(invalid JSON:")

    def test_csv_to_html_escapes_cells(self):
        result = data.csv_to_html('Name,Note\nAlice,"<b>hi</b>, there"')
        assert "    <th>Name</th>" in result
        assert "    <td>&lt;b&gt;hi&lt;/b&gt;, there</td>" in result
        assert result.endswith("<!-- 1 row, 2 columns -->")

    def test_csv_filter(self):
        source = "city=new york\nName,Age,City\nAlice,30,New York\nBob,25,Los Angeles\nCarol,35,New York"
        assert data.csv_filter(source) == (
            "Name,Age,City\nAlice,30,New York\nCarol,35,New York\n\n-- Matched 2 of 3 rows"
        )

    def test_csv_filter_multiple_clauses_and_unknown_column(self):
        source = "city=york,name=car\nName,Age,City\nAlice,30,New York\nCarol,35,New York"
        assert data.csv_filter(source).split("\n")[1] == "Carol,35,New York"
        assert data.csv_filter("planet=mars\nName\nAlice").endswith("-- Matched 0 of 1 rows")

    def test_csv_filter_needs_data(self):
        assert data.csv_filter("city=x") == "(enter filter on first line, then CSV data)"
