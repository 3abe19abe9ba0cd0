"""JSON, CSV/TSV, NDJSON and config-file conversions."""

import csv
import html
import io
import json
import math
import re
import statistics
from typing import Any

from ..logging_config import InvalidInputError
from ..providers import ConverterContext
from ..units import ConverterUnit, TextConverter
from .common import format_number, plural, reports_invalid_input, to_json

DOCUMENT_SEPARATOR = "\n---\n"
_SECTION = re.compile(r"^\[([^\]]+)\]$")
_INDEX_SEGMENT = re.compile(r"\[(\d+)\]")


def cell_text(value: Any) -> str:
    """Render a JSON value inside a flat text format."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    return str(value)


def parse_csv_rows(text: str, delimiter: str = ",") -> list[list[str]]:
    reader = csv.reader(io.StringIO(text.strip()), delimiter=delimiter)
    return [row for row in reader if row]


def _records(text: str, delimiter: str) -> list[dict[str, str]]:
    rows = parse_csv_rows(text, delimiter)
    if len(rows) < 2:
        raise InvalidInputError("need at least a header row and one data row")
    headers = [h.strip() if delimiter == "\t" else h for h in rows[0]]
    records = []
    for row in rows[1:]:
        values = [v.strip() if delimiter == "\t" else v for v in row]
        records.append({h: values[i] if i < len(values) else "" for i, h in enumerate(headers)})
    return records


def load_json(text: str) -> Any:
    try:
        return json.loads(text.strip())
    except json.JSONDecodeError:
        raise
    except ValueError:
        # integer literal longer than sys.get_int_max_str_digits()
        raise InvalidInputError("number too large") from None


@reports_invalid_input
def json_prettify(text: str) -> str:
    try:
        return to_json(load_json(text))
    except json.JSONDecodeError:
        raise InvalidInputError("invalid JSON") from None


@reports_invalid_input
def json_minify(text: str) -> str:
    try:
        return to_json(load_json(text), indent=None)
    except json.JSONDecodeError:
        raise InvalidInputError("invalid JSON") from None


def json_escape(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)


@reports_invalid_input
def json_unescape(text: str) -> str:
    try:
        value = load_json(text)
    except json.JSONDecodeError:
        raise InvalidInputError("invalid JSON string") from None
    return value if isinstance(value, str) else cell_text(value)


@reports_invalid_input
def json_validate(text: str) -> str:
    try:
        value = json.loads(text)
    except json.JSONDecodeError as e:
        return f"Invalid JSON\n\nError at line {e.lineno}, column {e.colno}:\n{e.msg}"
    except ValueError:
        raise InvalidInputError("number too large") from None

    if isinstance(value, list):
        kind, content = "array", f"{len(value)} items"
    elif isinstance(value, dict):
        kind, content = "object", f"{len(value)} keys"
    else:
        kind = {bool: "boolean", str: "string", type(None): "null"}.get(type(value), "number")
        content = kind
    return "\n".join(
        [
            "Valid JSON",
            "",
            f"Type: {kind}",
            f"Content: {content}",
            f"Size: {len(text)} chars",
            f"Minified: {len(to_json(value, indent=None))} chars",
        ]
    )


def sort_keys(value: Any) -> Any:
    if isinstance(value, list):
        return [sort_keys(item) for item in value]
    if isinstance(value, dict):
        return {key: sort_keys(value[key]) for key in sorted(value)}
    return value


@reports_invalid_input
def json_sort_keys(text: str) -> str:
    try:
        return to_json(sort_keys(load_json(text)))
    except json.JSONDecodeError:
        raise InvalidInputError("invalid JSON") from None


def flatten(value: Any, prefix: str = "", out: dict | None = None) -> dict:
    """Flatten nested JSON into dot/bracket notation keys."""
    out = {} if out is None else out
    if isinstance(value, list):
        for i, item in enumerate(value):
            flatten(item, f"{prefix}[{i}]", out)
    elif isinstance(value, dict):
        for key, item in value.items():
            flatten(item, f"{prefix}.{key}" if prefix else key, out)
    else:
        out[prefix] = value
    return out


def unflatten(flat: dict) -> dict:
    result: dict = {}
    for key, value in flat.items():
        parts = _INDEX_SEGMENT.sub(r".\1", key).split(".")
        current: Any = result
        for part, following in zip(parts, parts[1:]):
            container = [] if following.isdigit() else {}
            if isinstance(current, list):
                index = int(part)
                while len(current) <= index:
                    current.append(None)
                if current[index] is None:
                    current[index] = container
                current = current[index]
            else:
                current = current.setdefault(part, container)
        last = parts[-1]
        if isinstance(current, list):
            index = int(last)
            while len(current) <= index:
                current.append(None)
            current[index] = value
        else:
            current[last] = value
    return result


@reports_invalid_input
def json_flatten(text: str) -> str:
    try:
        return to_json(flatten(load_json(text)))
    except json.JSONDecodeError:
        raise InvalidInputError("invalid JSON") from None


@reports_invalid_input
def json_unflatten(text: str) -> str:
    try:
        flat = load_json(text)
    except json.JSONDecodeError:
        raise InvalidInputError("invalid JSON") from None
    if not isinstance(flat, dict):
        raise InvalidInputError("expected a flat JSON object")
    return to_json(unflatten(flat))


@reports_invalid_input
def csv_to_json(text: str) -> str:
    try:
        records = _records(text, ",")
    except csv.Error:
        raise InvalidInputError("invalid CSV") from None
    return to_json(records)


@reports_invalid_input
def tsv_to_json(text: str) -> str:
    records = _records(text, "\t")
    return to_json(records)


def _object_rows(text: str) -> list[dict]:
    try:
        data = load_json(text)
    except json.JSONDecodeError:
        raise InvalidInputError("invalid JSON") from None
    if not isinstance(data, list) or not data:
        raise InvalidInputError("expected a non-empty JSON array")
    if not all(isinstance(row, dict) for row in data):
        raise InvalidInputError("expected array of objects")
    return data


@reports_invalid_input
def json_to_csv(text: str) -> str:
    rows = _object_rows(text)
    headers = list(dict.fromkeys(key for row in rows for key in row))
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(headers)
    for row in rows:
        writer.writerow([cell_text(row.get(h)) for h in headers])
    return buffer.getvalue().rstrip("\n")


@reports_invalid_input
def json_to_tsv(text: str) -> str:
    rows = _object_rows(text)
    keys = list(rows[0])
    lines = ["\t".join(keys)]
    lines += ["\t".join(cell_text(row.get(k)) for k in keys) for row in rows]
    return "\n".join(lines)


@reports_invalid_input
def json_to_markdown_table(text: str) -> str:
    rows = _object_rows(text)
    keys = list(rows[0])
    lines = [
        "| " + " | ".join(keys) + " |",
        "| " + " | ".join("---" for _ in keys) + " |",
    ]
    lines += ["| " + " | ".join(cell_text(row.get(k)) for k in keys) + " |" for row in rows]
    return "\n".join(lines)


@reports_invalid_input
def markdown_table_to_json(text: str) -> str:
    lines = [line for line in text.strip().split("\n") if line.strip()]
    if len(lines) < 3:
        raise InvalidInputError("need at least header, separator, and one data row")

    def cells(line: str) -> list[str]:
        return [c.strip() for c in line.split("|") if c.strip()]

    headers = cells(lines[0])
    data = []
    for line in lines[2:]:
        values = cells(line)
        data.append({h: values[i] if i < len(values) else "" for i, h in enumerate(headers)})
    return to_json(data)


@reports_invalid_input
def ndjson_to_json(text: str) -> str:
    lines = [line.strip() for line in text.strip().split("\n") if line.strip()]
    parsed = []
    for number, line in enumerate(lines, start=1):
        try:
            parsed.append(json.loads(line))
        except json.JSONDecodeError as e:
            raise InvalidInputError(f"error on line {number}: {e.msg}") from None
        except ValueError:
            raise InvalidInputError(f"error on line {number}: number too large") from None
    return to_json(parsed)


@reports_invalid_input
def json_to_ndjson(text: str) -> str:
    try:
        data = load_json(text)
    except json.JSONDecodeError:
        raise InvalidInputError("invalid JSON") from None
    if not isinstance(data, list):
        raise InvalidInputError("expected a JSON array")
    return "\n".join(to_json(item, indent=None) for item in data)


def jsonl_toggle(text: str) -> str:
    """JSON array in, JSON Lines out; anything else is read as JSON Lines."""
    if text.strip().startswith("["):
        return json_to_ndjson(text)
    return ndjson_to_json(text)


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        return value[1:-1]
    return value


def _scalar(value: str) -> Any:
    if value in ("true", "false"):
        return value == "true"
    if value == "null":
        return None
    if re.fullmatch(r"\d{1,18}", value):
        return int(value)
    if re.fullmatch(r"\d*\.\d+", value):
        return float(value)
    return value


def env_to_json(text: str) -> str:
    result = {}
    for line in text.split("\n"):
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        if line.startswith("export "):
            line = line[len("export "):]
        key, _, value = line.partition("=")
        result[key.strip()] = _unquote(value.strip())
    return to_json(result)


def ini_to_json(text: str) -> str:
    result: dict[str, Any] = {}
    section: dict[str, Any] | None = None
    for line in text.split("\n"):
        line = line.strip()
        if not line or line[0] in ";#":
            continue
        header = _SECTION.match(line)
        if header:
            section = result.setdefault(header.group(1).strip(), {})
            continue
        if "=" not in line:
            continue
        key, _, value = line.partition("=")
        target = section if section is not None else result
        target[key.strip()] = _scalar(_unquote(value.strip()))
    return to_json(result)


@reports_invalid_input
def json_to_ini(text: str) -> str:
    try:
        data = load_json(text)
    except json.JSONDecodeError:
        raise InvalidInputError("invalid JSON") from None
    if not isinstance(data, dict):
        raise InvalidInputError("enter a JSON object")

    globals_ = [(k, v) for k, v in data.items() if not isinstance(v, dict)]
    sections = [(k, v) for k, v in data.items() if isinstance(v, dict)]
    lines = [f"{k} = {cell_text(v)}" for k, v in globals_]
    if globals_ and sections:
        lines.append("")
    for name, values in sections:
        lines.append(f"[{name}]")
        lines += [f"{k} = {cell_text(v)}" for k, v in values.items()]
        lines.append("")
    return "\n".join(lines).rstrip()


def properties_to_json(text: str) -> str:
    result = {}
    for line in text.split("\n"):
        line = line.strip()
        if not line or line[0] in "#!":
            continue
        match = re.search(r"[=:]", line)
        if not match:
            continue
        result[line[: match.start()].strip()] = line[match.end():].strip()
    return to_json(result)


@reports_invalid_input
def json_to_properties(text: str) -> str:
    try:
        data = load_json(text)
    except json.JSONDecodeError:
        raise InvalidInputError("invalid JSON") from None
    if not isinstance(data, dict):
        raise InvalidInputError("enter a flat JSON object")
    return "\n".join(f"{k}={cell_text(v)}" for k, v in data.items())


def deep_merge(target: dict, source: dict) -> dict:
    merged = dict(target)
    for key, value in source.items():
        if isinstance(merged.get(key), dict) and isinstance(value, dict):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


@reports_invalid_input
def json_merge(text: str) -> str:
    if DOCUMENT_SEPARATOR not in text:
        raise InvalidInputError('separate the two JSON objects with a line containing only "---"')
    first, _, second = text.partition(DOCUMENT_SEPARATOR)
    try:
        a, b = load_json(first), load_json(second)
    except json.JSONDecodeError as e:
        raise InvalidInputError(f"invalid JSON: {e.msg}") from None
    if not isinstance(a, dict) or not isinstance(b, dict):
        raise InvalidInputError("both documents must be JSON objects")
    return to_json(deep_merge(a, b))


@reports_invalid_input
def json_pick(text: str) -> str:
    head, sep, body = text.partition("\n")
    if not sep:
        raise InvalidInputError("first line: comma-separated keys, rest: JSON")
    keys = [k.strip() for k in head.split(",") if k.strip()]
    try:
        data = load_json(body)
    except json.JSONDecodeError as e:
        raise InvalidInputError(f"error: {e.msg}") from None

    def pick(obj: Any) -> dict:
        return {k: obj[k] for k in keys if isinstance(obj, dict) and k in obj}

    return to_json([pick(item) for item in data] if isinstance(data, list) else pick(data))


@reports_invalid_input
def json_group_by(text: str) -> str:
    head, sep, body = text.partition("\n")
    if not sep:
        raise InvalidInputError("first line: key name, rest: JSON array")
    key = head.strip()
    try:
        data = load_json(body)
    except json.JSONDecodeError as e:
        raise InvalidInputError(f"error: {e.msg}") from None
    if not isinstance(data, list):
        raise InvalidInputError("JSON must be an array")

    groups: dict[str, list] = {}
    for item in data:
        value = item.get(key) if isinstance(item, dict) else None
        groups.setdefault("(missing)" if value is None else cell_text(value), []).append(item)
    return to_json(groups)


@reports_invalid_input
def csv_stats(text: str) -> str:
    rows = parse_csv_rows(text)
    if len(rows) < 2:
        raise InvalidInputError("need at least a header row and one data row")
    headers, data = rows[0], rows[1:]

    def fmt(n: float) -> str:
        return format_number(n, 4)

    report = []
    for col, header in enumerate(headers):
        values = []
        for row in data:
            try:
                values.append(float(row[col]))
            except (IndexError, ValueError):
                continue
        if not values:
            report.append(f"{header}: (non-numeric)")
            continue
        report += [
            f"── {header} ({len(values)} values) ──",
            f"  Min:    {fmt(min(values))}",
            f"  Max:    {fmt(max(values))}",
            f"  Sum:    {fmt(sum(values))}",
            f"  Mean:   {fmt(statistics.fmean(values))}",
            f"  Median: {fmt(statistics.median(values))}",
            f"  StdDev: {fmt(statistics.pstdev(values))}",
        ]
    return "\n".join(report)


@reports_invalid_input
def csv_transpose(text: str) -> str:
    rows = parse_csv_rows(text)
    if not rows:
        raise InvalidInputError("empty input")
    width = max(len(row) for row in rows)
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    for col in range(width):
        writer.writerow([row[col] if col < len(row) else "" for row in rows])
    return buffer.getvalue().rstrip("\n")


@reports_invalid_input
def csv_sort(text: str) -> str:
    head, _, body = text.strip().partition("\n")
    spec = re.fullmatch(r"(\d{1,9})(\s+desc)?", head.strip(), re.IGNORECASE)
    if not spec:
        raise InvalidInputError('first line: column number, e.g. "2" or "2 desc"')
    column = int(spec.group(1)) - 1
    descending = bool(spec.group(2))
    lines = [line for line in body.split("\n") if line]
    if not lines:
        raise InvalidInputError("no data rows")

    def first_cell_numeric(line: str) -> bool:
        try:
            float(line.split(",")[0])
        except ValueError:
            return False
        return True

    header = [] if first_cell_numeric(lines[0]) else [lines[0]]
    rows = lines[len(header):]

    def sort_key(line: str) -> tuple:
        cells = line.split(",")
        cell = cells[column] if column < len(cells) else ""
        try:
            return (0, float(cell), "")
        except ValueError:
            return (1, 0.0, cell.lower())

    return "\n".join(header + sorted(rows, key=sort_key, reverse=descending))


def _sql_literal(value: Any) -> str:
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, (int, float)):
        return str(value) if math.isfinite(value) else "NULL"
    return "'" + cell_text(value).replace("'", "''") + "'"


@reports_invalid_input
def json_to_sql(text: str) -> str:
    """First line names the table unless the input starts straight with JSON."""
    head, _, rest = text.strip().partition("\n")
    table, payload = "table_name", text.strip()
    if not head.strip().startswith(("[", "{")):
        table = re.sub(r"[^a-zA-Z0-9_]", "", head) or "table_name"
        payload = rest.strip()
    if not payload:
        raise InvalidInputError("enter table name on first line, then JSON array")
    try:
        data = load_json(payload)
    except json.JSONDecodeError as e:
        raise InvalidInputError(f"invalid JSON: {e.msg}") from None
    rows = data if isinstance(data, list) else [data]
    if not rows or not all(isinstance(row, dict) for row in rows):
        raise InvalidInputError("JSON must be an array of objects")

    columns = list(dict.fromkeys(key for row in rows for key in row))
    values = [f"  ({', '.join(_sql_literal(row.get(c)) for c in columns)})" for row in rows]
    return "\n".join(
        [
            f"INSERT INTO `{table}` ({', '.join(f'`{c}`' for c in columns)}) VALUES",
            ",\n".join(values) + ";",
            "",
            f"-- {plural(len(rows), 'row')}, {plural(len(columns), 'column')}",
            f"-- Columns: {', '.join(columns)}",
        ]
    )


@reports_invalid_input
def csv_to_html(text: str) -> str:
    rows = parse_csv_rows(text)
    if not rows:
        raise InvalidInputError("enter CSV data")
    header, body = rows[0], rows[1:]
    lines = ["<table>", "  <thead>", "  <tr>"]
    lines += [f"    <th>{html.escape(cell)}</th>" for cell in header]
    lines += ["  </tr>", "  </thead>", "  <tbody>"]
    for row in body:
        lines.append("  <tr>")
        lines += [f"    <td>{html.escape(cell)}</td>" for cell in row]
        lines.append("  </tr>")
    lines += ["  </tbody>", "</table>", "", f"<!-- {plural(len(body), 'row')}, {plural(len(header), 'column')} -->"]
    return "\n".join(lines)


def _cells(line: str) -> list[str]:
    return next(csv.reader([line]), [])


@reports_invalid_input
def csv_filter(text: str) -> str:
    """Keep rows whose named columns contain the given values, case-insensitively."""
    head, _, body = text.partition("\n")
    if not body.strip():
        raise InvalidInputError("enter filter on first line, then CSV data")
    filters = {}
    for clause in head.split(","):
        column, _, wanted = clause.partition("=")
        filters[column.strip().lower()] = wanted.strip().lower()

    header, *data = [line for line in body.strip().split("\n") if line.strip()]
    headers = [cell.strip().lower() for cell in _cells(header)]
    positions = {column: headers.index(column) if column in headers else None for column in filters}

    def keep(line: str) -> bool:
        row = _cells(line)
        for column, wanted in filters.items():
            i = positions[column]
            if i is None or i >= len(row) or wanted not in row[i].strip().lower():
                return False
        return True

    matched = [line for line in data if keep(line)]
    return "\n".join([header.strip(), *matched, "", f"-- Matched {len(matched)} of {len(data)} rows"])


def tsv_csv_toggle(text: str) -> str:
    """Tab-separated input becomes CSV, anything else becomes TSV."""
    if "\t" in text:
        rows = parse_csv_rows(text, "\t")
        buffer = io.StringIO()
        csv.writer(buffer, lineterminator="\n").writerows(rows)
        return buffer.getvalue().rstrip("\n")
    return "\n".join("\t".join(row) for row in parse_csv_rows(text))


def build(ctx: ConverterContext) -> list[ConverterUnit]:
    return [
        TextConverter(
            id="json-prettify", name="JSON Prettify", category="data",
            description="Format JSON with indentation", convert=json_prettify,
        ),
        TextConverter(
            id="json-minify", name="JSON Minify", category="data",
            description="Remove whitespace from JSON", convert=json_minify,
        ),
        TextConverter(
            id="json-escape", name="JSON String Escape", category="data",
            description="Escape a string for use inside JSON", convert=json_escape,
        ),
        TextConverter(
            id="json-unescape", name="JSON String Unescape", category="data",
            description="Unescape a JSON-escaped string", convert=json_unescape,
        ),
        TextConverter(
            id="json-validate", name="JSON Validator", category="data",
            description="Validate JSON and show errors with line numbers", convert=json_validate,
        ),
        TextConverter(
            id="json-sort-keys", name="JSON Sort Keys", category="data",
            description="Sort JSON object keys alphabetically (recursive)", convert=json_sort_keys,
        ),
        TextConverter(
            id="json-flatten", name="JSON Flatten", category="data",
            description="Flatten nested JSON to dot-notation key/value pairs",
            placeholder='{"user":{"name":"Alice","address":{"city":"NYC"}},"tags":["js","react"]}',
            convert=json_flatten,
        ),
        TextConverter(
            id="json-unflatten", name="JSON Unflatten", category="data",
            description="Expand dot-notation flat JSON back to nested structure",
            placeholder='{"user.name":"Alice","tags[0]":"js","tags[1]":"react"}',
            convert=json_unflatten,
        ),
        TextConverter(
            id="csv-to-json", name="CSV to JSON", category="data",
            description="Convert CSV to a JSON array of objects", convert=csv_to_json,
        ),
        TextConverter(
            id="json-to-csv", name="JSON Array → CSV", category="data",
            description="Convert a JSON array of objects to CSV with headers",
            placeholder='[{"name":"Alice","age":30},{"name":"Bob","age":25}]',
            convert=json_to_csv,
        ),
        TextConverter(
            id="tsv-to-json", name="TSV to JSON", category="data",
            description="Convert tab-separated values to JSON", convert=tsv_to_json,
        ),
        TextConverter(
            id="json-to-tsv", name="JSON to TSV", category="data",
            description="Convert a JSON array of objects to tab-separated values", convert=json_to_tsv,
        ),
        TextConverter(
            id="tsv-csv-convert", name="TSV ↔ CSV", category="data",
            description="Convert between tab-separated and comma-separated values", convert=tsv_csv_toggle,
        ),
        TextConverter(
            id="json-to-markdown-table", name="JSON to Markdown Table", category="data",
            description="Convert a JSON array of objects to a Markdown table", convert=json_to_markdown_table,
        ),
        TextConverter(
            id="markdown-table-to-json", name="Markdown Table to JSON", category="data",
            description="Convert a Markdown table to a JSON array", convert=markdown_table_to_json,
        ),
        TextConverter(
            id="ndjson-to-json", name="NDJSON to JSON", category="data",
            description="Convert newline-delimited JSON (NDJSON/JSON Lines) to a JSON array",
            placeholder='{"name":"Alice","age":30}\n{"name":"Bob","age":25}',
            convert=ndjson_to_json,
        ),
        TextConverter(
            id="json-to-ndjson", name="JSON to NDJSON", category="data",
            description="Convert a JSON array to newline-delimited JSON (NDJSON/JSON Lines)",
            convert=json_to_ndjson,
        ),
        TextConverter(
            id="jsonl-to-json", name="JSON Lines ↔ JSON Array", category="data",
            description="Convert between JSON Lines (one JSON per line) and a JSON array",
            convert=jsonl_toggle,
        ),
        TextConverter(
            id="env-to-json", name=".env to JSON", category="data",
            description="Convert .env file format to JSON", convert=env_to_json,
        ),
        TextConverter(
            id="ini-to-json", name="INI to JSON", category="data",
            description="Parse INI config file format to JSON",
            placeholder="[database]\nhost = localhost\nport = 5432\n\n[server]\ndebug = true",
            convert=ini_to_json,
        ),
        TextConverter(
            id="json-to-ini", name="JSON to INI", category="data",
            description="Convert a JSON object to INI config format", convert=json_to_ini,
        ),
        TextConverter(
            id="properties-to-json", name="Properties to JSON", category="data",
            description="Convert Java .properties file format to JSON",
            placeholder="app.name=My App\napp.version=1.0\n# comment\ndb.host=localhost",
            convert=properties_to_json,
        ),
        TextConverter(
            id="json-to-properties", name="JSON to Properties", category="data",
            description="Convert a flat JSON object to Java .properties format", convert=json_to_properties,
        ),
        TextConverter(
            id="json-merge", name="JSON Deep Merge", category="data",
            description='Deep merge two JSON objects separated by a line containing only "---"',
            placeholder='{"a": 1, "b": {"x": 10}}\n---\n{"b": {"y": 20}, "c": 3}',
            convert=json_merge,
        ),
        TextConverter(
            id="json-pick", name="JSON Pick Keys", category="data",
            description="Extract keys from a JSON object or array. First line: key1,key2, then JSON",
            placeholder='name,age\n[{"name":"Alice","age":30,"email":"a@b.com"}]',
            convert=json_pick,
        ),
        TextConverter(
            id="json-group-by", name="JSON Group By", category="data",
            description="Group a JSON array by a key. First line: key name, rest: JSON array",
            placeholder='department\n[{"name":"Alice","department":"Eng"},{"name":"Bob","department":"HR"}]',
            convert=json_group_by,
        ),
        TextConverter(
            id="csv-stats", name="CSV Statistics", category="data",
            description="Compute min, max, sum, mean, median and standard deviation per numeric column",
            placeholder="name,age,score\nAlice,30,92\nBob,25,88\nCarol,35,95",
            convert=csv_stats,
        ),
        TextConverter(
            id="csv-transpose", name="CSV Transpose", category="data",
            description="Swap rows and columns in a CSV",
            placeholder="name,age,city\nAlice,30,NYC\nBob,25,LA",
            convert=csv_transpose,
        ),
        TextConverter(
            id="csv-sort", name="CSV Sort by Column", category="data",
            description='Sort CSV rows by a column. First line: column number (1-based), or "2 desc"',
            placeholder="2\nname,age,city\nAlice,30,NYC\nBob,25,LA\nCarol,35,SF",
            convert=csv_sort,
        ),
        TextConverter(
            id="json-to-sql", name="JSON to SQL INSERT", category="data",
            description="Convert a JSON array of objects to SQL INSERT statements. Table name on the first line, then JSON",
            placeholder='users\n[{"id":1,"name":"Alice","age":30},{"id":2,"name":"Bob","age":25}]',
            convert=json_to_sql,
        ),
        TextConverter(
            id="csv-to-html", name="CSV to HTML Table", category="data",
            description="Convert CSV data to an HTML table",
            placeholder="Name,Age,City\nAlice,30,New York\nBob,25,Los Angeles",
            convert=csv_to_html,
        ),
        TextConverter(
            id="csv-filter", name="CSV Filter / Search", category="data",
            description="Filter CSV rows. First line: column=value (or col1=val1,col2=val2), then the CSV",
            placeholder="city=New York\nName,Age,City\nAlice,30,New York\nBob,25,Los Angeles\nCarol,35,New York",
            convert=csv_filter,
        ),
    ]
