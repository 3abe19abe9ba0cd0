"""
Web and markup formats.

YAML goes through PyYAML and Markdown through markdown-it-py, both loaded
lazily from the context's CodecProvider. TOML, XML, HTML and URLs use the
standard library parsers.
"""

import json
import re
import tomllib
import urllib.parse
import xml.etree.ElementTree as ET
from functools import partial
from html.parser import HTMLParser
from typing import Any

from ..logging_config import InvalidInputError
from ..providers import CodecProvider, ConverterContext
from ..units import ConverterUnit, TextConverter, diagnostic
from .common import reports_invalid_input, to_json
from .data import cell_text, load_json

REGEX_MATCH_LIMIT = 1000

_BLOCK_TAGS = {
    "address", "article", "aside", "blockquote", "br", "div", "dl", "dt", "dd",
    "footer", "h1", "h2", "h3", "h4", "h5", "h6", "header", "hr", "li", "main",
    "nav", "ol", "p", "pre", "section", "table", "tr", "ul",
}


def regex_guard(pattern: str, text: str, max_pattern: int, max_input: int) -> str | None:
    """Return a diagnostic if a user-supplied regex exceeds the size bounds."""
    if len(pattern) > max_pattern:
        return diagnostic(f"regex pattern too long, max {max_pattern} chars")
    if len(text) > max_input:
        return diagnostic(f"text too long for regex mode, max {max_input} chars")
    return None


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def element_to_value(element: ET.Element) -> Any:
    """Attributes become "@name", repeated children become lists."""
    obj: dict[str, Any] = {f"@{k}": v for k, v in element.attrib.items()}
    text = (element.text or "").strip()

    for child in element:
        name = _local_name(child.tag)
        value = element_to_value(child)
        if name in obj:
            if not isinstance(obj[name], list):
                obj[name] = [obj[name]]
            obj[name].append(value)
        else:
            obj[name] = value

    if text:
        if not obj:
            return text
        obj["#text"] = text
    return obj


@reports_invalid_input
def xml_to_json(text: str) -> str:
    try:
        root = ET.fromstring(text.strip())
    except ET.ParseError as e:
        raise InvalidInputError(f"invalid XML: {str(e)[:100]}") from None
    return to_json({_local_name(root.tag): element_to_value(root)})


def _xml_escape(value: str) -> str:
    return value.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def value_to_xml(value: Any, tag: str) -> str:
    if value is None:
        return f"<{tag}/>"
    if isinstance(value, list):
        return "\n".join(value_to_xml(item, tag) for item in value)
    if isinstance(value, dict):
        children = "\n  ".join(value_to_xml(v, k) for k, v in value.items())
        return f"<{tag}>\n  {children}\n</{tag}>"
    return f"<{tag}>{_xml_escape(cell_text(value))}</{tag}>"


@reports_invalid_input
def json_to_xml(text: str) -> str:
    try:
        data = load_json(text)
    except json.JSONDecodeError:
        raise InvalidInputError("invalid JSON") from None
    if isinstance(data, dict) and len(data) == 1:
        (tag, value), = data.items()
        return '<?xml version="1.0"?>\n' + value_to_xml(value, tag)
    return '<?xml version="1.0"?>\n' + value_to_xml(data, "root")


@reports_invalid_input
def toml_to_json(text: str) -> str:
    try:
        return to_json(tomllib.loads(text), indent=2)
    except tomllib.TOMLDecodeError as e:
        raise InvalidInputError(f"invalid TOML: {e}") from None
    except ValueError:
        raise InvalidInputError("number too large") from None


class _TextExtractor(HTMLParser):
    def __init__(self):
        super().__init__(convert_charrefs=True)
        self.parts: list[str] = []
        self._skip = 0

    def handle_starttag(self, tag, attrs):
        if tag in ("script", "style"):
            self._skip += 1
        elif tag in _BLOCK_TAGS:
            self.parts.append("\n")

    def handle_endtag(self, tag):
        if tag in ("script", "style"):
            self._skip = max(0, self._skip - 1)
        elif tag in _BLOCK_TAGS:
            self.parts.append("\n")

    def handle_data(self, data):
        if not self._skip:
            self.parts.append(data)


def html_to_text(text: str) -> str:
    parser = _TextExtractor()
    parser.feed(text)
    parser.close()
    joined = "".join(parser.parts)
    lines = [re.sub(r"[ \t]+", " ", line).strip() for line in joined.split("\n")]
    return re.sub(r"\n{3,}", "\n\n", "\n".join(lines)).strip()


@reports_invalid_input
def json_to_querystring(text: str) -> str:
    try:
        data = load_json(text)
    except json.JSONDecodeError:
        raise InvalidInputError("invalid JSON") from None
    if not isinstance(data, dict):
        raise InvalidInputError("expected a JSON object")
    return urllib.parse.urlencode({k: cell_text(v) for k, v in data.items()})


def querystring_to_json(text: str) -> str:
    query = text.strip().removeprefix("?")
    return to_json(dict(urllib.parse.parse_qsl(query, keep_blank_values=True)))


@reports_invalid_input
def url_parser(text: str) -> str:
    candidate = text.strip()
    parsed = urllib.parse.urlsplit(candidate)
    if not parsed.scheme or not (parsed.netloc or parsed.path):
        raise InvalidInputError("invalid URL")
    try:
        port = parsed.port
    except ValueError:
        raise InvalidInputError("invalid URL") from None

    host = parsed.hostname or ""
    origin = f"{parsed.scheme}://{parsed.netloc.rsplit('@', 1)[-1]}" if parsed.netloc else "null"
    lines = [
        f"Protocol:  {parsed.scheme}:",
        f"Host:      {parsed.netloc.rsplit('@', 1)[-1]}",
        f"Hostname:  {host}",
        f"Port:      {port if port is not None else '(default)'}",
        f"Pathname:  {parsed.path or '/'}",
        f"Search:    {'?' + parsed.query if parsed.query else '(none)'}",
        f"Hash:      {'#' + parsed.fragment if parsed.fragment else '(none)'}",
        f"Origin:    {origin}",
    ]
    params = urllib.parse.parse_qsl(parsed.query, keep_blank_values=True)
    if params:
        lines += ["", "-- Query Parameters --"]
        lines += [f"  {key} = {value}" for key, value in params]
    return "\n".join(lines)


def css_minify(text: str) -> str:
    out = re.sub(r"/\*[\s\S]*?\*/", "", text)
    out = re.sub(r"\s+", " ", out)
    out = re.sub(r"\s*([{}:;,>+~])\s*", r"\1", out)
    return out.replace(";}", "}").strip()


def html_minify(text: str) -> str:
    out = re.sub(r"<!--[\s\S]*?-->", "", text)
    out = re.sub(r">\s+<", "><", out)
    out = re.sub(r"\s{2,}", " ", out)
    return out.strip()


@reports_invalid_input
def yaml_to_json(codecs: CodecProvider, text: str) -> str:
    """Single documents become a value, multi-document streams a list."""
    yaml = codecs.load_yaml()
    try:
        documents = [doc for doc in yaml.safe_load_all(text)]
    except yaml.YAMLError as e:
        mark = getattr(e, "problem_mark", None)
        where = f" at line {mark.line + 1}" if mark is not None else ""
        raise InvalidInputError(f"invalid YAML{where}")
    except ValueError:
        raise InvalidInputError("number too large") from None
    data = documents[0] if len(documents) == 1 else documents
    return json.dumps(data, indent=2, ensure_ascii=False, default=str)


@reports_invalid_input
def json_to_yaml(codecs: CodecProvider, text: str) -> str:
    try:
        data = load_json(text)
    except json.JSONDecodeError:
        raise InvalidInputError("invalid JSON") from None
    yaml = codecs.load_yaml()
    return yaml.safe_dump(data, sort_keys=False, allow_unicode=True, default_flow_style=False).rstrip("\n")


def _env_pairs(value: Any, path: list[str]):
    if isinstance(value, dict):
        for key, child in value.items():
            yield from _env_pairs(child, path + [str(key)])
    elif not isinstance(value, list) and path:
        yield "__".join(path).upper().replace("-", "_"), cell_text(value)


@reports_invalid_input
def yaml_to_env(codecs: CodecProvider, text: str) -> str:
    """Nested keys join with "__"; list values have no .env form and are skipped."""
    if not text.strip():
        raise InvalidInputError("paste YAML to convert")
    yaml = codecs.load_yaml()
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        mark = getattr(e, "problem_mark", None)
        where = f" at line {mark.line + 1}" if mark is not None else ""
        raise InvalidInputError(f"invalid YAML{where}") from None
    except ValueError:
        raise InvalidInputError("number too large") from None
    if not isinstance(data, dict):
        raise InvalidInputError("expected a YAML mapping")
    lines = [f'{key}="{value}"' if " " in value else f"{key}={value}" for key, value in _env_pairs(data, [])]
    if not lines:
        raise InvalidInputError("no values found")
    return "\n".join(lines)


def markdown_to_html(codecs: CodecProvider, text: str) -> str:
    markdown_it = codecs.load_markdown()
    renderer = markdown_it.MarkdownIt("commonmark").enable("table").enable("strikethrough")
    return renderer.render(text).rstrip("\n")


def build(ctx: ConverterContext) -> list[ConverterUnit]:
    codecs = ctx.codecs
    max_pattern = ctx.config.regex_max_pattern
    max_input = ctx.config.regex_max_input

    def regex_tester(text: str) -> str:
        pattern, _, subject = text.partition("\n")
        if not pattern:
            return diagnostic("enter a regex pattern on the first line, test string below")
        if guard := regex_guard(pattern, subject, max_pattern, max_input):
            return guard
        try:
            compiled = re.compile(pattern, re.MULTILINE)
        except re.error as e:
            return diagnostic(f"invalid regex: {e}")

        output = []
        for i, match in enumerate(compiled.finditer(subject), start=1):
            line = f'Match {i}: "{match.group(0)}" (index {match.start()})'
            if match.groups():
                groups = ", ".join(f'${j}="{g or ""}"' for j, g in enumerate(match.groups(), start=1))
                line += f"\n  Groups: {groups}"
            output.append(line)
            if i >= REGEX_MATCH_LIMIT:
                output.append(diagnostic(f"match limit reached: showing first {REGEX_MATCH_LIMIT}"))
                break
        if not output:
            return diagnostic("no matches")
        return "\n".join(output)

    return [
        TextConverter(
            id="yaml-to-json", name="YAML to JSON", category="web",
            description="Convert YAML to JSON", placeholder="name: Alice\ntags:\n  - a\n  - b",
            convert=partial(yaml_to_json, codecs),
        ),
        TextConverter(
            id="json-to-yaml", name="JSON to YAML", category="web",
            description="Convert JSON to YAML format", convert=partial(json_to_yaml, codecs),
        ),
        TextConverter(
            id="yaml-to-env", name="YAML to .env", category="data",
            description="Convert YAML to a .env file. Nested keys become UPPER_SNAKE_CASE joined with __",
            placeholder="database:\n  host: localhost\n  port: 5432", convert=partial(yaml_to_env, codecs),
        ),
        TextConverter(
            id="toml-to-json", name="TOML to JSON", category="web",
            description="Convert TOML to JSON", placeholder='[server]\nhost = "localhost"\nport = 8080',
            convert=toml_to_json,
        ),
        TextConverter(
            id="xml-to-json", name="XML to JSON", category="web",
            description="Convert XML to JSON. Attributes become @name keys", convert=xml_to_json,
        ),
        TextConverter(
            id="json-to-xml", name="JSON to XML", category="web",
            description="Convert JSON to basic XML", convert=json_to_xml,
        ),
        TextConverter(
            id="markdown-to-html", name="Markdown → HTML", category="web",
            description="Render Markdown (CommonMark plus tables) to HTML",
            placeholder="# Title\n\nSome **bold** text", convert=partial(markdown_to_html, codecs),
        ),
        TextConverter(
            id="html-to-text", name="HTML to Plain Text", category="web",
            description="Strip all HTML tags and return plain text", convert=html_to_text,
        ),
        TextConverter(
            id="json-to-querystring", name="JSON to Query String", category="web",
            description="Convert a JSON object to URL query string", convert=json_to_querystring,
        ),
        TextConverter(
            id="querystring-to-json", name="Query String to JSON", category="web",
            description="Convert URL query string to JSON", placeholder="?a=1&b=hello",
            convert=querystring_to_json,
        ),
        TextConverter(
            id="url-parser", name="URL Parser", category="web",
            description="Parse a URL into its components",
            placeholder="https://example.com:8080/path?q=1#top", convert=url_parser,
        ),
        TextConverter(
            id="css-minify", name="CSS Minify", category="web",
            description="Minify CSS by removing whitespace and comments", convert=css_minify,
        ),
        TextConverter(
            id="html-minify", name="HTML Minify", category="web",
            description="Minify HTML by removing comments and extra whitespace", convert=html_minify,
        ),
        TextConverter(
            id="regex-tester", name="Regex Tester", category="web",
            description="Test a regex pattern. First line is the pattern, rest is the test string",
            placeholder="\\d+\nThe answer is 42 and 7", convert=regex_tester,
        ),
    ]
