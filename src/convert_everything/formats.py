"""
Format-pair conversion.

A second way into the toolkit: pick a source format and a target format
and convert between them. The conversion graph is a map keyed by
``(from_id, to_id)``. Text encodings, structured data, colors and unit
quantities each form a group whose members convert to one another through
a shared intermediate (plain text, JSON, RGB or a base unit).

Batch mode converts every line separately so one bad line does not spoil
the rest.
"""

import asyncio
import base64
import binascii
import inspect
import math
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from functools import partial
from typing import Awaitable, Callable, Optional, Union

from .converters import color, data, number, text, utility, web
from .dispatcher import error_diagnostic
from .logging_config import ConverterError, FormatNotSupportedError, InvalidInputError, get_logger
from .providers import CodecProvider, DigestProvider

logger = get_logger("formats")

ConvertFn = Callable[[str], Union[str, Awaitable[str]]]

codecs = CodecProvider()
digests = DigestProvider()


@dataclass(frozen=True)
class Format:
    """A selectable source or target format."""

    id: str
    name: str
    group: str
    placeholder: Optional[str] = None


def strict(func: Callable[..., str]) -> Callable[..., str]:
    """The form of a converter that raises InvalidInputError on bad input.

    Converters decorated with ``reports_invalid_input`` keep it as
    ``__wrapped__``. Output that happens to look like a diagnostic is still
    output.
    """
    return func.__wrapped__


def chain(*funcs: Callable[[str], str]) -> Callable[[str], str]:
    def _convert(value: str) -> str:
        for func in funcs:
            value = func(value)
        return value

    return _convert


def identity(value: str) -> str:
    return value


# Text encodings: id -> (encode from plain text, decode to plain text)

NATO_REVERSE = {word.lower(): char for char, word in text.NATO.items()}
BRAILLE_REVERSE = {}
for _char, _cell in text.BRAILLE.items():
    BRAILLE_REVERSE.setdefault(_cell, _char)


def nato_to_text(value: str) -> str:
    return "".join(" " if word == "/" else NATO_REVERSE.get(word.lower(), word) for word in value.split())


def braille_encode(value: str) -> str:
    return "".join(text.BRAILLE.get(char, char) for char in value.lower())


def braille_decode(value: str) -> str:
    return "".join(BRAILLE_REVERSE.get(cell, cell) for cell in value)


TEXT_CODECS: dict[str, tuple[Callable[[str], str], Optional[Callable[[str], str]]]] = {
    "base64": (text.base64_encode, strict(text.base64_decode)),
    "base32": (text.base32_encode, strict(text.base32_decode)),
    "base64url": (text.base64url_encode, strict(text.base64url_decode)),
    "url": (text.url_encode, strict(text.url_decode)),
    "html-ent": (text.html_encode, text.html_decode),
    "hex": (text.hex_encode, strict(text.hex_decode)),
    "binary": (text.binary_encode, strict(text.binary_decode)),
    "unicode": (text.unicode_escape, strict(text.unicode_unescape)),
    "morse": (text.morse_encode, text.morse_decode),
    "nato": (text.text_to_nato, nato_to_text),
    "rot13": (text.rot13, text.rot13),
    "atbash": (text.atbash, text.atbash),
    "reverse": (text.reverse_text, text.reverse_text),
    "json-escaped": (data.json_escape, strict(data.json_unescape)),
    "braille": (braille_encode, braille_decode),
}

CASE_STYLES: dict[str, tuple[Callable[[str], str], Callable[[str], str]]] = {
    "uppercase": (str.upper, identity),
    "lowercase": (str.lower, identity),
    "titlecase": (utility.title_case, identity),
    "camelcase": (utility.camel_case, lambda v: re.sub(r"([A-Z])", r" \1", v).strip().lower()),
    "snakecase": (utility.snake_case, lambda v: v.replace("_", " ")),
    "kebabcase": (utility.kebab_case, lambda v: v.replace("-", " ")),
}


# Structured data: id -> (to pretty JSON text, from JSON text)

DATA_CODECS: dict[str, tuple[Callable[[str], str], Optional[Callable[[str], str]]]] = {
    "json": (strict(data.json_prettify), strict(data.json_prettify)),
    "json-min": (strict(data.json_prettify), strict(data.json_minify)),
    "yaml": (partial(strict(web.yaml_to_json), codecs), partial(strict(web.json_to_yaml), codecs)),
    "csv": (strict(data.csv_to_json), strict(data.json_to_csv)),
    "tsv": (strict(data.tsv_to_json), strict(data.json_to_tsv)),
    "xml": (strict(web.xml_to_json), strict(web.json_to_xml)),
    "querystring": (web.querystring_to_json, strict(web.json_to_querystring)),
    "toml": (strict(web.toml_to_json), None),
}


# Time


def parse_timestamp(value: str) -> datetime:
    try:
        n = float(value.strip())
    except ValueError:
        raise InvalidInputError("invalid timestamp") from None
    seconds = n / 1000 if n > utility.MILLISECONDS_THRESHOLD else n
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        raise InvalidInputError("timestamp out of range") from None


def parse_any_date(value: str) -> datetime:
    moment = utility.parse_date(value)
    if moment is None:
        raise InvalidInputError("invalid date")
    return moment


TIME_CODECS: dict[str, tuple[Callable[[str], datetime], Callable[[datetime], str]]] = {
    "timestamp": (parse_timestamp, lambda moment: str(math.floor(moment.timestamp()))),
    "iso-date": (parse_any_date, utility.iso_utc),
    "human-date": (parse_any_date, utility.http_date),
}


# Numbers

NUMBER_CODECS: dict[str, tuple[Callable[[str], str], Callable[[str], str]]] = {
    "decimal": (identity, identity),
    "numhex": (strict(number.hex_to_dec), strict(number.dec_to_hex)),
    "numbin": (strict(number.bin_to_dec), strict(number.dec_to_bin)),
    "numoct": (strict(number.oct_to_dec), strict(number.dec_to_oct)),
    "roman": (strict(number.roman_to_dec), strict(number.dec_to_roman)),
}


# Colors

_CMYK = re.compile(r"cmyk\(\s*(\d+(?:\.\d+)?)%?\s*,\s*(\d+(?:\.\d+)?)%?\s*,\s*(\d+(?:\.\d+)?)%?\s*,\s*(\d+(?:\.\d+)?)%?\s*\)", re.I)


def parse_color(value: str) -> color.RGB:
    if match := _CMYK.search(value):
        c, m, y, k = (min(100.0, float(part)) / 100 for part in match.groups())
        return color.RGB(
            *(color.round_half_up(255 * (1 - channel) * (1 - k)) for channel in (c, m, y))
        )
    rgb = color.parse_color(value)
    if rgb is None:
        raise InvalidInputError("invalid color")
    return rgb


def format_cmyk(rgb: color.RGB) -> str:
    r, g, b = (channel / 255 for channel in rgb)
    k = 1 - max(r, g, b)
    if k >= 1:
        return "cmyk(0%, 0%, 0%, 100%)"
    c, m, y = ((1 - channel - k) / (1 - k) for channel in (r, g, b))
    parts = ", ".join(f"{color.round_half_up(part * 100)}%" for part in (c, m, y, k))
    return f"cmyk({parts})"


COLOR_FORMATTERS: dict[str, Callable[[color.RGB], str]] = {
    "color-hex": lambda rgb: rgb.hex,
    "color-rgb": lambda rgb: f"rgb({rgb.r}, {rgb.g}, {rgb.b})",
    "color-hsl": lambda rgb: "hsl({}, {}%, {}%)".format(*rgb.hsl()),
    "color-hsv": lambda rgb: "hsv({}, {}%, {}%)".format(*rgb.hsv()),
    "color-cmyk": format_cmyk,
}


# Quantities: group -> {id: factor to the group's base unit}

QUANTITY_GROUPS: dict[str, dict[str, float]] = {
    "Data Size": {
        "bits": 1 / 8, "bytes": 1, "kilobytes": 1e3, "megabytes": 1e6, "gigabytes": 1e9,
        "terabytes": 1e12, "petabytes": 1e15, "kib": 1024, "mib": 1024**2, "gib": 1024**3,
    },
    "Length": {"mm": 0.001, "cm": 0.01, "inches": 0.0254, "feet": 0.3048, "meters": 1},
    "Distance": {"yards": 0.9144, "km": 1000, "miles": 1609.344, "nautmiles": 1852},
    "Weight": {
        "grams": 0.001, "oz": 0.028349523125, "lb": 0.45359237, "kg": 1, "stone": 6.35029318,
        "ton-short": 907.18474, "ton-metric": 1000,
    },
    "Speed": {"ms": 1, "kmh": 1 / 3.6, "mph": 0.44704, "knots": 1852 / 3600},
    "Area": {"sqft": 0.09290304, "sqm": 1, "acres": 4046.8564224, "hectares": 10000},
    "Volume": {
        "ml": 0.001, "floz": 0.0295735295625, "cups": 0.2365882365, "liters": 1, "gallons": 3.785411784,
    },
    "Duration": {
        "dur-seconds": 1, "dur-minutes": 60, "dur-hours": 3600, "dur-days": 86400, "dur-years": 31557600,
    },
    "Energy": {"joules": 1, "calories": 4.184, "kcal": 4184, "btu": 1055.05585262, "kwh": 3.6e6},
    "Pressure": {"pascal": 1, "mmhg": 133.322387415, "psi": 6894.757293168, "bar": 1e5, "atm": 101325},
    "Angle": {"degrees": 1, "radians": 180 / math.pi, "gradians": 0.9, "turns": 360},
    "Frequency": {"hz": 1, "khz": 1e3, "mhz": 1e6, "ghz": 1e9},
    "Power": {"watts": 1, "kilowatts": 1000, "horsepower": 745.69987158227, "btuh": 0.29307107017},
    "Data Rate": {"bps": 1, "kbps": 1e3, "mbps": 1e6, "gbps": 1e9, "tbps": 1e12},
    "Cooking": {"tsp": 4.92892159375, "tbsp": 14.78676478125, "cup-cook": 236.5882365},
}

# id -> (to Kelvin, from Kelvin, unit suffix)
TEMPERATURES: dict[str, tuple[Callable[[float], float], Callable[[float], float], str]] = {
    "celsius": (lambda c: c + 273.15, lambda k: k - 273.15, "°C"),
    "fahrenheit": (lambda f: (f - 32) * 5 / 9 + 273.15, lambda k: (k - 273.15) * 9 / 5 + 32, "°F"),
    "kelvin": (lambda k: k, lambda k: k, "K"),
    "rankine": (lambda r: r * 5 / 9, lambda k: k * 9 / 5, "°R"),
}

# id -> (to km/L, from km/L); L/100km is inverse so these are not linear factors
FUEL_ECONOMY: dict[str, tuple[Callable[[float], float], Callable[[float], float]]] = {
    "mpg": (lambda v: v * 0.425143707, lambda v: v / 0.425143707),
    "kml": (lambda v: v, lambda v: v),
    "l100km": (lambda v: 100 / v, lambda v: 100 / v),
}

_QUANTITY = re.compile(r"^\s*(-?\d+(?:\.\d+)?(?:e[+-]?\d+)?)", re.IGNORECASE)


def parse_quantity(value: str) -> float:
    match = _QUANTITY.match(value.replace(",", ""))
    if not match:
        raise InvalidInputError("enter a number")
    return float(match.group(1))


def format_quantity(value: float) -> str:
    return f"{value:.10g}"


def _linear(from_factor: float, to_factor: float) -> ConvertFn:
    return lambda value: format_quantity(parse_quantity(value) * from_factor / to_factor)


def _temperature(from_id: str, to_id: str) -> ConvertFn:
    to_kelvin = TEMPERATURES[from_id][0]
    from_kelvin, suffix = TEMPERATURES[to_id][1], TEMPERATURES[to_id][2]
    return lambda value: f"{from_kelvin(to_kelvin(parse_quantity(value))):.2f} {suffix}"


def _fuel(from_id: str, to_id: str) -> ConvertFn:
    to_kml = FUEL_ECONOMY[from_id][0]
    from_kml = FUEL_ECONOMY[to_id][1]

    def convert(value: str) -> str:
        amount = parse_quantity(value)
        if amount <= 0:
            raise InvalidInputError("fuel economy must be positive")
        return format_quantity(round(from_kml(to_kml(amount)), 4))

    return convert


def _hash(algorithm: str) -> ConvertFn:
    return lambda value: digests.hexdigest(algorithm, value.encode("utf-8"))


HASH_ALGORITHMS = {"sha1": "SHA-1", "sha256": "SHA-256", "sha384": "SHA-384", "sha512": "SHA-512", "md5": "MD5"}


def _build_conversion_map() -> dict[tuple[str, str], ConvertFn]:
    conversions: dict[tuple[str, str], ConvertFn] = {}

    for fmt_id, (encode, decode) in TEXT_CODECS.items():
        conversions[("text", fmt_id)] = encode
        conversions[(fmt_id, "text")] = decode
    for source, (_, decode) in TEXT_CODECS.items():
        for target, (encode, _) in TEXT_CODECS.items():
            if source != target:
                conversions[(source, target)] = chain(decode, encode)

    for fmt_id, (apply, revert) in CASE_STYLES.items():
        conversions[("text", fmt_id)] = apply
        conversions[(fmt_id, "text")] = revert
    conversions[("uppercase", "lowercase")] = str.lower
    conversions[("lowercase", "uppercase")] = str.upper

    conversions[("markdown", "html-markup")] = partial(web.markdown_to_html, codecs)
    conversions[("html-markup", "plain")] = web.html_to_text
    conversions[("markdown", "plain")] = chain(partial(web.markdown_to_html, codecs), web.html_to_text)

    for source, (load, _) in DATA_CODECS.items():
        for target, (_, dump) in DATA_CODECS.items():
            if source != target and dump is not None:
                conversions[(source, target)] = chain(load, dump)

    for source, (parse, _) in TIME_CODECS.items():
        for target, (_, render) in TIME_CODECS.items():
            if source != target:
                conversions[(source, target)] = lambda value, p=parse, r=render: r(p(value))

    for fmt_id, algorithm in HASH_ALGORITHMS.items():
        conversions[("text", fmt_id)] = _hash(algorithm)

    for source, (to_decimal, _) in NUMBER_CODECS.items():
        for target, (_, from_decimal) in NUMBER_CODECS.items():
            if source != target:
                conversions[(source, target)] = chain(to_decimal, from_decimal)

    for source in COLOR_FORMATTERS:
        for target, render in COLOR_FORMATTERS.items():
            if source != target:
                conversions[(source, target)] = lambda value, r=render: r(parse_color(value))

    for units in QUANTITY_GROUPS.values():
        for source, source_factor in units.items():
            for target, target_factor in units.items():
                if source != target:
                    conversions[(source, target)] = _linear(source_factor, target_factor)

    for source in TEMPERATURES:
        for target in TEMPERATURES:
            if source != target:
                conversions[(source, target)] = _temperature(source, target)

    for source in FUEL_ECONOMY:
        for target in FUEL_ECONOMY:
            if source != target:
                conversions[(source, target)] = _fuel(source, target)

    return conversions


CONVERSIONS = _build_conversion_map()

_NAMES = {
    "text": ("Text", "Text", "Type or paste text..."),
    "base64": ("Base64", "Text", "SGVsbG8gV29ybGQ="),
    "base32": ("Base32", "Text", "JBSWY3DPEBLW64TMMQ======"),
    "base64url": ("Base64 URL", "Text", "SGVsbG8gV29ybGQ"),
    "url": ("URL Encoded", "Text", "hello%20world"),
    "html-ent": ("HTML Entities", "Text", "&lt;div&gt;hello&lt;/div&gt;"),
    "hex": ("Hex", "Text", "48 65 6c 6c 6f"),
    "binary": ("Binary", "Text", "01001000 01100101 01101100 01101100 01101111"),
    "unicode": ("Unicode Escaped", "Text", "\\u0048\\u0065\\u006c\\u006c\\u006f"),
    "morse": ("Morse Code", "Text", ".... . .-.. .-.. ---"),
    "nato": ("NATO Phonetic", "Text", "Alfa Bravo Charlie"),
    "rot13": ("ROT13", "Text", "Uryyb Jbeyq"),
    "atbash": ("Atbash", "Text", "Svool Dliow"),
    "reverse": ("Reversed", "Text", "dlroW olleH"),
    "json-escaped": ("JSON String", "Text", '"Hello\\nWorld"'),
    "braille": ("Braille", "Text", "⠓⠑⠇⠇⠕"),
    "uppercase": ("UPPERCASE", "Case", "HELLO WORLD"),
    "lowercase": ("lowercase", "Case", "hello world"),
    "titlecase": ("Title Case", "Case", "Hello World"),
    "camelcase": ("camelCase", "Case", "helloWorld"),
    "snakecase": ("snake_case", "Case", "hello_world"),
    "kebabcase": ("kebab-case", "Case", "hello-world"),
    "markdown": ("Markdown", "Markup", "# Hello **world**"),
    "html-markup": ("HTML", "Markup", "<h1>Hello <strong>world</strong></h1>"),
    "plain": ("Plain Text", "Markup", "Hello world"),
    "json": ("JSON", "Data", '{"key": "value"}'),
    "json-min": ("JSON Minified", "Data", '{"key":"value"}'),
    "yaml": ("YAML", "Data", "key: value\nitems:\n  - one\n  - two"),
    "csv": ("CSV", "Data", "name,age\nAlice,30\nBob,25"),
    "tsv": ("TSV", "Data", "name\tage\nAlice\t30\nBob\t25"),
    "xml": ("XML", "Data", "<root><item>hello</item></root>"),
    "querystring": ("Query String", "Data", "key=value&foo=bar"),
    "toml": ("TOML", "Data", 'key = "value"\n[section]\nname = "test"'),
    "timestamp": ("Unix Timestamp", "Time", "1700000000"),
    "iso-date": ("ISO 8601", "Time", "2024-01-15T12:00:00Z"),
    "human-date": ("Human Date", "Time", "Mon, 15 Jan 2024 12:00:00 GMT"),
    "sha1": ("SHA-1 Hash", "Hash", None),
    "sha256": ("SHA-256 Hash", "Hash", None),
    "sha384": ("SHA-384 Hash", "Hash", None),
    "sha512": ("SHA-512 Hash", "Hash", None),
    "md5": ("MD5 Hash", "Hash", None),
    "decimal": ("Decimal", "Number", "255"),
    "numhex": ("Hexadecimal", "Number", "0xFF"),
    "numbin": ("Binary (Num)", "Number", "0b11111111"),
    "numoct": ("Octal", "Number", "0o377"),
    "roman": ("Roman Numeral", "Number", "CCLV"),
    "color-hex": ("Color HEX", "Color", "#ff6b35"),
    "color-rgb": ("Color RGB", "Color", "rgb(255, 107, 53)"),
    "color-hsl": ("Color HSL", "Color", "hsl(16, 100%, 60%)"),
    "color-hsv": ("Color HSV", "Color", "hsv(16, 79%, 100%)"),
    "color-cmyk": ("Color CMYK", "Color", "cmyk(0%, 58%, 79%, 0%)"),
    "celsius": ("Celsius", "Temperature", "100"),
    "fahrenheit": ("Fahrenheit", "Temperature", "212"),
    "kelvin": ("Kelvin", "Temperature", "373.15"),
    "rankine": ("Rankine", "Temperature", "671.67"),
    "mpg": ("Miles/gallon", "Fuel Economy", "30"),
    "kml": ("km/Liter", "Fuel Economy", "12.75"),
    "l100km": ("L/100km", "Fuel Economy", "7.84"),
}

_UNIT_NAMES = {
    "bits": "Bits", "bytes": "Bytes", "kilobytes": "Kilobytes", "megabytes": "Megabytes",
    "gigabytes": "Gigabytes", "terabytes": "Terabytes", "petabytes": "Petabytes",
    "kib": "Kibibytes (KiB)", "mib": "Mebibytes (MiB)", "gib": "Gibibytes (GiB)",
    "mm": "Millimeters", "cm": "Centimeters", "inches": "Inches", "feet": "Feet", "meters": "Meters",
    "yards": "Yards", "km": "Kilometers", "miles": "Miles", "nautmiles": "Nautical Miles",
    "grams": "Grams", "oz": "Ounces", "lb": "Pounds", "kg": "Kilograms", "stone": "Stones",
    "ton-short": "Short Tons (US)", "ton-metric": "Tonnes (metric)",
    "ms": "Meters/sec", "kmh": "km/hour", "mph": "Miles/hour", "knots": "Knots",
    "sqft": "Square Feet", "sqm": "Square Meters", "acres": "Acres", "hectares": "Hectares",
    "ml": "Milliliters", "floz": "Fluid Ounces", "cups": "Cups", "liters": "Liters", "gallons": "Gallons (US)",
    "dur-seconds": "Seconds", "dur-minutes": "Minutes", "dur-hours": "Hours", "dur-days": "Days",
    "dur-years": "Years",
    "joules": "Joules", "calories": "Calories", "kcal": "Kilocalories", "btu": "BTU", "kwh": "Kilowatt-hours",
    "pascal": "Pascals", "mmhg": "mmHg", "psi": "PSI", "bar": "Bar", "atm": "Atmospheres",
    "degrees": "Degrees", "radians": "Radians", "gradians": "Gradians", "turns": "Turns",
    "hz": "Hertz", "khz": "Kilohertz", "mhz": "Megahertz", "ghz": "Gigahertz",
    "watts": "Watts", "kilowatts": "Kilowatts", "horsepower": "Horsepower", "btuh": "BTU/hour",
    "bps": "Bits/sec", "kbps": "Kbps", "mbps": "Mbps", "gbps": "Gbps", "tbps": "Tbps",
    "tsp": "Teaspoons", "tbsp": "Tablespoons", "cup-cook": "Cups (US)",
}

FORMATS: tuple[Format, ...] = tuple(
    [Format(fmt_id, name, group, placeholder) for fmt_id, (name, group, placeholder) in _NAMES.items()]
    + [
        Format(fmt_id, _UNIT_NAMES[fmt_id], group, "1")
        for group, units in QUANTITY_GROUPS.items()
        for fmt_id in units
    ]
)

_BY_ID = {fmt.id: fmt for fmt in FORMATS}


def get_format_by_id(format_id: str) -> Optional[Format]:
    return _BY_ID.get(format_id)


def get_targets(from_id: str) -> list[str]:
    """Target format ids reachable from ``from_id`` in one step."""
    return [target for source, target in CONVERSIONS if source == from_id]


def get_convert_fn(from_id: str, to_id: str) -> Optional[ConvertFn]:
    return CONVERSIONS.get((from_id, to_id))


def _looks_like_base64(value: str) -> bool:
    if not re.fullmatch(r"[A-Za-z0-9+/=]{8,}", value) or len(value) % 4:
        return False
    try:
        base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError):
        return False
    return True


def detect_format(value: str) -> Optional[str]:
    """Guess the format of ``value`` from its content, or None."""
    t = value.strip()
    if not t:
        return None

    if (t.startswith("{") and t.endswith("}")) or (t.startswith("[") and t.endswith("]")):
        if data.json_validate(t).startswith("Valid"):
            return "json"
    if _looks_like_base64(t):
        return "base64"
    if re.fullmatch(r"([0-9a-fA-F]{2}\s)+[0-9a-fA-F]{2}", t):
        return "hex"
    if re.fullmatch(r"#[0-9a-fA-F]{3,8}", t):
        return "color-hex"
    if re.match(r"rgba?\(\s*\d+", t):
        return "color-rgb"
    if re.match(r"hsla?\(\s*\d+", t):
        return "color-hsl"
    if re.match(r"hsv\(\s*\d+", t):
        return "color-hsv"
    if re.fullmatch(r"([01]{8}\s)+[01]{8}", t):
        return "binary"
    if re.fullmatch(r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}", t, re.IGNORECASE):
        return "text"
    if re.fullmatch(r"\d{10,13}", t):
        return "timestamp"
    if re.search(r"%[0-9a-fA-F]{2}", t):
        return "url"
    if t.startswith("<?xml") or (t.startswith("<") and t.endswith(">") and "</" in t):
        return "xml"
    if re.search(r"^\[[\w.]+\]", t, re.MULTILINE) and re.search(r"^\w+\s*=\s*.+", t, re.MULTILINE):
        return "toml"
    if re.search(r"^[a-zA-Z_][a-zA-Z0-9_]*:\s", t, re.MULTILINE) and "{" not in t:
        return "yaml"
    first_line = t.split("\n")[0]
    if "\t" in t and "\n" in t and len(first_line.split("\t")) > 1:
        return "tsv"
    if "," in t and "\n" in t and len(first_line.split(",")) > 1:
        return "csv"
    if re.match(r"[a-zA-Z0-9_]+=", t) and "&" in t:
        return "querystring"
    if re.fullmatch(r"[.\-/ ]+", t) and "." in t:
        return "morse"
    if re.fullmatch(r"[IVXLCDM]{2,15}", t, re.IGNORECASE):
        return "roman"
    if re.fullmatch(r"0o[0-7]+", t, re.IGNORECASE):
        return "numoct"
    if re.fullmatch(r"-?\d+(\.\d+)?", t):
        return "decimal"
    if re.fullmatch(r"0x[0-9a-fA-F]+", t, re.IGNORECASE):
        return "numhex"
    if re.fullmatch(r"0b[01]+", t, re.IGNORECASE):
        return "numbin"
    if re.fullmatch(r"-?\d+(\.\d+)?\s*°?[Cc]", t):
        return "celsius"
    if re.fullmatch(r"-?\d+(\.\d+)?\s*°?[Ff]", t):
        return "fahrenheit"
    if re.fullmatch(r"-?\d+(\.\d+)?\s*[Kk]", t):
        return "kelvin"
    if re.match(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}", t):
        return "iso-date"
    if re.search(r"<[a-z][^>]*>", t, re.IGNORECASE) and "</" in t:
        return "html-markup"
    if re.search(r"^#{1,6}\s", t, re.MULTILINE) or re.search(r"\*\*.+\*\*", t):
        return "markdown"
    return None


async def _call(fn: ConvertFn, value: str) -> str:
    result = fn(value)
    if inspect.isawaitable(result):
        result = await result
    return result


def _line_error(error: Exception) -> str:
    message = error.message if isinstance(error, ConverterError) else str(error)
    return f"(error: {message.strip() or 'unknown'})"


async def convert_pair(from_id: str, to_id: str, value: str, batch: bool = False) -> str:
    """
    Convert ``value`` from one format to another.

    Args:
        from_id: Source format id
        to_id: Target format id
        value: Input text
        batch: Convert each line separately; blank lines stay blank

    Returns:
        The converted text, or a diagnostic on failure

    Raises:
        FormatNotSupportedError: If there is no conversion for the pair
    """
    fn = get_convert_fn(from_id, to_id)
    if fn is None:
        raise FormatNotSupportedError(
            f"no conversion from {from_id} to {to_id}",
            suggestion=f"Targets for {from_id}: {', '.join(get_targets(from_id)) or 'none'}",
        )
    if not value.strip():
        return ""

    if batch:

        async def convert_line(line: str) -> str:
            if not line.strip():
                return ""
            try:
                return await _call(fn, line)
            except Exception as e:
                logger.debug(f"Batch line failed for {from_id} -> {to_id}: {e}")
                return _line_error(e)

        results = await asyncio.gather(*(convert_line(line) for line in value.split("\n")))
        return "\n".join(results)

    try:
        return await _call(fn, value)
    except Exception as e:
        logger.debug(f"Conversion {from_id} -> {to_id} failed: {e}")
        return error_diagnostic(e)
