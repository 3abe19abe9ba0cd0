"""
Everyday utilities: time, identifiers, random strings and text inspection.

Units that use randomness or the clock take them from the context so tests
can pin them down with a SeededRandomSource and a fixed clock.
"""

import base64
import binascii
import ipaddress
import json
import re
import string
import textwrap
import unicodedata
from datetime import datetime, timezone
from email.utils import format_datetime, parsedate_to_datetime
from typing import Optional

from ..providers import ConverterContext
from ..units import ConverterUnit, TextConverter, diagnostic
from .common import parse_int, to_json

PASSWORD_ALPHABET = string.ascii_letters + string.digits + "!@#$%^&*()-_=+"

LOREM_BASE = (
    "Lorem ipsum dolor sit amet, consectetur adipiscing elit. Sed do eiusmod tempor incididunt ut "
    "labore et dolore magna aliqua. Ut enim ad minim veniam, quis nostrud exercitation ullamco laboris "
    "nisi ut aliquip ex ea commodo consequat. Duis aute irure dolor in reprehenderit in voluptate velit "
    "esse cillum dolore eu fugiat nulla pariatur. Excepteur sint occaecat cupidatat non proident, sunt "
    "in culpa qui officia deserunt mollit anim id est laborum."
)
LOREM_EXTRAS = [
    "Curabitur pretium tincidunt lacus. Nulla gravida orci a odio. Nullam varius, turpis et commodo "
    "pharetra, est eros bibendum elit, nec luctus magna felis sollicitudin mauris.",
    "Praesent dapibus, neque id cursus faucibus, tortor neque egestas augue, eu vulputate magna eros eu "
    "erat. Aliquam erat volutpat. Nam dui mi, tincidunt quis, accumsan porttitor, facilisis luctus, metus.",
    "Pellentesque habitant morbi tristique senectus et netus et malesuada fames ac turpis egestas. "
    "Vestibulum tortor quam, feugiat vitae, ultricies eget, tempor sit amet, ante.",
    "Donec eu libero sit amet quam egestas semper. Aenean ultricies mi vitae est. Mauris placerat "
    "eleifend leo. Quisque sit amet est et sapien ullamcorper pharetra.",
]

ONES = [
    "", "one", "two", "three", "four", "five", "six", "seven", "eight", "nine", "ten",
    "eleven", "twelve", "thirteen", "fourteen", "fifteen", "sixteen", "seventeen",
    "eighteen", "nineteen",
]
TENS = ["", "", "twenty", "thirty", "forty", "fifty", "sixty", "seventy", "eighty", "ninety"]
SCALES = ["", "thousand", "million", "billion", "trillion", "quadrillion"]
DIGIT_WORDS = ["zero", "one", "two", "three", "four", "five", "six", "seven", "eight", "nine"]

CARD_PATTERNS = [
    ("Visa", re.compile(r"^4\d{12}(\d{3})?$")),
    ("Mastercard", re.compile(r"^(5[1-5]\d{14}|2(2[2-9]\d|[3-6]\d\d|7([01]\d|20))\d{12})$")),
    ("American Express", re.compile(r"^3[47]\d{13}$")),
    ("Discover", re.compile(r"^6(011|22\d|4[4-9]|5)\d{12,}$")),
    ("JCB", re.compile(r"^35(2[89]|[3-8]\d)\d{12}$")),
]

MAX_EDIT_DISTANCE_CHARS = 5000
# Millisecond timestamps start around 2001-09-09
MILLISECONDS_THRESHOLD = 1e12


def http_date(moment: datetime) -> str:
    return format_datetime(moment.astimezone(timezone.utc), usegmt=True)


def iso_utc(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def timestamp_to_date(text: str) -> str:
    try:
        value = float(text.strip())
    except ValueError:
        return diagnostic("invalid timestamp")
    seconds = value / 1000 if value > MILLISECONDS_THRESHOLD else value
    try:
        moment = datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return diagnostic("invalid timestamp")
    return "\n".join(
        [
            f"UTC:    {http_date(moment)}",
            f"Local:  {moment.astimezone().strftime('%Y-%m-%d %H:%M:%S %Z')}",
            f"ISO:    {iso_utc(moment)}",
        ]
    )


def parse_date(text: str) -> Optional[datetime]:
    """ISO 8601 first, then RFC 2822. Naive values are read as UTC."""
    value = text.strip()
    if not value:
        return None
    try:
        moment = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        try:
            moment = parsedate_to_datetime(value)
        except (TypeError, ValueError, IndexError):
            return None
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


def date_to_timestamp(text: str) -> str:
    moment = parse_date(text)
    if moment is None:
        return diagnostic("invalid date, try ISO 8601 or RFC 2822")
    millis = round(moment.timestamp() * 1000)
    return "\n".join([f"Seconds:      {millis // 1000}", f"Milliseconds: {millis}"])


def _b64url_json(segment: str):
    padded = segment + "=" * (-len(segment) % 4)
    return json.loads(base64.urlsafe_b64decode(padded).decode("utf-8"))


def jwt_decode(text: str) -> str:
    parts = text.strip().split(".")
    if len(parts) != 3:
        return diagnostic("expected 3 dot-separated parts")
    try:
        header, payload = _b64url_json(parts[0]), _b64url_json(parts[1])
    except (binascii.Error, UnicodeDecodeError, ValueError):
        return diagnostic("invalid JWT")

    lines = ["-- Header --", to_json(header), "", "-- Payload --", to_json(payload)]
    if isinstance(payload, dict) and isinstance(payload.get("exp"), (int, float)):
        expires = datetime.fromtimestamp(payload["exp"], tz=timezone.utc)
        lines += ["", f"Expires: {iso_utc(expires)}"]
    return "\n".join(lines)


def lorem_ipsum(text: str) -> str:
    count = parse_int(text, 3, 1, 20)
    paragraphs = [LOREM_BASE] + [LOREM_EXTRAS[(i - 1) % len(LOREM_EXTRAS)] for i in range(1, count)]
    return "\n\n".join(paragraphs)


def char_count(text: str) -> str:
    words = len(text.split())
    lines = len(text.split("\n")) if text else 0
    return "\n".join(
        [
            f"Characters:  {len(text)}",
            f"Words:       {words}",
            f"Lines:       {lines}",
            f"Bytes:       {len(text.encode('utf-8'))}",
        ]
    )


def title_case(text: str) -> str:
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), text)


def camel_case(text: str) -> str:
    return re.sub(r"[^a-zA-Z0-9]+(.)", lambda m: m.group(1).upper(), text.lower())


def snake_case(text: str) -> str:
    return re.sub(r"[\s-]+", "_", re.sub(r"([a-z])([A-Z])", r"\1_\2", text)).lower()


def kebab_case(text: str) -> str:
    return re.sub(r"[\s_]+", "-", re.sub(r"([a-z])([A-Z])", r"\1-\2", text)).lower()


def case_convert(text: str) -> str:
    return "\n".join(
        [
            f"lowercase:   {text.lower()}",
            f"UPPERCASE:   {text.upper()}",
            f"Title Case:  {title_case(text)}",
            f"camelCase:   {camel_case(text)}",
            f"snake_case:  {snake_case(text)}",
            f"kebab-case:  {kebab_case(text)}",
        ]
    )


def slugify(text: str) -> str:
    value = unicodedata.normalize("NFD", text.lower())
    value = "".join(c for c in value if not unicodedata.combining(c))
    value = re.sub(r"[^a-z0-9\s-]", "", value)
    value = re.sub(r"\s+", "-", value)
    value = re.sub(r"-+", "-", value)
    return value.strip("-")


def _unique_matches(pattern: str, text: str, empty: str) -> str:
    found = list(dict.fromkeys(re.findall(pattern, text)))
    return "\n".join(found) if found else diagnostic(empty)


def extract_emails(text: str) -> str:
    return _unique_matches(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}", text, "no emails found")


def extract_urls(text: str) -> str:
    return _unique_matches(r"https?://[^\s<>\"{}|\\^`\[\]]+", text, "no URLs found")


def extract_numbers(text: str) -> str:
    numbers = re.findall(r"-?\d+\.?\d*", text)
    return "\n".join(numbers) if numbers else diagnostic("no numbers found")


def cidr_calc(text: str) -> str:
    value = text.strip()
    if not re.fullmatch(r"\d+\.\d+\.\d+\.\d+/\d{1,3}", value):
        return diagnostic("enter an IP with CIDR notation like 192.168.1.0/24")
    address_text, prefix_text = value.split("/")
    if int(prefix_text) > 32:
        return diagnostic("CIDR prefix must be 0-32")
    try:
        interface = ipaddress.IPv4Interface(value)
    except ValueError:
        return diagnostic("invalid IP octets")

    network = interface.network
    prefix = network.prefixlen
    if prefix >= 31:
        first, last = network.network_address, network.broadcast_address
        hosts = 1 if prefix == 32 else 2
    else:
        first, last = network.network_address + 1, network.broadcast_address - 1
        hosts = network.num_addresses - 2

    def binary(addr: ipaddress.IPv4Address) -> str:
        return ".".join(f"{octet:08b}" for octet in addr.packed)

    first_octet = interface.ip.packed[0]
    ip_class = "A" if first_octet < 128 else "B" if first_octet < 192 else "C" if first_octet < 224 else "D" if first_octet < 240 else "E"
    return "\n".join(
        [
            f"IP Address:    {interface.ip}",
            f"CIDR Prefix:   /{prefix}",
            f"Subnet Mask:   {network.netmask}",
            f"Wildcard Mask: {network.hostmask}",
            "",
            f"Network:       {network.network_address}",
            f"Broadcast:     {network.broadcast_address}",
            f"First Host:    {first}",
            f"Last Host:     {last}",
            f"Total Hosts:   {hosts:,}",
            "",
            f"IP Binary:     {binary(interface.ip)}",
            f"Mask Binary:   {binary(network.netmask)}",
            "",
            f"Class: {ip_class}",
            f"Private: {'Yes' if interface.ip.is_private else 'No'}",
        ]
    )


def _permission_words(bits: int) -> str:
    words = [word for mask, word in ((4, "read"), (2, "write"), (1, "execute")) if bits & mask]
    return ", ".join(words) or "none"


def chmod_calc(text: str) -> str:
    value = text.strip()
    labels = ("Owner", "Group", "Other")

    if numeric := re.fullmatch(r"0?([0-7]{3,4})", value):
        digits = numeric.group(1).rjust(4, "0")
        special, perms = int(digits[0]), [int(d) for d in digits[1:]]
        symbolic = list(
            "".join(("r" if n & 4 else "-") + ("w" if n & 2 else "-") + ("x" if n & 1 else "-") for n in perms)
        )
        for flag, index, on, off in ((4, 2, "s", "S"), (2, 5, "s", "S"), (1, 8, "t", "T")):
            if special & flag:
                symbolic[index] = on if symbolic[index] == "x" else off
        lines = [f"Numeric:  {value}", f"Symbolic: {''.join(symbolic)}", ""]
        lines += [f"{label}: {_permission_words(n)}" for label, n in zip(labels, perms)]
        if special:
            names = [name for flag, name in ((4, "setuid"), (2, "setgid"), (1, "sticky")) if special & flag]
            lines += ["", f"Special: {' '.join(names)}"]
        return "\n".join(lines)

    if symbolic := re.fullmatch(r"([r-][w-][xsS-])([r-][w-][xsS-])([r-][w-][xtT-])", value):
        groups = symbolic.groups()
        perms = [
            (4 if g[0] == "r" else 0) + (2 if g[1] == "w" else 0) + (1 if g[2] in "xst" else 0)
            for g in groups
        ]
        special = (4 if groups[0][2] in "sS" else 0) + (2 if groups[1][2] in "sS" else 0) + (1 if groups[2][2] in "tT" else 0)
        numeric_text = (str(special) if special else "") + "".join(str(n) for n in perms)
        lines = [f"Symbolic: {value}", f"Numeric:  {numeric_text}", ""]
        lines += [f"{label}: {_permission_words(n)}" for label, n in zip(labels, perms)]
        return "\n".join(lines)

    return diagnostic("enter numeric (e.g. 755) or symbolic (e.g. rwxr-xr-x) permissions")


def edit_distance(a: str, b: str) -> int:
    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i]
        for j, cb in enumerate(b, start=1):
            cost = 0 if ca == cb else 1
            current.append(min(previous[j] + 1, current[j - 1] + 1, previous[j - 1] + cost))
        previous = current
    return previous[-1]


def levenshtein(text: str) -> str:
    lines = [line.strip() for line in text.split("\n") if line.strip()]
    if len(lines) < 2:
        return diagnostic("enter two strings, one per line")
    a, b = lines[0], lines[1]
    if max(len(a), len(b)) > MAX_EDIT_DISTANCE_CHARS:
        return diagnostic(f"strings too long, max {MAX_EDIT_DISTANCE_CHARS} chars each")

    distance = edit_distance(a, b)
    longest = max(len(a), len(b))
    similarity = 100.0 if longest == 0 else (longest - distance) / longest * 100
    if distance == 0:
        summary = "Strings are identical."
    elif distance == 1:
        summary = "Strings differ by 1 edit (insert, delete, or substitute)."
    else:
        summary = f"{distance} edits needed to transform A into B."
    return "\n".join(
        [
            f'A: "{a}" ({len(a)} chars)',
            f'B: "{b}" ({len(b)} chars)',
            "",
            f"Edit distance: {distance} operation{'' if distance == 1 else 's'}",
            f"Similarity: {similarity:.1f}%",
            f"Shared characters (approx): {longest - distance}",
            "",
            summary,
        ]
    )


def luhn_valid(digits: str) -> bool:
    total = 0
    for i, char in enumerate(reversed(digits)):
        d = int(char)
        if i % 2:
            d *= 2
            if d > 9:
                d -= 9
        total += d
    return total % 10 == 0


def luhn_check(text: str) -> str:
    number = re.sub(r"[\s-]", "", text.strip())
    if not number:
        return diagnostic("enter a number to validate")
    if not number.isdigit():
        return diagnostic("enter digits only, spaces and dashes are allowed")
    card = next((name for name, pattern in CARD_PATTERNS if pattern.match(number)), "Unknown")
    return "\n".join(
        [
            f"Number:     {number}",
            f"Luhn:       {'VALID ✓' if luhn_valid(number) else 'INVALID ✗'}",
            f"Card type:  {card}",
            f"Length:     {len(number)} digits",
        ]
    )


def _chunk_words(n: int) -> str:
    if n < 20:
        return ONES[n]
    if n < 100:
        return TENS[n // 10] + (f"-{ONES[n % 10]}" if n % 10 else "")
    rest = f" and {_chunk_words(n % 100)}" if n % 100 else ""
    return f"{ONES[n // 100]} hundred{rest}"


def number_to_words(text: str) -> str:
    value = text.strip()
    match = re.fullmatch(r"(-?)(\d+)(?:\.(\d+))?", value)
    if not match:
        return diagnostic("enter a valid number")
    sign, whole, fraction = match.groups()
    whole = whole.lstrip("0") or "0"
    if len(whole) > 3 * len(SCALES):
        return diagnostic("number too large")
    n = int(whole)
    if n >= 1000 ** len(SCALES):
        return diagnostic("number too large")

    if n == 0:
        words = "zero"
    else:
        parts = []
        scale = 0
        while n:
            n, chunk = divmod(n, 1000)
            if chunk:
                parts.insert(0, _chunk_words(chunk) + (f" {SCALES[scale]}" if SCALES[scale] else ""))
            scale += 1
        words = ", ".join(parts)
    if sign:
        words = f"negative {words}"
    if fraction:
        words += " point " + " ".join(DIGIT_WORDS[int(d)] for d in fraction)
    return words


def word_wrap_smart(text: str) -> str:
    """Optional first line is the column width (default 80); paragraphs are rewrapped separately."""
    head, _, rest = text.partition("\n")
    width_match = re.fullmatch(r"\d{1,4}", head.strip())
    width = max(1, int(width_match.group(0))) if width_match else 80
    body = rest if width_match else text
    if not body.strip():
        return diagnostic("enter text to wrap")
    wrapper = textwrap.TextWrapper(width=width, break_long_words=False, break_on_hyphens=False)
    paragraphs = re.split(r"\n{2,}", body.strip())
    return "\n\n".join(wrapper.fill(" ".join(para.split())) for para in paragraphs)


def build(ctx: ConverterContext) -> list[ConverterUnit]:
    random = ctx.random

    def epoch_now(_text: str) -> str:
        now = ctx.clock()
        local = now.astimezone()
        return "\n".join(
            [
                f"Epoch (seconds): {int(now.timestamp())}",
                f"Epoch (ms):      {int(now.timestamp() * 1000)}",
                f"ISO 8601:        {iso_utc(now)}",
                f"UTC:             {http_date(now)}",
                f"Local:           {local.strftime('%Y-%m-%d %H:%M:%S %Z')}",
            ]
        )

    def uuid_generate(_text: str) -> str:
        return random.uuid4()

    def uuid_bulk(text: str) -> str:
        count = parse_int(text, 10, 1, 100)
        return "\n".join(random.uuid4() for _ in range(count))

    def password(text: str) -> str:
        length = parse_int(text, 16, 4, 128)
        return "".join(random.choice(PASSWORD_ALPHABET) for _ in range(length))

    def random_hex(text: str) -> str:
        return random.token_bytes(parse_int(text, 32, 1, 1024)).hex()

    def random_base64(text: str) -> str:
        return base64.b64encode(random.token_bytes(parse_int(text, 32, 1, 1024))).decode("ascii")

    def shuffle_lines(text: str) -> str:
        lines = text.split("\n")
        random.shuffle(lines)
        return "\n".join(lines)

    return [
        TextConverter(
            id="timestamp-to-date", name="Unix Timestamp to Date", category="utility",
            description="Convert Unix timestamp (seconds or ms) to human-readable date",
            placeholder="1700000000", convert=timestamp_to_date,
        ),
        TextConverter(
            id="date-to-timestamp", name="Date to Unix Timestamp", category="utility",
            description="Convert an ISO 8601 or RFC 2822 date to a Unix timestamp",
            placeholder="2024-01-15T12:00:00Z", convert=date_to_timestamp,
        ),
        TextConverter(
            id="epoch-now", name="Current Timestamp", category="utility",
            description="Show the current Unix timestamp and date in various formats",
            is_generator=True, convert=epoch_now,
        ),
        TextConverter(
            id="uuid-generate", name="UUID Generator", category="utility",
            description="Generate a random UUID v4", is_generator=True, convert=uuid_generate,
        ),
        TextConverter(
            id="random-uuid-bulk", name="Bulk UUID Generator", category="utility",
            description="Generate multiple random UUIDs. Enter count (default 10)", convert=uuid_bulk,
        ),
        TextConverter(
            id="random-password", name="Password Generator", category="utility",
            description="Generate a random password. Enter length (default 16)", convert=password,
        ),
        TextConverter(
            id="random-hex", name="Random Hex Generator", category="utility",
            description="Generate a random hex string. Enter byte count (default 32)", convert=random_hex,
        ),
        TextConverter(
            id="random-base64", name="Random Base64 Generator", category="utility",
            description="Generate a random Base64 string. Enter byte count (default 32)",
            convert=random_base64,
        ),
        TextConverter(
            id="shuffle-lines", name="Shuffle Lines", category="utility",
            description="Randomly shuffle the order of lines", convert=shuffle_lines,
        ),
        TextConverter(
            id="lorem-ipsum", name="Lorem Ipsum Generator", category="utility",
            description="Generate lorem ipsum paragraphs. Enter a number (default 3)", convert=lorem_ipsum,
        ),
        TextConverter(
            id="jwt-decode", name="JWT Decode", category="utility",
            description="Decode a JSON Web Token (does not verify signature)",
            placeholder=(
                "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9.eyJzdWIiOiIxMjM0NTY3ODkwIn0."
                "dozjgNryP4J3jVmNHl0w5N_XgL0n3I9PlFUP0THsR8U"
            ),
            convert=jwt_decode,
        ),
        TextConverter(
            id="char-count", name="Character & Word Count", category="utility",
            description="Count characters, words, lines and bytes in text", convert=char_count,
        ),
        TextConverter(
            id="case-convert", name="Case Converter", category="utility",
            description="Convert text to lower, upper, title, camel, snake and kebab case",
            convert=case_convert,
        ),
        TextConverter(
            id="slugify", name="Slugify", category="utility",
            description="Convert text to a URL-friendly slug", convert=slugify,
        ),
        TextConverter(
            id="extract-emails", name="Extract Emails", category="utility",
            description="Extract all email addresses from text", convert=extract_emails,
        ),
        TextConverter(
            id="extract-urls", name="Extract URLs", category="utility",
            description="Extract all URLs from text", convert=extract_urls,
        ),
        TextConverter(
            id="extract-numbers", name="Extract Numbers", category="utility",
            description="Extract all numbers from text", convert=extract_numbers,
        ),
        TextConverter(
            id="cidr-calc", name="CIDR / Subnet Calculator", category="utility",
            description="Calculate subnet details from IP/CIDR notation, e.g. 192.168.1.0/24",
            placeholder="192.168.1.0/24", convert=cidr_calc,
        ),
        TextConverter(
            id="chmod-calc", name="Chmod Calculator", category="utility",
            description="Convert between numeric and symbolic file permissions (e.g. 755 or rwxr-xr-x)",
            placeholder="755", convert=chmod_calc,
        ),
        TextConverter(
            id="levenshtein", name="String Edit Distance", category="utility",
            description="Levenshtein edit distance and similarity between two strings, one per line",
            placeholder="kitten\nsitting", convert=levenshtein,
        ),
        TextConverter(
            id="luhn-check", name="Luhn Check", category="utility",
            description="Validate credit card numbers using the Luhn algorithm", convert=luhn_check,
        ),
        TextConverter(
            id="number-to-words", name="Number to Words", category="utility",
            description="Convert a number to its English word representation",
            placeholder="1234.5", convert=number_to_words,
        ),
        TextConverter(
            id="word-wrap-smart", name="Smart Word Wrap", category="utility",
            description="Wrap text at word boundaries. Optional first line: column width (default 80)",
            placeholder="40\nThis is a long line of text that will be wrapped at the given column width.",
            convert=word_wrap_smart,
        ),
    ]
