"""
Text encoders, decoders and line tools.

Covers the "encode" category (Base64, Base32, URL, HTML entities, hex,
binary, Unicode escapes, classic ciphers, Morse, NATO, Soundex) and the
"text" category (line operations, find & replace, Braille, character stats,
Pig Latin, Markdown tables of contents).
"""

import base64
import binascii
import html
import re
import urllib.parse
from collections import Counter

from ..logging_config import InvalidInputError
from ..providers import ConverterContext
from ..units import ConverterUnit, TextConverter, diagnostic
from .common import reports_invalid_input

MORSE = {
    "A": ".-", "B": "-...", "C": "-.-.", "D": "-..", "E": ".", "F": "..-.",
    "G": "--.", "H": "....", "I": "..", "J": ".---", "K": "-.-", "L": ".-..",
    "M": "--", "N": "-.", "O": "---", "P": ".--.", "Q": "--.-", "R": ".-.",
    "S": "...", "T": "-", "U": "..-", "V": "...-", "W": ".--", "X": "-..-",
    "Y": "-.--", "Z": "--..", "0": "-----", "1": ".----", "2": "..---",
    "3": "...--", "4": "....-", "5": ".....", "6": "-....", "7": "--...",
    "8": "---..", "9": "----.", ".": ".-.-.-", ",": "--..--", "?": "..--..",
    "!": "-.-.--", " ": "/",
}
MORSE_REVERSE = {code: char for char, code in MORSE.items()}

NATO = {
    "A": "Alfa", "B": "Bravo", "C": "Charlie", "D": "Delta", "E": "Echo",
    "F": "Foxtrot", "G": "Golf", "H": "Hotel", "I": "India", "J": "Juliet",
    "K": "Kilo", "L": "Lima", "M": "Mike", "N": "November", "O": "Oscar",
    "P": "Papa", "Q": "Quebec", "R": "Romeo", "S": "Sierra", "T": "Tango",
    "U": "Uniform", "V": "Victor", "W": "Whiskey", "X": "X-ray", "Y": "Yankee",
    "Z": "Zulu", "0": "Zero", "1": "One", "2": "Two", "3": "Three",
    "4": "Four", "5": "Five", "6": "Six", "7": "Seven", "8": "Eight",
    "9": "Niner",
}

BRAILLE = {
    "a": "⠁", "b": "⠃", "c": "⠉", "d": "⠙", "e": "⠑", "f": "⠋", "g": "⠛", "h": "⠓",
    "i": "⠊", "j": "⠚", "k": "⠅", "l": "⠇", "m": "⠍", "n": "⠝", "o": "⠕", "p": "⠏",
    "q": "⠟", "r": "⠗", "s": "⠎", "t": "⠞", "u": "⠥", "v": "⠧", "w": "⠺", "x": "⠭",
    "y": "⠽", "z": "⠵",
    "1": "⠂", "2": "⠆", "3": "⠒", "4": "⠲", "5": "⠢", "6": "⠖", "7": "⠶", "8": "⠦",
    "9": "⠔", "0": "⠴",
    " ": " ", ",": "⠂", ".": "⠲", "?": "⠦", "!": "⠖", ";": "⠆", ":": "⠒", "-": "⠤", "'": "⠄",
}

_UNICODE_ESCAPE = re.compile(r"\\u\{([0-9a-fA-F]+)\}|\\u([0-9a-fA-F]{4})")
_REGEX_RULE = re.compile(r"^/(.+)/([imsx]*)$")


def base64_encode(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


@reports_invalid_input
def base64_decode(text: str) -> str:
    try:
        return base64.b64decode(text.strip(), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError, ValueError):
        raise InvalidInputError("invalid base64") from None


def base64url_encode(text: str) -> str:
    return base64.urlsafe_b64encode(text.encode("utf-8")).decode("ascii").rstrip("=")


@reports_invalid_input
def base64url_decode(text: str) -> str:
    cleaned = text.strip()
    cleaned += "=" * (-len(cleaned) % 4)
    try:
        return base64.urlsafe_b64decode(cleaned).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError, ValueError):
        raise InvalidInputError("invalid base64url") from None


def base32_encode(text: str) -> str:
    return base64.b32encode(text.encode("utf-8")).decode("ascii")


@reports_invalid_input
def base32_decode(text: str) -> str:
    cleaned = text.strip().upper().rstrip("=")
    for char in cleaned:
        if char not in "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567":
            raise InvalidInputError(f"invalid base32 character: {char}")
    cleaned += "=" * (-len(cleaned) % 8)
    try:
        return base64.b32decode(cleaned).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        raise InvalidInputError("invalid base32") from None


def url_encode(text: str) -> str:
    # Same reserved set as encodeURIComponent
    return urllib.parse.quote(text, safe="-_.!~*'()")


@reports_invalid_input
def url_decode(text: str) -> str:
    try:
        return urllib.parse.unquote(text, errors="strict")
    except UnicodeDecodeError:
        raise InvalidInputError("invalid url-encoded string") from None


def html_encode(text: str) -> str:
    return html.escape(text, quote=True).replace("&#x27;", "&#39;")


def html_decode(text: str) -> str:
    return html.unescape(text)


def hex_encode(text: str) -> str:
    return " ".join(f"{b:02x}" for b in text.encode("utf-8"))


@reports_invalid_input
def hex_decode(text: str) -> str:
    cleaned = re.sub(r"\s+", "", text)
    if len(cleaned) % 2:
        raise InvalidInputError("invalid hex: odd length")
    try:
        return bytes.fromhex(cleaned).decode("utf-8", errors="replace")
    except ValueError:
        raise InvalidInputError("invalid hex") from None


def binary_encode(text: str) -> str:
    return " ".join(f"{b:08b}" for b in text.encode("utf-8"))


@reports_invalid_input
def binary_decode(text: str) -> str:
    groups = text.split()
    try:
        data = bytes(int(group, 2) for group in groups)
    except ValueError:
        raise InvalidInputError("invalid binary") from None
    return data.decode("utf-8", errors="replace")


def unicode_escape(text: str) -> str:
    parts = []
    for char in text:
        code = ord(char)
        parts.append(f"\\u{{{code:x}}}" if code > 0xFFFF else f"\\u{code:04x}")
    return "".join(parts)


@reports_invalid_input
def unicode_unescape(text: str) -> str:
    try:
        return _UNICODE_ESCAPE.sub(lambda m: chr(int(m.group(1) or m.group(2), 16)), text)
    except (ValueError, OverflowError):
        raise InvalidInputError("invalid unicode escape") from None


def rot_n(text: str, shift: int) -> str:
    shift %= 26

    def rotate(match: re.Match) -> str:
        char = match.group(0)
        base = ord("A") if char.isupper() else ord("a")
        return chr((ord(char) - base + shift) % 26 + base)

    return re.sub(r"[A-Za-z]", rotate, text)


def rot13(text: str) -> str:
    return rot_n(text, 13)


def rot_n_convert(text: str) -> str:
    """First line is the shift, the rest is the text."""
    head, sep, body = text.partition("\n")
    if not sep:
        return diagnostic("enter the shift on the first line, then the text")
    try:
        shift = int(head.strip())
    except ValueError:
        return diagnostic("shift must be an integer")
    return rot_n(body, shift)


def atbash(text: str) -> str:
    def mirror(match: re.Match) -> str:
        char = match.group(0)
        base = ord("A") if char.isupper() else ord("a")
        return chr(base + 25 - (ord(char) - base))

    return re.sub(r"[A-Za-z]", mirror, text)


def caesar_cipher(text: str) -> str:
    if not text.strip():
        return ""
    return "\n".join(f"ROT{shift:<2} {rot_n(text, shift)}" for shift in range(1, 26))


def morse_encode(text: str) -> str:
    return " ".join(MORSE.get(char, char) for char in text.upper())


def morse_decode(text: str) -> str:
    return "".join(MORSE_REVERSE.get(code, code) for code in text.strip().split(" ") if code)


def text_to_nato(text: str) -> str:
    words = []
    for char in text.upper():
        if char == " ":
            words.append("/")
        else:
            words.append(NATO.get(char, char))
    return " ".join(words)


def dedupe_lines(text: str) -> str:
    return "\n".join(dict.fromkeys(text.split("\n")))


def sort_lines(text: str) -> str:
    first, sep, rest = text.partition("\n")
    mode = first.strip().lower()
    if sep and mode in ("asc", "desc", "length", "natural"):
        lines = rest.split("\n")
    else:
        mode, lines = "asc", text.split("\n")

    if mode == "desc":
        ordered = sorted(lines, key=str.casefold, reverse=True)
    elif mode == "length":
        ordered = sorted(lines, key=len)
    elif mode == "natural":
        ordered = sorted(
            lines,
            key=lambda line: [int(part) if part.isdigit() else part.casefold() for part in re.split(r"(\d+)", line)],
        )
    else:
        ordered = sorted(lines, key=str.casefold)
    return "\n".join(ordered)


def number_lines(text: str) -> str:
    lines = text.split("\n")
    width = len(str(len(lines)))
    return "\n".join(f"{i:>{width}}  {line}" for i, line in enumerate(lines, start=1))


def trim_lines(text: str) -> str:
    return "\n".join(line.strip() for line in text.split("\n"))


def remove_empty_lines(text: str) -> str:
    return "\n".join(line for line in text.split("\n") if line.strip())


def reverse_text(text: str) -> str:
    return text[::-1]


def spongecase(text: str) -> str:
    out = []
    upper = False
    for char in text:
        if char.isalpha():
            out.append(char.upper() if upper else char.lower())
            upper = not upper
        else:
            out.append(char)
    return "".join(out)


def char_frequency(text: str) -> str:
    if not text:
        return ""
    counts = Counter(char for char in text if not char.isspace())
    total = sum(counts.values())
    if not total:
        return diagnostic("no visible characters")
    lines = [f"Total: {total} characters, {len(counts)} unique", ""]
    for char, count in counts.most_common():
        lines.append(f"{char!r:>6}  {count:>6}  {count / total * 100:5.1f}%")
    return "\n".join(lines)


def text_to_braille(text: str) -> str:
    cleaned = text.strip()
    if not cleaned:
        return diagnostic("enter text to convert to Braille")
    braille = "".join(BRAILLE.get(char, char) for char in cleaned.lower())
    return "\n".join(["Braille:", braille, "", "Original:", cleaned])


def vigenere(text: str) -> str:
    """key:encode:message or key:decode:message; only ASCII letters shift."""
    key, sep, rest = text.strip().partition(":")
    mode, sep2, message = rest.partition(":")
    if not (sep and sep2):
        return diagnostic("format: key:encode:message or key:decode:message")
    if not key or not message:
        return diagnostic("key and message required")
    if mode.lower() not in ("encode", "decode", "encrypt", "decrypt"):
        return diagnostic('mode must be "encode" or "decode"')
    decode = mode.lower().startswith("d")
    shifts = [ord(c) - ord("A") for c in key.upper() if "A" <= c <= "Z"]
    if not shifts:
        return diagnostic("key must contain at least one letter")

    out = []
    used = 0
    for char in message:
        if char.isascii() and char.isalpha():
            shift = shifts[used % len(shifts)]
            base = ord("A") if char.isupper() else ord("a")
            offset = -shift if decode else shift
            out.append(chr((ord(char) - base + offset) % 26 + base))
            used += 1
        else:
            out.append(char)
    return "\n".join(
        [
            f"Key:     {key.upper()}",
            f"Mode:    {'decode' if decode else 'encode'}",
            f"Input:   {message}",
            f"Output:  {''.join(out)}",
        ]
    )


SOUNDEX_DIGITS = {
    **dict.fromkeys("BFPV", "1"),
    **dict.fromkeys("CGJKQSXZ", "2"),
    **dict.fromkeys("DT", "3"),
    "L": "4",
    **dict.fromkeys("MN", "5"),
    "R": "6",
}


def soundex_code(word: str) -> str | None:
    letters = [c for c in word.upper() if "A" <= c <= "Z"]
    if not letters:
        return None
    code = letters[0]
    previous = SOUNDEX_DIGITS.get(letters[0], "")
    for char in letters[1:]:
        if len(code) == 4:
            break
        if char in "HW":
            continue
        digit = SOUNDEX_DIGITS.get(char, "")
        if digit and digit != previous:
            code += digit
        previous = digit
    return code.ljust(4, "0")


def soundex(text: str) -> str:
    words = text.split()
    if not words:
        return diagnostic("enter a name or word")
    codes = [soundex_code(word) or "(invalid)" for word in words]
    if len(words) == 1:
        return "\n".join(
            [
                f"Word: {words[0]}",
                f"Soundex: {codes[0]}",
                "",
                "Similar sounding (same code):",
                "  Names with same Soundex share similar pronunciation patterns.",
                "  Example: Robert, Rupert → R163",
            ]
        )
    groups: dict[str, list[str]] = {}
    for word, code in zip(words, codes):
        groups.setdefault(code, []).append(word)
    matches = [f"{' = '.join(ws)} ({code})" for code, ws in groups.items() if len(ws) > 1]
    summary = "Similar sounding: " + ", ".join(matches) if matches else "No similar-sounding words found."
    return "\n".join(
        ["Soundex codes:", *(f"  {word:<20} → {code}" for word, code in zip(words, codes)), "", summary]
    )


_PIG_WORD = re.compile(r"^(.*?)([^a-zA-Z]*)$", re.DOTALL)
_LEADING_CONSONANTS = re.compile(r"^([^aeiouAEIOU]*)(.*)$", re.DOTALL)


def _pig_latin_word(match: re.Match) -> str:
    clean, trailing = _PIG_WORD.match(match.group(0)).groups()
    if not clean:
        return trailing
    if clean[0] in "aeiouAEIOU":
        return f"{clean}yay{trailing}"
    onset, rest = _LEADING_CONSONANTS.match(clean).groups()
    if not rest:
        return f"{clean}ay{trailing}"
    if clean[0].isupper():
        return f"{rest[0].upper()}{rest[1:].lower()}{onset.lower()}ay{trailing}"
    return f"{rest}{onset}ay{trailing}"


def pig_latin(text: str) -> str:
    return re.sub(r"\S+", _pig_latin_word, text)


_HEADING = re.compile(r"^(#{1,6})\s+(.+)$")
_INLINE_MARKUP = re.compile(r"\*\*|__|\*|_|`|~~|\[([^\]]+)\]\([^)]+\)")


def heading_anchor(title: str) -> str:
    """GitHub-style anchor slug."""
    slug = re.sub(r"[^\w\s-]", "", title.lower(), flags=re.ASCII)
    slug = re.sub(r"\s+", "-", slug)
    return re.sub(r"-+", "-", slug)


def markdown_toc(text: str) -> str:
    headings = []
    fenced = False
    for line in text.split("\n"):
        if line.lstrip().startswith(("```", "~~~")):
            fenced = not fenced
            continue
        match = None if fenced else _HEADING.match(line)
        if match:
            title = _INLINE_MARKUP.sub(lambda m: m.group(1) or "", match.group(2)).strip()
            headings.append((len(match.group(1)), title))
    if not headings:
        return diagnostic("no headings found, paste Markdown with # headings")
    top = min(level for level, _ in headings)
    return "\n".join(f"{'  ' * (level - top)}- [{title}](#{heading_anchor(title)})" for level, title in headings)


def make_find_replace(max_pattern: int, max_input: int):
    """Build the find & replace converter with explicit regex bounds."""

    def find_replace(text: str) -> str:
        rule_line, sep, body = text.partition("\n")
        if not sep:
            return diagnostic('enter "find → replace" on first line, then text')
        if not body.strip():
            return diagnostic("no text provided after rule line")

        rule_line = rule_line.strip()
        arrow = "→" if "→" in rule_line else "->" if "->" in rule_line else None
        if arrow is None:
            return diagnostic('use → to separate find and replace, e.g. "foo → bar"')
        find, _, replacement = (part.strip() for part in rule_line.partition(arrow))
        if not find:
            return diagnostic("nothing to find")

        regex_rule = _REGEX_RULE.match(find)
        if regex_rule:
            pattern, flag_chars = regex_rule.groups()
            if len(pattern) > max_pattern:
                return diagnostic(f"regex pattern too long, max {max_pattern} chars")
            if len(body) > max_input:
                return diagnostic(f"text too long for regex mode, max {max_input} chars")
            flags = 0
            for flag in flag_chars:
                flags |= {"i": re.IGNORECASE, "m": re.MULTILINE, "s": re.DOTALL, "x": re.VERBOSE}[flag]
            try:
                compiled = re.compile(pattern, flags)
            except re.error as e:
                return diagnostic(f"invalid regex: {e}")
        else:
            compiled = re.compile(re.escape(find))

        result, count = compiled.subn(lambda _m: replacement, body)
        plural = "" if count == 1 else "s"
        return f"[{count} replacement{plural} made]\n\n{result}"

    return find_replace


def build(ctx: ConverterContext) -> list[ConverterUnit]:
    find_replace = make_find_replace(ctx.config.regex_max_pattern, ctx.config.regex_max_input)

    return [
        TextConverter(
            id="base64-encode", name="Base64 Encode", category="encode",
            description="Encode text to Base64", placeholder="Hello World",
            convert=base64_encode,
        ),
        TextConverter(
            id="base64-decode", name="Base64 Decode", category="encode",
            description="Decode Base64 to text", placeholder="SGVsbG8gV29ybGQ=",
            convert=base64_decode,
        ),
        TextConverter(
            id="base64url-encode", name="Base64URL Encode", category="encode",
            description="Encode text to URL-safe Base64 without padding",
            convert=base64url_encode,
        ),
        TextConverter(
            id="base64url-decode", name="Base64URL Decode", category="encode",
            description="Decode URL-safe Base64 (padding optional)",
            convert=base64url_decode,
        ),
        TextConverter(
            id="base32-encode", name="Base32 Encode", category="encode",
            description="Encode text to Base32", convert=base32_encode,
        ),
        TextConverter(
            id="base32-decode", name="Base32 Decode", category="encode",
            description="Decode Base32 to text", placeholder="JBSWY3DPEBLW64TMMQ======",
            convert=base32_decode,
        ),
        TextConverter(
            id="url-encode", name="URL Encode", category="encode",
            description="Percent-encode text for URLs", convert=url_encode,
        ),
        TextConverter(
            id="url-decode", name="URL Decode", category="encode",
            description="Decode percent-encoded URL text", placeholder="hello%20world",
            convert=url_decode,
        ),
        TextConverter(
            id="html-encode", name="HTML Encode", category="encode",
            description="Escape HTML special characters", convert=html_encode,
        ),
        TextConverter(
            id="html-decode", name="HTML Decode", category="encode",
            description="Unescape HTML entities", placeholder="&lt;div&gt;hello&lt;/div&gt;",
            convert=html_decode,
        ),
        TextConverter(
            id="hex-encode", name="Text to Hex", category="encode",
            description="Convert text to hexadecimal bytes", convert=hex_encode,
        ),
        TextConverter(
            id="hex-decode", name="Hex to Text", category="encode",
            description="Convert hexadecimal bytes to text", placeholder="48 65 6c 6c 6f",
            convert=hex_decode,
        ),
        TextConverter(
            id="binary-encode", name="Text to Binary", category="encode",
            description="Convert text to binary representation", convert=binary_encode,
        ),
        TextConverter(
            id="binary-decode", name="Binary to Text", category="encode",
            description="Convert binary to text", placeholder="01001000 01101001",
            convert=binary_decode,
        ),
        TextConverter(
            id="unicode-escape", name="Unicode Escape", category="encode",
            description="Convert text to \\uXXXX escape sequences", convert=unicode_escape,
        ),
        TextConverter(
            id="unicode-unescape", name="Unicode Unescape", category="encode",
            description="Convert \\uXXXX sequences back to text", convert=unicode_unescape,
        ),
        TextConverter(
            id="rot13", name="ROT13", category="encode",
            description="Apply ROT13 cipher (encode and decode are the same)", convert=rot13,
        ),
        TextConverter(
            id="rot-n", name="ROT-N", category="encode",
            description="Rotate letters by N. Shift on the first line, text below",
            placeholder="5\nHello", convert=rot_n_convert,
        ),
        TextConverter(
            id="atbash", name="Atbash Cipher", category="encode",
            description="Mirror the alphabet (A↔Z, B↔Y, ...)", convert=atbash,
        ),
        TextConverter(
            id="caesar-cipher", name="Caesar Cipher (all shifts)", category="encode",
            description="Show the text under every Caesar shift from 1 to 25", convert=caesar_cipher,
        ),
        TextConverter(
            id="morse-encode", name="Text to Morse Code", category="encode",
            description="Convert text to Morse code", convert=morse_encode,
        ),
        TextConverter(
            id="morse-decode", name="Morse Code to Text", category="encode",
            description="Convert Morse code to text", placeholder=".... . .-.. .-.. ---",
            convert=morse_decode,
        ),
        TextConverter(
            id="text-to-nato", name="NATO Phonetic Alphabet", category="encode",
            description="Convert text to NATO phonetic alphabet", convert=text_to_nato,
        ),
        TextConverter(
            id="vigenere", name="Vigenère Cipher", category="encode",
            description="Vigenère cipher. Format: key:encode:message or key:decode:message",
            placeholder="SECRET:encode:Hello World", convert=vigenere,
        ),
        TextConverter(
            id="soundex", name="Soundex Code", category="encode",
            description="Generate Soundex phonetic codes for names to find similar-sounding words",
            placeholder="Robert", convert=soundex,
        ),
        TextConverter(
            id="text-dedupe", name="Remove Duplicate Lines", category="text",
            description="Remove duplicate lines, keeping the first occurrence", convert=dedupe_lines,
        ),
        TextConverter(
            id="text-sort-lines", name="Sort Lines", category="text",
            description="Sort lines. Optional first line: asc, desc, length or natural",
            convert=sort_lines,
        ),
        TextConverter(
            id="number-lines", name="Number Lines", category="text",
            description="Prefix every line with its line number", convert=number_lines,
        ),
        TextConverter(
            id="trim-lines", name="Trim Lines", category="text",
            description="Strip leading and trailing whitespace from every line", convert=trim_lines,
        ),
        TextConverter(
            id="remove-empty-lines", name="Remove Empty Lines", category="text",
            description="Drop blank lines", convert=remove_empty_lines,
        ),
        TextConverter(
            id="reverse-text", name="Reverse Text", category="text",
            description="Reverse the characters of the text", convert=reverse_text,
        ),
        TextConverter(
            id="spongecase", name="sPoNgEcAsE", category="text",
            description="Alternate letter case", convert=spongecase,
        ),
        TextConverter(
            id="text-char-frequency", name="Character Frequency", category="text",
            description="Count how often each visible character occurs", convert=char_frequency,
        ),
        TextConverter(
            id="text-find-replace", name="Find & Replace Preview", category="text",
            description='First line: "find → replace" (use /pattern/flags for regex). Then paste text.',
            placeholder="foo → bar\nfoo fighters", convert=find_replace,
        ),
        TextConverter(
            id="text-braille", name="Text to Braille", category="text",
            description="Convert text to Unicode Braille (Grade 1, uncontracted)", convert=text_to_braille,
        ),
        TextConverter(
            id="pig-latin", name="Pig Latin", category="text",
            description='Convert text to Pig Latin (moves leading consonants to the end and adds "-ay")',
            placeholder="Hello world, this is a test", convert=pig_latin,
        ),
        TextConverter(
            id="markdown-toc", name="Markdown TOC Generator", category="text",
            description="Generate a table of contents with anchor links from Markdown headings",
            placeholder="# Title\n## Install\n## Usage", convert=markdown_toc,
        ),
    ]


