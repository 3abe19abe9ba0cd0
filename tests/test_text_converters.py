"""Tests for text encoders, decoders and line tools."""

import pytest

from convert_everything.config import ToolkitConfig
from convert_everything.converters import text
from convert_everything.providers import ConverterContext


class TestEncodings:
    @pytest.mark.parametrize(
        "encode, decode, plain, encoded",
        [
            (text.base64_encode, text.base64_decode, "Hello World", "SGVsbG8gV29ybGQ="),
            (text.base32_encode, text.base32_decode, "Hello World", "JBSWY3DPEBLW64TMMQ======"),
            (text.base64url_encode, text.base64url_decode, "hi?>", "aGk_Pg"),
            (text.url_encode, text.url_decode, "a b&c/é", "a%20b%26c%2F%C3%A9"),
            (text.hex_encode, text.hex_decode, "Hi", "48 69"),
            (text.binary_encode, text.binary_decode, "Hi", "01001000 01101001"),
        ],
    )
    def test_known_values(self, encode, decode, plain, encoded):
        assert encode(plain) == encoded
        assert decode(encoded) == plain

    def test_base64_utf8(self):
        assert text.base64_decode(text.base64_encode("héllo ✓")) == "héllo ✓"

    def test_invalid_base64(self):
        assert text.base64_decode("not base64!") == "(invalid base64)"

    def test_base32_invalid_character(self):
        assert text.base32_decode("JBSW1") == "(invalid base32 character: 1)"

    def test_hex_odd_length(self):
        assert text.hex_decode("abc") == "(invalid hex: odd length)"

    def test_url_encode_keeps_unreserved(self):
        assert text.url_encode("a-b_c.d!e~f*g'h(i)") == "a-b_c.d!e~f*g'h(i)"

    def test_html(self):
        assert text.html_encode("<a href=\"x\">'</a>") == "&lt;a href=&quot;x&quot;&gt;&#39;&lt;/a&gt;"
        assert text.html_decode("&lt;div&gt;&amp;") == "<div>&"

    def test_unicode_escape_astral(self):
        assert text.unicode_escape("A😀") == "\\u0041\\u{1f600}"
        assert text.unicode_unescape("\\u0041\\u{1f600}") == "A😀"


class TestCiphers:
    def test_rot13_involution(self):
        assert text.rot13("Hello, World!") == "Uryyb, Jbeyq!"
        assert text.rot13(text.rot13("Hello")) == "Hello"

    def test_rot_n(self):
        assert text.rot_n_convert("3\nabc XYZ") == "def ABC"
        assert text.rot_n_convert("-1\nb") == "a"

    def test_rot_n_requires_shift_line(self):
        assert text.rot_n_convert("abc") == "(enter the shift on the first line, then the text)"
        assert text.rot_n_convert("x\nabc") == "(shift must be an integer)"

    def test_atbash(self):
        assert text.atbash("Hello World") == "Svool Dliow"

    def test_caesar_lists_all_shifts(self):
        lines = text.caesar_cipher("abc").split("\n")
        assert len(lines) == 25
        assert lines[0] == "ROT1  bcd"

    def test_morse(self):
        assert text.morse_encode("SOS hi") == "... --- ... / .... .."
        assert text.morse_decode("... --- ... / .... ..") == "SOS HI"

    def test_nato(self):
        assert text.text_to_nato("ab 1") == "Alfa Bravo / One"


class TestLineTools:
    def test_dedupe(self):
        assert text.dedupe_lines("a\nb\na\nc\nb") == "a\nb\nc"

    def test_sort_default_case_insensitive(self):
        assert text.sort_lines("b\nA\nc") == "A\nb\nc"

    def test_sort_modes(self):
        assert text.sort_lines("desc\na\nc\nb") == "c\nb\na"
        assert text.sort_lines("length\naaa\na\naa") == "a\naa\naaa"
        assert text.sort_lines("natural\nfile10\nfile2\nfile1") == "file1\nfile2\nfile10"

    def test_number_lines(self):
        assert text.number_lines("a\nb") == "1  a\n2  b"

    def test_trim_and_remove_empty(self):
        assert text.trim_lines("  a \n b") == "a\nb"
        assert text.remove_empty_lines("a\n\n  \nb") == "a\nb"

    def test_spongecase_skips_non_letters(self):
        assert text.spongecase("ab cd") == "aB cD"

    def test_char_frequency(self):
        report = text.char_frequency("aab")
        assert report.startswith("Total: 3 characters, 2 unique")
        assert "'a'" in report.split("\n")[2]

    def test_braille(self):
        assert "⠓⠊" in text.text_to_braille("hi")
        assert text.text_to_braille("  ") == "(enter text to convert to Braille)"


class TestFindReplace:
    def setup_method(self):
        self.find_replace = text.make_find_replace(500, 200_000)

    def test_literal(self):
        assert self.find_replace("foo → bar\nfoo fighters foo") == "[2 replacements made]\n\nbar fighters bar"

    def test_ascii_arrow(self):
        assert self.find_replace("a -> b\na") == "[1 replacement made]\n\nb"

    def test_regex_with_flags(self):
        assert self.find_replace("/h(i)/i → x\nHi hi") == "[2 replacements made]\n\nx x"

    def test_literal_special_characters(self):
        assert self.find_replace("a.b → X\na.b axb") == "[1 replacement made]\n\nX axb"

    def test_missing_arrow(self):
        assert self.find_replace("foo bar\ntext").startswith("(use → to separate")

    def test_pattern_too_long(self):
        rule = "/" + "a" * 501 + "/ → b"
        assert self.find_replace(f"{rule}\ntext") == "(regex pattern too long, max 500 chars)"

    def test_input_too_long_for_regex(self):
        small = text.make_find_replace(500, 10)
        assert small("/a/ → b\n" + "a" * 11) == "(text too long for regex mode, max 10 chars)"

    def test_invalid_regex(self):
        assert self.find_replace("/(/ → b\ntext").startswith("(invalid regex:")


def test_build_uses_regex_bounds_from_config():
    ctx = ConverterContext(config=ToolkitConfig(regex_max_pattern=3))
    units = {unit.id: unit for unit in text.build(ctx)}
    assert units["text-find-replace"].convert("/abcd/ → x\nabcd") == "(regex pattern too long, max 3 chars)"
    assert units["base64-encode"].category == "encode"
    assert units["text-dedupe"].category == "text"


class TestWordGames:
    def test_vigenere_round_trip(self):
        encoded = text.vigenere("LEMON:encode:ATTACKATDAWN")
        assert encoded.split("\n")[-1] == "Output:  LXFOPVEFRNHR"
        decoded = text.vigenere("lemon:decrypt:lxfo pvef: rnhr")
        assert decoded.split("\n")[-1] == "Output:  atta ckat: dawn"

    def test_vigenere_errors(self):
        assert text.vigenere("key only") == "(format: key:encode:message or key:decode:message)"
        assert text.vigenere("KEY:shuffle:hi") == '(mode must be "encode" or "decode")'
        assert text.vigenere("123:encode:hi") == "(key must contain at least one letter)"

    def test_soundex_single(self):
        assert text.soundex("Robert").split("\n")[1] == "Soundex: R163"

    def test_soundex_groups(self):
        result = text.soundex("Robert Rupert Ashcraft 42")
        assert "  Ashcraft             → A261" in result
        assert "  42                   → (invalid)" in result
        assert result.endswith("Similar sounding: Robert = Rupert (R163)")

    def test_pig_latin(self):
        assert text.pig_latin("Hello world, this is a test") == "Ellohay orldway, isthay isyay ayay esttay"
        assert text.pig_latin("rhythm 42!") == "rhythmay 42!"

    def test_markdown_toc(self):
        source = "# Title\n## Getting Started\n```\n# not a heading\n```\n### Install `pkg`\n## FAQ & [Help](http://x)"
        assert text.markdown_toc(source) == (
            "- [Title](#title)\n"
            "  - [Getting Started](#getting-started)\n"
            "    - [Install pkg](#install-pkg)\n"
            "  - [FAQ & Help](#faq-help)"
        )

    def test_markdown_toc_without_headings(self):
        assert text.markdown_toc("plain text") == "(no headings found, paste Markdown with # headings)"
