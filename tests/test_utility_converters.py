"""Tests for time, identifier and inspection utilities."""

import uuid

import pytest

from convert_everything.config import ToolkitConfig
from convert_everything.converters import utility
from convert_everything.providers import ConverterContext, SeededRandomSource


@pytest.fixture
def units(build_units):
    return build_units(utility)


class TestTime:
    def test_timestamp_seconds_and_millis_agree(self):
        seconds = utility.timestamp_to_date("1700000000")
        assert "UTC:    Tue, 14 Nov 2023 22:13:20 GMT" in seconds
        assert "ISO:    2023-11-14T22:13:20.000Z" in seconds
        millis = utility.timestamp_to_date("1700000000000")
        assert millis.split("\n")[0] == seconds.split("\n")[0]

    def test_invalid_timestamp(self):
        assert utility.timestamp_to_date("soon") == "(invalid timestamp)"

    @pytest.mark.parametrize(
        "value",
        ["2024-01-15T12:00:00Z", "2024-01-15T12:00:00", "Mon, 15 Jan 2024 12:00:00 GMT"],
    )
    def test_date_to_timestamp(self, value):
        assert utility.date_to_timestamp(value) == "Seconds:      1705320000\nMilliseconds: 1705320000000"

    def test_invalid_date(self):
        assert utility.date_to_timestamp("next tuesday") == "(invalid date, try ISO 8601 or RFC 2822)"

    def test_epoch_now_uses_context_clock(self, units):
        report = units["epoch-now"].convert("")
        assert "Epoch (seconds): 1705320000" in report
        assert "ISO 8601:        2024-01-15T12:00:00.000Z" in report
        assert "UTC:             Mon, 15 Jan 2024 12:00:00 GMT" in report


class TestRandomness:
    def test_uuid_generate(self, units):
        assert uuid.UUID(units["uuid-generate"].convert("")).version == 4

    def test_bulk_count_clamped(self, units):
        assert len(units["random-uuid-bulk"].convert("3").split("\n")) == 3
        assert len(units["random-uuid-bulk"].convert("500").split("\n")) == 100

    def test_password_length_and_alphabet(self, units):
        value = units["random-password"].convert("")
        assert len(value) == 16
        assert set(value) <= set(utility.PASSWORD_ALPHABET)
        assert len(units["random-password"].convert("2")) == 4

    def test_random_hex(self, units):
        value = units["random-hex"].convert("4")
        assert len(value) == 8
        int(value, 16)

    def test_seeded_output_is_reproducible(self):
        def password():
            ctx = ConverterContext(config=ToolkitConfig(), random=SeededRandomSource(9))
            units = {unit.id: unit for unit in utility.build(ctx)}
            return units["random-password"].convert("24")

        assert password() == password()

    def test_shuffle_keeps_lines(self, units):
        lines = [str(i) for i in range(10)]
        shuffled = units["shuffle-lines"].convert("\n".join(lines)).split("\n")
        assert sorted(shuffled) == sorted(lines)


class TestText:
    def test_lorem(self):
        paragraphs = utility.lorem_ipsum("2").split("\n\n")
        assert len(paragraphs) == 2
        assert paragraphs[0].startswith("Lorem ipsum")
        assert len(utility.lorem_ipsum("").split("\n\n")) == 3

    def test_char_count(self):
        assert utility.char_count("a b\nc") == "Characters:  5\nWords:       3\nLines:       2\nBytes:       5"

    def test_case_convert(self):
        report = utility.case_convert("hello world")
        assert "camelCase:   helloWorld" in report
        assert "snake_case:  hello_world" in report
        assert "kebab-case:  hello-world" in report

    def test_slugify(self):
        assert utility.slugify("Héllo, World!  Test") == "hello-world-test"

    def test_extractors(self):
        assert utility.extract_emails("a@b.com and a@b.com, c@d.org") == "a@b.com\nc@d.org"
        assert utility.extract_urls("see https://x.io/a?b=1 now") == "https://x.io/a?b=1"
        assert utility.extract_numbers("a -1.5 and 42") == "-1.5\n42"
        assert utility.extract_numbers("none") == "(no numbers found)"

    def test_jwt(self):
        token = (
            "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9.eyJzdWIiOiIxMjM0NTY3ODkwIn0."
            "dozjgNryP4J3jVmNHl0w5N_XgL0n3I9PlFUP0THsR8U"
        )
        report = utility.jwt_decode(token)
        assert '"alg": "HS256"' in report
        assert '"sub": "1234567890"' in report
        assert utility.jwt_decode("a.b") == "(expected 3 dot-separated parts)"


class TestNetworkAndPermissions:
    def test_cidr(self):
        report = utility.cidr_calc("192.168.1.0/24")
        assert "Subnet Mask:   255.255.255.0" in report
        assert "First Host:    192.168.1.1" in report
        assert "Last Host:     192.168.1.254" in report
        assert "Total Hosts:   254" in report
        assert report.endswith("Class: C\nPrivate: Yes")

    def test_cidr_single_host(self):
        assert "Total Hosts:   1" in utility.cidr_calc("8.8.8.8/32")

    def test_cidr_validation(self):
        assert utility.cidr_calc("10.0.0.0/33") == "(CIDR prefix must be 0-32)"
        assert utility.cidr_calc("300.0.0.0/8") == "(invalid IP octets)"
        assert utility.cidr_calc("10.0.0.0").startswith("(enter an IP with CIDR")

    def test_chmod_numeric(self):
        report = utility.chmod_calc("755")
        assert "Symbolic: rwxr-xr-x" in report
        assert "Owner: read, write, execute" in report
        assert "Other: read, execute" in report

    def test_chmod_special_bits(self):
        report = utility.chmod_calc("4755")
        assert "Symbolic: rwsr-xr-x" in report
        assert report.endswith("Special: setuid")

    def test_chmod_symbolic(self):
        assert "Numeric:  644" in utility.chmod_calc("rw-r--r--")


class TestChecks:
    def test_levenshtein(self):
        report = utility.levenshtein("kitten\nsitting")
        assert "Edit distance: 3 operations" in report
        assert "Similarity: 57.1%" in report

    def test_luhn(self):
        report = utility.luhn_check("4111 1111 1111 1111")
        assert "Luhn:       VALID ✓" in report
        assert "Card type:  Visa" in report
        assert "INVALID" in utility.luhn_check("4111111111111112")

    @pytest.mark.parametrize(
        "value, words",
        [
            ("0", "zero"),
            ("123", "one hundred and twenty-three"),
            ("1001", "one thousand, one"),
            ("-5.25", "negative five point two five"),
        ],
    )
    def test_number_to_words(self, value, words):
        assert utility.number_to_words(value) == words

    def test_number_to_words_too_large(self):
        assert utility.number_to_words("9" * 5000) == "(number too large)"
        assert utility.number_to_words("0" * 40 + "7") == "seven"


class TestWordWrap:
    def test_width_from_first_line(self):
        assert utility.word_wrap_smart("10\nThe quick brown fox jumps") == "The quick\nbrown fox\njumps"

    def test_paragraphs_kept_and_long_words_unbroken(self):
        source = "5\nab cd\nef\n\n\nextraordinary"
        assert utility.word_wrap_smart(source) == "ab cd\nef\n\nextraordinary"

    def test_default_width(self):
        words = " ".join(["word"] * 30)
        assert all(len(line) <= 80 for line in utility.word_wrap_smart(words).split("\n"))

    def test_blank(self):
        assert utility.word_wrap_smart("40\n  ") == "(enter text to wrap)"
