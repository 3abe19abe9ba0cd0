"""Tests for number bases, numerals and number theory."""

import pytest

from convert_everything.converters import number
from convert_everything.logging_config import InvalidInputError


class TestBases:
    @pytest.mark.parametrize(
        "to_fn, from_fn, decimal, encoded",
        [
            (number.dec_to_hex, number.hex_to_dec, "255", "0xFF"),
            (number.dec_to_bin, number.bin_to_dec, "5", "0b101"),
            (number.dec_to_oct, number.oct_to_dec, "8", "0o10"),
        ],
    )
    def test_prefixed(self, to_fn, from_fn, decimal, encoded):
        assert to_fn(decimal) == encoded
        assert from_fn(encoded) == decimal

    def test_negative(self):
        assert number.dec_to_hex("-255") == "-0xFF"

    def test_prefix_optional_and_case_insensitive(self):
        assert number.hex_to_dec("ff") == "255"
        assert number.hex_to_dec("0XfF") == "255"

    def test_leading_prefix_parse(self):
        assert number.dec_to_hex("42abc") == "0x2A"

    def test_invalid(self):
        assert number.dec_to_hex("abc") == "(invalid number)"
        assert number.hex_to_dec("zz") == "(invalid hex)"
        assert number.bin_to_dec("2") == "(invalid binary)"

    def test_number_base(self):
        assert number.number_base("FF:16:2") == "11111111"
        assert number.number_base("z:36:10") == "35"
        assert number.number_base("1:1:2") == "(bases must be 2-36)"
        assert number.number_base("12") == "(format: number:fromBase:toBase, e.g. FF:16:10)"


class TestRoman:
    def test_roundtrip(self):
        assert number.dec_to_roman("1994") == "MCMXCIV"
        assert number.roman_to_dec("mcmxciv") == "1994"

    def test_range(self):
        assert number.dec_to_roman("4000") == "(enter a number between 1 and 3999)"
        assert number.dec_to_roman("0") == "(enter a number between 1 and 3999)"

    def test_invalid_character(self):
        assert number.roman_to_dec("XIZ") == "(invalid character: Z)"


class TestNumberTheory:
    def test_prime(self):
        assert number.prime_check("7") == "7 is PRIME\n\nPrevious prime: 5\nNext prime:     11"

    def test_composite_lists_factors(self):
        assert "Factors: 2 × 2 × 3" in number.prime_check("12")

    def test_below_two(self):
        assert number.prime_check("1") == "1 is NOT prime\nSmallest prime: 2"

    def test_too_large(self):
        assert number.prime_check(str(10**12 + 1)) == "(too large, max 10^12)"

    def test_factorization(self):
        report = number.prime_factorization("360").split("\n")
        assert report[0] == "360 = 2^3 × 3^2 × 5"
        assert report[-1] == "Number of divisors: 24"

    def test_fibonacci(self):
        lines = number.fibonacci("5").split("\n")
        assert lines[1:6] == ["F(0) = 0", "F(1) = 1", "F(2) = 1", "F(3) = 2", "F(4) = 3"]
        assert lines[-1] == "Golden ratio approx: 1.5000000000"
        assert number.fibonacci("101") == "(enter up to 100 terms)"

    def test_gcd_lcm(self):
        assert number.gcd_lcm("12, 18") == "Numbers: 12, 18\n\nGCD: 6\nLCM: 36"
        assert number.gcd_lcm("12") == "(enter at least two positive integers)"


class TestFractionsAndFloats:
    def test_fraction_to_decimal(self):
        assert number.fraction_decimal("3/4") == "Fraction: 3/4\nDecimal:  0.75\nPercent:  75%"

    def test_decimal_to_fraction(self):
        assert "Fraction: 3/4" in number.fraction_decimal("0.75")

    def test_division_by_zero(self):
        assert number.fraction_decimal("1/0") == "(division by zero)"

    def test_ieee754_one(self):
        report = number.ieee754("1")
        assert "Exponent: 01111111111  (1023 - 1023 bias = 0)" in report
        assert "Hex:    3FF00000 00000000" in report
        assert report.endswith("Type: Normal")

    def test_ieee754_special(self):
        assert number.ieee754("0").endswith("Type: Zero")
        assert number.ieee754("-inf").endswith("Type: -Infinity")

    def test_bytes_format(self):
        lines = number.bytes_format("1536").split("\n")
        assert lines[:2] == ["1536 bytes", "= 1.50 KB"]
        assert "Bits: 12288" in lines


class TestOversizedInput:
    HUGE = "9" * 5000

    @pytest.mark.parametrize(
        "convert",
        [
            number.dec_to_hex,
            number.hex_to_dec,
            number.dec_to_roman,
            number.fibonacci,
            number.prime_check,
            number.prime_factorization,
        ],
    )
    def test_reports_number_too_large(self, convert):
        assert convert(self.HUGE) == "(number too large)"

    def test_gcd_lcm(self):
        assert number.gcd_lcm(f"{self.HUGE}, 12") == "(number too large)"

    def test_number_base(self):
        assert number.number_base(f"{self.HUGE}:10:16") == "(number too large)"

    def test_lcm_beyond_display(self):
        values = [10**998 + k for k in range(1, 7)]
        report = number.gcd_lcm(", ".join(map(str, values)))
        assert report.endswith("LCM: (too large to display)")

    def test_raising_form(self):
        with pytest.raises(InvalidInputError, match="number too large"):
            number.dec_to_hex.__wrapped__(self.HUGE)


class TestQuadraticSolver:
    def test_two_real_roots(self):
        lines = number.quadratic_solver("1 -5 6").split("\n")
        assert lines[0] == "1x² - 5x + 6 = 0"
        assert "x₁ = 3" in lines
        assert "x₂ = 2" in lines
        assert "Vertex: x = 2.5, y = -0.25" in lines

    def test_double_root(self):
        assert "x = 2 (double root)" in number.quadratic_solver("1 -4 4")

    def test_complex_roots(self):
        result = number.quadratic_solver("1, 2, 5")
        assert "x₁ = -1 + 2i" in result
        assert "x₂ = -1 - 2i" in result

    def test_linear(self):
        assert number.quadratic_solver("0 2 -4") == "Linear equation: 2x - 4 = 0\nx = 2"

    def test_degenerate(self):
        assert number.quadratic_solver("0 0 0") == "(0 = 0: infinite solutions)"
        assert number.quadratic_solver("0 0 3") == "(no solution: 0 ≠ 0)"
        assert number.quadratic_solver("1 2").startswith("(enter: a b c")


class TestStatisticsCalc:
    def test_summary(self):
        lines = number.statistics_calc("4, 8, 15, 16, 23, 42").split("\n")
        for expected in [
            "Count:    6",
            "Sum:      108",
            "Mean:     18",
            "Median:   15.5",
            "Mode:     none (all values unique)",
            "Q1:       8",
            "Q3:       23",
            "IQR:      15",
            "Variance (pop):       151.666667",
            "Sorted: 4, 8, 15, 16, 23, 42",
        ]:
            assert expected in lines

    def test_mode_and_junk_tokens(self):
        assert "Mode:     2" in number.statistics_calc("1; 2 2 x 3").split("\n")

    def test_needs_two_numbers(self):
        assert number.statistics_calc("7") == "(enter at least 2 numbers, comma or space separated)"


class TestBitwiseOps:
    def test_and(self):
        lines = number.bitwise_ops("255 AND 170").split("\n")
        assert lines[0] == "           255 = 00000000 00000000 00000000 11111111"
        assert "Decimal: 170" in lines
        assert "Hex: 0xAA" in lines

    @pytest.mark.parametrize(
        "expression, decimal",
        [("42 XOR 15", 37), ("1 << 31", -2147483648), ("-16 >> 2", -4), ("-1 >>> 28", 15), ("12 nand 10", -9)],
    )
    def test_operators(self, expression, decimal):
        assert f"Decimal: {decimal}" in number.bitwise_ops(expression).split("\n")

    def test_not(self):
        lines = number.bitwise_ops("NOT 0").split("\n")
        assert lines[:2] == ["NOT 0", "= -1"]
        assert lines[-1] == "Hex: ~0x0 = 0xFFFFFFFF"

    def test_invalid(self):
        assert number.bitwise_ops("5 ** 2").startswith("(format:")


class TestBaseArithmetic:
    def test_explicit_base(self):
        lines = number.base_arithmetic("1010 + 11 base 2").split("\n")
        assert lines[0] == "Base 2: 1010 + 11 = 1101"
        assert "Decimal: 10 + 3 = 13" in lines

    def test_hex_keyword(self):
        assert number.base_arithmetic("FF + 1 hex").split("\n")[0] == "Base 16: FF + 1 = 100"

    def test_prefixed_operands(self):
        assert number.base_arithmetic("0b1010 + 0b11").split("\n")[0] == "0b1010 + 0b11 = 0b1101"
        assert number.base_arithmetic("0xF - 0x10").split("\n")[0] == "0xF - 0x10 = -0x1"

    def test_division_truncates(self):
        assert number.base_arithmetic("7 / 2 base 10").split("\n")[0] == "Base 10: 7 / 2 = 3"

    def test_errors(self):
        assert number.base_arithmetic("0x10 / 0x0") == "(division by zero)"
        assert number.base_arithmetic("12 + 1 base 40") == "(base must be between 2 and 36)"
        assert number.base_arithmetic("2 + 1 base 2") == '(invalid digit in "2" for base 2)'
