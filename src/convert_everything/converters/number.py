"""Number bases, numerals and small number-theory tools."""

import math
import re
import statistics
import string
import struct
from collections import Counter
from fractions import Fraction
from functools import reduce
from typing import Optional

from ..logging_config import InvalidInputError
from ..providers import ConverterContext
from ..units import ConverterUnit, TextConverter
from .common import format_number, reports_invalid_input

DIGITS = string.digits + string.ascii_uppercase

ROMAN_VALUES = [
    (1000, "M"), (900, "CM"), (500, "D"), (400, "CD"), (100, "C"), (90, "XC"),
    (50, "L"), (40, "XL"), (10, "X"), (9, "IX"), (5, "V"), (4, "IV"), (1, "I"),
]
ROMAN_DIGITS = {"I": 1, "V": 5, "X": 10, "L": 50, "C": 100, "D": 500, "M": 1000}

# Trial division stays interactive up to this bound
MAX_FACTOR_INPUT = 10**12
MAX_FIBONACCI_TERMS = 100
# Well under sys.get_int_max_str_digits() so results still print
MAX_INPUT_DIGITS = 1000
MAX_OUTPUT_BITS = 14_000
BYTE_UNITS = ["B", "KB", "MB", "GB", "TB", "PB"]


def leading_int(text: str, base: int = 10) -> Optional[int]:
    """Parse the longest valid integer prefix in ``base``, like a lenient form field."""
    valid = DIGITS[:base]
    body = text.strip()
    sign = 1
    if body and body[0] in "+-":
        sign = -1 if body[0] == "-" else 1
        body = body[1:]
    digits = ""
    for char in body.upper():
        if char not in valid:
            break
        digits += char
    if not digits:
        return None
    if len(digits) > MAX_INPUT_DIGITS:
        raise InvalidInputError("number too large")
    return sign * int(digits, base)


def show_int(value: int) -> str:
    if value.bit_length() > MAX_OUTPUT_BITS:
        return "(too large to display)"
    return str(value)


def to_base(value: int, base: int) -> str:
    if value == 0:
        return "0"
    sign = "-" if value < 0 else ""
    value = abs(value)
    out = []
    while value:
        value, rem = divmod(value, base)
        out.append(DIGITS[rem])
    return sign + "".join(reversed(out))


def _from_decimal(prefix: str, base: int):
    @reports_invalid_input
    def convert(text: str) -> str:
        value = leading_int(text)
        if value is None:
            raise InvalidInputError("invalid number")
        sign = "-" if value < 0 else ""
        return f"{sign}{prefix}{to_base(abs(value), base)}"

    return convert


def _to_decimal(prefix: str, base: int, label: str):
    pattern = re.compile(rf"^{prefix}", re.IGNORECASE)

    @reports_invalid_input
    def convert(text: str) -> str:
        value = leading_int(pattern.sub("", text.strip()), base)
        if value is None:
            raise InvalidInputError(f"invalid {label}")
        return str(value)

    return convert


dec_to_hex = _from_decimal("0x", 16)
hex_to_dec = _to_decimal("0x", 16, "hex")
dec_to_bin = _from_decimal("0b", 2)
bin_to_dec = _to_decimal("0b", 2, "binary")
dec_to_oct = _from_decimal("0o", 8)
oct_to_dec = _to_decimal("0o", 8, "octal")


@reports_invalid_input
def dec_to_roman(text: str) -> str:
    value = leading_int(text)
    if value is None or not 1 <= value <= 3999:
        raise InvalidInputError("enter a number between 1 and 3999")
    out = []
    for amount, symbol in ROMAN_VALUES:
        count, value = divmod(value, amount)
        out.append(symbol * count)
    return "".join(out)


@reports_invalid_input
def roman_to_dec(text: str) -> str:
    upper = text.strip().upper()
    if not upper:
        raise InvalidInputError("enter a Roman numeral")
    total = 0
    for i, char in enumerate(upper):
        current = ROMAN_DIGITS.get(char)
        if current is None:
            raise InvalidInputError(f"invalid character: {char}")
        following = ROMAN_DIGITS.get(upper[i + 1], 0) if i + 1 < len(upper) else 0
        total += -current if current < following else current
    return str(total)


@reports_invalid_input
def number_base(text: str) -> str:
    parts = text.strip().split(":")
    if len(parts) != 3:
        raise InvalidInputError("format: number:fromBase:toBase, e.g. FF:16:10")
    number, from_base, to_base_ = parts
    fb, tb = leading_int(from_base), leading_int(to_base_)
    if fb is None or tb is None or not (2 <= fb <= 36 and 2 <= tb <= 36):
        raise InvalidInputError("bases must be 2-36")
    value = leading_int(number, fb)
    if value is None:
        raise InvalidInputError("invalid number for given base")
    return to_base(value, tb)


@reports_invalid_input
def bytes_format(text: str) -> str:
    try:
        n = float(text.strip())
    except ValueError:
        raise InvalidInputError("enter a number of bytes") from None
    size, unit = n, 0
    while size >= 1024 and unit < len(BYTE_UNITS) - 1:
        size /= 1024
        unit += 1
    shown = int(n) if n.is_integer() else n
    return "\n".join(
        [
            f"{shown} bytes",
            f"= {size:.2f} {BYTE_UNITS[unit]}",
            "",
            f"Bits: {format_number(n * 8)}",
            f"KB: {n / 1024:.4f}",
            f"MB: {n / 1024**2:.6f}",
            f"GB: {n / 1024**3:.8f}",
        ]
    )


def is_prime(n: int) -> bool:
    if n < 2:
        return False
    if n < 4:
        return True
    if n % 2 == 0:
        return False
    return all(n % i for i in range(3, math.isqrt(n) + 1, 2))


def prime_factors(n: int) -> dict[int, int]:
    factors: dict[int, int] = {}
    p = 2
    while p * p <= n:
        while n % p == 0:
            factors[p] = factors.get(p, 0) + 1
            n //= p
        p += 1
    if n > 1:
        factors[n] = factors.get(n, 0) + 1
    return factors


@reports_invalid_input
def prime_check(text: str) -> str:
    n = leading_int(text)
    if n is None or n < 0:
        raise InvalidInputError("enter a positive integer")
    if n > MAX_FACTOR_INPUT:
        raise InvalidInputError("too large, max 10^12")
    if n < 2:
        return f"{n} is NOT prime\nSmallest prime: 2"

    prime = is_prime(n)
    previous = next((c for c in range(n - 1, 1, -1) if is_prime(c)), None)
    following = next(c for c in range(n + 1, 2 * n + 2) if is_prime(c))
    lines = [f"{n} is {'PRIME' if prime else 'NOT prime'}", ""]
    if not prime:
        expanded = [str(p) for p, k in prime_factors(n).items() for _ in range(k)]
        lines.append(f"Factors: {' × '.join(expanded)}")
    lines += [f"Previous prime: {previous if previous is not None else 'none'}", f"Next prime:     {following}"]
    return "\n".join(lines)


@reports_invalid_input
def prime_factorization(text: str) -> str:
    n = leading_int(text)
    if n is None or n < 2:
        raise InvalidInputError("enter a positive integer ≥ 2")
    if n > MAX_FACTOR_INPUT:
        raise InvalidInputError("too large, max 10^12")

    factors = prime_factors(n)
    expanded = [str(p) for p, k in factors.items() for _ in range(k)]
    powers = [f"{p}^{k}" if k > 1 else str(p) for p, k in factors.items()]
    return "\n".join(
        [
            f"{n} = {' × '.join(powers)}",
            f"Expanded: {' × '.join(expanded)}",
            f"Prime factors: {', '.join(str(p) for p in factors)}",
            f"Total prime factors (with multiplicity): {len(expanded)}",
            f"Distinct prime factors: {len(factors)}",
            f"Number of divisors: {math.prod(k + 1 for k in factors.values())}",
        ]
    )


@reports_invalid_input
def fibonacci(text: str) -> str:
    n = leading_int(text)
    if n is None or n < 1:
        raise InvalidInputError("enter a positive integer for number of terms")
    if n > MAX_FIBONACCI_TERMS:
        raise InvalidInputError(f"enter up to {MAX_FIBONACCI_TERMS} terms")
    seq = [0, 1]
    while len(seq) < n:
        seq.append(seq[-1] + seq[-2])
    seq = seq[:n]
    lines = [f"First {n} Fibonacci numbers:", *(f"F({i}) = {v}" for i, v in enumerate(seq))]
    if n >= 3:
        lines += ["", f"Golden ratio approx: {seq[-1] / seq[-2]:.10f}"]
    return "\n".join(lines)


@reports_invalid_input
def gcd_lcm(text: str) -> str:
    numbers = [v for part in re.split(r"[\s,]+", text) if (v := leading_int(part)) is not None and v > 0]
    if len(numbers) < 2:
        raise InvalidInputError("enter at least two positive integers")
    joined = ", ".join(str(n) for n in numbers)
    return "\n".join(
        [
            f"Numbers: {joined}",
            "",
            f"GCD: {reduce(math.gcd, numbers)}",
            f"LCM: {show_int(reduce(math.lcm, numbers))}",
        ]
    )


@reports_invalid_input
def fraction_decimal(text: str) -> str:
    value = text.strip()
    if not value:
        return ""
    if "/" in value:
        parts = value.split("/")
        if len(parts) != 2:
            raise InvalidInputError("format: numerator/denominator, e.g. 3/4")
        try:
            num, den = float(parts[0]), float(parts[1])
        except ValueError:
            raise InvalidInputError("invalid numbers") from None
        if den == 0:
            raise InvalidInputError("division by zero")
        decimal = num / den
        return "\n".join(
            [
                f"Fraction: {format_number(num)}/{format_number(den)}",
                f"Decimal:  {decimal!r}",
                f"Percent:  {format_number(decimal * 100)}%",
            ]
        )
    try:
        decimal = float(value)
    except ValueError:
        raise InvalidInputError("enter a decimal like 0.75 or a fraction like 3/4") from None
    if not math.isfinite(decimal):
        raise InvalidInputError("enter a finite number")
    try:
        fraction = Fraction(value).limit_denominator(10**9)
    except ValueError:
        raise InvalidInputError("number too large") from None
    return "\n".join(
        [
            f"Decimal:  {value}",
            f"Fraction: {fraction.numerator}/{fraction.denominator}",
            f"Percent:  {format_number(decimal * 100)}%",
        ]
    )


@reports_invalid_input
def ieee754(text: str) -> str:
    try:
        value = float(text.strip())
    except ValueError:
        raise InvalidInputError("enter a valid number") from None

    (raw,) = struct.unpack(">Q", struct.pack(">d", value))
    bits = f"{raw:064b}"
    sign, exponent, mantissa = bits[0], bits[1:12], bits[12:]
    exp_value = int(exponent, 2)
    mant_value = int(mantissa, 2)

    if exp_value == 0 and mant_value == 0:
        kind = "Zero"
    elif exp_value == 2047:
        kind = f"{'+' if sign == '0' else '-'}Infinity" if mant_value == 0 else "NaN"
    elif exp_value == 0:
        kind = "Subnormal (denormalized)"
    else:
        kind = "Normal"

    return "\n".join(
        [
            f"Value: {value!r}",
            "",
            "64-bit (double precision):",
            f"  Sign:     {sign}  ({'positive' if sign == '0' else 'negative'})",
            f"  Exponent: {exponent}  ({exp_value} - 1023 bias = {exp_value - 1023})",
            f"  Mantissa: {mantissa}",
            "",
            f"Binary: {sign} {exponent} {mantissa}",
            f"Hex:    {raw >> 32:08X} {raw & 0xFFFFFFFF:08X}",
            "",
            f"Type: {kind}",
        ]
    )


def _signed_term(value: float) -> str:
    return f"+ {format_number(value, 10)}" if value >= 0 else f"- {format_number(-value, 10)}"


@reports_invalid_input
def quadratic_solver(text: str) -> str:
    """Solve ax² + bx + c = 0 from "a b c"."""
    try:
        a, b, c = (float(part) for part in re.split(r"[\s,]+", text.strip())[:3])
    except ValueError:
        raise InvalidInputError('enter: a b c, e.g. "1 -5 6" for x² - 5x + 6 = 0') from None
    if not all(map(math.isfinite, (a, b, c))):
        raise InvalidInputError("coefficients must be finite numbers")

    def fmt(value: float) -> str:
        return format_number(value, 10)

    if a == 0:
        if b == 0:
            raise InvalidInputError("0 = 0: infinite solutions" if c == 0 else "no solution: 0 ≠ 0")
        return f"Linear equation: {fmt(b)}x {_signed_term(c)} = 0\nx = {fmt(-c / b)}"

    equation = f"{fmt(a)}x² {_signed_term(b)}x {_signed_term(c)} = 0"
    disc = b * b - 4 * a * c
    if disc > 0:
        root = math.sqrt(disc)
        x1, x2 = sorted(((-b + root) / (2 * a), (-b - root) / (2 * a)), reverse=True)
        return "\n".join(
            [
                equation,
                f"Discriminant: {fmt(disc)} > 0 → 2 real roots",
                "",
                f"x₁ = {fmt(x1)}",
                f"x₂ = {fmt(x2)}",
                "",
                f"Vertex: x = {fmt(-b / (2 * a))}, y = {fmt(c - b * b / (4 * a))}",
                f"Sum of roots: {fmt(x1 + x2)} (= -b/a = {fmt(-b / a)})",
                f"Product of roots: {fmt(x1 * x2)} (= c/a = {fmt(c / a)})",
                f"Factored: {fmt(a)}(x - {fmt(x1)})(x - {fmt(x2)}) = 0",
            ]
        )
    if disc == 0:
        x = -b / (2 * a)
        return "\n".join(
            [
                equation,
                "Discriminant: 0 → 1 repeated root",
                "",
                f"x = {fmt(x)} (double root)",
                f"Factored: {fmt(a)}(x - {fmt(x)})² = 0",
            ]
        )
    real = -b / (2 * a)
    imag = abs(math.sqrt(-disc) / (2 * a))
    return "\n".join(
        [
            equation,
            f"Discriminant: {fmt(disc)} < 0 → 2 complex roots",
            "",
            f"x₁ = {fmt(real)} + {fmt(imag)}i",
            f"x₂ = {fmt(real)} - {fmt(imag)}i",
            "",
            f"|x| = {fmt(math.hypot(real, imag))} (modulus)",
        ]
    )


def _finite_numbers(text: str) -> list[float]:
    values = []
    for token in re.split(r"[\s,;]+", text.strip()):
        try:
            value = float(token)
        except ValueError:
            continue
        if math.isfinite(value):
            values.append(value)
    return values


@reports_invalid_input
def statistics_calc(text: str) -> str:
    nums = _finite_numbers(text)
    if len(nums) < 2:
        raise InvalidInputError("enter at least 2 numbers, comma or space separated")
    n = len(nums)
    ordered = sorted(nums)
    counts = Counter(nums)
    top = max(counts.values())
    mode = "none (all values unique)" if top == 1 else ", ".join(format_number(v) for v in statistics.multimode(nums))
    q1 = ordered[(n - 1) // 4]
    q3 = ordered[math.ceil((n - 1) * 3 / 4)]
    return "\n".join(
        [
            f"Count:    {n}",
            f"Sum:      {format_number(math.fsum(nums))}",
            "",
            f"Mean:     {format_number(statistics.fmean(nums))}",
            f"Median:   {format_number(statistics.median(nums))}",
            f"Mode:     {mode}",
            "",
            f"Min:      {format_number(ordered[0])}",
            f"Max:      {format_number(ordered[-1])}",
            f"Range:    {format_number(ordered[-1] - ordered[0])}",
            "",
            f"Q1:       {format_number(q1)}",
            f"Q3:       {format_number(q3)}",
            f"IQR:      {format_number(q3 - q1)}",
            "",
            f"Std Dev (population): {format_number(statistics.pstdev(nums))}",
            f"Std Dev (sample):     {format_number(statistics.stdev(nums))}",
            f"Variance (pop):       {format_number(statistics.pvariance(nums))}",
            "",
            "Sorted: " + ", ".join(format_number(v) for v in ordered),
        ]
    )


_NOT = re.compile(r"^NOT\s+(-?\d{1,15})$", re.IGNORECASE)
_BITWISE = re.compile(r"^(-?\d{1,15})\s+(AND|OR|XOR|NAND|<<|>>>|>>|&|\||\^|SHL|SHR)\s+(-?\d{1,15})$", re.IGNORECASE)


def int32(value: int) -> int:
    """Wrap to a signed 32-bit integer."""
    return ((value & 0xFFFFFFFF) ^ 0x80000000) - 0x80000000


def uint32(value: int) -> int:
    return value & 0xFFFFFFFF


BITWISE_OPS = {
    "and": lambda a, b: int32(a & b),
    "&": lambda a, b: int32(a & b),
    "or": lambda a, b: int32(a | b),
    "|": lambda a, b: int32(a | b),
    "xor": lambda a, b: int32(a ^ b),
    "^": lambda a, b: int32(a ^ b),
    "nand": lambda a, b: int32(~(a & b)),
    "<<": lambda a, b: int32(a << (b & 31)),
    "shl": lambda a, b: int32(a << (b & 31)),
    ">>": lambda a, b: a >> (b & 31),
    "shr": lambda a, b: a >> (b & 31),
    ">>>": lambda a, b: uint32(a) >> (b & 31),
}


def _bits(value: int, grouped: bool = True) -> str:
    bits = f"{uint32(value):032b}"
    if not grouped:
        return bits
    return " ".join(bits[i : i + 8] for i in range(0, 32, 8))


@reports_invalid_input
def bitwise_ops(text: str) -> str:
    """32-bit AND, OR, XOR, NAND, shifts and NOT."""
    value = text.strip()
    if not value:
        raise InvalidInputError('enter: "a op b", e.g. "255 AND 170" or "42 XOR 15" or "NOT 255"')

    if match := _NOT.match(value):
        a = int32(int(match.group(1)))
        result = ~a
        return "\n".join(
            [
                f"NOT {a}",
                f"= {result}",
                "",
                f"Binary: ~{_bits(a, grouped=False)}",
                f"      = {_bits(result, grouped=False)}",
                f"Hex: ~0x{uint32(a):X} = 0x{uint32(result):X}",
            ]
        )

    match = _BITWISE.match(value)
    if not match:
        raise InvalidInputError('format: "a AND b" or "a OR b" or "a XOR b" or "a << b" or "NOT a"')
    left, op, right = match.groups()
    a, b = int32(int(left)), int32(int(right))
    result = BITWISE_OPS[op.lower()](a, b)
    return "\n".join(
        [
            f"  {left:>12} = {_bits(a)}",
            f"  {right:>12} = {_bits(b)}",
            f"  {op.upper():>12}   {'─' * 36}",
            f"  {result:>12} = {_bits(result)}",
            "",
            f"Decimal: {result}",
            f"Hex: 0x{uint32(result):X}",
            f"Signed: {int32(result)} (as 32-bit signed)",
        ]
    )


_PREFIXED_SUM = re.compile(r"^(0[box][0-9a-f]+)\s*([-+*/])\s*(0[box][0-9a-f]+)$", re.IGNORECASE)
_BASE_SUM = re.compile(r"^(\w+)\s*([-+*/])\s*(\w+)\s+(?:in\s*)?(?:base\s*)?(\d{1,3})$", re.IGNORECASE)
_HEX_SUM = re.compile(r"^(\w+)\s*([-+*/])\s*(\w+)\s+hex(?:adecimal)?$", re.IGNORECASE)
PREFIX_BASES = {"b": 2, "o": 8, "x": 16}


def _arithmetic(a: int, op: str, b: int) -> int:
    if op == "+":
        return a + b
    if op == "-":
        return a - b
    if op == "*":
        return a * b
    if b == 0:
        raise InvalidInputError("division by zero")
    quotient = abs(a) // abs(b)
    return -quotient if (a < 0) != (b < 0) else quotient


def _prefixed(value: int, base: int) -> str:
    prefix = {2: "0b", 8: "0o", 16: "0x"}[base]
    return f"{'-' if value < 0 else ''}{prefix}{to_base(abs(value), base)}"


@reports_invalid_input
def base_arithmetic(text: str) -> str:
    """Add, subtract, multiply or divide integers written in any base from 2 to 36."""
    value = text.strip()

    if match := _PREFIXED_SUM.match(value):
        left, op, right = match.groups()
        base_a, base_b = PREFIX_BASES[left[1].lower()], PREFIX_BASES[right[1].lower()]
        a, b = leading_int(left[2:], base_a), leading_int(right[2:], base_b)
        if a is None or b is None:
            raise InvalidInputError("invalid digits for the given prefix")
        result = _arithmetic(a, op, b)
        return "\n".join(
            [
                f"{_prefixed(a, base_a)} {op} {_prefixed(b, base_b)} = {_prefixed(result, base_a)}",
                "",
                f"In decimal: {a} {op} {b} = {show_int(result)}",
                f"In binary: {to_base(result, 2)}",
                f"In hex:    {_prefixed(result, 16)}",
                f"In octal:  {_prefixed(result, 8)}",
            ]
        )

    hex_match = _HEX_SUM.match(value)
    match = hex_match or _BASE_SUM.match(value)
    if not match:
        raise InvalidInputError('enter: "1010 + 11 base 2", "FF + 1 hex", or "0b1010 + 0b11"')
    base = 16 if hex_match else int(match.group(4))
    if not 2 <= base <= 36:
        raise InvalidInputError("base must be between 2 and 36")
    left, op, right = match.group(1), match.group(2), match.group(3)
    a, b = leading_int(left, base), leading_int(right, base)
    if a is None:
        raise InvalidInputError(f'invalid digit in "{left}" for base {base}')
    if b is None:
        raise InvalidInputError(f'invalid digit in "{right}" for base {base}')
    result = _arithmetic(a, op, b)
    return "\n".join(
        [
            f"Base {base}: {left.upper()} {op} {right.upper()} = {to_base(result, base)}",
            "",
            f"Decimal: {a} {op} {b} = {show_int(result)}",
            f"Binary:  {to_base(result, 2)}",
            f"Hex:     {to_base(result, 16)}",
        ]
    )


def build(ctx: ConverterContext) -> list[ConverterUnit]:
    return [
        TextConverter(
            id="dec-to-hex", name="Decimal to Hex", category="number",
            description="Convert decimal number to hexadecimal", convert=dec_to_hex,
        ),
        TextConverter(
            id="hex-to-dec", name="Hex to Decimal", category="number",
            description="Convert hexadecimal to decimal", convert=hex_to_dec,
        ),
        TextConverter(
            id="dec-to-bin", name="Decimal to Binary", category="number",
            description="Convert decimal number to binary", convert=dec_to_bin,
        ),
        TextConverter(
            id="bin-to-dec", name="Binary to Decimal", category="number",
            description="Convert binary to decimal", convert=bin_to_dec,
        ),
        TextConverter(
            id="dec-to-oct", name="Decimal to Octal", category="number",
            description="Convert decimal number to octal", convert=dec_to_oct,
        ),
        TextConverter(
            id="oct-to-dec", name="Octal to Decimal", category="number",
            description="Convert octal to decimal", convert=oct_to_dec,
        ),
        TextConverter(
            id="dec-to-roman", name="Decimal to Roman", category="number",
            description="Convert decimal number to Roman numerals (1-3999)", convert=dec_to_roman,
        ),
        TextConverter(
            id="roman-to-dec", name="Roman to Decimal", category="number",
            description="Convert Roman numerals to decimal", convert=roman_to_dec,
        ),
        TextConverter(
            id="number-base", name="Base Converter", category="number",
            description="Convert a number between any bases (2-36). Format: number:fromBase:toBase",
            placeholder="FF:16:10", convert=number_base,
        ),
        TextConverter(
            id="bytes-format", name="Bytes Formatter", category="number",
            description="Convert bytes to human-readable size (KB, MB, GB, etc.)", convert=bytes_format,
        ),
        TextConverter(
            id="prime-check", name="Prime Checker", category="number",
            description="Check if a number is prime and find nearby primes", convert=prime_check,
        ),
        TextConverter(
            id="prime-factorization", name="Prime Factorization", category="number",
            description="Factor a number into its prime factors", placeholder="360",
            convert=prime_factorization,
        ),
        TextConverter(
            id="fibonacci", name="Fibonacci Sequence", category="number",
            description="Generate the first N Fibonacci numbers (up to 100)", placeholder="10",
            convert=fibonacci,
        ),
        TextConverter(
            id="gcd-lcm", name="GCD & LCM", category="number",
            description="Calculate GCD and LCM of two or more numbers (comma or space separated)",
            placeholder="12, 18, 24", convert=gcd_lcm,
        ),
        TextConverter(
            id="fraction-decimal", name="Fraction ↔ Decimal", category="number",
            description="Convert fractions to decimals and decimals to fractions (e.g. 3/4 or 0.75)",
            convert=fraction_decimal,
        ),
        TextConverter(
            id="ieee754", name="IEEE 754 Float Inspector", category="number",
            description="Show the binary IEEE 754 representation of a floating-point number",
            placeholder="3.14", convert=ieee754,
        ),
        TextConverter(
            id="quadratic-solver", name="Quadratic Equation Solver", category="number",
            description='Solve ax² + bx + c = 0. Enter "a b c", e.g. "1 -5 6"',
            placeholder="1 -5 6", convert=quadratic_solver,
        ),
        TextConverter(
            id="statistics-calc", name="Statistics Calculator", category="number",
            description="Calculate mean, median, mode, standard deviation, and more from a list of numbers",
            placeholder="4, 8, 15, 16, 23, 42", convert=statistics_calc,
        ),
        TextConverter(
            id="bitwise-ops", name="Bitwise Operations", category="number",
            description='Perform 32-bit bitwise operations. Enter "a op b" (AND, OR, XOR, NAND, <<, >>, >>>) or "NOT a"',
            placeholder="255 AND 170", convert=bitwise_ops,
        ),
        TextConverter(
            id="base-arithmetic", name="Base Arithmetic", category="number",
            description='Perform arithmetic in any base (2-36). Enter "1010 + 11 base 2", "FF + 1 hex" or "0b1010 + 0b11"',
            placeholder="1010 + 11 base 2", convert=base_arithmetic,
        ),
    ]
