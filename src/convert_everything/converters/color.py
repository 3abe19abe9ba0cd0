"""Color space conversion, palettes and WCAG contrast."""

import colorsys
import math
import re
from typing import NamedTuple, Optional

from ..providers import ConverterContext, RandomSource
from ..units import ConverterUnit, TextConverter, diagnostic

_HEX = re.compile(r"^#?([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")
_RGB = re.compile(r"rgba?\(\s*(\d{1,9})\s*[,\s]\s*(\d{1,9})\s*[,\s]\s*(\d{1,9})")
_HSL = re.compile(r"hsla?\(\s*(\d{1,9})\s*[,\s]\s*(\d{1,9})%?\s*[,\s]\s*(\d{1,9})%?")
_HSV = re.compile(r"hsv\(\s*(\d{1,9})\s*[,\s]\s*(\d{1,9})%?\s*[,\s]\s*(\d{1,9})%?")

COLOR_HINT = "enter a hex like #ff6600, rgb(255,102,0), hsl(24,100%,50%) or hsv(24,100%,100%)"

RANDOM_STYLES = {
    "warm": ((0, 60), (70, 100), (40, 65)),
    "cool": ((180, 270), (60, 100), (35, 65)),
    "pastel": ((0, 360), (60, 90), (70, 85)),
    "dark": ((0, 360), (50, 100), (10, 35)),
    "neon": ((0, 360), (100, 100), (50, 60)),
    "random": ((0, 360), (40, 100), (30, 70)),
}


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


class RGB(NamedTuple):
    r: int
    g: int
    b: int

    @property
    def hex(self) -> str:
        return "#" + "".join(f"{c:02x}" for c in self)

    def hsl(self) -> tuple[int, int, int]:
        h, l, s = colorsys.rgb_to_hls(self.r / 255, self.g / 255, self.b / 255)
        return round_half_up(h * 360) % 360, round_half_up(s * 100), round_half_up(l * 100)

    def hsv(self) -> tuple[int, int, int]:
        h, s, v = colorsys.rgb_to_hsv(self.r / 255, self.g / 255, self.b / 255)
        return round_half_up(h * 360) % 360, round_half_up(s * 100), round_half_up(v * 100)

    def luminance(self) -> float:
        """WCAG relative luminance."""

        def channel(c: int) -> float:
            c = c / 255
            return c / 12.92 if c <= 0.03928 else ((c + 0.055) / 1.055) ** 2.4

        return 0.2126 * channel(self.r) + 0.7152 * channel(self.g) + 0.0722 * channel(self.b)


def _clamp_channel(value: float) -> int:
    return max(0, min(255, round_half_up(value * 255)))


def from_hsl(h: float, s: float, l: float) -> RGB:
    r, g, b = colorsys.hls_to_rgb((h % 360) / 360, max(0, min(100, l)) / 100, max(0, min(100, s)) / 100)
    return RGB(_clamp_channel(r), _clamp_channel(g), _clamp_channel(b))


def from_hsv(h: float, s: float, v: float) -> RGB:
    r, g, b = colorsys.hsv_to_rgb((h % 360) / 360, max(0, min(100, s)) / 100, max(0, min(100, v)) / 100)
    return RGB(_clamp_channel(r), _clamp_channel(g), _clamp_channel(b))


def parse_hex(text: str) -> Optional[RGB]:
    match = _HEX.match(text.strip())
    if not match:
        return None
    digits = match.group(1)
    if len(digits) == 3:
        digits = "".join(c * 2 for c in digits)
    n = int(digits, 16)
    return RGB((n >> 16) & 255, (n >> 8) & 255, n & 255)


def parse_color(text: str) -> Optional[RGB]:
    """Accept hex, rgb(), hsl() or hsv() notation."""
    value = text.strip()
    if rgb := parse_hex(value):
        return rgb
    if match := _RGB.search(value):
        return RGB(*(min(255, int(c)) for c in match.groups()))
    if match := _HSL.search(value):
        return from_hsl(*(int(c) for c in match.groups()))
    if match := _HSV.search(value):
        return from_hsv(*(int(c) for c in match.groups()))
    return None


def describe_color(rgb: RGB) -> str:
    h, s, l = rgb.hsl()
    hv, sv, vv = rgb.hsv()
    return "\n".join(
        [
            f"HEX:  {rgb.hex}",
            f"RGB:  rgb({rgb.r}, {rgb.g}, {rgb.b})",
            f"HSL:  hsl({h}, {s}%, {l}%)",
            f"HSV:  hsv({hv}, {sv}%, {vv}%)",
        ]
    )


def color_convert(text: str) -> str:
    if not text.strip():
        return ""
    rgb = parse_color(text)
    if rgb is None:
        return diagnostic(COLOR_HINT)
    return describe_color(rgb)


def color_palette(text: str) -> str:
    rgb = parse_hex(text)
    if rgb is None:
        return diagnostic("enter a hex color like #ff6600")
    h, s, l = rgb.hsl()

    def shifted(dh: int = 0, lightness: Optional[int] = None) -> str:
        return from_hsl(h + dh, s, l if lightness is None else lightness).hex

    base = rgb.hex
    return "\n".join(
        [
            f"Input: {base}",
            "",
            "-- Complementary --",
            f"  {shifted(180)}",
            "",
            "-- Analogous --",
            f"  {shifted(-30)}  {base}  {shifted(30)}",
            "",
            "-- Triadic --",
            f"  {base}  {shifted(120)}  {shifted(240)}",
            "",
            "-- Split Complementary --",
            f"  {shifted(150)}  {base}  {shifted(210)}",
            "",
            "-- Shades --",
            "  "
            + "  ".join(
                [
                    shifted(lightness=max(0, l - 30)),
                    shifted(lightness=max(0, l - 15)),
                    base,
                    shifted(lightness=min(100, l + 15)),
                    shifted(lightness=min(100, l + 30)),
                ]
            ),
        ]
    )


def _two_hex_colors(text: str) -> tuple[list[str], Optional[RGB], Optional[RGB]]:
    lines = [line.strip() for line in text.strip().split("\n") if line.strip()]
    if len(lines) < 2:
        return lines, None, None
    return lines, parse_hex(lines[0]), parse_hex(lines[1])


def contrast_ratio(a: RGB, b: RGB) -> float:
    la, lb = a.luminance(), b.luminance()
    return (max(la, lb) + 0.05) / (min(la, lb) + 0.05)


def color_contrast(text: str) -> str:
    lines, first, second = _two_hex_colors(text)
    if len(lines) < 2:
        return diagnostic("enter two hex colors on separate lines")
    if first is None or second is None:
        return diagnostic("invalid hex colors")

    ratio = contrast_ratio(first, second)

    def verdict(threshold: float) -> str:
        return "PASS" if ratio >= threshold else "FAIL"

    return "\n".join(
        [
            f"Color 1: {first.hex}",
            f"Color 2: {second.hex}",
            "",
            f"Contrast Ratio: {ratio:.2f}:1",
            "",
            f"WCAG AA (normal text):  {verdict(4.5)}   (need 4.5:1)",
            f"WCAG AA (large text):   {verdict(3)}   (need 3:1)",
            f"WCAG AAA (normal text): {verdict(7)}  (need 7:1)",
            f"WCAG AAA (large text):  {verdict(4.5)}  (need 4.5:1)",
        ]
    )


def color_shades(text: str) -> str:
    rgb = parse_color(text)
    if rgb is None:
        return diagnostic("enter a color: hex, rgb(), or hsl()")
    h, s, l = rgb.hsl()
    shades = []
    for lightness in range(95, 0, -10):
        shade = from_hsl(h, s, lightness)
        marker = "  ← original" if abs(lightness - l) < 5 else ""
        shades.append(f"  L:{lightness:>3}%  {shade.hex}  rgb({shade.r}, {shade.g}, {shade.b}){marker}")
    return f"Shades for {rgb.hex}:\n\n" + "\n".join(shades)


def _mix(a: RGB, b: RGB, t: float) -> RGB:
    return RGB(*(round_half_up(x + (y - x) * t) for x, y in zip(a, b)))


def color_mix(text: str) -> str:
    lines, first, second = _two_hex_colors(text)
    if len(lines) < 2:
        return diagnostic("enter two hex colors on separate lines, optionally add ratio on third line")
    if first is None or second is None:
        return diagnostic("invalid hex colors")
    ratio = 0.5
    if len(lines) > 2:
        try:
            ratio = max(0.0, min(1.0, float(lines[2])))
        except ValueError:
            return diagnostic("ratio must be a number between 0 and 1")

    steps = []
    for t in (0, 0.25, 0.5, 0.75, 1):
        marker = " ← selected" if abs(t - ratio) < 0.01 else ""
        steps.append(f"  {t * 100:>3.0f}%  {_mix(first, second, t).hex}{marker}")

    result = _mix(first, second, ratio)
    h, s, l = result.hsl()
    return "\n".join(
        [
            f"Color 1:  {first.hex}  (ratio: 0 = 100% color 1)",
            f"Color 2:  {second.hex}  (ratio: 1 = 100% color 2)",
            f"Ratio:    {ratio:g}",
            "",
            f"Result:   {result.hex}",
            f"          rgb({result.r}, {result.g}, {result.b})",
            f"          hsl({h}, {s}%, {l}%)",
            "",
            "Blend steps:",
            *steps,
        ]
    )


def to_linear(c: int) -> float:
    """sRGB channel (0-255) to linear light."""
    c = c / 255
    return c / 12.92 if c <= 0.04045 else ((c + 0.055) / 1.055) ** 2.4


def from_linear(c: float) -> int:
    c = max(0.0, min(1.0, c))
    encoded = c * 12.92 if c <= 0.0031308 else 1.055 * c ** (1 / 2.4) - 0.055
    return round_half_up(encoded * 255)


def _fixed(value: float, places: int) -> str:
    text = f"{value:.{places}f}"
    return text[1:] if text.startswith("-") and not text.strip("-0.") else text


def color_harmonies(text: str) -> str:
    rgb = parse_hex(text)
    if rgb is None:
        return diagnostic("enter a valid hex color")
    h, s, l = rgb.hsl()

    def turn(degrees: int) -> str:
        hue = (h + degrees) % 360
        return f"  {from_hsl(hue, s, l).hex}  hsl({hue}, {s}%, {l}%)"

    return "\n".join(
        [
            f"Base: {rgb.hex}  hsl({h}, {s}%, {l}%)",
            "",
            "Complementary (180°):",
            turn(180),
            "",
            "Analogous (±30°):",
            turn(-30),
            turn(30),
            "",
            "Triadic (±120°):",
            turn(120),
            turn(240),
            "",
            "Split-Complementary (±150°):",
            turn(150),
            turn(210),
            "",
            "Tetradic / Square (90° apart):",
            turn(90),
            turn(180),
            turn(270),
        ]
    )


def color_gradient(text: str) -> str:
    lines, first, second = _two_hex_colors(text)
    if len(lines) < 2:
        return diagnostic("enter two hex colors on separate lines")
    if first is None or second is None:
        return diagnostic("invalid hex colors")
    direction = lines[2] if len(lines) > 2 else "to right"
    stops = [(pct, _mix(first, second, pct / 100).hex) for pct in (0, 25, 50, 75, 100)]
    return "\n".join(
        [
            f"From: {first.hex}",
            f"To:   {second.hex}",
            "",
            "-- CSS --",
            f"background: linear-gradient({direction}, {first.hex}, {second.hex});",
            "",
            "-- With 5 stops --",
            f"background: linear-gradient({direction},",
            ",\n".join(f"  {color} {pct}%" for pct, color in stops),
            ");",
            "",
            "-- Color stops --",
            *(f"  {color}  {pct}%" for pct, color in stops),
        ]
    )


def oklch_convert(text: str) -> str:
    """sRGB to Oklab and its polar form OKLCH."""
    if not text.strip():
        return ""
    rgb = parse_color(text)
    if rgb is None:
        return diagnostic("enter a hex like #ff6600 or rgb(255,102,0)")

    lr, lg, lb = (to_linear(c) for c in rgb)
    x = 0.4124564 * lr + 0.3575761 * lg + 0.1804375 * lb
    y = 0.2126729 * lr + 0.7151522 * lg + 0.0721750 * lb
    z = 0.0193339 * lr + 0.1191920 * lg + 0.9503041 * lb

    def cbrt(n: float) -> float:
        return math.copysign(abs(n) ** (1 / 3), n)

    l_ = cbrt(0.8189330101 * x + 0.3618667424 * y - 0.1288597137 * z)
    m_ = cbrt(0.0329845436 * x + 0.9293118715 * y + 0.0361456387 * z)
    s_ = cbrt(0.0482003018 * x + 0.2643662691 * y + 0.6338517070 * z)
    lightness = 0.2104542553 * l_ + 0.7936177850 * m_ - 0.0040720468 * s_
    a = 1.9779984951 * l_ - 2.4285922050 * m_ + 0.4505937099 * s_
    b = 0.0259040371 * l_ + 0.7827717662 * m_ - 0.8086757660 * s_

    chroma = math.hypot(a, b)
    hue = math.degrees(math.atan2(b, a)) % 360
    h, s, l = rgb.hsl()
    percent, c, hue_text = _fixed(lightness * 100, 2), _fixed(chroma, 4), _fixed(hue, 2)
    return "\n".join(
        [
            f"Input: {rgb.hex}",
            "",
            f"OKLCH:  oklch({percent}% {c} {hue_text})",
            f"Oklab:  oklab({percent}% {_fixed(a, 4)} {_fixed(b, 4)})",
            f"HSL:    hsl({h}, {s}%, {l}%)",
            "",
            f"Lightness: {percent}%",
            f"Chroma:    {c}",
            f"Hue:       {hue_text}°",
        ]
    )


# Linear-light projections onto the two remaining cone responses.
DICHROMACY = {
    "Protanopia": ("no red cones, ~1% of males", ((0.567, 0.433, 0.0), (0.558, 0.442, 0.0), (0.0, 0.242, 0.758))),
    "Deuteranopia": ("no green cones, ~1% of males", ((0.625, 0.375, 0.0), (0.7, 0.3, 0.0), (0.0, 0.3, 0.7))),
    "Tritanopia": ("no blue cones, very rare", ((0.95, 0.05, 0.0), (0.0, 0.433, 0.567), (0.0, 0.475, 0.525))),
}


def simulate_dichromacy(rgb: RGB, matrix) -> RGB:
    linear = [to_linear(c) for c in rgb]
    return RGB(*(from_linear(sum(w * c for w, c in zip(row, linear))) for row in matrix))


def color_blindness(text: str) -> str:
    rgb = parse_color(text)
    if rgb is None:
        return diagnostic("enter a color: hex, rgb(), or hsl()")

    def show(c: RGB) -> str:
        return f"rgb({c.r}, {c.g}, {c.b})  →  {c.hex}"

    lines = [f"{'Original:':<15}{show(rgb)}"]
    for label, (note, matrix) in DICHROMACY.items():
        lines += ["", f"{label + ':':<15}{show(simulate_dichromacy(rgb, matrix))}", f"  ({note})"]
    return "\n".join(lines)


def color_tints_shades(text: str) -> str:
    rgb = parse_hex(text)
    if rgb is None:
        return diagnostic("enter a valid hex color")
    white, black = RGB(255, 255, 255), RGB(0, 0, 0)

    def row(toward: RGB, pct: int) -> str:
        c = _mix(rgb, toward, pct / 100)
        return f"  {100 - pct:>3}% — {c.hex}  rgb({c.r}, {c.g}, {c.b})"

    base = f"  100% — {rgb.hex}  (base)"
    return "\n".join(
        [
            "Tints (mixed with white):",
            *(row(white, pct) for pct in range(90, 0, -10)),
            base,
            "",
            "Shades (mixed with black):",
            base,
            *(row(black, pct) for pct in range(10, 100, 10)),
        ]
    )


def random_colors(random: RandomSource, count: int = 5, style: str = "random") -> list[str]:
    (h_lo, h_hi), (s_lo, s_hi), (l_lo, l_hi) = RANDOM_STYLES[style]

    def between(lo: int, hi: int) -> int:
        return lo + random.randbelow(hi - lo + 1)

    lines = []
    for _ in range(count):
        h, s, l = between(h_lo, h_hi), between(s_lo, s_hi), between(l_lo, l_hi)
        lines.append(f"{from_hsl(h, s, l).hex}  hsl({h}, {s}%, {l}%)")
    return lines


def build(ctx: ConverterContext) -> list[ConverterUnit]:
    def color_random(_text: str) -> str:
        return "\n".join(random_colors(ctx.random))

    return [
        TextConverter(
            id="color-convert", name="Color Converter", category="color",
            description="Convert between HEX, RGB, HSL and HSV. Auto-detects input format",
            placeholder="#ff6600", convert=color_convert,
        ),
        TextConverter(
            id="color-palette", name="Color Palette Generator", category="color",
            description="Generate complementary, analogous, and triadic colors from a hex color",
            placeholder="#3b82f6", convert=color_palette,
        ),
        TextConverter(
            id="color-contrast", name="Color Contrast Checker", category="color",
            description="Check WCAG contrast ratio. Enter two hex colors on separate lines",
            placeholder="#ffffff\n#3b82f6", convert=color_contrast,
        ),
        TextConverter(
            id="color-shades", name="Color Shades", category="color",
            description="Generate lighter and darker shades of a color", convert=color_shades,
        ),
        TextConverter(
            id="color-mix", name="Color Mixer", category="color",
            description="Mix two hex colors. Enter color1, color2, and optional ratio (0-1, default 0.5)",
            placeholder="#ff0000\n#0000ff\n0.5", convert=color_mix,
        ),
        TextConverter(
            id="color-harmonies", name="Color Harmonies", category="color",
            description="Generate color harmony schemes (complementary, triadic, analogous, etc.) from a hex color",
            placeholder="#e74c3c", convert=color_harmonies,
        ),
        TextConverter(
            id="color-gradient", name="CSS Gradient Generator", category="color",
            description="Generate a CSS gradient between two hex colors, one per line, with an optional direction",
            placeholder="#ff6600\n#3b82f6\nto right", convert=color_gradient,
        ),
        TextConverter(
            id="oklch-convert", name="OKLCH Converter", category="color",
            description="Convert a color to OKLCH and Oklab (perceptually uniform color spaces)",
            placeholder="#ff6600", convert=oklch_convert,
        ),
        TextConverter(
            id="color-blindness", name="Color Blindness Sim", category="color",
            description="Simulate how a color looks under different types of color blindness",
            convert=color_blindness,
        ),
        TextConverter(
            id="color-tints-shades", name="Tints & Shades", category="color",
            description="Generate a full range of tints (lighter) and shades (darker) from a hex color",
            placeholder="#3b82f6", convert=color_tints_shades,
        ),
        TextConverter(
            id="color-random", name="Random Color Generator", category="color",
            description="Generate five random colors", is_generator=True, convert=color_random,
        ),
    ]
