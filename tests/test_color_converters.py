"""Tests for color conversion and palettes."""

import re

from convert_everything.converters import color
from convert_everything.converters.color import RGB
from convert_everything.providers import SeededRandomSource


class TestParsing:
    def test_hex_shorthand(self):
        assert color.parse_color("#f60") == RGB(255, 102, 0)

    def test_functional_notations(self):
        assert color.parse_color("rgb(255, 102, 0)") == RGB(255, 102, 0)
        assert color.parse_color("hsl(24, 100%, 50%)") == RGB(255, 102, 0)
        assert color.parse_color("hsv(0, 100%, 100%)") == RGB(255, 0, 0)

    def test_unknown(self):
        assert color.parse_color("chartreuse-ish") is None


class TestConvert:
    def test_all_spaces(self):
        assert color.color_convert("#ff6600") == (
            "HEX:  #ff6600\n"
            "RGB:  rgb(255, 102, 0)\n"
            "HSL:  hsl(24, 100%, 50%)\n"
            "HSV:  hsv(24, 100%, 100%)"
        )

    def test_blank_and_invalid(self):
        assert color.color_convert("  ") == ""
        assert color.color_convert("nope").startswith("(enter a hex like")


class TestPaletteTools:
    def test_palette_complementary(self):
        assert "-- Complementary --\n  #00ffff" in color.color_palette("#ff0000")

    def test_contrast_black_white(self):
        report = color.color_contrast("#000000\n#ffffff")
        assert "Contrast Ratio: 21.00:1" in report
        assert "FAIL" not in report

    def test_contrast_needs_two_colors(self):
        assert color.color_contrast("#000000") == "(enter two hex colors on separate lines)"
        assert color.color_contrast("#000000\nnope") == "(invalid hex colors)"

    def test_mix_midpoint(self):
        report = color.color_mix("#000000\n#ffffff")
        assert "Result:   #808080" in report
        assert "   50%  #808080 ← selected" in report

    def test_mix_ratio_validation(self):
        assert color.color_mix("#000000\n#ffffff\nhalf") == "(ratio must be a number between 0 and 1)"

    def test_shades(self):
        report = color.color_shades("#ff6600")
        assert report.startswith("Shades for #ff6600:")
        assert len(report.split("\n")) == 12


class TestRandom:
    def test_seeded_styles_in_range(self):
        lines = color.random_colors(SeededRandomSource(1), 3, "neon")
        assert len(lines) == 3
        for line in lines:
            assert re.fullmatch(r"#[0-9a-f]{6}  hsl\(\d+, 100%, (5\d|60)%\)", line)

    def test_generator_unit_ignores_input(self, build_units):
        units = build_units(color)
        assert units["color-random"].is_generator
        first = units["color-random"].convert("")
        assert len(first.split("\n")) == 5


class TestSchemes:
    def test_harmonies(self):
        lines = color.color_harmonies("ff0000").split("\n")
        assert lines[0] == "Base: #ff0000  hsl(0, 100%, 50%)"
        assert lines[3] == "  #00ffff  hsl(180, 100%, 50%)"
        assert lines[6].endswith("  hsl(330, 100%, 50%)")
        assert len(lines) == 21

    def test_harmonies_invalid(self):
        assert color.color_harmonies("rgb(1, 2, 3)") == "(enter a valid hex color)"

    def test_gradient(self):
        result = color.color_gradient("#000000\n#ffffff")
        assert "background: linear-gradient(to right, #000000, #ffffff);" in result
        assert "  #404040 25%,\n  #808080 50%,\n  #bfbfbf 75%," in result
        assert result.endswith("  #ffffff  100%")

    def test_gradient_direction(self):
        assert "linear-gradient(45deg, #ff0000, #0000ff);" in color.color_gradient("#f00\n#00f\n45deg")

    def test_gradient_needs_two_colors(self):
        assert color.color_gradient("#fff") == "(enter two hex colors on separate lines)"

    def test_tints_and_shades(self):
        lines = color.color_tints_shades("#ffffff").split("\n")
        assert lines[0] == "Tints (mixed with white):"
        assert "   50% — #808080  rgb(128, 128, 128)" in lines
        assert lines.count("  100% — #ffffff  (base)") == 2


class TestPerception:
    def test_oklch_black(self):
        lines = color.oklch_convert("#000000").split("\n")
        assert lines[2] == "OKLCH:  oklch(0.00% 0.0000 0.00)"
        assert lines[3] == "Oklab:  oklab(0.00% 0.0000 0.0000)"

    def test_oklch_red(self):
        result = color.oklch_convert("rgb(255, 0, 0)")
        assert "Lightness: 62.80%" in result.split("\n")
        assert "HSL:    hsl(0, 100%, 50%)" in result

    def test_oklch_invalid(self):
        assert color.oklch_convert("nope") == "(enter a hex like #ff6600 or rgb(255,102,0))"

    def test_blindness_keeps_white(self):
        lines = color.color_blindness("#fff").split("\n")
        assert lines[0] == "Original:      rgb(255, 255, 255)  →  #ffffff"
        assert lines[2] == "Protanopia:    rgb(255, 255, 255)  →  #ffffff"
        assert lines[-2] == "Tritanopia:    rgb(255, 255, 255)  →  #ffffff"
        assert lines[-1] == "  (no blue cones, very rare)"

    def test_blindness_shifts_red(self):
        protan = color.color_blindness("#ff0000").split("\n")[2]
        assert not protan.endswith("#ff0000")
