"""Tests for fuzzy search."""

from convert_everything.fuzzy import fuzzy_filter, fuzzy_match


class TestFuzzyMatch:
    def test_empty_query(self):
        assert fuzzy_match("", "anything") == 0

    def test_substring_beats_subsequence(self):
        assert fuzzy_match("json", "JSON Prettify") > fuzzy_match("jsp", "JSON Prettify") > 0

    def test_substring_prefers_shorter_target(self):
        assert fuzzy_match("hex", "Hex") > fuzzy_match("hex", "Text to Hex")

    def test_no_match(self):
        assert fuzzy_match("xyz", "Base64 Encode") == 0

    def test_word_start_bonus(self):
        assert fuzzy_match("ie", "image-info") > fuzzy_match("ie", "pixel")


class TestFuzzyFilter:
    def test_blank_query_keeps_order(self):
        items = ["b", "a", "c"]
        assert fuzzy_filter(" ", items, lambda s: [s]) == items

    def test_best_first(self):
        items = ["Text to Hex", "Hex to Text", "Binary"]
        result = fuzzy_filter("hex to", items, lambda s: [s])
        assert result[0] == "Hex to Text"
        assert "Binary" not in result

    def test_best_of_several_fields(self):
        items = [("Alpha", "zzz"), ("Beta", "alpha-beta")]
        result = fuzzy_filter("alpha", items, lambda pair: pair)
        assert result[0] == ("Alpha", "zzz")
