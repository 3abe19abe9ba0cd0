"""Tests for the converter catalog."""

from unittest.mock import patch

import pytest

from convert_everything.dispatcher import Dispatcher
from convert_everything.logging_config import UnitNotFoundError
from convert_everything.registry import Registry, build_registry
from convert_everything.units import CATEGORIES, ArtifactResult, FileConverter, FileInput, TextConverter, TextResult

NO_FFMPEG = "convert_everything.converters.media.shutil.which"

GROUP_ORDER = ["encode", "text", "hash", "data", "web", "number", "color", "utility", "image", "media", "document"]


class TestBuildRegistry:
    def test_ids_unique(self, ctx):
        units = build_registry(ctx)
        ids = [u.id for u in units]
        assert len(ids) == len(set(ids))

    def test_every_category_is_listed(self, ctx):
        known = {c.id for c in CATEGORIES}
        for unit in build_registry(ctx):
            assert unit.category in known, unit.id

    def test_every_unit_has_a_function(self, ctx):
        for unit in build_registry(ctx):
            if isinstance(unit, FileConverter):
                assert callable(unit.file_convert)
            else:
                assert isinstance(unit, TextConverter)
                assert callable(unit.convert)

    def test_group_order(self, ctx):
        ids = [u.id for u in build_registry(ctx)]
        assert ids[0] == "base64-encode"
        assert ids.index("sha256") < ids.index("json-prettify") < ids.index("yaml-to-json")
        assert ids.index("yaml-to-json") < ids.index("dec-to-hex") < ids.index("color-convert")
        assert ids.index("color-convert") < ids.index("epoch-now") < ids.index("png-to-jpg")
        assert ids.index("png-to-jpg") < ids.index("video-to-audio") < ids.index("merge-pdf")

    def test_duplicate_ids_rejected(self):
        unit = TextConverter(id="dup", name="Dup", category="text", description="", convert=str)
        with pytest.raises(ValueError, match="Duplicate converter id"):
            Registry(units=[unit, unit])


class TestRegistry:
    def test_find_by_id(self, registry):
        unit = registry.find_by_id("base64-encode")
        assert unit is not None
        assert unit.name == "Base64 Encode"

    def test_find_missing(self, registry):
        assert registry.find_by_id("no-such-converter") is None
        assert "no-such-converter" not in registry

    def test_require_missing_raises(self, registry):
        with pytest.raises(UnitNotFoundError):
            registry.require("no-such-converter")

    def test_filter_all(self, registry):
        assert registry.filter_by_category("all") == registry.list_all()

    def test_filter_by_category(self, registry):
        images = registry.filter_by_category("image")
        assert images
        assert all(u.category == "image" for u in images)

    def test_filter_unknown_category_empty(self, registry):
        assert registry.filter_by_category("nope") == ()

    def test_list_categories(self, registry):
        categories = registry.list_categories()
        assert [c.id for c in categories] == ["all", *GROUP_ORDER]

    def test_search_ranks_substring_first(self, registry):
        results = registry.search("base64 decode")
        assert results[0].id == "base64-decode"

    def test_search_blank_returns_category(self, registry):
        assert registry.search("  ", "color") == list(registry.filter_by_category("color"))

    def test_search_within_category(self, registry):
        results = registry.search("png", "image")
        assert results
        assert all(u.category == "image" for u in results)

    def test_len(self, registry):
        assert len(registry) == len(registry.list_all()) > 100

    def test_catalog_built_once(self, registry):
        assert registry.units is registry.units

    def test_find_by_id_every_unit(self, registry):
        for unit in registry.list_all():
            assert registry.find_by_id(unit.id) is unit

    def test_filter_keeps_catalog_order(self):
        def unit(unit_id, category):
            return TextConverter(id=unit_id, name=unit_id, category=category, description="", convert=str)

        registry = Registry(units=[unit("a", "hash"), unit("b", "color"), unit("c", "hash")])
        assert [u.id for u in registry.filter_by_category("hash")] == ["a", "c"]


class TestCatalogErrorContainment:
    """Every converter answers with a result, whatever it is given."""

    JUNK = FileInput(name="junk.bin", data=b"\x00\xffnot a real file\x89PNG")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["", "{[<(%%% \x00 \ud800 ???", "9" * 5000])
    async def test_text_inputs(self, registry, text):
        dispatcher = Dispatcher()
        with patch(NO_FFMPEG, return_value=None):
            for unit in registry.list_all():
                result = await dispatcher.dispatch(unit, text)
                assert isinstance(result, (TextResult, ArtifactResult)), unit.id

    @pytest.mark.asyncio
    async def test_junk_file(self, registry):
        dispatcher = Dispatcher()
        with patch(NO_FFMPEG, return_value=None):
            for unit in registry.list_all():
                result = await dispatcher.dispatch(unit, "junk", files=[self.JUNK, self.JUNK])
                assert isinstance(result, (TextResult, ArtifactResult)), unit.id
