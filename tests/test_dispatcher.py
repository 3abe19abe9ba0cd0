"""Tests for converter invocation and result normalization."""

import pytest

from convert_everything.dispatcher import (
    Dispatcher,
    NO_FILE_DIAGNOSTIC,
    as_plain,
    dispatch_by_id,
    error_diagnostic,
    normalize_result,
)
from convert_everything.logging_config import InvalidInputError
from convert_everything.registry import Registry
from convert_everything.units import ArtifactResult, FileConverter, FileInput, TextConverter, TextResult


def text_unit(convert, **kwargs) -> TextConverter:
    return TextConverter(id="t", name="T", category="text", description="", convert=convert, **kwargs)


def file_unit(file_convert, **kwargs) -> FileConverter:
    return FileConverter(id="f", name="F", category="image", description="", file_convert=file_convert, **kwargs)


class TestNormalizeResult:
    def test_string(self):
        assert normalize_result("abc") == TextResult("abc")

    def test_none(self):
        assert normalize_result(None) == TextResult("")

    def test_text_dict(self):
        assert normalize_result({"text": "pages: 3"}) == TextResult("pages: 3")

    def test_artifact_dict(self):
        result = normalize_result({"url": "data:,x", "filename": "x.bin", "size": 1, "info": "note"})
        assert isinstance(result, ArtifactResult)
        assert result.filename == "x.bin"
        assert result.info == "note"

    def test_result_passthrough(self):
        artifact = ArtifactResult(url="data:,", filename="a", size=0)
        assert normalize_result(artifact) is artifact

    def test_unsupported(self):
        with pytest.raises(TypeError):
            normalize_result(42)

    def test_as_plain(self):
        assert as_plain(TextResult("x")) == "x"


class TestErrorDiagnostic:
    def test_converter_error(self):
        assert error_diagnostic(InvalidInputError("bad page")) == "(bad page)"

    def test_other_error_first_line(self):
        assert error_diagnostic(ValueError("boom\ntraceback stuff")) == "(error: boom)"

    def test_empty_message(self):
        assert error_diagnostic(RuntimeError()) == "(conversion error)"

    def test_truncated(self):
        assert error_diagnostic(ValueError("y" * 500)) == "(error: " + "y" * 200 + ")"


class TestDispatch:
    @pytest.mark.asyncio
    async def test_text_unit(self):
        result = await Dispatcher().dispatch(text_unit(str.upper), "hello")
        assert result == TextResult("HELLO")

    @pytest.mark.asyncio
    async def test_async_text_unit(self):
        async def convert(text):
            return text[::-1]

        result = await Dispatcher().dispatch(text_unit(convert), "abc")
        assert result == TextResult("cba")

    @pytest.mark.asyncio
    async def test_generator_ignores_input(self):
        seen = []

        def convert(text):
            seen.append(text)
            return "generated"

        await Dispatcher().dispatch(text_unit(convert, is_generator=True), "ignored")
        assert seen == [""]

    @pytest.mark.asyncio
    async def test_exception_becomes_diagnostic(self):
        def convert(_text):
            raise KeyError("missing")

        result = await Dispatcher().dispatch(text_unit(convert), "x")
        assert result == TextResult("(error: 'missing')")

    @pytest.mark.asyncio
    async def test_async_exception_becomes_diagnostic(self):
        async def convert(_text):
            raise InvalidInputError("page out of range")

        result = await Dispatcher().dispatch(text_unit(convert), "x")
        assert result == TextResult("(page out of range)")

    @pytest.mark.asyncio
    async def test_async_file_exception_becomes_diagnostic(self):
        async def file_convert(_file, _aux):
            raise RuntimeError("decoder crashed")

        f = FileInput(name="a.png", data=b"1")
        result = await Dispatcher().dispatch(file_unit(file_convert), files=f)
        assert result == TextResult("(error: decoder crashed)")

    @pytest.mark.asyncio
    async def test_file_unit_single_file(self):
        calls = []

        def file_convert(files, aux):
            calls.append((files, aux))
            return {"text": "ok"}

        f = FileInput(name="a.png", data=b"1")
        result = await Dispatcher().dispatch(file_unit(file_convert), files=[f, f], auxiliary_text="90")
        assert result == TextResult("ok")
        assert calls == [(f, "90")]

    @pytest.mark.asyncio
    async def test_file_unit_multiple_files(self):
        received = []
        f1, f2 = FileInput(name="a.pdf", data=b"1"), FileInput(name="b.pdf", data=b"2")
        unit = file_unit(lambda files, aux: received.append(files) or "", multiple_files=True)
        await Dispatcher().dispatch(unit, files=[f1, f2])
        assert received == [[f1, f2]]

    @pytest.mark.asyncio
    async def test_file_unit_without_file_uses_text_fallback(self):
        unit = file_unit(lambda files, aux: "file", convert=lambda text: f"text:{text}")
        assert await Dispatcher().dispatch(unit, "abc") == TextResult("text:abc")

    @pytest.mark.asyncio
    async def test_file_unit_without_file_or_fallback(self):
        unit = file_unit(lambda files, aux: "file")
        assert await Dispatcher().dispatch(unit, "abc") == TextResult(NO_FILE_DIAGNOSTIC)

    @pytest.mark.asyncio
    async def test_file_unit_prefers_file(self):
        unit = file_unit(lambda files, aux: "file", convert=lambda text: "text")
        f = FileInput(name="a.png", data=b"1")
        assert await Dispatcher().dispatch(unit, "abc", files=f) == TextResult("file")


class TestDispatchById:
    @pytest.mark.asyncio
    async def test_known_id(self, registry):
        result = await dispatch_by_id("base64-encode", "Hello", registry=registry)
        assert result == TextResult("SGVsbG8=")

    @pytest.mark.asyncio
    async def test_unknown_id(self):
        result = await dispatch_by_id("gone", registry=Registry(units=[]))
        assert result == TextResult("(unknown converter: gone)")
