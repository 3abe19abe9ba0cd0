"""Tests for QR code generation and reading."""

import base64
import io

import pytest
from PIL import Image

from convert_everything.converters import qr
from convert_everything.dispatcher import Dispatcher
from convert_everything.units import ArtifactResult, FileInput, TextResult


@pytest.fixture
def units(build_units):
    return build_units(qr)


def artifact_file(result: ArtifactResult) -> FileInput:
    return FileInput(name=result.filename, data=base64.b64decode(result.url.split(",", 1)[1]))


class TestTextToQr:
    @pytest.mark.asyncio
    async def test_renders_png_preview(self, units):
        unit = units["text-to-qr"]
        result = await unit.convert("https://example.com")

        assert unit.shows_preview is True
        assert isinstance(result, ArtifactResult)
        assert result.mime_type == "image/png"
        assert result.info.startswith("QR ")
        with Image.open(io.BytesIO(artifact_file(result).data)) as img:
            assert img.format == "PNG"
            assert img.width == img.height >= 100

    @pytest.mark.asyncio
    async def test_blank_input(self, units):
        assert await units["text-to-qr"].convert("   ") == ""

    @pytest.mark.asyncio
    async def test_overflow_is_diagnostic(self, units):
        result = await Dispatcher().dispatch(units["text-to-qr"], "x" * 5000)
        assert result == TextResult("(text too long for a QR code)")


class TestQrToText:
    @pytest.mark.asyncio
    async def test_reads_generated_code(self, units):
        image = await units["text-to-qr"].convert("Hello, QR!")
        result = await Dispatcher().dispatch(units["qr-to-text"], files=artifact_file(image))
        assert result == TextResult("Hello, QR!")

    @pytest.mark.asyncio
    async def test_image_without_code(self, units, sample_png):
        result = await Dispatcher().dispatch(units["qr-to-text"], files=sample_png)
        assert result == TextResult("(no QR code found in image)")

    @pytest.mark.asyncio
    async def test_unreadable_image(self, units):
        junk = FileInput(name="junk.png", data=b"not an image")
        result = await Dispatcher().dispatch(units["qr-to-text"], files=junk)
        assert result == TextResult("(could not read image junk.png)")
