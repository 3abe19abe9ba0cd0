"""Tests for PDF tools."""

import base64
import io
from unittest.mock import patch

import pytest
from pypdf import PdfReader

from convert_everything.converters import document
from convert_everything.converters.document import parse_page_range, wrap_words
from convert_everything.dispatcher import Dispatcher
from convert_everything.logging_config import DependencyError
from convert_everything.units import ArtifactResult, FileInput, TextResult


def read_artifact(result: ArtifactResult) -> PdfReader:
    return PdfReader(io.BytesIO(base64.b64decode(result.url.split(",", 1)[1])))


@pytest.fixture
def units(build_units):
    return build_units(document)


class TestParsePageRange:
    def test_range_clamped_to_document(self):
        assert parse_page_range("1-5", 3) == [0, 1, 2]

    def test_list_deduplicated_and_sorted(self):
        assert parse_page_range("3, 1, 1, x, 9", 3) == [0, 2]

    def test_blank_means_first_page(self):
        assert parse_page_range("", 3) == [0]


class TestReading:
    @pytest.mark.asyncio
    async def test_page_count(self, units, sample_pdf):
        assert await units["pdf-page-count"].file_convert(sample_pdf) == {"text": "sample.pdf: 3 pages"}

    @pytest.mark.asyncio
    async def test_page_count_singular(self, units, pdf_factory):
        single = FileInput(name="one.pdf", data=pdf_factory(1))
        assert await units["pdf-page-count"].file_convert(single) == {"text": "one.pdf: 1 page"}

    @pytest.mark.asyncio
    async def test_metadata(self, units, sample_pdf):
        result = await units["pdf-metadata"].file_convert(sample_pdf)
        report = result["text"]

        assert "Pages: 3" in report
        assert "Title: (none)" in report
        assert report.endswith("Page 1 size: 612 x 792 pts")

    @pytest.mark.asyncio
    async def test_unreadable_pdf(self, units):
        bad = FileInput(name="bad.pdf", data=b"definitely not a pdf")
        result = await Dispatcher().dispatch(units["pdf-page-count"], files=[bad])
        assert result == TextResult("(could not read PDF bad.pdf)")

    @pytest.mark.asyncio
    async def test_missing_pypdf(self, ctx, units, sample_pdf):
        error = DependencyError("PDF support is not available")
        with patch.object(ctx.codecs, "load_pdf_engine", side_effect=error):
            result = await units["pdf-page-count"].file_convert(sample_pdf)
        assert result == "(PDF support is not available)"


class TestSlicing:
    @pytest.mark.asyncio
    async def test_split(self, units, sample_pdf):
        result = await units["pdf-split"].file_convert(sample_pdf, "2")

        assert result.filename == "sample_page2.pdf"
        assert result.info == "Extracted page 2 of 3"
        assert result.mime_type == "application/pdf"
        assert len(read_artifact(result).pages) == 1

    @pytest.mark.asyncio
    async def test_split_out_of_range(self, units, sample_pdf):
        result = await Dispatcher().dispatch(units["pdf-split"], files=sample_pdf, auxiliary_text="5")
        assert result == TextResult("(Page 5 doesn't exist (PDF has 3 pages))")

    @pytest.mark.asyncio
    async def test_extract_range(self, units, sample_pdf):
        result = await units["pdf-extract-range"].file_convert(sample_pdf, "1,3")

        assert result.filename == "sample_pages.pdf"
        assert result.info == "Extracted 2 page(s) from 3"
        assert len(read_artifact(result).pages) == 2

    @pytest.mark.asyncio
    async def test_extract_empty_range(self, units, sample_pdf):
        result = await Dispatcher().dispatch(units["pdf-extract-range"], files=sample_pdf, auxiliary_text="9-10")
        assert result == TextResult("(No valid pages in range)")

    @pytest.mark.asyncio
    async def test_rotate(self, units, sample_pdf):
        result = await units["pdf-rotate"].file_convert(sample_pdf, "180")

        assert result.filename == "sample_rotated180.pdf"
        assert result.info == "Rotated 3 pages by 180 degrees"
        assert read_artifact(result).pages[0].rotation == 180

    @pytest.mark.asyncio
    async def test_rotate_requires_right_angles(self, units, sample_pdf):
        result = await Dispatcher().dispatch(units["pdf-rotate"], files=sample_pdf, auxiliary_text="45")
        assert result == TextResult("(rotation must be a multiple of 90 degrees)")


class TestCombining:
    @pytest.mark.asyncio
    async def test_merge(self, units, pdf_factory):
        files = [FileInput(name="a.pdf", data=pdf_factory(3)), FileInput(name="b.pdf", data=pdf_factory(2))]
        result = await units["merge-pdf"].file_convert(files)

        assert result.filename == "merged.pdf"
        assert result.info == "Merged 2 files, 5 pages"
        assert len(read_artifact(result).pages) == 5

    @pytest.mark.asyncio
    async def test_dispatcher_passes_all_files(self, units, pdf_factory):
        files = [FileInput(name="a.pdf", data=pdf_factory(1)), FileInput(name="b.pdf", data=pdf_factory(1))]
        result = await Dispatcher().dispatch(units["merge-pdf"], files=files)
        assert result.info == "Merged 2 files, 2 pages"

    @pytest.mark.asyncio
    async def test_images_to_pdf(self, units, png_factory):
        files = [
            FileInput(name="a.png", data=png_factory((20, 10))),
            FileInput(name="b.png", data=png_factory((10, 20), (0, 255, 0, 255), "RGBA")),
        ]
        result = await units["images-to-pdf"].file_convert(files)

        assert result.filename == "combined.pdf"
        assert result.info == "2 pages"
        reader = read_artifact(result)
        assert len(reader.pages) == 2
        assert round(float(reader.pages[0].mediabox.width)) == 20


class TestWrapWords:
    def test_wraps_at_width(self):
        assert wrap_words("the quick brown fox", lambda line: len(line) <= 9) == ["the quick", "brown fox"]

    def test_blank_lines_and_long_words(self):
        assert wrap_words("a\n\nextraordinary b", lambda line: len(line) <= 5) == ["a", "", "extraordinary", "b"]


class TestTextToPdf:
    @pytest.mark.asyncio
    async def test_text_is_typeset(self, units):
        result = await units["text-to-pdf"].convert("Hello PDF\nsecond line")

        assert result.filename == "document.pdf"
        assert result.info == "2 lines, 1 page"
        assert "Hello PDF" in read_artifact(result).pages[0].extract_text()

    @pytest.mark.asyncio
    async def test_long_text_spans_pages(self, units):
        text = "\n".join(f"line {n}" for n in range(200))
        result = await units["text-to-pdf"].convert(text)
        assert result.info == "200 lines, 5 pages"
        assert len(read_artifact(result).pages) == 5

    @pytest.mark.asyncio
    async def test_blank_input(self, units):
        assert await units["text-to-pdf"].convert("   ") == ""
