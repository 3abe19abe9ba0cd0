"""
PDF converters using pypdf, with Pillow for images to PDF and reportlab
for text to PDF.

All three libraries are loaded lazily from the context's CodecProvider and all
parsing and writing runs in the executor.
"""

import io
import re
from typing import Callable, Optional, Sequence, Union

from ..artifacts import ArtifactStore
from ..async_utils import run_blocking
from ..logging_config import DependencyError, InvalidInputError, get_logger
from ..providers import CodecProvider, ConverterContext
from ..units import ArtifactResult, ConverterUnit, FileConverter, FileInput, TextConverter
from .common import all_files, first_file, parse_int, plural

logger = get_logger("converters.document")

FilesArg = Union[FileInput, Sequence[FileInput]]

PDF_MIME = "application/pdf"
PDF_ACCEPT = "application/pdf,.pdf"

# A4 in points
PAGE_WIDTH, PAGE_HEIGHT = 595, 842
PAGE_MARGIN = 50
TEXT_FONT = "Helvetica"
TEXT_FONT_SIZE = 11
TEXT_LINE_HEIGHT = TEXT_FONT_SIZE * 1.4


def parse_page_range(text: str, total: int) -> list[int]:
    """Parse ``1-5`` or ``1,3,5`` into sorted zero-based page indices.

    Pages outside 1..total are dropped.
    """
    pages: set[int] = set()
    for part in (text.strip() or "1").split(","):
        part = part.strip()
        if match := re.fullmatch(r"(\d{1,9})\s*-\s*(\d{1,9})", part):
            start, end = int(match.group(1)), int(match.group(2))
            pages.update(i - 1 for i in range(max(1, start), min(end, total) + 1))
        elif part.isdigit() and len(part) < 10 and 1 <= int(part) <= total:
            pages.add(int(part) - 1)
    return sorted(pages)


def pdf_stem(name: str) -> str:
    return re.sub(r"\.pdf$", "", name, flags=re.IGNORECASE)


def wrap_words(text: str, fits: Callable[[str], bool]) -> list[str]:
    """Greedy word wrap; blank lines survive and an overlong word gets its own line."""
    wrapped = []
    for line in text.split("\n"):
        if not line.strip():
            wrapped.append("")
            continue
        current = ""
        for word in line.split(" "):
            candidate = f"{current} {word}" if current else word
            if current and not fits(candidate):
                wrapped.append(current)
                current = word
            else:
                current = candidate
        if current:
            wrapped.append(current)
    return wrapped


class PdfTools:
    """Read, slice and write PDFs."""

    def __init__(self, codecs: CodecProvider, artifacts: ArtifactStore):
        self.codecs = codecs
        self.artifacts = artifacts

    def _read(self, file: FileInput):
        pypdf = self.codecs.load_pdf_engine()
        try:
            reader = pypdf.PdfReader(io.BytesIO(file.data))
            _ = len(reader.pages)
        except (pypdf.errors.PdfReadError, ValueError, KeyError) as e:
            raise InvalidInputError(
                f"could not read PDF {file.name}",
                suggestion="Check that the file is a valid, unencrypted PDF",
            ) from e
        return reader

    def _write(self, writer) -> bytes:
        buffer = io.BytesIO()
        writer.write(buffer)
        return buffer.getvalue()

    def _pdf(self, data: bytes, filename: str, info: Optional[str] = None) -> ArtifactResult:
        return self.artifacts.create(data, filename, mime_type=PDF_MIME, info=info)

    async def page_count(self, file: FileInput) -> str:
        count = await run_blocking(lambda: len(self._read(file).pages))
        return f"{file.name}: {plural(count, 'page')}"

    async def select_pages(self, file: FileInput, indices_for, suffix: str, describe) -> ArtifactResult:
        """Copy the pages chosen by ``indices_for(total)`` into a new PDF."""
        pypdf = self.codecs.load_pdf_engine()

        def _select_sync() -> tuple[bytes, list[int], int]:
            reader = self._read(file)
            total = len(reader.pages)
            indices = indices_for(total)
            writer = pypdf.PdfWriter()
            for index in indices:
                writer.add_page(reader.pages[index])
            return self._write(writer), indices, total

        data, indices, total = await run_blocking(_select_sync)
        return self._pdf(data, pdf_stem(file.name) + suffix, describe(indices, total))

    async def merge(self, files: list[FileInput]) -> ArtifactResult:
        pypdf = self.codecs.load_pdf_engine()

        def _merge_sync() -> tuple[bytes, int]:
            writer = pypdf.PdfWriter()
            for file in files:
                for page in self._read(file).pages:
                    writer.add_page(page)
            return self._write(writer), len(writer.pages)

        data, pages = await run_blocking(_merge_sync)
        logger.info(f"Merged {len(files)} PDFs into {pages} pages")
        return self._pdf(data, "merged.pdf", f"Merged {plural(len(files), 'file')}, {plural(pages, 'page')}")

    async def images_to_pdf(self, files: list[FileInput]) -> ArtifactResult:
        """One page per image, each page sized to its image."""
        Image = self.codecs.load_image_engine()

        def _combine_sync() -> bytes:
            pages = []
            for file in files:
                try:
                    with Image.open(io.BytesIO(file.data)) as img:
                        pages.append(img.convert("RGB"))
                except (OSError, SyntaxError, ValueError) as e:
                    raise InvalidInputError(f"could not read image {file.name}") from e
            buffer = io.BytesIO()
            pages[0].save(buffer, format="PDF", save_all=True, append_images=pages[1:], resolution=72.0)
            return buffer.getvalue()

        data = await run_blocking(_combine_sync)
        return self._pdf(data, "combined.pdf", plural(len(files), "page"))

    async def text_to_pdf(self, text: str) -> ArtifactResult:
        """Typeset plain text on A4 pages, wrapping at the right margin."""
        canvas = self.codecs.load_pdf_canvas()
        pdfmetrics = self.codecs.load_pdf_metrics()
        max_width = PAGE_WIDTH - 2 * PAGE_MARGIN
        top = PAGE_HEIGHT - PAGE_MARGIN

        def _render_sync() -> tuple[bytes, int, int]:
            lines = wrap_words(
                text, lambda line: pdfmetrics.stringWidth(line, TEXT_FONT, TEXT_FONT_SIZE) <= max_width
            )
            buffer = io.BytesIO()
            pdf = canvas.Canvas(buffer, pagesize=(PAGE_WIDTH, PAGE_HEIGHT))

            def start_page():
                pdf.setFont(TEXT_FONT, TEXT_FONT_SIZE)
                pdf.setFillColorRGB(0.1, 0.1, 0.1)

            start_page()
            pages, y = 1, top
            for line in lines:
                if y < PAGE_MARGIN + TEXT_LINE_HEIGHT:
                    pdf.showPage()
                    start_page()
                    pages, y = pages + 1, top
                if line:
                    pdf.drawString(PAGE_MARGIN, y, line)
                y -= TEXT_LINE_HEIGHT
            pdf.save()
            return buffer.getvalue(), len(lines), pages

        data, line_count, pages = await run_blocking(_render_sync)
        logger.info(f"Typeset {plural(line_count, 'line')} on {plural(pages, 'page')}")
        return self._pdf(data, "document.pdf", f"{plural(line_count, 'line')}, {plural(pages, 'page')}")

    async def metadata(self, file: FileInput) -> str:
        def _metadata_sync() -> list[str]:
            reader = self._read(file)
            meta = reader.metadata

            def field(name: str) -> str:
                value = getattr(meta, name, None) if meta is not None else None
                return str(value) if value else "(none)"

            def date(name: str) -> str:
                try:
                    value = getattr(meta, name, None) if meta is not None else None
                except ValueError:
                    value = None
                return value.isoformat() if value else "(unknown)"

            lines = [
                f"File: {file.name}",
                f"Pages: {len(reader.pages)}",
                f"Title: {field('title')}",
                f"Author: {field('author')}",
                f"Subject: {field('subject')}",
                f"Creator: {field('creator')}",
                f"Producer: {field('producer')}",
                f"Created: {date('creation_date')}",
                f"Modified: {date('modification_date')}",
            ]
            if reader.pages:
                box = reader.pages[0].mediabox
                lines.append(f"Page 1 size: {round(float(box.width))} x {round(float(box.height))} pts")
            return lines

        return "\n".join(await run_blocking(_metadata_sync))

    async def rotate(self, file: FileInput, degrees: int) -> ArtifactResult:
        if degrees % 90:
            raise InvalidInputError("rotation must be a multiple of 90 degrees")
        pypdf = self.codecs.load_pdf_engine()

        def _rotate_sync() -> tuple[bytes, int]:
            reader = self._read(file)
            writer = pypdf.PdfWriter()
            for page in reader.pages:
                writer.add_page(page).rotate(degrees)
            return self._write(writer), len(reader.pages)

        data, count = await run_blocking(_rotate_sync)
        return self._pdf(
            data,
            f"{pdf_stem(file.name)}_rotated{degrees}.pdf",
            f"Rotated {plural(count, 'page')} by {degrees} degrees",
        )


def build(ctx: ConverterContext) -> list[ConverterUnit]:
    tools = PdfTools(ctx.codecs, ctx.artifacts)

    def guarded(handler):
        """Missing pypdf or Pillow becomes a diagnostic result."""

        async def _run(files: FilesArg, text: Optional[str] = None):
            try:
                return await handler(files, text)
            except DependencyError as e:
                return e.diagnostic()

        return _run

    async def images_to_pdf(files: FilesArg, _text: Optional[str]):
        return await tools.images_to_pdf(all_files(files))

    async def merge_pdf(files: FilesArg, _text: Optional[str]):
        return await tools.merge(all_files(files))

    async def page_count(files: FilesArg, _text: Optional[str]):
        return {"text": await tools.page_count(first_file(files))}

    async def split(files: FilesArg, text: Optional[str]):
        page = parse_int(text, 1)

        def indices_for(total: int) -> list[int]:
            if page < 1 or page > total:
                raise InvalidInputError(f"Page {page} doesn't exist (PDF has {plural(total, 'page')})")
            return [page - 1]

        return await tools.select_pages(
            first_file(files),
            indices_for,
            f"_page{page}.pdf",
            lambda _indices, total: f"Extracted page {page} of {total}",
        )

    async def extract_range(files: FilesArg, text: Optional[str]):
        def indices_for(total: int) -> list[int]:
            indices = parse_page_range(text or "", total)
            if not indices:
                raise InvalidInputError("No valid pages in range")
            return indices

        return await tools.select_pages(
            first_file(files),
            indices_for,
            "_pages.pdf",
            lambda indices, total: f"Extracted {len(indices)} page(s) from {total}",
        )

    async def metadata(files: FilesArg, _text: Optional[str]):
        return {"text": await tools.metadata(first_file(files))}

    async def rotate(files: FilesArg, text: Optional[str]):
        return await tools.rotate(first_file(files), parse_int(text, 90))

    async def text_to_pdf(text: str):
        if not text.strip():
            return ""
        try:
            return await tools.text_to_pdf(text)
        except DependencyError as e:
            return e.diagnostic()

    return [
        FileConverter(
            id="images-to-pdf", name="Images to PDF", category="document",
            description="Combine multiple images into a single PDF, one page per image",
            accept_types="image/*", multiple_files=True, is_media_converter=True,
            file_convert=guarded(images_to_pdf),
        ),
        FileConverter(
            id="merge-pdf", name="Merge PDFs", category="document",
            description="Merge multiple PDF files into one",
            accept_types=PDF_ACCEPT, multiple_files=True, is_media_converter=True,
            file_convert=guarded(merge_pdf),
        ),
        FileConverter(
            id="pdf-page-count", name="PDF Page Count", category="document",
            description="Get the number of pages in a PDF file",
            accept_types=PDF_ACCEPT, is_media_converter=True, file_convert=guarded(page_count),
        ),
        FileConverter(
            id="pdf-split", name="PDF Split (Extract Page)", category="document",
            description="Extract a single page from a PDF. Enter page number in text field",
            accept_types=PDF_ACCEPT, is_media_converter=True, has_text_input=True,
            text_placeholder="Page number (e.g. 1)", file_convert=guarded(split),
        ),
        FileConverter(
            id="pdf-extract-range", name="PDF Extract Pages", category="document",
            description="Extract a range of pages from a PDF. Enter range like 1-5 or 1,3,5",
            accept_types=PDF_ACCEPT, is_media_converter=True, has_text_input=True,
            text_placeholder="Page range (e.g. 1-5 or 1,3,5)", file_convert=guarded(extract_range),
        ),
        FileConverter(
            id="pdf-metadata", name="PDF Metadata", category="document",
            description="View metadata of a PDF file (title, author, dates, etc.)",
            accept_types=PDF_ACCEPT, is_media_converter=True, file_convert=guarded(metadata),
        ),
        FileConverter(
            id="pdf-rotate", name="PDF Rotate Pages", category="document",
            description="Rotate all pages in a PDF. Enter degrees (90, 180, 270)",
            accept_types=PDF_ACCEPT, is_media_converter=True, has_text_input=True,
            text_placeholder="Degrees: 90, 180, or 270", file_convert=guarded(rotate),
        ),
        TextConverter(
            id="text-to-pdf", name="Text to PDF", category="document",
            description="Convert plain text into a simple A4 PDF document",
            placeholder="Type or paste the text to typeset", convert=text_to_pdf,
        ),
    ]
