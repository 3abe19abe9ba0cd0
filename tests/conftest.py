"""Pytest configuration and fixtures for converter tests."""

import io
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Generator

import pytest

from convert_everything.artifacts import ArtifactStore
from convert_everything.config import ToolkitConfig
from convert_everything.providers import ConverterContext, SeededRandomSource
from convert_everything.registry import Registry
from convert_everything.units import FileInput

pytest_plugins = ["pytest_asyncio"]

FIXED_NOW = datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def ctx() -> ConverterContext:
    """Context with seeded randomness, a fixed clock and inline artifacts."""
    return ConverterContext(
        config=ToolkitConfig(),
        random=SeededRandomSource(42),
        artifacts=ArtifactStore(mode="data"),
        clock=lambda: FIXED_NOW,
    )


@pytest.fixture
def registry(ctx: ConverterContext) -> Registry:
    return Registry(context=ctx)


@pytest.fixture
def build_units(ctx: ConverterContext):
    """Build a converter group against the test context, keyed by unit id."""

    def _build(module) -> dict:
        return {unit.id: unit for unit in module.build(ctx)}

    return _build


def make_png(size=(4, 2), color=(255, 0, 0), mode="RGB") -> bytes:
    from PIL import Image

    buffer = io.BytesIO()
    Image.new(mode, size, color=color).save(buffer, format="PNG")
    return buffer.getvalue()


def make_pdf(pages: int = 3, width: float = 612, height: float = 792) -> bytes:
    from pypdf import PdfWriter

    writer = PdfWriter()
    for _ in range(pages):
        writer.add_blank_page(width=width, height=height)
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


@pytest.fixture
def sample_png() -> FileInput:
    """A 4x2 red PNG."""
    return FileInput(name="sample.png", data=make_png())


@pytest.fixture
def sample_rgba_png() -> FileInput:
    """A 4x4 half-transparent blue PNG."""
    return FileInput(name="alpha.png", data=make_png((4, 4), (0, 0, 255, 128), "RGBA"))


@pytest.fixture
def sample_pdf() -> FileInput:
    """A three-page letter-size PDF."""
    return FileInput(name="sample.pdf", data=make_pdf(3))


@pytest.fixture
def sample_image_file(temp_dir: Path) -> Path:
    """Create a sample PNG image file for testing."""
    image_file = temp_dir / "sample.png"
    image_file.write_bytes(make_png())
    return image_file


@pytest.fixture
def png_factory():
    return make_png


@pytest.fixture
def pdf_factory():
    return make_pdf
