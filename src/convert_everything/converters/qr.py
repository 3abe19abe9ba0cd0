"""
QR code converters.

segno renders text to a PNG symbol; OpenCV's QRCodeDetector reads a symbol
back out of any Pillow-readable image. All three libraries come from the
context's CodecProvider and the work runs through run_blocking.
"""

import io
from typing import Optional, Sequence, Union

from ..artifacts import ArtifactStore
from ..async_utils import run_blocking
from ..logging_config import DependencyError, InvalidInputError, get_logger
from ..providers import CodecProvider, ConverterContext
from ..units import ArtifactResult, ConverterUnit, FileConverter, FileInput, TextConverter
from .common import first_file

logger = get_logger("converters.qr")

FilesArg = Union[FileInput, Sequence[FileInput]]

QR_WIDTH = 300
QR_BORDER = 4
QR_DARK = "#2c2a25"
QR_LIGHT = "#faf8f5"


class QrCodec:
    """Render and read QR codes."""

    def __init__(self, codecs: CodecProvider, artifacts: ArtifactStore):
        self.codecs = codecs
        self.artifacts = artifacts

    def render(self, text: str) -> tuple[bytes, str]:
        """PNG bytes of the symbol for ``text`` and its version designator."""
        segno = self.codecs.load_qr_encoder()
        try:
            code = segno.make_qr(text, error="m")
        except segno.DataOverflowError:
            raise InvalidInputError("text too long for a QR code") from None

        modules, _ = code.symbol_size(scale=1, border=QR_BORDER)
        buffer = io.BytesIO()
        code.save(
            buffer,
            kind="png",
            scale=max(1, QR_WIDTH // modules),
            border=QR_BORDER,
            dark=QR_DARK,
            light=QR_LIGHT,
        )
        return buffer.getvalue(), code.designator

    def read(self, file: FileInput) -> str:
        Image = self.codecs.load_image_engine()
        numpy = self.codecs.load_array_module()
        cv2 = self.codecs.load_qr_detector()
        try:
            with Image.open(io.BytesIO(file.data)) as img:
                pixels = numpy.asarray(img.convert("L"))
        except (OSError, SyntaxError, ValueError) as e:
            raise InvalidInputError(f"could not read image {file.name}") from e

        decoded, _points, _straight = cv2.QRCodeDetector().detectAndDecode(pixels)
        if not decoded:
            raise InvalidInputError("no QR code found in image")
        return decoded

    async def encode(self, text: str) -> Union[ArtifactResult, str]:
        if not text.strip():
            return ""
        data, designator = await run_blocking(self.render, text)
        logger.info(f"Rendered QR code {designator} for {len(text)} characters")
        return self.artifacts.create(data, "qr-code.png", mime_type="image/png", info=f"QR {designator}")

    async def decode(self, file: FileInput) -> str:
        return await run_blocking(self.read, file)


def build(ctx: ConverterContext) -> list[ConverterUnit]:
    qr = QrCodec(ctx.codecs, ctx.artifacts)

    async def text_to_qr(text: str):
        try:
            return await qr.encode(text)
        except DependencyError as e:
            return e.diagnostic()

    async def qr_to_text(files: FilesArg, _text: Optional[str] = None):
        try:
            return {"text": await qr.decode(first_file(files))}
        except DependencyError as e:
            return e.diagnostic()

    return [
        TextConverter(
            id="text-to-qr", name="Text to QR Code", category="encode",
            description="Generate a QR code from any text or URL", placeholder="https://example.com",
            shows_preview=True, convert=text_to_qr,
        ),
        FileConverter(
            id="qr-to-text", name="QR Code Reader", category="encode",
            description="Read text from a QR code image. Drop or upload a QR code",
            accept_types="image/*", is_media_converter=True, file_convert=qr_to_text,
        ),
    ]
