"""
Image converters using Pillow + CairoSVG.

Supports:
- Format conversion between PNG, JPEG and WebP (any Pillow-readable input)
- Transforms: resize, compress, rotate, flip, grayscale, invert, crop, sepia,
  brightness and contrast
- SVG rasterization through cairosvg
- Base64 data URLs for images and arbitrary files

Pillow work is synchronous, so every file unit hands it to the executor
through run_blocking. Output bytes are wrapped by the context's ArtifactStore.
"""

import io
import re
import xml.etree.ElementTree as ET
from typing import Callable, Optional, Sequence, Union

from ..artifacts import ArtifactStore
from ..async_utils import run_blocking
from ..logging_config import ConversionError, DependencyError, InvalidInputError, get_logger
from ..providers import CodecProvider, ConverterContext
from ..units import ArtifactResult, ConverterUnit, FileConverter, FileInput, TextConverter, diagnostic
from .common import first_file, format_size, parse_int, replace_extension

logger = get_logger("converters.image")

FilesArg = Union[FileInput, Sequence[FileInput]]

OUTPUT_FORMATS = {
    "png": ("PNG", "image/png"),
    "jpg": ("JPEG", "image/jpeg"),
    "webp": ("WEBP", "image/webp"),
}

WEBP_QUALITY = 90
DEFAULT_RESIZE_WIDTH = 800
DEFAULT_COMPRESS_QUALITY = 70
DEFAULT_ADJUSTMENT = 30

SEPIA_MATRIX = (
    0.393, 0.769, 0.189, 0,
    0.349, 0.686, 0.168, 0,
    0.272, 0.534, 0.131, 0,
)

_RAW_BASE64 = re.compile(r"^[A-Za-z0-9+/=\s]+$")

# Transform signature: (image, auxiliary text) -> (image, info)
Transform = Callable[[object, Optional[str]], tuple[object, Optional[str]]]


def native_extension(file: FileInput) -> str:
    """Keep PNG and WebP inputs in their format; everything else becomes JPEG."""
    if file.mime_type == "image/png":
        return "png"
    if file.mime_type == "image/webp":
        return "webp"
    return "jpg"


def split_alpha(img):
    """Return (RGB image, alpha band or None)."""
    if img.mode in ("RGBA", "LA", "PA") or "transparency" in img.info:
        rgba = img.convert("RGBA")
        return rgba.convert("RGB"), rgba.getchannel("A")
    return img.convert("RGB"), None


def with_alpha(img, alpha):
    if alpha is not None:
        img.putalpha(alpha)
    return img


def map_channels(img, func: Callable[[int], float]):
    """Apply ``func`` to every RGB channel value, leaving alpha untouched."""
    rgb, alpha = split_alpha(img)
    table = [max(0, min(255, round(func(v)))) for v in range(256)]
    return with_alpha(rgb.point(table * 3), alpha)


def adjustment_amount(text: Optional[str]) -> int:
    return parse_int(text, DEFAULT_ADJUSTMENT, -100, 100)


def signed(amount: int) -> str:
    return f"+{amount}" if amount > 0 else str(amount)


# Transforms


def rotate(img, text):
    degrees = parse_int(text, 90)
    rotated = img.rotate(-degrees, expand=True)
    return rotated, f"Rotated {degrees} degrees ({rotated.width}x{rotated.height})"


def crop_square(img, _text):
    size = min(img.width, img.height)
    left = (img.width - size) // 2
    top = (img.height - size) // 2
    return img.crop((left, top, left + size, top + size)), f"Cropped to {size}x{size}"


def grayscale(img, _text):
    rgb, alpha = split_alpha(img)
    return with_alpha(rgb.convert("L"), alpha), None


def invert(img, _text):
    return map_channels(img, lambda v: 255 - v), None


def sepia(img, _text):
    rgb, alpha = split_alpha(img)
    return with_alpha(rgb.convert("RGB", SEPIA_MATRIX), alpha), None


def brightness(img, text):
    amount = adjustment_amount(text)
    shift = amount * 2.55
    return map_channels(img, lambda v: v + shift), f"Brightness: {signed(amount)}"


def contrast(img, text):
    amount = adjustment_amount(text)
    factor = (259 * (amount + 255)) / (255 * (259 - amount))
    return map_channels(img, lambda v: factor * (v - 128) + 128), f"Contrast: {signed(amount)}"


class ImageConverter:
    """Decode, transform and re-encode images with Pillow."""

    def __init__(self, codecs: CodecProvider, artifacts: ArtifactStore, quality: int = 92):
        self.codecs = codecs
        self.artifacts = artifacts
        self.quality = quality

    def _open(self, file: FileInput):
        Image = self.codecs.load_image_engine()
        try:
            img = Image.open(io.BytesIO(file.data))
            img.load()
        except (OSError, SyntaxError, ValueError) as e:
            raise InvalidInputError(
                f"could not read image {file.name}",
                suggestion="Use a PNG, JPEG, WebP, GIF, BMP or TIFF file",
            ) from e
        return img

    def _encode(self, img, ext: str, quality: Optional[int] = None) -> bytes:
        """Serialize ``img`` as ``ext``; JPEG output is flattened onto white."""
        Image = self.codecs.load_image_engine()
        pillow_format, _ = OUTPUT_FORMATS[ext]

        save_kwargs = {"format": pillow_format}
        if pillow_format == "JPEG":
            save_kwargs["quality"] = quality or self.quality
            rgb, alpha = split_alpha(img)
            if alpha is not None:
                background = Image.new("RGB", img.size, (255, 255, 255))
                background.paste(rgb, mask=alpha)
                rgb = background
            img = rgb
        elif pillow_format == "WEBP":
            save_kwargs["quality"] = quality or WEBP_QUALITY
        elif pillow_format == "PNG":
            save_kwargs["optimize"] = True
            if img.mode not in ("1", "L", "LA", "P", "RGB", "RGBA", "I", "I;16"):
                img = img.convert("RGBA")

        buffer = io.BytesIO()
        img.save(buffer, **save_kwargs)
        return buffer.getvalue()

    def _artifact(self, data: bytes, filename: str, ext: str, info: Optional[str] = None) -> ArtifactResult:
        return self.artifacts.create(data, filename, mime_type=OUTPUT_FORMATS[ext][1], info=info)

    async def convert(self, file: FileInput, target: str) -> ArtifactResult:
        """Re-encode ``file`` as ``target`` (png, jpg or webp)."""

        def _convert_sync() -> bytes:
            with self._open(file) as img:
                return self._encode(img, target)

        data = await run_blocking(_convert_sync)
        logger.info(f"Converted {file.name} -> {target}")
        return self._artifact(data, replace_extension(file.name, f".{target}"), target)

    async def transform(
        self,
        file: FileInput,
        operation: Transform,
        suffix: str,
        text: Optional[str] = None,
        ext: Optional[str] = None,
    ) -> ArtifactResult:
        """Apply ``operation`` and save with ``suffix`` appended to the stem.

        ``ext`` pins the output format; by default PNG and WebP inputs keep
        their format and everything else becomes JPEG.
        """
        target = ext or native_extension(file)

        def _transform_sync() -> tuple[bytes, Optional[str]]:
            with self._open(file) as img:
                result, info = operation(img, text)
                return self._encode(result, target), info

        data, info = await run_blocking(_transform_sync)
        return self._artifact(data, replace_extension(file.name, f"{suffix}.{target}"), target, info)

    async def resize(self, file: FileInput, text: Optional[str]) -> ArtifactResult:
        width = parse_int(text, DEFAULT_RESIZE_WIDTH, 10, 10000)
        target = native_extension(file)

        def _resize_sync() -> tuple[bytes, int, str]:
            Image = self.codecs.load_image_engine()
            with self._open(file) as img:
                height = max(1, round(width * img.height / img.width))
                original = f"{img.width}x{img.height}"
                resized = img.resize((width, height), Image.Resampling.LANCZOS)
                return self._encode(resized, target), height, original

        data, height, original = await run_blocking(_resize_sync)
        return self._artifact(
            data,
            replace_extension(file.name, f"_{width}x{height}.{target}"),
            target,
            info=f"Resized to {width}x{height} (was {original})",
        )

    async def compress(self, file: FileInput, text: Optional[str]) -> ArtifactResult:
        quality = parse_int(text, DEFAULT_COMPRESS_QUALITY, 1, 100)

        def _compress_sync() -> bytes:
            with self._open(file) as img:
                return self._encode(img, "webp", quality)

        data = await run_blocking(_compress_sync)
        change = round((1 - len(data) / file.size) * 100) if file.size else 0
        direction = "smaller" if change >= 0 else "larger"
        return self._artifact(
            data,
            replace_extension(file.name, "_compressed.webp"),
            "webp",
            info=f"{format_size(file.size)} → {format_size(len(data))} ({abs(change)}% {direction})",
        )

    async def info(self, file: FileInput) -> str:
        def _info_sync() -> dict:
            with self._open(file) as img:
                return {
                    "format": img.format,
                    "mode": img.mode,
                    "width": img.width,
                    "height": img.height,
                    "frames": getattr(img, "n_frames", 1),
                    "alpha": img.mode in ("RGBA", "LA", "PA") or "transparency" in img.info,
                    "dpi": img.info.get("dpi"),
                }

        details = await run_blocking(_info_sync)
        lines = [
            f"File:        {file.name}",
            f"Format:      {details['format']}",
            f"Dimensions:  {details['width']}x{details['height']}",
            f"Megapixels:  {details['width'] * details['height'] / 1_000_000:.2f}",
            f"Color mode:  {details['mode']}",
            f"Alpha:       {'yes' if details['alpha'] else 'no'}",
            f"Frames:      {details['frames']}",
            f"File size:   {format_size(file.size)}",
        ]
        if details["dpi"]:
            x, y = details["dpi"]
            lines.append(f"DPI:         {round(x)}x{round(y)}")
        return "\n".join(lines)

    async def rasterize_svg(self, file: FileInput, text: Optional[str]) -> ArtifactResult:
        """Render an SVG to PNG, optionally at a requested width."""
        cairosvg = self.codecs.load_svg_rasterizer()
        width = parse_int(text, 0, 0, 10000)

        def _rasterize_sync() -> tuple[bytes, str]:
            kwargs = {"bytestring": file.data}
            if width:
                kwargs["output_width"] = width
            try:
                png = cairosvg.svg2png(**kwargs)
            except (ValueError, TypeError, ET.ParseError) as e:
                raise InvalidInputError(
                    f"invalid SVG file: {file.name}",
                    suggestion="Ensure the SVG file is valid XML with proper structure",
                ) from e
            except Exception as e:
                raise ConversionError(f"SVG conversion failed: {e}") from e
            with self._open(FileInput(name="render.png", data=png)) as img:
                return png, f"{img.width}x{img.height}"

        data, size = await run_blocking(_rasterize_sync)
        filename = re.sub(r"\.svg$", "", file.name, flags=re.IGNORECASE) + ".png"
        return self._artifact(data, filename, "png", info=size)


def data_url_echo(hint: str) -> Callable[[str], str]:
    def _echo(text: str) -> str:
        value = text.strip()
        if not value:
            return ""
        if value.startswith("data:"):
            return value
        return diagnostic(hint)

    return _echo


def base64_to_image(text: str) -> str:
    value = text.strip()
    if not value:
        return ""
    if not value.startswith("data:") and _RAW_BASE64.match(value):
        return "data:image/png;base64," + re.sub(r"\s", "", value)
    if value.startswith("data:image"):
        return value
    return diagnostic("paste a base64 data URL starting with data:image/...")


def build(ctx: ConverterContext) -> list[ConverterUnit]:
    converter = ImageConverter(ctx.codecs, ctx.artifacts, ctx.config.image_quality)

    def guarded(handler):
        """Missing Pillow or cairosvg becomes a diagnostic result."""

        async def _run(files: FilesArg, text: Optional[str] = None):
            try:
                return await handler(first_file(files), text)
            except DependencyError as e:
                return e.diagnostic()

        return _run

    def format_unit(unit_id: str, name: str, description: str, accept: str, target: str) -> FileConverter:
        async def _convert(file: FileInput, _text: Optional[str]):
            return await converter.convert(file, target)

        return FileConverter(
            id=unit_id, name=name, category="image", description=description,
            accept_types=accept, is_media_converter=True, file_convert=guarded(_convert),
        )

    def transform_unit(
        unit_id: str,
        name: str,
        description: str,
        operation: Transform,
        suffix: str,
        ext: Optional[str] = None,
        text_placeholder: Optional[str] = None,
    ) -> FileConverter:
        async def _transform(file: FileInput, text: Optional[str]):
            return await converter.transform(file, operation, suffix, text, ext)

        return FileConverter(
            id=unit_id, name=name, category="image", description=description,
            accept_types="image/*", is_media_converter=True,
            has_text_input=text_placeholder is not None, text_placeholder=text_placeholder,
            file_convert=guarded(_transform),
        )

    async def read_as_data_url(files: FilesArg, _text: Optional[str] = None) -> str:
        return first_file(files).to_data_url()

    async def image_info(file: FileInput, _text: Optional[str]) -> str:
        return await converter.info(file)

    async def resize(file: FileInput, text: Optional[str]):
        return await converter.resize(file, text)

    async def compress(file: FileInput, text: Optional[str]):
        return await converter.compress(file, text)

    async def svg_to_png(file: FileInput, text: Optional[str]):
        return await converter.rasterize_svg(file, text)

    async def rotate_image(file: FileInput, text: Optional[str]):
        degrees = parse_int(text, 90)
        return await converter.transform(file, rotate, f"_rotated{degrees}", text)

    async def brighten(file: FileInput, text: Optional[str]):
        return await converter.transform(file, brightness, f"_bright{adjustment_amount(text)}", text, "png")

    async def adjust_contrast(file: FileInput, text: Optional[str]):
        return await converter.transform(file, contrast, f"_contrast{adjustment_amount(text)}", text, "png")

    return [
        FileConverter(
            id="image-to-base64", name="Image to Base64", category="encode",
            description="Convert an image file to a Base64 data URL",
            accept_types="image/*", file_convert=read_as_data_url,
            convert=data_url_echo("drop or upload an image file, or paste a data URL"),
        ),
        TextConverter(
            id="base64-to-image", name="Base64 to Image", category="encode",
            description="Preview an image from a Base64 data URL string",
            shows_preview=True, convert=base64_to_image,
        ),
        FileConverter(
            id="file-to-base64", name="Any File to Base64", category="encode",
            description="Convert any file to a Base64 data URL string",
            file_convert=read_as_data_url, convert=data_url_echo("drop or upload any file"),
        ),
        format_unit("png-to-jpg", "PNG to JPG", "Convert PNG image to JPEG", "image/png", "jpg"),
        format_unit("jpg-to-png", "JPG to PNG", "Convert JPEG image to PNG", "image/jpeg", "png"),
        format_unit("png-to-webp", "PNG to WebP", "Convert PNG image to WebP", "image/png", "webp"),
        format_unit("jpg-to-webp", "JPG to WebP", "Convert JPEG image to WebP", "image/jpeg", "webp"),
        format_unit("webp-to-png", "WebP to PNG", "Convert WebP image to PNG", "image/webp", "png"),
        format_unit("webp-to-jpg", "WebP to JPG", "Convert WebP image to JPEG", "image/webp", "jpg"),
        format_unit("bmp-to-png", "BMP to PNG", "Convert BMP image to PNG", "image/bmp", "png"),
        format_unit("any-to-png", "Image to PNG", "Convert any image format to PNG", "image/*", "png"),
        format_unit("any-to-jpg", "Image to JPG", "Convert any image format to JPEG", "image/*", "jpg"),
        format_unit("any-to-webp", "Image to WebP", "Convert any image format to WebP", "image/*", "webp"),
        FileConverter(
            id="image-resize", name="Image Resize", category="image",
            description="Resize an image. Enter width in the text field (height auto-scales)",
            accept_types="image/*", is_media_converter=True, has_text_input=True,
            text_placeholder="Width in pixels, 10-10000 (default 800)", file_convert=guarded(resize),
        ),
        FileConverter(
            id="image-compress", name="Image Compress", category="image",
            description="Compress an image to WebP. Enter quality 1-100 (default 70)",
            accept_types="image/*", is_media_converter=True, has_text_input=True,
            text_placeholder="Quality 1-100 (default 70, lower = smaller file)",
            file_convert=guarded(compress),
        ),
        FileConverter(
            id="svg-to-png", name="SVG to PNG", category="image",
            description="Rasterize SVG to PNG. Enter width (default: SVG native size)",
            accept_types="image/svg+xml,.svg", is_media_converter=True, has_text_input=True,
            text_placeholder="Width in pixels (optional)", file_convert=guarded(svg_to_png),
        ),
        FileConverter(
            id="image-rotate", name="Image Rotate", category="image",
            description="Rotate an image clockwise. Enter degrees (90, 180, 270)",
            accept_types="image/*", is_media_converter=True, has_text_input=True,
            text_placeholder="Degrees: 90, 180, or 270", file_convert=guarded(rotate_image),
        ),
        transform_unit(
            "image-flip-h", "Image Flip Horizontal", "Flip an image horizontally (mirror)",
            lambda img, _text: (converter.codecs.load_image_ops().mirror(img), None), "_flipped",
        ),
        transform_unit(
            "image-flip-v", "Image Flip Vertical", "Flip an image vertically",
            lambda img, _text: (converter.codecs.load_image_ops().flip(img), None), "_flipped_v",
        ),
        transform_unit("image-grayscale", "Image Grayscale", "Convert an image to grayscale", grayscale, "_gray", "png"),
        transform_unit("image-invert", "Image Invert Colors", "Invert all colors in an image", invert, "_inverted", "png"),
        transform_unit("image-crop-square", "Image Crop to Square", "Crop an image to a centered square", crop_square, "_square"),
        transform_unit("image-sepia", "Image Sepia", "Apply a sepia (vintage) filter to an image", sepia, "_sepia", "png"),
        FileConverter(
            id="image-brightness", name="Image Brightness", category="image",
            description="Adjust brightness. Enter a value from -100 to 100 (default: 30)",
            accept_types="image/*", is_media_converter=True, has_text_input=True,
            text_placeholder="Brightness: -100 to 100 (default: 30)", file_convert=guarded(brighten),
        ),
        FileConverter(
            id="image-contrast", name="Image Contrast", category="image",
            description="Adjust contrast. Enter a value from -100 to 100 (default: 30)",
            accept_types="image/*", is_media_converter=True, has_text_input=True,
            text_placeholder="Contrast: -100 to 100 (default: 30)", file_convert=guarded(adjust_contrast),
        ),
        FileConverter(
            id="image-info", name="Image Info", category="image",
            description="Show format, dimensions, color mode and size of an image",
            accept_types="image/*", file_convert=guarded(image_info),
        ),
    ]
