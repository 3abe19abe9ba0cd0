"""
Audio and video converters using FFmpeg.

Inputs are written to a private temp directory, FFmpeg runs through
safe_subprocess under the concurrency limiter, and the output bytes are
handed to the ArtifactStore. A missing FFmpeg binary is reported as a
diagnostic result instead of an exception.
"""

import json
import re
import shutil
import tempfile
from pathlib import Path
from typing import Optional, Sequence, Union

from ..artifacts import ArtifactStore
from ..async_utils import SubprocessTimeoutError, concurrency_limiter, safe_subprocess
from ..logging_config import ConversionError, DependencyError, FormatNotSupportedError, get_logger
from ..providers import ConverterContext
from ..units import ArtifactResult, ConverterUnit, FileConverter, FileInput, diagnostic
from .common import first_file, format_size, replace_extension

logger = get_logger("converters.media")

FilesArg = Union[FileInput, Sequence[FileInput]]

# target -> (ffmpeg output arguments, MIME type)
OUTPUT_PROFILES = {
    "mp3": (["-vn", "-c:a", "libmp3lame", "-b:a", "192k", "-id3v2_version", "3"], "audio/mpeg"),
    "wav": (["-vn", "-c:a", "pcm_s16le"], "audio/wav"),
    "ogg": (["-vn", "-c:a", "libvorbis"], "audio/ogg"),
    "flac": (["-vn", "-c:a", "flac"], "audio/flac"),
    "aac": (["-vn", "-c:a", "aac", "-b:a", "192k"], "audio/aac"),
    "m4a": (["-vn", "-c:a", "aac", "-b:a", "192k"], "audio/mp4"),
    "mp4": (["-c:v", "libx264", "-crf", "23", "-preset", "medium", "-c:a", "aac"], "video/mp4"),
    "webm": (["-c:v", "libvpx-vp9", "-crf", "32", "-b:v", "0", "-c:a", "libopus"], "video/webm"),
    "gif": (["-vf", "fps=10,scale=480:-1:flags=lanczos", "-loop", "0"], "image/gif"),
}

_RANGE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*-\s*(\d+(?:\.\d+)?)\s*$")

FFMPEG_SUGGESTION = (
    "Install FFmpeg: sudo apt install ffmpeg (Debian/Ubuntu), "
    "brew install ffmpeg (macOS) or download from https://ffmpeg.org/download.html"
)


def parse_range(text: Optional[str], default: str) -> Optional[tuple[float, float]]:
    """Parse ``start-end`` seconds. Returns None when the range is unusable."""
    match = _RANGE.match(text or default)
    if not match:
        return None
    start, end = float(match.group(1)), float(match.group(2))
    if end <= start:
        return None
    return start, end


def seconds_label(value: float) -> str:
    return f"{value:g}"


class MediaConverter:
    """Run FFmpeg conversions over in-memory files."""

    def __init__(self, artifacts: ArtifactStore, timeout: int = 1800):
        self.artifacts = artifacts
        self.timeout = timeout

    @staticmethod
    def find_binary(name: str = "ffmpeg") -> str:
        """
        Locate an FFmpeg tool on PATH.

        Raises:
            DependencyError: If the binary is not installed
        """
        path = shutil.which(name)
        if path is None:
            raise DependencyError(
                f"{name} is not installed",
                technical_details=f"{name} not found on PATH",
                suggestion=FFMPEG_SUGGESTION,
            )
        return path

    def build_command(self, source: Path, output: Path, arguments: list[str]) -> list[str]:
        return [self.find_binary(), "-y", "-hide_banner", "-i", str(source), *arguments, str(output)]

    async def _run(self, file: FileInput, arguments: list[str], output_ext: str) -> bytes:
        with tempfile.TemporaryDirectory(prefix="convert_everything_media_") as workdir:
            suffix = Path(file.name).suffix or ".bin"
            source = Path(workdir) / f"input{suffix}"
            output = Path(workdir) / f"output.{output_ext}"
            source.write_bytes(file.data)

            cmd = self.build_command(source, output, arguments)
            async with concurrency_limiter:
                try:
                    run = await safe_subprocess(cmd, timeout=self.timeout, check_returncode=False)
                except SubprocessTimeoutError as e:
                    raise ConversionError(
                        "Media conversion timed out",
                        suggestion="Try a shorter clip or raise CONVERT_EVERYTHING_MEDIA_TIMEOUT",
                    ) from e

            if run.returncode != 0 or not output.exists():
                raise ConversionError(
                    "FFmpeg conversion failed",
                    suggestion=f"Check if source file is valid. FFmpeg stderr: {run.stderr_tail()}",
                )
            return output.read_bytes()

    async def convert(self, file: FileInput, target: str) -> ArtifactResult:
        """
        Convert ``file`` to ``target``.

        Raises:
            FormatNotSupportedError: If the target has no FFmpeg profile
            DependencyError: If FFmpeg is not installed
            ConversionError: If FFmpeg fails or times out
        """
        if target not in OUTPUT_PROFILES:
            raise FormatNotSupportedError(
                f"Output format '{target}' is not supported",
                suggestion=f"Supported formats: {', '.join(sorted(OUTPUT_PROFILES))}",
            )
        arguments, mime_type = OUTPUT_PROFILES[target]
        data = await self._run(file, arguments, target)
        logger.info(f"Converted {file.name} -> {target} ({format_size(len(data))})")
        return self.artifacts.create(data, replace_extension(file.name, f".{target}"), mime_type=mime_type)

    async def trim(self, file: FileInput, start: float, end: float, default_ext: str) -> ArtifactResult:
        """Cut ``start``..``end`` seconds without re-encoding."""
        ext = file.extension or default_ext
        arguments = ["-ss", seconds_label(start), "-to", seconds_label(end), "-c", "copy"]
        data = await self._run(file, arguments, ext)
        label = f"_trim{seconds_label(start)}-{seconds_label(end)}.{ext}"
        return self.artifacts.create(
            data,
            replace_extension(file.name, label),
            mime_type=file.mime_type,
            info=f"Trimmed to {seconds_label(end - start)}s",
        )

    async def media_info(self, file: FileInput) -> dict:
        """Stream and container information from ffprobe."""
        ffprobe = self.find_binary("ffprobe")
        with tempfile.TemporaryDirectory(prefix="convert_everything_media_") as workdir:
            source = Path(workdir) / f"input{Path(file.name).suffix or '.bin'}"
            source.write_bytes(file.data)
            cmd = [ffprobe, "-v", "quiet", "-print_format", "json", "-show_format", "-show_streams", str(source)]
            async with concurrency_limiter:
                output = await safe_subprocess(cmd, timeout=30, check_returncode=False)

        if output.returncode != 0:
            raise ConversionError(f"Failed to read media info: {output.stderr_tail() or 'ffprobe error'}")
        return json.loads(output.stdout)


def describe_media(file: FileInput, info: dict) -> str:
    container = info.get("format", {})
    lines = [
        f"File:      {file.name}",
        f"Container: {container.get('format_long_name') or container.get('format_name', 'unknown')}",
    ]
    if duration := container.get("duration"):
        lines.append(f"Duration:  {float(duration):.2f}s")
    if bit_rate := container.get("bit_rate"):
        lines.append(f"Bitrate:   {int(bit_rate) // 1000} kb/s")
    lines.append(f"Size:      {format_size(file.size)}")

    for stream in info.get("streams", []):
        kind = stream.get("codec_type", "data")
        line = f"  #{stream.get('index', '?')} {kind}: {stream.get('codec_name', 'unknown')}"
        if kind == "video":
            line += f" {stream.get('width')}x{stream.get('height')}"
            if rate := stream.get("avg_frame_rate"):
                num, _, den = rate.partition("/")
                if den and float(den):
                    line += f" @ {float(num) / float(den):.2f} fps"
        elif kind == "audio":
            line += f" {stream.get('sample_rate', '?')} Hz, {stream.get('channels', '?')} ch"
        lines.append(line)
    return "\n".join(lines)


def build(ctx: ConverterContext) -> list[ConverterUnit]:
    converter = MediaConverter(ctx.artifacts, ctx.config.media_timeout)

    def guarded(handler):
        """Missing FFmpeg becomes a diagnostic result."""

        async def _run(files: FilesArg, text: Optional[str] = None):
            try:
                return await handler(first_file(files), text)
            except DependencyError as e:
                return e.diagnostic()

        return _run

    def conversion_unit(unit_id: str, name: str, description: str, accept: str, target: str) -> FileConverter:
        async def _convert(file: FileInput, _text: Optional[str]):
            return await converter.convert(file, target)

        return FileConverter(
            id=unit_id, name=name, category="media", description=description,
            accept_types=accept, is_media_converter=True, file_convert=guarded(_convert),
        )

    def trim_unit(unit_id: str, name: str, description: str, accept: str, default_range: str, default_ext: str):
        async def _trim(file: FileInput, text: Optional[str]):
            bounds = parse_range(text, default_range)
            if bounds is None:
                return diagnostic("enter start-end in seconds, e.g. 5-30, with end after start")
            return await converter.trim(file, *bounds, default_ext)

        return FileConverter(
            id=unit_id, name=name, category="media", description=description,
            accept_types=accept, is_media_converter=True, has_text_input=True,
            text_placeholder=f"Start-End in seconds (e.g. {default_range})", file_convert=guarded(_trim),
        )

    async def media_info(file: FileInput, _text: Optional[str]) -> str:
        return describe_media(file, await converter.media_info(file))

    return [
        conversion_unit("video-to-audio", "Video to Audio (MP3)", "Extract audio from a video file as MP3", "video/*", "mp3"),
        conversion_unit("video-to-wav", "Video to Audio (WAV)", "Extract audio from a video file as WAV", "video/*", "wav"),
        conversion_unit("video-to-audio-ogg", "Video to Audio (OGG)", "Extract audio from a video file as OGG Vorbis", "video/*", "ogg"),
        conversion_unit("audio-to-mp3", "Audio to MP3", "Convert any audio file to MP3 format", "audio/*", "mp3"),
        conversion_unit("audio-to-wav", "Audio to WAV", "Convert any audio file to WAV format", "audio/*", "wav"),
        conversion_unit("audio-to-ogg", "Audio to OGG", "Convert any audio file to OGG Vorbis format", "audio/*", "ogg"),
        conversion_unit("audio-to-flac", "Audio to FLAC", "Convert any audio file to FLAC (lossless)", "audio/*", "flac"),
        conversion_unit("audio-to-aac", "Audio to AAC", "Convert any audio file to AAC format", "audio/*", "aac"),
        conversion_unit("audio-to-m4a", "Audio to M4A", "Convert any audio file to M4A (AAC in MP4 container)", "audio/*", "m4a"),
        conversion_unit("video-to-mp4", "Video to MP4", "Convert a video file to MP4 (H.264) format", "video/*", "mp4"),
        conversion_unit("video-to-webm", "Video to WebM", "Convert a video file to WebM format", "video/*", "webm"),
        conversion_unit("video-to-gif", "Video to GIF", "Convert a video clip to animated GIF", "video/*", "gif"),
        trim_unit("video-trim", "Video Trim", "Trim a video. Enter start-end in seconds (e.g. 5-30)", "video/*", "0-10", "mp4"),
        trim_unit("audio-trim", "Audio Trim", "Trim an audio file. Enter start-end in seconds (e.g. 0-30)", "audio/*", "0-30", "mp3"),
        FileConverter(
            id="media-info", name="Media Info", category="media",
            description="Show container, duration and stream details of an audio or video file",
            accept_types="audio/*,video/*", file_convert=guarded(media_info),
        ),
    ]
