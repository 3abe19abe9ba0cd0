"""Capability checks for convert-everything.

Only the Python version is critical. Every other capability (FFmpeg,
ffprobe, the codec libraries) is optional: the converters that need a
missing one report it as a diagnostic result when invoked.
"""

import importlib.util
import shutil
import sys
from dataclasses import dataclass
from typing import Dict, Tuple

from .async_utils import SubprocessTimeoutError, safe_subprocess
from .logging_config import DependencyError

MIN_PYTHON = (3, 11)

FFMPEG_HINT = (
    "Install with:\n"
    "  Ubuntu/Debian: sudo apt install ffmpeg\n"
    "  Fedora/RHEL: sudo dnf install ffmpeg\n"
    "  macOS: brew install ffmpeg\n"
    "  Windows: Download from https://ffmpeg.org/download.html"
)


@dataclass(frozen=True)
class Capability:
    """An optional binary or Python module and the converters relying on it."""

    name: str
    kind: str  # "binary" or "module"
    target: str
    used_by: str
    install_hint: str = ""


CAPABILITIES = (
    Capability("ffmpeg", "binary", "ffmpeg", "media converters", FFMPEG_HINT),
    Capability("ffprobe", "binary", "ffprobe", "media info", FFMPEG_HINT),
    Capability("pillow", "module", "PIL", "image converters", "pip install Pillow"),
    Capability("cairosvg", "module", "cairosvg", "SVG to PNG", "pip install cairosvg"),
    Capability("pypdf", "module", "pypdf", "PDF converters", "pip install pypdf"),
    Capability("pyyaml", "module", "yaml", "YAML converters", "pip install PyYAML"),
    Capability("markdown-it-py", "module", "markdown_it", "Markdown to HTML", "pip install markdown-it-py"),
    Capability("reportlab", "module", "reportlab", "text to PDF", "pip install reportlab"),
    Capability("segno", "module", "segno", "QR code generation", "pip install segno"),
    Capability("opencv", "module", "cv2", "QR code reading", "pip install opencv-python-headless"),
    Capability("numpy", "module", "numpy", "QR code reading", "pip install numpy"),
)


async def check_binary(binary: str, install_hint: str = "") -> Tuple[bool, str]:
    """Look up ``binary`` on PATH and read its version banner.

    Returns:
        Tuple of (is_installed, message). The message is the first line of
        ``<binary> -version`` or the install hint.
    """
    path = shutil.which(binary)
    if not path:
        message = f"{binary} not found."
        return False, f"{message} {install_hint}" if install_hint else message

    try:
        output = await safe_subprocess([path, "-version"], timeout=10, check_returncode=False)
    except (SubprocessTimeoutError, OSError):
        return True, f"{binary} found at {path} (version unknown)"

    banner = output.stdout.strip().splitlines()
    return True, banner[0] if banner else f"{binary} found at {path}"


def check_module(module_name: str) -> Tuple[bool, str]:
    """Check whether a Python module can be found without importing it."""
    try:
        found = importlib.util.find_spec(module_name) is not None
    except (ImportError, ValueError):
        found = False

    return found, f"{module_name} {'available' if found else 'not installed'}"


async def check_python_version() -> Tuple[bool, str]:
    """Check the interpreter against MIN_PYTHON."""
    version = sys.version_info
    compatible = tuple(version[:2]) >= MIN_PYTHON

    message = f"Python {version.major}.{version.minor}.{version.micro}"
    if not compatible:
        message += f" - Requires Python {MIN_PYTHON[0]}.{MIN_PYTHON[1]}+"
    return compatible, message


async def verify_dependencies() -> Dict[str, Dict]:
    """Probe every capability.

    Raises:
        DependencyError: If the Python version is too old

    Returns:
        ``{"python": {"compatible", "message"}}`` plus one
        ``{"installed", "message", "used_by"}`` entry per capability.
    """
    py_ok, py_msg = await check_python_version()
    if not py_ok:
        raise DependencyError(
            f"Python version too old: {py_msg}",
            suggestion=f"Use Python {MIN_PYTHON[0]}.{MIN_PYTHON[1]} or newer",
        )

    results: Dict[str, Dict] = {"python": {"compatible": py_ok, "message": py_msg}}
    for capability in CAPABILITIES:
        if capability.kind == "binary":
            ok, message = await check_binary(capability.target, capability.install_hint)
        else:
            ok, message = check_module(capability.target)
            if not ok:
                message = f"{message}. {capability.install_hint}"
        results[capability.name] = {"installed": ok, "message": message, "used_by": capability.used_by}

    return results


async def get_dependency_summary() -> Dict[str, str]:
    """One status mark per capability.

    Example: ``{"python": "✓ Compatible", "ffmpeg": "✗ Not found", ...}``
    """
    summary = {}
    for name, info in (await verify_dependencies()).items():
        if name == "python":
            summary[name] = "✓ Compatible" if info["compatible"] else "✗ Not compatible"
        else:
            summary[name] = "✓ Installed" if info["installed"] else "✗ Not found"
    return summary
