"""Small helpers shared by converter groups."""

import functools
import json
import re
from pathlib import Path
from typing import Any, Optional, Sequence, Union

from ..logging_config import InvalidInputError
from ..units import FileInput

_INT_PREFIX = re.compile(r"^\s*([+-]?\d{1,18})")


def parse_int(text: Optional[str], default: int, lo: Optional[int] = None, hi: Optional[int] = None) -> int:
    """Parse a leading integer the lenient way form fields are read, then clamp.

    Blank or non-numeric input (and zero) falls back to ``default``.
    """
    match = _INT_PREFIX.match(text or "")
    value = int(match.group(1)) if match else 0
    if not value:
        value = default
    if lo is not None:
        value = max(lo, value)
    if hi is not None:
        value = min(hi, value)
    return value


def first_file(files: Union[FileInput, Sequence[FileInput]]) -> FileInput:
    if isinstance(files, FileInput):
        return files
    if not files:
        raise ValueError("No file provided")
    return files[0]


def all_files(files: Union[FileInput, Sequence[FileInput]]) -> list[FileInput]:
    if isinstance(files, FileInput):
        return [files]
    return list(files)


def replace_extension(filename: str, suffix: str) -> str:
    """``photo.png`` + ``_small.jpg`` -> ``photo_small.jpg``."""
    return f"{Path(filename).stem}{suffix}"


def format_size(num_bytes: int) -> str:
    if num_bytes < 1024:
        return f"{num_bytes} B"
    if num_bytes < 1024 * 1024:
        return f"{num_bytes / 1024:.1f} KB"
    return f"{num_bytes / (1024 * 1024):.1f} MB"


def to_json(value: Any, indent: Optional[int] = 2) -> str:
    if indent is None:
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    return json.dumps(value, ensure_ascii=False, indent=indent)


def format_number(value: float, places: int = 6) -> str:
    """Fixed-point formatting with trailing zeros stripped."""
    text = f"{value:.{places}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


def reports_invalid_input(func):
    """Return InvalidInputError raised by ``func`` as its diagnostic string.

    The raising function stays reachable as ``__wrapped__`` for callers that
    chain converters and need a failure they cannot mistake for output.
    """

    @functools.wraps(func)
    def _convert(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except InvalidInputError as e:
            return e.diagnostic()

    return _convert


def plural(count: int, word: str) -> str:
    return f"{count} {word}{'' if count == 1 else 's'}"
