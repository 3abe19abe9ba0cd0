"""
Converter unit contract.

A converter unit is a static, immutable plugin: metadata used to present
and select it, plus the function that performs the conversion. Two variants
exist:

- TextConverter: ``convert(text)`` for text-to-text work
- FileConverter: ``file_convert(file_or_files, auxiliary_text)`` for work on
  uploaded files, optionally with a text fallback ``convert``

Both may return a plain string, a Result, or an awaitable of either.
"""

import base64
import mimetypes
from dataclasses import dataclass, field
from pathlib import Path
from typing import Awaitable, Callable, Optional, Sequence, Union


@dataclass(frozen=True)
class Category:
    """A selectable group of converters."""

    id: str
    name: str


ALL_CATEGORY_ID = "all"

CATEGORIES: tuple[Category, ...] = (
    Category(ALL_CATEGORY_ID, "All"),
    Category("encode", "Encode / Decode"),
    Category("text", "Text"),
    Category("hash", "Hash"),
    Category("data", "Data"),
    Category("web", "Web"),
    Category("number", "Number"),
    Category("color", "Color"),
    Category("utility", "Utility"),
    Category("image", "Image"),
    Category("media", "Media"),
    Category("document", "Document"),
)


@dataclass(frozen=True)
class TextResult:
    """Preformatted text output."""

    text: str


@dataclass(frozen=True)
class ArtifactResult:
    """A downloadable artifact produced by a converter.

    ``url`` is either a ``data:`` URL or a ``file://`` URI. File-backed
    artifacts also carry their local ``path`` and should be released by the
    caller once consumed.
    """

    url: str
    filename: str
    size: int
    info: Optional[str] = None
    mime_type: str = "application/octet-stream"
    path: Optional[Path] = None

    @property
    def is_file_backed(self) -> bool:
        return self.path is not None


Result = Union[TextResult, ArtifactResult]

RawResult = Union[str, TextResult, ArtifactResult, dict, None]


def diagnostic(message: str) -> str:
    """Format a human-readable diagnostic the way converters report bad input."""
    return f"({message})"


@dataclass(frozen=True)
class FileInput:
    """An in-memory file handed to a file converter."""

    name: str
    data: bytes = field(repr=False)
    mime_type: str = ""

    def __post_init__(self):
        if not self.mime_type:
            guessed, _ = mimetypes.guess_type(self.name)
            object.__setattr__(self, "mime_type", guessed or "application/octet-stream")

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def stem(self) -> str:
        return Path(self.name).stem

    @property
    def extension(self) -> str:
        return Path(self.name).suffix.lower().lstrip(".")

    def text(self, encoding: str = "utf-8") -> str:
        return self.data.decode(encoding, errors="replace")

    def to_data_url(self) -> str:
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.mime_type};base64,{encoded}"

    @classmethod
    def from_path(cls, path: str | Path, mime_type: str = "") -> "FileInput":
        """Read a file from disk."""
        source = Path(path)
        return cls(name=source.name, data=source.read_bytes(), mime_type=mime_type)


TextFunction = Callable[[str], Union[RawResult, Awaitable[RawResult]]]
FileFunction = Callable[
    [Union[FileInput, Sequence[FileInput]], Optional[str]],
    Union[RawResult, Awaitable[RawResult]],
]


@dataclass(frozen=True, kw_only=True)
class ConverterUnit:
    """Metadata and capability flags shared by every converter."""

    id: str
    name: str
    category: str
    description: str
    placeholder: Optional[str] = None
    is_generator: bool = False
    shows_preview: bool = False
    is_media_converter: bool = False

    @property
    def accepts_file(self) -> bool:
        return False

    def describe(self) -> dict:
        """Metadata suitable for building a selection UI."""
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "description": self.description,
            "placeholder": self.placeholder,
            "accepts_file": self.accepts_file,
            "is_generator": self.is_generator,
            "shows_preview": self.shows_preview,
            "is_media_converter": self.is_media_converter,
        }


@dataclass(frozen=True, kw_only=True)
class TextConverter(ConverterUnit):
    """A converter that maps input text to a result."""

    convert: TextFunction


@dataclass(frozen=True, kw_only=True)
class FileConverter(ConverterUnit):
    """A converter that consumes one or more files."""

    file_convert: FileFunction
    accept_types: str = "*"
    multiple_files: bool = False
    has_text_input: bool = False
    text_placeholder: Optional[str] = None
    convert: Optional[TextFunction] = None

    @property
    def accepts_file(self) -> bool:
        return True

    def describe(self) -> dict:
        info = super().describe()
        info.update(
            {
                "accept_types": self.accept_types,
                "multiple_files": self.multiple_files,
                "has_text_input": self.has_text_input,
                "text_placeholder": self.text_placeholder,
            }
        )
        return info
