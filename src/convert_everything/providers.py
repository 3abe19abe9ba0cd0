"""
Injected collaborators for converter units.

Converters never reach for global randomness, hashing or heavy codec
libraries directly. They receive them through a ConverterContext so that
generators can be tested with seeded randomness and codecs are only
imported when a unit that needs them is invoked.
"""

import hashlib
import random
import secrets
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, MutableSequence, Optional, Sequence, TypeVar

from .artifacts import ArtifactStore
from .config import ToolkitConfig, config as default_config
from .logging_config import DependencyError, get_logger

logger = get_logger("providers")

T = TypeVar("T")


class RandomSource:
    """Source of randomness for generator units."""

    def token_bytes(self, n: int) -> bytes:
        raise NotImplementedError

    def randbelow(self, n: int) -> int:
        raise NotImplementedError

    def choice(self, seq: Sequence[T]) -> T:
        if not seq:
            raise IndexError("Cannot choose from an empty sequence")
        return seq[self.randbelow(len(seq))]

    def shuffle(self, items: MutableSequence) -> None:
        """Fisher-Yates shuffle in place."""
        for i in range(len(items) - 1, 0, -1):
            j = self.randbelow(i + 1)
            items[i], items[j] = items[j], items[i]

    def uuid4(self) -> str:
        return str(uuid.UUID(bytes=self.token_bytes(16), version=4))


class SystemRandomSource(RandomSource):
    """Cryptographically secure randomness from the operating system."""

    def token_bytes(self, n: int) -> bytes:
        return secrets.token_bytes(n)

    def randbelow(self, n: int) -> int:
        return secrets.randbelow(n)


class SeededRandomSource(RandomSource):
    """Deterministic randomness for tests and reproducible output."""

    def __init__(self, seed: int = 0):
        self._random = random.Random(seed)

    def token_bytes(self, n: int) -> bytes:
        return self._random.randbytes(n)

    def randbelow(self, n: int) -> int:
        if n <= 0:
            raise ValueError("Upper bound must be positive")
        return self._random.randrange(n)


class DigestProvider:
    """Message digests over hashlib."""

    ALIASES = {
        "SHA-1": "sha1",
        "SHA-224": "sha224",
        "SHA-256": "sha256",
        "SHA-384": "sha384",
        "SHA-512": "sha512",
        "MD5": "md5",
    }

    def normalize(self, algorithm: str) -> str:
        return self.ALIASES.get(algorithm.upper(), algorithm.lower().replace("-", ""))

    def digest(self, algorithm: str, data: bytes) -> bytes:
        """Digest ``data`` with ``algorithm``.

        Raises:
            DependencyError: If the algorithm is not available in this runtime
        """
        name = self.normalize(algorithm)
        try:
            hasher = hashlib.new(name)
        except (ValueError, TypeError) as e:
            raise DependencyError(
                f"{algorithm} is not available in this runtime",
                technical_details=str(e),
            ) from e
        hasher.update(data)
        return hasher.digest()

    def hexdigest(self, algorithm: str, data: bytes) -> str:
        return self.digest(algorithm, data).hex()


class CodecProvider:
    """Lazily imported codec libraries.

    Each loader imports its library on first use and caches the module.
    Missing libraries raise DependencyError with an install hint.
    """

    _INSTALL_HINTS = {
        "PIL": "pip install Pillow",
        "cairosvg": "pip install cairosvg (requires the Cairo system library)",
        "pypdf": "pip install pypdf",
        "yaml": "pip install PyYAML",
        "markdown_it": "pip install markdown-it-py",
        "reportlab": "pip install reportlab",
        "segno": "pip install segno",
        "cv2": "pip install opencv-python-headless",
        "numpy": "pip install numpy",
    }

    _LABELS = {
        "PIL": "Image support",
        "cairosvg": "SVG rasterization",
        "pypdf": "PDF support",
        "yaml": "YAML support",
        "markdown_it": "Markdown rendering",
        "reportlab": "PDF rendering",
        "segno": "QR code generation",
        "cv2": "QR code reading",
        "numpy": "QR code reading",
    }

    def __init__(self):
        self._modules: Dict[str, Any] = {}

    def _load(self, module_name: str, attribute: Optional[str] = None) -> Any:
        key = f"{module_name}.{attribute}" if attribute else module_name
        if key in self._modules:
            return self._modules[key]

        import importlib

        try:
            module = importlib.import_module(f"{module_name}.{attribute}" if attribute else module_name)
        except (ImportError, OSError) as e:
            label = self._LABELS.get(module_name, module_name)
            raise DependencyError(
                f"{label} is not available ({module_name} could not be loaded)",
                technical_details=str(e),
                suggestion=f"Install with: {self._INSTALL_HINTS.get(module_name, module_name)}",
            ) from e

        logger.debug(f"Loaded codec module {key}")
        self._modules[key] = module
        return module

    def load_image_engine(self):
        """Return the ``PIL.Image`` module."""
        return self._load("PIL", "Image")

    def load_image_ops(self):
        """Return the ``PIL.ImageOps`` module."""
        return self._load("PIL", "ImageOps")

    def load_svg_rasterizer(self):
        return self._load("cairosvg")

    def load_pdf_engine(self):
        return self._load("pypdf")

    def load_yaml(self):
        return self._load("yaml")

    def load_markdown(self):
        return self._load("markdown_it")

    def load_pdf_canvas(self):
        """Return the ``reportlab.pdfgen.canvas`` module."""
        return self._load("reportlab", "pdfgen.canvas")

    def load_pdf_metrics(self):
        return self._load("reportlab", "pdfbase.pdfmetrics")

    def load_qr_encoder(self):
        return self._load("segno")

    def load_qr_detector(self):
        """Return OpenCV, whose ``QRCodeDetector`` reads QR codes."""
        return self._load("cv2")

    def load_array_module(self):
        return self._load("numpy")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ConverterContext:
    """Everything a converter group needs besides its input."""

    config: ToolkitConfig = field(default_factory=lambda: default_config)
    random: RandomSource = field(default_factory=SystemRandomSource)
    digests: DigestProvider = field(default_factory=DigestProvider)
    codecs: CodecProvider = field(default_factory=CodecProvider)
    artifacts: Optional[ArtifactStore] = None
    clock: Callable[[], datetime] = utc_now

    def __post_init__(self):
        if self.artifacts is None:
            self.artifacts = ArtifactStore(
                mode=self.config.artifact_mode,
                output_dir=self.config.artifact_dir,
            )

    @classmethod
    def default(cls) -> "ConverterContext":
        """Production wiring from the global configuration."""
        return cls()
