"""Artifact storage for downloadable converter output.

This module provides the ArtifactStore class which turns bytes produced by a
converter into an ArtifactResult. Artifacts are either inlined as data URLs
or written to disk with collision handling and exposed as file URIs, in
which case the store tracks them so they can be released later.
"""

import base64
import logging
import shutil
import tempfile
from pathlib import Path
from typing import Optional

from .units import ArtifactResult

logger = logging.getLogger(__name__)


class FileOperationError(RuntimeError):
    """Raised when an artifact cannot be written or released."""

    pass


class ArtifactStore:
    """Creates and releases converter artifacts."""

    def __init__(self, mode: str = "data", output_dir: Optional[str | Path] = None):
        """Initialize ArtifactStore.

        Args:
            mode: 'data' to inline artifacts as data URLs, 'file' to write them to disk.
            output_dir: Directory for file artifacts. If None, a private temp dir is used.
        """
        if mode not in ("data", "file"):
            raise ValueError(f"Unknown artifact mode: {mode}")
        self.mode = mode
        self.output_dir = Path(output_dir) if output_dir else None
        self._temp_dir: Optional[Path] = None
        self._live: dict[str, Path] = {}

    def create(
        self,
        data: bytes,
        filename: str,
        mime_type: str = "application/octet-stream",
        info: Optional[str] = None,
    ) -> ArtifactResult:
        """Wrap produced bytes in an ArtifactResult.

        Args:
            data: Artifact content.
            filename: Suggested download name.
            mime_type: MIME type of the content.
            info: Optional human-readable annotation.

        Returns:
            ArtifactResult pointing at the content.
        """
        if self.mode == "data":
            encoded = base64.b64encode(data).decode("ascii")
            return ArtifactResult(
                url=f"data:{mime_type};base64,{encoded}",
                filename=filename,
                size=len(data),
                info=info,
                mime_type=mime_type,
            )

        output_path = self.resolve_output_path(filename)
        try:
            output_path.write_bytes(data)
        except OSError as e:
            raise FileOperationError(f"Failed to write artifact {output_path}: {e}") from e

        url = output_path.resolve().as_uri()
        self._live[url] = output_path
        logger.debug(f"Wrote artifact {output_path} ({len(data)} bytes)")
        return ArtifactResult(
            url=url,
            filename=filename,
            size=len(data),
            info=info,
            mime_type=mime_type,
            path=output_path,
        )

    def resolve_output_path(self, filename: str) -> Path:
        """Resolve a free path for ``filename`` in the artifact directory.

        Raises:
            FileOperationError: If too many collisions occur.
        """
        out_dir = self._artifact_dir()
        name = Path(filename).name or "output"
        stem, suffix = Path(name).stem, Path(name).suffix

        output_path = out_dir / name
        if output_path.exists():
            counter = 1
            while True:
                output_path = out_dir / f"{stem}_{counter}{suffix}"
                if not output_path.exists():
                    logger.debug(f"Collision detected, using renamed path: {output_path}")
                    break
                counter += 1
                if counter > 1000:
                    raise FileOperationError(
                        f"Too many file collisions for {name}. Cannot find available output path."
                    )

        return output_path

    def release(self, result: ArtifactResult) -> bool:
        """Delete a file-backed artifact. Returns True if something was removed."""
        path = self._live.pop(result.url, None) or result.path
        if path is None:
            return False
        try:
            if path.exists():
                path.unlink()
                logger.debug(f"Released artifact {path}")
                return True
        except OSError as e:
            raise FileOperationError(f"Failed to release artifact {path}: {e}") from e
        return False

    def release_all(self) -> int:
        """Release every artifact still tracked by this store."""
        released = 0
        for url in list(self._live):
            path = self._live.pop(url)
            try:
                if path.exists():
                    path.unlink()
                    released += 1
            except OSError as e:
                logger.warning(f"Failed to release artifact {path}: {e}")

        if self._temp_dir is not None and self._temp_dir.exists():
            shutil.rmtree(self._temp_dir, ignore_errors=True)
            self._temp_dir = None

        return released

    @property
    def live_count(self) -> int:
        return len(self._live)

    def _artifact_dir(self) -> Path:
        if self.output_dir is not None:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            return self.output_dir
        if self._temp_dir is None:
            self._temp_dir = Path(tempfile.mkdtemp(prefix="convert_everything_"))
        return self._temp_dir
