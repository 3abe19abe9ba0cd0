"""MCP Server for Convert Everything.

This module provides a FastMCP-based MCP server that exposes the converter
catalog, the dispatcher and the format-pair converter as tools.
"""

import asyncio
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, Optional

from mcp.server.fastmcp import FastMCP

from . import formats
from .config import config
from .deps import get_dependency_summary, verify_dependencies
from .dispatcher import dispatch_by_id
from .logging_config import DependencyError, FormatNotSupportedError, get_logger, setup_logging
from .registry import registry
from .units import ALL_CATEGORY_ID, ArtifactResult, FileInput, TextResult

setup_logging(config.log_level, str(config.log_file) if config.log_file else None)

logger = get_logger("server")


class GracefulShutdown:
    """Handle graceful shutdown of the MCP server."""

    def __init__(self):
        self._shutdown = False
        self._tasks: set[asyncio.Task] = set()

    def is_shutting_down(self) -> bool:
        """Check if shutdown has been initiated."""
        return self._shutdown

    def initiate_shutdown(self):
        """Initiate graceful shutdown."""
        if not self._shutdown:
            self._shutdown = True
            logger.info("Shutdown signal received, cleaning up...")

    def register_task(self, task: asyncio.Task):
        """Register a task to be tracked during shutdown."""
        self._tasks.add(task)
        task.add_done_callback(lambda t: self._tasks.discard(t))

    async def wait_for_tasks(self, timeout: float = 10.0):
        """Wait for registered tasks to complete with timeout."""
        if not self._tasks:
            return

        logger.info(f"Waiting for {len(self._tasks)} conversions to complete...")
        try:
            await asyncio.wait_for(
                asyncio.gather(*self._tasks, return_exceptions=True), timeout=timeout
            )
            logger.info("All conversions completed")
        except asyncio.TimeoutError:
            logger.warning(f"Timeout waiting for conversions after {timeout}s")


shutdown_handler = GracefulShutdown()


@asynccontextmanager
async def server_lifespan(app: FastMCP):
    """Manage server startup and shutdown.

    This context manager handles:
    - Dependency verification at startup
    - Building the converter catalog
    - Waiting for running conversions and releasing artifacts on shutdown
    """
    try:
        logger.info("Starting Convert Everything MCP Server...")
        try:
            deps = await verify_dependencies()
            missing = [name for name, info in deps.items() if name != "python" and not info["installed"]]
            logger.info(
                f"Dependencies verified: {deps['python']['message']}, "
                f"missing optional: {', '.join(missing) or 'none'}"
            )
        except DependencyError as e:
            logger.error(f"Dependency check failed: {e}")
            raise

        logger.info(f"Converter catalog ready: {len(registry)} converters, {len(formats.FORMATS)} formats")
        yield

    finally:
        logger.info("Shutting down server...")
        shutdown_handler.initiate_shutdown()
        await shutdown_handler.wait_for_tasks()

        released = registry.context.artifacts.release_all()
        if released:
            logger.info(f"Released {released} artifacts")

        logger.info("Server shutdown complete")


mcp = FastMCP(
    name="Convert Everything",
    instructions=(
        "A catalog of small converters: encodings, hashes, structured data, "
        "numbers, colors, utilities, images, audio/video and PDFs. "
        "Use list_converters to find a converter id, then run_converter. "
        "convert_format converts directly between two named formats."
    ),
    lifespan=server_lifespan,
)


def result_to_dict(result: TextResult | ArtifactResult) -> dict[str, Any]:
    """Serialize a Result for a tool response."""
    if isinstance(result, TextResult):
        return {"type": "text", "text": result.text}
    payload = {
        "type": "artifact",
        "url": result.url,
        "filename": result.filename,
        "size": result.size,
        "mime_type": result.mime_type,
        "info": result.info,
    }
    if result.path is not None:
        payload["path"] = str(result.path)
    return payload


@mcp.tool()
async def list_categories() -> list[dict[str, str]]:
    """List converter categories.

    Returns:
        list of {id, name}; 'all' is first and matches every converter
    """
    return [{"id": c.id, "name": c.name} for c in registry.list_categories()]


@mcp.tool()
async def list_converters(category: str = ALL_CATEGORY_ID, query: str = "") -> list[dict[str, Any]]:
    """List converters, optionally filtered by category and fuzzy search.

    Args:
        category: Category id (default: 'all')
        query: Search text matched against name, id and description

    Returns:
        list of converter descriptions, best match first when a query is given
    """
    known = {c.id for c in registry.list_categories()}
    if category not in known:
        raise ValueError(f"Unknown category '{category}'. Must be one of: {', '.join(sorted(known))}")

    units = registry.search(query, category)
    return [
        {"id": u.id, "name": u.name, "category": u.category, "accepts_file": u.accepts_file}
        for u in units
    ]


@mcp.tool()
async def describe_converter(converter_id: str) -> dict[str, Any]:
    """Get the full metadata of a converter.

    Args:
        converter_id: Converter id (e.g., 'base64-encode', 'png-to-jpg')

    Raises:
        UnitNotFoundError: If no converter has that id
    """
    return registry.require(converter_id).describe()


@mcp.tool()
async def run_converter(
    converter_id: str,
    text: str = "",
    file_paths: Optional[list[str]] = None,
    auxiliary_text: Optional[str] = None,
) -> dict[str, Any]:
    """Run a converter.

    Args:
        converter_id: Converter id
        text: Text input for text converters
        file_paths: Paths of input files for file converters
        auxiliary_text: Extra parameter for file converters (e.g., '800x600', '1-5')

    Returns:
        dict with:
            - type: 'text' or 'artifact'
            - text: Output text (text results)
            - url, filename, size, mime_type, info: Artifact details
    """
    logger.info(f"Conversion requested: {converter_id}")

    if shutdown_handler.is_shutting_down():
        return {"type": "text", "text": "(server is shutting down)"}

    if len(text) > config.max_input_chars:
        return {"type": "text", "text": f"(input too long, max {config.max_input_chars} chars)"}

    files = []
    for raw_path in file_paths or []:
        path = Path(raw_path)
        if not path.is_file():
            raise ValueError(f"Input file not found: {raw_path}")
        files.append(FileInput.from_path(path))

    task = asyncio.ensure_future(
        dispatch_by_id(converter_id, text, files or None, auxiliary_text, registry=registry)
    )
    shutdown_handler.register_task(task)
    result = await task
    return result_to_dict(result)


@mcp.tool()
async def list_formats(source_format: Optional[str] = None) -> list[dict[str, Any]]:
    """List formats for format-pair conversion.

    Args:
        source_format: When given, only formats reachable from this one

    Returns:
        list of {id, name, group}
    """
    if source_format is None:
        selected = formats.FORMATS
    else:
        if formats.get_format_by_id(source_format) is None:
            raise ValueError(f"Unknown format: {source_format}")
        selected = [formats.get_format_by_id(t) for t in formats.get_targets(source_format)]
    return [{"id": f.id, "name": f.name, "group": f.group} for f in selected if f is not None]


@mcp.tool()
async def convert_format(
    source_format: str,
    target_format: str,
    text: str,
    batch: bool = False,
) -> dict[str, Any]:
    """Convert text from one format to another.

    Args:
        source_format: Source format id, or 'auto' to detect it
        target_format: Target format id
        text: Input text
        batch: Convert each line separately

    Returns:
        dict with source_format, target_format and output
    """
    if len(text) > config.max_input_chars:
        output = f"(input too long, max {config.max_input_chars} chars)"
        return {"source_format": source_format, "target_format": target_format, "output": output}

    if source_format == "auto":
        detected = formats.detect_format(text)
        if detected is None:
            raise FormatNotSupportedError(
                "could not detect the input format",
                suggestion="Pass source_format explicitly",
            )
        source_format = detected

    output = await formats.convert_pair(source_format, target_format, text, batch=batch)
    return {"source_format": source_format, "target_format": target_format, "output": output}


@mcp.tool()
async def check_dependencies() -> dict[str, str]:
    """Report which optional libraries and binaries are available."""
    return await get_dependency_summary()


def main():
    """Main entry point for the MCP server.

    Note: mcp.run() manages its own event loop via anyio, so we call it
    synchronously without wrapping in asyncio.run().
    """
    try:
        logger.info("Starting server with stdio transport...")
        mcp.run(transport="stdio")
    except KeyboardInterrupt:
        logger.info("Keyboard interrupt received")
        shutdown_handler.initiate_shutdown()
    except Exception as e:
        logger.error(f"Server error: {e}", exc_info=True)
        raise
    finally:
        logger.info("Server stopped")


if __name__ == "__main__":
    main()
