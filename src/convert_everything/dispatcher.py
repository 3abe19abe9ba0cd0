"""
Converter invocation.

Decides how to call a unit given the caller's inputs, awaits the call when
needed, and normalizes whatever the unit returns into a Result. Nothing the
unit raises crosses this boundary: failures come back as diagnostic text.
"""

import inspect
import time
from typing import Optional, Sequence, Union

from .logging_config import (
    DIAGNOSTIC_MAX_LENGTH,
    ConverterError,
    get_logger,
    log_conversion_complete,
    log_conversion_error,
)
from .units import (
    ArtifactResult,
    ConverterUnit,
    FileConverter,
    FileInput,
    RawResult,
    Result,
    TextConverter,
    TextResult,
    diagnostic,
)

logger = get_logger("dispatcher")

NO_FILE_DIAGNOSTIC = diagnostic("select a file to convert")

FilesArg = Union[None, FileInput, Sequence[FileInput]]


def _as_file_list(files: FilesArg) -> list[FileInput]:
    if files is None:
        return []
    if isinstance(files, FileInput):
        return [files]
    return [f for f in files if f is not None]


def normalize_result(raw: RawResult) -> Result:
    """Coerce a unit's raw return value into a Result.

    Raises:
        TypeError: If the value has no Result interpretation
    """
    match raw:
        case TextResult() | ArtifactResult():
            return raw
        case None:
            return TextResult("")
        case str():
            return TextResult(raw)
        case {"url": str(url), "filename": str(filename), **rest}:
            return ArtifactResult(
                url=url,
                filename=filename,
                size=int(rest.get("size", 0)),
                info=rest.get("info"),
                mime_type=rest.get("mime_type", "application/octet-stream"),
            )
        case {"text": str(text)}:
            return TextResult(text)
        case _:
            raise TypeError(f"Unsupported converter result type: {type(raw).__name__}")


def as_plain(result: Result) -> Union[str, ArtifactResult]:
    """Collapse a TextResult to its string for callers that accept either form."""
    if isinstance(result, TextResult):
        return result.text
    return result


def error_diagnostic(error: BaseException) -> str:
    """Render a caught exception as a short diagnostic, never a traceback."""
    if isinstance(error, ConverterError):
        return error.diagnostic()

    message = str(error).strip()
    if not message:
        return "(conversion error)"
    first_line = message.splitlines()[0][:DIAGNOSTIC_MAX_LENGTH]
    return f"(error: {first_line})"


class Dispatcher:
    """Invokes converter units according to their declared capabilities."""

    async def dispatch(
        self,
        unit: ConverterUnit,
        text_input: str = "",
        files: FilesArg = None,
        auxiliary_text: Optional[str] = None,
    ) -> Result:
        """
        Invoke ``unit`` with whichever inputs it declares it accepts.

        Args:
            unit: The converter to run
            text_input: Text typed by the caller (may be empty)
            files: Zero or more files
            auxiliary_text: Short extra parameter for file converters

        Returns:
            The normalized Result; failures are returned as diagnostic text
        """
        started = time.perf_counter()
        try:
            raw = self._invoke(unit, text_input or "", _as_file_list(files), auxiliary_text)
            if inspect.isawaitable(raw):
                raw = await raw
            result = normalize_result(raw)
        except Exception as e:
            log_conversion_error(logger, e, unit.id)
            log_conversion_complete(logger, unit.id, False, time.perf_counter() - started)
            return TextResult(error_diagnostic(e))

        log_conversion_complete(logger, unit.id, True, time.perf_counter() - started)
        return result

    def _invoke(
        self,
        unit: ConverterUnit,
        text_input: str,
        files: list[FileInput],
        auxiliary_text: Optional[str],
    ) -> RawResult:
        if unit.is_generator:
            text_input = ""

        if isinstance(unit, FileConverter):
            if files:
                payload = files if unit.multiple_files else files[0]
                return unit.file_convert(payload, auxiliary_text)
            if unit.convert is not None:
                return unit.convert(text_input)
            return NO_FILE_DIAGNOSTIC

        if isinstance(unit, TextConverter):
            return unit.convert(text_input)

        raise TypeError(f"Converter {unit.id} declares no conversion function")


dispatcher = Dispatcher()


async def dispatch_by_id(
    unit_id: str,
    text_input: str = "",
    files: FilesArg = None,
    auxiliary_text: Optional[str] = None,
    registry=None,
) -> Result:
    """Resolve ``unit_id`` in the registry and dispatch to it.

    A stale id yields a diagnostic result rather than an exception.
    """
    if registry is None:
        from .registry import registry

    unit = registry.find_by_id(unit_id)
    if unit is None:
        logger.warning(f"Dispatch requested for unknown converter '{unit_id}'")
        return TextResult(diagnostic(f"unknown converter: {unit_id}"))

    return await dispatcher.dispatch(unit, text_input, files, auxiliary_text)
