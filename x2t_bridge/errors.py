"""Error taxonomy for the conversion layer.

WHY: Callers must be able to tell an unsupported upload from a broken
engine, a failed conversion from a staging problem, and any of those from a
user who simply cancelled a save. One exception class per failure kind
makes that a plain ``except`` clause instead of message parsing.

HOW: Every failure derives from X2TError. Classes that have a natural
built-in counterpart also inherit it (ValueError, TimeoutError) so generic
handlers keep working. SaveCancelled sits outside the
hierarchy.

RULES:
- str(error) is always a human-readable sentence
- MediaReadError is never raised by the orchestration layer, only collected
- SaveCancelled is not a failure and is not an X2TError
"""

from __future__ import annotations


class X2TError(Exception):
    """Base class for every conversion-layer failure."""


class UnsupportedFormatError(X2TError, ValueError):
    """Raised when a file extension has no document category.

    RULES:
    - Raised before any engine interaction or staging write
    - extension is the value as given by the caller
    """

    def __init__(self, extension: str) -> None:
        self.extension = extension
        super().__init__("Unsupported file format: {}".format(extension))


class EngineLoadError(X2TError):
    """Raised when the engine module cannot be acquired or started."""

    def __init__(self, cause: BaseException | str) -> None:
        self.cause = cause
        super().__init__("Failed to load conversion engine: {}".format(cause))


class EngineInitTimeoutError(X2TError, TimeoutError):
    """Raised when the engine does not signal readiness in time.

    RULES:
    - The lifecycle moves to 'failed'; the next initialize() starts afresh
    """

    def __init__(self, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(
            "Conversion engine initialization timed out after {:g}s".format(timeout)
        )


class EngineNotReadyError(X2TError):
    """Raised when the engine handle is requested before initialization."""

    def __init__(self, message: str = "Conversion engine is not initialized") -> None:
        super().__init__(message)


class ConversionError(X2TError):
    """Raised when the engine entrypoint returns a non-zero status code."""

    def __init__(self, status_code: int) -> None:
        self.status_code = status_code
        super().__init__("Conversion failed with code: {}".format(status_code))


class StagingIOError(X2TError):
    """Raised when a read or write against the staging filesystem fails."""

    def __init__(self, path: str, cause: BaseException) -> None:
        self.path = path
        self.cause = cause
        super().__init__("Staging I/O failed for {}: {}".format(path, cause))


class MediaReadError(X2TError):
    """Describes one media file that could not be read after a conversion.

    Collected by MediaExtractor and logged; an otherwise successful
    conversion is never aborted because of it.
    """

    def __init__(self, path: str, cause: BaseException) -> None:
        self.path = path
        self.cause = cause
        super().__init__("Failed to read media file {}: {}".format(path, cause))


class SaveCancelled(Exception):
    """The user aborted the save step. Not an error."""

    def __init__(self, file_name: str = "") -> None:
        self.file_name = file_name
        super().__init__("Save cancelled by user: {}".format(file_name) if file_name else "Save cancelled by user")
