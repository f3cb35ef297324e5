from enum import StrEnum
from pathlib import Path


class PatchErrorType(StrEnum):
    MALFORMED_PATCH = "malformed_patch"
    CHUNK_FORMAT = "chunk_format"
    APPLY_MISMATCH = "apply_mismatch"


class PatchError(Exception):
    def __init__(
        self,
        error_type: PatchErrorType,
        message: str,
        line_number: int | None = None,
        details: dict | None = None
    ):
        super().__init__(message)
        self.error_type = error_type
        self.line_number = line_number
        self.details = details or {}


class MalformedPatchError(PatchError):
    """Structural problem in the patch: missing or misordered headers."""
    def __init__(
        self,
        message: str,
        line_number: int | None = None,
    ):
        if line_number is not None:
            message = f"{message} (patch line {line_number})"
        super().__init__(
            PatchErrorType.MALFORMED_PATCH,
            message,
            line_number = line_number,
        )


class ChunkFormatError(PatchError):
    """A hunk body disagrees with the counts declared in its header."""
    def __init__(
        self,
        message: str,
        line_number: int,
        detail: str | None = None
    ):
        super().__init__(
            PatchErrorType.CHUNK_FORMAT,
            message,
            line_number = line_number,
            details = {
                "detail": detail
            }
        )
        self.detail = detail


class TruncatedChunkError(ChunkFormatError):
    def __init__(
        self,
        line_number: int
    ):
        super().__init__(
            f"Expecting more chunk line at line {line_number}",
            line_number,
        )


class ChunkOverrunError(ChunkFormatError):
    def __init__(
        self,
        line_number: int,
        line: str
    ):
        super().__init__(
            f"Wrong chunk detected near line {line_number}: {line}",
            line_number,
            detail = line,
        )


INCORRECT_CHUNK_MESSAGE = "Incorrect Chunk: the chunk content doesn't match the target"


class ApplyMismatchError(PatchError):
    """No position in the target reproduces the hunk's old-side text."""
    def __init__(
        self,
        path: str | None = None,
        line_number: int | None = None,
        reason: str | None = None
    ):
        message = INCORRECT_CHUNK_MESSAGE
        where = []
        if path:
            where.append(f"file {path}")
        if line_number is not None:
            where.append(f"hunk at patch line {line_number}")
        if where:
            message = f"{message} ({', '.join(where)})"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(
            PatchErrorType.APPLY_MISMATCH,
            message,
            line_number = line_number,
            details = {
                "path": path
            }
        )
        self.path = path


class PatchArgumentError(OSError, ValueError):
    """Invalid argument handed to apply_patch (e.g. a negative strip count)."""


class InvalidSeriesError(Exception):
    def __init__(self, series_path: Path, original_error: Exception):
        super().__init__(f"Invalid patch series {series_path}: {original_error}")
        self.series_path = series_path
        self.original_error = original_error
