"""Apply git-style unified diffs to a source tree, tolerating line drift."""

from patchkit.apply.orchestrator import apply_patch, apply_series
from patchkit.errors import (
    ApplyMismatchError,
    ChunkFormatError,
    ChunkOverrunError,
    MalformedPatchError,
    PatchArgumentError,
    PatchError,
    TruncatedChunkError,
)
from patchkit.util.files import read_lines

__all__ = [
    "ApplyMismatchError",
    "ChunkFormatError",
    "ChunkOverrunError",
    "MalformedPatchError",
    "PatchArgumentError",
    "PatchError",
    "TruncatedChunkError",
    "apply_patch",
    "apply_series",
    "read_lines",
]
