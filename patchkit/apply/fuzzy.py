"""Apply hunks to an in-memory list of lines, tolerating positional drift.

A hunk's header says where its old side used to be. Earlier hunks in the
same file, or local edits, move that text; the search starts at the header
position shifted by the running offset and widens outward one line at a
time (0, -1, +1, -2, +2, ...) until the old side matches exactly. The offset
found is returned so the next hunk of the same file starts from it. Lines
added or removed by earlier hunks are tracked separately as a shift, so the
offset only measures drift the patch itself does not explain.
"""

import logging

from patchkit.errors import ApplyMismatchError, MalformedPatchError
from patchkit.models import Hunk

logger = logging.getLogger(__name__)


def find_hunk(
    lines: list[str],
    expected: list[str],
    candidate: int,
    max_offset: int | None = None,
) -> int | None:
    """
    Return the index closest to `candidate` where `expected` occurs in `lines`.

    Negative distances are tried before positive ones, so the earlier of two
    equally distant matches wins. Only windows that fit inside `lines` are
    compared. `max_offset` caps the distance from `candidate`; None searches
    the whole file.
    """

    size = len(expected)
    last = len(lines) - size
    if last < 0:
        return None

    reach = max(abs(candidate), abs(last - candidate))
    if max_offset is not None:
        reach = min(reach, max_offset)

    for distance in range(reach + 1):
        positions = (candidate,) if distance == 0 else (candidate - distance, candidate + distance)
        for position in positions:
            if 0 <= position <= last and lines[position:position + size] == expected:
                return position
    return None


def apply_hunk(
    lines: list[str],
    hunk: Hunk,
    offset: int = 0,
    *,
    shift: int = 0,
    path: str | None = None,
    max_offset: int | None = None,
) -> tuple[list[str], int]:
    """
    Apply one hunk and return the new lines and the updated running offset.

    `shift` is the net number of lines earlier hunks of the same file added
    (or removed, when negative); header positions refer to the unpatched
    file, so a clean patch applies with offset 0 throughout. `lines` is left
    untouched.

    Raises:
        ApplyMismatchError: the old side occurs nowhere within reach
    """

    if max_offset is not None and max_offset < 0:
        raise ValueError(f"max_offset must be >= 0, got {max_offset}")

    expected = hunk.old_side
    base = hunk.base_index + shift
    position = find_hunk(lines, expected, base + offset, max_offset)
    if position is None:
        logger.debug(
            "Hunk %s from patch line %s not found in %s (%d lines, offset %d)",
            hunk.header,
            hunk.line_number,
            path,
            len(lines),
            offset,
        )
        raise ApplyMismatchError(path, hunk.line_number)

    new_offset = position - base
    if new_offset != offset:
        logger.debug("Hunk %s of %s matched at offset %d", hunk.header, path, new_offset)

    updated = lines[:position] + hunk.new_side + lines[position + len(expected):]
    return updated, new_offset


def apply_hunks(
    lines: list[str],
    hunks: list[Hunk],
    *,
    path: str | None = None,
    max_offset: int | None = None,
) -> tuple[list[str], list[int]]:
    """Apply hunks in order, threading the running offset between them."""
    offset = 0
    shift = 0
    offsets: list[int] = []
    for hunk in hunks:
        lines, offset = apply_hunk(
            lines, hunk, offset, shift=shift, path=path, max_offset=max_offset
        )
        shift += len(hunk.new_side) - len(hunk.old_side)
        offsets.append(offset)

    if any(offsets):
        logger.warning("Applied %s with offsets %s", path or "hunks", offsets)
    return lines, offsets


def added_content(hunks: list[Hunk], path: str | None = None) -> list[str]:
    """Content of a new file: the Add lines of its hunks."""
    content: list[str] = []
    for hunk in hunks:
        if hunk.old_lines != 0:
            raise MalformedPatchError(
                f"Hunk {hunk.header} creating {path} has a non-empty old side",
                hunk.line_number,
            )
        content.extend(hunk.added)
    return content
