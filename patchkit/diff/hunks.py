import logging
import re

from patchkit.errors import ChunkOverrunError, MalformedPatchError, TruncatedChunkError
from patchkit.models import Hunk, HunkLine, LineKind

logger = logging.getLogger(__name__)

HUNK_HEADER_RE = re.compile(r"@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")

NO_NEWLINE_MARKER = "\\"

_BODY_KINDS = {
    " ": LineKind.CONTEXT,
    "-": LineKind.DELETE,
    "+": LineKind.ADD,
}


def classify_body_line(line: str) -> HunkLine | None:
    """Return the hunk line for a body-style patch line, None otherwise."""
    if line == "":
        return HunkLine(LineKind.CONTEXT, "")
    kind = _BODY_KINDS.get(line[0])
    if kind is None:
        return None
    return HunkLine(kind, line[1:])


def parse_hunk_header(line: str, line_number: int | None = None) -> Hunk:
    """
    Parse `@@ -oldStart[,oldLines] +newStart[,newLines] @@`.

    Omitted counts default to 1; text after the closing `@@` is ignored.
    """

    match = HUNK_HEADER_RE.match(line)
    if not match:
        raise MalformedPatchError(f"Invalid hunk header: {line!r}", line_number)

    old_start, old_lines, new_start, new_lines = match.groups()
    return Hunk(
        old_start=int(old_start),
        old_lines=int(old_lines) if old_lines is not None else 1,
        new_start=int(new_start),
        new_lines=int(new_lines) if new_lines is not None else 1,
        line_number=line_number,
    )


def parse_hunk(lines: list[str], index: int) -> tuple[Hunk, int]:
    """
    Parse the hunk whose header is `lines[index]`.

    Body lines are consumed until both declared counts are met. Returns the
    hunk and the index of the first line after its body. Patch line numbers
    in errors are 1-based.
    """

    hunk = parse_hunk_header(lines[index], index + 1)
    old_count = 0
    new_count = 0
    i = index + 1

    while old_count < hunk.old_lines or new_count < hunk.new_lines:
        if i >= len(lines):
            raise TruncatedChunkError(i + 1)

        line = lines[i]
        if line.startswith(NO_NEWLINE_MARKER):
            i += 1
            continue

        body_line = classify_body_line(line)
        if body_line is None:
            raise TruncatedChunkError(i + 1)

        counts_old = body_line.kind != LineKind.ADD
        counts_new = body_line.kind != LineKind.DELETE
        if (counts_old and old_count >= hunk.old_lines) or (
            counts_new and new_count >= hunk.new_lines
        ):
            raise ChunkOverrunError(i + 1, line)

        old_count += counts_old
        new_count += counts_new
        hunk.lines.append(body_line)
        i += 1

    logger.debug(
        "Parsed hunk %s at patch line %d (%d body lines)",
        hunk.header,
        index + 1,
        len(hunk.lines),
    )
    return hunk, i
