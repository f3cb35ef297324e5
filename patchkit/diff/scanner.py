"""Split a git-style patch into per-file diffs.

A patch produced by `git format-patch` looks like:

```
From d205551e Mon Sep 17 00:00:00 2001
From: Someone <someone@example.com>
Subject: [PATCH] fix

---
 foo.cc | 1 +
 1 file changed, 1 insertion(+)

diff --git a/foo.cc b/foo.cc
index f3008f9..ec4aaa0 100644
--- a/foo.cc
+++ b/foo.cc
@@ -2,4 +2,5 @@
 ...
--
2.21.0
```

Everything before the first `diff --git` line is mail header and is skipped;
a `-- ` line followed by a version string ends the patch.
"""

import logging
import re
from pathlib import Path

from patchkit.diff.hunks import NO_NEWLINE_MARKER, classify_body_line, parse_hunk
from patchkit.errors import ChunkOverrunError, MalformedPatchError
from patchkit.models import DEV_NULL, FileAction, FileDiff
from patchkit.util.files import read_lines

logger = logging.getLogger(__name__)

DIFF_GIT_PREFIX = "diff --git "
SIGNATURE_LINE = "-- "
VERSION_RE = re.compile(r"\d+(\.\d+)+")

_UNSUPPORTED_PREFIXES = (
    ("GIT binary patch", "binary diffs are not supported"),
    ("Binary files ", "binary diffs are not supported"),
    ("rename from ", "renames are not supported"),
    ("rename to ", "renames are not supported"),
    ("copy from ", "copies are not supported"),
    ("copy to ", "copies are not supported"),
)


def _is_signature(lines: list[str], i: int) -> bool:
    if lines[i] != SIGNATURE_LINE:
        return False
    return i + 1 >= len(lines) or VERSION_RE.match(lines[i + 1]) is not None


def _header_path(line: str) -> str:
    """Path from a `--- ` / `+++ ` line, without a trailing timestamp."""
    path = line[4:].split("\t", 1)[0].strip()
    if len(path) >= 2 and path[0] == path[-1] == '"':
        path = path[1:-1]
    return path


def _split_git_paths(line: str, line_number: int) -> tuple[str, str]:
    rest = line[len(DIFF_GIT_PREFIX):].strip()
    parts = rest.split(" ")
    if len(parts) == 2:
        return parts[0], parts[1]

    # Paths with spaces: both sides name the same file, so split in the middle.
    middle = len(parts) // 2
    old_path, new_path = " ".join(parts[:middle]), " ".join(parts[middle:])
    if len(parts) % 2 == 0 and old_path[2:] == new_path[2:]:
        return old_path, new_path
    raise MalformedPatchError(f"Cannot read paths from {line!r}", line_number)


class _Scanner:
    def __init__(self, lines: list[str]):
        self.lines = lines
        self.file_diffs: list[FileDiff] = []
        self.current: FileDiff | None = None
        self.git_paths: tuple[str, str] | None = None

    def scan(self) -> list[FileDiff]:
        i = self._skip_mail_header()
        while i < len(self.lines):
            line = self.lines[i]
            line_number = i + 1

            if line.startswith(DIFF_GIT_PREFIX):
                self._close()
                self._open(line, line_number)
                i += 1
            elif line.startswith("@@"):
                self._require_headers(line_number)
                hunk, i = parse_hunk(self.lines, i)
                self.current.hunks.append(hunk)
            elif _is_signature(self.lines, i):
                logger.debug("Patch signature at line %d, stopping", line_number)
                break
            elif not self.current.hunks:
                self._read_header_line(line, line_number)
                i += 1
            else:
                self._read_trailing_line(line, line_number)
                i += 1

        self._close()
        if not self.file_diffs:
            raise MalformedPatchError("No file diff found in patch")
        return self.file_diffs

    def _skip_mail_header(self) -> int:
        for i, line in enumerate(self.lines):
            if line.startswith(DIFF_GIT_PREFIX):
                if i:
                    logger.debug("Skipped %d leading header lines", i)
                return i
        return len(self.lines)

    def _open(self, line: str, line_number: int) -> None:
        self.git_paths = _split_git_paths(line, line_number)
        self.current = FileDiff(line_number=line_number)

    def _require_headers(self, line_number: int) -> None:
        if self.current.old_path is None or self.current.new_path is None:
            raise MalformedPatchError(
                "Hunk header found before '---' and '+++' lines", line_number
            )

    def _read_header_line(self, line: str, line_number: int) -> None:
        current = self.current
        for prefix, reason in _UNSUPPORTED_PREFIXES:
            if line.startswith(prefix):
                raise MalformedPatchError(reason.capitalize(), line_number)

        if line.startswith("new file mode"):
            current.mode_action = FileAction.ADD
        elif line.startswith("deleted file mode"):
            current.mode_action = FileAction.DELETE
        elif line.startswith("--- "):
            if current.old_path is not None:
                raise MalformedPatchError("Duplicate '---' line", line_number)
            current.old_path = _header_path(line)
        elif line.startswith("+++ "):
            if current.old_path is None:
                raise MalformedPatchError("'+++' line without preceding '---'", line_number)
            if current.new_path is not None:
                raise MalformedPatchError("Duplicate '+++' line", line_number)
            current.new_path = _header_path(line)
        # index, old mode and new mode lines carry nothing we apply

    def _read_trailing_line(self, line: str, line_number: int) -> None:
        if line == "" or line.startswith(NO_NEWLINE_MARKER):
            return
        if classify_body_line(line) is not None:
            raise ChunkOverrunError(line_number, line)
        logger.debug("Ignoring patch line %d: %r", line_number, line)

    def _close(self) -> None:
        current = self.current
        if current is None:
            return
        self.current = None

        if not current.hunks:
            if current.old_path is not None or current.new_path is not None:
                raise MalformedPatchError("File diff has no hunks", current.line_number)
            old_path, new_path = self.git_paths
            if current.mode_action == FileAction.ADD:
                current.old_path, current.new_path = DEV_NULL, new_path
            elif current.mode_action == FileAction.DELETE:
                current.old_path, current.new_path = old_path, DEV_NULL
            else:
                logger.debug("Skipping mode-only diff for %s", new_path)
                return

        if current.mode_action is not None and current.mode_action != current.action:
            raise MalformedPatchError(
                f"File mode line declares {current.mode_action} but paths are "
                f"{current.old_path} -> {current.new_path}",
                current.line_number,
            )

        logger.debug(
            "Parsed %s diff for %s with %d hunks",
            current.action,
            current.target_path,
            len(current.hunks),
        )
        self.file_diffs.append(current)


def _strip_carriage_returns(lines: list[str]) -> list[str]:
    """Drop one trailing "\\r" per line when the whole patch was saved with CRLF.

    Only `diff --git` lines decide: git writes headers with LF, so a CR there
    means the file was converted. Content CRs of a diff against a CRLF file
    are kept.
    """
    headers = [line for line in lines if line.startswith(DIFF_GIT_PREFIX)]
    if not headers or not all(line.endswith("\r") for line in headers):
        return lines
    logger.debug("Patch has CRLF line endings, stripping carriage returns")
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def parse_patch(lines: list[str]) -> list[FileDiff]:
    """
    Split patch lines into file diffs, in patch order.

    Raises:
        MalformedPatchError: missing or misordered headers, or no file diff
        ChunkFormatError: a hunk body disagrees with its header counts
    """

    file_diffs = _Scanner(_strip_carriage_returns(lines)).scan()
    logger.debug("Parsed %d file diffs from patch", len(file_diffs))
    return file_diffs


def parse_patch_text(text: str) -> list[FileDiff]:
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return parse_patch(lines)


def parse_patch_file(patch_file: Path) -> list[FileDiff]:
    return parse_patch(read_lines(patch_file))
