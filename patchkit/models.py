from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path

from pydantic import BaseModel, Field, field_serializer

DEV_NULL = "/dev/null"


class LineKind(StrEnum):
    CONTEXT = "context"
    ADD = "add"
    DELETE = "delete"


class FileAction(StrEnum):
    ADD = "add"
    DELETE = "delete"
    MODIFY = "modify"


@dataclass
class HunkLine:
    kind: LineKind
    text: str


@dataclass
class Hunk:
    old_start: int
    old_lines: int
    new_start: int
    new_lines: int
    lines: list[HunkLine] = field(default_factory=list)
    line_number: int | None = None

    @property
    def old_side(self) -> list[str]:
        return [line.text for line in self.lines if line.kind != LineKind.ADD]

    @property
    def new_side(self) -> list[str]:
        return [line.text for line in self.lines if line.kind != LineKind.DELETE]

    @property
    def added(self) -> list[str]:
        return [line.text for line in self.lines if line.kind == LineKind.ADD]

    @property
    def base_index(self) -> int:
        """0-based index the old side is expected at.

        An empty old side names the line after which text is inserted,
        so its start is already the insertion index.
        """
        if self.old_lines == 0:
            return self.old_start
        return self.old_start - 1

    @property
    def header(self) -> str:
        return f"@@ -{self.old_start},{self.old_lines} +{self.new_start},{self.new_lines} @@"


@dataclass
class FileDiff:
    old_path: str | None = None
    new_path: str | None = None
    hunks: list[Hunk] = field(default_factory=list)
    line_number: int | None = None
    mode_action: FileAction | None = None

    @property
    def action(self) -> FileAction:
        if self.old_path == DEV_NULL:
            return FileAction.ADD
        if self.new_path == DEV_NULL:
            return FileAction.DELETE
        return FileAction.MODIFY

    @property
    def target_path(self) -> str:
        if self.action == FileAction.ADD:
            return self.new_path
        return self.old_path


PatchFile = list[FileDiff]


# ---


class FileChange(BaseModel):
    """
    One applied file diff.

    `offsets` holds one entry per hunk: how far it matched from its header
    position after accounting for lines earlier hunks added or removed, so a
    clean patch reports all zeros. After a hunk that changed the line count
    this differs from `matched index - (old_start - 1)` by that change.
    """

    path: str
    action: FileAction
    hunks: int
    offsets: list[int] = Field(default_factory=list)


class ApplyReport(BaseModel):
    patch_file: Path
    root: Path
    strip: int
    dry_run: bool = False
    changes: list[FileChange] = Field(default_factory=list)

    @property
    def changed_files(self) -> list[str]:
        return [change.path for change in self.changes]

    @field_serializer("patch_file", "root")
    def serialize_paths(self, v: Path) -> str:
        return str(v)
