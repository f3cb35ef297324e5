import logging
from pathlib import Path

from patchkit.apply.fuzzy import added_content, apply_hunks
from patchkit.errors import ApplyMismatchError
from patchkit.models import FileAction, FileChange, FileDiff
from patchkit.util import files
from patchkit.util.paths import resolve_safe_path, strip_path

logger = logging.getLogger(__name__)


class TreeWriter:
    """
    Filesystem access for one apply call.

    With `dry_run` set, writes and removals are staged in memory: later reads
    see them, the tree on disk does not change.
    """

    def __init__(self, root: Path, dry_run: bool = False):
        self.root = Path(root)
        self.dry_run = dry_run
        self._staged: dict[Path, list[str] | None] = {}

    def resolve(self, relative_path: str) -> Path:
        return resolve_safe_path(self.root, relative_path)

    def exists(self, path: Path) -> bool:
        if path in self._staged:
            return self._staged[path] is not None
        return path.exists()

    def read_lines(self, path: Path) -> list[str]:
        if path in self._staged:
            staged = self._staged[path]
            if staged is None:
                raise FileNotFoundError(f"No such file: {path}")
            return list(staged)
        return files.read_lines(path)

    def write_lines(self, path: Path, lines: list[str]) -> None:
        if self.dry_run:
            self._staged[path] = list(lines)
            return
        path.parent.mkdir(parents=True, exist_ok=True)
        files.write_lines(path, lines)

    def remove(self, path: Path) -> None:
        if self.dry_run:
            if not self.exists(path):
                raise FileNotFoundError(f"No such file: {path}")
            self._staged[path] = None
            return
        path.unlink()


def target_relative_path(file_diff: FileDiff, strip: int) -> str:
    return strip_path(file_diff.target_path, strip)


def execute_file_diff(
    writer: TreeWriter,
    file_diff: FileDiff,
    strip: int,
    max_offset: int | None = None,
) -> FileChange:
    """Run the add, delete or modify action of one file diff."""
    relative = target_relative_path(file_diff, strip)
    path = writer.resolve(relative)
    action = file_diff.action
    offsets: list[int] = []

    if action == FileAction.ADD:
        content = added_content(file_diff.hunks, relative)
        if writer.exists(path):
            raise FileExistsError(f"Cannot create {relative}: file already exists")
        writer.write_lines(path, content)

    elif action == FileAction.DELETE:
        lines = writer.read_lines(path)
        remaining, offsets = apply_hunks(
            lines, file_diff.hunks, path=relative, max_offset=max_offset
        )
        if remaining:
            raise ApplyMismatchError(
                relative,
                file_diff.line_number,
                reason=f"{len(remaining)} lines would remain after deletion",
            )
        writer.remove(path)

    else:
        lines = writer.read_lines(path)
        updated, offsets = apply_hunks(
            lines, file_diff.hunks, path=relative, max_offset=max_offset
        )
        writer.write_lines(path, updated)

    logger.info("%s %s (%d hunks)", action.capitalize(), relative, len(file_diff.hunks))
    return FileChange(
        path=relative,
        action=action,
        hunks=len(file_diff.hunks),
        offsets=offsets,
    )
